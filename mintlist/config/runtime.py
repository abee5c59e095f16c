"""
Runtime Configuration

Central configuration for the eligibility client: where the published
artifact lives, HTTP and cache settings, and the mint phases whose roots
are committed on-chain.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


ZERO_ROOT = "0x" + "0" * 64


@dataclass
class HttpConfig:
    """Configuration for the artifact HTTP client."""
    timeout: float = 10.0
    user_agent: str = "mintlist/0.1"


@dataclass
class ArtifactConfig:
    """Location of the published artifact."""
    proofs_url: Optional[str] = None
    root_url: Optional[str] = None
    # Appended as ?v=<version> to bypass stale CDN copies
    version: Optional[str] = None


@dataclass
class CacheConfig:
    """Per-address lookup cache. ttl_seconds=None keeps entries for the session."""
    ttl_seconds: Optional[float] = None
    max_entries: int = 1024


@dataclass
class PhaseConfig:
    """A mint phase as configured on-chain."""
    id: int
    name: str
    root: str = ZERO_ROOT
    proof_file: Optional[str] = None

    @property
    def requires_proof(self) -> bool:
        """A zero root marks a public (FCFS) phase with no allowlist."""
        return self.proof_file is not None and self.root.lower() != ZERO_ROOT


def _default_phases() -> dict[str, PhaseConfig]:
    return {
        "wl": PhaseConfig(id=0, name="WL", proof_file="proofs.json"),
        "fcfs": PhaseConfig(id=1, name="FCFS"),
    }


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the eligibility client.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    http: HttpConfig = field(default_factory=HttpConfig)
    artifact: ArtifactConfig = field(default_factory=ArtifactConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    phases: dict[str, PhaseConfig] = field(default_factory=_default_phases)
    active_phase: str = "wl"
    expected_root: Optional[str] = None

    @property
    def phase(self) -> PhaseConfig:
        """The active phase."""
        try:
            return self.phases[self.active_phase]
        except KeyError:
            raise KeyError(f"Unknown active phase: {self.active_phase!r}") from None

    def resolve_expected_root(self) -> Optional[str]:
        """
        Root to verify proofs against.

        An explicit expected_root wins; otherwise the active phase's
        on-chain root, unless the phase is public.
        """
        if self.expected_root:
            return self.expected_root
        phase = self.phases.get(self.active_phase)
        if phase is not None and phase.requires_proof:
            return phase.root
        return None

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - MINTLIST_PROOFS_URL: URL of proofs.json
        - MINTLIST_ROOT_URL: URL of root.json
        - MINTLIST_PROOF_VERSION: cache-busting version
        - MINTLIST_HTTP_TIMEOUT: request timeout in seconds
        - MINTLIST_CACHE_TTL: lookup cache TTL in seconds
        - MINTLIST_ACTIVE_PHASE: phase key (e.g. wl, fcfs)
        - MINTLIST_EXPECTED_ROOT: on-chain root to verify against
        """
        overrides: dict[str, Any] = {}

        if os.getenv("MINTLIST_PROOFS_URL"):
            overrides.setdefault("artifact", {})["proofs_url"] = os.getenv("MINTLIST_PROOFS_URL")
        if os.getenv("MINTLIST_ROOT_URL"):
            overrides.setdefault("artifact", {})["root_url"] = os.getenv("MINTLIST_ROOT_URL")
        if os.getenv("MINTLIST_PROOF_VERSION"):
            overrides.setdefault("artifact", {})["version"] = os.getenv("MINTLIST_PROOF_VERSION")

        if os.getenv("MINTLIST_HTTP_TIMEOUT"):
            overrides.setdefault("http", {})["timeout"] = float(os.getenv("MINTLIST_HTTP_TIMEOUT", "10"))
        if os.getenv("MINTLIST_CACHE_TTL"):
            overrides.setdefault("cache", {})["ttl_seconds"] = float(os.getenv("MINTLIST_CACHE_TTL", "0"))

        if os.getenv("MINTLIST_ACTIVE_PHASE"):
            overrides["active_phase"] = os.getenv("MINTLIST_ACTIVE_PHASE")
        if os.getenv("MINTLIST_EXPECTED_ROOT"):
            overrides["expected_root"] = os.getenv("MINTLIST_EXPECTED_ROOT")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        http_data = data.get("http", {})
        artifact_data = data.get("artifact", {})
        cache_data = data.get("cache", {})
        phases_data = data.get("phases")

        phases = _default_phases()
        if phases_data:
            phases = {
                key: PhaseConfig(**phase_conf)
                for key, phase_conf in phases_data.items()
            }

        return cls(
            http=HttpConfig(**http_data) if http_data else HttpConfig(),
            artifact=ArtifactConfig(**artifact_data) if artifact_data else ArtifactConfig(),
            cache=CacheConfig(**cache_data) if cache_data else CacheConfig(),
            phases=phases,
            active_phase=data.get("active_phase", "wl"),
            expected_root=data.get("expected_root"),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        for section in ("http", "artifact", "cache"):
            for key, value in overrides.get(section, {}).items():
                setattr(getattr(new_config, section), key, value)

        if "active_phase" in overrides:
            new_config.active_phase = overrides["active_phase"]
        if "expected_root" in overrides:
            new_config.expected_root = overrides["expected_root"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "http": {
                "timeout": self.http.timeout,
                "user_agent": self.http.user_agent,
            },
            "artifact": {
                "proofs_url": self.artifact.proofs_url,
                "root_url": self.artifact.root_url,
                "version": self.artifact.version,
            },
            "cache": {
                "ttl_seconds": self.cache.ttl_seconds,
                "max_entries": self.cache.max_entries,
            },
            "phases": {
                key: {
                    "id": phase.id,
                    "name": phase.name,
                    "root": phase.root,
                    "proof_file": phase.proof_file,
                }
                for key, phase in self.phases.items()
            },
            "active_phase": self.active_phase,
            "expected_root": self.expected_root,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
