"""
Configuration Tests
Tests for mintlist/config/runtime.py and mintlist_cli/config.py
"""
import json

import pytest

from mintlist.config.runtime import (
    ZERO_ROOT,
    PhaseConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)
from mintlist_cli.config import (
    CLIConfig,
    get_default_config_template,
    load_config,
    load_config_from_file,
)

from fixtures import FIVE_ROOT, THREE_ROOT


class TestRuntimeConfig:
    """Tests for the eligibility client configuration."""

    def test_defaults(self):
        config = RuntimeConfig()

        assert config.http.timeout == 10.0
        assert config.artifact.proofs_url is None
        assert config.cache.ttl_seconds is None
        assert set(config.phases) == {"wl", "fcfs"}
        assert config.active_phase == "wl"

    def test_from_dict_partial(self):
        config = RuntimeConfig.from_dict({"artifact": {"proofs_url": "https://x/proofs.json"}})

        assert config.artifact.proofs_url == "https://x/proofs.json"
        assert config.http.timeout == 10.0

    def test_from_dict_phases(self):
        config = RuntimeConfig.from_dict({
            "phases": {"presale": {"id": 3, "name": "Presale", "root": THREE_ROOT, "proof_file": "p.json"}},
            "active_phase": "presale",
        })

        assert config.phase.name == "Presale"
        assert config.phase.requires_proof

    def test_unknown_active_phase(self):
        config = RuntimeConfig(active_phase="nope")
        with pytest.raises(KeyError, match="nope"):
            _ = config.phase

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("MINTLIST_PROOFS_URL", "https://mint.example/proofs.json")
        monkeypatch.setenv("MINTLIST_PROOF_VERSION", "5")
        monkeypatch.setenv("MINTLIST_HTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("MINTLIST_CACHE_TTL", "30")
        monkeypatch.setenv("MINTLIST_ACTIVE_PHASE", "fcfs")

        config = RuntimeConfig.from_env()

        assert config.artifact.proofs_url == "https://mint.example/proofs.json"
        assert config.artifact.version == "5"
        assert config.http.timeout == 2.5
        assert config.cache.ttl_seconds == 30.0
        assert config.active_phase == "fcfs"

    def test_with_env_overrides_keeps_file_values(self, monkeypatch):
        base = RuntimeConfig.from_dict({"artifact": {"proofs_url": "a", "root_url": "b"}})
        monkeypatch.setenv("MINTLIST_PROOFS_URL", "c")

        config = base.with_env_overrides()

        assert config.artifact.proofs_url == "c"
        assert config.artifact.root_url == "b"
        assert base.artifact.proofs_url == "a"

    def test_with_env_overrides_noop(self):
        base = RuntimeConfig()
        assert base.with_env_overrides() is base

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "mintlist.yaml"
        path.write_text(
            "artifact:\n"
            "  proofs_url: https://mint.example/merkle/proofs.json\n"
            "cache:\n"
            "  ttl_seconds: 60\n"
            f"expected_root: \"{THREE_ROOT}\"\n"
        )

        config = RuntimeConfig.from_yaml(path)

        assert config.artifact.proofs_url == "https://mint.example/merkle/proofs.json"
        assert config.cache.ttl_seconds == 60
        assert config.expected_root == THREE_ROOT

    def test_from_yaml_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "missing.yaml")

    def test_to_dict_round_trip(self):
        config = RuntimeConfig.from_dict({"artifact": {"version": "9"}, "active_phase": "fcfs"})
        again = RuntimeConfig.from_dict(config.to_dict())

        assert again.to_dict() == config.to_dict()

    def test_default_config_singleton(self):
        custom = RuntimeConfig(active_phase="fcfs")
        set_default_config(custom)
        try:
            assert get_default_config() is custom
        finally:
            set_default_config(None)


class TestExpectedRoot:
    """Tests for root resolution across phases."""

    def test_explicit_wins(self):
        config = RuntimeConfig.from_dict({
            "phases": {"wl": {"id": 0, "name": "WL", "root": FIVE_ROOT, "proof_file": "proofs.json"}},
            "expected_root": THREE_ROOT,
        })
        assert config.resolve_expected_root() == THREE_ROOT

    def test_phase_root(self):
        config = RuntimeConfig.from_dict({
            "phases": {"wl": {"id": 0, "name": "WL", "root": FIVE_ROOT, "proof_file": "proofs.json"}},
        })
        assert config.resolve_expected_root() == FIVE_ROOT

    def test_unset_phase_root(self):
        assert RuntimeConfig().resolve_expected_root() is None

    def test_public_phase(self):
        config = RuntimeConfig(active_phase="fcfs")
        assert not config.phase.requires_proof
        assert config.resolve_expected_root() is None

    def test_zero_root_needs_no_proof(self):
        phase = PhaseConfig(id=0, name="WL", root=ZERO_ROOT, proof_file="proofs.json")
        assert not phase.requires_proof

    def test_env_expected_root(self, monkeypatch):
        monkeypatch.setenv("MINTLIST_EXPECTED_ROOT", THREE_ROOT)
        assert RuntimeConfig.from_env().resolve_expected_root() == THREE_ROOT


class TestCLIConfig:
    """Tests for CLI configuration loading."""

    @pytest.fixture(autouse=True)
    def _no_user_config(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))

    def test_defaults(self):
        config = load_config()

        assert config == CLIConfig()
        assert config.output_dir == "merkle"

    def test_cwd_file(self, tmp_path):
        (tmp_path / "mintlist.json").write_text(json.dumps({"output_dir": "dist/merkle"}))
        assert load_config().output_dir == "dist/merkle"

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"log_level": "DEBUG", "expected_root": THREE_ROOT}))

        config = load_config(path)

        assert config.log_level == "DEBUG"
        assert config.expected_root == THREE_ROOT

    def test_explicit_path_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="JSON object"):
            load_config_from_file(path)

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        (tmp_path / "mintlist.json").write_text(json.dumps({"proofs_source": "a"}))
        monkeypatch.setenv("MINTLIST_PROOFS_URL", "https://mint.example/proofs.json")
        monkeypatch.setenv("MINTLIST_OUTPUT_FORMAT", "json")

        config = load_config()

        assert config.proofs_source == "https://mint.example/proofs.json"
        assert config.default_output_format == "json"

    def test_template_is_valid(self, tmp_path):
        path = tmp_path / "template.json"
        path.write_text(get_default_config_template())

        assert load_config_from_file(path).to_dict() == CLIConfig().to_dict()
