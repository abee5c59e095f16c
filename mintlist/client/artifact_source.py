"""
Artifact Sources

Read-only access to a published allowlist artifact, keyed by address.

Sources fetch the proofs document (and, when it carries no root, the root
document), convert the entry for the queried address into a typed
ProofLookup, and cache that lookup for the session. Failures raise
ArtifactFetchException and are never cached or retried here; the
eligibility layer turns them into a fail-closed result.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from mintlist.client.cache import TTLCache
from mintlist.client.models import ProofLookup
from mintlist.config.runtime import RuntimeConfig
from mintlist.crypto.hashing import is_hash_hex
from mintlist.http.client import AsyncHttpClient, HttpError
from mintlist.schemas.errors import ArtifactFetchException, ErrorCodes


logger = logging.getLogger(__name__)


PROOFS_FILE = "proofs.json"
ROOT_FILE = "root.json"


def _root_from_document(document: Any, origin: str) -> str:
    if not isinstance(document, dict) or not is_hash_hex(document.get("root")):
        raise ArtifactFetchException(
            f"Root document at {origin} has no valid 'root'",
            url=origin,
            code=ErrorCodes.ARTIFACT_MALFORMED,
        )
    return document["root"].lower()


class ArtifactSource(ABC):
    """
    Base class for artifact lookups.

    Subclasses implement document loading; caching and parsing live here.
    """

    def __init__(self, cache: Optional[TTLCache[str, ProofLookup]] = None) -> None:
        self._cache: TTLCache[str, ProofLookup] = cache if cache is not None else TTLCache()
        self._root: Optional[str] = None

    @abstractmethod
    async def _load_proofs_document(self) -> Any:
        """Load and parse the proofs document."""

    @abstractmethod
    async def _load_root_document(self) -> Optional[Any]:
        """Load and parse the root document, or None if there is none."""

    async def lookup(self, address: str) -> ProofLookup:
        """
        Look up an address.

        Returns:
            ProofLookup (found=False when the address is not listed)

        Raises:
            ArtifactFetchException: If the artifact cannot be retrieved or parsed
        """
        key = address.lower()
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug(f"Lookup cache hit for {key}")
            return cached

        document = await self._load_proofs_document()
        result = ProofLookup.from_document(key, document)
        if result.root is None and self._root is not None:
            result = result.model_copy(update={"root": self._root})

        self._cache.set(key, result)
        return result

    async def fetch_root(self) -> Optional[str]:
        """
        Root published alongside the proofs, if any.

        Raises:
            ArtifactFetchException: If a root document exists but is unreadable
        """
        if self._root is not None:
            return self._root
        document = await self._load_root_document()
        if document is None:
            return None
        self._root = _root_from_document(document, self.describe())
        return self._root

    def invalidate(self, address: Optional[str] = None) -> None:
        """Drop cached lookups (all, or one address) so the next call re-fetches."""
        if address is None:
            self._cache.clear()
            self._root = None
        else:
            self._cache.invalidate(address.lower())

    @abstractmethod
    def describe(self) -> str:
        """Human-readable location of the artifact."""

    async def aclose(self) -> None:
        """Release resources held by the source."""

    async def __aenter__(self) -> "ArtifactSource":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()


class HttpArtifactSource(ArtifactSource):
    """
    Artifact published over HTTP (e.g. a static /merkle/ directory).

    Args:
        proofs_url: URL of proofs.json
        root_url: URL of root.json, used when the proofs document has no root
        version: Cache-busting version appended as ?v=<version>
        client: Shared AsyncHttpClient; one is created if omitted
        cache: Lookup cache
    """

    def __init__(
        self,
        proofs_url: str,
        *,
        root_url: Optional[str] = None,
        version: Optional[str] = None,
        client: Optional[AsyncHttpClient] = None,
        cache: Optional[TTLCache[str, ProofLookup]] = None,
    ) -> None:
        super().__init__(cache=cache)
        self.proofs_url = proofs_url
        self.root_url = root_url
        self.version = version
        self._owns_client = client is None
        self._client = client or AsyncHttpClient()

    @classmethod
    def from_config(
        cls,
        config: RuntimeConfig,
        *,
        client: Optional[AsyncHttpClient] = None,
    ) -> "HttpArtifactSource":
        if not config.artifact.proofs_url:
            raise ValueError("artifact.proofs_url is not configured")
        return cls(
            config.artifact.proofs_url,
            root_url=config.artifact.root_url,
            version=config.artifact.version,
            client=client or AsyncHttpClient(
                timeout=config.http.timeout,
                default_headers={"User-Agent": config.http.user_agent},
            ),
            cache=TTLCache(
                ttl_seconds=config.cache.ttl_seconds,
                max_entries=config.cache.max_entries,
            ),
        )

    def _params(self) -> Optional[dict[str, str]]:
        return {"v": self.version} if self.version else None

    async def _get_json(self, url: str) -> Any:
        try:
            response = await self._client.get(
                url,
                params=self._params(),
                headers={"Cache-Control": "no-store"},
            )
        except HttpError as e:
            raise ArtifactFetchException(f"Failed to fetch {url}: {e}", url=url) from e

        if not response.ok:
            raise ArtifactFetchException(
                f"Failed to fetch {url}: HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ArtifactFetchException(
                f"Invalid JSON at {url}: {e}",
                url=url,
                code=ErrorCodes.ARTIFACT_MALFORMED,
            ) from e

    async def _load_proofs_document(self) -> Any:
        logger.debug(f"Fetching proofs from {self.proofs_url}")
        return await self._get_json(self.proofs_url)

    async def _load_root_document(self) -> Optional[Any]:
        if not self.root_url:
            return None
        return await self._get_json(self.root_url)

    def describe(self) -> str:
        return self.proofs_url

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class LocalArtifactSource(ArtifactSource):
    """Artifact directory on disk, as written by the generator."""

    def __init__(
        self,
        directory: str | Path,
        *,
        cache: Optional[TTLCache[str, ProofLookup]] = None,
    ) -> None:
        super().__init__(cache=cache)
        self.directory = Path(directory)

    def _read_json(self, path: Path) -> Any:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ArtifactFetchException(f"Cannot read {path}: {e}", url=str(path)) from e
        except ValueError as e:
            raise ArtifactFetchException(
                f"Invalid JSON in {path}: {e}",
                url=str(path),
                code=ErrorCodes.ARTIFACT_MALFORMED,
            ) from e

    async def _load_proofs_document(self) -> Any:
        return self._read_json(self.directory / PROOFS_FILE)

    async def _load_root_document(self) -> Optional[Any]:
        path = self.directory / ROOT_FILE
        if not path.exists():
            return None
        return self._read_json(path)

    def describe(self) -> str:
        return str(self.directory)
