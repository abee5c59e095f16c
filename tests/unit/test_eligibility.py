"""
Eligibility Checker Tests
Tests for mintlist/client/eligibility.py

Every failure path must come back with max_allowed == 0.
"""
import asyncio

import httpx
import pytest

from generator.artifacts.io import save_artifact
from generator.pipeline import generate_artifact
from mintlist.client.artifact_source import ArtifactSource, HttpArtifactSource, LocalArtifactSource
from mintlist.client.eligibility import EligibilityChecker
from mintlist.client.models import EligibilityResult, EligibilityStatus
from mintlist.config.runtime import RuntimeConfig
from mintlist.http.client import AsyncHttpClient
from mintlist.schemas.errors import (
    ArtifactFetchException,
    ErrorCodes,
    ProofMismatchException,
    ValidationException,
)

from fixtures import ADDR_1, ADDR_2, ADDR_3, FIVE_ROOT, THREE_PROOFS, THREE_ROOT, make_records


STRANGER = "0x" + "b" * 40


class InMemorySource(ArtifactSource):
    """Serves fixed documents, or raises, without touching disk or network."""

    def __init__(self, proofs=None, root=None, error=None):
        super().__init__()
        self.proofs = proofs
        self.root = root
        self.error = error
        self.loads = 0

    async def _load_proofs_document(self):
        self.loads += 1
        if self.error is not None:
            raise self.error
        return self.proofs

    async def _load_root_document(self):
        return {"root": self.root} if self.root else None

    def describe(self):
        return "memory"


@pytest.fixture
def artifact():
    return generate_artifact(make_records(3))


@pytest.fixture
def source(artifact):
    return InMemorySource(proofs=artifact.to_proofs_document(), root=artifact.root)


def _check(checker, address):
    return asyncio.run(checker.check(address))


class TestOutcomes:
    """One test per gating status."""

    def test_eligible(self, source):
        result = _check(EligibilityChecker(source), ADDR_2)

        assert result.status == EligibilityStatus.ELIGIBLE
        assert result.eligible
        assert result.max_allowed == 20
        assert list(result.proof) == THREE_PROOFS[ADDR_2]
        assert result.root == THREE_ROOT

    def test_eligible_against_expected_root(self, source):
        checker = EligibilityChecker(source, expected_root=THREE_ROOT.upper().replace("0X", "0x"))
        result = _check(checker, ADDR_1)

        assert result.eligible
        assert result.root == THREE_ROOT

    def test_checksummed_input(self, source):
        result = _check(EligibilityChecker(source), ADDR_3.upper().replace("0X", "0x"))

        assert result.eligible
        assert result.address == ADDR_3

    def test_not_listed(self, source):
        result = _check(EligibilityChecker(source), STRANGER)

        assert result.status == EligibilityStatus.NOT_LISTED
        assert result.max_allowed == 0
        assert result.proof == ()
        assert result.root == THREE_ROOT
        assert not result.retryable

    def test_tampered_allocation(self, artifact):
        proofs = artifact.to_proofs_document()
        proofs[ADDR_1] = dict(proofs[ADDR_1], maxAllowed="11")
        source = InMemorySource(proofs=proofs, root=artifact.root)

        result = _check(EligibilityChecker(source), ADDR_1)

        assert result.status == EligibilityStatus.PROOF_MISMATCH
        assert result.max_allowed == 0
        assert result.proof == ()

    def test_stale_artifact(self, source):
        result = _check(EligibilityChecker(source, expected_root=FIVE_ROOT), ADDR_1)

        assert result.status == EligibilityStatus.PROOF_MISMATCH
        assert result.max_allowed == 0
        assert result.root == FIVE_ROOT
        assert "stale" in result.message

    def test_stale_artifact_missing_address(self):
        old = generate_artifact(make_records(1))
        source = InMemorySource(proofs=old.to_proofs_document(), root=old.root)

        result = _check(EligibilityChecker(source, expected_root=THREE_ROOT), ADDR_2)

        assert result.status == EligibilityStatus.PROOF_MISMATCH
        assert result.max_allowed == 0
        assert result.root == THREE_ROOT
        assert "stale" in result.message
        assert result.user_message != EligibilityResult(
            address=ADDR_2, status=EligibilityStatus.NOT_LISTED
        ).user_message

    def test_not_listed_against_matching_root(self, source):
        result = _check(EligibilityChecker(source, expected_root=THREE_ROOT), STRANGER)
        assert result.status == EligibilityStatus.NOT_LISTED

    def test_expected_root_without_published_root(self, artifact):
        source = InMemorySource(proofs=artifact.to_proofs_document())

        assert _check(EligibilityChecker(source, expected_root=THREE_ROOT), ADDR_1).eligible
        assert not _check(EligibilityChecker(source, expected_root=FIVE_ROOT), ADDR_2).eligible

    def test_fetch_failure_fails_closed(self):
        source = InMemorySource(error=ArtifactFetchException("connection refused"))
        result = _check(EligibilityChecker(source, expected_root=THREE_ROOT), ADDR_1)

        assert result.status == EligibilityStatus.UNAVAILABLE
        assert result.max_allowed == 0
        assert result.retryable
        assert result.message == "connection refused"

    def test_no_root_anywhere(self, artifact):
        source = InMemorySource(proofs=artifact.to_proofs_document())
        result = _check(EligibilityChecker(source), ADDR_1)

        assert result.status == EligibilityStatus.UNAVAILABLE
        assert result.max_allowed == 0

    def test_invalid_address_raises(self, source):
        with pytest.raises(ValidationException) as exc_info:
            _check(EligibilityChecker(source), "0x1234")
        assert exc_info.value.code == ErrorCodes.INVALID_ADDRESS

    def test_repeat_checks_use_cache(self, source):
        checker = EligibilityChecker(source)

        async def go():
            return [await checker.check(ADDR_1) for _ in range(3)]

        results = asyncio.run(go())
        assert all(r.eligible for r in results)
        assert source.loads == 1


class TestSources:
    """The checker over the concrete sources."""

    def test_local_directory(self, artifact, tmp_path):
        save_artifact(artifact, tmp_path)

        async def go():
            async with LocalArtifactSource(tmp_path) as source:
                return await EligibilityChecker(source).check(ADDR_3)

        result = asyncio.run(go())
        assert result.eligible
        assert result.max_allowed == 30

    def test_http_outage(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out")

        async def go():
            client = AsyncHttpClient(transport=httpx.MockTransport(handler))
            async with HttpArtifactSource("https://mint.example/merkle/proofs.json", client=client) as source:
                return await EligibilityChecker(source, expected_root=THREE_ROOT).check(ADDR_1)

        result = asyncio.run(go())
        assert result.status == EligibilityStatus.UNAVAILABLE
        assert result.max_allowed == 0

    def test_from_config_uses_phase_root(self, artifact):
        def handler(request):
            return httpx.Response(200, json=artifact.to_proofs_document())

        config = RuntimeConfig.from_dict({
            "artifact": {"proofs_url": "https://mint.example/merkle/proofs.json"},
            "phases": {
                "wl": {"id": 0, "name": "WL", "root": THREE_ROOT, "proof_file": "proofs.json"},
            },
        })

        async def go():
            checker = EligibilityChecker.from_config(
                config, client=AsyncHttpClient(transport=httpx.MockTransport(handler))
            )
            async with checker.source:
                return checker.expected_root, await checker.check(ADDR_2)

        expected_root, result = asyncio.run(go())
        assert expected_root == THREE_ROOT
        assert result.eligible


class TestEligibilityResult:
    """Tests for result helpers."""

    def test_raise_for_status_eligible(self):
        EligibilityResult(address=ADDR_1, status=EligibilityStatus.ELIGIBLE, max_allowed=1).raise_for_status()

    def test_raise_for_status_not_listed(self):
        result = EligibilityResult(address=ADDR_1, status=EligibilityStatus.NOT_LISTED)
        with pytest.raises(ProofMismatchException) as exc_info:
            result.raise_for_status()
        assert exc_info.value.code == ErrorCodes.MERKLE_PROOF_INVALID

    def test_raise_for_status_mismatch(self):
        result = EligibilityResult(address=ADDR_1, status=EligibilityStatus.PROOF_MISMATCH, root=THREE_ROOT)
        with pytest.raises(ProofMismatchException) as exc_info:
            result.raise_for_status()
        assert exc_info.value.code == ErrorCodes.ROOT_MISMATCH
        assert exc_info.value.details["expected_root"] == THREE_ROOT

    def test_raise_for_status_unavailable(self):
        result = EligibilityResult(address=ADDR_1, status=EligibilityStatus.UNAVAILABLE)
        with pytest.raises(ArtifactFetchException):
            result.raise_for_status()

    def test_to_dict(self):
        result = EligibilityResult(
            address=ADDR_1,
            status=EligibilityStatus.ELIGIBLE,
            max_allowed=10,
            proof=tuple(THREE_PROOFS[ADDR_1]),
            root=THREE_ROOT,
        )
        data = result.to_dict()

        assert data["status"] == "eligible"
        assert data["eligible"] is True
        assert data["maxAllowed"] == "10"
        assert data["proof"] == THREE_PROOFS[ADDR_1]
        assert data["message"] == "You are on the allowlist."

    @pytest.mark.parametrize("status", list(EligibilityStatus))
    def test_user_message_for_every_status(self, status):
        assert EligibilityResult(address=ADDR_1, status=status).user_message
