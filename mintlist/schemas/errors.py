"""
Schemas - Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy for allowlist generation and verification.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the allowlist tooling."""

    # Dataset & Validation Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    DATASET_EMPTY = "DATASET_EMPTY"
    COLUMN_NOT_FOUND = "COLUMN_NOT_FOUND"
    INVALID_ADDRESS = "INVALID_ADDRESS"
    INVALID_AMOUNT = "INVALID_AMOUNT"

    # Merkle & Commitment Errors
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"
    ROOT_MISMATCH = "ROOT_MISMATCH"

    # Artifact Errors
    ARTIFACT_FETCH_FAILED = "ARTIFACT_FETCH_FAILED"
    ARTIFACT_MALFORMED = "ARTIFACT_MALFORMED"
    ARTIFACT_IO_ERROR = "ARTIFACT_IO_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class MintlistError(BaseModel):
    """
    Base error model for structured error communication.

    Used for reporting errors in CLI JSON output without raising.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.SCHEMA_VALIDATION_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )


class ValidationError(MintlistError):
    """Error model for dataset/record validation failures."""

    code: str = Field(default=ErrorCodes.SCHEMA_VALIDATION_ERROR)
    line: int | None = Field(
        default=None,
        description="1-based line number of the offending row",
    )
    column: str | None = Field(
        default=None,
        description="Column that failed validation",
    )
    actual: str | None = Field(
        default=None,
        description="Actual value received",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MintlistException(Exception):
    """
    Base exception for all allowlist errors.

    Carries structured error information and can be converted
    to a MintlistError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "MINTLIST_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MintlistError:
        """Convert this exception to a MintlistError model."""
        return MintlistError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ValidationException(MintlistException):
    """Exception raised when the allocation dataset or a record is invalid."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.SCHEMA_VALIDATION_ERROR,
        line: int | None = None,
        column: str | None = None,
        value: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if line is not None:
            full_details["line"] = line
        if column:
            full_details["column"] = column
        if value is not None:
            full_details["value"] = value
        super().__init__(
            message=message,
            code=code,
            details=full_details,
            retryable=False,
        )
        self.line = line
        self.column = column
        self.value = value

    def to_error_model(self) -> ValidationError:
        return ValidationError(
            code=self.code,
            message=self.message,
            details=self.details,
            line=self.line,
            column=self.column,
            actual=self.value,
        )


class ProofMismatchException(MintlistException):
    """
    Exception raised when a proof does not reconstruct the expected root.

    This is a gating result, never a transient fault: resubmitting the same
    proof cannot succeed. The remedy is fetching a fresh artifact.
    """

    def __init__(
        self,
        message: str,
        address: str | None = None,
        expected_root: str | None = None,
        computed_root: str | None = None,
        code: str = ErrorCodes.ROOT_MISMATCH,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if address:
            full_details["address"] = address
        if expected_root:
            full_details["expected_root"] = expected_root
        if computed_root:
            full_details["computed_root"] = computed_root
        super().__init__(
            message=message,
            code=code,
            details=full_details,
            retryable=False,
        )


class ArtifactFetchException(MintlistException):
    """Exception raised when the published artifact cannot be retrieved."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        code: str = ErrorCodes.ARTIFACT_FETCH_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if url:
            full_details["url"] = url
        if status_code is not None:
            full_details["status_code"] = status_code
        super().__init__(
            message=message,
            code=code,
            details=full_details,
            retryable=True,
        )


class ArtifactIOException(MintlistException):
    """Exception raised when a local artifact cannot be read or written."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if path:
            full_details["path"] = path
        super().__init__(
            message=message,
            code=ErrorCodes.ARTIFACT_IO_ERROR,
            details=full_details,
            retryable=False,
        )
