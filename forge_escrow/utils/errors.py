"""Standardized error payloads and the escrow error hierarchy."""
from typing import Any

from fastapi import HTTPException, status


def error_response(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return a standardized error payload."""

    payload: dict[str, Any] = {"error": {"code": code, "message": message}}
    if details:
        payload["error"]["details"] = details
    return payload


class EscrowError(HTTPException):
    """Base class for escrow failures.

    Each subclass pins an error ``code`` and an HTTP status so the API layer can
    render it without translation. Raising one always aborts the current unit of
    work.
    """

    code = "ESCROW_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Escrow operation failed."

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(
            status_code=type(self).status_code,
            detail=error_response(self.code, self.message, self.details),
        )

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class EscrowNotFound(EscrowError):
    code = "ESCROW_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Escrow not found."


class DuplicateEscrow(EscrowError):
    code = "DUPLICATE_ESCROW"
    status_code = status.HTTP_409_CONFLICT
    default_message = "An escrow with this id already exists."


class InvalidEscrowStatus(EscrowError):
    code = "INVALID_ESCROW_STATUS"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Invalid escrow status for this operation."


class Unauthorized(EscrowError):
    code = "UNAUTHORIZED"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Unauthorized to perform this action."


class InvalidPercentage(EscrowError):
    code = "INVALID_PERCENTAGE"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid percentage: must be between 1 and 100."


class NoFundsToRelease(EscrowError):
    code = "NO_FUNDS_TO_RELEASE"
    status_code = status.HTTP_409_CONFLICT
    default_message = "No funds remaining to release."


class TransferFailure(EscrowError):
    code = "TRANSFER_FAILURE"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Transfer could not be completed."


class InvalidAmount(EscrowError):
    code = "INVALID_AMOUNT"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Amount must be greater than zero."


__all__ = [
    "error_response",
    "EscrowError",
    "EscrowNotFound",
    "DuplicateEscrow",
    "InvalidEscrowStatus",
    "Unauthorized",
    "InvalidPercentage",
    "NoFundsToRelease",
    "TransferFailure",
    "InvalidAmount",
]
