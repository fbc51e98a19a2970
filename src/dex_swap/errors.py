"""Swap failures with the service or RPC context that caused them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class SwapError(Exception):
    """Terminal failure of a swap attempt."""

    message: str
    http_status: Optional[int] = None
    body: Optional[str] = None
    cause: Optional[BaseException] = None

    def __str__(self) -> str:
        suffix = []
        if self.http_status is not None:
            suffix.append(f"status={self.http_status}")
        if self.body:
            suffix.append(f"body={self.body}")
        if self.cause:
            suffix.append(f"cause={self.cause}")
        detail = ", ".join(suffix)
        return f"{self.message} ({detail})" if detail else self.message


class InvalidAmount(SwapError):
    pass


class PrecisionOverflow(SwapError):
    pass


class FractionalPrecisionExceeded(SwapError):
    pass


class AmountTooLarge(SwapError):
    pass


class InsufficientBalance(SwapError):
    pass


class DerivationFailed(SwapError):
    pass


class AccountCreationFailed(SwapError):
    pass


class QuoteRequestFailed(SwapError):
    pass


class SwapBuildFailed(SwapError):
    pass


class DecodeFailed(SwapError):
    pass


class DeserializeFailed(SwapError):
    pass


class SigningFailed(SwapError):
    pass


class SubmissionFailed(SwapError):
    pass


class RpcRequestFailed(SwapError):
    """Read-only chain lookup (decimals, balance, blockhash) failed."""


class InvalidVenue(SwapError):
    pass


class KeypairLoadError(SwapError):
    pass


class UserCancelled(Exception):
    """Operator declined the swap. Not a failure."""
