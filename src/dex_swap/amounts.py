"""Exact conversion between UI decimal amounts and integer base units.

Token amounts on chain are unsigned 64-bit integers scaled by ``10**decimals``.
Everything here works on ``Decimal`` coefficients and Python ints, never floats,
and rejects input it cannot represent instead of rounding it.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Union

from .constants import U64_MAX
from .errors import AmountTooLarge, FractionalPrecisionExceeded, InvalidAmount, PrecisionOverflow


@dataclass(frozen=True)
class TokenAmount:
    ui: Decimal
    raw: int
    decimals: int


def parse_amount(text: str) -> Decimal:
    try:
        amount = Decimal(text.strip())
    except (InvalidOperation, AttributeError):
        raise InvalidAmount(f"cannot parse amount {text!r}") from None
    if not amount.is_finite():
        raise InvalidAmount(f"amount must be finite, got {text!r}")
    return amount


def to_base_units(amount: Decimal, decimals: int) -> int:
    if not amount.is_finite() or amount <= 0:
        raise InvalidAmount(f"amount must be > 0, got {amount}")
    if decimals < 0 or 10**decimals > U64_MAX:
        raise PrecisionOverflow(f"10^{decimals} does not fit in u64")

    _, digits, exponent = amount.as_tuple()
    shift = exponent + decimals
    if amount.adjusted() + decimals >= 20:
        raise AmountTooLarge(f"{amount} scaled by 10^{decimals} exceeds u64")
    if -shift > len(digits):
        raise FractionalPrecisionExceeded(
            f"{amount} has more fractional digits than the token supports (decimals={decimals})"
        )

    coefficient = int("".join(str(d) for d in digits))
    if shift >= 0:
        scaled = coefficient * 10**shift
    else:
        scaled, remainder = divmod(coefficient, 10**-shift)
        if remainder:
            raise FractionalPrecisionExceeded(
                f"{amount} has more fractional digits than the token supports (decimals={decimals})"
            )

    if scaled > U64_MAX:
        raise AmountTooLarge(f"{amount} scaled by 10^{decimals} exceeds u64")
    return scaled


def from_base_units(raw: int, decimals: int) -> Decimal:
    """Exact inverse of ``to_base_units``."""
    return Decimal(raw).scaleb(-decimals)


def format_amount(amount: Decimal) -> str:
    """Plain notation without scale padding: 0.050000000 prints as 0.05, 100 as 100."""
    return f"{amount.normalize():f}"


def token_amount(value: Union[str, Decimal], decimals: int) -> TokenAmount:
    ui = parse_amount(value) if isinstance(value, str) else value
    return TokenAmount(ui=ui, raw=to_base_units(ui, decimals), decimals=decimals)
