from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional

from .amounts import TokenAmount


@dataclass(frozen=True)
class Quote:
    input_mint: str
    in_amount: int
    output_mint: str
    out_amount: int
    other_amount_threshold: int
    swap_mode: str
    slippage_bps: int
    price_impact_pct: str
    route_plan: Any
    # decoded response exactly as received; this, not the fields above, goes back to /swap
    raw: Dict[str, Any] = field(repr=False, compare=False)


@dataclass(frozen=True)
class SwapTransaction:
    swap_transaction: str
    last_valid_block_height: int
    prioritization_fee_lamports: Optional[int] = None


@dataclass(frozen=True)
class SwapReceipt:
    signature: str
    amount_in: TokenAmount
    expected_out: Decimal
    last_valid_block_height: int
    prioritization_fee_lamports: Optional[int] = None
