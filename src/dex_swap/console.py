import sys
from decimal import Decimal
from typing import Callable, Optional, Sequence, TextIO

from .amounts import TokenAmount, format_amount
from .chain import TokenBalance
from .config import SwapConfig, VenueConfig
from .errors import InvalidVenue, UserCancelled
from .models import Quote, SwapReceipt


class ConsolePrompter:
    """Interactive prompts on stdin/stdout. Preset answers skip the matching prompt."""

    def __init__(
        self,
        config: SwapConfig,
        venue: Optional[str] = None,
        amount: Optional[str] = None,
        read: Callable[[str], str] = input,
        out: Optional[TextIO] = None,
    ) -> None:
        self.config = config
        self.preset_venue = venue
        self.preset_amount = amount
        self.read = read
        self.out = out if out is not None else sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    def _ask(self, prompt: str) -> str:
        try:
            return self.read(prompt).strip()
        except (EOFError, KeyboardInterrupt):
            self._print()
            raise UserCancelled("input closed at prompt") from None

    def banner(self, rpc_url: str, keypair_path: str, wallet: str) -> None:
        self._print(f"=== Solana interactive swap ({self.config.input_symbol} -> {self.config.output_symbol}) ===")
        self._print(f"RPC: {rpc_url}")
        self._print(f"Keypair: {keypair_path}")
        self._print(f"Wallet: {wallet}")

    def choose_venue(self, venues: Sequence[VenueConfig]) -> VenueConfig:
        if self.preset_venue is not None:
            return self.config.venue(self.preset_venue)

        self._print()
        self._print("Choose a venue (the route is restricted to it):")
        for venue in venues:
            self._print(f"  {venue.key}) {venue.label}")
        choice = self._ask(f"Your choice ({'/'.join(v.key for v in venues)}): ")
        for venue in venues:
            if choice == venue.key:
                return venue
        raise InvalidVenue(f"invalid venue choice {choice!r}")

    def ask_amount(self, account: str, balance: TokenBalance, decimals: int) -> str:
        symbol = self.config.input_symbol
        self._print()
        self._print(f"{symbol} decimals: {decimals}")
        self._print(f"{symbol} account: {account}")
        self._print(f"{symbol} balance: {balance.ui_string}")
        if self.preset_amount is not None:
            return self.preset_amount
        return self._ask(f"\nHow much {symbol} to swap into {self.config.output_symbol}? (e.g. 12.34): ")

    def show_quote(self, venue: VenueConfig, amount_in: TokenAmount, expected_out: Decimal, quote: Quote) -> None:
        self._print()
        self._print(f"Quote (venue={venue.label}):")
        self._print(f"  In:  {format_amount(amount_in.ui)} {self.config.input_symbol}")
        self._print(f"  Out: ~{format_amount(expected_out)} {self.config.output_symbol} (estimate)")
        self._print(f"  priceImpactPct: {quote.price_impact_pct}")
        self._print(f"  slippageBps: {quote.slippage_bps}")

    def confirm(self) -> bool:
        word = self.config.confirm_word
        answer = self._ask(f"\nType {word} to execute the swap (anything else exits): ")
        if answer != word:
            self._print("Exiting without a transaction.")
            return False
        return True

    def show_receipt(self, receipt: SwapReceipt) -> None:
        self._print()
        self._print(f"Sent! Tx signature: {receipt.signature}")
        self._print(f"lastValidBlockHeight: {receipt.last_valid_block_height}")
        if receipt.prioritization_fee_lamports is not None:
            self._print(f"prioritizationFeeLamports: {receipt.prioritization_fee_lamports}")
