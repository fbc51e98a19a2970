"""One swap attempt, start to finish.

The order is fixed: token decimals, associated account (created if missing),
balance, amount, quote, operator confirmation, swap build, sign, submit. Every
error is terminal; nothing is retried. Declining at the confirmation prompt
raises ``UserCancelled`` after the quote and before any transaction exists.
"""

import logging
from typing import Optional

from solders.pubkey import Pubkey

from .accounts import AccountProvisioner, derive_associated_address
from .amounts import from_base_units, token_amount
from .chain import ChainClient
from .config import SwapConfig
from .console import ConsolePrompter
from .constants import NATIVE_DECIMALS, WSOL_MINT
from .errors import InsufficientBalance, UserCancelled
from .jupiter import JupiterClient
from .models import SwapReceipt
from .transactions import MessageSigner, TransactionSubmitter

LOG = logging.getLogger(__name__)


class SwapPipeline:
    def __init__(
        self,
        config: SwapConfig,
        chain: ChainClient,
        jupiter: JupiterClient,
        wallet: MessageSigner,
        prompter: ConsolePrompter,
        provisioner: Optional[AccountProvisioner] = None,
        submitter: Optional[TransactionSubmitter] = None,
    ) -> None:
        self.config = config
        self.chain = chain
        self.jupiter = jupiter
        self.wallet = wallet
        self.prompter = prompter
        self.provisioner = provisioner or AccountProvisioner(chain)
        self.submitter = submitter or TransactionSubmitter(chain)

    def output_decimals(self) -> int:
        if self.config.output_mint == WSOL_MINT:
            return NATIVE_DECIMALS
        return self.chain.get_token_decimals(Pubkey.from_string(self.config.output_mint))

    def run(self) -> SwapReceipt:
        owner = self.wallet.pubkey()
        input_mint = Pubkey.from_string(self.config.input_mint)
        venue = self.prompter.choose_venue(self.config.venues)

        in_decimals = self.chain.get_token_decimals(input_mint)
        out_decimals = self.output_decimals()

        account = derive_associated_address(owner, input_mint)
        self.provisioner.ensure_exists(owner, self.wallet, input_mint, account)
        balance = self.chain.get_token_balance(account)

        amount_in = token_amount(self.prompter.ask_amount(str(account), balance, in_decimals), in_decimals)
        if amount_in.raw > balance.raw:
            raise InsufficientBalance(
                f"not enough {self.config.input_symbol}: need {amount_in.raw}, available (raw) {balance.raw}"
            )

        quote = self.jupiter.get_quote(
            self.config.input_mint,
            self.config.output_mint,
            amount_in.raw,
            self.config.slippage_bps,
            venue.dex,
        )
        expected_out = from_base_units(quote.out_amount, out_decimals)
        LOG.info("quote: in=%s out=%s impact=%s%%", quote.in_amount, quote.out_amount, quote.price_impact_pct)
        self.prompter.show_quote(venue, amount_in, expected_out, quote)

        if not self.prompter.confirm():
            raise UserCancelled("swap declined by operator")

        swap = self.jupiter.build_swap(str(owner), quote)
        signature = self.submitter.finalize_and_submit(swap.swap_transaction, self.wallet)
        return SwapReceipt(
            signature=signature,
            amount_in=amount_in,
            expected_out=expected_out,
            last_valid_block_height=swap.last_valid_block_height,
            prioritization_fee_lamports=swap.prioritization_fee_lamports,
        )
