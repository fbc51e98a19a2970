"""Associated token accounts: address derivation and on-demand creation."""

from __future__ import annotations

import logging
from typing import Optional

from solders.instruction import AccountMeta, Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from .chain import ChainClient
from .constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    RENT_SYSVAR_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from .errors import AccountCreationFailed, DerivationFailed, RpcRequestFailed
from .transactions import MessageSigner

LOG = logging.getLogger(__name__)


def derive_associated_address(
    owner: Pubkey,
    mint: Pubkey,
    token_program: Pubkey = TOKEN_PROGRAM_ID,
    associated_program: Pubkey = ASSOCIATED_TOKEN_PROGRAM_ID,
) -> Pubkey:
    seeds = [bytes(owner), bytes(token_program), bytes(mint)]
    try:
        address, _bump = Pubkey.find_program_address(seeds, associated_program)
    except (TypeError, ValueError) as exc:
        raise DerivationFailed(f"cannot derive associated account for {owner} / {mint}", cause=exc) from exc
    return address


def create_associated_account_instruction(
    payer: Pubkey,
    owner: Pubkey,
    mint: Pubkey,
    token_program: Pubkey = TOKEN_PROGRAM_ID,
    associated_program: Pubkey = ASSOCIATED_TOKEN_PROGRAM_ID,
) -> Instruction:
    # The associated token program reads everything from account order; data stays empty.
    address = derive_associated_address(owner, mint, token_program, associated_program)
    return Instruction(
        program_id=associated_program,
        data=b"",
        accounts=[
            AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
            AccountMeta(pubkey=address, is_signer=False, is_writable=True),
            AccountMeta(pubkey=owner, is_signer=False, is_writable=False),
            AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
            AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
            AccountMeta(pubkey=token_program, is_signer=False, is_writable=False),
            AccountMeta(pubkey=RENT_SYSVAR_ID, is_signer=False, is_writable=False),
        ],
    )


class AccountProvisioner:
    def __init__(
        self,
        chain: ChainClient,
        token_program: Pubkey = TOKEN_PROGRAM_ID,
        associated_program: Pubkey = ASSOCIATED_TOKEN_PROGRAM_ID,
    ) -> None:
        self.chain = chain
        self.token_program = token_program
        self.associated_program = associated_program

    def ensure_exists(self, owner: Pubkey, payer: MessageSigner, mint: Pubkey, address: Pubkey) -> Optional[str]:
        """Create the associated account if it is missing.

        Returns the creation signature, or ``None`` when the account already
        exists. A failed creation is never retried: a transaction that landed
        but timed out would otherwise pay rent and fees twice.
        """
        if self.chain.account_exists(address):
            LOG.debug("associated account %s already exists", address)
            return None

        LOG.info("associated account %s does not exist, creating it", address)
        ix = create_associated_account_instruction(
            payer.pubkey(), owner, mint, self.token_program, self.associated_program
        )
        try:
            blockhash, last_valid_block_height = self.chain.latest_blockhash()
            message = Message.new_with_blockhash([ix], payer.pubkey(), blockhash)
            tx = Transaction.populate(message, [payer.sign_message(bytes(message))])
            signature = self.chain.send_and_confirm(bytes(tx), last_valid_block_height)
        except RpcRequestFailed as exc:
            raise AccountCreationFailed(
                f"could not create associated account {address} (is there SOL for fees?)",
                body=exc.body or exc.message,
                cause=exc,
            ) from exc

        LOG.info("associated account %s created in %s", address, signature)
        return str(signature)
