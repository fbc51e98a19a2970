"""Thin Solana RPC facade that maps client failures onto swap errors."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from solana.exceptions import SolanaRpcException
from solana.rpc.api import Client
from solana.rpc.commitment import Commitment, Confirmed, Processed
from solana.rpc.core import RPCException, TransactionExpiredBlockheightExceededError, UnconfirmedTxError
from solana.rpc.types import TxOpts
from solders.hash import Hash
from solders.pubkey import Pubkey
from solders.signature import Signature

from .errors import RpcRequestFailed

LOG = logging.getLogger(__name__)

_CLIENT_ERRORS = (RPCException, SolanaRpcException)
_CONFIRM_ERRORS = _CLIENT_ERRORS + (UnconfirmedTxError, TransactionExpiredBlockheightExceededError)


@dataclass(frozen=True)
class RPCConfig:
    endpoint: str
    commitment: Commitment = Confirmed
    timeout: float = 30.0


@dataclass(frozen=True)
class TokenBalance:
    raw: int
    ui_string: str


class ChainClient:
    """Blocking RPC calls used by the swap pipeline. Nothing here retries."""

    def __init__(self, config: RPCConfig, client: Optional[Client] = None) -> None:
        self.config = config
        self.client = client or Client(config.endpoint, commitment=config.commitment, timeout=config.timeout)

    def get_token_decimals(self, mint: Pubkey) -> int:
        try:
            resp = self.client.get_token_supply(mint)
        except _CLIENT_ERRORS as exc:
            raise RpcRequestFailed(f"cannot read token supply for {mint}", cause=exc) from exc
        value = getattr(resp, "value", None)
        if value is None:
            raise RpcRequestFailed(f"cannot read token supply for {mint}", body=str(resp))
        return value.decimals

    def get_token_balance(self, account: Pubkey) -> TokenBalance:
        try:
            resp = self.client.get_token_account_balance(account)
        except _CLIENT_ERRORS as exc:
            raise RpcRequestFailed(f"cannot read token balance of {account}", cause=exc) from exc
        value = getattr(resp, "value", None)
        if value is None:
            raise RpcRequestFailed(f"cannot read token balance of {account}", body=str(resp))
        return TokenBalance(raw=int(value.amount), ui_string=value.ui_amount_string)

    def account_exists(self, address: Pubkey) -> bool:
        """Checked at processed commitment so a just-created account is seen."""
        try:
            resp = self.client.get_account_info(address, commitment=Processed)
        except _CLIENT_ERRORS as exc:
            raise RpcRequestFailed(f"cannot read account {address}", cause=exc) from exc
        return resp.value is not None

    def latest_blockhash(self) -> Tuple[Hash, int]:
        try:
            resp = self.client.get_latest_blockhash()
        except _CLIENT_ERRORS as exc:
            raise RpcRequestFailed("cannot fetch latest blockhash", cause=exc) from exc
        return resp.value.blockhash, resp.value.last_valid_block_height

    def send_raw(self, payload: bytes) -> Signature:
        """Submit a signed transaction without waiting for confirmation."""
        opts = TxOpts(skip_confirmation=True, preflight_commitment=self.config.commitment)
        try:
            resp = self.client.send_raw_transaction(payload, opts=opts)
        except _CLIENT_ERRORS as exc:
            raise RpcRequestFailed("transaction rejected", body=_rpc_text(exc), cause=exc) from exc
        return resp.value

    def send_and_confirm(self, payload: bytes, last_valid_block_height: int) -> Signature:
        signature = self.send_raw(payload)
        LOG.info("submitted %s, waiting for %s", signature, Confirmed)
        try:
            resp = self.client.confirm_transaction(
                signature,
                commitment=Confirmed,
                last_valid_block_height=last_valid_block_height,
            )
        except _CONFIRM_ERRORS as exc:
            raise RpcRequestFailed(f"transaction {signature} was not confirmed", body=_rpc_text(exc), cause=exc) from exc

        statuses = resp.value
        if statuses and statuses[0] is not None and statuses[0].err is not None:
            raise RpcRequestFailed(f"transaction {signature} failed on chain", body=str(statuses[0].err))
        return signature


def _rpc_text(exc: BaseException) -> str:
    """The node's error text; ``RPCException`` carries it as its only argument."""
    if exc.args:
        return str(exc.args[0])
    return str(exc)
