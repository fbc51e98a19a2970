"""Sign the routing service's prebuilt transaction and hand it to the chain."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Protocol

from solders.message import to_bytes_versioned
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from .chain import ChainClient
from .errors import DecodeFailed, DeserializeFailed, RpcRequestFailed, SigningFailed, SubmissionFailed

LOG = logging.getLogger(__name__)


class MessageSigner(Protocol):
    """Anything that can sign a message; ``solders.keypair.Keypair`` qualifies."""

    def pubkey(self) -> Pubkey: ...

    def sign_message(self, message: bytes) -> Signature: ...


def decode_transaction(unsigned_tx_base64: str) -> VersionedTransaction:
    try:
        raw = base64.b64decode(unsigned_tx_base64, validate=True)
    except (binascii.Error, ValueError, TypeError) as exc:
        raise DecodeFailed("swap transaction is not valid base64", cause=exc) from exc
    if not raw:
        raise DecodeFailed("swap transaction is empty")

    try:
        return VersionedTransaction.from_bytes(raw)
    except Exception as exc:  # solders raises its own error types for bad bincode
        raise DeserializeFailed("cannot deserialize versioned transaction", cause=exc) from exc


def sign_transaction(tx: VersionedTransaction, signer: MessageSigner) -> VersionedTransaction:
    message = tx.message
    header = message.header
    if header.num_required_signatures != 1:
        raise SigningFailed(f"transaction needs {header.num_required_signatures} signatures, wallet provides one")
    fee_payer = message.account_keys[0]
    if fee_payer != signer.pubkey():
        raise SigningFailed(f"transaction fee payer {fee_payer} is not the wallet {signer.pubkey()}")

    try:
        signature = signer.sign_message(to_bytes_versioned(message))
    except (TypeError, ValueError) as exc:
        raise SigningFailed("wallet could not sign the transaction", cause=exc) from exc
    return VersionedTransaction.populate(message, [signature])


class TransactionSubmitter:
    def __init__(self, chain: ChainClient) -> None:
        self.chain = chain

    def finalize_and_submit(self, unsigned_tx_base64: str, signer: MessageSigner) -> str:
        tx = decode_transaction(unsigned_tx_base64)
        signed = sign_transaction(tx, signer)
        try:
            signature = self.chain.send_raw(bytes(signed))
        except RpcRequestFailed as exc:
            raise SubmissionFailed("chain rejected the swap transaction", body=exc.body, cause=exc) from exc
        LOG.info("swap transaction submitted: %s", signature)
        return str(signature)
