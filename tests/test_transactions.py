import base64
import unittest

from solders.message import to_bytes_versioned
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from dex_swap.errors import DecodeFailed, DeserializeFailed, RpcRequestFailed, SigningFailed, SubmissionFailed
from dex_swap.transactions import TransactionSubmitter, decode_transaction

from .fakes import CountingSigner, FakeChain, make_keypair, unsigned_swap_transaction


class FinalizeAndSubmitTests(unittest.TestCase):
    def test_signs_unchanged_message_and_submits_once(self) -> None:
        keypair = make_keypair()
        unsigned_b64 = unsigned_swap_transaction(keypair.pubkey())
        original = decode_transaction(unsigned_b64)
        chain = FakeChain()

        signature = TransactionSubmitter(chain).finalize_and_submit(unsigned_b64, keypair)

        self.assertEqual(len(chain.sent), 1)
        sent = VersionedTransaction.from_bytes(chain.sent[0])
        self.assertEqual(to_bytes_versioned(sent.message), to_bytes_versioned(original.message))
        self.assertEqual(len(sent.signatures), 1)
        self.assertEqual(sent.signatures[0], keypair.sign_message(to_bytes_versioned(original.message)))
        self.assertEqual(signature, str(Signature.default()))

    def test_malformed_base64_never_reaches_signer(self) -> None:
        signer = CountingSigner(make_keypair())
        chain = FakeChain()

        with self.assertRaises(DecodeFailed):
            TransactionSubmitter(chain).finalize_and_submit("not*base64!", signer)

        self.assertEqual(signer.calls, 0)
        self.assertEqual(chain.sent, [])

    def test_garbage_payload_never_reaches_signer(self) -> None:
        signer = CountingSigner(make_keypair())
        chain = FakeChain()
        garbage = base64.b64encode(b"\x01\x02\x03").decode("ascii")

        with self.assertRaises(DeserializeFailed):
            TransactionSubmitter(chain).finalize_and_submit(garbage, signer)

        self.assertEqual(signer.calls, 0)
        self.assertEqual(chain.sent, [])

    def test_rejects_transaction_for_another_fee_payer(self) -> None:
        unsigned_b64 = unsigned_swap_transaction(make_keypair(1).pubkey())
        signer = CountingSigner(make_keypair(2))

        with self.assertRaises(SigningFailed):
            TransactionSubmitter(FakeChain()).finalize_and_submit(unsigned_b64, signer)

        self.assertEqual(signer.calls, 0)

    def test_rejection_carries_node_text(self) -> None:
        keypair = make_keypair()
        chain = FakeChain(send_error=RpcRequestFailed("transaction rejected", body="Blockhash not found"))

        with self.assertRaises(SubmissionFailed) as ctx:
            TransactionSubmitter(chain).finalize_and_submit(unsigned_swap_transaction(keypair.pubkey()), keypair)

        self.assertEqual(ctx.exception.body, "Blockhash not found")
        self.assertIn("Blockhash not found", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
