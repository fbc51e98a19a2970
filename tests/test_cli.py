import tempfile
import unittest
from pathlib import Path
from unittest import mock

from dex_swap import cli
from dex_swap.amounts import token_amount
from dex_swap.errors import QuoteRequestFailed, UserCancelled
from dex_swap.models import SwapReceipt

from .fakes import make_keypair


class MainExitStatusTests(unittest.TestCase):
    def _run(self, outcome):
        pipeline = mock.Mock()
        if isinstance(outcome, BaseException):
            pipeline.run.side_effect = outcome
        else:
            pipeline.run.return_value = outcome
        with mock.patch.object(cli, "resolve_rpc_and_keypair", return_value=("http://rpc", "/tmp/id.json")), \
                mock.patch.object(cli, "load_keypair", return_value=make_keypair()), \
                mock.patch.object(cli, "SwapPipeline", return_value=pipeline), \
                mock.patch("sys.stdout"), mock.patch("sys.stderr"):
            return cli.main(["--venue", "1", "--amount", "1"])

    def test_success_exits_zero(self) -> None:
        receipt = SwapReceipt(
            signature="sig",
            amount_in=token_amount("1", 6),
            expected_out=token_amount("0.05", 9).ui,
            last_valid_block_height=10,
        )
        self.assertEqual(self._run(receipt), 0)

    def test_cancel_exits_zero(self) -> None:
        self.assertEqual(self._run(UserCancelled("declined")), 0)

    def test_swap_error_exits_non_zero(self) -> None:
        self.assertEqual(self._run(QuoteRequestFailed("quote error", http_status=400, body="bad dex")), 1)


class MainConfigErrorTests(unittest.TestCase):
    def test_non_mapping_config_is_a_usage_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "swap.yaml"
            path.write_text("just a string\n", encoding="utf-8")
            with mock.patch("sys.stderr"), self.assertRaises(SystemExit) as ctx:
                cli.main(["--config", str(path)])
        self.assertEqual(ctx.exception.code, 2)

    def test_confirmation_cannot_be_skipped_from_the_command_line(self) -> None:
        with mock.patch("sys.stderr"), self.assertRaises(SystemExit) as ctx:
            cli.main(["--yes"])
        self.assertEqual(ctx.exception.code, 2)


if __name__ == "__main__":
    unittest.main()
