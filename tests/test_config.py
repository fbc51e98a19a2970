import json
import tempfile
import unittest
from pathlib import Path

from dex_swap.config import DEFAULT_KEYPAIR_PATH, SwapConfig, load_config, load_keypair, resolve_rpc_and_keypair
from dex_swap.constants import DEFAULT_RPC_URL
from dex_swap.errors import InvalidVenue, KeypairLoadError

from .fakes import make_keypair


class ResolveRpcAndKeypairTests(unittest.TestCase):
    CLI = {"json_rpc_url": "http://cli:8899", "keypair_path": "/cli/id.json"}
    ENV = {"SOLANA_RPC_URL": "http://env:8899", "SOLANA_KEYPAIR": "/env/id.json"}

    def test_explicit_override_wins(self) -> None:
        rpc, keypair = resolve_rpc_and_keypair("http://flag:8899", "/flag/id.json", env=self.ENV, cli_config=self.CLI)
        self.assertEqual(rpc, "http://flag:8899")
        self.assertEqual(keypair, Path("/flag/id.json"))

    def test_environment_before_cli_config(self) -> None:
        rpc, keypair = resolve_rpc_and_keypair(env=self.ENV, cli_config=self.CLI)
        self.assertEqual(rpc, "http://env:8899")
        self.assertEqual(keypair, Path("/env/id.json"))

    def test_cli_config_before_defaults(self) -> None:
        rpc, keypair = resolve_rpc_and_keypair(env={}, cli_config=self.CLI)
        self.assertEqual(rpc, "http://cli:8899")
        self.assertEqual(keypair, Path("/cli/id.json"))

    def test_defaults(self) -> None:
        rpc, keypair = resolve_rpc_and_keypair(env={}, cli_config={})
        self.assertEqual(rpc, DEFAULT_RPC_URL)
        self.assertEqual(keypair, DEFAULT_KEYPAIR_PATH.expanduser())


class LoadKeypairTests(unittest.TestCase):
    def test_reads_json_byte_array(self) -> None:
        keypair = make_keypair()
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "id.json"
            path.write_text(json.dumps(list(bytes(keypair))), encoding="utf-8")
            self.assertEqual(load_keypair(path).pubkey(), keypair.pubkey())

    def test_missing_or_malformed_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(KeypairLoadError):
                load_keypair(Path(tmp) / "missing.json")
            bad = Path(tmp) / "bad.json"
            bad.write_text("[1, 2, 3]", encoding="utf-8")
            with self.assertRaises(KeypairLoadError):
                load_keypair(bad)


class SwapConfigTests(unittest.TestCase):
    def test_yaml_overrides_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "swap.yaml"
            path.write_text(
                "slippage_bps: 100\n"
                "jupiter_base_url: http://localhost:8080\n"
                "venues:\n"
                "  - {key: a, label: Orca, dex: Whirlpool}\n",
                encoding="utf-8",
            )
            config = load_config(path)

        self.assertEqual(config.slippage_bps, 100)
        self.assertEqual(config.jupiter_base_url, "http://localhost:8080")
        self.assertEqual(config.venue("a").dex, "Whirlpool")
        self.assertEqual(config.input_mint, SwapConfig().input_mint)

    def test_venue_lookup_by_key_or_name(self) -> None:
        config = SwapConfig()
        self.assertEqual(config.venue("1").dex, "Raydium")
        self.assertEqual(config.venue("meteora dlmm").key, "2")
        with self.assertRaises(InvalidVenue):
            config.venue("Orca")

    def test_top_level_must_be_a_mapping(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "swap.yaml"
            path.write_text("- Raydium\n- Orca\n", encoding="utf-8")
            with self.assertRaises(TypeError):
                load_config(path)

    def test_empty_file_keeps_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "swap.yaml"
            path.write_text("", encoding="utf-8")
            self.assertEqual(load_config(path), SwapConfig())


if __name__ == "__main__":
    unittest.main()
