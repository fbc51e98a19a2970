import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import yaml

from .chain import ChainClient, RPCConfig
from .config import load_config, load_keypair, resolve_rpc_and_keypair
from .console import ConsolePrompter
from .errors import SwapError, UserCancelled
from .http_client import HttpClient
from .jupiter import JupiterClient
from .logging_setup import new_logger
from .pipeline import SwapPipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Swap a token on Solana through a single Jupiter-routed venue")
    parser.add_argument("--config", type=Path, default=None, help="YAML file overriding swap defaults")
    parser.add_argument("--rpc-url", default=None, help="RPC endpoint (else SOLANA_RPC_URL, Solana CLI config, mainnet)")
    parser.add_argument("--keypair", default=None, help="Keypair file (else SOLANA_KEYPAIR, Solana CLI config, ~/.config/solana/id.json)")
    parser.add_argument("--venue", default=None, help="Venue key or name; prompts when omitted")
    parser.add_argument("--amount", default=None, help="Input amount in UI units; prompts when omitted")
    parser.add_argument("--slippage-bps", type=int, default=None)
    parser.add_argument("--log-file", type=Path, default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    log = new_logger(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    try:
        config = load_config(args.config)
    except (OSError, yaml.YAMLError, TypeError, KeyError, ValueError) as exc:
        parser.error(f"cannot load config {args.config}: {exc}")
    if args.slippage_bps is not None:
        config = replace(config, slippage_bps=args.slippage_bps)

    prompter = ConsolePrompter(config, venue=args.venue, amount=args.amount)
    try:
        rpc_url, keypair_path = resolve_rpc_and_keypair(args.rpc_url, args.keypair)
        wallet = load_keypair(keypair_path)
        prompter.banner(rpc_url, str(keypair_path), str(wallet.pubkey()))

        chain = ChainClient(RPCConfig(endpoint=rpc_url, timeout=config.rpc_timeout))
        http = HttpClient(timeout=config.request_timeout, user_agent="dex-swap/1.0")
        jupiter = JupiterClient(config.jupiter_base_url, http)
        receipt = SwapPipeline(config, chain, jupiter, wallet, prompter).run()
    except UserCancelled:
        log.info("swap cancelled by operator")
        return 0
    except SwapError as exc:
        log.error("swap failed: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    prompter.show_receipt(receipt)
    return 0
