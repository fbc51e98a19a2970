import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from solders.keypair import Keypair

from .constants import DEFAULT_RPC_URL, JUPITER_BASE_URL, USDT_MINT, WSOL_MINT
from .errors import InvalidVenue, KeypairLoadError

SOLANA_CLI_CONFIG = Path("~/.config/solana/cli/config.yml")
DEFAULT_KEYPAIR_PATH = Path("~/.config/solana/id.json")


@dataclass(frozen=True)
class VenueConfig:
    key: str
    label: str
    # value of the quote API's `dexes` filter
    dex: str


DEFAULT_VENUES: Tuple[VenueConfig, ...] = (
    VenueConfig(key="1", label="Raydium", dex="Raydium"),
    VenueConfig(key="2", label="Meteora DLMM", dex="Meteora DLMM"),
)


@dataclass(frozen=True)
class SwapConfig:
    input_mint: str = USDT_MINT
    input_symbol: str = "USDT"
    output_mint: str = WSOL_MINT
    output_symbol: str = "SOL"
    slippage_bps: int = 50
    jupiter_base_url: str = JUPITER_BASE_URL
    request_timeout: float = 15.0
    rpc_timeout: float = 30.0
    confirm_word: str = "SWAP"
    venues: Tuple[VenueConfig, ...] = field(default=DEFAULT_VENUES)

    def venue(self, key_or_name: str) -> VenueConfig:
        wanted = key_or_name.strip().lower()
        for venue in self.venues:
            if wanted in (venue.key.lower(), venue.label.lower(), venue.dex.lower()):
                return venue
        raise InvalidVenue(f"unknown venue {key_or_name!r}")


def load_yaml(path: Path) -> Dict[str, Any]:
    with path.expanduser().open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError(f"{path}: expected a mapping at the top level, got {type(data).__name__}")
    return data


def load_config(path: Optional[Path]) -> SwapConfig:
    config = SwapConfig()
    if path is None:
        return config

    data = load_yaml(path)
    venues = data.pop("venues", None)
    if venues is not None:
        data["venues"] = tuple(
            VenueConfig(key=str(v["key"]), label=v["label"], dex=v.get("dex", v["label"])) for v in venues
        )
    return replace(config, **data)


def load_cli_config(path: Path = SOLANA_CLI_CONFIG) -> Dict[str, Any]:
    """Solana CLI settings, or an empty mapping when the file is absent or unreadable."""
    try:
        return load_yaml(path)
    except (OSError, TypeError, yaml.YAMLError):
        return {}


def resolve_rpc_and_keypair(
    rpc_override: Optional[str] = None,
    keypair_override: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    cli_config: Optional[Mapping[str, Any]] = None,
) -> Tuple[str, Path]:
    env = os.environ if env is None else env
    cli = load_cli_config() if cli_config is None else cli_config

    rpc = rpc_override or env.get("SOLANA_RPC_URL") or cli.get("json_rpc_url") or DEFAULT_RPC_URL
    keypair = keypair_override or env.get("SOLANA_KEYPAIR") or cli.get("keypair_path") or str(DEFAULT_KEYPAIR_PATH)
    return rpc, Path(keypair).expanduser()


def load_keypair(path: Path) -> Keypair:
    try:
        secret = json.loads(path.read_text(encoding="utf-8"))
        return Keypair.from_bytes(bytes(secret))
    except (OSError, TypeError, ValueError) as exc:
        raise KeypairLoadError(f"cannot read keypair {path}", cause=exc) from exc
