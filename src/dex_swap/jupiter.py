import logging
from typing import Any, Dict, Type

from requests import RequestException, Response

from .errors import QuoteRequestFailed, SwapBuildFailed, SwapError
from .http_client import HttpClient
from .models import Quote, SwapTransaction

LOG = logging.getLogger(__name__)


class JupiterClient:
    """Quote and swap-build calls against the Jupiter swap API (v1)."""

    def __init__(self, base_url: str, http: HttpClient) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = http

    @property
    def quote_url(self) -> str:
        return f"{self.base_url}/swap/v1/quote"

    @property
    def swap_url(self) -> str:
        return f"{self.base_url}/swap/v1/swap"

    def quote_params(self, in_mint: str, out_mint: str, amount: int, slippage_bps: int, venue: str) -> Dict[str, str]:
        return {
            "inputMint": in_mint,
            "outputMint": out_mint,
            "amount": str(amount),
            "swapMode": "ExactIn",
            "slippageBps": str(slippage_bps),
            "dexes": venue,
        }

    def get_quote(self, in_mint: str, out_mint: str, amount: int, slippage_bps: int, venue: str) -> Quote:
        params = self.quote_params(in_mint, out_mint, amount, slippage_bps, venue)
        LOG.info("requesting quote %s -> %s amount=%s venue=%s", in_mint, out_mint, amount, venue)
        try:
            response = self.http.get(self.quote_url, params=params)
        except RequestException as exc:
            raise QuoteRequestFailed("quote request failed", cause=exc) from exc
        return self.parse_quote(_json_or_raise(response, QuoteRequestFailed, "quote"))

    def parse_quote(self, response: Dict[str, Any]) -> Quote:
        try:
            return Quote(
                input_mint=response["inputMint"],
                in_amount=int(response["inAmount"]),
                output_mint=response["outputMint"],
                out_amount=int(response["outAmount"]),
                other_amount_threshold=int(response["otherAmountThreshold"]),
                swap_mode=response["swapMode"],
                slippage_bps=int(response["slippageBps"]),
                price_impact_pct=str(response["priceImpactPct"]),
                route_plan=response["routePlan"],
                raw=response,
            )
        except KeyError as exc:
            raise QuoteRequestFailed(f"quote response missing field {exc}", body=str(response)) from None
        except (TypeError, ValueError) as exc:
            raise QuoteRequestFailed("quote response has malformed amounts", body=str(response), cause=exc) from None

    def build_swap(self, user_public_key: str, quote: Quote) -> SwapTransaction:
        payload = {
            "userPublicKey": user_public_key,
            "quoteResponse": quote.raw,
            "wrapAndUnwrapSol": True,
            "dynamicComputeUnitLimit": True,
        }
        try:
            response = self.http.post_json(self.swap_url, payload)
        except RequestException as exc:
            raise SwapBuildFailed("swap build request failed", cause=exc) from exc

        body = _json_or_raise(response, SwapBuildFailed, "swap build")
        try:
            fee = body.get("prioritizationFeeLamports")
            return SwapTransaction(
                swap_transaction=body["swapTransaction"],
                last_valid_block_height=int(body["lastValidBlockHeight"]),
                prioritization_fee_lamports=int(fee) if fee is not None else None,
            )
        except KeyError as exc:
            raise SwapBuildFailed(f"swap response missing field {exc}", body=str(body)) from None
        except (TypeError, ValueError) as exc:
            raise SwapBuildFailed("swap response has malformed fields", body=str(body), cause=exc) from None


def _json_or_raise(response: Response, error: Type[SwapError], what: str) -> Dict[str, Any]:
    if not 200 <= response.status_code < 300:
        raise error(f"{what} error", http_status=response.status_code, body=response.text)
    try:
        body = response.json()
    except ValueError as exc:
        raise error(f"{what} response was not valid JSON", http_status=response.status_code, body=response.text) from exc
    if not isinstance(body, dict):
        raise error(f"{what} response was not a JSON object", http_status=response.status_code, body=response.text)
    return body
