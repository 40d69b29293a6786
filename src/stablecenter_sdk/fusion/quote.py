"""Read-only quote fetching for cross-chain swaps."""

import logging
from typing import Any, Dict, Optional

from ..errors import QuoteFetchError
from .client import FusionApiClient
from .params import OrderParams, validate_order_params
from .tokens import ZERO_ADDRESS, resolve_token
from .types import Quote

logger = logging.getLogger(__name__)

QUOTE_PATH = "/quoter/v1.0/quote"


def _select_preset(data: Dict[str, Any], preferred: str) -> str:
    presets = data.get("presets") or {}
    if not isinstance(presets, dict):
        raise QuoteFetchError("Quote response presets is not an object", body=str(data))
    if preferred in presets:
        return preferred
    recommended = data.get("recommendedPreset")
    if isinstance(recommended, str) and recommended in presets:
        return recommended
    if presets:
        return next(iter(presets))
    raise QuoteFetchError("Quote response has no presets", body=str(data))


def parse_quote(
    data: Dict[str, Any],
    order_params: OrderParams,
    src_token: str,
    dst_token: str,
    preset: str,
) -> Quote:
    """Build a Quote from an upstream response body.

    Raises:
        QuoteFetchError: If required fields are missing or malformed
    """
    quote_id = data.get("quoteId")
    if not quote_id:
        raise QuoteFetchError("Quote response is missing quoteId", body=str(data))
    if data.get("dstTokenAmount") in (None, ""):
        raise QuoteFetchError("Quote response is missing dstTokenAmount", body=str(data))

    preset_id = _select_preset(data, preset)
    preset_data = data["presets"][preset_id] or {}
    if not isinstance(preset_data, dict):
        raise QuoteFetchError(f"Quote preset {preset_id} is not an object", body=str(data))
    try:
        secret_count = int(preset_data.get("secretsCount", 1))
    except (TypeError, ValueError) as exc:
        raise QuoteFetchError(
            f"Invalid secretsCount in preset {preset_id}", body=str(data)
        ) from exc
    if secret_count < 1:
        raise QuoteFetchError(
            f"Invalid secretsCount in preset {preset_id}: {secret_count}", body=str(data)
        )

    estimated_gas = data.get("estimatedGas")
    return Quote(
        src_chain_id=order_params.src_chain_id,
        dst_chain_id=order_params.dst_chain_id,
        src_token_address=src_token,
        dst_token_address=dst_token,
        amount=order_params.amount,
        src_token_amount=str(data.get("srcTokenAmount") or order_params.amount),
        dst_token_amount=str(data["dstTokenAmount"]),
        quote_id=str(quote_id),
        preset_id=preset_id,
        required_secret_count=secret_count,
        presets=dict(data["presets"]),
        estimated_gas=str(estimated_gas) if estimated_gas is not None else None,
    )


class QuoteClient:
    """Fetches quotes. Read-only: creates no orders, touches no keys."""

    def __init__(self, api: FusionApiClient, preset: str = "fast"):
        self._api = api
        self._preset = preset

    async def get_quote(
        self,
        order_params: OrderParams,
        wallet_address: Optional[str] = None,
    ) -> Quote:
        """Get a cross-chain swap quote.

        Args:
            order_params: Swap parameters; missing tokens default to USDC
            wallet_address: Wallet the quote is for (zero address for estimates)

        Returns:
            Quote

        Raises:
            ValidationError: If the parameters are invalid
            UnresolvedTokenError: If a token is missing and has no default
            QuoteFetchError: If the upstream call fails
        """
        validate_order_params(order_params)

        src_token = resolve_token(order_params.src_chain_id, order_params.src_token_address)
        dst_token = resolve_token(order_params.dst_chain_id, order_params.dst_token_address)

        payload = {
            "amount": order_params.amount,
            "srcChainId": order_params.src_chain_id,
            "dstChainId": order_params.dst_chain_id,
            "srcTokenAddress": src_token,
            "dstTokenAddress": dst_token,
            "enableEstimate": True,
            "walletAddress": wallet_address or ZERO_ADDRESS,
        }
        logger.info(
            "Requesting quote: %s %s on chain %s -> %s on chain %s",
            order_params.amount,
            src_token,
            order_params.src_chain_id,
            dst_token,
            order_params.dst_chain_id,
        )

        data = await self._api.request("POST", QUOTE_PATH, QuoteFetchError, json=payload)
        quote = parse_quote(data, order_params, src_token, dst_token, self._preset)

        logger.info(
            "Quote %s received: %s -> %s (preset=%s, secrets=%d)",
            quote.quote_id,
            quote.src_token_amount,
            quote.dst_token_amount,
            quote.preset_id,
            quote.required_secret_count,
        )
        return quote
