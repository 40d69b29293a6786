"""Order submission and status calls against the Fusion+ relayer.

Nothing here is retried. A failed submission or reveal surfaces as
``SubmissionError`` carrying the upstream status and body.
"""

import logging
from typing import Any, Dict, List, Sequence

from ..errors import StatusFetchError, SubmissionError
from .client import FusionApiClient
from .types import FusionOrder, HashLock, OrderStatusReport, Quote

logger = logging.getLogger(__name__)

ORDER_BUILD_PATH = "/orders/v1.0/order"
ORDER_SUBMIT_PATH = "/relayer/v1.0/submit"
SECRET_SUBMIT_PATH = "/relayer/v1.0/submit/secret"
ORDER_STATUS_PATH = "/orders/v1.0/order/status/{order_hash}"
READY_FILLS_PATH = "/orders/v1.0/order/{order_hash}/ready-to-accept-secret-fills"


class OrderSubmissionGateway:
    """Creates, submits and tracks orders on the upstream network."""

    def __init__(self, api: FusionApiClient, source: str = "stablecenter"):
        self._api = api
        self._source = source

    async def create_order(
        self,
        quote: Quote,
        wallet_address: str,
        hash_lock: HashLock,
        secret_hashes: Sequence[str],
    ) -> FusionOrder:
        """Build an order for a quote, locked with ``hash_lock``.

        Args:
            quote: Quote the order is built from
            wallet_address: Maker wallet
            hash_lock: Single or multi-fill hash lock
            secret_hashes: Hashes of the order's secrets, index-aligned

        Returns:
            FusionOrder with the upstream order hash

        Raises:
            SubmissionError: If the upstream call fails or returns no hash
        """
        payload = {
            "quoteId": quote.quote_id,
            "walletAddress": wallet_address,
            "hashLock": hash_lock.value,
            "preset": quote.preset_id,
            "source": self._source,
            "secretHashes": list(secret_hashes),
            "srcChainId": quote.src_chain_id,
            "dstChainId": quote.dst_chain_id,
        }
        data = await self._api.request("POST", ORDER_BUILD_PATH, SubmissionError, json=payload)

        order_hash = data.get("hash")
        if not order_hash:
            raise SubmissionError("Order build response is missing hash", body=str(data))

        logger.info("Order %s built for quote %s", order_hash, quote.quote_id)
        return FusionOrder(
            order_hash=order_hash,
            quote_id=data.get("quoteId") or quote.quote_id,
            order=data.get("order") or {},
        )

    async def submit_order(
        self,
        src_chain_id: int,
        order: Dict[str, Any],
        quote_id: str,
        secret_hashes: Sequence[str],
    ) -> Dict[str, str]:
        """Submit a built order to the relayer.

        An empty 2xx body counts as success.

        Raises:
            SubmissionError: On any transport or non-2xx failure
        """
        payload = {
            "srcChainId": src_chain_id,
            "order": order,
            "quoteId": quote_id,
            "secretHashes": list(secret_hashes),
        }
        await self._api.request(
            "POST", ORDER_SUBMIT_PATH, SubmissionError, json=payload, allow_empty=True
        )
        logger.info("Order for quote %s submitted on chain %s", quote_id, src_chain_id)
        return {"status": "submitted"}

    async def get_order_status(self, order_hash: str) -> OrderStatusReport:
        """Raises StatusFetchError on failure."""
        data = await self._api.request(
            "GET", ORDER_STATUS_PATH.format(order_hash=order_hash), StatusFetchError
        )
        try:
            return OrderStatusReport.from_dict(data, order_hash=order_hash)
        except (AttributeError, TypeError, ValueError) as exc:
            raise StatusFetchError(
                f"Malformed order status response: {data}", body=str(data)
            ) from exc

    async def get_ready_to_accept_secret_fills(self, order_hash: str) -> List[int]:
        """Indices of escrow fills that are deployed and can take their secret.

        Raises:
            StatusFetchError: On failure or a malformed fills list
        """
        data = await self._api.request(
            "GET", READY_FILLS_PATH.format(order_hash=order_hash), StatusFetchError
        )
        try:
            return [int(fill["idx"]) for fill in data.get("fills") or []]
        except (KeyError, TypeError, ValueError) as exc:
            raise StatusFetchError(
                f"Malformed ready-to-accept-secret-fills response: {data}",
                body=str(data),
            ) from exc

    async def submit_secret(self, order_hash: str, secret: str) -> Dict[str, Any]:
        """Reveal one secret to the relayer. Irreversible.

        Raises:
            SubmissionError: On failure
        """
        ack = await self._api.request(
            "POST",
            SECRET_SUBMIT_PATH,
            SubmissionError,
            json={"orderHash": order_hash, "secret": secret},
            allow_empty=True,
        )
        return ack or {"success": True}
