"""Non-custodial swap service.

Entry point for the HTTP layer. The backend never holds the user's keys:

1. ``prepare_order`` quotes the swap, generates the order's secrets and hash
   lock, builds the upstream order and returns a message for the wallet.
2. The user's wallet signs the message off-path.
3. ``submit_signed_order`` checks freshness, consumes the prepared order
   exactly once, verifies the signature and submits the order.
4. ``monitor_order`` reveals secrets as escrows deploy and waits for a
   terminal status.

Example:
    ```python
    async with SecureSwapService({"auth_key": "..."}) as service:
        prepared = await service.prepare_order(
            OrderParams(amount="1000000", src_chain_id=1, dst_chain_id=8453),
            wallet,
        )
        signature = sign_swap_message(private_key, prepared.message_to_sign)
        submitted = await service.submit_signed_order(
            SignedOrderRequest(
                preparation_hash=prepared.preparation_hash,
                user_wallet_address=wallet,
                signature=signature,
                timestamp=prepared.timestamp,
                nonce=prepared.nonce,
            )
        )
        final = await service.monitor_order(submitted.order_hash, submitted.secrets)
    ```
"""

import logging
from typing import Callable, Dict, Optional, Sequence, Tuple

import httpx

from .auth.challenge import build_swap_message, create_preparation_hash, generate_nonce
from .auth.signing import current_timestamp_ms, validate_timestamp, verify_user_signature
from .auth.store import NonceRegistry, PreparedOrderStore
from .auth.types import (
    ApprovalInfo,
    PreparationRecord,
    PreparedOrder,
    SignedOrderRequest,
    SubmittedOrder,
)
from .config import ResolvedSwapServiceConfig, SwapServiceConfig, resolve_config
from .errors import ReplayError, SignatureError, WalletMismatchError
from .fusion.client import FusionApiClient
from .fusion.gateway import OrderSubmissionGateway
from .fusion.hashlock import build_hash_lock, build_secret_set
from .fusion.monitor import CheckpointStore, CompletionMonitor
from .fusion.params import OrderParams, validate_order_params, validate_wallet_address
from .fusion.quote import QuoteClient
from .fusion.tokens import (
    AGGREGATION_ROUTER_V6,
    get_chain_tokens,
    get_supported_chains,
)
from .fusion.types import OrderStatusReport, Quote
from .store import ExpiringStore, MemoryStore

logger = logging.getLogger(__name__)


class SecureSwapService:
    """Prepare, submit and monitor cross-chain swaps without custody."""

    def __init__(
        self,
        config: Optional[SwapServiceConfig] = None,
        store: Optional[ExpiringStore] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        clock_ms: Callable[[], int] = current_timestamp_ms,
    ):
        """Initialize the service.

        Args:
            config: Service configuration (``auth_key`` is required)
            store: Backing store for prepared orders, nonces and monitor
                checkpoints (default: in-process MemoryStore)
            http_client: Optional httpx client, e.g. with a mock transport
            clock_ms: Current time in milliseconds
        """
        self._config: ResolvedSwapServiceConfig = resolve_config(config)
        self._clock_ms = clock_ms

        backend = store if store is not None else MemoryStore()
        self.prepared_orders = PreparedOrderStore(backend, ttl=self._config.prepared_order_ttl)
        self.nonces = NonceRegistry(
            backend,
            window_seconds=(
                self._config.timestamp_max_age + self._config.timestamp_future_tolerance
            )
            / 1000,
        )
        self.checkpoints = CheckpointStore(backend, ttl=self._config.checkpoint_ttl)

        self._api = FusionApiClient(self._config, http_client=http_client)
        self.quotes = QuoteClient(self._api, preset=self._config.preset)
        self.gateway = OrderSubmissionGateway(self._api, source=self._config.source)
        self.monitor = CompletionMonitor(
            self.gateway,
            poll_interval=self._config.poll_interval,
            checkpoints=self.checkpoints,
        )

    @property
    def config(self) -> ResolvedSwapServiceConfig:
        return self._config

    async def close(self) -> None:
        await self._api.close()

    async def __aenter__(self) -> "SecureSwapService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def prepare_order(
        self, order_params: OrderParams, user_wallet_address: str
    ) -> PreparedOrder:
        """Phase 1: quote the swap and build the message the wallet must sign.

        Args:
            order_params: Swap parameters
            user_wallet_address: Wallet that will sign and fund the swap

        Returns:
            PreparedOrder with the preparation hash and message to sign

        Raises:
            ValidationError: If the parameters or wallet are invalid
            UnresolvedTokenError: If a token is missing and has no default
            QuoteFetchError: If quoting fails
            SubmissionError: If the upstream order cannot be built
        """
        validate_wallet_address(user_wallet_address)
        validate_order_params(order_params)

        quote = await self.quotes.get_quote(order_params, user_wallet_address)

        secret_set = build_secret_set(quote.required_secret_count)
        hash_lock = build_hash_lock(secret_set)
        fusion_order = await self.gateway.create_order(
            quote, user_wallet_address, hash_lock, secret_set.secret_hashes
        )

        timestamp = self._clock_ms()
        nonce = generate_nonce()
        preparation_hash = create_preparation_hash(
            user_wallet_address, order_params, timestamp, nonce
        )
        message = build_swap_message(user_wallet_address, order_params, timestamp, nonce)

        self.prepared_orders.put(
            preparation_hash,
            PreparationRecord(
                preparation_hash=preparation_hash,
                order_hash=fusion_order.order_hash,
                user_wallet_address=user_wallet_address,
                order=fusion_order.order,
                quote_id=fusion_order.quote_id,
                secrets=secret_set.secrets,
                secret_hashes=secret_set.secret_hashes,
                order_params=order_params,
                timestamp=timestamp,
                nonce=nonce,
                quote=quote,
                hash_lock=hash_lock.value,
            ),
        )
        logger.info(
            "Prepared order %s for wallet %s (preparation %s)",
            fusion_order.order_hash,
            user_wallet_address,
            preparation_hash,
        )

        return PreparedOrder(
            preparation_hash=preparation_hash,
            message_to_sign=message,
            timestamp=timestamp,
            nonce=nonce,
            quote=quote,
        )

    def _authorize(self, request: SignedOrderRequest) -> PreparationRecord:
        validate_wallet_address(request.user_wallet_address)

        if not validate_timestamp(
            request.timestamp,
            now=self._clock_ms(),
            max_age_ms=self._config.timestamp_max_age,
            future_tolerance_ms=self._config.timestamp_future_tolerance,
        ):
            raise ReplayError("Invalid or expired timestamp", timestamp=request.timestamp)

        # Consumed before any further check: a prepared order gets one attempt
        record = self.prepared_orders.consume(request.preparation_hash)
        if record is None:
            raise ReplayError(
                "Prepared order not found or expired",
                preparation_hash=request.preparation_hash,
            )

        if record.user_wallet_address.lower() != request.user_wallet_address.lower():
            raise WalletMismatchError(
                "Wallet does not match the prepared order",
                expected=record.user_wallet_address,
                received=request.user_wallet_address,
            )

        expected_hash = create_preparation_hash(
            record.user_wallet_address,
            record.order_params,
            request.timestamp,
            request.nonce,
        )
        if expected_hash != request.preparation_hash:
            raise SignatureError("Authorization does not match the prepared order")

        message = build_swap_message(
            record.user_wallet_address,
            record.order_params,
            request.timestamp,
            request.nonce,
        )
        if not verify_user_signature(message, request.signature, request.user_wallet_address):
            raise SignatureError("Invalid signature")

        if self._config.track_nonces and not self.nonces.register(
            request.user_wallet_address, request.nonce
        ):
            raise ReplayError("Nonce already used", nonce=request.nonce)

        return record

    async def submit_signed_order(self, request: SignedOrderRequest) -> SubmittedOrder:
        """Phase 2: verify the wallet's authorization and submit the order.

        Raises:
            ValidationError: If the wallet address is malformed
            ReplayError: Stale/future timestamp, unknown or consumed
                preparation, or reused nonce
            WalletMismatchError: If another wallet prepared the order
            SignatureError: If the signature or authorization doesn't match
            SubmissionError: If the relayer rejects the order
        """
        record = self._authorize(request)

        await self.gateway.submit_order(
            record.quote.src_chain_id,
            record.order,
            record.quote_id,
            record.secret_hashes,
        )
        logger.info(
            "Order %s submitted for wallet %s",
            record.order_hash,
            record.user_wallet_address,
        )

        return SubmittedOrder(
            order_hash=record.order_hash,
            status="submitted",
            secrets=list(record.secrets),
            secret_hashes=list(record.secret_hashes),
            approval_info=ApprovalInfo(
                token_address=record.quote.src_token_address,
                spender_address=AGGREGATION_ROUTER_V6,
                amount=record.order_params.amount,
            ),
        )

    async def monitor_order(
        self,
        order_hash: str,
        secrets: Sequence[str],
        secret_hashes: Optional[Sequence[str]] = None,
        timeout: Optional[float] = None,
    ) -> OrderStatusReport:
        """Reveal secrets as escrows deploy and return the terminal status."""
        return await self.monitor.run(
            order_hash, secrets, secret_hashes=secret_hashes, timeout=timeout
        )

    async def resume_monitor(
        self, order_hash: str, timeout: Optional[float] = None
    ) -> OrderStatusReport:
        return await self.monitor.resume(order_hash, timeout=timeout)

    async def submit_and_monitor(
        self, request: SignedOrderRequest, timeout: Optional[float] = None
    ) -> Tuple[SubmittedOrder, OrderStatusReport]:
        """Submit a signed order and follow it to a terminal status."""
        submitted = await self.submit_signed_order(request)
        final_status = await self.monitor_order(
            submitted.order_hash,
            submitted.secrets,
            secret_hashes=submitted.secret_hashes,
            timeout=timeout,
        )
        return submitted, final_status

    # Read-only helpers

    async def get_quote(
        self, order_params: OrderParams, wallet_address: Optional[str] = None
    ) -> Quote:
        return await self.quotes.get_quote(order_params, wallet_address)

    async def get_order_status(self, order_hash: str) -> OrderStatusReport:
        return await self.gateway.get_order_status(order_hash)

    def get_supported_chains(self) -> Dict[str, Dict]:
        return get_supported_chains()

    def get_chain_tokens(self, chain_id: int) -> Dict[str, str]:
        return get_chain_tokens(chain_id)
