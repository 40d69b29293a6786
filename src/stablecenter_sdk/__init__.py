"""StableCenter SDK - non-custodial cross-chain swaps over 1inch Fusion+."""

from .config import (
    SwapServiceConfig,
    ResolvedSwapServiceConfig,
    resolve_config,
    load_config_from_env,
)
from .errors import (
    SwapError,
    ValidationError,
    UnresolvedTokenError,
    UpstreamError,
    QuoteFetchError,
    SubmissionError,
    StatusFetchError,
    SignatureError,
    ReplayError,
    WalletMismatchError,
    MonitorTimeoutError,
)
from .store import ExpiringStore, MemoryStore
from .auth import (
    OrderParams,
    SignedOrderRequest,
    PreparedOrder,
    SubmittedOrder,
    build_swap_message,
    sign_swap_message,
    verify_user_signature,
    validate_timestamp,
)
from .fusion import (
    Quote,
    OrderStatus,
    OrderStatusReport,
    SingleFill,
    MultiFill,
    get_supported_chains,
)
from .service import SecureSwapService

__version__ = "0.1.0"
__all__ = [
    # Config
    "SwapServiceConfig",
    "ResolvedSwapServiceConfig",
    "resolve_config",
    "load_config_from_env",
    # Errors
    "SwapError",
    "ValidationError",
    "UnresolvedTokenError",
    "UpstreamError",
    "QuoteFetchError",
    "SubmissionError",
    "StatusFetchError",
    "SignatureError",
    "ReplayError",
    "WalletMismatchError",
    "MonitorTimeoutError",
    # Store
    "ExpiringStore",
    "MemoryStore",
    # Auth
    "OrderParams",
    "SignedOrderRequest",
    "PreparedOrder",
    "SubmittedOrder",
    "build_swap_message",
    "sign_swap_message",
    "verify_user_signature",
    "validate_timestamp",
    # Fusion
    "Quote",
    "OrderStatus",
    "OrderStatusReport",
    "SingleFill",
    "MultiFill",
    "get_supported_chains",
    # Service
    "SecureSwapService",
]
