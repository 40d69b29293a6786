"""Fusion+ cross-chain swap modules for the StableCenter SDK."""

from .params import OrderParams
from .types import (
    Quote,
    SecretSet,
    SingleFill,
    MultiFill,
    HashLock,
    FusionOrder,
    OrderStatus,
    TERMINAL_STATUSES,
    Fill,
    OrderStatusReport,
    MonitorCheckpoint,
)
from .tokens import (
    SUPPORTED_CHAINS,
    DEFAULT_TOKENS,
    AGGREGATION_ROUTER_V6,
    ZERO_ADDRESS,
    is_supported_chain,
    get_default_token,
    resolve_token,
    get_chain_tokens,
    get_supported_chains,
)
from .hashlock import (
    generate_secret,
    hash_secret,
    build_secret_set,
    build_hash_lock,
    merkle_leaves,
    merkle_root,
    merkle_proof,
    verify_merkle_proof,
    get_parts_count,
)
from .client import FusionApiClient
from .quote import QuoteClient
from .gateway import OrderSubmissionGateway
from .monitor import CompletionMonitor, CheckpointStore

__all__ = [
    # Types
    "OrderParams",
    "Quote",
    "SecretSet",
    "SingleFill",
    "MultiFill",
    "HashLock",
    "FusionOrder",
    "OrderStatus",
    "TERMINAL_STATUSES",
    "Fill",
    "OrderStatusReport",
    "MonitorCheckpoint",
    # Tokens
    "SUPPORTED_CHAINS",
    "DEFAULT_TOKENS",
    "AGGREGATION_ROUTER_V6",
    "ZERO_ADDRESS",
    "is_supported_chain",
    "get_default_token",
    "resolve_token",
    "get_chain_tokens",
    "get_supported_chains",
    # Hash lock
    "generate_secret",
    "hash_secret",
    "build_secret_set",
    "build_hash_lock",
    "merkle_leaves",
    "merkle_root",
    "merkle_proof",
    "verify_merkle_proof",
    "get_parts_count",
    # Clients
    "FusionApiClient",
    "QuoteClient",
    "OrderSubmissionGateway",
    "CompletionMonitor",
    "CheckpointStore",
]
