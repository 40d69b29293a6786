"""StableCenter Swap Authorization Module.

This module implements the non-custodial prepare -> sign -> submit handshake.

Key components:
- Authorization message and preparation hash (deterministic, recomputable)
- Personal-message signature verification (EIP-191)
- Timestamp replay window
- At-most-once prepared order store and nonce registry

Example usage:
    ```python
    from stablecenter_sdk.auth import (
        OrderParams,
        build_swap_message,
        create_preparation_hash,
        generate_nonce,
        sign_swap_message,
        verify_user_signature,
    )
    import time

    params = OrderParams(amount="1000000", src_chain_id=1, dst_chain_id=8453)
    timestamp = int(time.time() * 1000)
    nonce = generate_nonce()

    message = build_swap_message(wallet, params, timestamp, nonce)
    signature = sign_swap_message(private_key, message)

    assert verify_user_signature(message, signature, wallet)
    ```
"""

from ..fusion.params import (
    OrderParams,
    collect_order_param_errors,
    validate_order_params,
    validate_wallet_address,
)
from .types import (
    SignedOrderRequest,
    PreparationRecord,
    PreparedOrder,
    SubmittedOrder,
    ApprovalInfo,
)
from .challenge import (
    build_swap_message,
    create_preparation_hash,
    generate_nonce,
)
from .signing import (
    MessageSigner,
    current_timestamp_ms,
    recover_signer,
    sign_swap_message,
    sign_swap_message_with_signer,
    validate_timestamp,
    verify_user_signature,
)
from .store import PreparedOrderStore, NonceRegistry

__all__ = [
    # Types
    "OrderParams",
    "SignedOrderRequest",
    "PreparationRecord",
    "PreparedOrder",
    "SubmittedOrder",
    "ApprovalInfo",
    # Challenge
    "build_swap_message",
    "create_preparation_hash",
    "generate_nonce",
    "collect_order_param_errors",
    "validate_order_params",
    "validate_wallet_address",
    # Signing
    "MessageSigner",
    "current_timestamp_ms",
    "recover_signer",
    "sign_swap_message",
    "sign_swap_message_with_signer",
    "validate_timestamp",
    "verify_user_signature",
    # Store
    "PreparedOrderStore",
    "NonceRegistry",
]
