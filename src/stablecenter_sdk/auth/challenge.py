"""Authorization challenge for StableCenter swaps.

Builds the human-readable message the wallet signs and the preparation hash
that links the prepare phase with the submit phase. Both are pure functions
so the server can recompute them at submit time from the stored order.
"""

import hashlib
import json
import secrets

from ..fusion.params import OrderParams


MESSAGE_TITLE = "StableCenter Cross-Chain Swap Authorization"
MESSAGE_DISCLAIMER = (
    "By signing this message, you authorize StableCenter to create a "
    "cross-chain swap order on your behalf."
)
MESSAGE_NO_CUSTODY = "This signature does not grant access to your funds."

NONCE_BYTES = 16


def build_swap_message(
    user_wallet_address: str,
    order_params: OrderParams,
    timestamp: int,
    nonce: str,
) -> str:
    """Build the message a wallet signs to authorize a swap.

    Args:
        user_wallet_address: Wallet authorizing the swap
        order_params: Swap parameters
        timestamp: Milliseconds since epoch
        nonce: Hex nonce from ``generate_nonce``

    Returns:
        Newline-joined plaintext message
    """
    return "\n".join(
        [
            MESSAGE_TITLE,
            "",
            f"Wallet: {user_wallet_address}",
            f"Amount: {order_params.amount}",
            f"Source Chain: {order_params.src_chain_id}",
            f"Destination Chain: {order_params.dst_chain_id}",
            f"Source Token: {order_params.src_token_address or 'Default'}",
            f"Destination Token: {order_params.dst_token_address or 'Default'}",
            f"Timestamp: {timestamp}",
            f"Nonce: {nonce}",
            "",
            MESSAGE_DISCLAIMER,
            MESSAGE_NO_CUSTODY,
        ]
    )


def create_preparation_hash(
    user_wallet_address: str,
    order_params: OrderParams,
    timestamp: int,
    nonce: str,
) -> str:
    """Create the digest linking preparation with submission.

    Canonical JSON (keys sorted at every level, compact separators) of
    ``{userWalletAddress, orderParams, timestamp, nonce}`` hashed with SHA-256.

    Returns:
        64-char lowercase hex digest (no 0x prefix)
    """
    data = {
        "userWalletAddress": user_wallet_address,
        "orderParams": order_params.to_dict(),
        "timestamp": timestamp,
        "nonce": nonce,
    }
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def generate_nonce() -> str:
    """16 random bytes, hex encoded."""
    return secrets.token_hex(NONCE_BYTES)
