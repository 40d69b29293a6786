"""Swap Authorization Signing for StableCenter.

Signs and verifies the authorization message with the EIP-191 personal
message scheme, and bounds the replay window with timestamp checks.
Works with:
- eth_account.Account (direct signing, tests and scripts)
- any wallet implementing MessageSigner (browser or server wallets)
"""

import logging
import time
from typing import Optional, Protocol

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import is_address

from ..config import TIMESTAMP_FUTURE_TOLERANCE_MS, TIMESTAMP_MAX_AGE_MS

logger = logging.getLogger(__name__)


def current_timestamp_ms() -> int:
    return int(time.time() * 1000)


def _signature_bytes(signature: str) -> bytes:
    return bytes.fromhex(signature[2:] if signature.startswith("0x") else signature)


def sign_swap_message(private_key: str, message: str) -> str:
    """Sign an authorization message with a private key.

    Args:
        private_key: Private key (hex string with or without 0x prefix)
        message: Message from ``build_swap_message``

    Returns:
        0x-prefixed 65-byte signature hex
    """
    signed = Account.sign_message(encode_defunct(text=message), private_key=private_key)
    return "0x" + bytes(signed.signature).hex()


class MessageSigner(Protocol):
    """Protocol for wallets that can sign personal messages."""

    async def get_address(self) -> str:
        """Get the signer's address."""
        ...

    async def sign_message(self, message: str) -> str:
        """Sign ``message`` with EIP-191 and return the signature hex."""
        ...


async def sign_swap_message_with_signer(signer: MessageSigner, message: str) -> str:
    """Sign an authorization message with any compatible wallet."""
    signature = await signer.sign_message(message)
    return signature if signature.startswith("0x") else "0x" + signature


def recover_signer(message: str, signature: str) -> str:
    """Recover the checksummed address that signed ``message``.

    Raises:
        ValueError: If the signature is malformed
    """
    return Account.recover_message(
        encode_defunct(text=message), signature=_signature_bytes(signature)
    )


def verify_user_signature(message: str, signature: str, expected_wallet: str) -> bool:
    """Verify that ``expected_wallet`` signed ``message``.

    Args:
        message: Authorization message
        signature: Signature hex (with or without 0x)
        expected_wallet: Address expected to have signed

    Returns:
        True if the recovered address equals ``expected_wallet``
        (case-insensitive); False on mismatch or malformed signature
    """
    if not is_address(expected_wallet):
        return False

    try:
        recovered = recover_signer(message, signature)
    except Exception as exc:
        logger.warning("Could not recover signer from signature: %s", exc)
        return False

    is_valid = recovered.lower() == expected_wallet.lower()
    logger.info(
        "Signature verification: expected=%s recovered=%s valid=%s",
        expected_wallet,
        recovered,
        is_valid,
    )
    return is_valid


def validate_timestamp(
    timestamp: int,
    now: Optional[int] = None,
    max_age_ms: int = TIMESTAMP_MAX_AGE_MS,
    future_tolerance_ms: int = TIMESTAMP_FUTURE_TOLERANCE_MS,
) -> bool:
    """Check that a signature timestamp is inside the replay window.

    True iff ``now - max_age < timestamp <= now + future_tolerance``; with the
    defaults that is "younger than 10 minutes and at most 1 minute ahead".

    Args:
        timestamp: Milliseconds since epoch
        now: Override for the current time in milliseconds
    """
    if now is None:
        now = current_timestamp_ms()
    return now - max_age_ms < timestamp <= now + future_tolerance_ms
