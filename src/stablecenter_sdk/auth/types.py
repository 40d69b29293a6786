"""Authorization Types for StableCenter swaps.

User-facing types for the prepare -> sign -> submit handshake.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..errors import ValidationError
from ..fusion.params import OrderParams
from ..fusion.types import Quote


@dataclass(frozen=True)
class SignedOrderRequest:
    """Submit-phase request sent by the client after the wallet signed."""

    preparation_hash: str
    """Hash returned by the prepare phase."""

    user_wallet_address: str
    """Wallet that signed the authorization message."""

    signature: str
    """EIP-191 personal-message signature (65 bytes hex)."""

    timestamp: int
    """Timestamp from the prepare response, in milliseconds."""

    nonce: str
    """Nonce from the prepare response."""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SignedOrderRequest":
        """Parse a camelCase request body.

        Raises:
            ValidationError: If a field is missing or the timestamp is not an integer
        """
        try:
            return cls(
                preparation_hash=str(data["preparationHash"]),
                user_wallet_address=str(data["userWalletAddress"]),
                signature=str(data["signature"]),
                timestamp=int(data["timestamp"]),
                nonce=str(data["nonce"]),
            )
        except KeyError as exc:
            raise ValidationError(f"Missing field: {exc.args[0]}") from exc
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid signed order request: {exc}") from exc


@dataclass
class PreparationRecord:
    """Pending order held between the prepare and submit phases."""

    preparation_hash: str
    order_hash: str
    user_wallet_address: str
    order: Dict[str, Any]
    quote_id: str
    secrets: List[str]
    secret_hashes: List[str]
    order_params: OrderParams
    timestamp: int
    nonce: str
    quote: Quote
    hash_lock: str = ""


@dataclass(frozen=True)
class PreparedOrder:
    """Prepare-phase response."""

    preparation_hash: str
    message_to_sign: str
    timestamp: int
    nonce: str
    quote: Quote

    def to_dict(self) -> Dict[str, Any]:
        return {
            "preparationHash": self.preparation_hash,
            "messageToSign": self.message_to_sign,
            "timestamp": self.timestamp,
            "nonce": self.nonce,
            "quote": self.quote.to_dict(),
        }


@dataclass(frozen=True)
class ApprovalInfo:
    """ERC-20 approval the wallet must grant before the order can fill."""

    token_address: str
    spender_address: str
    amount: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "tokenAddress": self.token_address,
            "spenderAddress": self.spender_address,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class SubmittedOrder:
    """Submit-phase response.

    The secrets go back to the user: they are the only way to unlock the
    destination escrow and the backend does not keep them.
    """

    order_hash: str
    status: str
    secrets: List[str] = field(default_factory=list)
    secret_hashes: List[str] = field(default_factory=list)
    approval_info: Optional[ApprovalInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "orderHash": self.order_hash,
            "status": self.status,
            "secrets": list(self.secrets),
            "secretHashes": list(self.secret_hashes),
        }
        if self.approval_info is not None:
            data["approvalInfo"] = self.approval_info.to_dict()
        return data
