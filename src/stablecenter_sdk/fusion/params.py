"""Swap parameters and their validation."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from eth_utils import is_address

from ..errors import ValidationError


@dataclass(frozen=True)
class OrderParams:
    """Parameters of a cross-chain swap requested by the user."""

    amount: str
    """Source amount in the token's smallest unit, as a decimal string."""

    src_chain_id: int
    """Chain the user pays on."""

    dst_chain_id: int
    """Chain the user receives on."""

    src_token_address: Optional[str] = None
    """Source token; the chain's default USDC when omitted."""

    dst_token_address: Optional[str] = None
    """Destination token; the chain's default USDC when omitted."""

    def to_dict(self) -> Dict[str, Any]:
        """camelCase form used in the preparation hash and upstream calls."""
        data: Dict[str, Any] = {
            "amount": self.amount,
            "srcChainId": self.src_chain_id,
            "dstChainId": self.dst_chain_id,
        }
        if self.src_token_address:
            data["srcTokenAddress"] = self.src_token_address
        if self.dst_token_address:
            data["dstTokenAddress"] = self.dst_token_address
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderParams":
        """Parse a camelCase request body.

        Raises:
            ValidationError: If a required field is missing or not a number
        """
        try:
            return cls(
                amount=str(data["amount"]),
                src_chain_id=int(data["srcChainId"]),
                dst_chain_id=int(data["dstChainId"]),
                src_token_address=data.get("srcTokenAddress") or None,
                dst_token_address=data.get("dstTokenAddress") or None,
            )
        except KeyError as exc:
            raise ValidationError(f"Missing order parameter: {exc.args[0]}") from exc
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid order parameters: {exc}") from exc


def collect_order_param_errors(order_params: OrderParams) -> List[str]:
    """Return every problem with ``order_params``; empty when valid."""
    errors = []

    try:
        amount = Decimal(order_params.amount)
        if not amount.is_finite() or amount <= 0:
            errors.append("Invalid amount: must be greater than 0")
    except (InvalidOperation, TypeError):
        errors.append("Invalid amount: must be greater than 0")

    if not order_params.src_chain_id or not order_params.dst_chain_id:
        errors.append("Invalid chain IDs: both source and destination required")
    elif order_params.src_chain_id == order_params.dst_chain_id:
        errors.append("Invalid chain IDs: source and destination must be different")

    if order_params.src_token_address and not is_address(order_params.src_token_address):
        errors.append("Invalid source token address format")

    if order_params.dst_token_address and not is_address(order_params.dst_token_address):
        errors.append("Invalid destination token address format")

    return errors


def validate_order_params(order_params: OrderParams) -> None:
    """Raise ``ValidationError`` listing every problem with ``order_params``."""
    errors = collect_order_param_errors(order_params)
    if errors:
        raise ValidationError("; ".join(errors), errors=errors)


def validate_wallet_address(address: str) -> None:
    if not address or not is_address(address):
        raise ValidationError(f"Invalid wallet address: {address}")
