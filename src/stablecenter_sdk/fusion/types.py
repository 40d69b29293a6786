"""Fusion+ Types for StableCenter swaps.

Typed views over the upstream swap network's payloads. Amounts are kept as
decimal strings end to end so no precision is lost.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


def _amount(value: Any, default: str = "0") -> str:
    if value is None or value == "":
        return default
    return str(value)


@dataclass(frozen=True)
class Quote:
    """Price quote for a cross-chain swap. Immutable once returned."""

    src_chain_id: int
    dst_chain_id: int
    src_token_address: str
    dst_token_address: str
    amount: str
    src_token_amount: str
    dst_token_amount: str
    quote_id: str
    preset_id: str
    required_secret_count: int
    presets: Dict[str, Any] = field(default_factory=dict)
    estimated_gas: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "srcChainId": self.src_chain_id,
            "dstChainId": self.dst_chain_id,
            "srcTokenAddress": self.src_token_address,
            "dstTokenAddress": self.dst_token_address,
            "amount": self.amount,
            "srcTokenAmount": self.src_token_amount,
            "dstTokenAmount": self.dst_token_amount,
            "quoteId": self.quote_id,
            "presetId": self.preset_id,
            "requiredSecretCount": self.required_secret_count,
        }
        if self.estimated_gas is not None:
            data["estimatedGas"] = self.estimated_gas
        return data


@dataclass(frozen=True)
class SecretSet:
    """Secrets of one order and their hashes, index-aligned."""

    secrets: List[str]
    secret_hashes: List[str]

    def __len__(self) -> int:
        return len(self.secrets)


@dataclass(frozen=True)
class SingleFill:
    """Hash lock for an order filled in one go: the hash of its only secret."""

    value: str

    @property
    def is_multi_fill(self) -> bool:
        return False


@dataclass(frozen=True)
class MultiFill:
    """Hash lock for partial fills: a Merkle root over indexed secret hashes.

    ``value`` is the root with the parts count encoded in its top 16 bits;
    ``merkle_root`` is the bare root.
    """

    value: str
    merkle_root: str
    leaves: List[str]

    @property
    def is_multi_fill(self) -> bool:
        return True


HashLock = Union[SingleFill, MultiFill]


@dataclass(frozen=True)
class FusionOrder:
    """Order built by the upstream network for a quote."""

    order_hash: str
    quote_id: str
    order: Dict[str, Any]


class OrderStatus(str, Enum):
    """Upstream order lifecycle states."""

    PENDING = "pending"
    REFUNDING = "refunding"
    CANCELLED = "cancelled"
    EXECUTED = "executed"
    EXPIRED = "expired"
    REFUNDED = "refunded"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @classmethod
    def parse(cls, value: Any) -> Optional["OrderStatus"]:
        """Map an upstream status string; None for values we don't know."""
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


TERMINAL_STATUSES = frozenset(
    {OrderStatus.EXECUTED, OrderStatus.EXPIRED, OrderStatus.REFUNDED}
)


@dataclass(frozen=True)
class Fill:
    tx_hash: str
    filled_maker_amount: str
    filled_auction_taker_amount: str
    status: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Fill":
        return cls(
            tx_hash=data.get("txHash", ""),
            filled_maker_amount=_amount(data.get("filledMakerAmount")),
            filled_auction_taker_amount=_amount(data.get("filledAuctionTakerAmount")),
            status=str(data.get("status", "")),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "txHash": self.tx_hash,
            "filledMakerAmount": self.filled_maker_amount,
            "filledAuctionTakerAmount": self.filled_auction_taker_amount,
            "status": self.status,
        }


@dataclass(frozen=True)
class OrderStatusReport:
    """Snapshot of an order's upstream status.

    ``status`` keeps the raw upstream value; ``state`` is the parsed enum, or
    None for a status this SDK doesn't know (treated as non-terminal).
    """

    status: str
    order_hash: str
    src_chain_id: Optional[int] = None
    dst_chain_id: Optional[int] = None
    validation: Optional[str] = None
    remaining_maker_amount: str = "0"
    deadline: Optional[int] = None
    created_at: Optional[int] = None
    cancelable: Optional[bool] = None
    fills: List[Fill] = field(default_factory=list)

    @property
    def state(self) -> Optional[OrderStatus]:
        return OrderStatus.parse(self.status)

    @property
    def is_terminal(self) -> bool:
        state = self.state
        return state is not None and state.is_terminal

    @classmethod
    def from_dict(cls, data: Dict[str, Any], order_hash: str = "") -> "OrderStatusReport":
        return cls(
            status=str(data.get("status", "")),
            order_hash=data.get("orderHash") or order_hash,
            src_chain_id=data.get("srcChainId"),
            dst_chain_id=data.get("dstChainId"),
            validation=data.get("validation"),
            remaining_maker_amount=_amount(data.get("remainingMakerAmount")),
            deadline=data.get("deadline"),
            created_at=data.get("createdAt"),
            cancelable=data.get("cancelable"),
            fills=[Fill.from_dict(fill) for fill in data.get("fills") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "orderHash": self.order_hash,
            "srcChainId": self.src_chain_id,
            "dstChainId": self.dst_chain_id,
            "validation": self.validation,
            "remainingMakerAmount": self.remaining_maker_amount,
            "deadline": self.deadline,
            "createdAt": self.created_at,
            "cancelable": self.cancelable,
            "fills": [fill.to_dict() for fill in self.fills],
        }


@dataclass
class MonitorCheckpoint:
    """Everything needed to resume monitoring an order after a crash."""

    order_hash: str
    secrets: List[str]
    secret_hashes: List[str] = field(default_factory=list)
    revealed_indices: List[int] = field(default_factory=list)

    @property
    def last_revealed_idx(self) -> Optional[int]:
        return self.revealed_indices[-1] if self.revealed_indices else None
