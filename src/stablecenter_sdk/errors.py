"""Error taxonomy for the StableCenter swap SDK.

Every error carries a short machine-readable ``kind`` so the HTTP layer can
map it to a response without string matching.
"""

from typing import Any, Dict, Optional


class SwapError(Exception):
    """Base class for all swap SDK errors."""

    kind = "swap_error"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        """Structured form: ``{"kind", "message", **details}``."""
        return {"kind": self.kind, "message": self.message, **self.details}


class ValidationError(SwapError, ValueError):
    """Bad or missing input. Fatal to the request."""

    kind = "validation_error"


class UnresolvedTokenError(ValidationError):
    """No default token exists for a chain and no address was given."""

    kind = "unresolved_token"

    def __init__(self, chain_id: int, symbol: str = "USDC"):
        super().__init__(
            f"Token address is required for chain ID {chain_id}. "
            f"No default {symbol} token available.",
            chain_id=chain_id,
            symbol=symbol,
        )
        self.chain_id = chain_id
        self.symbol = symbol


class UpstreamError(SwapError):
    """The upstream swap network failed or answered with garbage."""

    kind = "upstream_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message, status_code=status_code, body=body)
        self.status_code = status_code
        self.body = body


class QuoteFetchError(UpstreamError):
    kind = "quote_fetch_error"


class SubmissionError(UpstreamError):
    kind = "submission_error"


class StatusFetchError(UpstreamError):
    kind = "status_fetch_error"


class SignatureError(SwapError):
    """Recovered signer does not match, or the signature is malformed."""

    kind = "signature_error"


class ReplayError(SwapError):
    """Stale/future timestamp, reused nonce, or unknown preparation hash."""

    kind = "replay_error"


class WalletMismatchError(SwapError):
    """Submit-time wallet differs from the wallet the order was prepared for."""

    kind = "wallet_mismatch"


class MonitorTimeoutError(SwapError):
    """The completion monitor hit its deadline before a terminal status."""

    kind = "monitor_timeout"


__all__ = [
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
]
