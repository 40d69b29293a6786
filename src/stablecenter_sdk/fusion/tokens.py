"""Supported chains and default tokens for Fusion+ swaps."""

from typing import Dict, Optional

from ..errors import UnresolvedTokenError, ValidationError

# Chain IDs supported by 1inch Fusion+
ETHEREUM = 1
BASE = 8453
AVALANCHE = 43114
BSC = 56

SUPPORTED_CHAINS: Dict[str, int] = {
    "ETHEREUM": ETHEREUM,
    "BASE": BASE,
    "AVALANCHE": AVALANCHE,
    "BSC": BSC,
}

DEFAULT_TOKENS: Dict[int, Dict[str, str]] = {
    ETHEREUM: {
        "USDC": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
        "USDT": "0xdAC17F958D2ee523a2206206994597C13D831ec7",
        "WETH": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
    },
    BASE: {
        "USDC": "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
        "USDT": "0x50c5725949A6F0c72E6C4a641F24049A917DB0Cb",
        "WETH": "0x4200000000000000000000000000000000000006",
    },
    AVALANCHE: {
        "USDC": "0xB97EF9Ef8734C71904D8002F8b6Bc66Dd9c48a6E",
        "USDT": "0x9702230A8Ea53601f5cD2dc00fDBc13d4dF4A8c7",
        "WAVAX": "0xB31f66AA3C1e785363F0875A1B74E27b85FD66c7",
    },
    BSC: {
        "USDC": "0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d",
        "USDT": "0x55d398326f99059fF775485246999027B3197955",
        "WBNB": "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c",
    },
}

# 1inch aggregation router v6, the spender wallets approve for Fusion+ orders
AGGREGATION_ROUTER_V6 = "0x111111125421ca6dc452d289314280a0f8842a65"

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def is_supported_chain(chain_id: int) -> bool:
    return chain_id in DEFAULT_TOKENS


def get_default_token(chain_id: int, symbol: str = "USDC") -> Optional[str]:
    """Look up a chain's default token address.

    Args:
        chain_id: Chain ID
        symbol: Token symbol (default: USDC)

    Returns:
        Token address, or None if the chain or symbol is unknown
    """
    return DEFAULT_TOKENS.get(chain_id, {}).get(symbol)


def resolve_token(chain_id: int, address: Optional[str], symbol: str = "USDC") -> str:
    """Return ``address`` or, when it is empty, the chain's default token.

    Raises:
        UnresolvedTokenError: If no address is given and no default exists
    """
    if address:
        return address
    default = get_default_token(chain_id, symbol)
    if default is None:
        raise UnresolvedTokenError(chain_id, symbol)
    return default


def get_chain_tokens(chain_id: int) -> Dict[str, str]:
    """All default tokens of a supported chain.

    Raises:
        ValidationError: If the chain is not supported
    """
    if not is_supported_chain(chain_id):
        raise ValidationError(f"Unsupported chain ID: {chain_id}", chain_id=chain_id)
    return dict(DEFAULT_TOKENS[chain_id])


def get_supported_chains() -> Dict[str, Dict]:
    return {
        "chains": dict(SUPPORTED_CHAINS),
        "tokens": {chain_id: dict(tokens) for chain_id, tokens in DEFAULT_TOKENS.items()},
    }
