"""Secret and hash lock construction for Fusion+ escrows.

An order filled in one go locks its escrows with the hash of a single
secret. An order that may be filled in parts commits to N secrets through a
Merkle tree whose leaves bind each secret hash to its fill index, so
``secret_hashes[i]`` and ``secrets[i]`` always belong to escrow fill ``i``.

Secrets unlock destination-chain funds. Nothing in this module logs them.
"""

import secrets as _random
from typing import List, Sequence

from eth_abi.packed import encode_packed
from eth_utils import keccak

from ..errors import ValidationError
from .types import HashLock, MultiFill, SecretSet, SingleFill

SECRET_BYTES = 32

# Top 16 bits of a multi-fill hash lock carry the parts count (N - 1)
PARTS_COUNT_SHIFT = 240
_ROOT_MASK = (1 << PARTS_COUNT_SHIFT) - 1


def _to_bytes32(value: str) -> bytes:
    try:
        raw = bytes.fromhex(value[2:] if value.startswith("0x") else value)
    except (AttributeError, ValueError) as exc:
        raise ValidationError("Expected 32 bytes of hex") from exc
    if len(raw) != SECRET_BYTES:
        raise ValidationError(f"Expected 32 bytes, got {len(raw)}")
    return raw


def _hex(value: bytes) -> str:
    return "0x" + value.hex()


def generate_secret() -> str:
    """32 cryptographically random bytes as 0x-prefixed hex."""
    return _hex(_random.token_bytes(SECRET_BYTES))


def hash_secret(secret: str) -> str:
    """keccak256 of a 32-byte secret."""
    return _hex(keccak(_to_bytes32(secret)))


def build_secret_set(count: int) -> SecretSet:
    """Generate ``count`` fresh secrets together with their hashes.

    Raises:
        ValidationError: If ``count`` is less than 1
    """
    if count < 1:
        raise ValidationError(f"Secret count must be at least 1, got {count}")
    secrets = [generate_secret() for _ in range(count)]
    return SecretSet(secrets=secrets, secret_hashes=[hash_secret(s) for s in secrets])


def merkle_leaves(secret_hashes: Sequence[str]) -> List[str]:
    """Leaf ``i`` is ``keccak256(uint64 i ++ secret_hashes[i])``."""
    return [
        _hex(keccak(encode_packed(["uint64", "bytes32"], [idx, _to_bytes32(h)])))
        for idx, h in enumerate(secret_hashes)
    ]


def _hash_pair(a: bytes, b: bytes) -> bytes:
    return keccak(b"".join(sorted([a, b])))


def _build_tree(leaves: Sequence[str]) -> List[bytes]:
    # Complete binary tree in an array: node i has children 2i+1 and 2i+2,
    # leaves fill the tail in reverse so leaf 0 is the last slot.
    if not leaves:
        raise ValidationError("Cannot build a Merkle tree without leaves")
    tree: List[bytes] = [b""] * (2 * len(leaves) - 1)
    for i, leaf in enumerate(leaves):
        tree[len(tree) - 1 - i] = _to_bytes32(leaf)
    for i in range(len(tree) - 1 - len(leaves), -1, -1):
        tree[i] = _hash_pair(tree[2 * i + 1], tree[2 * i + 2])
    return tree


def merkle_root(leaves: Sequence[str]) -> str:
    return _hex(_build_tree(leaves)[0])


def merkle_proof(leaves: Sequence[str], index: int) -> List[str]:
    """Sibling hashes from leaf ``index`` up to the root.

    Raises:
        ValidationError: If ``index`` is out of range
    """
    if not 0 <= index < len(leaves):
        raise ValidationError(f"Leaf index {index} out of range for {len(leaves)} leaves")
    tree = _build_tree(leaves)
    node = len(tree) - 1 - index
    proof = []
    while node > 0:
        sibling = node + 1 if node % 2 == 1 else node - 1
        proof.append(_hex(tree[sibling]))
        node = (node - 1) // 2
    return proof


def verify_merkle_proof(root: str, leaf: str, proof: Sequence[str]) -> bool:
    computed = _to_bytes32(leaf)
    for sibling in proof:
        computed = _hash_pair(computed, _to_bytes32(sibling))
    return _hex(computed) == root.lower()


def build_hash_lock(secret_set: SecretSet) -> HashLock:
    """Build the escrow hash lock for a secret set.

    Args:
        secret_set: Secrets from ``build_secret_set``

    Returns:
        SingleFill for one secret, MultiFill (Merkle) for more
    """
    if len(secret_set) == 1:
        return SingleFill(value=secret_set.secret_hashes[0])

    leaves = merkle_leaves(secret_set.secret_hashes)
    root = merkle_root(leaves)
    parts = len(leaves) - 1
    value = (int(root, 16) & _ROOT_MASK) | (parts << PARTS_COUNT_SHIFT)
    return MultiFill(value="0x%064x" % value, merkle_root=root, leaves=leaves)


def get_parts_count(hash_lock: HashLock) -> int:
    """Number of parts an order's escrow can be split into (0 for single fill)."""
    if isinstance(hash_lock, SingleFill):
        return 0
    return int(hash_lock.value, 16) >> PARTS_COUNT_SHIFT
