"""
Deterministic bucketing used by local evaluation.

Other implementations of the flags service (including the server-side evaluator) use the same
scheme, so these functions must stay byte-for-byte compatible with it.
"""

_FNV_OFFSET_BASIS_64 = 0xCBF29CE484222325
_FNV_PRIME_64 = 0x100000001B3
_MASK_64 = 0xFFFFFFFFFFFFFFFF


def fnv1a_64(data: bytes) -> int:
    """
    Computes the 64-bit FNV-1a hash of the given bytes.
    """
    hash_value = _FNV_OFFSET_BASIS_64
    for byte in data:
        hash_value ^= byte
        hash_value = (hash_value * _FNV_PRIME_64) & _MASK_64
    return hash_value


def normalized_hash(key: str, salt: str) -> float:
    """
    Maps a key and a salt to a bucket value in the range [0.0, 1.0).

    The result only has two decimal places of resolution, matching the resolution of rollout
    percentages and variant splits.

    :param key: the value being bucketed, usually the value of the flag's context attribute
    :param salt: distinguishes independent bucketing decisions made for the same key
    """
    hash_value = fnv1a_64((key + salt).encode('UTF-8'))
    return (hash_value % 100) / 100.0
