"""A chained hash table keyed by case-folded strings, plus small helpers."""

from __future__ import annotations

import math
from collections.abc import Iterator
from typing import Any

_C_WHITESPACE = " \t\n\v\f\r"
_UINT32_MASK = 0xFFFFFFFF


def is_prime(num: int) -> bool:
    """Return whether ``num`` is prime by trial division over odd divisors."""
    if num % 2 == 0:
        return num == 2
    limit = math.isqrt(num) if num > 0 else 0
    return all(num % divisor for divisor in range(3, limit + 1, 2))


def next_prime(num: int) -> int:
    """Return the smallest prime strictly greater than ``num``."""
    if num < 2:
        return 2
    if num == 2:
        return 3
    if num % 2 == 0:
        num -= 1
    candidate = num + 2
    while not is_prime(candidate):
        candidate += 2
    return candidate


def str_trim(text: str) -> str:
    """Strip leading and trailing whitespace (the C ``isspace`` set)."""
    return text.strip(_C_WHITESPACE)


class HashTable:
    """Separate-chaining hash table whose bucket count is always prime.

    New entries are placed at the head of their bucket's chain.
    """

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"invalid hash table size {size}; must be at least 1")
        self.size = next_prime(size)
        self._buckets: list[list[tuple[str, Any]]] = [[] for _ in range(self.size)]

    def hash(self, key: str) -> int:
        """Return the bucket index for ``key``; lower-case ASCII folds to upper."""
        hashval = 0
        for byte in key.encode("utf-8"):
            c = byte - 256 if byte > 127 else byte
            if 97 <= c <= 122:
                c -= 32
            hashval = ((hashval << 1) + c) & _UINT32_MASK
        return hashval % self.size

    def _find(self, key: str) -> tuple[str, Any] | None:
        for entry in self._buckets[self.hash(key)]:
            if entry[0] == key:
                return entry
        return None

    def lookup(self, key: str) -> Any:
        """Return the value stored under ``key``, or None when absent."""
        entry = self._find(key)
        return None if entry is None else entry[1]

    def add(self, key: str, value: Any) -> None:
        """Insert ``key``; raise KeyError if it is already present."""
        if self._find(key) is not None:
            raise KeyError(f"{key!r} is already in the table")
        self._buckets[self.hash(key)].insert(0, (key, value))

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._find(key) is not None

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets)

    def __iter__(self) -> Iterator[str]:
        for bucket in self._buckets:
            for key, _ in bucket:
                yield key