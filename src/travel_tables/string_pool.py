"""Append-only string storage, with and without deduplication."""

from __future__ import annotations

from typing import Any


class StringPool:
    """Stores strings in blocks of a fixed character capacity.

    Each stored string accounts for one extra terminator slot. Strings longer
    than a block get a block of their own.
    """

    DEFAULT_BLOCK_SIZE = 4096

    def __init__(self, block_size: int = DEFAULT_BLOCK_SIZE) -> None:
        if block_size < 2:
            raise ValueError(f"Block size must be at least 2, got {block_size}")
        self.block_size = block_size
        self._blocks: list[list[str]] = []
        self._block_used: list[int] = []
        self._count = 0

    def put(self, value: str) -> str:
        """Copy a string into the pool and return the stored string."""
        needed = len(value) + 1
        if needed > self.block_size:
            self._blocks.append([])
            self._block_used.append(needed)
            index = len(self._blocks) - 1
        else:
            if not self._blocks or self._block_used[-1] + needed > self.block_size:
                self._blocks.append([])
                self._block_used.append(0)
            index = len(self._blocks) - 1
            self._block_used[index] += needed

        self._blocks[index].append(value)
        self._count += 1
        return value

    def __len__(self) -> int:
        return self._count

    @property
    def block_count(self) -> int:
        """Return the number of allocated blocks."""
        return len(self._blocks)

    def close(self) -> None:
        """Release all blocks."""
        self._blocks.clear()
        self._block_used.clear()
        self._count = 0

    def __enter__(self) -> StringPool:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


class DedupStringPool:
    """A string pool that keeps a single copy of every distinct value."""

    def __init__(self, block_size: int = StringPool.DEFAULT_BLOCK_SIZE) -> None:
        self._pool = StringPool(block_size)
        self._index: dict[str, str] = {}

    def put(self, value: str) -> str:
        """Return the stored copy of value, storing it on first sight."""
        stored = self._index.get(value)
        if stored is None:
            stored = self._pool.put(value)
            self._index[stored] = stored
        return stored

    def __contains__(self, value: object) -> bool:
        return value in self._index

    def __len__(self) -> int:
        """Return the number of distinct strings stored."""
        return len(self._index)

    def close(self) -> None:
        """Release the index and the underlying pool."""
        self._index.clear()
        self._pool.close()

    def __enter__(self) -> DedupStringPool:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
