"""Append-only pool allocator with stable handles."""

from __future__ import annotations

from typing import Any, Generic, Iterator, NamedTuple, TypeVar

from travel_tables.errors import FrozenError, PoolError

T = TypeVar("T")


class Handle(NamedTuple):
    """Position of an item inside a pool."""

    block: int
    slot: int


class Pool(Generic[T]):
    """Bump allocator over a growable list of fixed-capacity blocks.

    Items are never moved or freed individually, so a handle stays valid for the
    whole lifetime of the pool.
    """

    DEFAULT_BLOCK_CAPACITY = 4096

    def __init__(self, block_capacity: int = DEFAULT_BLOCK_CAPACITY) -> None:
        if block_capacity < 1:
            raise PoolError(f"Block capacity must be positive, got {block_capacity}")
        self.block_capacity = block_capacity
        self._blocks: list[list[T | None]] = []
        self._used: list[int] = []  # Slots used per block
        self._count = 0
        self._frozen = False

    def _new_block(self) -> None:
        self._blocks.append([None] * self.block_capacity)
        self._used.append(0)

    def _reserve(self, k: int) -> Handle:
        """Reserve k contiguous slots and return the handle of the first one."""
        if self._frozen:
            raise FrozenError("Cannot allocate from a frozen pool")
        if k > self.block_capacity:
            raise PoolError(
                f"Cannot allocate {k} contiguous items in blocks of {self.block_capacity}"
            )
        if not self._blocks or self._used[-1] + k > self.block_capacity:
            self._new_block()

        handle = Handle(len(self._blocks) - 1, self._used[-1])
        self._used[-1] += k
        self._count += k
        return handle

    def allocate(self, item: T | None = None) -> Handle:
        """Allocate one slot, optionally storing an item in it."""
        handle = self._reserve(1)
        self._blocks[handle.block][handle.slot] = item
        return handle

    def allocate_items(self, k: int) -> list[Handle]:
        """Allocate k slots that are contiguous inside a single block.

        Raises:
            PoolError: If k is not positive or exceeds the block capacity.
        """
        if k < 1:
            raise PoolError(f"Item count must be positive, got {k}")
        first = self._reserve(k)
        return [Handle(first.block, first.slot + i) for i in range(k)]

    def _check(self, handle: Handle) -> None:
        block, slot = handle
        if block < 0 or block >= len(self._blocks) or slot < 0 or slot >= self._used[block]:
            raise PoolError(f"Invalid pool handle {tuple(handle)}")

    def get(self, handle: Handle) -> T:
        """Return the item stored at a handle."""
        self._check(handle)
        return self._blocks[handle.block][handle.slot]  # type: ignore[return-value]

    def set(self, handle: Handle, item: T) -> None:
        """Store an item at a previously allocated handle."""
        if self._frozen:
            raise FrozenError("Cannot modify a frozen pool")
        self._check(handle)
        self._blocks[handle.block][handle.slot] = item

    def handles(self) -> Iterator[Handle]:
        """Iterate over all allocated handles in allocation order."""
        for block_index, used in enumerate(self._used):
            for slot in range(used):
                yield Handle(block_index, slot)

    def __iter__(self) -> Iterator[T]:
        for block_index, used in enumerate(self._used):
            block = self._blocks[block_index]
            for slot in range(used):
                yield block[slot]  # type: ignore[misc]

    def __len__(self) -> int:
        return self._count

    @property
    def block_count(self) -> int:
        """Return the number of allocated blocks."""
        return len(self._blocks)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Forbid further allocations and writes."""
        self._frozen = True

    def close(self) -> None:
        """Release every block at once."""
        self._blocks.clear()
        self._used.clear()
        self._count = 0

    def __enter__(self) -> Pool[T]:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
