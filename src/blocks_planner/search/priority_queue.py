"""Array-backed binary min-heap with in-place key decrease.

``heapq`` cannot re-order an element whose priority improved without a full
re-heapify, which A* needs every time it finds a cheaper path to a frontier
node. ``UpdatableHeap`` keeps a position index next to the array so an element
can be found by value and sifted up in O(log n).
"""

from typing import Any, Callable, Dict, Generic, Hashable, Iterator, List, Optional, TypeVar

T = TypeVar('T')


def _identity(item: Any) -> Hashable:
    return item


class UpdatableHeap(Generic[T]):
    """Binary min-heap ranked by a caller-supplied function.

    Elements are ranked by ``rank(element)`` rather than their natural
    ordering, so the rank may change while an element sits in the heap; call
    ``decrease_key`` after lowering it. Membership uses value equality on
    ``key(element)`` (by default the element itself), never object identity.
    """

    def __init__(self, rank: Callable[[T], Any],
                 key: Optional[Callable[[T], Hashable]] = None):
        """Initialize an empty heap.

        Args:
            rank: Maps an element to a comparable priority (lower pops first)
            key: Maps an element to the hashable value used for membership
        """
        self._rank = rank
        self._key = key or _identity
        self._items: List[T] = []
        self._positions: Dict[Hashable, int] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[T]:
        """Iterate in array order (not sorted)."""
        return iter(list(self._items))

    def __contains__(self, item: T) -> bool:
        return self.contains(item)

    def contains(self, item: T) -> bool:
        return self._key(item) in self._positions

    def insert(self, item: T) -> None:
        """Append ``item`` and restore heap order.

        Raises:
            ValueError: If an equal element is already queued.
        """
        key = self._key(item)
        if key in self._positions:
            raise ValueError(f"Element already in heap: {item!r}")
        self._items.append(item)
        self._positions[key] = len(self._items) - 1
        self._sift_up(len(self._items) - 1)

    def peek(self) -> T:
        if not self._items:
            raise IndexError("peek from an empty heap")
        return self._items[0]

    def extract_min(self) -> T:
        """Remove and return the lowest-ranked element.

        Raises:
            IndexError: If the heap is empty.
        """
        if not self._items:
            raise IndexError("extract_min from an empty heap")
        self._swap(0, len(self._items) - 1)
        root = self._items.pop()
        del self._positions[self._key(root)]
        if self._items:
            self._sift_down(0)
        return root

    def decrease_key(self, item: T) -> None:
        """Re-establish heap order for an element whose rank has improved.

        The stored element is replaced by ``item`` so callers may pass a fresh
        object equal to the queued one.

        Raises:
            KeyError: If no equal element is queued.
        """
        index = self._positions[self._key(item)]
        self._items[index] = item
        self._sift_up(index)

    def clear(self) -> None:
        self._items.clear()
        self._positions.clear()

    def _less(self, i: int, j: int) -> bool:
        return self._rank(self._items[i]) < self._rank(self._items[j])

    def _swap(self, i: int, j: int) -> None:
        if i == j:
            return
        items = self._items
        items[i], items[j] = items[j], items[i]
        self._positions[self._key(items[i])] = i
        self._positions[self._key(items[j])] = j

    def _sift_up(self, index: int) -> None:
        while index > 0:
            parent = (index - 1) // 2
            if not self._less(index, parent):
                break
            self._swap(index, parent)
            index = parent

    def _sift_down(self, index: int) -> None:
        size = len(self._items)
        while True:
            left = 2 * index + 1
            right = left + 1
            smallest = index
            if left < size and self._less(left, smallest):
                smallest = left
            if right < size and self._less(right, smallest):
                smallest = right
            if smallest == index:
                break
            self._swap(index, smallest)
            index = smallest
