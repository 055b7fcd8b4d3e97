"""
CircularBuffer for fixed-capacity histories with O(1) insertion and access.
The oldest entry is overwritten once the buffer is full.
"""
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class CircularBuffer(Generic[T]):
    """
    Fixed-capacity ring buffer.
    - O(1) insertion at the end
    - O(1) random access (0 = oldest)
    - Chronological bulk retrieval
    """

    __slots__ = ('capacity', 'buffer', 'write_index', 'count')

    def __init__(self, capacity: int):
        """
        Initialize circular buffer.

        Args:
            capacity: Maximum number of entries to keep
        """
        if capacity <= 0:
            raise ValueError(f"Capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.buffer: List[Optional[T]] = [None] * capacity
        self.write_index = 0  # Next position to write
        self.count = 0  # Number of valid entries (0 to capacity)

    def append(self, item: T) -> None:
        """Add an entry, evicting the oldest one when full. O(1)."""
        self.buffer[self.write_index] = item
        self.write_index = (self.write_index + 1) % self.capacity
        if self.count < self.capacity:
            self.count += 1

    def get(self, index: int) -> T:
        """
        Get item at logical index (0 = oldest, count-1 = newest).
        O(1) access.
        """
        if index < 0 or index >= self.count:
            raise IndexError(f"Index {index} out of range [0, {self.count})")
        physical_index = (self.write_index - self.count + index) % self.capacity
        return self.buffer[physical_index]

    def get_all(self) -> List[T]:
        """Get all valid entries in chronological order."""
        return self.get_range(0, self.count)

    def get_range(self, start_index: int, end_index: int) -> List[T]:
        """Get entries from start_index to end_index (exclusive)."""
        if start_index < 0 or end_index > self.count or start_index > end_index:
            raise IndexError(f"Invalid range [{start_index}, {end_index}) for buffer of size {self.count}")
        start = self.write_index - self.count
        return [self.buffer[(start + i) % self.capacity] for i in range(start_index, end_index)]

    def latest(self) -> Optional[T]:
        """Newest entry, or None when empty."""
        if self.count == 0:
            return None
        return self.get(self.count - 1)

    def is_full(self) -> bool:
        """Check if buffer is at capacity."""
        return self.count == self.capacity

    def size(self) -> int:
        """Get number of valid entries."""
        return self.count

    def clear(self) -> None:
        """Clear all entries."""
        self.buffer = [None] * self.capacity
        self.write_index = 0
        self.count = 0
