"""
Tests for the generic CircularBuffer
"""
import pytest
from core.models.circular_buffer import CircularBuffer


class TestCircularBuffer:
    """Test CircularBuffer basic operations"""

    def test_append_and_get(self) -> None:
        """Test basic append and get operations"""
        buffer: CircularBuffer[str] = CircularBuffer(capacity=5)

        buffer.append("a")
        buffer.append("b")
        buffer.append("c")

        assert buffer.size() == 3
        assert buffer.get(0) == "a"
        assert buffer.get(2) == "c"
        assert buffer.latest() == "c"

    def test_circular_wrap_around(self) -> None:
        """Test that buffer wraps around correctly"""
        buffer = CircularBuffer(capacity=3)

        for value in (1, 2, 3):
            buffer.append(value)

        buffer.append(4)  # Overwrites oldest (1)
        buffer.append(5)  # Overwrites 2

        assert buffer.size() == 3
        assert buffer.is_full()
        assert buffer.get_all() == [3, 4, 5]

    def test_get_range(self) -> None:
        """Test getting a range of entries after wrapping"""
        buffer = CircularBuffer(capacity=4)

        for i in range(1, 7):
            buffer.append(i)

        assert buffer.get_range(1, 3) == [4, 5]

    def test_index_out_of_range(self) -> None:
        buffer = CircularBuffer(capacity=2)
        buffer.append(1)
        with pytest.raises(IndexError):
            buffer.get(1)
        with pytest.raises(IndexError):
            buffer.get_range(0, 2)

    def test_empty_buffer(self) -> None:
        buffer = CircularBuffer(capacity=2)
        assert buffer.get_all() == []
        assert buffer.latest() is None

    def test_invalid_capacity(self) -> None:
        with pytest.raises(ValueError):
            CircularBuffer(capacity=0)

    def test_clear(self) -> None:
        """Test clearing the buffer"""
        buffer = CircularBuffer(capacity=5)

        buffer.append(1)
        buffer.append(2)
        assert buffer.size() == 2

        buffer.clear()
        assert buffer.size() == 0
        assert buffer.get_all() == []
