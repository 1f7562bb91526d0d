# LIFO container with a per-element destructor, used as the frame stack.

from __future__ import annotations

from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")


class Stack(Generic[T]):
    """
    A last-in first-out stack whose elements are torn down by a destructor.

    pop() hands ownership of the top element back to the caller. drop() and
    destroy() keep ownership inside the stack and call the destructor, so
    anything still on the stack when it is destroyed is released exactly
    once. Used as a context manager, the stack is destroyed on exit.
    """

    def __init__(self, destructor: Optional[Callable[[T], None]] = None) -> None:
        self._items: List[T] = []
        self._destructor = destructor

    def set_destructor(self, destructor: Optional[Callable[[T], None]]) -> None:
        self._destructor = destructor

    def push(self, item: T) -> T:
        self._items.append(item)
        return item

    def top(self) -> Optional[T]:
        """Return the top element without removing it, or None if empty."""
        if not self._items:
            return None
        return self._items[-1]

    def pop(self) -> Optional[T]:
        """Remove and return the top element, or None if empty."""
        if not self._items:
            return None
        return self._items.pop()

    def drop(self) -> None:
        """Pop the top element and run the destructor on it."""
        item = self.pop()
        if item is not None and self._destructor is not None:
            self._destructor(item)

    def destroy(self) -> None:
        """Run the destructor on every remaining element, top first, and empty the stack."""
        while self._items:
            self.drop()

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __enter__(self) -> "Stack[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.destroy()
