"""
Iterator pattern.

External iterators (:class:`ArrayIterator`) leave the client in charge of
advancing, which is what makes :func:`merge` possible. Internal iterators
(:func:`for_each`, :meth:`Portfolio.each_account`) keep the loop inside the
aggregate and hand each element to a callable.
"""
from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, Sequence, TypeVar

from patternkit.domain.exceptions import IteratorExhaustedError

T = TypeVar("T")


class ArrayIterator(Generic[T]):
    """External iterator over an indexable sequence."""

    def __init__(self, sequence: Sequence[T]):
        self._sequence = sequence
        self._index = 0

    def has_next(self) -> bool:
        return self._index < len(self._sequence)

    def item(self) -> T:
        """Current element without advancing."""
        if not self.has_next():
            raise IteratorExhaustedError("Iterator has no current item")
        return self._sequence[self._index]

    def next_item(self) -> T:
        """Return the current element and advance."""
        value = self.item()
        self._index += 1
        return value

    def __iter__(self) -> "ArrayIterator[T]":
        return self

    def __next__(self) -> T:
        if not self.has_next():
            raise StopIteration
        return self.next_item()


class ChangeResistantIterator(ArrayIterator[T]):
    """External iterator over a snapshot; later changes to the source are not seen."""

    def __init__(self, sequence: Sequence[T]):
        super().__init__(tuple(sequence))


def for_each(iterable: Iterable[T], fn: Callable[[T], Any]) -> None:
    """Internal iterator: call ``fn`` with every element."""
    for element in iterable:
        fn(element)


def merge(
    first: ArrayIterator[T],
    second: ArrayIterator[T],
    key: Optional[Callable[[T], Any]] = None,
) -> List[T]:
    """
    Merge two sorted external iterators into one sorted list.

    On ties the element from ``first`` comes first.
    """
    key = key or (lambda value: value)
    merged: List[T] = []
    while first.has_next() and second.has_next():
        if key(second.item()) < key(first.item()):
            merged.append(second.next_item())
        else:
            merged.append(first.next_item())
    while first.has_next():
        merged.append(first.next_item())
    while second.has_next():
        merged.append(second.next_item())
    return merged


class Portfolio:
    """Aggregate of accounts exposing iteration but not its list."""

    def __init__(self, accounts: Optional[Iterable[Any]] = None):
        self._accounts: List[Any] = list(accounts or [])

    def add_account(self, account: Any) -> None:
        self._accounts.append(account)

    def each_account(self, fn: Callable[[Any], Any]) -> None:
        for_each(list(self._accounts), fn)

    def __iter__(self) -> Iterator[Any]:
        return ChangeResistantIterator(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)

    def external_iterator(self) -> ArrayIterator[Any]:
        return ChangeResistantIterator(self._accounts)
