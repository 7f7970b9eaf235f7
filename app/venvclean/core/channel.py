"""Unbuffered rendezvous channel between two threads.

A sender blocks until the receiver has taken its item, so the producer
can never run ahead of what the consumer has actually seen. Each
channel is meant for exactly one producer and one consumer.
"""

import threading
from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")


class ChannelClosed(Exception):
    """Raised when receiving from a drained closed channel or sending on a closed one."""


class Channel(Generic[T]):
    """Unbuffered channel with close semantics.

    Example:
        >>> ch: Channel[int] = Channel()
        >>> # producer thread: ch.send(1); ch.close()
        >>> # consumer thread: for item in ch: ...
    """

    def __init__(self, name: str = "channel") -> None:
        self.name = name
        self._cond = threading.Condition()
        self._item: T | None = None
        self._has_item = False
        # Incremented on each handoff so a sender can tell its own item was taken
        self._taken = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        with self._cond:
            return self._closed

    def send(self, item: T) -> None:
        """Hand an item to the receiver, blocking until it is received.

        Args:
            item: Value to deliver.

        Raises:
            ChannelClosed: If the channel is closed before or while waiting.
        """
        with self._cond:
            while self._has_item and not self._closed:
                self._cond.wait()
            if self._closed:
                raise ChannelClosed(f"send on closed {self.name}")

            self._item = item
            self._has_item = True
            ticket = self._taken + 1
            self._cond.notify_all()

            while self._taken < ticket:
                if self._closed:
                    raise ChannelClosed(f"{self.name} closed before item was received")
                self._cond.wait()

    def receive(self) -> T:
        """Take the next item, blocking until one is sent.

        Returns:
            The sent value.

        Raises:
            ChannelClosed: If the channel is closed and no item is pending.
        """
        with self._cond:
            while not self._has_item:
                if self._closed:
                    raise ChannelClosed(f"{self.name} is closed")
                self._cond.wait()

            item = self._item
            self._item = None
            self._has_item = False
            self._taken += 1
            self._cond.notify_all()
            return item  # type: ignore[return-value]

    def close(self) -> None:
        """Close the channel. Safe to call more than once."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def __iter__(self) -> Iterator[T]:
        """Receive items until the channel is closed."""
        while True:
            try:
                yield self.receive()
            except ChannelClosed:
                return
