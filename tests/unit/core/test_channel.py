"""Unit tests for the unbuffered channel.

Tests for rendezvous handoff, close semantics and iteration.
"""

import threading

import pytest
from venvclean.core.channel import Channel, ChannelClosed


def _start(target: object) -> threading.Thread:
    thread = threading.Thread(target=target, daemon=True)  # type: ignore[arg-type]
    thread.start()
    return thread


class TestSendReceive:
    """Tests for the send/receive handoff."""

    def test_send_blocks_until_received(self) -> None:
        """A sender does not return before the receiver took the item."""
        ch: Channel[int] = Channel()
        sent = threading.Event()

        def producer() -> None:
            ch.send(42)
            sent.set()

        _start(producer)

        assert not sent.wait(0.2)
        assert ch.receive() == 42
        assert sent.wait(2)

    def test_receive_blocks_until_sent(self) -> None:
        """A receiver waits for the next send."""
        ch: Channel[str] = Channel()
        received: list[str] = []
        consumer = _start(lambda: received.append(ch.receive()))

        consumer.join(0.2)
        assert consumer.is_alive()

        ch.send("hello")
        consumer.join(2)
        assert received == ["hello"]

    def test_preserves_order(self) -> None:
        """Items arrive in the order they were sent."""
        ch: Channel[int] = Channel()

        def producer() -> None:
            for i in range(20):
                ch.send(i)
            ch.close()

        _start(producer)

        assert list(ch) == list(range(20))

    def test_none_is_a_valid_item(self) -> None:
        """None is delivered like any other value."""
        ch: Channel[None] = Channel()
        _start(lambda: ch.send(None))

        assert ch.receive() is None


class TestClose:
    """Tests for channel closure."""

    def test_receive_on_closed_raises(self) -> None:
        """Receiving from a closed, empty channel raises ChannelClosed."""
        ch: Channel[int] = Channel("entry stream")
        ch.close()

        with pytest.raises(ChannelClosed, match="entry stream is closed"):
            ch.receive()

    def test_send_on_closed_raises(self) -> None:
        """Sending on a closed channel raises ChannelClosed."""
        ch: Channel[int] = Channel()
        ch.close()

        with pytest.raises(ChannelClosed):
            ch.send(1)

    def test_close_is_idempotent(self) -> None:
        """Closing twice is allowed."""
        ch: Channel[int] = Channel()
        ch.close()
        ch.close()

        assert ch.closed

    def test_close_wakes_blocked_receiver(self) -> None:
        """A receiver parked on an empty channel is released by close()."""
        ch: Channel[int] = Channel()
        errors: list[Exception] = []

        def consumer() -> None:
            try:
                ch.receive()
            except ChannelClosed as e:
                errors.append(e)

        thread = _start(consumer)
        thread.join(0.1)
        ch.close()
        thread.join(2)

        assert not thread.is_alive()
        assert len(errors) == 1

    def test_close_wakes_blocked_sender(self) -> None:
        """A sender waiting for its item to be taken is released by close()."""
        ch: Channel[int] = Channel()
        errors: list[Exception] = []

        def producer() -> None:
            try:
                ch.send(1)
            except ChannelClosed as e:
                errors.append(e)

        thread = _start(producer)
        thread.join(0.1)
        ch.close()
        thread.join(2)

        assert not thread.is_alive()
        assert len(errors) == 1

    def test_iteration_stops_on_close(self) -> None:
        """Iterating an already closed channel yields nothing."""
        ch: Channel[int] = Channel()
        ch.close()

        assert list(ch) == []

    def test_not_closed_initially(self) -> None:
        """A new channel is open."""
        assert not Channel().closed
