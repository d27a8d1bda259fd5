"""POSIX message queue mailboxes."""

from __future__ import annotations

import errno
from typing import Optional

import posix_ipc

from ..errors import ResourceUnavailable
from .base import Mailbox


class Queue(Mailbox):
    """A handle on a POSIX message queue, named like ``/iothub``."""

    def __init__(self, queue: posix_ipc.MessageQueue):
        self._queue = queue
        self.name = queue.name

    @property
    def max_message_size(self) -> int:
        return self._queue.max_message_size

    def receive(self, timeout: Optional[float] = None) -> bytes:
        try:
            message, _priority = self._queue.receive(timeout)
        except posix_ipc.BusyError:
            raise TimeoutError(f"{self.name}: no message in {timeout} sec")
        except posix_ipc.SignalError:
            raise InterruptedError(f"{self.name}: receive interrupted by a signal")
        return message

    def send(self, message: bytes) -> None:
        try:
            self._queue.send(message, priority=0)
        except posix_ipc.SignalError:
            raise InterruptedError(f"{self.name}: send interrupted by a signal")
        except ValueError as e:
            raise OSError(errno.EMSGSIZE, f"{self.name}: {e}")

    def close(self) -> None:
        try:
            self._queue.close()
        except posix_ipc.ExistentialError:
            pass

    def unlink(self) -> None:
        unlink(self.name)


def create(name: str, max_message_size: Optional[int] = None) -> Queue:
    """Create (if absent) and open the read-only mailbox *name*.

    The system default message size applies unless *max_message_size* is
    given; an existing queue keeps whatever size it was created with.
    """

    kwargs = {}
    if max_message_size is not None:
        kwargs["max_message_size"] = int(max_message_size)

    try:
        queue = posix_ipc.MessageQueue(
            name,
            posix_ipc.O_CREAT,
            mode=0o600,
            read=True,
            write=False,
            **kwargs,
        )
    except (posix_ipc.Error, OSError) as e:
        raise ResourceUnavailable(f"cannot create mailbox {name}: {e}")

    return Queue(queue)


def open(name: str) -> Queue:
    """Open the existing mailbox *name* for writing."""

    try:
        queue = posix_ipc.MessageQueue(name, read=False, write=True)
    except (posix_ipc.Error, OSError) as e:
        raise ResourceUnavailable(f"cannot open mailbox {name}: {e}")

    return Queue(queue)


def unlink(name: str) -> None:
    try:
        posix_ipc.unlink_message_queue(name)
    except posix_ipc.ExistentialError:
        pass
