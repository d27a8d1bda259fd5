"""ZeroMQ mailboxes.

Each mailbox is a PULL socket bound to an ``ipc://`` endpoint in a runtime
directory; writers connect a PUSH socket to it. ZeroMQ has no way for a
writer to ask the reader how large a message it will take, so the reader
records its limit in a small JSON attribute file next to the socket. The
attribute file doubles as the existence check: a mailbox whose attribute
file is missing does not exist.
"""

from __future__ import annotations

import errno
import os
from typing import Optional

import zmq

from .. import json
from ..errors import ResourceUnavailable
from .base import Mailbox


default_message_size = 8192
send_timeout = 1000  # milliseconds
zmq_context = zmq.Context()


def directory() -> str:
    """Where the sockets and attribute files live."""

    return os.environ.get("IOTRELAY_ZMQ_DIR", "/tmp/iotrelay")


def _paths(name: str):
    base = os.path.join(directory(), name.strip("/"))
    return "ipc://" + base + ".sock", base + ".sock", base + ".json"


class Socket(Mailbox):
    """A handle on one end of a ZeroMQ mailbox."""

    def __init__(self, name: str, socket: zmq.Socket, max_message_size: int):
        self.name = name
        self.socket = socket
        self._max_message_size = int(max_message_size)

    @property
    def max_message_size(self) -> int:
        return self._max_message_size

    def receive(self, timeout: Optional[float] = None) -> bytes:
        if timeout is not None:
            if self.socket.poll(int(timeout * 1000), zmq.POLLIN) == 0:
                raise TimeoutError(f"{self.name}: no message in {timeout} sec")
        return self.socket.recv()

    def send(self, message: bytes) -> None:
        if len(message) > self._max_message_size:
            raise OSError(errno.EMSGSIZE, f"{self.name}: message of {len(message)} bytes exceeds {self._max_message_size}")

        try:
            self.socket.send(message)
        except zmq.Again:
            raise OSError(errno.EAGAIN, f"{self.name}: no reader connected")

    def close(self) -> None:
        self.socket.close(linger=send_timeout)

    def unlink(self) -> None:
        unlink(self.name)


def create(name: str, max_message_size: Optional[int] = None) -> Socket:
    """Create and bind the read-only mailbox *name*."""

    if max_message_size is None:
        max_message_size = default_message_size

    endpoint, socket_file, attribute_file = _paths(name)

    try:
        os.makedirs(directory(), mode=0o775, exist_ok=True)
        socket = zmq_context.socket(zmq.PULL)
        socket.setsockopt(zmq.LINGER, 0)
        socket.setsockopt(zmq.MAXMSGSIZE, int(max_message_size))
        socket.bind(endpoint)
    except (zmq.ZMQError, OSError) as e:
        raise ResourceUnavailable(f"cannot create mailbox {name}: {e}")

    json.save(attribute_file, {"max_message_size": int(max_message_size)})
    return Socket(name, socket, max_message_size)


def open(name: str) -> Socket:
    """Connect to the existing mailbox *name* for writing."""

    endpoint, socket_file, attribute_file = _paths(name)

    try:
        attributes = json.load(attribute_file)
        max_message_size = int(attributes["max_message_size"])
    except (OSError, ValueError, KeyError, TypeError) as e:
        raise ResourceUnavailable(f"cannot open mailbox {name}: {e}")

    socket = zmq_context.socket(zmq.PUSH)
    socket.setsockopt(zmq.LINGER, send_timeout)
    socket.setsockopt(zmq.SNDTIMEO, send_timeout)
    socket.setsockopt(zmq.IMMEDIATE, 1)
    socket.connect(endpoint)

    return Socket(name, socket, max_message_size)


def unlink(name: str) -> None:
    for path in _paths(name)[1:]:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
