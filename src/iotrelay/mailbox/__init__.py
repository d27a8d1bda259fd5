"""Local mailbox implementations.

The backend is chosen once, at import time, from the ``IOTRELAY_MAILBOX``
environment variable: ``posix`` (the default) for POSIX message queues, or
``zmq`` for ZeroMQ ``ipc://`` sockets. Either way the module exposes the
same three functions:

    create(name, max_message_size=None) -> Mailbox   (read side)
    open(name) -> Mailbox                            (write side)
    unlink(name)
"""

import os

from .base import Mailbox

_BACKEND = os.environ.get("IOTRELAY_MAILBOX", "posix")

if _BACKEND == "posix":
    from . import posix as backend
elif _BACKEND == "zmq":
    from . import zmq as backend
else:
    raise ImportError(f"unknown IOTRELAY_MAILBOX backend: {_BACKEND!r}")

create = backend.create
open = backend.open
unlink = backend.unlink
