"""Relay error taxonomy.

Every failure the relay can report on a per-message basis is one of these
exceptions. Each carries an errno-style ``code`` so that callers (and the
log) can distinguish the cause without parsing text.
"""

from __future__ import annotations

import errno
from typing import Optional


class RelayError(Exception):
    """Base class for all relay errors."""

    code = errno.EIO

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class InvalidArgument(RelayError):
    """A required input to an internal operation was missing or empty."""

    code = errno.EINVAL


class ResourceUnavailable(RelayError):
    """A mailbox or side-channel resource could not be opened or created."""

    code = errno.ENOENT


class OutOfMemory(RelayError):
    """Growing the property list failed."""

    code = errno.ENOMEM


class MalformedFrame(RelayError):
    """Bad control message preamble, or an inbound message with no route."""

    code = errno.EBADMSG


class TransportRejected(RelayError):
    """The cloud session refused construction, a property, or submission."""

    code = errno.EIO


class NoSession(RelayError):
    """No cloud session is active."""

    code = errno.EBADF


class InsufficientSpace(RelayError):
    """A serialized message does not fit the destination's size limit."""

    code = errno.ENOSPC


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
