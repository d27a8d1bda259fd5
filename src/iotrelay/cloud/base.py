"""Cloud session interface.

The relay consumes the cloud transport through two narrow contracts:
submit a message for asynchronous delivery and learn the outcome later,
and receive messages pushed from the cloud, answering accepted or rejected.
Connection handling, authentication and retries belong to the session.
"""

from __future__ import annotations

import concurrent.futures
import enum
from abc import ABC, abstractmethod
from typing import Callable, Optional

from ..protocol.message import CloudMessage


class Confirmation(enum.Enum):
    """Outcome of an asynchronous submission."""

    OK = "OK"
    ERROR = "ERROR"
    TIMEOUT = "TIMEOUT"
    DESTROYED = "DESTROYED"


class Disposition(enum.Enum):
    """Answer returned to the session for a cloud-pushed message."""

    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


MessageHandler = Callable[[CloudMessage], Disposition]


class SessionError(Exception):
    """Base class for session-layer errors."""


class SubmissionRejected(SessionError):
    """The session would not queue a message for delivery."""


class SessionConnectionError(SessionError):
    """The session could not establish or maintain its connection."""


def describe(error: BaseException) -> str:
    """Name *error* for a log line. Transport exceptions often carry no
    message at all, so the type name is always included."""

    text = str(error)
    if text:
        return f"{type(error).__name__}: {text}"
    return type(error).__name__


class CloudSession(ABC):
    """Minimal contract for a cloud messaging session."""

    @abstractmethod
    def open(self) -> None:
        """Establish the connection."""

    @abstractmethod
    def close(self) -> None:
        """Tear the connection down; pending submissions complete as DESTROYED."""

    @abstractmethod
    def submit(self, message: CloudMessage) -> "concurrent.futures.Future[Confirmation]":
        """Queue *message* for delivery.

        Returns a future that resolves to a :class:`Confirmation` on the
        session's own thread. Raises :class:`SubmissionRejected` if the
        message cannot be queued at all.
        """

    @abstractmethod
    def on_message(self, handler: Optional[MessageHandler]) -> None:
        """Install the handler invoked for every cloud-pushed message."""

    @property
    def is_open(self) -> bool:
        """Whether the session is currently connected."""
        return False
