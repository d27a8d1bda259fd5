"""Local mailbox interface.

This is the (small) contract that mailbox implementations follow. The relay
treats a mailbox as a named, bounded message queue: it can be created and
read, opened and written, asked for its maximum message size, and removed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class Mailbox(ABC):
    """One end of a named local mailbox."""

    name: str

    @property
    @abstractmethod
    def max_message_size(self) -> int:
        """Largest message, in bytes, this mailbox accepts."""

    @abstractmethod
    def receive(self, timeout: Optional[float] = None) -> bytes:
        """Block until the next message arrives and return it."""

    @abstractmethod
    def send(self, message: bytes) -> None:
        """Deliver one complete message."""

    @abstractmethod
    def close(self) -> None:
        """Release this handle; the mailbox itself remains."""

    @abstractmethod
    def unlink(self) -> None:
        """Remove the mailbox from the system."""

    def __enter__(self) -> "Mailbox":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
