"""
iotrelay Protocol Layer
=======================

Transport-agnostic message formats used by the relay. Nothing in this
package knows about a particular mailbox or cloud session implementation.

---------------------------------------------------------------------

Layer Overview
--------------

Wire Frames (wire.py)
    Control messages from producers, and the flat buffer delivered
    to local service mailboxes.

Side Channel (sidechannel.py)
    Per-producer FIFO carrying message bodies of up to 256 KiB.

Property Codec (properties.py)
    The ``key:value`` mini-language: decode into a reusable list,
    apply to a cloud message, encode within a byte budget.

Message Model (message.py)
    CloudMessage and its content kinds.

Field Vocabulary (fields.py)
    Reserved keys, preamble, well-known names, size limits.

---------------------------------------------------------------------
"""

from . import fields
from . import message
from . import properties
from . import sidechannel
from . import wire

from .message import CloudMessage, ContentKind
from .properties import PropertyList


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
