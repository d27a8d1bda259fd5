""" Python implementation of the IoT relay. The relay carries messages from
    local processes to a cloud messaging service, and routes messages pushed
    from the cloud back to local service mailboxes. This package includes
    the relay daemon, and client helpers for the local processes on either
    side of it.
"""

__version__ = '0.1.0'

# Utility components.

from . import errors
from . import json

# Submodules used by multiple other components.

from . import protocol
from . import config
home = config.directory

from . import mailbox
from . import cloud

# Primary public-facing interfaces.

from .protocol.message import CloudMessage
from .relay import Relay
from .client import Producer, Consumer

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
