"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# Reserved property keys.

MESSAGE_ID = "messageId"
CORRELATION_ID = "correlationId"
SERVICE = "service"

# Control message framing on the relay's inbound mailbox.

PREAMBLE = b"IOTC"
PID_SIZE = 4
HEADER_OFFSET = len(PREAMBLE) + PID_SIZE

# Well-known names.

MAILBOX_NAME = "/iothub"
FIFO_DIRECTORY = "/tmp"
FIFO_PREFIX = "iothub_"

# Largest message body moved through the side channel, and through the
# cloud session in either direction.

MAX_BODY_SIZE = 256 * 1024

# Body substituted when an inbound cloud message carries none.

EMPTY_BODY = b"{}"
