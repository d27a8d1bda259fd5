""" Local wire formats.

    Control messages arrive on the relay's inbound mailbox laid out as::

        b'IOTC' | pid (4 bytes, native order) | header text | NUL

    The message body does not travel in the control message; it is read from
    the side channel named after the *pid* (see :mod:`.sidechannel`).

    Messages delivered to a local service mailbox are serialized as::

        messageId:<id>\\n
        correlationId:<id>\\n
        <key>:<value>\\n          (one line per user property)
        \\n
        <body bytes> NUL
"""

import struct

from . import fields
from . import properties
from .message import CloudMessage
from .. import errors


_pid_format = struct.Struct('=I')


class ControlFrame:
    """ A decoded control message: the *pid* of the sending process and its
        (possibly empty) *headers* text.
    """

    def __init__(self, pid, headers):
        self.pid = pid
        self.headers = headers


    def __repr__(self):
        return 'ControlFrame(pid=%d, headers=%r)' % (self.pid, self.headers)


# end of class ControlFrame



def pack_control(pid, headers=''):
    """ Build the control message announcing a body from process *pid*,
        tagged with the *headers* text (see :mod:`.properties`).
    """

    if headers is None:
        headers = ''

    if isinstance(headers, str):
        headers = headers.encode('utf-8')

    return fields.PREAMBLE + _pid_format.pack(pid) + headers + b'\0'



def unpack_control(buffer):
    """ Decode a control message received from the inbound mailbox. Raises
        :class:`iotrelay.errors.MalformedFrame` if the buffer is too short
        or does not start with the expected preamble.
    """

    if buffer is None:
        raise errors.InvalidArgument('no control message to decode')

    buffer = bytes(buffer)

    if len(buffer) < fields.HEADER_OFFSET:
        raise errors.MalformedFrame('control message is only %d bytes' % (len(buffer)))

    if buffer[:len(fields.PREAMBLE)] != fields.PREAMBLE:
        raise errors.MalformedFrame('invalid preamble: ' + repr(buffer[:len(fields.PREAMBLE)]))

    pid, = _pid_format.unpack_from(buffer, len(fields.PREAMBLE))

    headers = buffer[fields.HEADER_OFFSET:]
    nul = headers.find(b'\0')
    if nul != -1:
        headers = headers[:nul]

    headers = headers.decode('utf-8', errors='replace')
    return ControlFrame(pid, headers)



def serialize(message, maxlen):
    """ Render the :class:`CloudMessage` *message* into a single buffer of no
        more than *maxlen* bytes, suitable for a local service mailbox.

        Space is checked before every append. The first property line that
        does not fit aborts the whole serialization; after the properties,
        the remaining space must exceed the body length plus one, leaving
        room for the separator, the body, and the trailing NUL. Any shortfall
        raises :class:`iotrelay.errors.InsufficientSpace` and nothing is
        returned; a partial message is never produced.
    """

    if message is None:
        raise errors.InvalidArgument('no message to serialize')

    buffer = bytearray()
    left = int(maxlen)

    left = properties.encode(buffer, fields.MESSAGE_ID, message.message_id, left)
    left = properties.encode(buffer, fields.CORRELATION_ID, message.correlation_id, left)

    for key,value in message.properties.items():
        left = properties.encode(buffer, key, value, left)

    body = message.body_bytes()
    if body is None:
        body = fields.EMPTY_BODY

    if left > len(body) + 1:
        buffer += b'\n'
        buffer += body
        buffer += b'\0'
    else:
        raise errors.InsufficientSpace('body needs %d bytes, %d left' % (len(body) + 2, left))

    return bytes(buffer)



def deserialize(buffer):
    """ The inverse of :func:`serialize`, for local consumers. Returns a
        :class:`CloudMessage`; an empty identity or correlation line is
        read back as None.
    """

    buffer = bytes(buffer)

    if buffer.endswith(b'\0'):
        buffer = buffer[:-1]

    try:
        header, body = buffer.split(b'\n\n', 1)
    except ValueError:
        raise errors.MalformedFrame('no header/body separator in message')

    plist = properties.decode(properties.PropertyList(), header + b'\n')

    message = CloudMessage(body)

    for key,value in plist:
        if value == '' and key in (fields.MESSAGE_ID, fields.CORRELATION_ID):
            continue
        if key == fields.MESSAGE_ID:
            message.set_message_id(value)
        elif key == fields.CORRELATION_ID:
            message.set_correlation_id(value)
        else:
            message.set_property(key, value)

    return message


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
