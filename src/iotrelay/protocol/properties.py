""" Codec for the ``key:value`` property mini-language used to tag messages
    with identity and custom metadata. Properties are written one per line;
    the block ends at an empty line or at the end of the text::

        messageId:abc123
        correlationId:xyz
        foo:bar

    There is no escaping: keys cannot contain a colon or newline, values
    cannot contain a newline.
"""

import errno

from . import fields
from .. import errors


class PropertyList:
    """ An ordered, reusable sequence of (key, value) pairs. The relay keeps
        one instance and decodes every outbound header into it; the backing
        storage is retained across messages, but :func:`truncate` always
        trims the visible length to the most recent decode, so a short header
        following a long one never exposes stale entries.
    """

    def __init__(self):
        self._slots = list()
        self._length = 0


    def __iter__(self):
        for index in range(self._length):
            yield self._slots[index]


    def __len__(self):
        return self._length


    def __getitem__(self, index):
        return list(self)[index]


    def __repr__(self):
        return 'PropertyList(%r)' % (list(self),)


    @property
    def capacity(self):
        return len(self._slots)


    def clear(self):
        self._length = 0


    def store(self, index, key, value):
        """ Place a property at *index*, reusing an existing slot if one
            is available and growing the storage by one slot otherwise.
        """

        pair = (key, value)

        if index < len(self._slots):
            self._slots[index] = pair
        else:
            try:
                self._slots.append(pair)
            except MemoryError:
                raise errors.OutOfMemory('cannot extend the property list')


    def truncate(self, length):
        self._length = length


# end of class PropertyList



def decode(plist, header):
    """ Parse the *header* text into *plist*, a :class:`PropertyList`,
        replacing whatever it held before. The scan alternates between two
        states: accumulating a key until a colon, then accumulating a value
        until a newline. A newline (or the end of input) found while looking
        for a key ends the block, which is how an empty line terminates it;
        any unterminated key fragment is dropped without complaint. A NUL
        character is treated as the end of input.

        Returns *plist*.
    """

    if plist is None or header is None:
        raise errors.InvalidArgument('decode requires a property list and a header')

    if isinstance(header, (bytes, bytearray)):
        header = bytes(header).decode('utf-8', errors='replace')

    nul = header.find('\0')
    if nul != -1:
        header = header[:nul]

    plist.clear()

    count = 0
    position = 0
    end = len(header)

    while position < end:
        colon = header.find(':', position)
        newline = header.find('\n', position)

        if colon == -1:
            break

        if newline != -1 and newline < colon:
            # Either an empty line, or a line with no colon in it.
            break

        key = header[position:colon]

        newline = header.find('\n', colon + 1)
        if newline == -1:
            value = header[colon + 1:]
            position = end
        else:
            value = header[colon + 1:newline]
            position = newline + 1

        plist.store(count, key, value)
        count += 1

    plist.truncate(count)
    return plist



def apply(message, plist):
    """ Copy the properties in *plist* onto *message*, a
        :class:`iotrelay.protocol.message.CloudMessage`. The reserved
        ``messageId`` and ``correlationId`` keys set the message identity and
        correlation identifier; every other key becomes a user property.

        The first property the message refuses raises
        :class:`iotrelay.errors.TransportRejected`; properties applied before
        it remain applied.
    """

    if message is None or plist is None:
        raise errors.InvalidArgument('apply requires a message and a property list')

    for key,value in plist:
        if key == fields.MESSAGE_ID:
            setter = message.set_message_id
            code = errno.ENOTSUP
        elif key == fields.CORRELATION_ID:
            setter = message.set_correlation_id
            code = errno.ENOTSUP
        else:
            setter = None
            code = errno.ENOENT

        try:
            if setter is None:
                message.set_property(key, value)
            else:
                setter(value)
        except ValueError as e:
            raise errors.TransportRejected('%s: %s' % (key, e), code)



def encode(buffer, key, value, left):
    """ Append one ``key:value\\n`` line to the bytearray *buffer*, provided
        it fits in the *left* bytes remaining. A line must leave at least one
        byte unused; that byte is where a serialized message ends up with its
        separator or terminator.

        Returns the number of bytes remaining after the append. Raises
        :class:`iotrelay.errors.InsufficientSpace` if the line does not fit,
        in which case nothing is appended.
    """

    if value is None:
        value = ''

    line = ('%s:%s\n' % (key, value)).encode('utf-8')
    length = len(line)

    if left > length:
        buffer.extend(line)
        return left - length

    raise errors.InsufficientSpace('property %r needs %d bytes, %d left' % (key, length, left))



def render(pairs):
    """ Producer side: return the header text for *pairs*, a dictionary or
        a sequence of (key, value) tuples, terminated by an empty line.
        Raises :class:`iotrelay.errors.InvalidArgument` for a key or value
        the format cannot carry.
    """

    if hasattr(pairs, 'items'):
        pairs = pairs.items()

    lines = list()

    for key,value in pairs:
        key = str(key)
        value = str(value)

        if key == '' or ':' in key or '\n' in key or '\0' in key:
            raise errors.InvalidArgument('invalid property key: ' + repr(key))

        if '\n' in value or '\0' in value:
            raise errors.InvalidArgument('invalid value for property %r: %r' % (key, value))

        lines.append('%s:%s\n' % (key, value))

    lines.append('\n')
    return ''.join(lines)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
