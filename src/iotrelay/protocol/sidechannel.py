""" The body side channel. A producer announces a message with a small
    control message carrying its process id, and streams the body through a
    FIFO whose path embeds that id. The relay reads the FIFO to the end, or
    until the body buffer is full, whichever happens first.
"""

import io
import os

from . import fields
from .. import errors


chunk_size = io.DEFAULT_BUFFER_SIZE


def path(pid, directory=None):
    """ Return the FIFO path for the process identified by *pid*.
    """

    if directory is None:
        directory = fields.FIFO_DIRECTORY

    return os.path.join(directory, '%s%d' % (fields.FIFO_PREFIX, pid))



def read_body(pid, buffer, directory=None):
    """ Read the body sent by process *pid* into *buffer*, a writable
        bytes-like object (normally the relay's reused bytearray). Reading
        stops at end-of-file or when the buffer is full; a body exactly the
        size of the buffer is complete even without end-of-file, and a longer
        body is cut off at the buffer size.

        Returns the number of bytes read. Raises
        :class:`iotrelay.errors.ResourceUnavailable` if the FIFO cannot be
        opened or read.
    """

    if buffer is None:
        raise errors.InvalidArgument('no receive buffer for the message body')

    fifo = path(pid, directory)
    view = memoryview(buffer)
    capacity = len(view)
    total = 0

    try:
        fd = os.open(fifo, os.O_RDONLY)
    except OSError as e:
        raise errors.ResourceUnavailable('cannot open %s: %s' % (fifo, e.strerror), e.errno)

    try:
        while total < capacity:
            wanted = min(chunk_size, capacity - total)
            n = os.readv(fd, [view[total:total + wanted]])

            if n == 0:
                break

            total += n

    except OSError as e:
        raise errors.ResourceUnavailable('cannot read %s: %s' % (fifo, e.strerror), e.errno)

    finally:
        os.close(fd)

    return total



def create(pid=None, directory=None):
    """ Producer side: make sure the FIFO for *pid* (default: this process)
        exists, and return its path.
    """

    if pid is None:
        pid = os.getpid()

    fifo = path(pid, directory)

    try:
        os.mkfifo(fifo, 0o600)
    except FileExistsError:
        pass
    except OSError as e:
        raise errors.ResourceUnavailable('cannot create %s: %s' % (fifo, e.strerror), e.errno)

    return fifo



def write_body(fifo, body):
    """ Producer side: stream *body* through the FIFO at *fifo*. Opening
        the FIFO blocks until the relay opens it for reading.
    """

    with open(fifo, 'wb') as handle:
        handle.write(body)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
