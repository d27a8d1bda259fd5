import iotrelay
import os
import pytest
import threading

from iotrelay.protocol import fields
from iotrelay.protocol import sidechannel


def writer(fifo, body):
    """ Write *body* to *fifo* from a background thread. A reader that stops
        early closes its end, which the writer sees as a broken pipe.
    """

    def write():
        try:
            sidechannel.write_body(fifo, body)
        except BrokenPipeError:
            pass

    thread = threading.Thread(target=write, daemon=True)
    thread.start()
    return thread



def test_path():

    assert sidechannel.path(42) == '/tmp/iothub_42'
    assert sidechannel.path(42, '/var/run') == '/var/run/iothub_42'



def test_small_body(tmp_path):

    directory = str(tmp_path)
    fifo = sidechannel.create(1001, directory)
    assert fifo == os.path.join(directory, 'iothub_1001')

    # Creating it again is harmless.

    assert sidechannel.create(1001, directory) == fifo

    thread = writer(fifo, b'{"t":1}')
    buffer = bytearray(fields.MAX_BODY_SIZE)

    length = sidechannel.read_body(1001, buffer, directory)
    thread.join(5)

    assert length == 7
    assert buffer[:length] == b'{"t":1}'



def test_full_buffer(tmp_path):
    """ A body exactly the size of the buffer is complete; a longer one is
        cut off at the buffer size.
    """

    directory = str(tmp_path)
    fifo = sidechannel.create(1002, directory)
    buffer = bytearray(fields.MAX_BODY_SIZE)

    body = bytes(range(256)) * (fields.MAX_BODY_SIZE // 256)
    thread = writer(fifo, body)
    length = sidechannel.read_body(1002, buffer, directory)
    thread.join(5)

    assert length == fields.MAX_BODY_SIZE
    assert bytes(buffer) == body


    thread = writer(fifo, body + b'!')
    length = sidechannel.read_body(1002, buffer, directory)
    thread.join(5)

    assert length == fields.MAX_BODY_SIZE
    assert bytes(buffer) == body



def test_missing(tmp_path):

    buffer = bytearray(16)

    with pytest.raises(iotrelay.errors.ResourceUnavailable):
        sidechannel.read_body(1003, buffer, str(tmp_path))

    with pytest.raises(iotrelay.errors.InvalidArgument):
        sidechannel.read_body(1003, None, str(tmp_path))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
