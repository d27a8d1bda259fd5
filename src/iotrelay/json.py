''' JSON handling for the settings store and the mailbox attribute files.
    The fastest available library provides :func:`dumps` and :func:`loads`;
    :func:`load` and :func:`save` wrap them for whole-file access.
'''

import os

msgspec = None
orjson = None
json = None

try:
    import msgspec
except ImportError:
    pass

if msgspec is None:
    try:
        import orjson
    except ImportError:
        pass

if msgspec is None and orjson is None:
    import json


# msgspec.json.encode() returns bytes, as does orjson.dumps(). The standard
# library variant is wrapped to match.

def json_dumps(*args, **kwargs):
    return json.dumps(*args, **kwargs).encode()

if msgspec is not None:
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    loads = decoder.decode
elif orjson is not None:
    dumps = orjson.dumps
    loads = orjson.loads
else:
    dumps = json_dumps
    loads = json.loads



def load(filename):
    """ Return the decoded contents of *filename*. A missing file raises
        :class:`FileNotFoundError`; the caller decides whether that matters.
    """

    with open(filename, 'rb') as handle:
        raw = handle.read()

    if raw.strip() == b'':
        return dict()

    # msgspec and orjson raise their own decode errors; normalize them.

    try:
        return loads(raw)
    except Exception as e:
        raise ValueError('cannot decode ' + filename + ': ' + str(e))



def save(filename, contents):
    """ Write *contents* to *filename* as JSON. The file is written to a
        temporary name first and renamed into place, so that a concurrent
        reader never sees a partial file.
    """

    encoded = dumps(contents)
    temporary = filename + '.tmp'

    with open(temporary, 'wb') as handle:
        handle.write(encoded)

    os.replace(temporary, filename)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
