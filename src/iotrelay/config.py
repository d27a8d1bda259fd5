""" Settings for the relay. The relay needs very little configuration: the
    connection string for the cloud session, and optionally a different
    directory for the body FIFOs. These are held in a small key/value store,
    persisted as JSON in the relay's home directory, with keys named like
    paths in a variable server (``/sys/iot/connection_string``).
"""

import logging
import os
import threading

from . import json
from .protocol import fields


CONNECTION_STRING = '/sys/iot/connection_string'
FIFO_DIRECTORY = '/sys/iot/fifo_directory'

# The longest connection string the relay will accept, in characters.

connection_string_size = 256

logger = logging.getLogger(__name__)


class Settings:
    """ A convenience class to represent the relay settings. To first order
        an instance acts like a dictionary mapping setting names to string
        values; :func:`save` writes any changes back to disk.
    """

    def __init__(self, filename=None):

        if filename is None:
            filename = os.path.join(directory(), 'settings.json')

        self.filename = filename
        self._values = dict()
        self._lock = threading.Lock()

        self.load()


    def __contains__(self, name):
        return name in self._values


    def __getitem__(self, name):
        return self._values[name]


    def __setitem__(self, name, value):
        with self._lock:
            self._values[name] = str(value)


    def get(self, name, default=None):
        return self._values.get(name, default)


    def load(self):
        """ Load the settings from disk. A missing file is the same as an
            empty one; a file that cannot be decoded is logged and ignored.
        """

        try:
            values = json.load(self.filename)
        except FileNotFoundError:
            values = dict()
        except ValueError as e:
            logger.error('ignoring settings file: %s', e)
            values = dict()

        if isinstance(values, dict):
            pass
        else:
            logger.error('ignoring settings file %s: not a JSON object', self.filename)
            values = dict()

        with self._lock:
            self._values = dict((str(k), str(v)) for k,v in values.items())


    def save(self):

        base_dir = os.path.dirname(self.filename)

        if base_dir == '' or os.path.exists(base_dir):
            pass
        else:
            os.makedirs(base_dir, mode=0o775)

        with self._lock:
            values = dict(self._values)

        json.save(self.filename, values)


    def connection_string(self):
        """ Return the cloud connection string, or None if there isn't one.
            The ``IOTRELAY_CONNECTION_STRING`` environment variable, if set,
            takes precedence over the stored value.
        """

        value = os.environ.get('IOTRELAY_CONNECTION_STRING')

        if value is None:
            value = self.get(CONNECTION_STRING)

        if value is None or value == '':
            return None

        return value


    def fifo_directory(self):
        return self.get(FIFO_DIRECTORY, fields.FIFO_DIRECTORY)


# end of class Settings



def valid_connection_string(value):
    """ Return True if *value* is usable as a connection string: non-empty,
        and shorter than :data:`connection_string_size` characters.
    """

    if value is None or value == '':
        return False

    return len(value) < connection_string_size



def directory(default=None):
    """ Return the directory location where settings are loaded from and
        saved to. This defaults to ``$HOME/.iotrelay``, but can be overridden
        by calling this method with a valid path, or by setting the
        ``IOTRELAY_HOME`` environment variable.
    """

    if default is not None:
        default = str(default)
        default = os.path.expandvars(default)

        if os.path.isabs(default):
            pass
        else:
            raise ValueError('the default directory must be an absolute path')

        os.environ['IOTRELAY_HOME'] = default
        return default

    try:
        found = os.environ['IOTRELAY_HOME']
    except KeyError:
        pass
    else:
        return found

    home = os.path.expanduser('~')
    return os.path.join(home, '.iotrelay')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
