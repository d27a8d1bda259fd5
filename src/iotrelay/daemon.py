""" The ``iotrelay`` command. This is the process entry point: parse the
    command line, set up logging, connect the cloud session, and run the
    relay until a termination signal arrives.

    Usage::

        iotrelay [-h] [-v] [-c CONNECTION_STRING]
"""

import argparse
import logging
import signal
import sys

import rich.console
import rich.logging

from . import __version__
from . import cloud
from . import config
from . import errors
from .relay import Relay


logger = logging.getLogger(__name__)


def arguments(argv=None):

    parser = argparse.ArgumentParser(
        prog='iotrelay',
        description='Relay messages between local mailboxes and a cloud messaging service.')

    parser.add_argument('-v', '--verbose', action='store_true', default=False,
        help='Echo message headers, bodies, and delivery outcomes to stdout.')

    parser.add_argument('-c', '--connection-string', default=None,
        help='Cloud connection string; overrides the stored setting.')

    parser.add_argument('--version', action='version', version='%(prog)s ' + __version__)

    return parser.parse_args(argv)



def configure_logging(verbose=False):
    """ Route the ``iotrelay`` loggers to stderr. Only warnings and errors
        are shown unless *verbose* is set.
    """

    if verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    console = rich.console.Console(stderr=True)
    handler = rich.logging.RichHandler(console=console, show_path=False)
    handler.setFormatter(logging.Formatter('%(message)s'))

    root = logging.getLogger('iotrelay')
    root.handlers[:] = [handler]
    root.setLevel(level)
    root.propagate = False

    if verbose:
        # pika is very chatty at DEBUG.
        logging.getLogger('pika').setLevel(logging.WARNING)



def connection_string(settings, override=None):
    """ Return the connection string to use: *override* if it is valid,
        otherwise whatever the settings hold. An invalid override is logged
        and ignored.
    """

    if override is not None:
        if config.valid_connection_string(override):
            return override

        logger.error('ignoring connection string: must be 1 to %d characters',
                     config.connection_string_size - 1)

    return settings.connection_string()



def connect(relay, connection_string):
    """ Open a cloud session and attach it to *relay*. A failed first
        connection is logged; the session keeps retrying in the background,
        and outbound messages are dropped until it connects.
    """

    if connection_string is None:
        logger.error('no connection string configured; outbound messages will be dropped')
        return None

    try:
        session = cloud.session(connection_string)
    except ValueError as e:
        logger.error('unusable connection string: %s', e)
        return None

    relay.attach(session)

    try:
        session.open()
    except cloud.SessionError as e:
        logger.error('cannot connect to the cloud, retrying in the background: %s', cloud.describe(e))
    else:
        logger.info('connected to the cloud')

    return session



def install_signal_handlers(relay):
    """ Terminate cleanly on SIGINT or SIGTERM: release the relay's
        resources and exit with status 1.
    """

    def terminate(signum, frame):
        logger.warning('abnormal termination (%s)', signal.Signals(signum).name)
        relay.shutdown()
        sys.exit(1)

    signal.signal(signal.SIGINT, terminate)
    signal.signal(signal.SIGTERM, terminate)



def main(argv=None):

    parsed = arguments(argv)
    configure_logging(parsed.verbose)

    settings = config.Settings()
    connection = connection_string(settings, parsed.connection_string)

    try:
        relay = Relay(verbose=parsed.verbose, fifo_directory=settings.fifo_directory())
    except errors.OutOfMemory as e:
        logger.critical('%s', e)
        return 1

    install_signal_handlers(relay)
    connect(relay, connection)

    try:
        relay.open()
    except errors.ResourceUnavailable as e:
        logger.critical('%s', e)
        relay.shutdown()
        return 1

    relay.run()
    relay.shutdown()
    return 0



if __name__ == '__main__':
    sys.exit(main())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
