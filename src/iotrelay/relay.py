""" The relay itself. A :class:`Relay` instance owns every long-lived
    resource of the process: the inbound mailbox, the cloud session, the
    reusable property list and body buffer, and the delivery counters. It is
    passed explicitly to the outbound pipeline and the inbound router; there
    is no process-wide state.
"""

import logging
import threading

import rich.console

from . import errors
from . import inbound
from . import mailbox
from . import outbound
from .protocol import fields
from .protocol import sidechannel
from .protocol import wire
from .protocol.properties import PropertyList


logger = logging.getLogger(__name__)

# How much of a message body is shown when echoing in verbose mode.

preview_size = 1024


class Counters:
    """ Delivery statistics. Submissions are counted on the relay's own
        thread, completions on the session's thread; all updates go through
        a lock.
    """

    def __init__(self):

        self._lock = threading.Lock()
        self.attempted = 0
        self.succeeded = 0
        self.failed = 0


    def attempt(self):
        with self._lock:
            self.attempted += 1


    def success(self):
        with self._lock:
            self.succeeded += 1


    def failure(self):
        with self._lock:
            self.failed += 1


    def snapshot(self):
        """ Return a consistent (attempted, succeeded, failed) tuple.
        """

        with self._lock:
            return (self.attempted, self.succeeded, self.failed)


# end of class Counters



class Relay:
    """ Relay state and the main receive loop. The *session* may be None,
        or may be attached later with :func:`attach`; until a connected
        session is present every outbound message is dropped with
        :class:`iotrelay.errors.NoSession`.

        *mailboxes* is the module providing ``create()``, ``open()`` and
        ``unlink()``; it defaults to :mod:`iotrelay.mailbox`. In verbose
        mode headers, bodies and delivery outcomes are echoed to *console*,
        a :class:`rich.console.Console` writing to stdout by default.

        Allocating the body buffer happens here; if that fails the relay
        cannot run at all and :class:`iotrelay.errors.OutOfMemory` is raised.
    """

    def __init__(self, session=None, verbose=False, fifo_directory=None, mailboxes=None, console=None):

        if mailboxes is None:
            mailboxes = mailbox

        if console is None:
            console = rich.console.Console()

        self.mailboxes = mailboxes
        self.console = console
        self.verbose = verbose
        self.fifo_directory = fifo_directory
        self.counters = Counters()
        self.properties = PropertyList()
        self.mailbox = None
        self.session = None
        self.running = False

        try:
            self.body = bytearray(fields.MAX_BODY_SIZE)
        except MemoryError:
            raise errors.OutOfMemory('cannot allocate the %d byte body buffer' % (fields.MAX_BODY_SIZE))

        if session is not None:
            self.attach(session)


    def attach(self, session):
        """ Use *session* for outbound messages, and route its cloud-pushed
            messages to local mailboxes.
        """

        self.session = session
        session.on_message(self.route)


    def open(self, name=fields.MAILBOX_NAME):
        """ Create the inbound mailbox. Failure raises
            :class:`iotrelay.errors.ResourceUnavailable`, and is fatal.
        """

        self.mailbox = self.mailboxes.create(name)
        logger.debug('listening on %s', name)


    def echo(self, text, style=None):
        if self.verbose:
            self.console.print(text, style=style, markup=False, highlight=False)


    def send(self, body, headers=None):
        return outbound.send(self, body, headers)


    def route(self, message):
        return inbound.route(self, message)


    def process(self, timeout=None):
        """ Handle one control message from the inbound mailbox: decode it,
            read the body from the sender's FIFO, and submit the result.
            Returns the :class:`iotrelay.outbound.PendingSend`.
        """

        buffer = self.mailbox.receive(timeout)
        frame = wire.unpack_control(buffer)

        self.echo('headers: ' + repr(frame.headers))

        length = sidechannel.read_body(frame.pid, self.body, self.fifo_directory)
        body = bytes(self.body[:length])

        if self.verbose:
            preview = body[:preview_size].decode('utf-8', errors='replace')
            if length > preview_size:
                preview += '...'
            self.echo('body (%d bytes): %s' % (length, preview))

        return self.send(body, frame.headers)


    def run(self):
        """ Process control messages until :func:`stop` is called. A
            failure handling one message is logged and the loop moves on to
            the next.
        """

        self.running = True

        while self.running:
            try:
                self.process()
            except errors.RelayError as e:
                logger.error('message dropped: %s', e)
            except InterruptedError:
                continue
            except OSError as e:
                logger.error('receive failed: %s', e)


    def stop(self):
        self.running = False


    def shutdown(self):
        """ Release everything: the cloud session first, so that pending
            submissions resolve while the relay can still count them, then
            the inbound mailbox, which is also removed from the system.
        """

        self.running = False

        session = self.session
        self.session = None

        if session is not None:
            try:
                session.close()
            except Exception:
                logger.exception('error closing the cloud session')

        queue = self.mailbox
        self.mailbox = None

        if queue is not None:
            queue.close()
            queue.unlink()

        attempted, succeeded, failed = self.counters.snapshot()
        logger.info('%d messages submitted, %d delivered, %d failed', attempted, succeeded, failed)


# end of class Relay


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
