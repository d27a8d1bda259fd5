""" The outbound pipeline: turn a body and its header text into a
    :class:`iotrelay.protocol.message.CloudMessage`, and hand it to the cloud
    session for asynchronous delivery. The outcome is reported later, on the
    session's thread, through a :class:`PendingSend`.
"""

import concurrent.futures
import errno
import logging
import threading
import uuid

from . import errors
from .cloud import Confirmation, SubmissionRejected
from .protocol import properties
from .protocol.message import CloudMessage


logger = logging.getLogger(__name__)


class PendingSend:
    """ Context for one submitted message. It is created when the message is
        handed to the session and completed when the session resolves the
        submission; at that point the relay counters are updated and the
        reference to the relay is dropped.

        :ivar message: The :class:`CloudMessage` that was submitted.
        :ivar result: The final :class:`iotrelay.cloud.Confirmation`, or None
                      while the submission is in flight.
    """

    def __init__(self, message, relay):

        self.message = message
        self.relay = relay
        self.result = None
        self.done = threading.Event()


    @property
    def id(self):
        return self.message.message_id


    def wait(self, timeout=None):
        """ Block until the submission completes, or *timeout* seconds
            elapse. Returns the :class:`iotrelay.cloud.Confirmation`, or
            None on timeout.
        """

        self.done.wait(timeout)
        return self.result


    def _complete(self, future):
        """ Done-callback for the session's future. This runs on whatever
            thread resolved the future; it must not block, and it must not
            call back into the pipeline.
        """

        relay = self.relay

        message_id = self.message.message_id
        if message_id is None:
            message_id = 'unknown'

        try:
            result = future.result()
        except (concurrent.futures.CancelledError, Exception) as e:
            logger.error('%s: submission failed: %s', message_id, e)
            result = Confirmation.ERROR

        if relay is not None:
            if result == Confirmation.OK:
                relay.counters.success()
                style = 'green'
            else:
                relay.counters.failure()
                style = 'red'

            relay.echo('%s: Message Send %s' % (message_id, result.value), style)

        self.result = result
        self.relay = None
        self.done.set()


# end of class PendingSend



def send(relay, body, headers=None):
    """ Submit *body* (bytes, 1 byte to 256 KiB) to the cloud session of
        *relay*, tagged with the optional *headers* text. The headers are
        decoded into the relay's reusable property list and applied to the
        message; a message with no ``messageId`` header gets a fresh UUID.

        Returns the :class:`PendingSend` for the submission. Each failure
        raises a distinct :class:`iotrelay.errors.RelayError`, and the message
        is dropped; the relay itself never retries.
    """

    if relay is None or body is None or len(body) == 0:
        raise errors.InvalidArgument('send requires a relay and a non-empty body')

    session = relay.session
    if session is None or not session.is_open:
        raise errors.NoSession('no active cloud session')

    try:
        message = CloudMessage(body)
    except ValueError as e:
        raise errors.TransportRejected('cannot create message: ' + str(e), errno.EBADMSG)

    if headers is not None:
        plist = relay.properties
        properties.decode(plist, headers)
        properties.apply(message, plist)

    if message.message_id is None:
        message.set_message_id(str(uuid.uuid4()))

    relay.echo('Sending message: ' + message.message_id, 'yellow')

    pending = PendingSend(message, relay)
    relay.counters.attempt()

    try:
        future = session.submit(message)
    except SubmissionRejected as e:
        relay.counters.failure()
        raise errors.TransportRejected('cannot queue message %s: %s' % (message.message_id, e), errno.EIO)

    future.add_done_callback(pending._complete)
    return pending


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
