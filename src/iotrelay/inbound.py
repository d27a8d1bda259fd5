""" The inbound router. The cloud session calls :func:`route` for every
    message pushed from the cloud; the message's ``service`` property names
    the local mailbox (``/<service>``) it is delivered to, serialized into
    the flat local wire format.
"""

import logging

from . import errors
from .cloud import Disposition
from .protocol import fields
from .protocol import wire


logger = logging.getLogger(__name__)


def route(relay, message):
    """ Deliver *message* to its destination mailbox. Returns
        :attr:`Disposition.ACCEPTED` once the whole serialized message has
        been sent, and :attr:`Disposition.REJECTED` otherwise; no exception
        escapes to the session.

        The ``service`` property is forwarded along with every other user
        property; the destination sees exactly what the cloud sent.
    """

    try:
        deliver(relay, message)
    except (errors.RelayError, OSError) as e:
        logger.error('rejecting cloud message: %s', e)
        return Disposition.REJECTED
    except Exception:
        logger.exception('rejecting cloud message')
        return Disposition.REJECTED

    return Disposition.ACCEPTED



def destination(service):
    """ Return the mailbox name for *service*, which must be a plain name:
        non-empty, without slashes or NUL characters.
    """

    if service is None or service == '':
        raise errors.MalformedFrame('no %r property in cloud message' % (fields.SERVICE))

    if '/' in service or '\0' in service:
        raise errors.MalformedFrame('invalid service name: ' + repr(service))

    return '/' + service



def deliver(relay, message):
    """ The body of :func:`route`, raising on failure instead of returning a
        disposition. The destination mailbox is opened for this one message
        and closed again whatever the outcome.
    """

    if relay is None or message is None:
        raise errors.InvalidArgument('route requires a relay and a message')

    for key,value in message.properties.items():
        relay.echo('%s:%s' % (key, value))

    name = destination(message.properties.get(fields.SERVICE))
    mailbox = relay.mailboxes.open(name)

    try:
        buffer = wire.serialize(message, mailbox.max_message_size)
        relay.echo('Sending %d bytes to %s' % (len(buffer), name))
        mailbox.send(buffer)
    finally:
        mailbox.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
