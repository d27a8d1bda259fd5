""" Helpers for the local processes on either side of the relay.

    A :class:`Producer` sends a message to the cloud: it announces the
    message on the relay's mailbox, then streams the body through its FIFO.
    A :class:`Consumer` owns the mailbox for one service name and receives
    the cloud messages the relay routes to it.
"""

import os
import threading

from . import mailbox
from .protocol import fields
from .protocol import properties
from .protocol import sidechannel
from .protocol import wire


class Producer:
    """ Send messages to the cloud through a running relay. One FIFO is
        used per process, so sends from multiple threads are serialized.

        The FIFO is created in *directory*, which must match the relay's
        FIFO directory; the default matches the relay's default.
    """

    def __init__(self, directory=None, name=fields.MAILBOX_NAME, mailboxes=None):

        if mailboxes is None:
            mailboxes = mailbox

        self.pid = os.getpid()
        self.name = name
        self.mailboxes = mailboxes
        self.fifo = sidechannel.create(self.pid, directory)
        self._lock = threading.Lock()


    def send(self, body, headers=None, **extra):
        """ Send *body* (bytes or str) to the cloud. *headers* is either raw
            header text or a dictionary of properties; keyword arguments are
            added as further properties. For example::

                producer.send(b'{"t":1}', messageId='M1', region='us')

            This blocks until the relay has opened the FIFO for the body.
        """

        if isinstance(body, str):
            body = body.encode('utf-8')

        if headers is None:
            headers = dict()

        if isinstance(headers, str):
            if extra:
                headers = headers.rstrip('\n') + '\n' + properties.render(extra)
        else:
            headers = dict(headers)
            headers.update(extra)
            headers = properties.render(headers)

        control = wire.pack_control(self.pid, headers)

        with self._lock:
            with self.mailboxes.open(self.name) as relay:
                relay.send(control)

            sidechannel.write_body(self.fifo, body)


    def close(self):
        try:
            os.remove(self.fifo)
        except FileNotFoundError:
            pass


    def __enter__(self):
        return self


    def __exit__(self, *exc):
        self.close()


# end of class Producer



class Consumer:
    """ Receive the cloud messages routed to *service*. The mailbox
        ``/<service>`` is created if it does not already exist.
    """

    def __init__(self, service, max_message_size=None, mailboxes=None):

        if mailboxes is None:
            mailboxes = mailbox

        self.service = service
        self.mailboxes = mailboxes
        self.mailbox = mailboxes.create('/' + service, max_message_size)


    def receive(self, timeout=None):
        """ Return the next :class:`iotrelay.protocol.message.CloudMessage`.
        """

        buffer = self.mailbox.receive(timeout)
        return wire.deserialize(buffer)


    def close(self, unlink=False):
        self.mailbox.close()

        if unlink:
            self.mailbox.unlink()


    def __enter__(self):
        return self


    def __exit__(self, *exc):
        self.close()


# end of class Consumer


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
