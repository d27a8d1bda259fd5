"""Cloud session implementations."""

from .base import (
    CloudSession,
    Confirmation,
    Disposition,
    SessionError,
    SessionConnectionError,
    SubmissionRejected,
    describe,
)


def session(connection_string):
    """ Return an unopened :class:`CloudSession` for *connection_string*.
        AMQP URLs (``amqp://`` or ``amqps://``) are the only kind understood.
    """

    if connection_string is None or connection_string == '':
        raise ValueError('no connection string')

    from . import amqp
    return amqp.Session(connection_string)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
