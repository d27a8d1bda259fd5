""" A class representation of a cloud message: the unit of exchange between
    the relay and the cloud session, in either direction.
"""

import enum

from . import fields


# Identity strings longer than this are refused by the cloud endpoint.

max_id_length = 128


class ContentKind(enum.Enum):
    """ The declared kind of a message body.
    """

    BYTES = 'bytes'
    STRING = 'string'
    NONE = 'none'



class CloudMessage:
    """ The :class:`CloudMessage` is a thin encapsulation of a message as the
        cloud session sees it: a *body*, an identity, a correlation
        identifier, and a map of user properties that preserves insertion
        order.

        The *body* may be :class:`bytes` (or any bytes-like object, which is
        copied), :class:`str`, or None; the :attr:`content_kind` is derived
        from its type. Bodies longer than :data:`fields.MAX_BODY_SIZE` bytes
        are refused with a :class:`ValueError`.

        :ivar message_id: The message identity, or None.
        :ivar correlation_id: The correlation identifier, or None.
        :ivar properties: Dictionary of user properties, key to value.
        :ivar content_type: Optional MIME type for the body.
        :ivar content_encoding: Optional encoding name for the body.
    """

    def __init__(self, body=None, message_id=None, correlation_id=None,
                       properties=None, content_type=None,
                       content_encoding=None):

        if body is None:
            self.content_kind = ContentKind.NONE
        elif isinstance(body, str):
            self.content_kind = ContentKind.STRING
            size = len(body.encode('utf-8'))
        else:
            body = bytes(body)
            self.content_kind = ContentKind.BYTES
            size = len(body)

        if body is not None and size > fields.MAX_BODY_SIZE:
            raise ValueError('message body exceeds %d bytes' % (fields.MAX_BODY_SIZE))

        self.body = body
        self.message_id = None
        self.correlation_id = None
        self.properties = dict()
        self.content_type = content_type
        self.content_encoding = content_encoding

        if message_id is not None:
            self.set_message_id(message_id)

        if correlation_id is not None:
            self.set_correlation_id(correlation_id)

        if properties:
            for key,value in properties.items():
                self.set_property(key, value)


    def __repr__(self):
        return '<CloudMessage id=%r correlation=%r kind=%s properties=%r>' % (
                    self.message_id, self.correlation_id,
                    self.content_kind.value, self.properties)


    def body_bytes(self):
        """ Return the body as bytes according to its content kind: binary
            content verbatim, text content as UTF-8, and None when there is
            no body at all.
        """

        kind = self.content_kind

        if kind == ContentKind.BYTES:
            return self.body
        if kind == ContentKind.STRING:
            return self.body.encode('utf-8')

        return None


    def set_message_id(self, value):
        self.message_id = _validate_id('message id', value)


    def set_correlation_id(self, value):
        self.correlation_id = _validate_id('correlation id', value)


    def set_property(self, key, value):
        """ Add or update a user property. Existing keys keep their original
            position in the iteration order.
        """

        if not isinstance(key, str) or key == '':
            raise ValueError('property keys must be non-empty strings')

        if not isinstance(value, str):
            raise ValueError('property values must be strings: ' + repr(key))

        self.properties[key] = value


# end of class CloudMessage



def _validate_id(name, value):

    if not isinstance(value, str) or value == '':
        raise ValueError(name + ' must be a non-empty string')

    if len(value) > max_id_length:
        raise ValueError('%s longer than %d characters' % (name, max_id_length))

    return value


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
