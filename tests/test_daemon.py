import iotrelay
import logging
import pytest
import signal

from iotrelay import daemon
from iotrelay.cloud import SessionConnectionError

from conftest import FakeMailboxes, FakeSession


class UnreachableSession(FakeSession):

    def open(self):
        raise SessionConnectionError('no route to host')



def test_arguments():

    parsed = daemon.arguments([])
    assert parsed.verbose == False
    assert parsed.connection_string is None

    parsed = daemon.arguments(['-v', '-c', 'amqp://localhost/'])
    assert parsed.verbose == True
    assert parsed.connection_string == 'amqp://localhost/'

    with pytest.raises(SystemExit) as caught:
        daemon.arguments(['-h'])

    assert caught.value.code == 0



def test_connection_string(tmp_path, monkeypatch):

    monkeypatch.setenv('IOTRELAY_HOME', str(tmp_path))
    monkeypatch.delenv('IOTRELAY_CONNECTION_STRING', raising=False)

    settings = iotrelay.config.Settings()
    settings[iotrelay.config.CONNECTION_STRING] = 'amqp://stored/'

    assert daemon.connection_string(settings) == 'amqp://stored/'
    assert daemon.connection_string(settings, 'amqp://override/') == 'amqp://override/'

    # Overlong or empty overrides are ignored.

    assert daemon.connection_string(settings, 'a' * 300) == 'amqp://stored/'
    assert daemon.connection_string(settings, '') == 'amqp://stored/'



def test_connect(mailboxes, tmp_path, monkeypatch):

    relay = iotrelay.Relay(mailboxes=mailboxes, fifo_directory=str(tmp_path))

    assert daemon.connect(relay, None) is None
    assert relay.session is None

    monkeypatch.setattr(iotrelay.cloud, 'session', lambda connection: FakeSession(connected=False))
    session = daemon.connect(relay, 'amqp://localhost/')

    assert relay.session is session
    assert session.is_open == True
    assert session.handler == relay.route


    # A session that cannot connect is still attached; outbound messages
    # are dropped until it is.

    monkeypatch.setattr(iotrelay.cloud, 'session', lambda connection: UnreachableSession(connected=False))
    relay = iotrelay.Relay(mailboxes=mailboxes, fifo_directory=str(tmp_path))
    session = daemon.connect(relay, 'amqp://localhost/')

    assert relay.session is session

    with pytest.raises(iotrelay.errors.NoSession):
        relay.send(b'{}')



def test_connect_failure_logged(mailboxes, tmp_path, monkeypatch, caplog):
    """ A connection error with no message of its own is still named in the
        log.
    """

    class Silent(FakeSession):
        def open(self):
            raise SessionConnectionError()

    monkeypatch.setattr(iotrelay.cloud, 'session', lambda connection: Silent(connected=False))
    relay = iotrelay.Relay(mailboxes=mailboxes, fifo_directory=str(tmp_path))

    with caplog.at_level(logging.ERROR, logger='iotrelay'):
        daemon.connect(relay, 'amqp://localhost/')

    assert 'cannot connect to the cloud' in caplog.text
    assert 'SessionConnectionError' in caplog.text



def test_signal_handlers(mailboxes, tmp_path):

    session = FakeSession()
    relay = iotrelay.Relay(session=session, mailboxes=mailboxes, fifo_directory=str(tmp_path))
    relay.open()
    inbound = relay.mailbox

    original_int = signal.getsignal(signal.SIGINT)
    original_term = signal.getsignal(signal.SIGTERM)

    try:
        daemon.install_signal_handlers(relay)
        handler = signal.getsignal(signal.SIGTERM)

        with pytest.raises(SystemExit) as caught:
            handler(signal.SIGTERM, None)

    finally:
        signal.signal(signal.SIGINT, original_int)
        signal.signal(signal.SIGTERM, original_term)

    assert caught.value.code == 1
    assert session.connected == False
    assert inbound.unlinked == True



def test_main_without_mailbox(tmp_path, monkeypatch):
    """ Failing to create the inbound mailbox is fatal.
    """

    class NoMailboxes(FakeMailboxes):
        def create(self, name, max_message_size=None):
            raise iotrelay.errors.ResourceUnavailable('cannot create mailbox ' + name)

    def relay(**kwargs):
        return iotrelay.Relay(mailboxes=NoMailboxes(), **kwargs)

    monkeypatch.setenv('IOTRELAY_HOME', str(tmp_path))
    monkeypatch.delenv('IOTRELAY_CONNECTION_STRING', raising=False)
    monkeypatch.setattr(daemon, 'Relay', relay)
    monkeypatch.setattr(daemon, 'install_signal_handlers', lambda relay: None)

    logger = logging.getLogger('iotrelay')
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate

    try:
        assert daemon.main([]) == 1
    finally:
        logger.handlers[:] = handlers
        logger.setLevel(level)
        logger.propagate = propagate


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
