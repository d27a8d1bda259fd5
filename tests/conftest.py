import concurrent.futures
import io
import pytest
import rich.console

import iotrelay
from iotrelay.cloud import CloudSession, Confirmation, SubmissionRejected


class FakeMailbox:
    """ In-memory stand-in for one named mailbox.
    """

    def __init__(self, name, max_message_size=8192):
        self.name = name
        self.max_message_size = max_message_size
        self.messages = list()
        self.closed = 0
        self.unlinked = False

    def receive(self, timeout=None):
        if len(self.messages) == 0:
            raise TimeoutError(self.name + ': empty')
        return self.messages.pop(0)

    def send(self, message):
        if len(message) > self.max_message_size:
            raise OSError(90, 'message too long')
        self.messages.append(bytes(message))

    def close(self):
        self.closed += 1

    def unlink(self):
        self.unlinked = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()



class FakeMailboxes:
    """ Stand-in for the :mod:`iotrelay.mailbox` module.
    """

    def __init__(self):
        self.boxes = dict()

    def create(self, name, max_message_size=None):
        if max_message_size is None:
            max_message_size = 8192

        try:
            return self.boxes[name]
        except KeyError:
            box = FakeMailbox(name, max_message_size)
            self.boxes[name] = box
            return box

    def open(self, name):
        try:
            return self.boxes[name]
        except KeyError:
            raise iotrelay.errors.ResourceUnavailable('no mailbox ' + name)

    def unlink(self, name):
        self.boxes.pop(name, None)



class FakeSession(CloudSession):
    """ A cloud session that never leaves the process. Submissions resolve
        immediately with *result*, unless *defer* is set, in which case the
        futures are kept in :attr:`pending` for the test to resolve.
    """

    def __init__(self, result=Confirmation.OK, connected=True, defer=False, reject=False):
        self.result = result
        self.connected = connected
        self.defer = defer
        self.reject = reject
        self.submitted = list()
        self.pending = list()
        self.handler = None

    @property
    def is_open(self):
        return self.connected

    def open(self):
        self.connected = True

    def close(self):
        self.connected = False
        for future in self.pending:
            if not future.done():
                future.set_result(Confirmation.DESTROYED)

    def submit(self, message):
        if self.reject:
            raise SubmissionRejected('queue full')

        self.submitted.append(message)
        future = concurrent.futures.Future()

        if self.defer:
            self.pending.append(future)
        else:
            future.set_result(self.result)

        return future

    def on_message(self, handler):
        self.handler = handler



@pytest.fixture
def mailboxes():
    return FakeMailboxes()


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def relay(session, mailboxes, output, tmp_path):

    console = rich.console.Console(file=output, width=200, color_system=None)
    relay = iotrelay.Relay(session=session, verbose=True,
                           fifo_directory=str(tmp_path),
                           mailboxes=mailboxes, console=console)
    relay.open()

    yield relay

    relay.shutdown()

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
