import iotrelay
import os
import pytest
import threading
import time

from iotrelay.cloud import Confirmation, Disposition
from iotrelay.protocol.message import CloudMessage


def wait_for(condition, timeout=5):

    expiration = time.time() + timeout

    while time.time() < expiration:
        if condition():
            return True
        time.sleep(0.01)

    return False



def test_producer(relay, session, mailboxes):

    producer = iotrelay.Producer(directory=relay.fifo_directory, mailboxes=mailboxes)
    assert os.path.exists(producer.fifo)

    def send():
        producer.send('{"t":1}', {'messageId': 'M1'}, region='us')

    thread = threading.Thread(target=send, daemon=True)
    thread.start()

    assert wait_for(lambda: len(relay.mailbox.messages) > 0)

    pending = relay.process()
    thread.join(5)

    assert pending.wait(1) == Confirmation.OK

    message = session.submitted[0]
    assert message.message_id == 'M1'
    assert message.properties == {'region': 'us'}
    assert message.body == b'{"t":1}'

    producer.close()
    assert not os.path.exists(producer.fifo)

    # Closing twice is harmless.

    producer.close()



def test_producer_raw_headers(relay, session, mailboxes):

    with iotrelay.Producer(directory=relay.fifo_directory, mailboxes=mailboxes) as producer:

        def send():
            producer.send(b'raw', 'correlationId:C7\n\n', zone='b')

        thread = threading.Thread(target=send, daemon=True)
        thread.start()

        assert wait_for(lambda: len(relay.mailbox.messages) > 0)
        relay.process()
        thread.join(5)

    message = session.submitted[0]
    assert message.correlation_id == 'C7'
    assert message.properties == {'zone': 'b'}



def test_producer_no_relay(tmp_path, mailboxes):

    producer = iotrelay.Producer(directory=str(tmp_path), mailboxes=mailboxes)

    with pytest.raises(iotrelay.errors.ResourceUnavailable):
        producer.send(b'{}')

    producer.close()



def test_consumer(relay, mailboxes):

    consumer = iotrelay.Consumer('foo', mailboxes=mailboxes)
    assert '/foo' in mailboxes.boxes

    message = CloudMessage(b'{"t":2}', message_id='M2')
    message.set_property('service', 'foo')
    assert relay.route(message) == Disposition.ACCEPTED

    received = consumer.receive()
    assert received.message_id == 'M2'
    assert received.correlation_id is None
    assert received.properties == {'service': 'foo'}
    assert received.body == b'{"t":2}'

    consumer.close(unlink=True)
    assert mailboxes.boxes['/foo'].unlinked == True


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
