"""Example: publish through the mock transport, then decode and ack on the consumer side"""
import logging

from pulse import Message, decode, new_sender

logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


def main():
    with new_sender("mock://demo") as sender:
        message = Message.new_with_ordering_key(b'{"order": 42}', "order-42")
        message.set_topic("orders")
        message.attributes["codec"] = "application/json"
        sender.send(message)

        for destination, payload in sender.transport.published:
            received = decode(payload).bind(
                lambda message_id, ack: print(f"{destination}: {message_id} ack={ack}")
            )
            received.ack()
            received.nack()  # no effect, already acked

        print(sender.metrics.get_metrics())


if __name__ == '__main__':
    main()
