'''
Fan out events to the connected clients.
Publication is fire and forget; nothing is queued for clients that are not connected and nothing is replayed.
'''

import json
import logging

from dal.models import BroadcastEvent
from dal.utils import JSONEncoder

logger = logging.getLogger(__name__)


class BroadcastBus(object):
    """
    Publish events on the Socket.IO server and, if configured, mirror them onto Kafka.
    """
    def __init__(self, socketio=None, kafka_producer=None):
        self.socketio = socketio
        self.kafka_producer = kafka_producer

    def publish(self, topic, payload):
        event = BroadcastEvent(topic=topic, payload=json.loads(JSONEncoder().encode(payload)))
        logger.info("Publishing onto topic %s", event.topic)
        if self.socketio:
            try:
                self.socketio.emit(event.topic, event.payload)
            except Exception:
                logger.exception("Exception emitting %s to the socket clients", event.topic)
        if self.kafka_producer:
            try:
                self.kafka_producer.send(event.topic, event.payload)
            except Exception:
                logger.exception("Exception sending %s to Kafka", event.topic)
