"""
EventBus: In-memory, thread-safe pub/sub between the input layer, the
simulation thread and the viewer.

Supports:
    - Topic-based messaging
    - Non-destructive peeking for observers
    - Per-topic metrics
    - Logging of events

Intended usage:
    - The viewer publishes spawn / despawn_all requests to 'input.command'
    - The simulation thread polls 'input.command' once per tick
    - The world publishes spawn / despawn / jump notices to 'arena.lifecycle'
"""

import threading
import time
import uuid
import logging
from typing import Dict, List, Optional

from .message import BusMessage
from .metrics import BusMetrics

log = logging.getLogger(__name__)

TOPIC_COMMAND = "input.command"
TOPIC_LIFECYCLE = "arena.lifecycle"

CMD_SPAWN = "spawn"
CMD_DESPAWN_ALL = "despawn_all"


class EventBus:
    """
    Transport layer for simulation messages.

    Attributes:
        max_backlog (int): Oldest messages of a topic are discarded past this size.
        metrics (BusMetrics): Counters for published / consumed messages.
    """

    def __init__(self, max_backlog: int = 1000):
        """
        Initialize an EventBus instance.

        Args:
            max_backlog (int): Maximum number of unpolled messages kept per topic.
        """
        self._topics: Dict[str, List[BusMessage]] = {}
        self._lock = threading.Lock()
        self.max_backlog = max_backlog
        self.metrics = BusMetrics()

    def publish(self, topic: str, sender: str, payload: dict) -> Optional[str]:
        """
        Publish a message to a specific topic.

        Args:
            topic (str): The topic name (e.g., 'input.command').
            sender (str): ID of the sender (e.g., 'ui', 'world').
            payload (dict): Data dictionary representing the message contents.

        Returns:
            Optional[str]: The unique message ID, or None if the payload was rejected.
        """
        if not isinstance(payload, dict):
            log.warning("rejected non-dict payload topic=%s sender=%s", topic, sender)
            with self._lock:
                self.metrics.rejected += 1
            return None

        msg = BusMessage(
            id=str(uuid.uuid4()),
            topic=topic,
            sender=sender,
            payload=payload,
            ts=time.time(),
        )
        with self._lock:
            queue = self._topics.setdefault(topic, [])
            queue.append(msg)
            if len(queue) > self.max_backlog:
                del queue[: len(queue) - self.max_backlog]
            self.metrics.record_publish(topic)

        log.debug("publish topic=%s sender=%s id=%s", topic, sender, msg.id)
        return msg.id

    def poll(self, topic: str) -> List[BusMessage]:
        """
        Retrieve and clear all messages from a given topic.

        Args:
            topic (str): The topic name to poll messages from.

        Returns:
            List[BusMessage]: Messages published to the topic since the last poll.
        """
        with self._lock:
            msgs = self._topics.get(topic, [])
            self._topics[topic] = []
            self.metrics.consumed += len(msgs)
        return msgs

    def peek(self, topic: str) -> List[BusMessage]:
        """
        Return a copy of the pending messages on a topic without consuming them.
        """
        with self._lock:
            return list(self._topics.get(topic, []))
