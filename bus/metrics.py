"""
BusMetrics: Tracks simple statistics for EventBus message flow.
"""

from typing import Dict


class BusMetrics:
    """
    Tracks metrics for published and consumed messages.

    Attributes:
        published (int): Total number of messages published.
        consumed (int): Number of messages handed out by poll().
        rejected (int): Number of malformed publish attempts.
        by_topic (dict): Published-message count per topic.
    """

    def __init__(self):
        """Initialize all counters to zero."""
        self.published = 0
        self.consumed = 0
        self.rejected = 0
        self.by_topic: Dict[str, int] = {}

    def record_publish(self, topic: str) -> None:
        self.published += 1
        self.by_topic[topic] = self.by_topic.get(topic, 0) + 1

    def report(self) -> dict:
        """
        Return a snapshot of current metrics.

        Returns:
            dict: Dictionary containing 'published', 'consumed', 'rejected' and 'by_topic'.
        """
        return {
            "published": self.published,
            "consumed": self.consumed,
            "rejected": self.rejected,
            "by_topic": dict(self.by_topic),
        }
