#!/usr/bin/env python3
"""
Tests for the in-memory pub/sub transport.
"""

import threading
import unittest

from bus.event_bus import CMD_SPAWN, TOPIC_COMMAND, TOPIC_LIFECYCLE, EventBus


class EventBusTests(unittest.TestCase):
    def setUp(self) -> None:
        self.bus = EventBus()

    def test_poll_returns_messages_in_order_then_empties(self) -> None:
        first = self.bus.publish(TOPIC_COMMAND, "ui", {"command": CMD_SPAWN, "count": 1})
        second = self.bus.publish(TOPIC_COMMAND, "ui", {"command": CMD_SPAWN, "count": 2})
        msgs = self.bus.poll(TOPIC_COMMAND)
        self.assertEqual([m.id for m in msgs], [first, second])
        self.assertEqual(msgs[1].payload["count"], 2)
        self.assertEqual(msgs[0].sender, "ui")
        self.assertEqual(self.bus.poll(TOPIC_COMMAND), [])

    def test_topics_are_independent(self) -> None:
        self.bus.publish(TOPIC_LIFECYCLE, "world", {"event": "spawned"})
        self.assertEqual(self.bus.poll(TOPIC_COMMAND), [])
        self.assertEqual(len(self.bus.poll(TOPIC_LIFECYCLE)), 1)

    def test_peek_does_not_consume(self) -> None:
        self.bus.publish(TOPIC_LIFECYCLE, "world", {"event": "spawned"})
        self.assertEqual(len(self.bus.peek(TOPIC_LIFECYCLE)), 1)
        self.assertEqual(len(self.bus.poll(TOPIC_LIFECYCLE)), 1)
        self.assertEqual(self.bus.metrics.consumed, 1)

    def test_non_dict_payload_is_rejected(self) -> None:
        with self.assertLogs("bus.event_bus", level="WARNING"):
            self.assertIsNone(self.bus.publish(TOPIC_COMMAND, "ui", "spawn"))
        self.assertEqual(self.bus.metrics.rejected, 1)
        self.assertEqual(self.bus.metrics.published, 0)
        self.assertEqual(self.bus.peek(TOPIC_COMMAND), [])

    def test_backlog_keeps_newest_messages(self) -> None:
        bus = EventBus(max_backlog=3)
        for i in range(5):
            bus.publish(TOPIC_LIFECYCLE, "world", {"tick": i})
        self.assertEqual([m.payload["tick"] for m in bus.poll(TOPIC_LIFECYCLE)], [2, 3, 4])

    def test_metrics_count_per_topic(self) -> None:
        self.bus.publish(TOPIC_COMMAND, "ui", {"command": CMD_SPAWN})
        self.bus.publish(TOPIC_LIFECYCLE, "world", {"event": "spawned"})
        self.bus.publish(TOPIC_LIFECYCLE, "world", {"event": "jumped"})
        report = self.bus.metrics.report()
        self.assertEqual(report["published"], 3)
        self.assertEqual(report["by_topic"], {TOPIC_COMMAND: 1, TOPIC_LIFECYCLE: 2})

    def test_concurrent_publishers(self) -> None:
        def burst():
            for _ in range(200):
                self.bus.publish(TOPIC_COMMAND, "ui", {"command": CMD_SPAWN})

        threads = [threading.Thread(target=burst) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(len(self.bus.poll(TOPIC_COMMAND)), 800)


if __name__ == "__main__":
    unittest.main()
