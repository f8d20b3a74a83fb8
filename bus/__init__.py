"""
bus — In-memory messaging infrastructure
=========================================

Provides a lightweight, thread-safe pub/sub transport layer connecting the
input layer (spawn / bulk-despawn commands), the simulation thread and the
viewer.

Modules
-------
message
    :class:`BusMessage` dataclass.
event_bus
    :class:`EventBus` publish / poll / peek transport and topic names.
metrics
    :class:`BusMetrics` counter snapshot.
"""

from .message import BusMessage
from .event_bus import (
    EventBus,
    TOPIC_COMMAND,
    TOPIC_LIFECYCLE,
    CMD_SPAWN,
    CMD_DESPAWN_ALL,
)
from .metrics import BusMetrics

__all__ = [
    "BusMessage",
    "EventBus",
    "BusMetrics",
    "TOPIC_COMMAND",
    "TOPIC_LIFECYCLE",
    "CMD_SPAWN",
    "CMD_DESPAWN_ALL",
]
