"""
sim/sim_bridge.py
=================
Background-thread orchestrator tying :mod:`sim.world` and the
:class:`bus.event_bus.EventBus` together.  The UI polls the bridge for
the latest snapshot without blocking and sends commands over the bus.

Public API consumed by :mod:`ui.pygame_view`
--------------------------------------------
* ``get_vehicles()``          → ``List[dict]``
* ``get_stats()``             → ``dict``
* ``get_arena()``             → ``dict``
* ``request_spawn(n)``        → ``None``
* ``request_despawn_all()``   → ``None``
* ``reset()``                 → ``None``
* ``set_paused(bool)``        → ``None``
"""

from __future__ import annotations

import threading
import time
import logging
from typing import Any, Dict, List, Optional

from bus.event_bus import (
    CMD_DESPAWN_ALL,
    CMD_SPAWN,
    TOPIC_COMMAND,
    TOPIC_LIFECYCLE,
    EventBus,
)
from sim.control_policy import Arena, ControlPolicy
from sim.world import ArenaWorld

log = logging.getLogger("sim_bridge")


class SimBridge:
    """Simulation orchestrator running in a background thread.

    The thread calls :meth:`_tick` at ``tick_rate_hz``: it applies any
    spawn / bulk-despawn commands waiting on the bus, advances the
    :class:`~sim.world.ArenaWorld` one tick, and caches the results for the
    UI thread.

    Parameters
    ----------
    tick_rate_hz : float
        Simulation ticks per second.
    vehicle_count : int
        Number of vehicles spawned at start and on reset.
    random_seed : int or None
        Seed for reproducibility.
    policy : ControlPolicy or None
        Tunable constants.
    arena : Arena or None
        Platform geometry.
    bus : EventBus or None
        Shared bus; a private one is created when *None*.
    """

    def __init__(
        self,
        tick_rate_hz: float = 60.0,
        vehicle_count: int = 6,
        random_seed: Optional[int] = None,
        policy: Optional[ControlPolicy] = None,
        arena: Optional[Arena] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self._tick_rate_hz = tick_rate_hz
        self.bus = bus or EventBus()
        self._world = ArenaWorld(
            num_vehicles=vehicle_count,
            seed=random_seed,
            policy=policy,
            arena=arena,
            bus=self.bus,
        )

        self._lock = threading.Lock()

        # Cached state: written by sim thread, read by UI thread
        self._vehicles: List[Dict[str, Any]] = self._world.snapshot()
        self._stats: Dict[str, Any] = self._world.stats()
        self._recent_events: List[Dict[str, Any]] = []

        self._thread: Optional[threading.Thread] = None
        self._running = False
        self._paused = False
        self._reset_requested = False

    @property
    def world(self) -> ArenaWorld:
        return self._world

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def start(self) -> None:
        """Spawn the background simulation thread."""
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(
            target=self._loop, daemon=True, name="SimBridge"
        )
        self._thread.start()
        log.info("SimBridge started at %.1f Hz", self._tick_rate_hz)

    def stop(self) -> None:
        """Signal the thread to stop and wait for it to join."""
        self._running = False
        if self._thread:
            self._thread.join(timeout=2.0)
        log.info("SimBridge stopped")

    # ── UI adapter API ────────────────────────────────────────────────────────

    def get_vehicles(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._vehicles)

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._stats)

    def get_recent_events(self) -> List[Dict[str, Any]]:
        """Latest lifecycle notifications (newest last)."""
        with self._lock:
            return list(self._recent_events)

    def get_arena(self) -> Dict[str, Any]:
        arena = self._world.arena
        policy = self._world.policy
        return {
            "radius": arena.radius,
            "boundary_radius": arena.radius * (1.0 - policy.boundary_margin_frac),
            "sensor_half_angle": policy.sensor_half_angle,
            "sensor_length": policy.sensor_length,
            "sensor_offset": policy.sensor_offset,
            "body_radius": policy.body_radius,
        }

    def request_spawn(self, count: int = 1) -> None:
        self.bus.publish(TOPIC_COMMAND, "ui", {"command": CMD_SPAWN, "count": int(count)})

    def request_despawn_all(self) -> None:
        self.bus.publish(TOPIC_COMMAND, "ui", {"command": CMD_DESPAWN_ALL})

    def reset(self) -> None:
        """Re-initialise the world on the simulation thread's next pass."""
        self._reset_requested = True
        log.info("SimBridge reset requested")

    def set_paused(self, paused: bool) -> None:
        """Pause / unpause the simulation tick."""
        self._paused = paused

    # ── Background loop ───────────────────────────────────────────────────────

    def _loop(self) -> None:
        dt = 1.0 / self._tick_rate_hz
        while self._running:
            t0 = time.perf_counter()
            try:
                if self._reset_requested:
                    self._reset_requested = False
                    self._world.reset()
                    self._publish_cache()
                if not self._paused:
                    self._tick(dt)
            except Exception:
                log.exception("SimBridge tick error")
            time.sleep(max(0.0, dt - (time.perf_counter() - t0)))

    # ── tick ──────────────────────────────────────────────────────────────────

    def _apply_commands(self) -> int:
        """Apply every command waiting on ``input.command``; return count applied."""
        applied = 0
        for msg in self.bus.poll(TOPIC_COMMAND):
            payload = msg.payload
            command = str(payload.get("command", "")).lower()
            if command == CMD_SPAWN:
                try:
                    count = max(1, int(payload.get("count", 1)))
                except (TypeError, ValueError):
                    count = 1
                for _ in range(count):
                    self._world.spawn()
                applied += 1
            elif command == CMD_DESPAWN_ALL:
                self._world.despawn_all()
                applied += 1
            else:
                log.warning("unknown command %r from %s", command, msg.sender)
        return applied

    def _tick(self, dt: float) -> None:
        # 1. Opaque input triggers, applied before the pipeline runs.
        self._apply_commands()

        # 2. Fixed-order control pipeline + physics.
        self._world.tick(dt)

        # 3. Atomic swap; UI thread reads these via public methods.
        self._publish_cache()

    def _publish_cache(self) -> None:
        events = [msg.payload for msg in self.bus.poll(TOPIC_LIFECYCLE)]
        vehicles = self._world.snapshot()
        stats = self._world.stats()
        stats["bus_metrics"] = self.bus.metrics.report()
        with self._lock:
            self._vehicles = vehicles
            self._stats = stats
            self._recent_events = (self._recent_events + events)[-20:]
