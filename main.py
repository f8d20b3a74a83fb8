#!/usr/bin/env python3
"""
main.py
=======
Entry point.  Runs the arena either under the pygame viewer (default) or
headless for a fixed number of ticks.

Environment overrides: ``ARENA_VEHICLES``, ``ARENA_SEED``,
``ARENA_TICK_RATE``, ``ARENA_RADIUS``.  Command line flags win over both.
"""

import argparse
import logging
import os

import config
from logging_setup import setup_logging
from sim.control_policy import Arena, ControlPolicy
from sim.sim_bridge import SimBridge
from sim.world import ArenaWorld


def _env(name, cast, default):
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logging.getLogger("main").warning("ignoring invalid %s=%r", name, raw)
        return default


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Arena vehicle control simulation")
    parser.add_argument("--vehicles", type=int,
                        default=_env("ARENA_VEHICLES", int, config.DEFAULT_VEHICLE_COUNT),
                        help="vehicles spawned at start (default: %(default)s)")
    parser.add_argument("--seed", type=int,
                        default=_env("ARENA_SEED", int, config.DEFAULT_SEED),
                        help="random seed (default: %(default)s)")
    parser.add_argument("--tick-rate", type=float,
                        default=_env("ARENA_TICK_RATE", float, config.DEFAULT_TICK_RATE_HZ),
                        help="simulation ticks per second (default: %(default)s)")
    parser.add_argument("--radius", type=float,
                        default=_env("ARENA_RADIUS", float, config.DEFAULT_ARENA_RADIUS),
                        help="arena radius (default: %(default)s)")
    parser.add_argument("--headless", action="store_true",
                        help="run without a window and print periodic stats")
    parser.add_argument("--ticks", type=int, default=config.DEFAULT_HEADLESS_TICKS,
                        help="ticks to run in headless mode (default: %(default)s)")
    parser.add_argument("--debug", action="store_true",
                        help="verbose logging plus controller_debug.log")
    return parser.parse_args(argv)


def run_headless(args, arena, policy):
    log = logging.getLogger("main")
    world = ArenaWorld(num_vehicles=args.vehicles, seed=args.seed, policy=policy, arena=arena)
    dt = 1.0 / args.tick_rate
    for _ in range(args.ticks):
        world.tick(dt)
        if world.tick_count % config.HEADLESS_REPORT_EVERY == 0:
            log.info("stats %s", world.stats())
    log.info("finished %d ticks: %s", world.tick_count, world.stats())
    return world


def main(argv=None):
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO, controller_debug=args.debug)
    log = logging.getLogger("main")

    arena = Arena(radius=args.radius)
    policy = ControlPolicy()

    if args.headless:
        log.info("Starting headless run: %d vehicles, %d ticks", args.vehicles, args.ticks)
        run_headless(args, arena, policy)
        return

    # Imported lazily so headless runs never initialise pygame.
    from ui.pygame_view import run_pygame_view

    bridge = SimBridge(
        tick_rate_hz=args.tick_rate,
        vehicle_count=args.vehicles,
        random_seed=args.seed,
        policy=policy,
        arena=arena,
    )
    bridge.start()
    try:
        run_pygame_view(bridge, width=config.WINDOW_WIDTH,
                        height=config.WINDOW_HEIGHT, fps=config.TARGET_FPS)
    except KeyboardInterrupt:
        log.info("Shutting down...")
    finally:
        bridge.stop()


if __name__ == "__main__":
    main()
