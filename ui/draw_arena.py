#!/usr/bin/env python3
"""Platform, boundary ring, sensor cones and vehicle sprites (mixin)."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import pygame

from .helpers import cone_outline, draw_alpha_polygon, to_screen, vehicle_outline


class ArenaRenderer:
    """Mixin that draws the world layer."""

    def draw_platform(self, surface: pygame.Surface, arena: Mapping[str, Any]) -> None:
        radius = float(arena.get("radius", 30.0))
        center = self.camera.world_to_screen(0.0, 0.0)
        r_px = max(1, int(radius * self.camera.zoom))
        pygame.draw.circle(surface, self.PLATFORM_COLOR, center, r_px)
        pygame.draw.circle(surface, self.PLATFORM_EDGE_COLOR, center, r_px, width=2)

        boundary = float(arena.get("boundary_radius", radius))
        b_px = max(1, int(boundary * self.camera.zoom))
        ring = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        pygame.draw.circle(ring, (*self.BOUNDARY_COLOR, self.BOUNDARY_ALPHA), center, b_px, width=1)
        surface.blit(ring, (0, 0))

    def draw_sensor(self, surface: pygame.Surface, vehicle: Mapping[str, Any],
                    arena: Mapping[str, Any]) -> None:
        points = cone_outline(
            float(vehicle["x"]), float(vehicle["z"]), float(vehicle["yaw"]),
            float(arena.get("sensor_offset", 1.0)),
            float(arena.get("sensor_length", 6.0)),
            float(arena.get("sensor_half_angle", 0.5)),
        )
        color = self.STATE_COLORS.get(vehicle.get("state", ""), (255, 255, 255))
        alpha = self.SENSOR_CONTACT_ALPHA if vehicle.get("has_contact") else self.SENSOR_ALPHA
        draw_alpha_polygon(surface, (*color, alpha), to_screen(self.camera, points))

    def draw_vehicle(self, surface: pygame.Surface, vehicle: Mapping[str, Any]) -> None:
        x, y, z = float(vehicle["x"]), float(vehicle["y"]), float(vehicle["z"])
        yaw = float(vehicle["yaw"])
        color = self.STATE_COLORS.get(vehicle.get("state", ""), (255, 255, 255))

        # Airborne vehicles get a ground shadow that shrinks with height.
        if y > 0.5:
            lift = min(1.0, y / self.SHADOW_MAX_HEIGHT)
            shadow = vehicle_outline(x, z, yaw,
                                     self.VEHICLE_LENGTH * (1.0 - 0.5 * lift),
                                     self.VEHICLE_WIDTH * (1.0 - 0.5 * lift))
            draw_alpha_polygon(surface, (0, 0, 0, 90), to_screen(self.camera, shadow))

        outline = to_screen(
            self.camera,
            vehicle_outline(x, z, yaw, self.VEHICLE_LENGTH, self.VEHICLE_WIDTH),
        )
        pygame.draw.polygon(surface, color, outline)
        if float(vehicle.get("upright", 1.0)) <= 0.2:
            pygame.draw.polygon(surface, (255, 255, 255), outline, width=1)

    def draw_world(self, surface: pygame.Surface, vehicles: Sequence[Mapping[str, Any]],
                   arena: Mapping[str, Any]) -> None:
        self.draw_platform(surface, arena)
        if self.show_sensors:
            for vehicle in vehicles:
                self.draw_sensor(surface, vehicle, arena)
        for vehicle in vehicles:
            self.draw_vehicle(surface, vehicle)
