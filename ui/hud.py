#!/usr/bin/env python3
"""HUD panel, legend, key help and pause banner (mixin)."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import pygame


class HudRenderer:
    """Mixin that draws every overlay / HUD element."""

    # ------------------------------------------------------------------ #
    #  Main HUD panel                                                      #
    # ------------------------------------------------------------------ #

    def draw_hud(
        self,
        surface: pygame.Surface,
        vehicles: Sequence[Mapping[str, Any]],
        stats: Mapping[str, Any],
    ) -> None:
        if self.font_small is None or self.font_tiny is None:
            return

        counts = {label: 0 for label, _ in self.LEGEND_ITEMS}
        for vehicle in vehicles:
            state = vehicle.get("state", "")
            if state in counts:
                counts[state] += 1

        rows = [
            f"TICK {stats.get('tick', 0)}   T {stats.get('time_s', 0.0):6.1f}s",
            f"VEHICLES {len(vehicles)}   SPAWNED {stats.get('spawned', 0)}"
            f"   FELL {stats.get('fallen', 0)}",
            f"YIELDS {stats.get('reactions', 0)}   CONTAIN {stats.get('containments', 0)}",
            f"JUMPS {stats.get('jumps', 0)}   NEXT {max(0.0, stats.get('next_jump_s', 0.0)):4.1f}s",
        ]

        panel_w = 290
        panel_h = 14 + len(rows) * 18
        panel_rect = pygame.Rect(16, 16, panel_w, panel_h)
        pygame.draw.rect(surface, self.HUD_BG_COLOR, panel_rect, border_radius=6)
        pygame.draw.rect(surface, self.HUD_BORDER_COLOR, panel_rect, width=1, border_radius=6)

        y = panel_rect.y + 8
        for row in rows:
            surface.blit(self.font_small.render(row, True, self.HUD_TEXT_COLOR),
                         (panel_rect.x + 10, y))
            y += 18

        if self.show_legend:
            self._draw_legend(surface, counts)

    def _draw_legend(self, surface: pygame.Surface, counts: Mapping[str, int]) -> None:
        x = self.width - 170
        y = 16
        for label, color in self.LEGEND_ITEMS:
            pygame.draw.rect(surface, color, pygame.Rect(x, y + 3, 10, 10))
            text = self.font_tiny.render(f"{label} {counts.get(label, 0)}", True, (220, 220, 220))
            surface.blit(text, (x + 16, y))
            y += 18

        n = len(self.KEY_HELP)
        for i, line in enumerate(self.KEY_HELP):
            text = self.font_tiny.render(line, True, (120, 120, 120))
            surface.blit(text, (16, self.height - 12 - 16 * (n - i)))

    # ------------------------------------------------------------------ #
    #  Pause banner                                                        #
    # ------------------------------------------------------------------ #

    def _draw_pause_banner(self, surface: pygame.Surface) -> None:
        if self.font_title is None:
            return
        text = self.font_title.render("PAUSED", True, (255, 255, 255))
        rect = text.get_rect(center=(self.width // 2, 40))
        bg = pygame.Surface((rect.width + 30, rect.height + 12), pygame.SRCALPHA)
        bg.fill((0, 0, 0, 150))
        surface.blit(bg, (rect.x - 15, rect.y - 6))
        surface.blit(text, rect)
