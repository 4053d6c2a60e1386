"""
Interactive Pygame Preview for the Wind Scene

Acts as a host for WindSimulator: a FrameDriver is ticked once per
display frame, mouse and window events are forwarded through HostEvents,
and each frame is drawn from the read-only snapshot only.

Controls:
  Mouse L     Hold for a gust
  SPACE       Pause / Resume
  R           Reinitialize the scene
  H           Toggle HUD overlay
  1-4         Switch preset
  Q / ESC     Quit
"""

import math
import time
import numpy as np
import pygame

from .host import FrameDriver, HostEvents
from .presets import PRESET_ORDER, get_preset
from .simulator import WindSimulator


# Atmospheric blues, one per automaton state
ENERGY_PALETTE = np.array([
    (135, 206, 235),
    (100, 149, 237),
    (70, 130, 180),
    (176, 224, 230),
    (173, 216, 230),
    (240, 248, 255),
    (30, 144, 255),
    (135, 206, 250),
], dtype=np.uint8)

SKY_TINT = {
    "night": (10, 10, 35),
    "dawn": (70, 70, 130),
    "day": (40, 60, 80),
    "dusk": (70, 70, 130),
}

BG = (12, 14, 20)


def _palette_for(num_states):
    idx = np.arange(num_states) % len(ENERGY_PALETTE)
    return ENERGY_PALETTE[idx]


class Viewer:
    def __init__(self, width=1280, height=720, start_preset="breeze", seed=None):
        self.canvas_w = width
        self.canvas_h = height
        self.preset_key = start_preset
        self.seed = seed
        self.running = True
        self.paused = False
        self.show_hud = True
        self.fps_history = []

        self.driver = FrameDriver()
        self.events = HostEvents()
        self.sim = None
        self._apply_preset(start_preset)

    def _apply_preset(self, key):
        if self.sim is not None:
            self.sim.detach()
        self.preset_key = key
        self.sim = WindSimulator(self.canvas_w, self.canvas_h,
                                 preset=key, seed=self.seed)
        self.sim.attach(self.driver, self.events)

    # -- drawing -----------------------------------------------------------

    def _draw_grid(self, screen, frame):
        g = frame.grid
        rgb = _palette_for(g.num_states)[g.states]
        # Slow brightness pulse
        shade = 0.35 + 0.15 * math.sin(frame.tick * 0.03)
        rgb = (rgb.astype(np.float32) * shade).astype(np.uint8)
        surface = pygame.surfarray.make_surface(rgb)
        surface = pygame.transform.scale(
            surface, (g.cols * g.cell_size, g.rows * g.cell_size))
        screen.blit(surface, (0, 0))

    def _draw_sky(self, screen, frame):
        a = frame.atmosphere
        color = (255, 240, 180) if a.is_sun else (220, 220, 200)
        radius = 30 if a.is_sun else 25
        pygame.draw.circle(screen, color,
                           (int(a.celestial_x), int(a.celestial_y)), radius)

    def _draw_grass(self, screen, frame):
        w, h = frame.width, frame.height
        offsets = frame.bend_offsets
        n = len(offsets)
        for i in range(n):
            x = i * w / n
            base_y = h * 0.85 + math.sin(x * 0.02) * 15
            bend = offsets[i] if frame.interaction_active else 0.0
            pygame.draw.line(screen, (34, 139, 34),
                             (x, base_y), (x + bend, base_y - 18), 1)

    def _draw_turbines(self, screen, frame):
        for t in frame.turbines:
            top = (t.x, t.y - t.base_height)
            pygame.draw.line(screen, (235, 235, 240), (t.x, t.y), top,
                             max(2, int(6 * t.scale)))
            for k in range(3):
                angle = t.rotation + k * 2 * math.pi / 3
                tip = (top[0] + math.cos(angle) * t.blade_length,
                       top[1] + math.sin(angle) * t.blade_length)
                pygame.draw.line(screen, (250, 250, 255), top, tip,
                                 max(2, int(4 * t.scale)))
            pygame.draw.circle(screen, (220, 220, 225),
                               (int(top[0]), int(top[1])), int(6 * t.scale))

    def _draw_particles(self, screen, frame):
        if not frame.particles:
            return
        layer = pygame.Surface((frame.width, frame.height), pygame.SRCALPHA)
        for p in frame.particles:
            rect = pygame.Rect(0, 0, int(p.size * 3), max(1, int(p.size)))
            rect.center = (int(p.x), int(p.y))
            pygame.draw.ellipse(layer, (*p.color, int(p.opacity)), rect)
        screen.blit(layer, (0, 0))

    def _draw_hud(self, screen, fps):
        if not self.show_hud:
            return
        stats = self.sim.stats
        preset = get_preset(self.preset_key)
        line = (f"{preset['name']}  |  Tick: {stats['tick']:,}  |  "
                f"Grid: {stats['grid']}  |  Boundary: {stats['boundary_pct']:.1f}%  |  "
                f"Particles: {stats['particles']}  |  FPS: {fps:.0f}")
        if self.paused:
            line = "[PAUSED]  " + line

        bg_surface = pygame.Surface((self.canvas_w, 24), pygame.SRCALPHA)
        bg_surface.fill((0, 0, 0, 140))
        screen.blit(bg_surface, (0, 0))
        text_surface = self.hud_font.render(line, True, (210, 215, 225))
        screen.blit(text_surface, (10, 6))

    def _render(self, screen, frame):
        screen.fill(SKY_TINT.get(frame.atmosphere.sky_phase, BG))
        self._draw_grid(screen, frame)
        self._draw_sky(screen, frame)
        self._draw_grass(screen, frame)
        self._draw_turbines(screen, frame)
        if frame.interaction_active:
            self._draw_particles(screen, frame)

    # -- loop --------------------------------------------------------------

    def run(self):
        """Main viewer loop."""
        pygame.init()
        screen = pygame.display.set_mode((self.canvas_w, self.canvas_h),
                                         pygame.RESIZABLE)
        pygame.display.set_caption("Wind Automata")
        clock = pygame.time.Clock()
        self.hud_font = pygame.font.SysFont("menlo", 13)

        while self.running:
            frame_start = time.time()

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN:
                    self._handle_keydown(event)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self.events.emit("press", *event.pos)
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                    self.events.emit("release", *event.pos)
                elif event.type == pygame.MOUSEMOTION:
                    self.events.emit("move", *event.pos)
                elif event.type == pygame.VIDEORESIZE:
                    self.canvas_w, self.canvas_h = event.w, event.h
                    screen = pygame.display.set_mode(
                        (self.canvas_w, self.canvas_h), pygame.RESIZABLE)
                    self.events.emit("resize", event.w, event.h)

            if not self.paused:
                self.driver.run_frame()

            self._render(screen, self.sim.last_frame)

            frame_time = time.time() - frame_start
            self.fps_history.append(frame_time)
            if len(self.fps_history) > 30:
                self.fps_history.pop(0)
            avg_fps = 1.0 / max(np.mean(self.fps_history), 0.001)
            self._draw_hud(screen, avg_fps)

            pygame.display.flip()
            clock.tick(60)

        self.sim.detach()
        pygame.quit()

    def _handle_keydown(self, event):
        key = event.key

        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False

        elif key == pygame.K_SPACE:
            self.paused = not self.paused

        elif key == pygame.K_r:
            self.sim.resize(self.canvas_w, self.canvas_h)
            print(f"Reinitialized at {self.canvas_w}x{self.canvas_h}")

        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

        elif pygame.K_1 <= key <= pygame.K_9:
            idx = key - pygame.K_1
            if idx < len(PRESET_ORDER):
                self._apply_preset(PRESET_ORDER[idx])
                print(f"Preset: {PRESET_ORDER[idx]}")
