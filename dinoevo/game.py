"""
Dino Evolution - Headless Game Environment

Copyright (c) 2026 SolisHQ (github.com/solishq). All rights reserved.
Licensed under MIT.

A side-scroller without a screen. Obstacles spawn off the right edge and
slide left; dinos stand at a fixed x and can only jump. No drawing happens
here: the state is plain numbers a renderer (or nobody) can read.

COORDINATES:
  x grows to the right. y is height above the ground, so y = 0 is
  standing and y > 0 is airborne. Obstacles stand on the ground and span
  [0, height] vertically.

SENSOR INPUTS (all clamped to [0, 1]):
  1. Distance from the dino's front edge to the next obstacle / width
  2. Obstacle height / 60
  3. Obstacle width / 40
  4. Dino height above ground / 100
  5. Game speed / max speed
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Protocol

from .agent import Agent


OBSTACLE_TYPES = [
    (20, 40),   # tall
    (30, 30),   # medium
    (15, 50),   # very tall
]

# Normalizers for sensor inputs
MAX_OBSTACLE_HEIGHT = 60.0
MAX_OBSTACLE_WIDTH = 40.0
MAX_DINO_HEIGHT = 100.0


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


class Environment(Protocol):
    """What a training session needs from a game."""

    def reset(self) -> None: ...

    def update(self) -> None: ...

    def get_inputs(self, agent: Agent) -> list[float]: ...

    def collides(self, agent: Agent) -> bool: ...


@dataclass
class Obstacle:
    x: float
    width: float
    height: float

    def update(self, speed: float):
        self.x -= speed

    def is_off_screen(self) -> bool:
        return self.x + self.width < 0


class Dino(Agent):
    """An agent with a body. Fitness is frames survived."""

    X = 100.0
    WIDTH = 30.0
    HEIGHT = 40.0
    GRAVITY = 0.8
    JUMP_STRENGTH = 15.0

    def __init__(self, network, **kwargs):
        super().__init__(network, **kwargs)
        self.x = self.X
        self.y = 0.0
        self.width = self.WIDTH
        self.height = self.HEIGHT
        self.velocity = 0.0
        self.is_jumping = False
        self.score = 0

    def jump(self):
        if not self.is_jumping and self.alive:
            self.velocity = self.JUMP_STRENGTH
            self.is_jumping = True

    def update(self):
        """One frame of physics. Survival earns one point of score and fitness."""
        if not self.alive:
            return
        self.velocity -= self.GRAVITY
        self.y += self.velocity
        if self.y <= 0:
            self.y = 0.0
            self.velocity = 0.0
            self.is_jumping = False
        self.score += 1
        self.reward(1.0)

    def collides_with(self, obstacle: Obstacle) -> bool:
        # Axis-aligned boxes; the obstacle's bottom is the ground
        return (self.x + self.width > obstacle.x and
                self.x < obstacle.x + obstacle.width and
                self.y + self.height > 0 and
                self.y < obstacle.height)

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            'score': self.score,
            'y': round(self.y, 2),
            'is_jumping': self.is_jumping,
        }


class Game:
    """Obstacle stream plus speed schedule. Implements Environment."""

    BASE_SPEED = 6.0
    MAX_SPEED = 15.0
    SPEED_STEP = 0.5
    SPEED_UP_EVERY = 300     # frames
    SPAWN_INTERVAL = 90      # frames

    def __init__(self, width: int = 800, rng: Optional[np.random.Generator] = None):
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")
        self.width = width
        self.rng = rng if rng is not None else np.random.default_rng()
        self.speed_multiplier = 1.0
        self.obstacles: list[Obstacle] = []
        self.game_speed = self.BASE_SPEED
        self.frame_count = 0
        self.reset()

    def reset(self):
        self.obstacles = []
        self.game_speed = self.BASE_SPEED
        self.frame_count = 0
        self.spawn_obstacle()

    def spawn_obstacle(self) -> Obstacle:
        width, height = OBSTACLE_TYPES[self.rng.integers(len(OBSTACLE_TYPES))]
        obstacle = Obstacle(x=self.width + 50.0, width=float(width), height=float(height))
        self.obstacles.append(obstacle)
        return obstacle

    def update(self):
        self.frame_count += 1

        if self.frame_count % self.SPEED_UP_EVERY == 0 and self.game_speed < self.MAX_SPEED:
            self.game_speed += self.SPEED_STEP

        if self.frame_count % self.SPAWN_INTERVAL == 0:
            self.spawn_obstacle()

        step = self.game_speed * self.speed_multiplier
        for obstacle in self.obstacles:
            obstacle.update(step)
        self.obstacles = [o for o in self.obstacles if not o.is_off_screen()]

    def set_speed_multiplier(self, multiplier: float):
        if multiplier <= 0:
            raise ValueError(f"speed multiplier must be positive, got {multiplier}")
        self.speed_multiplier = float(multiplier)

    # ─── Sensors ─────────────────────────────────────────

    def get_closest_obstacle(self, dino: Dino) -> Optional[Obstacle]:
        """First obstacle whose right edge is still ahead of the dino."""
        for obstacle in self.obstacles:
            if obstacle.x + obstacle.width > dino.x:
                return obstacle
        return None

    def get_inputs(self, dino: Dino) -> list[float]:
        speed = _clamp01(self.game_speed / self.MAX_SPEED)
        obstacle = self.get_closest_obstacle(dino)
        if obstacle is None:
            return [1.0, 0.0, 0.0, 0.0, speed]

        distance = (obstacle.x - (dino.x + dino.width)) / self.width
        return [
            _clamp01(distance),
            _clamp01(obstacle.height / MAX_OBSTACLE_HEIGHT),
            _clamp01(obstacle.width / MAX_OBSTACLE_WIDTH),
            _clamp01(dino.y / MAX_DINO_HEIGHT),
            speed,
        ]

    def collides(self, dino: Dino) -> bool:
        obstacle = self.get_closest_obstacle(dino)
        return obstacle is not None and dino.collides_with(obstacle)

    def to_dict(self) -> dict:
        return {
            'frame': self.frame_count,
            'speed': round(self.game_speed, 2),
            'speed_multiplier': self.speed_multiplier,
            'obstacles': [
                {'x': round(o.x, 1), 'width': o.width, 'height': o.height}
                for o in self.obstacles
            ],
        }
