"""
Dino Evolution - Agent

Copyright (c) 2026 SolisHQ (github.com/solishq). All rights reserved.
Licensed under MIT.

An agent is one network paired with a fitness accumulator and a liveness
flag for a single generation. Fitness only grows while the agent is alive
and is frozen the moment it dies.
"""

import numpy as np
from dataclasses import dataclass

from .network import FeedForwardNetwork


@dataclass
class Agent:
    network: FeedForwardNetwork
    fitness: float = 0.0
    alive: bool = True

    def predict(self, inputs) -> np.ndarray:
        return self.network.predict(inputs)

    def reward(self, amount: float = 1.0):
        """Accumulate fitness. No effect after death."""
        if amount < 0:
            raise ValueError(f"fitness reward must be non-negative, got {amount}")
        if self.alive:
            self.fitness += amount

    def die(self):
        self.alive = False

    def to_dict(self) -> dict:
        return {
            'fitness': round(self.fitness, 1),
            'alive': self.alive,
            'topology': list(self.network.topology),
        }
