"""
Dino Evolution - Population

Copyright (c) 2026 SolisHQ (github.com/solishq). All rights reserved.
Licensed under MIT.

GENERATIONAL TRANSITION:
  evolve(scores) turns one evaluated generation into the next:

    1. Rank networks by score, descending. Stable: equal scores keep their
       original index order, so the lower index is treated as better.
    2. Record best/average fitness and a copy of the best network.
    3. Elitism: copies of the top `elitism_count` networks pass unchanged.
    4. Offspring: two tournament winners → crossover → mutate, until full.
    5. Swap in the new network list; generation += 1.

  The call is all-or-nothing. Every precondition is checked before any
  state is touched.

TOURNAMENT SELECTION:
  Best of 3 candidates drawn uniformly WITH replacement from the full
  ranked list. Not fitness-proportionate. Weak networks can still win a
  tournament of weak candidates, which keeps diversity in the gene pool.
"""

import math
import numpy as np
from typing import Optional, Sequence

from .network import FeedForwardNetwork, validate_count, validate_rate


TOURNAMENT_SIZE = 3


class Population:
    """
    Fixed-size collection of networks evolving one generation per evolve().
    `len(networks) == size` holds before and after every call.
    """

    def __init__(self, size: int, input_count: int, hidden_count: int,
                 output_count: int, mutation_rate: float = 0.1,
                 elitism_count: int = 2, rng: Optional[np.random.Generator] = None):
        self.size = validate_count('size', size)
        self.input_count = validate_count('input_count', input_count)
        self.hidden_count = validate_count('hidden_count', hidden_count)
        self.output_count = validate_count('output_count', output_count)
        self.mutation_rate = validate_rate(mutation_rate)
        if (isinstance(elitism_count, bool) or not isinstance(elitism_count, (int, np.integer))
                or not 0 <= elitism_count <= self.size):
            raise ValueError(
                f"elitism_count must be an integer in [0, {self.size}], got {elitism_count!r}"
            )
        self.elitism_count = int(elitism_count)
        self.rng = rng if rng is not None else np.random.default_rng()

        self.generation = 1
        self.networks: list[FeedForwardNetwork] = []
        self.best_fitness = 0.0
        self.best_network: Optional[FeedForwardNetwork] = None
        self.avg_fitness = 0.0

        # All-time best across the run (best_network only covers the last generation)
        self.champion: Optional[FeedForwardNetwork] = None
        self.champion_fitness = 0.0
        self.champion_generation = 0

        self.history: list[dict] = []
        self.events: list[dict] = []

        self.initialize()

    @property
    def topology(self) -> tuple[int, int, int]:
        return (self.input_count, self.hidden_count, self.output_count)

    def initialize(self):
        """Refill with `size` random networks. Leaves `generation` alone."""
        self.networks = [
            FeedForwardNetwork(*self.topology, rng=self.rng)
            for _ in range(self.size)
        ]
        self.best_fitness = 0.0
        self.best_network = None
        self.avg_fitness = 0.0

    # ─── Evolution ───────────────────────────────────────

    def evolve(self, fitness_scores: Sequence[float]):
        """Produce the next generation from scores index-aligned with `networks`."""
        scores = np.asarray(fitness_scores, dtype=float)
        if scores.shape != (self.size,):
            raise ValueError(
                f"Expected {self.size} fitness scores, got shape {scores.shape}"
            )
        if np.isnan(scores).any():
            raise ValueError("fitness scores must not contain NaN")

        # Stable descending order: ties keep prior index order
        order = np.argsort(-scores, kind='stable')
        ranked = [(self.networks[i], float(scores[i])) for i in order]

        self.best_fitness = ranked[0][1]
        self.best_network = ranked[0][0].copy()
        self.avg_fitness = float(scores.mean())

        next_generation = [net.copy() for net, _ in ranked[:self.elitism_count]]

        while len(next_generation) < self.size:
            parent_a = self.select_parent(ranked)
            parent_b = self.select_parent(ranked)
            child = parent_a.crossover(parent_b, rng=self.rng)
            child.mutate(self.mutation_rate, rng=self.rng)
            next_generation.append(child)

        self._record_generation(scores)
        self.networks = next_generation
        self.generation += 1

    def select_parent(self, ranked: list[tuple[FeedForwardNetwork, float]]) -> FeedForwardNetwork:
        """Tournament: best of 3 uniform draws (with replacement). First draw wins ties."""
        best, best_fitness = None, -math.inf
        for idx in self.rng.integers(0, len(ranked), size=TOURNAMENT_SIZE):
            network, fitness = ranked[idx]
            if best is None or fitness > best_fitness:
                best, best_fitness = network, fitness
        return best

    def _record_generation(self, scores: np.ndarray):
        record = {
            'generation': self.generation,
            'best_fitness': self.best_fitness,
            'avg_fitness': self.avg_fitness,
            'min_fitness': float(scores.min()),
        }
        self.history.append(record)
        self.events.append({'type': 'generation_complete', **record})

        if self.champion is None or self.best_fitness > self.champion_fitness:
            previous = self.champion_fitness if self.champion is not None else None
            self.champion = self.best_network.copy()
            self.champion_fitness = self.best_fitness
            self.champion_generation = self.generation
            self.events.append({
                'type': 'new_champion', 'generation': self.generation,
                'fitness': self.best_fitness, 'previous': previous,
            })

    # ─── Query ───────────────────────────────────────────

    def get_network(self, index: int) -> FeedForwardNetwork:
        return self.networks[index]

    def get_all_networks(self) -> list[FeedForwardNetwork]:
        return list(self.networks)

    def get_stats(self) -> dict:
        return {
            'generation': self.generation,
            'size': self.size,
            'topology': list(self.topology),
            'mutation_rate': self.mutation_rate,
            'elitism_count': self.elitism_count,
            'best_fitness': self.best_fitness,
            'avg_fitness': self.avg_fitness,
            'champion_fitness': self.champion_fitness,
            'champion_generation': self.champion_generation,
        }

    def reset(self):
        """Back to generation 1 with a brand-new random population."""
        self.generation = 1
        self.champion = None
        self.champion_fitness = 0.0
        self.champion_generation = 0
        self.history = []
        self.initialize()
        self.events.append({'type': 'population_reset', 'size': self.size})

    def pop_events(self) -> list[dict]:
        events = self.events
        self.events = []
        return events

    def __len__(self) -> int:
        return len(self.networks)
