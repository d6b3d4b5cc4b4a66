"""
Dino Evolution - Training Session

Copyright (c) 2026 SolisHQ (github.com/solishq). All rights reserved.
Licensed under MIT.

One session = one training run. It owns everything the step loop touches:
the population, the game, this generation's dinos, pause/training flags
and the all-time best score. Nothing lives at module level, so any number
of sessions can run side by side.

STEP LOOP (one frame):
  game.update() → for every live dino: inputs → predict → jump? →
  physics → collision → die. When the last dino dies the generation is
  over: fitness is collected in population order and evolve() runs.
"""

import numpy as np
from typing import Optional

from .config import TrainingConfig
from .game import Dino, Game
from .population import Population


class TrainingSession:
    """Explicit training-loop context. Drive it with step() or run_generation()."""

    def __init__(self, config: Optional[TrainingConfig] = None, game: Optional[Game] = None):
        self.config = config or TrainingConfig()
        self.rng = np.random.default_rng(self.config.seed)
        self.population = Population(
            self.config.population_size,
            self.config.input_count,
            self.config.hidden_count,
            self.config.output_count,
            mutation_rate=self.config.mutation_rate,
            elitism_count=self.config.elitism_count,
            rng=self.rng,
        )
        self.game = game if game is not None else Game(rng=self.rng)

        self.dinos: list[Dino] = []
        self.is_training = False
        self.is_paused = False
        self.best_score = 0
        self.current_best: Optional[Dino] = None
        self.generation_frames = 0
        self.events: list[dict] = []

    # ─── Control ─────────────────────────────────────────

    def start(self):
        self.is_training = True
        self.is_paused = False
        self.initialize_generation()

    def toggle_pause(self) -> bool:
        self.is_paused = not self.is_paused
        return self.is_paused

    def reset(self):
        """Stop and start over from a fresh random generation 1."""
        self.is_training = False
        self.is_paused = False
        self.population.reset()
        self.game.reset()
        self.dinos = []
        self.best_score = 0
        self.current_best = None
        self.generation_frames = 0
        self.events.extend(self.population.pop_events())

    # ─── Generations ─────────────────────────────────────

    def initialize_generation(self):
        """One dino per network, index-aligned with the population."""
        self.game.reset()
        self.dinos = [Dino(net) for net in self.population.get_all_networks()]
        self.current_best = self.dinos[0] if self.dinos else None
        self.generation_frames = 0

    def evolve_to_next_generation(self):
        if any(d.alive for d in self.dinos):
            raise RuntimeError("Cannot evolve while dinos are still alive")

        fitness_scores = [d.fitness for d in self.dinos]
        generation_best = max((d.score for d in self.dinos), default=0)
        if generation_best > self.best_score:
            self.events.append({
                'type': 'new_record', 'generation': self.population.generation,
                'score': generation_best, 'previous': self.best_score,
            })
            self.best_score = generation_best

        self.population.evolve(fitness_scores)
        self.events.extend(self.population.pop_events())
        self.initialize_generation()

    def step(self) -> bool:
        """Advance one frame. Returns True when this frame ended a generation."""
        if not self.is_training or self.is_paused:
            return False

        self.game.update()
        self.generation_frames += 1

        alive_count = 0
        best_fitness = 0.0
        for dino in self.dinos:
            if not dino.alive:
                continue
            alive_count += 1

            outputs = dino.predict(self.game.get_inputs(dino))
            if outputs[0] > self.config.jump_threshold:
                dino.jump()

            dino.update()
            if self.game.collides(dino):
                dino.die()

            if dino.fitness > best_fitness:
                best_fitness = dino.fitness
                self.current_best = dino

        if self.config.max_frames is not None and self.generation_frames >= self.config.max_frames:
            for dino in self.dinos:
                dino.die()
            alive_count = 0

        if alive_count == 0:
            self.evolve_to_next_generation()
            return True
        return False

    def run_generation(self, max_steps: Optional[int] = None) -> Optional[dict]:
        """
        Step until the current generation ends and return its history record.
        Returns None if `max_steps` frames pass first (or the session is paused).
        """
        if not self.is_training:
            self.start()
        steps = 0
        while max_steps is None or steps < max_steps:
            if self.is_paused:
                return None
            steps += 1
            if self.step():
                return self.population.history[-1]
        return None

    # ─── Query ───────────────────────────────────────────

    def get_current_best(self) -> Optional[Dino]:
        return self.current_best

    def alive_count(self) -> int:
        return sum(1 for d in self.dinos if d.alive)

    def get_stats(self) -> dict:
        return {
            'generation': self.population.generation,
            'alive': self.alive_count(),
            'total_dinos': len(self.dinos),
            'best_score': self.best_score,
            'best_fitness': self.population.best_fitness,
            'avg_fitness': self.population.avg_fitness,
            'champion_fitness': self.population.champion_fitness,
            'frame': self.generation_frames,
            'training': self.is_training,
            'paused': self.is_paused,
        }

    def pop_events(self) -> list[dict]:
        events = self.events
        self.events = []
        return events
