"""
Dino Evolution - Training Configuration

Copyright (c) 2026 SolisHQ (github.com/solishq). All rights reserved.
Licensed under MIT.
"""

from dataclasses import dataclass, asdict
from typing import Optional


POPULATION_SIZE = 15     # dinos per generation
INPUT_COUNT = 5          # distance, obstacle height, obstacle width, dino y, speed
HIDDEN_COUNT = 6
OUTPUT_COUNT = 1         # jump / no jump


@dataclass
class TrainingConfig:
    population_size: int = POPULATION_SIZE
    input_count: int = INPUT_COUNT
    hidden_count: int = HIDDEN_COUNT
    output_count: int = OUTPUT_COUNT
    mutation_rate: float = 0.1
    elitism_count: int = 2
    jump_threshold: float = 0.5      # output[0] above this means "jump"
    max_frames: Optional[int] = None  # per generation; None = until every dino dies
    seed: Optional[int] = None

    def __post_init__(self):
        # Topology, size, rate and elitism are checked by Population itself
        if not 0.0 <= self.jump_threshold <= 1.0:
            raise ValueError(f"jump_threshold must be in [0, 1], got {self.jump_threshold}")
        if self.max_frames is not None and self.max_frames <= 0:
            raise ValueError(f"max_frames must be positive, got {self.max_frames}")

    def to_dict(self) -> dict:
        return asdict(self)
