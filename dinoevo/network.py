"""
Dino Evolution - Feed-Forward Network

Copyright (c) 2026 SolisHQ (github.com/solishq). All rights reserved.
Licensed under MIT.

NEURAL ARCHITECTURE:
  Input (N features) → Hidden (H neurons, sigmoid) → Output (M, sigmoid)

  Topology is fixed at construction. The four weight structures are numpy
  arrays of fixed shape, so the network can never be resized:

    weights_ih  (H x N)   input → hidden
    bias_h      (H,)      hidden bias
    weights_ho  (M x H)   hidden → output
    bias_o      (M,)      output bias

REPRODUCTION:
  Mutation adds uniform noise in [-0.5, 0.5] to each scalar independently
  with probability `rate`. Crossover picks every scalar 50/50 from either
  parent (per element, not per matrix).

RANDOMNESS:
  Every network carries a numpy Generator. Copies and children share their
  parent's generator so a seeded population evolves deterministically.
"""

import numpy as np
from typing import Optional


# Uniform noise added by a mutation hit: value + U(-MUTATION_SCALE, MUTATION_SCALE)
MUTATION_SCALE = 0.5

# Order of the weight structures, shared by copy/mutate/crossover/serialization
_PARAMS = ('weights_ih', 'bias_h', 'weights_ho', 'bias_o')


def sigmoid(x):
    """Element-wise logistic function. Clipped only where exp() would overflow."""
    return 1.0 / (1.0 + np.exp(-np.clip(x, -500.0, 500.0)))


def validate_count(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return int(value)


def validate_rate(rate) -> float:
    rate = float(rate)
    if not 0.0 <= rate <= 1.0:
        raise ValueError(f"mutation rate must be in [0, 1], got {rate}")
    return rate


class FeedForwardNetwork:
    """Fixed 3-layer network: inference, deep copy, mutation, uniform crossover."""

    def __init__(self, input_count: int, hidden_count: int, output_count: int,
                 rng: Optional[np.random.Generator] = None):
        self.input_count = validate_count('input_count', input_count)
        self.hidden_count = validate_count('hidden_count', hidden_count)
        self.output_count = validate_count('output_count', output_count)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.randomize_weights()

    def randomize_weights(self):
        """Every scalar drawn independently from U(-1, 1)."""
        h, n, m = self.hidden_count, self.input_count, self.output_count
        self.weights_ih = self.rng.uniform(-1.0, 1.0, (h, n))
        self.bias_h = self.rng.uniform(-1.0, 1.0, h)
        self.weights_ho = self.rng.uniform(-1.0, 1.0, (m, h))
        self.bias_o = self.rng.uniform(-1.0, 1.0, m)

    @property
    def topology(self) -> tuple[int, int, int]:
        return (self.input_count, self.hidden_count, self.output_count)

    # ─── Inference ───────────────────────────────────────

    def predict(self, inputs) -> np.ndarray:
        """
        Forward pass. Returns `output_count` values, each in (0, 1).
        Inputs are trusted to be normalized by the caller; only their
        length is checked.
        """
        x = np.asarray(inputs, dtype=float)
        if x.shape != (self.input_count,):
            raise ValueError(
                f"Expected {self.input_count} inputs, got shape {x.shape}"
            )
        hidden = sigmoid(self.weights_ih @ x + self.bias_h)
        return sigmoid(self.weights_ho @ hidden + self.bias_o)

    # ─── Reproduction ────────────────────────────────────

    def copy(self) -> 'FeedForwardNetwork':
        """Deep clone. The copy shares nothing mutable with the original."""
        clone = self._blank(self.rng)
        for name in _PARAMS:
            setattr(clone, name, getattr(self, name).copy())
        return clone

    def mutate(self, rate: float, rng: Optional[np.random.Generator] = None):
        """Perturb each scalar with probability `rate` by U(-0.5, 0.5), in place."""
        rate = validate_rate(rate)
        rng = rng if rng is not None else self.rng
        for name in _PARAMS:
            values = getattr(self, name)
            hits = rng.random(values.shape) < rate
            noise = rng.uniform(-MUTATION_SCALE, MUTATION_SCALE, values.shape)
            setattr(self, name, np.where(hits, values + noise, values))

    def crossover(self, other: 'FeedForwardNetwork',
                  rng: Optional[np.random.Generator] = None) -> 'FeedForwardNetwork':
        """New network taking every scalar from self or other with equal odds."""
        if other.topology != self.topology:
            raise ValueError(
                f"Cannot cross topologies {self.topology} and {other.topology}"
            )
        rng = rng if rng is not None else self.rng
        child = self._blank(self.rng)
        for name in _PARAMS:
            mine = getattr(self, name)
            mask = rng.random(mine.shape) < 0.5
            setattr(child, name, np.where(mask, mine, getattr(other, name)))
        return child

    def same_weights(self, other: 'FeedForwardNetwork') -> bool:
        """Exact equality of topology and all four weight structures."""
        return (self.topology == other.topology and
                all(np.array_equal(getattr(self, n), getattr(other, n)) for n in _PARAMS))

    def _blank(self, rng: np.random.Generator) -> 'FeedForwardNetwork':
        # Skips randomize_weights(); caller fills every parameter.
        net = FeedForwardNetwork.__new__(FeedForwardNetwork)
        net.input_count = self.input_count
        net.hidden_count = self.hidden_count
        net.output_count = self.output_count
        net.rng = rng
        return net

    # ─── Serialization ───────────────────────────────────

    def to_dict(self) -> dict:
        return {
            'topology': list(self.topology),
            **{name: getattr(self, name).tolist() for name in _PARAMS},
        }

    @classmethod
    def from_dict(cls, data: dict,
                  rng: Optional[np.random.Generator] = None) -> 'FeedForwardNetwork':
        """Rebuild a network from to_dict() output. Shapes must match the topology."""
        n, h, m = data['topology']
        net = cls(n, h, m, rng=rng)
        expected = {
            'weights_ih': (net.hidden_count, net.input_count),
            'bias_h': (net.hidden_count,),
            'weights_ho': (net.output_count, net.hidden_count),
            'bias_o': (net.output_count,),
        }
        for name in _PARAMS:
            values = np.asarray(data[name], dtype=float)
            if values.shape != expected[name]:
                raise ValueError(
                    f"{name} has shape {values.shape}, expected {expected[name]}"
                )
            setattr(net, name, values)
        return net

    def __repr__(self) -> str:
        n, h, m = self.topology
        return f"FeedForwardNetwork({n}, {h}, {m})"
