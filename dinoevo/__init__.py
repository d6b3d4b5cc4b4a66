# Dino Evolution Engine
# Copyright (c) 2026 SolisHQ (github.com/solishq). MIT License.

__author__ = "SolisHQ"
__version__ = "1.0.0"

from .network import FeedForwardNetwork, sigmoid
from .agent import Agent
from .population import Population
from .game import Dino, Game, Obstacle, Environment
from .config import TrainingConfig
from .session import TrainingSession
from .narrator import Narrator
