"""
Dino Evolution - Narrator

Copyright (c) 2026 SolisHQ (github.com/solishq). All rights reserved.
Licensed under MIT.

Turns session events into short commentary. Each champion gets a name so
the run reads as a lineage: who held the record, for how long, and who
took it from them.
"""

from typing import Optional
import random

CHAMPION_NAMES = [
    'Rex', 'Spike', 'Dash', 'Bolt', 'Pebble', 'Fern', 'Cinder', 'Moss',
    'Talon', 'Juniper', 'Flint', 'Sprout', 'Ember', 'Quill', 'Ridge', 'Sable',
    'Basalt', 'Clover', 'Dune', 'Gravel', 'Hopper', 'Jasper', 'Kettle', 'Lark',
]

SEVERITY_ORDER = {'critical': 0, 'high': 1, 'medium': 2, 'low': 3, 'info': 4}


class Narrator:
    """Generates commentary from session events, one narration per generation."""

    def __init__(self, stagnation_window: int = 10, rng: Optional[random.Random] = None):
        self.stagnation_window = stagnation_window
        self.major_events: list[dict] = []
        self.lineage: list[dict] = []    # one entry per champion, oldest first
        self._rng = rng or random.Random()
        self._name_pool = list(CHAMPION_NAMES)
        self._rng.shuffle(self._name_pool)
        self._name_idx = 0
        self._last_stagnation_notice = 0

    def _next_name(self) -> str:
        if self._name_idx < len(self._name_pool):
            name = self._name_pool[self._name_idx]
        else:
            name = f"Dino-{self._name_idx + 1}"
        self._name_idx += 1
        return name

    @property
    def champion_name(self) -> Optional[str]:
        return self.lineage[-1]['name'] if self.lineage else None

    def narrate(self, generation: int, events: list[dict], stats: dict) -> Optional[dict]:
        """
        Pick the most severe narration among `events`; otherwise a periodic
        summary every 10 generations or a stagnation notice. None if quiet.
        """
        narrations = [n for n in (self._narrate_event(e, stats) for e in events) if n]
        if narrations:
            narrations.sort(key=lambda n: SEVERITY_ORDER.get(n['severity'], 99))
            self.major_events.extend(n for n in narrations if n['severity'] in ('critical', 'high'))
            return narrations[0]

        stagnation = self._narrate_stagnation(generation)
        if stagnation:
            return stagnation

        if generation > 1 and generation % 10 == 0:
            return self._narrate_state(generation, stats)

        return None

    def _narrate_event(self, event: dict, stats: dict) -> Optional[dict]:
        etype = event.get('type', '')

        if etype == 'new_champion':
            name = self._next_name()
            previous = self.champion_name
            self.lineage.append({
                'name': name, 'generation': event['generation'], 'fitness': event['fitness'],
            })
            if previous is None:
                return {
                    'title': 'First Champion',
                    'text': f"{name} survived {event['fitness']:.0f} frames in generation "
                           f"{event['generation']}. The bar is set.",
                    'severity': 'medium',
                    'icon': '🦖'
                }
            return {
                'title': 'New Champion',
                'text': f"{name} dethroned {previous} in generation {event['generation']}: "
                       f"{event['fitness']:.0f} frames, up from {event['previous']:.0f}.",
                'severity': 'high',
                'icon': '👑'
            }

        if etype == 'new_record':
            return {
                'title': 'Record Score',
                'text': f"Generation {event['generation']} set a new best score of "
                       f"{event['score']} (previous {event['previous']}).",
                'severity': 'high',
                'icon': '🏆'
            }

        if etype == 'population_reset':
            self.lineage = []
            self._last_stagnation_notice = 0
            return {
                'title': 'Extinction Event',
                'text': f"Population wiped. {event['size']} fresh random brains start over "
                       f"from generation 1.",
                'severity': 'critical',
                'icon': '☄️'
            }

        return None

    def _narrate_stagnation(self, generation: int) -> Optional[dict]:
        if not self.lineage:
            return None
        held_since = self.lineage[-1]['generation']
        idle = generation - held_since
        if idle < self.stagnation_window or held_since == self._last_stagnation_notice:
            return None
        self._last_stagnation_notice = held_since
        return {
            'title': 'Plateau',
            'text': f"{self.champion_name} has held the record for {idle} generations. "
                   f"Mutation keeps searching; nothing better yet.",
            'severity': 'low',
            'icon': '⏳'
        }

    def _narrate_state(self, generation: int, stats: dict) -> dict:
        best = stats.get('best_fitness', 0)
        avg = stats.get('avg_fitness', 0)
        spread = best / avg if avg else 0
        if spread > 3:
            text = (f"Generation {generation}. Best {best:.0f}, average {avg:.0f}. "
                    f"A few runners carry the population.")
        else:
            text = (f"Generation {generation}. Best {best:.0f}, average {avg:.0f}. "
                    f"The whole herd is learning to jump.")
        return {
            'title': f'Generation {generation}',
            'text': text,
            'severity': 'info',
            'icon': '📈'
        }

    def get_summary(self, stats: dict) -> dict:
        champion = f" Reigning champion: {self.champion_name}." if self.lineage else ""
        return {
            'title': 'Training Complete',
            'text': f"After {stats.get('generation', 1) - 1} generations, best score "
                   f"{stats.get('best_score', 0)}, champion fitness "
                   f"{stats.get('champion_fitness', 0):.0f}. "
                   f"{len(self.lineage)} champions in the lineage.{champion}",
            'severity': 'info',
            'icon': '🏁',
            'major_events': self.major_events[-10:]
        }
