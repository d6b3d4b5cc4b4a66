#!/usr/bin/env python3
"""
Dino Evolution - CLI Runner

Headless training. No window, no server: just generations scrolling by.

Usage:
    python -m dinoevo.run --generations 50 --seed 7
    python -m dinoevo.run --json --save champion.json
"""

import argparse
import json

from .config import TrainingConfig, POPULATION_SIZE, HIDDEN_COUNT
from .narrator import Narrator
from .session import TrainingSession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dino Evolution - headless training")
    parser.add_argument("--generations", type=int, default=30, help="Generations to train")
    parser.add_argument("--population", type=int, default=POPULATION_SIZE, help="Dinos per generation")
    parser.add_argument("--hidden", type=int, default=HIDDEN_COUNT, help="Hidden neurons")
    parser.add_argument("--mutation-rate", type=float, default=0.1, help="Per-weight mutation probability")
    parser.add_argument("--elitism", type=int, default=2, help="Networks copied unchanged each generation")
    parser.add_argument("--max-frames", type=int, default=5000, help="Frame cap per generation")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--save", type=str, default=None, help="Write the champion network to this JSON file")
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.add_argument("--quiet", action="store_true", help="Less output")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = TrainingConfig(
            population_size=args.population,
            hidden_count=args.hidden,
            mutation_rate=args.mutation_rate,
            elitism_count=args.elitism,
            max_frames=args.max_frames,
            seed=args.seed,
        )
        session = TrainingSession(config)
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        return 2

    narrator = Narrator()
    verbose = not args.quiet and not args.json

    if verbose:
        print("🦖 Dino Evolution\n")
        print(f"Config: {args.generations} generations, {config.population_size} dinos, "
              f"{config.input_count}-{config.hidden_count}-{config.output_count} network")
        print(f"Mutation: {config.mutation_rate}, Elitism: {config.elitism_count}, "
              f"Seed: {config.seed}\n")

    session.start()
    for _ in range(args.generations):
        record = session.run_generation()
        events = session.pop_events()
        narration = narrator.narrate(session.population.generation, events, session.get_stats())
        if verbose:
            print(f"Gen {record['generation']:03d}: best={record['best_fitness']:.0f}  "
                  f"avg={record['avg_fitness']:.1f}  min={record['min_fitness']:.0f}")
            if narration and narration['severity'] in ('critical', 'high'):
                print(f"  {narration['icon']} {narration['title']}: {narration['text']}")

    stats = session.get_stats()
    champion = session.population.champion

    if args.save and champion is not None:
        with open(args.save, "w") as f:
            json.dump({"fitness": session.population.champion_fitness,
                       "generation": session.population.champion_generation,
                       "network": champion.to_dict()}, f, indent=2)

    if args.json:
        result = {
            "generations": args.generations,
            "config": config.to_dict(),
            "stats": stats,
            "history": session.population.history,
            "champion": {
                "name": narrator.champion_name,
                "fitness": session.population.champion_fitness,
                "generation": session.population.champion_generation,
            },
        }
        print(json.dumps(result, indent=2))
    elif not args.quiet:
        summary = narrator.get_summary(stats)
        print(f"\n{'='*50}")
        print("🏆 FINAL RESULTS")
        print(f"{'='*50}\n")
        print(f"Best score:        {stats['best_score']}")
        print(f"Champion fitness:  {stats['champion_fitness']:.0f} "
              f"(generation {session.population.champion_generation})")
        print(f"Last avg fitness:  {stats['avg_fitness']:.1f}")
        print(f"\n{summary['text']}")
        if args.save and champion is not None:
            print(f"\nChampion saved to {args.save}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
