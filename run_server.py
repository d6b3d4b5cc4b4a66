#!/usr/bin/env python3
"""
Dino Evolution - Server Launcher

Copyright (c) 2026 SolisHQ (github.com/solishq). MIT License.

Usage:
    python run_server.py              # Start on port 8000
    python run_server.py --port 3000  # Custom port
"""

import sys
import argparse


def preflight():
    """Verify all dependencies before starting."""
    missing = []
    for module in ('numpy', 'fastapi', 'uvicorn', 'pydantic'):
        try:
            __import__(module)
        except ImportError:
            missing.append(module)

    if missing:
        print(f"\n  Missing dependencies: {', '.join(missing)}")
        print(f"  Install with: pip install {' '.join(missing)}")
        sys.exit(1)


def main():
    parser = argparse.ArgumentParser(description='Dino Evolution - training server')
    parser.add_argument('--port', type=int, default=8000, help='Server port (default: 8000)')
    parser.add_argument('--host', type=str, default='0.0.0.0', help='Server host (default: 0.0.0.0)')
    args = parser.parse_args()

    preflight()

    print(f"  Server:    http://localhost:{args.port}")
    print(f"  API docs:  http://localhost:{args.port}/docs")
    print(f"  WebSocket: ws://localhost:{args.port}/ws")
    print()
    print("  POST /sim/create      New population of random brains")
    print("  POST /sim/step        Advance frames")
    print("  POST /sim/generation  Run until every dino is down, then evolve")
    print("  POST /sim/auto        Toggle continuous training")
    print("  GET  /sim/best        Champion network weights")
    print("\n  Press Ctrl+C to stop.\n")

    import uvicorn
    from dinoevo.server import app

    uvicorn.run(app, host=args.host, port=args.port, log_level="warning")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\n  Training stopped.\n")
        sys.exit(0)
