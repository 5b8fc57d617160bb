from __future__ import annotations
import argparse
import logging
from typing import List, Optional

from .config import LOG_LEVELS, SimulationConfig
from .dag import STRUCTURES
from .demo import run_demo

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Simulate and test chain, fork and collider SCMs")
    p.add_argument("--structure", default="all", choices=sorted(STRUCTURES) + ["all"])
    p.add_argument("--n", default=1000, type=int, help="Units per realization")
    p.add_argument("--seed", default=2025, type=int, help="Random seed")
    p.add_argument("--confidence", default=0.95, type=float)
    p.add_argument("--alpha", default=0.05, type=float)
    p.add_argument("--log-level", default="INFO", choices=LOG_LEVELS)
    return p.parse_args(argv)

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    cfg = SimulationConfig(
        n=args.n,
        seed=args.seed,
        confidence=args.confidence,
        alpha=args.alpha,
        log_level=args.log_level,
    )
    logging.basicConfig(level=cfg.log_level, format="%(asctime)s - %(levelname)s - %(message)s")
    structures = list(STRUCTURES) if args.structure == "all" else [args.structure]
    for name in structures:
        report = run_demo(name, cfg)
        print(report.render())
        print()
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
