from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

from .errors import OrbitalCloudError
from .sampler import BOHR_RADIUS, GRID_LIMIT, GridConfig, OrbitalSampler, PointCloud
from .wavefunction import expected_radius


def write_cloud(path: Path, n: int, l: int, m: int, scale: float, cloud: PointCloud) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "n": n,
        "l": l,
        "m": m,
        "scale": scale,
        "points": cloud.points.tolist(),
        "weights": cloud.weights.tolist(),
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f)


def run_self_test(count: int = 10000, seed: Optional[int] = 0) -> None:
    if count < 1:
        raise ValueError(f"self-test needs at least one sample, got count={count}")
    grid = GridConfig(extent=80.0)
    sampler = OrbitalSampler(grid=grid, rng=np.random.default_rng(seed))
    sampler.configure(1, 0, 0, scale=1.0, resolution=4001)
    points = sampler.sample_points(count)
    mean_r = float(np.linalg.norm(points, axis=1).mean())
    expected = expected_radius(1, 0, grid.bohr_radius)
    if abs(mean_r - expected) > 0.05 * expected:
        raise RuntimeError(f"self-test failed: mean radius {mean_r:.4f}, expected {expected:.4f}")
    print(f"SELFTEST_OK samples={count} mean_r={mean_r:.4f} expected={expected:.4f}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="orbital-cloud", description="Sample hydrogen-like orbital point clouds.")
    parser.add_argument("--n", type=int, default=2)
    parser.add_argument("--l", type=int, default=1)
    parser.add_argument("--m", type=int, default=0)
    parser.add_argument("--scale", type=float, default=5.0, help=f"a0 = scale * {BOHR_RADIUS}")
    parser.add_argument("--resolution", type=int, default=2000)
    parser.add_argument("--extent", type=float, default=GRID_LIMIT)
    parser.add_argument("--count", type=int, default=10000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--output", type=Path, default=None, help="write the cloud as JSON")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--self-test", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.self_test:
        run_self_test(count=args.count, seed=args.seed)
        return 0

    try:
        grid = GridConfig(extent=args.extent)
        sampler = OrbitalSampler(grid=grid, rng=np.random.default_rng(args.seed))
        sampler.configure(args.n, args.l, args.m, args.scale, args.resolution)
        cloud = sampler.sample_cloud(args.count)
    except (OrbitalCloudError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.output is not None:
        try:
            write_cloud(args.output, args.n, args.l, args.m, args.scale, cloud)
        except OSError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
        print(f"Saved {len(cloud)} samples to: {args.output}")
        return 0

    radii = np.linalg.norm(cloud.points, axis=1)
    a0 = args.scale * grid.bohr_radius
    print(f"Orbital n={args.n} l={args.l} m={args.m} samples={len(cloud)}")
    if len(cloud):
        print(f"mean r = {radii.mean():.4f} (analytic {expected_radius(args.n, args.l, a0):.4f})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
