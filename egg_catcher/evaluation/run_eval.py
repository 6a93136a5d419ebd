"""
Seed-Bank Evaluation
====================

Plays an agent through one full session per seed and reports how it went:
score spread, how sessions ended, what got caught, and how often the agent
lived through crazy mode.

Usage:
    python -m egg_catcher.evaluation.run_eval --agent contestants/baseline_tracker
"""

from __future__ import annotations

import argparse
import importlib.util
import json
import sys
import time
from collections import Counter
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional
import numpy as np

from egg_catcher.catch_core.env_gym import EggCatcherEnv
from egg_catcher.catch_core.item_catalog import ItemKind
from egg_catcher.catch_core.rules import REASON_DEATH, REASON_TIME

Policy = Callable[[Dict[str, np.ndarray]], int]

DEFAULT_SEED_BANK = Path(__file__).with_name("seed_bank.json")


@dataclass
class Episode:
    """How one seeded session played out."""
    seed: int
    score: int
    reason: str
    elapsed_seconds: float
    steps: int
    catches: Dict[str, int]
    misses: int
    reached_crazy: bool
    wall_time: float

    @property
    def survived_crazy(self) -> bool:
        """Entered crazy mode and still ran out the clock."""
        return self.reached_crazy and self.reason == REASON_TIME


@dataclass
class Report:
    """Aggregate over every episode of a run."""
    episodes: List[Episode]
    scores: Dict[str, float]
    endings: Dict[str, int]
    catch_totals: Dict[str, int]
    mean_misses: float
    crazy_reached: int
    crazy_survived: int

    @classmethod
    def from_episodes(cls, episodes: Iterable[Episode]) -> "Report":
        episodes = list(episodes)
        if not episodes:
            raise ValueError("cannot build a report from zero episodes")

        scores = np.array([e.score for e in episodes], dtype=np.float64)
        endings = Counter(e.reason for e in episodes)
        caught: Counter = Counter()
        for episode in episodes:
            caught.update(episode.catches)

        return cls(
            episodes=episodes,
            scores={
                "mean": float(scores.mean()),
                "std": float(scores.std()),
                "min": float(scores.min()),
                "median": float(np.median(scores)),
                "max": float(scores.max()),
            },
            endings={reason: endings[reason] for reason in (REASON_DEATH, REASON_TIME)},
            catch_totals={kind.config_name: caught[kind.config_name] for kind in ItemKind},
            mean_misses=float(np.mean([e.misses for e in episodes])),
            crazy_reached=sum(e.reached_crazy for e in episodes),
            crazy_survived=sum(e.survived_crazy for e in episodes),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def format(self) -> str:
        """Human-readable table plus totals."""
        lines = [f"{'seed':>10} {'score':>7} {'ending':>7} {'time':>7} {'misses':>7}  catches"]
        for e in self.episodes:
            tally = " ".join(f"{name}={count}" for name, count in e.catches.items() if count)
            lines.append(
                f"{e.seed:>10} {e.score:>7} {e.reason:>7} "
                f"{e.elapsed_seconds:>6.1f}s {e.misses:>7}  {tally or '-'}"
            )

        s = self.scores
        lines += [
            "",
            f"score    mean {s['mean']:.1f}  std {s['std']:.1f}  "
            f"min {s['min']:.0f}  median {s['median']:.1f}  max {s['max']:.0f}",
            f"endings  {self.endings[REASON_TIME]} time, {self.endings[REASON_DEATH]} death",
            "caught   " + ", ".join(f"{n} {name}" for name, n in self.catch_totals.items()),
            f"misses   {self.mean_misses:.1f} per episode",
            f"crazy    survived {self.crazy_survived} of {self.crazy_reached} reached",
        ]
        return "\n".join(lines)


def read_seed_bank(path: Optional[str] = None) -> List[int]:
    """Seeds from a JSON file shaped like {"seeds": [...]}."""
    with open(path or DEFAULT_SEED_BANK, "r", encoding="utf-8") as f:
        return [int(seed) for seed in json.load(f)["seeds"]]


def load_policy(agent_path: str) -> Policy:
    """
    Build a policy from an agent directory or agent.py file.

    The module may define `create_agent()` or a `CatcherAgent` class whose
    instances have `act(obs)`, or a plain module-level `act(obs)`.

    Raises:
        FileNotFoundError: No agent file at the path.
        AttributeError: The module exposes none of the above.
    """
    source = Path(agent_path)
    if source.is_dir():
        source = source / "agent.py"
    if not source.is_file():
        raise FileNotFoundError(f"Agent file not found: {source}")

    module_name = f"egg_catcher_agent_{source.parent.name}"
    module_spec = importlib.util.spec_from_file_location(module_name, source)
    if module_spec is None or module_spec.loader is None:
        raise ImportError(f"Cannot import {source}")
    module = importlib.util.module_from_spec(module_spec)
    sys.modules[module_name] = module
    module_spec.loader.exec_module(module)

    factory = getattr(module, "create_agent", None) or getattr(module, "CatcherAgent", None)
    if factory is not None:
        agent = factory()
        if not callable(getattr(agent, "act", None)):
            raise AttributeError(f"{source}: agent has no act(obs) method")
        return agent.act

    act = getattr(module, "act", None)
    if callable(act):
        return act
    raise AttributeError(f"{source}: define create_agent, CatcherAgent or act")


def play_episode(
    policy: Policy,
    seed: int,
    frame_skip: int = 4,
    config_path: Optional[str] = None
) -> Episode:
    """Run one headless session to its end."""
    env = EggCatcherEnv(config_path=config_path, frame_skip=frame_skip)
    started = time.perf_counter()
    steps = 0
    reached_crazy = False
    try:
        obs, info = env.reset(seed=seed)
        done = False
        while not done:
            obs, _, terminated, truncated, info = env.step(policy(obs))
            steps += 1
            reached_crazy = reached_crazy or bool(info["crazy_mode"])
            done = terminated or truncated
    finally:
        env.close()

    return Episode(
        seed=seed,
        score=int(info["score"]),
        reason=info["terminated_reason"],
        elapsed_seconds=float(info["elapsed_seconds"]),
        steps=steps,
        catches=dict(info["catches"]),
        misses=int(info["misses"]),
        reached_crazy=reached_crazy,
        wall_time=time.perf_counter() - started,
    )


def evaluate(
    policy: Policy,
    seeds: Optional[List[int]] = None,
    frame_skip: int = 4,
    verbose: bool = False
) -> Report:
    """Play every seed (the bundled bank if None) and aggregate."""
    if seeds is None:
        seeds = read_seed_bank()

    episodes = []
    for seed in seeds:
        episode = play_episode(policy, seed, frame_skip=frame_skip)
        if verbose:
            print(f"  seed {seed}: {episode.score} ({episode.reason}) "
                  f"in {episode.wall_time:.2f}s")
        episodes.append(episode)

    return Report.from_episodes(episodes)


def write_report(report: Report, agent_name: str, path: str) -> None:
    data = {"agent": agent_name, "timestamp": time.strftime("%Y-%m-%d %H:%M:%S")}
    data.update(report.to_dict())
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Evaluate an Egg Catcher agent on the seed bank")
    parser.add_argument("--agent", required=True, help="Agent directory or agent.py file")
    parser.add_argument("--seeds", default=None, help="Seed bank JSON (bundled bank if omitted)")
    parser.add_argument("--output", default=None, help="Write the report as JSON here")
    parser.add_argument("--frame-skip", type=int, default=4, help="Frames per agent decision")
    parser.add_argument("--quiet", action="store_true", help="Only print the final report")
    args = parser.parse_args(argv)

    try:
        policy = load_policy(args.agent)
    except (FileNotFoundError, ImportError, AttributeError) as e:
        print(f"Error loading agent: {e}")
        return 1

    report = evaluate(
        policy,
        seeds=read_seed_bank(args.seeds),
        frame_skip=args.frame_skip,
        verbose=not args.quiet
    )
    print(report.format())

    if args.output:
        write_report(report, Path(args.agent).name, args.output)
        print(f"Report written to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
