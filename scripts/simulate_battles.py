"""Simulate many battles of one encounter with random controllers.

Usage:
    uv run python scripts/simulate_battles.py --encounter slime_pair [--runs N] [--plot]
"""

from __future__ import annotations

import argparse
import logging
import time

import numpy as np

from battlecore.sim.content.registry import ContentRegistry
from battlecore.sim.core.status import PartyParameters
from battlecore.sim.runner import BatchRunner
from battlecore.sim.telemetry import BattleTelemetry


def run_simulation(
    project_path: str | None,
    encounter_name: str,
    party: list[str],
    level: int,
    n_runs: int,
    seed: int,
    tick: float,
) -> list[BattleTelemetry]:
    print("Loading project...")
    registry = ContentRegistry()
    project = registry.load_project(project_path)

    encounter = registry.get_encounter(encounter_name)
    party_ids = [registry.get_character_id(name) for name in party]
    party_params = PartyParameters.defaults_for(project, level=level)

    print(f"\nRunning {n_runs} battles: {', '.join(party)} (lv {level}) vs {encounter_name}...")
    runner = BatchRunner(project, party_ids, party_params, encounter, tick_seconds=tick)
    t0 = time.time()
    results = runner.run_batch(n_runs, base_seed=seed)
    elapsed = time.time() - t0

    durations = np.array([r.elapsed_seconds for r in results])
    hp_left = np.array([r.party_hp_end / max(r.party_hp_start, 1) * 100 for r in results])
    outcomes = {k: sum(1 for r in results if r.result == k) for k in ("victory", "defeat", "timeout")}

    print(f"  Time: {elapsed:.1f}s ({elapsed/n_runs*1000:.0f}ms/run)")
    print(f"  Victories: {outcomes['victory']}/{n_runs} ({outcomes['victory']/n_runs*100:.1f}%)")
    print(f"  Defeats: {outcomes['defeat']}  Timeouts: {outcomes['timeout']}")
    print(f"  Battle length: {np.mean(durations):.1f}s avg (median {np.median(durations):.1f}s)")
    print(f"  Party HP left: {np.mean(hp_left):.1f}% avg")
    drops = [item for r in results for item in r.item_drops]
    print(f"  Item drops: {len(drops)} total, {len(drops)/n_runs:.2f} per battle")
    return results


def generate_charts(results: list[BattleTelemetry], encounter_name: str) -> None:
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))
    fig.suptitle(f"{encounter_name}: {len(results)} battles", fontsize=14, fontweight="bold")
    colors = {"victory": "#2ecc71", "defeat": "#e74c3c", "timeout": "#95a5a6"}

    # --- Chart 1: Battle length by outcome ---
    ax = axes[0]
    durations = [r.elapsed_seconds for r in results]
    bins = np.linspace(0, max(durations) + 1, 30)
    for outcome, color in colors.items():
        values = [r.elapsed_seconds for r in results if r.result == outcome]
        if values:
            ax.hist(values, bins=bins, alpha=0.6, label=f"{outcome} ({len(values)})",
                    color=color, edgecolor="black", linewidth=0.3)
    ax.set_xlabel("Battle time (s)")
    ax.set_ylabel("Count")
    ax.set_title("Battle Length")
    ax.legend()

    # --- Chart 2: Damage dealt per side ---
    ax = axes[1]
    party = [r.damage_dealt_by_party for r in results]
    enemies = [r.damage_dealt_by_enemies for r in results]
    ax.boxplot([party, enemies], tick_labels=["Party", "Enemies"])
    ax.set_ylabel("HP damage dealt")
    ax.set_title("Damage Dealt")

    plt.tight_layout()
    out_path = f"{encounter_name}_simulation.png"
    plt.savefig(out_path, dpi=150, bbox_inches="tight")
    print(f"\nChart saved to {out_path}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--project", default=None, help="Project JSON (defaults to the demo project)")
    parser.add_argument("--encounter", default="slime_pair", help="Encounter name")
    parser.add_argument("--party", nargs="+", default=["Hero", "Cleric"], help="Character names")
    parser.add_argument("--level", type=int, default=1, help="Party level")
    parser.add_argument("--runs", type=int, default=200, help="Number of battles")
    parser.add_argument("--seed", type=int, default=42, help="Base seed")
    parser.add_argument("--tick", type=float, default=1 / 60, help="Seconds per tick")
    parser.add_argument("--plot", action="store_true", help="Save charts as PNG")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    results = run_simulation(
        args.project, args.encounter, args.party, args.level, args.runs, args.seed, args.tick,
    )
    if args.plot:
        generate_charts(results, args.encounter)
