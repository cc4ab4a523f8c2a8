"""
experiments/run_experiments.py

Experiment harness that loads the baseline config, applies scenario overrides,
runs a few seeded replications per scenario, and reports live counts
(entered / exited / dropped / still inside). Optionally streams the console
rendering of every tick and saves queue-occupancy plots.

Run with: python -m experiments.run_experiments --ticks 200 --plot
"""

from __future__ import annotations
import argparse, copy, os, sys
from typing import Dict, List, Optional
import yaml

from banksim import ConfigurationError, configure_from_env, enable_console_logging
from banksim.metrics import ConsoleSink
from banksim.simulation import run_simulation
from experiments.scenarios import SCENARIOS

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CONFIG = os.path.join(ROOT, "config", "baseline.yaml")

def load_cfg(path: Optional[str] = None) -> Dict:
    with open(path or DEFAULT_CONFIG, "r") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ConfigurationError(f"{path or DEFAULT_CONFIG}: top level must be a mapping")
    return cfg

def apply_overrides(cfg: Dict, overrides: Dict) -> Dict:
    """Apply scenario overrides (recursive merge) on top of the base config."""
    new = copy.deepcopy(cfg)

    def _merge(dst: Dict, src: Dict):
        for key, val in src.items():
            if isinstance(val, dict) and isinstance(dst.get(key), dict):
                _merge(dst[key], val)
            else:
                dst[key] = copy.deepcopy(val)

    _merge(new, overrides)
    return new

def run_scenario(cfg: Dict, replications: int, render: bool = False) -> List[Dict]:
    """Run `replications` seeded copies of one configured bank."""
    base_seed = cfg.get("sim", {}).get("seed", 0)
    results = []
    for rep in range(replications):
        rep_cfg = copy.deepcopy(cfg)
        # Advance the seed per replication so replications stay independent.
        rep_cfg.setdefault("sim", {})["seed"] = base_seed + rep
        res = run_simulation(rep_cfg, sink=ConsoleSink() if render else None)
        res["seed"] = rep_cfg["sim"]["seed"]
        results.append(res)
    return results

def plot_occupancy(history: List[Dict], scenario_name: str, out_dir: str) -> Optional[str]:
    """
    Persist a PNG with queue length and busy servers per station over time
    for one replication.
    """
    if not history:
        return None
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    ticks = [h["time"] for h in history]
    sids = list(history[0]["stations"])
    fig, (ax_q, ax_b) = plt.subplots(2, 1, figsize=(9, 6), sharex=True)
    for sid in sids:
        ax_q.step(ticks, [h["stations"][sid]["queue"] for h in history], where="post", label=sid)
        ax_b.step(ticks, [h["stations"][sid]["busy"] for h in history], where="post", label=sid)
    ax_q.set_ylabel("Queue length")
    ax_b.set_ylabel("Busy servers")
    ax_b.set_xlabel("Tick")
    ax_q.set_title(f"{scenario_name}: station occupancy")
    for ax in (ax_q, ax_b):
        ax.grid(True, linestyle="--", alpha=0.4)
        ax.legend()
    os.makedirs(out_dir, exist_ok=True)
    safe_name = scenario_name.lower().replace(" ", "_")
    out_path = os.path.join(out_dir, f"{safe_name}_occupancy.png")
    fig.tight_layout()
    fig.savefig(out_path, dpi=160)
    plt.close(fig)
    return out_path

def positive_int(text: str) -> int:
    """argparse type accepting integers >= 1."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}")
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value

def build_parser() -> argparse.ArgumentParser:
    names = [sc["name"] for sc in SCENARIOS]
    parser = argparse.ArgumentParser(description="Multi-stage bank simulation")
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="YAML config file")
    parser.add_argument("--ticks", type=int, default=None, help="Tick bound (overrides sim.tick_bound)")
    parser.add_argument("--seed", type=int, default=None, help="Base random seed (overrides sim.seed)")
    parser.add_argument("--scenario", choices=names, action="append", help="Scenario to run (repeatable, default: all)")
    parser.add_argument("--replications", type=positive_int, default=None, help="Seeded replications per scenario")
    parser.add_argument("--render", action="store_true", help="Print queue/server occupancy every tick")
    parser.add_argument("--plot", action="store_true", help="Save occupancy plots")
    parser.add_argument("--log-level", default=None, help="Enable console logging at this level")
    return parser

def main(argv: Optional[List[str]] = None) -> int:
    """Entry point: run the selected scenarios and report live counts."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.log_level:
        enable_console_logging(level=args.log_level.upper())
    else:
        configure_from_env()

    try:
        cfg = load_cfg(args.config)
    except (OSError, yaml.YAMLError, ConfigurationError) as exc:
        parser.error(f"cannot load config: {exc}")
    exp_cfg = cfg.get("experiments", {})
    replications = args.replications if args.replications is not None else max(1, int(exp_cfg.get("replications", 1)))
    out_dir = os.path.join(ROOT, exp_cfg.get("output_dir", os.path.join("experiments", "output")))

    selected = [sc for sc in SCENARIOS if not args.scenario or sc["name"] in args.scenario]
    for sc in selected:
        sc_cfg = apply_overrides(cfg, sc["overrides"])
        sim_cfg = sc_cfg.setdefault("sim", {})
        if args.ticks is not None:
            sim_cfg["tick_bound"] = args.ticks
        if args.seed is not None:
            sim_cfg["seed"] = args.seed
        try:
            results = run_scenario(sc_cfg, replications, render=args.render)
        except ConfigurationError as exc:
            parser.error(f"scenario {sc['name']}: {exc}")

        print(f"Scenario: {sc['name']} (replications={replications}, tick_bound={sim_cfg.get('tick_bound', 100)})")
        for res in results:
            print(f"  seed {res['seed']}: entered={res['entered']} exited={res['exited']} "
                  f"dropped={res['dropped']} in_system={res['in_system']}")
        final = results[-1]["final_occupancy"]
        print(f"  Final occupancy (last seed): { {k: (v['queue'], v['idle']) for k, v in final.items()} }")
        if args.plot:
            plot_path = plot_occupancy(results[0]["history"], sc["name"], out_dir)
            if plot_path:
                print(f"  Occupancy plot saved to: {plot_path}")
        print("-")
    return 0

if __name__ == "__main__":
    sys.exit(main())
