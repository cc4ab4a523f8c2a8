# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# simulation.py
# -----------------------------------------------------------------------------
# Purpose:
#   The Bank: owns the stages and the tick counter and drives the per-tick
#   loop (admission, completions, queue fills, snapshot). Also exposes
#   run_simulation(cfg) for a single replication built from config.
#
# Design notes:
#   - Stations are processed in a fixed order every tick (stage by stage,
#     lightest station first); routing results depend on that order.
#   - Stages can only be added before the first tick.
#
# Usage:
#   from banksim.simulation import Bank, run_simulation
#   results = run_simulation(cfg)
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging
import random
from typing import Dict, Iterable, List, Optional, Set
from .arrivals import admit_arrival
from .entities import CustomerRegistry
from .metrics import Metrics, MultiSink, Rows
from .network import Router, Stage
from .policies import RandomSource
from .queues import ConfigurationError, Station
from .stations import make_stages

logger = logging.getLogger(__name__)

class Bank:
    """Multi-stage bank driven tick by tick.

    Parameters
    ----------
    random_source : callable
        Zero-argument callable returning a float in [0, 1).
    sink : object
        Reporting sink (see banksim.metrics).
    """
    def __init__(self, random_source: RandomSource, sink):
        self.stages: List[Stage] = []
        self.station_ids: Set[str] = set()
        self.current_time: int = 0
        self.sink = sink
        self.registry = CustomerRegistry(sink)
        self.router = Router(self.stages, random_source, sink)

    def _check_new_stations(self, stations: Iterable[Station]):
        if self.current_time > 0:
            raise ConfigurationError("stages cannot be added once the bank is running")
        sids = [station.sid for station in stations]
        clashes = sorted({sid for sid in sids if sid in self.station_ids or sids.count(sid) > 1})
        if clashes:
            raise ConfigurationError(f"station ids {clashes} are already in use")

    def add_stage(self, stations: Iterable[Station]) -> Stage:
        stage = Stage(stations)
        self._check_new_stations(stage.stations)
        self.stages.append(stage)
        self.station_ids.update(s.sid for s in stage)
        return stage

    def configure(self, cfg: Optional[Dict] = None):
        """Build the topology from `cfg` (the reference bank when empty)."""
        stages = make_stages(cfg or {})
        self._check_new_stations([s for stage in stages for s in stage])
        self.stages.extend(stages)
        self.station_ids.update(s.sid for stage in stages for s in stage)

    def run(self, tick_bound: int):
        """Run ticks current_time+1 .. tick_bound-1."""
        if isinstance(tick_bound, bool) or not isinstance(tick_bound, int) or tick_bound < 1:
            raise ConfigurationError(f"tick_bound must be an integer >= 1, got {tick_bound!r}")
        if not self.stages:
            raise ConfigurationError("the bank needs at least one stage")
        logger.info("bank opening: %d stages, running until tick %d", len(self.stages), tick_bound)
        for now in range(self.current_time + 1, tick_bound):
            self.current_time = now
            self.tick(now)
        logger.info("bank closed at tick %d after %d customers", self.current_time, self.registry.next_id)

    def tick(self, now: int):
        admit_arrival(self.registry, self.router, now)

        stage_count = len(self.stages)
        for index, stage in enumerate(self.stages):
            for station in stage:
                station.process_completions(self.router, now, index + 1, stage_count)
                station.fill_from_queue(now)

        self.sink.on_snapshot(now, self.snapshot())

    def snapshot(self) -> Rows:
        return [[station.snapshot() for station in stage] for stage in self.stages]

def make_random_source(sim_cfg: Dict) -> RandomSource:
    """Seeded uniform source, or a constant one when `fixed_draw` is set."""
    if sim_cfg.get("fixed_draw") is not None:
        value = float(sim_cfg["fixed_draw"])
        return lambda: value
    return random.Random(sim_cfg.get("seed", 0)).random

def run_simulation(cfg: Dict, sink=None, random_source: Optional[RandomSource] = None) -> Dict:
    """Simulate one replication described by `cfg` and return its live counts."""
    sim_cfg = cfg.get("sim", {})
    if random_source is None:
        random_source = make_random_source(sim_cfg)

    M = Metrics()
    bank = Bank(random_source, MultiSink(M, sink) if sink is not None else M)
    bank.configure(cfg)
    bank.run(sim_cfg.get("tick_bound", 100))

    results = M.summary()
    results["history"] = M.history
    return results
