# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# network.py
# -----------------------------------------------------------------------------
# Purpose:
#   Stage (service layer) and Router wiring. The router decides which
#   station of a stage receives a customer and reports exits and drops.
#
# Design notes:
#   - Stages sort their stations by ascending weight once, at construction,
#     and cache the total weight used by the draw.
#   - The router owns the stage list, the random source and the sink so
#     that stations only need a reference to it to move customers on.
#
# Usage:
#   router = Router(stages, random_source, sink)
#   router.route(customer, 0, now)
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging
from typing import Iterable, List
from .entities import Customer
from .queues import ConfigurationError, Station
from .policies import RandomSource, choose_station

logger = logging.getLogger(__name__)

class Stage:
    """Ordered set of stations forming one routing step."""
    def __init__(self, stations: Iterable[Station]):
        stations = list(stations)
        if not stations:
            raise ConfigurationError("a stage needs at least one station")
        # stable: equal weights keep their configured order
        self.stations: List[Station] = sorted(stations, key=lambda s: s.weight)
        self.total_weight: int = sum(s.weight for s in self.stations)

    def __iter__(self):
        return iter(self.stations)

    def __len__(self) -> int:
        return len(self.stations)

    def __repr__(self) -> str:
        return f"Stage({[s.sid for s in self.stations]}, total_weight={self.total_weight})"

class Router:
    def __init__(self, stages: List[Stage], random_source: RandomSource, sink):
        self.stages = stages
        self.random_source = random_source
        self.sink = sink

    @property
    def stage_count(self) -> int:
        return len(self.stages)

    def route(self, customer: Customer, stage_index: int, now: int) -> bool:
        """Place the customer in a station of the given stage by weighted draw.

        Returns False when no station was selected; the customer is then
        dropped from the simulation.
        """
        stage = self.stages[stage_index]
        r = self.random_source()
        station = choose_station(stage.stations, stage.total_weight, r)
        if station is None:
            logger.warning("customer %d dropped at stage %d (draw %r)", customer.cid, stage_index, r)
            self.sink.on_drop(customer.cid, now)
            return False
        logger.debug("customer %d -> %s (stage %d)", customer.cid, station.sid, stage_index)
        station.route_in(customer)
        return True

    def exit(self, customer: Customer, now: int):
        customer.exit(self.sink, now)
