# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# policies.py
# -----------------------------------------------------------------------------
# Purpose:
#   Stochastic decisions of the model: the weighted station draw and the
#   per-tick admission test.
#
# Design notes:
#   - Keep pure functions to ease testing (policy -> decision); the random
#     value is drawn by the caller or through the passed source.
#   - The walk keeps the stage's ascending-weight order: a draw landing
#     exactly on a boundary goes to the lighter station.
#
# Usage:
#   from banksim.policies import choose_station, should_admit
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Callable, Optional, Sequence

RandomSource = Callable[[], float]

def choose_station(stations: Sequence, total_weight: int, r: float) -> Optional[object]:
    """
    Return the first station whose cumulative weight share reaches `r`.

    Returns None when the accumulated share never reaches `r`, which can
    happen through floating-point accumulation or a draw of exactly 1.0.
    Callers treat that as a dropped customer.
    """
    acc = 0.0
    for station in stations:
        acc += station.weight / total_weight
        if r <= acc:
            return station
    return None

def should_admit(random_source: RandomSource) -> bool:
    # Two independent draws; admission rate is P(r1 < r2), not a fixed threshold.
    r1 = random_source()
    r2 = random_source()
    return r1 < r2
