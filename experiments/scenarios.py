"""
experiments/scenarios.py

Holds scenario definitions to run against the baseline bank.
Each scenario is a name plus config overrides merged over baseline.yaml.
"""

from __future__ import annotations

BASELINE = {
    "name": "baseline",
    "overrides": {},  # override config keys here per scenario
}

# Every draw is 0.0, so the admission test (0.0 < 0.0) never passes.
ZERO_ARRIVAL = {
    "name": "zero_arrival",
    "overrides": {
        "sim": {"fixed_draw": 0.0},
    },
}

EXTRA_TELLER = {
    "name": "extra_teller",
    "overrides": {
        "stations": {
            "C": {"server_count": 4},
        },
    },
}

LONG_DAY = {
    "name": "long_day",
    "overrides": {
        "sim": {
            "tick_bound": 480,
            "seed": 3,
        },
    },
}

SCENARIOS = [BASELINE, ZERO_ARRIVAL, EXTRA_TELLER, LONG_DAY]
