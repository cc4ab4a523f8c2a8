# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# stations.py
# -----------------------------------------------------------------------------
# Purpose:
#   Build the bank topology (stations grouped into stages) from config.
#
# Design notes:
#   - Config carries a `stations` mapping (id -> weight, service_duration,
#     server_count) and a `stages` list of station-id lists.
#   - Without a topology in config the reference bank is built: one
#     station A in the first stage, stations B and C in the second.
#
# Usage:
#   from banksim.stations import make_stages
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Dict, List
from .queues import ConfigurationError, Station
from .network import Stage

DEFAULT_STATIONS = {
    "A": {"weight": 4, "service_duration": 3, "server_count": 2},
    "B": {"weight": 4, "service_duration": 10, "server_count": 2},
    "C": {"weight": 6, "service_duration": 15, "server_count": 3},
}
DEFAULT_STAGES = [["A"], ["B", "C"]]

def make_stations(station_cfg: Dict[str, dict]) -> Dict[str, Station]:
    """
    Create all stations from the `stations` config mapping.

    Parameters
    ----------
    station_cfg : dict
        Mapping station id -> {'weight', 'service_duration', 'server_count'}.

    Returns
    -------
    dict[str, Station]
        Mapping station id -> Station instance.
    """
    S = {}
    for sid, params in station_cfg.items():
        sid = str(sid)
        if not isinstance(params, dict):
            raise ConfigurationError(f"station {sid!r} must be a mapping, got {params!r}")
        missing = {"weight", "service_duration", "server_count"} - set(params)
        if missing:
            raise ConfigurationError(f"station {sid!r} is missing {sorted(missing)}")
        S[sid] = Station(sid, params["weight"], params["service_duration"], params["server_count"])
    return S

def make_stages(cfg: dict) -> List[Stage]:
    """Assemble the ordered stage list described by `cfg`.

    Every `stages` entry must be a list of station ids, and every defined
    station must be placed in exactly one stage.
    """
    station_cfg = cfg.get("stations")
    stage_cfg = cfg.get("stages")
    if station_cfg is None:
        station_cfg = DEFAULT_STATIONS
    if stage_cfg is None:
        stage_cfg = DEFAULT_STAGES
    if not isinstance(station_cfg, dict):
        raise ConfigurationError(f"stations must be a mapping, got {station_cfg!r}")
    if not isinstance(stage_cfg, list):
        raise ConfigurationError(f"stages must be a list of station-id lists, got {stage_cfg!r}")
    S = make_stations(station_cfg)

    used = set()
    stages = []
    for ids in stage_cfg:
        if not isinstance(ids, list):
            raise ConfigurationError(f"stage entry must be a list of station ids, got {ids!r}")
        members = []
        for sid in ids:
            sid = str(sid)
            if sid not in S:
                raise ConfigurationError(f"stage references unknown station {sid!r}")
            if sid in used:
                raise ConfigurationError(f"station {sid!r} is used more than once")
            used.add(sid)
            members.append(S[sid])
        stages.append(Stage(members))
    if not stages:
        raise ConfigurationError("the bank needs at least one stage")
    unused = sorted(set(S) - used)
    if unused:
        raise ConfigurationError(f"stations {unused} are not placed in any stage")
    return stages
