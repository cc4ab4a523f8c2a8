# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# metrics.py
# -----------------------------------------------------------------------------
# Purpose:
#   Reporting sinks that receive customer events and per-tick occupancy
#   snapshots: live counts (Metrics), the console renderer (ConsoleSink),
#   and a fan-out helper (MultiSink).
#
# Design notes:
#   - A sink implements on_enter / on_exit / on_drop (cid, time) and
#     on_snapshot(time, rows), rows being one list of StationSnapshot per
#     stage.
#   - Summaries return JSON-serializable dicts for easy tabulation.
#
# Usage:
#   M = Metrics(); bank = Bank(cfg, sink=MultiSink(M, ConsoleSink()))
#   M.summary()
# -----------------------------------------------------------------------------

from __future__ import annotations
import sys
from typing import Dict, List, TextIO
from .queues import StationSnapshot

Rows = List[List[StationSnapshot]]

class Metrics:
    """Live counts plus the occupancy history of every tick."""
    def __init__(self):
        self.entered = 0
        self.exited = 0
        self.dropped = 0
        self.history: List[Dict] = []     # one entry per snapshot
        self.last_rows: Rows = []

    @property
    def in_system(self) -> int:
        return self.entered - self.exited - self.dropped

    def on_enter(self, cid: int, t: int):
        self.entered += 1

    def on_exit(self, cid: int, t: int):
        self.exited += 1

    def on_drop(self, cid: int, t: int):
        self.dropped += 1

    def on_snapshot(self, t: int, rows: Rows):
        self.last_rows = rows
        self.history.append({
            "time": t,
            "stations": {
                snap.sid: {
                    "queue": snap.queue_length,
                    "idle": snap.idle_server_count,
                    "busy": snap.busy_server_count,
                }
                for row in rows for snap in row
            },
        })

    def queue_series(self, sid: str) -> List[int]:
        return [h["stations"][sid]["queue"] for h in self.history]

    def busy_series(self, sid: str) -> List[int]:
        return [h["stations"][sid]["busy"] for h in self.history]

    def summary(self) -> Dict:
        return {
            "ticks": len(self.history),
            "entered": self.entered,
            "exited": self.exited,
            "dropped": self.dropped,
            "in_system": self.in_system,
            "final_occupancy": {
                snap.sid: {"queue": snap.queue_length, "idle": snap.idle_server_count}
                for row in self.last_rows for snap in row
            },
        }

class ConsoleSink:
    """Text rendering of events and snapshots.

    Stations render as ``{A [_1][_0]} ``: queue length then idle servers,
    each padded to two characters with underscores. One line per stage.
    """
    def __init__(self, stream: TextIO = None):
        self.stream = stream if stream is not None else sys.stdout

    def _write(self, text: str):
        self.stream.write(text)

    def on_enter(self, cid: int, t: int):
        self._write(f"+ Customer [{cid}] entered at: {t}\n\n")

    def on_exit(self, cid: int, t: int):
        self._write(f"- Customer [{cid}] exited at: {t}\n\n")

    def on_drop(self, cid: int, t: int):
        self._write("\n")

    @staticmethod
    def format_station(snap: StationSnapshot) -> str:
        return f"{{{snap.sid} [{snap.queue_length:_>2}][{snap.idle_server_count:_>2}]}} "

    def on_snapshot(self, t: int, rows: Rows):
        for row in rows:
            self._write("".join(self.format_station(snap) for snap in row) + "\n")
        self._write("\n")

class MultiSink:
    """Forward every report to several sinks, in order."""
    def __init__(self, *sinks):
        self.sinks = list(sinks)

    def on_enter(self, cid: int, t: int):
        for s in self.sinks:
            s.on_enter(cid, t)

    def on_exit(self, cid: int, t: int):
        for s in self.sinks:
            s.on_exit(cid, t)

    def on_drop(self, cid: int, t: int):
        for s in self.sinks:
            s.on_drop(cid, t)

    def on_snapshot(self, t: int, rows: Rows):
        for s in self.sinks:
            s.on_snapshot(t, rows)
