# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# queues.py
# -----------------------------------------------------------------------------
# Purpose:
#   Service primitives: a single-occupancy Server (bank employee) and a
#   Station (bank service) with a FIFO queue and a fixed pool of servers.
#
# Design notes:
#   - Service times are deterministic: a server completes once at least
#     `service_duration` ticks have elapsed since it started, checked only
#     when the owning station polls it.
#   - Routing to the next stage is delegated to the router (banksim.network).
#   - A station forwards at most one customer to the next stage per tick;
#     servers not polled that tick stay busy until the next one.
#
# Usage:
#   from banksim.queues import Server, Station, ConfigurationError
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging
from collections import deque
from typing import Deque, List, NamedTuple, Optional
from .entities import Customer

logger = logging.getLogger(__name__)

class ConfigurationError(ValueError):
    """Raised when the bank topology or run parameters are invalid."""

def _positive_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
    return value

class StationSnapshot(NamedTuple):
    """Read-only occupancy report for one station at one tick."""
    sid: str
    queue_length: int
    idle_server_count: int
    server_count: int

    @property
    def busy_server_count(self) -> int:
        return self.server_count - self.idle_server_count

class Server:
    """Single service slot. Holds at most one customer at a time."""
    __slots__ = ("current_customer", "start_time")

    def __init__(self):
        self.current_customer: Optional[Customer] = None
        self.start_time: Optional[int] = None

    def assign(self, customer: Customer, current_time: int):
        # Caller must check is_busy() first; a busy server is overwritten.
        if self.current_customer is not None:
            logger.warning("server overwritten: customer %d replaced by %d at %d",
                           self.current_customer.cid, customer.cid, current_time)
        self.current_customer = customer
        self.start_time = current_time

    def is_busy(self) -> bool:
        return self.current_customer is not None

    def try_complete(self, service_duration: int, current_time: int) -> Optional[Customer]:
        """Release the customer if its service has lasted long enough.

        Returns the released customer, or None when the server is idle or
        still serving.
        """
        if not self.is_busy() or current_time - self.start_time < service_duration:
            return None
        customer = self.current_customer
        self.current_customer = None
        self.start_time = None
        return customer

class Station:
    """A named service with a routing weight, a FIFO queue and c servers.

    Parameters
    ----------
    sid : str
        Station id, used in snapshots and logs.
    weight : int
        Routing weight within the owning stage (positive).
    service_duration : int
        Ticks a server needs to finish one customer (positive).
    server_count : int
        Size of the fixed server pool (positive).
    """
    def __init__(self, sid: str, weight: int, service_duration: int, server_count: int):
        self.sid = sid
        self.weight = _positive_int(f"station {sid!r} weight", weight)
        self.service_duration = _positive_int(f"station {sid!r} service_duration", service_duration)
        _positive_int(f"station {sid!r} server_count", server_count)
        self.servers: List[Server] = [Server() for _ in range(server_count)]
        self.queue: Deque[Customer] = deque()

    def __repr__(self) -> str:
        return (f"Station({self.sid!r}, weight={self.weight}, "
                f"service_duration={self.service_duration}, servers={len(self.servers)})")

    def route_in(self, customer: Customer):
        self.queue.append(customer)

    def fill_from_queue(self, current_time: int):
        for server in self.servers:
            if not server.is_busy() and self.queue:
                server.assign(self.queue.popleft(), current_time)

    def process_completions(self, router, current_time: int, next_stage_index: int, stage_count: int):
        """Check servers in pool order and move finished customers on.

        A customer finishing here is routed into stage `next_stage_index`
        when one exists, which ends the scan for this tick. At the last
        stage customers exit and the scan continues.
        """
        for server in self.servers:
            customer = server.try_complete(self.service_duration, current_time)
            if customer is None:
                continue
            if next_stage_index < stage_count:
                logger.debug("customer %d done at %s, forwarding to stage %d",
                             customer.cid, self.sid, next_stage_index)
                router.route(customer, next_stage_index, current_time)
                break
            router.exit(customer, current_time)

    def idle_server_count(self) -> int:
        return sum(1 for server in self.servers if not server.is_busy())

    def snapshot(self) -> StationSnapshot:
        return StationSnapshot(self.sid, len(self.queue), self.idle_server_count(), len(self.servers))
