"""Unit tests for Server and Station."""

from __future__ import annotations

import logging

import pytest

from banksim.entities import Customer
from banksim.queues import ConfigurationError, Server, Station


class TestServer:
    def test_new_server_is_idle(self):
        server = Server()
        assert not server.is_busy()
        assert server.try_complete(3, 100) is None

    def test_assign_makes_busy(self):
        server = Server()
        server.assign(Customer(0, 1), 1)
        assert server.is_busy()
        assert server.start_time == 1

    def test_never_completes_early(self):
        server = Server()
        customer = Customer(0, 1)
        server.assign(customer, 5)
        for t in (5, 6, 7):
            assert server.try_complete(3, t) is None
            assert server.is_busy()
        assert server.try_complete(3, 8) is customer
        assert not server.is_busy()
        assert server.start_time is None

    def test_completes_late_when_checked_late(self):
        server = Server()
        customer = Customer(0, 1)
        server.assign(customer, 1)
        assert server.try_complete(3, 20) is customer

    def test_assign_to_busy_server_overwrites(self, caplog):
        server = Server()
        server.assign(Customer(0, 1), 1)
        with caplog.at_level(logging.WARNING, logger="banksim"):
            server.assign(Customer(1, 2), 2)
        assert server.current_customer.cid == 1
        assert server.start_time == 2
        assert "overwritten" in caplog.text


class TestStationConstruction:
    def test_valid_station(self):
        station = Station("A", 4, 3, 2)
        assert len(station.servers) == 2
        assert station.snapshot() == ("A", 0, 2, 2)

    @pytest.mark.parametrize(
        "weight,duration,count",
        [(0, 3, 2), (-1, 3, 2), (4, 0, 2), (4, 3, 0), (4.5, 3, 2), (True, 3, 2), ("4", 3, 2)],
    )
    def test_invalid_parameters_rejected(self, weight, duration, count):
        with pytest.raises(ConfigurationError):
            Station("X", weight, duration, count)


class TestStationQueue:
    def test_fill_is_fifo_and_in_pool_order(self):
        station = Station("A", 1, 3, 2)
        for cid in range(3):
            station.route_in(Customer(cid, 1))
        station.fill_from_queue(1)
        assert [s.current_customer.cid for s in station.servers] == [0, 1]
        assert [c.cid for c in station.queue] == [2]
        snap = station.snapshot()
        assert snap.queue_length == 1
        assert snap.idle_server_count == 0
        assert snap.busy_server_count == 2

    def test_fill_skips_busy_servers(self):
        station = Station("A", 1, 3, 3)
        station.servers[0].assign(Customer(9, 0), 0)
        station.route_in(Customer(0, 1))
        station.fill_from_queue(1)
        assert station.servers[0].current_customer.cid == 9
        assert station.servers[1].current_customer.cid == 0
        assert not station.servers[2].is_busy()

    def test_fill_with_empty_queue_is_noop(self):
        station = Station("A", 1, 3, 2)
        station.fill_from_queue(1)
        assert station.idle_server_count() == 2


class TestProcessCompletions:
    def _busy_station(self, count=3, duration=2):
        station = Station("S", 1, duration, count)
        for cid in range(count):
            station.route_in(Customer(cid, 0))
        station.fill_from_queue(0)
        return station

    def test_forwards_only_one_customer_per_tick(self, router):
        station = self._busy_station()
        station.process_completions(router, 2, 1, 2)
        assert router.routed == [(0, 1, 2)]
        # servers after the forwarded one stay busy until the next tick
        assert [s.is_busy() for s in station.servers] == [False, True, True]

        station.process_completions(router, 3, 1, 2)
        assert router.routed[-1] == (1, 1, 3)
        assert [s.is_busy() for s in station.servers] == [False, False, True]

    def test_last_stage_exits_every_finished_customer(self, router):
        station = self._busy_station()
        station.process_completions(router, 2, 2, 2)
        assert router.exited == [(0, 2), (1, 2), (2, 2)]
        assert router.routed == []
        assert station.idle_server_count() == 3

    def test_nothing_finished_nothing_moves(self, router):
        station = self._busy_station()
        station.process_completions(router, 1, 1, 2)
        assert router.routed == [] and router.exited == []
        assert station.idle_server_count() == 0
