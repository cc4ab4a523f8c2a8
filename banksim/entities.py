# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# entities.py
# -----------------------------------------------------------------------------
# Purpose:
#   Entity definitions for the bank simulator: Customer and the registry that
#   hands out sequential customer ids.
#
# Design notes:
#   - Customers are immutable tokens; where they sit (queue, server, exited)
#     is tracked by the structures holding them, never by the customer.
#   - The id counter lives on a registry owned by one Bank, so two
#     simulations in the same process never share ids.
#
# Usage:
#   from banksim.entities import Customer, CustomerRegistry
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Customer:
    cid: int                         # sequential id, unique per registry
    arrival_time: int                # tick at which the customer entered

    def exit(self, sink, current_time: int):
        """Report that this customer left the bank. No state changes."""
        logger.debug("customer %d exited at %d", self.cid, current_time)
        sink.on_exit(self.cid, current_time)

class CustomerRegistry:
    """Creates customers with monotonically increasing ids.

    Every creation is reported to the sink as an "entered" event.
    """
    def __init__(self, sink):
        self.sink = sink
        self.next_id: int = 0

    def create(self, arrival_time: int) -> Customer:
        customer = Customer(self.next_id, arrival_time)
        self.next_id += 1
        logger.debug("customer %d entered at %d", customer.cid, arrival_time)
        self.sink.on_enter(customer.cid, arrival_time)
        return customer
