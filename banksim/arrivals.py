# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# arrivals.py
# -----------------------------------------------------------------------------
# Purpose:
#   Exogenous arrivals: at most one new customer per tick, admitted when
#   the two-draw test passes and routed into the first stage.
#
# Usage:
#   admit_arrival(registry, router, now)
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Optional
from .entities import Customer, CustomerRegistry
from .network import Router
from .policies import should_admit

def admit_arrival(registry: CustomerRegistry, router: Router, now: int) -> Optional[Customer]:
    """Run the admission test for tick `now`.

    Returns the admitted customer (even if the stage-0 draw dropped it),
    or None when nobody arrived.
    """
    if not should_admit(router.random_source):
        return None
    customer = registry.create(now)
    router.route(customer, 0, now)
    return customer
