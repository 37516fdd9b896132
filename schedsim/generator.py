from __future__ import annotations

import random
from typing import List, Optional

from .models import Process

ARRIVAL_RANGE = (0, 10)
BURST_RANGE = (1, 10)
PRIORITY_RANGE = (1, 5)


def generate_processes(
    count: int,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> List[Process]:
    """
    Generate `count` random processes with sequential pids starting at 1.

    Arrival, burst and priority are drawn uniformly from ARRIVAL_RANGE,
    BURST_RANGE and PRIORITY_RANGE (inclusive). Pass a seed or an existing
    Random instance for a reproducible set.
    """
    if count < 0:
        raise ValueError(f"Process count must be >= 0, got {count}")

    rng = rng or random.Random(seed)

    return [
        Process(
            pid=i + 1,
            arrival_time=rng.randint(*ARRIVAL_RANGE),
            burst_time=rng.randint(*BURST_RANGE),
            priority=rng.randint(*PRIORITY_RANGE),
        )
        for i in range(count)
    ]
