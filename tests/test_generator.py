import random

import pytest

from schedsim.generator import ARRIVAL_RANGE, BURST_RANGE, PRIORITY_RANGE, generate_processes


def test_ranges_and_pids():
    procs = generate_processes(50, seed=7)
    assert [p.pid for p in procs] == list(range(1, 51))
    for p in procs:
        assert ARRIVAL_RANGE[0] <= p.arrival_time <= ARRIVAL_RANGE[1]
        assert BURST_RANGE[0] <= p.burst_time <= BURST_RANGE[1]
        assert PRIORITY_RANGE[0] <= p.priority <= PRIORITY_RANGE[1]


def test_seed_is_reproducible():
    assert generate_processes(10, seed=3) == generate_processes(10, seed=3)
    assert generate_processes(10, rng=random.Random(3)) == generate_processes(10, seed=3)


def test_zero_count():
    assert generate_processes(0) == []


def test_negative_count():
    with pytest.raises(ValueError):
        generate_processes(-1)
