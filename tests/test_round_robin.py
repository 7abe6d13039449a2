from collections import Counter

import pytest

from moviegrab.round_robin import RoundRobin

URLS = ["https://one.example.com", "https://two.example.com", "https://three.example.com"]


def test_starts_with_second_url():
    rr = RoundRobin(URLS)
    assert rr.next_url() == URLS[1]


def test_cycles_in_order():
    rr = RoundRobin(URLS)
    got = [rr.next_url() for _ in range(6)]
    expected_cycle = URLS[1:] + URLS[:1]
    assert got == expected_cycle * 2


def test_each_url_used_equally():
    rr = RoundRobin(URLS)
    counts = Counter(rr.next_url() for _ in range(len(URLS) * 4))
    assert set(counts) == set(URLS)
    assert set(counts.values()) == {4}


def test_single_url_repeats():
    rr = RoundRobin(URLS[:1])
    assert [rr.next_url() for _ in range(3)] == URLS[:1] * 3


def test_empty_list_rejected():
    with pytest.raises(ValueError):
        RoundRobin([])