import threading
import time

import pytest

from nogo403.dispatcher import dispatch
from nogo403.exceptions import TransportError
from nogo403.models import VariantDescriptor

from tests.conftest import FakeRequester

UA = (("User-Agent", "nogo403/0.2"),)


def _variants(count):
    return [VariantDescriptor("GET", f"http://example.com/admin/{i}", UA, f"v{i}")
            for i in range(count)]


def test_every_variant_yields_one_outcome(fake_requester):
    variants = _variants(25)
    results = dispatch(variants, fake_requester, workers=4)

    assert len(results) == 25
    assert sorted(o.label for o in results) == sorted(v.label for v in variants)
    assert sorted(c[1] for c in fake_requester.calls) == sorted(v.uri for v in variants)


def test_outcomes_carry_status_and_length(fake_requester):
    variant = _variants(1)[0]
    outcome, = dispatch([variant], fake_requester)
    assert outcome.status_code == 403
    assert outcome.content_length == len(variant.uri)
    assert not outcome.failed


def test_empty_batch(fake_requester):
    results = dispatch([], fake_requester)
    assert len(results) == 0
    assert fake_requester.calls == []


def test_transport_failure_becomes_error_outcome():
    variants = _variants(3)
    requester = FakeRequester(fail_on={variants[1].uri})

    results = dispatch(variants, requester)

    assert len(results) == 3
    failed, = results.errors()
    assert failed.label == "v1"
    assert failed.status_code == 0
    assert "refused" in failed.error


def test_fail_fast_raises():
    variants = _variants(3)
    requester = FakeRequester(fail_on={variants[0].uri})
    with pytest.raises(TransportError):
        dispatch(variants, requester, workers=1, fail_fast=True)


class SlowRequester(FakeRequester):
    """Tracks the peak number of requests in flight"""

    def __init__(self):
        super().__init__()
        self.active = 0
        self.peak = 0
        self._gauge = threading.Lock()

    def execute(self, method, uri, headers):
        with self._gauge:
            self.active += 1
            self.peak = max(self.peak, self.active)
        time.sleep(0.02)
        with self._gauge:
            self.active -= 1
        return super().execute(method, uri, headers)


def test_worker_count_bounds_concurrency():
    requester = SlowRequester()
    results = dispatch(_variants(12), requester, workers=3)
    assert len(results) == 12
    assert requester.peak <= 3


class BarrierRequester(FakeRequester):
    def __init__(self, parties):
        super().__init__()
        self.barrier = threading.Barrier(parties, timeout=5)

    def execute(self, method, uri, headers):
        self.barrier.wait()
        return super().execute(method, uri, headers)


def test_zero_workers_runs_every_variant_at_once():
    # every request blocks until all of them are in flight
    requester = BarrierRequester(6)
    results = dispatch(_variants(6), requester, workers=0)
    assert len(results) == 6
