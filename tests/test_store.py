"""Tests for PasteStore and the access policy."""

from __future__ import annotations

import threading

import pytest

from pastebin.clock import MAX_INSTANT_MS, FixedClock
from pastebin.errors import (
    Expired,
    InvalidInput,
    InvalidTTL,
    InvalidViewLimit,
    NotFound,
    ViewLimitExceeded,
)
from pastebin.ids import HandleGenerator, HandleSpaceExhausted
from pastebin.store import AccessState, Entry, PasteStore, evaluate_access


class TestCreate:
    def test_returns_readable_handle(self, store: PasteStore):
        handle = store.create("hello")
        assert store.read(handle).content == "hello"

    def test_handles_are_unique(self, store: PasteStore):
        handles = {store.create("x") for _ in range(500)}
        assert len(handles) == 500

    @pytest.mark.parametrize("content", ["", "   ", "\n\t ", None, 42, ["a"]])
    def test_blank_or_non_string_content_rejected(self, store: PasteStore, content):
        with pytest.raises(InvalidInput):
            store.create(content)
        assert len(store) == 0

    def test_content_stored_untrimmed(self, store: PasteStore):
        handle = store.create("  padded  \n")
        assert store.read(handle).content == "  padded  \n"

    @pytest.mark.parametrize("ttl", [0, -5, 1.5, "10", True])
    def test_invalid_ttl(self, store: PasteStore, ttl):
        with pytest.raises(InvalidTTL):
            store.create("x", ttl_seconds=ttl)
        assert len(store) == 0

    @pytest.mark.parametrize("views", [0, -1, 2.5, "3", False])
    def test_invalid_view_limit(self, store: PasteStore, views):
        with pytest.raises(InvalidViewLimit):
            store.create("x", max_views=views)
        assert len(store) == 0

    def test_integral_float_accepted(self, store: PasteStore, t0: int):
        handle = store.create("x", ttl_seconds=5.0, max_views=2.0)
        result = store.read(handle)
        assert result.expires_at == t0 + 5000
        assert result.remaining_views == 1

    def test_expires_at_derived_from_ttl(self, store: PasteStore, t0: int):
        handle = store.create("x", ttl_seconds=60)
        assert store.read(handle).expires_at == t0 + 60_000

    def test_ttl_past_representable_range_rejected(self, store: PasteStore):
        with pytest.raises(InvalidTTL):
            store.create("x", ttl_seconds=10**12, max_views=2)
        assert len(store) == 0

    def test_ttl_up_to_representable_range_accepted(self, store: PasteStore, t0: int):
        ttl = (MAX_INSTANT_MS - t0) // 1000
        handle = store.create("x", ttl_seconds=ttl)
        assert store.read(handle).expires_at <= MAX_INSTANT_MS

    def test_per_call_clock_override(self, store: PasteStore):
        handle = store.create("x", ttl_seconds=1, clock=FixedClock(5_000))
        assert store.read(handle, clock=FixedClock(6_000)).content == "x"


class TestReadExpiry:
    def test_before_ttl_succeeds(self, store: PasteStore, clock: FixedClock, t0: int):
        handle = store.create("x", ttl_seconds=1)
        clock.instant_ms = t0 + 999
        assert store.read(handle).content == "x"

    def test_exactly_at_expiry_succeeds(self, store: PasteStore, clock: FixedClock, t0: int):
        handle = store.create("x", ttl_seconds=1)
        clock.instant_ms = t0 + 1000
        assert store.read(handle).content == "x"

    def test_after_ttl_expired_then_not_found(self, store: PasteStore, clock: FixedClock, t0: int):
        handle = store.create("x", ttl_seconds=1)
        clock.instant_ms = t0 + 1001
        with pytest.raises(Expired):
            store.read(handle)
        assert len(store) == 0
        with pytest.raises(NotFound):
            store.read(handle)

    def test_expired_entry_stays_until_accessed(self, store: PasteStore, clock: FixedClock, t0: int):
        store.create("x", ttl_seconds=1)
        clock.instant_ms = t0 + 10_000
        assert len(store) == 1

    def test_time_checked_before_views(self, store: PasteStore, clock: FixedClock, t0: int):
        handle = store.create("x", ttl_seconds=1, max_views=1)
        store.read(handle)
        clock.instant_ms = t0 + 2000
        with pytest.raises(Expired):
            store.read(handle)


class TestReadViews:
    def test_two_views(self, store: PasteStore):
        handle = store.create("x", max_views=2)
        assert store.read(handle).remaining_views == 1
        assert store.read(handle).remaining_views == 0
        with pytest.raises(ViewLimitExceeded):
            store.read(handle)
        with pytest.raises(NotFound):
            store.read(handle)

    def test_single_view_exhausted_not_missing(self, store: PasteStore):
        handle = store.create("secret", max_views=1)
        assert store.read(handle).content == "secret"
        with pytest.raises(ViewLimitExceeded):
            store.read(handle)

    def test_unlimited_reads_do_not_mutate(self, store: PasteStore):
        handle = store.create("x")
        for _ in range(100):
            result = store.read(handle)
            assert result.remaining_views is None
            assert result.expires_at is None

    def test_unknown_handle(self, store: PasteStore, clock: FixedClock):
        with pytest.raises(NotFound):
            store.read("nope")
        clock.instant_ms = 0
        with pytest.raises(NotFound):
            store.read("nope")

    def test_read_touches_only_its_entry(self, store: PasteStore):
        a = store.create("a", max_views=1)
        b = store.create("b", max_views=1)
        store.read(a)
        with pytest.raises(ViewLimitExceeded):
            store.read(a)
        assert store.read(b).remaining_views == 0

    def test_concurrent_reads_of_last_view(self):
        store = PasteStore()
        handle = store.create("x", max_views=1)
        successes = []
        barrier = threading.Barrier(16)

        def reader():
            barrier.wait()
            try:
                store.read(handle)
                successes.append(True)
            except (ViewLimitExceeded, NotFound):
                pass

        threads = [threading.Thread(target=reader) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(successes) == 1


class TestCollisions:
    def test_store_retries_taken_handles(self, store: PasteStore):
        seq = iter(["aaaa", "aaaa", "bbbb"])
        ids = HandleGenerator(length=4)
        ids._candidate = lambda: next(seq)
        store.ids = ids
        assert store.create("1") == "aaaa"
        assert store.create("2") == "bbbb"


class TestEvaluateAccess:
    def test_active(self):
        entry = Entry("h", "c", created_at=0, expires_at=1000, remaining_views=1)
        assert evaluate_access(entry, 1000) is AccessState.ACTIVE

    def test_expired(self):
        entry = Entry("h", "c", created_at=0, expires_at=1000)
        assert evaluate_access(entry, 1001) is AccessState.EXPIRED_BY_TIME

    def test_exhausted(self):
        entry = Entry("h", "c", created_at=0, remaining_views=0)
        assert evaluate_access(entry, 0) is AccessState.EXHAUSTED_BY_VIEWS


class TestHandleReuse:
    def test_evicted_handle_skipped(self, store: PasteStore):
        seq = iter(["f", "f", "g"])
        ids = HandleGenerator(length=1)
        ids._candidate = lambda: next(seq)
        store.ids = ids
        first = store.create("one", max_views=1)
        store.read(first)
        with pytest.raises(ViewLimitExceeded):
            store.read(first)
        assert store.create("two") == "g"
        with pytest.raises(NotFound):
            store.read(first)

    def test_evicted_handle_never_reissued_with_tiny_space(self):
        store = PasteStore(ids=HandleGenerator(length=1, max_attempts=10_000))
        first = store.create("one", max_views=1)
        store.read(first)
        with pytest.raises(ViewLimitExceeded):
            store.read(first)
        later = {store.create("x") for _ in range(20)}
        assert first not in later
        assert len(later) == 20

    def test_exhausted_space_raises(self):
        seq = iter(["f"] * 3)
        ids = HandleGenerator(length=1, max_attempts=2)
        ids._candidate = lambda: next(seq)
        store = PasteStore(ids=ids)
        store.create("one")
        with pytest.raises(HandleSpaceExhausted):
            store.create("two")
        assert len(store) == 1
