import copy
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from thds.lazyval import ConcurrentLazyValue, State, lazy, threadlocal_lazy


def test_lazy():
    counter = 0

    def up():
        nonlocal counter
        counter += 1
        return counter

    lazy_counter = lazy(up)

    assert lazy_counter.get() == 1
    assert counter == 1
    assert lazy_counter() == 1
    assert counter == 1


def test_lazy_is_threadsafe():
    counter = 0
    start = threading.Barrier(10)

    def up():
        nonlocal counter
        time.sleep(0.1)  # widen the window for a race.
        counter += 1
        return counter

    lazy_counter = lazy(up)

    def race():
        start.wait()
        return lazy_counter.get()

    with ThreadPoolExecutor(max_workers=10) as executor:
        futs = [executor.submit(race) for _ in range(10)]
    for fut in futs:
        assert fut.result() == 1
    assert counter == 1


def test_none_is_cached_under_concurrency():
    calls = list()

    def nothing():
        calls.append(1)
        return None

    lazy_nothing = lazy(nothing)
    with ThreadPoolExecutor(max_workers=5) as executor:
        results = list(executor.map(lambda _: lazy_nothing.get(), range(20)))
    assert results == [None] * 20
    assert len(calls) == 1


def test_thread_local_lazy():
    calls = list()

    @threadlocal_lazy
    def three():
        time.sleep(1)  # sleep in order to force all threads to spawn.
        calls.append(1)
        return 3

    with ThreadPoolExecutor(max_workers=10) as executor:
        futs = [executor.submit(three) for i in range(20)]
    results = [fut.result() for fut in futs]
    tot = sum(results)
    assert tot == 6 * 10
    assert len(calls) == 10


def test_concurrent_retry_after_failure():
    attempts = list()

    def flaky():
        attempts.append(1)
        if len(attempts) == 1:
            raise ConnectionError("first try fails")
        return "connected"

    lazy_conn = lazy(flaky)
    with pytest.raises(ConnectionError):
        lazy_conn.get()
    assert lazy_conn.state is State.UNINITIALIZED
    assert lazy_conn.get() == "connected"
    assert lazy_conn.get() == "connected"
    assert len(attempts) == 2


def test_concurrent_poison():
    attempts = list()

    def broken():
        attempts.append(1)
        raise ConnectionError("down")

    lazy_conn = ConcurrentLazyValue(broken, failure="poison")
    with ThreadPoolExecutor(max_workers=5) as executor:
        futs = [executor.submit(lazy_conn.get) for _ in range(10)]
    for fut in futs:
        assert isinstance(fut.exception(), ConnectionError)
    assert len(attempts) == 1
    assert lazy_conn.state is State.FAILED


def test_lazy_is_friendlier_now():
    class Foo:
        def __init__(self):
            self.bar = "baz"

    lazy_foo = lazy(Foo)

    with pytest.raises(
        AttributeError,
        match=r"did you mean to get the value before access, i.e. `\.get\(\)\.bar`\?",
    ):
        assert lazy_foo.bar  # type: ignore

    assert "baz" == lazy_foo.get().bar
    assert lazy_foo.initialized


def test_copy_shares_the_cached_value():
    calls = list()

    def one():
        calls.append(1)
        return 1

    lazy_one = lazy(one)
    copied = copy.copy(lazy_one)
    assert copied.get() == 1
    assert lazy_one.get() == 1
    assert len(calls) == 1

    with pytest.raises(AttributeError, match="^_nope$"):
        lazy_one._nope  # type: ignore


def test_introspection_matches_lazy_value():
    lazy_err = ConcurrentLazyValue(lambda: 1 / 0, failure="poison")
    assert lazy_err.failure_policy == "poison"
    assert not lazy_err.settled

    with pytest.raises(ZeroDivisionError):
        lazy_err.get()
    assert lazy_err.settled
    assert not lazy_err.initialized

    lazy_ok = lazy(lambda: "ok")
    assert lazy_ok.failure_policy == "retry"
    lazy_ok.get()
    assert lazy_ok.settled and lazy_ok.initialized
