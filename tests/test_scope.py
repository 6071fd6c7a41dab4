"""Tests for the ambient scope chain."""

import asyncio
import threading

from scopelog import NULL_SCOPE, ScopeProvider


def test_push_and_pop():
    scopes = ScopeProvider()
    assert scopes.current_values() == []
    handle = scopes.push("outer")
    assert scopes.current_values() == ["outer"]
    handle.close()
    assert scopes.current_values() == []


def test_walks_innermost_first():
    scopes = ScopeProvider()
    with scopes.push({"a": 1}):
        with scopes.push("middle"):
            with scopes.push({"b": 2}):
                assert scopes.current_values() == [{"b": 2}, "middle", {"a": 1}]
            assert scopes.current_values() == ["middle", {"a": 1}]
    assert scopes.current_values() == []


def test_for_each_scope_passes_state():
    scopes = ScopeProvider()
    seen = []
    with scopes.push(1), scopes.push(2):
        scopes.for_each_scope(lambda value, acc: acc.append(value * 10), seen)
    assert seen == [20, 10]


def test_close_is_idempotent():
    scopes = ScopeProvider()
    with scopes.push("outer"):
        inner = scopes.push("inner")
        inner.close()
        inner.close()
        assert scopes.current_values() == ["outer"]


def test_providers_are_independent():
    first, second = ScopeProvider(), ScopeProvider()
    with first.push("only-first"):
        assert second.current_values() == []


def test_threads_see_independent_stacks():
    scopes = ScopeProvider()
    barrier = threading.Barrier(2)
    results = {}

    def worker(name):
        with scopes.push(name):
            barrier.wait()
            results[name] = scopes.current_values()

    threads = [threading.Thread(target=worker, args=(n,)) for n in ("t1", "t2")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results == {"t1": ["t1"], "t2": ["t2"]}


def test_tasks_see_independent_stacks():
    scopes = ScopeProvider()

    async def worker(name, started, release):
        with scopes.push(name):
            started.set()
            await release.wait()
            return scopes.current_values()

    async def main():
        with scopes.push("parent"):
            started_a, started_b = asyncio.Event(), asyncio.Event()
            release = asyncio.Event()
            a = asyncio.create_task(worker("a", started_a, release))
            b = asyncio.create_task(worker("b", started_b, release))
            await started_a.wait()
            await started_b.wait()
            in_parent = scopes.current_values()
            release.set()
            return await a, await b, in_parent

    a_values, b_values, parent_values = asyncio.run(main())
    assert a_values == ["a", "parent"]
    assert b_values == ["b", "parent"]
    assert parent_values == ["parent"]


def test_null_scope_is_a_noop_context_manager():
    with NULL_SCOPE as handle:
        assert handle is NULL_SCOPE
    NULL_SCOPE.close()
