import asyncio
from datetime import date

import pytest

from app.domain.errors import ProviderError
from app.domain.filters import normalize_filters
from app.domain.types import DEFAULT_LIMIT, MAX_LIMIT, ViolationFilters
from app.service_layer.aggregator import ViolationAggregator
from app.service_layer.mock_data import MOCK_PROVIDER_ID, MOCK_VIOLATIONS

from fakes import FakeAdapter, descriptor, violation


@pytest.mark.asyncio
async def test_one_provider_fails_other_results_survive(registry_factory):
    a = FakeAdapter(items=[violation("A", str(i), date(2024, 1, i + 1)) for i in range(3)])
    b = FakeAdapter(error=ProviderError("B", "HTTP 503"))
    reg = registry_factory(
        (descriptor("A", ("CA", None)), a),
        (descriptor("B", ("CA", None)), b),
    )

    result = await ViolationAggregator(registry=reg).fetch_violations(normalize_filters(state="CA", limit=25))

    assert len(result.items) == 3
    assert result.providers_queried == ["A", "B"]
    assert result.providers_matched == ["A"]


@pytest.mark.asyncio
async def test_unexpected_adapter_exception_is_contained(registry_factory):
    reg = registry_factory(
        (descriptor("boom", ("*", None)), FakeAdapter(error=RuntimeError("parser blew up"))),
        (descriptor("ok", ("*", None)), FakeAdapter(items=[violation("ok", "1")])),
    )
    result = await ViolationAggregator(registry=reg).fetch_violations(normalize_filters())
    assert [v.id for v in result.items] == ["ok:1"]
    assert result.providers_matched == ["ok"]


@pytest.mark.asyncio
async def test_empty_provider_is_queried_not_matched(registry_factory):
    reg = registry_factory(
        (descriptor("empty", ("CA", None)), FakeAdapter()),
        (descriptor("full", ("CA", None)), FakeAdapter(items=[violation("full", "1")])),
    )
    result = await ViolationAggregator(registry=reg).fetch_violations(normalize_filters(state="CA"))
    assert result.providers_queried == ["empty", "full"]
    assert result.providers_matched == ["full"]
    assert set(result.providers_matched) <= set(result.providers_queried)


@pytest.mark.asyncio
async def test_only_covering_providers_are_called(registry_factory):
    ca = FakeAdapter(items=[violation("ca", "1")])
    tx = FakeAdapter(items=[violation("tx", "1", state="TX", city="Austin")])
    reg = registry_factory(
        (descriptor("ca", ("CA", None)), ca),
        (descriptor("tx", ("TX", None)), tx),
    )
    result = await ViolationAggregator(registry=reg).fetch_violations(normalize_filters(state="CA"))

    assert len(ca.calls) == 1
    assert tx.calls == []
    assert result.providers_queried == ["ca"]


@pytest.mark.asyncio
async def test_limit_truncates_after_sorting(registry_factory):
    items = [violation("A", str(i), date(2020, 1, 1 + (i % 28))) for i in range(150)]
    reg = registry_factory((descriptor("A", ("*", None)), FakeAdapter(items=items)))
    agg = ViolationAggregator(registry=reg)

    default_page = await agg.fetch_violations(normalize_filters())
    assert len(default_page.items) == 25

    capped = await agg.fetch_violations(normalize_filters(limit=1000))
    assert len(capped.items) == MAX_LIMIT

    small = await agg.fetch_violations(normalize_filters(limit=3))
    assert len(small.items) == 3
    assert all(v.violation_date == date(2020, 1, 28) for v in small.items)


@pytest.mark.asyncio
@pytest.mark.parametrize("limit,expected", [(500, MAX_LIMIT), (0, DEFAULT_LIMIT), (-5, DEFAULT_LIMIT)])
async def test_raw_filters_limit_is_clamped(registry_factory, limit, expected):
    items = [violation("A", str(i), date(2021, 1, 1 + (i % 28))) for i in range(150)]
    adapter = FakeAdapter(items=items)
    reg = registry_factory((descriptor("A", ("*", None)), adapter))

    result = await ViolationAggregator(registry=reg).fetch_violations(ViolationFilters(limit=limit, state=" ca "))

    assert len(result.items) == expected
    assert adapter.calls[0].limit == expected
    assert adapter.calls[0].state == "CA"


@pytest.mark.asyncio
async def test_merge_sorts_across_providers_undated_last(registry_factory):
    reg = registry_factory(
        (descriptor("A", ("*", None)), FakeAdapter(items=[violation("A", "u"), violation("A", "old", date(2022, 5, 1))])),
        (descriptor("B", ("*", None)), FakeAdapter(items=[violation("B", "new", date(2024, 5, 1)), violation("B", "u")])),
    )
    result = await ViolationAggregator(registry=reg).fetch_violations(normalize_filters())
    assert [v.id for v in result.items] == ["B:new", "A:old", "A:u", "B:u"]


@pytest.mark.asyncio
async def test_central_filters_applied_post_merge(registry_factory):
    reg = registry_factory(
        (
            descriptor("A", ("*", None)),
            FakeAdapter(
                items=[
                    violation("A", "1", date(2024, 1, 5), description="Overgrown weeds", status="Open"),
                    violation("A", "2", date(2024, 1, 6), description="Broken window", status="Open"),
                    violation("A", "3", date(2024, 1, 7), description="weeds again", status="Closed"),
                    violation("A", "4", date(2023, 1, 7), description="weeds, old", status="Open"),
                ]
            ),
        ),
    )
    f = normalize_filters(query="WEEDS", status="OPEN", start_date="2024-01-01")
    result = await ViolationAggregator(registry=reg).fetch_violations(f)
    assert [v.id for v in result.items] == ["A:1"]
    # provider still counts as matched: it returned rows, the central filter dropped them
    assert result.providers_matched == ["A"]


@pytest.mark.asyncio
async def test_duplicate_ids_collapse(registry_factory):
    dup = violation("A", "1", date(2024, 1, 1))
    reg = registry_factory((descriptor("A", ("*", None)), FakeAdapter(items=[dup, dup])))
    result = await ViolationAggregator(registry=reg).fetch_violations(normalize_filters())
    assert [v.id for v in result.items] == ["A:1"]


@pytest.mark.asyncio
async def test_identical_filters_identical_results(registry_factory):
    reg = registry_factory(
        (descriptor("A", ("*", None)), FakeAdapter(items=[violation("A", "1", date(2024, 1, 1)), violation("A", "2")])),
        (descriptor("B", ("*", None)), FakeAdapter(error=ProviderError("B", "down"))),
    )
    agg = ViolationAggregator(registry=reg)
    f = normalize_filters(limit=10)
    assert await agg.fetch_violations(f) == await agg.fetch_violations(f)


@pytest.mark.asyncio
async def test_adapters_run_concurrently(registry_factory):
    gate = asyncio.Event()

    class Waiter:
        async def query(self, filters):
            await gate.wait()
            return [violation("waiter", "1")]

    class Opener:
        async def query(self, filters):
            gate.set()
            return [violation("opener", "1")]

    # sequential dispatch would deadlock on the gate
    reg = registry_factory(
        (descriptor("waiter", ("*", None)), Waiter()),
        (descriptor("opener", ("*", None)), Opener()),
    )
    result = await asyncio.wait_for(ViolationAggregator(registry=reg).fetch_violations(normalize_filters()), timeout=2)
    assert result.providers_matched == ["waiter", "opener"]


@pytest.mark.asyncio
async def test_cancellation_reaches_adapters(registry_factory):
    started = asyncio.Event()
    cancelled = asyncio.Event()

    class Slow:
        async def query(self, filters):
            started.set()
            try:
                await asyncio.sleep(30)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return []

    reg = registry_factory((descriptor("slow", ("*", None)), Slow()))
    task = asyncio.ensure_future(ViolationAggregator(registry=reg).fetch_violations(normalize_filters()))
    await started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert cancelled.is_set()


@pytest.mark.asyncio
async def test_no_covering_providers_gives_empty_result(registry_factory):
    reg = registry_factory((descriptor("tx", ("TX", None)), FakeAdapter(items=[violation("tx", "1")])))
    result = await ViolationAggregator(registry=reg).fetch_violations(normalize_filters(state="CA"))
    assert result.items == []
    assert result.providers_queried == []
    assert result.providers_matched == []


@pytest.mark.asyncio
async def test_mock_mode_bypasses_adapters(registry_factory):
    real = FakeAdapter(items=[violation("real", "1")])
    reg = registry_factory((descriptor("real", ("*", None)), real))

    result = await ViolationAggregator(registry=reg).fetch_violations(normalize_filters(limit=3), mock_mode=True)

    assert real.calls == []
    assert result.providers_queried == [MOCK_PROVIDER_ID]
    assert result.providers_matched == [MOCK_PROVIDER_ID]
    assert len(result.items) == 3
    assert all(v in MOCK_VIOLATIONS for v in result.items)


def test_provider_summaries_passthrough(registry_factory):
    reg = registry_factory((descriptor("A", ("CA", "Fresno")), FakeAdapter()))
    assert ViolationAggregator(registry=reg).list_provider_summaries()[0]["id"] == "A"
