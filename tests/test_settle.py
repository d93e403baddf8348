import asyncio

import pytest

from ratify import ErrorCode, SettleResult, ValidationError, settle, settle_all


async def passes(delay: float = 0):
    await asyncio.sleep(delay)


async def fails(detail, delay: float = 0):
    await asyncio.sleep(delay)
    raise ValidationError("failed", detail)


@pytest.mark.asyncio
async def test_all_passing_children():
    result = await settle({"a": passes(), "b": passes()})
    assert isinstance(result, SettleResult)
    assert result.all_succeeded
    assert result.passed == ["a", "b"]
    assert result.detail() == {}
    assert result.total_count == 2


@pytest.mark.asyncio
async def test_waits_for_slow_children_after_a_fast_failure():
    finished = []

    async def slow_failure():
        await asyncio.sleep(0.05)
        finished.append("slow")
        raise ValidationError("slow", {"slow": True})

    result = await settle({"fast": fails({"fast": True}), "slow": slow_failure()})
    assert finished == ["slow"]
    assert result.detail() == {"fast": {"fast": True}, "slow": {"slow": True}}


@pytest.mark.asyncio
async def test_detail_is_ordered_by_key_not_completion():
    result = await settle({
        "first": fails({"x": True}, delay=0.03),
        "second": fails({"y": True}, delay=0),
    })
    assert list(result.failures) == ["first", "second"]


@pytest.mark.asyncio
async def test_children_run_concurrently():
    running = 0
    peak = 0

    async def probe():
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.01)
        running -= 1

    await settle({i: probe() for i in range(5)})
    assert peak == 5


@pytest.mark.asyncio
async def test_max_concurrent_bounds_children_but_awaits_all():
    running = 0
    peak = 0

    async def probe(fail: bool):
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.01)
        running -= 1
        if fail:
            raise ValidationError("failed", {"probe": True})

    result = await settle({i: probe(i % 2 == 0) for i in range(6)}, max_concurrent=2)
    assert peak <= 2
    assert sorted(result.failures) == [0, 2, 4]
    assert sorted(result.passed) == [1, 3, 5]


@pytest.mark.asyncio
async def test_unexpected_exceptions_become_failures():
    async def boom():
        raise RuntimeError("disk on fire")

    result = await settle({"boom": boom(), "ok": passes()})
    error = result.failures["boom"]
    assert isinstance(error, ValidationError)
    assert error.code is ErrorCode.E9001_UNEXPECTED_ERROR
    assert isinstance(error.__cause__, RuntimeError)
    assert result.passed == ["ok"]


@pytest.mark.asyncio
async def test_merged_detail_unions_children():
    result = await settle({"a": fails({"presence": True}), "b": fails({"length": True}), "c": passes()})
    assert result.merged_detail() == {"presence": True, "length": True}


@pytest.mark.asyncio
async def test_each_call_gets_a_fresh_result():
    first = await settle({"a": fails({"a": True})})
    second = await settle({"a": passes()})
    assert first.failures and not second.failures
    assert first is not second


@pytest.mark.asyncio
async def test_settle_all_raises_generic_failure():
    with pytest.raises(ValidationError) as excinfo:
        await settle_all({"a": passes(), "b": fails({"b": True})})
    assert excinfo.value.detail == {}


@pytest.mark.asyncio
async def test_settle_all_resolves_when_everything_passes():
    assert await settle_all({"a": passes(), "b": passes()}) is None


@pytest.mark.asyncio
async def test_empty_batch_passes():
    result = await settle({})
    assert result.all_succeeded
    assert result.total_count == 0
