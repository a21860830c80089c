"""Unit tests for the debounce and retry utilities."""

import asyncio

import pytest

from resumex.utils.debounce import Debouncer
from resumex.utils.retry import retry_async


@pytest.mark.unit
def test_debounce_runs_last_call_once():
    """Test rapid calls coalesce into one trailing invocation."""
    calls = []

    async def scenario():
        debounced = Debouncer(lambda value: calls.append(value), delay_s=0.05)
        for value in ("李", "李明", "李明明"):
            debounced(value)
            await asyncio.sleep(0.01)
        assert calls == []
        await asyncio.sleep(0.1)

    asyncio.run(scenario())
    assert calls == ["李明明"]


@pytest.mark.unit
def test_debounce_cancel_drops_pending_call():
    """Test a cancelled invocation never fires."""
    calls = []

    async def scenario():
        debounced = Debouncer(calls.append, delay_s=0.02)
        debounced("x")
        assert debounced.pending
        assert debounced.cancel()
        assert not debounced.pending
        await asyncio.sleep(0.05)

    asyncio.run(scenario())
    assert calls == []


@pytest.mark.unit
def test_debounce_flush_runs_immediately():
    """Test flush runs the pending call now and only once."""
    calls = []

    async def scenario():
        debounced = Debouncer(calls.append, delay_s=10)
        debounced("now")
        assert debounced.flush()
        assert not debounced.flush()

    asyncio.run(scenario())
    assert calls == ["now"]


@pytest.mark.unit
def test_debounce_rejects_negative_delay():
    with pytest.raises(ValueError):
        Debouncer(print, delay_s=-1)


@pytest.mark.unit
def test_retry_succeeds_after_failures():
    """Test an operation failing twice succeeds on the third attempt."""
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise ConnectionError("transient")
        return "loaded"

    result = asyncio.run(retry_async(flaky, retries=3, delay_s=0))

    assert result == "loaded"
    assert len(attempts) == 3


@pytest.mark.unit
def test_retry_raises_after_exhausting_retries():
    """Test the last error propagates after 1 + retries attempts."""
    attempts = []
    retried = []

    def always_fails():
        attempts.append(1)
        raise ConnectionError(f"failure {len(attempts)}")

    with pytest.raises(ConnectionError, match="failure 4"):
        asyncio.run(retry_async(always_fails, retries=3, delay_s=0, on_retry=lambda n, e: retried.append(n)))

    assert len(attempts) == 4
    assert retried == [1, 2, 3]


@pytest.mark.unit
def test_retry_only_on_listed_errors():
    """Test errors outside retry_on propagate immediately."""
    attempts = []

    def bad():
        attempts.append(1)
        raise KeyError("not transient")

    with pytest.raises(KeyError):
        asyncio.run(retry_async(bad, retries=3, delay_s=0, retry_on=(ConnectionError,)))

    assert len(attempts) == 1


@pytest.mark.unit
def test_retry_awaits_coroutines():
    """Test async operations are awaited."""

    async def load():
        return 42

    assert asyncio.run(retry_async(load, delay_s=0)) == 42
