import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from app.services.janitor import MatchJanitor
from app.services.match_coordinator import MatchCoordinator
from app.services.match_store import MatchStore

COMPLETED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def coordinator() -> MatchCoordinator:
    return MatchCoordinator(MatchStore())


def test_keeps_recently_completed_match(coordinator, completed_match):
    coordinator.store.put(completed_match("m1", COMPLETED_AT))
    janitor = MatchJanitor(coordinator)

    removed = janitor.sweep(now=COMPLETED_AT + timedelta(minutes=59))

    assert removed == 0
    assert coordinator.get_match("m1") is not None


def test_evicts_match_completed_over_an_hour_ago(coordinator, completed_match):
    coordinator.store.put(completed_match("m1", COMPLETED_AT))
    coordinator.store.index_user("u1", "m1")
    coordinator.store.index_user("u2", "m1")
    janitor = MatchJanitor(coordinator)

    removed = janitor.sweep(now=COMPLETED_AT + timedelta(minutes=61))

    assert removed == 1
    assert coordinator.get_match("m1") is None
    assert coordinator.get_user_match("u1") is None
    assert coordinator.get_user_match("u2") is None


def test_never_evicts_unfinished_matches(coordinator):
    waiting = coordinator.create_match("alice-gh", "u1")
    running = coordinator.create_match("carol-gh", "u3")
    coordinator.join_match(running.match_id, "dave-gh", "u4")
    coordinator.set_ready(running.match_id, "u3")
    coordinator.set_ready(running.match_id, "u4")
    janitor = MatchJanitor(coordinator)

    removed = janitor.sweep(now=datetime.now(timezone.utc) + timedelta(days=2))

    assert removed == 0
    assert coordinator.get_match(waiting.match_id) is not None
    assert coordinator.get_match(running.match_id) is not None


def test_custom_retention(coordinator, completed_match):
    coordinator.store.put(completed_match("m1", COMPLETED_AT))
    janitor = MatchJanitor(coordinator, retention=timedelta(minutes=5))

    assert janitor.sweep(now=COMPLETED_AT + timedelta(minutes=4)) == 0
    assert janitor.sweep(now=COMPLETED_AT + timedelta(minutes=6)) == 1


@pytest.mark.asyncio
async def test_background_loop_sweeps_periodically(coordinator, completed_match):
    coordinator.store.put(completed_match("m1", COMPLETED_AT))
    janitor = MatchJanitor(coordinator, interval_seconds=0.01)

    janitor.start()
    try:
        for _ in range(100):
            if coordinator.get_match("m1") is None:
                break
            await asyncio.sleep(0.01)
    finally:
        await janitor.stop()

    assert coordinator.get_match("m1") is None


@pytest.mark.asyncio
async def test_stop_without_start(coordinator):
    janitor = MatchJanitor(coordinator)

    await janitor.stop()
    janitor.start()
    await janitor.stop()


def test_container_janitor_uses_injected_clock(container, clock, compare_response):
    coordinator = container.coordinator
    match = coordinator.create_match("alice-gh", "u1")
    coordinator.join_match(match.match_id, "bob-gh", "u2")
    coordinator.on_match_started = None
    coordinator.set_ready(match.match_id, "u1")
    coordinator.set_ready(match.match_id, "u2")
    coordinator.set_result(match.match_id, compare_response())

    clock.now += timedelta(minutes=59)
    assert container.janitor.sweep() == 0

    clock.now += timedelta(minutes=2)
    assert container.janitor.sweep() == 1
    assert coordinator.get_match(match.match_id) is None
