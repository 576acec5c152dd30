"""
Tests for infinite-scroll termination
"""

import asyncio

from aitools_crawler.extractors import DoneReason, ScrollState, ScrollTracker, scroll_until_done

from conftest import FakeRenderedPage


def test_done_after_three_stalls():
    """Growth stops after 2 scrolls; DONE on the 5th observation"""
    tracker = ScrollTracker(target_count=1000)
    states = [tracker.observe(count) for count in (20, 40, 40, 40)]

    assert states == [ScrollState.SCROLLING, ScrollState.SCROLLING,
                      ScrollState.STALLED, ScrollState.STALLED]
    assert not tracker.done

    assert tracker.observe(40) is ScrollState.DONE
    assert tracker.attempts == 5
    assert tracker.done_reason is DoneReason.END_OF_CONTENT


def test_growth_resets_stall_count():
    tracker = ScrollTracker(target_count=1000)
    for count in (20, 20, 20, 30, 30, 30):
        tracker.observe(count)

    assert not tracker.done
    assert tracker.stall_count == 2


def test_attempt_cap_from_target():
    tracker = ScrollTracker(target_count=100, items_per_batch=50)
    tracker.observe(10)
    tracker.observe(20)

    assert tracker.max_attempts == 2
    assert tracker.done_reason is DoneReason.ATTEMPT_CAP


def test_target_reached():
    tracker = ScrollTracker(target_count=30)
    tracker.observe(45)

    assert tracker.done_reason is DoneReason.TARGET_REACHED


def test_observations_after_done_are_ignored():
    tracker = ScrollTracker(target_count=30)
    tracker.observe(45)
    tracker.observe(90)

    assert tracker.attempts == 1
    assert tracker.previous_count == 45


def test_scroll_until_done_drives_page():
    page = FakeRenderedPage(counts=[20, 40, 40, 40, 40, 60])
    tracker = ScrollTracker(target_count=1000)

    loaded = asyncio.run(scroll_until_done(page, tracker, '.tool-card', settle_interval=0))

    assert loaded == 40
    assert page.scrolls == 5


def test_scroll_stops_when_budget_spent():
    page = FakeRenderedPage(counts=[20, 40, 60])
    tracker = ScrollTracker(target_count=1000)

    asyncio.run(scroll_until_done(page, tracker, '.tool-card', settle_interval=0,
                                  should_stop=lambda: True))

    assert page.scrolls == 0
    assert tracker.done_reason is DoneReason.BUDGET_EXHAUSTED


def test_scroll_stops_at_deadline():
    page = FakeRenderedPage(counts=list(range(10, 2000, 10)))
    tracker = ScrollTracker(target_count=10000)

    async def run():
        deadline = asyncio.get_running_loop().time() + 0.1
        return await scroll_until_done(page, tracker, '.tool-card', settle_interval=0.02,
                                       deadline=deadline)

    loaded = asyncio.run(run())

    assert tracker.done_reason is DoneReason.TIME_LIMIT
    assert 0 < page.scrolls < tracker.max_attempts
    assert loaded == tracker.previous_count > 0


def test_deadline_already_passed_skips_scrolling():
    page = FakeRenderedPage(counts=[20, 40])
    tracker = ScrollTracker(target_count=1000)

    async def run():
        return await scroll_until_done(page, tracker, '.tool-card', settle_interval=0,
                                       deadline=asyncio.get_running_loop().time())

    asyncio.run(run())

    assert page.scrolls == 0
    assert tracker.done_reason is DoneReason.TIME_LIMIT
