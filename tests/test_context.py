from __future__ import annotations

from fontfind.context import Context
from fontfind.exceptions import DeadlineExceeded, ResolutionCancelled


def test_background_context_is_not_cancelled():
    ctx = Context.background()

    assert ctx.err() is None
    assert not ctx.cancelled
    assert not ctx.wait(0.01)


def test_cancel_is_idempotent_and_error_is_stable():
    ctx = Context.with_cancel()
    ctx.cancel()
    error = ctx.err()
    ctx.cancel(DeadlineExceeded())

    assert isinstance(error, ResolutionCancelled)
    assert not isinstance(error, DeadlineExceeded)
    assert ctx.err() is error
    assert ctx.cancelled


def test_child_follows_parent_cancellation():
    parent = Context.background()
    child = Context.with_cancel(parent)
    grandchild = Context.with_timeout(60, child)

    parent.cancel()

    assert child.err() is parent.err()
    assert grandchild.err() is parent.err()


def test_child_cancellation_does_not_reach_parent():
    parent = Context.background()
    child = Context.with_cancel(parent)

    child.cancel()

    assert parent.err() is None


def test_with_timeout_expires_with_deadline_error():
    ctx = Context.with_timeout(0.05)

    assert ctx.wait(2.0)
    assert isinstance(ctx.err(), DeadlineExceeded)


def test_non_positive_timeout_is_already_expired():
    ctx = Context.with_timeout(0)

    assert isinstance(ctx.err(), DeadlineExceeded)


def test_done_callbacks():
    seen: list[Context] = []
    ctx = Context.background()
    ctx.add_done_callback(seen.append)
    removed: list[Context] = []
    ctx.add_done_callback(removed.append)
    ctx.remove_done_callback(removed.append)

    ctx.cancel()
    ctx.add_done_callback(seen.append)

    assert seen == [ctx, ctx]
    assert removed == []


def test_cancelled_children_detach_from_parent():
    parent = Context.background()

    for _ in range(1000):
        Context.with_cancel(parent).cancel()
    expired = Context.with_timeout(0, parent)

    assert parent._callbacks == []
    assert expired.cancelled


def test_closing_timeout_context_stops_timer():
    parent = Context.background()

    with Context.with_timeout(60, parent) as ctx:
        timer = ctx._timer
        assert timer is not None
        assert parent._callbacks != []

    timer.join(1.0)
    assert not timer.is_alive()
    assert ctx._timer is None
    assert parent._callbacks == []
    assert isinstance(ctx.err(), ResolutionCancelled)
    assert not isinstance(ctx.err(), DeadlineExceeded)
    assert parent.err() is None


def test_child_of_cancelled_parent_starts_no_timer():
    parent = Context.background()
    parent.cancel()

    child = Context.with_timeout(60, parent)

    assert child.err() is parent.err()
    assert child._timer is None
