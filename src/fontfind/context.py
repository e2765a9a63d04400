"""Cooperative cancellation for background font resolution.

A `Context` is handed to `ResolverPipeline.resolve` and to every locator it
calls. Nothing is interrupted forcibly: code checks `Context.err` between
steps and stops when it returns an error. Cancelling a context cancels all
contexts derived from it.

Derived contexts hold a callback on their parent and, for deadlines, a timer
thread. Both are released when the context is cancelled, so callers close
contexts they no longer need, most simply with a ``with`` block::

    with Context.with_timeout(10) as ctx:
        resolution = promise.result(ctx)
"""

from __future__ import annotations

from collections.abc import Callable
from threading import Event, Lock, Timer

from fontfind.exceptions import DeadlineExceeded, ResolutionCancelled


class Context:
    """Cancellation signal shared between a caller and background work."""

    def __init__(self, parent: Context | None = None) -> None:
        self._lock = Lock()
        self._done = Event()
        self._error: ResolutionCancelled | None = None
        self._callbacks: list[Callable[[Context], None]] = []
        self._timer: Timer | None = None
        self._parent = parent
        if parent is not None:
            parent.add_done_callback(self._propagate)

    def _propagate(self, parent: Context) -> None:
        self.cancel(parent.err())

    @classmethod
    def background(cls) -> Context:
        """Return a fresh context that is only cancelled explicitly."""
        return cls()

    @classmethod
    def with_cancel(cls, parent: Context | None = None) -> Context:
        """Return a cancellable child of ``parent``."""
        return cls(parent)

    @classmethod
    def with_timeout(cls, seconds: float, parent: Context | None = None) -> Context:
        """Return a child of ``parent`` cancelled with `DeadlineExceeded` after ``seconds``."""
        ctx = cls(parent)
        if seconds <= 0:
            ctx.cancel(DeadlineExceeded())
            return ctx
        timer = Timer(seconds, ctx.cancel, args=(DeadlineExceeded(),))
        timer.daemon = True
        with ctx._lock:
            if ctx._error is not None:
                return ctx
            ctx._timer = timer
            timer.start()
        return ctx

    def cancel(self, error: ResolutionCancelled | None = None) -> None:
        """Cancel the context; only the first call has an effect.

        Cancelling also stops the deadline timer and detaches the context from
        its parent.
        """
        with self._lock:
            if self._error is not None:
                return
            self._error = error if error is not None else ResolutionCancelled()
            callbacks, self._callbacks = self._callbacks, []
            timer, self._timer = self._timer, None
            parent, self._parent = self._parent, None
        if timer is not None:
            timer.cancel()
        if parent is not None:
            parent.remove_done_callback(self._propagate)
        self._done.set()
        for callback in callbacks:
            callback(self)

    def close(self) -> None:
        """Release the context once its work is over; same as `cancel`."""
        self.cancel()

    def __enter__(self) -> Context:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def err(self) -> ResolutionCancelled | None:
        """Return the cancellation error, always the same instance, or None."""
        with self._lock:
            return self._error

    @property
    def cancelled(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or ``timeout`` elapsed; return True if cancelled."""
        return self._done.wait(timeout)

    def add_done_callback(self, callback: Callable[[Context], None]) -> None:
        """Call ``callback(ctx)`` on cancellation, immediately if already cancelled."""
        with self._lock:
            if self._error is None:
                self._callbacks.append(callback)
                return
        callback(self)

    def remove_done_callback(self, callback: Callable[[Context], None]) -> None:
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass


__all__ = ["Context"]
