"""Small general-purpose helpers."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Sequence, TypeVar

S = TypeVar("S")
D = TypeVar("D")
T = TypeVar("T")

_CN_ZONE = timezone(timedelta(hours=8))
_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def is_bool(*args: bool) -> bool:
    """Return the first flag given, or False when none is given."""
    return len(args) > 0 and bool(args[0])


def is_canceled(event: threading.Event) -> bool:
    """Tell, without blocking, whether the cancellation event has been set."""
    return event.is_set()


def slice_equal(a: Sequence[T], b: Sequence[T]) -> bool:
    """Tell whether two sequences hold equal elements in the same order."""
    return len(a) == len(b) and all(x == y for x, y in zip(a, b))


def slice_contains(arr: Iterable[T], v: T) -> bool:
    """Tell whether ``v`` is an element of ``arr``."""
    return any(item == v for item in arr)


def slice_convert(src: Iterable[S], convert: Callable[[S], D]) -> list[D]:
    """Convert every element; the first failing conversion propagates."""
    return [convert(item) for item in src]


def must_slice_convert(src: Iterable[S], convert: Callable[[S], D]) -> list[D]:
    """Convert every element with a conversion that cannot fail."""
    return [convert(item) for item in src]


def must_parse_cn_time(text: str) -> datetime:
    """Parse "YYYY-MM-DD hh:mm:ss" as China Standard Time.

    An unparsable string gives the zero time, 0001-01-01 UTC.
    """
    try:
        parsed = datetime.strptime(text, "%Y-%m-%d %H:%M:%S")
    except ValueError:
        return _ZERO_TIME
    return parsed.replace(tzinfo=_CN_ZONE)


def new_debounce(interval: float) -> Callable[[Callable[[], None]], None]:
    """Return a debouncer: each call cancels the pending function and
    schedules the given one to run after ``interval`` seconds."""
    lock = threading.Lock()
    timer: threading.Timer | None = None

    def debounce(f: Callable[[], None]) -> None:
        nonlocal timer
        with lock:
            if timer is not None:
                timer.cancel()
            timer = threading.Timer(interval, f)
            timer.daemon = True
            timer.start()

    return debounce


def new_debounce2(interval: float, f: Callable[[], None]) -> Callable[[], None]:
    """Return a trigger that runs ``f`` once ``interval`` seconds have passed
    since the latest call."""
    lock = threading.Lock()
    timer: threading.Timer | None = None

    def trigger() -> None:
        nonlocal timer
        with lock:
            if timer is not None:
                timer.cancel()
            timer = threading.Timer(interval, f)
            timer.daemon = True
            timer.start()

    return trigger