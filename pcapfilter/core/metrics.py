"""
core/metrics.py

Lightweight thread-safe counters for expression building and command assembly.
Counters are guarded by a threading.Lock each.

Usage:
    from pcapfilter.core.metrics import METRICS
    METRICS.primitives_emitted.inc()
    print(METRICS.as_dict())
"""

import threading


class Counter:
    """A thread-safe integer counter."""

    __slots__ = ("_value", "_lock")

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def inc(self, amount: int = 1) -> None:
        with self._lock:
            self._value += amount

    def reset(self) -> None:
        with self._lock:
            self._value = 0

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def __repr__(self) -> str:  # pragma: no cover
        return f"Counter({self._value})"


class Metrics:
    """Singleton holding all builder counters."""

    def __init__(self) -> None:
        # --- Expression builder ---
        self.primitives_emitted: Counter = Counter()
        """host / port / portrange primitives appended to a buffer."""

        self.operators_emitted: Counter = Counter()
        """and / or / not operators appended to a buffer."""

        self.groups_closed: Counter = Counter()
        """Successful group() calls."""

        self.checkpoints: Counter = Counter()
        """Buffers pushed onto a stack, by end() or group()."""

        self.argument_errors: Counter = Counter()
        """Primitives rejected by validation."""

        self.state_errors: Counter = Counter()
        """group() / end() calls on an empty buffer."""

        # --- Command assembly ---
        self.commands_compiled: Counter = Counter()
        """tcpdump command lines produced."""

    def as_dict(self) -> dict:
        """Return all counters as a plain dict (safe for JSON serialisation)."""
        return {
            "primitives_emitted": self.primitives_emitted.value,
            "operators_emitted": self.operators_emitted.value,
            "groups_closed": self.groups_closed.value,
            "checkpoints": self.checkpoints.value,
            "argument_errors": self.argument_errors.value,
            "state_errors": self.state_errors.value,
            "commands_compiled": self.commands_compiled.value,
        }

    def reset_all(self) -> None:
        """Reset every counter to zero (useful in tests)."""
        for attr in vars(self).values():
            if isinstance(attr, Counter):
                attr.reset()


# Module-level singleton — import from here everywhere
METRICS = Metrics()
