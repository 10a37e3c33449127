"""Per-command, per-user cooldown bookkeeping."""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Hashable

DEFAULT_SWEEP_THRESHOLD = 256


class CooldownTracker:
    """
    Remember when each user may next run each rate-limited command.

    Entries expire lazily: any read that finds an expired entry drops it, and
    :meth:`record` sweeps a command's bucket once it holds at least
    ``sweep_threshold`` users, so one-time users do not accumulate. Timestamps
    come from ``clock`` (``time.monotonic`` by default) and are absolute
    expiry times in seconds.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        sweep_threshold: int = DEFAULT_SWEEP_THRESHOLD,
        logger: logging.Logger | None = None,
    ) -> None:
        self._clock = clock
        self._sweep_threshold = sweep_threshold
        self._log = logger or logging.getLogger(__name__)
        self._expiries: Dict[str, Dict[Hashable, float]] = {}

    def check(self, command_name: str, user_id: Hashable, cooldown_seconds: float) -> float | None:
        """
        Return ``None`` when the user may run the command, otherwise the
        remaining wait in seconds (always positive).

        ``cooldown_seconds`` is accepted for symmetry with :meth:`record`; the
        stored expiry already reflects the window that was active when the
        entry was written.
        """

        now = self._clock()
        expiry = self._live_expiry(command_name, user_id, now)
        if expiry is None:
            return None
        return expiry - now

    def record(self, command_name: str, user_id: Hashable, cooldown_seconds: float) -> float:
        """Start (or restart) the window for ``user_id`` and return its expiry."""

        now = self._clock()
        bucket = self._expiries.setdefault(command_name, {})
        if len(bucket) >= self._sweep_threshold:
            self._sweep(bucket, now)
        expiry = now + float(cooldown_seconds)
        bucket[user_id] = expiry
        self._log.debug(
            "Cooldown for %s/%s set to expire in %.1fs", command_name, user_id, cooldown_seconds
        )
        return expiry

    def expiry(self, command_name: str, user_id: Hashable) -> float | None:
        """Return the live expiry for the pair, dropping it if it has passed."""

        return self._live_expiry(command_name, user_id, self._clock())

    def prune(self) -> int:
        """Drop every expired entry and return how many were removed."""

        now = self._clock()
        removed = 0
        for name in list(self._expiries):
            bucket = self._expiries[name]
            removed += self._sweep(bucket, now)
            if not bucket:
                del self._expiries[name]
        return removed

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._expiries.values())

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        command_name, user_id = key
        return self.expiry(command_name, user_id) is not None

    def _live_expiry(self, command_name: str, user_id: Hashable, now: float) -> float | None:
        bucket = self._expiries.get(command_name)
        if not bucket:
            return None
        expiry = bucket.get(user_id)
        if expiry is None:
            return None
        if expiry <= now:
            del bucket[user_id]
            if not bucket:
                del self._expiries[command_name]
            return None
        return expiry

    @staticmethod
    def _sweep(bucket: Dict[Hashable, float], now: float) -> int:
        stale = [user for user, expiry in bucket.items() if expiry <= now]
        for user in stale:
            del bucket[user]
        return len(stale)


__all__ = ["CooldownTracker", "DEFAULT_SWEEP_THRESHOLD"]
