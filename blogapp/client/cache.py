"""Keyed stale-while-revalidate cache with optimistic mutations.

Each entry keeps the last *confirmed* value (what the server said) apart from
an optional *pending* value (an optimistic guess applied before the network
call returns). Readers see the pending value while one exists, so dropping it
restores the confirmed state exactly.
"""

import asyncio
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, Hashable, List, Optional

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Any]]
Listener = Callable[[Hashable, Any], None]
# (error, key, retry_count) -> delay in seconds before the next attempt, or None to give up
RetryPolicy = Callable[[Exception, Hashable, int], Optional[float]]

_MISSING = object()


class CacheEntry:
    """State of one cache key."""

    def __init__(self):
        self.confirmed: Any = None
        self.pending: Any = _MISSING
        self.error: Optional[Exception] = None
        self.is_validating: bool = False

    @property
    def has_pending(self) -> bool:
        return self.pending is not _MISSING

    @property
    def data(self) -> Any:
        return self.pending if self.has_pending else self.confirmed


class SWRCache:
    """
    In-memory cache shared by the data hooks.

    Mutations of one key are serialized by a per-key ``asyncio.Lock``;
    revalidation does not take the lock.
    """

    def __init__(self):
        self._entries: Dict[Hashable, CacheEntry] = {}
        self._fetchers: Dict[Hashable, Fetcher] = {}
        self._retry_policies: Dict[Hashable, RetryPolicy] = {}
        self._locks: Dict[Hashable, asyncio.Lock] = {}
        self._listeners: Dict[Hashable, List[Listener]] = defaultdict(list)

    # ----- Registration and reads -----
    def register(
        self,
        key: Hashable,
        fetcher: Fetcher,
        on_error_retry: Optional[RetryPolicy] = None,
    ) -> None:
        """Attach the fetcher (and optional retry policy) used to revalidate ``key``."""
        self._fetchers[key] = fetcher
        if on_error_retry is not None:
            self._retry_policies[key] = on_error_retry
        else:
            self._retry_policies.pop(key, None)

    def entry(self, key: Hashable) -> CacheEntry:
        if key not in self._entries:
            self._entries[key] = CacheEntry()
        return self._entries[key]

    def get(self, key: Hashable, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None or entry.data is None:
            return default
        return entry.data

    def set(self, key: Hashable, data: Any) -> None:
        """Store a confirmed value, dropping any pending one."""
        entry = self.entry(key)
        entry.confirmed = data
        entry.pending = _MISSING
        entry.error = None
        self._notify(key)

    def subscribe(self, key: Hashable, listener: Listener) -> Callable[[], None]:
        """Call ``listener(key, data)`` on every change of ``key``; returns an unsubscribe function."""
        self._listeners[key].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[key]:
                self._listeners[key].remove(listener)

        return unsubscribe

    def _notify(self, key: Hashable) -> None:
        data = self.entry(key).data
        for listener in list(self._listeners.get(key, ())):
            listener(key, data)

    def _lock(self, key: Hashable) -> asyncio.Lock:
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    # ----- Revalidation -----
    async def revalidate(self, key: Hashable, *, raise_on_error: bool = True) -> Any:
        """
        Re-fetch ``key`` from its fetcher and store the result as confirmed.

        Failed fetches are retried while the key's retry policy returns a
        delay. The final error is kept on the entry and, unless
        ``raise_on_error`` is false, re-raised.

        Returns:
            The fetched data, or the cached data if the fetch failed quietly
            or no fetcher is registered.
        """
        fetcher = self._fetchers.get(key)
        if fetcher is None:
            return self.get(key)

        entry = self.entry(key)
        entry.is_validating = True
        retry_count = 0
        try:
            while True:
                try:
                    data = await fetcher()
                except Exception as e:
                    policy = self._retry_policies.get(key)
                    delay = policy(e, key, retry_count) if policy is not None else None
                    if delay is None:
                        logger.warning(f"Revalidation of {key!r} failed: {e}")
                        entry.error = e
                        self._notify(key)
                        if raise_on_error:
                            raise
                        return self.get(key)
                    retry_count += 1
                    logger.info(f"Retrying {key!r} in {delay}s (attempt {retry_count}): {e}")
                    await asyncio.sleep(delay)
                    continue

                entry.confirmed = data
                if not self._lock(key).locked():
                    # A guess left behind by an interrupted mutation
                    entry.pending = _MISSING
                entry.error = None
                self._notify(key)
                return data
        finally:
            entry.is_validating = False

    # ----- Mutation -----
    async def mutate(
        self,
        key: Hashable,
        mutation: Callable[[Any], Awaitable[Any]],
        *,
        optimistic_data: Any = _MISSING,
        rollback_on_error: bool = True,
        populate_cache: bool = True,
        revalidate: bool = True,
    ) -> Any:
        """
        Apply an optimistic update, run ``mutation`` and settle the entry.

        ``optimistic_data`` is either the next value or a function of the
        current confirmed value. It is applied (and subscribers notified)
        before ``mutation(current)`` is awaited. On success the value returned
        by ``mutation`` becomes the confirmed value when ``populate_cache`` is
        set. On failure the pending value is dropped when
        ``rollback_on_error`` is set, restoring the previous state exactly,
        and the error is re-raised. A cancelled mutation drops the pending
        value the same way. The key is revalidated afterwards when
        ``revalidate`` is set.
        """
        async with self._lock(key):
            entry = self.entry(key)
            current = entry.confirmed

            try:
                if optimistic_data is not _MISSING:
                    entry.pending = optimistic_data(current) if callable(optimistic_data) else optimistic_data
                    self._notify(key)
                result = await mutation(current)
            except Exception as e:
                self._drop_pending(entry, rollback_on_error)
                entry.error = e
                self._notify(key)
                logger.warning(f"Mutation of {key!r} failed: {e}")
                if revalidate:
                    await self.revalidate(key, raise_on_error=False)
                raise
            else:
                if populate_cache:
                    entry.confirmed = result
                self._drop_pending(entry, rollback_on_error=not populate_cache)
                entry.error = None
                self._notify(key)
            finally:
                # Cancellation skips both branches above
                if entry.has_pending:
                    self._drop_pending(entry, rollback_on_error)

            if revalidate:
                await self.revalidate(key, raise_on_error=False)
            return result

    @staticmethod
    def _drop_pending(entry: CacheEntry, rollback_on_error: bool) -> None:
        """Discard the pending value, or keep it as confirmed when not rolling back."""
        if entry.has_pending and not rollback_on_error:
            entry.confirmed = entry.pending
        entry.pending = _MISSING
