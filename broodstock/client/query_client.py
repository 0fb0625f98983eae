"""
In-process query cache for the dashboard client.

Results are stored per query key with the time they were fetched. A cached
result is served while it is younger than ``stale_time``; after that (or
once invalidated) the next read refetches. Entries with no observers are
dropped by ``garbage_collect`` once they have been inactive for ``gc_time``.

At most one fetch per key is in flight: concurrent readers of the same key
wait on the running fetch and get its result (or its exception).

Invalidating a key bumps its generation and detaches the running fetch, so
the next read starts over. A detached fetch still answers the readers that
joined it but never writes to the cache.

Expired entries are collected lazily from ``fetch_query`` and ``unmount``,
at most once per ``gc_interval``.
"""
import logging
import threading
import time
from concurrent.futures import Future

from .query_keys import matches_key, normalize_key

logger = logging.getLogger(__name__)

# Defaults (in seconds)
DEFAULT_STALE_TIME = 5 * 60  # 5 minutes
DEFAULT_GC_TIME = 10 * 60  # 10 minutes
MAX_QUERY_ATTEMPTS = 3
MAX_RETRY_DELAY = 30
DEFAULT_GC_INTERVAL = 60


def default_retry(failure_count, error):
    """
    Retry unless the error carries a 4xx status other than 401, and stop
    once ``failure_count`` (failures so far, starting at 1) reaches the cap.
    """
    status = getattr(error, 'status', None)
    if status is not None and 400 <= status < 500 and status != 401:
        return False
    return failure_count < MAX_QUERY_ATTEMPTS


def default_retry_delay(attempt_index):
    """Exponential backoff: 1s, 2s, 4s ... capped at 30s"""
    return min(1.0 * 2 ** attempt_index, MAX_RETRY_DELAY)


class QueryState:
    """Cached state of one query key"""

    def __init__(self, key, created_at):
        self.key = key
        self.data = None
        self.error = None
        self.updated_at = None
        self.error_updated_at = None
        self.is_invalidated = False
        self.fetch_count = 0
        self.generation = 0
        self.failure_count = 0
        self.observers = 0
        self.query_fn = None
        self.inactive_since = created_at

    @property
    def status(self):
        if self.updated_at is not None:
            return 'success'
        if self.error is not None:
            return 'error'
        return 'pending'

    def has_data(self):
        return self.updated_at is not None

    def is_stale(self, stale_time, now):
        if not self.has_data() or self.is_invalidated:
            return True
        return now - self.updated_at >= stale_time

    def __repr__(self):
        return f"<QueryState {self.key!r} status={self.status} observers={self.observers}>"


class QueryClient:
    """
    Shared query cache.

    Args:
        stale_time: seconds a result stays fresh
        gc_time: seconds an unobserved entry is kept
        gc_interval: minimum seconds between lazy collections
        retry: ``retry(failure_count, error) -> bool`` for queries
        retry_delay: ``retry_delay(attempt_index) -> seconds``
        refetch_on_window_focus / refetch_on_mount: observer refetch triggers
        on_query_error / on_mutation_error: error hooks (default: log)
        clock / sleep: injectable time sources
    """

    def __init__(self, stale_time=DEFAULT_STALE_TIME, gc_time=DEFAULT_GC_TIME,
                 gc_interval=DEFAULT_GC_INTERVAL,
                 retry=default_retry, retry_delay=default_retry_delay,
                 refetch_on_window_focus=False, refetch_on_mount=True,
                 on_query_error=None, on_mutation_error=None,
                 clock=time.monotonic, sleep=time.sleep):
        self.stale_time = stale_time
        self.gc_time = gc_time
        self.gc_interval = gc_interval
        self.retry = retry
        self.retry_delay = retry_delay
        self.refetch_on_window_focus = refetch_on_window_focus
        self.refetch_on_mount = refetch_on_mount
        self._on_query_error = on_query_error or self._log_query_error
        self._on_mutation_error = on_mutation_error or self._log_mutation_error
        self._clock = clock
        self._sleep = sleep

        self._lock = threading.RLock()
        self._queries = {}
        self._in_flight = {}
        self._last_gc = clock()

    # ==================== ERROR HOOKS ====================

    @staticmethod
    def _log_query_error(error, key):
        logger.error(f"Query error: {error} Query key: {key!r}")

    @staticmethod
    def _log_mutation_error(error, variables):
        logger.error(f"Mutation error: {error} Variables: {variables!r}")

    # ==================== STATE ACCESS ====================

    def _get_or_create(self, key):
        state = self._queries.get(key)
        if state is None:
            state = QueryState(key, self._clock())
            self._queries[key] = state
        return state

    def get_query_state(self, key):
        with self._lock:
            return self._queries.get(normalize_key(key))

    def get_query_data(self, key):
        state = self.get_query_state(key)
        return state.data if state and state.has_data() else None

    def set_query_data(self, key, data):
        """Write a result directly; ``data`` may be a callable taking the old value"""
        key = normalize_key(key)
        with self._lock:
            state = self._get_or_create(key)
            if callable(data):
                data = data(state.data)
            state.data = data
            state.error = None
            state.updated_at = self._clock()
            state.is_invalidated = False
        return data

    def find_queries(self, key_filter=None):
        with self._lock:
            return [state for key, state in self._queries.items() if matches_key(key, key_filter)]

    def is_fetching(self, key_filter=None):
        """Number of in-flight fetches matching ``key_filter``"""
        with self._lock:
            return sum(1 for key in self._in_flight if matches_key(key, key_filter))

    # ==================== FETCHING ====================

    def fetch_query(self, key, query_fn, stale_time=None):
        """
        Return the cached result for ``key`` if fresh, else fetch it.

        Joins an in-flight fetch for the same key instead of starting a
        second one. Raises the final error once retries are exhausted.
        """
        key = normalize_key(key)
        stale_time = self.stale_time if stale_time is None else stale_time
        self._collect_if_due()

        with self._lock:
            state = self._get_or_create(key)
            if state.query_fn is None:
                state.query_fn = query_fn
            if not state.is_stale(stale_time, self._clock()):
                logger.debug(f"Query cache HIT for {key!r}")
                return state.data

            future = self._in_flight.get(key)
            owner = future is None
            if owner:
                logger.debug(f"Query cache MISS for {key!r}")
                future = Future()
                self._in_flight[key] = future
                generation = state.generation
            else:
                logger.debug(f"Joining in-flight fetch for {key!r}")

        if owner:
            self._run_fetch(key, query_fn, future, generation)
        return future.result()

    def prefetch_query(self, key, query_fn, stale_time=None):
        """Like fetch_query but never raises; errors are already reported by the hook"""
        try:
            self.fetch_query(key, query_fn, stale_time=stale_time)
        except Exception as e:
            logger.debug(f"Prefetch failed for {normalize_key(key)!r}: {e}")

    def _is_current(self, key, future, generation):
        state = self._queries.get(key)
        return (
            state is not None
            and state.generation == generation
            and self._in_flight.get(key) is future
        )

    def _run_fetch(self, key, query_fn, future, generation):
        failure_count = 0
        try:
            while True:
                try:
                    data = query_fn()
                except Exception as error:
                    failure_count += 1
                    if not self.retry(failure_count, error):
                        raise
                    delay = self.retry_delay(failure_count - 1)
                    logger.warning(
                        f"Query {key!r} failed (attempt {failure_count}): {error}; retrying in {delay}s"
                    )
                    self._sleep(delay)
                else:
                    break
        except Exception as error:
            with self._lock:
                if self._is_current(key, future, generation):
                    state = self._queries[key]
                    state.error = error
                    state.error_updated_at = self._clock()
                    state.failure_count = failure_count
                    state.fetch_count += 1
                    del self._in_flight[key]
            self._on_query_error(error, key)
            future.set_exception(error)
            return

        with self._lock:
            if self._is_current(key, future, generation):
                state = self._queries[key]
                state.data = data
                state.error = None
                state.updated_at = self._clock()
                state.is_invalidated = False
                state.failure_count = failure_count
                state.fetch_count += 1
                del self._in_flight[key]
            else:
                logger.debug(f"Discarding result of superseded fetch for {key!r}")
        future.set_result(data)

    # ==================== OBSERVERS ====================

    def mount(self, key, query_fn):
        """
        Register an observer (a view using ``key``). Fetches when the entry
        is stale and refetch_on_mount is set, or when nothing is cached yet.
        """
        key = normalize_key(key)
        with self._lock:
            state = self._get_or_create(key)
            state.observers += 1
            state.query_fn = query_fn
            state.inactive_since = None
            should_fetch = not state.has_data() or (
                self.refetch_on_mount and state.is_stale(self.stale_time, self._clock())
            )
        if should_fetch:
            self.prefetch_query(key, query_fn, stale_time=0)
        return self.get_query_data(key)

    def unmount(self, key):
        key = normalize_key(key)
        with self._lock:
            state = self._queries.get(key)
            if state is None or state.observers == 0:
                return
            state.observers -= 1
            if state.observers == 0:
                state.inactive_since = self._clock()
        self._collect_if_due()

    def on_window_focus(self):
        """Refetch stale observed queries, if enabled; returns how many were refetched"""
        if not self.refetch_on_window_focus:
            return 0
        now = self._clock()
        active = [s for s in self.find_queries() if s.observers and s.is_stale(self.stale_time, now)]
        for state in active:
            self.prefetch_query(state.key, state.query_fn, stale_time=0)
        return len(active)

    # ==================== INVALIDATION ====================

    def invalidate_queries(self, key_filter=None):
        """
        Mark every entry matching ``key_filter`` (prefix match, None = all)
        as invalidated and refetch the ones that have observers. A fetch
        already running for a matched key is superseded, not joined.
        Returns the number of entries invalidated.
        """
        with self._lock:
            matched = [state for key, state in self._queries.items() if matches_key(key, key_filter)]
            for state in matched:
                state.is_invalidated = True
                state.generation += 1
                self._in_flight.pop(state.key, None)
            active = [state for state in matched if state.observers and state.query_fn]

        logger.info(
            f"Invalidated {len(matched)} queries matching {key_filter!r} ({len(active)} active, refetching)"
        )
        for state in active:
            self.prefetch_query(state.key, state.query_fn)
        return len(matched)

    def remove_queries(self, key_filter=None):
        with self._lock:
            doomed = [key for key in self._queries if matches_key(key, key_filter)]
            for key in doomed:
                del self._queries[key]
                self._in_flight.pop(key, None)
        if doomed:
            logger.debug(f"Removed {len(doomed)} queries matching {key_filter!r}")
        return len(doomed)

    def garbage_collect(self, now=None):
        """Drop unobserved entries that have been inactive for gc_time"""
        now = self._clock() if now is None else now
        with self._lock:
            expired = [
                key for key, state in self._queries.items()
                if state.observers == 0
                and key not in self._in_flight
                and state.inactive_since is not None
                and now - state.inactive_since >= self.gc_time
            ]
            for key in expired:
                del self._queries[key]
        if expired:
            logger.debug(f"Garbage collected {len(expired)} inactive queries")
        return len(expired)

    def _collect_if_due(self):
        now = self._clock()
        with self._lock:
            if now - self._last_gc < self.gc_interval:
                return
            self._last_gc = now
        self.garbage_collect(now)

    def clear(self):
        with self._lock:
            self._queries.clear()
            self._in_flight.clear()

    # ==================== MUTATIONS ====================

    def execute_mutation(self, mutation_fn, *args, on_success=None, **kwargs):
        """
        Run a write once (mutations are never retried). ``on_success`` gets
        the result, typically to invalidate related queries.
        """
        try:
            result = mutation_fn(*args, **kwargs)
        except Exception as error:
            self._on_mutation_error(error, args or kwargs)
            raise
        if on_success is not None:
            on_success(result)
        return result
