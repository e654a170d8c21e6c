import hashlib
import logging
import threading
import time

logger = logging.getLogger(__name__)


class RateLimitExceeded(Exception):
    def __init__(self, client_id, retry_after):
        super().__init__(f"Rate limit exceeded for {client_id}")
        self.client_id = client_id
        self.retry_after = retry_after


class _Entry:
    __slots__ = ("count", "window_start", "lock")

    def __init__(self, now):
        self.count = 0
        self.window_start = now
        self.lock = threading.Lock()


class RateLimiter:
    """Fixed window per client that resets once the window has elapsed.

    The counter starts when a client is first seen (or after a reset), so a
    client can land up to ``max_requests`` right before and again right after
    a boundary. Entries idle for ``idle_seconds`` are dropped by the sweep.
    """

    def __init__(
        self,
        max_requests=100,
        window_seconds=60,
        retry_after=60,
        idle_seconds=600,
        sweep_seconds=300,
        clock=time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.retry_after = retry_after
        self.idle_seconds = idle_seconds
        self.sweep_seconds = sweep_seconds
        self.clock = clock

        self._entries = {}
        self._table_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread = None

    @staticmethod
    def client_identity(remote_addr, forwarded_for=None, user_agent=None):
        ip = (forwarded_for or "").split(",")[0].strip() or remote_addr or "unknown"
        ua_hash = hashlib.sha256((user_agent or "").encode("utf-8")).hexdigest()[:16]
        return f"{ip}:{ua_hash}"

    def hit(self, client_id):
        """Count one request; raise RateLimitExceeded when over the limit."""
        now = self.clock()
        with self._table_lock:
            entry = self._entries.get(client_id)
            if entry is None:
                entry = self._entries[client_id] = _Entry(now)

        with entry.lock:
            if now - entry.window_start > self.window_seconds:
                entry.count = 0
                entry.window_start = now
            entry.count += 1
            count = entry.count

        if count > self.max_requests:
            logger.warning("Rate limit exceeded for client %s (%d requests)", client_id, count)
            raise RateLimitExceeded(client_id, self.retry_after)
        return count

    def sweep(self):
        """Drop entries whose window started more than idle_seconds ago."""
        cutoff = self.clock() - self.idle_seconds
        with self._table_lock:
            stale = [key for key, entry in self._entries.items() if entry.window_start < cutoff]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug("Rate limiter evicted %d idle clients", len(stale))
        return len(stale)

    def __len__(self):
        with self._table_lock:
            return len(self._entries)

    # ------------------------------------------------------------ background

    def start(self):
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="rate-limit-sweep", daemon=True)
        self._thread.start()

    def stop(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1)
            self._thread = None

    def _run(self):
        while not self._stop.wait(self.sweep_seconds):
            try:
                self.sweep()
            except Exception:
                logger.exception("Rate limiter sweep failed")
