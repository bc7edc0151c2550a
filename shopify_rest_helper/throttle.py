"""Per-shop REST call-limit controller."""
from __future__ import annotations
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Optional

from .scope import require_session

CALL_LIMIT_HEADER = "X-Shopify-Shop-Api-Call-Limit"

logger = logging.getLogger(__name__)


@dataclass
class ThrottleController:
    """Thread-safe leaky bucket mirroring Shopify's REST call limit.

    Shopify reports the bucket after every call in the
    ``X-Shopify-Shop-Api-Call-Limit`` header as ``used/limit``. The controller
    trusts those numbers, refills at ``restore_rate`` in between, and makes
    callers wait while fewer than ``min_bucket`` calls are available. One
    controller is shared by every thread acting on the same shop.

    Attributes:
        available: Calls that can be made right now
        restore_rate: Calls restored per second (leak rate, must be > 0)
        max_available: Size of the bucket
        last_update: Timestamp of the last bucket update
    """

    available: float = 40.0
    restore_rate: float = 2.0     # calls per second
    max_available: float = 40.0

    last_update: float = field(default_factory=time.monotonic)

    # Stats
    total_calls: int = field(init=False, default=0)

    # Sync
    lock: threading.Lock = field(default_factory=threading.Lock)
    cond: threading.Condition = field(init=False)

    def __post_init__(self) -> None:
        self.cond = threading.Condition(self.lock)

    def __setattr__(self, name: str, value: Any) -> None:  # type: ignore[override]
        if name == "restore_rate" and float(value) <= 0:
            raise ValueError("restore_rate must be positive")
        super().__setattr__(name, value)

    def _refill(self) -> None:
        now = time.monotonic()
        elapsed = now - self.last_update
        if elapsed > 0:
            self.available = min(self.max_available, self.available + elapsed * self.restore_rate)
            self.last_update = now

    def before_request(self, min_bucket: int, min_sleep: float) -> None:
        """Block until ``min_bucket`` calls are available, then reserve one.

        Args:
            min_bucket: Calls that must be available before a request proceeds
            min_sleep: Minimum time to sleep when rate limited (in seconds)
        """
        if min_sleep < 0:
            min_sleep = 0.5

        with self.cond:
            while True:
                self._refill()
                if self.available >= min_bucket:
                    self.available -= 1
                    return

                sleep_time = max(min_sleep, (min_bucket - self.available) / self.restore_rate)
                logger.debug("Call limit reached, waiting %.2fs", sleep_time)
                # Wait releases the lock and reacquires it after timeout/notify
                self.cond.wait(timeout=sleep_time)

    def after_response(self, call_limit: Optional[str]) -> None:
        """Sync the bucket with the ``used/limit`` value Shopify returned.

        Malformed or missing values only bump the call counter.
        """
        with self.cond:
            self.total_calls += 1
            parsed = parse_call_limit(call_limit)
            if parsed is not None:
                used, limit = parsed
                self.max_available = float(limit)
                self.available = float(max(limit - used, 0))
                self.last_update = time.monotonic()
            self.cond.notify_all()

    @property
    def used(self) -> int:
        with self.lock:
            self._refill()
            return int(round(self.max_available - self.available))


def parse_call_limit(value: Optional[str]) -> Optional[tuple[int, int]]:
    if not value:
        return None
    used, sep, limit = value.partition("/")
    try:
        used_calls, limit_calls = int(used), int(limit)
    except ValueError:
        return None
    if not sep or limit_calls <= 0:
        return None
    return used_calls, limit_calls


MAX_TRACKED_SHOPS = 1024

# Least recently used shops are dropped first once MAX_TRACKED_SHOPS is reached.
_registry: "OrderedDict[str, ThrottleController]" = OrderedDict()
_registry_lock = threading.Lock()


def throttle_for(shop_domain: str) -> ThrottleController:
    """Return the controller shared by every caller acting on ``shop_domain``."""
    with _registry_lock:
        controller = _registry.get(shop_domain)
        if controller is None:
            controller = _registry[shop_domain] = ThrottleController()
            while len(_registry) > MAX_TRACKED_SHOPS:
                evicted, _ = _registry.popitem(last=False)
                logger.debug("Evicted call-limit tracking for %s", evicted)
        else:
            _registry.move_to_end(shop_domain)
        return controller


def evict_throttle(shop_domain: str) -> None:
    """Forget the call-limit state of ``shop_domain``, e.g. after uninstall."""
    with _registry_lock:
        _registry.pop(shop_domain, None)


def reset_throttles() -> None:
    with _registry_lock:
        _registry.clear()


def credit_used() -> int:
    """Calls used in the active session's shop bucket."""
    return throttle_for(require_session().shop_domain).used


def credit_limit() -> int:
    return int(throttle_for(require_session().shop_domain).max_available)


def credit_left() -> int:
    return credit_limit() - credit_used()


def credit_maxed() -> bool:
    return credit_left() <= 0
