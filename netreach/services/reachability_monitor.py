"""
Reachability Monitor - Reachability status of a target with change notifications.

Usage:
    monitor = ReachabilityMonitor.for_internet_connection()
    monitor.add_notification_callback(lambda m: print(m.current_status()))
    monitor.start_notifier()      # inside a running asyncio loop
    ...
    monitor.stop_notifier()

Every change is delivered two ways: the monitor's own callbacks, and a
REACHABILITY_CHANGED_NOTIFICATION broadcast on the NotificationCenter with
the monitor as sender.
"""

import asyncio
from typing import Callable, List, Optional

from loguru import logger

from netreach.core.classifier import connection_required, status_for_flags
from netreach.core.constants import REACHABILITY_CHANGED_NOTIFICATION
from netreach.core.protocols import ProbeFactory, ReachabilityProbe
from netreach.core.types import ReachabilityFlags, ReachabilityStatus, ReachabilityTarget, TargetKind
from netreach.services.notification_center import NotificationCenter
from netreach.services.scheduling import dispatch_on_main
from netreach.services.system_probe import AddressLike, SystemReachabilityProbe, parse_address

NotificationCallback = Callable[["ReachabilityMonitor"], None]


class ReachabilityMonitor:
    """
    Reports whether a target is reachable, and over which kind of link.

    Create instances with the ``for_*`` factories; they return None when the
    target cannot be allocated. ``invoke_notification_on_main`` moves callback
    delivery onto the loop registered with ``set_main_loop``.
    """

    def __init__(
        self,
        target: ReachabilityTarget,
        probe: ReachabilityProbe,
        notification_center: Optional[NotificationCenter] = None,
    ):
        self._target = target
        self._probe = probe
        self._center = notification_center

        self.invoke_notification_on_main = False
        self._callbacks: List[NotificationCallback] = []

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._notifying = False
        self._session = 0  # Bumped on start/stop to drop late deliveries

        self._status = self._classify(probe.query_flags())
        self._last_status = self._status
        self._has_transitioned = False

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def for_hostname(
        cls,
        name: str,
        probe_factory: Optional[ProbeFactory] = None,
        notification_center: Optional[NotificationCenter] = None,
    ) -> Optional["ReachabilityMonitor"]:
        """
        Monitor reachability of a host name.

        The name is resolved through the OS resolver on every query, including
        each change-detection pass on the notifier loop. A slow resolver blocks
        that loop for as long as the lookup takes.
        """
        return cls._create(ReachabilityTarget(TargetKind.HOSTNAME, name), probe_factory, notification_center)

    @classmethod
    def for_address(
        cls,
        address: AddressLike,
        probe_factory: Optional[ProbeFactory] = None,
        notification_center: Optional[NotificationCenter] = None,
    ) -> Optional["ReachabilityMonitor"]:
        """Monitor reachability of an IP address (string, ipaddress object or socket address tuple)."""
        parsed = parse_address(address)
        if parsed is None:
            logger.warning(f"[ReachabilityMonitor] Invalid address: {address!r}")
            return None
        return cls._create(ReachabilityTarget(TargetKind.ADDRESS, str(parsed)), probe_factory, notification_center)

    @classmethod
    def for_internet_connection(
        cls,
        probe_factory: Optional[ProbeFactory] = None,
        notification_center: Optional[NotificationCenter] = None,
    ) -> Optional["ReachabilityMonitor"]:
        """Monitor the default route. For applications not talking to one particular host."""
        return cls._create(ReachabilityTarget(TargetKind.INTERNET), probe_factory, notification_center)

    @classmethod
    def for_local_wifi(
        cls,
        probe_factory: Optional[ProbeFactory] = None,
        notification_center: Optional[NotificationCenter] = None,
    ) -> Optional["ReachabilityMonitor"]:
        """Monitor local WiFi reachability. Never reports WWAN."""
        return cls._create(ReachabilityTarget(TargetKind.LOCAL_WIFI), probe_factory, notification_center)

    @classmethod
    def _create(cls, target, probe_factory, notification_center):
        factory = probe_factory or SystemReachabilityProbe.create
        probe = factory(target)
        if probe is None:
            logger.warning(f"[ReachabilityMonitor] Cannot allocate probe for {target}")
            return None
        return cls(target, probe, notification_center)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def target(self) -> ReachabilityTarget:
        return self._target

    @property
    def is_notifying(self) -> bool:
        return self._notifying

    def current_flags(self) -> ReachabilityFlags:
        """Raw flags of the target; empty if they cannot be obtained."""
        flags = self._probe.query_flags()
        return flags if flags is not None else ReachabilityFlags(0)

    def current_status(self) -> ReachabilityStatus:
        """Query the probe and classify the result."""
        status = self._classify(self._probe.query_flags())
        self._record(status)
        return status

    def last_status(self) -> ReachabilityStatus:
        """Status held before the most recent transition; current status if none was seen."""
        status = self.current_status()
        return self._last_status if self._has_transitioned else status

    def connection_required(self) -> bool:
        """
        Whether a connection must be established first.

        WWAN may be available but inactive until a connection is made; WiFi
        may require one for VPN on demand.
        """
        return connection_required(self._probe.query_flags())

    def _classify(self, flags: Optional[ReachabilityFlags]) -> ReachabilityStatus:
        return status_for_flags(flags, local_wifi=self._target.is_local_wifi)

    def _record(self, status: ReachabilityStatus):
        if status == self._status:
            return
        self._last_status = self._status
        self._status = status
        self._has_transitioned = True
        logger.info(f"[ReachabilityMonitor] {self._target}: {self._last_status} → {status}")

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def add_notification_callback(self, callback: NotificationCallback):
        """Register a callback invoked with this monitor on every change (registration order)."""
        self._callbacks.append(callback)

    def start_notifier(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> bool:
        """
        Start delivering change notifications on loop (default: the running loop).

        Returns:
            False if already started, no usable loop, or the probe refused
            the registration
        """
        if self._notifying:
            logger.warning(f"[ReachabilityMonitor] Notifier already started for {self._target}")
            return False

        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.warning("[ReachabilityMonitor] start_notifier called without a running event loop")
                return False

        if loop.is_closed():
            logger.warning("[ReachabilityMonitor] start_notifier called with a closed event loop")
            return False

        # The probe baselines its flags at registration; start from the same state
        self._record(self._classify(self._probe.query_flags()))

        if not self._probe.register(self._on_flags_changed, loop):
            logger.warning(f"[ReachabilityMonitor] Probe refused registration for {self._target}")
            return False

        self._loop = loop
        self._notifying = True
        self._session += 1
        logger.info(f"[ReachabilityMonitor] Notifier started for {self._target}")
        return True

    def stop_notifier(self):
        """Stop delivering notifications, including ones already queued for the main loop."""
        if not self._notifying:
            return

        self._probe.unregister()
        self._loop = None
        self._notifying = False
        self._session += 1
        logger.info(f"[ReachabilityMonitor] Notifier stopped for {self._target}")

    def _on_flags_changed(self, flags: ReachabilityFlags):
        if not self._notifying:
            logger.debug("[ReachabilityMonitor] Suppressed change (stopped)")
            return

        self._record(self._classify(flags))
        self._emit()

    def _emit(self):
        session = self._session

        center = self._center or NotificationCenter.default()
        center.post(REACHABILITY_CHANGED_NOTIFICATION, self)

        if not self._callbacks:
            return

        if self.invoke_notification_on_main:
            if dispatch_on_main(self._invoke_callbacks, session):
                return
            logger.warning("[ReachabilityMonitor] No main loop registered, invoking callbacks in place")

        self._invoke_callbacks(session)

    def _invoke_callbacks(self, session: int):
        if session != self._session:
            logger.debug("[ReachabilityMonitor] Suppressed callbacks (notifier restarted or stopped)")
            return

        for callback in list(self._callbacks):
            try:
                callback(self)
            except Exception as e:
                logger.error(f"[ReachabilityMonitor] Notification callback error: {e}")

    def __repr__(self):
        state = "notifying" if self._notifying else "idle"
        return f"<ReachabilityMonitor {self._target} {self._status} {state}>"
