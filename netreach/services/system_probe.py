"""
System Reachability Probe - Reachability flags from the host's network state.

Derives SCNetworkReachability-style flags from the interface table (psutil)
and the kernel's routing decision. Routing is queried with an unconnected UDP
socket: connect() only selects a route, no packet leaves the host.

Change detection re-evaluates the flags on the registering event loop and
reports only actual changes. No threads are started.
"""

import asyncio
import ipaddress
import re
import socket
import weakref
from typing import Callable, Optional, Union

from loguru import logger

from netreach.core.constants import (
    INTERNET_PROBE_HOST,
    INTERNET_PROBE_PORT,
    POLL_INTERVAL,
)
from netreach.core.types import ReachabilityFlags, ReachabilityTarget, TargetKind
from netreach.utils.network_interface import IPAddress, NetworkInterfaceDetector

F = ReachabilityFlags

MAX_HOSTNAME_LENGTH = 253
_HOSTNAME_LABEL = re.compile(r"^(?!-)[A-Za-z0-9_-]{1,63}(?<!-)$")
_FALLBACK_INTERNET_HOST = "8.8.8.8"

AddressLike = Union[str, ipaddress.IPv4Address, ipaddress.IPv6Address, tuple]


def is_valid_hostname(name) -> bool:
    """Check host name syntax (RFC 1123 labels, trailing dot allowed)."""
    if not isinstance(name, str) or not name:
        return False
    if name.endswith("."):
        name = name[:-1]
    if not name or len(name) > MAX_HOSTNAME_LENGTH:
        return False
    return all(_HOSTNAME_LABEL.match(label) for label in name.split("."))


def parse_address(address: AddressLike) -> Optional[IPAddress]:
    """
    Normalize an address argument.

    Args:
        address: IP string, ipaddress object, or socket address tuple
                 ``(host, port)`` / ``(host, port, flowinfo, scope_id)``

    Returns:
        ipaddress object, or None if malformed
    """
    if isinstance(address, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return address
    if isinstance(address, tuple):
        if not address:
            return None
        address = address[0]
    if not isinstance(address, str):
        return None
    try:
        return ipaddress.ip_address(address.split("%", 1)[0])
    except ValueError:
        return None


def _weak_callable(callback: Callable) -> Callable[[], Optional[Callable]]:
    """Weak reference for bound methods, strong reference otherwise."""
    if hasattr(callback, "__self__") and hasattr(callback, "__func__"):
        return weakref.WeakMethod(callback)
    return lambda: callback


class SystemReachabilityProbe:
    """
    Reachability of one target as seen by the local host.

    Use ``SystemReachabilityProbe.create(target)``; it returns None for
    malformed targets instead of raising.
    """

    def __init__(
        self,
        target: ReachabilityTarget,
        destination: Optional[IPAddress] = None,
        poll_interval: float = POLL_INTERVAL,
    ):
        self._target = target
        self._destination = destination
        self._poll_interval = poll_interval

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._handle: Optional[asyncio.TimerHandle] = None
        self._callback_ref = None
        self._last_flags: Optional[ReachabilityFlags] = None
        self._generation = 0

    @classmethod
    def create(cls, target: ReachabilityTarget) -> Optional["SystemReachabilityProbe"]:
        """Allocate a probe for target, or None if the target is malformed."""
        if target.kind is TargetKind.HOSTNAME:
            if not is_valid_hostname(target.host):
                logger.warning(f"[SystemProbe] Invalid host name: {target.host!r}")
                return None
            return cls(target)

        if target.kind is TargetKind.ADDRESS:
            destination = parse_address(target.host)
            if destination is None:
                logger.warning(f"[SystemProbe] Invalid address: {target.host!r}")
                return None
            return cls(target, destination)

        if target.kind is TargetKind.INTERNET:
            return cls(target, cls._internet_destination())

        return cls(target)

    @property
    def target(self) -> ReachabilityTarget:
        return self._target

    @property
    def is_registered(self) -> bool:
        return self._loop is not None

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------

    def query_flags(self) -> Optional[ReachabilityFlags]:
        """
        Compute the current reachability flags.

        Returns:
            Flags (possibly empty), or None if the network state is unreadable
        """
        try:
            if self._target.kind is TargetKind.LOCAL_WIFI:
                return self._local_wifi_flags()
            if self._target.kind is TargetKind.HOSTNAME:
                return self._hostname_flags()
            return self._route_flags(self._destination)
        except OSError as e:
            logger.debug(f"[SystemProbe] Cannot query flags for {self._target}: {e}")
            return None

    def _hostname_flags(self) -> ReachabilityFlags:
        try:
            infos = socket.getaddrinfo(self._target.host, None, type=socket.SOCK_DGRAM)
        except socket.gaierror as e:
            logger.debug(f"[SystemProbe] Resolver has no address for {self._target.host}: {e}")
            return F(0)

        flags = F(0)
        for info in infos:
            destination = parse_address(info[4])
            if destination is None:
                continue
            flags = self._route_flags(destination)
            if flags & F.REACHABLE:
                break
        return flags

    def _route_flags(self, destination: IPAddress) -> ReachabilityFlags:
        interfaces = NetworkInterfaceDetector.get_interfaces()

        if NetworkInterfaceDetector.find_owner(destination, interfaces) is not None:
            return F.REACHABLE | F.IS_LOCAL_ADDRESS | F.IS_DIRECT

        source = self._route_source(destination)
        if source is None:
            return F(0)

        flags = F.REACHABLE
        egress = NetworkInterfaceDetector.find_owner(source, interfaces)
        if egress is None:
            # Route exists but the interface table lags behind
            return flags

        if egress.is_on_link(destination):
            flags |= F.IS_DIRECT
        if egress.is_wwan:
            flags |= F.IS_WWAN
        if egress.is_dialup:
            flags |= F.TRANSIENT_CONNECTION
        if not egress.is_up:
            flags |= F.CONNECTION_REQUIRED
            if egress.is_dialup:
                flags |= F.CONNECTION_ON_DEMAND
        return flags

    @staticmethod
    def _route_source(destination: IPAddress) -> Optional[IPAddress]:
        """Local address the kernel would use to reach destination, None if unroutable."""
        family = socket.AF_INET6 if destination.version == 6 else socket.AF_INET
        try:
            with socket.socket(family, socket.SOCK_DGRAM) as sock:
                sock.connect((str(destination), INTERNET_PROBE_PORT))
                source = sock.getsockname()[0]
        except OSError as e:
            logger.debug(f"[SystemProbe] No route to {destination}: {e}")
            return None

        address = parse_address(source)
        if address is None or address.is_unspecified:
            return None
        return address

    @staticmethod
    def _local_wifi_flags() -> ReachabilityFlags:
        interfaces = NetworkInterfaceDetector.get_interfaces().values()
        candidates = [i for i in interfaces if i.is_up and i.has_ipv4 and not (i.is_loopback or i.is_virtual)]

        if any(not i.is_wwan for i in candidates):
            return F.REACHABLE | F.IS_DIRECT
        if candidates:
            return F.REACHABLE | F.IS_WWAN
        return F(0)

    @staticmethod
    def _internet_destination() -> IPAddress:
        destination = parse_address(INTERNET_PROBE_HOST)
        if destination is None:
            logger.warning(
                f"[SystemProbe] NETREACH_INTERNET_PROBE_HOST={INTERNET_PROBE_HOST!r} is not an IP address, "
                f"using {_FALLBACK_INTERNET_HOST}"
            )
            destination = ipaddress.ip_address(_FALLBACK_INTERNET_HOST)
        return destination

    # ------------------------------------------------------------------
    # Change detection
    # ------------------------------------------------------------------

    def register(self, callback: Callable[[ReachabilityFlags], None], loop: asyncio.AbstractEventLoop) -> bool:
        """
        Deliver flag changes to callback on loop.

        Bound methods are held weakly: once their owner is collected the
        registration ends by itself.

        Returns:
            False if already registered or the loop is closed
        """
        if self._loop is not None:
            logger.warning(f"[SystemProbe] Already registered for {self._target}")
            return False
        if loop.is_closed():
            logger.warning("[SystemProbe] Cannot register on a closed event loop")
            return False

        self._generation += 1
        self._loop = loop
        self._callback_ref = _weak_callable(callback)
        self._last_flags = self.query_flags()
        self._handle = loop.call_later(self._poll_interval, self._poll)

        logger.debug(f"[SystemProbe] Registered {self._target} (interval={self._poll_interval}s)")
        return True

    def unregister(self) -> None:
        """Stop delivering changes. Safe to call when not registered."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._loop = None
        self._callback_ref = None
        self._generation += 1

    def _poll(self):
        generation = self._generation
        self._handle = None

        callback = self._callback_ref() if self._callback_ref else None
        if callback is None:
            logger.debug(f"[SystemProbe] Owner of {self._target} is gone, unregistering")
            self.unregister()
            return

        flags = self.query_flags()
        if flags != self._last_flags:
            self._last_flags = flags
            try:
                callback(flags if flags is not None else F(0))
            except Exception as e:
                logger.error(f"[SystemProbe] Change callback error: {e}")

        # The callback may have unregistered or re-registered
        if generation == self._generation and self._loop is not None and not self._loop.is_closed():
            self._handle = self._loop.call_later(self._poll_interval, self._poll)
