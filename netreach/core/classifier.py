"""Translation of raw reachability flags into a ReachabilityStatus."""
from typing import Optional

from netreach.core.types import ReachabilityFlags, ReachabilityStatus

F = ReachabilityFlags


def status_for_flags(flags: Optional[ReachabilityFlags], local_wifi: bool = False) -> ReachabilityStatus:
    """
    Classify reachability flags.

    Args:
        flags: Raw flags, or None when they could not be obtained
        local_wifi: Apply local WiFi filtering (never reports WWAN)

    Returns:
        One of the three ReachabilityStatus values
    """
    if flags is None or not flags & F.REACHABLE:
        return ReachabilityStatus.NOT_REACHABLE

    if local_wifi:
        # IS_DIRECT overrides the cellular marker for on-link destinations
        if flags & F.IS_WWAN and not flags & F.IS_DIRECT:
            return ReachabilityStatus.NOT_REACHABLE
        return ReachabilityStatus.REACHABLE_VIA_WIFI

    if not flags & F.CONNECTION_REQUIRED:
        return ReachabilityStatus.REACHABLE_VIA_WIFI

    if flags & (F.CONNECTION_ON_TRAFFIC | F.CONNECTION_ON_DEMAND) and not flags & F.INTERVENTION_REQUIRED:
        return ReachabilityStatus.REACHABLE_VIA_WIFI

    if flags & F.IS_WWAN:
        return ReachabilityStatus.REACHABLE_VIA_WWAN

    return ReachabilityStatus.REACHABLE_VIA_WIFI


def connection_required(flags: Optional[ReachabilityFlags]) -> bool:
    """True when traffic will not flow until a connection is established."""
    return bool(flags is not None and flags & F.CONNECTION_REQUIRED)
