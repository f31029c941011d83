"""netreach - Network reachability status and change notifications."""

__version__ = "0.1.0"
__author__ = "netreach contributors"
__description__ = "Reports whether a host, address or the internet is reachable, and over which link"

from netreach.core.constants import REACHABILITY_CHANGED_NOTIFICATION
from netreach.core.types import ReachabilityFlags, ReachabilityStatus, ReachabilityTarget, TargetKind
from netreach.services.notification_center import Notification, NotificationCenter
from netreach.services.reachability_monitor import ReachabilityMonitor
from netreach.services.scheduling import get_main_loop, set_main_loop

__all__ = [
    "REACHABILITY_CHANGED_NOTIFICATION",
    "Notification",
    "NotificationCenter",
    "ReachabilityFlags",
    "ReachabilityMonitor",
    "ReachabilityStatus",
    "ReachabilityTarget",
    "TargetKind",
    "get_main_loop",
    "set_main_loop",
    "__version__",
]
