"""Core types and enums."""
from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Optional


class ReachabilityStatus(Enum):
    """Simplified reachability of a target."""

    NOT_REACHABLE = 0
    REACHABLE_VIA_WIFI = 1
    REACHABLE_VIA_WWAN = 2

    def __str__(self):
        return self.name.lower()

    @property
    def is_reachable(self) -> bool:
        return self is not ReachabilityStatus.NOT_REACHABLE


class ReachabilityFlags(IntFlag):
    """Raw connectivity flags, bit-compatible with SCNetworkReachabilityFlags."""

    TRANSIENT_CONNECTION = 1 << 0
    REACHABLE = 1 << 1
    CONNECTION_REQUIRED = 1 << 2
    CONNECTION_ON_TRAFFIC = 1 << 3
    INTERVENTION_REQUIRED = 1 << 4
    CONNECTION_ON_DEMAND = 1 << 5
    IS_LOCAL_ADDRESS = 1 << 16
    IS_DIRECT = 1 << 17
    IS_WWAN = 1 << 18

    def describe(self) -> str:
        """
        Render the flags as a compact mark string, e.g. ``-R -----l-``.

        Positions: WWAN, Reachable, Transient, Required, on-Traffic,
        Intervention, on-Demand, Local address, Direct.
        """
        F = ReachabilityFlags
        marks = [
            (F.IS_WWAN, "W"),
            (F.REACHABLE, "R"),
            (F.TRANSIENT_CONNECTION, "t"),
            (F.CONNECTION_REQUIRED, "c"),
            (F.CONNECTION_ON_TRAFFIC, "C"),
            (F.INTERVENTION_REQUIRED, "i"),
            (F.CONNECTION_ON_DEMAND, "D"),
            (F.IS_LOCAL_ADDRESS, "l"),
            (F.IS_DIRECT, "d"),
        ]
        chars = [mark if self & flag else "-" for flag, mark in marks]
        return f"{chars[0]}{chars[1]} {''.join(chars[2:])}"


class TargetKind(Enum):
    """What a monitor watches."""

    HOSTNAME = "hostname"
    ADDRESS = "address"
    INTERNET = "internet"
    LOCAL_WIFI = "local_wifi"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class ReachabilityTarget:
    """Immutable description of the probed destination."""

    kind: TargetKind
    host: Optional[str] = None

    @property
    def is_local_wifi(self) -> bool:
        return self.kind is TargetKind.LOCAL_WIFI

    def __str__(self):
        if self.host:
            return f"{self.kind}:{self.host}"
        return str(self.kind)
