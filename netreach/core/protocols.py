"""Protocols for type-safe dependency injection."""
import asyncio
from typing import Callable, Optional, Protocol

from netreach.core.types import ReachabilityFlags, ReachabilityTarget


class ReachabilityProbe(Protocol):
    """Capability of the OS reachability service for a single target."""

    def query_flags(self) -> Optional[ReachabilityFlags]:
        """Current flags, or None when they cannot be obtained."""
        ...

    def register(self, callback: Callable[[ReachabilityFlags], None], loop: asyncio.AbstractEventLoop) -> bool:
        """Deliver flag changes to callback on loop. Returns False if rejected."""
        ...

    def unregister(self) -> None:
        """Stop delivering flag changes."""
        ...


ProbeFactory = Callable[[ReachabilityTarget], Optional[ReachabilityProbe]]
