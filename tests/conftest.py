"""Shared fixtures: a scriptable reachability probe."""
import asyncio
from typing import Callable, List, Optional

import pytest

from netreach.core.types import ReachabilityFlags, ReachabilityTarget
from netreach.services.notification_center import NotificationCenter
from netreach.services.scheduling import set_main_loop

F = ReachabilityFlags

WIFI = F.REACHABLE | F.IS_DIRECT
WWAN = F.REACHABLE | F.IS_WWAN


class FakeProbe:
    """Probe whose flags are set by the test; changes are delivered on the registered loop."""

    def __init__(self, target: ReachabilityTarget, flags: Optional[ReachabilityFlags] = F(0), accept: bool = True):
        self.target = target
        self.flags = flags
        self.accept = accept
        self.callback: Optional[Callable] = None
        self.loop: Optional[asyncio.AbstractEventLoop] = None
        self.register_calls = 0
        self.unregister_calls = 0

    def query_flags(self):
        return self.flags

    def register(self, callback, loop) -> bool:
        self.register_calls += 1
        if not self.accept or self.callback is not None:
            return False
        self.callback = callback
        self.loop = loop
        return True

    def unregister(self):
        self.unregister_calls += 1
        self.callback = None
        self.loop = None

    def set_flags(self, flags: ReachabilityFlags):
        """Change the flags and, if registered, schedule the change callback."""
        self.flags = flags
        if self.callback is not None:
            self.loop.call_soon(self.callback, flags)


class FakeProbeFactory:
    """Records the probes it hands out."""

    def __init__(self, flags: Optional[ReachabilityFlags] = F(0), accept: bool = True, fail: bool = False):
        self.flags = flags
        self.accept = accept
        self.fail = fail
        self.probes: List[FakeProbe] = []

    def __call__(self, target: ReachabilityTarget):
        if self.fail:
            return None
        probe = FakeProbe(target, self.flags, self.accept)
        self.probes.append(probe)
        return probe

    @property
    def probe(self) -> FakeProbe:
        return self.probes[-1]


async def drain(loop_iterations: int = 3):
    """Let callbacks scheduled with call_soon run."""
    for _ in range(loop_iterations):
        await asyncio.sleep(0)


@pytest.fixture
def probe_factory():
    return FakeProbeFactory()


@pytest.fixture
def center():
    return NotificationCenter()


@pytest.fixture(autouse=True)
def reset_main_loop():
    yield
    set_main_loop(None)
