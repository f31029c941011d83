"""Main event loop registry used to redispatch notifications onto the UI/main context."""
import asyncio
import threading
from typing import Callable, Optional

from loguru import logger

_lock = threading.Lock()
_main_loop: Optional[asyncio.AbstractEventLoop] = None


def set_main_loop(loop: Optional[asyncio.AbstractEventLoop]) -> None:
    """Register the application's main event loop (None to clear)."""
    global _main_loop
    with _lock:
        _main_loop = loop


def get_main_loop() -> Optional[asyncio.AbstractEventLoop]:
    """Get the registered main loop, ignoring one that has been closed."""
    with _lock:
        loop = _main_loop
    if loop is not None and loop.is_closed():
        return None
    return loop


def dispatch_on_main(func: Callable, *args) -> bool:
    """
    Schedule func(*args) on the main loop.

    Always asynchronous, even when called from the main loop itself.

    Returns:
        False if no usable main loop is registered
    """
    loop = get_main_loop()
    if loop is None:
        return False
    try:
        loop.call_soon_threadsafe(func, *args)
    except RuntimeError as e:
        # Loop closed between the check and the call
        logger.warning(f"[Scheduling] Main loop rejected dispatch: {e}")
        return False
    return True
