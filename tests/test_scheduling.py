"""Unit tests for main loop dispatch."""
import asyncio
import threading
from unittest.mock import Mock

import pytest

from netreach.services.scheduling import dispatch_on_main, get_main_loop, set_main_loop


class TestScheduling:
    """Test suite for the main loop registry."""

    def test_no_main_loop(self):
        assert get_main_loop() is None
        assert dispatch_on_main(Mock()) is False

    def test_closed_main_loop_is_ignored(self):
        loop = asyncio.new_event_loop()
        set_main_loop(loop)
        loop.close()

        assert get_main_loop() is None
        assert dispatch_on_main(Mock()) is False

    @pytest.mark.asyncio
    async def test_dispatch_is_asynchronous(self):
        set_main_loop(asyncio.get_running_loop())
        func = Mock()

        assert dispatch_on_main(func, "a", 1) is True
        func.assert_not_called()

        await asyncio.sleep(0)
        func.assert_called_once_with("a", 1)

    def test_dispatch_from_another_thread(self):
        loop = asyncio.new_event_loop()
        set_main_loop(loop)
        func = Mock()
        try:
            worker = threading.Thread(target=dispatch_on_main, args=(func,))
            worker.start()
            worker.join()
            loop.run_until_complete(asyncio.sleep(0.01))
        finally:
            loop.close()

        func.assert_called_once_with()
