"""Unit tests for PlatformUtils."""
from unittest.mock import patch

import pytest

from netreach.utils.platform_utils import Platform, PlatformUtils


class TestPlatformUtils:
    @pytest.mark.parametrize(
        "system,expected",
        [("Windows", Platform.WINDOWS), ("Darwin", Platform.MACOS), ("Linux", Platform.LINUX)],
    )
    def test_get_platform(self, system, expected):
        with patch("netreach.utils.platform_utils.platform.system", return_value=system), patch(
            "netreach.utils.platform_utils.os.name", "nt" if system == "Windows" else "posix"
        ):
            assert PlatformUtils.get_platform() == expected

    @pytest.mark.parametrize(
        "plat,names",
        [(Platform.LINUX, ("lo",)), (Platform.MACOS, ("lo0",)), (Platform.WINDOWS, ("Loopback Pseudo-Interface 1",))],
    )
    def test_loopback_names(self, plat, names):
        with patch.object(PlatformUtils, "get_platform", return_value=plat):
            assert PlatformUtils.get_loopback_names() == names
