"""Platform detection utilities."""
import os
import platform
from enum import Enum


class Platform(Enum):
    """Operating system platforms."""
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"


class PlatformUtils:
    """Utility class for platform detection."""

    @staticmethod
    def get_platform() -> Platform:
        """
        Detect the current operating system.

        Returns:
            Platform enum value: Platform.WINDOWS, Platform.MACOS, or Platform.LINUX
        """
        system = platform.system()
        if system == "Windows" or os.name == "nt":
            return Platform.WINDOWS
        elif system == "Darwin":
            return Platform.MACOS
        else:
            return Platform.LINUX

    @staticmethod
    def get_loopback_names() -> tuple:
        """
        Get the loopback interface names used on the current platform.

        Returns:
            Tuple of interface names ('lo' on Linux, 'lo0' on macOS,
            'Loopback Pseudo-Interface 1' on Windows)
        """
        plat = PlatformUtils.get_platform()
        if plat == Platform.WINDOWS:
            return ("Loopback Pseudo-Interface 1",)
        elif plat == Platform.MACOS:
            return ("lo0",)
        else:
            return ("lo",)
