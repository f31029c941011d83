"""Network interface utilities - Cross-platform support via psutil."""
import ipaddress
import socket
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

import psutil
from loguru import logger

from netreach.core.constants import (
    DIALUP_INTERFACE_PREFIXES,
    VIRTUAL_INTERFACE_PREFIXES,
    WWAN_INTERFACE_PREFIXES,
)
from netreach.utils.platform_utils import PlatformUtils

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPInterface = Union[ipaddress.IPv4Interface, ipaddress.IPv6Interface]


@dataclass(frozen=True)
class InterfaceInfo:
    """Snapshot of one network interface."""

    name: str
    is_up: bool
    addresses: tuple = ()  # IPv4Interface / IPv6Interface (address + on-link network)

    @property
    def ips(self) -> List[IPAddress]:
        return [iface.ip for iface in self.addresses]

    @property
    def is_loopback(self) -> bool:
        return self.name in PlatformUtils.get_loopback_names() or any(ip.is_loopback for ip in self.ips)

    @property
    def is_wwan(self) -> bool:
        return NetworkInterfaceDetector.is_wwan_name(self.name)

    @property
    def is_dialup(self) -> bool:
        return self.name.lower().startswith(DIALUP_INTERFACE_PREFIXES)

    @property
    def is_virtual(self) -> bool:
        """Tunnel, VPN or bridge interface (e.g. utun3, docker0)."""
        return self.name.lower().startswith(VIRTUAL_INTERFACE_PREFIXES)

    @property
    def has_ipv4(self) -> bool:
        return any(iface.version == 4 for iface in self.addresses)

    def owns(self, address: IPAddress) -> bool:
        """Check if address is assigned to this interface."""
        return address in self.ips

    def is_on_link(self, address: IPAddress) -> bool:
        """Check if address is inside one of this interface's subnets."""
        return any(
            iface.version == address.version and address in iface.network
            for iface in self.addresses
            # A host route (/32, /128) says nothing about neighbours
            if iface.network.num_addresses > 1
        )


class NetworkInterfaceDetector:
    """Reads the interface table - cross-platform."""

    @staticmethod
    def is_wwan_name(name: str) -> bool:
        """Check if an interface name denotes a cellular link."""
        return name.lower().startswith(WWAN_INTERFACE_PREFIXES)

    @staticmethod
    def get_interfaces() -> Dict[str, InterfaceInfo]:
        """
        Get all network interfaces with their addresses and link state.

        Returns:
            Mapping of interface name to InterfaceInfo; empty if the table
            cannot be read.
        """
        try:
            stats = psutil.net_if_stats()
            addrs = psutil.net_if_addrs()
        except (OSError, RuntimeError) as e:
            logger.error(f"[NetworkInterface] Cannot read interface table: {e}")
            return {}

        interfaces = {}
        for name, entries in addrs.items():
            addresses = []
            for entry in entries:
                if entry.family not in (socket.AF_INET, socket.AF_INET6):
                    continue
                iface = NetworkInterfaceDetector._parse_address(entry.address, entry.netmask)
                if iface is not None:
                    addresses.append(iface)

            stat = stats.get(name)
            interfaces[name] = InterfaceInfo(
                name=name,
                is_up=bool(stat and stat.isup),
                addresses=tuple(addresses),
            )

        return interfaces

    @staticmethod
    def find_owner(address: IPAddress, interfaces: Dict[str, InterfaceInfo]) -> Optional[InterfaceInfo]:
        """Find the interface an address is assigned to."""
        for info in interfaces.values():
            if info.owns(address):
                return info
        return None

    @staticmethod
    def _parse_address(address: str, netmask: Optional[str]) -> Optional[IPInterface]:
        """Build an ip_interface (host address + prefix) from psutil fields."""
        # Strip IPv6 zone index (fe80::1%eth0)
        address = address.split("%", 1)[0]
        try:
            if netmask and ":" in address:
                # IPv6 only accepts a prefix length, psutil reports a mask
                prefix = bin(int(ipaddress.IPv6Address(netmask.split("/", 1)[0]))).count("1")
                return ipaddress.ip_interface(f"{address}/{prefix}")
            if netmask:
                return ipaddress.ip_interface(f"{address}/{netmask}")
            return ipaddress.ip_interface(address)
        except ValueError:
            logger.debug(f"[NetworkInterface] Skipping unparsable address {address}/{netmask}")
            return None
