import os
import tempfile
from pathlib import Path

# Load environment variables from .env file
from dotenv import load_dotenv
from loguru import logger

from netreach.utils.platform_utils import Platform, PlatformUtils

# Load .env from project root
_project_root = Path(__file__).parent.parent.parent
load_dotenv(_project_root / ".env")

APP_NAME = "netreach"


def _env_float(name: str, default: float) -> float:
    """Read a positive float from the environment, falling back to the default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        value = 0.0
    if value <= 0:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default
    return value


# Change detection
POLL_INTERVAL = _env_float("NETREACH_POLL_INTERVAL", 2.0)  # seconds

# Destination used to ask the kernel for the default route (nothing is sent)
INTERNET_PROBE_HOST = os.getenv("NETREACH_INTERNET_PROBE_HOST", "8.8.8.8")
INTERNET_PROBE_PORT = 53

# Interface names treated as cellular (WWAN)
WWAN_INTERFACE_PREFIXES = tuple(
    prefix.strip()
    for prefix in os.getenv("NETREACH_WWAN_PREFIXES", "wwan,rmnet,pdp_ip,ccmni,wwp,cdc-wdm").split(",")
    if prefix.strip()
)

# Point-to-point dial-up links (connection on demand)
DIALUP_INTERFACE_PREFIXES = ("ppp",)

# Tunnels, VPNs and container bridges; never a local WiFi link
VIRTUAL_INTERFACE_PREFIXES = tuple(
    prefix.strip()
    for prefix in os.getenv(
        "NETREACH_VIRTUAL_PREFIXES", "tun,utun,tap,sing,wg,docker,br-,veth,virbr,vmnet,vboxnet"
    ).split(",")
    if prefix.strip()
)

# Broadcast notification posted on every reachability change
REACHABILITY_CHANGED_NOTIFICATION = "netreach.reachability-changed"

# Temporary directory (cross-platform)
if PlatformUtils.get_platform() == Platform.WINDOWS:
    TMPDIR = os.path.join(tempfile.gettempdir(), APP_NAME)
elif PlatformUtils.get_platform() == Platform.MACOS:
    TMPDIR = os.path.join(os.path.expanduser("~/Library/Caches"), APP_NAME)
else:
    TMPDIR = os.path.join(os.environ.get("TMPDIR", "/tmp"), APP_NAME)

# Logging
LOG_LEVEL = os.getenv("NETREACH_LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("NETREACH_LOG_FILE", os.path.join(TMPDIR, "netreach.log"))
