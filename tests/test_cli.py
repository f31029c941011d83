from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from netreach.cli import app
from netreach.core.types import ReachabilityFlags, ReachabilityStatus, ReachabilityTarget, TargetKind

runner = CliRunner()

MONITOR = "netreach.cli.ReachabilityMonitor"


def fake_monitor(status=ReachabilityStatus.REACHABLE_VIA_WIFI, required=False):
    monitor = MagicMock()
    monitor.target = ReachabilityTarget(TargetKind.INTERNET)
    monitor.current_status.return_value = status
    monitor.last_status.return_value = ReachabilityStatus.NOT_REACHABLE
    monitor.current_flags.return_value = ReachabilityFlags.REACHABLE
    monitor.connection_required.return_value = required
    return monitor


@pytest.fixture(autouse=True)
def no_log_sinks():
    with patch("netreach.cli.configure_logging"):
        yield


class TestCLI:
    def test_version(self):
        """Test version command."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "netreach v" in result.stdout

    @patch(MONITOR)
    def test_status_internet(self, mock_monitor_cls):
        """Test status defaults to the internet connection."""
        mock_monitor_cls.for_internet_connection.return_value = fake_monitor()

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        assert "reachable_via_wifi" in result.stdout
        assert "Connection required: no" in result.stdout
        mock_monitor_cls.for_internet_connection.assert_called_once_with()

    @patch(MONITOR)
    def test_status_host(self, mock_monitor_cls):
        """Test status for a host name."""
        mock_monitor_cls.for_hostname.return_value = fake_monitor(ReachabilityStatus.NOT_REACHABLE, required=True)

        result = runner.invoke(app, ["status", "--host", "example.com"])

        assert result.exit_code == 0
        assert "not_reachable" in result.stdout
        assert "Connection required: yes" in result.stdout
        mock_monitor_cls.for_hostname.assert_called_once_with("example.com")

    @patch(MONITOR)
    def test_status_wifi(self, mock_monitor_cls):
        mock_monitor_cls.for_local_wifi.return_value = fake_monitor()

        result = runner.invoke(app, ["status", "--wifi"])

        assert result.exit_code == 0
        mock_monitor_cls.for_local_wifi.assert_called_once_with()

    @patch(MONITOR)
    def test_status_invalid_address(self, mock_monitor_cls):
        """Test a malformed target exits with an error."""
        mock_monitor_cls.for_address.return_value = None

        result = runner.invoke(app, ["status", "--address", "999.1.1.1"])

        assert result.exit_code == 1
        mock_monitor_cls.for_address.assert_called_once_with("999.1.1.1")

    def test_status_conflicting_targets(self):
        result = runner.invoke(app, ["status", "--wifi", "--host", "example.com"])

        assert result.exit_code == 1

    @patch("netreach.cli.asyncio.run")
    @patch(MONITOR)
    def test_watch_reports_count(self, mock_monitor_cls, mock_run):
        mock_monitor_cls.for_internet_connection.return_value = fake_monitor()

        def run(coro):
            coro.close()
            return 2

        mock_run.side_effect = run

        result = runner.invoke(app, ["watch", "--count", "2"])

        assert result.exit_code == 0
        assert "Saw 2 change(s)" in result.stdout

    @patch(MONITOR)
    def test_watch_start_failure(self, mock_monitor_cls):
        monitor = fake_monitor()
        monitor.start_notifier.return_value = False
        mock_monitor_cls.for_internet_connection.return_value = monitor

        result = runner.invoke(app, ["watch"])

        assert result.exit_code == 1
        monitor.stop_notifier.assert_not_called()

    @patch(MONITOR)
    def test_watch_prints_changes(self, mock_monitor_cls):
        monitor = fake_monitor()

        def start_notifier(loop):
            # Deliver one change as soon as the loop runs
            callback = monitor.add_notification_callback.call_args[0][0]
            loop.call_soon(callback, monitor)
            return True

        monitor.start_notifier.side_effect = start_notifier
        mock_monitor_cls.for_internet_connection.return_value = monitor

        result = runner.invoke(app, ["watch", "--count", "1"])

        assert result.exit_code == 0
        assert "not_reachable → reachable_via_wifi" in result.stdout
        assert "Saw 1 change(s)" in result.stdout
        monitor.stop_notifier.assert_called_once()
        assert monitor.invoke_notification_on_main is True
