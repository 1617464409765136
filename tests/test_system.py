import unittest
from unittest.mock import patch

from lazyshell.ai.assistants import system


class TestSystemInfo(unittest.TestCase):
    """Tests for the OS description added to the prompts."""

    @patch("platform.mac_ver", return_value=("14.5", ("", "", ""), "arm64"))
    @patch("platform.system", return_value="Darwin")
    def test_macos(self, mock_system, mock_mac_ver):
        self.assertEqual(system.get_distribution_name(), "macOS 14.5")
        self.assertEqual(system.get_os_prompt_injection(), " for macOS 14.5")

    @patch("platform.freedesktop_os_release", return_value={"NAME": "Ubuntu", "PRETTY_NAME": "Ubuntu 24.04 LTS"})
    @patch("platform.system", return_value="Linux")
    def test_linux(self, mock_system, mock_release):
        self.assertEqual(system.get_os_prompt_injection(), " for Ubuntu 24.04 LTS")

    @patch("platform.freedesktop_os_release", side_effect=OSError)
    @patch("platform.system", return_value="Linux")
    def test_unknown_os(self, mock_system, mock_release):
        self.assertEqual(system.get_os_prompt_injection(), "")
