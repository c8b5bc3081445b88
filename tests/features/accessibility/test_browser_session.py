from unittest.mock import MagicMock, patch

import pytest
from selenium.common.exceptions import SessionNotCreatedException

from app.features.accessibility.exceptions import LaunchError
from app.features.accessibility.services.browser import browser_session, build_driver
from app.features.accessibility.utils.polling import Deadline
from app.platform.config import settings


class TestBuildDriver:
    @patch("app.features.accessibility.services.browser.webdriver.Chrome")
    def test_launch_flags(self, mock_chrome):
        build_driver()

        options = mock_chrome.call_args.kwargs["options"]
        for flag in (
            "--headless=new",
            "--disable-gpu",
            "--disable-dev-shm-usage",
            "--disable-extensions",
            "--no-sandbox",
            "--disable-web-security",
        ):
            assert flag in options.arguments
        assert "service" not in mock_chrome.call_args.kwargs

    @patch("app.features.accessibility.services.browser.Service")
    @patch("app.features.accessibility.services.browser.webdriver.Chrome")
    def test_explicit_chromedriver_path(self, mock_chrome, mock_service, restore_settings):
        restore_settings.CHROMEDRIVER_PATH = "/usr/bin/chromedriver"

        build_driver()

        mock_service.assert_called_once_with(executable_path="/usr/bin/chromedriver")
        assert mock_chrome.call_args.kwargs["service"] is mock_service.return_value


class TestBrowserSession:
    @patch("app.features.accessibility.services.browser.webdriver.Chrome")
    def test_timeouts_bounded_by_deadline(self, mock_chrome, fake_clock):
        deadline = Deadline(settings.SESSION_TIMEOUT, clock=fake_clock)

        with browser_session(deadline, "https://example.com") as driver:
            assert driver is mock_chrome.return_value

        driver.set_page_load_timeout.assert_called_once_with(settings.SESSION_TIMEOUT)
        driver.set_script_timeout.assert_called_once_with(settings.SESSION_TIMEOUT)

    @patch("app.features.accessibility.services.browser.webdriver.Chrome")
    def test_quits_on_success(self, mock_chrome, fake_clock):
        with browser_session(Deadline(60, clock=fake_clock)):
            pass

        mock_chrome.return_value.quit.assert_called_once()

    @patch("app.features.accessibility.services.browser.webdriver.Chrome")
    def test_quits_when_body_raises(self, mock_chrome, fake_clock):
        with pytest.raises(RuntimeError):
            with browser_session(Deadline(60, clock=fake_clock)):
                raise RuntimeError("stage failed")

        mock_chrome.return_value.quit.assert_called_once()

    @patch("app.features.accessibility.services.browser.webdriver.Chrome")
    def test_launch_failure(self, mock_chrome, fake_clock):
        mock_chrome.side_effect = SessionNotCreatedException("Chrome failed to start: exited abnormally")

        with pytest.raises(LaunchError) as exc_info:
            with browser_session(Deadline(60, clock=fake_clock), "https://example.com"):
                pytest.fail("session body must not run")

        assert exc_info.value.stage == "launch"
        assert "Chrome failed to start" in exc_info.value.message

    @patch("app.features.accessibility.services.browser.webdriver.Chrome")
    def test_quits_when_timeout_setup_fails(self, mock_chrome, fake_clock):
        driver = MagicMock()
        driver.set_page_load_timeout.side_effect = RuntimeError("no session")
        mock_chrome.return_value = driver

        with pytest.raises(RuntimeError):
            with browser_session(Deadline(60, clock=fake_clock)):
                pass

        driver.quit.assert_called_once()
