from contextlib import contextmanager
from typing import Iterator

from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service

from app.features.accessibility.exceptions import LaunchError
from app.features.accessibility.utils.polling import Deadline
from app.platform.config import settings
from app.platform.logger import get_logger

logger = get_logger(__name__)


def build_driver() -> webdriver.Chrome:
    """Launch a fresh headless Chrome with the process-wide flags."""
    chrome_options = Options()
    for argument in settings.CHROME_ARGUMENTS:
        chrome_options.add_argument(argument)
    if settings.CHROME_BINARY:
        chrome_options.binary_location = settings.CHROME_BINARY

    if settings.CHROMEDRIVER_PATH:
        driver_service = Service(executable_path=settings.CHROMEDRIVER_PATH)
        return webdriver.Chrome(service=driver_service, options=chrome_options)
    return webdriver.Chrome(options=chrome_options)


@contextmanager
def browser_session(deadline: Deadline, url: str = "") -> Iterator[webdriver.Chrome]:
    """
    Own one browser process for the duration of a scan.

    The driver's page-load and script timeouts are bounded by the time left
    on ``deadline``. The process is quit on every exit path.

    Raises:
        LaunchError: If Chrome or chromedriver could not be started.
    """
    try:
        driver = build_driver()
    except WebDriverException as e:
        logger.error(f"Failed to launch browser for {url}: {e.msg or e}")
        raise LaunchError(f"could not launch browser: {e.msg or e}", url=url, stage="launch") from e

    logger.info(f"Browser session started for {url}")
    try:
        remaining = deadline.remaining()
        driver.set_page_load_timeout(remaining)
        driver.set_script_timeout(remaining)
        yield driver
    finally:
        driver.quit()
        logger.info(f"Browser session closed for {url}")
