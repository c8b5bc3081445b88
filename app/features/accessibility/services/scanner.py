import time
from typing import Any, Callable, Dict

from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from app.features.accessibility.exceptions import (
    AnalysisEngineError,
    AnalysisTimeout,
    EngineLoadTimeout,
    NavigationError,
    ScanError,
    SessionTimeout,
)
from app.features.accessibility.schemas.scan import ScanResponse
from app.features.accessibility.services.browser import browser_session
from app.features.accessibility.utils.polling import Deadline, poll_until
from app.features.accessibility.utils.violations_parser import build_scan_response, parse_violations
from app.platform.config import settings
from app.platform.logger import get_logger

logger = get_logger(__name__)


INJECT_ENGINE_SCRIPT = """
var script = document.createElement('script');
script.src = arguments[0];
(document.head || document.documentElement).appendChild(script);
"""

ENGINE_READY_SCRIPT = "return typeof axe !== 'undefined' && typeof axe.run === 'function';"

# The last argument of an async script is the callback that resolves it.
RUN_ENGINE_SCRIPT = """
var done = arguments[arguments.length - 1];
axe.run(document, arguments[0]).then(function (results) {
    done({violations: JSON.stringify(results.violations)});
}).catch(function (error) {
    done({error: (error && error.message) || String(error)});
});
"""


class AccessibilityScanner:
    """
    Runs axe-core against a single page in a dedicated browser session.

    Stages run strictly in order: navigate, wait for a visible <body>,
    inject the engine, wait for it to load, run it, parse the result.
    Any stage can fail the scan; the browser is always torn down.
    """

    def __init__(
        self,
        session_factory=browser_session,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._session_factory = session_factory
        self._clock = clock
        self._sleep = sleep

    def scan(self, url: str) -> ScanResponse:
        """
        Scan ``url`` and return its violations.

        Raises:
            ScanError: A subclass naming the failure (launch, navigation,
                engine load timeout, analysis timeout, session timeout,
                engine error or unparseable result).
        """
        logger.info(f"Analyzing URL: {url}")
        deadline = Deadline(settings.SESSION_TIMEOUT, clock=self._clock)

        try:
            with self._session_factory(deadline, url) as driver:
                raw = self._run(driver, url, deadline)
        except ScanError as e:
            logger.error(f"Failed to analyze {url} at stage '{e.stage}': {e.reason}")
            raise
        except WebDriverException as e:
            logger.error(f"Failed to analyze {url} at stage 'session': {e.msg or e}")
            raise NavigationError(e.msg or str(e), url=url, stage="session") from e

        logger.info(f"Raw violations JSON length: {len(raw)}")
        violations = parse_violations(raw, url=url)
        return build_scan_response(url, violations)

    def _run(self, driver, url: str, deadline: Deadline) -> str:
        self._stage("navigate", url, deadline, lambda: driver.get(url))
        self._stage("wait_for_body", url, deadline, lambda: self._wait_for_body(driver, deadline))
        self._stage(
            "inject_engine",
            url,
            deadline,
            lambda: driver.execute_script(INJECT_ENGINE_SCRIPT, settings.AXE_SCRIPT_URL),
        )
        self._stage("wait_for_engine", url, deadline, lambda: self._wait_for_engine(driver, url, deadline))
        return self._stage("run_analysis", url, deadline, lambda: self._run_analysis(driver, url, deadline))

    def _stage(self, name: str, url: str, deadline: Deadline, action: Callable[[], Any]) -> Any:
        if deadline.expired():
            raise SessionTimeout(self._session_timeout_reason(deadline), url=url, stage=name)

        logger.info(f"[{name}] {url}")
        try:
            return action()
        except ScanError:
            raise
        except TimeoutException as e:
            # Driver-side timeouts are bounded by the session deadline
            raise SessionTimeout(self._session_timeout_reason(deadline), url=url, stage=name) from e
        except WebDriverException as e:
            raise NavigationError(e.msg or str(e), url=url, stage=name) from e

    @staticmethod
    def _session_timeout_reason(deadline: Deadline) -> str:
        return f"session timed out after {deadline.seconds:g}s"

    @staticmethod
    def _wait_for_body(driver, deadline: Deadline):
        WebDriverWait(driver, deadline.remaining()).until(
            EC.visibility_of_element_located((By.TAG_NAME, "body"))
        )

    def _wait_for_engine(self, driver, url: str, deadline: Deadline):
        loaded = poll_until(
            lambda: bool(driver.execute_script(ENGINE_READY_SCRIPT)),
            timeout=settings.ENGINE_LOAD_TIMEOUT,
            interval=settings.ENGINE_POLL_INTERVAL,
            backoff=settings.POLL_BACKOFF,
            deadline=deadline,
            clock=self._clock,
            sleep=self._sleep,
        )
        if not loaded:
            if deadline.expired():
                raise SessionTimeout(self._session_timeout_reason(deadline), url=url, stage="wait_for_engine")
            raise EngineLoadTimeout("timeout waiting for axe-core to load", url=url, stage="wait_for_engine")
        logger.info("Axe-core successfully loaded")

    def _run_analysis(self, driver, url: str, deadline: Deadline) -> str:
        budget = deadline.clip(settings.ANALYSIS_TIMEOUT)
        driver.set_script_timeout(budget)
        try:
            result = driver.execute_async_script(RUN_ENGINE_SCRIPT, self._run_options())
        except TimeoutException as e:
            if budget < settings.ANALYSIS_TIMEOUT and deadline.expired():
                raise SessionTimeout(self._session_timeout_reason(deadline), url=url, stage="run_analysis") from e
            raise AnalysisTimeout(
                "timeout waiting for axe analysis to complete", url=url, stage="run_analysis"
            ) from e

        result = result or {}
        error = result.get("error")
        if error is not None:
            if settings.SWALLOW_ENGINE_ERRORS:
                logger.warning(f"Axe run error on {url}, reporting no violations: {error}")
                return "[]"
            raise AnalysisEngineError(f"axe.run failed: {error}", url=url, stage="run_analysis")

        logger.info("Axe analysis completed successfully")
        return result.get("violations") or ""

    @staticmethod
    def _run_options() -> Dict[str, Any]:
        if not settings.AXE_RUN_ONLY_TAGS:
            return {}
        return {"runOnly": {"type": "tag", "values": list(settings.AXE_RUN_ONLY_TAGS)}}
