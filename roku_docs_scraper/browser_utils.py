import logging
import threading

from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager

logger = logging.getLogger(__name__)


def create_browser(driver_path, headless=True, page_load_timeout=30):
    """
    Create and return a new Chrome browser instance.

    Args:
        driver_path (str): Path to the chromedriver executable.
        headless (bool, optional): Run Chrome without a window. Defaults to True.
        page_load_timeout (float, optional): Navigation bound in seconds. Defaults to 30.

    Returns:
        webdriver.Chrome: A configured Chrome WebDriver instance.
    """
    options = webdriver.ChromeOptions()
    if headless:
        options.add_argument("--headless=new")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--window-size=1920,1080")
    driver = webdriver.Chrome(service=Service(driver_path), options=options)
    driver.set_page_load_timeout(page_load_timeout)
    driver.set_script_timeout(page_load_timeout)
    return driver


class BrowserSession:
    """
    One isolated browser, exposing only the operations the scraper needs.

    Waits raise ``selenium.common.exceptions.TimeoutException``; navigation
    and DOM access raise ``WebDriverException``.
    """

    def __init__(self, driver):
        self.driver = driver

    def navigate(self, url):
        self.driver.get(url)

    def wait_visible(self, selector, timeout):
        """Block until the element matching a CSS selector is visible."""
        WebDriverWait(self.driver, timeout).until(
            EC.visibility_of_element_located((By.CSS_SELECTOR, selector))
        )

    def evaluate(self, script):
        return self.driver.execute_script(script)

    def read_attribute(self, selector, name):
        element = self.driver.find_element(By.CSS_SELECTOR, selector)
        return element.get_attribute(name) or ""

    def read_inner_html(self, selector):
        element = self.driver.find_element(By.CSS_SELECTOR, selector)
        return element.get_attribute("innerHTML") or ""

    def close(self):
        try:
            self.driver.quit()
        except WebDriverException as e:
            logger.warning(f"Error closing browser: {e}")


class BrowserFactory:
    """
    Opens a fresh BrowserSession per call.

    The chromedriver binary is resolved with webdriver_manager on first use
    and shared by every later session of the run.
    """

    def __init__(self, config):
        self.config = config
        self._driver_path = None
        self._lock = threading.Lock()

    def _resolve_driver_path(self):
        with self._lock:
            if self._driver_path is None:
                self._driver_path = ChromeDriverManager().install()
                logger.info(f"Using chromedriver at {self._driver_path}")
            return self._driver_path

    def __call__(self):
        driver = create_browser(
            self._resolve_driver_path(),
            headless=self.config.headless,
            page_load_timeout=self.config.page_load_timeout,
        )
        return BrowserSession(driver)
