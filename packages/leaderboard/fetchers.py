import os, re
from typing import Optional, Protocol
import httpx
import structlog
from bs4 import BeautifulSoup
from playwright.async_api import async_playwright, TimeoutError as PlaywrightTimeoutError

from packages.config.board import FetcherCfg

log = structlog.get_logger()

class PointsFetcher(Protocol):
    async def fetch(self, url: str) -> Optional[int]: ...

def parse_points(text: Optional[str]) -> Optional[int]:
    """Badge text like "1,234,567 energy points" -> 1234567."""
    if not text:
        return None
    m = re.search(r"\d[\d,]*", text)
    if not m:
        return None
    return int(m.group(0).replace(",", ""))

class BrowserPointsFetcher:
    """Loads each profile in headless Chromium and reads the points badge.

    A fresh browser per profile keeps one broken page from poisoning the rest.
    """
    def __init__(self, cfg: Optional[FetcherCfg] = None, timeout_sec: float = 10.0,
                 screenshot_dir: Optional[str] = None):
        self.cfg = cfg or FetcherCfg()
        self.timeout_ms = int(timeout_sec * 1000)
        self.screenshot_dir = screenshot_dir

    async def fetch(self, url: str) -> Optional[int]:
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=self.cfg.headless)
                try:
                    context = await browser.new_context(user_agent=self.cfg.user_agent)
                    page = await context.new_page()
                    await page.goto(url, wait_until=self.cfg.wait_until, timeout=self.timeout_ms)
                    try:
                        await page.wait_for_selector(self.cfg.selector, timeout=self.timeout_ms)
                    except PlaywrightTimeoutError:
                        log.warning("Points badge not found", url=url, selector=self.cfg.selector,
                                    timeout_ms=self.timeout_ms)
                        await self._screenshot(page, url)
                        return None
                    text = await page.text_content(self.cfg.selector)
                finally:
                    await browser.close()
        except Exception as e:
            log.warning("Browser fetch failed", url=url, err=str(e))
            return None
        return parse_points(text)

    async def _screenshot(self, page, url: str) -> None:
        if not self.screenshot_dir:
            return
        os.makedirs(self.screenshot_dir, exist_ok=True)
        slug = re.sub(r"[^A-Za-z0-9]+", "_", url).strip("_")[-80:] or "page"
        path = os.path.join(self.screenshot_dir, f"{slug}.png")
        await page.screenshot(path=path)
        log.info("Debug screenshot saved", path=path)

class HTTPPointsFetcher:
    """Plain GET + HTML parse, for profiles that render the badge server-side."""
    def __init__(self, cfg: Optional[FetcherCfg] = None, timeout_sec: float = 10.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.cfg = cfg or FetcherCfg()
        self.timeout_sec = timeout_sec
        self.transport = transport

    async def fetch(self, url: str) -> Optional[int]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout_sec, transport=self.transport,
                                         headers={"User-Agent": self.cfg.user_agent},
                                         follow_redirects=True) as h:
                r = await h.get(url)
                r.raise_for_status()
        except httpx.HTTPError as e:
            log.warning("HTTP fetch failed", url=url, err=str(e))
            return None
        soup = BeautifulSoup(r.text, "html.parser")
        badge = soup.select_one(self.cfg.selector)
        if badge is None:
            log.warning("Points badge not found", url=url, selector=self.cfg.selector)
            return None
        return parse_points(badge.get_text(strip=True))

def make_fetcher(kind: str, cfg: FetcherCfg, timeout_sec: float,
                 screenshot_dir: Optional[str] = None) -> PointsFetcher:
    if kind == "http":
        return HTTPPointsFetcher(cfg, timeout_sec=timeout_sec)
    if kind == "browser":
        return BrowserPointsFetcher(cfg, timeout_sec=timeout_sec, screenshot_dir=screenshot_dir)
    raise ValueError(f"Unknown fetcher: {kind}")
