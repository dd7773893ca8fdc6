"""Browser instance management for the result scraper.

Provides :class:`BrowserManager`, a scoped wrapper around a Playwright
browser.  Launch flags (headless, start-maximized, disable-gpu) come from
the remote config; the engine is chosen locally:

* ``chromium`` -- Playwright's bundled Chromium, launched with the Chrome
  command-line switches the remote flags name.
* ``camoufox`` -- the hardened Firefox build, with the same flags mapped
  onto Firefox preferences.

The manager is acquired once per run and must be closed unconditionally
(``async with`` or an explicit ``close()`` in a ``finally`` block).
"""

from __future__ import annotations
from typing import Optional, List, Dict, Any

from playwright.async_api import (
    Browser, BrowserContext, Page, Playwright, async_playwright,
)
from browserforge.fingerprints import Screen
from camoufox.async_api import AsyncCamoufox
from core.config import RemoteSettings, ScraperSettings
import logging

logger = logging.getLogger(__name__)

SUPPORTED_ENGINES = ("chromium", "camoufox")

# Viewport used when no real window can be maximised (headless runs)
HEADLESS_VIEWPORT: Dict[str, int] = {"width": 1920, "height": 1080}


class BrowserManager:
    """Manages the lifecycle of one browser, one context and its pages.

    Attributes:
        headless: Run without a window.
        start_maximized: Open the window maximised (headed runs only;
            headless runs get a fixed 1920x1080 viewport).
        disable_gpu: Turn off GPU acceleration.
        engine: ``chromium`` or ``camoufox``.
        timeout: Default Playwright timeout in milliseconds for new pages.
    """

    def __init__(
        self,
        headless: bool = False,
        start_maximized: bool = True,
        disable_gpu: bool = False,
        engine: str = "chromium",
        timeout: int = 30000,
    ) -> None:
        engine = engine.lower()
        if engine not in SUPPORTED_ENGINES:
            raise ValueError(
                f"unsupported browser engine: {engine} "
                f"(expected one of {', '.join(SUPPORTED_ENGINES)})"
            )
        self.headless = headless
        self.start_maximized = start_maximized
        self.disable_gpu = disable_gpu
        self.engine = engine
        self.timeout = timeout
        self.playwright: Optional[Playwright] = None
        self.camoufox: Optional[AsyncCamoufox] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None

    @classmethod
    def from_settings(
        cls, settings: ScraperSettings, remote: RemoteSettings,
    ) -> "BrowserManager":
        """Build a manager from local settings and remote launch flags."""
        return cls(
            headless=settings.resolve_headless(remote),
            start_maximized=remote.start_maximized,
            disable_gpu=remote.disable_gpu,
            engine=settings.browser_engine,
            timeout=settings.timeout,
        )

    # ------------------------------------------------------------------
    # Launch options
    # ------------------------------------------------------------------

    def chromium_args(self) -> List[str]:
        """Chrome command-line switches for the configured flags."""
        args: List[str] = []
        if self.start_maximized:
            args.append("--start-maximized")
        if self.disable_gpu:
            args.append("--disable-gpu")
        return args

    def camoufox_options(self) -> Dict[str, Any]:
        """Keyword arguments for :class:`AsyncCamoufox`."""
        kwargs: Dict[str, Any] = {"headless": self.headless}
        # Headless auto-detection defaults to 1024x768; keep full HD
        if self.headless:
            kwargs["screen"] = Screen(max_width=1920, max_height=1080)
        if self.disable_gpu:
            kwargs["firefox_user_prefs"] = {
                "layers.acceleration.disabled": True,
                "gfx.webrender.software": True,
            }
        return kwargs

    def context_options(self) -> Dict[str, Any]:
        """Options for the browser context.

        A maximised headed window needs ``no_viewport`` so the page
        follows the real window size.
        """
        if self.start_maximized and not self.headless:
            return {"no_viewport": True}
        return {"viewport": dict(HEADLESS_VIEWPORT)}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def launch(self) -> "BrowserManager":
        """Start the browser process.

        Returns:
            ``self`` for fluent chaining.
        """
        logger.info(
            "Launching %s (Headless: %s, Maximized: %s, GPU disabled: %s)...",
            self.engine, self.headless, self.start_maximized,
            self.disable_gpu,
        )
        if self.engine == "camoufox":
            self.camoufox = AsyncCamoufox(**self.camoufox_options())
            self.browser = await self.camoufox.__aenter__()
        else:
            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                headless=self.headless,
                args=self.chromium_args(),
            )
        return self

    async def new_page(self) -> Page:
        """Open a page in the manager's context, launching if needed."""
        if not self.browser:
            await self.launch()
        if self.context is None:
            self.context = await self.browser.new_context(
                **self.context_options()
            )
        page = await self.context.new_page()
        page.set_default_timeout(self.timeout)
        return page

    async def close(self) -> None:
        """Shut down the context, the browser and the driver."""
        if self.context:
            try:
                await self.context.close()
            except Exception as e:
                logger.debug("Error closing context: %s", e)
            self.context = None

        if self.camoufox:
            try:
                await self.camoufox.__aexit__(None, None, None)
            except Exception as e:
                logger.debug("Error during browser exit: %s", e)
            self.camoufox = None
        elif self.browser:
            try:
                await self.browser.close()
            except Exception as e:
                logger.debug("Error closing browser: %s", e)

        if self.playwright:
            try:
                await self.playwright.stop()
            except Exception as e:
                logger.debug("Error stopping Playwright: %s", e)
            self.playwright = None

        if self.browser:
            self.browser = None
            logger.info("Browser closed.")

    async def __aenter__(self) -> "BrowserManager":
        return await self.launch()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
