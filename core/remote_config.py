"""Remote configuration loader.

The results site's selectors, the subject extraction script and the
browser launch flags are served by a small JSON endpoint so they can be
updated without a release.  The same document carries a ``status_api``
kill-switch: the operator disables every scraper run by setting it to
anything other than ``"enabled"``.

Expected shape::

    {
      "scrapper_config": [{"headless": false, "start-maximized": true,
                           "disable-gpu": false}],
      "educationboardresults_01": [{"matching_cell_01": "...",
                                    "students_name_cell": "...",
                                    "students_gpa_cell": "...",
                                    "student_result_cell": "...",
                                    "execution_subject_js_script": "...",
                                    "status_api": "enabled"}]
    }

One attempt per run; no caching and no retries.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp
import pydantic

from core.config import RemoteSettings
from core.errors import ConfigFetchError, ConfigParseError, ServiceDisabledError

logger = logging.getLogger(__name__)

SCRAPER_SECTION = "scrapper_config"
SITE_SECTION = "educationboardresults_01"

# Remote key -> RemoteSettings field
SCRAPER_KEYS: Dict[str, str] = {
    "headless": "headless",
    "start-maximized": "start_maximized",
    "disable-gpu": "disable_gpu",
}
SITE_KEYS: Dict[str, str] = {
    "matching_cell_01": "matching_cell_selector",
    "students_name_cell": "name_selector",
    "students_gpa_cell": "gpa_selector",
    "student_result_cell": "result_selector",
    "execution_subject_js_script": "subject_script",
    "status_api": "status_api",
}


def _collect_section(
    payload: Dict[str, Any], section: str, keys: Dict[str, str],
) -> Dict[str, Any]:
    """Flatten a list-of-maps section into RemoteSettings field values.

    Unknown keys are ignored; later entries override earlier ones.
    """
    entries = payload.get(section)
    if entries is None:
        return {}
    if not isinstance(entries, list):
        raise ConfigParseError(
            f"failed to parse API response: '{section}' is not a list"
        )

    values: Dict[str, Any] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            raise ConfigParseError(
                f"failed to parse API response: '{section}' entry "
                f"is not an object"
            )
        for key, value in entry.items():
            field = keys.get(key)
            if field:
                values[field] = value
    return values


def parse_remote_settings(payload: Any) -> RemoteSettings:
    """Build :class:`RemoteSettings` from a decoded config document.

    The kill-switch is *not* checked here; see
    :meth:`RemoteConfigLoader.load`.

    Args:
        payload: Decoded JSON body.

    Returns:
        The parsed, immutable settings.

    Raises:
        ConfigParseError: If the document does not match the expected
            shape or a known key carries a value of the wrong type.
    """
    if not isinstance(payload, dict):
        raise ConfigParseError(
            "failed to parse API response: body is not a JSON object"
        )

    values = _collect_section(payload, SCRAPER_SECTION, SCRAPER_KEYS)
    values.update(_collect_section(payload, SITE_SECTION, SITE_KEYS))

    try:
        return RemoteSettings(**values)
    except pydantic.ValidationError as e:
        raise ConfigParseError(f"failed to parse API response: {e}") from e


class RemoteConfigLoader:
    """Fetches and validates the remote scraper configuration.

    Attributes:
        url: Config endpoint.
        timeout: Total request timeout in seconds.
        session: Optional externally managed ``aiohttp.ClientSession``;
            when omitted the loader opens and closes its own.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            self._owns_session = True
        return self.session

    async def close(self) -> None:
        """Close the HTTP session if this loader opened it."""
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def fetch_payload(self) -> Any:
        """GET the config document and decode it.

        Returns:
            The decoded JSON value.

        Raises:
            ConfigFetchError: On transport errors, timeouts, or an HTTP
                error status.
            ConfigParseError: If the body is not valid JSON.
        """
        session = await self._get_session()
        logger.info("Fetching remote config from %s", self.url)
        try:
            async with session.get(self.url) as resp:
                if resp.status >= 400:
                    raise ConfigFetchError(
                        f"failed to fetch config: HTTP {resp.status}"
                    )
                body = await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ConfigFetchError(f"failed to fetch config: {e}") from e

        try:
            return json.loads(body)
        except ValueError as e:
            raise ConfigParseError(
                f"failed to parse API response: {e}"
            ) from e

    async def load(self) -> RemoteSettings:
        """Fetch, parse and gate the remote configuration.

        Returns:
            The remote settings; ``status_enabled`` is guaranteed true.

        Raises:
            ConfigFetchError: See :meth:`fetch_payload`.
            ConfigParseError: See :func:`parse_remote_settings`.
            ServiceDisabledError: If ``status_api`` is missing or not
                ``"enabled"``.
        """
        try:
            payload = await self.fetch_payload()
        finally:
            await self.close()

        remote = parse_remote_settings(payload)
        if not remote.status_enabled:
            raise ServiceDisabledError(remote.status_api)

        logger.info(
            "Remote config loaded (headless=%s, start-maximized=%s, "
            "disable-gpu=%s)",
            remote.headless, remote.start_maximized, remote.disable_gpu,
        )
        return remote
