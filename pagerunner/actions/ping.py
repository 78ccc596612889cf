"""
Ping a URL: open it and report the status code of the main document.
"""

from typing import Mapping

from pagerunner.actions.base import Action, ActionDescriptor, ActionId
from pagerunner.browser.handle import AutomationHandle
from pagerunner.browser.script import Navigate, run_script
from pagerunner.core.errors import ActionFailure, HttpStatusError
from pagerunner.core.logging import get_logger
from pagerunner.core.results import ActionResult
from pagerunner.prompts.specs import ParameterSpec, url_validator
from pagerunner.utils.url_utils import extract_domain

logger = get_logger(__name__)


class PingAction(Action):
    descriptor = ActionDescriptor(
        identifier=ActionId.PING,
        summary="Open a URL and report its HTTP status code",
        params=(
            ParameterSpec("url", "URL to ping", validator=url_validator),
        ),
    )

    async def perform(self, handle: AutomationHandle, params: Mapping[str, str]) -> ActionResult:
        url = params["url"]
        script = await run_script(handle, [Navigate(url)])
        status = script.value_of(Navigate)
        logger.info(f"[ping] {url} -> {status}")

        if status == 0:
            raise ActionFailure(f"{url} returned no response")
        if status >= 400:
            raise HttpStatusError(url, status)

        title = await handle.title()
        return ActionResult.success(
            self.name,
            message=f"{url} responded with HTTP {status}",
            data={
                "url": url,
                "status": status,
                "final_url": handle.url,
                "host": extract_domain(handle.url),
                "title": title,
            },
        )
