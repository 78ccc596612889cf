"""
Gather the navigable links of a page.
"""

from typing import Mapping

from pagerunner.actions.base import Action, ActionDescriptor, ActionId
from pagerunner.browser.handle import AutomationHandle
from pagerunner.browser.script import ExtractLinks, Navigate, run_script
from pagerunner.core.errors import HttpStatusError
from pagerunner.core.logging import get_logger
from pagerunner.core.results import ActionResult
from pagerunner.prompts.specs import ParameterSpec, url_validator
from pagerunner.utils.links import absolutize, filter_links

logger = get_logger(__name__)


class GatherLinksAction(Action):
    descriptor = ActionDescriptor(
        identifier=ActionId.GATHER_LINKS,
        summary="List the links of a page (fragments, mailto and duplicates removed)",
        params=(
            ParameterSpec("url", "URL to gather links from", validator=url_validator),
        ),
    )

    async def perform(self, handle: AutomationHandle, params: Mapping[str, str]) -> ActionResult:
        url = params["url"]
        script = await run_script(handle, [Navigate(url), ExtractLinks()])
        status = script.value_of(Navigate)
        if status >= 400:
            raise HttpStatusError(url, status)

        raw = script.value_of(ExtractLinks)
        links = filter_links(raw)
        if self.options.get("absolute"):
            links = absolutize(handle.url, links)
        logger.info(f"[gather_links] {len(raw)} anchors, {len(links)} links kept")

        return ActionResult.success(
            self.name,
            message=f"Found {len(links)} links on {url}",
            data={"url": url, "count": len(links), "links": links},
        )
