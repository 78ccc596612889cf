"""
Create a GitHub repository, unless one with the same name already exists.
"""

from typing import List, Mapping
from urllib.parse import quote

from pagerunner.actions.base import Action, ActionDescriptor, ActionId
from pagerunner.actions.login import PASSWORD_SPEC, USERNAME_SPEC, sign_in
from pagerunner.browser.handle import AutomationHandle
from pagerunner.browser.script import (
    Click,
    Evaluate,
    Navigate,
    ReadText,
    TypeText,
    WaitForSelector,
    run_script,
)
from pagerunner.core.config import get_config
from pagerunner.core.errors import HttpStatusError, ResourceConflict
from pagerunner.core.logging import get_logger
from pagerunner.core.results import ActionResult
from pagerunner.prompts.specs import ParameterSpec, repository_name_validator

logger = get_logger(__name__)

REPO_LIST_ITEM = 'a[itemprop="name codeRepository"]'
NAME_FIELD = "#repository_name, input[aria-label='Repository']"
DESCRIPTION_FIELD = "#repository_description, input[name='Description']"
CREATE_BUTTON = "button[type='submit']:has-text('Create repository')"
NEXT_PAGE_LINK = 'a[rel="next"]'
MAX_LIST_PAGES = 50

NEXT_PAGE_HREF_JS = f"""
() => {{
  const a = document.querySelector('{NEXT_PAGE_LINK}');
  return a ? a.href : '';
}}
"""


def has_repository(existing: List[str], name: str) -> bool:
    """GitHub repository names are case-insensitive."""
    wanted = name.lower()
    return any(repo.strip().lower() == wanted for repo in existing)


async def list_repositories(handle: AutomationHandle, base_url: str, user: str,
                            query: str = "") -> List[str]:
    """
    Names shown on the user's repositories tab, across every result page.

    query narrows the list the way the tab's search box does; the next-page
    link is followed until there is none (at most MAX_LIST_PAGES pages).
    """
    url = f"{base_url}/{user}?tab=repositories"
    if query:
        url += f"&q={quote(query)}"

    names: List[str] = []
    visited = set()
    while url and url not in visited and len(visited) < MAX_LIST_PAGES:
        visited.add(url)
        script = await run_script(handle, [
            Navigate(url),
            ReadText(REPO_LIST_ITEM, all_matches=True),
            Evaluate(NEXT_PAGE_HREF_JS),
        ])
        status = script.value_of(Navigate)
        if status >= 400:
            raise HttpStatusError(url, status)
        names.extend(name for name in script.value_of(ReadText) if name)
        url = script.value_of(Evaluate) or ""

    logger.info(f"[create_repository] {user} has {len(names)} matching repositories "
                f"over {len(visited)} page(s)")
    return names


class CreateRepositoryAction(Action):
    descriptor = ActionDescriptor(
        identifier=ActionId.CREATE_REPOSITORY,
        summary="Sign in and create a new GitHub repository",
        params=(
            USERNAME_SPEC,
            PASSWORD_SPEC,
            ParameterSpec("repository", "Repository name", validator=repository_name_validator),
            ParameterSpec("description", "Repository description", required=False),
        ),
    )

    async def perform(self, handle: AutomationHandle, params: Mapping[str, str]) -> ActionResult:
        base_url = self.options.get("github_url") or get_config().github_url
        name = params["repository"]

        user = await sign_in(handle, base_url, params["username"], params["password"])
        existing = await list_repositories(handle, base_url, user, query=name)
        if has_repository(existing, name):
            raise ResourceConflict(f"Repository {user}/{name}")

        steps = [
            Navigate(f"{base_url}/new"),
            WaitForSelector(NAME_FIELD),
            TypeText(NAME_FIELD, name),
        ]
        if params.get("description"):
            steps.append(TypeText(DESCRIPTION_FIELD, params["description"]))
        steps.append(Click(CREATE_BUTTON, expect_navigation=True))
        await run_script(handle, steps)

        repo_url = f"{base_url}/{user}/{name}"
        logger.info(f"[create_repository] created {repo_url}")
        return ActionResult.success(
            self.name,
            message=f"Created {repo_url}",
            data={"repository": f"{user}/{name}", "url": repo_url},
        )
