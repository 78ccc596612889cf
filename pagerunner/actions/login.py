"""
Simulated GitHub sign-in.

sign_in() is shared with the create_repository action.
"""

from typing import Mapping

from pagerunner.actions.base import Action, ActionDescriptor, ActionId
from pagerunner.browser.handle import AutomationHandle
from pagerunner.browser.script import Click, Evaluate, Navigate, TypeText, WaitForSelector, run_script
from pagerunner.core.config import get_config
from pagerunner.core.errors import HttpStatusError, LoginRejected
from pagerunner.core.logging import get_logger
from pagerunner.core.results import ActionResult
from pagerunner.prompts.specs import ParameterSpec, non_empty

logger = get_logger(__name__)

LOGIN_FIELD = "#login_field"
PASSWORD_FIELD = "#password"
SUBMIT_BUTTON = 'input[name="commit"]'
ERROR_FLASH = ".flash-error"
TWO_FACTOR_PATH = "/sessions/two-factor"

SIGNED_IN_USER_JS = """
() => {
  const meta = document.querySelector('meta[name="user-login"]');
  return meta ? (meta.getAttribute('content') || '') : '';
}
"""

USERNAME_SPEC = ParameterSpec("username", "GitHub username or email", validator=non_empty)
PASSWORD_SPEC = ParameterSpec("password", "GitHub password", hidden=True)


async def sign_in(handle: AutomationHandle, base_url: str, username: str, password: str) -> str:
    """
    Sign in through the login form.

    Returns:
        Login name of the signed-in account

    Raises:
        LoginRejected: If the form reports an error, asks for a second factor
            or the session does not carry a signed-in user
    """
    login_url = f"{base_url}/login"
    script = await run_script(handle, [
        Navigate(login_url),
        WaitForSelector(LOGIN_FIELD),
        TypeText(LOGIN_FIELD, username),
        TypeText(PASSWORD_FIELD, password),
        Click(SUBMIT_BUTTON, expect_navigation=True),
    ])
    status = script.value_of(Navigate)
    if status >= 400:
        raise HttpStatusError(login_url, status)

    if await handle.is_visible(ERROR_FLASH):
        raise LoginRejected(await handle.text_of(ERROR_FLASH) or "incorrect username or password")

    if TWO_FACTOR_PATH in handle.url:
        raise LoginRejected("two-factor authentication is required and not supported")

    user = (await run_script(handle, [Evaluate(SIGNED_IN_USER_JS)])).last
    if not user:
        raise LoginRejected(f"still not signed in (landed on {handle.url})")

    logger.info(f"[login] signed in as {user}")
    return user


class LoginAction(Action):
    descriptor = ActionDescriptor(
        identifier=ActionId.LOGIN,
        summary="Sign in to GitHub with the given credentials",
        params=(USERNAME_SPEC, PASSWORD_SPEC),
    )

    async def perform(self, handle: AutomationHandle, params: Mapping[str, str]) -> ActionResult:
        base_url = self.options.get("github_url") or get_config().github_url
        user = await sign_in(handle, base_url, params["username"], params["password"])
        return ActionResult.success(
            self.name,
            message=f"Signed in as {user}",
            data={"username": user, "url": handle.url},
        )
