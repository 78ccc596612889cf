"""
Action registry: static mapping from ActionId to action unit.
"""

from typing import Any, Dict, List, Mapping, Optional, Type

from pagerunner.actions.base import Action, ActionId
from pagerunner.actions.create_repository import CreateRepositoryAction
from pagerunner.actions.gather_links import GatherLinksAction
from pagerunner.actions.login import LoginAction
from pagerunner.actions.ping import PingAction
from pagerunner.core.errors import UnknownAction


REGISTRY: Dict[ActionId, Type[Action]] = {
    ActionId.PING: PingAction,
    ActionId.LOGIN: LoginAction,
    ActionId.CREATE_REPOSITORY: CreateRepositoryAction,
    ActionId.GATHER_LINKS: GatherLinksAction,
}


def available_actions() -> List[str]:
    return [action_id.value for action_id in REGISTRY]


def parse_action_id(identifier: str) -> ActionId:
    """
    Normalize identifier into an ActionId.

    Matching ignores case, surrounding whitespace, and treats '-' as '_'.

    Example:
        >>> parse_action_id("Gather-Links")
        <ActionId.GATHER_LINKS: 'gather_links'>
    """
    key = (identifier or "").strip().lower().replace("-", "_")
    try:
        return ActionId(key)
    except ValueError:
        raise UnknownAction(identifier, available_actions()) from None


def resolve(identifier: str, options: Optional[Mapping[str, Any]] = None) -> Action:
    """
    Return a fresh action unit for identifier.

    Raises:
        UnknownAction: If identifier names no registered action
    """
    action_id = parse_action_id(identifier)
    action_cls = REGISTRY.get(action_id)
    if action_cls is None:
        raise UnknownAction(identifier, available_actions())
    return action_cls(options)
