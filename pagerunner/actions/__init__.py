"""
Action units dispatched by the command line.

Module Structure:
- base: ActionId, ActionDescriptor and the Action contract
- registry: ActionId -> action lookup
- ping, login, create_repository, gather_links: the actions themselves
"""

from pagerunner.actions.base import Action, ActionDescriptor, ActionId
from pagerunner.actions.registry import REGISTRY, available_actions, parse_action_id, resolve

__all__ = [
    "Action",
    "ActionDescriptor",
    "ActionId",
    "REGISTRY",
    "available_actions",
    "parse_action_id",
    "resolve",
]
