from enum import Enum
from typing import Callable, Dict

from .exceptions import AccessDenied


class Action(str, Enum):
    LIST = "list"
    SHOW = "show"
    NEW = "new"
    CREATE = "create"
    SHOW_VERSION = "show-version"
    LIST_VERSIONS = "list-versions"
    USAGES = "usages"
    EDIT = "edit"
    UPDATE = "update"
    DESTROY = "destroy"
    PUBLISH = "publish"
    REVERT = "revert"


class ActionKind(Enum):
    READ = "read"
    EDIT = "edit"
    PUBLISH = "publish"
    UNCLASSIFIED = "unclassified"


# Whitelist: anything not listed here is unclassified and denied.
ACTION_KINDS: Dict[Action, ActionKind] = {
    Action.LIST: ActionKind.READ,
    Action.SHOW: ActionKind.READ,
    Action.NEW: ActionKind.READ,
    Action.CREATE: ActionKind.READ,
    Action.SHOW_VERSION: ActionKind.READ,
    Action.LIST_VERSIONS: ActionKind.READ,
    Action.USAGES: ActionKind.READ,
    Action.EDIT: ActionKind.EDIT,
    Action.UPDATE: ActionKind.EDIT,
    Action.DESTROY: ActionKind.PUBLISH,
    Action.PUBLISH: ActionKind.PUBLISH,
    Action.REVERT: ActionKind.PUBLISH,
}

CAPABILITY_CHECKS: Dict[ActionKind, Callable] = {
    ActionKind.READ: lambda user, block: True,
    ActionKind.EDIT: lambda user, block: bool(user.can_edit(block)),
    ActionKind.PUBLISH: lambda user, block: bool(user.can_publish(block)),
    ActionKind.UNCLASSIFIED: lambda user, block: False,
}


def classify(action) -> ActionKind:
    """Map an action (enum member or its name) to its kind."""
    if not isinstance(action, Action):
        try:
            action = Action(action)
        except ValueError:
            return ActionKind.UNCLASSIFIED
    return ACTION_KINDS.get(action, ActionKind.UNCLASSIFIED)


class PermissionPolicy:
    """
    Decides whether a user may perform an action on a block.

    By default everyone with CMS access may list, view and create blocks;
    editing requires the user to be able to edit the block and destroying,
    publishing or reverting requires the user to be able to publish it.
    """

    def allows(self, action, user, block) -> bool:
        return CAPABILITY_CHECKS[classify(action)](user, block)

    def check(self, action, user, block) -> None:
        if not self.allows(action, user, block):
            raise AccessDenied(f"Access Denied: {getattr(action, 'value', action)}")

    def ensure_can_view(self, user, block) -> None:
        if not user.can_view(block):
            raise AccessDenied("You do not have permission to view this content")
