"""Kinds of actions tracked during impersonation."""

from enum import StrEnum


class ActionType(StrEnum):
    """Closed set of trackable impersonation actions."""

    PAGE_VIEW = "page-view"
    API_CALL = "api-call"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    EXPORT = "export"
    SEARCH = "search"
    PRINT = "print"


CRUD_ACTION_TYPES = frozenset({ActionType.CREATE, ActionType.UPDATE, ActionType.DELETE})
