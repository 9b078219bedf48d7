"""Role-based access policy."""

from .policy import (
    AccessTarget,
    Action,
    Decision,
    EntityKind,
    FieldCondition,
    ScopeFilter,
    can_access,
    ensure_access,
    scope_filter,
)

__all__ = [
    "Action",
    "EntityKind",
    "AccessTarget",
    "Decision",
    "FieldCondition",
    "ScopeFilter",
    "can_access",
    "ensure_access",
    "scope_filter",
]
