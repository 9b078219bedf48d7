"""Access policy engine.

Decides whether a principal may perform an action on a record and which
rows a principal may see in list queries. Everything here is pure: callers
describe the target with an ``AccessTarget`` built from already-loaded data.
"""

import enum
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from ...core.exceptions import PermissionError
from ...core.logging import get_logger
from ..auth.models import UserRole
from ..auth.schemas import AuthenticatedUser

logger = get_logger(__name__)


class Action(str, enum.Enum):
    """Actions subject to authorization."""

    LIST = "list"
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    ASSIGN_TENANT = "assign_tenant"
    REMOVE_TENANT = "remove_tenant"
    REPORT_MAINTENANCE = "report_maintenance"
    UPDATE_MAINTENANCE = "update_maintenance"
    REFUND = "refund"


class EntityKind(str, enum.Enum):
    """Kinds of records guarded by the policy."""

    PROPERTY = "property"
    RENT_SCHEDULE = "rent_schedule"
    PAYMENT = "payment"
    TENANT_PROFILE = "tenant_profile"


class AccessTarget(BaseModel):
    """Ownership facts about the record an action is aimed at.

    ``landlord_id`` is the landlord owning the property behind the record,
    ``tenant_id`` the tenant attached to it (for a tenant profile, the
    profile's own id). ``housing_landlord_ids`` lists the landlords whose
    properties currently house the tenant of a profile.
    """

    model_config = ConfigDict(frozen=True)

    kind: EntityKind
    landlord_id: int | None = None
    tenant_id: int | None = None
    housing_landlord_ids: frozenset[int] = frozenset()

    @classmethod
    def for_property(cls, property_obj: Any) -> "AccessTarget":
        return cls(
            kind=EntityKind.PROPERTY,
            landlord_id=property_obj.landlord_id,
            tenant_id=property_obj.current_tenant_id,
        )

    @classmethod
    def for_new_property(cls, landlord_id: int | None) -> "AccessTarget":
        return cls(kind=EntityKind.PROPERTY, landlord_id=landlord_id)

    @classmethod
    def for_rent_schedule(cls, schedule: Any) -> "AccessTarget":
        """Requires ``schedule.property`` to be loaded."""
        return cls(
            kind=EntityKind.RENT_SCHEDULE,
            landlord_id=schedule.property.landlord_id,
            tenant_id=schedule.tenant_id,
        )

    @classmethod
    def for_new_rent_schedule(
        cls, property_obj: Any, tenant_id: int | None
    ) -> "AccessTarget":
        return cls(
            kind=EntityKind.RENT_SCHEDULE,
            landlord_id=property_obj.landlord_id,
            tenant_id=tenant_id,
        )

    @classmethod
    def for_new_payment(cls, schedule: Any) -> "AccessTarget":
        """Payment about to be recorded against ``schedule`` (property loaded)."""
        return cls(
            kind=EntityKind.PAYMENT,
            landlord_id=schedule.property.landlord_id,
            tenant_id=schedule.tenant_id,
        )

    @classmethod
    def for_payment(cls, payment: Any) -> "AccessTarget":
        """Requires ``payment.property`` to be loaded."""
        return cls(
            kind=EntityKind.PAYMENT,
            landlord_id=payment.property.landlord_id,
            tenant_id=payment.tenant_id,
        )

    @classmethod
    def for_tenant_profile(
        cls, tenant_id: int, housing_landlord_ids: set[int] | frozenset[int]
    ) -> "AccessTarget":
        return cls(
            kind=EntityKind.TENANT_PROFILE,
            tenant_id=tenant_id,
            housing_landlord_ids=frozenset(housing_landlord_ids),
        )


class Decision(BaseModel):
    """Outcome of a policy check."""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(allowed=False, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed


Rule = Callable[[AuthenticatedUser, AccessTarget], bool]


def _owns(principal: AuthenticatedUser, target: AccessTarget) -> bool:
    return target.landlord_id is not None and target.landlord_id == principal.id


def _is_own_tenancy(principal: AuthenticatedUser, target: AccessTarget) -> bool:
    return target.tenant_id is not None and target.tenant_id == principal.id


def _houses(principal: AuthenticatedUser, target: AccessTarget) -> bool:
    return principal.id in target.housing_landlord_ids


def _never(principal: AuthenticatedUser, target: AccessTarget) -> bool:
    return False


# (kind, action) -> (landlord rule, tenant rule); admins bypass the table.
_RULES: dict[tuple[EntityKind, Action], tuple[Rule, Rule]] = {
    (EntityKind.PROPERTY, Action.READ): (_owns, _is_own_tenancy),
    (EntityKind.PROPERTY, Action.CREATE): (_owns, _never),
    (EntityKind.PROPERTY, Action.UPDATE): (_owns, _never),
    (EntityKind.PROPERTY, Action.DELETE): (_owns, _never),
    (EntityKind.PROPERTY, Action.ASSIGN_TENANT): (_owns, _never),
    (EntityKind.PROPERTY, Action.REMOVE_TENANT): (_owns, _never),
    (EntityKind.PROPERTY, Action.REPORT_MAINTENANCE): (_owns, _is_own_tenancy),
    (EntityKind.PROPERTY, Action.UPDATE_MAINTENANCE): (_owns, _never),
    (EntityKind.RENT_SCHEDULE, Action.READ): (_owns, _is_own_tenancy),
    (EntityKind.RENT_SCHEDULE, Action.CREATE): (_owns, _never),
    (EntityKind.RENT_SCHEDULE, Action.UPDATE): (_owns, _is_own_tenancy),
    (EntityKind.RENT_SCHEDULE, Action.DELETE): (_owns, _never),
    (EntityKind.PAYMENT, Action.READ): (_owns, _is_own_tenancy),
    (EntityKind.PAYMENT, Action.CREATE): (_owns, _is_own_tenancy),
    (EntityKind.PAYMENT, Action.REFUND): (_owns, _never),
    (EntityKind.TENANT_PROFILE, Action.READ): (_houses, _is_own_tenancy),
    (EntityKind.TENANT_PROFILE, Action.UPDATE): (_houses, _is_own_tenancy),
}


def can_access(
    principal: AuthenticatedUser, action: Action, target: AccessTarget
) -> Decision:
    """Decide whether ``principal`` may perform ``action`` on ``target``.

    List actions are always allowed here; their restriction is expressed by
    ``scope_filter`` instead.
    """
    if principal.role == UserRole.ADMIN:
        return Decision.allow()

    if action == Action.LIST:
        return Decision.allow()

    rules = _RULES.get((target.kind, action))
    if rules is None:
        return Decision.deny(
            f"{action.value} is not supported on {target.kind.value} records"
        )

    landlord_rule, tenant_rule = rules
    if principal.role == UserRole.LANDLORD:
        rule = landlord_rule
    elif principal.role == UserRole.TENANT:
        rule = tenant_rule
    else:
        return Decision.deny(f"unknown role '{principal.role}'")

    if rule is _never:
        return Decision.deny(
            f"{principal.role.value} role may not {action.value} "
            f"{target.kind.value} records"
        )
    if not rule(principal, target):
        return Decision.deny(
            f"{target.kind.value} is outside the {principal.role.value}'s scope"
        )
    return Decision.allow()


def ensure_access(
    principal: AuthenticatedUser, action: Action, target: AccessTarget
) -> None:
    """Raise ``PermissionError`` unless ``can_access`` allows the action."""
    decision = can_access(principal, action, target)
    if not decision:
        logger.warning(
            "Access denied",
            extra={
                "principal_id": principal.id,
                "role": principal.role.value,
                "action": action.value,
                "entity": target.kind.value,
                "reason": decision.reason,
            },
        )
        raise PermissionError(
            action.value.replace("_", " "),
            target.kind.value.replace("_", " "),
            reason=decision.reason,
        )


# ----- Scope filters -----


def _values_at(record: Any, parts: list[str]) -> Iterator[Any]:
    """Yield every value reachable from ``record`` along a dotted path.

    Collections along the way fan out, so a path through a to-many relation
    yields one value per related item.
    """
    if not parts:
        yield record
        return
    if record is None:
        return
    head, rest = parts[0], parts[1:]
    if isinstance(record, Mapping):
        value = record.get(head)
    else:
        value = getattr(record, head, None)
    if isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            yield from _values_at(item, rest)
    else:
        yield from _values_at(value, rest)


class FieldCondition(BaseModel):
    """``path == value`` where ``path`` may traverse relations (``a.b``)."""

    model_config = ConfigDict(frozen=True)

    path: str
    value: Any

    def matches(self, record: Any) -> bool:
        return any(v == self.value for v in _values_at(record, self.path.split(".")))


class ScopeFilter(BaseModel):
    """Conjunction of field conditions; no conditions means everything."""

    model_config = ConfigDict(frozen=True)

    conditions: tuple[FieldCondition, ...] = ()

    @classmethod
    def everything(cls) -> "ScopeFilter":
        return cls()

    @classmethod
    def where(cls, path: str, value: Any) -> "ScopeFilter":
        return cls(conditions=(FieldCondition(path=path, value=value),))

    @property
    def is_unrestricted(self) -> bool:
        return not self.conditions

    def and_(self, other: "ScopeFilter") -> "ScopeFilter":
        return ScopeFilter(conditions=self.conditions + other.conditions)

    def matches(self, record: Any) -> bool:
        return all(condition.matches(record) for condition in self.conditions)


def scope_filter(principal: AuthenticatedUser, kind: EntityKind) -> ScopeFilter:
    """Predicate narrowing a list of ``kind`` records to what ``principal`` sees."""
    if principal.role == UserRole.ADMIN:
        return ScopeFilter.everything()

    landlord = principal.role == UserRole.LANDLORD

    if kind == EntityKind.PROPERTY:
        if landlord:
            return ScopeFilter.where("landlord_id", principal.id)
        return ScopeFilter.where("current_tenant_id", principal.id)

    if kind in (EntityKind.RENT_SCHEDULE, EntityKind.PAYMENT):
        if landlord:
            return ScopeFilter.where("property.landlord_id", principal.id)
        return ScopeFilter.where("tenant_id", principal.id)

    if kind == EntityKind.TENANT_PROFILE:
        if landlord:
            return ScopeFilter.where("rented_properties.landlord_id", principal.id)
        return ScopeFilter.where("id", principal.id)

    raise ValueError(f"No scope rule for {kind}")
