"""Access policy decisions and list scoping."""

from types import SimpleNamespace

import pytest

from rentroll_backend.core.exceptions import PermissionError
from rentroll_backend.modules.access.policy import (
    AccessTarget,
    Action,
    EntityKind,
    ScopeFilter,
    can_access,
    ensure_access,
    scope_filter,
)
from rentroll_backend.modules.auth.models import UserRole
from rentroll_backend.modules.auth.schemas import AuthenticatedUser

ADMIN = AuthenticatedUser(id=1, role=UserRole.ADMIN)
LANDLORD = AuthenticatedUser(id=2, role=UserRole.LANDLORD)
OTHER_LANDLORD = AuthenticatedUser(id=3, role=UserRole.LANDLORD)
TENANT = AuthenticatedUser(id=4, role=UserRole.TENANT)
OTHER_TENANT = AuthenticatedUser(id=5, role=UserRole.TENANT)


def leased_property():
    return SimpleNamespace(id=10, landlord_id=LANDLORD.id, current_tenant_id=TENANT.id)


def schedule_on(property_obj):
    return SimpleNamespace(
        id=20,
        property=property_obj,
        property_id=property_obj.id,
        tenant_id=TENANT.id,
    )


@pytest.mark.parametrize("action", list(Action))
def test_admin_may_do_anything(action):
    target = AccessTarget.for_property(leased_property())
    assert can_access(ADMIN, action, target)


def test_landlord_owns_property():
    target = AccessTarget.for_property(leased_property())
    for action in (Action.READ, Action.UPDATE, Action.DELETE, Action.ASSIGN_TENANT):
        assert can_access(LANDLORD, action, target)


def test_foreign_landlord_is_denied_with_reason():
    target = AccessTarget.for_property(leased_property())
    decision = can_access(OTHER_LANDLORD, Action.UPDATE, target)
    assert not decision
    assert "scope" in decision.reason


def test_tenant_reads_but_never_edits_property():
    target = AccessTarget.for_property(leased_property())
    assert can_access(TENANT, Action.READ, target)
    assert can_access(TENANT, Action.REPORT_MAINTENANCE, target)
    assert not can_access(TENANT, Action.UPDATE, target)
    assert not can_access(OTHER_TENANT, Action.READ, target)


def test_tenant_may_pay_only_own_schedule():
    target = AccessTarget.for_new_payment(schedule_on(leased_property()))
    assert can_access(TENANT, Action.CREATE, target)
    assert can_access(LANDLORD, Action.CREATE, target)
    assert not can_access(OTHER_TENANT, Action.CREATE, target)
    assert not can_access(OTHER_LANDLORD, Action.CREATE, target)


def test_only_owner_schedules_rent():
    target = AccessTarget.for_new_rent_schedule(leased_property(), TENANT.id)
    assert can_access(LANDLORD, Action.CREATE, target)
    assert not can_access(TENANT, Action.CREATE, target)


def test_tenant_profile_visible_to_housing_landlord():
    target = AccessTarget.for_tenant_profile(TENANT.id, {LANDLORD.id})
    assert can_access(LANDLORD, Action.READ, target)
    assert can_access(TENANT, Action.UPDATE, target)
    assert not can_access(OTHER_LANDLORD, Action.READ, target)
    assert not can_access(OTHER_TENANT, Action.READ, target)


def test_unsupported_action_is_denied():
    target = AccessTarget.for_tenant_profile(TENANT.id, {LANDLORD.id})
    decision = can_access(LANDLORD, Action.REFUND, target)
    assert not decision
    assert "not supported" in decision.reason


def test_ensure_access_raises_permission_error():
    target = AccessTarget.for_property(leased_property())
    with pytest.raises(PermissionError) as exc_info:
        ensure_access(TENANT, Action.DELETE, target)
    assert exc_info.value.kind == "forbidden"
    assert exc_info.value.status_code == 403


def test_scope_filters_by_role():
    assert scope_filter(ADMIN, EntityKind.PROPERTY).is_unrestricted
    assert scope_filter(LANDLORD, EntityKind.PROPERTY) == ScopeFilter.where(
        "landlord_id", LANDLORD.id
    )
    assert scope_filter(TENANT, EntityKind.PAYMENT) == ScopeFilter.where(
        "tenant_id", TENANT.id
    )
    assert scope_filter(LANDLORD, EntityKind.RENT_SCHEDULE) == ScopeFilter.where(
        "property.landlord_id", LANDLORD.id
    )


def test_scope_matches_through_relations():
    schedule = schedule_on(leased_property())
    assert scope_filter(LANDLORD, EntityKind.RENT_SCHEDULE).matches(schedule)
    assert not scope_filter(OTHER_LANDLORD, EntityKind.RENT_SCHEDULE).matches(schedule)

    tenant = SimpleNamespace(
        id=TENANT.id,
        rented_properties=[
            SimpleNamespace(landlord_id=OTHER_LANDLORD.id),
            SimpleNamespace(landlord_id=LANDLORD.id),
        ],
    )
    assert scope_filter(LANDLORD, EntityKind.TENANT_PROFILE).matches(tenant)
    assert not scope_filter(ADMIN, EntityKind.TENANT_PROFILE).conditions


def test_scope_filters_combine():
    combined = ScopeFilter.where("landlord_id", 2).and_(
        ScopeFilter.where("current_tenant_id", 4)
    )
    assert combined.matches(leased_property())
    assert not combined.matches(
        SimpleNamespace(landlord_id=2, current_tenant_id=None)
    )
