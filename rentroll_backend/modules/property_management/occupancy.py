"""Property occupancy state machine.

Transitions are planned here from an already-loaded property and applied by
the crud layer as one conditional UPDATE guarded by the observed status and
tenant. Nothing in this module touches the database.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict

from ...core.exceptions import InvalidStateError
from .models import PropertyStatus

# Statuses a generic property edit may move between while vacant
EDITABLE_STATUSES = frozenset(
    {PropertyStatus.AVAILABLE, PropertyStatus.MAINTENANCE, PropertyStatus.UNAVAILABLE}
)


class OccupancyChange(BaseModel):
    """A guarded write: apply ``values`` only if the row still matches."""

    model_config = ConfigDict(frozen=True)

    name: str
    property_id: int
    expected_status: PropertyStatus
    expected_tenant_id: int | None
    values: dict[str, Any]


def plan_assignment(
    property_obj: Any,
    tenant_id: int,
    move_in_date: date | None = None,
    lease_end_date: date | None = None,
) -> OccupancyChange:
    """``available -> occupied``.

    Raises:
        InvalidStateError: If the property is not available or already housed
    """
    if (
        property_obj.status != PropertyStatus.AVAILABLE
        or property_obj.current_tenant_id is not None
    ):
        raise InvalidStateError(
            "Property is not available for assignment",
            details={
                "property_id": property_obj.id,
                "status": PropertyStatus(property_obj.status).value,
            },
        )

    values: dict[str, Any] = {
        "current_tenant_id": tenant_id,
        "status": PropertyStatus.OCCUPIED,
    }
    if move_in_date is not None:
        values["lease_start_date"] = move_in_date
    if lease_end_date is not None:
        values["lease_end_date"] = lease_end_date

    return OccupancyChange(
        name="assign_tenant",
        property_id=property_obj.id,
        expected_status=PropertyStatus.AVAILABLE,
        expected_tenant_id=None,
        values=values,
    )


def plan_removal(property_obj: Any, tenant_id: int) -> OccupancyChange:
    """``occupied -> available``; lease terms are cleared.

    Raises:
        InvalidStateError: If ``tenant_id`` is not the current tenant
    """
    if property_obj.current_tenant_id != tenant_id:
        raise InvalidStateError(
            "Tenant is not currently assigned to this property",
            details={"property_id": property_obj.id, "tenant_id": tenant_id},
        )

    return OccupancyChange(
        name="remove_tenant",
        property_id=property_obj.id,
        expected_status=PropertyStatus(property_obj.status),
        expected_tenant_id=tenant_id,
        values={
            "current_tenant_id": None,
            "status": PropertyStatus.AVAILABLE,
            "lease_start_date": None,
            "lease_end_date": None,
            "lease_renewal_terms": None,
        },
    )


def plan_status_edit(
    property_obj: Any, new_status: PropertyStatus | None
) -> OccupancyChange | None:
    """Status change requested through a generic property update.

    Returns ``None`` when the status does not change.

    Raises:
        InvalidStateError: On ``occupied`` as a target, or when the property
            currently houses a tenant
    """
    if new_status is None or new_status == property_obj.status:
        return None

    if new_status not in EDITABLE_STATUSES:
        raise InvalidStateError(
            "A property becomes occupied only by assigning a tenant",
            details={"property_id": property_obj.id, "status": new_status.value},
        )
    if (
        property_obj.status == PropertyStatus.OCCUPIED
        or property_obj.current_tenant_id is not None
    ):
        raise InvalidStateError(
            "Remove the current tenant before changing the property status",
            details={"property_id": property_obj.id},
        )

    return OccupancyChange(
        name="edit_status",
        property_id=property_obj.id,
        expected_status=PropertyStatus(property_obj.status),
        expected_tenant_id=None,
        values={"status": new_status},
    )


def initial_status(requested: PropertyStatus | None) -> PropertyStatus:
    """Status a new property starts in."""
    if requested is None:
        return PropertyStatus.AVAILABLE
    if requested not in EDITABLE_STATUSES:
        raise InvalidStateError(
            "A new property cannot start occupied",
            details={"status": requested.value},
        )
    return requested


def satisfies_invariant(status: PropertyStatus, current_tenant_id: int | None) -> bool:
    """``occupied`` iff a tenant is set."""
    return (status == PropertyStatus.OCCUPIED) == (current_tenant_id is not None)
