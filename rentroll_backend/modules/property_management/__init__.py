"""Property management module: properties, occupancy and maintenance."""

from .models import (
    MaintenanceRecord,
    MaintenanceStatus,
    Property,
    PropertyStatus,
    PropertyType,
)

__all__ = [
    # Models
    "Property",
    "MaintenanceRecord",
    # Enums
    "PropertyStatus",
    "PropertyType",
    "MaintenanceStatus",
]
