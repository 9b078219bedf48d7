"""CRUD operations for tenant profiles."""

from ...core.base_crud import BaseCRUD
from ..auth.models import TenantUser


class TenantProfileCRUD(BaseCRUD[TenantUser]):
    search_fields = ["first_name", "last_name", "email"]
    default_relationships = ["rented_properties"]
    default_order_by = "first_name"
    default_order_desc = False


tenant_profile_crud = TenantProfileCRUD(TenantUser)
