"""Service objects wrapping the DigiPlot backend resources."""

from .auth import AuthResult, AuthService
from .base import ListFilters, Page
from .dashboard import AdminDashboardService, LandlordDashboardService, TenantDashboardService
from .maintenance import MaintenanceFilters, MaintenanceService
from .payment import PaymentFilters, PaymentInitiation, PaymentService
from .property import PropertyFilters, PropertyService
from .tenant import TenantFilters, TenantService
from .unit import UnitFilters, UnitService
from .user import UserFilters, UserService

__all__ = [
    "AuthResult",
    "AuthService",
    "ListFilters",
    "Page",
    "AdminDashboardService",
    "LandlordDashboardService",
    "TenantDashboardService",
    "MaintenanceFilters",
    "MaintenanceService",
    "PaymentFilters",
    "PaymentInitiation",
    "PaymentService",
    "PropertyFilters",
    "PropertyService",
    "TenantFilters",
    "TenantService",
    "UnitFilters",
    "UnitService",
    "UserFilters",
    "UserService",
]
