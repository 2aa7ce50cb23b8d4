# =======================================================================================
# app/services/__init__.py - Services Package
# =======================================================================================
from .access_control import AccessDecisionService
from .dashboard_service import DashboardService
from .grant_service import GrantService
from .scanner_service import ScannerService
from .token_service import TokenService
from .user_service import UserService

__all__ = [
    "AccessDecisionService", "DashboardService", "GrantService",
    "ScannerService", "TokenService", "UserService",
]
