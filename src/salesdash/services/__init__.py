from .auth_service import AuthService
from .product_service import ProductService
from .sale_service import SaleService
from .user_service import UserService
from .report_service import ReportService
from .dashboard_service import DashboardService
from .collection import RecordCollection

__all__ = [
    "AuthService",
    "ProductService",
    "SaleService",
    "UserService",
    "ReportService",
    "DashboardService",
    "RecordCollection",
]
