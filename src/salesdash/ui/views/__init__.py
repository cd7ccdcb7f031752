from .auth_views import LoginView, RegisterView
from .dashboard_view import DashboardView
from .products_view import ProductsView
from .sales_view import SalesView
from .reports_view import ReportsView
from .profile_view import ProfileView
from .not_found_view import NotFoundView

__all__ = [
    "LoginView",
    "RegisterView",
    "DashboardView",
    "ProductsView",
    "SalesView",
    "ReportsView",
    "ProfileView",
    "NotFoundView",
]
