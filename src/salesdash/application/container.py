from __future__ import annotations

from dataclasses import dataclass

import requests

from salesdash.application.session import SessionContext
from salesdash.config import ApiSettings, AppPaths
from salesdash.repositories.api_client import ApiClient
from salesdash.repositories.token_store import TokenStore
from salesdash.services.auth_service import AuthService
from salesdash.services.dashboard_service import DashboardService
from salesdash.services.product_service import ProductService
from salesdash.services.report_service import ReportService
from salesdash.services.sale_service import SaleService
from salesdash.services.user_service import UserService


@dataclass(frozen=True)
class AppContainer:
    settings: ApiSettings
    paths: AppPaths
    session: SessionContext
    api: ApiClient
    auth: AuthService
    products: ProductService
    sales: SaleService
    users: UserService
    reports: ReportService
    dashboard: DashboardService


def build_container(settings: ApiSettings, paths: AppPaths, http: requests.Session | None = None) -> AppContainer:
    session = SessionContext(TokenStore(paths.token_path)).hydrate()
    api = ApiClient(settings.api_url, session, http=http, timeout=settings.timeout)

    products = ProductService(api)
    sales = SaleService(api)
    users = UserService(api, session)

    return AppContainer(
        settings=settings,
        paths=paths,
        session=session,
        api=api,
        auth=AuthService(api, session),
        products=products,
        sales=sales,
        users=users,
        reports=ReportService(api),
        dashboard=DashboardService(sales, products, users),
    )
