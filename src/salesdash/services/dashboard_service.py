from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging
from typing import Any, Callable, Sequence

from salesdash.domain.errors import ApiError, AuthenticationError
from salesdash.domain.models import Product, Sale, SalesMetrics, User

log = logging.getLogger(__name__)

DASHBOARD_LOAD_ERROR = "Error al cargar los datos del dashboard"
SALES_PAGE_LOAD_ERROR = "Error al cargar los datos"
REPORTS_PAGE_LOAD_ERROR = "Error al cargar datos iniciales"
RECENT_SALES = 5


def gather(calls: Sequence[Callable[[], Any]], error_message: str) -> list[Any]:
    """Run independent fetches concurrently and wait for all of them.

    All-or-nothing: if any call fails, no result is returned. Authentication
    failures keep their type so the caller can end the session.
    """
    with ThreadPoolExecutor(max_workers=max(len(calls), 1)) as pool:
        futures = [pool.submit(call) for call in calls]
        results = []
        failure: BaseException | None = None
        for future in futures:
            try:
                results.append(future.result())
            except Exception as e:
                if failure is None or isinstance(e, AuthenticationError):
                    failure = e
    if failure is not None:
        log.error("%s: %s", error_message, failure, exc_info=failure)
        if isinstance(failure, AuthenticationError):
            raise failure
        raise ApiError(error_message, getattr(failure, "status", None)) from failure
    return results


@dataclass(frozen=True)
class DashboardData:
    metrics: SalesMetrics
    recent_sales: list[Sale]
    products: list[Product]

    @property
    def product_count(self) -> int:
        return len(self.products)


@dataclass(frozen=True)
class SalesPageData:
    sales: list[Sale]
    products: list[Product]
    users: list[User]


@dataclass(frozen=True)
class ReportsPageData:
    products: list[Product]
    metrics: SalesMetrics


class DashboardService:
    def __init__(self, sales_service, product_service, user_service=None):
        self.sales = sales_service
        self.products = product_service
        self.users = user_service

    def load(self) -> DashboardData:
        metrics, sales, products = gather(
            [self.sales.metrics, self.sales.list, self.products.list],
            DASHBOARD_LOAD_ERROR,
        )
        return DashboardData(metrics=metrics, recent_sales=list(sales)[:RECENT_SALES], products=list(products))

    def load_sales_page(self) -> SalesPageData:
        if self.users is None:
            raise RuntimeError("user service is required to load the sales page")
        sales, products, users = gather(
            [self.sales.list, self.products.list, self.users.list],
            SALES_PAGE_LOAD_ERROR,
        )
        return SalesPageData(sales=list(sales), products=list(products), users=list(users))

    def load_reports_page(self) -> ReportsPageData:
        products, metrics = gather([self.products.list, self.sales.metrics], REPORTS_PAGE_LOAD_ERROR)
        return ReportsPageData(products=list(products), metrics=metrics)
