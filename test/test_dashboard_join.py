import pytest

from conftest import FakeApi

from salesdash.domain.errors import ApiError, AuthenticationError
from salesdash.services.dashboard_service import (
    DASHBOARD_LOAD_ERROR,
    SALES_PAGE_LOAD_ERROR,
    DashboardService,
)
from salesdash.services.product_service import ProductService
from salesdash.services.sale_service import SaleService
from salesdash.services.user_service import UserService

SALES = [
    {"id": i, "productId": 1, "userId": 1, "quantity": 1, "unitPrice": 2, "date": "2024-03-0%d" % i}
    for i in range(1, 8)
]
METRICS = {"totalSales": 14, "salesByProduct": [{"productName": "Pen", "totalQuantity": 7, "totalAmount": 14}],
           "salesByUser": [], "monthlySales": [{"month": "2024-03", "totalAmount": 14}]}


def _service(api):
    return DashboardService(SaleService(api), ProductService(api), UserService(api))


def test_dashboard_loads_all_three_sources():
    api = FakeApi({
        ("GET", "/sales/metrics"): METRICS,
        ("GET", "/sales"): SALES,
        ("GET", "/products"): [{"id": 1, "name": "Pen", "description": "Blue ink pen"}],
    })

    data = _service(api).load()

    assert [s.id for s in data.recent_sales] == [1, 2, 3, 4, 5]
    assert data.product_count == 1
    assert data.metrics.best_product == "Pen"
    assert data.metrics.monthly_amount == 14
    assert sorted(c[1] for c in api.calls) == ["/products", "/sales", "/sales/metrics"]


def test_dashboard_fails_whole_when_one_source_fails():
    api = FakeApi({
        ("GET", "/sales/metrics"): METRICS,
        ("GET", "/sales"): SALES,
        ("GET", "/products"): ApiError("boom", 500),
    })

    with pytest.raises(ApiError) as info:
        _service(api).load()

    assert str(info.value) == DASHBOARD_LOAD_ERROR
    assert info.value.status == 500


def test_sales_page_join_uses_its_own_message():
    api = FakeApi({
        ("GET", "/sales"): ApiError("timeout"),
        ("GET", "/products"): [],
        ("GET", "/users"): [],
    })

    with pytest.raises(ApiError, match=SALES_PAGE_LOAD_ERROR):
        _service(api).load_sales_page()


def test_expired_session_surfaces_as_authentication_error():
    api = FakeApi({
        ("GET", "/sales/metrics"): AuthenticationError("Unauthorized", 401),
        ("GET", "/sales"): SALES,
        ("GET", "/products"): [],
    })

    with pytest.raises(AuthenticationError):
        _service(api).load()


def test_reports_page_loads_products_and_metrics():
    api = FakeApi({
        ("GET", "/products"): [{"id": 1, "name": "Pen", "description": "Blue ink pen"}],
        ("GET", "/sales/metrics"): METRICS,
    })

    data = _service(api).load_reports_page()

    assert [p.name for p in data.products] == ["Pen"]
    assert data.metrics.total_sales == 14
