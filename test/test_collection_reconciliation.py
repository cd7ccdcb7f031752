import pytest

from conftest import FakeApi

from salesdash.domain.errors import ApiError, AuthenticationError, ValidationError
from salesdash.services.collection import PRODUCT_MESSAGES, SALE_MESSAGES, RecordCollection
from salesdash.services.product_service import ProductService
from salesdash.services.sale_service import SaleService

PRODUCTS = [
    {"id": 1, "name": "Pen", "description": "Blue ink pen"},
    {"id": 2, "name": "Cup", "description": "Ceramic cup"},
]


def _products(api):
    service = ProductService(api)
    collection = RecordCollection(service.list, service.create, service.update, service.delete, messages=PRODUCT_MESSAGES)
    return collection


def test_load_fetches_collection_once():
    api = FakeApi({("GET", "/products"): PRODUCTS})
    products = _products(api)

    assert products.load() is True
    assert [p.name for p in products.items] == ["Pen", "Cup"]
    assert api.calls == [("GET", "/products", None)]


def test_load_failure_sets_localized_message():
    api = FakeApi({("GET", "/products"): ApiError("boom", 500)})
    products = _products(api)

    assert products.load() is False
    assert products.items == []
    assert products.error == "Error al cargar los productos"


def test_create_appends_backend_record():
    api = FakeApi({
        ("GET", "/products"): PRODUCTS,
        ("POST", "/products"): lambda payload: {"id": 3, **payload},
    })
    products = _products(api)
    products.load()

    created = products.create({"name": "Lamp", "description": "Desk lamp"})

    assert created.id == 3
    assert [p.id for p in products.items] == [1, 2, 3]
    assert api.calls[-1] == ("POST", "/products", {"name": "Lamp", "description": "Desk lamp"})


def test_update_replaces_by_id_without_refetch():
    api = FakeApi({
        ("GET", "/products"): PRODUCTS,
        ("PUT", "/products/2"): lambda payload: {"id": 2, **payload},
    })
    products = _products(api)
    products.load()

    products.update(2, {"name": "Mug", "description": "Ceramic mug"})

    assert [p.name for p in products.items] == ["Pen", "Mug"]
    assert [c[0] for c in api.calls].count("GET") == 1


def test_failed_update_leaves_list_unchanged():
    api = FakeApi({
        ("GET", "/products"): PRODUCTS,
        ("PUT", "/products/2"): ApiError("conflict", 409),
    })
    products = _products(api)
    products.load()
    before = list(products.items)

    assert products.update(2, {"name": "Mug", "description": "Ceramic mug"}) is None
    assert products.items == before
    assert products.error == "Error al guardar el producto"


def test_invalid_form_never_reaches_backend():
    api = FakeApi({("GET", "/products"): PRODUCTS})
    products = _products(api)
    products.load()

    with pytest.raises(ValidationError):
        products.create({"name": "X", "description": ""})

    assert [c[0] for c in api.calls] == ["GET"]
    assert len(products.items) == 2


def test_delete_requires_confirmation_before_calling_backend():
    api = FakeApi({("GET", "/products"): PRODUCTS, ("DELETE", "/products/1"): None})
    products = _products(api)
    products.load()

    products.request_delete(1)
    assert [c[0] for c in api.calls] == ["GET"]

    assert products.confirm_delete() is True
    assert [p.id for p in products.items] == [2]
    assert products.pending_delete_id is None


def test_cancelled_delete_does_nothing():
    api = FakeApi({("GET", "/products"): PRODUCTS})
    products = _products(api)
    products.load()

    products.request_delete(1)
    products.cancel_delete()

    assert products.confirm_delete() is False
    assert len(products.items) == 2
    assert [c[0] for c in api.calls] == ["GET"]


def test_failed_delete_keeps_record_and_surfaces_error():
    api = FakeApi({
        ("GET", "/sales"): [{"id": 1, "productId": 1, "userId": 1, "quantity": 1, "unitPrice": 1, "date": "2024-01-01"}],
        ("DELETE", "/sales/1"): ApiError("backend down"),
    })
    service = SaleService(api)
    sales = RecordCollection(service.list, service.create, service.update, service.delete, messages=SALE_MESSAGES)
    sales.load()

    sales.request_delete(1)

    assert sales.confirm_delete() is False
    assert [s.id for s in sales.items] == [1]
    assert sales.error == "Error al eliminar la venta"


def test_authentication_failure_is_recorded_and_re_raised():
    api = FakeApi({("GET", "/products"): AuthenticationError("Unauthorized", 401)})
    products = _products(api)

    with pytest.raises(AuthenticationError):
        products.load()
    assert products.error == "Error al cargar los productos"
    assert products.is_loading is False


def test_reload_swaps_in_the_backend_copy():
    api = FakeApi({
        ("GET", "/products"): PRODUCTS,
        ("GET", "/products/2"): {"id": 2, "name": "Mug", "description": "Ceramic mug"},
    })
    service = ProductService(api)
    products = RecordCollection(
        service.list, service.create, service.update, service.delete,
        messages=PRODUCT_MESSAGES, fetch_one=service.get,
    )
    products.load()

    record = products.reload(2)

    assert record.name == "Mug"
    assert [p.name for p in products.items] == ["Pen", "Mug"]


def test_failed_reload_keeps_list_and_reports_load_error():
    api = FakeApi({("GET", "/sales"): [], ("GET", "/sales/5"): ApiError("gone", 500)})
    service = SaleService(api)
    sales = RecordCollection(service.list, messages=SALE_MESSAGES, fetch_one=service.get)
    sales.load()

    assert sales.reload(5) is None
    assert sales.items == []
    assert sales.error == "Error al cargar las ventas"
