"""Ingestion boundary: every backend payload is normalized here, right after
the fetch, so the rest of the client only sees well-typed models.

The backend serializes decimals as strings (``"2.50"``) after JSON round trips,
so numeric fields are re-parsed. Values that do not parse become ``0`` instead
of failing the whole page.
"""
from __future__ import annotations

import math
import re
from typing import Any, Iterable

from salesdash.domain.models import (
    MonthlySales,
    Product,
    ProductSales,
    Sale,
    SalesMetrics,
    User,
    UserSales,
)

UNKNOWN_NAME = "Desconocido"

_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def to_number(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        if not match:
            return 0.0
        number = float(match.group(0))
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def to_int(value: Any) -> int:
    return int(to_number(value))


def format_money(value: Any) -> str:
    return f"{to_number(value):.2f}"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def user_from_api(data: dict) -> User:
    return User(
        id=to_int(data.get("id")),
        name=_text(data.get("name")),
        email=_text(data.get("email")),
    )


def product_from_api(data: dict) -> Product:
    return Product(
        id=to_int(data.get("id")),
        name=_text(data.get("name")),
        description=_text(data.get("description")),
    )


def sale_from_api(data: dict) -> Sale:
    product = data.get("product")
    user = data.get("user")
    return Sale(
        id=to_int(data.get("id")),
        product_id=to_int(data.get("productId", data.get("product_id"))),
        user_id=to_int(data.get("userId", data.get("user_id"))),
        quantity=to_number(data.get("quantity")),
        unit_price=to_number(data.get("unitPrice", data.get("unit_price"))),
        date=_text(data.get("date")),
        product=product_from_api(product) if isinstance(product, dict) else None,
        user=user_from_api(user) if isinstance(user, dict) else None,
    )


def _records(payload: Any) -> Iterable[dict]:
    if not isinstance(payload, list):
        return []
    return [row for row in payload if isinstance(row, dict)]


def users_from_api(payload: Any) -> list[User]:
    return [user_from_api(row) for row in _records(payload)]


def products_from_api(payload: Any) -> list[Product]:
    return [product_from_api(row) for row in _records(payload)]


def sales_from_api(payload: Any) -> list[Sale]:
    return [sale_from_api(row) for row in _records(payload)]


def metrics_from_api(payload: Any) -> SalesMetrics:
    if not isinstance(payload, dict):
        return SalesMetrics()
    # report responses wrap the metrics in "content"
    if isinstance(payload.get("content"), dict):
        payload = payload["content"]

    by_product = tuple(
        ProductSales(
            product_name=_text(row.get("productName")) or UNKNOWN_NAME,
            total_quantity=to_number(row.get("totalQuantity")),
            total_amount=to_number(row.get("totalAmount")),
        )
        for row in _records(payload.get("salesByProduct"))
    )
    by_user = tuple(
        UserSales(
            user_name=_text(row.get("userName")) or UNKNOWN_NAME,
            total_quantity=to_number(row.get("totalQuantity")),
            total_amount=to_number(row.get("totalAmount")),
        )
        for row in _records(payload.get("salesByUser"))
    )
    monthly = tuple(
        MonthlySales(month=_text(row.get("month")), total_amount=to_number(row.get("totalAmount")))
        for row in _records(payload.get("monthlySales"))
    )
    return SalesMetrics(
        total_sales=to_number(payload.get("totalSales")),
        sales_by_product=by_product,
        sales_by_user=by_user,
        monthly_sales=monthly,
    )
