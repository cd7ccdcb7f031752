"""Client-side filtering and derived sales figures.

Everything here is recomputed from the full in-memory lists on each call.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date as date_type, datetime
from typing import Iterable, Optional, Sequence

from salesdash.domain.models import Product, Sale, User
from salesdash.domain.normalize import UNKNOWN_NAME, to_number

NO_PRODUCT = "N/A"


@dataclass(frozen=True)
class SaleFilters:
    search_term: str = ""
    product_id: Optional[int] = None
    date: Optional[str] = None


@dataclass(frozen=True)
class SalesDigest:
    filtered_sales: list[Sale]
    sales_total: float
    today_sales_count: int
    top_selling_product: str


def product_name(product_id: int, products: Iterable[Product]) -> str:
    for p in products:
        if p.id == product_id:
            return p.name
    return UNKNOWN_NAME


def user_name(user_id: int, users: Iterable[User]) -> str:
    for u in users:
        if u.id == user_id:
            return u.name
    return UNKNOWN_NAME


def sale_day(sale_date: str) -> str:
    """Local calendar day (YYYY-MM-DD) of an ISO-8601 date or datetime."""
    text = (sale_date or "").strip()
    if not text:
        return ""
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            return date_type.fromisoformat(text[:10]).isoformat()
        except ValueError:
            return ""
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.date().isoformat()


def _sale_product_name(sale: Sale, products: Sequence[Product]) -> str:
    name = product_name(sale.product_id, products)
    if name == UNKNOWN_NAME and sale.product is not None and sale.product.name:
        return sale.product.name
    return name


def _sale_user_name(sale: Sale, users: Sequence[User]) -> str:
    name = user_name(sale.user_id, users)
    if name == UNKNOWN_NAME and sale.user is not None and sale.user.name:
        return sale.user.name
    return name


def filter_sales(
    sales: Iterable[Sale],
    products: Sequence[Product],
    users: Sequence[User],
    filters: SaleFilters,
) -> list[Sale]:
    term = (filters.search_term or "").lower()
    out = []
    for s in sales:
        if term and not (
            term in _sale_product_name(s, products).lower()
            or term in _sale_user_name(s, users).lower()
            or term in str(s.id)
        ):
            continue
        if filters.product_id is not None and s.product_id != filters.product_id:
            continue
        if filters.date and sale_day(s.date) != filters.date:
            continue
        out.append(s)
    return out


def sales_total(sales: Iterable[Sale]) -> float:
    return sum((to_number(s.quantity) * to_number(s.unit_price) for s in sales), 0.0)


def today_sales_count(sales: Iterable[Sale], today: Optional[date_type] = None) -> int:
    day = (today or date_type.today()).isoformat()
    return sum(1 for s in sales if sale_day(s.date) == day)


def top_selling_product(sales: Iterable[Sale], products: Sequence[Product]) -> str:
    if not products:
        return NO_PRODUCT

    qty_by_product: dict[int, float] = {}
    for s in sales:
        qty_by_product[s.product_id] = qty_by_product.get(s.product_id, 0.0) + to_number(s.quantity)

    best = products[0]
    best_qty = qty_by_product.get(best.id, 0.0)
    for p in products[1:]:
        qty = qty_by_product.get(p.id, 0.0)
        # strict comparison keeps the first product on ties
        if qty > best_qty:
            best, best_qty = p, qty
    return best.name


def derive_sales_digest(
    sales: Sequence[Sale],
    products: Sequence[Product],
    users: Sequence[User],
    filters: SaleFilters | None = None,
    today: Optional[date_type] = None,
) -> SalesDigest:
    filtered = filter_sales(sales, products, users, filters or SaleFilters())
    return SalesDigest(
        filtered_sales=filtered,
        sales_total=sales_total(filtered),
        today_sales_count=today_sales_count(sales, today),
        top_selling_product=top_selling_product(sales, products),
    )


def filter_products(products: Iterable[Product], search_term: str = "") -> list[Product]:
    term = (search_term or "").lower()
    if not term:
        return list(products)
    return [
        p for p in products
        if term in p.name.lower() or term in p.description.lower() or term in str(p.id)
    ]
