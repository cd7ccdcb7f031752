from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class User:
    id: int
    name: str
    email: str


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    description: str


@dataclass(frozen=True)
class Sale:
    id: int
    product_id: int
    user_id: int
    quantity: float
    unit_price: float
    date: str
    product: Optional[Product] = None
    user: Optional[User] = None

    @property
    def line_total(self) -> float:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class ProductSales:
    product_name: str
    total_quantity: float
    total_amount: float


@dataclass(frozen=True)
class UserSales:
    user_name: str
    total_quantity: float
    total_amount: float


@dataclass(frozen=True)
class MonthlySales:
    month: str
    total_amount: float


@dataclass(frozen=True)
class SalesMetrics:
    total_sales: float = 0.0
    sales_by_product: tuple[ProductSales, ...] = ()
    sales_by_user: tuple[UserSales, ...] = ()
    monthly_sales: tuple[MonthlySales, ...] = ()

    @property
    def monthly_amount(self) -> float:
        return self.monthly_sales[0].total_amount if self.monthly_sales else 0.0

    @property
    def best_product(self) -> str:
        return self.sales_by_product[0].product_name if self.sales_by_product else "N/A"
