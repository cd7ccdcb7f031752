from __future__ import annotations

from salesdash.domain.forms import ProductForm, validate_form
from salesdash.domain.models import Product
from salesdash.domain.normalize import product_from_api, products_from_api


class ProductService:
    def __init__(self, api):
        self.api = api

    def list(self) -> list[Product]:
        return products_from_api(self.api.get("/products"))

    def get(self, product_id: int) -> Product:
        return product_from_api(self.api.get(f"/products/{int(product_id)}") or {})

    def create(self, data: dict) -> Product:
        form = validate_form(ProductForm, data)
        return product_from_api(self.api.post("/products", json=form.to_payload()) or {})

    def update(self, product_id: int, data: dict) -> Product:
        form = validate_form(ProductForm, data)
        return product_from_api(self.api.put(f"/products/{int(product_id)}", json=form.to_payload()) or {})

    def delete(self, product_id: int) -> None:
        self.api.delete(f"/products/{int(product_id)}")
