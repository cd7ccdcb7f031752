from __future__ import annotations

import logging

from salesdash.domain.forms import SaleForm, validate_form
from salesdash.domain.models import Sale, SalesMetrics
from salesdash.domain.normalize import metrics_from_api, sale_from_api, sales_from_api

log = logging.getLogger("salesdash.sales")


class SaleService:
    def __init__(self, api):
        self.api = api

    def list(self) -> list[Sale]:
        return sales_from_api(self.api.get("/sales"))

    def get(self, sale_id: int) -> Sale:
        return sale_from_api(self.api.get(f"/sales/{int(sale_id)}") or {})

    def create(self, data: dict) -> Sale:
        form = validate_form(SaleForm, data)
        sale = sale_from_api(self.api.post("/sales", json=form.to_payload()) or {})
        log.info("sale_created sale_id=%s product_id=%s qty=%s", sale.id, sale.product_id, sale.quantity)
        return sale

    def update(self, sale_id: int, data: dict) -> Sale:
        form = validate_form(SaleForm, data)
        sale = sale_from_api(self.api.put(f"/sales/{int(sale_id)}", json=form.to_payload()) or {})
        log.info("sale_updated sale_id=%s", sale_id)
        return sale

    def delete(self, sale_id: int) -> None:
        self.api.delete(f"/sales/{int(sale_id)}")
        log.info("sale_deleted sale_id=%s", sale_id)

    def metrics(self) -> SalesMetrics:
        return metrics_from_api(self.api.get("/sales/metrics"))
