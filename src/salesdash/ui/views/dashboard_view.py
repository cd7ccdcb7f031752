from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from salesdash.domain.normalize import format_money
from salesdash.services.analytics import product_name, sale_day
from salesdash.services.dashboard_service import DASHBOARD_LOAD_ERROR, DashboardData
from salesdash.ui.views.base import BaseView, clear_tree, make_tree


class DashboardView(BaseView):
    def __init__(self, notebook: ttk.Notebook, app):
        super().__init__(notebook, app, "Dashboard")
        tab = self.frame

        ttk.Label(tab, text="Dashboard", style="Title.TLabel").pack(anchor="w", padx=10, pady=(10, 0))
        self.loading_var = tk.StringVar(value="")
        ttk.Label(tab, textvariable=self.loading_var).pack(anchor="w", padx=10)
        self._banner(tab)

        cards = ttk.Frame(tab)
        cards.pack(fill="x", padx=10, pady=10)
        self.k_total = self._card(cards, "Total Ventas", 0)
        self.k_products = self._card(cards, "Productos", 1)
        self.k_month = self._card(cards, "Ventas del Mes", 2)
        self.k_best = self._card(cards, "Mejor Producto", 3)

        bottom = ttk.Frame(tab)
        bottom.pack(fill="both", expand=True)

        recent = ttk.LabelFrame(bottom, text="Ventas Recientes")
        recent.pack(side="left", fill="both", expand=True, padx=(10, 5), pady=(0, 10))
        self.sales_tree = make_tree(recent, {
            "id": ("ID", 50), "product": ("Producto", 200), "qty": ("Cantidad", 80),
            "price": ("Precio", 90), "total": ("Total", 90), "date": ("Fecha", 110),
        }, height=8)

        popular = ttk.LabelFrame(bottom, text="Productos Populares")
        popular.pack(side="right", fill="both", expand=True, padx=(5, 10), pady=(0, 10))
        self.products_tree = make_tree(popular, {
            "id": ("ID", 50), "name": ("Nombre", 180), "description": ("Descripción", 260),
        }, height=8)

    def _card(self, parent, title: str, col: int) -> ttk.Label:
        box = ttk.LabelFrame(parent, text=title)
        box.grid(row=0, column=col, sticky="nsew", padx=5)
        parent.columnconfigure(col, weight=1)
        value = ttk.Label(box, text="-", style="KPIValue.TLabel")
        value.pack(anchor="w", padx=10, pady=10)
        return value

    def refresh(self):
        self.clear_errors()
        self.loading_var.set("Cargando datos...")
        self.app.run_async(
            self.lifecycle,
            self.app.container.dashboard.load,
            self._render,
            self._on_failed,
        )

    def _on_failed(self, err: Exception):
        self.loading_var.set("")
        self.fail("Dashboard load failed", err, DASHBOARD_LOAD_ERROR)

    def _render(self, data: DashboardData):
        self.loading_var.set("")
        self.k_total.config(text=f"${format_money(data.metrics.total_sales)}")
        self.k_products.config(text=str(data.product_count))
        self.k_month.config(text=f"${format_money(data.metrics.monthly_amount)}")
        self.k_best.config(text=data.metrics.best_product)

        clear_tree(self.sales_tree)
        for s in data.recent_sales:
            name = s.product.name if s.product else product_name(s.product_id, data.products)
            self.sales_tree.insert("", "end", values=(
                s.id, name, f"{s.quantity:g}", f"${format_money(s.unit_price)}",
                f"${format_money(s.line_total)}", sale_day(s.date),
            ))

        clear_tree(self.products_tree)
        for p in data.products[:5]:
            self.products_tree.insert("", "end", values=(p.id, p.name, p.description))
