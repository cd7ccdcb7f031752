from __future__ import annotations

import tkinter as tk
from tkinter import ttk, messagebox
from datetime import date

from salesdash.domain.errors import ValidationError
from salesdash.domain.normalize import format_money
from salesdash.services.analytics import SaleFilters, derive_sales_digest, product_name, sale_day, user_name
from salesdash.services.collection import SALE_MESSAGES, RecordCollection
from salesdash.services.dashboard_service import SALES_PAGE_LOAD_ERROR, SalesPageData
from salesdash.ui.views.base import BaseView, clear_tree, make_tree, selected_id
from salesdash.ui.views.dialogs import FormDialog, SaleFormDialog

ALL_PRODUCTS = "Todos los productos"


class SalesView(BaseView):
    def __init__(self, notebook: ttk.Notebook, app):
        super().__init__(notebook, app, "Sales")
        service = app.container.sales
        self.sales = RecordCollection(
            service.list, service.create, service.update, service.delete,
            messages=SALE_MESSAGES, fetch_one=service.get,
        )
        self.products = []
        self.users = []
        self._product_choices: dict[str, int] = {}

        self._build()

    def _build(self):
        tab = self.frame

        top = ttk.Frame(tab)
        top.pack(fill="x", padx=10, pady=(10, 0))
        ttk.Label(top, text="Ventas", style="Title.TLabel").pack(side="left")
        ttk.Button(top, text="Nueva Venta", command=self.on_create).pack(side="right")

        filters = ttk.LabelFrame(tab, text="Filtros")
        filters.pack(fill="x", padx=10, pady=8)

        self.search_var = tk.StringVar(value="")
        self.product_var = tk.StringVar(value=ALL_PRODUCTS)
        self.date_var = tk.StringVar(value="")

        ttk.Label(filters, text="Buscar (producto, usuario o ID)").grid(row=0, column=0, padx=8, pady=8, sticky="w")
        ttk.Entry(filters, textvariable=self.search_var, width=30).grid(row=0, column=1, padx=8, pady=8)
        ttk.Label(filters, text="Producto").grid(row=0, column=2, padx=8, pady=8, sticky="w")
        self.product_combo = ttk.Combobox(filters, textvariable=self.product_var, state="readonly", width=28)
        self.product_combo.grid(row=0, column=3, padx=8, pady=8)
        ttk.Label(filters, text="Fecha (AAAA-MM-DD)").grid(row=0, column=4, padx=8, pady=8, sticky="w")
        ttk.Entry(filters, textvariable=self.date_var, width=12).grid(row=0, column=5, padx=8, pady=8)
        ttk.Button(filters, text="Limpiar", command=self.clear_filters).grid(row=0, column=6, padx=8, pady=8)

        for var in (self.search_var, self.product_var, self.date_var):
            var.trace_add("write", lambda *_: self.render())

        kpi = ttk.Frame(tab)
        kpi.pack(fill="x", padx=10)
        self.k_total = self._kpi(kpi, "Total filtrado", 0)
        self.k_today = self._kpi(kpi, "Ventas de hoy", 1)
        self.k_top = self._kpi(kpi, "Producto más vendido", 2)

        self.loading_var = tk.StringVar(value="")
        ttk.Label(tab, textvariable=self.loading_var).pack(anchor="w", padx=10)
        self._banner(tab)

        self.tree = make_tree(tab, {
            "id": ("ID", 60), "product": ("Producto", 200), "user": ("Usuario", 160),
            "qty": ("Cantidad", 80), "price": ("Precio", 90), "total": ("Total", 100), "date": ("Fecha", 110),
        }, height=14)
        self.tree.bind("<Double-1>", lambda _e: self.on_edit())

        btns = ttk.Frame(tab)
        btns.pack(fill="x", padx=10, pady=(0, 10))
        ttk.Button(btns, text="Editar", command=self.on_edit).pack(side="left")
        ttk.Button(btns, text="Eliminar", command=self.on_delete).pack(side="left", padx=10)

    def _kpi(self, parent, label: str, col: int) -> ttk.Label:
        box = ttk.LabelFrame(parent, text=label)
        box.grid(row=0, column=col, sticky="nsew", padx=5)
        parent.columnconfigure(col, weight=1)
        value = ttk.Label(box, text="-", style="KPIValue.TLabel")
        value.pack(anchor="w", padx=10, pady=6)
        return value

    def refresh(self):
        self.clear_errors()
        self.loading_var.set("Cargando ventas...")
        self.app.run_async(
            self.lifecycle,
            self.app.container.dashboard.load_sales_page,
            self._on_loaded,
            self._on_failed,
        )

    def _on_loaded(self, data: SalesPageData):
        self.loading_var.set("")
        self.sales.replace(data.sales)
        self.products = data.products
        self.users = data.users
        self._product_choices = {f"{p.name} (#{p.id})": p.id for p in self.products}
        self.product_combo["values"] = [ALL_PRODUCTS, *self._product_choices]
        if self.product_var.get() not in self.product_combo["values"]:
            self.product_var.set(ALL_PRODUCTS)
        self.render()

    def _on_failed(self, err: Exception):
        self.loading_var.set("")
        self.fail("Sales load failed", err, SALES_PAGE_LOAD_ERROR)

    def current_filters(self) -> SaleFilters:
        return SaleFilters(
            search_term=self.search_var.get(),
            product_id=self._product_choices.get(self.product_var.get()),
            date=self.date_var.get().strip() or None,
        )

    def clear_filters(self):
        self.search_var.set("")
        self.product_var.set(ALL_PRODUCTS)
        self.date_var.set("")

    def render(self):
        digest = derive_sales_digest(self.sales.items, self.products, self.users, self.current_filters())

        self.k_total.config(text=f"${format_money(digest.sales_total)}")
        self.k_today.config(text=str(digest.today_sales_count))
        self.k_top.config(text=digest.top_selling_product)

        clear_tree(self.tree)
        if not digest.filtered_sales:
            self.tree.insert("", "end", values=("", "No hay ventas registradas", "", "", "", "", ""))
            return
        for s in digest.filtered_sales:
            self.tree.insert("", "end", values=(
                s.id,
                product_name(s.product_id, self.products),
                user_name(s.user_id, self.users),
                f"{s.quantity:g}",
                f"${format_money(s.unit_price)}",
                f"${format_money(s.line_total)}",
                sale_day(s.date),
            ))

    def _open_form(self, sale):
        SaleFormDialog(
            self.frame, sale, self.products, self.users,
            lambda values, dialog: self._save(values, dialog, sale.id if sale else None),
            today=date.today().isoformat(),
        )

    def on_create(self):
        self._open_form(None)

    def on_edit(self):
        sale_id = selected_id(self.tree)
        sale = self.sales.find(sale_id) if sale_id else None
        if sale is None:
            self.app.toast("Selecciona una venta.", kind="warn")
            return
        self.app.run_async(
            self.lifecycle,
            lambda: self.sales.reload(sale.id),
            self._open_edit,
            lambda err: self.fail("Load sale", err, SALE_MESSAGES.load),
            operation="edit",
        )

    def _open_edit(self, sale):
        if sale is None:
            self.banner_var.set(self.sales.error or SALE_MESSAGES.load)
            return
        self.render()
        self._open_form(sale)

    def _save(self, values: dict, dialog: FormDialog, sale_id: int | None):
        def call():
            if sale_id is None:
                return self.sales.create(values)
            return self.sales.update(sale_id, values)

        def done(record):
            if record is None:
                dialog.show_error(self.sales.error or SALE_MESSAGES.save)
                return
            dialog.destroy()
            self.render()
            self.app.toast("Venta guardada.", kind="success")

        def failed(err: Exception):
            if isinstance(err, ValidationError):
                dialog.show_validation(err)
                return
            dialog.destroy()
            self.fail("Save sale", err, SALE_MESSAGES.save)

        self.app.run_async(self.lifecycle, call, done, failed, operation="save")

    def on_delete(self):
        sale_id = selected_id(self.tree)
        if sale_id is None or self.sales.find(sale_id) is None:
            self.app.toast("Selecciona una venta.", kind="warn")
            return

        self.sales.request_delete(sale_id)
        confirmed = messagebox.askyesno(
            "Eliminar venta",
            "¿Estás seguro que deseas eliminar esta venta? Esta acción no se puede deshacer.",
            parent=self.frame,
        )
        if not confirmed:
            self.sales.cancel_delete()
            return

        def done(ok: bool):
            if not ok:
                self.banner_var.set(self.sales.error or SALE_MESSAGES.delete)
                return
            self.render()
            self.app.toast("Venta eliminada.", kind="success")

        self.app.run_async(
            self.lifecycle,
            self.sales.confirm_delete,
            done,
            lambda err: self.fail("Delete sale", err, SALE_MESSAGES.delete),
            operation="delete",
        )
