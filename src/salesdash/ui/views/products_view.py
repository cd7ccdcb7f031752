from __future__ import annotations

import tkinter as tk
from tkinter import ttk, messagebox

from salesdash.domain.errors import ValidationError
from salesdash.services.analytics import filter_products
from salesdash.services.collection import PRODUCT_MESSAGES, RecordCollection
from salesdash.ui.views.base import BaseView, clear_tree, make_tree, selected_id
from salesdash.ui.views.dialogs import FormDialog, ProductFormDialog


class ProductsView(BaseView):
    def __init__(self, notebook: ttk.Notebook, app):
        super().__init__(notebook, app, "Products")
        service = app.container.products
        self.products = RecordCollection(
            service.list, service.create, service.update, service.delete,
            messages=PRODUCT_MESSAGES, fetch_one=service.get,
        )

        tab = self.frame
        top = ttk.Frame(tab)
        top.pack(fill="x", padx=10, pady=(10, 0))
        ttk.Label(top, text="Productos", style="Title.TLabel").pack(side="left")
        ttk.Button(top, text="Nuevo Producto", command=self.on_create).pack(side="right")

        bar = ttk.Frame(tab)
        bar.pack(fill="x", padx=10, pady=(8, 0))
        ttk.Label(bar, text="Buscar").pack(side="left")
        self.search_var = tk.StringVar(value="")
        self.search_var.trace_add("write", lambda *_: self.render())
        ttk.Entry(bar, textvariable=self.search_var, width=40).pack(side="left", padx=8)

        self.loading_var = tk.StringVar(value="")
        ttk.Label(tab, textvariable=self.loading_var).pack(anchor="w", padx=10)
        self._banner(tab)

        self.tree = make_tree(tab, {
            "id": ("ID", 60), "name": ("Nombre", 260), "description": ("Descripción", 520),
        }, height=18)
        self.tree.bind("<Double-1>", lambda _e: self.on_edit())

        btns = ttk.Frame(tab)
        btns.pack(fill="x", padx=10, pady=(0, 10))
        ttk.Button(btns, text="Editar", command=self.on_edit).pack(side="left")
        ttk.Button(btns, text="Eliminar", command=self.on_delete).pack(side="left", padx=10)

    def refresh(self):
        self.clear_errors()
        self.loading_var.set("Cargando productos...")
        self.app.run_async(self.lifecycle, self.products.load, self._on_loaded, self._on_failed)

    def _on_loaded(self, ok: bool):
        self.loading_var.set("")
        if not ok:
            self.banner_var.set(self.products.error or PRODUCT_MESSAGES.load)
        self.render()

    def _on_failed(self, err: Exception):
        self.loading_var.set("")
        self.fail("Products load failed", err, PRODUCT_MESSAGES.load)

    def render(self):
        clear_tree(self.tree)
        rows = filter_products(self.products.items, self.search_var.get())
        if not rows:
            self.tree.insert("", "end", values=("", "No hay productos registrados", ""))
            return
        for p in rows:
            self.tree.insert("", "end", values=(p.id, p.name, p.description))

    def on_create(self):
        ProductFormDialog(self.frame, None, lambda values, dialog: self._save(values, dialog, None))

    def on_edit(self):
        product_id = selected_id(self.tree)
        product = self.products.find(product_id) if product_id else None
        if product is None:
            self.app.toast("Selecciona un producto.", kind="warn")
            return
        # edit the backend's current copy, not the one loaded with the list
        self.app.run_async(
            self.lifecycle,
            lambda: self.products.reload(product.id),
            self._open_edit,
            lambda err: self.fail("Load product", err, PRODUCT_MESSAGES.load),
            operation="edit",
        )

    def _open_edit(self, product):
        if product is None:
            self.banner_var.set(self.products.error or PRODUCT_MESSAGES.load)
            return
        self.render()
        ProductFormDialog(self.frame, product, lambda values, dialog: self._save(values, dialog, product.id))

    def _save(self, values: dict, dialog: FormDialog, product_id: int | None):
        def call():
            if product_id is None:
                return self.products.create(values)
            return self.products.update(product_id, values)

        def done(record):
            if record is None:
                dialog.show_error(self.products.error or PRODUCT_MESSAGES.save)
                return
            dialog.destroy()
            self.render()
            self.app.toast("Producto guardado.", kind="success")

        def failed(err: Exception):
            if isinstance(err, ValidationError):
                dialog.show_validation(err)
                return
            dialog.destroy()
            self.fail("Save product", err, PRODUCT_MESSAGES.save)

        self.app.run_async(self.lifecycle, call, done, failed, operation="save")

    def on_delete(self):
        product_id = selected_id(self.tree)
        product = self.products.find(product_id) if product_id else None
        if product is None:
            self.app.toast("Selecciona un producto.", kind="warn")
            return

        self.products.request_delete(product.id)
        confirmed = messagebox.askyesno(
            "Eliminar producto",
            f"¿Estás seguro que deseas eliminar '{product.name}'? Esta acción no se puede deshacer.",
            parent=self.frame,
        )
        if not confirmed:
            self.products.cancel_delete()
            return

        def done(ok: bool):
            if not ok:
                self.banner_var.set(self.products.error or PRODUCT_MESSAGES.delete)
                return
            self.render()
            self.app.toast("Producto eliminado.", kind="success")

        self.app.run_async(
            self.lifecycle,
            self.products.confirm_delete,
            done,
            lambda err: self.fail("Delete product", err, PRODUCT_MESSAGES.delete),
            operation="delete",
        )
