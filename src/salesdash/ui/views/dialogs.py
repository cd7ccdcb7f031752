from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Callable, Optional, Sequence

from salesdash.domain.errors import ValidationError
from salesdash.domain.models import Product, Sale, User


class FormDialog(tk.Toplevel):
    """Modal create/edit form. ``on_save`` gets the raw field values and the
    dialog; the caller closes it once the save went through."""

    def __init__(self, parent, title: str, on_save: Callable[[dict, "FormDialog"], None]):
        super().__init__(parent)
        self.title(title)
        self.transient(parent)
        self.resizable(False, False)
        self.on_save = on_save
        self.field_errors: dict[str, tk.StringVar] = {}
        self.banner_var = tk.StringVar(value="")

        self.body = ttk.Frame(self)
        self.body.pack(fill="both", expand=True, padx=12, pady=12)
        self.body.columnconfigure(1, weight=1)
        self._row = 0

    def _finish(self):
        ttk.Label(self, textvariable=self.banner_var, style="Error.TLabel").pack(anchor="w", padx=12)
        btns = ttk.Frame(self)
        btns.pack(fill="x", padx=12, pady=(0, 12))
        ttk.Button(btns, text="Cancelar", command=self.destroy).pack(side="right")
        ttk.Button(btns, text="Guardar", command=self.submit).pack(side="right", padx=8)
        self.bind("<Escape>", lambda _e: self.destroy())
        self.grab_set()

    def _field(self, label: str, field: str, widget: tk.Widget) -> tk.Widget:
        ttk.Label(self.body, text=label).grid(row=self._row, column=0, sticky="w", padx=6, pady=(6, 0))
        widget.grid(row=self._row, column=1, sticky="ew", padx=6, pady=(6, 0))
        var = tk.StringVar(value="")
        self.field_errors[field] = var
        ttk.Label(self.body, textvariable=var, style="Error.TLabel")\
            .grid(row=self._row + 1, column=1, sticky="w", padx=6)
        self._row += 2
        return widget

    def values(self) -> dict:
        raise NotImplementedError

    def submit(self):
        self.banner_var.set("")
        for var in self.field_errors.values():
            var.set("")
        self.on_save(self.values(), self)

    def show_validation(self, err: ValidationError):
        for field, msg in err.field_errors.items():
            if field in self.field_errors:
                self.field_errors[field].set(msg)

    def show_error(self, message: str):
        self.banner_var.set(message)


class ProductFormDialog(FormDialog):
    def __init__(self, parent, product: Optional[Product], on_save: Callable[[dict, "FormDialog"], None]):
        super().__init__(parent, "Editar Producto" if product else "Nuevo Producto", on_save)
        self.name = self._field("Nombre", "name", ttk.Entry(self.body, width=40))
        self.description = self._field("Descripción", "description", tk.Text(self.body, width=40, height=5))
        if product:
            self.name.insert(0, product.name)
            self.description.insert("1.0", product.description)
        self._finish()

    def values(self) -> dict:
        return {"name": self.name.get(), "description": self.description.get("1.0", "end").strip()}


class SaleFormDialog(FormDialog):
    def __init__(
        self,
        parent,
        sale: Optional[Sale],
        products: Sequence[Product],
        users: Sequence[User],
        on_save: Callable[[dict, "FormDialog"], None],
        today: str = "",
    ):
        super().__init__(parent, "Editar Venta" if sale else "Nueva Venta", on_save)
        self._product_ids = {f"{p.name} (#{p.id})": p.id for p in products}
        self._user_ids = {f"{u.name} (#{u.id})": u.id for u in users}

        self.product = self._field("Producto", "product_id", ttk.Combobox(
            self.body, values=list(self._product_ids), state="readonly", width=38))
        self.user = self._field("Usuario", "user_id", ttk.Combobox(
            self.body, values=list(self._user_ids), state="readonly", width=38))
        self.quantity = self._field("Cantidad", "quantity", ttk.Entry(self.body))
        self.unit_price = self._field("Precio unitario", "unit_price", ttk.Entry(self.body))
        self.date = self._field("Fecha (AAAA-MM-DD)", "date", ttk.Entry(self.body))

        if sale:
            self._select(self.product, self._product_ids, sale.product_id)
            self._select(self.user, self._user_ids, sale.user_id)
            self.quantity.insert(0, f"{sale.quantity:g}")
            self.unit_price.insert(0, f"{sale.unit_price:.2f}")
            self.date.insert(0, sale.date[:10])
        else:
            self.quantity.insert(0, "1")
            self.date.insert(0, today)
        self._finish()

    @staticmethod
    def _select(combo: ttk.Combobox, mapping: dict[str, int], wanted: int):
        for label, value in mapping.items():
            if value == wanted:
                combo.set(label)
                return

    def values(self) -> dict:
        return {
            "product_id": self._product_ids.get(self.product.get(), 0),
            "user_id": self._user_ids.get(self.user.get(), 0),
            "quantity": self.quantity.get(),
            "unit_price": self.unit_price.get(),
            "date": self.date.get(),
        }
