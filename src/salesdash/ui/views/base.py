from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from salesdash.application.lifecycle import ViewLifecycle
from salesdash.domain.errors import ValidationError


class BaseView:
    def __init__(self, notebook: ttk.Notebook, app, text: str):
        self.app = app
        self.lifecycle = ViewLifecycle()
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text=text)

        self.banner_var = tk.StringVar(value="")
        self.field_errors: dict[str, tk.StringVar] = {}

    def on_show(self):
        self.lifecycle.mount()
        self.reset_controls()
        self.refresh()

    def on_hide(self):
        self.lifecycle.unmount()

    def reset_controls(self):
        """Re-enable controls whose pending call was dropped while hidden."""

    def refresh(self):
        pass

    def _banner(self, parent) -> ttk.Label:
        label = ttk.Label(parent, textvariable=self.banner_var, style="Error.TLabel")
        label.pack(anchor="w", padx=10, pady=(4, 0))
        return label

    def _entry(self, parent, label: str, row: int, field: str, show: str = "", width: int = 32) -> ttk.Entry:
        ttk.Label(parent, text=label).grid(row=row * 2, column=0, sticky="w", padx=8, pady=(6, 0))
        e = ttk.Entry(parent, width=width, show=show)
        e.grid(row=row * 2, column=1, sticky="ew", padx=8, pady=(6, 0))
        self._error_label(parent, row * 2 + 1, field)
        parent.columnconfigure(1, weight=1)
        return e

    def _error_label(self, parent, row: int, field: str) -> None:
        var = tk.StringVar(value="")
        self.field_errors[field] = var
        ttk.Label(parent, textvariable=var, style="Error.TLabel").grid(row=row, column=1, sticky="w", padx=8)

    def clear_errors(self):
        self.banner_var.set("")
        for var in self.field_errors.values():
            var.set("")

    def show_validation(self, err: ValidationError):
        for field, var in self.field_errors.items():
            var.set(err.field_errors.get(field, ""))
        if not any(f in self.field_errors for f in err.field_errors):
            self.banner_var.set(str(err))

    def fail(self, title: str, err: Exception, message: str):
        if isinstance(err, ValidationError):
            self.show_validation(err)
            return
        self.banner_var.set(self.app.handle_error(title, err, message))


def clear_tree(tree: ttk.Treeview) -> None:
    for item in tree.get_children():
        tree.delete(item)


def make_tree(parent, columns: dict[str, tuple[str, int]], height: int = 14) -> ttk.Treeview:
    wrap = ttk.Frame(parent)
    wrap.pack(fill="both", expand=True, padx=10, pady=10)
    tree = ttk.Treeview(wrap, columns=tuple(columns), show="headings", height=height)
    for col, (head, width) in columns.items():
        tree.heading(col, text=head)
        tree.column(col, width=width, anchor="w")
    vsb = ttk.Scrollbar(wrap, orient="vertical", command=tree.yview)
    tree.configure(yscrollcommand=vsb.set)
    tree.grid(row=0, column=0, sticky="nsew")
    vsb.grid(row=0, column=1, sticky="ns")
    wrap.columnconfigure(0, weight=1)
    wrap.rowconfigure(0, weight=1)
    return tree


def selected_id(tree: ttk.Treeview) -> int | None:
    sel = tree.selection()
    if not sel:
        return None
    try:
        return int(tree.item(sel[0], "values")[0])
    except (IndexError, ValueError):
        return None
