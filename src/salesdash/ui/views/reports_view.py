from __future__ import annotations

import tkinter as tk
from tkinter import ttk, filedialog
from datetime import date

from salesdash.domain.errors import SelectionError, ValidationError
from salesdash.domain.models import SalesMetrics
from salesdash.domain.normalize import format_money
from salesdash.services.dashboard_service import REPORTS_PAGE_LOAD_ERROR, ReportsPageData
from salesdash.services.report_service import ReportFilters, ReportFormat
from salesdash.ui.views.base import BaseView, clear_tree, make_tree

ALL_PRODUCTS = "Todos los productos"
REPORT_ERROR = "Error al generar el informe"
FORMAT_LABELS = {"JSON (Vista Previa)": ReportFormat.JSON, "PDF (Descargar)": ReportFormat.PDF}


class ReportsView(BaseView):
    def __init__(self, notebook: ttk.Notebook, app):
        super().__init__(notebook, app, "Reports")
        self.metrics: SalesMetrics | None = None
        self.pdf_content: bytes | None = None
        self.last_filters: ReportFilters | None = None
        self._product_choices: dict[str, int] = {}
        self._build()

    def _build(self):
        tab = self.frame
        ttk.Label(tab, text="Informes", style="Title.TLabel").pack(anchor="w", padx=10, pady=(10, 0))

        box = ttk.LabelFrame(tab, text="Generar Informe")
        box.pack(fill="x", padx=10, pady=10)

        self.start_var = tk.StringVar(value="")
        self.end_var = tk.StringVar(value="")
        self.product_var = tk.StringVar(value=ALL_PRODUCTS)
        self.format_var = tk.StringVar(value=next(iter(FORMAT_LABELS)))

        ttk.Label(box, text="Fecha Inicio (AAAA-MM-DD)").grid(row=0, column=0, padx=8, pady=8, sticky="w")
        ttk.Entry(box, textvariable=self.start_var, width=12).grid(row=0, column=1, padx=8, pady=8)
        ttk.Label(box, text="Fecha Fin").grid(row=0, column=2, padx=8, pady=8, sticky="w")
        ttk.Entry(box, textvariable=self.end_var, width=12).grid(row=0, column=3, padx=8, pady=8)
        ttk.Label(box, text="Producto").grid(row=0, column=4, padx=8, pady=8, sticky="w")
        self.product_combo = ttk.Combobox(box, textvariable=self.product_var, state="readonly", width=26)
        self.product_combo.grid(row=0, column=5, padx=8, pady=8)
        ttk.Label(box, text="Formato").grid(row=0, column=6, padx=8, pady=8, sticky="w")
        ttk.Combobox(box, textvariable=self.format_var, values=list(FORMAT_LABELS), state="readonly", width=18)\
            .grid(row=0, column=7, padx=8, pady=8)

        self.generate_btn = ttk.Button(box, text="Generar Informe", style="Big.TButton", command=self.generate)
        self.generate_btn.grid(row=1, column=0, columnspan=2, sticky="w", padx=8, pady=(0, 8))

        self._banner(tab)

        self.download = ttk.Frame(tab)
        ttk.Label(self.download, text="Tu informe en formato PDF está listo para descargar.").pack(side="left")
        ttk.Button(self.download, text="Descargar PDF", command=self.save_pdf).pack(side="left", padx=10)

        preview = self.preview = ttk.LabelFrame(tab, text="Vista Previa del Informe")
        preview.pack(fill="both", expand=True, padx=10, pady=(0, 10))

        summary = ttk.Frame(preview)
        summary.pack(fill="x", padx=10, pady=(8, 0))
        self.s_total = ttk.Label(summary, text="Total Ventas: -")
        self.s_total.pack(side="left", padx=(0, 20))
        self.s_products = ttk.Label(summary, text="Productos Vendidos: -")
        self.s_products.pack(side="left", padx=(0, 20))
        self.s_users = ttk.Label(summary, text="Ventas por Usuario: -")
        self.s_users.pack(side="left")
        ttk.Button(summary, text="Exportar a Excel", command=self.export_excel).pack(side="right")

        tables = ttk.Frame(preview)
        tables.pack(fill="both", expand=True)
        left = ttk.LabelFrame(tables, text="Ventas por Producto")
        left.pack(side="left", fill="both", expand=True, padx=(10, 5), pady=10)
        self.by_product = make_tree(left, {
            "product": ("Producto", 220), "qty": ("Cantidad Total", 110), "amount": ("Total Ventas", 120),
        }, height=8)
        right = ttk.LabelFrame(tables, text="Ventas Mensuales")
        right.pack(side="right", fill="both", expand=True, padx=(5, 10), pady=10)
        self.monthly = make_tree(right, {"month": ("Mes", 120), "amount": ("Total Ventas", 120)}, height=8)

    def reset_controls(self):
        self.generate_btn.state(["!disabled"])

    def refresh(self):
        self.clear_errors()
        self.app.run_async(
            self.lifecycle,
            self.app.container.dashboard.load_reports_page,
            self._on_loaded,
            lambda err: self.fail("Reports load failed", err, REPORTS_PAGE_LOAD_ERROR),
        )

    def _on_loaded(self, data: ReportsPageData):
        self._product_choices = {f"{p.name} (#{p.id})": p.id for p in data.products}
        self.product_combo["values"] = [ALL_PRODUCTS, *self._product_choices]
        self.render_metrics(data.metrics)

    def current_filters(self) -> ReportFilters:
        return ReportFilters(
            start_date=self.start_var.get().strip(),
            end_date=self.end_var.get().strip(),
            product_id=self._product_choices.get(self.product_var.get()),
            format=FORMAT_LABELS.get(self.format_var.get(), ReportFormat.JSON),
        )

    def generate(self):
        self.clear_errors()
        self.download.pack_forget()
        self.pdf_content = None
        filters = self.current_filters()
        reports = self.app.container.reports
        try:
            # date range guard runs before anything is sent
            reports.check_filters(filters)
        except (SelectionError, ValidationError) as e:
            self.banner_var.set(str(e))
            return

        self.generate_btn.state(["disabled"])
        self.app.run_async(
            self.lifecycle,
            lambda: reports.generate(filters),
            lambda result: self._on_generated(filters, result),
            self._on_generate_failed,
            operation="generate",
        )

    def _on_generated(self, filters: ReportFilters, result):
        self.generate_btn.state(["!disabled"])
        self.last_filters = filters
        if filters.format is ReportFormat.PDF:
            self.pdf_content = result
            self.download.pack(fill="x", padx=10, pady=(0, 8), before=self.preview)
            self.app.toast("Informe generado.", kind="success")
        else:
            self.render_metrics(result)

    def _on_generate_failed(self, err: Exception):
        self.generate_btn.state(["!disabled"])
        self.fail("Report failed", err, REPORT_ERROR)

    def render_metrics(self, metrics: SalesMetrics):
        self.metrics = metrics
        self.s_total.config(text=f"Total Ventas: ${format_money(metrics.total_sales)}")
        self.s_products.config(text=f"Productos Vendidos: {len(metrics.sales_by_product)}")
        self.s_users.config(text=f"Ventas por Usuario: {len(metrics.sales_by_user)}")

        clear_tree(self.by_product)
        if not metrics.sales_by_product:
            self.by_product.insert("", "end", values=("No hay datos disponibles", "", ""))
        for row in metrics.sales_by_product:
            self.by_product.insert("", "end", values=(
                row.product_name, f"{row.total_quantity:g}", f"${format_money(row.total_amount)}",
            ))

        clear_tree(self.monthly)
        if not metrics.monthly_sales:
            self.monthly.insert("", "end", values=("No hay datos disponibles", ""))
        for row in metrics.monthly_sales:
            self.monthly.insert("", "end", values=(row.month, f"${format_money(row.total_amount)}"))

    def save_pdf(self):
        if not self.pdf_content:
            return
        try:
            target = self.app.container.reports.save_pdf(self.pdf_content, self.app.container.paths.reports_dir)
        except OSError as e:
            self.fail("Save PDF", e, "No se pudo guardar el PDF")
            return
        self.app.toast(f"PDF guardado en {target}", kind="success", ms=5000)

    def export_excel(self):
        if self.metrics is None:
            self.banner_var.set("Genera un informe primero")
            return
        path = filedialog.asksaveasfilename(
            title="Exportar informe",
            defaultextension=".xlsx",
            filetypes=[("Excel files", "*.xlsx")],
            initialdir=str(self.app.container.paths.reports_dir),
            initialfile=f"sales_report_{date.today().isoformat()}.xlsx",
        )
        if not path:
            return
        try:
            self.app.container.reports.export_metrics_excel(self.metrics, path, self.last_filters)
            self.app.toast("Informe exportado a Excel.", kind="success")
        except Exception as e:
            self.fail("Export error", e, "Error al exportar el informe")
