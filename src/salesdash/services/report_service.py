from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
import logging
from pathlib import Path
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from salesdash.domain.errors import SelectionError, ValidationError
from salesdash.domain.models import SalesMetrics
from salesdash.domain.normalize import metrics_from_api

log = logging.getLogger(__name__)

MSG_RANGE_REQUIRED = "Selecciona un rango de fechas"
MSG_RANGE_ORDER = "La fecha fin debe ser posterior a la fecha inicio"


class ReportFormat(str, Enum):
    JSON = "json"
    PDF = "pdf"


@dataclass(frozen=True)
class ReportFilters:
    start_date: str = ""
    end_date: str = ""
    product_id: Optional[int] = None
    format: ReportFormat = ReportFormat.JSON

    def to_payload(self) -> dict:
        payload: dict = {
            "startDate": self.start_date,
            "endDate": self.end_date,
            "format": ReportFormat(self.format).value,
        }
        if self.product_id:
            payload["productId"] = int(self.product_id)
        return payload


def pdf_filename(today: date | None = None) -> str:
    return f"sales_report_{(today or date.today()).isoformat()}.pdf"


class ReportService:
    def __init__(self, api):
        self.api = api

    def check_filters(self, filters: ReportFilters) -> None:
        start = (filters.start_date or "").strip()
        end = (filters.end_date or "").strip()
        if not start or not end:
            raise SelectionError(MSG_RANGE_REQUIRED)
        try:
            start_d = date.fromisoformat(start)
            end_d = date.fromisoformat(end)
        except ValueError as e:
            raise ValidationError("Fecha inválida", {"start_date": "Fecha inválida"}) from e
        if start_d > end_d:
            raise ValidationError(MSG_RANGE_ORDER, {"end_date": MSG_RANGE_ORDER})

    def generate(self, filters: ReportFilters) -> SalesMetrics | bytes:
        self.check_filters(filters)
        payload = filters.to_payload()
        log.info("report_requested start=%s end=%s product=%s format=%s",
                 filters.start_date, filters.end_date, filters.product_id, payload["format"])
        if ReportFormat(filters.format) is ReportFormat.PDF:
            return self.api.post_binary("/reports/generate", json=payload)
        return metrics_from_api(self.api.post("/reports/generate", json=payload))

    def save_pdf(self, content: bytes, directory: Path | str, today: date | None = None) -> Path:
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / pdf_filename(today)
        target.write_bytes(content)
        log.info("report_pdf_saved path=%s bytes=%s", target, len(content))
        return target

    def export_metrics_excel(self, metrics: SalesMetrics, path: Path | str, filters: ReportFilters | None = None) -> None:
        wb = Workbook()

        def money(cell):
            cell.number_format = "#,##0.00"

        def bold_row(ws, r):
            for c in ws[r]:
                c.font = Font(bold=True)

        def set_widths(ws, widths: dict[str, int]):
            for col, w in widths.items():
                ws.column_dimensions[col].width = w

        def add_table(ws, name: str, end_col: int):
            if ws.max_row < 2:
                return
            ref = f"A1:{get_column_letter(end_col)}{ws.max_row}"
            tab = Table(displayName=name, ref=ref)
            tab.tableStyleInfo = TableStyleInfo(
                name="TableStyleMedium9",
                showRowStripes=True,
                showColumnStripes=False,
            )
            ws.add_table(tab)

        # -------- 1) Summary --------
        ws = wb.active
        ws.title = "Summary"
        ws["A1"] = "Sales report"
        ws["A1"].font = Font(bold=True, size=14)

        ws["A3"] = "Window"
        if filters is not None:
            ws["B3"] = f"{filters.start_date}  ->  {filters.end_date}"
        ws["A4"] = "Total sales"
        ws["B4"] = float(metrics.total_sales)
        money(ws["B4"])
        ws["A5"] = "Products sold"
        ws["B5"] = len(metrics.sales_by_product)
        ws["A6"] = "Users with sales"
        ws["B6"] = len(metrics.sales_by_user)
        ws["A7"] = "Best product"
        ws["B7"] = metrics.best_product
        set_widths(ws, {"A": 24, "B": 34})

        # -------- 2) By product --------
        ws2 = wb.create_sheet("Sales by Product")
        ws2.append(["Product", "Total Quantity", "Total Sales"])
        bold_row(ws2, 1)
        for r, row in enumerate(metrics.sales_by_product, start=2):
            ws2.append([row.product_name, float(row.total_quantity), float(row.total_amount)])
            money(ws2[f"C{r}"])
        ws2.freeze_panes = "A2"
        set_widths(ws2, {"A": 34, "B": 16, "C": 16})
        add_table(ws2, "SalesByProduct", 3)

        # -------- 3) By user --------
        ws3 = wb.create_sheet("Sales by User")
        ws3.append(["User", "Total Quantity", "Total Sales"])
        bold_row(ws3, 1)
        for r, row in enumerate(metrics.sales_by_user, start=2):
            ws3.append([row.user_name, float(row.total_quantity), float(row.total_amount)])
            money(ws3[f"C{r}"])
        ws3.freeze_panes = "A2"
        set_widths(ws3, {"A": 34, "B": 16, "C": 16})
        add_table(ws3, "SalesByUser", 3)

        # -------- 4) Monthly --------
        ws4 = wb.create_sheet("Monthly")
        ws4.append(["Month", "Total Sales"])
        bold_row(ws4, 1)
        for r, row in enumerate(metrics.monthly_sales, start=2):
            ws4.append([row.month, float(row.total_amount)])
            money(ws4[f"B{r}"])
        ws4.freeze_panes = "A2"
        set_widths(ws4, {"A": 16, "B": 16})
        add_table(ws4, "MonthlySales", 2)

        wb.save(str(path))
        log.info("report_excel_saved path=%s", path)
