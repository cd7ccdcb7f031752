from datetime import date
from pathlib import Path

import pytest
from openpyxl import load_workbook

from conftest import FakeApi

from salesdash.domain.errors import SelectionError, ValidationError
from salesdash.domain.models import SalesMetrics
from salesdash.services.report_service import ReportFilters, ReportFormat, ReportService, pdf_filename

REPORT_JSON = {
    "content": {
        "totalSales": "120.5",
        "salesByProduct": [
            {"productName": "Pen", "totalQuantity": 10, "totalAmount": 80},
            {"productName": None, "totalQuantity": 2, "totalAmount": 40.5},
        ],
        "salesByUser": [{"userName": "Ana", "totalQuantity": 12, "totalAmount": 120.5}],
        "monthlySales": [{"month": "2024-03", "totalAmount": 120.5}],
    }
}


@pytest.mark.parametrize("start, end", [("", "2024-03-31"), ("2024-03-01", ""), ("", "")])
def test_missing_date_is_rejected_without_backend_call(start, end):
    api = FakeApi()

    with pytest.raises(SelectionError, match="Selecciona un rango de fechas"):
        ReportService(api).generate(ReportFilters(start_date=start, end_date=end))

    assert api.calls == []


def test_reversed_range_is_reported_on_end_date():
    api = FakeApi()

    with pytest.raises(ValidationError) as info:
        ReportService(api).generate(ReportFilters(start_date="2024-03-31", end_date="2024-03-01"))

    assert "end_date" in info.value.field_errors
    assert api.calls == []


def test_json_report_omits_product_when_not_chosen():
    api = FakeApi({("POST", "/reports/generate"): REPORT_JSON})

    metrics = ReportService(api).generate(ReportFilters("2024-03-01", "2024-03-31"))

    assert api.calls == [
        ("POST", "/reports/generate", {"startDate": "2024-03-01", "endDate": "2024-03-31", "format": "json"})
    ]
    assert isinstance(metrics, SalesMetrics)
    assert metrics.total_sales == 120.5
    assert metrics.best_product == "Pen"
    assert metrics.sales_by_product[1].product_name == "Desconocido"
    assert metrics.monthly_amount == 120.5


def test_pdf_report_returns_bytes_and_sends_product():
    api = FakeApi({("POST_BINARY", "/reports/generate"): b"%PDF-1.7 fake"})

    content = ReportService(api).generate(
        ReportFilters("2024-03-01", "2024-03-01", product_id=7, format=ReportFormat.PDF)
    )

    assert content == b"%PDF-1.7 fake"
    method, _, payload = api.calls[0]
    assert method == "POST_BINARY"
    assert payload == {"startDate": "2024-03-01", "endDate": "2024-03-01", "productId": 7, "format": "pdf"}


def test_pdf_is_saved_with_dated_name(tmp_path: Path):
    target = ReportService(FakeApi()).save_pdf(b"%PDF", tmp_path / "reports", today=date(2024, 3, 9))

    assert target.name == "sales_report_2024-03-09.pdf" == pdf_filename(date(2024, 3, 9))
    assert target.read_bytes() == b"%PDF"


def test_preview_exports_to_excel(tmp_path: Path):
    service = ReportService(FakeApi({("POST", "/reports/generate"): REPORT_JSON}))
    filters = ReportFilters("2024-03-01", "2024-03-31")
    metrics = service.generate(filters)
    path = tmp_path / "report.xlsx"

    service.export_metrics_excel(metrics, path, filters)

    wb = load_workbook(path)
    assert wb.sheetnames == ["Summary", "Sales by Product", "Sales by User", "Monthly"]
    assert wb["Summary"]["B4"].value == 120.5
    assert wb["Summary"]["B7"].value == "Pen"
    rows = list(wb["Sales by Product"].iter_rows(min_row=2, values_only=True))
    assert rows == [("Pen", 10, 80), ("Desconocido", 2, 40.5)]


def test_empty_metrics_still_export(tmp_path: Path):
    path = tmp_path / "empty.xlsx"

    ReportService(FakeApi()).export_metrics_excel(SalesMetrics(), path)

    wb = load_workbook(path)
    assert wb["Summary"]["B7"].value == "N/A"
    assert wb["Monthly"].max_row == 1
