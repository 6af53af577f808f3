from datetime import datetime, timezone
from types import SimpleNamespace

from application.utils.pdf_report import build_sales_report
from domain.entities.records import SaleStatus


def _sale(amount, name="Cliente <Uno>", description="Servicio & soporte"):
    return SimpleNamespace(
        date=datetime(2024, 5, 1, tzinfo=timezone.utc),
        client=SimpleNamespace(name=name),
        description=description,
        amount=amount,
        status=SaleStatus.paid,
    )


def test_build_sales_report_returns_pdf_bytes():
    content = build_sales_report(
        [_sale(100.0), _sale(50.5, description=None)],
        date_from=datetime(2024, 1, 1, tzinfo=timezone.utc),
        date_to=datetime(2024, 12, 31, tzinfo=timezone.utc),
    )
    assert content.startswith(b"%PDF")
    assert len(content) > 500


def test_build_sales_report_without_sales():
    content = build_sales_report([])
    assert content.startswith(b"%PDF")


def test_build_sales_report_handles_missing_client():
    sale = _sale(10.0)
    sale.client = None
    assert build_sales_report([sale]).startswith(b"%PDF")
