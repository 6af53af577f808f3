from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session
from adapters.repository.report_repository import ReportRepository
from application.utils.pdf_report import build_sales_report
from application.utils.validators import parse_date_filter, round_cents
from domain.exceptions import ValidationError

TRAILING_MONTHS = 6
UNSPECIFIED_INDUSTRY = "Sin especificar"


def _month_start(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _shift_months(month_start: datetime, months: int) -> datetime:
    index = month_start.year * 12 + (month_start.month - 1) + months
    return month_start.replace(year=index // 12, month=index % 12 + 1)


def percent_change(current: float, previous: float) -> float:
    """Variação percentual; 0 quando o período anterior é 0 (sem divisão por zero)."""
    if not previous:
        return 0.0
    return round((current - previous) / previous * 100, 2)


class ReportUseCases:
    """Agregações recalculadas a cada chamada, sem cache."""

    def __init__(self, db: Session, now: datetime | None = None):
        self.repo = ReportRepository(db)
        self._now = now

    @property
    def now(self) -> datetime:
        return self._now or datetime.now(timezone.utc)

    @staticmethod
    def parse_range(date_from: str | None, date_to: str | None) -> tuple[datetime | None, datetime | None]:
        start = parse_date_filter(date_from, "from")
        end = parse_date_filter(date_to, "to")
        if start and end and start > end:
            raise ValidationError("from", "'from' must be before 'to'")
        return start, end

    def summary(self, date_from: datetime | None = None, date_to: datetime | None = None) -> dict:
        total_sales, total_count = self.repo.billable_totals(date_from, date_to)

        first_month = _shift_months(_month_start(self.now), -(TRAILING_MONTHS - 1))
        by_month = {(year, month): (total, count) for year, month, total, count in self.repo.sales_by_month(first_month)}
        sales_by_month = []
        for offset in range(TRAILING_MONTHS):
            month = _shift_months(first_month, offset)
            total, count = by_month.get((month.year, month.month), (0.0, 0))
            sales_by_month.append({"month": month.strftime("%Y-%m"), "total": round_cents(total), "count": count})

        sales_by_status = [
            {"status": status, "count": count, "total": round_cents(total)}
            for status, count, total in self.repo.sales_by_status(date_from, date_to)
        ]

        return {
            "totalSales": round_cents(total_sales),
            "totalSalesCount": total_count,
            "totalClients": self.repo.count_clients(),
            "salesByMonth": sales_by_month,
            "salesByStatus": sales_by_status,
        }

    def top_clients(self, limit: int = 5) -> list[dict]:
        rows = self.repo.top_clients(limit)
        for row in rows:
            row["totalSales"] = round_cents(row["totalSales"])
        return rows

    def trends(self, date_from: datetime | None = None, date_to: datetime | None = None) -> dict:
        if date_from is None and date_to is None:
            # mês corrente contra o mês anterior
            current_start = _month_start(self.now)
            previous_start = _shift_months(current_start, -1)
            current = self.repo.period_totals(current_start, _shift_months(current_start, 1))
            previous = self.repo.period_totals(previous_start, current_start)
        else:
            end = date_to or self.now
            start = date_from or end - timedelta(days=30)
            length = end - start
            current = self.repo.period_totals(start, end, end_inclusive=True)
            previous = self.repo.period_totals(start - length, start)

        current_total, current_count = current
        previous_total, previous_count = previous
        return {
            "currentPeriod": round_cents(current_total),
            "previousPeriod": round_cents(previous_total),
            "currentCount": current_count,
            "previousCount": previous_count,
            "currentMonth": round_cents(current_total),
            "lastMonth": round_cents(previous_total),
            "change": {
                "amount": percent_change(current_total, previous_total),
                "count": percent_change(current_count, previous_count),
            },
            "weekly": [],
        }

    def by_industry(self, date_from: datetime | None = None, date_to: datetime | None = None) -> list[dict]:
        rows = self.repo.sales_by_industry(date_from, date_to)
        grand_total = sum(total for _, total, _ in rows)
        return [
            {
                "industry": industry or UNSPECIFIED_INDUSTRY,
                "total": round_cents(total),
                "count": count,
                "average": round_cents(total / count) if count else 0.0,
                "percentage": round(total / grand_total * 100, 2) if grand_total else 0.0,
            }
            for industry, total, count in rows
        ]

    def export_pdf(self, date_from: datetime | None = None, date_to: datetime | None = None) -> bytes:
        sales = self.repo.sales_for_export(date_from, date_to)
        return build_sales_report(sales, date_from, date_to)
