from datetime import datetime
from sqlalchemy import select, func, extract
from sqlalchemy.orm import Session, joinedload
from domain.entities.client_entity import Client
from domain.entities.sale_entity import Sale
from domain.entities.records import BILLABLE_STATUSES


def _date_range(date_from: datetime | None, date_to: datetime | None) -> list:
    conditions = []
    if date_from is not None:
        conditions.append(Sale.date >= date_from)
    if date_to is not None:
        conditions.append(Sale.date <= date_to)
    return conditions


class ReportRepository:
    """Consultas agregadas somente-leitura sobre vendas e clientes."""

    def __init__(self, db: Session):
        self.db = db

    def billable_totals(self, date_from: datetime | None = None, date_to: datetime | None = None) -> tuple[float, int]:
        query = select(func.coalesce(func.sum(Sale.amount), 0), func.count(Sale.id)).where(
            Sale.status.in_(BILLABLE_STATUSES), *_date_range(date_from, date_to)
        )
        total, count = self.db.execute(query).one()
        return float(total or 0), int(count)

    def period_totals(self, start: datetime, end: datetime, end_inclusive: bool = False) -> tuple[float, int]:
        upper = Sale.date <= end if end_inclusive else Sale.date < end
        query = select(func.coalesce(func.sum(Sale.amount), 0), func.count(Sale.id)).where(
            Sale.status.in_(BILLABLE_STATUSES), Sale.date >= start, upper
        )
        total, count = self.db.execute(query).one()
        return float(total or 0), int(count)

    def count_clients(self) -> int:
        return self.db.execute(select(func.count(Client.id))).scalar_one()

    def sales_by_month(self, since: datetime) -> list[tuple[int, int, float, int]]:
        year = extract("year", Sale.date)
        month = extract("month", Sale.date)
        query = (
            select(year, month, func.sum(Sale.amount), func.count(Sale.id))
            .where(Sale.status.in_(BILLABLE_STATUSES), Sale.date >= since)
            .group_by(year, month)
            .order_by(year, month)
        )
        return [(int(y), int(m), float(total or 0), int(count)) for y, m, total, count in self.db.execute(query).all()]

    def sales_by_status(self, date_from: datetime | None = None, date_to: datetime | None = None) -> list[tuple[str, int, float]]:
        query = (
            select(Sale.status, func.count(Sale.id), func.sum(Sale.amount))
            .where(*_date_range(date_from, date_to))
            .group_by(Sale.status)
            .order_by(Sale.status)
        )
        return [
            (status.value if hasattr(status, "value") else status, int(count), float(total or 0))
            for status, count, total in self.db.execute(query).all()
        ]

    def top_clients(self, limit: int = 5) -> list[dict]:
        total = func.sum(Sale.amount).label("total")
        query = (
            select(Sale.client_id, Client.name, Client.email, total, func.count(Sale.id))
            .join(Client, Client.id == Sale.client_id)
            .where(Sale.status.in_(BILLABLE_STATUSES))
            .group_by(Sale.client_id, Client.name, Client.email)
            .order_by(total.desc(), Sale.client_id)
            .limit(limit)
        )
        return [
            {"clientId": client_id, "name": name, "email": email, "totalSales": float(amount or 0), "salesCount": int(count)}
            for client_id, name, email, amount, count in self.db.execute(query).all()
        ]

    def sales_by_industry(self, date_from: datetime | None = None, date_to: datetime | None = None) -> list[tuple[str | None, float, int]]:
        total = func.sum(Sale.amount).label("total")
        query = (
            select(Client.industry, total, func.count(Sale.id))
            .join(Client, Client.id == Sale.client_id)
            .where(Sale.status.in_(BILLABLE_STATUSES), *_date_range(date_from, date_to))
            .group_by(Client.industry)
            .order_by(total.desc())
        )
        return [(industry, float(amount or 0), int(count)) for industry, amount, count in self.db.execute(query).all()]

    def sales_for_export(self, date_from: datetime | None = None, date_to: datetime | None = None) -> list[Sale]:
        query = (
            select(Sale)
            .options(joinedload(Sale.client))
            .where(*_date_range(date_from, date_to))
            .order_by(Sale.date.desc(), Sale.id.desc())
        )
        return list(self.db.execute(query).scalars().all())
