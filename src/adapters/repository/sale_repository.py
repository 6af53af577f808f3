from datetime import datetime
from sqlalchemy import select, func
from sqlalchemy.orm import Session, joinedload
from domain.entities.sale_entity import Sale
from domain.entities.records import SaleRecord, SaleStatus

class SaleRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_sales(
        self,
        *,
        client_id: int | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        status: SaleStatus | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Sale], int]:
        conditions = []
        if client_id is not None:
            conditions.append(Sale.client_id == client_id)
        if status is not None:
            conditions.append(Sale.status == status)
        if date_from is not None:
            conditions.append(Sale.date >= date_from)
        if date_to is not None:
            conditions.append(Sale.date <= date_to)

        total = self.db.execute(select(func.count(Sale.id)).where(*conditions)).scalar_one()
        query = (
            select(Sale)
            .options(joinedload(Sale.client))
            .where(*conditions)
            .order_by(Sale.date.desc(), Sale.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(self.db.execute(query).scalars().all()), total

    def get_by_id(self, sale_id: int) -> Sale | None:
        query = select(Sale).options(joinedload(Sale.client)).where(Sale.id == sale_id)
        return self.db.execute(query).scalar_one_or_none()

    def create(self, record: SaleRecord) -> Sale:
        sale = Sale(
            client_id=record.client_id,
            amount=record.amount,
            description=record.description,
            date=record.date,
            status=record.status,
        )
        self.db.add(sale)
        self.db.commit()
        return self.get_by_id(sale.id)

    def update(self, sale: Sale, record: SaleRecord) -> Sale:
        sale.client_id = record.client_id
        sale.amount = record.amount
        sale.description = record.description
        sale.date = record.date
        sale.status = record.status
        self.db.commit()
        # recarrega o cliente caso tenha mudado
        self.db.refresh(sale)
        return self.get_by_id(sale.id)

    def delete(self, sale: Sale) -> None:
        self.db.delete(sale)
        self.db.commit()
