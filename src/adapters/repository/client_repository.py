from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session
from domain.entities.client_entity import Client
from domain.entities.sale_entity import Sale
from domain.entities.records import ClientRecord

class ClientRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_clients(self, search: str = "", page: int = 1, limit: int = 10) -> tuple[list[Client], int]:
        query = select(Client)
        count_query = select(func.count(Client.id))
        if search:
            pattern = f"%{search}%"
            condition = or_(
                Client.name.ilike(pattern),
                Client.email.ilike(pattern),
                Client.industry.ilike(pattern),
            )
            query = query.where(condition)
            count_query = count_query.where(condition)

        total = self.db.execute(count_query).scalar_one()
        query = query.order_by(Client.created_at.desc(), Client.id.desc()).offset((page - 1) * limit).limit(limit)
        return list(self.db.execute(query).scalars().all()), total

    def get_by_id(self, client_id: int) -> Client | None:
        return self.db.get(Client, client_id)

    def create(self, record: ClientRecord) -> Client:
        client = Client(
            name=record.name,
            email=record.email,
            phone=record.phone,
            industry=record.industry,
            notes=record.notes,
        )
        self.db.add(client)
        self.db.commit()
        self.db.refresh(client)
        return client

    def update(self, client: Client, record: ClientRecord) -> Client:
        client.name = record.name
        client.email = record.email
        client.phone = record.phone
        client.industry = record.industry
        client.notes = record.notes
        self.db.commit()
        self.db.refresh(client)
        return client

    def count_sales(self, client_id: int) -> int:
        query = select(func.count(Sale.id)).where(Sale.client_id == client_id)
        return self.db.execute(query).scalar_one()

    def delete(self, client: Client) -> None:
        self.db.delete(client)
        self.db.commit()
