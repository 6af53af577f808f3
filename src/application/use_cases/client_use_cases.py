from sqlalchemy.orm import Session
from adapters.repository.client_repository import ClientRepository
from application.utils.validators import validate_client_data
from domain.entities.client_entity import Client
from domain.exceptions import ConflictError, NotFoundError

class ClientUseCases:

    def __init__(self, db: Session):
        self.repo = ClientRepository(db)

    def find_clients(self, search: str, page: int, limit: int) -> tuple[list[Client], int]:
        return self.repo.find_clients(search=search.strip(), page=page, limit=limit)

    def get_client(self, client_id: int) -> Client:
        client = self.repo.get_by_id(client_id)
        if not client:
            raise NotFoundError("Client not found")
        return client

    def create_client(self, payload: dict) -> Client:
        return self.repo.create(validate_client_data(payload))

    def update_client(self, client_id: int, payload: dict) -> Client:
        client = self.get_client(client_id)
        return self.repo.update(client, validate_client_data(payload))

    def delete_client(self, client_id: int) -> None:
        client = self.get_client(client_id)
        if self.repo.count_sales(client_id):
            raise ConflictError("Client has sales and cannot be deleted", field="client")
        self.repo.delete(client)
