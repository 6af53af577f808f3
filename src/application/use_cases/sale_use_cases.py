from sqlalchemy.orm import Session
from adapters.repository.client_repository import ClientRepository
from adapters.repository.sale_repository import SaleRepository
from application.utils.validators import parse_date_filter, validate_sale_data, validate_status
from domain.entities.records import SaleRecord
from domain.entities.sale_entity import Sale
from domain.exceptions import NotFoundError, ValidationError

class SaleUseCases:

    def __init__(self, db: Session):
        self.repo = SaleRepository(db)
        self.client_repo = ClientRepository(db)

    def find_sales(
        self,
        *,
        client_id: int | None,
        date_from: str | None,
        date_to: str | None,
        status: str | None,
        page: int,
        limit: int,
    ) -> tuple[list[Sale], int]:
        return self.repo.find_sales(
            client_id=client_id,
            date_from=parse_date_filter(date_from, "from"),
            date_to=parse_date_filter(date_to, "to"),
            status=validate_status(status) if status else None,
            page=page,
            limit=limit,
        )

    def get_sale(self, sale_id: int) -> Sale:
        sale = self.repo.get_by_id(sale_id)
        if not sale:
            raise NotFoundError("Sale not found")
        return sale

    def _validated(self, payload: dict) -> SaleRecord:
        record = validate_sale_data(payload)
        if not self.client_repo.get_by_id(record.client_id):
            raise ValidationError("client", "Client not found")
        return record

    def create_sale(self, payload: dict) -> Sale:
        return self.repo.create(self._validated(payload))

    def update_sale(self, sale_id: int, payload: dict) -> Sale:
        sale = self.get_sale(sale_id)
        return self.repo.update(sale, self._validated(payload))

    def delete_sale(self, sale_id: int) -> None:
        self.repo.delete(self.get_sale(sale_id))
