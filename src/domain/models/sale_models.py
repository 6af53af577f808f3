from datetime import datetime
from domain.models.base_models import ApiModel
from domain.models.client_models import ClientSummary
from domain.entities.records import SaleStatus

class SaleRead(ApiModel):
    id: int
    client_id: int
    client: ClientSummary | None = None
    amount: float
    description: str | None = None
    date: datetime
    status: SaleStatus
    created_at: datetime | None = None
