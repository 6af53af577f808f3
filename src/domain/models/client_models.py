from datetime import datetime
from domain.models.base_models import ApiModel

class ClientSummary(ApiModel):
    id: int
    name: str
    email: str | None = None
    phone: str | None = None
    industry: str | None = None

class ClientRead(ClientSummary):
    notes: str | None = None
    created_at: datetime | None = None
