from datetime import datetime
from domain.models.base_models import ApiModel
from domain.entities.records import ProductCategory

class ProductRead(ApiModel):
    id: int
    name: str
    description: str | None = None
    price: float
    category: ProductCategory
    sku: str | None = None
    stock: int
    is_active: bool
    created_at: datetime | None = None
