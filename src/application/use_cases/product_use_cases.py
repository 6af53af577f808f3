import logging
from sqlalchemy.orm import Session
from adapters.repository.product_repository import ProductRepository
from application.utils.validators import MAX_STOCK, validate_category, validate_product_data, validate_stock_update
from domain.entities.product_entity import Product
from domain.entities.records import StockOperation
from domain.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

class ProductUseCases:

    def __init__(self, db: Session):
        self.repo = ProductRepository(db)

    def find_products(
        self, *, search: str, category: str | None, is_active: bool | None, page: int, limit: int
    ) -> tuple[list[Product], int]:
        return self.repo.find_products(
            search=search.strip(),
            category=validate_category(category) if category else None,
            is_active=is_active,
            page=page,
            limit=limit,
        )

    def get_product(self, product_id: int) -> Product:
        product = self.repo.get_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def create_product(self, payload: dict) -> Product:
        return self.repo.create(validate_product_data(payload))

    def update_product(self, product_id: int, payload: dict) -> Product:
        """Atualização parcial: campos ausentes no corpo mantêm o valor atual."""
        product = self.get_product(product_id)
        merged = {
            "name": product.name,
            "description": product.description,
            "price": product.price,
            "category": product.category.value,
            "sku": product.sku,
            "stock": product.stock,
            "isActive": product.is_active,
        }
        merged.update(payload)
        if "is_active" in payload and "isActive" not in payload:
            merged["isActive"] = payload["is_active"]
        return self.repo.update(product, validate_product_data(merged))

    def update_stock(self, product_id: int, payload: dict) -> Product:
        change = validate_stock_update(payload)
        product = self.get_product(product_id)
        if change.operation == StockOperation.add and product.stock + change.quantity > MAX_STOCK:
            raise ValidationError("quantity", "Stock is too large")
        updated = self.repo.update_stock(product, change.quantity, change.operation)
        logger.info("Stock of product %s: %s %s -> %s", product_id, change.operation.value, change.quantity, updated.stock)
        return updated

    def delete_product(self, product_id: int) -> None:
        self.repo.delete(self.get_product(product_id))
