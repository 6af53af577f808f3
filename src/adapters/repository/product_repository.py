import logging
from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from domain.entities.product_entity import Product
from domain.entities.records import ProductCategory, ProductRecord, StockOperation
from domain.exceptions import ConflictError

logger = logging.getLogger(__name__)

class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_products(
        self,
        *,
        search: str = "",
        category: ProductCategory | None = None,
        is_active: bool | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Product], int]:
        conditions = []
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(
                Product.name.ilike(pattern),
                Product.description.ilike(pattern),
                Product.sku.ilike(pattern),
            ))
        if category is not None:
            conditions.append(Product.category == category)
        if is_active is not None:
            conditions.append(Product.is_active == is_active)

        total = self.db.execute(select(func.count(Product.id)).where(*conditions)).scalar_one()
        query = (
            select(Product)
            .where(*conditions)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(self.db.execute(query).scalars().all()), total

    def get_by_id(self, product_id: int) -> Product | None:
        return self.db.get(Product, product_id)

    def _commit_unique_sku(self, sku: str | None) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info("Duplicate SKU rejected: %s", sku)
            raise ConflictError("SKU already exists", field="sku")

    def create(self, record: ProductRecord) -> Product:
        product = Product(
            name=record.name,
            description=record.description,
            price=record.price,
            category=record.category,
            sku=record.sku,
            stock=record.stock,
            is_active=record.is_active,
        )
        self.db.add(product)
        self._commit_unique_sku(record.sku)
        self.db.refresh(product)
        return product

    def update(self, product: Product, record: ProductRecord) -> Product:
        product.name = record.name
        product.description = record.description
        product.price = record.price
        product.category = record.category
        product.sku = record.sku
        product.stock = record.stock
        product.is_active = record.is_active
        self._commit_unique_sku(record.sku)
        self.db.refresh(product)
        return product

    def update_stock(self, product: Product, quantity: int, operation: StockOperation) -> Product:
        if operation == StockOperation.add:
            product.stock = product.stock + quantity
        elif operation == StockOperation.subtract:
            # nunca abaixo de zero
            product.stock = max(0, product.stock - quantity)
        else:
            product.stock = quantity
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete(self, product: Product) -> None:
        self.db.delete(product)
        self.db.commit()
