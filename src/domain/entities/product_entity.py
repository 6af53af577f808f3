from infrastructure.database import Base
from datetime import datetime
from sqlalchemy import String, Text, Integer, Boolean, Numeric, DateTime, Enum as SAEnum, func
from sqlalchemy.orm import Mapped, mapped_column
from domain.entities.records import ProductCategory


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    category: Mapped[ProductCategory] = mapped_column(
        SAEnum(ProductCategory, name="productcategory", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ProductCategory.producto,
        index=True,
    )
    # NULL não conflita com NULL no índice único
    sku: Mapped[str | None] = mapped_column(String(100), unique=True, nullable=True)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
