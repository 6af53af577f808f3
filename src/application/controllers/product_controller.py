from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from infrastructure.database import get_db
from infrastructure.audit import audited
from domain.models.product_models import ProductRead
from application.use_cases.product_use_cases import ProductUseCases
from application.use_cases.security import csrf_guard
from application.utils.utils import envelope, page_meta
from application.utils.validators import MAX_ID

router = APIRouter(prefix="/api/products", tags=["products"], dependencies=[Depends(csrf_guard)])

@router.get("")
def find_products(
    search: str = Query(""),
    category: str | None = Query(None),
    is_active: bool | None = Query(None, alias="isActive"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    products, total = ProductUseCases(db).find_products(
        search=search, category=category, is_active=is_active, page=page, limit=limit
    )
    return envelope([ProductRead.model_validate(p).to_json() for p in products], meta=page_meta(total, page, limit))

@router.get("/{product_id}")
def get_product(product_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    return envelope(ProductRead.model_validate(ProductUseCases(db).get_product(product_id)).to_json())

@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(audited("product.create"))])
def create_product(payload: dict, db: Session = Depends(get_db)):
    product = ProductUseCases(db).create_product(payload)
    return envelope(ProductRead.model_validate(product).to_json(), message="Product created successfully")

@router.put("/{product_id}", dependencies=[Depends(audited("product.update"))])
def update_product(payload: dict, product_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    product = ProductUseCases(db).update_product(product_id, payload)
    return envelope(ProductRead.model_validate(product).to_json(), message="Product updated successfully")

@router.patch("/{product_id}/stock", dependencies=[Depends(audited("product.stock"))])
def update_stock(payload: dict, product_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    """
    Ajusta o estoque.
    Corpo esperado: {"quantity": 5, "operation": "add" | "subtract" | "set"}
    """
    product = ProductUseCases(db).update_stock(product_id, payload)
    return envelope(ProductRead.model_validate(product).to_json(), message="Stock updated successfully")

@router.delete("/{product_id}", dependencies=[Depends(audited("product.delete"))])
def delete_product(product_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    ProductUseCases(db).delete_product(product_id)
    return envelope(message="Product deleted successfully")
