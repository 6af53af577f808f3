from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from infrastructure.database import get_db
from infrastructure.audit import audited
from domain.models.sale_models import SaleRead
from application.use_cases.sale_use_cases import SaleUseCases
from application.use_cases.security import csrf_guard
from application.utils.utils import envelope, page_meta
from application.utils.validators import MAX_ID

router = APIRouter(prefix="/api/sales", tags=["sales"], dependencies=[Depends(csrf_guard)])

@router.get("")
def find_sales(
    client: int | None = Query(None, ge=1, le=MAX_ID, description="Id do cliente"),
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    status: str | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    sales, total = SaleUseCases(db).find_sales(
        client_id=client, date_from=date_from, date_to=date_to, status=status, page=page, limit=limit
    )
    return envelope([SaleRead.model_validate(sale).to_json() for sale in sales], meta=page_meta(total, page, limit))

@router.get("/{sale_id}")
def get_sale(sale_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    return envelope(SaleRead.model_validate(SaleUseCases(db).get_sale(sale_id)).to_json())

@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(audited("sale.create"))])
def create_sale(payload: dict, db: Session = Depends(get_db)):
    sale = SaleUseCases(db).create_sale(payload)
    return envelope(SaleRead.model_validate(sale).to_json(), message="Sale created successfully")

@router.put("/{sale_id}", dependencies=[Depends(audited("sale.update"))])
def update_sale(payload: dict, sale_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    sale = SaleUseCases(db).update_sale(sale_id, payload)
    return envelope(SaleRead.model_validate(sale).to_json(), message="Sale updated successfully")

@router.delete("/{sale_id}", dependencies=[Depends(audited("sale.delete"))])
def delete_sale(sale_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    SaleUseCases(db).delete_sale(sale_id)
    return envelope({}, message="Sale deleted successfully")
