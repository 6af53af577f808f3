from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from infrastructure.database import get_db
from infrastructure.audit import audited
from domain.models.client_models import ClientRead
from application.use_cases.client_use_cases import ClientUseCases
from application.use_cases.security import csrf_guard
from application.utils.utils import envelope, page_meta
from application.utils.validators import MAX_ID

router = APIRouter(prefix="/api/clients", tags=["clients"], dependencies=[Depends(csrf_guard)])

@router.get("")
def find_clients(
    search: str = Query("", description="Busca por nome, email ou indústria"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    clients, total = ClientUseCases(db).find_clients(search, page, limit)
    return envelope(
        [ClientRead.model_validate(client).to_json() for client in clients],
        meta=page_meta(total, page, limit),
    )

@router.get("/{client_id}")
def get_client(client_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    return envelope(ClientRead.model_validate(ClientUseCases(db).get_client(client_id)).to_json())

@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(audited("client.create"))])
def create_client(payload: dict, db: Session = Depends(get_db)):
    client = ClientUseCases(db).create_client(payload)
    return envelope(ClientRead.model_validate(client).to_json(), message="Client created successfully")

@router.put("/{client_id}", dependencies=[Depends(audited("client.update"))])
def update_client(payload: dict, client_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    client = ClientUseCases(db).update_client(client_id, payload)
    return envelope(ClientRead.model_validate(client).to_json(), message="Client updated successfully")

@router.delete("/{client_id}", dependencies=[Depends(audited("client.delete"))])
def delete_client(client_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    ClientUseCases(db).delete_client(client_id)
    return envelope({}, message="Client deleted successfully")
