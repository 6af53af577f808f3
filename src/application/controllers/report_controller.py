from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from infrastructure.database import get_db
from infrastructure.audit import audited
from application.use_cases.report_use_cases import ReportUseCases
from application.use_cases.security import csrf_guard
from application.utils.utils import envelope
from domain.exceptions import ValidationError

router = APIRouter(prefix="/api/reports", tags=["reports"], dependencies=[Depends(csrf_guard)])

@router.get("/summary")
def summary(
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    db: Session = Depends(get_db),
):
    uc = ReportUseCases(db)
    return envelope(uc.summary(*uc.parse_range(date_from, date_to)))

@router.get("/export", dependencies=[Depends(audited("report.export"))])
def export_report(
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    format: str = Query("pdf"),
    db: Session = Depends(get_db),
):
    if format != "pdf":
        raise ValidationError("format", "Only the PDF format is available")

    uc = ReportUseCases(db)
    content = uc.export_pdf(*uc.parse_range(date_from, date_to))
    stamp = int(datetime.now(timezone.utc).timestamp() * 1000)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=sales-report-{stamp}.pdf"},
    )

@router.get("/top-clients")
def top_clients(limit: int = Query(5, ge=1, le=100), db: Session = Depends(get_db)):
    return envelope(ReportUseCases(db).top_clients(limit))

@router.get("/trends")
def trends(
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    db: Session = Depends(get_db),
):
    uc = ReportUseCases(db)
    return envelope(uc.trends(*uc.parse_range(date_from, date_to)))

@router.get("/by-industry")
def by_industry(
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    db: Session = Depends(get_db),
):
    uc = ReportUseCases(db)
    return envelope(uc.by_industry(*uc.parse_range(date_from, date_to)))
