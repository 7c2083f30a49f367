"""Report submission endpoint (any authenticated account)."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from purgehub.api.v1.auth import get_current_user
from purgehub.core.database import get_db
from purgehub.schemas.auth import CurrentUser
from purgehub.schemas.moderation import ReportCreate, ReportOut
from purgehub.services.moderation import create_report

router = APIRouter()


@router.post("", response_model=ReportOut, status_code=201)
def post_report(
    body: ReportCreate,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ReportOut:
    """File a report against an account and/or a post. It starts as pending."""
    report = create_report(db, current_user, body)
    return ReportOut.model_validate(report)
