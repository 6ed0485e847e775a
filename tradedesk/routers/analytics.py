# =========================================================
# ANALYTICS ROUTER
#
# Loads every sale once and hands it to core.analytics:
# - Scope summary (gross, net, profit %)
# - Rolling 12 month gross / net trend
# - This month vs last month up to the same day
# - Business summary + top customers / products
#
# ?month=1..12 narrows the scoped figures, ?year defaults
# to the current year when a month is given
# =========================================================

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tradedesk.database import get_db
from tradedesk.core.analytics import build_analytics
from tradedesk.models.sales import Sale
from tradedesk.routers.sales import sales_query
from tradedesk.schemas.analytics import AnalyticsResponse

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("", response_model=AnalyticsResponse)
def analytics(
    db: Session = Depends(get_db),
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None, ge=1970, le=9999),
    top: int = Query(5, ge=1, le=50),
):
    today = datetime.now(timezone.utc).date()

    sales = sales_query(db).order_by(Sale.created_at, Sale.id).all()

    return build_analytics(
        sales,
        today=today,
        month=month,
        year=year,
        top=top,
    )
