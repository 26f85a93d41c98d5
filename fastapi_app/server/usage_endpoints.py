"""
Эндпоинт текущего использования и лимитов
"""

import logging

from core.auth import get_current_user, get_db_session
from fastapi import APIRouter, Depends
from models import User
from schemas import UsageResponse
from services import UsageService
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Usage"])


@router.get("/usage", response_model=UsageResponse)
async def get_usage(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    """Сколько анализов использовано сегодня и в этом месяце"""
    status = UsageService(db).get_status(current_user.id)
    logger.info(
        f"[USAGE] Usage requested by user_id={current_user.id}",
        extra={"daily_usage": status.daily_usage, "monthly_usage": status.monthly_usage},
    )
    return UsageResponse(
        daily_usage=status.daily_usage,
        daily_limit=status.daily_limit,
        monthly_usage=status.monthly_usage,
        monthly_limit=status.monthly_limit,
        can_analyze=status.can_analyze,
        reset_time=status.reset_time,
    )
