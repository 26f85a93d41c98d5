"""
Тесты учёта использования и лимитов
"""

from datetime import date, datetime, timezone

import pytest
from core.auth import create_user
from core.exceptions import RateLimitError
from models import UsageLog
from services import UsageService
from services.usage import month_bounds, next_utc_midnight

from .conftest import TEST_PASSWORD

NOW = datetime(2026, 3, 15, 18, 30, tzinfo=timezone.utc)


def make_service(db_session, **limits):
    limits.setdefault("daily_limit", 2)
    limits.setdefault("monthly_limit", 10)
    limits.setdefault("global_daily_limit", 1400)
    return UsageService(db_session, clock=lambda: NOW, **limits)


def add_usage(db_session, user_id, day, count):
    db_session.add(UsageLog(user_id=user_id, usage_date=day, analysis_count=count))
    db_session.commit()


# ==================== Helpers ====================


def test_month_bounds_regular_month():
    assert month_bounds(date(2026, 3, 15)) == (date(2026, 3, 1), date(2026, 4, 1))


def test_month_bounds_december_rolls_year():
    assert month_bounds(date(2026, 12, 31)) == (date(2026, 12, 1), date(2027, 1, 1))


def test_next_midnight_is_utc():
    assert next_utc_midnight(NOW) == datetime(2026, 3, 16, tzinfo=timezone.utc)


# ==================== UsageService ====================


def test_fresh_user_can_analyze(db_session, verified_user):
    status = make_service(db_session).get_status(verified_user.id)

    assert status.daily_usage == 0
    assert status.monthly_usage == 0
    assert status.can_analyze is True
    assert status.reset_time == datetime(2026, 3, 16, tzinfo=timezone.utc)


def test_increment_creates_and_updates_daily_row(db_session, verified_user):
    service = make_service(db_session)

    service.increment(verified_user.id)
    service.increment(verified_user.id)
    db_session.commit()

    rows = db_session.query(UsageLog).filter_by(user_id=verified_user.id).all()
    assert len(rows) == 1
    assert rows[0].analysis_count == 2
    assert service.get_daily_usage(verified_user.id) == 2


def test_monthly_usage_sums_only_current_month(db_session, verified_user):
    add_usage(db_session, verified_user.id, date(2026, 3, 1), 3)
    add_usage(db_session, verified_user.id, date(2026, 3, 14), 2)
    add_usage(db_session, verified_user.id, date(2026, 2, 28), 5)
    add_usage(db_session, verified_user.id, date(2026, 4, 1), 4)

    service = make_service(db_session)

    assert service.get_monthly_usage(verified_user.id) == 5
    assert service.get_monthly_usage(verified_user.id, date(2026, 2, 1)) == 5
    assert service.get_daily_usage(verified_user.id) == 0


def test_daily_limit_blocks_analysis(db_session, verified_user):
    add_usage(db_session, verified_user.id, NOW.date(), 2)

    with pytest.raises(RateLimitError) as exc_info:
        make_service(db_session).ensure_can_analyze(verified_user.id)

    error = exc_info.value
    assert "Daily analysis limit reached" in error.message
    assert error.retry_after == 5 * 3600 + 30 * 60
    assert error.details["daily_usage"] == 2


def test_monthly_limit_blocks_analysis(db_session, verified_user):
    add_usage(db_session, verified_user.id, date(2026, 3, 2), 10)

    with pytest.raises(RateLimitError) as exc_info:
        make_service(db_session).ensure_can_analyze(verified_user.id)

    error = exc_info.value
    assert "Monthly analysis limit reached" in error.message
    # До 2026-04-01T00:00Z, а не до ближайшей полуночи
    assert error.retry_after == 16 * 86400 + 5 * 3600 + 30 * 60
    assert error.details["reset_time"] == "2026-04-01T00:00:00+00:00"


def test_global_daily_limit_blocks_everyone(db_session, verified_user):
    other = create_user(db_session, email="other@example.com", password=TEST_PASSWORD)
    add_usage(db_session, other.id, NOW.date(), 3)

    service = make_service(db_session, global_daily_limit=3)
    status = service.get_status(verified_user.id)

    assert status.daily_usage == 0
    assert status.global_limit_reached is True
    assert status.can_analyze is False
    with pytest.raises(RateLimitError):
        service.ensure_can_analyze(verified_user.id)
