from datetime import date

import pytest

from speak_admin.services.exceptions import NotFoundError
from speak_admin.services.streak_service import StreakService, streak_level

from conftest import make_user


@pytest.mark.parametrize("days, level", [
    (None, "Beginner"),
    (0, "Beginner"),
    (2, "Beginner"),
    (3, "Intermediate"),
    (7, "Advanced"),
    (13, "Advanced"),
    (14, "Expert"),
    (30, "Master"),
    (365, "Master"),
])
def test_streak_level(days, level):
    assert streak_level(days) == level


def test_checkin_sequence(db_session):
    user = make_user(db_session, "learner@example.com")
    service = StreakService(db_session)

    streak = service.record_checkin(user.id, today=date(2024, 3, 1))
    assert (streak.current_streak, streak.longest_streak) == (1, 1)

    # 同一天重复打卡
    streak = service.record_checkin(user.id, today=date(2024, 3, 1))
    assert streak.current_streak == 1

    service.record_checkin(user.id, today=date(2024, 3, 2))
    streak = service.record_checkin(user.id, today=date(2024, 3, 3))
    assert (streak.current_streak, streak.longest_streak) == (3, 3)

    # 断签后重置，历史最长保留
    streak = service.record_checkin(user.id, today=date(2024, 3, 10))
    assert (streak.current_streak, streak.longest_streak) == (1, 3)
    assert streak.last_checkin_date == date(2024, 3, 10)


def test_checkin_unknown_user(db_session):
    with pytest.raises(NotFoundError):
        StreakService(db_session).record_checkin(999)
