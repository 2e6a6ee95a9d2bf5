"""
Daily-quest streak tracking — pure functions, no DB access.
"""
from datetime import date, timedelta


def compute_next_streak(
    previous_date: date | None,
    previous_all_completed: bool,
    current_streak: int,
    today: date,
) -> int:
    """
    Streak value for a freshly generated quest set.
    Continues only when yesterday's set was fully completed; anything else
    (first set ever, skipped day, unfinished set) resets to 0.
    """
    if previous_date is None:
        return 0

    if previous_date == today - timedelta(days=1) and previous_all_completed:
        return current_streak + 1

    return 0


def parse_quest_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None
