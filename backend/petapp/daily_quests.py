"""
Daily quest lifecycle: lazy per-day generation, progress tracking, streaks and
the all-quests bonus.

A user's quest document is renewed on read: whenever the stored current_date
differs from today, a fresh set is generated before anything else happens.
Nothing expires documents in the background.

Updates are plain read-modify-write on one row with no version check, so two
concurrent requests for the same user can overwrite each other's progress.
"""
import logging
import random
from datetime import date, datetime, timezone
from typing import Optional

from pydantic import ValidationError
from supabase import Client

from . import wallet
from .db import get_daily_quests, save_daily_quests, count_stale_daily_quests
from .engine.quests import (
    COMPLETE_ALL_BONUS, QUEST_BY_ID, QuestDefinition, QuestType, clamp_progress, pick_daily_quests,
)
from .engine.streak import compute_next_streak, parse_quest_date
from .models import BonusClaimResult, QuestInstance, QuestProgressResult, QuestStats, UserDailyQuests

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _new_instance(definition: QuestDefinition) -> QuestInstance:
    return QuestInstance(
        quest_type=definition.id,
        current_progress=0,
        target_count=definition.target_count,
        reward=definition.reward,
    )


def _load(db: Client, user_id: str) -> tuple[Optional[UserDailyQuests], QuestStats]:
    """
    Returns (document, stats). A stored row that no longer validates (wrong
    quest count, duplicate types...) is treated as missing so it gets
    regenerated, keeping whatever stats can still be read.
    """
    row = get_daily_quests(db, user_id)
    if row is None:
        return None, QuestStats()
    try:
        doc = UserDailyQuests.model_validate(row)
        return doc, doc.stats
    except ValidationError as e:
        logger.warning("Invalid quest document for %s..., regenerating: %s", user_id[:8], e.errors()[:1])
        try:
            return None, QuestStats.model_validate(row.get("stats") or {})
        except ValidationError:
            return None, QuestStats()


def _save(db: Client, doc: UserDailyQuests) -> None:
    save_daily_quests(db, doc.model_dump(mode="json"))


def _pay_reward(db: Client, user_id: str, amount: int, reason: str) -> None:
    """
    Credit a reward whose completion is already saved. A failure here loses
    the reward for good, so it is logged with the amount before re-raising.
    """
    try:
        wallet.credit(db, user_id, amount)
    except Exception:
        logger.error("Reward %d for %s... not credited (%s already saved as paid)", amount, user_id[:8], reason)
        raise


def get_user_daily_quests(
    db: Client,
    user_id: str,
    today: date | None = None,
    rng: random.Random | None = None,
) -> UserDailyQuests:
    today = today or utc_today()
    doc, stats = _load(db, user_id)

    if doc is not None and doc.current_date == today.isoformat():
        return doc

    if doc is not None:
        new_streak = compute_next_streak(
            parse_quest_date(doc.current_date), doc.all_completed, stats.current_streak, today,
        )
    else:
        new_streak = 0

    stats = stats.model_copy(update={
        "current_streak": new_streak,
        "longest_streak": max(stats.longest_streak, new_streak),
    })

    doc = UserDailyQuests(
        owner_id=user_id,
        current_date=today.isoformat(),
        quests=tuple(_new_instance(d) for d in pick_daily_quests(rng)),
        all_completed=False,
        bonus_claimed=False,
        stats=stats,
    )
    _save(db, doc)
    logger.info(
        "New daily quests for %s... on %s: %s (streak %d)",
        user_id[:8], doc.current_date, [q.quest_type for q in doc.quests], new_streak,
    )
    return doc


def update_quest_progress(
    db: Client,
    user_id: str,
    quest_type: QuestType,
    increment: int = 1,
    today: date | None = None,
) -> QuestProgressResult:
    if quest_type not in QUEST_BY_ID:
        raise ValueError(f"Unknown quest type: {quest_type!r}")

    doc = get_user_daily_quests(db, user_id, today=today)
    quest = doc.find_quest(quest_type)

    if quest is None:
        return QuestProgressResult(completed=False, reward=0, all_quests_completed=False)

    # Completed quests are terminal for the day; never credit twice.
    if quest.completed:
        return QuestProgressResult(completed=True, reward=0, all_quests_completed=doc.all_completed)

    quest.current_progress = clamp_progress(quest.current_progress, increment, quest.target_count)

    if quest.current_progress < quest.target_count:
        _save(db, doc)
        return QuestProgressResult(completed=False, reward=0, all_quests_completed=False)

    quest.completed = True
    quest.completed_at = datetime.now(timezone.utc)
    doc.stats.total_quests_completed += 1
    doc.stats.total_koins_earned += quest.reward
    doc.all_completed = all(q.completed for q in doc.quests)

    # Persist the completion before paying out so a retried request sees the
    # quest as done and cannot credit it again.
    _save(db, doc)
    _pay_reward(db, user_id, quest.reward, f"quest {quest_type}")

    logger.info("Quest %s completed by %s...: +%d Koins", quest_type, user_id[:8], quest.reward)
    return QuestProgressResult(completed=True, reward=quest.reward, all_quests_completed=doc.all_completed)


def claim_all_quests_bonus(db: Client, user_id: str, today: date | None = None) -> BonusClaimResult:
    doc = get_user_daily_quests(db, user_id, today=today)

    if not doc.all_completed or doc.bonus_claimed:
        return BonusClaimResult(success=False, bonus=0)

    doc.bonus_claimed = True
    doc.stats.total_koins_earned += COMPLETE_ALL_BONUS
    _save(db, doc)
    _pay_reward(db, user_id, COMPLETE_ALL_BONUS, "all-quests bonus")

    logger.info("All-quests bonus claimed by %s...: +%d Koins", user_id[:8], COMPLETE_ALL_BONUS)
    return BonusClaimResult(success=True, bonus=COMPLETE_ALL_BONUS)


def check_and_update_quest(
    db: Client,
    user_id: str,
    quest_type: QuestType,
    increment: int = 1,
) -> Optional[QuestProgressResult]:
    """
    Quest bookkeeping attached to a user action. Failures are logged and
    swallowed: the action itself has already succeeded and must stay that way.
    """
    try:
        return update_quest_progress(db, user_id, quest_type, increment)
    except Exception:
        logger.exception("Error updating quest %s for %s...", quest_type, user_id[:8])
        return None


def report_stale_quests(db: Client, today: date | None = None) -> dict:
    """
    Count quest documents from a previous day. Nothing is rewritten here:
    each one is regenerated the next time its owner reads it.
    """
    today = today or utc_today()
    stale = count_stale_daily_quests(db, today)
    logger.info("%d quest document(s) stale for %s", stale, today.isoformat())
    return {"processed": stale, "renewed": 0}
