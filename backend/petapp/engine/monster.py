"""
Monster feeding and levelling rules — pure functions, no DB access.
"""
import random
from dataclasses import dataclass

FEED_XP = 25
BASE_MAX_XP = 100
MOOD_AFTER_FEED = "happy"


@dataclass
class FeedOutcome:
    xp: int
    level: int
    max_xp: int
    leveled_up: bool


def max_xp_for_level(level: int) -> int:
    """XP bar length at a level; level 1 starts at 100."""
    return max(level, 1) * BASE_MAX_XP


def apply_xp(xp: int, level: int, max_xp: int, gained: int) -> FeedOutcome:
    """
    Add XP to a monster. Reaching max_xp levels up once and empties the bar;
    overflow is discarded.
    """
    new_xp = max(xp, 0) + gained
    if new_xp >= max_xp:
        new_level = level + 1
        return FeedOutcome(xp=0, level=new_level, max_xp=max_xp_for_level(new_level), leveled_up=True)
    return FeedOutcome(xp=new_xp, level=level, max_xp=max_xp, leveled_up=False)


UNHAPPY_MOODS = ("sad", "angry", "hungry", "sleepy")


def random_mood(rng: random.Random | None = None) -> str:
    """Mood a monster drifts into when nobody looks after it."""
    return (rng or random).choice(UNHAPPY_MOODS)
