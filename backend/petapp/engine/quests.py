"""
Daily quest catalog and selection — pure functions, no DB access.
"""
import random
from dataclasses import dataclass
from typing import Literal

QuestType = Literal[
    "feed_monster",
    "evolve_monster",
    "interact_with_monsters",
    "buy_accessory",
    "make_monster_public",
    "reach_monster_level",
    "collect_koins",
    "equip_accessory",
    "change_background",
]

DAILY_QUESTS_COUNT = 3
COMPLETE_ALL_BONUS = 50


@dataclass(frozen=True)
class QuestDefinition:
    id: str
    title: str
    description: str
    reward: int         # Koins
    target_count: int
    icon: str


QUESTS: list[QuestDefinition] = [
    QuestDefinition("feed_monster",           "Feed your monsters",   "Feed your monster 5 times today",      20, 5,  "🍖"),
    QuestDefinition("evolve_monster",         "Evolve",               "Level a monster up once",              50, 1,  "⬆️"),
    QuestDefinition("interact_with_monsters", "Play time",            "Interact with your monsters 3 times",  30, 3,  "🎮"),
    QuestDefinition("buy_accessory",          "Shopping spree",       "Buy an accessory in the shop",         40, 1,  "🛍️"),
    QuestDefinition("make_monster_public",    "Show it off",          "Make a monster public",                15, 1,  "🌍"),
    QuestDefinition("reach_monster_level",    "Level goals",          "Gain 3 monster levels",                35, 3,  "🎯"),
    QuestDefinition("collect_koins",          "Koin collector",       "Collect 50 Koins today",               25, 50, "💰"),
    QuestDefinition("equip_accessory",        "Dress up",             "Equip 2 accessories on your monsters", 20, 2,  "👔"),
    QuestDefinition("change_background",      "Redecorate",           "Change a monster's background",        15, 1,  "🖼️"),
]

QUEST_BY_ID: dict[str, QuestDefinition] = {q.id: q for q in QUESTS}

UNKNOWN_QUEST_ICON = "❓"


def pick_daily_quests(rng: random.Random | None = None, count: int = DAILY_QUESTS_COUNT) -> list[QuestDefinition]:
    """
    Sample `count` distinct quest definitions from the catalog.
    Each pick removes the chosen entry from a working copy, so no type repeats.
    """
    rng = rng or random
    if count > len(QUESTS):
        raise ValueError(f"catalog only has {len(QUESTS)} quests, cannot pick {count}")
    available = list(QUESTS)
    picked: list[QuestDefinition] = []
    for _ in range(count):
        picked.append(available.pop(rng.randrange(len(available))))
    return picked


def clamp_progress(current: int, increment: int, target: int) -> int:
    return max(0, min(current + increment, target))


def quest_display(quest_type: str) -> dict:
    """Catalog title/description/icon for a stored quest type."""
    definition = QUEST_BY_ID.get(quest_type)
    if definition is None:
        return {"title": "", "description": "", "icon": UNKNOWN_QUEST_ICON}
    return {"title": definition.title, "description": definition.description, "icon": definition.icon}
