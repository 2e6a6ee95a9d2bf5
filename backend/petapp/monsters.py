"""
Monster actions. Each action commits its own change first, then reports quest
progress through check_and_update_quest, which never raises.
"""
import logging
import random
from typing import Any, Optional

from supabase import Client

from . import wallet
from .daily_quests import check_and_update_quest
from .engine.quests import QuestType
from .db import (
    get_monster, list_monsters, list_public_monsters, list_monster_states, insert_monster, update_monster,
    insert_accessory, get_accessory, list_accessories,
    insert_background, get_background, list_backgrounds, find_owned_background,
)
from .engine.catalog import ACCESSORY_BY_ID, BACKGROUND_BY_ID, XP_BOOST_BY_ID
from .engine.monster import BASE_MAX_XP, FEED_XP, MOOD_AFTER_FEED, FeedOutcome, apply_xp, random_mood
from .errors import AlreadyOwnedError, ItemNotFoundError, MonsterNotFoundError, UnknownCatalogItemError

logger = logging.getLogger(__name__)


def _require_monster(db: Client, user_id: str, monster_id: str) -> dict:
    monster = get_monster(db, monster_id, user_id)
    if not monster:
        raise MonsterNotFoundError(f"Monster {monster_id} not found")
    return monster


def _report(db: Client, user_id: str, quest_types: tuple[QuestType, ...]) -> int:
    """Advance each quest by one; returns the Koins the completions paid."""
    results = [check_and_update_quest(db, user_id, quest_type) for quest_type in quest_types]
    return sum(r.reward for r in results if r is not None)


def _report_level_up(db: Client, user_id: str, monster_id: str, outcome: FeedOutcome) -> int:
    if not outcome.leveled_up:
        return 0
    logger.info("Monster %s reached level %d", monster_id, outcome.level)
    return _report(db, user_id, ("evolve_monster", "reach_monster_level"))


def adopt_monster(db: Client, user_id: str, name: str) -> dict:
    monster = insert_monster(db, {
        "owner_id": user_id,
        "name": name,
        "level": 1,
        "xp": 0,
        "max_xp": BASE_MAX_XP,
        "state": "happy",
        "is_public": False,
        "equipped_accessories": [],
        "equipped_background": None,
    })
    logger.info("Monster adopted by %s...: %s", user_id[:8], name)
    return monster


def get_monsters(db: Client, user_id: str) -> list[dict]:
    return list_monsters(db, user_id)


def get_public_monsters(db: Client, limit: int = 50) -> list[dict]:
    """Gallery of monsters their owners made public, newest first. Owner ids stay private."""
    return [{k: v for k, v in row.items() if k != "owner_id"} for row in list_public_monsters(db, limit)]


def feed_monster(db: Client, user_id: str, monster_id: str) -> dict:
    monster = _require_monster(db, user_id, monster_id)
    outcome = apply_xp(
        monster.get("xp") or 0,
        monster.get("level") or 1,
        monster.get("max_xp") or BASE_MAX_XP,
        FEED_XP,
    )
    updates: dict[str, Any] = {
        "xp": outcome.xp,
        "level": outcome.level,
        "max_xp": outcome.max_xp,
        "state": MOOD_AFTER_FEED,
    }
    update_monster(db, monster_id, updates)

    rewards = _report(db, user_id, ("feed_monster", "interact_with_monsters"))
    rewards += _report_level_up(db, user_id, monster_id, outcome)

    return {
        "monster": {**monster, **updates},
        "leveled_up": outcome.leveled_up,
        "quest_rewards": rewards,
    }


def buy_xp_boost(db: Client, user_id: str, monster_id: str, boost_id: str) -> dict:
    boost = XP_BOOST_BY_ID.get(boost_id)
    if boost is None:
        raise UnknownCatalogItemError(f"Unknown XP boost: {boost_id}")
    monster = _require_monster(db, user_id, monster_id)

    balance = wallet.spend(db, user_id, boost.price)
    outcome = apply_xp(
        monster.get("xp") or 0,
        monster.get("level") or 1,
        monster.get("max_xp") or BASE_MAX_XP,
        boost.xp_amount,
    )
    updates = {"xp": outcome.xp, "level": outcome.level, "max_xp": outcome.max_xp}
    update_monster(db, monster_id, updates)
    logger.info("XP boost %s used on %s by %s...", boost.id, monster_id, user_id[:8])

    return {
        "monster": {**monster, **updates},
        "leveled_up": outcome.leveled_up,
        "balance": balance,
        "quest_rewards": _report_level_up(db, user_id, monster_id, outcome),
    }


def toggle_public(db: Client, user_id: str, monster_id: str) -> dict:
    monster = _require_monster(db, user_id, monster_id)
    is_public = not monster.get("is_public", False)
    update_monster(db, monster_id, {"is_public": is_public})
    if is_public:
        check_and_update_quest(db, user_id, "make_monster_public")
    return {**monster, "is_public": is_public}


def buy_accessory(db: Client, user_id: str, monster_id: str, accessory_id: str) -> dict:
    item = ACCESSORY_BY_ID.get(accessory_id)
    if item is None:
        raise UnknownCatalogItemError(f"Unknown accessory: {accessory_id}")
    _require_monster(db, user_id, monster_id)

    balance = wallet.spend(db, user_id, item.price)
    owned = insert_accessory(db, {
        "monster_id": monster_id,
        "catalog_id": item.id,
        "type": item.type,
        "main_color": item.main_color,
    })
    check_and_update_quest(db, user_id, "buy_accessory")
    return {"accessory": owned, "balance": balance}


def toggle_accessory(db: Client, user_id: str, monster_id: str, accessory_id: str) -> dict:
    """Equip an owned accessory, or unequip it when it is already worn."""
    monster = _require_monster(db, user_id, monster_id)
    if not get_accessory(db, accessory_id, monster_id):
        raise ItemNotFoundError(f"Accessory {accessory_id} not found for this monster")

    equipped = list(monster.get("equipped_accessories") or [])
    if accessory_id in equipped:
        equipped.remove(accessory_id)
        update_monster(db, monster_id, {"equipped_accessories": equipped})
        return {"equipped": False, "equipped_accessories": equipped}

    equipped.append(accessory_id)
    update_monster(db, monster_id, {"equipped_accessories": equipped})
    check_and_update_quest(db, user_id, "equip_accessory")
    return {"equipped": True, "equipped_accessories": equipped}


def get_accessories(db: Client, user_id: str, monster_id: str, equipped: bool = False) -> list[dict]:
    """Accessories the monster owns; only the ones it wears when `equipped`."""
    monster = _require_monster(db, user_id, monster_id)
    owned = list_accessories(db, monster_id)
    if not equipped:
        return owned
    worn = set(monster.get("equipped_accessories") or [])
    return [a for a in owned if a["id"] in worn]


def buy_background(db: Client, user_id: str, monster_id: str, background_id: str) -> dict:
    item = BACKGROUND_BY_ID.get(background_id)
    if item is None:
        raise UnknownCatalogItemError(f"Unknown background: {background_id}")
    _require_monster(db, user_id, monster_id)
    if find_owned_background(db, monster_id, item.id):
        raise AlreadyOwnedError(f"Background {item.id} already owned by this monster")

    balance = wallet.spend(db, user_id, item.price)
    owned = insert_background(db, {
        "monster_id": monster_id,
        "catalog_id": item.id,
        "url": item.url,
        "description": item.description,
    })
    return {"background": owned, "balance": balance}


def equip_background(db: Client, user_id: str, monster_id: str, background_id: str) -> dict:
    monster = _require_monster(db, user_id, monster_id)
    if not get_background(db, background_id, monster_id):
        raise ItemNotFoundError(f"Background {background_id} not found for this monster")

    update_monster(db, monster_id, {"equipped_background": background_id})
    check_and_update_quest(db, user_id, "change_background")
    return {**monster, "equipped_background": background_id}


def unequip_background(db: Client, user_id: str, monster_id: str) -> dict:
    monster = _require_monster(db, user_id, monster_id)
    update_monster(db, monster_id, {"equipped_background": None})
    return {**monster, "equipped_background": None}


def get_backgrounds(db: Client, user_id: str, monster_id: str) -> dict:
    monster = _require_monster(db, user_id, monster_id)
    return {
        "backgrounds": list_backgrounds(db, monster_id),
        "equipped_background": monster.get("equipped_background"),
    }


def shuffle_moods(
    db: Client,
    owner_id: Optional[str] = None,
    rng: random.Random | None = None,
) -> list[dict]:
    """
    Give every monster (or one owner's monsters) a random unhappy mood so
    they need looking after again. Returns one {id, old_state, new_state}
    entry per monster.
    """
    details = []
    for row in list_monster_states(db, owner_id):
        new_state = random_mood(rng)
        update_monster(db, row["id"], {"state": new_state})
        details.append({"id": row["id"], "old_state": row.get("state"), "new_state": new_state})
    logger.info("Moods updated for %d monster(s)", len(details))
    return details
