"""
In-memory stand-in for the quest and wallet tables. Patches the db helpers
imported by the service modules so no Supabase calls are made.
"""
import copy
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from petapp.models import UserDailyQuests


@pytest.fixture
def store():
    quests: dict[str, dict] = {}
    wallets: dict[str, int] = {}

    def get_daily_quests(db, owner_id):
        return copy.deepcopy(quests.get(owner_id))

    def save_daily_quests(db, doc):
        quests[doc["owner_id"]] = copy.deepcopy(doc)

    def get_wallet(db, owner_id):
        if owner_id not in wallets:
            return None
        return {"owner_id": owner_id, "balance": wallets[owner_id]}

    def increment_wallet(db, owner_id, amount):
        wallets[owner_id] = wallets.get(owner_id, 0) + amount
        return wallets[owner_id]

    patches = {
        "get_daily_quests": patch("petapp.daily_quests.get_daily_quests", side_effect=get_daily_quests),
        "save_daily_quests": patch("petapp.daily_quests.save_daily_quests", side_effect=save_daily_quests),
        "get_wallet": patch("petapp.wallet.get_wallet", side_effect=get_wallet),
        "increment_wallet": patch("petapp.wallet.increment_wallet", side_effect=increment_wallet),
    }
    started = {k: p.start() for k, p in patches.items()}

    yield SimpleNamespace(db=MagicMock(), quests=quests, wallets=wallets, **started)

    for p in patches.values():
        p.stop()


def seed_quests(store, owner_id, current_date, quest_types, completed=(), **overrides):
    """Put a quest document for `owner_id` directly into the store."""
    from petapp.engine.quests import QUEST_BY_ID

    instances = []
    for quest_type in quest_types:
        definition = QUEST_BY_ID[quest_type]
        done = quest_type in completed
        instances.append({
            "quest_type": quest_type,
            "current_progress": definition.target_count if done else 0,
            "target_count": definition.target_count,
            "reward": definition.reward,
            "completed": done,
        })
    doc = UserDailyQuests.model_validate({
        "owner_id": owner_id,
        "current_date": current_date,
        "quests": instances,
        **overrides,
    })
    store.quests[owner_id] = doc.model_dump(mode="json")
    return doc


@pytest.fixture
def seed(store):
    return lambda *args, **kwargs: seed_quests(store, *args, **kwargs)
