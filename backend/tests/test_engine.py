import random

import pytest

from petapp.engine.catalog import (
    ACCESSORIES, BACKGROUNDS, BACKGROUND_CATEGORIES, KOIN_PACKAGES, PACKAGE_BY_PRODUCT, XP_BOOSTS, XP_BOOST_BY_ID,
    accessories_by_type, backgrounds_by_category,
)
from petapp.engine.monster import BASE_MAX_XP, FEED_XP, UNHAPPY_MOODS, apply_xp, max_xp_for_level, random_mood
from petapp.engine.quests import (
    COMPLETE_ALL_BONUS, DAILY_QUESTS_COUNT, QUEST_BY_ID, QUESTS, UNKNOWN_QUEST_ICON,
    clamp_progress, pick_daily_quests, quest_display,
)


class TestQuestCatalog:
    def test_catalog_ids_are_unique(self):
        assert len(QUEST_BY_ID) == len(QUESTS)

    def test_feed_monster_definition(self):
        feed = QUEST_BY_ID["feed_monster"]
        assert feed.target_count == 5
        assert feed.reward == 20

    def test_system_constants(self):
        assert DAILY_QUESTS_COUNT == 3
        assert COMPLETE_ALL_BONUS == 50

    def test_every_quest_has_positive_target_and_reward(self):
        for quest in QUESTS:
            assert quest.target_count >= 1, quest.id
            assert quest.reward > 0, quest.id


class TestPickDailyQuests:
    def test_picks_three_distinct_quests(self):
        for seed in range(200):
            picked = pick_daily_quests(random.Random(seed))
            assert len(picked) == 3
            assert len({q.id for q in picked}) == 3, f"duplicate quest for seed {seed}"

    def test_catalog_is_not_mutated(self):
        before = list(QUESTS)
        pick_daily_quests(random.Random(1))
        assert QUESTS == before

    def test_same_seed_same_quests(self):
        assert pick_daily_quests(random.Random(42)) == pick_daily_quests(random.Random(42))

    def test_every_quest_can_be_picked(self):
        seen = set()
        for seed in range(300):
            seen.update(q.id for q in pick_daily_quests(random.Random(seed)))
        assert seen == set(QUEST_BY_ID)

    def test_cannot_pick_more_than_catalog(self):
        with pytest.raises(ValueError):
            pick_daily_quests(random.Random(0), count=len(QUESTS) + 1)


class TestClampProgress:
    def test_normal_increment(self):
        assert clamp_progress(2, 1, 5) == 3

    def test_large_increment_clamped_to_target(self):
        assert clamp_progress(0, 1000, 5) == 5

    def test_negative_increment_clamped_to_zero(self):
        assert clamp_progress(1, -10, 5) == 0


class TestQuestDisplay:
    def test_known_quest(self):
        display = quest_display("collect_koins")
        assert display["icon"] == "💰"
        assert display["title"]

    def test_unknown_quest_gets_placeholder(self):
        assert quest_display("retired_quest") == {"title": "", "description": "", "icon": UNKNOWN_QUEST_ICON}


class TestMonsterLevelling:
    def test_feed_below_max_keeps_level(self):
        outcome = apply_xp(0, 1, BASE_MAX_XP, FEED_XP)
        assert outcome.xp == FEED_XP
        assert outcome.level == 1
        assert not outcome.leveled_up

    def test_reaching_max_levels_up_and_resets_xp(self):
        outcome = apply_xp(75, 1, 100, 25)
        assert outcome.leveled_up
        assert outcome.level == 2
        assert outcome.xp == 0
        assert outcome.max_xp == 200

    def test_max_xp_scales_with_level(self):
        assert max_xp_for_level(1) == 100
        assert max_xp_for_level(4) == 400
        assert max_xp_for_level(0) == 100

    def test_big_boost_levels_up_only_once(self):
        outcome = apply_xp(0, 1, 100, 250)
        assert outcome.level == 2
        assert outcome.xp == 0


class TestRandomMood:
    def test_always_unhappy(self):
        rng = random.Random(0)
        moods = {random_mood(rng) for _ in range(200)}
        assert moods == set(UNHAPPY_MOODS)
        assert "happy" not in moods

    def test_seeded_rng_is_deterministic(self):
        a = [random_mood(random.Random(3)) for _ in range(3)]
        b = [random_mood(random.Random(3)) for _ in range(3)]
        assert a == b


class TestShopCatalog:
    def test_packages_sorted_and_indexed(self):
        assert [p.koins for p in KOIN_PACKAGES] == [10, 50, 500, 1000, 5000]
        assert all(PACKAGE_BY_PRODUCT[p.product_id] is p for p in KOIN_PACKAGES)

    def test_accessory_filter(self):
        hats = accessories_by_type("hat")
        assert hats and all(a.type == "hat" for a in hats)
        assert accessories_by_type(None) == ACCESSORIES

    def test_background_filter(self):
        assert backgrounds_by_category("all") == BACKGROUNDS
        scifi = backgrounds_by_category("scifi")
        assert scifi and all(b.category == "scifi" for b in scifi)
        assert {b.category for b in BACKGROUNDS} <= BACKGROUND_CATEGORIES

    def test_xp_boosts_indexed_and_priced(self):
        assert all(XP_BOOST_BY_ID[b.id] is b for b in XP_BOOSTS)
        assert all(b.price > 0 and b.xp_amount > 0 for b in XP_BOOSTS)
        assert [b.xp_amount for b in XP_BOOSTS] == sorted(b.xp_amount for b in XP_BOOSTS)
