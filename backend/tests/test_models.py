import pytest
from pydantic import ValidationError

from petapp.models import MonsterCreate, QuestInstance, UserDailyQuests


def _quest(quest_type, progress=0, target=1, reward=10, completed=False):
    return {
        "quest_type": quest_type,
        "current_progress": progress,
        "target_count": target,
        "reward": reward,
        "completed": completed,
    }


def _doc(quests, **overrides):
    return {
        "owner_id": "u1",
        "current_date": "2024-01-01",
        "quests": quests,
        **overrides,
    }


class TestUserDailyQuests:
    def test_three_quests_accepted(self):
        doc = UserDailyQuests.model_validate(_doc([_quest("a"), _quest("b"), _quest("c")]))
        assert len(doc.quests) == 3
        assert doc.stats.current_streak == 0

    @pytest.mark.parametrize("count", [0, 2, 4])
    def test_wrong_quest_count_rejected(self, count):
        with pytest.raises(ValidationError):
            UserDailyQuests.model_validate(_doc([_quest(f"q{i}") for i in range(count)]))

    def test_duplicate_quest_types_rejected(self):
        with pytest.raises(ValidationError):
            UserDailyQuests.model_validate(_doc([_quest("a"), _quest("a"), _quest("c")]))

    def test_bad_date_rejected(self):
        with pytest.raises(ValidationError):
            UserDailyQuests.model_validate(_doc([_quest("a"), _quest("b"), _quest("c")], current_date="01/01/2024"))

    def test_null_stats_defaulted(self):
        doc = UserDailyQuests.model_validate(_doc([_quest("a"), _quest("b"), _quest("c")], stats=None))
        assert doc.stats.total_koins_earned == 0

    def test_stored_row_extra_columns_ignored(self):
        doc = UserDailyQuests.model_validate(
            _doc([_quest("a"), _quest("b"), _quest("c")], updated_at="2024-01-01T00:00:00Z")
        )
        assert doc.owner_id == "u1"

    def test_camel_case_dump(self):
        doc = UserDailyQuests.model_validate(_doc([_quest("a"), _quest("b"), _quest("c")]))
        dumped = doc.model_dump(by_alias=True)
        assert "allCompleted" in dumped
        assert "currentProgress" in dumped["quests"][0]

    def test_find_quest(self):
        doc = UserDailyQuests.model_validate(_doc([_quest("a"), _quest("b"), _quest("c")]))
        assert doc.find_quest("b").quest_type == "b"
        assert doc.find_quest("z") is None


class TestQuestInstance:
    def test_progress_above_target_rejected(self):
        with pytest.raises(ValidationError):
            QuestInstance.model_validate(_quest("a", progress=6, target=5))

    def test_negative_progress_rejected(self):
        with pytest.raises(ValidationError):
            QuestInstance.model_validate(_quest("a", progress=-1, target=5))


class TestMonsterCreate:
    def test_name_is_stripped(self):
        assert MonsterCreate(name="  Blob ").name == "Blob"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            MonsterCreate(name="   ")
