from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Stored rows use snake_case; API responses are dumped with by_alias=True.
CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class QuestInstance(BaseModel):
    model_config = CAMEL

    quest_type: str
    current_progress: int = Field(0, ge=0)
    target_count: int = Field(..., ge=1)
    reward: int = Field(..., ge=0)
    completed: bool = False
    completed_at: Optional[datetime] = None

    @model_validator(mode="after")
    def progress_within_target(self):
        if self.current_progress > self.target_count:
            raise ValueError("current_progress cannot exceed target_count")
        return self


class QuestStats(BaseModel):
    model_config = CAMEL

    total_quests_completed: int = Field(0, ge=0)
    total_koins_earned: int = Field(0, ge=0)
    current_streak: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)


class UserDailyQuests(BaseModel):
    model_config = CAMEL

    owner_id: str
    current_date: str
    # Fixed cardinality: one day's set is always exactly three quests.
    quests: tuple[QuestInstance, QuestInstance, QuestInstance]
    all_completed: bool = False
    bonus_claimed: bool = False
    stats: QuestStats = Field(default_factory=QuestStats)

    @field_validator("current_date")
    @classmethod
    def validate_current_date(cls, v):
        date.fromisoformat(v)
        return v

    @field_validator("quests")
    @classmethod
    def validate_distinct_types(cls, v):
        if len({q.quest_type for q in v}) != len(v):
            raise ValueError("daily quest types must be distinct")
        return v

    @field_validator("stats", mode="before")
    @classmethod
    def default_missing_stats(cls, v):
        return v if v is not None else {}

    def find_quest(self, quest_type: str) -> Optional[QuestInstance]:
        return next((q for q in self.quests if q.quest_type == quest_type), None)


class QuestProgressResult(BaseModel):
    completed: bool
    reward: int = 0
    all_quests_completed: bool = False


class BonusClaimResult(BaseModel):
    success: bool
    bonus: int = 0


# ── Request bodies ────────────────────────────────────────────────────────────

class MonsterCreate(BaseModel):
    name: str = Field(min_length=1, max_length=30)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class AccessoryPurchase(BaseModel):
    accessory_id: str


class BackgroundPurchase(BaseModel):
    background_id: str


class CheckoutCompleted(BaseModel):
    user_id: str = Field(min_length=1, max_length=200)
    product_id: str
    model_config = {"extra": "ignore"}


class XpBoostPurchase(BaseModel):
    boost_id: str
