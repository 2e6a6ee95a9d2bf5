import os
import logging
from datetime import date
from functools import lru_cache
from supabase import create_client, Client

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_client() -> Client:
    """Process-wide client, created on first use and shared by every request."""
    url = os.environ["SUPABASE_URL"]
    key = os.environ["SUPABASE_SERVICE_KEY"]
    logger.info("Creating Supabase client for %s", url)
    return create_client(url, key)


def ping(db: Client) -> None:
    db.table("wallets").select("owner_id").limit(1).execute()


# ── Daily quests ──────────────────────────────────────────────────────────────

def get_daily_quests(db: Client, owner_id: str) -> dict | None:
    res = db.table("user_daily_quests").select("*").eq("owner_id", owner_id).execute()
    return res.data[0] if res.data else None


def save_daily_quests(db: Client, doc: dict) -> None:
    """Insert or replace the user's single quest document (unique on owner_id)."""
    db.table("user_daily_quests").upsert(doc, on_conflict="owner_id").execute()


def count_stale_daily_quests(db: Client, today: date) -> int:
    res = (
        db.table("user_daily_quests")
        .select("owner_id", count="exact")
        .neq("current_date", today.isoformat())
        .execute()
    )
    return res.count or 0


# ── Wallets ───────────────────────────────────────────────────────────────────

def get_wallet(db: Client, owner_id: str) -> dict | None:
    res = db.table("wallets").select("*").eq("owner_id", owner_id).execute()
    return res.data[0] if res.data else None


def increment_wallet(db: Client, owner_id: str, amount: int) -> int:
    """
    Atomically add `amount` (may be negative) to the balance, creating the
    wallet when missing. Returns the new balance. See increment_wallet_balance
    in schema.sql.
    """
    res = db.rpc("increment_wallet_balance", {"p_owner_id": owner_id, "p_amount": amount}).execute()
    return int(res.data or 0)


# ── Monsters ──────────────────────────────────────────────────────────────────

def get_monster(db: Client, monster_id: str, owner_id: str) -> dict | None:
    res = db.table("monsters").select("*").eq("id", monster_id).eq("owner_id", owner_id).execute()
    return res.data[0] if res.data else None


def list_monsters(db: Client, owner_id: str) -> list[dict]:
    res = db.table("monsters").select("*").eq("owner_id", owner_id).order("created_at").execute()
    return res.data or []


def list_public_monsters(db: Client, limit: int = 50) -> list[dict]:
    res = (
        db.table("monsters")
        .select("*")
        .eq("is_public", True)
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    return res.data or []


def list_monster_states(db: Client, owner_id: str | None = None) -> list[dict]:
    """id and state of every monster, or of one owner's monsters."""
    query = db.table("monsters").select("id, state")
    if owner_id:
        query = query.eq("owner_id", owner_id)
    return query.execute().data or []


def insert_monster(db: Client, row: dict) -> dict:
    res = db.table("monsters").insert(row).execute()
    return res.data[0] if res.data else row


def update_monster(db: Client, monster_id: str, updates: dict) -> None:
    db.table("monsters").update(updates).eq("id", monster_id).execute()


# ── Owned cosmetics ───────────────────────────────────────────────────────────

def insert_accessory(db: Client, row: dict) -> dict:
    res = db.table("accessories").insert(row).execute()
    return res.data[0] if res.data else row


def get_accessory(db: Client, accessory_id: str, monster_id: str) -> dict | None:
    res = db.table("accessories").select("*").eq("id", accessory_id).eq("monster_id", monster_id).execute()
    return res.data[0] if res.data else None


def insert_background(db: Client, row: dict) -> dict:
    res = db.table("backgrounds").insert(row).execute()
    return res.data[0] if res.data else row


def get_background(db: Client, background_id: str, monster_id: str) -> dict | None:
    res = db.table("backgrounds").select("*").eq("id", background_id).eq("monster_id", monster_id).execute()
    return res.data[0] if res.data else None


def find_owned_background(db: Client, monster_id: str, catalog_id: str) -> dict | None:
    res = db.table("backgrounds").select("id").eq("monster_id", monster_id).eq("catalog_id", catalog_id).execute()
    return res.data[0] if res.data else None


def list_accessories(db: Client, monster_id: str) -> list[dict]:
    res = db.table("accessories").select("*").eq("monster_id", monster_id).order("created_at").execute()
    return res.data or []


def list_backgrounds(db: Client, monster_id: str) -> list[dict]:
    res = db.table("backgrounds").select("*").eq("monster_id", monster_id).order("created_at").execute()
    return res.data or []
