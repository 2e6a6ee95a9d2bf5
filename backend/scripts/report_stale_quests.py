"""
Report how many users still hold a quest set from a previous day.

Read-only: stale sets are regenerated the next time each user opens their
quests, so this is only a health check for the renewal path.

Usage:
    cd backend
    SUPABASE_URL=... SUPABASE_SERVICE_KEY=... python scripts/report_stale_quests.py [YYYY-MM-DD]

Or with a .env file:
    python scripts/report_stale_quests.py
"""
import os
import sys
from datetime import date

from dotenv import load_dotenv

load_dotenv()

# Add project root to path so we can import the app package
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from petapp.db import get_client
from petapp.daily_quests import report_stale_quests, utc_today


def main(argv: list[str]) -> int:
    if len(argv) > 1:
        try:
            day = date.fromisoformat(argv[1])
        except ValueError:
            print(f"Invalid date: {argv[1]!r} (expected YYYY-MM-DD)")
            return 2
    else:
        day = utc_today()

    result = report_stale_quests(get_client(), day)
    print(f"{day.isoformat()}: {result['processed']} stale quest set(s), renewed on next read")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
