from datetime import date, datetime
import os

import pytz
from dotenv import load_dotenv

load_dotenv()

# All clinic timestamps are stored timezone-aware in this zone
CLINIC_TIMEZONE = pytz.timezone(os.getenv("CLINIC_TIMEZONE", "Asia/Kolkata"))


def clinic_now() -> datetime:
    return datetime.now(CLINIC_TIMEZONE)


def clinic_today() -> date:
    return clinic_now().date()
