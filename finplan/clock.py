from collections.abc import Callable
from datetime import datetime

from finplan.constants import APP_TZ

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    return datetime.now(APP_TZ)
