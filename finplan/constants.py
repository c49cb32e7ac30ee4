from zoneinfo import ZoneInfo

from finplan.models.bill import BillKind
from finplan.settings import settings

APP_TZ = ZoneInfo(settings.timezone)

MONTHS_PT = {
    1: "Janeiro",
    2: "Fevereiro",
    3: "Março",
    4: "Abril",
    5: "Maio",
    6: "Junho",
    7: "Julho",
    8: "Agosto",
    9: "Setembro",
    10: "Outubro",
    11: "Novembro",
    12: "Dezembro",
}

KIND_LABELS = {
    BillKind.FIXED: "Fixa",
    BillKind.MONTHLY_MISC: "Avulsa",
    BillKind.INSTALLMENT: "Parcelada",
}


def format_month(year: int, month: int) -> str:
    return f"{MONTHS_PT.get(month, str(month))}/{year}"
