import openpyxl
from django.utils import timezone

from .models import ROW_FIELDS, ROW_HEADERS


def ticket_row(ticket):
    row = []
    for name in ROW_FIELDS:
        value = getattr(ticket, name)
        # openpyxl rejects timezone-aware datetimes
        if name == 'issued_at' and value is not None and timezone.is_aware(value):
            value = timezone.localtime(value).replace(tzinfo=None)
        row.append(value)
    return row


def ledger_workbook(tickets):
    """Workbook with one "Respuestas" sheet laid out like the ledger columns."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Respuestas"
    ws.append(ROW_HEADERS)
    for ticket in tickets:
        ws.append(ticket_row(ticket))
    return wb
