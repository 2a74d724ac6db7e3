"""
Durable ledger of issued tickets, read as a pair-history table and appended
to in whole batches.
"""
import logging

from django.db import DatabaseError, IntegrityError, transaction
from django.utils.dateparse import parse_datetime

from .exceptions import PairConflict, StoreReadError, StoreWriteError
from .models import ROW_FIELDS, IssuedTicket
from .pairs import pair_key

logger = logging.getLogger(__name__)

PAIR_HISTORY_HEADER = ['F1', 'F2']


def ticket_from_row(row):
    if len(row) != len(ROW_FIELDS):
        raise StoreWriteError(f"Expected {len(ROW_FIELDS)} fields per row, got {len(row)}")

    values = dict(zip(ROW_FIELDS, row))
    issued_at = values['issued_at']
    if isinstance(issued_at, str):
        values['issued_at'] = parse_datetime(issued_at)
    if values['issued_at'] is None:
        raise StoreWriteError(f"Invalid issuance timestamp: {issued_at!r}")

    values['prime_a'] = int(values['prime_a'])
    values['prime_b'] = int(values['prime_b'])
    values['product'] = str(values['product'])
    return IssuedTicket(pair_key=pair_key(values['prime_a'], values['prime_b']), **values)


class TicketLedger:

    def read_pair_history(self):
        """Header row followed by one [prime_a, prime_b] row per issued ticket."""
        try:
            pairs = IssuedTicket.objects.order_by('id').values_list('prime_a', 'prime_b')
            return [list(PAIR_HISTORY_HEADER)] + [[a, b] for a, b in pairs]
        except DatabaseError as e:
            raise StoreReadError(f"Could not read issued pairs: {e}") from e

    def append_rows(self, rows):
        """
        Insert every row or none. A pair already present in the ledger, for
        instance recorded by a concurrent request after our snapshot, raises
        PairConflict.
        """
        tickets = [ticket_from_row(row) for row in rows]
        if not tickets:
            return []

        keys = [t.pair_key for t in tickets]
        try:
            with transaction.atomic():
                IssuedTicket.objects.bulk_create(tickets)
        except IntegrityError as e:
            taken = list(IssuedTicket.objects.filter(pair_key__in=keys).values_list('pair_key', flat=True))
            if not taken:
                raise StoreWriteError(f"Could not append {len(tickets)} rows: {e}") from e
            raise PairConflict(f"Pairs already issued: {', '.join(taken)}", taken) from e
        except DatabaseError as e:
            raise StoreWriteError(f"Could not append {len(tickets)} rows: {e}") from e

        logger.info("Appended %d rows to the ledger", len(tickets))
        return tickets
