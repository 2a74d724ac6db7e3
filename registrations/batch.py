"""
Batch assembly: turn one registration request into ledger rows, one per
attendee, and hand them to the ledger and the notifier.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from django.conf import settings
from django.utils import timezone

from .codes import issue_one
from .exceptions import InvalidProofImage, NotificationError, PairConflict
from .notify import build_summary
from .ocr import NOT_FOUND, ReceiptFields, normalize_proof
from .pairs import PairIndex

logger = logging.getLogger(__name__)

UNKNOWN_BUYER_NAME = 'Desconocido'
PROOF_PAYMENT_METHOD = 'qr'


@dataclass
class Attendee:
    full_name: str = ''
    phone: str = ''
    email: str = ''


@dataclass
class Buyer:
    name: str = UNKNOWN_BUYER_NAME
    email: str = ''
    phone: str = ''


@dataclass
class RegistrationRequest:
    buyer: Buyer
    attendees: List[Attendee]
    total_amount: str = ''
    payment_method: str = ''
    proof: Optional[bytes] = None

    @property
    def has_proof(self):
        return self.payment_method == PROOF_PAYMENT_METHOD and bool(self.proof)


@dataclass
class SharedFields:
    """Purchase fields repeated on every row of a batch."""
    buyer: Buyer
    total_amount: str = ''
    payment_method: str = ''
    has_proof: bool = False
    issued_at: str = ''
    receipt: ReceiptFields = field(default_factory=ReceiptFields)


@dataclass
class BatchResult:
    rows: list
    codes: List[str]
    receipt: ReceiptFields
    notified: bool = False


def _parse_json_field(value, name):
    # Multipart forms send nested objects as JSON strings
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError as e:
            logger.warning("Could not parse %s: %s", name, e)
            return None
    return value


def _text(value):
    return '' if value is None else str(value)


def normalize_request(data, proof=None):
    """
    Build a RegistrationRequest from submitted form or JSON data.

    Missing or malformed structures are defaulted rather than rejected. When
    no attendee list is usable but a flat ``name`` is present, the flat
    name/email/phone fields describe both the buyer and a single attendee.
    """
    buyer = _parse_json_field(data.get('buyer'), 'buyer')
    attendees = _parse_json_field(data.get('attendees'), 'attendees')

    if (not isinstance(attendees, list) or not attendees) and data.get('name'):
        logger.info("Flat registration fields detected, building a single attendee")
        buyer = {
            'name': data.get('name'),
            'email': data.get('email') or '',
            'phone': data.get('phone') or '',
        }
        attendees = [{
            'fullName': data.get('name'),
            'phone': data.get('phone') or '',
            'email': data.get('email') or '',
        }]

    if not isinstance(attendees, list):
        attendees = []
    if not isinstance(buyer, dict):
        buyer = {'name': UNKNOWN_BUYER_NAME, 'email': '', 'phone': ''}

    normalized = []
    for entry in attendees:
        if not isinstance(entry, dict):
            logger.warning("Dropping malformed attendee entry: %r", entry)
            continue
        normalized.append(Attendee(
            full_name=_text(entry.get('fullName')),
            phone=_text(entry.get('phone')),
            email=_text(entry.get('email')),
        ))

    if proof:
        try:
            proof = normalize_proof(proof)
        except InvalidProofImage as e:
            logger.warning("Ignoring unreadable proof of payment: %s", e)
            proof = None

    return RegistrationRequest(
        buyer=Buyer(
            name=_text(buyer.get('name')),
            email=_text(buyer.get('email')),
            phone=_text(buyer.get('phone')),
        ),
        attendees=normalized,
        total_amount=_text(data.get('totalAmount')),
        payment_method=_text(data.get('paymentMethod')),
        proof=proof or None,
    )


def build_row(issued, attendee, shared):
    receipt = shared.receipt
    row = [
        issued.purchase_code,
        attendee.full_name,
        attendee.phone,
        shared.buyer.name,
        shared.buyer.phone,
        shared.buyer.email,
        '',
        issued.prime_a,
        issued.prime_b,
        str(issued.product),
        shared.total_amount,
        shared.payment_method,
        'Sí' if shared.has_proof else 'No',
        shared.issued_at,
        receipt.sender or NOT_FOUND,
        receipt.receiver or NOT_FOUND,
        receipt.amount or NOT_FOUND,
        receipt.date_time or NOT_FOUND,
        '0',
    ]
    return row


def process_batch(attendees, shared, index, rng=None):
    """One row per attendee, in input order. Claims pairs in ``index``."""
    rows = []
    for attendee in attendees:
        issued = issue_one(index, rng=rng)
        logger.info("Row for '%s': unique pair %s found in %d attempt(s)",
                    attendee.full_name, issued.pair_key, issued.attempts)
        rows.append(build_row(issued, attendee, shared))
    return rows


def register(request, store, notifier=None, ocr=None, rng=None):
    """
    Issue codes for every attendee, append the batch to ``store`` and send
    the summary to ``notifier``.

    If the append reports a pair conflict with a concurrent writer, the
    snapshot is re-read and the whole batch is issued again.
    """
    receipt = ReceiptFields()
    if request.has_proof and ocr is not None:
        receipt = ocr.extract(request.proof)

    retries = max(0, getattr(settings, 'REGISTRATION_APPEND_RETRIES', 3))
    degrade_available = getattr(settings, 'REGISTRATION_DEGRADE_AVAILABLE', True)

    for attempt in range(retries + 1):
        index = PairIndex.load(store.read_pair_history, degrade_available=degrade_available)
        shared = SharedFields(
            buyer=request.buyer,
            total_amount=request.total_amount,
            payment_method=request.payment_method,
            has_proof=request.has_proof,
            issued_at=timezone.now().isoformat(),
            receipt=receipt,
        )
        rows = process_batch(request.attendees, shared, index, rng=rng)
        if not rows:
            break
        try:
            store.append_rows(rows)
            break
        except PairConflict as e:
            if attempt == retries:
                raise
            logger.warning("Pair conflict on append (%s), reissuing batch, attempt %d of %d",
                           e, attempt + 1, retries)

    codes = [row[0] for row in rows]
    result = BatchResult(rows=rows, codes=codes, receipt=receipt)

    if notifier is not None:
        summary = build_summary(request.buyer, request.total_amount, codes, receipt)
        try:
            notifier.send(summary, photo=request.proof if request.has_proof else None)
            result.notified = True
        except NotificationError as e:
            logger.error("Registration stored but notification failed: %s", e)

    return result
