"""Join of the identity list into the transaction list.

One cycle fetches ``/users`` first (reference data, optional) and then
``/finance/transactions`` (primary data, required), and normalises each
transaction into a :class:`CanonicalRow` ready for a table.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Callable, Iterable, Mapping

from pydantic import ValidationError as PydanticValidationError

from ..clients.finance import FinanceClient
from ..clients.users import UsersClient
from ..exceptions import ApiError, ParseError, PartialDataError
from ..models import IdentityRecord, TransactionRecord

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Payroll"
FALLBACK_DATE_FORMAT = "%b %d, %Y"


@dataclass(frozen=True)
class CanonicalRow:
    record_id: str
    display_name: str
    category: str
    formatted_amount: str
    formatted_date: str
    status: str

    def as_tuple(self) -> tuple[str, ...]:
        return (
            self.record_id,
            self.display_name,
            self.category,
            self.formatted_amount,
            self.formatted_date,
            self.status,
        )

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def format_currency(value: float) -> str:
    return f"${value:,.2f}"


def build_name_map(entries: Iterable[Any]) -> dict[str, str]:
    names: dict[str, str] = {}
    for entry in entries:
        if not isinstance(entry, Mapping) or entry.get("id") is None:
            continue
        try:
            identity = IdentityRecord.model_validate(entry)
        except PydanticValidationError:
            logger.debug("identity_skipped", extra={"entry_id": entry.get("id")})
            continue
        names[identity.id] = identity.display_name()
    return names


def _display_name(record: TransactionRecord, names: Mapping[str, str]) -> str:
    if record.employee_name is not None:
        return record.employee_name
    if record.user_id is not None:
        return names.get(record.user_id, record.user_id)
    return ""


def _formatted_amount(record: TransactionRecord) -> str:
    value = record.total_pay if record.total_pay is not None else record.amount
    if value is None:
        return ""
    return format_currency(value)


def _formatted_date(record: TransactionRecord, today: date) -> str:
    if record.month is not None and record.year is not None:
        return f"{record.month:02d}/{record.year}"
    if record.date is not None:
        return record.date
    # Undated records fall back to today's date.
    return today.strftime(FALLBACK_DATE_FORMAT)


def _status(record: TransactionRecord) -> str:
    if record.is_paid is not None:
        return "PAID" if record.is_paid else "PENDING"
    return record.status or ""


def to_canonical_row(record: TransactionRecord, names: Mapping[str, str], today: date) -> CanonicalRow:
    if record.transaction_id is not None:
        record_id = record.transaction_id
    else:
        record_id = record.id or ""
    return CanonicalRow(
        record_id=record_id,
        display_name=_display_name(record, names),
        category=record.type or DEFAULT_CATEGORY,
        formatted_amount=_formatted_amount(record),
        formatted_date=_formatted_date(record, today),
        status=_status(record),
    )


def reconcile(records: Iterable[Any], names: Mapping[str, str], today: date) -> list[CanonicalRow]:
    """Build one row per well-formed record, in input order."""
    rows: list[CanonicalRow] = []
    for index, raw in enumerate(records):
        try:
            if not isinstance(raw, Mapping):
                raise ParseError(code="MALFORMED_RECORD", message=f"record {index} is not an object")
            try:
                record = TransactionRecord.model_validate(raw)
            except PydanticValidationError as exc:
                raise ParseError(
                    code="MALFORMED_RECORD",
                    message=f"record {index}: {exc.error_count()} invalid field(s)",
                    raw_payload=raw,
                ) from exc
        except ParseError as exc:
            logger.warning("transaction_skipped", extra={"index": index, "reason": exc.message})
            continue
        rows.append(to_canonical_row(record, names, today))
    return rows


class TransactionFeed:
    """Fetch-and-join callable run by the refresh scheduler on a worker thread."""

    name = "transactions"

    def __init__(
        self,
        users: UsersClient,
        finance: FinanceClient,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.users = users
        self.finance = finance
        self.today = today
        self.last_partial_error: PartialDataError | None = None

    def load_names(self) -> dict[str, str]:
        try:
            entries = self.users.list_users()
        except ApiError as exc:
            self.last_partial_error = PartialDataError(
                code="REFERENCE_UNAVAILABLE",
                message=f"identity list unavailable, showing raw ids: {exc.message}",
                details={"cause": exc.code},
                trace_id=exc.trace_id,
                status_code=exc.status_code,
            )
            logger.warning("reference_fetch_failed", extra={"code": exc.code, "status_code": exc.status_code})
            return {}
        self.last_partial_error = None
        return build_name_map(entries)

    def __call__(self) -> list[CanonicalRow]:
        # Reference data must be resolved before the primary fetch starts.
        names = self.load_names()
        records = self.finance.list_transactions()
        return reconcile(records, names, self.today())
