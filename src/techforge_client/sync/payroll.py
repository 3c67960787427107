from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Iterable, Mapping

from pydantic import ValidationError as PydanticValidationError

from ..clients.finance import FinanceClient
from ..models import PayrollRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayrollRow:
    employee_name: str
    role: str
    hours: str
    base_salary: str
    overtime_rate: str
    overtime_pay: str
    total: str
    status: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class PayrollSummary:
    employee_count: int = 0
    no_work_count: int = 0
    total_pending: float = 0.0

    @property
    def with_work_count(self) -> int:
        return self.employee_count - self.no_work_count

    def describe(self) -> str:
        return (
            f"Loaded {self.employee_count} employees "
            f"({self.with_work_count} with work, {self.no_work_count} without)"
        )


def _money(value: float) -> str:
    return f"${value:.2f}"


def payroll_status(record: PayrollRecord) -> str:
    total = record.total_pay or 0.0
    if record.is_paid:
        return "PAID"
    if record.status == "NO_WORK" or total == 0:
        return "NO_WORK"
    return "PENDING"


def to_payroll_row(record: PayrollRecord) -> PayrollRow:
    return PayrollRow(
        employee_name=record.employee_name or "Unknown",
        role=record.role or "-",
        hours=f"{record.total_hours or 0.0:.1f}",
        base_salary=_money(record.base_salary or 0.0),
        overtime_rate=_money(record.hourly_rate_ot or 0.0),
        overtime_pay=_money(record.overtime_pay or 0.0),
        total=_money(record.total_pay or 0.0),
        status=payroll_status(record),
    )


def summarize(records: Iterable[PayrollRecord]) -> PayrollSummary:
    employee_count = 0
    no_work_count = 0
    total_pending = 0.0
    for record in records:
        employee_count += 1
        status = payroll_status(record)
        if status == "NO_WORK":
            no_work_count += 1
        elif status == "PENDING":
            total_pending += record.total_pay or 0.0
    return PayrollSummary(
        employee_count=employee_count,
        no_work_count=no_work_count,
        total_pending=total_pending,
    )


def parse_payroll(entries: Iterable[Any]) -> list[PayrollRecord]:
    records: list[PayrollRecord] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            logger.warning("payroll_skipped", extra={"index": index, "reason": "not an object"})
            continue
        try:
            records.append(PayrollRecord.model_validate(entry))
        except PydanticValidationError as exc:
            logger.warning("payroll_skipped", extra={"index": index, "reason": f"{exc.error_count()} invalid field(s)"})
    return records


class PayrollFeed:
    """Single-endpoint feed: ``/finance/payroll`` already carries names and roles."""

    name = "payroll"

    def __init__(self, finance: FinanceClient) -> None:
        self.finance = finance
        self.last_summary = PayrollSummary()

    def __call__(self) -> list[PayrollRow]:
        records = parse_payroll(self.finance.list_payroll())
        # Written from the worker; readers only ever see a whole summary object.
        self.last_summary = summarize(records)
        return [to_payroll_row(record) for record in records]
