from __future__ import annotations

import pytest
import responses

from techforge_client.clients.finance import FinanceClient
from techforge_client.exceptions import ForbiddenError
from techforge_client.http_client import HttpClient
from techforge_client.models import PayrollRecord
from techforge_client.sync.payroll import (
    PayrollFeed,
    PayrollRow,
    parse_payroll,
    payroll_status,
    summarize,
    to_payroll_row,
)

BASE_URL = "https://api.example.com/api/v1"


def _record(**fields) -> PayrollRecord:
    return PayrollRecord.model_validate(fields)


@pytest.mark.parametrize(
    ("fields", "expected"),
    [
        ({"isPaid": True, "totalPay": 0}, "PAID"),
        ({"status": "NO_WORK", "totalPay": 120}, "NO_WORK"),
        ({"totalPay": 0}, "NO_WORK"),
        ({}, "NO_WORK"),
        ({"totalPay": 80.5, "isPaid": False}, "PENDING"),
    ],
)
def test_payroll_status(fields: dict, expected: str) -> None:
    assert payroll_status(_record(**fields)) == expected


def test_row_formatting() -> None:
    row = to_payroll_row(
        _record(
            employeeName="Ann Lee",
            role="TECHNICIAN",
            totalHours=42.34,
            baseSalary=800,
            hourlyRateOT=12.5,
            overtimePay=25,
            totalPay=825,
        )
    )

    assert row == PayrollRow("Ann Lee", "TECHNICIAN", "42.3", "$800.00", "$12.50", "$25.00", "$825.00", "PENDING")


def test_row_defaults_for_missing_fields() -> None:
    row = to_payroll_row(_record())

    assert row.employee_name == "Unknown"
    assert row.role == "-"
    assert row.hours == "0.0"
    assert row.total == "$0.00"
    assert row.status == "NO_WORK"


def test_summary_counts_pending_only() -> None:
    summary = summarize(
        [
            _record(totalPay=100),
            _record(totalPay=50.25),
            _record(totalPay=0),
            _record(totalPay=999, isPaid=True),
        ]
    )

    assert summary.employee_count == 4
    assert summary.no_work_count == 1
    assert summary.with_work_count == 3
    assert summary.total_pending == pytest.approx(150.25)
    assert summary.describe() == "Loaded 4 employees (3 with work, 1 without)"


def test_parse_payroll_skips_bad_entries() -> None:
    records = parse_payroll([{"employeeName": "A"}, 7, {"totalPay": "lots"}, {"employeeName": "B"}])

    assert [record.employee_name for record in records] == ["A", "B"]


@responses.activate
def test_feed_builds_rows_and_summary(http: HttpClient) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/finance/payroll",
        json=[
            {"employeeName": "Ann", "role": "TECHNICIAN", "totalHours": 10, "totalPay": 200},
            {"employeeName": "Bo", "role": "TECHNICIAN", "status": "NO_WORK"},
        ],
        status=200,
    )
    feed = PayrollFeed(FinanceClient(http=http))

    rows = feed()

    assert [row.employee_name for row in rows] == ["Ann", "Bo"]
    assert [row.status for row in rows] == ["PENDING", "NO_WORK"]
    assert feed.last_summary.employee_count == 2
    assert feed.last_summary.total_pending == 200


@responses.activate
def test_feed_failure_keeps_previous_summary(http: HttpClient) -> None:
    responses.add(responses.GET, f"{BASE_URL}/finance/payroll", json=[{"totalPay": 5}], status=200)
    responses.add(responses.GET, f"{BASE_URL}/finance/payroll", json={"message": "managers only"}, status=403)
    feed = PayrollFeed(FinanceClient(http=http))
    feed()

    with pytest.raises(ForbiddenError):
        feed()

    assert feed.last_summary.employee_count == 1
