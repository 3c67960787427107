from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ROLE = "EMPLOYEE"


class WireModel(BaseModel):
    """Backend payloads are camelCase and loosely typed."""

    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


class LoginResponse(WireModel):
    user_id: Optional[str] = Field(default=None, alias="userId")
    role: Optional[str] = None
    user: Optional[dict[str, Any]] = None
    message: Optional[str] = None


class IdentityRecord(WireModel):
    id: str
    full_name: Optional[str] = Field(default=None, alias="fullName")
    username: Optional[str] = None

    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        if self.username is not None:
            return self.username
        return "(Unknown)"


class TransactionRecord(WireModel):
    transaction_id: Optional[str] = Field(default=None, alias="transactionId")
    id: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")
    employee_name: Optional[str] = Field(default=None, alias="employeeName")
    type: Optional[str] = None
    total_pay: Optional[float] = Field(default=None, alias="totalPay")
    amount: Optional[float] = None
    month: Optional[int] = None
    year: Optional[int] = None
    date: Optional[str] = None
    is_paid: Optional[bool] = Field(default=None, alias="isPaid")
    status: Optional[str] = None


class PayrollRecord(WireModel):
    employee_name: Optional[str] = Field(default=None, alias="employeeName")
    role: Optional[str] = None
    total_hours: Optional[float] = Field(default=None, alias="totalHours")
    base_salary: Optional[float] = Field(default=None, alias="baseSalary")
    hourly_rate_ot: Optional[float] = Field(default=None, alias="hourlyRateOT")
    overtime_pay: Optional[float] = Field(default=None, alias="overtimePay")
    total_pay: Optional[float] = Field(default=None, alias="totalPay")
    is_paid: Optional[bool] = Field(default=None, alias="isPaid")
    status: Optional[str] = None
