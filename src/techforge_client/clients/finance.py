from __future__ import annotations

from typing import Any

from .base import BaseClient

TRANSACTIONS_PATH = "/finance/transactions"
PAYROLL_PATH = "/finance/payroll"


class FinanceClient(BaseClient):
    def list_transactions(self) -> list[Any]:
        return self._json_list(TRANSACTIONS_PATH, allow_single=True)

    def list_payroll(self) -> list[Any]:
        return self._json_list(PAYROLL_PATH, allow_single=True)
