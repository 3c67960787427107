from .panel import PanelSync, ViewState, ViewStateStatus, resolve_state
from .payroll import PayrollFeed, PayrollRow, PayrollSummary
from .reconcile import CanonicalRow, TransactionFeed, build_name_map, reconcile, to_canonical_row
from .scheduler import RefreshScheduler, SchedulerStats, direct_dispatch, tk_dispatch
from .sinks import RenderSink, RowBuffer

__all__ = [
    "CanonicalRow",
    "PanelSync",
    "PayrollFeed",
    "PayrollRow",
    "PayrollSummary",
    "RefreshScheduler",
    "RenderSink",
    "RowBuffer",
    "SchedulerStats",
    "TransactionFeed",
    "ViewState",
    "ViewStateStatus",
    "build_name_map",
    "direct_dispatch",
    "reconcile",
    "resolve_state",
    "tk_dispatch",
    "to_canonical_row",
]
