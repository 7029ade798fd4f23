from .count_aggregator import CountAggregator
from .debouncer import Debouncer
from .query_executor import QueryExecutor
from .view_state_manager import FetchTicket, ViewState, ViewStateManager
from .write_coordinator import ResyncPlan, WriteCoordinator

__all__ = [
    "CountAggregator",
    "Debouncer",
    "QueryExecutor",
    "FetchTicket",
    "ViewState",
    "ViewStateManager",
    "ResyncPlan",
    "WriteCoordinator",
]
