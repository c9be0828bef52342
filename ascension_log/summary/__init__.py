"""
Summary Layer

One pass over the interval sequence into an immutable LogSummary.
"""

from .log_summary import AreaStatgains, ConsumptionSummary, Goatlet, LogSummary, NesRealm
from .aggregator import SummaryAggregator, stat_border

__all__ = [
    "AreaStatgains", "ConsumptionSummary", "Goatlet", "LogSummary", "NesRealm",
    "SummaryAggregator", "stat_border",
]
