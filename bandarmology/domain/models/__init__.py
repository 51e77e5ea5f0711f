"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    DataSource,

    # Entities
    BrokerFound,
    BrokerLookup,
    BrokerMetrics,
    BrokerNotFound,
    BrokerSummary,
    MarketQuery,
    MarketSnapshot,
    StockAnalysis,
    StockQueryRecord,
    TargetMetrics,
)

__all__ = [
    # Enums
    "DataSource",

    # Entities
    "BrokerFound",
    "BrokerLookup",
    "BrokerMetrics",
    "BrokerNotFound",
    "BrokerSummary",
    "MarketQuery",
    "MarketSnapshot",
    "StockAnalysis",
    "StockQueryRecord",
    "TargetMetrics",
]
