# src/cryptotrack/application/__init__.py
"""
Application Layer - Use Cases and Services

This package contains the session state container, the simulated market
feed, the portfolio ledger and view-bound AI request handling.
"""

from cryptotrack.application.market_feed import MarketFeed
from cryptotrack.application.portfolio import HoldingValuation, Portfolio, new_transaction, valuate
from cryptotrack.application.app_state import AppState
from cryptotrack.application.analysis_service import AnalysisService, Outcome

__all__ = [
    "MarketFeed",
    "Portfolio",
    "HoldingValuation",
    "valuate",
    "new_transaction",
    "AppState",
    "AnalysisService",
    "Outcome",
]
