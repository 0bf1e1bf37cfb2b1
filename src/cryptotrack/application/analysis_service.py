# src/cryptotrack/application/analysis_service.py
"""
Analysis Service - AI Requests Tied to a View

Runs AI analysis and prediction requests on behalf of a view (a chat, a
screen) and keeps at most one request pending per view. Starting a new
request for a view, or dismissing the view, abandons the pending one: its
task is cancelled and any late result is reported as not delivered, so it
can never be applied to a view that has moved on.

Requests work on a copy of the coin taken when the request starts; ticks
that land while the model is thinking do not change the prompt.

Files that USE this module:
- cryptotrack.adapters.telegram.handlers (/analysis, /predict, /close)
- cryptotrack.app (builds the service)
- tests.test_analysis_service (unit tests)

Files that this module USES:
- cryptotrack.adapters.ai.analyst (MarketAnalyst, PricePrediction)
- cryptotrack.domain.models (Coin)
"""
from __future__ import annotations

import asyncio
import copy
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, Optional, TypeVar

from cryptotrack.adapters.ai.analyst import MarketAnalyst, PricePrediction
from cryptotrack.domain.models import Coin

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Result of a view-bound request.

    Attributes:
        delivered: False when the request was superseded or its view dismissed
        value: The analyst's result; always None when not delivered
    """
    delivered: bool
    value: Optional[T] = None


class AnalysisService:
    """One pending AI request per view, abandoned on supersede or dismiss."""

    def __init__(self, analyst: MarketAnalyst):
        self.analyst = analyst
        self._pending: dict[str, asyncio.Task] = {}
        self._abandoned: set[asyncio.Task] = set()

    def has_pending(self, view: str) -> bool:
        task = self._pending.get(view)
        return task is not None and not task.done()

    def dismiss(self, view: str) -> bool:
        """
        Abandon the pending request for a view.

        Returns:
            True if a request was pending
        """
        task = self._pending.pop(view, None)
        if task is None:
            return False
        self._abandoned.add(task)
        task.cancel()
        logger.info("Abandoned pending AI request for view %s", view)
        return True

    def dismiss_all(self) -> None:
        for view in list(self._pending):
            self.dismiss(view)

    async def analysis(self, view: str, coin: Coin) -> Outcome[str]:
        snapshot = copy.deepcopy(coin)
        return await self._run(view, self.analyst.get_market_analysis(snapshot))

    async def prediction(self, view: str, coin: Coin) -> Outcome[PricePrediction]:
        snapshot = copy.deepcopy(coin)
        return await self._run(view, self.analyst.get_price_prediction(snapshot))

    async def _run(self, view: str, request: Awaitable[Any]) -> Outcome[Any]:
        self.dismiss(view)

        task = asyncio.ensure_future(request)
        self._pending[view] = task
        try:
            value = await task
        except asyncio.CancelledError:
            # Only swallow cancellations we caused; an outer cancel propagates
            if task not in self._abandoned:
                raise
            abandoned = True
            value = None
        else:
            abandoned = task in self._abandoned
        finally:
            self._abandoned.discard(task)
            if self._pending.get(view) is task:
                del self._pending[view]

        if abandoned:
            logger.debug("Dropping late AI result for view %s", view)
            return Outcome(delivered=False)
        return Outcome(delivered=True, value=value)
