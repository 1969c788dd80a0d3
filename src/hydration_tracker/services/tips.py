"""Hydration tips retrieval."""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field

from hydration_tracker.adapters.tips_client import TipsClient
from hydration_tracker.adapters.tips_models import TipsDocument
from hydration_tracker.domain.tips import TipsError, TipsLoading, TipsResult, TipsSuccess
from hydration_tracker.services.observable import ObservableValue

_logger = logging.getLogger(__name__)


@dataclass
class TipsService:
    """Fetches the tips document into a Loading/Success/Error state."""

    client: TipsClient
    _state: ObservableValue[TipsResult] = field(init=False)
    _generation: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self._state = ObservableValue(TipsLoading())

    @property
    def state(self) -> TipsResult:
        """Return the latest fetch state."""
        return self._state.value

    def observe_state(self) -> AsyncIterator[TipsResult]:
        """Stream the fetch state, starting with the current one."""
        return self._state.subscribe()

    async def fetch_tips(self) -> TipsResult:
        """Fetch and parse tips; failures become an error state."""
        self._generation += 1
        generation = self._generation
        self._state.publish(TipsLoading())
        try:
            payload = await self.client.fetch_tips_document()
            document = TipsDocument.model_validate(payload)
            tips = tuple(tip.to_domain() for tip in document.tips)
            _logger.info("Fetched %s tips", len(tips))
            result: TipsResult = TipsSuccess(tips=tips)
        except Exception as exc:
            _logger.warning("Tips fetch failed: %s", exc)
            detail = str(exc) or type(exc).__name__
            result = TipsError(message=f"Failed to load tips: {detail}")
        if generation == self._generation:
            self._state.publish(result)
        else:
            _logger.debug("Discarding stale tips result")
        return result

    def close(self) -> None:
        self._state.close()
