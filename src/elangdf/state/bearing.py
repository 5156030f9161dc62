"""Bearing / polar sweep store with staleness deduplication."""

from __future__ import annotations

import logging
from typing import Any

from elangdf._constants import NO_NEW_DATA_MESSAGE
from elangdf.client import DfClient
from elangdf.models.bearing import BearingReading
from elangdf.state.events import PollingStatus
from elangdf.state.policy import is_duplicate_token
from elangdf.state.polling import Fetcher, PollingStore

_logger = logging.getLogger(__name__)


class BearingStore(PollingStore[BearingReading]):
    """Polls ``/df`` and drops sweeps whose timestamp token repeats.

    A repeated token means the device has nothing new yet: the snapshot is
    cleared, :attr:`error` reads ``"No new data available"`` and
    :attr:`is_stale` is set, but the status stays ``READY`` because the
    device itself is healthy. Transport and parse failures do not forget
    the last seen token, so a transient fault cannot make an old sweep
    look new once connectivity returns.
    """

    def __init__(self, fetcher: Fetcher[BearingReading], **kwargs: Any) -> None:
        kwargs.setdefault("name", "BearingStore")
        super().__init__(fetcher, **kwargs)
        self._last_timestamp: str | None = None
        self._stale = False

    @classmethod
    def from_client(cls, client: DfClient, **kwargs: Any) -> BearingStore:
        kwargs.setdefault("interval", client.config.poll_interval)
        return cls(client.read_df, **kwargs)

    @property
    def last_timestamp(self) -> str | None:
        return self._last_timestamp

    @property
    def is_stale(self) -> bool:
        """Whether the latest cycle returned an already seen sweep."""
        return self._stale

    def clear(self) -> None:
        self._last_timestamp = None
        self._stale = False
        super().clear()

    def _publish_success(self, value: Any) -> None:
        reading: BearingReading = value
        if is_duplicate_token(self._last_timestamp, reading.timestamp):
            _logger.debug("Stale DF data, same timestamp: %s", reading.timestamp)
            self._snapshot = None
            self._error = NO_NEW_DATA_MESSAGE
            self._stale = True
            self._status = PollingStatus.READY
            self._notify()
            return

        _logger.debug("New DF data received, timestamp: %s", reading.timestamp)
        self._last_timestamp = reading.timestamp
        self._stale = False
        super()._publish_success(reading)

    def _publish_failure(self, message: str) -> None:
        self._stale = False
        super()._publish_failure(message)
