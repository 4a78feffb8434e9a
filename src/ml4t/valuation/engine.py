"""Recalculation pipeline and snapshot publication.

The pipeline runs Valuation -> Aggregation -> Risk and returns one immutable
PortfolioSnapshot. A SnapshotStore holds the latest snapshot for readers, and
a PeriodicRefresher is its single writer when simulated ticks drive the book.

Example:
    engine = ValuationEngine(ValuationConfig.from_preset("deterministic"))
    store = SnapshotStore()
    store.publish(engine.recalculate(positions, cash, prices))

    with PeriodicRefresher(engine, store, interval=1.0):
        ...  # store.latest() advances once per second
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from datetime import datetime

import numpy as np

from .config import ValuationConfig
from .errors import StaleSnapshotError
from .portfolio import summarize
from .risk import BetaProvider, InMemoryBetaProvider, backfill_returns, compute_risk_metrics
from .simulator import PriceSimulator
from .types import CashBalance, FuturesHolding, PortfolioSnapshot, Position
from .valuation import mark_to_market

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[PortfolioSnapshot], None]


class ValuationEngine:
    """Stateless recalculation pipeline.

    Holds only configuration, the beta reference data and the random
    generator used to backfill missing return histories.
    """

    def __init__(
        self,
        config: ValuationConfig | None = None,
        beta_provider: BetaProvider | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.config = config or ValuationConfig()
        self.beta_provider = beta_provider or InMemoryBetaProvider()
        self.rng = rng or np.random.default_rng(self.config.seed)

    def recalculate(
        self,
        positions: Iterable[Position],
        cash_balances: Iterable[CashBalance],
        prices: Mapping[str, float] | None = None,
        holdings: Iterable[FuturesHolding] = (),
        previous_timestamp: datetime | None = None,
    ) -> PortfolioSnapshot:
        """Mark, aggregate and risk-assess the book in one pass.

        Either the whole snapshot is produced or the call raises; there are no
        partial results.

        Args:
            positions: Current positions
            cash_balances: Current cash per currency
            prices: Latest price per symbol (missing symbols keep their price)
            holdings: Standalone futures holdings, passed through as given
            previous_timestamp: Reused as the summary's ``last_updated``

        Returns:
            PortfolioSnapshot (version 0; the store assigns versions)

        Raises:
            InvalidInputError: A position has a zero cost basis
            DegeneratePortfolioError: Positions are worth nothing in total
        """
        cash_balances = tuple(cash_balances)
        marked = mark_to_market(positions, prices or {})
        marked = backfill_returns(marked, self.config, self.rng)

        summary = summarize(marked, cash_balances, previous_timestamp)
        risk = compute_risk_metrics(marked, self.beta_provider, self.config, self.rng)

        return PortfolioSnapshot(
            positions=tuple(marked),
            cash_balances=cash_balances,
            summary=summary,
            risk=risk,
            holdings=tuple(holdings),
        )


class SnapshotStore:
    """Latest-snapshot holder with a single-writer publish.

    ``publish`` swaps the whole snapshot under a lock, so ``latest`` always
    returns a fully formed snapshot. Subscribers are called after the swap,
    outside the lock, in subscription order.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot: PortfolioSnapshot | None = None
        self._subscribers: list[SnapshotCallback] = []

    def latest(self) -> PortfolioSnapshot | None:
        with self._lock:
            return self._snapshot

    def publish(
        self, snapshot: PortfolioSnapshot, expected_version: int | None = None
    ) -> PortfolioSnapshot:
        """Make ``snapshot`` current, stamping it with the next version.

        Args:
            snapshot: Result of a recalculation pass
            expected_version: Version the pass started from (0 for an empty
                store). When given, the publish is rejected if another writer
                has published since.

        Raises:
            StaleSnapshotError: If the current version differs from
                ``expected_version``
        """
        with self._lock:
            current_version = self._snapshot.version if self._snapshot is not None else 0
            if expected_version is not None and expected_version != current_version:
                raise StaleSnapshotError(expected_version, current_version)
            version = current_version + 1
            snapshot = replace(snapshot, version=version)
            self._snapshot = snapshot
            subscribers = list(self._subscribers)

        logger.info(
            f"Published snapshot v{version}: total ${snapshot.summary.total_value:,.2f}, "
            f"{len(snapshot.positions)} positions"
        )
        for callback in subscribers:
            callback(snapshot)
        return snapshot

    def subscribe(self, callback: SnapshotCallback) -> Callable[[], None]:
        """Register ``callback`` for future publications.

        Returns:
            Function that removes the subscription
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe


class PeriodicRefresher:
    """Background writer that re-prices the book on a fixed interval.

    Each tick draws simulated prices, FX rates and holding marks from the
    latest snapshot, recalculates, and publishes. Ticks never overlap. A tick
    that raises is logged and the previous snapshot stays current.
    """

    def __init__(
        self,
        engine: ValuationEngine,
        store: SnapshotStore,
        simulator: PriceSimulator | None = None,
        interval: float | None = None,
    ):
        self.engine = engine
        self.store = store
        self.simulator = simulator or PriceSimulator(engine.config, engine.rng)
        self.interval = interval if interval is not None else engine.config.refresh_interval
        self._tick_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> PortfolioSnapshot | None:
        """Run one refresh pass synchronously.

        The pass publishes only if the snapshot it started from is still
        current; when another writer published in the meantime the pass is
        dropped and the next tick starts from the newer snapshot.

        Returns:
            The published snapshot, or None if the store is empty or the
            pass was superseded
        """
        with self._tick_lock:
            current = self.store.latest()
            if current is None:
                logger.debug("Skipping refresh: no snapshot published yet")
                return None

            prices = self.simulator.next_prices(current.positions)
            cash = self.simulator.next_exchange_rates(current.cash_balances)
            holdings = self.simulator.next_holding_prices(current.holdings)
            snapshot = self.engine.recalculate(current.positions, cash, prices, holdings)
            try:
                return self.store.publish(snapshot, expected_version=current.version)
            except StaleSnapshotError as e:
                logger.warning(f"Dropping refresh pass: {e}")
                return None

    def start(self) -> None:
        if self.running:
            return
        # Each worker owns its stop event so a restart cannot revive a stopped one
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), name="valuation-refresher", daemon=True
        )
        self._thread.start()
        logger.info(f"Refresher started (every {self.interval:g}s)")

    def stop(self, timeout: float | None = None) -> None:
        """Stop the worker and wait for an in-flight tick to finish.

        If the worker is still inside a tick when ``timeout`` expires it stays
        attached: ``running`` remains True and ``start`` is a no-op until a
        later ``stop`` joins it.
        """
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning(f"Refresher still finishing a tick after {timeout}s; not detached")
            return
        self._thread = None
        logger.info("Refresher stopped")

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval):
            try:
                self.tick()
            except Exception:
                logger.exception("Refresh pass failed; keeping previous snapshot")

    def __enter__(self) -> PeriodicRefresher:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
