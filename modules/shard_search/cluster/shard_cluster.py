"""Shard Cluster

Runs a spatial query on every shard in parallel, collects each shard's outcome
and merges the locally sorted shard results into one globally ranked top-k.

Per shard, each attempt is bounded by ``shard_timeout_seconds`` and retried on
IndexUnavailableError up to ``shard_retry_attempts`` times. Whether a failed
shard aborts the search or contributes nothing is set by the failure policy.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from func_timeout import FunctionTimedOut, func_timeout
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from src.config import ConfigLoader
from src.exceptions import GeoShardBaseException
from src.interfaces import ShardIndex
from src.utils import log_performance
from ..exceptions import IndexUnavailableError, InvalidArgumentError, ShardTimeoutError
from ..geometry import SpatialContext
from ..index import InMemoryShardIndex
from ..index.document_builder import ShapeInput
from ..models import ScoredResult, descending_order, sort_by_score
from ..spatial_query import (
    CircleQuery, KnnQuery, ShapeQuery, ShardQueryExecutor, SpatialQuery, build_query
)
from .cluster_models import ClusterSearchResult, FailurePolicy, SearchSettings, ShardOutcome

logger = logging.getLogger(__name__)


def merge_top_k(sequences: Iterable[Sequence[ScoredResult]], k: int,
                order: Callable[[Any, Any], int] = descending_order) -> List[ScoredResult]:
    """Concatenate shard results, re-sort them with ``order`` and keep the first ``k``.

    The sort is stable, so results with equal scores keep shard order.

    Raises:
        InvalidArgumentError: If ``k`` is less than 1
    """
    if k < 1:
        raise InvalidArgumentError(f"k must be at least 1, got {k}", {"k": k})
    merged: List[ScoredResult] = []
    for sequence in sequences:
        merged.extend(sequence)
    return sort_by_score(merged, order)[:k]


class ShardCluster:
    """A set of shard indexes searched together.

    Shards share no mutable state; each shard query runs on its own worker
    thread and the merge waits for every shard to finish.
    """

    def __init__(self, shards: Sequence[ShardIndex], settings: Optional[SearchSettings] = None,
                 context: Optional[SpatialContext] = None):
        if not shards:
            raise InvalidArgumentError("A shard cluster needs at least one shard")
        self.shards = list(shards)
        self.settings = settings or SearchSettings(num_shards=len(self.shards))
        self.context = context or self.settings.build_context()
        logger.info(f"ShardCluster initialized with {len(self.shards)} shards "
                    f"(failure policy: {self.settings.failure_policy.value})")

    @classmethod
    def from_records(cls, records: Iterable[Tuple[ShapeInput, Any]],
                     settings: Optional[SearchSettings] = None,
                     context: Optional[SpatialContext] = None) -> "ShardCluster":
        """Partition (shape, payload) records round-robin into in-memory shards."""
        settings = settings or SearchSettings()
        context = context or settings.build_context()
        shards = [InMemoryShardIndex(i, context) for i in range(settings.num_shards)]

        count = 0
        for position, (shape, payload) in enumerate(records):
            shards[position % len(shards)].add(shape, payload)
            count += 1

        logger.info(f"Indexed {count} records into {len(shards)} shards")
        return cls(shards, settings, context)

    @classmethod
    def from_config(cls, records: Iterable[Tuple[ShapeInput, Any]],
                    config_loader: ConfigLoader, environment: str) -> "ShardCluster":
        return cls.from_records(records, SearchSettings.from_config(config_loader, environment))

    @property
    def doc_count(self) -> int:
        return sum(shard.doc_count for shard in self.shards)

    def knn_search(self, origin, k: Optional[int] = None) -> ClusterSearchResult:
        point = self.context.as_point(origin)
        return self.search(build_query(KnnQuery, origin=(point.x, point.y), k=self._k(k)))

    def circle_search(self, origin, radius_km: float, k: Optional[int] = None) -> ClusterSearchResult:
        point = self.context.as_point(origin)
        return self.search(build_query(
            CircleQuery, origin=(point.x, point.y), radius_km=radius_km, k=self._k(k)
        ))

    def shape_search(self, shape_wkt: str, k: Optional[int] = None) -> ClusterSearchResult:
        query = build_query(ShapeQuery, shape_wkt=shape_wkt, k=self._k(k))
        # Malformed shapes fail once here instead of once per shard
        self.context.parse_wkt(query.shape_wkt)
        return self.search(query)

    def _k(self, k: Optional[int]) -> int:
        return self.settings.default_k if k is None else k

    @log_performance
    def search(self, query: SpatialQuery) -> ClusterSearchResult:
        """Run a prepared query on every shard and merge the results."""
        start = time.perf_counter()
        outcomes = self._run_on_shards(query)
        self._apply_failure_policy(outcomes)

        results = merge_top_k((o.results for o in outcomes if o.succeeded), query.k)
        result = ClusterSearchResult(
            query=query,
            results=results,
            shard_outcomes=outcomes,
            duration=time.perf_counter() - start
        )
        logger.info(result.get_search_summary())
        return result

    def _run_on_shards(self, query: SpatialQuery) -> List[ShardOutcome]:
        max_workers = self.settings.max_workers or len(self.shards)
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="shard") as pool:
            futures = [pool.submit(self._query_shard, shard, query) for shard in self.shards]
            return [future.result() for future in futures]

    def _query_shard(self, shard: ShardIndex, query: SpatialQuery) -> ShardOutcome:
        executor = ShardQueryExecutor(shard, self.context)
        attempts = 0
        start = time.perf_counter()

        def attempt() -> List[ScoredResult]:
            nonlocal attempts
            attempts += 1
            return self._execute_with_timeout(executor, query)

        retrying = Retrying(
            stop=stop_after_attempt(self.settings.shard_retry_attempts),
            wait=wait_exponential(multiplier=self.settings.retry_backoff_seconds, max=10),
            retry=retry_if_exception_type(IndexUnavailableError),
            reraise=True
        )

        try:
            results = retrying(attempt)
        except GeoShardBaseException as e:
            logger.warning(f"Shard {shard.shard_index} failed after {attempts} attempt(s): {e}",
                           extra={"shard_index": shard.shard_index, "query_kind": query.kind.value})
            return ShardOutcome(
                shard_index=shard.shard_index,
                error=str(e),
                error_type=type(e).__name__,
                exception=e,
                attempts=max(attempts, 1),
                duration=time.perf_counter() - start
            )

        return ShardOutcome(
            shard_index=shard.shard_index,
            results=results,
            attempts=attempts,
            duration=time.perf_counter() - start
        )

    def _execute_with_timeout(self, executor: ShardQueryExecutor, query: SpatialQuery) -> List[ScoredResult]:
        timeout = self.settings.shard_timeout_seconds
        try:
            return func_timeout(timeout, executor.execute, args=(query,))
        except FunctionTimedOut:
            raise ShardTimeoutError(
                f"Shard {executor.index.shard_index} {query.kind.value} search exceeded {timeout}s",
                executor.index.shard_index,
                timeout
            )

    def _apply_failure_policy(self, outcomes: List[ShardOutcome]) -> None:
        failed = [o for o in outcomes if not o.succeeded]
        if not failed:
            return
        if self.settings.failure_policy == FailurePolicy.FAIL:
            raise failed[0].exception
        logger.warning(f"Skipping {len(failed)} failed shard(s): {[o.shard_index for o in failed]}")

    def close(self) -> None:
        for shard in self.shards:
            shard.close()
        logger.info(f"Closed {len(self.shards)} shards")
