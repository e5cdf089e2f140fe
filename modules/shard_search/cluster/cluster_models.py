"""Shard Cluster Models

Settings for running searches across shards, the per-shard outcome of a query
and the merged cluster-wide result.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.config import ConfigLoader
from src.exceptions import GeoShardConfigurationError
from ..geometry import EARTH_MEAN_RADIUS_KM, SpatialContext
from ..models import ScoredResult, TabularRow
from ..spatial_query import SpatialQuery

logger = logging.getLogger(__name__)


class FailurePolicy(str, Enum):
    """What a cluster search does when a shard fails."""
    SKIP = "skip"  # failed shard contributes zero results
    FAIL = "fail"  # first shard failure aborts the whole search


class SearchSettings(BaseModel):
    """Validated ``search`` section of the search configuration."""
    num_shards: int = Field(2, ge=1, description="Number of shards records are partitioned into")
    default_k: int = Field(10, ge=1, description="k used when a search does not pass one")
    earth_radius_km: float = Field(EARTH_MEAN_RADIUS_KM, gt=0, description="Sphere radius for km/degree conversion")
    shard_timeout_seconds: float = Field(30.0, gt=0, description="Time budget of one shard query attempt")
    shard_retry_attempts: int = Field(1, ge=1, description="Attempts per shard on IndexUnavailableError")
    retry_backoff_seconds: float = Field(0.0, ge=0, description="Exponential backoff multiplier between attempts")
    failure_policy: FailurePolicy = Field(FailurePolicy.FAIL, description="Handling of failed shards")
    max_workers: Optional[int] = Field(None, ge=1, description="Thread pool size; defaults to one per shard")

    @classmethod
    def from_config(cls, config_loader: ConfigLoader, environment: str) -> "SearchSettings":
        """Load and validate settings for an environment.

        Raises:
            GeoShardConfigurationError: If the search section is invalid
        """
        search_config = config_loader.get_search_config(environment)
        try:
            settings = cls(**search_config)
        except ValidationError as e:
            raise GeoShardConfigurationError(
                f"Invalid search settings for {environment}: {e.error_count()} error(s)",
                {"errors": "; ".join(err["msg"] for err in e.errors())}
            )
        logger.debug(f"Search settings for {environment}: {settings.model_dump()}")
        return settings

    def build_context(self) -> SpatialContext:
        return SpatialContext(earth_radius_km=self.earth_radius_km)


class ShardOutcome(BaseModel):
    """Result of running one query on one shard: its results or its failure."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    shard_index: int = Field(..., description="Shard the query ran on")
    results: List[ScoredResult] = Field(default_factory=list, description="Locally sorted shard results")
    error: Optional[str] = Field(None, description="Error message when the shard failed")
    error_type: Optional[str] = Field(None, description="Exception class name when the shard failed")
    exception: Optional[Any] = Field(None, exclude=True, description="Raised exception, kept for re-raising")
    attempts: int = Field(1, ge=1, description="Number of attempts made")
    duration: float = Field(0.0, ge=0, description="Seconds spent on this shard")

    @property
    def succeeded(self) -> bool:
        return self.error is None


class ClusterSearchResult(BaseModel):
    """Globally ranked answer of a search across every shard."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    query: SpatialQuery = Field(..., description="Query that was run")
    results: List[ScoredResult] = Field(default_factory=list, description="Merged top-k results")
    shard_outcomes: List[ShardOutcome] = Field(default_factory=list, description="Per-shard outcomes in shard order")
    duration: float = Field(0.0, ge=0, description="Wall-clock seconds for the search")
    completed_at: datetime = Field(default_factory=datetime.now, description="When the merge finished")

    def __len__(self) -> int:
        return len(self.results)

    def get_failed_shards(self) -> List[int]:
        return [o.shard_index for o in self.shard_outcomes if not o.succeeded]

    def get_candidate_count(self) -> int:
        """Number of shard results before the global truncation."""
        return sum(len(o.results) for o in self.shard_outcomes)

    def get_shard_breakdown(self) -> Dict[int, int]:
        """How many merged results each shard contributed."""
        breakdown = {o.shard_index: 0 for o in self.shard_outcomes}
        for result in self.results:
            breakdown[result.shard_index] = breakdown.get(result.shard_index, 0) + 1
        return breakdown

    def to_rows(self) -> List[TabularRow]:
        return [result.to_row() for result in self.results]

    def get_search_summary(self) -> str:
        failed = self.get_failed_shards()
        return (f"{self.query.kind.value} search returned {len(self.results)} of "
                f"{self.get_candidate_count()} candidates from {len(self.shard_outcomes)} shards "
                f"in {self.duration:.3f}s ({len(failed)} failed)")
