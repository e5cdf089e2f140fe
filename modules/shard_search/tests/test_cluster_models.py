"""Unit tests for shard cluster settings and result models."""

import json

import pytest

from src.config import ConfigLoader
from src.exceptions import GeoShardConfigurationError
from modules.shard_search.cluster import (
    ClusterSearchResult, FailurePolicy, SearchSettings, ShardCluster, ShardOutcome
)
from modules.shard_search.geometry import EARTH_MEAN_RADIUS_KM
from modules.shard_search.models import ScoredResult
from modules.shard_search.spatial_query import KnnQuery


class TestSearchSettings:
    """Test SearchSettings defaults and loading from configuration."""

    @pytest.fixture
    def config_dir(self, tmp_path):
        config = {
            "shared": {"search": {"default_k": 5, "failure_policy": "fail"}},
            "environments": {
                "development": {
                    "logging": {"level": "DEBUG"},
                    "search": {"num_shards": 3, "shard_timeout_seconds": 2.5}
                },
                "production": {
                    "logging": {"level": "INFO", "format": "json"},
                    "search": {"num_shards": 4, "failure_policy": "skip", "max_workers": 2}
                },
                "broken": {
                    "logging": {"level": "INFO"},
                    "search": {"num_shards": 0, "failure_policy": "retry"}
                }
            }
        }
        (tmp_path / "search_config.json").write_text(json.dumps(config))
        return tmp_path

    def test_defaults(self):
        settings = SearchSettings()

        assert settings.num_shards == 2
        assert settings.default_k == 10
        assert settings.earth_radius_km == EARTH_MEAN_RADIUS_KM
        assert settings.shard_retry_attempts == 1
        assert settings.failure_policy == FailurePolicy.FAIL
        assert settings.max_workers is None

    def test_from_config_merges_shared(self, config_dir):
        """Test environment values override the shared search block."""
        loader = ConfigLoader(config_dir=str(config_dir))

        development = SearchSettings.from_config(loader, "development")
        production = SearchSettings.from_config(loader, "production")

        assert development.num_shards == 3
        assert development.default_k == 5
        assert development.shard_timeout_seconds == 2.5
        assert development.failure_policy == FailurePolicy.FAIL
        assert production.failure_policy == FailurePolicy.SKIP
        assert production.max_workers == 2

    def test_from_config_invalid(self, config_dir):
        loader = ConfigLoader(config_dir=str(config_dir))

        with pytest.raises(GeoShardConfigurationError, match="Invalid search settings for broken"):
            SearchSettings.from_config(loader, "broken")

    def test_build_context(self):
        context = SearchSettings(earth_radius_km=6378.137).build_context()

        assert context.earth_radius_km == 6378.137

    def test_cluster_from_config(self, config_dir):
        loader = ConfigLoader(config_dir=str(config_dir))

        cluster = ShardCluster.from_config([((0.0, 0.0), ("origin",))], loader, "development")

        assert len(cluster.shards) == 3
        assert cluster.doc_count == 1
        assert len(cluster.knn_search((0.0, 0.0))) == 1


class TestClusterSearchResult:
    """Test the merged result summary helpers."""

    @pytest.fixture
    def search_result(self):
        results = [
            ScoredResult(score=0.9, internal_id=0, shard_index=1),
            ScoredResult(score=0.5, internal_id=3, shard_index=1),
        ]
        outcomes = [
            ShardOutcome(shard_index=0, error="offline", error_type="IndexUnavailableError", attempts=3),
            ShardOutcome(shard_index=1, results=results + [ScoredResult(score=0.1, internal_id=4, shard_index=1)]),
        ]
        return ClusterSearchResult(query=KnnQuery(origin=(0.0, 0.0), k=2),
                                   results=results, shard_outcomes=outcomes, duration=0.25)

    def test_helpers(self, search_result):
        assert len(search_result) == 2
        assert search_result.get_failed_shards() == [0]
        assert search_result.get_candidate_count() == 3
        assert search_result.get_shard_breakdown() == {0: 0, 1: 2}
        assert [row.internal_id for row in search_result.to_rows()] == [0, 3]

    def test_summary(self, search_result):
        assert search_result.get_search_summary() == (
            "knn search returned 2 of 3 candidates from 2 shards in 0.250s (1 failed)"
        )

    def test_outcome_success_flag(self):
        assert ShardOutcome(shard_index=0).succeeded
        assert not ShardOutcome(shard_index=0, error="boom").succeeded
