"""Recommendation orchestration: target selection and the full pipeline."""

from book_recommender.recommender.orchestrator import (
    DEFAULT_TOP_N,
    build_feature_vectors,
    partition_malformed,
    recommend,
    select_target,
)

__all__ = [
    "DEFAULT_TOP_N",
    "build_feature_vectors",
    "partition_malformed",
    "recommend",
    "select_target",
]
