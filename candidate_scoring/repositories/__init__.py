"""
Repositories Package - Candidate Evaluation Scoring Engine
candidate_scoring/repositories/__init__.py

Data access layer: storage contracts, in-memory stores and Snowflake stores.
"""

from candidate_scoring.repositories.base import (
    CandidateRepository,
    ScoreRepository,
    SnowflakeRepository,
    UnreadableRow,
    parse_stored_rows,
    score_to_row,
    stored_score_from_row,
)
from candidate_scoring.repositories.memory_repository import (
    InMemoryCandidateRepository,
    InMemoryScoreRepository,
)
from candidate_scoring.repositories.score_repository import (
    SnowflakeCandidateRepository,
    SnowflakeScoreRepository,
)

__all__ = [
    "CandidateRepository",
    "ScoreRepository",
    "SnowflakeRepository",
    "UnreadableRow",
    "parse_stored_rows",
    "score_to_row",
    "stored_score_from_row",
    "InMemoryCandidateRepository",
    "InMemoryScoreRepository",
    "SnowflakeCandidateRepository",
    "SnowflakeScoreRepository",
]
