"""
Core Package - Candidate Evaluation Scoring Engine
candidate_scoring/core/__init__.py

Core infrastructure: exceptions and logging setup.
"""

from candidate_scoring.core.exceptions import (
    DatabaseConnectionException,
    InvalidWeightsError,
    RepositoryException,
    ScoringException,
)
from candidate_scoring.core.logging_config import configure_logging

__all__ = [
    "DatabaseConnectionException",
    "InvalidWeightsError",
    "RepositoryException",
    "ScoringException",
    "configure_logging",
]
