"""
Custom Exceptions - Candidate Evaluation Scoring Engine
candidate_scoring/core/exceptions.py

Exception classes for repository and scoring operations.
"""


class RepositoryException(Exception):
    """Base exception for repository operations."""

    pass


class DatabaseConnectionException(RepositoryException):
    """Database connection failure."""

    def __init__(self, message: str = "Database connection failed"):
        self.message = message
        super().__init__(message)


class ScoringException(Exception):
    """Base exception for scoring operations."""

    pass


class InvalidWeightsError(ScoringException, ValueError):
    """Weights that do not form a valid distribution (negative, or not summing to 1.0)."""

    def __init__(self, message: str, weights: dict = None):
        self.weights = weights or {}
        super().__init__(message)
