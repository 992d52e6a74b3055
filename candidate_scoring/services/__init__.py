"""
Services module for the Candidate Evaluation Scoring Engine.
"""

from candidate_scoring.services.snowflake import get_snowflake_connection

__all__ = ["get_snowflake_connection"]
