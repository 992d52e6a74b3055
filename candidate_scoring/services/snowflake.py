"""
Snowflake connection factory used by the repositories.
"""

import snowflake.connector

from candidate_scoring.config import get_settings
from candidate_scoring.core.exceptions import DatabaseConnectionException


def get_snowflake_connection():
    """
    Open a new Snowflake connection from the configured settings.

    Raises:
        DatabaseConnectionException: Snowflake settings are not configured.
    """
    settings = get_settings()
    if not settings.snowflake_configured:
        raise DatabaseConnectionException(
            "Snowflake is not configured (set SNOWFLAKE_ACCOUNT / SNOWFLAKE_USER / ...)"
        )

    password = settings.SNOWFLAKE_PASSWORD.get_secret_value() if settings.SNOWFLAKE_PASSWORD else None
    return snowflake.connector.connect(
        account=settings.SNOWFLAKE_ACCOUNT,
        user=settings.SNOWFLAKE_USER,
        password=password,
        warehouse=settings.SNOWFLAKE_WAREHOUSE,
        database=settings.SNOWFLAKE_DATABASE,
        schema=settings.SNOWFLAKE_SCHEMA,
        role=settings.SNOWFLAKE_ROLE,
    )
