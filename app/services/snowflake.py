from __future__ import annotations

import snowflake.connector

from app.config import get_settings


def _secret(value):
    return value.get_secret_value() if hasattr(value, "get_secret_value") else value


def get_snowflake_connection():
    """
    Snowflake connection factory.
    Used by repositories via dependency injection.
    """
    settings = get_settings()
    return snowflake.connector.connect(
        account=settings.SNOWFLAKE_ACCOUNT,
        user=settings.SNOWFLAKE_USER,
        password=_secret(settings.SNOWFLAKE_PASSWORD),
        warehouse=settings.SNOWFLAKE_WAREHOUSE,
        database=settings.SNOWFLAKE_DATABASE,
        schema=settings.SNOWFLAKE_SCHEMA,
        role=settings.SNOWFLAKE_ROLE,
    )
