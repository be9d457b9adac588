"""Database connection and engine management."""

import re
from urllib.parse import urlparse

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError


def sanitize_connection_string(connection_string: str) -> str:
    """Sanitize a database connection string by removing passwords for logging.

    Args:
        connection_string: The database connection string

    Returns:
        Sanitized connection string with password replaced by ***
    """
    try:
        parsed = urlparse(connection_string)
        if parsed.password:
            return connection_string.replace(f":{parsed.password}@", ":***@")
    except ValueError:
        # Malformed netloc (e.g. bad port); fall through to the regex
        pass

    # Matches :password@ patterns
    return re.sub(r"://([^:/@]+):([^@/]+)@", r"://\1:***@", connection_string)


def create_database_engine(connection_string: str) -> Engine:
    """Create a SQLAlchemy engine for a connection string.

    Args:
        connection_string: The database connection string

    Returns:
        SQLAlchemy Engine instance

    Raises:
        ValueError: If the connection string cannot be parsed
    """
    try:
        return create_engine(connection_string, echo=False)
    except ArgumentError as e:
        raise ValueError(f"Invalid connection string: {sanitize_connection_string(connection_string)}") from e
