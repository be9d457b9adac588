"""Pytest configuration and shared fixtures"""

from collections.abc import Iterator
from pathlib import Path

import pytest
from sqlalchemy import create_engine, text

from schemac.ast import ColumnNode, DefaultNode, EnumTypeNode, ForeignKeyNode, IndexNode, TableNode, TypeNode
from schemac.dialects import PostgresVisitor, SqliteVisitor


@pytest.fixture
def postgres_visitor() -> PostgresVisitor:
    """Return a PostgreSQL visitor"""
    return PostgresVisitor()


@pytest.fixture
def sqlite_visitor() -> SqliteVisitor:
    """Return a SQLite visitor"""
    return SqliteVisitor()


@pytest.fixture
def users_table() -> TableNode:
    """Return a PostgreSQL-flavoured users table as the catalog reports it"""
    return TableNode(
        name="users",
        columns=(
            ColumnNode(
                name="id",
                type=TypeNode("bigint"),
                default=DefaultNode("nextval('users_id_seq'::regclass)"),
                nullable=False,
            ),
            ColumnNode(name="email", type=TypeNode("citext"), nullable=False),
            ColumnNode(
                name="status",
                type=EnumTypeNode(["active", "inactive", "banned"]),
                default=DefaultNode("'active'::user_status"),
                nullable=False,
            ),
            ColumnNode(name="tags", type=TypeNode("text[]"), default=DefaultNode("'{}'::text[]")),
            ColumnNode(name="settings", type=TypeNode("jsonb"), default=DefaultNode("'{}'::jsonb")),
            ColumnNode(
                name="age",
                type=TypeNode("integer"),
                check_constraints=("age >= 0",),
            ),
            ColumnNode(name="team_id", type=TypeNode("integer")),
            ColumnNode(
                name="inserted_at",
                type=TypeNode("timestamp without time zone"),
                default=DefaultNode("now()"),
                nullable=False,
            ),
        ),
        primary_key=("id",),
        foreign_keys=(ForeignKeyNode(columns=("team_id",), referenced_table="teams", referenced_columns=("id",)),),
        indices=(IndexNode(name="users_email_index", columns=("email",), unique=True),),
    )


@pytest.fixture
def sqlite_url(tmp_path: Path) -> Iterator[str]:
    """Create a temporary SQLite database with test tables and return its URL"""
    db_path = tmp_path / "catalog.db"
    connection_string = f"sqlite:///{db_path}"

    engine = create_engine(connection_string)
    with engine.connect() as conn:
        conn.execute(
            text(
                """
                CREATE TABLE teams (
                    id INTEGER PRIMARY KEY,
                    name VARCHAR(100) NOT NULL
                )
                """
            )
        )
        conn.execute(
            text(
                """
                CREATE TABLE users (
                    id INTEGER PRIMARY KEY,
                    email TEXT NOT NULL,
                    age INTEGER CONSTRAINT age_positive CHECK (age >= 0),
                    balance DECIMAL(10, 2) DEFAULT 0.00,
                    active BOOLEAN DEFAULT TRUE,
                    status VARCHAR(20) DEFAULT 'pending',
                    settings JSON DEFAULT '{}',
                    team_id INTEGER REFERENCES teams(id),
                    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                    token TEXT DEFAULT (lower(hex(randomblob(16)))),
                    location GEOGRAPHY
                )
                """
            )
        )
        conn.execute(text("CREATE UNIQUE INDEX users_email_index ON users (email)"))
        # Key declared in a different order than the columns
        conn.execute(
            text(
                """
                CREATE TABLE memberships (
                    user_id INTEGER NOT NULL,
                    team_id INTEGER NOT NULL,
                    role TEXT DEFAULT 'member',
                    PRIMARY KEY (team_id, user_id)
                )
                """
            )
        )
        conn.commit()
    engine.dispose()

    yield connection_string

    db_path.unlink(missing_ok=True)
