# sqlsandbox/db.py
import logging
import sqlite3

from .errors import DatabaseInitError, QueryError, SchemaError, SeedError

logger = logging.getLogger(__name__)

# Python before 3.12 reports "one statement at a time" as Warning, not Error
ENGINE_ERRORS = (sqlite3.Error, sqlite3.Warning)


def _json_value(value):
    # BLOBs go out as their byte values, never decoded as text
    if isinstance(value, bytes):
        return list(value)
    return value


def run_artifacts(table_definition: str, seed_statements: list[str], query: str) -> list[dict]:
    """
    Builds a fresh in-memory SQLite database, applies the table definition and
    seed statements in order, runs the query, and returns its rows as dicts
    (engine column order, engine value types).

    The first failing stage aborts the rest. The database is closed on every path.
    """
    try:
        conn = sqlite3.connect(":memory:")
    except ENGINE_ERRORS as e:
        logger.error("Error opening database: %s", e)
        raise DatabaseInitError("Failed to initialize database.") from e
    logger.info("Connected to the in-memory SQLite database.")

    try:
        try:
            conn.execute(table_definition)
        except ENGINE_ERRORS as e:
            logger.error("Error creating table: %s", e)
            raise SchemaError(f"Failed to create table: {e}") from e
        logger.info("Table created successfully.")

        for position, stmt in enumerate(seed_statements, start=1):
            try:
                conn.execute(stmt)
            except ENGINE_ERRORS as e:
                logger.error("Error inserting data (statement %d): %s", position, e)
                raise SeedError(
                    f"Failed to insert data (statement {position}): {e}",
                    position=position,
                    statement=stmt,
                ) from e
        logger.info("Sample data inserted successfully (%d statements).", len(seed_statements))

        try:
            cur = conn.execute(query)
            rows = cur.fetchall()
        except ENGINE_ERRORS as e:
            logger.error("Error executing query: %s", e)
            raise QueryError(f"Failed to execute query: {e}") from e

        cols = [d[0] for d in cur.description] if cur.description else []
        logger.info("Query executed successfully (%d rows).", len(rows))
        return [{c: _json_value(v) for c, v in zip(cols, row)} for row in rows]
    finally:
        conn.close()
        logger.info("Closed the database connection.")
