"""Database repository for tracked sites and job listings.

This module provides async SQLite storage for the site registry and the
job store. Replacing a site's jobs and deleting a site each run inside a
single transaction, so readers see either the old set or the new one.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from careerwatch.store.models import JobListing, TrackedSite

CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS sites (
    id TEXT PRIMARY KEY,
    url TEXT NOT NULL,
    company_name TEXT NOT NULL,
    created_at TEXT NOT NULL,
    last_refreshed TEXT,
    job_count INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS jobs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    site_id TEXT NOT NULL,
    company_name TEXT NOT NULL,
    title TEXT NOT NULL,
    location TEXT NOT NULL,
    summary TEXT NOT NULL,
    url TEXT NOT NULL,
    fetched_at TEXT NOT NULL,
    kind TEXT NOT NULL DEFAULT 'listing'
);

CREATE INDEX IF NOT EXISTS idx_jobs_site_id ON jobs(site_id);
CREATE INDEX IF NOT EXISTS idx_sites_created_at ON sites(created_at);
"""


class PersistenceError(Exception):
    """Raised when the database cannot be read or written."""


class WatchRepository:
    """Async SQLite repository for tracked sites and their jobs."""

    def __init__(self, db_path: Path | str):
        """Initialize the repository.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._connection: aiosqlite.Connection | None = None

    @asynccontextmanager
    async def _get_connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Get the shared database connection, opening it on first use."""
        if self._connection is None:
            try:
                self._connection = await aiosqlite.connect(self.db_path)
            except aiosqlite.Error as e:
                raise PersistenceError(f"Cannot open database {self.db_path}: {e}") from e
            self._connection.row_factory = aiosqlite.Row
        yield self._connection

    @asynccontextmanager
    async def _transaction(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Run a block of statements as one transaction.

        Commits when the block exits normally, rolls back otherwise. SQLite
        errors surface as PersistenceError.
        """
        async with self._get_connection() as conn:
            try:
                yield conn
                await conn.commit()
            except aiosqlite.Error as e:
                await conn.rollback()
                raise PersistenceError(f"Database write failed: {e}") from e
            except BaseException:
                await conn.rollback()
                raise

    async def _fetchall(self, sql: str, params: tuple = ()) -> list[aiosqlite.Row]:
        async with self._get_connection() as conn:
            try:
                cursor = await conn.execute(sql, params)
                return list(await cursor.fetchall())
            except aiosqlite.Error as e:
                raise PersistenceError(f"Database read failed: {e}") from e

    async def initialize(self) -> None:
        """Initialize the database, creating tables if needed."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot create {self.db_path.parent}: {e}") from e

        async with self._transaction() as conn:
            await conn.executescript(CREATE_TABLES_SQL)

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    # Sites

    async def add_site(self, site: TrackedSite) -> None:
        """Insert a new tracked site.

        Raises:
            PersistenceError: If a site with the same id exists.
        """
        async with self._transaction() as conn:
            await conn.execute(
                """
                INSERT INTO sites (
                    id, url, company_name, created_at, last_refreshed, job_count
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    site.id,
                    site.url,
                    site.company_name,
                    site.created_at.isoformat(),
                    site.last_refreshed.isoformat() if site.last_refreshed else None,
                    site.job_count,
                ),
            )

    async def get_site(self, site_id: str) -> TrackedSite | None:
        """Get a site by id.

        Returns:
            The site if found, None otherwise.
        """
        rows = await self._fetchall("SELECT * FROM sites WHERE id = ?", (site_id,))
        if not rows:
            return None
        return self._row_to_site(rows[0])

    async def list_sites(self) -> list[TrackedSite]:
        """List all sites in the order they were added."""
        rows = await self._fetchall("SELECT * FROM sites ORDER BY created_at, rowid")
        return [self._row_to_site(row) for row in rows]

    async def update_site(self, site: TrackedSite) -> None:
        """Persist a site's refresh metadata."""
        async with self._transaction() as conn:
            await conn.execute(
                """
                UPDATE sites
                SET company_name = ?, last_refreshed = ?, job_count = ?
                WHERE id = ?
                """,
                (
                    site.company_name,
                    site.last_refreshed.isoformat() if site.last_refreshed else None,
                    site.job_count,
                    site.id,
                ),
            )

    async def delete_site(self, site_id: str) -> bool:
        """Delete a site together with every job it owns.

        Returns:
            True if a site was deleted, False if none had that id.
        """
        async with self._transaction() as conn:
            cursor = await conn.execute("DELETE FROM sites WHERE id = ?", (site_id,))
            deleted = cursor.rowcount > 0
            await conn.execute("DELETE FROM jobs WHERE site_id = ?", (site_id,))
        return deleted

    # Jobs

    async def replace_jobs_for_site(self, site_id: str, jobs: list[JobListing]) -> None:
        """Swap a site's jobs for a new set in one transaction.

        Args:
            site_id: The owning site.
            jobs: The complete new job set; an empty list clears the site.
        """
        async with self._transaction() as conn:
            await conn.execute("DELETE FROM jobs WHERE site_id = ?", (site_id,))
            await conn.executemany(
                """
                INSERT INTO jobs (
                    site_id, company_name, title, location, summary, url,
                    fetched_at, kind
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        site_id,
                        job.company_name,
                        job.title,
                        job.location,
                        job.summary,
                        job.url,
                        job.fetched_at.isoformat(),
                        job.kind.value,
                    )
                    for job in jobs
                ],
            )

    async def list_jobs_for_site(self, site_id: str) -> list[JobListing]:
        """List a site's jobs in extraction order."""
        rows = await self._fetchall(
            "SELECT * FROM jobs WHERE site_id = ? ORDER BY id", (site_id,)
        )
        return [self._row_to_job(row) for row in rows]

    async def list_jobs(self) -> list[JobListing]:
        """List every job across all sites."""
        rows = await self._fetchall("SELECT * FROM jobs ORDER BY id")
        return [self._row_to_job(row) for row in rows]

    def _row_to_site(self, row: aiosqlite.Row) -> TrackedSite:
        return TrackedSite.from_dict(dict(row))

    def _row_to_job(self, row: aiosqlite.Row) -> JobListing:
        return JobListing.from_dict(dict(row))
