"""Tests for the WatchRepository database layer."""

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import aiosqlite
import pytest

from careerwatch.extractor.models import CandidateKind
from careerwatch.store.models import JobListing, TrackedSite


def _site(name: str, offset: int = 0) -> TrackedSite:
    return TrackedSite(
        id=f"id-{name}",
        url=f"https://{name}.example.com/careers",
        company_name=name.title(),
        created_at=datetime(2026, 1, 1, tzinfo=UTC) + timedelta(minutes=offset),
    )


def _job(site: TrackedSite, title: str, fetched_at: datetime | None = None) -> JobListing:
    return JobListing(
        title=title,
        location="Remote",
        summary=f"{title} summary",
        url=f"{site.url}/{title.lower()}",
        site_id=site.id,
        company_name=site.company_name,
        fetched_at=fetched_at or datetime(2026, 1, 2, tzinfo=UTC),
    )


class TestDatabaseInitialization:
    """Test database initialization."""

    async def test_creates_database_file_and_parent(self, tmp_path):
        """Should create the database file and missing parent directories."""
        from careerwatch.store.repository import WatchRepository

        db_path = tmp_path / "nested" / "watch.db"
        repo = WatchRepository(db_path)
        await repo.initialize()

        assert db_path.exists()
        await repo.close()

    async def test_creates_tables(self, repository):
        async with repository._get_connection() as conn:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            tables = {row[0] for row in await cursor.fetchall()}

        assert {"sites", "jobs"} <= tables

    async def test_handles_existing_database_gracefully(self, tmp_path):
        from careerwatch.store.repository import WatchRepository

        db_path = tmp_path / "watch.db"
        repo1 = WatchRepository(db_path)
        await repo1.initialize()
        await repo1.add_site(_site("acme"))
        await repo1.close()

        repo2 = WatchRepository(db_path)
        await repo2.initialize()
        assert [s.id for s in await repo2.list_sites()] == ["id-acme"]
        await repo2.close()


class TestSites:
    """Test site registry operations."""

    async def test_add_and_get_site(self, repository):
        site = _site("acme")
        await repository.add_site(site)

        stored = await repository.get_site("id-acme")

        assert stored == site

    async def test_get_missing_site_returns_none(self, repository):
        assert await repository.get_site("missing") is None

    async def test_list_sites_in_creation_order(self, repository):
        await repository.add_site(_site("beta", offset=5))
        await repository.add_site(_site("alpha", offset=1))

        sites = await repository.list_sites()

        assert [s.id for s in sites] == ["id-alpha", "id-beta"]

    async def test_duplicate_site_id_raises_persistence_error(self, repository):
        from careerwatch.store.repository import PersistenceError

        await repository.add_site(_site("acme"))

        with pytest.raises(PersistenceError):
            await repository.add_site(_site("acme"))

    async def test_update_site_persists_refresh_metadata(self, repository):
        site = _site("acme")
        await repository.add_site(site)

        site.last_refreshed = datetime(2026, 5, 1, 12, tzinfo=UTC)
        site.job_count = 7
        await repository.update_site(site)

        stored = await repository.get_site(site.id)
        assert stored.last_refreshed == datetime(2026, 5, 1, 12, tzinfo=UTC)
        assert stored.job_count == 7

    async def test_delete_site_cascades_to_jobs(self, repository):
        acme, globex = _site("acme"), _site("globex", offset=1)
        await repository.add_site(acme)
        await repository.add_site(globex)
        await repository.replace_jobs_for_site(acme.id, [_job(acme, "Engineer")])
        await repository.replace_jobs_for_site(globex.id, [_job(globex, "Analyst")])

        assert await repository.delete_site(acme.id) is True

        assert await repository.get_site(acme.id) is None
        assert await repository.list_jobs_for_site(acme.id) == []
        assert [j.title for j in await repository.list_jobs()] == ["Analyst"]

    async def test_delete_missing_site_returns_false(self, repository):
        assert await repository.delete_site("missing") is False


class TestJobs:
    """Test job store operations."""

    async def test_replace_jobs_inserts_in_order(self, repository):
        site = _site("acme")
        await repository.add_site(site)

        await repository.replace_jobs_for_site(
            site.id, [_job(site, "Engineer"), _job(site, "Designer")]
        )

        jobs = await repository.list_jobs_for_site(site.id)
        assert [j.title for j in jobs] == ["Engineer", "Designer"]
        assert jobs[0].company_name == "Acme"
        assert jobs[0].fetched_at == datetime(2026, 1, 2, tzinfo=UTC)

    async def test_replace_jobs_discards_previous_set(self, repository):
        site = _site("acme")
        await repository.add_site(site)
        await repository.replace_jobs_for_site(site.id, [_job(site, "Old1"), _job(site, "Old2")])

        await repository.replace_jobs_for_site(site.id, [_job(site, "New")])

        assert [j.title for j in await repository.list_jobs_for_site(site.id)] == ["New"]

    async def test_replace_jobs_leaves_other_sites_alone(self, repository):
        acme, globex = _site("acme"), _site("globex", offset=1)
        await repository.add_site(acme)
        await repository.add_site(globex)
        await repository.replace_jobs_for_site(globex.id, [_job(globex, "Analyst")])

        await repository.replace_jobs_for_site(acme.id, [_job(acme, "Engineer")])

        assert [j.title for j in await repository.list_jobs_for_site(globex.id)] == ["Analyst"]
        assert len(await repository.list_jobs()) == 2

    async def test_replace_with_empty_list_clears_site(self, repository):
        site = _site("acme")
        await repository.add_site(site)
        await repository.replace_jobs_for_site(site.id, [_job(site, "Engineer")])

        await repository.replace_jobs_for_site(site.id, [])

        assert await repository.list_jobs_for_site(site.id) == []

    async def test_placeholder_kind_round_trips(self, repository):
        site = _site("acme")
        await repository.add_site(site)
        job = _job(site, "Scraping Error")
        job.kind = CandidateKind.SCRAPING_ERROR

        await repository.replace_jobs_for_site(site.id, [job])

        [stored] = await repository.list_jobs_for_site(site.id)
        assert stored.kind is CandidateKind.SCRAPING_ERROR

    async def test_failed_replace_keeps_previous_jobs(self, repository):
        from careerwatch.store.repository import PersistenceError

        site = _site("acme")
        await repository.add_site(site)
        await repository.replace_jobs_for_site(site.id, [_job(site, "Engineer")])

        broken = _job(site, "Broken")
        broken.title = None  # violates NOT NULL

        with pytest.raises(PersistenceError):
            await repository.replace_jobs_for_site(site.id, [_job(site, "New"), broken])

        assert [j.title for j in await repository.list_jobs_for_site(site.id)] == ["Engineer"]


class TestErrors:
    async def test_read_errors_surface_as_persistence_error(self, repository):
        from careerwatch.store.repository import PersistenceError

        async with repository._get_connection() as conn:
            with patch.object(
                conn, "execute", side_effect=aiosqlite.OperationalError("disk I/O error")
            ):
                with pytest.raises(PersistenceError, match="disk I/O error"):
                    await repository.list_jobs()
