"""Main entry point for career-watch."""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from careerwatch import __version__
from careerwatch.config.settings import Settings
from careerwatch.utils.logging import configure_logging, get_logger

logger = get_logger("cli")


def _print_json(payload: object) -> None:
    def _default(value: object):
        to_dict = getattr(value, "to_dict", None)
        if callable(to_dict):
            return to_dict()
        return str(value)

    print(json.dumps(payload, indent=2, default=_default))


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="career-watch",
        description="career-watch: track company career pages and export their jobs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m careerwatch sites add https://example.com/careers --name Example
  python -m careerwatch refresh --all
  python -m careerwatch export
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set the log level (overrides settings)",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Override database path (defaults to settings)",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Override report workbook path (defaults to settings)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file",
    )

    subparsers = parser.add_subparsers(
        dest="mode",
        title="commands",
        description="Available commands",
    )

    # Site registry
    sites_parser = subparsers.add_parser("sites", help="Manage tracked sites")
    sites_subparsers = sites_parser.add_subparsers(
        dest="sites_cmd",
        title="sites",
        description="Site operations",
        required=True,
    )

    sites_add = sites_subparsers.add_parser("add", help="Track a career page")
    sites_add.add_argument("url", help="Career page URL")
    sites_add.add_argument(
        "--name",
        default=None,
        help="Company name (defaults to the URL)",
    )

    sites_list = sites_subparsers.add_parser("list", help="List tracked sites")
    sites_list.add_argument("--json", action="store_true", help="Print JSON")

    sites_remove = sites_subparsers.add_parser(
        "remove", help="Stop tracking a site and delete its jobs"
    )
    sites_remove.add_argument("site_id", help="Site id")

    # Refresh
    refresh_parser = subparsers.add_parser(
        "refresh",
        help="Re-extract jobs for one site or all sites",
    )
    refresh_target = refresh_parser.add_mutually_exclusive_group(required=True)
    refresh_target.add_argument("site_id", nargs="?", help="Site id to refresh")
    refresh_target.add_argument(
        "--all",
        action="store_true",
        help="Refresh every tracked site, one after another",
    )
    refresh_parser.add_argument("--json", action="store_true", help="Print JSON")

    # Jobs
    jobs_parser = subparsers.add_parser("jobs", help="List stored jobs")
    jobs_parser.add_argument(
        "site_id",
        nargs="?",
        default=None,
        help="Only list jobs for this site",
    )
    jobs_parser.add_argument("--json", action="store_true", help="Print JSON")

    # Export
    subparsers.add_parser("export", help="Rebuild the Excel report")

    return parser


async def _run_sites(parsed: argparse.Namespace, registry) -> int:
    if parsed.sites_cmd == "add":
        site = await registry.add_site(parsed.url, parsed.name)
        print(f"Added: {site.company_name} ({site.id})")
        return 0

    if parsed.sites_cmd == "list":
        sites = await registry.list_sites()
        if parsed.json:
            _print_json([site.to_dict() for site in sites])
            return 0
        if not sites:
            print("No tracked sites.")
            return 0
        for site in sites:
            last = site.last_refreshed.isoformat() if site.last_refreshed else "never"
            print(
                f"{site.id}  {site.company_name}  {site.url}  "
                f"jobs={site.job_count}  last_refreshed={last}"
            )
        return 0

    if parsed.sites_cmd == "remove":
        if not await registry.remove_site(parsed.site_id):
            print(f"Error: site not found: {parsed.site_id}", file=sys.stderr)
            return 1
        print(f"Removed: {parsed.site_id}")
        return 0

    return 1


async def _run_refresh(parsed: argparse.Namespace, service) -> int:
    if parsed.all:

        def _progress(event) -> None:
            status = f"error: {event.error}" if event.error else f"{event.job_count} jobs"
            print(f"[{event.index}/{event.total}] {event.site}: {status}")

        result = await service.refresh_all(progress_callback=_progress)
        if parsed.json:
            _print_json(result.to_dict())
        else:
            print(
                f"\nRefresh complete: {result.succeeded} succeeded, "
                f"{result.failed} failed"
            )
            if result.export is not None:
                print(result.export.message)
        return 0

    result = await service.refresh_site(parsed.site_id)
    if parsed.json:
        _print_json(result.to_dict())
        return 0

    print(f"{result.site}: {result.job_count} jobs")
    for job in result.jobs:
        print(f"- {job.title} [{job.location}] {job.url}")
    if result.export is not None:
        print(result.export.message)
    return 0


async def _run_jobs(parsed: argparse.Namespace, registry) -> int:
    jobs = await registry.list_jobs(parsed.site_id)
    if parsed.json:
        _print_json([job.to_dict() for job in jobs])
        return 0
    if not jobs:
        print("No jobs.")
        return 0
    for job in jobs:
        print(f"{job.company_name}: {job.title} [{job.location}] {job.url}")
    return 0


async def _dispatch(parsed: argparse.Namespace, settings: Settings) -> int:
    from careerwatch.registry.service import SiteRegistry
    from careerwatch.report.builder import ReportBuilder
    from careerwatch.store.repository import WatchRepository

    repository = WatchRepository(settings.db_path)
    await repository.initialize()
    try:
        if parsed.mode == "sites":
            return await _run_sites(parsed, SiteRegistry(repository))

        if parsed.mode == "jobs":
            return await _run_jobs(parsed, SiteRegistry(repository))

        from careerwatch.refresh.service import RefreshService

        service = RefreshService(repository, ReportBuilder(settings.report_path))

        if parsed.mode == "refresh":
            return await _run_refresh(parsed, service)

        if parsed.mode == "export":
            export = await service.export()
            print(export.message)
            if export.file_path is not None:
                print(f"Wrote: {export.file_path}")
            return 0 if export.success else 1
    finally:
        await repository.close()

    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the application.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    try:
        settings = Settings()
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    if parsed.db is not None:
        settings.db_path = parsed.db
    if parsed.report is not None:
        settings.report_path = parsed.report
    if parsed.log_file is not None:
        settings.log_file = parsed.log_file

    configure_logging(
        level=parsed.log_level or settings.log_level,
        log_file=settings.log_file,
    )

    if parsed.mode is None:
        parser.print_help()
        return 0

    logger.info(f"career-watch v{__version__} running {parsed.mode}")

    from careerwatch.refresh.service import NotFoundError
    from careerwatch.store.repository import PersistenceError

    try:
        return asyncio.run(_dispatch(parsed, settings))
    except (NotFoundError, PersistenceError, ValueError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
