"""Lead console: audience builder, saved runs and campaign allocation.

Usage:
  # Preview the first page of an audience
  python console.py preview --industry Technology --job-level Senior --has-email

  # Save the audience as a named run
  python console.py save --name "Tech Leads" --industry Technology --job-level Senior

  # List saved runs, then allocate 50 contacts from one into a campaign
  python console.py runs
  python console.py allocate --run-id <uuid> --campaign-id <uuid> --count 50 --enrichment full

  # Bulk upload contacts from a spreadsheet
  python console.py template contacts --out contacts_template.xlsx
  python console.py upload contacts contacts.xlsx
"""
import argparse
import asyncio
import json
import logging
import sys
from datetime import date
from pathlib import Path
from uuid import UUID

from dateutil.relativedelta import relativedelta
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from crm_config import configure_logging
from db.connection import dispose_engine, get_db
from db.gateway import SqlAllocationStore, SqlMasterDataLookup, SqlQueryService, SqlRunStore
from db.repositories import campaigns as campaign_repo
from db.repositories import master_data as master_repo
from schemas.allocation import EnrichmentLevel
from schemas.audience import AudiencePage, AudienceResultRow, FilterSet
from schemas.crm import CampaignIn, CampaignOut
from services import bulk_upload, dashboard
from services.allocation import AllocationReconciler
from services.audience_client import AudienceQueryClient
from services.errors import AudienceError
from services.runs import AudienceRunLifecycle

logger = logging.getLogger(__name__)


def _filters_from_args(args, parser: argparse.ArgumentParser = None) -> FilterSet:
    raw = json.loads(args.filters_json) if args.filters_json else {}
    if not isinstance(raw, dict):
        message = "--filters-json must be a JSON object"
        if parser is not None:
            parser.error(message)
        raise ValueError(message)
    for field in ("industry", "city_id", "job_level", "department",
                  "employee_min", "employee_max", "text_search"):
        value = getattr(args, field)
        if value is not None:
            raw[field] = value
    if args.has_email:
        raw["has_email"] = True
    if args.has_phone:
        raw["has_phone"] = True
    return FilterSet.model_validate(raw)


def _lifecycle() -> AudienceRunLifecycle:
    return AudienceRunLifecycle(AudienceQueryClient(SqlQueryService()), SqlRunStore())


def _print_rows(rows: list[AudienceResultRow]) -> None:
    for row in rows:
        print(
            f"  {row.contact_id:>8}  {row.full_name or '-':<28} {row.email or '-':<32} "
            f"{row.company_name or '-':<28} {row.location or '-'}"
        )


def _print_page(page: AudiencePage) -> None:
    if not page.rows:
        print("  No contacts match these filters.")
        return
    _print_rows(page.rows)
    print(
        f"\n  Showing {page.first_index}-{page.last_index} of {page.total_count} "
        f"(page {page.page} of {page.total_pages})"
    )


async def run_preview(filters: FilterSet, page: int, page_size: int, search: bool = False) -> AudiencePage:
    client = AudienceQueryClient(SqlQueryService(), page_size=page_size)
    if search:
        result = await client.search(filters, page=page)
    else:
        result = await client.preview(filters, page=page)
    print(f"\n[Audience] {result.total_count} matching contacts")
    _print_page(result)
    return result


async def run_save(filters: FilterSet, name: str, notes: str = None) -> None:
    run = await _lifecycle().save(filters, name, notes)
    print(f"\n[Saved] {run.display_name} ({run.id})")
    print(f"  Contacts: {run.total_results}")


async def run_list_runs() -> None:
    runs = await _lifecycle().list_runs()
    if not runs:
        print("No saved audience runs yet.")
        return
    for run in runs:
        created = run.created_at.strftime("%Y-%m-%d %H:%M") if run.created_at else "-"
        print(f"  {run.id}  {run.display_name:<32} {run.total_results:>7} contacts  {created}")


async def run_rename(run_id: UUID, name: str, notes: str = None) -> None:
    run = await _lifecycle().rename(run_id, name, notes)
    print(f"Renamed run {run.id} to {run.display_name}")


async def run_delete(run_id: UUID) -> None:
    deleted = await _lifecycle().delete(run_id)
    print(f"Deleted run {run_id}" if deleted else f"Run {run_id} not found")


async def run_results(run_id: UUID, limit: int = None) -> None:
    rows = await _lifecycle().fetch_results(run_id, limit=limit)
    print(f"\n[Results] {len(rows)} contacts in run {run_id}")
    _print_rows(rows)


async def run_allocate(
    run_id: UUID,
    campaign_id: UUID,
    count: int,
    enrichment: EnrichmentLevel,
    file_name: str = None,
    description: str = None,
) -> int:
    lifecycle = _lifecycle()
    run = await lifecycle.get(run_id)
    if run is None:
        print(f"Run {run_id} not found", file=sys.stderr)
        return 1
    reconciler = AllocationReconciler(SqlQueryService(), SqlMasterDataLookup(), SqlAllocationStore())
    summary = await reconciler.allocate(
        run, campaign_id, count, enrichment, file_name=file_name, description=description
    )
    print(f"\n[Allocate] {run.display_name} -> campaign {campaign_id}")
    print(f"  Allocated: {summary.allocated}")
    if summary.campaign_file_id:
        print(f"  Campaign file: {summary.campaign_file_id}")
    for error in summary.errors:
        print(f"  Failed ({summary.failed} contacts): {error.message}")
    return 0 if summary.ok else 1


async def run_summary() -> None:
    contacts = await dashboard.contact_summary(SqlQueryService())
    stats = await dashboard.dashboard_stats()
    print("\n[Contacts]")
    print(f"  Total: {contacts.total}")
    print(f"  With email: {contacts.with_email}")
    print(f"  With mobile: {contacts.with_mobile}")
    print(f"  New (30 days): {contacts.new_30d}")
    print("\n[Dashboard]")
    print(f"  Companies: {stats.total_companies}")
    print(f"  Active campaigns: {stats.active_campaigns}")
    print(f"  Response rate: {stats.response_rate:.1f}%")


async def run_options(kind: str, add_json: str = None, delete_id: int = None) -> None:
    async with get_db() as session:
        if add_json:
            entry = await master_repo.add_entry(session, kind, json.loads(add_json))
            print(f"Added {kind} entry {entry!r}")
        if delete_id is not None:
            deleted = await master_repo.delete_entry(session, kind, delete_id)
            print(f"Deleted {kind} entry {delete_id}" if deleted else f"{kind} entry {delete_id} not found")
        if add_json or delete_id is not None:
            return
        entries = await master_repo.list_entries(session, kind)
    _, pk, label = master_repo.MASTER_TABLES[kind]
    for entry in entries:
        print(f"  {getattr(entry, pk.key):>6}  {getattr(entry, label.key) or '-'}")


async def run_campaigns(args) -> None:
    async with get_db() as session:
        if args.action == "list":
            for campaign in await campaign_repo.list_campaigns(session):
                c = CampaignOut.model_validate(campaign)
                print(
                    f"  {c.id}  {c.name:<28} {c.client_name:<20} "
                    f"{c.start_date} -> {c.end_date}  list size {c.list_size}"
                )
        elif args.action == "add":
            start = args.start or date.today()
            end = args.end or start + relativedelta(months=1)
            data = CampaignIn(
                name=args.name,
                start_date=start,
                end_date=end,
                list_size=args.list_size,
                client_name=args.client,
                servicing_lead=args.lead,
            )
            campaign = await campaign_repo.create(session, data.model_dump())
            print(f"Created campaign {campaign.id} ({campaign.name})")
        elif args.action == "update":
            existing = await campaign_repo.get(session, args.id)
            if existing is None:
                print(f"Campaign {args.id} not found", file=sys.stderr)
                return
            merged = CampaignIn.model_validate(existing, from_attributes=True).model_dump()
            for field, value in (
                ("name", args.name), ("start_date", args.start), ("end_date", args.end),
                ("list_size", args.list_size), ("client_name", args.client),
                ("servicing_lead", args.lead),
            ):
                if value is not None:
                    merged[field] = value
            data = CampaignIn.model_validate(merged)
            await campaign_repo.update_campaign(session, args.id, data.model_dump())
            print(f"Updated campaign {args.id}")
        elif args.action == "delete":
            deleted = await campaign_repo.delete_campaign(session, args.id)
            print(f"Deleted campaign {args.id}" if deleted else f"Campaign {args.id} not found")


async def run_upload(kind: str, path: Path) -> int:
    rows = bulk_upload.read_sheet(path)
    print(f"\n[Upload] {len(rows)} {kind} rows from {path}")
    if kind == "contacts":
        summary = await bulk_upload.upload_contacts(rows)
    else:
        summary = await bulk_upload.upload_companies(rows)
    print(f"  Inserted: {summary.inserted}")
    print(f"  Updated: {summary.updated}")
    print(f"  Failed: {summary.failed}")
    for error in summary.errors:
        print(f"    row {error.row}: {error.message}")
    if summary.failed > len(summary.errors):
        print(f"    ... and {summary.failed - len(summary.errors)} more")
    return 0 if not summary.failed else 1


async def _run(coro):
    try:
        return await coro
    finally:
        await dispose_engine()


def _add_filter_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--industry")
    parser.add_argument("--city-id", dest="city_id")
    parser.add_argument("--job-level", dest="job_level")
    parser.add_argument("--department")
    parser.add_argument("--has-email", action="store_true", default=False)
    parser.add_argument("--has-phone", action="store_true", default=False)
    parser.add_argument("--employee-min", dest="employee_min")
    parser.add_argument("--employee-max", dest="employee_max")
    parser.add_argument("--search", dest="text_search", help="Free-text search")
    parser.add_argument("--filters-json", help="Filters as a JSON object (flags override)")


def _iso_date(value: str) -> date:
    return date.fromisoformat(value)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lead console: audiences, runs and campaigns")
    sub = parser.add_subparsers(dest="command")

    for name, help_text in (
        ("preview", "Preview one page of an audience"),
        ("search", "Search one page of an audience"),
    ):
        p = sub.add_parser(name, help=help_text)
        _add_filter_args(p)
        p.add_argument("--page", type=int, default=1)
        p.add_argument("--page-size", type=int, default=None)

    save = sub.add_parser("save", help="Build and save an audience run")
    _add_filter_args(save)
    save.add_argument("--name", required=True)
    save.add_argument("--notes")

    sub.add_parser("runs", help="List saved audience runs")

    rename = sub.add_parser("rename", help="Rename a saved run")
    rename.add_argument("--run-id", type=UUID, required=True)
    rename.add_argument("--name", required=True)
    rename.add_argument("--notes")

    delete_run = sub.add_parser("delete-run", help="Delete a saved run")
    delete_run.add_argument("--run-id", type=UUID, required=True)

    results = sub.add_parser("results", help="Show the contacts in a saved run")
    results.add_argument("--run-id", type=UUID, required=True)
    results.add_argument("--limit", type=int, default=None)

    allocate = sub.add_parser("allocate", help="Allocate contacts from a run into a campaign")
    allocate.add_argument("--run-id", type=UUID, required=True)
    allocate.add_argument("--campaign-id", type=UUID, required=True)
    allocate.add_argument("--count", type=int, required=True)
    allocate.add_argument(
        "--enrichment",
        choices=[level.value for level in EnrichmentLevel],
        default=EnrichmentLevel.BASIC.value,
    )
    allocate.add_argument("--file-name")
    allocate.add_argument("--description")

    sub.add_parser("summary", help="Contact and campaign headline numbers")

    options = sub.add_parser("options", help="List or edit master data")
    options.add_argument("kind", choices=list(master_repo.MASTER_TABLES))
    options.add_argument("--add-json", help="Insert an entry from a JSON object")
    options.add_argument("--delete", type=int, dest="delete_id", help="Delete the entry with this id")

    camp = sub.add_parser("campaigns", help="List, add, update or delete campaigns")
    camp.add_argument("action", choices=["list", "add", "update", "delete"])
    camp.add_argument("--id", type=UUID)
    camp.add_argument("--name")
    camp.add_argument("--client")
    camp.add_argument("--lead", help="Servicing lead")
    camp.add_argument("--start", type=_iso_date, help="Start date (YYYY-MM-DD, default today)")
    camp.add_argument("--end", type=_iso_date, help="End date (default one month after start)")
    camp.add_argument("--list-size", type=int, default=None)

    upload = sub.add_parser("upload", help="Bulk upload contacts or companies")
    upload.add_argument("kind", choices=["contacts", "companies"])
    upload.add_argument("path", type=Path)

    template = sub.add_parser("template", help="Write a bulk upload template")
    template.add_argument("kind", choices=["contacts", "companies"])
    template.add_argument("--out", type=Path, default=None)

    return parser


def _dispatch(parser: argparse.ArgumentParser, args) -> int:
    if args.command in ("preview", "search"):
        asyncio.run(_run(run_preview(
            _filters_from_args(args, parser),
            page=args.page,
            page_size=args.page_size,
            search=args.command == "search",
        )))
    elif args.command == "save":
        asyncio.run(_run(run_save(_filters_from_args(args, parser), args.name, args.notes)))
    elif args.command == "runs":
        asyncio.run(_run(run_list_runs()))
    elif args.command == "rename":
        asyncio.run(_run(run_rename(args.run_id, args.name, args.notes)))
    elif args.command == "delete-run":
        asyncio.run(_run(run_delete(args.run_id)))
    elif args.command == "results":
        asyncio.run(_run(run_results(args.run_id, args.limit)))
    elif args.command == "allocate":
        return asyncio.run(_run(run_allocate(
            run_id=args.run_id,
            campaign_id=args.campaign_id,
            count=args.count,
            enrichment=EnrichmentLevel(args.enrichment),
            file_name=args.file_name,
            description=args.description,
        )))
    elif args.command == "summary":
        asyncio.run(_run(run_summary()))
    elif args.command == "options":
        asyncio.run(_run(run_options(args.kind, args.add_json, args.delete_id)))
    elif args.command == "campaigns":
        if args.action in ("update", "delete") and args.id is None:
            parser.error(f"campaigns {args.action} requires --id")
        if args.action == "add":
            if args.list_size is None:
                args.list_size = 0
            missing = [f"--{f}" for f in ("name", "client", "lead") if not getattr(args, f)]
            if missing:
                parser.error(f"campaigns add requires {', '.join(missing)}")
        asyncio.run(_run(run_campaigns(args)))
    elif args.command == "upload":
        return asyncio.run(_run(run_upload(args.kind, args.path)))
    elif args.command == "template":
        out = bulk_upload.write_template(args.kind, args.out or Path(f"{args.kind}_template.xlsx"))
        print(f"Template written to {out}")
    else:
        parser.print_help()
        return 1
    return 0


def main(argv=None) -> int:
    configure_logging()
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    try:
        return _dispatch(parser, args)
    except AudienceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except ValidationError as exc:
        print(f"Invalid input: {exc}", file=sys.stderr)
        return 2
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except SQLAlchemyError as exc:
        logger.warning("Database command failed: %s", exc, exc_info=True)
        print(f"Error: database operation failed: {exc}", file=sys.stderr)
        return 1
    except (RuntimeError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
