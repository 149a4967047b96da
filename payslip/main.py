import argparse
import json
import sys
from collections.abc import Callable
from dataclasses import asdict
from pathlib import Path

from payslip.codes.directory import PREDEFINED_CODES, PREDEFINED_MODELS, get_model
from payslip.codes.parsing import parse_code_list
from payslip.config.settings import Settings
from payslip.consolidation.service import ConsolidationService
from payslip.database.connection import apply_schema, close_pool, init_pool
from payslip.database.exceptions import RepositoryError
from payslip.database.repositories.code_group_repository import CodeGroupRepository
from payslip.database.repositories.payroll_data_repository import PayrollDataRepository
from payslip.database.repositories.template_repository import TemplateRepository
from payslip.extraction.exceptions import InvalidSourceError
from payslip.logging.logger import Log
from payslip.pdf.exceptions import ExtractionError
from payslip.processor.exceptions import EmptyCodeListError, ProcessorError
from payslip.processor.file_loader import FileLoader
from payslip.processor.models import PayslipUpload
from payslip.processor.processor import build_processor

_HANDLED_ERRORS = (
    ProcessorError,
    InvalidSourceError,
    ExtractionError,
    RepositoryError,
    FileNotFoundError,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="payslip",
        description="Extract payroll line items from ERP/RH payslip PDFs",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    process = subparsers.add_parser("process", help="Extract items from a payslip PDF")
    process.add_argument("pdf", type=Path, help="Path to the payslip PDF")
    process.add_argument("--source", required=True, help="ERP or RH")
    wanted = process.add_mutually_exclusive_group(required=True)
    wanted.add_argument("--codes", help="Codes separated by commas or spaces")
    wanted.add_argument("--model", help="Use the codes of a predefined job model")
    wanted.add_argument("--template", help="Use the codes of a saved template")
    process.add_argument("--user", type=int, default=1, help="Owner user id")
    process.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the result without storing it",
    )

    consolidated = subparsers.add_parser("consolidate", help="Print the consolidated table")
    consolidated.add_argument("--user", type=int, default=1)
    consolidated.add_argument(
        "--chronological",
        action="store_true",
        help="Sort rows by period instead of upload order",
    )

    clear = subparsers.add_parser("clear", help="Delete all stored payslips of a user")
    clear.add_argument("--user", type=int, default=1)

    alias_add = subparsers.add_parser("alias-add", help="Group several codes under one name")
    alias_add.add_argument("--user", type=int, default=1)
    alias_add.add_argument("--name", required=True, help="Display name of the group")
    alias_add.add_argument("--codes", required=True, help="Codes separated by commas or spaces")

    alias_list = subparsers.add_parser("alias-list", help="List the code groups of a user")
    alias_list.add_argument("--user", type=int, default=1)

    alias_update = subparsers.add_parser(
        "alias-update", help="Rename a code group or change its codes"
    )
    alias_update.add_argument("id", type=int, help="Code group id")
    alias_update.add_argument("--user", type=int, default=1)
    alias_update.add_argument("--name", help="New display name")
    alias_update.add_argument("--codes", help="New codes separated by commas or spaces")

    alias_delete = subparsers.add_parser("alias-delete", help="Delete a code group")
    alias_delete.add_argument("id", type=int, help="Code group id")
    alias_delete.add_argument("--user", type=int, default=1)

    template_add = subparsers.add_parser("template-add", help="Save a named list of codes")
    template_add.add_argument("--user", type=int, default=1)
    template_add.add_argument("--name", required=True, help="Template name")
    template_add.add_argument("--codes", required=True, help="Codes separated by commas or spaces")

    template_list = subparsers.add_parser("template-list", help="List the templates of a user")
    template_list.add_argument("--user", type=int, default=1)

    template_update = subparsers.add_parser(
        "template-update", help="Rename a template or change its codes"
    )
    template_update.add_argument("id", type=int, help="Template id")
    template_update.add_argument("--user", type=int, default=1)
    template_update.add_argument("--name", help="New template name")
    template_update.add_argument("--codes", help="New codes separated by commas or spaces")

    template_delete = subparsers.add_parser("template-delete", help="Delete a template")
    template_delete.add_argument("id", type=int, help="Template id")
    template_delete.add_argument("--user", type=int, default=1)

    subparsers.add_parser("codes", help="List predefined codes and job models")
    return parser


def _normalize_codes(raw: str) -> str:
    codes = parse_code_list(raw)
    if not codes:
        raise EmptyCodeListError("No valid codes provided")
    return ",".join(codes)


def _update_fields(args: argparse.Namespace) -> tuple[str | None, str | None]:
    if args.name is None and args.codes is None:
        raise SystemExit("Nothing to update: pass --name and/or --codes")
    codes = _normalize_codes(args.codes) if args.codes is not None else None
    return args.name, codes


def _resolve_codes(args: argparse.Namespace) -> str:
    if args.codes:
        return args.codes
    if args.template:
        return TemplateRepository().find_by_name(args.user, args.template).codes
    model = get_model(args.model)
    if model is None:
        raise SystemExit(f"Unknown model '{args.model}'")
    return ",".join(model.codes)


def _print_json(payload: object) -> None:
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def run_process(args: argparse.Namespace, settings: Settings) -> None:
    content = FileLoader(settings.max_upload_bytes).load(args.pdf)
    upload = PayslipUpload(
        user_id=args.user,
        source=args.source,
        codes=_resolve_codes(args),
        content=content,
        filename=args.pdf.name,
    )
    processor = build_processor(settings, persist=not args.dry_run)
    payslips = processor.process(upload)
    _print_json([payslip.to_dict() for payslip in payslips])


def run_consolidate(args: argparse.Namespace) -> None:
    service = ConsolidationService(PayrollDataRepository(), CodeGroupRepository())
    result = service.consolidate_for_user(args.user, chronological=args.chronological)
    _print_json(result.as_dict())


def run_clear(args: argparse.Namespace) -> None:
    deleted = PayrollDataRepository().clear_by_user(args.user)
    Log.info(f"Deleted {deleted} payslips of user {args.user}")


def run_alias_add(args: argparse.Namespace) -> None:
    group_id = CodeGroupRepository().create(args.user, args.name, _normalize_codes(args.codes))
    Log.info(f"Created code group {group_id} '{args.name}'")


def run_alias_list(args: argparse.Namespace) -> None:
    records = CodeGroupRepository().find_records_by_user(args.user)
    _print_json([asdict(record) for record in records])


def run_alias_update(args: argparse.Namespace) -> None:
    name, codes = _update_fields(args)
    record = CodeGroupRepository().update(args.user, args.id, display_name=name, codes=codes)
    _print_json(asdict(record))


def run_alias_delete(args: argparse.Namespace) -> None:
    CodeGroupRepository().delete(args.user, args.id)
    Log.info(f"Deleted code group {args.id}")


def run_template_add(args: argparse.Namespace) -> None:
    template_id = TemplateRepository().create(args.user, args.name, _normalize_codes(args.codes))
    Log.info(f"Created template {template_id} '{args.name}'")


def run_template_list(args: argparse.Namespace) -> None:
    _print_json([asdict(record) for record in TemplateRepository().find_by_user(args.user)])


def run_template_update(args: argparse.Namespace) -> None:
    name, codes = _update_fields(args)
    record = TemplateRepository().update(args.user, args.id, name=name, codes=codes)
    _print_json(asdict(record))


def run_template_delete(args: argparse.Namespace) -> None:
    TemplateRepository().delete(args.user, args.id)
    Log.info(f"Deleted template {args.id}")


def run_codes() -> None:
    _print_json(
        {
            "codes": [
                {"code": c.code, "description": c.description, "category": c.category}
                for c in PREDEFINED_CODES
            ],
            "models": [
                {"name": m.name, "description": m.description, "codes": list(m.codes)}
                for m in PREDEFINED_MODELS
            ],
        }
    )


_DATABASE_COMMANDS: dict[str, Callable[[argparse.Namespace], None]] = {
    "consolidate": run_consolidate,
    "clear": run_clear,
    "alias-add": run_alias_add,
    "alias-list": run_alias_list,
    "alias-update": run_alias_update,
    "alias-delete": run_alias_delete,
    "template-add": run_template_add,
    "template-list": run_template_list,
    "template-update": run_template_update,
    "template-delete": run_template_delete,
}


def _run(args: argparse.Namespace, settings: Settings) -> None:
    if args.command == "codes":
        run_codes()
        return
    if args.command == "process" and args.dry_run and args.template is None:
        run_process(args, settings)
        return

    init_pool(settings)
    try:
        apply_schema()
        if args.command == "process":
            run_process(args, settings)
        else:
            _DATABASE_COMMANDS[args.command](args)
    finally:
        close_pool()


def main(argv: list[str] | None = None) -> None:
    """Entry point: parse args -> configure logging -> run the command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    try:
        _run(args, settings)
    except _HANDLED_ERRORS as exc:
        Log.error(f"Command '{args.command}' failed: {exc}")
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
