from __future__ import annotations

import argparse
import datetime as dt
import os
from pathlib import Path
from typing import Dict, List, Optional

from rich.console import Console
from rich.table import Table

from .baseline import check_against_baseline, load_baseline
from .catalog import LANGUAGE_SUFFIX_RX
from .config import DEFAULT_CONFIG, ScanConfig
from .console import RichLogger
from .discovery import discover_modules
from .models import FileKind, ModuleInput
from .results import ResultStore, ResultWriter
from .scanner import ModuleScanner, scan_modules
from .translation import TranslationTable, TranslationTableError, default_header, read_table, write_table


def default_thread_count() -> int:
    return min(32, (os.cpu_count() or 4) + 4)


def _add_scan_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--root", default=".", help="Repository root (default: current directory).")
    p.add_argument(
        "--top-dirs",
        default=".",
        help="Comma separated directories under the root holding modules (default: the root itself).",
    )
    p.add_argument("--module-filter", help="Only scan modules whose directory name contains this text.")
    p.add_argument(
        "--all-bundles",
        action="store_true",
        help="Also match sources against non-primary resource bundles of their package.",
    )
    p.add_argument(
        "--threads",
        type=int,
        default=default_thread_count(),
        help="Worker threads for scanning modules (default: auto).",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose debug logs")


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="i18ncheck",
        description="Check string literals against resource bundles and round-trip translations through a table.",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Report unlocalized strings and unused or missing bundle keys.")
    _add_scan_arguments(check)
    check.add_argument("--summary-only", action="store_true", help="Print per-module summaries without findings.")
    check.add_argument(
        "--baseline",
        help="Bundle-format file of module=max_problems; fail when a module exceeds its count.",
    )
    check.add_argument("--json-out", help="Write findings.jsonl and summary.json to this folder.")
    check.add_argument(
        "--fail-on-problems",
        action="store_true",
        help="Exit with 1 when any problem is found.",
    )

    export = sub.add_parser("export", help="Export bundle entries to a translation table (CSV).")
    _add_scan_arguments(export)
    export.add_argument("--language", required=True, help="Target language suffix, e.g. ja or pt_BR.")
    export.add_argument("--output", required=True, help="CSV file to write.")

    imp = sub.add_parser("import", help="Regenerate translated bundles from a translation table (CSV).")
    _add_scan_arguments(imp)
    imp.add_argument("--language", required=True, help="Target language suffix, e.g. ja or pt_BR.")
    imp.add_argument("--input", required=True, help="CSV file to read.")

    return ap


def _split_top_dirs(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def _valid_language(value: str) -> bool:
    return LANGUAGE_SUFFIX_RX.fullmatch("_" + value) is not None


def _config_from_args(args) -> ScanConfig:
    return DEFAULT_CONFIG.with_overrides(scan_secondary_catalogs=True if args.all_bundles else None)


def _discover(args, logger: RichLogger) -> Optional[List[ModuleInput]]:
    root = Path(args.root).expanduser().resolve()
    if not root.is_dir():
        logger.error(f"Root folder not found: {root}")
        return None
    modules = discover_modules(root, _split_top_dirs(args.top_dirs), logger, args.module_filter)
    if not modules:
        logger.error(f"No modules found under {root}")
        return None
    logger.info(f"Modules: {len(modules)}")
    return modules


def _print_summary(console: Console, store: ResultStore) -> None:
    table = Table(title="I18N Summary", header_style="bold")
    table.add_column("Module", style="cyan")
    table.add_column("Sources", justify="right")
    table.add_column("Bundles", justify="right")
    table.add_column("Translated", justify="right")
    table.add_column("Problems", justify="right")
    for results in store.ordered():
        bundles = results.file_count(FileKind.PRIMARY_CATALOG) + results.file_count(FileKind.SECONDARY_CATALOG)
        table.add_row(
            results.name,
            str(results.file_count(FileKind.SOURCE)),
            str(bundles),
            str(results.file_count(FileKind.TRANSLATED_CATALOG)),
            str(results.problems_count),
        )
    console.print(table)


def run_check(args) -> int:
    console = Console()
    logger = RichLogger(console=console, verbose=args.verbose)
    started_at = dt.datetime.now().isoformat(timespec="seconds")

    baseline: Optional[Dict[str, int]] = None
    if args.baseline:
        try:
            baseline = load_baseline(Path(args.baseline).expanduser(), logger)
        except OSError as exc:
            logger.error(f"Failed to read baseline {args.baseline}: {exc}")
            return 2

    modules = _discover(args, logger)
    if modules is None:
        return 2

    config = _config_from_args(args)
    store, _ = scan_modules(modules, logger, config, threads=args.threads, console=console)

    for results in store.ordered():
        logger.section(f"Module {results.name}", results.render(details=not args.summary_only))
    _print_summary(console, store)

    if args.json_out:
        run_metadata: Dict[str, object] = {
            "root": str(Path(args.root).expanduser().resolve()),
            "top_dirs": _split_top_dirs(args.top_dirs),
            "module_filter": args.module_filter,
            "modules": [m.identity for m in modules],
            "settings": {
                "threads": args.threads,
                "all_bundles": config.scan_secondary_catalogs,
            },
            "started_at": started_at,
            "finished_at": dt.datetime.now().isoformat(timespec="seconds"),
        }
        ResultWriter(Path(args.json_out).expanduser(), logger).write_all(store, run_metadata)

    if baseline is not None:
        errors = check_against_baseline(store, baseline)
        for error in errors:
            logger.error(error)
        if errors:
            return 1
        logger.done("No module exceeds its baseline.")

    total = store.total_problems
    if args.fail_on_problems and total:
        return 1
    if logger.counts["WARN"]:
        logger.info(f"{logger.counts['WARN']} warnings while scanning.")
    logger.done(f"Found {total} potential problems in {len(store.ordered())} modules.")
    return 0


def run_export(args) -> int:
    console = Console()
    logger = RichLogger(console=console, verbose=args.verbose)

    if not _valid_language(args.language):
        logger.error(f"Invalid language suffix: {args.language}")
        return 2
    modules = _discover(args, logger)
    if modules is None:
        return 2

    _, scanners = scan_modules(modules, logger, _config_from_args(args), threads=args.threads, console=console)
    rows: List[List[str]] = []
    for scanner in scanners:
        module_rows = scanner.export_rows(args.language)
        logger.debug(f"{scanner.identity}: {len(module_rows)} rows")
        rows.extend(module_rows)

    output = Path(args.output).expanduser()
    try:
        write_table(output, rows)
    except OSError as exc:
        logger.error(f"Failed to write {output}: {exc}")
        return 1
    logger.done(f"Exported {len(rows)} entries to {output}")
    return 0


def _write_translations(
    scanners: List[ModuleScanner],
    language: str,
    header: List[str],
    table: TranslationTable,
    logger: RichLogger,
) -> Table:
    summary = Table(title="Imported Translations", header_style="bold")
    summary.add_column("Module", style="cyan")
    summary.add_column("Package")
    summary.add_column("Bundle")
    summary.add_column("Keys", justify="right")
    for scanner in scanners:
        for generated in scanner.generate_translations(language, header, table):
            generated.write()
            summary.add_row(
                generated.module,
                generated.package or ".",
                Path(generated.path).name,
                str(len(generated.lines) - len(header)),
            )
            logger.debug(f"Wrote {generated.path}")
    return summary


def run_import(args) -> int:
    console = Console()
    logger = RichLogger(console=console, verbose=args.verbose)

    if not _valid_language(args.language):
        logger.error(f"Invalid language suffix: {args.language}")
        return 2
    input_path = Path(args.input).expanduser()
    try:
        table = TranslationTable.from_rows(read_table(input_path), source=str(input_path))
    except OSError as exc:
        logger.error(f"Failed to read {input_path}: {exc}")
        return 2
    except TranslationTableError as exc:
        logger.error(str(exc))
        return 1
    logger.info(f"Translations in table: {len(table)}")

    modules = _discover(args, logger)
    if modules is None:
        return 2
    known = {m.identity for m in modules}
    for module in sorted(set(table.data) - known):
        logger.warn(f"Table names unknown module: {module}")

    _, scanners = scan_modules(modules, logger, _config_from_args(args), threads=args.threads, console=console)
    header = default_header(input_path.name)
    try:
        summary = _write_translations(scanners, args.language, header, table, logger)
    except OSError as exc:
        logger.error(f"Failed to write translated bundle: {exc}")
        return 1
    console.print(summary)
    logger.done(f"Imported {args.language} translations from {input_path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    if args.command == "check":
        return run_check(args)
    if args.command == "export":
        return run_export(args)
    if args.command == "import":
        return run_import(args)
    return 2
