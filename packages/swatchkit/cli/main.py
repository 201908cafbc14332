"""Command-line interface for SwatchKit."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from swatchkit.core.color import ContrastResult, compliance_report
from swatchkit.core.config.loader import configure_logging, load_app_config
from swatchkit.core.config.models import AppConfig
from swatchkit.core.errors import FormatError, RangeError
from swatchkit.core.search import rank_swatches
from swatchkit.core.session import SwatchSession
from swatchkit.core.validation import ValidationReport

console = Console()
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def _mark(ok: bool) -> str:
    return "[green]✅[/green]" if ok else "[red]❌[/red]"


def _split_list(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------


def cmd_contrast(args: argparse.Namespace, session: SwatchSession) -> int:
    """Print the contrast ratio of two colors and their compliance levels."""
    try:
        result: ContrastResult = session.contrast(args.color1, args.color2, args.level, args.text_size)
        report = compliance_report(args.color1, args.color2)
    except FormatError as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return EXIT_USAGE

    if args.json:
        console.print_json(result.model_dump_json())
        return EXIT_OK if result.compliant else EXIT_FAILED

    console.print(f"[bold]{result.color1} on {result.color2}[/bold]: {result.ratio:.2f}:1")
    table = Table("Level", "Normal text", "Large text")
    for level, compliance in report.compliance.items():
        table.add_row(level.value, _mark(compliance.normal), _mark(compliance.large))
    console.print(f"Highest level: {report.highest_level.value}")
    console.print(table)
    console.print(
        f"{result.level.value} {result.text_size.value} (≥ {result.required_ratio}:1): "
        f"{_mark(result.compliant)}"
    )
    return EXIT_OK if result.compliant else EXIT_FAILED


def _print_report(report: ValidationReport) -> None:
    console.print(f"Colors: {', '.join(report.colors)}")
    table = Table("Rule", "Valid", "Errors", "Warnings")
    for outcome in report.results:
        table.add_row(
            outcome.rule_id,
            _mark(outcome.valid),
            "\n".join(outcome.errors),
            "\n".join(outcome.warnings),
        )
    console.print(table)
    for warning in report.warnings:
        if warning.startswith("Unknown validation rule"):
            console.print(f"[yellow]⚠ {warning}[/yellow]")
    if report.overall_rating is not None:
        console.print(f"Overall rating: {report.overall_rating:.2f}")
    console.print(f"Valid: {_mark(report.valid)}")


def cmd_validate(args: argparse.Namespace, session: SwatchSession) -> int:
    """Validate a swatch against the built-in (or selected) rules."""
    overrides: dict[str, object] = {}
    if args.level:
        overrides["wcag_level"] = args.level
    if args.text_size:
        overrides["text_size"] = args.text_size
    if args.min_contrast is not None:
        overrides["min_contrast"] = args.min_contrast
    if args.rules:
        overrides["rules"] = _split_list(args.rules)

    try:
        report = session.validate_swatch(args.colors, **overrides)
    except ValidationError as e:
        console.print(f"[red]ERROR: Invalid options: {e}[/red]")
        return EXIT_USAGE

    if args.json:
        console.print_json(report.model_dump_json())
    else:
        _print_report(report)
    return EXIT_OK if report.valid else EXIT_FAILED


async def _search(args: argparse.Namespace, session: SwatchSession) -> int:
    palette = _split_list(args.palette)
    async with session:
        try:
            result = await session.search_swatches(
                palette,
                args.arity,
                wcag_level=args.level,
                text_size=args.text_size,
                exhaustive=True if args.exhaustive else None,
                use_cache=not args.no_cache,
            )
        except RangeError as e:
            console.print(f"[red]ERROR: {e}[/red]")
            return EXIT_USAGE

    ranked = rank_swatches(result.valid_swatches)
    if args.top is not None:
        ranked = ranked[: args.top]

    if args.json:
        payload = result.model_copy(update={"valid_swatches": ranked})
        console.print_json(payload.model_dump_json())
        return EXIT_OK

    stats = result.stats
    console.print(
        f"[bold]{stats.compliant}[/bold] compliant swatch(es) of {result.arity} "
        f"from {len(palette)} colors ({result.wcag_level.value}/{result.text_size.value})"
    )
    console.print(
        f"   combinations: {stats.total_combinations}  validated: {stats.validated}  "
        f"rotations skipped: {stats.duplicates_skipped}  failed: {stats.failed}"
    )
    console.print(
        f"   {result.processing_ms:.0f}ms{' (cached)' if result.from_cache else ''}"
    )
    if ranked:
        table = Table("#", "Swatch", "Colors", "Rating")
        for i, swatch in enumerate(ranked, start=1):
            table.add_row(str(i), swatch.id, " ".join(swatch.hex_values), f"{swatch.overall_rating:.2f}")
        console.print(table)
    return EXIT_OK


def cmd_search(args: argparse.Namespace, session: SwatchSession) -> int:
    """Search a palette for compliant swatches."""
    return asyncio.run(_search(args, session))


async def _cache(args: argparse.Namespace, session: SwatchSession) -> int:
    async with session:
        cache = session.cache
        if args.action == "clear":
            cleared = await cache.clear()
            console.print("[green]Cache cleared[/green]" if cleared else "[red]Cache not cleared[/red]")
            return EXIT_OK if cleared else EXIT_FAILED
        if args.action == "cleanup":
            removed = await cache.cleanup(urgent=args.urgent)
            console.print(f"Removed {removed} entr{'y' if removed == 1 else 'ies'}")

        stats = cache.stats()
        table = Table("Stat", "Value")
        table.add_row("scope", session.scope_key)
        table.add_row("items", str(stats.item_count))
        table.add_row("size (bytes)", str(stats.total_size))
        table.add_row("hits", str(stats.hits))
        table.add_row("misses", str(stats.misses))
        table.add_row("hit rate", f"{stats.hit_rate:.1%}")
        console.print(table)
    return EXIT_OK


def cmd_cache(args: argparse.Namespace, session: SwatchSession) -> int:
    """Inspect or maintain the persistent cache."""
    return asyncio.run(_cache(args, session))


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------


def _add_level_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--level", choices=["AA", "AAA"], default=None, help="WCAG level (default: config)")
    p.add_argument(
        "--text-size", choices=["normal", "large"], default=None, help="Text size (default: config)"
    )


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="swatchkit",
        description="SwatchKit - WCAG color contrast checking and swatch generation",
    )
    p.add_argument("--config", default=None, help="Path to config file (yaml or json)")
    p.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    contrast = sub.add_parser("contrast", help="Contrast ratio of two colors")
    contrast.add_argument("color1")
    contrast.add_argument("color2")
    _add_level_args(contrast)
    contrast.add_argument("--json", action="store_true", help="Print JSON")
    contrast.set_defaults(func=cmd_contrast)

    validate = sub.add_parser("validate", help="Validate a swatch")
    validate.add_argument("colors", nargs="+")
    _add_level_args(validate)
    validate.add_argument("--min-contrast", type=float, default=None, help="Minimum contrast floor")
    validate.add_argument("--rules", default=None, help="Comma-separated rule ids")
    validate.add_argument("--json", action="store_true", help="Print JSON")
    validate.set_defaults(func=cmd_validate)

    search = sub.add_parser("search", help="Find compliant swatches in a palette")
    search.add_argument("--palette", required=True, help="Comma-separated colors")
    search.add_argument("--arity", type=int, required=True, help="Colors per swatch (2-7)")
    _add_level_args(search)
    search.add_argument("--top", type=int, default=None, help="Show the N best swatches")
    search.add_argument("--exhaustive", action="store_true", help="Try every cyclic arrangement")
    search.add_argument("--no-cache", action="store_true", help="Bypass the result cache")
    search.add_argument("--json", action="store_true", help="Print JSON")
    search.set_defaults(func=cmd_search)

    cache = sub.add_parser("cache", help="Cache maintenance")
    cache.add_argument("action", choices=["stats", "clear", "cleanup"])
    cache.add_argument("--urgent", action="store_true", help="Evict to the target size now")
    cache.set_defaults(func=cmd_cache)

    return p


def _load_config(path: str | None) -> AppConfig:
    return load_app_config(Path(path) if path else None)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)

    try:
        config = _load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]ERROR: Could not load config: {e}[/red]")
        return EXIT_USAGE

    if args.log_level:
        config = config.model_copy(
            update={"logging": config.logging.model_copy(update={"level": args.log_level})}
        )
    configure_logging(config)

    session = SwatchSession(config)
    logger.debug("Running command %s", args.cmd)
    return args.func(args, session)


if __name__ == "__main__":
    sys.exit(main())
