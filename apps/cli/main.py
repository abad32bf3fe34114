"""CLI application for PeerFix."""

import asyncio
import json
import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from core.compatibility import CompatibilityChecker
from core.constants import PLATFORM_PACKAGE
from core.errors import TemplateDiffError
from core.merge import (
    create_annotated_package_json,
    get_package_json_change_summary,
    merge_package_json_with_analysis,
)
from core.models import CompatibilityVerdict
from core.parse_node import parse_package_json
from core.registry import NpmRegistryClient
from core.template_diff import (
    TemplateDiffClient,
    clean_version,
    get_changelog_url,
    get_file_paths_to_show,
)

# Diffs and paths must not be re-wrapped
console = Console(soft_wrap=True)

STATUS_STYLES = {
    "compatible": "green",
    "warning": "yellow",
    "incompatible": "red",
    "unknown": "dim",
}


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def format_table_output(verdicts: list[CompatibilityVerdict]) -> Table:
    """Format verdicts as a rich table."""
    table = Table(title="Dependency compatibility")
    table.add_column("Package")
    table.add_column("Current")
    table.add_column("Recommended")
    table.add_column("Latest")
    table.add_column("Status")
    table.add_column("Notes")

    for verdict in verdicts:
        style = STATUS_STYLES.get(verdict.compatibility_status, "")
        notes = "breaking changes" if verdict.has_breaking_changes else ""
        table.add_row(
            verdict.package,
            verdict.current_version,
            verdict.recommended_version,
            verdict.latest_version,
            f"[{style}]{verdict.compatibility_status}[/{style}]" if style else verdict.compatibility_status,
            notes,
        )
    return table


def format_json_output(verdicts: list[CompatibilityVerdict], merged, summary) -> str:
    """Format JSON output."""
    return json.dumps(
        {
            "reports": [verdict.to_dict() for verdict in verdicts],
            "summary": {
                "added": summary.added,
                "removed": summary.removed,
                "updated": summary.updated,
                "unchanged": summary.unchanged,
            },
            "upgraded": merged.upgraded.data,
            "diff": merged.diff_text,
        },
        indent=2,
        ensure_ascii=False,
    )


async def run_analysis(
    checker: CompatibilityChecker, dependencies: dict[str, str], target_version: str
) -> list[CompatibilityVerdict]:
    """Run the batch analysis behind a progress bar."""
    with Progress(
        TextColumn("Analyzing dependencies"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("analyze", total=len(dependencies))

        def on_progress(current: int, total: int) -> None:
            progress.update(task, completed=current, total=total)

        return await checker.analyze_all_dependencies(dependencies, target_version, on_progress)


app = typer.Typer(
    name="peerfix",
    help="PeerFix - Upgrade React Native dependencies to peer-compatible versions",
    add_completion=False,
)


@app.command()
def analyze(
    file_path: str = typer.Argument(help="Path to package.json (use '-' for stdin)"),
    target_version: str = typer.Option(..., "--to", "-t", help="Target React Native version"),
    output: str | None = typer.Option(None, "--out", "-o", help="Write the upgraded package.json to a file"),
    format_type: str = typer.Option("table", "--format", help="Output format: table, json, diff, annotated"),
    platform: str = typer.Option(PLATFORM_PACKAGE, "--platform", help="Platform core package"),
    concurrency: int = typer.Option(1, "--concurrency", help="Registry lookups in flight"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Check dependencies against a target React Native version."""
    configure_logging(verbose)

    try:
        if file_path == "-":
            content = sys.stdin.read()
        else:
            path_obj = Path(file_path)
            if not path_obj.exists():
                console.print(f"Error: File {file_path} not found", style="red")
                raise typer.Exit(1)
            content = path_obj.read_text()

        manifest = parse_package_json(content)

        checker = CompatibilityChecker(
            registry=NpmRegistryClient(),
            platform_package=platform,
            max_concurrency=concurrency,
        )
        try:
            verdicts = asyncio.run(
                run_analysis(checker, manifest.all_dependencies(), target_version)
            )
        except Exception as e:
            logging.getLogger(__name__).debug("Batch analysis failed", exc_info=e)
            console.print("Failed to analyze dependencies. Please try again.", style="red")
            raise typer.Exit(1)

        merged = merge_package_json_with_analysis(
            manifest, verdicts, target_version, platform_package=platform
        )
        summary = get_package_json_change_summary(merged.original, merged.upgraded)

        if format_type == "json":
            console.print_json(format_json_output(verdicts, merged, summary))
        elif format_type == "diff":
            console.print(merged.diff_text, markup=False, highlight=False)
        elif format_type == "annotated":
            console.print(
                create_annotated_package_json(merged.upgraded, verdicts),
                markup=False,
                highlight=False,
            )
        else:
            console.print(format_table_output(verdicts))
            console.print(
                f"{len(summary.updated)} updated, {len(summary.unchanged)} unchanged"
            )

        if output:
            Path(output).write_text(merged.upgraded.to_json() + "\n")
            console.print(f"Wrote upgraded package.json to {output}")

        if not summary.updated:
            raise typer.Exit(2)  # No changes exit code

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)


@app.command("template-diff")
def template_diff(
    from_version: str = typer.Argument(help="Current React Native version"),
    to_version: str = typer.Argument(help="Target React Native version"),
    platform: str = typer.Option(PLATFORM_PACKAGE, "--platform", help="Platform package"),
    app_name: str | None = typer.Option(None, "--app-name", help="Your app's name"),
    app_package: str | None = typer.Option(None, "--app-package", help="Your app's package id"),
    show_diff: bool = typer.Option(False, "--show-diff", help="Print every hunk"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """List template files that changed between two React Native versions."""
    configure_logging(verbose)

    try:
        files = asyncio.run(
            TemplateDiffClient().fetch_template_diff(from_version, to_version, platform)
        )
    except TemplateDiffError as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)

    for file in files:
        old_path, new_path = get_file_paths_to_show(file, app_name, app_package)
        shown = new_path or old_path
        if file.type == "rename":
            shown = f"{old_path} -> {new_path}"
        console.print(
            f"[bold]{file.type:<7}[/bold] {escape(shown)} "
            f"[green]+{file.additions}[/green] [red]-{file.deletions}[/red]",
            highlight=False,
        )
        if show_diff:
            for hunk in file.hunks:
                console.print(hunk.content, style="cyan", markup=False)
                for change in hunk.changes:
                    console.print(f"{change.prefix}{change.content}", markup=False, highlight=False)

    changelog = get_changelog_url(clean_version(to_version), platform)
    if changelog:
        console.print(f"Changelog: {changelog}")


if __name__ == "__main__":
    app()
