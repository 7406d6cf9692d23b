#!/usr/bin/env python3
"""
Find files parked by an interrupted hardlink replacement.

While replacing a duplicate, hardlinkr renames it to a sibling named
``<name>.<8 hex chars>.aside`` before linking. If the process dies between the
rename and the cleanup, that parked copy stays on disk. This script lists such
files and can reconcile them.

Usage:
    python find_stranded_temps.py <directory> [OPTIONS]

Examples:
    # List parked copies
    python find_stranded_temps.py /srv/mirror

    # Move parked copies back where the original path is missing,
    # and delete those whose original path holds identical content
    python find_stranded_temps.py /srv/mirror --fix --confirm

Options:
    --marker TEXT   Trailing marker of temporary names [default: aside]
    --fix           Restore or delete parked copies
    --confirm       Auto-confirm all operations (use with --fix)
"""

import os
from pathlib import Path

import click

from hardlinkr.core.equivalence import are_equivalent_paths
from hardlinkr.core.errors import HardlinkrError
from hardlinkr.core.linker import DEFAULT_TEMP_MARKER, find_stranded_temps


def reconcile(temp_path: Path, original: Path, auto_confirm: bool = False) -> str:
    """
    Reconcile one parked copy with its original path.

    Returns:
        "restored", "deleted", "kept" or "skipped"
    """
    if not original.exists():
        click.echo(f"  Original missing, will restore: {temp_path} -> {original}")
        if auto_confirm or click.confirm("  Restore?", default=False):
            os.rename(temp_path, original)
            click.echo(click.style("  ✓ Restored", fg="green"))
            return "restored"
        return "skipped"

    try:
        identical = are_equivalent_paths(temp_path, original)
    except HardlinkrError as e:
        click.echo(click.style(f"  ✗ Cannot compare: {e}", fg="red"))
        return "kept"

    if not identical:
        click.echo(
            click.style(
                f"  ⚠ {original} differs from parked copy, keeping both",
                fg="yellow",
            )
        )
        return "kept"

    click.echo(f"  Original holds identical content, will delete: {temp_path}")
    if auto_confirm or click.confirm("  Delete parked copy?", default=False):
        temp_path.unlink()
        click.echo(click.style("  ✓ Deleted", fg="green"))
        return "deleted"
    return "skipped"


@click.command()
@click.argument(
    "directory", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.option(
    "--marker",
    default=DEFAULT_TEMP_MARKER,
    show_default=True,
    help="Trailing marker of temporary file names",
)
@click.option("--fix", is_flag=True, help="Restore or delete parked copies")
@click.option(
    "--confirm", is_flag=True, help="Auto-confirm all operations (use with --fix)"
)
def main(directory: Path, marker: str, fix: bool, confirm: bool) -> None:
    """List (and optionally reconcile) parked copies under DIRECTORY."""
    if confirm and not fix:
        click.echo("Error: --confirm can only be used with --fix")
        return

    stranded = list(find_stranded_temps(directory, marker))
    if not stranded:
        click.echo("No stranded temporary files found.")
        return

    click.echo(f"Found {len(stranded)} stranded temporary file(s):")
    for temp_path, original in stranded:
        state = "present" if original.exists() else "MISSING"
        click.echo(f"  • {temp_path}  (original {state}: {original})")

    if not fix:
        return

    results: dict[str, int] = {}
    for temp_path, original in stranded:
        click.echo()
        outcome = reconcile(temp_path, original, auto_confirm=confirm)
        results[outcome] = results.get(outcome, 0) + 1

    click.echo()
    click.echo("=" * 60)
    click.echo("FIX SUMMARY")
    click.echo("=" * 60)
    for label in ("restored", "deleted", "kept", "skipped"):
        click.echo(f"{label.capitalize():<10}{results.get(label, 0)}")


if __name__ == "__main__":
    main()
