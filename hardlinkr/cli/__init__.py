"""Command-line interface."""

import json
import logging
import sys
from pathlib import Path

import click

from ..config.settings import load_config
from ..core.engine import DedupEngine
from ..core.errors import HardlinkrError
from ..core.formatter import format_outcome, format_size, report_to_dict
from ..core.models import OutcomeStatus

# Outcomes worth a line in the default (non-verbose) listing
NOTABLE_STATUSES = {OutcomeStatus.LINKED, OutcomeStatus.WOULD_LINK, OutcomeStatus.FAILED}


@click.command()
@click.argument(
    "directories",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Custom configuration file",
)
@click.option(
    "--dry-run", is_flag=True, help="Show what would be linked without making changes"
)
@click.option(
    "--min-size",
    type=click.IntRange(min=0),
    metavar="BYTES",
    help="Ignore files smaller than this many bytes",
)
@click.option(
    "--exclude",
    "exclude_patterns",
    multiple=True,
    metavar="PATTERN",
    help="Skip files and directories matching this glob (repeatable)",
)
@click.option(
    "--single-representative",
    is_flag=True,
    help="Keep only the first file per size/permission bucket as a link target",
)
@click.option(
    "--stop-on-error", is_flag=True, help="Abort the run on the first failed file"
)
@click.option(
    "--output-json", type=click.Path(path_type=Path), help="Export results to JSON file"
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def main(
    directories: tuple[Path, ...],
    config: Path | None,
    dry_run: bool,
    min_size: int | None,
    exclude_patterns: tuple[str, ...],
    single_representative: bool,
    stop_on_error: bool,
    output_json: Path | None,
    verbose: bool,
):
    """Replace duplicate files with hardlinks.

    DIRECTORIES: zero or more read-only reference directories followed by the
    target directory. Reference directories are indexed first and never
    modified; only files under the last directory are replaced.
    """
    settings = load_config(config)

    # Apply CLI overrides
    if dry_run:
        settings.linking.dry_run = True
    if min_size is not None:
        settings.scan.min_file_size = min_size
    if exclude_patterns:
        settings.scan.exclude_patterns.extend(exclude_patterns)
    if single_representative:
        settings.bucket_policy = "single"
    if stop_on_error:
        settings.continue_on_error = False
    if verbose:
        settings.log_level = "DEBUG"

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        filename=settings.log_file,
        format="%(levelname)s %(name)s: %(message)s",
    )

    *readonly_dirs, target_dir = directories

    click.echo("=" * 60)
    click.echo("Hardlink Deduplication")
    click.echo("=" * 60)
    for d in readonly_dirs:
        click.echo(f"Read-only:  {d}")
    click.echo(f"Target:     {target_dir}")
    click.echo(f"Buckets:    {settings.bucket_policy} representative(s) per key")
    if settings.linking.dry_run:
        click.echo("DRY RUN MODE - No changes will be made")
    click.echo()

    engine = DedupEngine(settings)
    aborted = False
    try:
        if readonly_dirs:
            engine.index_readonly(list(readonly_dirs))
        engine.dedup(target_dir)
    except HardlinkrError as e:
        aborted = True
        click.echo(click.style(f"Aborted: {e}", fg="red", bold=True), err=True)

    report = engine.report
    for outcome in report.outcomes:
        if verbose or outcome.status in NOTABLE_STATUSES:
            line = format_outcome(outcome)
            if outcome.status == OutcomeStatus.FAILED:
                line = click.style(line, fg="red")
            click.echo(line)

    summary = report.summary()
    click.echo(f"\n{'=' * 60}")
    click.echo("SUMMARY")
    click.echo(f"{'=' * 60}")
    click.echo(f"Files visited:    {summary['total_files']}")
    click.echo(f"Representatives:  {summary[OutcomeStatus.REGISTERED.value]}")
    if settings.linking.dry_run:
        click.echo(f"Would link:       {summary[OutcomeStatus.WOULD_LINK.value]}")
    else:
        click.echo(f"Linked:           {summary[OutcomeStatus.LINKED.value]}")
    click.echo(f"Already linked:   {summary[OutcomeStatus.ALREADY_LINKED.value]}")
    click.echo(f"Distinct content: {summary[OutcomeStatus.DISTINCT.value]}")
    click.echo(f"Skipped:          {summary[OutcomeStatus.SKIPPED.value]}")
    click.echo(f"Failed:           {summary[OutcomeStatus.FAILED.value]}")
    click.echo(f"Space reclaimed:  {format_size(summary['space_reclaimed'])}")

    if output_json:
        output_json.write_text(json.dumps(report_to_dict(report), indent=2))
        click.echo(f"\nResults exported to: {output_json}")

    if aborted or report.has_failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
