"""
Command-line interface for kousei.

This module provides CLI commands for linting text documents, applying
fixes, restoring backups, listing rules and serving the HTTP API.
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.text import Text

from .. import __version__
from ..core.aggregator import DocumentStatus, FindingAggregator
from ..core.config import LinterConfig
from ..core.errors import KouseiError
from ..core.models import Severity
from ..core.runner import LintRunner
from ..rules.registry import describe_rules
from .backups import DEFAULT_BACKUP_DIR, create_backup, restore_from_backup

console = Console()

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

DOCUMENT_EXTENSIONS = ('.txt', '.md', '.markdown', '.rst')

SEVERITY_STYLES = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}

STATUS_STYLES = {
    DocumentStatus.OK: "green",
    DocumentStatus.INFO: "cyan",
    DocumentStatus.WARNING: "yellow",
    DocumentStatus.ERROR: "bold red",
}


def load_config(config_path: Optional[str]) -> LinterConfig:
    """Load the configuration file, or the defaults when none is given."""
    if not config_path:
        return LinterConfig()
    try:
        return LinterConfig.from_file(config_path)
    except KouseiError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        sys.exit(1)


def collect_documents(paths, recursive: bool = True) -> List[str]:
    """Expand directories into the text documents they contain."""
    documents = []
    for path in paths:
        if os.path.isfile(path):
            documents.append(path)
            continue
        pattern = "**/*" if recursive else "*"
        for candidate in sorted(Path(path).glob(pattern)):
            if candidate.is_file() and candidate.suffix.lower() in DOCUMENT_EXTENSIONS:
                documents.append(str(candidate))
    return documents


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def main(verbose):
    """kousei - lint text documents and apply suggested fixes."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        console.print("[dim]Verbose mode enabled[/dim]")


@main.command()
@click.argument('paths', nargs=-1, required=True, type=click.Path(exists=True))
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True), help='JSON configuration file')
@click.option('--recursive/--no-recursive', default=True, help='Lint directories recursively')
@click.option('--output', '-o', type=click.Path(), help='Output file for results (JSON format)')
@click.option('--show-details', is_flag=True, help='Show every finding')
def lint(paths, config_path, recursive, output, show_details):
    """Lint files or directories and report findings."""
    config = load_config(config_path)
    runner = LintRunner(config)
    aggregator = FindingAggregator()

    documents = collect_documents(paths, recursive=recursive)
    if not documents:
        console.print("[yellow]No documents found to lint[/yellow]")
        return

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console
    ) as progress:
        task = progress.add_task("Linting documents...", total=None)

        try:
            for document in documents:
                progress.update(task, description=f"Linting {Path(document).name}...")
                aggregator.add_result(document, runner.lint_file(document))
        except (OSError, UnicodeDecodeError, KouseiError) as e:
            console.print(f"[red]Error during lint: {e}[/red]")
            sys.exit(1)

    display_lint_results(aggregator, show_details)

    if output:
        save_report_to_file(aggregator, output)
        console.print(f"[green]Results saved to {output}[/green]")

    sys.exit(aggregator.exit_code())


@main.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True), help='JSON configuration file')
@click.option('--severity', '-s', 'severities', multiple=True,
              type=click.Choice([s.value for s in Severity]),
              help='Only apply fixes of findings with this severity (repeatable)')
@click.option('--backup/--no-backup', default=True, help='Create a backup before writing')
@click.option('--dry-run', is_flag=True, help='Print the corrected text without writing it')
def fix(path, config_path, severities, backup, dry_run):
    """Apply the fixes offered for a file."""
    config = load_config(config_path)
    runner = LintRunner(config)

    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            document = f.read()
        result = runner.lint_text(document, path)
    except (OSError, UnicodeDecodeError, KouseiError) as e:
        console.print(f"[red]Error linting {path}: {e}[/red]")
        sys.exit(1)

    findings = list(result.findings)
    if severities:
        findings = [f for f in findings if f.severity.value in severities]

    outcome = runner.fixer.apply(document, findings)
    console.print(f"{result.total_issues} issues, {result.fixable_issues} fixable, "
                  f"{outcome.applied} fixes applied, {len(outcome.rejected)} skipped (overlap)")

    if dry_run:
        console.print(Panel(Text(outcome.text), title="Corrected Text", border_style="green"))
        return

    if outcome.text == document:
        console.print("[yellow]No changes to write[/yellow]")
        return

    if backup and create_backup(path, DEFAULT_BACKUP_DIR) is None:
        console.print(f"[red]Failed to create backup for {path}; file left unchanged[/red]")
        sys.exit(1)

    try:
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(outcome.text)
    except OSError as e:
        console.print(f"[red]Failed to write {path}: {e}[/red]")
        sys.exit(1)

    logger.info(f"Wrote {outcome.applied} fixes to {path}")
    console.print(f"[green]✓[/green] {Path(path).name}: {outcome.applied} fixes applied")


@main.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
def restore(path):
    """Restore a file from its most recent backup."""
    if restore_from_backup(path, DEFAULT_BACKUP_DIR):
        console.print(f"[green]Successfully restored {path} from backup[/green]")
    else:
        console.print(f"[red]Failed to restore {path} - no backup found or restore failed[/red]")
        sys.exit(1)


@main.command()
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True), help='JSON configuration file')
def rules(config_path):
    """List the known rules and their settings."""
    config = load_config(config_path)

    table = Table(title="Rules")
    table.add_column("Rule", style="cyan")
    table.add_column("Enabled", justify="center")
    table.add_column("Severity", justify="center")
    table.add_column("Description", style="dim")

    for rule in describe_rules(config):
        enabled = "[green]yes[/green]" if rule['enabled'] else "[red]no[/red]"
        table.add_row(rule['id'], enabled, rule['severity'], rule['description'])

    console.print(table)


@main.command()
@click.option('--host', default='127.0.0.1', help='Host to bind to')
@click.option('--port', default=3000, help='Port to bind to')
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True), help='JSON configuration file')
def serve(host, port, debug, config_path):
    """Run the HTTP API."""
    from ..server.app import create_app

    config = load_config(config_path)
    console.print(f"[bold green]Serving kousei API at http://{host}:{port}[/bold green]")
    console.print("[dim]Press Ctrl+C to stop[/dim]")

    try:
        app = create_app(config)
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped[/yellow]")


def display_lint_results(aggregator, show_details):
    """Display lint results as a summary panel and a documents table."""
    summary = aggregator.generate_summary()

    summary_text = f"""
Documents: {summary.total_documents}
Clean: {summary.ok_documents}
Success Rate: {summary.success_rate:.1f}%
Total Issues: {summary.total_issues}
Fixable: {summary.fixable_issues}
Errors: {summary.severity_distribution.get('error', 0)}
    """.strip()

    console.print(Panel(summary_text, title="Lint Summary", border_style="blue"))

    table = Table(title="Documents")
    table.add_column("Document", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Issues", justify="center")
    table.add_column("Fixable", justify="center")

    for info in aggregator.documents:
        style = STATUS_STYLES.get(info.status, "white")
        table.add_row(
            info.name,
            f"[{style}]{info.status.value}[/{style}]",
            str(info.issue_count),
            str(info.fixable_count)
        )

    console.print(table)

    if show_details:
        for info in aggregator.documents:
            if info.result.findings:
                display_findings(info)


def display_findings(info):
    """Display every finding of one document."""
    table = Table(title=info.path)
    table.add_column("Line:Col", justify="right")
    table.add_column("Severity", justify="center")
    table.add_column("Rule", style="cyan")
    table.add_column("Message")
    table.add_column("Fix", justify="center")

    for finding in info.result.findings:
        style = SEVERITY_STYLES.get(finding.severity, "white")
        message = escape(finding.message)
        if finding.notes:
            message += f" [dim]({escape('; '.join(finding.notes))})[/dim]"
        table.add_row(
            f"{finding.position.line + 1}:{finding.position.column + 1}",
            f"[{style}]{finding.severity.value}[/{style}]",
            finding.rule_id,
            message,
            "✓" if finding.fix else ""
        )

    console.print(table)


def save_report_to_file(aggregator, output_path):
    """Save the aggregated report as JSON."""
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(aggregator.export_report(), f, indent=2, ensure_ascii=False)


if __name__ == '__main__':
    main()
