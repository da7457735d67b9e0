import logging
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

from abrscope.cmd.source import SourceCommand
from abrscope.core.exceptions import ManifestError
from abrscope.core.models import ValidationIssue, ValidationResult
from abrscope.core.validation import lint_manifest, summarize

logger = logging.getLogger(__name__)
console = Console()

SEVERITY_STYLE = {
    "error": "bold red",
    "warning": "yellow",
    "info": "blue",
}


class Validate(SourceCommand):
    """Standards compliance and best-practice reports."""

    def validate(self, source: str, base_url: Optional[str] = None) -> bool:
        """Print the compliance report. Returns ``True`` when compliant."""
        manifest = self.load(source, base_url, validate=True)
        result = manifest.validation
        if result is None:
            raise ManifestError("Standards validation could not be completed, see the log for details")

        self._print_summary(result)
        self._print_issues(result.issues)
        self._print_features(result)
        return result.compliant

    def lint(self, source: str, base_url: Optional[str] = None) -> bool:
        """Print best-practice findings. Returns ``True`` when there are no errors."""
        manifest = self.load(source, base_url, validate=False)
        issues = lint_manifest(manifest)
        summary = summarize(issues)

        if issues:
            table = Table(box=box.SIMPLE_HEAVY, header_style="bold cyan", show_edge=False)
            table.add_column("Severity")
            table.add_column("Category", style="dim")
            table.add_column("Message")
            for issue in issues:
                style = SEVERITY_STYLE[issue.severity]
                table.add_row(f"[{style}]{issue.severity}[/]", issue.category, issue.message)
            console.print(table)

        status = "[green]healthy[/]" if summary["healthy"] else "[red]unhealthy[/]"
        console.print(
            f"{status}: {summary['errors']} error(s), {summary['warnings']} warning(s), "
            f"{summary['info']} info"
        )
        return summary["healthy"]

    def _print_summary(self, result: ValidationResult):
        verdict = "[bold green]COMPLIANT[/]" if result.compliant else "[bold red]NOT COMPLIANT[/]"
        console.print()
        console.print(Rule(f"[bold]{result.playlist_type} ({result.version})", style="cyan"))
        console.print(
            f"{verdict}  {len(result.errors)} error(s), {len(result.warnings)} warning(s), "
            f"{len(result.info)} info, {len(result.checked_rules)} rules checked"
        )

    def _print_issues(self, issues: List[ValidationIssue]):
        if not issues:
            return

        table = Table(box=box.SIMPLE_HEAVY, header_style="bold cyan", show_edge=False, pad_edge=False)
        table.add_column("Line", justify="right", style="dim")
        table.add_column("Severity")
        table.add_column("Code")
        table.add_column("Message", overflow="fold")
        table.add_column("Reference", style="dim")

        for issue in issues:
            style = SEVERITY_STYLE[issue.severity]
            message = escape(issue.message)
            if issue.suggestion:
                message += f"\n[dim]→ {escape(issue.suggestion)}[/]"
            table.add_row(
                str(issue.line) if issue.line else "",
                f"[{style}]{issue.severity}[/]",
                issue.code,
                message,
                issue.spec_reference,
            )
        console.print(table)

    def _print_features(self, result: ValidationResult):
        if not result.detected_features:
            return
        console.print(Rule("[bold]Features", style="cyan"))
        for feature in result.detected_features:
            mark = "[green]✓[/]" if feature.detected else "[dim]·[/]"
            requires = f" [dim](v{feature.min_version}+)[/]" if feature.min_version else ""
            console.print(f"  {mark} {feature.name}{requires}")
        console.print()
