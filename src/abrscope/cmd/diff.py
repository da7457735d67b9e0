import logging
from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from abrscope.cmd.source import SourceCommand
from abrscope.core.utils.diff import diff_manifests
from abrscope.core.utils.export import format_bitrate

logger = logging.getLogger(__name__)
console = Console()


class Diff(SourceCommand):

    def diff(self, old: str, new: str, base_url: Optional[str] = None) -> bool:
        """Print the differences between two manifests. Returns ``has_changes``."""
        before = self.load(old, base_url, validate=False)
        after = self.load(new, base_url, validate=False)
        result = diff_manifests(before, after)

        if not result.has_changes:
            console.print("[green]No changes.[/]")
            return False

        table = Table(box=box.SIMPLE_HEAVY, header_style="bold cyan", show_edge=False)
        table.add_column("")
        table.add_column("ID", style="dim")
        table.add_column("Type")
        table.add_column("Bitrate", justify="right")
        table.add_column("Resolution", justify="right")
        table.add_column("Codecs")

        for marker, variants in (
            ("[green]+[/]", result.variants_added),
            ("[red]-[/]", result.variants_removed),
            ("[yellow]~[/]", result.variants_changed),
        ):
            for v in variants:
                table.add_row(
                    marker,
                    escape(v.id),
                    v.type.value,
                    format_bitrate(v.bitrate),
                    str(v.resolution) if v.resolution else "",
                    escape(", ".join(v.codecs)),
                )

        if table.row_count:
            console.print(table)

        if result.metadata_changed:
            old_meta, new_meta = before.metadata, after.metadata
            console.print("[yellow]Metadata changed:[/]")
            for name in ("type", "duration", "encrypted"):
                a, b = getattr(old_meta, name), getattr(new_meta, name)
                if a != b:
                    console.print(f"  {name}: {getattr(a, 'value', a)} → {getattr(b, 'value', b)}")

        console.print(
            f"[dim]{len(result.variants_added)} added, {len(result.variants_removed)} removed, "
            f"{len(result.variants_changed)} changed[/]"
        )
        return True
