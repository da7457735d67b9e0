import logging
from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

from abrscope.cmd.source import SourceCommand
from abrscope.core.models import ParsedManifest
from abrscope.core.parsers import detect_format
from abrscope.core.utils.export import format_bitrate

logger = logging.getLogger(__name__)
console = Console()


def _table() -> Table:
    return Table(
        box=box.SIMPLE_HEAVY,
        show_header=True,
        header_style="bold cyan",
        show_edge=False,
        pad_edge=False,
    )


class Inspect(SourceCommand):
    """Display the structure of a manifest."""

    def inspect(self, source: str, base_url: Optional[str] = None, segments: Optional[bool] = None):
        manifest = self.load(source, base_url)
        self.show_metadata(manifest)
        self.show_variants(manifest)

        if segments is None:
            segments = self.config.show_segments()
        if segments:
            self.show_segments(manifest)

    def detect(self, source: str):
        content, _ = self.read(source)
        console.print(detect_format(content).value)

    # ── Sections ─────────────────────────────────────────────────────────────

    def show_metadata(self, manifest: ParsedManifest):
        meta = manifest.metadata
        table = _table()
        table.add_column("Field", style="bold")
        table.add_column("Value")

        table.add_row("Format", manifest.format.value.upper())
        table.add_row("URL", escape(manifest.url))
        table.add_row("Type", meta.type.value)
        if meta.version:
            table.add_row("Version", escape(meta.version))
        if meta.duration is not None:
            table.add_row("Duration", f"{meta.duration:.3f}s")
        if meta.target_duration is not None:
            table.add_row("Target duration", f"{meta.target_duration}s")
        if meta.min_buffer_time is not None:
            table.add_row("Min buffer time", f"{meta.min_buffer_time}s")
        if meta.profiles:
            table.add_row("Profiles", escape("\n".join(meta.profiles)))
        table.add_row("Encrypted", "[red]Yes[/]" if meta.encrypted else "No")

        console.print()
        console.print(Rule("[bold]Manifest", style="cyan"))
        console.print(table)

    def show_variants(self, manifest: ParsedManifest):
        if not manifest.variants:
            console.print("[yellow]No variants.[/]")
            return

        table = _table()
        table.add_column("ID", style="dim")
        table.add_column("Type")
        table.add_column("Bitrate", justify="right")
        table.add_column("Resolution", justify="right")
        table.add_column("FPS", justify="right")
        table.add_column("Codecs")
        table.add_column("URL", style="dim", overflow="fold")

        for v in manifest.variants[:self.config.max_rows()]:
            table.add_row(
                escape(v.id),
                v.type.value,
                format_bitrate(v.bitrate),
                str(v.resolution) if v.resolution else "",
                f"{v.frame_rate:g}" if v.frame_rate else "",
                escape(", ".join(v.codecs)),
                escape(v.url),
            )

        console.print()
        console.print(Rule("[bold]Variants", style="cyan"))
        console.print(table)
        console.print(f"[dim]Total: {len(manifest.variants)} variant(s)[/]\n")

    def show_segments(self, manifest: ParsedManifest):
        if manifest.segments is None:
            console.print("[dim]Master playlist or MPD: no segment list.[/]")
            return

        table = _table()
        table.add_column("#", justify="right", style="dim")
        table.add_column("Duration", justify="right")
        table.add_column("Byte range", justify="right")
        table.add_column("URL", style="dim", overflow="fold")

        for s in manifest.segments[:self.config.max_rows()]:
            byte_range = f"{s.byte_range.start}-{s.byte_range.end}" if s.byte_range else ""
            table.add_row(str(s.sequence), f"{s.duration:.3f}", byte_range, escape(s.url))

        console.print(Rule("[bold]Segments", style="cyan"))
        console.print(table)
        console.print(f"[dim]Total: {len(manifest.segments)} segment(s)[/]\n")
