import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from abrscope.cmd.source import SourceCommand
from abrscope.core.exceptions import ManifestError
from abrscope.core.utils.export import EXPORTERS

logger = logging.getLogger(__name__)
console = Console(stderr=True)


class Export(SourceCommand):

    def export(self, source: str, fmt: Optional[str] = None, output: Optional[str] = None,
               base_url: Optional[str] = None):
        """Write the manifest as JSON, CSV or text to ``output`` or stdout."""
        fmt = fmt or self.config.export_format()
        manifest = self.load(source, base_url)
        text = EXPORTERS[fmt](manifest)

        if output is None:
            click.echo(text)
            return

        path = Path(output)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise ManifestError(f"Could not write {path}: {e}") from e
        console.print(f"[green]📄 Exported {len(manifest.variants)} variant(s) as {fmt} to[/] {escape(str(path))}")
