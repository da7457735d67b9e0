"""
abrscope - HLS/DASH manifest inspector
CLI entry point
"""
import logging
import sys
from contextlib import contextmanager

import click
from rich.console import Console
from rich.markup import escape

from abrscope import __version__
from abrscope.cmd.config import ConfigCommand
from abrscope.cmd.diff import Diff
from abrscope.cmd.export import Export
from abrscope.cmd.inspect import Inspect
from abrscope.cmd.validate import Validate
from abrscope.core.config import Config
from abrscope.core.exceptions import InvalidBaseUrlError, ManifestError
from abrscope.core.utils.startup import get_log_file
from abrscope.core.utils.url import is_valid_base_url, resolve_url

err_console = Console(stderr=True)

EXIT_ERROR = 1
EXIT_NOT_COMPLIANT = 2

# ── Logging setup ─────────────────────────────────────────────────────────────

def setup_logging(verbose: bool = False, debug: bool = False):
    level = logging.DEBUG if debug else (logging.INFO if verbose else logging.WARNING)
    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s" if debug else "%(levelname)s: %(message)s"
    logging.basicConfig(level=level, format=fmt)

    # File handler for warnings and errors, skipped when the log dir is not writable
    root = logging.getLogger()
    try:
        log_file = get_log_file()
        if any(getattr(h, "baseFilename", None) == str(log_file.resolve()) for h in root.handlers):
            return
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as e:
        logging.getLogger(__name__).debug(f"File logging disabled: {e}")
        return
    file_handler.setLevel(logging.WARNING)
    file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    root.addHandler(file_handler)


@contextmanager
def reporting_errors():
    """Turn ``ManifestError`` into a message and exit status 1."""
    try:
        yield
    except ManifestError as e:
        err_console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_ERROR)


base_url_option = click.option(
    '--base-url', '-b', default=None, metavar='URL',
    help='Base URL for resolving relative references (default: the source itself).',
)


# ── Root command ──────────────────────────────────────────────────────────────

@click.group()
@click.version_option(__version__, prog_name="abrscope")
@click.option('--verbose', '-v', is_flag=True, help='Show info messages.')
@click.option('--debug', '-d', is_flag=True, help='Show debug messages.')
@click.pass_context
def cli(ctx, verbose, debug):
    """abrscope - HLS/DASH manifest inspector\n\nParse, validate and compare adaptive streaming manifests."""
    ctx.ensure_object(dict)
    ctx.obj['config'] = Config()
    setup_logging(verbose, debug or ctx.obj['config'].debug_mode())
    ctx.obj['verbose'] = verbose
    ctx.obj['debug'] = debug


# ── inspect / detect ──────────────────────────────────────────────────────────

@cli.command()
@click.argument('source')
@base_url_option
@click.option('--segments/--no-segments', default=None,
              help='Show the segment list of media playlists (default: config show_segments).')
@click.pass_context
def inspect(ctx, source, base_url, segments):
    """Show variants, metadata and segments of a manifest (file or URL)."""
    with reporting_errors(), Inspect(config=ctx.obj.get('config')) as i:
        i.inspect(source, base_url=base_url, segments=segments)


@cli.command()
@click.argument('source')
@click.pass_context
def detect(ctx, source):
    """Print the detected format (hls or dash)."""
    with reporting_errors(), Inspect(config=ctx.obj.get('config')) as i:
        i.detect(source)


# ── validate / lint ───────────────────────────────────────────────────────────

@cli.command()
@click.argument('source')
@base_url_option
@click.option('--strict', is_flag=True, help='Exit with status 2 when the manifest is not compliant.')
@click.pass_context
def validate(ctx, source, base_url, strict):
    """Check a manifest against RFC 8216 (HLS) or ISO/IEC 23009-1 (DASH).

    \b
    Examples:
      abrscope validate master.m3u8
      abrscope validate https://example.com/live/stream.mpd --strict
    """
    with reporting_errors(), Validate(config=ctx.obj.get('config')) as v:
        compliant = v.validate(source, base_url=base_url)
    if strict and not compliant:
        sys.exit(EXIT_NOT_COMPLIANT)


@cli.command()
@click.argument('source')
@base_url_option
@click.pass_context
def lint(ctx, source, base_url):
    """Report ABR ladder and metadata best-practice issues."""
    with reporting_errors(), Validate(config=ctx.obj.get('config')) as v:
        v.lint(source, base_url=base_url)


# ── diff ──────────────────────────────────────────────────────────────────────

@cli.command()
@click.argument('old')
@click.argument('new')
@base_url_option
@click.pass_context
def diff(ctx, old, new, base_url):
    """Compare the variants and metadata of two manifests."""
    with reporting_errors(), Diff(config=ctx.obj.get('config')) as d:
        d.diff(old, new, base_url=base_url)


# ── export ────────────────────────────────────────────────────────────────────

@cli.command()
@click.argument('source')
@base_url_option
@click.option('--format', '-f', 'fmt', type=click.Choice(['json', 'csv', 'text'], case_sensitive=False),
              default=None, help='Output format (default: config export_format).')
@click.option('--output', '-o', default=None, help='Output file path (default: stdout).')
@click.pass_context
def export(ctx, source, base_url, fmt, output):
    """Export a parsed manifest as JSON, CSV or text."""
    with reporting_errors(), Export(config=ctx.obj.get('config')) as e:
        e.export(source, fmt=fmt.lower() if fmt else None, output=output, base_url=base_url)


# ── resolve ───────────────────────────────────────────────────────────────────

@cli.command()
@click.argument('reference')
@click.argument('base')
def resolve(reference, base):
    """Resolve REFERENCE against the manifest URL BASE."""
    with reporting_errors():
        if not is_valid_base_url(base):
            raise InvalidBaseUrlError(base)
        click.echo(resolve_url(reference, base))


# ── config ────────────────────────────────────────────────────────────────────

@cli.group()
def config():
    """View and modify abrscope configuration."""
    pass


@config.command('show')
@click.pass_context
def config_show(ctx):
    """Show all configuration values."""
    ConfigCommand(ctx.obj.get('config')).get_all()


@config.command('get')
@click.argument('key')
@click.pass_context
def config_get(ctx, key):
    """Get the value of a configuration key."""
    if not ConfigCommand(ctx.obj.get('config')).get_key(key):
        sys.exit(EXIT_ERROR)


@config.command('set')
@click.argument('key')
@click.argument('value')
@click.pass_context
def config_set(ctx, key, value):
    """Set a configuration value."""
    if not ConfigCommand(ctx.obj.get('config')).set_key(key, value):
        sys.exit(EXIT_ERROR)


@config.command('path')
@click.pass_context
def config_path(ctx):
    """Show the config file path."""
    ConfigCommand(ctx.obj.get('config')).path()


# ── Entry point ───────────────────────────────────────────────────────────────

def run():
    cli(obj={})


if __name__ == '__main__':
    run()
