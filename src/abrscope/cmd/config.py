import logging

from rich import box
from rich.console import Console
from rich.table import Table

from abrscope.core.config import Config

log = logging.getLogger(__name__)
console = Console()


class ConfigCommand:
    def __init__(self, config: Config = None):
        self.config = config or Config()

    def get_all(self):
        """Print all config key-value pairs."""
        table = Table(box=box.SIMPLE_HEAVY, header_style="bold cyan", show_edge=False)
        table.add_column("Key", style="bold")
        table.add_column("Value")
        for key, value in sorted(self.config.get_all().items()):
            table.add_row(key, repr(value) if isinstance(value, str) else str(value))
        console.print(table)

    def get_key(self, key: str) -> bool:
        """Print the value of a specific key."""
        value = self.config.get_value(key)
        if value is None:
            console.print(f"[yellow]Key '{key}' not found.[/]")
            return False
        console.print(f"{key} = {value}")
        return True

    def set_key(self, key: str, value: str) -> bool:
        """Set a configuration key."""
        if key not in Config.DEFAULT_CONFIG:
            log.warning(f"'{key}' is not a known configuration key")
        if self.config.set_value(key, value):
            console.print(f"[green]✓[/] Set '{key}' = {self.config.get_value(key)!r}")
            return True
        console.print(f"[red]✗[/] Failed to set '{key}'")
        return False

    def path(self):
        """Print the configuration file path."""
        console.print(self.config.get_config_file_path(), soft_wrap=True)
