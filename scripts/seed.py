import sys
import argparse
from pathlib import Path
from rich.console import Console
from rich.table import Table

# Add project root to sys.path
project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from api.database import make_session_factory
from quiz.seed_data import PERSONALITIES, QUESTIONS, summary
from settings.manager import SettingsManager
from storage.db_manager import SqlCatalogProvider
from utils.errors import CatalogUnavailableError

console = Console()

def seed_database(config_dir: str = ".", dry_run: bool = False) -> int:
    """
    Populates the configured database with the default personalities
    and weighted questions. Existing rows with the same ids are replaced.
    """
    config = SettingsManager(config_dir).load_or_default()
    database_url = config.database_url()

    table = Table(title="Catalog")
    table.add_column("Item")
    table.add_column("Count", justify="right")
    for item, count in summary().items():
        table.add_row(item, str(count))

    if dry_run:
        console.print(f"[yellow]Dry run:[/yellow] would seed {database_url}")
        console.print(table)
        return 0

    console.print(f"Seeding {database_url}...", style="italic")
    provider = SqlCatalogProvider(make_session_factory(database_url))
    try:
        counts = provider.seed(QUESTIONS, PERSONALITIES)
    except CatalogUnavailableError as e:
        console.print(f"[red]✘ Error seeding database:[/red] {e}")
        return 1

    console.print(f"[green]✔ Seeded {counts['personalities']} personalities[/green]")
    console.print(f"[green]✔ Seeded {counts['questions']} questions[/green]")
    console.print(table)
    return 0

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the quiz catalog.")
    parser.add_argument("--config-dir", default=".", help="Directory containing config.json")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be seeded")
    args = parser.parse_args()

    sys.exit(seed_database(config_dir=args.config_dir, dry_run=args.dry_run))
