#!/usr/bin/env python3
"""
Recompute sectoral flags for every resident.

Backfills missing resident_sectoral_info rows and corrects drifted auto
flags (e.g. residents who aged into or out of a band, or after a rule
change). Safe to re-run.

Usage:
    python apps/api/scripts/reconcile_sectoral.py [--batch-size 500]

Schedule:
    Run daily via cron or platform scheduler so age-based flags roll over.
"""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(project_root))

import click

from apps.api.app import create_app
from apps.api.utils.sectoral_reconcile import reconcile_all


@click.command()
@click.option('--batch-size', type=click.IntRange(min=1), default=None,
              help='Residents per transaction (default: SECTORAL_RECONCILE_BATCH_SIZE)')
def reconcile_sectoral(batch_size):
    """Reconcile resident sectoral information."""
    app = create_app()

    with app.app_context():
        result = reconcile_all(batch_size=batch_size)

    click.echo(f"Processed: {result['processed_count']}")
    click.echo(f"Inserted:  {result['inserted_count']}")
    click.echo(f"Updated:   {result['updated_count']}")
    click.echo(f"Failed:    {result['failed_count']}")
    for failure in result['failures']:
        click.echo(f"  {failure['resident_id']}: {failure['error']}", err=True)

    if result['failed_count']:
        sys.exit(1)


if __name__ == '__main__':
    reconcile_sectoral()
