import logging
import sqlite3
from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import connections
from django.utils import timezone

logger = logging.getLogger(__name__)

PREFIX = 'sachetworks-'


class Command(BaseCommand):
    help = "Snapshot the SQLite database into BACKUP_DIR and prune old snapshots (run from a scheduler)"

    def add_arguments(self, parser):
        parser.add_argument('--outdir', default=None, help='Destination directory (defaults to BACKUP_DIR)')
        parser.add_argument('--keep', type=int, default=None, help='Snapshots to retain (defaults to BACKUP_KEEP)')
        parser.add_argument('--database', default='default')

    def handle(self, *args, **options):
        connection = connections[options['database']]
        if connection.vendor != 'sqlite':
            raise CommandError(f'Only SQLite databases can be snapshotted, not {connection.vendor}')
        outdir = Path(options['outdir'] or settings.BACKUP_DIR)
        keep = options['keep'] if options['keep'] is not None else settings.BACKUP_KEEP
        if keep < 1:
            raise CommandError('--keep must be at least 1')
        outdir.mkdir(parents=True, exist_ok=True)

        target = outdir / f"{PREFIX}{timezone.now():%Y%m%d-%H%M%S-%f}.sqlite3"
        connection.ensure_connection()
        dest = sqlite3.connect(str(target))
        try:
            # online backup: consistent even while requests are writing
            connection.connection.backup(dest)
        finally:
            dest.close()
        logger.info('Database snapshot written to %s', target)

        pruned = self._prune(outdir, keep)
        self.stdout.write(self.style.SUCCESS(f"Backup written to {target} ({pruned} old snapshot(s) removed)"))

    def _prune(self, outdir: Path, keep: int) -> int:
        snapshots = sorted(outdir.glob(f'{PREFIX}*.sqlite3'))
        stale = snapshots[:-keep]
        for path in stale:
            path.unlink()
            logger.info('Removed old snapshot %s', path)
        return len(stale)
