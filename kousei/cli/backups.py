"""
Backup and restore of files rewritten by `kousei fix`.
"""

import datetime
import logging
import re
import shutil
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_DIR = ".kousei_backups"

# <name>.<YYYYmmdd_HHMMSS_microseconds>.backup
BACKUP_SUFFIX = r"\.\d{8}_\d{6}_\d{6}\.backup"


def create_backup(filepath: Union[str, Path], backup_dir: Union[str, Path] = DEFAULT_BACKUP_DIR) -> Optional[Path]:
    """
    Copy a file into the backup directory before it is rewritten.

    Args:
        filepath: File about to be modified
        backup_dir: Directory holding backups

    Returns:
        Path of the backup, or None if it could not be created
    """
    try:
        backup_path = Path(backup_dir)
        backup_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        backup_file = backup_path / f"{Path(filepath).name}.{timestamp}.backup"
        shutil.copy2(filepath, backup_file)

        logger.info(f"Created backup: {backup_file}")
        return backup_file
    except OSError as e:
        logger.error(f"Failed to create backup for {filepath}: {e}")
        return None


def restore_from_backup(filepath: Union[str, Path], backup_dir: Union[str, Path] = DEFAULT_BACKUP_DIR) -> bool:
    """
    Restore a file from its most recent backup.

    Returns:
        True if restoration was successful
    """
    backup_path = Path(backup_dir)
    if not backup_path.exists():
        logger.error("No backup directory found")
        return False

    pattern = re.compile(re.escape(Path(filepath).name) + BACKUP_SUFFIX)
    backups = [p for p in backup_path.iterdir() if pattern.fullmatch(p.name)]
    if not backups:
        logger.error(f"No backup found for {filepath}")
        return False

    # Timestamps sort lexically
    most_recent = max(backups, key=lambda p: p.name)
    try:
        shutil.copy2(most_recent, filepath)
    except OSError as e:
        logger.error(f"Failed to restore {filepath} from backup: {e}")
        return False

    logger.info(f"Restored {filepath} from backup {most_recent}")
    return True
