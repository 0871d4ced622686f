"""
Unit tests for file backups and restore.
"""

import time

from kousei.cli.backups import create_backup, restore_from_backup


class TestBackups:
    """Test create_backup and restore_from_backup."""

    def test_backup_and_restore(self, tmp_path):
        """Test restoring the most recent backup."""
        target = tmp_path / "notes.md"
        backup_dir = tmp_path / "backups"
        target.write_text("first", encoding='utf-8')
        create_backup(target, backup_dir)
        time.sleep(0.01)
        target.write_text("second", encoding='utf-8')
        create_backup(target, backup_dir)
        target.write_text("changed", encoding='utf-8')

        assert restore_from_backup(target, backup_dir) is True
        assert target.read_text(encoding='utf-8') == "second"

    def test_backup_name(self, tmp_path):
        """Test the backup file naming."""
        target = tmp_path / "notes.md"
        target.write_text("text", encoding='utf-8')

        backup = create_backup(target, tmp_path / "backups")

        assert backup.name.startswith("notes.md.")
        assert backup.name.endswith(".backup")

    def test_restore_ignores_other_files_with_shared_prefix(self, tmp_path):
        """Test that a backup of notes.md is never used to restore notes."""
        backup_dir = tmp_path / "backups"
        markdown = tmp_path / "notes.md"
        markdown.write_text("markdown notes", encoding='utf-8')
        create_backup(markdown, backup_dir)

        plain = tmp_path / "notes"
        plain.write_text("plain notes", encoding='utf-8')

        assert restore_from_backup(plain, backup_dir) is False
        assert plain.read_text(encoding='utf-8') == "plain notes"

    def test_restore_picks_own_backup_among_similar_names(self, tmp_path):
        """Test restoring notes when notes.md also has a backup."""
        backup_dir = tmp_path / "backups"
        plain = tmp_path / "notes"
        plain.write_text("plain notes", encoding='utf-8')
        create_backup(plain, backup_dir)
        time.sleep(0.01)
        markdown = tmp_path / "notes.md"
        markdown.write_text("markdown notes", encoding='utf-8')
        create_backup(markdown, backup_dir)
        plain.write_text("edited", encoding='utf-8')

        assert restore_from_backup(plain, backup_dir) is True
        assert plain.read_text(encoding='utf-8') == "plain notes"

    def test_restore_without_backup_dir(self, tmp_path):
        """Test that restoring without any backups fails."""
        target = tmp_path / "notes"
        target.write_text("text", encoding='utf-8')

        assert restore_from_backup(target, tmp_path / "missing") is False
