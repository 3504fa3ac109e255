import gzip

import pytest

from archive_helpers import build_archive, dir_entry, file_entry
from stackinit.errors import ArchiveFormatError, ConflictError, FilesystemError
from stackinit.materialize.conflict_precheck import ConflictReport, detect_conflicts


@pytest.mark.unit
class TestDetectConflicts:

    def test_existing_whitelisted_file_is_one_conflict(self, tmp_path, target_dir):
        archive = build_archive(tmp_path / "t.tar.gz", [
            file_entry(".gitignore", b"node_modules\n"),
            file_entry("app.js", b"console.log(1)\n"),
        ])
        (target_dir / ".gitignore").write_text("*.pyc\n")

        report = detect_conflicts(archive, target_dir)

        assert report.conflicts == (".gitignore",)
        assert not report.ok

    def test_existing_directory_is_not_a_conflict(self, tmp_path, target_dir):
        archive = build_archive(tmp_path / "t.tar.gz", [file_entry(".project", b"<project/>")])
        (target_dir / ".project").mkdir()

        report = detect_conflicts(archive, target_dir)

        assert report.conflicts == ()
        assert report.ok

    def test_existing_project_content_is_not_checked(self, tmp_path, target_dir):
        archive = build_archive(tmp_path / "t.tar.gz", [file_entry("app.js", b"x")])
        (target_dir / "app.js").write_text("y")

        assert detect_conflicts(archive, target_dir).ok

    def test_reports_every_conflict_not_just_the_first(self, tmp_path, target_dir):
        archive = build_archive(tmp_path / "t.tar.gz", [
            file_entry(".gitignore", b"a"),
            dir_entry(".vscode/"),
            file_entry(".vscode/settings.json", b"{}"),
            file_entry(".project", b"b"),
        ])
        (target_dir / ".gitignore").write_text("x")
        (target_dir / ".vscode").mkdir()
        (target_dir / ".vscode" / "settings.json").write_text("{}")
        (target_dir / ".project").write_text("y")

        report = detect_conflicts(archive, target_dir)

        assert report.conflicts == (".gitignore", ".vscode/settings.json", ".project")

    def test_writes_nothing(self, tmp_path, target_dir, template_archive):
        detect_conflicts(template_archive, target_dir)

        assert list(target_dir.iterdir()) == []

    def test_logs_a_warning_per_conflict(self, tmp_path, target_dir, caplog):
        archive = build_archive(tmp_path / "t.tar.gz", [file_entry(".gitignore", b"a")])
        (target_dir / ".gitignore").write_text("x")

        detect_conflicts(archive, target_dir)

        assert "Conflict: .gitignore exists" in caplog.text


@pytest.mark.unit
class TestConflictReport:

    def test_raise_for_conflicts_carries_every_path(self):
        report = ConflictReport((".gitignore", ".project"))

        with pytest.raises(ConflictError) as excinfo:
            report.raise_for_conflicts()

        assert excinfo.value.conflicts == [".gitignore", ".project"]
        assert ".gitignore, .project" in str(excinfo.value)
        assert "--overwrite" in excinfo.value.remediation

    def test_raise_for_conflicts_is_silent_when_clean(self):
        ConflictReport().raise_for_conflicts()


@pytest.mark.unit
class TestBadArchives:

    def test_missing_archive_raises_filesystem_error(self, tmp_path, target_dir):
        with pytest.raises(FilesystemError, match="Cannot open archive"):
            detect_conflicts(tmp_path / "missing.tar.gz", target_dir)

    def test_not_gzip_raises_archive_format_error(self, tmp_path, target_dir):
        archive = tmp_path / "plain.tar.gz"
        archive.write_bytes(b"this is not compressed")

        with pytest.raises(ArchiveFormatError):
            detect_conflicts(archive, target_dir)

    def test_gzip_without_tar_raises_archive_format_error(self, tmp_path, target_dir):
        archive = tmp_path / "text.tar.gz"
        archive.write_bytes(gzip.compress(b"hello world"))

        with pytest.raises(ArchiveFormatError):
            detect_conflicts(archive, target_dir)

    @pytest.mark.parametrize("name", ["../escape.txt", "/etc/passwd", "app/../../escape.txt"])
    def test_entry_outside_target_raises(self, tmp_path, target_dir, name):
        archive = build_archive(tmp_path / "t.tar.gz", [file_entry(name, b"x")])

        with pytest.raises(ArchiveFormatError, match="escapes the target directory"):
            detect_conflicts(archive, target_dir)
