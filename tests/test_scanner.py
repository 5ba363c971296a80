"""Tests for scanning environment directories."""

from pathlib import Path

import pytest

from deploy_drift.scanner import (
    ComponentRecord,
    ScanError,
    environment_root,
    iter_declaration_files,
    scan_environment,
)
from deploy_drift.utils.scan_stats import get_stats_tracker


class TestEnvironmentRoot:
    """Test environment path resolution."""

    def test_default_layout(self, tmp_path):
        """Test the default Terraform layout."""
        assert environment_root(tmp_path, "prod") == (
            tmp_path / "Terraform" / "Environments" / "prod" / "workload"
        )

    def test_custom_layout(self, tmp_path):
        """Test a custom layout template."""
        assert environment_root(tmp_path, "stage", "envs/{env}") == tmp_path / "envs" / "stage"


class TestIterDeclarationFiles:
    """Test the directory walk."""

    def test_files_only_sorted(self, tmp_path):
        """Test only files are yielded, in deterministic order."""
        (tmp_path / "b").mkdir()
        (tmp_path / "b" / "main.tf").write_text("")
        (tmp_path / "a.tf").write_text("")
        (tmp_path / "c").mkdir()

        files = [p.relative_to(tmp_path).as_posix() for p in iter_declaration_files(tmp_path)]
        assert files == ["a.tf", "b/main.tf"]

    def test_hidden_entries_skipped(self, tmp_path):
        """Test dot-files and dot-directories are skipped."""
        (tmp_path / ".terraform").mkdir()
        (tmp_path / ".terraform" / "cache.tf").write_text("")
        (tmp_path / ".hidden.tf").write_text("")
        (tmp_path / "main.tf").write_text("")

        files = [p.name for p in iter_declaration_files(tmp_path)]
        assert files == ["main.tf"]

    def test_hidden_entries_kept_when_disabled(self, tmp_path):
        """Test skip_hidden=False walks everything."""
        (tmp_path / ".hidden.tf").write_text("")
        (tmp_path / "main.tf").write_text("")

        files = [p.name for p in iter_declaration_files(tmp_path, skip_hidden=False)]
        assert files == [".hidden.tf", "main.tf"]

    def test_is_lazy(self, tmp_path):
        """Test the walk is a generator."""
        iterator = iter_declaration_files(tmp_path)
        assert iter(iterator) is iterator


class TestScanEnvironment:
    """Test building records from a directory."""

    def test_records_collected(self, repo):
        """Test declarations become records with their env vars."""
        path = repo.add("prod", "payments/main.tf", "payments", "1.0", {"A": "1"})

        records = scan_environment(repo.workload("prod"))

        assert records == [ComponentRecord("payments", "1.0", {"A": "1"})]
        assert records[0].source == path

    def test_non_components_skipped(self, repo):
        """Test files missing name or version are dropped silently."""
        repo.add("prod", "a.tf", "only-name", None)
        repo.add("prod", "b.tf", None, "1.0")
        repo.add("prod", "c.tf", "svc", "2.0")
        (repo.workload("prod") / "README.md").write_text("# notes\n")

        records = scan_environment(repo.workload("prod"))

        assert [r.component for r in records] == ["svc"]

    def test_duplicates_kept_in_order(self, repo):
        """Test two files declaring the same component are both kept."""
        repo.add("prod", "a/main.tf", "svc", "1.0")
        repo.add("prod", "b/main.tf", "svc", "2.0")

        records = scan_environment(repo.workload("prod"))

        assert [(r.component, r.version) for r in records] == [("svc", "1.0"), ("svc", "2.0")]

    def test_missing_env_block_gives_empty_map(self, repo):
        """Test a component without environment_vars has no env vars."""
        repo.add("prod", "main.tf", "svc", "1.0")
        assert scan_environment(repo.workload("prod"))[0].env_vars == {}

    def test_missing_root_raises(self, tmp_path):
        """Test a missing environment directory is an error."""
        with pytest.raises(ScanError, match="not found"):
            scan_environment(tmp_path / "nope")

    def test_file_as_root_raises(self, tmp_path):
        """Test a file is not accepted as environment directory."""
        path = tmp_path / "main.tf"
        path.write_text("")
        with pytest.raises(ScanError):
            scan_environment(path)

    def test_undecodable_bytes_tolerated(self, repo):
        """Test binary junk in a file does not abort the scan."""
        (repo.workload("prod") / "blob.bin").write_bytes(b"\xff\xfe\x00garbage")
        repo.add("prod", "main.tf", "svc", "1.0")

        records = scan_environment(repo.workload("prod"))

        assert [r.component for r in records] == ["svc"]

    def test_rescan_is_idempotent(self, repo):
        """Test scanning the same tree twice yields equal records."""
        repo.add("prod", "main.tf", "svc", "1.0", {"A": "1", "B": "2"})
        root = repo.workload("prod")
        assert scan_environment(root) == scan_environment(root)

    def test_statistics_recorded(self, repo):
        """Test scan counters are recorded when tracking is enabled."""
        repo.add("prod", "main.tf", "svc", "1.0")
        repo.add("prod", "vars.tf", None, None)
        (repo.workload("prod") / ".gitkeep").write_text("")

        tracker = get_stats_tracker()
        tracker.enable()
        scan_environment(repo.workload("prod"), label="prod")

        stats = tracker.environments["prod"]
        assert stats.files_parsed == 2
        assert stats.components == 1
        assert stats.not_components == 1
        assert stats.hidden_skipped == 1


class TestComponentRecord:
    """Test the record type."""

    def test_immutable(self):
        """Test records cannot be reassigned."""
        record = ComponentRecord("svc", "1.0")
        with pytest.raises(AttributeError):
            record.version = "2.0"  # type: ignore[misc]

    def test_env_vars_read_only(self):
        """Test env vars cannot be changed through the record."""
        record = ComponentRecord("svc", "1.0", {"A": "1"})
        with pytest.raises(TypeError):
            record.env_vars["B"] = "2"  # type: ignore[index]
        assert record.env_vars == {"A": "1"}

    def test_env_vars_copied(self):
        """Test later changes to the source mapping do not reach the record."""
        env = {"A": "1"}
        record = ComponentRecord("svc", "1.0", env)
        env["B"] = "2"
        assert record.env_vars == {"A": "1"}

    def test_source_not_compared(self):
        """Test records from different files compare by content."""
        first = ComponentRecord("svc", "1", {}, Path("a"))
        second = ComponentRecord("svc", "1", {}, Path("b"))
        assert first == second
