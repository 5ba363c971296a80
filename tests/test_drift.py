"""Tests for the drift comparison."""

from deploy_drift.drift import (
    DriftFinding,
    FindingKind,
    compare_env_vars,
    compare_environments,
    find_component,
)
from deploy_drift.scanner import ComponentRecord


def rec(name: str, version: str, env: dict[str, str] | None = None) -> ComponentRecord:
    return ComponentRecord(component=name, version=version, env_vars=env or {})


def kinds(report) -> list[FindingKind]:
    return [f.kind for f in report.findings]


# ============================================================================
# Component-level Findings
# ============================================================================


class TestComponentFindings:
    """Test version and presence findings."""

    def test_in_sync_with_stage_only_env_var(self):
        """Test equal versions with an extra stage env var."""
        report = compare_environments(
            [rec("svc", "1.0", {"A": "1"})],
            [rec("svc", "1.0", {"A": "1", "B": "2"})],
        )

        assert report.findings == [
            DriftFinding(FindingKind.IN_SYNC, "svc", prod_version="1.0", stage_version="1.0"),
            DriftFinding(FindingKind.ENV_VAR_MISSING_IN_PROD, "svc", key="B", value="2"),
        ]
        assert not report.by_kind(FindingKind.VERSION_MISMATCH)

    def test_version_mismatch(self):
        """Test differing versions are reported with both values."""
        report = compare_environments([rec("svc", "2.0")], [rec("svc", "1.0")])

        assert report.findings == [
            DriftFinding(
                FindingKind.VERSION_MISMATCH, "svc", prod_version="2.0", stage_version="1.0"
            )
        ]

    def test_missing_in_stage_skips_env_comparison(self):
        """Test a prod-only component yields exactly one finding."""
        report = compare_environments([rec("orphan", "1.0", {"A": "1"})], [])

        assert report.findings == [
            DriftFinding(FindingKind.MISSING_IN_STAGE, "orphan", prod_version="1.0")
        ]

    def test_processing_continues_after_missing(self):
        """Test later components are still compared after a missing one."""
        report = compare_environments(
            [rec("orphan", "1.0"), rec("svc", "1.0")],
            [rec("svc", "1.0")],
        )
        assert kinds(report) == [FindingKind.MISSING_IN_STAGE, FindingKind.IN_SYNC]

    def test_order_follows_prod(self):
        """Test findings follow production order, not stage order."""
        report = compare_environments(
            [rec("b", "1"), rec("a", "1")],
            [rec("a", "1"), rec("b", "1")],
        )
        assert [f.component for f in report.findings] == ["b", "a"]

    def test_version_compare_is_exact(self):
        """Test versions compare as plain strings."""
        report = compare_environments([rec("svc", "1.0")], [rec("svc", "1.00")])
        assert kinds(report) == [FindingKind.VERSION_MISMATCH]

    def test_stage_only_hidden_by_default(self):
        """Test stage-only components are not visited by default."""
        report = compare_environments([rec("svc", "1")], [rec("svc", "1"), rec("new", "1")])
        assert kinds(report) == [FindingKind.IN_SYNC]

    def test_stage_only_reported_when_enabled(self):
        """Test stage-only components are reported once when requested."""
        report = compare_environments(
            [rec("svc", "1")],
            [rec("svc", "1"), rec("new", "3"), rec("new", "4")],
            include_stage_only=True,
        )

        assert report.findings[-1] == DriftFinding(
            FindingKind.MISSING_IN_PROD, "new", stage_version="3"
        )
        assert len(report.by_kind(FindingKind.MISSING_IN_PROD)) == 1

    def test_duplicate_stage_component_uses_first(self):
        """Test lookup returns the first stage record with the name."""
        report = compare_environments(
            [rec("svc", "2")],
            [rec("svc", "2"), rec("svc", "9")],
        )
        assert kinds(report) == [FindingKind.IN_SYNC]


# ============================================================================
# Env Var Findings
# ============================================================================


class TestEnvVarFindings:
    """Test env var presence comparison."""

    def test_both_directions(self):
        """Test stage-only keys come first, then prod-only keys."""
        findings = compare_env_vars(
            rec("svc", "1", {"SHARED": "x", "PROD_ONLY": "p"}),
            rec("svc", "1", {"SHARED": "y", "STAGE_ONLY": "s"}),
        )

        assert findings == [
            DriftFinding(FindingKind.ENV_VAR_MISSING_IN_PROD, "svc", key="STAGE_ONLY", value="s"),
            DriftFinding(FindingKind.ENV_VAR_MISSING_IN_STAGE, "svc", key="PROD_ONLY", value="p"),
        ]

    def test_value_differences_ignored(self):
        """Test differing values for a shared key are not flagged."""
        assert compare_env_vars(rec("svc", "1", {"A": "1"}), rec("svc", "1", {"A": "2"})) == []

    def test_env_checked_on_version_mismatch(self):
        """Test env vars are compared even when versions differ."""
        report = compare_environments(
            [rec("svc", "2", {"A": "1"})],
            [rec("svc", "1")],
        )
        assert kinds(report) == [
            FindingKind.VERSION_MISMATCH,
            FindingKind.ENV_VAR_MISSING_IN_STAGE,
        ]


# ============================================================================
# Report Helpers
# ============================================================================


class TestDriftReport:
    """Test report helpers and finding metadata."""

    def test_severities(self):
        """Test severity assignment per finding kind."""
        assert DriftFinding(FindingKind.IN_SYNC, "svc").severity == "info"
        assert DriftFinding(FindingKind.VERSION_MISMATCH, "svc").severity == "error"
        assert DriftFinding(FindingKind.MISSING_IN_STAGE, "svc").severity == "error"
        assert DriftFinding(FindingKind.ENV_VAR_MISSING_IN_PROD, "svc").severity == "warning"

    def test_has_drift(self):
        """Test has_drift is false when everything is in sync."""
        assert not compare_environments([rec("svc", "1")], [rec("svc", "1")]).has_drift
        assert compare_environments([rec("svc", "1")], []).has_drift

    def test_counts(self):
        """Test record counts and error/warning partitions."""
        report = compare_environments(
            [rec("a", "1", {"X": "1"}), rec("b", "1")],
            [rec("a", "2")],
        )
        assert report.prod_count == 2
        assert report.stage_count == 1
        assert len(report.errors) == 2
        assert len(report.warnings) == 1

    def test_messages(self):
        """Test messages name the component, versions and keys."""
        mismatch = DriftFinding(
            FindingKind.VERSION_MISMATCH, "svc", prod_version="2.0", stage_version="1.0"
        )
        assert mismatch.message == "svc has different version in prod (2.0) and stage (1.0)"

        env = DriftFinding(FindingKind.ENV_VAR_MISSING_IN_PROD, "svc", key="B", value="2")
        assert "B" in env.message and "missing in prod" in env.message

    def test_to_dict(self):
        """Test JSON serialization of a report."""
        data = compare_environments([rec("svc", "1")], []).to_dict()
        assert data["prod_components"] == 1
        assert data["findings"][0]["kind"] == "missing_in_stage"
        assert data["findings"][0]["severity"] == "error"

    def test_find_component(self):
        """Test first-match lookup."""
        first = rec("svc", "1")
        assert find_component([rec("x", "0"), first, rec("svc", "2")], "svc") is first
        assert find_component([], "svc") is None
