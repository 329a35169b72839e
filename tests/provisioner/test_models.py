import pytest
from pydantic import ValidationError

from provisioner.models import (
    AggregateReport,
    ArtifactKind,
    BootstrapArtifact,
    InstallOutcome,
    OutcomeStatus,
    PackageDescriptor,
)

A = PackageDescriptor(identifier="Vendor.A", display_name="A")
B = PackageDescriptor(identifier="Vendor.B", display_name="B")


def test_descriptor_is_immutable():
    with pytest.raises(ValidationError):
        A.identifier = "Other"


def test_descriptor_str():
    assert str(A) == "A (Vendor.A)"


def test_artifact_kind_rank_follows_install_order():
    assert (
        ArtifactKind.RUNTIME.rank
        < ArtifactKind.DEPENDENCY.rank
        < ArtifactKind.MAIN_PACKAGE.rank
    )


@pytest.mark.parametrize(
    "kwargs,expected",
    [
        ({"url": "https://x.test/dl/pkg.appx"}, "pkg.appx"),
        ({"url": "https://x.test/dl/pkg.appx?sig=1"}, "pkg.appx"),
        ({"url": "https://aka.ms/getwinget", "file_name": "w.msixbundle"}, "w.msixbundle"),
    ],
)
def test_artifact_target_file_name(kwargs, expected):
    artifact = BootstrapArtifact(name="n", kind=ArtifactKind.RUNTIME, **kwargs)

    assert artifact.target_file_name == expected


def test_report_counts_every_outcome_once():
    report = AggregateReport()

    report.record(InstallOutcome(descriptor=A, status=OutcomeStatus.SUCCEEDED))
    report.record(
        InstallOutcome(descriptor=A, status=OutcomeStatus.SUCCEEDED_WITH_WARNINGS)
    )
    report.record(InstallOutcome(descriptor=B, status=OutcomeStatus.FAILED))

    assert report.success_count == 2
    assert report.failure_count == 1
    assert report.attempted_count == report.success_count + report.failure_count
    assert report.warning_count == 1
    assert report.failed_items == [B]


def test_restart_required_is_sticky():
    report = AggregateReport()
    assert report.restart_required is False

    report.mark_restart_required()
    report.mark_restart_required()

    assert report.restart_required is True
