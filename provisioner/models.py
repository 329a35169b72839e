# provisioner/models.py
# -*- coding: utf-8 -*-
"""
Data types shared by the provisioning stages: package descriptors, install
outcomes, bootstrap artifacts, feature states and the aggregate report.
"""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PackageDescriptor(BaseModel):
    """A catalog entry: the package manager's identifier plus a display name."""
    model_config = ConfigDict(frozen=True)

    identifier: str
    display_name: str
    version: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.display_name} ({self.identifier})"


class OutcomeStatus(str, Enum):
    """Classification of a single install attempt."""

    SUCCEEDED = "SUCCEEDED"
    SUCCEEDED_WITH_WARNINGS = "SUCCEEDED_WITH_WARNINGS"
    FAILED = "FAILED"


class InstallOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    descriptor: PackageDescriptor
    status: OutcomeStatus
    detail: str = ""

    @property
    def is_success(self) -> bool:
        return self.status in (
            OutcomeStatus.SUCCEEDED,
            OutcomeStatus.SUCCEEDED_WITH_WARNINGS,
        )


class ArtifactKind(str, Enum):
    """Bootstrap artifact kinds, declared in required install order."""

    RUNTIME = "RUNTIME"
    DEPENDENCY = "DEPENDENCY"
    MAIN_PACKAGE = "MAIN_PACKAGE"

    @property
    def rank(self) -> int:
        return list(ArtifactKind).index(self)


class ArtifactInstallMethod(str, Enum):
    APPX = "APPX"
    EXECUTABLE = "EXECUTABLE"


class BootstrapArtifact(BaseModel):
    """A file that must be downloaded and installed to bootstrap the package manager."""

    name: str
    url: str
    kind: ArtifactKind
    method: ArtifactInstallMethod = ArtifactInstallMethod.APPX
    arguments: List[str] = Field(default_factory=list)
    file_name: Optional[str] = Field(
        default=None,
        description="Local file name; derived from the URL when not set.",
    )
    local_path: Optional[Path] = None

    @property
    def target_file_name(self) -> str:
        if self.file_name:
            return self.file_name
        return self.url.rstrip("/").rsplit("/", 1)[-1].split("?", 1)[0]


class FeatureState(str, Enum):
    UNKNOWN = "UNKNOWN"
    ALREADY_ENABLED = "ALREADY_ENABLED"
    JUST_ENABLED = "JUST_ENABLED"
    ENABLE_FAILED = "ENABLE_FAILED"


class AggregateReport:
    """
    Counters accumulated over one run and read once by the summary reporter.

    Every recorded outcome increments exactly one of success_count or
    failure_count. restart_required only ever goes from False to True.
    """

    def __init__(self) -> None:
        self.success_count: int = 0
        self.failure_count: int = 0
        self.outcomes: List[InstallOutcome] = []
        self._restart_required: bool = False

    @property
    def restart_required(self) -> bool:
        return self._restart_required

    def mark_restart_required(self) -> None:
        self._restart_required = True

    def record(self, outcome: InstallOutcome) -> InstallOutcome:
        self.outcomes.append(outcome)
        if outcome.is_success:
            self.success_count += 1
        else:
            self.failure_count += 1
        return outcome

    @property
    def attempted_count(self) -> int:
        return len(self.outcomes)

    @property
    def warning_count(self) -> int:
        return sum(
            1
            for outcome in self.outcomes
            if outcome.status == OutcomeStatus.SUCCEEDED_WITH_WARNINGS
        )

    @property
    def failed_items(self) -> List[PackageDescriptor]:
        return [o.descriptor for o in self.outcomes if not o.is_success]
