from __future__ import annotations

from dataclasses import dataclass

from app.domain.models import NotificationOutcome, ReconcileResult, UploadedArtifact


@dataclass(frozen=True)
class SubmitApplicationCommand:
    identity: str
    classification: str
    notes: str
    filename: str
    content_type: str
    payload: bytes


@dataclass(frozen=True)
class SubmitApplicationResult:
    artifact: UploadedArtifact
    effective_classification: str
    reconciliation: ReconcileResult
    recipients: tuple[str, ...]
    notification: NotificationOutcome
    message: str


@dataclass(frozen=True)
class BuildNotificationCommand:
    identity: str
    classification: str
    notes: str
    artifact: UploadedArtifact


@dataclass(frozen=True)
class BuildNotificationResult:
    subject: str
    html: str
