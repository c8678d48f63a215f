from __future__ import annotations

from dataclasses import dataclass, field

from app.domain.use_cases.submissions import SubmissionIntake


@dataclass(frozen=True)
class ApiDeps:
    intake: SubmissionIntake
    max_upload_bytes: int
    # Human-readable collaborator modes for /ready, e.g. {"record_store": "airtable"}.
    modes: dict[str, str] = field(default_factory=dict)
