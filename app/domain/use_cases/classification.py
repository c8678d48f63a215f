from __future__ import annotations

from dataclasses import dataclass

from app.repositories.intake import IntakeRepository

COMPONENT_ID = "domain.classification.resolve"


@dataclass(frozen=True)
class ClassificationResolver:
    repository: IntakeRepository

    async def resolve(self, *, explicit_classification: str | None, identity: str) -> str:
        """Return the effective classification; "" means unspecified.

        An explicit value wins unchanged. Otherwise the applicant directory is
        consulted by exact, case-insensitive identity match. Directory failures
        propagate.
        """
        if explicit_classification and explicit_classification.strip():
            return explicit_classification

        applicant = await self.repository.find_applicant(identity=identity)
        if applicant is None or applicant.identity.lower() != identity.lower():
            return ""
        return applicant.classification.strip()
