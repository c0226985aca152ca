"""Jurisdiction pools: versioned reference tables of member country codes.

A pool is a set of countries whose stays count against one shared quota
(the Schengen Area). Membership changes over time, so every pool carries a
version and callers can inject whichever table applies to them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from stayguard.services.errors import UnknownJurisdictionError

SCHENGEN = "SCHENGEN"

_SCHENGEN_2023 = frozenset({
    "AT", "BE", "HR", "CZ", "DK", "EE", "FI", "FR", "DE", "GR",
    "HU", "IS", "IT", "LV", "LI", "LT", "LU", "MT", "NL", "NO",
    "PL", "PT", "SK", "SI", "ES", "SE", "CH",
})

# Bulgaria and Romania joined fully on 2025-01-01
_SCHENGEN_2025 = _SCHENGEN_2023 | {"BG", "RO"}


@dataclass(frozen=True)
class Jurisdiction:
    code: str
    name: str
    version: str
    members: frozenset[str]

    def __contains__(self, country: object) -> bool:
        return isinstance(country, str) and country.strip().upper() in self.members


SCHENGEN_VERSIONS: dict[str, Jurisdiction] = {
    "2023-01": Jurisdiction(SCHENGEN, "Schengen Area", "2023-01", _SCHENGEN_2023),
    "2025-01": Jurisdiction(SCHENGEN, "Schengen Area", "2025-01", _SCHENGEN_2025),
}
LATEST_SCHENGEN_VERSION = max(SCHENGEN_VERSIONS)


@dataclass(frozen=True)
class JurisdictionTable:
    """Immutable lookup of jurisdiction code -> Jurisdiction."""

    jurisdictions: Mapping[str, Jurisdiction] = field(default_factory=dict)

    @classmethod
    def of(cls, items: Iterable[Jurisdiction]) -> "JurisdictionTable":
        return cls({j.code.upper(): j for j in items})

    @classmethod
    def default(cls, schengen_version: str | None = None) -> "JurisdictionTable":
        version = schengen_version or LATEST_SCHENGEN_VERSION
        if version not in SCHENGEN_VERSIONS:
            raise UnknownJurisdictionError(
                f"Unknown Schengen membership version {version!r}. Known: {', '.join(sorted(SCHENGEN_VERSIONS))}",
                field="schengen_version",
            )
        return cls.of([SCHENGEN_VERSIONS[version]])

    def get(self, code: str) -> Jurisdiction:
        j = self.jurisdictions.get((code or "").strip().upper())
        if j is None:
            raise UnknownJurisdictionError(f"No jurisdiction {code!r}", field="jurisdiction")
        return j

    def resolve(self, jurisdiction: "str | Jurisdiction") -> Jurisdiction:
        if isinstance(jurisdiction, Jurisdiction):
            return jurisdiction
        return self.get(jurisdiction)

    def classify(self, country: str) -> str | None:
        """Code of the first pool containing ``country``, or None if unclassified."""
        for code in sorted(self.jurisdictions):
            if country in self.jurisdictions[code]:
                return code
        return None

    def __iter__(self):
        return iter(self.jurisdictions[c] for c in sorted(self.jurisdictions))
