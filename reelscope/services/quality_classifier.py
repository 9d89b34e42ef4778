"""Quality tier and authenticity classification.

The tier is a function of *where* a record came from, refined for scraped
records by whether any real engagement numbers were recovered:

=================  ==========================================
source kind        tier
=================  ==========================================
first_party_api    high
proxy_api          medium
scrape             medium if any count is non-zero, else basic
oembed             basic
local_file         basic
=================  ==========================================

``is_authentic`` is true only for high/medium records that carry at least
one non-zero engagement count.  Basic records are never authentic.
"""

from __future__ import annotations

from reelscope.models.record import CanonicalRecord, QualityTier, SourceKind

_TRUSTED_TIERS = frozenset({QualityTier.HIGH, QualityTier.MEDIUM})


def classify_tier(source_kind: SourceKind, record: CanonicalRecord) -> QualityTier:
    if source_kind is SourceKind.FIRST_PARTY_API:
        return QualityTier.HIGH
    if source_kind is SourceKind.PROXY_API:
        return QualityTier.MEDIUM
    if source_kind is SourceKind.SCRAPE:
        return QualityTier.MEDIUM if record.has_engagement else QualityTier.BASIC
    return QualityTier.BASIC


def is_authentic(tier: QualityTier, record: CanonicalRecord) -> bool:
    return tier in _TRUSTED_TIERS and record.has_engagement


def classify(record: CanonicalRecord, source_kind: SourceKind, provenance: str) -> CanonicalRecord:
    """Return a copy of *record* stamped with tier, authenticity and provenance."""
    tier = classify_tier(source_kind, record)
    return record.model_copy(
        update={
            "quality_tier": tier,
            "is_authentic": is_authentic(tier, record),
            "provenance": provenance,
        }
    )
