"""Pydantic v2 models shared across the reelscope pipeline.

- **record** -- CanonicalRecord, Author and the Platform / QualityTier /
  SourceKind enums.
- **extraction** -- ContentRef, ExtractionAttempt, ExtractionTrace,
  ExtractionResult and the adapter MappingResult.
- **compliance** -- RightsSignal, MediaSpecs, PlatformRules,
  ComplianceCheck and ComplianceReport.
- **analysis** -- ContentAnalysis, the combined pipeline output.
"""

from reelscope.models.analysis import ContentAnalysis
from reelscope.models.compliance import (
    ComplianceCheck,
    ComplianceReport,
    CopyrightUsage,
    MediaSpecs,
    PlatformRules,
    RightsSignal,
    RightsStatus,
    TrackInfo,
)
from reelscope.models.extraction import (
    AttemptOutcome,
    ContentRef,
    ExtractionAttempt,
    ExtractionResult,
    ExtractionTrace,
    MappingResult,
    MappingStatus,
)
from reelscope.models.record import (
    Author,
    CanonicalRecord,
    Platform,
    QualityTier,
    SourceKind,
)

__all__ = [
    "AttemptOutcome",
    "Author",
    "CanonicalRecord",
    "ComplianceCheck",
    "ComplianceReport",
    "ContentAnalysis",
    "ContentRef",
    "CopyrightUsage",
    "ExtractionAttempt",
    "ExtractionResult",
    "ExtractionTrace",
    "MappingResult",
    "MappingStatus",
    "MediaSpecs",
    "Platform",
    "PlatformRules",
    "QualityTier",
    "RightsSignal",
    "RightsStatus",
    "SourceKind",
    "TrackInfo",
]
