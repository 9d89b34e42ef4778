"""Utility modules for reelscope.

- **concurrency** -- ``SingleFlight`` call coalescing and the ``Deadline``
  budget shared by a whole strategy chain.
- **errors** -- Exception hierarchy rooted at ReelScopeError; per-attempt
  errors are recovered by the orchestrator, fatal ones reach callers.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **normalizers** -- Count, duration, hashtag and timestamp coercion shared
  by every source adapter.
- **process** (not re-exported here) -- async ffmpeg/ffprobe subprocess
  runner with a hard timeout.
"""

# -- Async coordination ----------------------------------------------------
from reelscope.utils.concurrency import Deadline, SingleFlight

# -- Domain exception hierarchy --------------------------------------------
from reelscope.utils.errors import (
    AllStrategiesExhaustedError,
    ConfigurationError,
    MediaProbeError,
    MissingCredentialError,
    ParseFailureError,
    ReelScopeError,
    RightsProviderError,
    UnsupportedPlatformError,
    UpstreamFailureError,
)

# -- Structured logging setup ----------------------------------------------
from reelscope.utils.logging import configure_logging, get_logger

# -- Field normalization ---------------------------------------------------
from reelscope.utils.normalizers import (
    MAX_HASHTAGS,
    engagement_rating,
    extract_hashtags,
    parse_count,
    parse_duration,
    parse_timestamp,
)

__all__ = [
    "MAX_HASHTAGS",
    "AllStrategiesExhaustedError",
    "ConfigurationError",
    "Deadline",
    "MediaProbeError",
    "MissingCredentialError",
    "ParseFailureError",
    "ReelScopeError",
    "RightsProviderError",
    "SingleFlight",
    "UnsupportedPlatformError",
    "UpstreamFailureError",
    "configure_logging",
    "engagement_rating",
    "extract_hashtags",
    "get_logger",
    "parse_count",
    "parse_duration",
    "parse_timestamp",
]
