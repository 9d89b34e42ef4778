"""ACRCloud audio-fingerprinting provider implementing IRightsProvider.

Sends a short WAV sample to ``https://<host>/v1/identify`` as a signed
multipart POST.  The request signature is an HMAC-SHA1 (base64) over::

    POST\\n/v1/identify\\n<access_key>\\naudio\\n1\\n<timestamp>

Outcomes map onto :class:`~reelscope.models.compliance.RightsStatus`:

* ``status.code == 0`` with music metadata -> ``identified``
* ``status.code == 1001`` (no result)      -> ``no_match``
* anything else, missing credentials, transport errors -> ``unavailable``

There is no local fallback: when ACRCloud cannot answer, the signal says
so and the compliance evaluator routes the check to manual review.
"""

from __future__ import annotations

import asyncio
import base64
import hashlib
import hmac
import time
from pathlib import Path
from typing import Any

import httpx

from reelscope.interfaces.rights_provider import IRightsProvider
from reelscope.models.compliance import (
    CopyrightUsage,
    RightsSignal,
    RightsStatus,
    TrackInfo,
)
from reelscope.utils.errors import RightsProviderError
from reelscope.utils.logging import get_logger

_ENDPOINT = "/v1/identify"
_NO_RESULT_CODE = 1001
_MAJOR_LABELS = ("universal", "sony", "warner", "emi")


def sign_request(access_key: str, access_secret: str, timestamp: int) -> str:
    """Return the base64 HMAC-SHA1 signature ACRCloud expects."""
    string_to_sign = f"POST\n{_ENDPOINT}\n{access_key}\naudio\n1\n{timestamp}"
    digest = hmac.new(
        access_secret.encode("utf-8"),
        string_to_sign.encode("utf-8"),
        hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def copyright_usage_for(label: str | None) -> CopyrightUsage:
    """Major-label releases require a commercial licence."""
    if label and any(major in label.lower() for major in _MAJOR_LABELS):
        return CopyrightUsage.COMMERCIAL
    return CopyrightUsage.UNKNOWN


def _confidence(score: Any) -> int:
    # ACRCloud has reported score both as 0-1 and 0-100 across API versions.
    try:
        value = float(score)
    except (TypeError, ValueError):
        return 0
    if value <= 1:
        value *= 100
    return max(0, min(100, round(value)))


class ACRCloudProvider(IRightsProvider):
    """Identify music in an audio sample via ACRCloud.

    The ``httpx.AsyncClient`` is injected for testability.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        host: str | None = None,
        access_key: str | None = None,
        access_secret: str | None = None,
    ) -> None:
        self._http = http_client
        self._host = (host or "").strip().rstrip("/")
        self._access_key = access_key or ""
        self._access_secret = access_secret or ""
        self._logger = get_logger(__name__)

    def get_provider_name(self) -> str:
        return "acrcloud"

    def is_available(self) -> bool:
        return bool(self._host and self._access_key and self._access_secret)

    async def identify(self, audio_path: Path) -> RightsSignal:
        provider = self.get_provider_name()
        if not self.is_available():
            return RightsSignal.unavailable(
                "ACRCloud credentials are not configured", provider=provider
            )

        try:
            sample = await asyncio.to_thread(Path(audio_path).read_bytes)
            payload = await self._post_sample(sample)
        except (OSError, RightsProviderError) as exc:
            self._logger.warning("acrcloud_identify_failed", error=str(exc))
            return RightsSignal.unavailable(str(exc), provider=provider)

        return self.parse_response(payload)

    async def _post_sample(self, sample: bytes) -> dict[str, Any]:
        timestamp = int(time.time())
        data = {
            "access_key": self._access_key,
            "sample_bytes": str(len(sample)),
            "data_type": "audio",
            "signature_version": "1",
            "signature": sign_request(self._access_key, self._access_secret, timestamp),
            "timestamp": str(timestamp),
        }
        host = self._host if "://" in self._host else f"https://{self._host}"
        try:
            response = await self._http.post(
                f"{host}{_ENDPOINT}",
                data=data,
                files={"sample": ("sample.wav", sample, "audio/wav")},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise RightsProviderError(
                message=f"HTTP {exc.response.status_code} from ACRCloud",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise RightsProviderError(
                message=f"HTTP error calling ACRCloud: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except ValueError as exc:
            raise RightsProviderError(
                message="Non-JSON response from ACRCloud",
                provider_name=self.get_provider_name(),
            ) from exc

        if not isinstance(payload, dict):
            raise RightsProviderError(
                message="Unexpected ACRCloud response shape",
                provider_name=self.get_provider_name(),
            )
        return payload

    def parse_response(self, payload: dict[str, Any]) -> RightsSignal:
        """Map an ``/v1/identify`` response body onto a :class:`RightsSignal`."""
        provider = self.get_provider_name()
        status = payload.get("status") or {}
        code = status.get("code")
        music = (payload.get("metadata") or {}).get("music") or []

        if code == 0 and music:
            match = music[0]
            artists = match.get("artists") or []
            label = match.get("label")
            duration_ms = match.get("duration_ms")
            track = TrackInfo(
                title=match.get("title") or "unknown",
                artist=(artists[0].get("name") if artists else None) or "unknown",
                album=(match.get("album") or {}).get("name"),
                label=label,
                release_date=match.get("release_date"),
                duration_seconds=round(duration_ms / 1000) if duration_ms else None,
                genres=tuple(g.get("name", "") for g in match.get("genres") or [] if g.get("name")),
            )
            self._logger.info(
                "acrcloud_match", title=track.title, artist=track.artist, label=label
            )
            return RightsSignal(
                status=RightsStatus.IDENTIFIED,
                is_protected=True,
                confidence=_confidence(match.get("score")),
                track_info=track,
                copyright_usage=copyright_usage_for(label),
                provider=provider,
            )

        if code in (0, _NO_RESULT_CODE):
            return RightsSignal(status=RightsStatus.NO_MATCH, provider=provider)

        message = status.get("msg") or f"ACRCloud status code {code}"
        self._logger.warning("acrcloud_error_status", code=code, msg=message)
        return RightsSignal.unavailable(str(message), provider=provider)
