"""Unit tests for URL -> platform / content-id detection."""

from __future__ import annotations

import pytest

from reelscope.models.record import Platform
from reelscope.services.platform_detector import (
    PlatformDetector,
    PlatformPattern,
    fingerprint_for,
)
from reelscope.utils.errors import UnsupportedPlatformError

_VIDEO_ID = "dQw4w9WgXcQ"


class TestYouTubeDetection:
    @pytest.fixture()
    def detector(self) -> PlatformDetector:
        return PlatformDetector()

    @pytest.mark.parametrize(
        "url",
        [
            f"https://www.youtube.com/watch?v={_VIDEO_ID}",
            f"https://youtube.com/watch?v={_VIDEO_ID}&t=42s",
            f"https://m.youtube.com/watch?v={_VIDEO_ID}",
            f"http://youtu.be/{_VIDEO_ID}",
            f"https://youtu.be/{_VIDEO_ID}?si=abc",
            f"https://www.youtube.com/shorts/{_VIDEO_ID}",
            f"https://www.youtube.com/embed/{_VIDEO_ID}",
            f"https://www.youtube.com/live/{_VIDEO_ID}",
            f"https://music.youtube.com/watch?v={_VIDEO_ID}",
            f"youtube.com/watch?v={_VIDEO_ID}",
        ],
    )
    def test_url_forms(self, detector: PlatformDetector, url: str) -> None:
        ref = detector.detect(url)
        assert ref.platform is Platform.YOUTUBE
        assert ref.content_id == _VIDEO_ID
        assert ref.url == url

    def test_canonical_url(self, detector: PlatformDetector) -> None:
        ref = detector.detect(f"https://youtu.be/{_VIDEO_ID}")
        assert ref.canonical_url == f"https://www.youtube.com/watch?v={_VIDEO_ID}"

    def test_spellings_share_fingerprint(self, detector: PlatformDetector) -> None:
        short = detector.detect(f"https://youtu.be/{_VIDEO_ID}")
        long = detector.detect(f"https://www.youtube.com/watch?v={_VIDEO_ID}")
        assert short.fingerprint == long.fingerprint

    def test_known_host_unknown_form(self, detector: PlatformDetector) -> None:
        with pytest.raises(UnsupportedPlatformError, match="Unrecognised youtube URL form"):
            detector.detect("https://www.youtube.com/channel/UC123")

    def test_malformed_video_id(self, detector: PlatformDetector) -> None:
        with pytest.raises(UnsupportedPlatformError):
            detector.detect("https://www.youtube.com/watch?v=short")


class TestTikTokDetection:
    @pytest.fixture()
    def detector(self) -> PlatformDetector:
        return PlatformDetector()

    def test_full_video_url(self, detector: PlatformDetector) -> None:
        ref = detector.detect("https://www.tiktok.com/@dancer/video/7234567890123456789?lang=en")
        assert ref.platform is Platform.TIKTOK
        assert ref.content_id == "7234567890123456789"
        assert ref.canonical_url == "https://www.tiktok.com/@dancer/video/7234567890123456789"

    def test_mobile_host(self, detector: PlatformDetector) -> None:
        ref = detector.detect("https://m.tiktok.com/v/video/7234567890123456789")
        assert ref.content_id == "7234567890123456789"

    @pytest.mark.parametrize("host", ["vm.tiktok.com", "vt.tiktok.com"])
    def test_short_links(self, detector: PlatformDetector, host: str) -> None:
        ref = detector.detect(f"https://{host}/ZMabc123/")
        assert ref.platform is Platform.TIKTOK
        assert ref.content_id == "ZMabc123"

    def test_profile_url_is_rejected(self, detector: PlatformDetector) -> None:
        with pytest.raises(UnsupportedPlatformError, match="Unrecognised tiktok URL form"):
            detector.detect("https://www.tiktok.com/@dancer")


class TestUnsupportedInput:
    @pytest.fixture()
    def detector(self) -> PlatformDetector:
        return PlatformDetector()

    @pytest.mark.parametrize("url", ["", "   ", "ftp://youtube.com/watch?v=dQw4w9WgXcQ", "https://"])
    def test_invalid_urls(self, detector: PlatformDetector, url: str) -> None:
        with pytest.raises(UnsupportedPlatformError, match="Not a valid http"):
            detector.detect(url)

    def test_unknown_host(self, detector: PlatformDetector) -> None:
        with pytest.raises(UnsupportedPlatformError, match="Unsupported platform"):
            detector.detect("https://vimeo.com/123456")

    def test_lookalike_host(self, detector: PlatformDetector) -> None:
        with pytest.raises(UnsupportedPlatformError):
            detector.detect(f"https://notyoutube.com/watch?v={_VIDEO_ID}")


class TestFingerprint:
    def test_stable_and_short(self) -> None:
        first = fingerprint_for(Platform.YOUTUBE, _VIDEO_ID)
        assert first == fingerprint_for(Platform.YOUTUBE, _VIDEO_ID)
        assert len(first) == 16

    def test_platform_scoped(self) -> None:
        assert fingerprint_for(Platform.YOUTUBE, "abc") != fingerprint_for(Platform.TIKTOK, "abc")


class TestRegister:
    def test_registered_pattern_is_consulted(self) -> None:
        detector = PlatformDetector(patterns=())

        def _extract(_url, parsed):
            return parsed.path.strip("/") or None

        detector.register(
            PlatformPattern(
                platform=Platform.TIKTOK,
                host_matches=lambda host: host == "example.test",
                extractors=(_extract,),
            )
        )
        ref = detector.detect("https://example.test/clip42")
        assert ref.platform is Platform.TIKTOK
        assert ref.content_id == "clip42"
        assert ref.canonical_url == "https://example.test/clip42"
        assert detector.platforms == [Platform.TIKTOK]
