"""Unit tests for the YouTube source adapters."""

from __future__ import annotations

import httpx
import pytest

from reelscope.models.extraction import ContentRef, MappingStatus
from reelscope.models.record import SourceKind
from reelscope.providers.oembed import username_from_author_url
from reelscope.providers.youtube.data_api_provider import YouTubeDataAPIProvider
from reelscope.providers.youtube.invidious_provider import InvidiousProvider
from reelscope.providers.youtube.mapping import map_channel
from reelscope.providers.youtube.oembed_provider import YouTubeOEmbedProvider
from reelscope.providers.youtube.proxy_api_provider import YouTubeProxyAPIProvider
from reelscope.utils.errors import MissingCredentialError, UpstreamFailureError


def _video(**snippet_overrides) -> dict:
    snippet = {
        "channelId": "UC123",
        "channelTitle": "Rick Astley",
        "title": "Never Gonna Give You Up #music",
        "description": "Official video #pop",
        "publishedAt": "2009-10-25T06:57:33Z",
        "thumbnails": {
            "high": {"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg"},
            "maxres": {"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"},
        },
    }
    snippet.update(snippet_overrides)
    return {
        "id": "dQw4w9WgXcQ",
        "snippet": snippet,
        "statistics": {"viewCount": "1000", "likeCount": "100", "commentCount": "5"},
        "contentDetails": {"duration": "PT3M33S"},
    }


_CHANNEL = {
    "id": "UC123",
    "snippet": {
        "title": "Rick Astley",
        "customUrl": "@rickastley",
        "description": "Official channel",
        "thumbnails": {"default": {"url": "https://yt3.ggpht.com/avatar.jpg"}},
    },
    "statistics": {"subscriberCount": "4000000"},
}


def _api_error(status: int, message: str) -> httpx.Response:
    return httpx.Response(status, json={"error": {"code": status, "message": message}})


# ======================================================================
# YouTube Data API
# ======================================================================


class TestYouTubeDataAPIProvider:
    def test_metadata(self, mock_http) -> None:
        provider = YouTubeDataAPIProvider(mock_http(lambda r: httpx.Response(200)), api_key="k")
        assert provider.get_provider_name() == "first_party_api"
        assert provider.source_kind is SourceKind.FIRST_PARTY_API
        assert provider.required_credential == "YOUTUBE_API_KEY"
        assert provider.is_available() is True

    def test_unavailable_without_key(self, mock_http) -> None:
        provider = YouTubeDataAPIProvider(mock_http(lambda r: httpx.Response(200)), api_key="")
        assert provider.is_available() is False

    @pytest.mark.asyncio
    async def test_fetch_and_normalize(self, mock_http, youtube_ref: ContentRef) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.path.endswith("/videos"):
                return httpx.Response(200, json={"items": [_video()]})
            return httpx.Response(200, json={"items": [_CHANNEL]})

        provider = YouTubeDataAPIProvider(mock_http(handler), api_key="secret")
        payload = await provider.fetch(youtube_ref)
        result = provider.normalize(payload, youtube_ref)

        assert [r.url.path for r in seen] == ["/youtube/v3/videos", "/youtube/v3/channels"]
        assert seen[0].url.params["id"] == "dQw4w9WgXcQ"
        assert seen[0].url.params["key"] == "secret"
        assert seen[1].url.params["id"] == "UC123"

        assert result.status is MappingStatus.SUCCESS
        record = result.record
        assert record.title == "Never Gonna Give You Up #music"
        assert record.views == 1000
        assert record.likes == 100
        assert record.comments == 5
        assert record.shares == 0
        assert record.duration_seconds == 213
        assert record.hashtags == ("#music", "#pop")
        assert record.thumbnail_url.endswith("maxresdefault.jpg")
        assert record.engagement_rating == 5
        assert record.published_at is not None and record.published_at.year == 2009
        assert record.author.username == "rickastley"
        assert record.author.follower_count == 4_000_000
        assert record.author.avatar_url == "https://yt3.ggpht.com/avatar.jpg"
        assert record.media_urls == (youtube_ref.canonical_url,)

    @pytest.mark.asyncio
    async def test_channel_failure_is_partial(self, mock_http, youtube_ref: ContentRef) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/videos"):
                return httpx.Response(200, json={"items": [_video()]})
            return _api_error(403, "Access forbidden")

        provider = YouTubeDataAPIProvider(mock_http(handler), api_key="k")
        result = provider.normalize(await provider.fetch(youtube_ref), youtube_ref)

        assert result.status is MappingStatus.PARTIAL
        assert result.usable is True
        assert result.record.author.username == "Rick Astley"
        assert result.record.notes == ("channel lookup failed: HTTP 403: Access forbidden",)

    @pytest.mark.asyncio
    async def test_hashtags_fall_back_to_tags(self, mock_http, youtube_ref: ContentRef) -> None:
        video = _video(title="Plain title", description="", tags=["music", "80s"])

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/videos"):
                return httpx.Response(200, json={"items": [video]})
            return httpx.Response(200, json={"items": [_CHANNEL]})

        provider = YouTubeDataAPIProvider(mock_http(handler), api_key="k")
        result = provider.normalize(await provider.fetch(youtube_ref), youtube_ref)
        assert result.record.hashtags == ("#music", "#80s")

    @pytest.mark.asyncio
    async def test_video_not_found(self, mock_http, youtube_ref: ContentRef) -> None:
        provider = YouTubeDataAPIProvider(
            mock_http(lambda r: httpx.Response(200, json={"items": []})), api_key="k"
        )
        with pytest.raises(UpstreamFailureError) as exc_info:
            await provider.fetch(youtube_ref)
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_key(self, mock_http, youtube_ref: ContentRef) -> None:
        provider = YouTubeDataAPIProvider(
            mock_http(lambda r: _api_error(400, "API key not valid. Please pass a valid API key.")),
            api_key="revoked",
        )
        with pytest.raises(UpstreamFailureError) as exc_info:
            await provider.fetch(youtube_ref)

        error = exc_info.value
        assert error.status_code == 400
        assert error.message == "HTTP 400: API key not valid. Please pass a valid API key."
        assert provider.remediation(error) == [
            "Check that YOUTUBE_API_KEY is a valid YouTube Data API key"
        ]

    @pytest.mark.asyncio
    async def test_transport_error(self, mock_http, youtube_ref: ContentRef) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        provider = YouTubeDataAPIProvider(mock_http(handler), api_key="k")
        with pytest.raises(UpstreamFailureError, match="HTTP error calling"):
            await provider.fetch(youtube_ref)

    @pytest.mark.asyncio
    async def test_timeout_error(self, mock_http, youtube_ref: ContentRef) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow")

        provider = YouTubeDataAPIProvider(mock_http(handler), api_key="k")
        with pytest.raises(UpstreamFailureError, match="Timeout calling"):
            await provider.fetch(youtube_ref)

    @pytest.mark.parametrize(
        ("error", "hint"),
        [
            (
                MissingCredentialError(credential="YOUTUBE_API_KEY"),
                "Configure YOUTUBE_API_KEY to enable the YouTube Data API",
            ),
            (
                UpstreamFailureError("HTTP 403: YouTube Data API v3 has not been used in project 1", status_code=403),
                "Enable YouTube Data API v3 in Google Cloud Console",
            ),
            (
                UpstreamFailureError("HTTP 403: The request cannot be completed because you have exceeded your quota.", status_code=403),
                "YouTube Data API quota exhausted; wait for the daily reset or raise the quota",
            ),
            (
                UpstreamFailureError("HTTP 403: Requests from this referer are blocked.", status_code=403),
                "Verify the API key restrictions allow the YouTube Data API",
            ),
        ],
    )
    def test_remediation(self, mock_http, error: Exception, hint: str) -> None:
        provider = YouTubeDataAPIProvider(mock_http(lambda r: httpx.Response(200)), api_key="k")
        assert provider.remediation(error) == [hint]

    def test_no_remediation_for_server_errors(self, mock_http) -> None:
        provider = YouTubeDataAPIProvider(mock_http(lambda r: httpx.Response(200)), api_key="k")
        assert provider.remediation(UpstreamFailureError("HTTP 503", status_code=503)) == []

    def test_normalize_rejects_bad_payload(self, mock_http, youtube_ref: ContentRef) -> None:
        provider = YouTubeDataAPIProvider(mock_http(lambda r: httpx.Response(200)), api_key="k")
        assert provider.normalize({"video": {"id": "x"}}, youtube_ref).usable is False
        assert provider.normalize("nope", youtube_ref).usable is False


class TestMapChannel:
    def test_handle_loses_at_prefix(self) -> None:
        author = map_channel({"snippet": {"customUrl": "@RickAstleyYT"}}, {"channelTitle": "Rick Astley"})
        assert author.username == "RickAstleyYT"

    def test_bare_at_falls_back_to_channel_title(self) -> None:
        author = map_channel({"snippet": {"customUrl": "@"}}, {"channelTitle": "Rick Astley"})
        assert author.username == "Rick Astley"


# ======================================================================
# RapidAPI proxy
# ======================================================================


class TestYouTubeProxyAPIProvider:
    @pytest.mark.asyncio
    async def test_fetch_sends_rapidapi_headers(self, mock_http, youtube_ref: ContentRef) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"items": [_video()]})

        provider = YouTubeProxyAPIProvider(mock_http(handler), api_key="rapid")
        result = provider.normalize(await provider.fetch(youtube_ref), youtube_ref)

        assert seen[0].url.host == "youtube-v31.p.rapidapi.com"
        assert seen[0].headers["X-RapidAPI-Key"] == "rapid"
        assert seen[0].headers["X-RapidAPI-Host"] == "youtube-v31.p.rapidapi.com"
        assert result.status is MappingStatus.SUCCESS
        assert result.record.views == 1000
        # No channel lookup: the author comes from the snippet.
        assert result.record.author.username == "Rick Astley"

    def test_normalize_without_items(self, mock_http, youtube_ref: ContentRef) -> None:
        provider = YouTubeProxyAPIProvider(mock_http(lambda r: httpx.Response(200)), api_key="k")
        result = provider.normalize({"items": []}, youtube_ref)
        assert result.status is MappingStatus.PARSE_FAILURE

    def test_remediation(self, mock_http) -> None:
        provider = YouTubeProxyAPIProvider(mock_http(lambda r: httpx.Response(200)), api_key="")
        assert provider.is_available() is False
        assert provider.remediation(MissingCredentialError()) == [
            "Configure RAPIDAPI_KEY to enable the RapidAPI YouTube proxy"
        ]
        assert provider.remediation(UpstreamFailureError("HTTP 429", status_code=429)) == [
            "Verify RapidAPI subscription and quota limits"
        ]


# ======================================================================
# Invidious
# ======================================================================


_INVIDIOUS_PAYLOAD = {
    "title": "Never Gonna Give You Up",
    "description": "",
    "viewCount": 1000,
    "likeCount": 50,
    "author": "Rick Astley",
    "authorId": "UC123",
    "subCountText": "4.1M",
    "authorVerified": True,
    "lengthSeconds": 213,
    "published": 1256453853,
    "keywords": ["music", "80s"],
    "videoThumbnails": [{"url": "https://inv.example/vi/maxres.jpg"}],
    "authorThumbnails": [{"url": "https://inv.example/a1.jpg"}, {"url": "https://inv.example/a2.jpg"}],
}


class TestInvidiousProvider:
    def test_opt_in(self, mock_http) -> None:
        client = mock_http(lambda r: httpx.Response(200))
        assert InvidiousProvider(client, instances=[]).is_available() is False
        provider = InvidiousProvider(client, instances=["https://yewtu.be/"])
        assert provider.is_available() is True
        assert provider.get_provider_name() == "invidious_api"
        assert provider.required_credential is None

    @pytest.mark.asyncio
    async def test_falls_through_instances(self, mock_http, youtube_ref: ContentRef) -> None:
        hosts: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            hosts.append(request.url.host)
            if request.url.host == "down.example":
                return httpx.Response(502, text="Bad Gateway")
            return httpx.Response(200, json=_INVIDIOUS_PAYLOAD)

        provider = InvidiousProvider(
            mock_http(handler), instances=["https://down.example", "https://up.example"]
        )
        payload = await provider.fetch(youtube_ref)

        assert hosts == ["down.example", "up.example"]
        assert payload["title"] == "Never Gonna Give You Up"

    @pytest.mark.asyncio
    async def test_all_instances_fail(self, mock_http, youtube_ref: ContentRef) -> None:
        provider = InvidiousProvider(
            mock_http(lambda r: httpx.Response(500)), instances=["https://a.example", "https://b.example"]
        )
        with pytest.raises(UpstreamFailureError, match="All Invidious instances failed"):
            await provider.fetch(youtube_ref)

    def test_normalize(self, mock_http, youtube_ref: ContentRef) -> None:
        provider = InvidiousProvider(mock_http(lambda r: httpx.Response(200)), instances=["https://x"])
        result = provider.normalize(_INVIDIOUS_PAYLOAD, youtube_ref)

        record = result.record
        assert result.status is MappingStatus.SUCCESS
        assert record.views == 1000
        assert record.likes == 50
        assert record.duration_seconds == 213
        assert record.hashtags == ("#music", "#80s")
        assert record.author.username == "UC123"
        assert record.author.display_name == "Rick Astley"
        assert record.author.follower_count == 4_100_000
        assert record.author.verified is True
        assert record.author.avatar_url == "https://inv.example/a2.jpg"
        assert record.thumbnail_url == "https://inv.example/vi/maxres.jpg"

    def test_normalize_without_title(self, mock_http, youtube_ref: ContentRef) -> None:
        provider = InvidiousProvider(mock_http(lambda r: httpx.Response(200)), instances=["https://x"])
        assert provider.normalize({"viewCount": 3}, youtube_ref).usable is False


# ======================================================================
# oEmbed
# ======================================================================


class TestYouTubeOEmbedProvider:
    @pytest.mark.asyncio
    async def test_fetch_and_normalize(self, mock_http, youtube_ref: ContentRef) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "title": "Never Gonna Give You Up #rick",
                    "author_name": "Rick Astley",
                    "author_url": "https://www.youtube.com/@RickAstleyYT",
                    "thumbnail_url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
                },
            )

        provider = YouTubeOEmbedProvider(mock_http(handler))
        result = provider.normalize(await provider.fetch(youtube_ref), youtube_ref)

        assert seen[0].url.path == "/oembed"
        assert seen[0].url.params["url"] == youtube_ref.canonical_url
        assert seen[0].url.params["format"] == "json"
        record = result.record
        assert record.title == "Never Gonna Give You Up #rick"
        assert record.author.username == "RickAstleyYT"
        assert record.author.display_name == "Rick Astley"
        assert record.hashtags == ("#rick",)
        assert record.views == 0
        assert record.has_engagement is False

    def test_missing_title_is_parse_failure(self, mock_http, youtube_ref: ContentRef) -> None:
        provider = YouTubeOEmbedProvider(mock_http(lambda r: httpx.Response(200)))
        result = provider.normalize({"author_name": "x"}, youtube_ref)
        assert result.status is MappingStatus.PARSE_FAILURE
        assert result.notes == ("oEmbed payload has no title",)

    def test_always_available(self, mock_http) -> None:
        provider = YouTubeOEmbedProvider(mock_http(lambda r: httpx.Response(200)))
        assert provider.is_available() is True
        assert provider.source_kind is SourceKind.OEMBED
        assert provider.remediation(UpstreamFailureError("HTTP 500", status_code=500)) == []


class TestUsernameFromAuthorUrl:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://www.youtube.com/@RickAstleyYT", "RickAstleyYT"),
            ("https://www.tiktok.com/@dancer", "dancer"),
            ("https://www.youtube.com/channel/UC123", "UC123"),
            ("https://www.youtube.com/", None),
            (None, None),
        ],
    )
    def test_extracts_last_segment(self, url, expected) -> None:
        assert username_from_author_url(url) == expected
