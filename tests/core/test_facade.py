"""Tests for the format-agnostic parse_manifest entry point."""

import pytest
from pydantic import ValidationError

from abrscope.core import parsers
from abrscope.core.exceptions import (
    EmptyContentError, InvalidBaseUrlError, ManifestParseError, UnsupportedFormatError,
)
from abrscope.core.models import ManifestFormat, Resolution, VariantType
from abrscope.core.parsers import parse_manifest
from abrscope.core.utils.url import is_absolute_url

from tests.conftest import MASTER_URL, MPD_URL


def test_parses_and_validates_hls(master_playlist: str) -> None:
    manifest = parse_manifest(master_playlist, MASTER_URL)

    assert manifest.format == ManifestFormat.HLS
    assert len(manifest.variants) == 1
    variant = manifest.variants[0]
    assert variant.type == VariantType.VIDEO
    assert variant.bitrate == 2227464
    assert variant.resolution == Resolution(width=960, height=540)
    assert variant.codecs == ["avc1.640020", "mp4a.40.2"]
    assert variant.url == "https://example.com/path/gear4/prog_index.m3u8"

    assert manifest.validation is not None
    assert manifest.validation.compliant is True
    assert manifest.validation.playlist_type == "master"


def test_parses_and_validates_dash(static_mpd: str) -> None:
    manifest = parse_manifest(static_mpd, MPD_URL)

    assert manifest.format == ManifestFormat.DASH
    assert manifest.validation.playlist_type == "mpd-static"
    assert manifest.validation.compliant is True


@pytest.mark.parametrize("content", ["", "   \n\t"])
def test_empty_content(content: str) -> None:
    with pytest.raises(EmptyContentError):
        parse_manifest(content, MASTER_URL)


def test_validation_can_be_skipped(master_playlist: str) -> None:
    assert parse_manifest(master_playlist, MASTER_URL, validate=False).validation is None


def test_validator_failure_is_logged_and_swallowed(
    master_playlist: str, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    def explode(manifest, raw_content):
        raise RuntimeError("validator bug")

    monkeypatch.setitem(parsers.VALIDATORS, ManifestFormat.HLS, explode)
    manifest = parse_manifest(master_playlist, MASTER_URL)

    assert manifest.validation is None
    assert len(manifest.variants) == 1
    assert any(r.levelname == "ERROR" and r.exc_info for r in caplog.records)


def test_unsupported_format(static_mpd: str, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delitem(parsers.PARSERS, ManifestFormat.DASH)
    with pytest.raises(UnsupportedFormatError):
        parse_manifest(static_mpd, MPD_URL)


def test_malformed_mpd_propagates() -> None:
    with pytest.raises(ManifestParseError):
        parse_manifest("<MPD><Period></MPD>", MPD_URL)


def test_urls_are_absolute(ladder_playlist: str, static_mpd: str) -> None:
    for content, url in ((ladder_playlist, MASTER_URL), (static_mpd, MPD_URL)):
        manifest = parse_manifest(content, url)
        assert all(is_absolute_url(v.url) for v in manifest.variants)


def test_result_is_immutable(master_playlist: str) -> None:
    manifest = parse_manifest(master_playlist, MASTER_URL)
    with pytest.raises(ValidationError):
        manifest.url = "https://elsewhere.example.com/"


@pytest.mark.parametrize("url", ["master.m3u8", "/path/master.m3u8", "", "example.com/master.m3u8"])
def test_unusable_base_url_is_rejected(url: str) -> None:
    content = "#EXTM3U\n#EXT-X-STREAM-INF:BANDWIDTH=5\na.m3u8\n"
    with pytest.raises(InvalidBaseUrlError):
        parse_manifest(content, url)


def test_file_url_is_a_usable_base() -> None:
    content = "#EXTM3U\n#EXT-X-STREAM-INF:BANDWIDTH=5\na.m3u8\n"
    manifest = parse_manifest(content, "file:///srv/media/master.m3u8")
    assert manifest.variants[0].url == "file:///srv/media/a.m3u8"


def test_unparseable_tag_still_gets_a_report() -> None:
    content = "#EXTM3U\n#EXT-X-VERSION:x\n#EXT-X-TARGETDURATION:6\n#EXTINF:6,\na.ts\n#EXT-X-ENDLIST\n"
    manifest = parse_manifest(content, "https://example.com/path/media.m3u8")

    assert len(manifest.segments) == 1
    assert manifest.validation is not None
    assert manifest.validation.playlist_type == "media"
