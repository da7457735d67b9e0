"""Tests for JSON/CSV/text export."""

import json

from abrscope.core.parsers import parse_manifest
from abrscope.core.utils.export import format_bitrate, to_csv, to_json, to_text

from tests.conftest import MASTER_URL, MEDIA_URL


def test_format_bitrate() -> None:
    assert format_bitrate(2227464) == "2.23 Mbps"
    assert format_bitrate(128000) == "128 Kbps"


def test_json_uses_camel_case_aliases(ladder_playlist: str) -> None:
    data = json.loads(to_json(parse_manifest(ladder_playlist, MASTER_URL)))

    assert data["format"] == "hls"
    assert data["variants"][0]["frameRate"] is not None
    assert data["variants"][3]["type"] == "audio"
    assert data["validation"]["playlistType"] == "master"
    assert "checkedRules" in data["validation"]


def test_csv_rows(master_playlist: str) -> None:
    lines = to_csv(parse_manifest(master_playlist, MASTER_URL)).splitlines()

    assert lines[0] == "ID,Type,Bitrate,Resolution,Frame Rate,Codecs,URL"
    assert lines[1] == (
        'variant-0,video,2227464,960x540,,"avc1.640020, mp4a.40.2",'
        "https://example.com/path/gear4/prog_index.m3u8"
    )


def test_text_summary(ladder_playlist: str, media_playlist: str) -> None:
    text = to_text(parse_manifest(ladder_playlist, MASTER_URL))

    assert text.startswith("HLS Manifest Analysis")
    assert "Video Variants (3)" in text
    assert "Audio Variants (1)" in text
    assert "     Resolution: 1280x720" in text
    assert "Encrypted: No" in text

    media = to_text(parse_manifest(media_playlist, MEDIA_URL))
    assert "Segments: 3" in media
    assert "Average Segment Duration: 7.17s" in media
