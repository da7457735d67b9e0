"""Tests for manifest format sniffing."""

from abrscope.core.models import ManifestFormat
from abrscope.core.parsers import detect_format


def test_hls_header() -> None:
    assert detect_format("#EXTM3U\n#EXT-X-VERSION:3\n") == ManifestFormat.HLS


def test_leading_whitespace_is_ignored() -> None:
    assert detect_format("\n\n  #EXTM3U\n") == ManifestFormat.HLS
    assert detect_format("\n  <MPD type=\"static\"/>") == ManifestFormat.DASH


def test_xml_declaration_and_mpd_root() -> None:
    assert detect_format('<?xml version="1.0"?><MPD/>') == ManifestFormat.DASH
    assert detect_format("<MPD></MPD>") == ManifestFormat.DASH


def test_mpd_marker_inside_sniff_window() -> None:
    assert detect_format('\ufeff<?xml version="1.0"?>\n<MPD/>') == ManifestFormat.DASH


def test_unknown_content_defaults_to_hls() -> None:
    assert detect_format("hello world") == ManifestFormat.HLS
    assert detect_format("") == ManifestFormat.HLS


def test_non_string_input_defaults_to_hls() -> None:
    assert detect_format(None) == ManifestFormat.HLS
    assert detect_format(b"#EXTM3U") == ManifestFormat.HLS
