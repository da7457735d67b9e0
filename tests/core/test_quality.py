"""Tests for the best-practice manifest lint."""

from typing import List, Optional

from abrscope.core.models import (
    ManifestFormat, ManifestMetadata, ManifestType, ParsedManifest,
    Resolution, Segment, Variant, VariantType,
)
from abrscope.core.validation import lint_manifest, summarize


def video(bitrate: int, index: int = 0, resolution: Optional[Resolution] = Resolution(width=1280, height=720),
          codecs: Optional[List[str]] = None) -> Variant:
    return Variant(
        id=f"variant-{index}",
        bitrate=bitrate,
        resolution=resolution,
        codecs=["avc1.64001f"] if codecs is None else codecs,
        url=f"https://example.com/{index}.m3u8",
        type=VariantType.VIDEO,
    )


def manifest(variants: List[Variant], **metadata) -> ParsedManifest:
    metadata.setdefault("type", ManifestType.VOD)
    segments = metadata.pop("segments", None)
    return ParsedManifest(
        format=ManifestFormat.HLS,
        raw="",
        url="https://example.com/master.m3u8",
        variants=variants,
        metadata=ManifestMetadata(**metadata),
        segments=segments,
    )


def ladder(*bitrates: int) -> List[Variant]:
    return [video(b, i) for i, b in enumerate(bitrates)]


def test_no_variants_stops_early() -> None:
    issues = lint_manifest(manifest([], encrypted=True))

    assert len(issues) == 1
    assert issues[0].severity == "error"
    assert issues[0].category == "variants"


def test_healthy_ladder() -> None:
    assert lint_manifest(manifest(ladder(1000000, 2000000, 3000000, 4000000))) == []


def test_audio_only() -> None:
    audio = Variant(id="variant-0", bitrate=64000, url="https://example.com/a.m3u8", type=VariantType.AUDIO)
    issues = lint_manifest(manifest([audio]))

    assert [i.message for i in issues] == ["No video variants found"]


def test_short_ladder_and_duplicates() -> None:
    messages = [i.message for i in lint_manifest(manifest(ladder(1000000, 1000000)))]

    assert any(m.startswith("Only 2 video variant(s)") for m in messages)
    assert "Multiple variants have the same bitrate" in messages


def test_missing_resolution_and_codecs() -> None:
    variants = ladder(1000000, 2000000) + [video(3000000, 2, resolution=None, codecs=[])]
    issues = lint_manifest(manifest(variants))

    assert [i.category for i in issues] == ["variants", "codecs"]
    assert issues[1].message == "Variant 3 is missing codec information"


def test_large_ladder_gap() -> None:
    issues = lint_manifest(manifest(ladder(1000000, 2000000, 3000000, 10000000)))

    assert len(issues) == 1
    assert issues[0].severity == "info"
    assert issues[0].category == "abr-ladder"
    assert issues[0].message == "Large gap detected between variant 3 and 4: 7.00 Mbps"


def test_live_without_target_duration() -> None:
    segments = [Segment(id="segment-0", duration=6.0, url="https://example.com/0.ts", sequence=0)]
    issues = lint_manifest(manifest(ladder(1, 2, 3), type=ManifestType.LIVE, segments=segments))

    assert [i.category for i in issues] == ["metadata"]


def test_encrypted_is_info() -> None:
    issues = lint_manifest(manifest(ladder(1, 2, 3), encrypted=True))
    assert [(i.severity, i.category) for i in issues] == [("info", "metadata")]


def test_summarize() -> None:
    summary = summarize(lint_manifest(manifest(ladder(1000000, 1000000), encrypted=True)))

    assert summary == {"errors": 0, "warnings": 2, "info": 1, "healthy": True}
    assert summarize(lint_manifest(manifest([])))["healthy"] is False
