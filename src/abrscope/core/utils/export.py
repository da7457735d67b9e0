"""
Serializers for a parsed manifest: JSON, CSV of the variant table and a
plain-text summary.
"""
import csv
import io
from typing import List

from abrscope.core.models import ParsedManifest, VariantType

CSV_HEADERS = ["ID", "Type", "Bitrate", "Resolution", "Frame Rate", "Codecs", "URL"]
RULE_WIDTH = 50


def format_bitrate(bps: int) -> str:
    if bps >= 1_000_000:
        return f"{bps / 1_000_000:.2f} Mbps"
    return f"{bps / 1000:.0f} Kbps"


def to_json(manifest: ParsedManifest, indent: int = 2) -> str:
    return manifest.model_dump_json(by_alias=True, indent=indent)


def to_csv(manifest: ParsedManifest) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for variant in manifest.variants:
        writer.writerow([
            variant.id,
            variant.type.value,
            variant.bitrate,
            str(variant.resolution) if variant.resolution else "",
            variant.frame_rate if variant.frame_rate is not None else "",
            ", ".join(variant.codecs),
            variant.url,
        ])
    return buffer.getvalue()


def to_text(manifest: ParsedManifest) -> str:
    meta = manifest.metadata
    name = manifest.format.value.upper()

    lines: List[str] = [f"{name} Manifest Analysis", "=" * RULE_WIDTH, ""]
    lines.append(f"URL: {manifest.url}")
    lines.append(f"Format: {name}")
    lines.append(f"Type: {meta.type.value}")
    if meta.duration:
        lines.append(f"Duration: {meta.duration}s")
    if meta.target_duration:
        lines.append(f"Target Duration: {meta.target_duration}s")
    if meta.min_buffer_time:
        lines.append(f"Min Buffer Time: {meta.min_buffer_time}s")
    lines.append(f"Encrypted: {'Yes' if meta.encrypted else 'No'}")
    lines.append("")

    for variant_type, title in (
        (VariantType.VIDEO, "Video"),
        (VariantType.AUDIO, "Audio"),
        (VariantType.SUBTITLE, "Subtitle"),
    ):
        variants = manifest.variants_of(variant_type)
        if not variants:
            continue
        lines.append(f"{title} Variants ({len(variants)})")
        lines.append("-" * RULE_WIDTH)
        for index, v in enumerate(variants, 1):
            if variant_type == VariantType.SUBTITLE:
                lines.append(f"  {index}. {', '.join(v.codecs)}")
            else:
                lines.append(f"  {index}. {format_bitrate(v.bitrate)}")
            if variant_type == VariantType.VIDEO:
                if v.resolution:
                    lines.append(f"     Resolution: {v.resolution}")
                if v.frame_rate:
                    lines.append(f"     Frame Rate: {v.frame_rate} fps")
            if variant_type != VariantType.SUBTITLE:
                lines.append(f"     Codecs: {', '.join(v.codecs)}")
            lines.append(f"     URL: {v.url}")
            lines.append("")

    if manifest.segments:
        average = sum(s.duration for s in manifest.segments) / len(manifest.segments)
        lines.append(f"Segments: {len(manifest.segments)}")
        lines.append(f"Average Segment Duration: {average:.2f}s")

    return "\n".join(lines)


EXPORTERS = {
    "json": to_json,
    "csv": to_csv,
    "text": to_text,
}
