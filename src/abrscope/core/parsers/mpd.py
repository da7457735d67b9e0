"""
Minimal MPD (ISO/IEC 23009-1) object model.

Reads the XML with ElementTree and flattens Periods/AdaptationSets/
Representations into playlists plus AUDIO/SUBTITLES media groups, the
shape the DASH parser maps onto variants.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, List, Optional
from xml.etree.ElementTree import Element, ParseError, fromstring

import isodate

from abrscope.core.exceptions import ManifestParseError
from abrscope.core.utils.url import resolve_url

logger = logging.getLogger(__name__)

# Attributes a Representation inherits from its AdaptationSet
INHERITED_ATTRIBUTES = ("mimeType", "contentType", "codecs", "width", "height", "frameRate", "lang")

# isodate returns a Duration (not a timedelta) when years/months are used
_DURATION_ANCHOR = datetime(1970, 1, 1)


@dataclass
class MpdPlaylist:
    attributes: Dict[str, str]
    uri: str
    content_protection: bool = False

    @property
    def id(self) -> Optional[str]:
        return self.attributes.get("id")


@dataclass
class MpdManifest:
    type: str = "static"
    profiles: Optional[str] = None
    duration: Optional[float] = None
    end_list: bool = True
    content_protection: bool = False
    period_count: int = 0
    playlists: List[MpdPlaylist] = field(default_factory=list)
    media_groups: Dict[str, Dict[str, List[MpdPlaylist]]] = field(
        default_factory=lambda: {"AUDIO": {}, "SUBTITLES": {}}
    )


def local_name(tag) -> str:
    """``{urn:mpeg:dash:schema:mpd:2011}Period`` -> ``Period``."""
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def children(element: Element, name: str) -> Iterator[Element]:
    return (child for child in element if local_name(child.tag) == name)


def parse_duration(value: Optional[str]) -> Optional[float]:
    """ISO-8601 duration (``PT1H2M3.5S``, ``P1DT2H``) -> seconds."""
    if not value:
        return None
    try:
        parsed = isodate.parse_duration(value.strip())
        if isinstance(parsed, isodate.Duration):
            parsed = parsed.totimedelta(start=_DURATION_ANCHOR)
    except (isodate.ISO8601Error, ValueError, OverflowError):
        logger.debug(f"Unparseable ISO-8601 duration {value!r}")
        return None
    return parsed.total_seconds()


def load_xml(content: str) -> Element:
    try:
        return fromstring(content.lstrip("\ufeff \t\r\n"))
    except ParseError as e:
        raise ManifestParseError(f"MPD is not well-formed XML: {e}") from e


def parse_mpd(content: str, manifest_uri: str) -> MpdManifest:
    root = load_xml(content)
    if local_name(root.tag) != "MPD":
        raise ManifestParseError(f"Expected <MPD> root element, found <{local_name(root.tag)}>")

    mpd_type = root.get("type", "static")
    manifest = MpdManifest(
        type=mpd_type,
        profiles=root.get("profiles"),
        duration=parse_duration(root.get("mediaPresentationDuration")),
        end_list=mpd_type == "static",
        content_protection=any(True for _ in children(root, "ContentProtection")),
    )

    seen_ids = set()
    mpd_base = _base_url(root, manifest_uri)

    for period in children(root, "Period"):
        manifest.period_count += 1
        period_base = _base_url(period, mpd_base)

        for adaptation_set in children(period, "AdaptationSet"):
            set_base = _base_url(adaptation_set, period_base)
            set_protected = any(True for _ in children(adaptation_set, "ContentProtection"))

            for representation in children(adaptation_set, "Representation"):
                attributes = {
                    key: adaptation_set.get(key)
                    for key in INHERITED_ATTRIBUTES
                    if adaptation_set.get(key) is not None
                }
                attributes.update(representation.attrib)

                rep_id = attributes.get("id")
                if rep_id is not None:
                    # Same Representation continued in a later Period
                    if rep_id in seen_ids:
                        continue
                    seen_ids.add(rep_id)

                playlist = MpdPlaylist(
                    attributes=attributes,
                    uri=_base_url(representation, set_base),
                    content_protection=set_protected or any(
                        True for _ in children(representation, "ContentProtection")
                    ),
                )
                _assign(manifest, playlist, adaptation_set)

    logger.debug(
        f"MPD object model: {manifest.period_count} period(s), "
        f"{len(manifest.playlists)} playlist(s), "
        f"{sum(len(g) for g in manifest.media_groups['AUDIO'].values())} audio playlist(s)"
    )
    return manifest


def _base_url(element: Element, parent_base: str) -> str:
    for base in children(element, "BaseURL"):
        if base.text and base.text.strip():
            return resolve_url(base.text.strip(), parent_base)
    return parent_base


def _assign(manifest: MpdManifest, playlist: MpdPlaylist, adaptation_set: Element) -> None:
    attrs = playlist.attributes
    mime_type = (attrs.get("mimeType") or "").lower()
    content_type = (attrs.get("contentType") or "").lower()

    if "audio" in mime_type or content_type == "audio":
        group = "AUDIO"
    elif mime_type.startswith("text/") or content_type == "text" or "ttml" in mime_type:
        group = "SUBTITLES"
    else:
        manifest.playlists.append(playlist)
        return

    label = attrs.get("lang") or adaptation_set.get("id") or f"{group.lower()}-{len(manifest.media_groups[group])}"
    manifest.media_groups[group].setdefault(label, []).append(playlist)
