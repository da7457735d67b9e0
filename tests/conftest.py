"""Fixtures for testing abrscope."""

import logging
import pathlib

import pytest

MASTER_URL = "https://example.com/path/master.m3u8"
MEDIA_URL = "https://example.com/path/media.m3u8"
MPD_URL = "https://cdn.example.com/vod/manifest.mpd"

MASTER_PLAYLIST = """#EXTM3U
#EXT-X-VERSION:3
#EXT-X-STREAM-INF:BANDWIDTH=2227464,RESOLUTION=960x540,CODECS="avc1.640020,mp4a.40.2"
gear4/prog_index.m3u8
"""

LADDER_PLAYLIST = """#EXTM3U
#EXT-X-VERSION:4
#EXT-X-INDEPENDENT-SEGMENTS
#EXT-X-STREAM-INF:BANDWIDTH=800000,AVERAGE-BANDWIDTH=750000,RESOLUTION=640x360,FRAME-RATE=29.970,CODECS="avc1.4d401e,mp4a.40.2"
360p/index.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=2500000,RESOLUTION=1280x720,FRAME-RATE=29.970,CODECS="avc1.4d401f,mp4a.40.2"
/streams/720p/index.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=5000000,RESOLUTION=1920x1080,FRAME-RATE=29.970,CODECS="avc1.640028,mp4a.40.2"
https://cdn.example.com/1080p/index.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=64000,CODECS="mp4a.40.2"
audio/index.m3u8
"""

MEDIA_PLAYLIST = """#EXTM3U
#EXT-X-VERSION:3
#EXT-X-TARGETDURATION:10
#EXT-X-MEDIA-SEQUENCE:100
#EXTINF:9.009,
seg100.ts
#EXTINF:9.009,
seg101.ts
#EXTINF:3.5,
https://cdn.example.com/seg102.ts
#EXT-X-ENDLIST
"""

STATIC_MPD = """<?xml version="1.0" encoding="UTF-8"?>
<MPD xmlns="urn:mpeg:dash:schema:mpd:2011" type="static" mediaPresentationDuration="PT634.566S" minBufferTime="PT2.00S" profiles="urn:mpeg:dash:profile:isoff-on-demand:2011">
  <Period id="1">
    <AdaptationSet mimeType="video/mp4" segmentAlignment="true">
      <Representation id="v720" bandwidth="3000000" width="1280" height="720" codecs="avc1.64001f" frameRate="30">
        <BaseURL>video/720p.mp4</BaseURL>
        <SegmentBase indexRange="0-1000"/>
      </Representation>
      <Representation id="v1080" bandwidth="6000000" width="1920" height="1080" codecs="avc1.640028" frameRate="30000/1001">
        <BaseURL>video/1080p.mp4</BaseURL>
      </Representation>
    </AdaptationSet>
    <AdaptationSet mimeType="audio/mp4" lang="en">
      <Representation id="a128" bandwidth="128000" codecs="mp4a.40.2">
        <BaseURL>audio/en.mp4</BaseURL>
      </Representation>
    </AdaptationSet>
  </Period>
</MPD>
"""


@pytest.fixture(autouse=True)
def data_dir(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> pathlib.Path:
    """Keep config, cache and logs of every test inside its own temp dir."""
    path = tmp_path / "data"
    monkeypatch.setenv("ABRSCOPE_DATA_DIR", str(path))
    return path


@pytest.fixture(name="caplog")
def caplog_fixture(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Set log level to debug for tests using the caplog fixture."""
    caplog.set_level(logging.DEBUG)
    return caplog


@pytest.fixture
def master_playlist() -> str:
    return MASTER_PLAYLIST


@pytest.fixture
def ladder_playlist() -> str:
    return LADDER_PLAYLIST


@pytest.fixture
def media_playlist() -> str:
    return MEDIA_PLAYLIST


@pytest.fixture
def static_mpd() -> str:
    return STATIC_MPD
