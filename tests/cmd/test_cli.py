"""Tests for the abrscope command line."""

import json
import logging
import pathlib

import pytest
from click.testing import CliRunner

from abrscope.cli import cli

from tests.conftest import LADDER_PLAYLIST, MASTER_PLAYLIST, STATIC_MPD


@pytest.fixture(autouse=True)
def restore_root_handlers():
    """setup_logging adds a file handler per data dir; drop it after each test."""
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for handler in root.handlers[:]:
        if handler not in before:
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def write(tmp_path: pathlib.Path):
    def _write(name: str, content: str) -> str:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)
    return _write


def test_detect(runner: CliRunner, write) -> None:
    assert runner.invoke(cli, ["detect", write("master.m3u8", MASTER_PLAYLIST)]).output.strip() == "hls"
    assert runner.invoke(cli, ["detect", write("manifest.mpd", STATIC_MPD)]).output.strip() == "dash"


def test_inspect(runner: CliRunner, write) -> None:
    result = runner.invoke(cli, ["inspect", write("master.m3u8", LADDER_PLAYLIST)])

    assert result.exit_code == 0, result.output
    assert "Total: 4 variant(s)" in result.output


def test_inspect_segments(runner: CliRunner, write) -> None:
    content = "#EXTM3U\n#EXT-X-TARGETDURATION:6\n#EXTINF:6,\na.ts\n#EXTINF:6,\nb.ts\n#EXT-X-ENDLIST\n"
    result = runner.invoke(cli, ["inspect", write("media.m3u8", content), "--segments"])

    assert result.exit_code == 0, result.output
    assert "Total: 2 segment(s)" in result.output


def test_validate_compliant(runner: CliRunner, write) -> None:
    result = runner.invoke(cli, ["validate", "--strict", write("master.m3u8", MASTER_PLAYLIST)])

    assert result.exit_code == 0, result.output
    assert "COMPLIANT" in result.output
    assert "NOT COMPLIANT" not in result.output


def test_validate_strict_exit_code(runner: CliRunner, write) -> None:
    path = write("broken.m3u8", '#EXT-X-VERSION:3\n#EXT-X-STREAM-INF:BANDWIDTH=1,CODECS="mp4a.40.2"\nv.m3u8\n')

    relaxed = runner.invoke(cli, ["validate", path])
    strict = runner.invoke(cli, ["validate", "--strict", path])

    assert relaxed.exit_code == 0
    assert "NOT COMPLIANT" in relaxed.output
    assert strict.exit_code == 2


def test_missing_file(runner: CliRunner, tmp_path: pathlib.Path) -> None:
    result = runner.invoke(cli, ["validate", str(tmp_path / "nope.m3u8")])

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_invalid_base_url(runner: CliRunner, write) -> None:
    result = runner.invoke(cli, ["inspect", write("m.m3u8", MASTER_PLAYLIST), "--base-url", "not a url"])

    assert result.exit_code == 1
    assert "Invalid base URL" in result.output


def test_empty_file(runner: CliRunner, write) -> None:
    result = runner.invoke(cli, ["inspect", write("empty.m3u8", "  \n")])

    assert result.exit_code == 1
    assert "Manifest content is empty" in result.output


def test_lint(runner: CliRunner, write) -> None:
    result = runner.invoke(cli, ["lint", write("master.m3u8", MASTER_PLAYLIST)])

    assert result.exit_code == 0, result.output
    assert "healthy: 0 error(s), 1 warning(s), 0 info" in result.output


def test_diff(runner: CliRunner, write) -> None:
    old = write("old.m3u8", MASTER_PLAYLIST)
    new = write("new.m3u8", MASTER_PLAYLIST.replace("2227464", "3000000"))

    result = runner.invoke(cli, ["diff", old, new])
    assert result.exit_code == 0, result.output
    assert "0 added, 0 removed, 1 changed" in result.output

    same = runner.invoke(cli, ["diff", old, old])
    assert "No changes." in same.output


def test_export_json_to_file(runner: CliRunner, write, tmp_path: pathlib.Path) -> None:
    output = tmp_path / "out" / "manifest.json"
    result = runner.invoke(cli, [
        "export", write("master.m3u8", MASTER_PLAYLIST),
        "--format", "json", "--output", str(output),
        "--base-url", "https://example.com/path/master.m3u8",
    ])

    assert result.exit_code == 0, result.output
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["variants"][0]["url"] == "https://example.com/path/gear4/prog_index.m3u8"


def test_export_csv_to_stdout(runner: CliRunner, write) -> None:
    result = runner.invoke(cli, ["export", write("master.m3u8", MASTER_PLAYLIST), "-f", "csv"])

    assert result.exit_code == 0, result.output
    assert "ID,Type,Bitrate,Resolution,Frame Rate,Codecs,URL" in result.output
    assert "file://" in result.output


def test_resolve(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["resolve", "/other/variant.m3u8", "https://example.com/path/to/master.m3u8"])

    assert result.exit_code == 0
    assert result.output.strip() == "https://example.com/other/variant.m3u8"
    assert runner.invoke(cli, ["resolve", "a.m3u8", "relative/base"]).exit_code == 1


def test_config_commands(runner: CliRunner, data_dir: pathlib.Path) -> None:
    assert runner.invoke(cli, ["config", "set", "max_rows", "10"]).exit_code == 0

    result = runner.invoke(cli, ["config", "get", "max_rows"])
    assert result.output.strip() == "max_rows = 10"

    assert runner.invoke(cli, ["config", "get", "no_such_key"]).exit_code == 1
    assert str(data_dir / "config.json") in runner.invoke(cli, ["config", "path"]).output
    assert "export_format" in runner.invoke(cli, ["config", "show"]).output


def test_inspect_prints_markup_like_text_verbatim(runner: CliRunner, write) -> None:
    content = '#EXTM3U\n#EXT-X-STREAM-INF:BANDWIDTH=64000,CODECS="[/x]"\naudio.m3u8\n'
    result = runner.invoke(cli, ["inspect", write("master.m3u8", content)])

    assert result.exit_code == 0, result.output
    assert "[/x]" in result.output


def test_diff_prints_markup_like_text_verbatim(runner: CliRunner, write) -> None:
    old = write("old.m3u8", "#EXTM3U\n")
    new = write("new.m3u8", '#EXTM3U\n#EXT-X-STREAM-INF:BANDWIDTH=64000,CODECS="[/x]"\naudio.m3u8\n')
    result = runner.invoke(cli, ["diff", old, new])

    assert result.exit_code == 0, result.output
    assert "[/x]" in result.output


def test_export_write_failure(runner: CliRunner, write, tmp_path: pathlib.Path) -> None:
    result = runner.invoke(cli, ["export", write("master.m3u8", MASTER_PLAYLIST), "-o", str(tmp_path)])

    assert result.exit_code == 1
    assert "Could not write" in result.output
