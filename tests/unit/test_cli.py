"""Unit tests for the content-search command line."""

from pathlib import Path

import orjson
import pytest

from content_search import cli


pytestmark = pytest.mark.unit


def test_build_index_to_file(content_root: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    output = tmp_path / "public" / "search-index.json"

    exit_code = cli.main(["--content-root", str(content_root), "build-index", "--output", str(output)])

    assert exit_code == 0
    payload = orjson.loads(output.read_bytes())
    assert [entry["title"] for entry in payload["index"]] == ["Hello World", "Deep Post", "Tools"]
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Indexed 3 documents from 2 namespaces (1 skipped, 0 errors)" in captured.err


def test_build_index_to_stdout_lists_errors(content_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (content_root / "dev" / "broken.mdx").write_text("---\ntitle: [oops\n---\n", encoding="utf-8")

    exit_code = cli.main(["--content-root", str(content_root), "build-index"])

    assert exit_code == 0
    captured = capsys.readouterr()
    assert len(orjson.loads(captured.out)["index"]) == 3
    assert "(2 skipped, 1 errors)" in captured.err
    assert "  ! " in captured.err
    assert "broken.mdx" in captured.err


def test_search_prints_ranked_results(content_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli.main(["--content-root", str(content_root), "search", "setup"])

    assert exit_code == 0
    [hit] = orjson.loads(capsys.readouterr().out)
    assert hit["path"] == "/posts/blog/hello-world#setup-guide"
    assert hit["headingText"] == "Setup Guide"


def test_search_limit(content_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["--content-root", str(content_root), "search", "o", "--limit", "1"])

    assert len(orjson.loads(capsys.readouterr().out)) == 1


def test_missing_content_root(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli.main(["--content-root", str(tmp_path / "absent"), "build-index"])

    assert exit_code == 1
    assert "Content root not found" in capsys.readouterr().err


def test_command_is_required() -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])

    assert exc_info.value.code == 2


def test_serve_runs_uvicorn_with_settings(content_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import uvicorn

    calls: list[tuple[object, dict]] = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setattr(cli, "init_tracing", lambda: None)

    exit_code = cli.main(["--content-root", str(content_root), "serve", "--port", "9123"])

    assert exit_code == 0
    [(app, kwargs)] = calls
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 9123
    assert kwargs["log_config"] is None
    assert app.state.settings.content_root == content_root
