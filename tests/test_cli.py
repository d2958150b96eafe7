"""Tests for the Typer CLI interface."""

import json

from typer.testing import CliRunner

from mark_clipper.main import app

runner = CliRunner()

CLIP = {
    "id": 7,
    "title": "Example",
    "html_raw": "<h1>Title</h1><p>Body</p>",
    "text_plain": "Title\nBody text",
}
MALICIOUS = {
    "id": 8,
    "title": "Bad",
    "html_raw": "<script>alert(1)</script><p>Safe</p>",
    "text_plain": "Safe content here",
}


def _write(tmp_path, data, name="clips.json") -> str:
    """Write *data* as JSON and return the path as a string."""
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_display_prints_processed_html(tmp_path):
    """display should print sanitized, heading-normalized HTML."""
    result = runner.invoke(app, ["display", _write(tmp_path, CLIP)])

    assert result.exit_code == 0
    assert "<h2>Title</h2><p>Body</p>" in result.output


def test_display_json_output(tmp_path):
    """--json should emit a ContentResult object for a single clip."""
    result = runner.invoke(app, ["display", _write(tmp_path, CLIP), "--json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["source"] == "processed"
    assert data["content"] == "<h2>Title</h2><p>Body</p>"
    assert data["has_error"] is False


def test_display_json_list(tmp_path):
    """A list of clips should produce a JSON array in the same order."""
    result = runner.invoke(app, ["display", _write(tmp_path, [CLIP, {}]), "--json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [d["source"] for d in data] == ["processed", "placeholder"]


def test_display_strips_scripts(tmp_path):
    result = runner.invoke(app, ["display", _write(tmp_path, MALICIOUS)])

    assert result.exit_code == 0
    assert "<script" not in result.output
    assert "Safe" in result.output


def test_display_empty_clip_placeholder(tmp_path):
    result = runner.invoke(app, ["display", _write(tmp_path, {"title": None})])

    assert result.exit_code == 0
    assert "Content unavailable" in result.output


def test_display_no_fallback_uses_title(tmp_path):
    clip = {"title": "Only title", "text_plain": "some text"}
    result = runner.invoke(app, ["display", _write(tmp_path, clip), "--no-fallback"])

    assert result.exit_code == 0
    assert "Only title" in result.output
    assert "some text" not in result.output


def test_display_detailed(tmp_path):
    """--detailed should label each clip with the tier that produced it."""
    result = runner.invoke(app, ["display", _write(tmp_path, CLIP), "--detailed"])

    assert result.exit_code == 0
    assert "#7" in result.output
    assert "processed" in result.output


def test_display_missing_file(tmp_path):
    result = runner.invoke(app, ["display", str(tmp_path / "nope.json")])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_display_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    result = runner.invoke(app, ["display", str(path)])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_display_empty_list(tmp_path):
    result = runner.invoke(app, ["display", _write(tmp_path, [])])

    assert result.exit_code == 1
    assert "No clips found" in result.output


def test_edit_returns_raw_html(tmp_path):
    clip = dict(CLIP, html_raw='<h1 style="x">Raw</h1>')
    result = runner.invoke(app, ["edit", _write(tmp_path, clip)])

    assert result.exit_code == 0
    assert '<h1 style="x">Raw</h1>' in result.output


def test_edit_no_preserve(tmp_path):
    result = runner.invoke(app, ["edit", _write(tmp_path, CLIP), "--no-preserve"])

    assert result.exit_code == 0
    assert "Body text" in result.output
    assert "<h1>" not in result.output


def test_search_plain_text(tmp_path):
    result = runner.invoke(app, ["search", _write(tmp_path, CLIP)])

    assert result.exit_code == 0
    assert "Title\nBody" in result.output
    assert "<" not in result.output


def test_validate_json(tmp_path):
    result = runner.invoke(app, ["validate", _write(tmp_path, MALICIOUS), "--json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["is_valid"] is False
    assert data["summary"]["security_risk"] == "high"
    assert data["issues"][0]["severity"] == "critical"


def test_validate_rich_output(tmp_path):
    result = runner.invoke(app, ["validate", _write(tmp_path, [CLIP, MALICIOUS])])

    assert result.exit_code == 0
    assert "PASS" in result.output
    assert "FAIL" in result.output
    assert "Validation summary" in result.output


def test_validate_csv(tmp_path):
    result = runner.invoke(app, ["validate", _write(tmp_path, [CLIP, MALICIOUS]), "--csv"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0].startswith("clip_id,title,score,grade")
    assert lines[1].startswith("7,Example,")
    assert any(line.startswith("SUMMARY") for line in lines)


def test_validate_fail_on_invalid(tmp_path):
    result = runner.invoke(
        app, ["validate", _write(tmp_path, MALICIOUS), "--json", "--fail-on-invalid"]
    )
    assert result.exit_code == 1


def test_validate_fail_on_invalid_passes_clean(tmp_path):
    result = runner.invoke(
        app, ["validate", _write(tmp_path, CLIP), "--json", "--fail-on-invalid"]
    )
    assert result.exit_code == 0


def test_assess_json(tmp_path):
    result = runner.invoke(app, ["assess", _write(tmp_path, CLIP), "--json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["score"] == 100
    assert data["quality"] == "excellent"


def test_assess_rich_output(tmp_path):
    result = runner.invoke(app, ["assess", _write(tmp_path, {"title": "T"})])

    assert result.exit_code == 0
    assert "Missing plain-text content" in result.output


def test_config_file_applied(tmp_path):
    """--config should feed the engine; strict tags come from the file."""
    config = _write(tmp_path, {"allowed_tags": ["p"], "use_dom": False}, "cfg.json")
    result = runner.invoke(app, ["--config", config, "display", _write(tmp_path, CLIP)])

    assert result.exit_code == 0
    assert "Title<p>Body</p>" in result.output


def test_invalid_config_exits(tmp_path):
    config = _write(tmp_path, {"max_length": 0}, "cfg.json")
    result = runner.invoke(app, ["--config", config, "display", _write(tmp_path, CLIP)])

    assert result.exit_code == 1
    assert "Invalid config" in result.output


def test_metrics_json(tmp_path):
    result = runner.invoke(app, ["metrics", _write(tmp_path, CLIP), "--json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["complexity"] == "simple"
    assert data["text_length"] == len(CLIP["text_plain"])
    assert "Tag density is high; simplify the DOM" in data["recommendations"]


def test_metrics_rich_output(tmp_path):
    """A long clip gets a lazy-load strategy; several clips add a load table."""
    long_clip = {"id": 9, "title": "Long", "text_plain": "x" * 12_000}
    result = runner.invoke(app, ["metrics", _write(tmp_path, [CLIP, long_clip])])

    assert result.exit_code == 0
    assert "#9 Long" in result.output
    assert "extreme" in result.output
    assert "lazy load, initial height 300px" in result.output
    assert "virtual scrolling" in result.output
    assert "Render load" in result.output


def test_metrics_single_clip_has_no_load_table(tmp_path):
    result = runner.invoke(app, ["metrics", _write(tmp_path, CLIP)])

    assert result.exit_code == 0
    assert "#7 Example" in result.output
    assert "Render load" not in result.output


def test_metrics_missing_file(tmp_path):
    result = runner.invoke(app, ["metrics", str(tmp_path / "absent.json")])

    assert result.exit_code == 1
