"""Tests for the Typer command-line interface."""

from typer.testing import CliRunner

from longevity_feed.cli import app


runner = CliRunner()


def test_sources_marks_enabled_keys(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("sources:\n  enabled: [pubmed]\n", encoding="utf-8")

    result = runner.invoke(app, ["sources", "--config", str(config)])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "* pubmed" in lines
    assert "  whonews" in lines


def test_run_with_unknown_source_exits_non_zero(tmp_path):
    corpus = tmp_path / "articles.json"

    result = runner.invoke(
        app,
        ["run", "--corpus", str(corpus), "--source", "arxiv", "--no-progress"],
    )

    assert result.exit_code == 1
    assert "Unsupported source" in result.output
    assert not corpus.exists()


def test_invalid_config_exits_non_zero(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("just a string\n", encoding="utf-8")

    result = runner.invoke(app, ["sources", "--config", str(config)])

    assert result.exit_code == 1
    assert "Invalid config" in result.output
