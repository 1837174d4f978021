"""Tests for the teamsflow CLI."""

import json

from click.testing import CliRunner

from teamsflow.cli import cli


def _write(tmp_path, data, name="responses.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestConvertCommand:
    def test_list_of_responses(self, tmp_path):
        path = _write(tmp_path, [
            {"text": {"text": ["Hi!"]}},
            {"text": {"text": ["Slack"]}, "platform": "SLACK"},
        ])
        result = CliRunner().invoke(cli, ["convert", path])
        assert result.exit_code == 0, result.output
        assert '"Hi!"' in result.output
        assert "Slack" not in result.output
        assert "2 responses" in result.output
        assert "1 activities" in result.output

    def test_detect_intent_response(self, tmp_path):
        path = _write(tmp_path, {"queryResult": {"fulfillmentMessages": [
            {"quickReplies": {"title": "Pick", "quickReplies": ["A"]}},
        ]}})
        result = CliRunner().invoke(cli, ["convert", path])
        assert result.exit_code == 0, result.output
        assert "suggestedActions" in result.output

    def test_platform_option(self, tmp_path):
        path = _write(tmp_path, [{"text": {"text": ["Slack"]}, "platform": "SLACK"}])
        result = CliRunner().invoke(cli, ["convert", path, "--platform", "SLACK"])
        assert result.exit_code == 0, result.output
        assert '"Slack"' in result.output

    def test_invalid_file(self, tmp_path):
        path = _write(tmp_path, "just a string")
        result = CliRunner().invoke(cli, ["convert", path])
        assert result.exit_code != 0


class TestHelp:
    def test_no_command_shows_overview(self):
        result = CliRunner().invoke(cli, [])
        assert result.exit_code == 0
        assert "serve" in result.output
        assert "convert" in result.output
