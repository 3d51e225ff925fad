"""Tests for the command-line entry points."""

import json

import pytest
from click.testing import CliRunner

from skillhook.config import Settings
from skillhook.core.bus import WebhookReceived
from skillhook.main import SkillhookApp, _apply_overrides, list_skills
from skillhook.webhooks.models import WebhookEvent


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.delenv("SKILLHOOK_CONFIG", raising=False)
    monkeypatch.setenv("SKILLHOOK_CONFIG_DIR", str(tmp_path / "config"))


class TestListSkills:
    def test_lists_skills_and_skipped(self, skills_root, make_skill):
        make_skill("zoom", {
            "webhookEvents": ["meeting.ended"],
            "emoji": "🎥",
            "webhookCommands": {"meeting.ended": {"command": "run {{id}}"}},
        })
        make_skill("stream", {"webhookEvents": ["stream.*"], "forwardPort": 8123})
        make_skill("broken", raw="{")

        result = CliRunner().invoke(list_skills, ["--skills-root", str(skills_root)])

        assert result.exit_code == 0, result.output
        assert "🎥 zoom (zoom): meeting.ended [commands: meeting.ended]" in result.output
        assert "stream (stream): stream.* [http :8123/]" in result.output
        assert "skipped broken: invalid JSON" in result.output

    def test_no_skills(self, skills_root):
        result = CliRunner().invoke(list_skills, ["--skills-root", str(skills_root)])

        assert result.exit_code == 0
        assert "No webhook-capable skills found." in result.output


class TestApp:
    def test_overrides(self):
        settings = _apply_overrides(Settings(), log_level="DEBUG", port=5050, skills_root="/srv/skills")

        assert settings.log_level == "DEBUG"
        assert settings.server.port == 5050
        assert settings.skills.root == "/srv/skills"

    async def test_wiring_routes_events(self, skills_root, make_skill, tmp_path):
        make_skill("zoom", {"webhookEvents": ["meeting.*"]})
        log_path = tmp_path / "events.jsonl"
        settings = Settings(
            skills={"root": str(skills_root)},
            server={"port": 0, "bind": "127.0.0.1"},
            event_log_path=str(log_path),
        )
        app = SkillhookApp(settings)
        event = WebhookEvent(method="POST", path="/webhook", body={"event": "meeting.ended"})

        await app.start()
        try:
            app.pipeline.record(event)
            await app.bus.publish(WebhookReceived(webhook=event))
            await app.bus.join()
        finally:
            await app.stop()

        assert json.loads(log_path.read_text())["id"] == event.id
