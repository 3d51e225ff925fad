"""Tests for event-type matching."""

from pathlib import Path

import pytest

from skillhook.skills.manifest import SkillManifest
from skillhook.skills.matcher import find_exact, match, pattern_matches


def skill(folder: str, *events: str) -> SkillManifest:
    return SkillManifest(name=folder, folder=folder, path=Path("/skills") / folder, events=events)


class TestPatternMatches:
    @pytest.mark.parametrize("event_type", ["payment.succeeded", "payment.failed"])
    def test_wildcard_matches_prefix(self, event_type):
        assert pattern_matches("payment.*", event_type) is True

    @pytest.mark.parametrize("event_type", ["payment", "invoice.created", "payments.x"])
    def test_wildcard_rejects(self, event_type):
        assert pattern_matches("payment.*", event_type) is False

    def test_exact(self):
        assert pattern_matches("meeting.ended", "meeting.ended") is True
        assert pattern_matches("meeting.ended", "meeting.ended.late") is False

    def test_bare_wildcard_matches_everything(self):
        assert pattern_matches("*", "anything") is True


class TestMatch:
    def test_partitions_preserving_order(self):
        a = skill("a", "payment.*")
        b = skill("b", "invoice.created")
        c = skill("c", "payment.succeeded")
        d = skill("d", "other")

        result = match("payment.succeeded", [a, b, c, d])

        assert result.matching == [a, c]
        assert result.others == [b, d]

    def test_skill_without_event_never_matches(self):
        skills = [skill("a", "x", "y.*"), skill("b", "z")]

        result = match("q", skills)

        assert result.matching == []
        assert result.others == skills

    def test_empty_event_type(self):
        skills = [skill("a", "x")]

        result = match("", skills)

        assert result.matching == []
        assert result.others == skills


class TestFindExact:
    def test_first_exact_wins(self):
        a = skill("a", "meeting.ended")
        b = skill("b", "meeting.ended")

        assert find_exact("meeting.ended", [a, b]) is a

    def test_wildcard_not_eligible(self):
        wild = skill("wild", "payment.*")
        exact = skill("exact", "payment.failed")

        assert find_exact("payment.failed", [wild, exact]) is exact
        assert find_exact("payment.succeeded", [wild, exact]) is None

    def test_literal_wildcard_event_type_not_eligible(self):
        assert find_exact("payment.*", [skill("wild", "payment.*")]) is None

    def test_empty_event_type(self):
        assert find_exact("", [skill("a", "x")]) is None
