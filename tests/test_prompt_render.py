"""
Unit tests for prompt composition.
"""
import pytest

from ping_engine.services.normalizer import (
    normalize_context,
    normalize_notes,
    normalize_preferences,
    normalize_profile,
)
from ping_engine.services.planning.overlaps import build_overlap_summary
from ping_engine.services.render.prompt_render import build_prompt, build_prompt_context


def _inputs(self_profile, other_profile, context=None, prefs=None):
    you = normalize_profile(self_profile)
    other = normalize_profile(other_profile) if other_profile is not None else None
    ctx = normalize_context(context or {})
    preferences = normalize_preferences(prefs or {})
    notes = normalize_notes({})
    overlaps = build_overlap_summary(you, other, ctx)
    return ctx, you, other, preferences, notes, overlaps


class TestPromptRender:
    def test_same_inputs_give_identical_prompt(self, self_profile, other_profile):
        first = build_prompt("generate_openers", *_inputs(self_profile, other_profile))
        second = build_prompt("generate_openers", *_inputs(dict(self_profile), dict(other_profile)))
        assert first == second

    def test_instruction_block_rules(self, self_profile, other_profile):
        system = build_prompt("generate_openers", *_inputs(self_profile, other_profile))[0]["content"]
        for topic in ["politics", "religion", "health", "trauma", "salary", "appearance"]:
            assert topic in system
        assert "{{their_last_point}}" in system
        assert "between 3 and 5 questions" in system
        assert "opportunity_probe" in system
        assert "At most ONE playful_personal" in system
        assert "escalate to catalyst-level only with positive signal" in system

    def test_loud_room_word_cap(self, self_profile, other_profile):
        quiet = build_prompt("generate_openers", *_inputs(self_profile, other_profile))[0]["content"]
        loud = build_prompt(
            "generate_openers", *_inputs(self_profile, other_profile, context={"noise_level": 3})
        )[0]["content"]
        assert "at most 20 words" in quiet
        assert "at most 14 words" in loud

    def test_playful_disabled(self, self_profile, other_profile):
        system = build_prompt(
            "generate_openers", *_inputs(self_profile, other_profile, prefs={"allow_playful": False})
        )[0]["content"]
        assert "Do NOT write any playful_personal question." in system

    def test_task_block_embeds_overlaps_and_schema(self, self_profile, other_profile):
        user = build_prompt("generate_openers", *_inputs(self_profile, other_profile))[1]["content"]
        assert "Commonalities: ai, Northeastern" in user
        assert '"questions": [' in user
        assert '"top_picks": [0, 1, 2]' in user
        assert '"name": "Sam"' in user

    def test_single_profile_mode(self, self_profile):
        user = build_prompt("generate_openers", *_inputs(self_profile, None))[1]["content"]
        assert "single-profile mode" in user
        assert "Commonalities: none" in user

    @pytest.mark.parametrize(
        "mode,marker",
        [
            ("followup_nudge", "follow-up nudges"),
            ("event_digest_copy", "event digest"),
            ("guest_view_copy", "guest view"),
        ],
    )
    def test_auxiliary_modes_share_rules(self, self_profile, other_profile, mode, marker):
        system = build_prompt(mode, *_inputs(self_profile, other_profile))[0]["content"]
        assert marker in system
        assert "salary" in system
        assert "{{their_last_point}}" in system

    def test_debug_log(self, self_profile, other_profile):
        _, debug_log = build_prompt_context(
            "generate_openers", *_inputs(self_profile, other_profile), request_id="abc", model_name="m"
        )
        assert debug_log["request_id"] == "abc"
        assert debug_log["single_profile"] is False
        assert debug_log["overlaps"]["detected_commonalities"] == ["ai", "Northeastern"]
