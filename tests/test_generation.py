"""Tests for the generation operations (script, visual prompts, voice-over)."""

import pytest

from vsg.agents import SceneCountRange, scene_count_range
from vsg.agents.script import SCENE_COUNTS
from vsg.agents.voice import parse_gender
from vsg.errors import GenerationError, ValidationError
from vsg.generation import (
    generate_content,
    generate_script,
    generate_visual_prompts,
    generate_voice_over_recommendations,
)
from vsg.models import Gender


def script_response(*scenes, synopsis="A barista opens a tiny cafe before sunrise."):
    parts = [f"SYNOPSIS:\n{synopsis}\n\nSCENES:\n"]
    for number, scene in enumerate(scenes, start=1):
        lines = [f"---SCENE {number}---"]
        for marker in ("DESCRIPTION", "SCRIPT", "VISUAL", "TONE"):
            if marker.lower() in scene:
                lines.append(f"{marker}: {scene[marker.lower()]}")
        lines.append("---END SCENE---")
        parts.append("\n".join(lines) + "\n")
    return "\n".join(parts)


FULL_SCENE = {
    "description": "Opening hook",
    "script": "Every morning starts with a single cup.",
    "visual": "Close-up of espresso pouring",
    "tone": "Warm, unhurried",
}


class TestSceneCountRange:

    @pytest.mark.parametrize("duration,expected", [
        ("30-60 seconds", (2, 4)),
        ("1-2 minutes", (3, 6)),
        ("2-5 minutes", (5, 10)),
        ("5-10 minutes", (8, 15)),
        ("10+ minutes", (12, 20)),
        ("an hour", (3, 6)),
        ("", (3, 6)),
    ])
    def test_lookup(self, duration, expected):
        assert scene_count_range(duration) == SceneCountRange(*expected)


class TestGenerateScript:

    @pytest.mark.parametrize("duration", list(SCENE_COUNTS))
    def test_prompt_asks_for_range_and_result_meets_minimum(self, fake_client, draft, duration):
        counts = SCENE_COUNTS[duration]
        client = fake_client(script_response(FULL_SCENE))

        result = generate_script(draft.model_copy(update={"duration": duration}), "key", client=client)

        assert f"{counts.min}-{counts.max} distinct scenes" in client.prompts[0]
        assert len(client.prompts) == 1
        assert len(result.scenes) >= counts.min

    def test_scenario_short_video_gets_two_to_four_scenes(self, fake_client, draft):
        client = fake_client(script_response(FULL_SCENE, FULL_SCENE, FULL_SCENE))
        result = generate_script(draft, "key", client=client)
        assert 2 <= len(result.scenes) <= 4

    def test_parses_synopsis_and_scene_fields(self, fake_client, draft):
        client = fake_client(script_response(FULL_SCENE, FULL_SCENE))
        result = generate_script(draft, "key", client=client)

        assert result.synopsis == "A barista opens a tiny cafe before sunrise."
        scene = result.scenes[0]
        assert scene.script == "Every morning starts with a single cup."
        assert scene.visual_description == "Close-up of espresso pouring\n\nTone: Warm, unhurried"
        assert scene.voice_over.text == scene.script
        assert scene.voice_over.gender == Gender.NEUTRAL
        assert scene.image_prompt == ""
        assert result.padded == 0
        assert result.defaulted == []

    def test_missing_visual_gives_empty_description(self, fake_client, draft):
        scene = {"description": "x", "script": "Hello", "tone": "Upbeat"}
        result = generate_script(draft, "key", client=fake_client(script_response(scene, scene)))

        assert all(s.visual_description == "" for s in result.scenes)
        assert "scene 1.visual" in result.defaulted

    def test_visual_without_tone(self, fake_client, draft):
        scene = {"script": "Hello", "visual": "A street"}
        result = generate_script(draft, "key", client=fake_client(script_response(scene, scene)))
        assert result.scenes[0].visual_description == "A street"

    def test_pads_to_minimum_with_blank_scenes(self, fake_client, draft):
        long_draft = draft.model_copy(update={"duration": "10+ minutes"})
        result = generate_script(long_draft, "key", client=fake_client(script_response(FULL_SCENE)))

        assert len(result.scenes) == 12
        assert result.padded == 11
        padding = result.scenes[1:]
        assert all(s.script == "" and s.visual_description == "" for s in padding)
        assert len({s.id for s in result.scenes}) == 12

    def test_orders_are_sequence_indexes(self, fake_client, draft):
        result = generate_script(draft, "key", client=fake_client(script_response(FULL_SCENE)))
        assert [s.order for s in result.scenes] == list(range(len(result.scenes)))

    def test_keeps_scenes_beyond_maximum(self, fake_client, draft):
        result = generate_script(draft, "key", client=fake_client(script_response(*[FULL_SCENE] * 6)))
        assert len(result.scenes) == 6

    def test_unstructured_reply_degrades_to_padding(self, fake_client, draft):
        result = generate_script(draft, "key", client=fake_client("I'd love to help with your video!"))
        assert result.synopsis == ""
        assert len(result.scenes) == 2
        assert result.padded == 2

    def test_accepts_mapping_params(self, fake_client):
        client = fake_client(script_response(FULL_SCENE))
        generate_script(
            {"title": "Launch", "targetAudience": "professionals", "duration": "2-5 minutes"},
            "key",
            client=client,
        )
        assert "Target Audience: professionals" in client.prompts[0]
        assert "5-10 distinct scenes" in client.prompts[0]

    def test_invalid_mapping_params(self, fake_client):
        client = fake_client(script_response(FULL_SCENE))
        with pytest.raises(ValidationError):
            generate_script({"description": "no title"}, "key", client=client)
        assert client.prompts == []

    def test_generation_error_propagates(self, fake_client, draft):
        client = fake_client(GenerationError("boom"))
        with pytest.raises(GenerationError):
            generate_script(draft, "key", client=client)

    def test_missing_key_fails_before_any_request(self, draft):
        with pytest.raises(GenerationError):
            generate_script(draft, None)


class TestGenerateContent:

    def test_returns_raw_text(self, fake_client):
        client = fake_client("raw completion")
        assert generate_content("Say hi", "key", client=client) == "raw completion"
        assert client.prompts == ["Say hi"]


class TestGenerateVisualPrompts:

    def test_parses_both_prompts(self, fake_client):
        client = fake_client(
            "IMAGE PROMPT:\nEspresso macro shot, golden light\n\n"
            "VIDEO PROMPT:\nSlow push-in, steam rising"
        )
        prompts = generate_visual_prompts("Every morning...", "Close-up of espresso", "key", client=client)

        assert prompts.image_prompt == "Espresso macro shot, golden light"
        assert prompts.video_prompt == "Slow push-in, steam rising"
        assert '"Every morning..."' in client.prompts[0]
        assert '"Close-up of espresso"' in client.prompts[0]

    def test_unmatched_sections_are_empty(self, fake_client):
        prompts = generate_visual_prompts("s", "v", "key", client=fake_client("VIDEO PROMPT:\nPan left"))
        assert prompts.image_prompt == ""
        assert prompts.video_prompt == "Pan left"
        assert prompts.defaulted == ["image_prompt"]


class TestGenerateVoiceOver:

    def test_parses_recommendation(self, fake_client):
        client = fake_client(
            "GENDER: female\n"
            "EMOTION: warm and inviting\n"
            "STYLE: storyteller\n"
            "DIRECTION: Smile while reading.\n"
            "MODIFIED SCRIPT: Every morning... starts with a single cup."
        )
        voice = generate_voice_over_recommendations("Every morning starts", "adults", "drama", "key", client=client)

        assert voice.gender == Gender.FEMALE
        assert voice.emotion == "warm and inviting"
        assert voice.style == "storyteller"
        assert voice.text == "Every morning... starts with a single cup."

    def test_direction_is_not_part_of_the_script(self, fake_client):
        client = fake_client(
            "GENDER: male\n"
            "MODIFIED SCRIPT: Every morning starts.\n"
            "DIRECTION: Pause after morning.\n"
        )
        voice = generate_voice_over_recommendations("Every morning starts", "adults", "drama", "key", client=client)

        assert voice.text == "Every morning starts."
        assert "Pause" not in voice.emotion + voice.style + voice.text

    def test_defaults_when_unparsed(self, fake_client):
        voice = generate_voice_over_recommendations(
            "Original script", "adults", "drama", "key", client=fake_client("No idea.")
        )
        assert voice.gender == Gender.NEUTRAL
        assert voice.emotion == "neutral"
        assert voice.style == "narrator"
        assert voice.text == "Original script"

    @pytest.mark.parametrize("value,expected", [
        ("male", Gender.MALE),
        ("Female (warm, mid-range)", Gender.FEMALE),
        ("**neutral**", Gender.NEUTRAL),
        ("[male]", Gender.MALE),
        ("robot", Gender.NEUTRAL),
        ("", Gender.NEUTRAL),
    ])
    def test_parse_gender(self, value, expected):
        assert parse_gender(value) == expected
