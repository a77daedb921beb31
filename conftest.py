"""Shared fixtures: an in-memory stand-in for the OpenAI client."""
import copy
import json
from collections import defaultdict
from types import SimpleNamespace

import httpx
import openai
import pytest

from models import SectionKind
from pipeline.generation_client import GenerationClient
from pipeline.prompts import SECTION_TASKS

VALID_BRIEF = {
    "topic": "AI productivity hacks",
    "targetAudience": "busy creators",
    "contentGoal": "drive signups",
    "tone": "energetic",
    "duration": "8 minutes",
    "includeResearch": True,
    "keywords": ["ai", "ai", "AI "],
    "competitors": [],
}

SECTION_OUTPUTS = {
    SectionKind.CORE_CONCEPT: {
        "viralIdea": {
            "title": "I Automated My Whole Workday With AI",
            "hook": "What if your to-do list finished itself?",
            "viralityTriggers": ["curiosity gap", "time savings", "before/after"],
        },
        "channelMission": "Help creators win back hours with practical AI workflows.",
        "signatureAngle": "Every hack is tested live on a real creator schedule.",
        "narrativePillars": [
            {"pillar": "Inbox Zero", "description": "Triage email with AI", "performanceHook": "Instant relief"},
            {"pillar": "Script Speedrun", "description": "Draft scripts in minutes", "performanceHook": "Timer on screen"},
        ],
        "recommendedKeywords": ["AI productivity", "ai productivity", "automation"],
    },
    SectionKind.SCRIPT: {
        "lengthEstimateSeconds": 480,
        "cta": "Grab the free automation playbook",
        "outline": [
            {
                "segment": "Hook",
                "objective": "Stop the scroll",
                "retentionDevice": "Open loop",
                "narrationBeats": ["Promise three hours back", "Tease the final hack"],
                "visualNotes": ["Fast cuts", "Timer overlay"],
            },
            {
                "segment": "The Problem",
                "objective": "Make the pain relatable",
                "retentionDevice": "Relatable story",
                "narrationBeats": "Creators drown in busywork",
                "visualNotes": ["Messy desk b-roll"],
            },
            {
                "segment": "Hacks Breakdown",
                "objective": "Deliver the value",
                "retentionDevice": "Numbered countdown",
                "narrationBeats": ["Hack 1", "Hack 2", "Hack 3"],
                "visualNotes": ["Screen recordings"],
            },
            {
                "segment": "Call to Action",
                "objective": "Convert viewers",
                "retentionDevice": "Payoff of the open loop",
                "narrationBeats": ["Reveal the final hack", "Point to the playbook"],
                "visualNotes": ["Lower-third with link"],
            },
        ],
    },
    SectionKind.VISUAL_PLAN: {
        "thumbnailConcepts": [
            {
                "headline": "3 HOURS BACK",
                "description": "Creator leaning back while robots work",
                "colorPalette": ["#0F172A", "#34D399"],
                "aiPrompt": "Cinematic creator relaxing while AI robots type, neon green accents",
            }
        ],
        "sceneDesign": [
            {"segment": "hook", "primaryVisuals": ["Countdown timer"], "motionIdeas": "Whip pan", "stockPrompts": ["clock spinning"]},
            {"segment": "The Problem", "primaryVisuals": ["Overflowing inbox"], "motionIdeas": ["Slow push-in"], "stockPrompts": ["stressed creator"]},
            {"segment": "Hacks Breakdown", "primaryVisuals": ["Screen capture"], "motionIdeas": ["Zoom to cursor"], "stockPrompts": []},
            {"segment": "Call to Action", "primaryVisuals": ["Playbook mockup"], "motionIdeas": ["Parallax"], "stockPrompts": ["laptop on desk"]},
        ],
    },
    SectionKind.AUDIO_PLAN: {
        "voiceProfile": "Upbeat, confident, slightly playful",
        "pacingGuidance": "170 wpm with punchy pauses before each hack",
        "audioMoments": [
            {"moment": "Hook", "musicMood": "Driving synth", "sfxIdeas": ["riser", "tick-tock"]},
            {"moment": "Call to Action", "musicMood": "Warm resolve", "sfxIdeas": ["chime"]},
        ],
        "aiVoicePrompt": "Energetic tech creator voice, clear diction, smiling tone",
    },
    SectionKind.RESEARCH: {
        "summary": "AI productivity content is saturated with listicles; live tests stand out.",
        "keyInsights": [
            {"insight": "Live demos retain better", "evidence": "Top videos show real screens", "source": "Channel audit"},
        ],
        "competitorBreakdown": [
            {"channel": "Ali Abdaal", "lesson": "Personal framing builds trust", "reference": ""},
        ],
        "seoKeywords": ["ai productivity", "AI Productivity", "ai tools"],
    },
    SectionKind.WORKFLOW: {
        "automations": [
            {"tool": "ChatGPT", "purpose": "Draft script", "prompt": "Write a hook for..."},
            {"tool": "ElevenLabs", "purpose": "Voiceover", "prompt": "Read this script..."},
        ],
        "executionTimelineHours": {"preProduction": 4, "production": "6", "postProduction": 5.5},
    },
}


def valid_brief(**overrides):
    brief = copy.deepcopy(VALID_BRIEF)
    brief.update(overrides)
    return brief


def section_output(kind, **overrides):
    data = copy.deepcopy(SECTION_OUTPUTS[kind])
    data.update(overrides)
    return data


def connection_error():
    return openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))


def section_of(instruction):
    for kind, task in SECTION_TASKS.items():
        if instruction.startswith(task):
            return kind
    raise AssertionError(f"unrecognized instruction: {instruction[:60]}")


class FakeOpenAI:
    """Answers chat completions per section; counts calls per section.

    ``outcomes`` maps a section to a list of results consumed one per call
    (the last one repeats). A result is a dict (sent as JSON), a string, or an
    exception to raise.
    """

    def __init__(self, outcomes=None):
        self.outcomes = outcomes or {}
        self.calls = defaultdict(int)
        self.requests = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self.create))

    async def create(self, **kwargs):
        instruction = kwargs["messages"][-1]["content"]
        kind = section_of(instruction)
        self.requests.append((kind, kwargs))
        queue = self.outcomes.get(kind) or [SECTION_OUTPUTS[kind]]
        outcome = queue[min(self.calls[kind], len(queue) - 1)]
        self.calls[kind] += 1
        if isinstance(outcome, BaseException):
            raise outcome
        content = outcome if isinstance(outcome, str) else json.dumps(outcome)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def make_client():
    def _make(fake=None, **kwargs):
        kwargs.setdefault("timeout", 1.0)
        kwargs.setdefault("max_retries", 2)
        kwargs.setdefault("backoff_seconds", 0)
        return GenerationClient(client=fake or FakeOpenAI(), **kwargs)
    return _make
