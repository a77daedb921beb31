"""Prompt Composer - Builds per-section generation instructions.

Everything here is a pure function of the brief and the sections produced so
far, so prompts can be tested without touching the generative service.
"""
from typing import Dict, List, Mapping

from models import (
    AudioPlan,
    Brief,
    CoreConcept,
    Research,
    Script,
    SectionKind,
    VisualPlan,
)

SYSTEM_PROMPT = (
    "You are a senior YouTube strategist, scriptwriter and production designer. "
    "You build retention-first video blueprints that are specific, practical and on-brand. "
    "Always respond with a single valid JSON object and nothing else."
)

SECTION_TASKS: Dict[SectionKind, str] = {
    SectionKind.CORE_CONCEPT: "Define the core concept: the viral idea, channel mission, signature angle and narrative pillars.",
    SectionKind.SCRIPT: "Write a retention-first script outline, segment by segment, from hook to call to action.",
    SectionKind.VISUAL_PLAN: "Design the visual direction: thumbnail concepts and a scene design for every script segment.",
    SectionKind.AUDIO_PLAN: "Plan the voice, pacing, music and sound effects for the video.",
    SectionKind.RESEARCH: "Summarize competitive research: key insights with evidence, competitor lessons and SEO keywords.",
    SectionKind.WORKFLOW: "Lay out the automation workflow: AI tools with ready-to-use prompts and an execution timeline in hours.",
}

SECTION_SHAPES: Dict[SectionKind, str] = {
    SectionKind.CORE_CONCEPT: """{
    "viralIdea": {
        "title": "Working video title",
        "hook": "Opening line that stops the scroll",
        "viralityTriggers": ["trigger 1", "trigger 2", "trigger 3"]
    },
    "channelMission": "One-sentence channel mission",
    "signatureAngle": "What makes this take different",
    "narrativePillars": [
        {
            "pillar": "Pillar name",
            "description": "What this pillar covers",
            "performanceHook": "Why it keeps viewers watching"
        }
    ],
    "recommendedKeywords": ["keyword 1", "keyword 2"]
}""",
    SectionKind.SCRIPT: """{
    "lengthEstimateSeconds": 480,
    "cta": "Closing call to action",
    "outline": [
        {
            "segment": "Hook",
            "objective": "What this segment must achieve",
            "retentionDevice": "Open loop, pattern interrupt, etc.",
            "narrationBeats": ["beat 1", "beat 2"],
            "visualNotes": ["note 1", "note 2"]
        }
    ]
}""",
    SectionKind.VISUAL_PLAN: """{
    "thumbnailConcepts": [
        {
            "headline": "Thumbnail text",
            "description": "Composition and subject",
            "colorPalette": ["#0F172A", "#34D399"],
            "aiPrompt": "Image generation prompt"
        }
    ],
    "sceneDesign": [
        {
            "segment": "Exact script segment name",
            "primaryVisuals": ["visual 1"],
            "motionIdeas": ["motion 1"],
            "stockPrompts": ["stock footage or generation prompt"]
        }
    ]
}""",
    SectionKind.AUDIO_PLAN: """{
    "voiceProfile": "Narrator voice description",
    "pacingGuidance": "Words per minute, pauses, energy curve",
    "audioMoments": [
        {
            "moment": "Where in the video",
            "musicMood": "Music mood",
            "sfxIdeas": ["sfx 1", "sfx 2"]
        }
    ],
    "aiVoicePrompt": "Prompt for an AI voice generator"
}""",
    SectionKind.RESEARCH: """{
    "summary": "Short competitive landscape summary",
    "keyInsights": [
        {
            "insight": "Insight",
            "evidence": "Supporting evidence",
            "source": "Where it comes from"
        }
    ],
    "competitorBreakdown": [
        {
            "channel": "Competitor channel",
            "lesson": "What to learn or avoid",
            "reference": "Optional example video or URL"
        }
    ],
    "seoKeywords": ["keyword 1", "keyword 2"]
}""",
    SectionKind.WORKFLOW: """{
    "automations": [
        {
            "tool": "Tool name",
            "purpose": "What it automates",
            "prompt": "Ready-to-use prompt for the tool"
        }
    ],
    "executionTimelineHours": {
        "preProduction": 4,
        "production": 6,
        "postProduction": 5
    }
}""",
}

SECTION_RULES: Dict[SectionKind, List[str]] = {
    SectionKind.CORE_CONCEPT: [
        "Provide 3 to 5 narrative pillars, in the order they should appear",
        "List at least 3 virality triggers",
    ],
    SectionKind.SCRIPT: [
        "Provide 4 to 8 outline segments in narrative order, starting with the hook and ending with the call to action",
        "Segment names must be unique and short",
        "lengthEstimateSeconds must be a positive whole number that fits the requested duration",
    ],
    SectionKind.VISUAL_PLAN: [
        "Provide 2 or 3 thumbnail concepts",
        "Provide one sceneDesign entry per script segment, using the segment names exactly as listed",
    ],
    SectionKind.AUDIO_PLAN: [
        "Provide audio moments in chronological order, covering the script segments",
    ],
    SectionKind.RESEARCH: [
        "Provide 3 to 5 key insights, each with concrete evidence and a named source",
        "Provide one competitorBreakdown entry per listed competitor, or notable channels in the niche when none are listed",
    ],
    SectionKind.WORKFLOW: [
        "Provide 4 to 7 automation steps in execution order",
        "Timeline hours must be non-negative numbers",
    ],
}


def _bullet_list(items: List[str], empty: str = "none provided") -> str:
    return ", ".join(items) if items else empty


def describe_brief(brief: Brief) -> str:
    """Render the brief as a prompt block."""
    lines = [
        f"TOPIC: {brief.topic}",
        f"TARGET AUDIENCE: {brief.target_audience}",
        f"CONTENT GOAL: {brief.content_goal}",
        f"TONE: {brief.tone}",
        f"DURATION: {brief.duration}",
        f"PLATFORM: {brief.platform_focus}",
        f"CALL TO ACTION: {brief.call_to_action or 'choose the strongest CTA for the content goal'}",
        f"KEYWORDS: {_bullet_list(brief.keywords)}",
        f"COMPETITORS: {_bullet_list(brief.competitors)}",
    ]
    return "\n".join(lines)


def summarize_sections(sections: Mapping[SectionKind, object]) -> str:
    """Condense already-produced sections into the facts later prompts rely on."""
    lines = []

    concept = sections.get(SectionKind.CORE_CONCEPT)
    if isinstance(concept, CoreConcept):
        lines.append(f"- Concept title: {concept.viral_idea.title}")
        lines.append(f"- Hook: {concept.viral_idea.hook}")
        lines.append(f"- Signature angle: {concept.signature_angle}")
        lines.append(f"- Narrative pillars: {_bullet_list([p.pillar for p in concept.narrative_pillars])}")

    script = sections.get(SectionKind.SCRIPT)
    if isinstance(script, Script):
        lines.append(f"- Script length: {script.length_estimate_seconds} seconds")
        lines.append(f"- Script CTA: {script.cta}")
        lines.append("- Script segments (in order): " + " | ".join(script.segment_names))

    visual = sections.get(SectionKind.VISUAL_PLAN)
    if isinstance(visual, VisualPlan):
        lines.append(f"- Thumbnail headlines: {_bullet_list([t.headline for t in visual.thumbnail_concepts])}")

    audio = sections.get(SectionKind.AUDIO_PLAN)
    if isinstance(audio, AudioPlan):
        lines.append(f"- Voice profile: {audio.voice_profile}")

    research = sections.get(SectionKind.RESEARCH)
    if isinstance(research, Research):
        lines.append(f"- SEO keywords: {_bullet_list(research.seo_keywords)}")

    return "\n".join(lines)


def compose_instruction(
    brief: Brief,
    kind: SectionKind,
    sections: Mapping[SectionKind, object],
) -> str:
    """
    Build the instruction for one blueprint section.

    Args:
        brief: Normalized brief
        kind: Section to generate next
        sections: Sections produced so far, keyed by kind

    Returns:
        Instruction text
    """
    prompt = f"""{SECTION_TASKS[kind]}

CREATIVE BRIEF:
{describe_brief(brief)}
"""

    context = summarize_sections(sections)
    if context:
        prompt += f"""
ESTABLISHED SO FAR (stay consistent with it):
{context}
"""

    script = sections.get(SectionKind.SCRIPT)
    if kind == SectionKind.VISUAL_PLAN and isinstance(script, Script):
        prompt += "\nSCRIPT SEGMENT NAMES (sceneDesign.segment must be one of these, spelled exactly):\n"
        prompt += "\n".join(f"- {name}" for name in script.segment_names) + "\n"

    prompt += "\nREQUIREMENTS:\n"
    rules = [
        f"Match the tone: {brief.tone}",
        f"Fit the duration: {brief.duration}",
    ] + SECTION_RULES[kind]
    prompt += "\n".join(f"{i}. {rule}" for i, rule in enumerate(rules, 1))

    prompt += f"""

Respond with JSON in this exact format:
{SECTION_SHAPES[kind]}"""

    return prompt
