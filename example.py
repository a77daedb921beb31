"""Example usage of Blueprint Studio."""
import asyncio
import json
import logging

from errors import PipelineError
from orchestrator import BlueprintOrchestrator
from pipeline import GenerationClient, normalize_brief
from pipeline.formatter import blueprint_payload

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

SAMPLE_BRIEF = {
    "topic": "Mastering short-form AI productivity hacks",
    "targetAudience": "Busy creators who want to automate YouTube channel growth",
    "contentGoal": "Drive newsletter signups for my automation playbook",
    "tone": "Energetic, witty, data-backed",
    "duration": "8 minute deep-dive",
    "platformFocus": "YouTube",
    "callToAction": "Subscribe and download the automation toolkit",
    "includeResearch": True,
    "keywords": "youtube automation, viral video ideas, ai video editor",
    "competitors": "Ali Abdaal, Think Media, Film Booth",
}


async def example_blueprint():
    """Example: Generate a full blueprint for the sample brief."""
    try:
        brief = normalize_brief(SAMPLE_BRIEF)
    except PipelineError as e:
        print(f"Invalid brief: {e}")
        return

    result = await BlueprintOrchestrator(brief, GenerationClient()).run()

    print(f"\n{'='*60}")
    print("BLUEPRINT RESULTS")
    print(f"{'='*60}\n")

    if not result.ok:
        print(f"✗ Failed at {result.failed_section.value}: {result.error}")
        print(f"  Completed before failure: {', '.join(k.value for k in result.sections_completed) or 'none'}")
        return

    blueprint = result.blueprint
    print(f"✓ Concept: {blueprint.core_concept.viral_idea.title}")
    print(f"  Hook: {blueprint.core_concept.viral_idea.hook}")
    print(f"✓ Script: {blueprint.script.length_estimate_seconds}s, {len(blueprint.script.outline)} segments")
    for segment in blueprint.script.outline:
        print(f"  - {segment.segment}: {segment.objective}")
    print(f"✓ Thumbnails: {len(blueprint.visual_plan.thumbnail_concepts)}")
    print(f"✓ Audio moments: {len(blueprint.audio_plan.audio_moments)}")
    if blueprint.research:
        print(f"✓ Research insights: {len(blueprint.research.key_insights)}")
    timeline = blueprint.workflow.execution_timeline_hours
    print(f"✓ Timeline: {timeline.pre_production}h / {timeline.production}h / {timeline.post_production}h")
    print()
    print(json.dumps(blueprint_payload(blueprint), indent=2))


if __name__ == "__main__":
    asyncio.run(example_blueprint())
