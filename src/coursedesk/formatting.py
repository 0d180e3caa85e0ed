"""Plain-text renderings of derived artifacts.

Used for plan export and for mail previews; the CLI has its own rich
formatting in ``coursedesk.cli.formatting``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from coursedesk.models.artifacts import SessionPlan, SummaryArtifact


def render_plan_markdown(plan: SessionPlan) -> str:
    """Render a session plan as Markdown, one section per block."""
    lines = [f"# {plan.session_title or 'Session Plan'}", ""]
    for block in plan.blocks:
        heading = block.title or block.type or "Block"
        meta = " | ".join(str(part) for part in (block.duration, block.type) if part)
        lines.append(f"## {heading}")
        if meta:
            lines.append(f"*{meta}*")
        lines.append("")
        if block.activity:
            lines.extend([block.activity, ""])
        for question in block.questions:
            lines.append(f"- {question}")
        if block.questions:
            lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def render_summary_markdown(summary: SummaryArtifact) -> str:
    """Render a summary with its key concepts and discussion prompts."""
    lines = ["# Summary", ""]
    lines.extend(f"- {point}" for point in summary.points)
    if summary.key_concepts:
        lines.extend(["", "## Key Concepts", ""])
        lines.extend(
            f"- **{kc.concept}**: {kc.explanation}" if kc.explanation else f"- **{kc.concept}**"
            for kc in summary.key_concepts
        )
    if summary.discussion_prompts:
        lines.extend(["", "## Discussion Prompts", ""])
        lines.extend(
            f"{i}. {prompt}" for i, prompt in enumerate(summary.discussion_prompts, 1)
        )
    return "\n".join(lines) + "\n"
