"""Merge per-intent results into one answer and report failures separately."""

from __future__ import annotations

from typing import Optional

from arielle.models import BatchQueryResult, IntentResult

NO_RESULTS = "No results found for your query."
NO_ANSWER = "No answer found for this query."
NO_SECTION_ANSWER = "No specific information found."


def aggregate_results(results: list[IntentResult]) -> str:
    """Combine intent results into a single Markdown answer.

    * No results: a fixed "no results" message.
    * One result: its answer text, unwrapped.
    * Several: an "Action Plan" with one numbered section per intent, in
      order. Failed intents (``result is None``) get a placeholder.
    """
    if not results:
        return NO_RESULTS

    if len(results) == 1:
        result = results[0].result
        return (result.answer if result is not None else "") or NO_ANSWER

    sections = []
    for index, item in enumerate(results, start=1):
        answer = (item.result.answer if item.result is not None else "") or NO_SECTION_ANSWER
        sections.append(f"## {index}. {item.intent}\n\n{answer}\n")

    return "\n".join(
        [
            "# Action Plan",
            "Based on your query, here are the steps to accomplish your goal:",
            "",
            *sections,
            "---\nYou can ask follow-up questions about any of these steps for more details.",
        ]
    )


def handle_partial_failures(
    successes: list[BatchQueryResult],
    failures: list[BatchQueryResult],
) -> Optional[str]:
    """Describe failed intents, or return ``None`` when nothing failed.

    *successes* is accepted for symmetry with the caller's split of a batch;
    only *failures* contribute to the message.
    """
    if not failures:
        return None

    lines = ["⚠️ Some parts of your query could not be processed:"]
    for failure in failures:
        lines.append(f"- Intent: {failure.query}\n  Error: {failure.error or 'Unknown error'}")
    lines.append("\nYou can try rephrasing these parts or ask about them separately.")
    return "\n".join(lines)
