"""Prompt construction for the member portrait transformation.

The prompt sent alongside the uploaded photo is a pure function of the
member's optional ``activity``:

- no activity (``None``, empty, or whitespace only) → :data:`BASE_PROMPT`
- any other activity → :data:`ACTIVITY_PROMPT_TEMPLATE` with the trimmed
  activity inserted verbatim

Substitution uses ``str.replace`` on a fixed placeholder rather than
``str.format`` so braces or percent signs typed into the form cannot raise.

Usage
-----
::

    prompt = build_prompt("playing the cello")
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Fixed prompt text.
# These are constants rather than configuration because they define the
# visual identity of the community page.
# ---------------------------------------------------------------------------

BASE_PROMPT = (
    "Using the provided photo as reference, create an original baby character "
    'for the comic strip "Peanuts". They are standing up, the background is white, '
    "and they should not have facial hair."
)

ACTIVITY_PLACEHOLDER = "<<activity>>"

ACTIVITY_PROMPT_TEMPLATE = (
    BASE_PROMPT + " Show the character enjoying their favourite activity: "
    f"{ACTIVITY_PLACEHOLDER}. Include a simple prop that makes the activity "
    "recognisable, drawn in the same comic strip style."
)


def build_prompt(activity: str | None = None) -> str:
    """Compile the image-editing prompt for a submission.

    Args:
        activity: Optional free-text activity from the form.

    Returns:
        The baseline prompt when *activity* is absent or blank, otherwise the
        extended prompt containing the trimmed activity verbatim.
    """
    stripped = (activity or "").strip()
    if not stripped:
        return BASE_PROMPT
    return ACTIVITY_PROMPT_TEMPLATE.replace(ACTIVITY_PLACEHOLDER, stripped)
