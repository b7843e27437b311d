"""
Default Verification Rubrics — per-step acceptance criteria sent to the classifier.
Override with STEP1_RUBRIC / STEP2_RUBRIC in the environment.

Both rubrics accept ambiguous evidence and reject only clearly unrelated images.
"""

_REPLY_FORMAT = """
Respond with ONLY a JSON object (no markdown, no code blocks):
{"verified": true, "reason": "What you found"}
OR
{"verified": false, "reason": "Why the screenshot does not qualify"}"""


STEP1_RUBRIC = """Analyze this screenshot and decide whether the student visited the partner registration platform.

Accept the screenshot if ANY of these is visible:
- A success or confirmation screen after submitting a registration form
- A "thank you" / "an advisor will contact you" style message
- The partner's logo together with a signup, login, course or payment page
- A filled or partially filled registration form on the partner platform
- A payment, checkout or fee page reached from the partner platform

Reject only if the image is clearly unrelated (blank, a different app, a random photo).
When in doubt, accept.""" + _REPLY_FORMAT


STEP2_RUBRIC = """Analyze this screenshot and decide whether the student joined (or was invited to) the community group chat.

Accept the screenshot if ANY of these is visible:
- A group chat interface with a group name in the header
- A "You joined using this group's invite link" system message
- Messages from several group members
- A group or channel info page listing members
- A group invite / join page for a chat group

Reject only if the image is clearly unrelated (blank, a different app, a random photo).
When in doubt, accept.""" + _REPLY_FORMAT


def rubric_for_step(settings, step_number: int) -> str:
    """Resolve the configured rubric text for a step (1 or 2)."""
    return settings.STEP1_RUBRIC if step_number == 1 else settings.STEP2_RUBRIC
