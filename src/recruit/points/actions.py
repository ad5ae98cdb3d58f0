"""Point action catalogue.

Fixed actions always award their listed amount and ignore any amount sent by
the client. Variable actions require the caller to supply one.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PointAction:
    name: str
    points: int | None
    description: str
    client_awardable: bool = True
    max_points: int | None = None

    @property
    def is_variable(self) -> bool:
        return self.points is None


POINT_ACTIONS: dict[str, PointAction] = {
    a.name: a
    for a in [
        PointAction("chat_participation", 5, "Participating in chat with Sgt. Ken"),
        PointAction("contact_form_submission", 10, "Submitting a contact form"),
        PointAction("resource_download", 10, "Downloading a recruitment resource"),
        PointAction("practice_test", 20, "Completing a practice test"),
        PointAction("referral", 50, "Referring a friend", client_awardable=False),
        PointAction("application_submission", 500, "Submitting an application", client_awardable=False),
        PointAction("trivia_share", 15, "Sharing a trivia question", client_awardable=False),
        PointAction("background_prep", 2, "Checking off a background document", client_awardable=False),
        PointAction("badge_earned", None, "Earning a badge", client_awardable=False),
        PointAction("trivia_game_completion", None, "Completing a trivia game", client_awardable=False),
        PointAction("sgt_ken_game_win", None, "Winning the Sgt. Ken game", max_points=220),
        PointAction("deputy_skills_test", None, "Completing the deputy skills test", max_points=220),
        PointAction("tiktok_challenge_submission", None, "Submitting a TikTok challenge entry", max_points=200),
        PointAction("donation", None, "Donation points", client_awardable=False),
        PointAction("admin_adjustment", None, "Manual adjustment by an administrator", client_awardable=False),
    ]
}


def get_action(name: str) -> PointAction:
    """Look up an action by name. Raises LookupError for unknown actions."""
    try:
        return POINT_ACTIONS[name]
    except KeyError:
        msg = f"Unknown point action: {name}"
        raise LookupError(msg) from None


def resolve_amount(action: PointAction, requested: int | None) -> int:
    """Return the amount to award for `action`.

    Raises:
        ValueError: If a variable action has no amount or exceeds its cap.
    """
    if not action.is_variable:
        return action.points  # type: ignore[return-value]
    if requested is None:
        msg = f"Action '{action.name}' requires a points amount"
        raise ValueError(msg)
    if action.max_points is not None and abs(requested) > action.max_points:
        msg = f"Action '{action.name}' is capped at {action.max_points} points"
        raise ValueError(msg)
    return requested
