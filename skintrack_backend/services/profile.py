"""Profile fields shared by stored accounts and the live session."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, TypedDict

from skintrack_backend.config import DEFAULT_TITLE, GOAL_CATALOG
from skintrack_backend.models import AllergySeverity, OnboardingStatus


class InvalidProfileUpdateError(ValueError):
    """Raised when a partial profile update names or carries bad fields."""


class Allergy(TypedDict):
    """Ingredient the user reacts to, with how badly."""

    ingredient: str
    severity: str


class ProfileCompletion(TypedDict):
    skin_profile: bool
    goals: bool
    allergies: bool
    complete: bool


# id and email identify the account and never change after creation.
UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "onboarding_status",
        "skin_type",
        "skin_tone",
        "goals",
        "allergies",
        "shopping_prefs",
        "xp",
        "streak",
        "title",
    }
)


@dataclass(slots=True)
class Profile:
    """Account data without credentials, as seen by the rest of the app."""

    id: str
    email: str
    name: str
    onboarding_status: str = OnboardingStatus.NOT_STARTED.value
    skin_type: str | None = None
    skin_tone: str | None = None
    goals: list[str] = field(default_factory=list)
    allergies: list[Allergy] = field(default_factory=list)
    shopping_prefs: list[str] = field(default_factory=list)
    xp: int = 0
    streak: int = 0
    title: str = DEFAULT_TITLE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Profile":
        """Build a profile from a stored record, ignoring foreign keys."""

        known = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)

    def merged(self, fields: Mapping[str, Any]) -> "Profile":
        """Return a copy with ``fields`` laid over the current values."""

        return dataclasses.replace(self, **fields)


def validate_profile_update(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Check a partial update and return a normalized copy of it.

    The update is rejected as a whole: any unknown or immutable field name,
    or any value of the wrong shape, raises ``InvalidProfileUpdateError``.
    """

    if not isinstance(fields, Mapping):
        raise InvalidProfileUpdateError("profile update must be an object")

    unknown = sorted(set(fields) - UPDATABLE_FIELDS)
    if unknown:
        raise InvalidProfileUpdateError(
            f"fields cannot be updated: {', '.join(unknown)}"
        )

    cleaned: dict[str, Any] = {}
    for name, value in fields.items():
        if name == "name":
            if not isinstance(value, str) or not value.strip():
                raise InvalidProfileUpdateError("name is required")
            cleaned[name] = value.strip()
        elif name == "title":
            if not isinstance(value, str) or not value.strip():
                raise InvalidProfileUpdateError("title must be a non-empty string")
            cleaned[name] = value
        elif name == "onboarding_status":
            if not isinstance(value, str) or value not in OnboardingStatus.values():
                raise InvalidProfileUpdateError(
                    f"unknown onboarding status {value!r}"
                )
            cleaned[name] = OnboardingStatus(value).value
        elif name in ("skin_type", "skin_tone"):
            if value is not None and not isinstance(value, str):
                raise InvalidProfileUpdateError(f"{name} must be a string")
            cleaned[name] = value
        elif name in ("goals", "shopping_prefs"):
            cleaned[name] = _string_list(name, value)
        elif name == "allergies":
            cleaned[name] = [_allergy(item) for item in _list(name, value)]
        elif name in ("xp", "streak"):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidProfileUpdateError(
                    f"{name} must be a non-negative integer"
                )
            cleaned[name] = value
    return cleaned


def order_goals(goals: Iterable[str]) -> list[str]:
    """Return goals in catalog order, then any custom goals as stored."""

    goals = list(dict.fromkeys(goals))
    in_catalog = [goal for goal in GOAL_CATALOG if goal in goals]
    custom = [goal for goal in goals if goal not in GOAL_CATALOG]
    return in_catalog + custom


def toggle_goal(goals: Iterable[str], goal: str) -> list[str]:
    """Add ``goal`` when missing, otherwise remove every occurrence of it."""

    goals = list(goals)
    if goal in goals:
        return [existing for existing in goals if existing != goal]
    return goals + [goal]


def profile_completion(profile: Profile) -> ProfileCompletion:
    """Summarize which onboarding sections the user has filled in."""

    skin_profile = bool(profile.skin_type and profile.skin_tone)
    goals = bool(profile.goals)
    allergies = bool(profile.allergies)
    return {
        "skin_profile": skin_profile,
        "goals": goals,
        "allergies": allergies,
        "complete": skin_profile and goals and allergies,
    }


def _list(name: str, value: Any) -> list:
    if not isinstance(value, (list, tuple)):
        raise InvalidProfileUpdateError(f"{name} must be a list")
    return list(value)


def _string_list(name: str, value: Any) -> list[str]:
    items = _list(name, value)
    if not all(isinstance(item, str) for item in items):
        raise InvalidProfileUpdateError(f"{name} must contain only strings")
    return items


def _allergy(item: Any) -> Allergy:
    if not isinstance(item, Mapping):
        raise InvalidProfileUpdateError("allergy entries must be objects")
    ingredient = item.get("ingredient")
    severity = item.get("severity")
    if not isinstance(ingredient, str) or not ingredient.strip():
        raise InvalidProfileUpdateError("allergy ingredient is required")
    if not isinstance(severity, str) or severity not in AllergySeverity.values():
        raise InvalidProfileUpdateError(f"unknown allergy severity {severity!r}")
    return {
        "ingredient": ingredient.strip(),
        "severity": AllergySeverity(severity).value,
    }
