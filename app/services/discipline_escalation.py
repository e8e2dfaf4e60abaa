"""Progressive-discipline escalation resolver.

Given an employee's warning history, decide which warning level a new
incident in a category calls for. The recommendation is advisory; the
issuing manager may override it with any level valid for the category.

Only active warnings in the same category count. Expired or overturned
warnings drop out, so discipline for a category resets once its warnings
lapse. "Higher" is measured by position in the category's own escalation
path, not by the shared level vocabulary.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

from app.config import settings
from app.models.discipline import WarningLevel
from app.services.discipline_catalog import (
    DEFAULT_ESCALATION_PATH,
    CategoryCatalog,
    CategoryDefinition,
    get_level_label,
)
from app.services.discipline_records import WarningRecord
from app.services.discipline_validity import (
    compute_expiry,
    is_active,
    local_date,
    resolve_timezone,
)

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY_NAME = "General Misconduct"

# Validity proposed for the next warning by level; other levels use the
# category default.
_LEVEL_VALIDITY_MONTHS: dict[WarningLevel, int] = {
    WarningLevel.counselling: 3,
    WarningLevel.verbal: 6,
    WarningLevel.final_written: 12,
}


@dataclass(frozen=True)
class EscalationRecommendation:
    employee_id: str
    category_id: str
    category_name: str
    suggested_level: WarningLevel
    suggested_level_label: str
    is_escalation: bool
    category_warning_count: int
    total_active_warnings: int
    reason: str
    escalation_path: tuple[WarningLevel, ...]
    previous_level: WarningLevel | None
    next_expiry_date: date
    active_warnings: tuple[WarningRecord, ...]
    legal_basis: str = ""
    legal_requirements: tuple[str, ...] = ()
    examples: tuple[str, ...] = ()
    explanation: str = ""


def _next_expiry(today: date, level: WarningLevel, default_months: int) -> date:
    return compute_expiry(today, _LEVEL_VALIDITY_MONTHS.get(level, default_months))


def _guidance(category: CategoryDefinition | None) -> dict:
    if category is None:
        return {}
    return {
        "legal_basis": category.lra_section,
        "legal_requirements": category.procedural_requirements,
        "examples": category.common_examples,
        "explanation": category.escalation_rationale,
    }


def _most_recent_first(warnings: Iterable[WarningRecord]) -> tuple[WarningRecord, ...]:
    return tuple(
        sorted(warnings, key=lambda w: (w.issue_date, str(w.id or "")), reverse=True)
    )


def _highest_level(
    warnings: Iterable[WarningRecord], path: tuple[WarningLevel, ...]
) -> tuple[int, WarningLevel | None]:
    highest_index = -1
    highest_level = None
    for warning in warnings:
        if warning.level not in path:
            logger.warning(
                "Warning %s has level %s outside the current path; ignoring it for ordering",
                warning.id,
                warning.level.value,
            )
            continue
        index = path.index(warning.level)
        if index > highest_index:
            highest_index = index
            highest_level = warning.level
    return highest_index, highest_level


def _escalation_reason(
    category_name: str,
    active: tuple[WarningRecord, ...],
    previous_level: WarningLevel | None,
    suggested_level: WarningLevel,
    at_end_of_path: bool,
    today: date,
) -> str:
    count = len(active)
    plural = "s" if count != 1 else ""
    days_since = (today - active[0].issue_date).days
    reason = (
        f"Employee has {count} active warning{plural} for {category_name}. "
        f"Most recent warning was issued {days_since} days ago."
    )
    if previous_level is not None:
        reason += f" Highest active level is {get_level_label(previous_level)}."
    if at_end_of_path:
        return (
            f"{reason} {get_level_label(suggested_level)} is the final step of "
            "the escalation path for this category."
        )
    return (
        f"{reason} Progressive discipline requires escalation to "
        f"{get_level_label(suggested_level)}."
    )


def resolve_escalation(
    employee_id,
    category_id,
    history: Iterable[WarningRecord],
    catalog: CategoryCatalog,
    now: datetime,
    tz=None,
) -> EscalationRecommendation:
    """Recommend the next warning level for a new incident.

    ``history`` is the employee's full warning history as supplied by the
    data store. It may contain warnings in other categories, expired or
    overturned warnings, and levels no longer present in the category path;
    none of those raise.
    """
    employee_id = str(employee_id)
    category_id = str(category_id)
    tz = tz or resolve_timezone()
    today = local_date(now, tz)

    all_active = [
        w
        for w in history
        if str(w.employee_id) == employee_id and is_active(w, now, tz)
    ]
    active = _most_recent_first(
        w for w in all_active if str(w.category_id) == category_id
    )

    path = catalog.get_escalation_path(category_id)
    category = catalog.get_category_by_id(category_id)
    category_name = category.name if category else FALLBACK_CATEGORY_NAME
    validity = (
        category.default_validity_months
        if category
        else settings.default_validity_months
    )

    if not active:
        suggested = path[0]
        return EscalationRecommendation(
            employee_id=employee_id,
            category_id=category_id,
            category_name=category_name,
            suggested_level=suggested,
            suggested_level_label=get_level_label(suggested),
            is_escalation=False,
            category_warning_count=0,
            total_active_warnings=len(all_active),
            reason=(
                f"First offense in this category ({category_name}). Starting with "
                f"{get_level_label(suggested)} follows progressive discipline."
            ),
            escalation_path=path,
            previous_level=None,
            next_expiry_date=_next_expiry(today, suggested, validity),
            active_warnings=(),
            **_guidance(category),
        )

    highest_index, previous_level = _highest_level(active, path)
    last_index = len(path) - 1
    suggested = path[min(highest_index + 1, last_index)]
    recommendation = EscalationRecommendation(
        employee_id=employee_id,
        category_id=category_id,
        category_name=category_name,
        suggested_level=suggested,
        suggested_level_label=get_level_label(suggested),
        is_escalation=True,
        category_warning_count=len(active),
        total_active_warnings=len(all_active),
        reason=_escalation_reason(
            category_name,
            active,
            previous_level,
            suggested,
            highest_index == last_index,
            today,
        ),
        escalation_path=path,
        previous_level=previous_level,
        next_expiry_date=_next_expiry(today, suggested, validity),
        active_warnings=active,
        **_guidance(category),
    )
    logger.debug(
        "Recommended %s for employee %s in category %s (%d active)",
        suggested.value,
        employee_id,
        category_id,
        len(active),
    )
    return recommendation


def fallback_recommendation(
    employee_id, category_id, now: datetime, tz=None
) -> EscalationRecommendation:
    """Safest recommendation when the warning history cannot be analyzed."""
    tz = tz or resolve_timezone()
    suggested = DEFAULT_ESCALATION_PATH[0]
    today = local_date(now, tz)
    return EscalationRecommendation(
        employee_id=str(employee_id),
        category_id=str(category_id),
        category_name=FALLBACK_CATEGORY_NAME,
        suggested_level=suggested,
        suggested_level_label=get_level_label(suggested),
        is_escalation=False,
        category_warning_count=0,
        total_active_warnings=0,
        reason=(
            "Unable to analyze warning history; defaulting to "
            f"{get_level_label(suggested)} as the safest option."
        ),
        escalation_path=DEFAULT_ESCALATION_PATH,
        previous_level=None,
        next_expiry_date=_next_expiry(
            today, suggested, settings.default_validity_months
        ),
        active_warnings=(),
    )
