"""Rendering of search outcomes as assistant responses"""

from typing import List, Optional

from config import settings
from models.schemas import AssistantResponse, Language, ReportRecord, ReportType, SearchOutcome
from core.conversation.responses import (
    get_message,
    no_results_replies,
    search_results_replies,
    type_label,
)

# Detail keys that name a report, per category
TITLE_FIELDS = {
    ReportType.PERSON: ["firstName", "lastName"],
    ReportType.PET: ["petName", "petType"],
    ReportType.DOCUMENT: ["documentType", "ownerName"],
    ReportType.ELECTRONICS: ["brand", "model", "deviceType"],
    ReportType.VEHICLE: ["brand", "model", "vehicleType"],
    ReportType.OTHER: ["itemName"],
}


def report_title(report: ReportRecord, language: Language) -> str:
    """Short human title for a report card"""
    parts = [
        str(report.details[key]) for key in TITLE_FIELDS.get(report.report_type, [])
        if report.details.get(key)
    ]
    if parts:
        return " ".join(parts)
    # Drop the emoji from the category label
    return type_label(report.report_type, language).split(" ", 1)[-1]


def format_result_card(index: int, report: ReportRecord, language: Language) -> str:
    lines = [f"{index}. {type_label(report.report_type, language)} • {report_title(report, language)}"]
    place = " - ".join(part for part in [report.city and report.city.title(), report.last_known_location] if part)
    if place:
        lines.append(f"   📍 {place}")
    lines.append(f"   📅 {report.created_at.strftime('%Y-%m-%d')}")
    return "\n".join(lines)


def format_search_results(outcome: SearchOutcome, language: Language,
                          shown: Optional[int] = None) -> AssistantResponse:
    """
    Render a search outcome.

    Args:
        outcome: Ranked search results
        language: Response language
        shown: Number of cards to show, defaults to SEARCH_RESULTS_SHOWN

    Returns:
        AssistantResponse with a header and result cards, or the localized
        no-results text with follow-up suggestions
    """
    if not outcome.items:
        return AssistantResponse(
            text=get_message("no_results", language),
            quick_replies=no_results_replies(language),
        )

    shown = shown or settings.SEARCH_RESULTS_SHOWN
    cards: List[str] = [
        format_result_card(index, result.report, language)
        for index, result in enumerate(outcome.items[:shown], start=1)
    ]
    sections = [get_message("search_results_header", language, count=outcome.total_count), *cards]
    if outcome.total_count > shown:
        sections.append(get_message("search_results_more", language, shown=shown))

    return AssistantResponse(
        text="\n\n".join(sections),
        quick_replies=search_results_replies(language),
    )
