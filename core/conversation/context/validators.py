"""
Context validation utilities.

The conversation context round-trips through the caller, so it is checked
for shape before it is trusted. Errors make the orchestrator reset the
conversation; warnings are only logged.
"""

from typing import Dict, Any, List, Optional

from models.schemas import ConversationMode, Language, ReportType


class ValidationError:
    """Represents a context validation error"""

    def __init__(self, field: str, message: str, severity: str = "error"):
        self.field = field
        self.message = message
        self.severity = severity  # "error", "warning"

    def __repr__(self):
        return f"ValidationError({self.field}: {self.message})"


def _get(data: Dict[str, Any], camel: str, snake: str) -> Any:
    """Read a key in either its wire or attribute spelling"""
    return data[camel] if camel in data else data.get(snake)


class ContextValidator:
    """Validates conversation context shape and consistency"""

    VALID_MODES = {mode.value for mode in ConversationMode}
    VALID_REPORT_TYPES = {report_type.value for report_type in ReportType}
    VALID_LANGUAGES = {language.value for language in Language}

    @classmethod
    def validate_context(cls, context: Any) -> List[ValidationError]:
        """
        Validate a raw context value.

        Args:
            context: Context as received from the caller

        Returns:
            List of validation errors and warnings
        """
        if context is None:
            return []
        if not isinstance(context, dict):
            return [ValidationError("context", "Context must be an object")]

        errors = []
        mode = context.get("mode")
        if mode is not None and mode not in cls.VALID_MODES:
            errors.append(ValidationError("mode", f"Unknown mode: {mode!r}"))
            return errors

        language = context.get("language")
        if language is not None and language not in cls.VALID_LANGUAGES:
            errors.append(ValidationError("language", f"Unknown language: {language!r}"))

        report_context = _get(context, "reportContext", "report_context")
        search_context = _get(context, "searchContext", "search_context")

        if mode == ConversationMode.REPORT_CREATION.value:
            if report_context is None:
                errors.append(ValidationError("reportContext", "Report mode requires a report session"))
            else:
                errors.extend(cls._validate_report_session(report_context))
        elif report_context is not None:
            errors.append(ValidationError(
                "reportContext", "Report session present outside report mode", severity="warning"
            ))

        if search_context is not None:
            errors.extend(cls._validate_search_context(search_context))

        return errors

    @classmethod
    def _validate_report_session(cls, session: Any) -> List[ValidationError]:
        """Validate a serialized report session"""
        if not isinstance(session, dict):
            return [ValidationError("reportContext", "Report session must be an object")]

        errors = []
        if _get(session, "reportType", "report_type") not in cls.VALID_REPORT_TYPES:
            errors.append(ValidationError("reportContext.reportType", "Unknown report type"))

        schema = _get(session, "schema", "slots")
        if not isinstance(schema, list) or not schema:
            errors.append(ValidationError("reportContext.schema", "Schema must be a non-empty list"))
            return errors

        index = _get(session, "currentSlotIndex", "current_slot_index")
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index <= len(schema):
            errors.append(ValidationError(
                "reportContext.currentSlotIndex",
                f"Slot index must be between 0 and {len(schema)}"
            ))

        collected = _get(session, "collectedData", "collected_data")
        if collected is not None and not isinstance(collected, dict):
            errors.append(ValidationError("reportContext.collectedData", "Collected data must be an object"))

        if _get(session, "isComplete", "is_complete"):
            errors.append(ValidationError(
                "reportContext.isComplete", "Completed session still marked active", severity="warning"
            ))

        return errors

    @classmethod
    def _validate_search_context(cls, search_context: Any) -> List[ValidationError]:
        if not isinstance(search_context, dict):
            return [ValidationError("searchContext", "Search context must be an object")]
        last_query = _get(search_context, "lastQuery", "last_query")
        if last_query is not None and not isinstance(last_query, str):
            return [ValidationError("searchContext.lastQuery", "Last query must be a string")]
        return []

    @classmethod
    def has_errors(cls, errors: List[ValidationError]) -> bool:
        return any(error.severity == "error" for error in errors)

    @classmethod
    def summarize(cls, errors: List[ValidationError], severity: Optional[str] = None) -> List[str]:
        """Flatten errors to strings for logging"""
        return [
            f"{error.field}: {error.message}" for error in errors
            if severity is None or error.severity == severity
        ]
