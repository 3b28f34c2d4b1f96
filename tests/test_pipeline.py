from models.schemas import AssistantResponse, ConversationContext, ConversationMode, Language, ReportType
from core.conversation.context import ContextValidator
from core.conversation.pipeline import (
    ErrorHandlingMiddleware,
    Middleware,
    MiddlewarePipeline,
    ValidationMiddleware,
    build_result,
)
from core.conversation.reporting import init_report_session


def _ok_handler(data):
    return build_result(AssistantResponse(text=f"echo {data['message']}"), ConversationContext(),
                        metadata={"handler_name": "echo"})


def _report_context():
    session = init_report_session(ReportType.PET, Language.EN).session
    return ConversationContext(mode=ConversationMode.REPORT_CREATION, report_context=session).to_dict()


def test_valid_contexts_have_no_errors():
    assert ContextValidator.validate_context(None) == []
    assert ContextValidator.validate_context({}) == []
    assert ContextValidator.validate_context(_report_context()) == []


def test_corrupt_contexts_are_errors():
    broken_index = _report_context()
    broken_index["reportContext"]["currentSlotIndex"] = 99
    empty_schema = _report_context()
    empty_schema["reportContext"]["schema"] = []

    for context in [
        "not a dict",
        {"mode": "time_travel"},
        {"mode": "report_creation"},
        {"language": "klingon"},
        broken_index,
        empty_schema,
        {"searchContext": {"lastQuery": 7}},
    ]:
        errors = ContextValidator.validate_context(context)
        assert ContextValidator.has_errors(errors), context


def test_stray_report_session_is_only_a_warning():
    context = _report_context()
    context["mode"] = None
    errors = ContextValidator.validate_context(context)
    assert errors
    assert not ContextValidator.has_errors(errors)
    assert ContextValidator.summarize(errors, severity="warning")


def test_pipeline_runs_middleware_in_order():
    calls = []

    class _Recorder(Middleware):
        def __init__(self, name):
            self.name = name

        def process(self, data, next_handler):
            calls.append(self.name)
            return next_handler(data)

    pipeline = MiddlewarePipeline().add(_Recorder("outer")).add(_Recorder("inner"))
    result = pipeline.build(_ok_handler)({"message": "hi"})

    assert calls == ["outer", "inner"]
    assert result["response"]["text"] == "echo hi"
    assert result["success"]


def test_validation_rejects_empty_input():
    handler = MiddlewarePipeline().add(ValidationMiddleware()).build(_ok_handler)
    result = handler({"message": "   ", "action": None, "context": {"mode": "search"}})

    assert not result["success"]
    assert result["response"]["text"] == "Please type a message or choose one of the options."
    assert result["context"] == {"mode": "search"}


def test_validation_allows_action_without_message():
    handler = MiddlewarePipeline().add(ValidationMiddleware()).build(_ok_handler)
    assert handler({"message": "", "action": "create_report"})["success"]


def test_validation_rejects_long_messages():
    handler = MiddlewarePipeline().add(ValidationMiddleware(max_length=10)).build(_ok_handler)
    result = handler({"message": "x" * 11, "context": None})

    assert not result["success"]
    assert "10" in result["response"]["text"]
    assert result["context"]["mode"] is None


def test_error_middleware_uses_fallback():
    def explode(data):
        raise RuntimeError("boom")

    def fallback(data, error):
        return build_result(AssistantResponse(text="fallback"), ConversationContext(), success=False)

    result = MiddlewarePipeline().add(ErrorHandlingMiddleware(fallback)).build(explode)({"message": "hi"})
    assert result["response"]["text"] == "fallback"


def test_error_middleware_without_fallback_is_well_formed():
    def explode(data):
        raise RuntimeError("boom")

    result = MiddlewarePipeline().add(ErrorHandlingMiddleware()).build(explode)({"message": "hi"})
    assert not result["success"]
    assert result["response"]["text"] == "I'm sorry, something went wrong. Please try again."
    assert [reply["action"] for reply in result["response"]["quickReplies"]] == [
        "create_report", "search_reports", "platform_help",
    ]
    assert result["metadata"]["error_type"] == "RuntimeError"
