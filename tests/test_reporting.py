import pytest

from models.schemas import ConversationContext, ConversationMode, Language, ReportSession, ReportType, SlotKind
from core.conversation.reporting import (
    COMPLETE_SIGNAL,
    SKIP_SIGNAL,
    ReportDialogueEngine,
    UnknownReportType,
)
from core.conversation.reporting.slot_registry import slot_registry

REQUIRED_KEYS = {
    ReportType.PERSON: ["firstName", "lastName", "city", "lastKnownLocation"],
    ReportType.PET: ["petName", "petType", "city", "lastKnownLocation"],
    ReportType.DOCUMENT: ["documentType", "city", "lastKnownLocation"],
    ReportType.ELECTRONICS: ["deviceType", "brand", "city", "lastKnownLocation"],
    ReportType.VEHICLE: ["vehicleType", "brand", "city", "lastKnownLocation"],
    ReportType.OTHER: ["itemName", "city", "lastKnownLocation"],
}


@pytest.fixture
def engine():
    return ReportDialogueEngine()


def _answer_for(slot):
    if slot.kind == SlotKind.CITY:
        return "Rabat"
    if slot.kind == SlotKind.CHOICE:
        return slot.options[0].value
    if slot.kind == SlotKind.YEAR:
        return "2019"
    return f"value for {slot.key}"


def _roundtrip(session):
    """Serialize a session the way the caller persists it and load it back"""
    context = ConversationContext(mode=ConversationMode.REPORT_CREATION, report_context=session)
    restored = ConversationContext.from_dict(context.to_dict())
    return restored.report_context


@pytest.mark.parametrize("report_type", list(ReportType))
def test_schema_required_keys(report_type):
    schema = slot_registry.get_schema(report_type)
    assert [slot.key for slot in schema if slot.required] == REQUIRED_KEYS[report_type]
    assert slot_registry.required_count(report_type) == len(REQUIRED_KEYS[report_type])
    assert schema[-1].key == "additionalInfo"
    assert not schema[-1].required


def test_schema_lookup_accepts_strings():
    assert slot_registry.get_schema("pet") == slot_registry.get_schema(ReportType.PET)


def test_get_schema_returns_copies():
    schema = slot_registry.get_schema(ReportType.OTHER)
    schema.clear()
    assert slot_registry.get_schema(ReportType.OTHER)


def test_unknown_report_type():
    with pytest.raises(UnknownReportType) as exc_info:
        slot_registry.get_schema("spaceship")
    assert exc_info.value.code == "unknown_type"
    assert isinstance(exc_info.value, ValueError)


@pytest.mark.parametrize("report_type", list(ReportType))
def test_required_only_session_completes_in_required_count_turns(engine, report_type):
    turn = engine.init_report_session(report_type, Language.EN)
    turns = 0
    while not turn.is_complete:
        assert turn.session.current_slot.required
        turn = engine.process_report_answer(turn.session, _answer_for(turn.session.current_slot))
        turns += 1

    assert turns == slot_registry.required_count(report_type)
    assert set(REQUIRED_KEYS[report_type]) <= set(turn.session.collected_data)
    assert turn.session.progress == 1.0
    assert turn.summary


def test_first_prompt_is_localized(engine):
    turn = engine.init_report_session(ReportType.PET, Language.AR)
    assert turn.prompt == "ما هو اسم حيوانك الأليف؟"
    assert turn.session.current_slot_index == 0
    assert turn.session.progress == 0.0
    assert turn.quick_replies[-1].action == "cancel"


def test_invalid_answer_does_not_advance(engine):
    first = engine.init_report_session(ReportType.PERSON, Language.EN)
    retry = engine.process_report_answer(first.session, "   ")
    assert retry.session.current_slot_index == first.session.current_slot_index
    assert retry.prompt == first.prompt
    assert retry.hint == "⚠️ This information is required to continue."
    assert retry.session.collected_data == {}


def test_sessions_are_not_mutated(engine):
    first = engine.init_report_session(ReportType.PERSON, Language.EN)
    engine.process_report_answer(first.session, "Amina")
    assert first.session.collected_data == {}
    assert first.session.current_slot_index == 0


def test_required_slot_cannot_be_skipped(engine):
    first = engine.init_report_session(ReportType.DOCUMENT, Language.EN)
    turn = engine.process_report_answer(first.session, SKIP_SIGNAL)
    assert turn.session.current_slot_index == 0
    assert "can't be skipped" in turn.hint


def test_complete_before_required_slots(engine):
    first = engine.init_report_session(ReportType.OTHER, Language.EN, include_optional=True)
    turn = engine.process_report_answer(first.session, COMPLETE_SIGNAL)
    assert not turn.is_complete
    assert turn.hint == "⚠️ A few required questions still need an answer before finishing."


def test_optional_flow_with_choice_skip_and_done(engine):
    turn = engine.init_report_session(ReportType.PET, Language.EN, include_optional=True)
    turn = engine.process_report_answer(turn.session, "Rex")
    turn = engine.process_report_answer(turn.session, "dog")
    assert turn.session.current_slot.key == "breed"
    assert turn.quick_replies[0].data == {"value": SKIP_SIGNAL}

    turn = engine.process_report_answer(turn.session, SKIP_SIGNAL)
    assert turn.session.current_slot.key == "color"
    turn = engine.process_report_answer(turn.session, "brown")

    assert turn.session.current_slot.key == "size"
    assert [reply.data["value"] for reply in turn.quick_replies[:3]] == ["small", "medium", "large"]
    invalid = engine.process_report_answer(turn.session, "purple")
    assert invalid.session.current_slot.key == "size"
    assert invalid.hint == "⚠️ Please choose one of the options."
    turn = engine.process_report_answer(turn.session, "big")
    assert turn.session.collected_data["size"] == "large"

    turn = engine.process_report_answer(turn.session, "casa")
    assert turn.session.collected_data["city"] == "Casablanca"
    turn = engine.process_report_answer(turn.session, "Near the Maarif park")

    assert turn.session.current_slot.key == "additionalInfo"
    assert COMPLETE_SIGNAL in [(reply.data or {}).get("value") for reply in turn.quick_replies]
    done = engine.process_report_answer(turn.session, COMPLETE_SIGNAL)

    assert done.is_complete
    assert "breed" not in done.session.collected_data
    assert done.session.collected_data["petName"] == "Rex"
    assert "• Size: Large" in done.summary


def test_year_validation(engine):
    turn = engine.init_report_session(ReportType.VEHICLE, Language.EN, include_optional=True)
    while turn.session.current_slot.key != "year":
        turn = engine.process_report_answer(turn.session, _answer_for(turn.session.current_slot))

    for bad in ["20x5", "1850", "99", "3000"]:
        retry = engine.process_report_answer(turn.session, bad)
        assert retry.session.current_slot.key == "year"
        assert retry.hint == "⚠️ Please enter a valid 4-digit year (e.g. 2019)."

    turn = engine.process_report_answer(turn.session, "2015")
    assert turn.session.collected_data["year"] == "2015"


def test_unknown_city_is_kept_as_typed(engine):
    turn = engine.init_report_session(ReportType.OTHER, Language.EN)
    turn = engine.process_report_answer(turn.session, "umbrella")
    turn = engine.process_report_answer(turn.session, "Ifrane")
    assert turn.session.collected_data["city"] == "Ifrane"


def test_session_survives_serialization_after_every_answer(engine):
    direct = engine.init_report_session(ReportType.PERSON, Language.DARIJA, include_optional=True)
    resumed = direct
    answers = ["Amina", "Berrada", "12", "female", "", "casa", "Derb Ghallef", "she wears glasses"]

    for answer in answers:
        direct = engine.process_report_answer(direct.session, answer)
        resumed = engine.process_report_answer(_roundtrip(resumed.session), answer)
        assert resumed.prompt == direct.prompt
        assert resumed.session.collected_data == direct.session.collected_data
        assert resumed.session.current_slot_index == direct.session.current_slot_index

    assert resumed.is_complete
    assert resumed.session.collected_data["gender"] == "female"
    assert "healthStatus" not in resumed.session.collected_data


def test_serialized_session_uses_wire_names(engine):
    session = engine.init_report_session(ReportType.PET, Language.EN).session
    data = session.model_dump(by_alias=True, mode="json")
    assert {"reportType", "schema", "collectedData", "currentSlotIndex", "isComplete", "progress"} <= set(data)
    assert ReportSession.model_validate(data) == session


def test_corrupted_session_raises(engine):
    session = engine.init_report_session(ReportType.PET, Language.EN).session
    broken = session.model_copy(update={"current_slot_index": 42})
    with pytest.raises(ValueError):
        engine.process_report_answer(broken, "Rex")


def test_summary_groups_sections(engine):
    turn = engine.init_report_session(ReportType.PERSON, Language.EN)
    for answer in ["Amina", "Berrada", "Fes", "Bab Boujloud"]:
        turn = engine.process_report_answer(turn.session, answer)

    summary = engine.generate_report_summary(turn.session, Language.EN)
    lines = summary.splitlines()
    assert lines[0] == "📋 Report Summary"
    assert lines.index("Identity:") < lines.index("Location:")
    assert "• First name: Amina" in lines
    assert "• City: Fes" in lines
    assert "Description:" not in lines


def test_progress_rendering(engine):
    turn = engine.init_report_session(ReportType.PERSON, Language.EN)
    assert engine.render_progress(turn.session, Language.EN) == "Step 1/4 [░░░░░░░░░░] 0%"

    turn = engine.process_report_answer(turn.session, "Amina")
    progress = engine.render_progress(turn.session, Language.EN)
    assert progress.startswith("Step 2/4 [▓▓")
    assert progress.endswith("25%")
