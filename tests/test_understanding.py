from datetime import datetime, timedelta, timezone

import pytest

from models.schemas import IntentType, Language, ReportType
from core.conversation.understanding import (
    CancellationDetector,
    EntityExtractor,
    EntityType,
    HelpTopic,
    IntentClassifier,
    LanguageDetector,
    detect_language,
)


@pytest.fixture(scope="module")
def detector():
    return LanguageDetector()


@pytest.fixture(scope="module")
def cancellation():
    return CancellationDetector()


@pytest.fixture(scope="module")
def classifier():
    return IntentClassifier()


@pytest.fixture(scope="module")
def extractor():
    return EntityExtractor()


@pytest.mark.parametrize("text, expected", [
    ("Hello, I lost my phone", Language.EN),
    ("السلام عليكم، ضاع مني كلب", Language.AR),
    ("salam, bghit nbelegh 3la kelb", Language.DARIJA),
    ("l9it wahed tilifoun", Language.DARIJA),
    ("rah f dar", Language.DARIJA),
    ("", Language.EN),
    (None, Language.EN),
    ("!!!", Language.EN),
])
def test_language_detection(detector, text, expected):
    assert detector.detect(text) == expected


def test_arabic_script_wins_over_latin_tokens(detector):
    assert detector.detect("my phone ضاع") == Language.AR


def test_language_detection_is_deterministic():
    text = "wach kayn chi kelb f casa"
    assert detect_language(text) == detect_language(text) == Language.DARIJA


@pytest.mark.parametrize("text", [
    "cancel",
    "Cancel please",
    "stop",
    "I want to start over",
    "إلغاء",
    "خاصني نبدا من جديد",
    "kanseli",
    "rje3",
    "never mind",
])
def test_cancel_requests(cancellation, text):
    assert cancellation.is_cancel(text)


@pytest.mark.parametrize("text", [
    "near the bus stop",
    "go back home was the plan",
    "safi",
    "Rex",
    "",
    None,
])
def test_non_cancel_messages(cancellation, text):
    assert not cancellation.is_cancel(text)


def test_greeting_in_arabic(classifier):
    result = classifier.classify("مرحبا")
    assert result.intent == IntentType.PLATFORM_HELP
    assert result.topic == HelpTopic.GREETING
    assert result.language == Language.AR


@pytest.mark.parametrize("text, topic", [
    ("hi", HelpTopic.GREETING),
    ("thanks a lot", HelpTopic.THANKS),
    ("bye", HelpTopic.GOODBYE),
    ("what can you do?", HelpTopic.HELP),
])
def test_help_topics(classifier, text, topic):
    result = classifier.classify(text)
    assert result.intent == IntentType.PLATFORM_HELP
    assert result.topic == topic


def test_create_report_with_category(classifier):
    result = classifier.classify("I lost my phone")
    assert result.intent == IntentType.CREATE_REPORT
    assert result.report_type == ReportType.ELECTRONICS
    assert 0.0 <= result.confidence <= 1.0


def test_create_report_in_darija(classifier):
    result = classifier.classify("bghit nbelegh 3la kelb")
    assert result.intent == IntentType.CREATE_REPORT
    assert result.report_type == ReportType.PET
    assert result.language == Language.DARIJA


def test_search_with_city(classifier):
    result = classifier.classify("find my dog in casa")
    assert result.intent == IntentType.SEARCH_REPORTS
    assert result.city == "casablanca"
    assert result.entities["reportType"] == "pet"


def test_search_in_arabic(classifier):
    result = classifier.classify("ابحث عن كلب في الرباط")
    assert result.intent == IntentType.SEARCH_REPORTS
    assert result.city == "rabat"


def test_status_request(classifier):
    assert classifier.classify("my reports").intent == IntentType.CHECK_STATUS


def test_urgency_flag(classifier):
    result = classifier.classify("my child was kidnapped, call police")
    assert result.urgent
    assert result.intent == IntentType.CREATE_REPORT
    assert result.report_type == ReportType.PERSON


@pytest.mark.parametrize("text", [
    "I found a dog near the beach",
    "وجدت قطة في الشارع",
    "lqit kelb f zan9a",
])
def test_found_item_flag(classifier, text):
    result = classifier.classify(text)
    assert result.intent == IntentType.CREATE_REPORT
    assert result.found
    assert result.report_type == ReportType.PET
    assert result.to_dict()["found"] is True


@pytest.mark.parametrize("text", ["I lost my dog", "ma lqitch lkelb dyali", "find dog in casablanca"])
def test_lost_or_search_messages_are_not_found_items(classifier, text):
    assert not classifier.classify(text).found


def test_gibberish_falls_back_to_help(classifier):
    result = classifier.classify("qwzx blorp")
    assert result.intent == IntentType.PLATFORM_HELP
    assert result.topic is None


def test_classification_is_repeatable(classifier):
    first = classifier.classify("missing black cat in rabat")
    second = classifier.classify("missing black cat in rabat")
    assert first.to_dict() == second.to_dict()


def test_entities_from_english_query(extractor):
    entities = extractor.extract_entities("missing dog in casablanca")
    assert entities[EntityType.REPORT_TYPE].normalized_value == ReportType.PET
    assert entities[EntityType.CITY].normalized_value == "casablanca"
    assert entities[EntityType.KEYWORDS].normalized_value == ["dog"]


def test_arabic_clitics_do_not_hide_city(extractor):
    entities = extractor.extract_entities("ضاع ليا الكلب فمراكش")
    assert entities[EntityType.CITY].normalized_value == "marrakech"
    assert entities[EntityType.REPORT_TYPE].normalized_value == ReportType.PET


def test_city_name_is_not_a_colour(extractor):
    entities = extractor.extract_entities("كلب ضائع في الدار البيضاء")
    assert entities[EntityType.CITY].normalized_value == "casablanca"
    assert EntityType.COLOR not in entities


def test_time_window_for_yesterday(extractor):
    now = datetime(2026, 3, 10, 15, 30, tzinfo=timezone.utc)
    entities = extractor.extract_entities("black cat yesterday in rabat", now=now)
    date_from, date_to = entities[EntityType.TIME_RANGE].normalized_value
    assert date_from == datetime(2026, 3, 9, tzinfo=timezone.utc)
    assert date_to == datetime(2026, 3, 10, tzinfo=timezone.utc)
    assert entities[EntityType.COLOR].normalized_value == "black"
    assert entities[EntityType.KEYWORDS].normalized_value == ["black", "cat"]


def test_recent_window_is_a_week(extractor):
    now = datetime(2026, 3, 10, 15, 30, tzinfo=timezone.utc)
    date_from, date_to = extractor.extract_entities("lost keys recently", now=now)[
        EntityType.TIME_RANGE].normalized_value
    assert date_to == now
    assert now - date_from >= timedelta(days=7)
