import pytest

from lingodeck.application.lesson_import import detect_lesson_type, parse_lesson
from lingodeck.domain.errors import LessonImportError, StructuralValidationError
from lingodeck.domain.models import LessonType

TURN = {
    "question": "이름이 뭐예요?",
    "questionTranslation": "What is your name?",
    "targetAnswer": "저는 민수예요.",
    "targetAnswerTranslation": "I am Minsu.",
    "words": ["저는", "민수예요."],
}

READING_TURN = {"question": "  ", "targetAnswer": "오늘은 날씨가 좋아요.", "words": []}


def fixed_id():
    return "generated-id"


def test_minimal_payload_gets_defaults():
    lesson = parse_lesson({"turns": [TURN]}, "ko", fixed_id)

    assert lesson.id == "generated-id"
    assert lesson.language == "ko"
    assert lesson.type == LessonType.CONVERSATION
    assert lesson.title == "Imported Lesson"
    assert lesson.description == "No description"
    assert lesson.level == "Level 1"
    assert lesson.tone == "Standard"
    assert lesson.topic == "General"
    assert lesson.turns[0].question_translation == "What is your name?"


def test_topic_falls_back_to_title():
    lesson = parse_lesson({"title": "At the cafe", "turns": [TURN]}, "ko", fixed_id)
    assert lesson.topic == "At the cafe"


def test_topic_falls_back_to_general_without_title():
    lesson = parse_lesson({"title": "", "turns": []}, "ko", fixed_id)
    assert lesson.topic == "General"


def test_explicit_fields_are_kept():
    payload = {
        "id": "mine",
        "language": "ja",
        "type": "Reading",
        "title": "T",
        "description": "D",
        "level": "Level 3",
        "tone": "Casual",
        "topic": "Travel",
        "turns": [TURN],
    }

    lesson = parse_lesson(payload, "ko", fixed_id)

    assert lesson.id == "mine"
    assert lesson.language == "ja"
    assert lesson.type == LessonType.READING
    assert (lesson.title, lesson.description, lesson.level) == ("T", "D", "Level 3")
    assert (lesson.tone, lesson.topic) == ("Casual", "Travel")


def test_reading_type_detected_from_empty_first_question():
    lesson = parse_lesson({"turns": [READING_TURN, TURN]}, "ko", fixed_id)
    assert lesson.type == LessonType.READING


def test_detect_lesson_type():
    assert detect_lesson_type([]) == LessonType.CONVERSATION
    assert detect_lesson_type([TURN]) == LessonType.CONVERSATION
    assert detect_lesson_type([{"targetAnswer": "x"}]) == LessonType.READING


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"turns": "not a list"},
        {"title": "No turns"},
        ["turns"],
        None,
    ],
)
def test_missing_turns_rejected(payload):
    with pytest.raises(LessonImportError):
        parse_lesson(payload, "ko", fixed_id)


def test_malformed_turn_rejected():
    with pytest.raises(StructuralValidationError):
        parse_lesson({"turns": [{"question": "no answer"}]}, "ko", fixed_id)
