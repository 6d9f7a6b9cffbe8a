"""Built-in lessons shipped with the package. Read-only and never persisted."""

from lingodeck.domain.models import Lesson, LessonType, PuzzleTurn

BUILTIN_LESSONS: list[Lesson] = [
    # ---------- Korean ----------
    Lesson(
        id="kr-sample-1",
        language="ko",
        type=LessonType.CONVERSATION,
        title="Basic greetings",
        description="Greet someone and introduce yourself for the first time.",
        level="Beginner",
        topic="Greetings",
        turns=[
            PuzzleTurn(
                question="안녕하세요? 이름이 뭐예요?",
                question_translation="Hello? What is your name?",
                target_answer="안녕하세요. 저는 민수입니다.",
                target_answer_translation="Hello. I am Minsu.",
                words=["안녕하세요.", "저는", "민수", "입니다."],
            ),
            PuzzleTurn(
                question="민수 씨는 어느 나라 사람이에요?",
                question_translation="Which country are you from, Minsu?",
                target_answer="저는 캐나다 사람입니다.",
                target_answer_translation="I am Canadian.",
                words=["저는", "캐나다", "사람", "입니다."],
            ),
        ],
    ),
    Lesson(
        id="kr-sample-2",
        language="ko",
        type=LessonType.CONVERSATION,
        title="Shopping at the market",
        description="Ask for prices and bargain a little.",
        level="Beginner",
        topic="Shopping",
        turns=[
            PuzzleTurn(
                question="이 사과 얼마예요?",
                question_translation="How much are these apples?",
                target_answer="한 개에 천 원이에요.",
                target_answer_translation="One thousand won each.",
                words=["한", "개에", "천", "원이에요."],
            ),
            PuzzleTurn(
                question="좀 깎아 주세요.",
                question_translation="Please give me a discount.",
                target_answer="다섯 개에 사천 원 드릴게요.",
                target_answer_translation="I'll give you five for four thousand won.",
                words=["다섯", "개에", "사천", "원", "드릴게요."],
            ),
        ],
    ),
    # ---------- English ----------
    Lesson(
        id="en-sample-1",
        language="en",
        type=LessonType.CONVERSATION,
        title="Basic Greeting",
        description="Introduce yourself and ask how someone is doing.",
        level="Beginner",
        topic="Greetings",
        turns=[
            PuzzleTurn(
                question="Hi! How are you today?",
                question_translation="",
                target_answer="I am fine, thank you.",
                target_answer_translation="",
                words=["I", "am", "fine,", "thank", "you."],
            ),
        ],
    ),
    # ---------- Japanese ----------
    Lesson(
        id="jp-sample-1",
        language="ja",
        type=LessonType.CONVERSATION,
        title="Self introduction",
        description="Say your name and where you are from.",
        level="Beginner",
        topic="Introductions",
        turns=[
            PuzzleTurn(
                question="お名前は何ですか？",
                question_translation="What is your name?",
                target_answer="私はケンです。",
                target_answer_translation="I am Ken.",
                words=["私", "は", "ケン", "です。"],
            ),
        ],
    ),
    # ---------- Chinese ----------
    Lesson(
        id="zh-sample-1",
        language="zh",
        type=LessonType.READING,
        title="Getting acquainted",
        description="A short reading about meeting a new classmate.",
        level="Level 2",
        topic="Introductions",
        turns=[
            PuzzleTurn(
                target_answer="我叫李明。",
                target_answer_translation="My name is Li Ming.",
                words=["我", "叫", "李明。"],
            ),
            PuzzleTurn(
                target_answer="我是学生。",
                target_answer_translation="I am a student.",
                words=["我", "是", "学生。"],
            ),
        ],
    ),
]
