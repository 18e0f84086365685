"""
End-to-end conversations through Dispatcher.handle_message against an
in-memory database, the seeded question bank and a fake LLM.
"""

import pytest

from studybot.dispatch.menus import EXEMPT_MENUS, MENU_TABLE
from studybot.dispatch.parser import parse
from studybot.messages import MESSAGES
from studybot.state.session import ExpectingInput, MenuTag, ParseContext, SessionPatch

pytestmark = pytest.mark.asyncio


async def send(dispatcher, text, subscriber_id="sub-1"):
    result = await dispatcher.handle_message(subscriber_id, text)
    assert not result.failed, result.reply
    return result


def current_question(store, services, subscriber_id="sub-1"):
    session = store.ensure_session(subscriber_id)
    assert session.current_question_id, f"no question in {session.current_menu}"
    return services.questions.get(session.current_question_id)


def wrong_letter(question):
    return next(letter for letter in "ABCD" if letter != question.correct_choice)


# ═══════════════════════════════════════════════════════════════════════════
# Registration
# ═══════════════════════════════════════════════════════════════════════════

class TestRegistration:

    async def test_full_signup(self, dispatcher, store):
        first = await send(dispatcher, "hi", "new-1")
        assert first.menu == MenuTag.REGISTRATION_NEEDS_NAME
        assert first.reply == MESSAGES["registration"]["ask_name"]

        result = await send(dispatcher, "Thabo", "new-1")
        assert result.menu == MenuTag.REGISTRATION_NEEDS_USERNAME
        assert "Thabo" in result.reply

        result = await send(dispatcher, "@Thabo_21", "new-1")
        assert result.menu == MenuTag.REGISTRATION_NEEDS_GRADE

        result = await send(dispatcher, "Grade 10", "new-1")
        assert result.menu == MenuTag.REGISTRATION_NEEDS_SUBJECTS

        result = await send(dispatcher, "1, 2", "new-1")
        assert result.menu == MenuTag.WELCOME
        assert "You're all set, Thabo!" in result.reply

        session = store.ensure_session("new-1")
        assert session.is_registered
        assert session.username == "thabo_21"
        assert session.grade == "10"
        assert session.preferred_subjects == ["math", "physics"]
        assert session.current_subject == "math"

    async def test_first_message_is_not_taken_as_name(self, dispatcher, store):
        await send(dispatcher, "banana", "new-1")
        session = store.ensure_session("new-1")
        assert session.display_name is None
        assert session.current_menu == MenuTag.REGISTRATION_NEEDS_NAME

    async def test_invalid_name_stays(self, dispatcher):
        await send(dispatcher, "hi", "new-1")
        result = await send(dispatcher, "A", "new-1")
        assert result.reply == MESSAGES["registration"]["name_invalid"]
        assert result.menu == MenuTag.REGISTRATION_NEEDS_NAME

    async def test_taken_username_gets_suggestion(self, dispatcher, make_user):
        make_user("sub-1", username="thabo")
        await send(dispatcher, "hi", "new-1")
        await send(dispatcher, "Thabo", "new-1")
        result = await send(dispatcher, "thabo", "new-1")
        assert "@thabo is taken" in result.reply
        assert "@thabo1" in result.reply
        assert result.menu == MenuTag.REGISTRATION_NEEDS_USERNAME

    async def test_navigation_is_locked_until_done(self, dispatcher):
        await send(dispatcher, "hi", "new-1")
        await send(dispatcher, "Thabo", "new-1")
        result = await send(dispatcher, "menu", "new-1")
        assert result.reply.startswith(MESSAGES["registration"]["locked"])
        assert result.menu == MenuTag.REGISTRATION_NEEDS_USERNAME

    async def test_help_is_open_before_registration(self, dispatcher):
        result = await send(dispatcher, "help", "new-1")
        assert result.reply == MESSAGES["help"]
        assert result.menu == MenuTag.NONE


# ═══════════════════════════════════════════════════════════════════════════
# Questions
# ═══════════════════════════════════════════════════════════════════════════

class TestQuestions:

    async def test_question_answer_cycle(self, dispatcher, store, services, make_user):
        make_user(menu=MenuTag.MAIN)
        result = await send(dispatcher, "1")
        assert result.menu == MenuTag.QUESTION_ACTIVE
        question = current_question(store, services)
        assert question.difficulty == "medium"

        # A pending question wins over navigation
        result = await send(dispatcher, "menu")
        assert result.command.type.value == "invalid_answer"
        assert result.menu == MenuTag.QUESTION_ACTIVE

        result = await send(dispatcher, f"{question.correct_choice.lower()})")
        assert result.menu == MenuTag.POST_ANSWER
        assert result.reply.startswith("✅ Correct!")

        session = store.ensure_session("sub-1")
        assert session.current_question_id is None
        assert session.total_questions_answered == 1
        assert session.total_correct_answers == 1
        assert session.streak_count == 1
        assert session.correct_answer_rate == 0.6

        result = await send(dispatcher, "7")
        assert result.menu == MenuTag.POST_ANSWER
        assert "\"7\" isn't an option here" in result.reply
        assert "1-5" in result.reply

    async def test_wrong_answer_records_weak_spot(self, dispatcher, store, services, make_user):
        make_user(menu=MenuTag.MAIN)
        await send(dispatcher, "next")
        question = current_question(store, services)
        letter = wrong_letter(question)
        result = await send(dispatcher, f"answer {letter}")
        assert result.reply.startswith("❌ Not quite.")
        assert store.ensure_session("sub-1").streak_count == 0
        tag = question.weakness_tag(letter)
        assert services.questions.weak_spots(store.ensure_session("sub-1").id) == ([tag] if tag else [])

    async def test_topic_menu_serves_that_topic(self, dispatcher, store, services, make_user):
        make_user(menu=MenuTag.MAIN)
        assert (await send(dispatcher, "2")).menu == MenuTag.SUBJECT
        assert (await send(dispatcher, "1")).menu == MenuTag.MATH_TOPICS
        result = await send(dispatcher, "2")
        assert result.menu == MenuTag.QUESTION_ACTIVE
        assert current_question(store, services).topic == "geometry"
        assert store.ensure_session("sub-1").current_topic == "geometry"

    async def test_other_subject_falls_back_to_maths(self, dispatcher, store, services, make_user):
        make_user(menu=MenuTag.SUBJECT)
        result = await send(dispatcher, "2")
        assert "Physics questions are coming soon" in result.reply
        assert result.menu == MenuTag.QUESTION_ACTIVE
        assert current_question(store, services).subject == "math"

    async def test_answer_state_without_question_recovers(self, dispatcher, make_user):
        make_user(menu=MenuTag.QUESTION_ACTIVE)
        result = await send(dispatcher, "menu")
        assert result.menu == MenuTag.WELCOME
        assert MESSAGES["errors"]["no_question_active"] in result.reply

    async def test_missing_question_serves_a_new_one(self, dispatcher, store, make_user):
        make_user(menu=MenuTag.QUESTION_ACTIVE, current_question_id="retired_q")
        result = await send(dispatcher, "a")
        assert result.reply.startswith(MESSAGES["errors"]["question_missing"])
        assert result.menu == MenuTag.QUESTION_ACTIVE
        assert store.ensure_session("sub-1").current_question_id not in (None, "retired_q")

    async def test_report(self, dispatcher, make_user):
        make_user(menu=MenuTag.MAIN)
        result = await send(dispatcher, "report")
        assert "Thabo's report" in result.reply
        assert result.menu == MenuTag.MAIN


# ═══════════════════════════════════════════════════════════════════════════
# Practice
# ═══════════════════════════════════════════════════════════════════════════

class TestPractice:

    async def test_practice_loop(self, dispatcher, store, services, make_user):
        make_user()
        result = await send(dispatcher, "4")
        assert result.menu == MenuTag.PRACTICE_ACTIVE
        assert "Practice time! Mixed questions" in result.reply

        first = current_question(store, services)
        result = await send(dispatcher, wrong_letter(first))
        assert result.menu == MenuTag.PRACTICE_CONTINUE
        assert "Practice so far: 0/1 correct." in result.reply

        result = await send(dispatcher, "1")
        assert result.menu == MenuTag.PRACTICE_ACTIVE
        second = current_question(store, services)
        assert second.id != first.id

        await send(dispatcher, second.correct_choice)
        context = store.ensure_session("sub-1").flow_context
        assert context["questions_served"] == 2
        assert context["correct"] == 1

        result = await send(dispatcher, "4")
        assert result.menu == MenuTag.WELCOME
        session = store.ensure_session("sub-1")
        assert session.reminder_time == "19:00"
        assert session.flow_context is None

    async def test_switch_topic_keeps_the_session(self, dispatcher, store, services, make_user):
        make_user()
        await send(dispatcher, "4")
        first = current_question(store, services)
        await send(dispatcher, first.correct_choice)

        result = await send(dispatcher, "2")
        assert result.menu == MenuTag.PRACTICE_TOPICS

        result = await send(dispatcher, "1")
        assert result.menu == MenuTag.PRACTICE_ACTIVE
        assert "Switching to Algebra" in result.reply
        assert current_question(store, services).topic == "algebra"
        context = store.ensure_session("sub-1").flow_context
        assert context["topic"] == "algebra"
        assert context["questions_served"] == 1
        assert context["correct"] == 1

        second = current_question(store, services)
        result = await send(dispatcher, second.correct_choice)
        assert result.menu == MenuTag.PRACTICE_CONTINUE
        assert "Practice so far: 2/2 correct." in result.reply

    async def test_keep_current_topic(self, dispatcher, store, make_user):
        make_user(menu=MenuTag.PRACTICE_TOPICS, flow_context={"kind": "practice", "topic": "geometry"})
        result = await send(dispatcher, "9")
        assert result.menu == MenuTag.PRACTICE_ACTIVE
        assert store.ensure_session("sub-1").flow_context["topic"] == "geometry"


# ═══════════════════════════════════════════════════════════════════════════
# Confidence boost
# ═══════════════════════════════════════════════════════════════════════════

class TestConfidenceBoost:

    async def test_full_ladder(self, dispatcher, store, services, make_user, fake_llm):
        make_user()
        assert (await send(dispatcher, "2")).menu == MenuTag.CONFIDENCE_REASON
        assert (await send(dispatcher, "1")).menu == MenuTag.CONFIDENCE_PRE

        result = await send(dispatcher, "2")
        assert result.menu == MenuTag.CONFIDENCE_LADDER
        assert fake_llm.text in result.reply
        assert len(fake_llm.calls) == 1

        result = await send(dispatcher, "1")
        assert result.menu == MenuTag.QUESTION_ACTIVE
        assert current_question(store, services).difficulty == "easy"

        result = await send(dispatcher, current_question(store, services).correct_choice)
        assert result.menu == MenuTag.CONFIDENCE_POST

        result = await send(dispatcher, "4")
        assert result.menu == MenuTag.WELCOME
        assert "Confidence 2 ➜ 4." in result.reply
        assert store.ensure_session("sub-1").flow_context is None

    async def test_llm_failure_uses_fallback(self, dispatcher, make_user, fake_llm):
        fake_llm.fail = True
        make_user(menu=MenuTag.CONFIDENCE_REASON)
        await send(dispatcher, "2")
        result = await send(dispatcher, "3")
        assert MESSAGES["confidence"]["support_fallback"] in result.reply
        assert result.menu == MenuTag.CONFIDENCE_LADDER

    async def test_skip_goes_straight_to_post(self, dispatcher, make_user):
        make_user(menu=MenuTag.CONFIDENCE_LADDER)
        result = await send(dispatcher, "4")
        assert result.menu == MenuTag.CONFIDENCE_POST
        assert MESSAGES["confidence"]["skip"] in result.reply


# ═══════════════════════════════════════════════════════════════════════════
# Panic button
# ═══════════════════════════════════════════════════════════════════════════

class TestPanic:

    async def test_triage_module_and_burst(self, dispatcher, store, services, make_user):
        make_user()
        result = await send(dispatcher, "panic")
        assert result.menu == MenuTag.PANIC_LEVEL
        assert "PANIC MODE" in result.reply

        result = await send(dispatcher, "4")
        assert result.menu == MenuTag.PANIC_TOPIC
        assert "Panic level: 4." in result.reply

        result = await send(dispatcher, "2")
        assert result.menu == MenuTag.PANIC_PLAN
        assert "PLAN (Trigonometry)" in result.reply

        result = await send(dispatcher, "2")
        assert "PLAN (Calculus)" in result.reply

        result = await send(dispatcher, "1")
        assert result.menu == MenuTag.PANIC_MODULE
        assert "📘 Calculus" in result.reply

        result = await send(dispatcher, "2")
        assert result.menu == MenuTag.PANIC_MODULE
        assert "f(x) = x³" in result.reply

        result = await send(dispatcher, "1")
        assert result.menu == MenuTag.PANIC_BURST
        assert "question 1 of 3" in result.reply

        result = await send(dispatcher, current_question(store, services).correct_choice)
        assert result.menu == MenuTag.PANIC_BURST
        assert result.reply.startswith("✅ Correct!")
        assert "question 2 of 3" in result.reply

        await send(dispatcher, wrong_letter(current_question(store, services)))
        result = await send(dispatcher, current_question(store, services).correct_choice)
        assert result.menu == MenuTag.PANIC_MOMENTUM
        assert "Burst done: 2/3" in result.reply

        session = store.ensure_session("sub-1")
        assert session.total_questions_answered == 3
        assert session.current_question_id is None
        assert session.flow_context["level"] == 4
        assert session.flow_context["bursts_done"] == 1

    async def test_momentum_switch_starts_a_fresh_burst(self, dispatcher, store, make_user):
        make_user(menu=MenuTag.PANIC_MOMENTUM, flow_context={
            "kind": "panic", "level": 2, "topic": "calculus",
            "burst_index": 3, "burst_correct": 3, "bursts_done": 1,
        })
        result = await send(dispatcher, "2")
        assert result.menu == MenuTag.PANIC_BURST
        assert "question 1 of 3" in result.reply
        context = store.ensure_session("sub-1").flow_context
        assert context["topic"] == "trigonometry"
        assert (context["burst_index"], context["burst_correct"]) == (0, 0)

    async def test_not_sure_starts_with_calculus(self, dispatcher, store, make_user):
        make_user(menu=MenuTag.PANIC_TOPIC, flow_context={"kind": "panic", "level": 5})
        result = await send(dispatcher, "3")
        assert result.menu == MenuTag.PANIC_PLAN
        assert MESSAGES["panic"]["not_sure"] in result.reply
        assert store.ensure_session("sub-1").flow_context["topic"] == "calculus"

    async def test_cancel_goes_home(self, dispatcher, store, make_user):
        make_user(menu=MenuTag.PANIC_PLAN, flow_context={"kind": "panic", "level": 1})
        result = await send(dispatcher, "3")
        assert result.menu == MenuTag.WELCOME
        assert MESSAGES["panic"]["cancel"] in result.reply
        assert store.ensure_session("sub-1").flow_context is None

    async def test_reminder_tonight(self, dispatcher, store, make_user):
        make_user(menu=MenuTag.PANIC_MOMENTUM, flow_context={"kind": "panic", "bursts_done": 1})
        result = await send(dispatcher, "4")
        assert result.menu == MenuTag.WELCOME
        assert "tonight at 19:00" in result.reply
        session = store.ensure_session("sub-1")
        assert session.reminder_time == "19:00"
        assert session.flow_context is None


# ═══════════════════════════════════════════════════════════════════════════
# Exam prep
# ═══════════════════════════════════════════════════════════════════════════

class TestExamPrep:

    async def _to_date_question(self, dispatcher, store):
        assert (await send(dispatcher, "exam")).menu == MenuTag.EXAM_PREP_SUBJECT
        result = await send(dispatcher, "1")
        assert result.menu == MenuTag.EXAM_PREP_PROBLEMS
        assert store.ensure_session("sub-1").expecting_input == ExpectingInput.EXAM_PROBLEM_DETAILS
        result = await send(dispatcher, "derivatives scare me")
        assert result.menu == MenuTag.EXAM_PREP_EXAM_DATE
        assert store.ensure_session("sub-1").flow_context["current_topic"] == "calculus"

    async def test_skip_date_to_lesson_to_practice(self, dispatcher, store, services, make_user):
        make_user()
        await self._to_date_question(dispatcher, store)

        result = await send(dispatcher, "skip")
        assert result.menu == MenuTag.EXAM_PREP_PLAN
        assert store.ensure_session("sub-1").expecting_input is None

        result = await send(dispatcher, "1")
        assert result.menu == MenuTag.LESSON
        assert "📘 Calculus" in result.reply

        result = await send(dispatcher, "1")
        assert result.menu == MenuTag.PRACTICE_ACTIVE
        assert current_question(store, services).topic == "calculus"

    async def test_plan_with_daily_time(self, dispatcher, store, make_user):
        make_user()
        await self._to_date_question(dispatcher, store)

        result = await send(dispatcher, "whenever")
        assert result.reply == MESSAGES["exam_prep"]["date_invalid"]
        assert store.ensure_session("sub-1").expecting_input == ExpectingInput.EXAM_DATE

        assert (await send(dispatcher, "in 5 days")).menu == MenuTag.EXAM_PREP_PLAN_DECISION
        assert (await send(dispatcher, "1")).menu == MenuTag.EXAM_PREP_TIME

        result = await send(dispatcher, "7pm")
        assert result.menu == MenuTag.EXAM_PREP_PLAN
        assert "daily at 19:00" in result.reply
        assert store.ensure_session("sub-1").reminder_time == "19:00"

    async def test_switch_topic_cycles(self, dispatcher, store, make_user):
        make_user(menu=MenuTag.EXAM_PREP_PLAN)
        result = await send(dispatcher, "2")
        assert "Switched focus to algebra." in result.reply
        assert store.ensure_session("sub-1").flow_context["current_topic"] == "algebra"


# ═══════════════════════════════════════════════════════════════════════════
# Homework
# ═══════════════════════════════════════════════════════════════════════════

class TestHomework:

    async def test_method_then_done(self, dispatcher, store, make_user, fake_llm):
        make_user()
        assert (await send(dispatcher, "homework")).menu == MenuTag.HOMEWORK_SUBJECT
        assert (await send(dispatcher, "1")).menu == MenuTag.HOMEWORK_PROBLEM_TYPE
        assert (await send(dispatcher, "1")).menu == MenuTag.HOMEWORK_CONFUSION

        result = await send(dispatcher, "I don't get step 2")
        assert result.menu == MenuTag.HOMEWORK_METHOD
        assert fake_llm.text in result.reply

        await send(dispatcher, "2")
        assert store.ensure_session("sub-1").flow_context["examples_shown"] == 2

        result = await send(dispatcher, "3")
        assert result.menu == MenuTag.HOMEWORK_COMPLETE
        assert store.ensure_session("sub-1").flow_context is None

    async def test_practice_similar_question(self, dispatcher, store, services, make_user):
        make_user(
            menu=MenuTag.HOMEWORK_METHOD,
            flow_context={"kind": "homework", "chosen_subject": "math", "problem_type": "trigonometry"},
        )
        result = await send(dispatcher, "1")
        assert result.menu == MenuTag.QUESTION_ACTIVE
        assert current_question(store, services).topic == "trigonometry"


# ═══════════════════════════════════════════════════════════════════════════
# Friends
# ═══════════════════════════════════════════════════════════════════════════

class TestFriends:

    async def test_add_list_and_challenge(self, dispatcher, store, make_user):
        make_user("sub-1", username="thabo", menu=MenuTag.FRIENDS)
        make_user("sub-2", username="lerato", name="Lerato", menu=MenuTag.FRIENDS)

        result = await send(dispatcher, "2")
        assert result.menu == MenuTag.FRIENDS_ADD
        assert store.ensure_session("sub-1").expecting_input == ExpectingInput.USERNAME_FOR_FRIEND

        result = await send(dispatcher, "@Lerato")
        assert result.menu == MenuTag.FRIENDS
        assert "You and @lerato are now friends!" in result.reply
        assert store.ensure_session("sub-1").expecting_input is None

        result = await send(dispatcher, "1", "sub-2")
        assert "@thabo" in result.reply

        await send(dispatcher, "3")
        result = await send(dispatcher, "lerato")
        assert "Challenge sent to @lerato!" in result.reply

    async def test_unknown_username_stays_in_capture(self, dispatcher, store, make_user):
        make_user(menu=MenuTag.FRIENDS)
        await send(dispatcher, "2")
        result = await send(dispatcher, "@nobody")
        assert "I couldn't find @nobody" in result.reply
        assert result.menu == MenuTag.FRIENDS_ADD
        assert store.ensure_session("sub-1").expecting_input == ExpectingInput.USERNAME_FOR_FRIEND

    async def test_cannot_add_self_or_twice(self, dispatcher, make_user):
        make_user("sub-1", username="thabo", menu=MenuTag.FRIENDS)
        make_user("sub-2", username="lerato", name="Lerato")
        await send(dispatcher, "2")
        assert MESSAGES["friends"]["self"] in (await send(dispatcher, "thabo")).reply
        await send(dispatcher, "2")
        await send(dispatcher, "lerato")
        await send(dispatcher, "2")
        assert "already friends" in (await send(dispatcher, "lerato")).reply

    async def test_challenge_needs_friendship(self, dispatcher, make_user):
        make_user("sub-1", username="thabo", menu=MenuTag.FRIENDS_CHALLENGE,
                  expecting_input=ExpectingInput.USERNAME_FOR_CHALLENGE)
        make_user("sub-2", username="lerato", name="Lerato")
        result = await send(dispatcher, "lerato")
        assert "Add @lerato first." in result.reply


# ═══════════════════════════════════════════════════════════════════════════
# Utilities and recovery
# ═══════════════════════════════════════════════════════════════════════════

class TestUtilities:

    async def test_hooks_and_stats(self, dispatcher, make_user):
        make_user()
        result = await send(dispatcher, "hook Morning")
        assert result.reply.startswith("Morning, Thabo!")
        assert "Hook types:" in (await send(dispatcher, "hook midnight")).reply
        stats = await send(dispatcher, "hook stats")
        assert "• morning: 1" in stats.reply

    async def test_change_time(self, dispatcher, store, make_user):
        make_user()
        result = await send(dispatcher, "change time 6:30pm")
        assert result.reply == MESSAGES["settings"]["reminder_set"].format(time="18:30")
        assert store.ensure_session("sub-1").reminder_time == "18:30"
        result = await send(dispatcher, "change time whenever")
        assert "couldn't read \"whenever\"" in result.reply

    async def test_help_with_topic(self, dispatcher, make_user, fake_llm):
        make_user()
        result = await send(dispatcher, "help with Fractions")
        assert result.reply == fake_llm.text
        assert "Fractions" in fake_llm.calls[0][-1]["content"]

    async def test_progress_summary(self, dispatcher, make_user):
        make_user()
        result = await send(dispatcher, "5")
        assert result.menu == MenuTag.PROGRESS_SUMMARY
        assert MESSAGES["progress"]["no_weak_spots"] in result.reply

    async def test_unknown_stored_menu_is_repaired(self, dispatcher, store, make_user):
        session = make_user()
        store.patch(session.id, SessionPatch(current_menu="legacy_quiz"))
        result = await send(dispatcher, "3")
        assert "1-9" in result.reply
        assert result.menu == MenuTag.WELCOME
        assert store.get(session.id).raw_menu is None

    async def test_unrecognized_reshows_menu(self, dispatcher, make_user):
        make_user(menu=MenuTag.SETTINGS)
        result = await send(dispatcher, "banana")
        assert result.menu == MenuTag.SETTINGS
        assert MENU_TABLE[MenuTag.SETTINGS].prompt in result.reply


# ═══════════════════════════════════════════════════════════════════════════
# Every numbered choice lands in a known state
# ═══════════════════════════════════════════════════════════════════════════

MENU_PAIRS = [
    (tag, number)
    for tag, spec in MENU_TABLE.items()
    for number in range(1, len(spec.options) + 1)
]


@pytest.mark.parametrize("tag,number", MENU_PAIRS)
async def test_every_menu_choice_lands_in_a_known_state(tag, number, dispatcher, make_user):
    session = make_user(menu=tag)
    command = parse(str(number), ParseContext.from_session(session))
    result = await dispatcher.dispatch(command, session)
    assert result.menu in MENU_TABLE or result.menu in EXEMPT_MENUS
    assert result.reply
