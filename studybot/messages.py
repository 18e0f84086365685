"""
StudyBot — Message Copy

Every fixed user-facing string lives here. Menu option labels are NOT here:
they sit next to their numbers in studybot.dispatch.menus so copy and
transition table cannot drift apart.
"""

MESSAGES = {
    "errors": {
        "generic": "Something went wrong. Let's try again in a moment. ✨",
        "invalid_answer": (
            "Send A, B, C, or D to answer the question.\n\n"
            "Try again! ✅"
        ),
        "invalid_option": "\"{input}\" isn't an option here. Pick a number from {valid_range}. 🎯",
        "no_question_active": "No question is waiting for you right now. Here's the menu. 🧮",
        "question_missing": "That question expired. Let's get you a fresh one! 🔄",
        "no_questions": "I don't have a question ready for that topic yet. Try another one. 📚",
    },

    "registration": {
        "ask_name": (
            "Hi! I'm StudyBot, your maths study buddy. 👋\n\n"
            "What should I call you?"
        ),
        "ask_username": (
            "Nice to meet you, {name}! 🌱\n\n"
            "Pick a username your friends can find you by "
            "(3-20 letters, numbers or _)."
        ),
        "ask_grade": "Which grade are you in?\n\n• 10\n• 11\n• varsity",
        "ask_subjects": (
            "Which subjects do you want help with?\n\n"
            "1️⃣ Mathematics\n"
            "2️⃣ Physics\n"
            "3️⃣ Life Sciences\n"
            "4️⃣ Chemistry\n\n"
            "Send numbers or names, separated by commas (e.g. \"1, 2\")."
        ),
        "name_invalid": "Names need 2 to 50 characters. What should I call you?",
        "username_invalid": "Usernames need 3 to 20 letters, numbers or _. Try another one.",
        "username_taken": "@{username} is taken. How about @{suggestion}?",
        "grade_invalid": "Send 10, 11 or varsity.",
        "subjects_invalid": "I didn't catch any subjects. Send numbers 1-4, e.g. \"1, 3\".",
        "complete": "You're all set, {name}! 🎉",
        "locked": "Let's finish setting you up first.",
    },

    "help": (
        "Here's what you can send any time:\n\n"
        "• menu - main menu\n"
        "• next - next question\n"
        "• practice - practice session\n"
        "• report - your stats\n"
        "• stressed - confidence boost\n"
        "• panic - quick calm-down plan before a test\n"
        "• exam - exam prep\n"
        "• homework - homework help\n"
        "• friends - friends\n"
        "• help with <topic> - quick explanation\n"
        "• change time <7pm> - daily reminder\n\n"
        "When a question is open, answer with A, B, C or D."
    ),

    "questions": {
        "correct": "✅ Correct! {explanation}",
        "incorrect": "❌ Not quite. The answer is {correct}. {explanation}",
        "streak": "🔥 Streak: {streak}",
        "footer": "Reply with A, B, C or D.",
        "subject_soon": "{subject} questions are coming soon. Here's a maths one meanwhile! 🧮",
    },

    "report": (
        "📊 {name}'s report\n\n"
        "Level: {level}\n"
        "Questions answered: {answered}\n"
        "Correct: {correct} ({accuracy}%)\n"
        "Current streak: {streak} 🔥\n"
        "Difficulty: {difficulty}"
    ),

    "practice": {
        "intro": "Practice time! {topic} questions, one at a time. 🧮",
        "progress": "Practice so far: {correct}/{served} correct.",
        "switched": "Switching to {topic}. Your score carries over. 🔀",
        "break": "Good call. Take 5 minutes, drink some water, then send \"practice\". 🌿",
        "remind_tonight": "I'll nudge you tonight at {time}. 🌙",
    },

    "confidence": {
        "reason_intro": "Let's slow down for a second. 🫶",
        "support_header": "Here's a thought for you:\n\n\"{support}\"",
        "support_fallback": "You're not behind, you're starting now. That matters. 🌱",
        "reflect": (
            "Take a minute and write down one thing you DID understand this week. "
            "Small wins count. ✍️"
        ),
        "skip": "That's okay. Showing up is already a step. 🌱",
        "complete": "Confidence {before} ➜ {after}. {verdict}",
        "verdict_up": "That's real progress! 🚀",
        "verdict_same": "Steady is good. Keep going. 💪",
        "verdict_down": "Tough days happen. Come back any time you need this. 🫶",
    },

    "panic": {
        "intro": "🚨 PANIC MODE (maths only)\nI've got you. Let's calm the nerves and score some quick wins.",
        "level_set": "Got it. Panic level: {level}.",
        "not_sure": "No stress, we'll start with calculus.",
        "plan": (
            "🧭 PLAN ({topic})\n\n"
            "Now (~20 min): quick crash course + 3-question burst\n"
            "Tonight: short practice on the other topic\n"
            "Tomorrow: review + mini-mock"
        ),
        "modules": {
            "calculus": (
                "📘 Calculus (first principles)\n\n"
                "• Pattern: f'(x) = lim h→0 of (f(x+h) - f(x)) / h\n"
                "• Expand, cancel, factor out h, then take the limit\n"
                "• Don't skip algebra steps\n\n"
                "Worked example: f(x) = 3x²\n"
                "f(x+h) - f(x) = 3(2xh + h²)\n"
                "Divide by h: 3(2x + h) → limit → 6x"
            ),
            "trigonometry": (
                "📗 Trigonometry identities\n\n"
                "• Core: sin²x + cos²x = 1\n"
                "• Rewrite everything in sin and cos, then simplify\n"
                "• Know the special angles: 0, 30, 45, 60, 90\n\n"
                "Worked example: (1 - cos²x) / sin x\n"
                "= sin²x / sin x = sin x"
            ),
        },
        "extras": {
            "calculus": (
                "Extra example: f(x) = x³\n"
                "f(x+h) - f(x) = 3x²h + 3xh² + h³\n"
                "Divide by h: 3x² + 3xh + h² → limit → 3x²"
            ),
            "trigonometry": (
                "Extra example: (cos²x - 1) / cos x\n"
                "= -(1 - cos²x) / cos x = -sin²x / cos x\n"
                "= -sin x · tan x"
            ),
        },
        "burst_question": "🎯 3-question burst: question {number} of 3",
        "burst_done": "✅ Burst done: {correct}/3",
        "cancel": "No stress. If panic hits again, just send \"panic\". 💪",
        "break": "A break is valid. Come back strong later. Send \"next\" when you're ready. 💪",
        "remind_tonight": "I'll remind you tonight at {time}. You've got this. 🔔",
    },

    "exam_prep": {
        "intro": "Let's get you ready for that exam. 📅",
        "ask_problems": "What topics or problems are worrying you most? Describe them in a sentence.",
        "ask_date": (
            "When is the exam? (e.g. \"tomorrow\", \"friday\", \"25 nov\", \"in 5 days\")\n\n"
            "Or send \"skip\"."
        ),
        "date_invalid": "I couldn't read that date. Try \"tomorrow\", \"friday\", \"25 nov\" or \"skip\".",
        "date_soon": "Exam {when}. Short on time, so let's go straight to a focused review. ⏱️",
        "ask_time": "What time suits you for daily prep? (e.g. \"7pm\", \"19:00\")",
        "time_invalid": "I couldn't read that time. Try \"7pm\" or \"19:00\".",
        "plan_ready": (
            "📋 Your plan: {days} day(s) of {subject} review on {topic}, "
            "daily at {time}."
        ),
        "no_plan": "No problem, we'll just review together.",
        "switched_topic": "Switched focus to {topic}.",
    },

    "lesson": {
        "header": "📘 {topic}",
        "fallback": (
            "Work through one example slowly: write what is given, what is asked, "
            "and the first rule that links them. Then take one step at a time."
        ),
    },

    "homework": {
        "intro": (
            "I'll teach you methods and approaches, not give you answers. 📚"
        ),
        "ask_confusion": (
            "What exactly is confusing you? Describe the step where you get stuck."
        ),
        "method_header": "Here's a way to think about it:\n\n{method}",
        "method_fallback": (
            "Break it down: 1) write what you know, 2) write what you need, "
            "3) find the rule that connects them, 4) do one step and check it."
        ),
        "done": "Great work sticking with it! 🎉",
    },

    "friends": {
        "ask_username": "Send your friend's username (e.g. @thabo_21).",
        "ask_challenge": "Who do you want to challenge? Send their username.",
        "added": "You and @{username} are now friends! 🤝",
        "already": "You and @{username} are already friends.",
        "not_found": "I couldn't find @{username}. Check the spelling and try again.",
        "self": "You can't add yourself. 😄",
        "none": "No friends yet. Pick 2 to add one!",
        "list_header": "👥 Your friends:",
        "challenge_sent": "Challenge sent to @{username}! First to 5 correct wins. ⚔️",
        "challenge_not_friend": "You can only challenge friends. Add @{username} first.",
    },

    "settings": {
        "profile": (
            "👤 {name} (@{username})\n"
            "Grade: {grade}\n"
            "Subjects: {subjects}\n"
            "Reminder: {reminder}"
        ),
        "reminder_help": "Send \"change time 7pm\" (or 19:00) to set your daily reminder.",
        "reminder_set": "Daily reminder set for {time}. ⏰",
        "reminder_invalid": "I couldn't read \"{value}\". Try \"change time 7pm\".",
    },

    "hooks": {
        "unknown_type": "Hook types: {types}",
        "none_sent": "No hooks sent in the last {days} days.",
        "stats_header": "🪝 Hooks sent in the last {days} days:",
    },

    "ai_tutor": {
        "fallback": (
            "I can't reach my explainer right now. Try \"practice\" to learn "
            "{topic} by doing, and ask me again later."
        ),
        "missing_topic": "Send \"help with <topic>\", e.g. \"help with factorising\".",
    },

    "progress": {
        "header": "📈 Your progress",
        "weak_spots": "Work on: {tags}",
        "no_weak_spots": "No weak spots yet, keep answering!",
    },
}


HOOK_TEMPLATES = {
    "morning": "Morning, {display_name}! ☀️ One quick question to wake the brain up? Send \"next\".",
    "afternoon": "Afternoon slump, {display_name}? 5 minutes of maths beats scrolling. Send \"practice\".",
    "evening": "Evening check-in: your streak is {streak_count} 🔥. Keep it alive with one question.",
    "fomo": "Your friends are practising right now. Don't let @{username} fall behind! Send \"next\".",
    "comeback": "We missed you, {display_name}! Your spot is saved. Send \"menu\" to jump back in.",
}
