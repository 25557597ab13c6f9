from __future__ import annotations

STUDY_METHODS = {
    "reading": "SQ3R Method",
    "problem-set": "Worked Examples",
    "essay": "Structured Outlining",
    "exam-prep": "Active Recall",
    "memorization": "Spaced Repetition",
}

STUDY_TIPS = {
    "reading": "Survey, Question, Read, Recite, Review. End with 5 retrieval questions.",
    "problem-set": "Start with worked examples, then practice independently. Keep an error log.",
    "essay": "Create detailed outline first, then write in focused 25-minute sprints.",
    "exam-prep": "Use flashcards and practice tests. Mix different topics (interleaving).",
    "memorization": "Active recall with flashcards. Review in increasingly spaced intervals.",
}

PROGRESS_TIPS = {
    "reading": "Review previous chapter highlights before starting new material.",
    "problem-set": "Start by reviewing errors from previous session.",
    "essay": "Review your outline and previous paragraphs before continuing.",
    "exam-prep": "Test yourself on yesterday's material first.",
    "memorization": "Quick review of previous cards before new ones.",
}

SHORT_BREAK_TIPS = (
    "Take a 5-minute walk to boost circulation.",
    "Do some light stretching to relieve tension.",
    "Hydrate and have a healthy snack.",
    "Practice deep breathing to reset focus.",
)

LONG_BREAK_TIPS = (
    "Go for a longer walk or light exercise.",
    "Have a proper meal to refuel your brain.",
    "Take a short power nap if feeling tired.",
    "Do something completely different to reset.",
)


def study_method(task_type: str) -> str:
    return STUDY_METHODS.get(task_type, "Focused Study")


def session_tip(task_type: str, session_number: int, difficulty: int = 3) -> str:
    """Tip for the n-th (1-based) session of a task."""
    base = STUDY_TIPS.get(task_type, "")
    if session_number == 1:
        nudge = " Take your time and focus deeply." if difficulty >= 4 else " Start with confidence!"
        return f"Session 1: {base}{nudge}"

    momentum = " You're building great momentum!" if session_number > 3 else ""
    progress = PROGRESS_TIPS.get(task_type, "")
    return f"Session {session_number}: {progress} Then {base.lower()}{momentum}"


def break_tip(long_break: bool, index: int) -> str:
    tips = LONG_BREAK_TIPS if long_break else SHORT_BREAK_TIPS
    return tips[index % len(tips)]
