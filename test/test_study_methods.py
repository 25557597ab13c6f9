from scheduling.study_methods import (
    LONG_BREAK_TIPS,
    SHORT_BREAK_TIPS,
    break_tip,
    session_tip,
    study_method,
)


def test_study_method_lookup():
    assert study_method("memorization") == "Spaced Repetition"
    assert study_method("unknown") == "Focused Study"


def test_first_session_tip_depends_on_difficulty():
    assert session_tip("essay", 1, difficulty=5).endswith("Take your time and focus deeply.")
    assert session_tip("essay", 1, difficulty=2).endswith("Start with confidence!")


def test_later_session_tips():
    second = session_tip("reading", 2)
    assert second.startswith("Session 2: Review previous chapter highlights")
    assert "Then survey, question" in second
    assert not second.endswith("momentum!")
    assert session_tip("reading", 4).endswith("You're building great momentum!")


def test_break_tips_rotate():
    assert break_tip(False, 0) == SHORT_BREAK_TIPS[0]
    assert break_tip(False, len(SHORT_BREAK_TIPS)) == SHORT_BREAK_TIPS[0]
    assert break_tip(True, 5) == LONG_BREAK_TIPS[5 % len(LONG_BREAK_TIPS)]
