"""Tests for rendering questions and capturing responses with the FillEngine."""

import pytest

from questionnaires import exceptions
from questionnaires.fill import FillEngine, render_question
from questionnaires.models import ExclusiveChoice, MultiChoice, Question, Questionnaire


@pytest.fixture
def engine(
    capital_question: Question, multi_answer_question: Question, no_correct_answer_question: Question
) -> FillEngine:
    """Provides an engine over one question of each control kind."""
    return FillEngine(
        Questionnaire(
            id="mixed",
            title="Mixed",
            description="One of each.",
            questions=[capital_question, multi_answer_question, no_correct_answer_question],
            pass_score=2,
        )
    )


# ---- Exclusive choice ----


def test_exclusive_select_replaces_previous_selection(engine: FillEngine, capital_question: Question) -> None:
    """Test that selecting B after A leaves only B selected."""
    assert engine.on_exclusive_select(capital_question.id, "Paris") is True
    assert engine.on_exclusive_select(capital_question.id, "London") is True

    assert engine.selected(capital_question.id) == ["London"]


def test_exclusive_select_same_option_is_unchanged(engine: FillEngine, capital_question: Question) -> None:
    """Test that re-selecting the selected option reports no change."""
    engine.on_exclusive_select(capital_question.id, "Paris")
    assert engine.on_exclusive_select(capital_question.id, "Paris") is False


def test_toggle_on_exclusive_question_behaves_exclusively(engine: FillEngine, capital_question: Question) -> None:
    """Test that toggling options on an exclusive question never holds two selections."""
    engine.on_option_toggle(capital_question.id, "Paris", True)
    engine.on_option_toggle(capital_question.id, "London", True)
    assert engine.selected(capital_question.id) == ["London"]

    engine.on_option_toggle(capital_question.id, "London", False)
    assert engine.selected(capital_question.id) == []


def test_exclusive_select_on_multi_choice_question_is_rejected(
    engine: FillEngine, multi_answer_question: Question
) -> None:
    """Test that an exclusive selection is not allowed on a multi-choice question."""
    with pytest.raises(exceptions.ControlMismatchError):
        engine.on_exclusive_select(multi_answer_question.id, "A")
    assert engine.selected(multi_answer_question.id) == []


def test_render_exclusive_question(engine: FillEngine, capital_question: Question) -> None:
    """Test the descriptor of an exclusive question."""
    engine.on_exclusive_select(capital_question.id, "Paris")

    control = engine.render_question(capital_question.id)

    assert control.control == ExclusiveChoice()
    assert control.question_text == "Which is the capital?"
    assert [(o.label, o.selected, o.disabled) for o in control.options] == [
        ("Paris", True, False),
        ("London", False, False),
    ]


# ---- Multi choice ----


def test_multi_choice_cap_blocks_further_selections(engine: FillEngine, multi_answer_question: Question) -> None:
    """Test that once the cap is reached, adding another option is a no-op."""
    assert engine.on_option_toggle(multi_answer_question.id, "A", True) is True
    assert engine.on_option_toggle(multi_answer_question.id, "C", True) is True

    assert engine.on_option_toggle(multi_answer_question.id, "B", True) is False
    assert engine.selected(multi_answer_question.id) == ["A", "C"]


def test_multi_choice_selected_options_can_always_be_removed(
    engine: FillEngine, multi_answer_question: Question
) -> None:
    """Test that at the cap a selected option can still be deselected, re-enabling the others."""
    engine.on_option_toggle(multi_answer_question.id, "A", True)
    engine.on_option_toggle(multi_answer_question.id, "C", True)

    assert engine.on_option_toggle(multi_answer_question.id, "C", False) is True
    assert engine.on_option_toggle(multi_answer_question.id, "B", True) is True
    assert engine.selected(multi_answer_question.id) == ["A", "B"]


def test_multi_choice_toggle_is_idempotent(engine: FillEngine, multi_answer_question: Question) -> None:
    """Test that selecting a selected option or deselecting an unselected one changes nothing."""
    engine.on_option_toggle(multi_answer_question.id, "A", True)

    assert engine.on_option_toggle(multi_answer_question.id, "A", True) is False
    assert engine.on_option_toggle(multi_answer_question.id, "B", False) is False
    assert engine.selected(multi_answer_question.id) == ["A"]


def test_render_multi_choice_at_cap_disables_unselected(engine: FillEngine, multi_answer_question: Question) -> None:
    """Test that at the cap only the unselected options are disabled."""
    engine.on_option_toggle(multi_answer_question.id, "B", True)
    assert not any(o.disabled for o in engine.render_question(multi_answer_question.id).options)

    engine.on_option_toggle(multi_answer_question.id, "A", True)
    control = engine.render_question(multi_answer_question.id)

    assert control.control == MultiChoice(cap=2)
    assert [(o.label, o.selected, o.disabled) for o in control.options] == [
        ("A", True, False),
        ("B", True, False),
        ("C", False, True),
    ]


def test_no_correct_option_allows_every_option(engine: FillEngine, no_correct_answer_question: Question) -> None:
    """Test that without correct options every option can be selected."""
    for label in ["Red", "Green", "Blue"]:
        assert engine.on_option_toggle(no_correct_answer_question.id, label, True) is True

    control = engine.render_question(no_correct_answer_question.id)
    assert control.control == MultiChoice(cap=3)
    assert all(o.selected and not o.disabled for o in control.options)


# ---- Keys, labels and rendering ----


def test_question_key_accepts_string_id(engine: FillEngine, capital_question: Question) -> None:
    """Test that a question may be addressed by the string form of its id."""
    engine.on_exclusive_select(str(capital_question.id), "Paris")
    assert engine.responses == {capital_question.id: ["Paris"]}


@pytest.mark.parametrize("key", ["not-a-uuid", "00000000-0000-0000-0000-000000000000"])
def test_unknown_question_is_rejected(engine: FillEngine, key: str) -> None:
    """Test that a key that is not a question of the questionnaire is rejected."""
    with pytest.raises(exceptions.UnknownQuestionError):
        engine.on_option_toggle(key, "Paris", True)
    assert engine.responses == {}


def test_unknown_option_is_rejected(engine: FillEngine, capital_question: Question) -> None:
    """Test that a label the question does not have is rejected."""
    with pytest.raises(exceptions.UnknownOptionError):
        engine.on_exclusive_select(capital_question.id, "Berlin")
    assert engine.responses == {}


def test_render_all_questions_in_order(engine: FillEngine) -> None:
    """Test that render describes every question in questionnaire order."""
    controls = engine.render()
    assert [c.question_text for c in controls] == [q.question_text for q in engine.questionnaire.questions]
    assert [c.control.kind for c in controls] == ["exclusive", "multi", "multi"]


def test_render_question_function_with_external_responses(multi_answer_question: Question) -> None:
    """Test the standalone renderer against a responses mapping."""
    control = render_question(multi_answer_question, {multi_answer_question.id: ["A", "B"]})
    assert [o.disabled for o in control.options] == [False, False, True]
