"""
Assessment rule engine.

Pure functions over a question tree and an answer set: which questions are
visible, which visible answers are invalid, and whether the tree itself is
well formed. No I/O; identical inputs always give identical outputs.
"""

import math
from typing import Iterable, Mapping, Optional, Sequence

from api.schemas.assessments import (
    AnswerValue,
    ChoiceQuestion,
    MultiChoiceQuestion,
    NumericQuestion,
    Question,
    Section,
    TextQuestion,
)

Answers = Mapping[str, AnswerValue]

REQUIRED_MESSAGE = "This field is required"
SELECT_ONE_MESSAGE = "Select at least one option"
NOT_A_NUMBER_MESSAGE = "Enter a number"


def _iter_questions(sections: Iterable[Section]) -> Iterable[Question]:
    for section in sections:
        yield from section.questions


def _matches(value: AnswerValue, expected: str) -> bool:
    if isinstance(value, list):
        return expected in value
    return value == expected


def is_visible(question: Question, answers: Answers) -> bool:
    """
    A question without a conditional is always visible; otherwise it is
    visible iff the source answer equals the expected value (or, for a
    list answer, contains it).
    """
    conditional = question.conditional
    if conditional is None:
        return True
    return _matches(answers.get(conditional.source_question_id), conditional.expected_value)


def visible_questions(sections: Sequence[Section], answers: Answers) -> list[Question]:
    """
    Visible questions in document order.

    An answer given to a question that is itself hidden counts as absent
    when another question depends on it.
    """
    effective: dict[str, AnswerValue] = dict(answers)
    visible: list[Question] = []
    for question in _iter_questions(sections):
        if is_visible(question, effective):
            visible.append(question)
        else:
            effective.pop(question.id, None)
    return visible


def _is_empty(value: AnswerValue) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list):
        return len(value) == 0
    return False


def _as_number(value: AnswerValue) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) or math.isinf(number) else number


def _format_number(number: float) -> str:
    return str(int(number)) if float(number).is_integer() else str(number)


def validate_question(question: Question, value: AnswerValue) -> Optional[str]:
    """First failing rule for one visible question, or None if the answer is fine."""
    if isinstance(question, MultiChoiceQuestion):
        if question.required and (not isinstance(value, list) or not value):
            return SELECT_ONE_MESSAGE
    elif question.required and _is_empty(value):
        return REQUIRED_MESSAGE

    if _is_empty(value):
        return None

    if isinstance(question, NumericQuestion):
        number = _as_number(value)
        if number is None:
            return NOT_A_NUMBER_MESSAGE
        if question.min is not None and number < question.min:
            return f"Minimum {_format_number(question.min)}"
        if question.max is not None and number > question.max:
            return f"Maximum {_format_number(question.max)}"
    elif isinstance(question, TextQuestion):
        if question.max_length and isinstance(value, str) and len(value) > question.max_length:
            return f"Max {question.max_length} characters"
    elif isinstance(question, MultiChoiceQuestion):
        if question.max_selections and isinstance(value, list) and len(value) > question.max_selections:
            return f"Select up to {question.max_selections}"
    return None


def validate_answers(sections: Sequence[Section], answers: Answers) -> dict[str, str]:
    """
    Validate an answer set against the currently visible questions.

    Returns:
        Mapping of question id to a single error message; empty when the
        answer set can be submitted.
    """
    errors: dict[str, str] = {}
    for question in visible_questions(sections, answers):
        message = validate_question(question, answers.get(question.id))
        if message:
            errors[question.id] = message
    return errors


def check_assessment_tree(sections: Sequence[Section]) -> list[str]:
    """
    Structural problems of a question tree, in document order.

    Conditionals may only point at a different question that appears
    earlier, which also rules out cycles.
    """
    problems: list[str] = []
    section_ids: set[str] = set()
    seen_questions: set[str] = set()

    for section in sections:
        if section.id in section_ids:
            problems.append(f"Duplicate section id {section.id}")
        section_ids.add(section.id)

        for question in section.questions:
            if question.id in seen_questions:
                problems.append(f"Duplicate question id {question.id}")

            conditional = question.conditional
            if conditional is not None:
                source = conditional.source_question_id
                if source == question.id:
                    problems.append(f"Question {question.id} cannot depend on itself")
                elif source not in seen_questions:
                    problems.append(
                        f"Question {question.id} depends on {source}, which is not an earlier question"
                    )

            if isinstance(question, ChoiceQuestion) and not question.options:
                problems.append(f"Question {question.id} needs at least one option")

            seen_questions.add(question.id)

    return problems
