import math
from typing import List, Optional, Sequence

from quizwhiz_app.core.error_handlers import InvalidInput
from ..schemas import QuestionReview, ScoreSummary


def round_half_up(value: float) -> int:
    """Round .5 upwards (12.5 -> 13), unlike Python's banker's rounding."""
    return int(math.floor(value + 0.5))


class ScoreCalculator:
    """
    Pure scoring of a quiz attempt against the questions' correct answers.
    """

    @staticmethod
    def _validate(questions: Sequence, answers: Sequence[Optional[int]]) -> None:
        if not questions:
            raise InvalidInput('Cannot score a quiz without questions.')
        if len(answers) != len(questions):
            raise InvalidInput(
                f'Expected {len(questions)} answers, got {len(answers)}.'
            )

    @staticmethod
    def is_correct(question, answer: Optional[int]) -> bool:
        return answer is not None and answer == question.correct_answer_index

    @classmethod
    def score(cls, questions: Sequence, answers: Sequence[Optional[int]]) -> ScoreSummary:
        cls._validate(questions, answers)

        correctness = [cls.is_correct(question, answer) for question, answer in zip(questions, answers)]
        correct_count = sum(correctness)
        total = len(questions)

        return ScoreSummary(
            correct_count=correct_count,
            wrong_count=total - correct_count,
            percentage=round_half_up(100 * correct_count / total),
            per_question_correctness=correctness,
        )

    @classmethod
    def review(cls, questions: Sequence, answers: Sequence[Optional[int]]) -> List[QuestionReview]:
        cls._validate(questions, answers)
        return [
            QuestionReview(
                number=position + 1,
                question_id=question.id,
                question=question.question,
                options=list(question.options),
                correct_answer_index=question.correct_answer_index,
                user_answer_index=answer,
                is_correct=cls.is_correct(question, answer),
            )
            for position, (question, answer) in enumerate(zip(questions, answers))
        ]
