from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any


@dataclass(frozen=True)
class ScoreSummary:
    correct_count: int
    wrong_count: int
    percentage: int
    per_question_correctness: List[bool] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'correctCount': self.correct_count,
            'wrongCount': self.wrong_count,
            'percentage': self.percentage,
            'perQuestionCorrectness': list(self.per_question_correctness),
        }


@dataclass(frozen=True)
class QuestionReview:
    """Review line shown after the quiz for one question."""

    number: int
    question_id: int
    question: str
    options: List[str]
    correct_answer_index: int
    user_answer_index: Optional[int]
    is_correct: bool

    @property
    def answered(self) -> bool:
        return self.user_answer_index is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'number': self.number,
            'questionId': self.question_id,
            'question': self.question,
            'options': list(self.options),
            'correctAnswerIndex': self.correct_answer_index,
            'userAnswerIndex': self.user_answer_index,
            'answered': self.answered,
            'isCorrect': self.is_correct,
        }
