from dataclasses import dataclass, field, asdict
from typing import Optional, List, Dict, Any, Tuple

from quizwhiz_app.core.error_handlers import InvalidInput

OPTION_COUNT = 4


@dataclass(frozen=True)
class Question:
    """One multiple-choice question. ``correct_answer_index`` is 0-based."""

    id: int
    question: str
    options: Tuple[str, str, str, str]
    correct_answer_index: int

    def __post_init__(self):
        object.__setattr__(self, 'options', tuple(self.options))
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id <= 0:
            raise InvalidInput(f"Question id must be a positive integer, got {self.id!r}")
        if not isinstance(self.question, str) or not self.question.strip():
            raise InvalidInput(f"Question {self.id} has no text")
        if len(self.options) != OPTION_COUNT:
            raise InvalidInput(f"Question {self.id} must have exactly {OPTION_COUNT} options")
        index = self.correct_answer_index
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < OPTION_COUNT:
            raise InvalidInput(f"Question {self.id} has an out of range answer index {index!r}")
        if not str(self.options[index]).strip():
            raise InvalidInput(f"Question {self.id}: the correct option is empty")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'question': self.question,
            'options': list(self.options),
            'correctAnswerIndex': self.correct_answer_index,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Question':
        return cls(
            id=data['id'],
            question=data['question'],
            options=tuple(data['options']),
            correct_answer_index=data['correctAnswerIndex'],
        )


@dataclass
class ParseStats:
    """Row counters collected while parsing one sheet. Diagnostic only."""

    total_rows: int = 0
    empty_rows: int = 0
    malformed_rows: int = 0
    invalid_id_rows: int = 0
    empty_question_rows: int = 0
    invalid_answer_rows: int = 0
    duplicate_ids: int = 0
    valid_questions: int = 0
    hidden_sheets: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class QuizFileMetadata:
    path: str
    role: str
    exam_questions: int

    def to_dict(self) -> Dict[str, Any]:
        return {'path': self.path, 'role': self.role, 'examQuestions': self.exam_questions}


@dataclass
class FileDraw:
    """How many questions one file contributed to an exam."""

    path: str
    available: int
    quota: int
    drawn: int


@dataclass
class ExamComposition:
    questions: List[Question] = field(default_factory=list)
    # Source file of each question, aligned with ``questions``
    sources: List[str] = field(default_factory=list)
    draws: List[FileDraw] = field(default_factory=list)
    failed_files: Dict[str, str] = field(default_factory=dict)
    role: Optional[str] = None
