# File: quizwhiz_app/modules/quiz/logics/algorithms.py
# Chọn ngẫu nhiên câu hỏi cho phiên học và bài thi.

import random
from typing import List, Optional, Sequence

from quizwhiz_app.core.error_handlers import InvalidInput
from ..schemas import Question


def _rng(rng: Optional[random.Random]) -> random.Random:
    return rng if rng is not None else random.Random()


def sample_questions(pool: Sequence[Question], count: int, rng: Optional[random.Random] = None) -> List[Question]:
    """
    Uniform sample without replacement. ``count`` is clamped to the pool size;
    a negative count draws nothing.
    """
    count = max(0, min(int(count), len(pool)))
    if count == 0:
        return []
    return _rng(rng).sample(list(pool), count)


def shuffle_questions(questions: Sequence[Question], rng: Optional[random.Random] = None) -> List[Question]:
    """Return a shuffled copy; the input is left untouched."""
    shuffled = list(questions)
    _rng(rng).shuffle(shuffled)
    return shuffled


def select_practice_questions(pool: Sequence[Question], question_count: int,
                              rng: Optional[random.Random] = None) -> List[Question]:
    """
    Lấy ngẫu nhiên ``question_count`` câu từ bộ câu hỏi của file đang chọn
    (chế độ learning / testing).
    """
    if not pool:
        raise InvalidInput('Cannot start quiz: no questions loaded from the selected file.')
    if isinstance(question_count, bool) or not isinstance(question_count, int) or question_count <= 0:
        raise InvalidInput(f'Question count must be a positive integer, got {question_count!r}')
    return sample_questions(pool, question_count, rng)
