# File: quizwhiz_app/modules/quiz/logics/session_logic.py
# MỤC ĐÍCH: Máy trạng thái của một lượt làm bài (setup -> active -> results),
#           kèm đồng hồ đếm ngược cho chế độ thi.

import logging
import time
from typing import Callable, List, Optional, Sequence, Union

from quizwhiz_app.core.error_handlers import InvalidInput
from ..config import MODE_EXAM, MODE_LEARNING, QuizLearningConfig, mode_ids
from ..schemas import OPTION_COUNT, Question

logger = logging.getLogger(__name__)

STATE_SETUP = 'setup'
STATE_ACTIVE = 'active'
STATE_RESULTS = 'results'

CompletionCallback = Callable[[List[Optional[int]]], None]
# [source_path, question_id]
QuestionRef = List[Union[str, int]]
QuestionResolver = Callable[[List[QuestionRef]], List[Question]]


class QuizSessionManager:
    """
    Quản lý một lượt làm bài Quiz.

    The manager is a plain object; the HTTP layer keeps it in the Flask
    session through ``to_dict`` / ``from_dict``. Only question references
    go into the session, never question content or correct answers; the
    questions are resolved again from their source files on load.
    """
    SESSION_KEY = 'quiz_session'

    def __init__(self, *, state=STATE_SETUP, mode=None, questions=None, question_refs=None,
                 answers=None, current_index=0, time_remaining=None, submitted=False,
                 auto_submitted=False, last_tick_at=None, source=None,
                 exam_duration_seconds=QuizLearningConfig.QUIZ_EXAM_DURATION_SECONDS,
                 navigation_policy=None, on_complete: Optional[CompletionCallback] = None):
        self.state = state
        self.mode = mode
        self.questions: List[Question] = list(questions or [])
        self.question_refs: List[QuestionRef] = [list(ref) for ref in question_refs or []]
        self.answers: List[Optional[int]] = list(answers or [])
        self.current_index = current_index
        self.time_remaining = time_remaining
        self.submitted = submitted
        self.auto_submitted = auto_submitted
        self.last_tick_at = last_tick_at
        self.source = source
        self.exam_duration_seconds = exam_duration_seconds
        self.navigation_policy = navigation_policy or QuizLearningConfig.NAVIGATION_POLICY
        self.on_complete = on_complete

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, session_dict, resolve_questions: Optional[QuestionResolver] = None, **kwargs):
        """
        Tạo instance từ dictionary lưu trong Flask session.

        ``resolve_questions`` turns the stored references back into
        questions and is required whenever the attempt holds any.
        """
        question_refs = session_dict.get('question_refs') or []
        questions = []
        if question_refs:
            if resolve_questions is None:
                raise ValueError('A question resolver is needed to restore this quiz session.')
            questions = resolve_questions(question_refs)
            if len(questions) != len(question_refs):
                raise ValueError('Question resolver returned a different number of questions.')

        return cls(
            state=session_dict.get('state', STATE_SETUP),
            mode=session_dict.get('mode'),
            questions=questions,
            question_refs=question_refs,
            answers=session_dict.get('answers') or [],
            current_index=session_dict.get('current_index', 0),
            time_remaining=session_dict.get('time_remaining'),
            submitted=session_dict.get('submitted', False),
            auto_submitted=session_dict.get('auto_submitted', False),
            last_tick_at=session_dict.get('last_tick_at'),
            source=session_dict.get('source'),
            exam_duration_seconds=session_dict.get(
                'exam_duration_seconds', QuizLearningConfig.QUIZ_EXAM_DURATION_SECONDS
            ),
            **kwargs
        )

    def to_dict(self):
        return {
            'state': self.state,
            'mode': self.mode,
            'question_refs': [list(ref) for ref in self.question_refs],
            'answers': list(self.answers),
            'current_index': self.current_index,
            'time_remaining': self.time_remaining,
            'submitted': self.submitted,
            'auto_submitted': self.auto_submitted,
            'last_tick_at': self.last_tick_at,
            'source': self.source,
            'exam_duration_seconds': self.exam_duration_seconds,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _require_state(self, expected, action):
        if self.state != expected:
            raise InvalidInput(f"Cannot {action} while the quiz is '{self.state}' (expected '{expected}').")

    def _policy(self):
        return self.navigation_policy.get(self.mode, {'forward_requires_answer': True, 'allow_backward': True})

    @property
    def is_exam(self) -> bool:
        return self.mode == MODE_EXAM

    @property
    def current_question(self) -> Optional[Question]:
        if not self.questions:
            return None
        return self.questions[self.current_index]

    @property
    def answered_count(self) -> int:
        return sum(1 for answer in self.answers if answer is not None)

    def all_answered(self) -> bool:
        return bool(self.answers) and all(answer is not None for answer in self.answers)

    def can_go_next(self) -> bool:
        if self.state != STATE_ACTIVE or self.current_index >= len(self.questions) - 1:
            return False
        if self._policy().get('forward_requires_answer', True):
            return self.answers[self.current_index] is not None
        return True

    def can_go_previous(self) -> bool:
        if self.state != STATE_ACTIVE or self.current_index <= 0:
            return False
        return bool(self._policy().get('allow_backward', True))

    def can_submit(self) -> bool:
        return self.state == STATE_ACTIVE and self.all_answered()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def start(self, questions: Sequence[Question], mode: str, now: Optional[float] = None,
              sources: Union[str, Sequence[Optional[str]], None] = None):
        """
        setup -> active.

        ``sources`` names the file each question came from, either one path
        for the whole attempt or one path per question.
        """
        self._require_state(STATE_SETUP, 'start a quiz')
        if mode not in mode_ids():
            raise InvalidInput(f"Chế độ học không hợp lệ: {mode!r}")
        if not questions:
            raise InvalidInput('Cannot start a quiz without questions.')
        if sources is None or isinstance(sources, str):
            sources = [sources] * len(questions)
        elif len(sources) != len(questions):
            raise InvalidInput('Every question needs a source file.')

        self.mode = mode
        self.questions = list(questions)
        self.question_refs = [[source, question.id] for source, question in zip(sources, self.questions)]
        self.answers = [None] * len(self.questions)
        self.current_index = 0
        self.submitted = False
        self.auto_submitted = False

        if mode == MODE_EXAM:
            self.time_remaining = self.exam_duration_seconds
            self.last_tick_at = time.time() if now is None else now
        else:
            self.time_remaining = None
            self.last_tick_at = None

        self.state = STATE_ACTIVE
        logger.debug(f"Quiz started: mode={mode}, questions={len(self.questions)}")

    def select_answer(self, option_index: int):
        self._require_state(STATE_ACTIVE, 'answer')
        if isinstance(option_index, bool) or not isinstance(option_index, int) \
                or not 0 <= option_index < OPTION_COUNT:
            raise InvalidInput(f"Option index must be between 0 and {OPTION_COUNT - 1}, got {option_index!r}")
        self.answers[self.current_index] = option_index

    def feedback_for_current(self) -> Optional[dict]:
        """Immediate feedback for learning mode; None while unanswered."""
        self._require_state(STATE_ACTIVE, 'show feedback')
        if self.mode != MODE_LEARNING:
            return None
        answer = self.answers[self.current_index]
        if answer is None:
            return None
        question = self.current_question
        return {
            'isCorrect': answer == question.correct_answer_index,
            'correctAnswerIndex': question.correct_answer_index,
            'selectedIndex': answer,
        }

    def next(self) -> bool:
        """Advance one question. Returns False when the move is not allowed."""
        self._require_state(STATE_ACTIVE, 'navigate')
        if not self.can_go_next():
            return False
        self.current_index += 1
        return True

    def previous(self) -> bool:
        self._require_state(STATE_ACTIVE, 'navigate')
        if not self.can_go_previous():
            return False
        self.current_index -= 1
        return True

    def submit(self, auto: bool = False) -> List[Optional[int]]:
        """
        active -> results. A manual submit needs every question answered;
        the exam timer submits whatever is there.
        """
        self._require_state(STATE_ACTIVE, 'submit')
        if self.submitted:
            raise InvalidInput('Quiz has already been submitted.')
        if auto:
            if not self.is_exam:
                raise InvalidInput('Only exams are submitted automatically.')
        elif not self.all_answered():
            raise InvalidInput('Every question must be answered before submitting.')

        self.submitted = True
        self.auto_submitted = auto
        self.state = STATE_RESULTS
        final_answers = list(self.answers)
        logger.info(
            f"Quiz submitted ({'auto' if auto else 'manual'}): mode={self.mode}, "
            f"answered={self.answered_count}/{len(self.questions)}"
        )
        if self.on_complete is not None:
            self.on_complete(final_answers)
        return final_answers

    def retake(self):
        """results -> setup. The attempt is discarded; the mode is kept."""
        self._require_state(STATE_RESULTS, 'retake')
        self.state = STATE_SETUP
        self.questions = []
        self.question_refs = []
        self.answers = []
        self.current_index = 0
        self.time_remaining = None
        self.last_tick_at = None
        self.submitted = False
        self.auto_submitted = False
        self.source = None

    # ------------------------------------------------------------------
    # Exam countdown
    # ------------------------------------------------------------------
    def tick(self) -> bool:
        """
        One second of exam countdown. Returns True only on the tick that
        auto-submitted the exam.
        """
        if self.state != STATE_ACTIVE or not self.is_exam or self.submitted:
            return False
        if self.time_remaining is None:
            return False

        self.time_remaining = max(0, self.time_remaining - 1)
        if self.time_remaining == 0:
            logger.info("Exam time is up, submitting automatically.")
            self.submit(auto=True)
            return True
        return False

    def sync_clock(self, now: Optional[float] = None) -> bool:
        """
        Apply the whole seconds elapsed since the last sync as ticks.
        Returns True if this sync ran out the clock.
        """
        if self.state != STATE_ACTIVE or not self.is_exam or self.last_tick_at is None:
            return False

        now = time.time() if now is None else now
        elapsed = int(now - self.last_tick_at)
        if elapsed <= 0:
            return False

        self.last_tick_at += elapsed
        for _ in range(min(elapsed, self.time_remaining or 0)):
            if self.tick():
                return True
        return False
