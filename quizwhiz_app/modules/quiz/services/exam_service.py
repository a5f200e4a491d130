"""
Exam Composer Service

Builds one timed exam for a role: every catalog file of the role
contributes up to its ``examQuestions`` quota, drawn at random, and the
merged set is shuffled so source files cannot be told apart by position.
"""

from __future__ import annotations

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple, Union

from quizwhiz_app.core.error_handlers import NoFilesForRole, NoValidQuestions, QuizWhizError
from ..config import QuizLearningConfig
from ..logics.algorithms import sample_questions, shuffle_questions
from ..schemas import ExamComposition, FileDraw, Question, QuizFileMetadata
from .catalog_service import QuizFileCatalog
from .loader_service import QuizFileLoader

logger = logging.getLogger(__name__)

LoadResult = Union[List[Question], QuizWhizError]


class ExamComposer:
    """Service composing role-based exams from per-file quotas."""

    def __init__(self, catalog: QuizFileCatalog, loader: QuizFileLoader,
                 rng: Optional[random.Random] = None,
                 max_workers: int = QuizLearningConfig.QUIZ_EXAM_MAX_WORKERS):
        self.catalog = catalog
        self.loader = loader
        self.rng = rng if rng is not None else random.Random()
        self.max_workers = max(1, int(max_workers))

    def compose_exam(self, role: str) -> List[Question]:
        return self.compose_exam_with_report(role).questions

    def compose_exam_with_report(self, role: str) -> ExamComposition:
        files = self.catalog.list_files(role)
        if not files:
            raise NoFilesForRole(f"No quiz files available for role '{role}'.", role=role)

        results = self._load_all(files)

        composition = ExamComposition(role=role)
        drawn: List[Tuple[str, Question]] = []
        for metadata, result in results:
            if isinstance(result, QuizWhizError):
                composition.failed_files[metadata.path] = result.message
                continue
            sample = sample_questions(result, metadata.exam_questions, self.rng)
            composition.draws.append(FileDraw(
                path=metadata.path,
                available=len(result),
                quota=metadata.exam_questions,
                drawn=len(sample),
            ))
            drawn.extend((metadata.path, question) for question in sample)

        shuffled = shuffle_questions(drawn, self.rng)
        composition.questions = [question for _, question in shuffled]
        composition.sources = [path for path, _ in shuffled]

        if not composition.questions:
            raise NoValidQuestions(
                f"Could not build an exam for role '{role}'.",
                role=role,
                failed_files=sorted(composition.failed_files),
            )

        logger.info(
            f"Composed exam for role {role!r}: {len(composition.questions)} questions from "
            f"{len(composition.draws)} files ({len(composition.failed_files)} failed)"
        )
        return composition

    def _load_all(self, files: List[QuizFileMetadata]) -> List[Tuple[QuizFileMetadata, LoadResult]]:
        """Load every file concurrently and wait for all of them."""
        workers = min(self.max_workers, len(files))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [(metadata, executor.submit(self._load_one, metadata)) for metadata in files]
            return [(metadata, future.result()) for metadata, future in futures]

    def _load_one(self, metadata: QuizFileMetadata) -> LoadResult:
        try:
            return self.loader.load(metadata.path)
        except QuizWhizError as exc:
            logger.warning(f"Skipping {metadata.path} in exam composition: {exc.message}")
            return exc
