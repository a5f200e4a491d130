from typing import List, Optional, Sequence, Tuple

from flask import current_app

from quizwhiz_app.core.error_handlers import InvalidInput, SourceUnreadable
from .config import MODE_EXAM, QuizLearningConfig, mode_ids
from .schemas import Question, QuizFileMetadata


def _setting(key: str):
    return current_app.config.get(key, getattr(QuizLearningConfig, key))


class QuizInterface:
    """
    Public API of the quiz module, bound to the current Flask app's
    configuration.
    """

    @staticmethod
    def get_catalog():
        from .services.catalog_service import QuizFileCatalog, local_manifest_reader
        reader = local_manifest_reader(
            current_app.config['QUIZ_FILES_FOLDER'],
            _setting('QUIZ_MANIFEST_FILE'),
        )
        return QuizFileCatalog(
            reader,
            common_knowledge_tag=_setting('QUIZ_COMMON_KNOWLEDGE_TAG'),
            roles=_setting('QUIZ_ROLES'),
        )

    @staticmethod
    def get_loader():
        from .services.loader_service import QuizFileLoader, local_file_fetcher
        return QuizFileLoader(local_file_fetcher(current_app.config['QUIZ_FILES_FOLDER']))

    @classmethod
    def get_exam_composer(cls):
        from .services.exam_service import ExamComposer
        return ExamComposer(
            cls.get_catalog(),
            cls.get_loader(),
            max_workers=_setting('QUIZ_EXAM_MAX_WORKERS'),
        )

    @classmethod
    def list_roles(cls) -> List[str]:
        return cls.get_catalog().available_roles()

    @classmethod
    def list_files(cls, role: Optional[str] = None) -> List[QuizFileMetadata]:
        return cls.get_catalog().list_files(role)

    @classmethod
    def load_questions_with_stats(cls, path: str):
        return cls.get_loader().load_with_stats(path)

    @classmethod
    def load_questions(cls, path: str) -> List[Question]:
        return cls.get_loader().load(path)

    @classmethod
    def compose_exam(cls, role: str) -> List[Question]:
        return cls.get_exam_composer().compose_exam(role)

    @classmethod
    def resolve_questions(cls, refs: Sequence[Sequence]) -> List[Question]:
        """
        Turn ``[source_path, question_id]`` references back into questions,
        loading each source file once.

        Raises:
            SourceUnreadable: a file or question is no longer available.
        """
        loader = cls.get_loader()
        by_path = {}
        questions = []
        for path, question_id in refs:
            if path not in by_path:
                by_path[path] = {question.id: question for question in loader.load(path)}
            question = by_path[path].get(question_id)
            if question is None:
                raise SourceUnreadable(
                    f"Question {question_id} is no longer available in '{path}'.", source=path
                )
            questions.append(question)
        return questions

    @classmethod
    def start_quiz(cls, question_count: int, mode: str, path: Optional[str] = None,
                   role: Optional[str] = None) -> Tuple[List[Question], List[str]]:
        """
        Pick the questions for a new attempt.

        Exams ignore ``question_count`` and use the per-file quotas of the
        role's files; the other modes draw ``question_count`` questions at
        random from the file at ``path``.

        Returns the questions and, aligned with them, the file each one
        came from.
        """
        from .logics.algorithms import select_practice_questions

        if mode not in mode_ids():
            raise InvalidInput(f"Chế độ học không hợp lệ: {mode!r}")

        if mode == MODE_EXAM:
            if not role:
                raise InvalidInput('A role is required to start an exam.')
            composition = cls.get_exam_composer().compose_exam_with_report(role)
            return composition.questions, composition.sources

        if not path:
            raise InvalidInput('A quiz file is required to start a quiz.')
        pool = cls.load_questions(path)
        questions = select_practice_questions(pool, question_count)
        return questions, [path] * len(questions)
