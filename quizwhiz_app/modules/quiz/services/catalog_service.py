"""
Quiz File Catalog Service

Lists the quiz spreadsheets declared in the ``quiz-files.json`` manifest.
The manifest is obtained through an injected reader so the catalog does not
care whether it lives on disk or behind a URL.

Manifest format::

    [
        {"path": "ke-toan.xlsx", "role": "Kế toán", "examQuestions": 20},
        {"path": "chung.xlsx", "role": "Kiến thức chung", "examQuestions": 10}
    ]

Bare file-name strings are accepted as common-knowledge entries with no exam
quota.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, List, Optional, Union

from quizwhiz_app.utils.excel import has_supported_extension
from ..config import QuizLearningConfig
from ..schemas import QuizFileMetadata

logger = logging.getLogger(__name__)

ManifestReader = Callable[[], Union[str, bytes]]
MANIFEST_EXTENSIONS = ('.xlsx', '.xls')


def local_manifest_reader(folder: str, file_name: str = QuizLearningConfig.QUIZ_MANIFEST_FILE) -> ManifestReader:
    """Build a reader that returns the raw manifest text from ``folder``."""
    manifest_path = os.path.join(folder, file_name)

    def read_manifest() -> bytes:
        with open(manifest_path, 'rb') as handle:
            return handle.read()

    return read_manifest


class QuizFileCatalog:
    """Service resolving the available quiz files and their metadata."""

    def __init__(self, read_manifest: ManifestReader,
                 common_knowledge_tag: str = QuizLearningConfig.QUIZ_COMMON_KNOWLEDGE_TAG,
                 roles: Optional[List[str]] = None):
        self.read_manifest = read_manifest
        self.common_knowledge_tag = common_knowledge_tag
        self.roles = list(roles) if roles is not None else list(QuizLearningConfig.QUIZ_ROLES)

    def available_roles(self) -> List[str]:
        return list(self.roles)

    def list_files(self, role: Optional[str] = None) -> List[QuizFileMetadata]:
        """
        Return valid manifest entries, optionally filtered by role.

        Entries tagged with the common-knowledge tag match every role. Any
        failure to read or decode the manifest yields an empty list.
        """
        entries = self._load_entries()
        files = []
        for position, raw_entry in enumerate(entries):
            metadata = self._to_metadata(raw_entry)
            if metadata is None:
                logger.warning(f"Ignoring invalid manifest entry #{position + 1}: {raw_entry!r}")
                continue
            files.append(metadata)

        if role is not None:
            files = [
                entry for entry in files
                if entry.role == role or entry.role == self.common_knowledge_tag
            ]

        if not files:
            logger.warning(f"No quiz files found in manifest (role={role!r})")
        else:
            logger.info(f"Catalog resolved {len(files)} quiz files (role={role!r})")
        return files

    def _load_entries(self) -> List[Any]:
        try:
            raw_manifest = self.read_manifest()
        except Exception as exc:
            logger.error(f"Failed to read quiz file manifest: {exc}")
            return []

        try:
            if isinstance(raw_manifest, bytes):
                raw_manifest = raw_manifest.decode('utf-8-sig')
            data = json.loads(raw_manifest)
        except (UnicodeDecodeError, ValueError, TypeError) as exc:
            logger.error(f"Quiz file manifest is not valid JSON: {exc}")
            return []

        if not isinstance(data, list):
            logger.error("Invalid quiz file list format: expected an array")
            return []
        return data

    def _to_metadata(self, raw_entry: Any) -> Optional[QuizFileMetadata]:
        if isinstance(raw_entry, str):
            raw_entry = {'path': raw_entry, 'role': self.common_knowledge_tag, 'examQuestions': 0}
        if not isinstance(raw_entry, dict):
            return None

        path = raw_entry.get('path')
        role = raw_entry.get('role')
        exam_questions = raw_entry.get('examQuestions')

        if not isinstance(path, str) or not path.strip():
            return None
        if not has_supported_extension(path.strip(), MANIFEST_EXTENSIONS):
            return None
        if not isinstance(role, str) or not role.strip():
            return None
        if isinstance(exam_questions, bool) or not isinstance(exam_questions, int) or exam_questions < 0:
            return None

        return QuizFileMetadata(path=path.strip(), role=role.strip(), exam_questions=exam_questions)
