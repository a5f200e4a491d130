# File: quizwhiz_app/modules/quiz/config.py

MODE_LEARNING = 'learning'
MODE_TESTING = 'testing'
MODE_EXAM = 'exam'


class QuizLearningConfig:
    """
    Cấu hình mặc định cho module Quiz.
    Giá trị trong app.config (QUIZ_*) được ưu tiên khi có.
    """
    QUIZ_DEFAULT_QUESTION_COUNT = 10
    QUIZ_EXAM_DURATION_SECONDS = 7200
    QUIZ_EXAM_MAX_WORKERS = 4
    QUIZ_MANIFEST_FILE = 'quiz-files.json'
    QUIZ_COMMON_KNOWLEDGE_TAG = 'Kiến thức chung'
    QUIZ_ROLES = ['Kế toán', 'Kiểm ngân', 'Tín dụng', 'Quản lý']

    QUIZ_MODES = [
        {'id': MODE_TESTING, 'name': 'Kiểm tra', 'description': 'Answers revealed at the end.'},
        {'id': MODE_LEARNING, 'name': 'Học tập', 'description': 'Immediate feedback per question.'},
        {'id': MODE_EXAM, 'name': 'Thi thử', 'description': 'Timed exam drawn from every file of a role.'},
    ]

    # Navigation rules per mode: whether "next" needs an answer on the
    # current question, and whether going back is offered at all.
    NAVIGATION_POLICY = {
        MODE_LEARNING: {'forward_requires_answer': True, 'allow_backward': False},
        MODE_TESTING: {'forward_requires_answer': True, 'allow_backward': True},
        MODE_EXAM: {'forward_requires_answer': True, 'allow_backward': True},
    }


def mode_ids():
    return [mode['id'] for mode in QuizLearningConfig.QUIZ_MODES]
