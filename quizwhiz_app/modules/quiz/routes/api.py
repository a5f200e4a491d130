# File: quizwhiz_app/modules/quiz/routes/api.py
# JSON API cho danh mục file, tải câu hỏi và phiên làm bài.

from flask import request, jsonify, current_app, session

from quizwhiz_app.core.error_handlers import InvalidInput, QuizWhizError, success_response
from quizwhiz_app.modules.scoring.interface import ScoringInterface
from .. import blueprint
from ..config import MODE_EXAM, MODE_TESTING, QuizLearningConfig
from ..interface import QuizInterface
from ..logics.session_logic import STATE_RESULTS, STATE_SETUP, QuizSessionManager


def _new_manager() -> QuizSessionManager:
    return QuizSessionManager(
        exam_duration_seconds=current_app.config.get(
            'QUIZ_EXAM_DURATION_SECONDS', QuizLearningConfig.QUIZ_EXAM_DURATION_SECONDS
        )
    )


def _load_manager() -> QuizSessionManager:
    data = session.get(QuizSessionManager.SESSION_KEY)
    if not data:
        return _new_manager()

    try:
        manager = QuizSessionManager.from_dict(data, resolve_questions=QuizInterface.resolve_questions)
    except QuizWhizError as exc:
        # Source file changed or disappeared since the attempt started
        current_app.logger.warning(f"Discarding quiz session that can no longer be restored: {exc.message}")
        session.pop(QuizSessionManager.SESSION_KEY, None)
        return _new_manager()

    if manager.state != STATE_SETUP and not manager.questions:
        current_app.logger.warning("Discarding quiz session without question references.")
        session.pop(QuizSessionManager.SESSION_KEY, None)
        return _new_manager()

    if manager.sync_clock():
        current_app.logger.info("Exam auto-submitted after the countdown ran out.")
    return manager


def _save_manager(manager: QuizSessionManager):
    session[QuizSessionManager.SESSION_KEY] = manager.to_dict()
    session.modified = True


def _serialize_state(manager: QuizSessionManager) -> dict:
    question = manager.current_question if manager.state != STATE_SETUP else None
    payload = {
        'state': manager.state,
        'mode': manager.mode,
        'source': manager.source,
        'total_questions': len(manager.questions),
        'current_index': manager.current_index,
        'answered_count': manager.answered_count,
        'current_answer': manager.answers[manager.current_index] if question else None,
        'time_remaining': manager.time_remaining,
        'auto_submitted': manager.auto_submitted,
        'can_go_next': manager.can_go_next(),
        'can_go_previous': manager.can_go_previous(),
        'can_submit': manager.can_submit(),
        'question': None,
        'feedback': None,
    }
    if question and manager.state != STATE_RESULTS:
        # Không gửi đáp án đúng về client khi đang làm bài
        payload['question'] = {
            'id': question.id,
            'question': question.question,
            'options': list(question.options),
        }
        payload['feedback'] = manager.feedback_for_current()
    return payload


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInput('Request body must be a JSON object.')
    return data


@blueprint.route('/api/roles', methods=['GET'])
def list_roles():
    return jsonify(success_response({'roles': QuizInterface.list_roles()}))


@blueprint.route('/api/files', methods=['GET'])
def list_quiz_files():
    """Danh sách file quiz, lọc theo vai trò nếu có."""
    role = request.args.get('role') or None
    files = QuizInterface.list_files(role)
    return jsonify(success_response({'files': [entry.to_dict() for entry in files]}))


@blueprint.route('/api/files/questions', methods=['GET'])
def get_file_questions():
    file_name = request.args.get('file', '').strip()
    if not file_name:
        raise InvalidInput('File name is required.')

    questions, stats = QuizInterface.load_questions_with_stats(file_name)
    return jsonify(success_response({
        'file': file_name,
        'question_count': len(questions),
        'stats': stats.to_dict(),
    }))


@blueprint.route('/api/session', methods=['GET'])
def get_session_state():
    manager = _load_manager()
    _save_manager(manager)
    return jsonify(success_response(_serialize_state(manager)))


@blueprint.route('/api/session/start', methods=['POST'])
def start_session():
    """Bắt đầu lượt làm bài mới: {mode, question_count, file | role}."""
    data = _json_body()
    mode = data.get('mode', MODE_TESTING)
    question_count = data.get(
        'question_count',
        current_app.config.get('QUIZ_DEFAULT_QUESTION_COUNT', QuizLearningConfig.QUIZ_DEFAULT_QUESTION_COUNT),
    )
    file_name = data.get('file')
    role = data.get('role')

    # Starting over from any state discards the previous attempt
    session.pop(QuizSessionManager.SESSION_KEY, None)
    manager = _new_manager()

    questions, sources = QuizInterface.start_quiz(question_count, mode, path=file_name, role=role)
    manager.start(questions, mode, sources=sources)
    manager.source = role if mode == MODE_EXAM else file_name
    _save_manager(manager)

    current_app.logger.info(f"Quiz session started: mode={mode}, source={manager.source}, questions={len(questions)}")
    return jsonify(success_response(_serialize_state(manager)))


@blueprint.route('/api/session/answer', methods=['POST'])
def select_answer():
    data = _json_body()
    manager = _load_manager()
    if manager.state == STATE_RESULTS:
        _save_manager(manager)
        return jsonify(success_response(_serialize_state(manager), message='Đã hết giờ, bài thi đã được nộp.'))

    manager.select_answer(data.get('index'))
    _save_manager(manager)
    return jsonify(success_response(_serialize_state(manager)))


@blueprint.route('/api/session/next', methods=['POST'])
def next_question():
    manager = _load_manager()
    moved = manager.next() if manager.state != STATE_RESULTS else False
    _save_manager(manager)
    return jsonify(success_response({'moved': moved, **_serialize_state(manager)}))


@blueprint.route('/api/session/previous', methods=['POST'])
def previous_question():
    manager = _load_manager()
    moved = manager.previous() if manager.state != STATE_RESULTS else False
    _save_manager(manager)
    return jsonify(success_response({'moved': moved, **_serialize_state(manager)}))


@blueprint.route('/api/session/submit', methods=['POST'])
def submit_session():
    manager = _load_manager()
    if manager.state != STATE_RESULTS:
        manager.submit()
    _save_manager(manager)
    return jsonify(success_response(_results_payload(manager)))


@blueprint.route('/api/session/results', methods=['GET'])
def get_results():
    manager = _load_manager()
    _save_manager(manager)
    if manager.state != STATE_RESULTS:
        raise InvalidInput('The quiz has not been submitted yet.')
    return jsonify(success_response(_results_payload(manager)))


@blueprint.route('/api/session/retake', methods=['POST'])
def retake_session():
    manager = _load_manager()
    manager.retake()
    _save_manager(manager)
    return jsonify(success_response(_serialize_state(manager)))


def _results_payload(manager: QuizSessionManager) -> dict:
    results = ScoringInterface.build_results(manager.questions, manager.answers)
    results.update({
        'mode': manager.mode,
        'source': manager.source,
        'auto_submitted': manager.auto_submitted,
        'answers': list(manager.answers),
    })
    return results
