"""
Alpha Visa Diagnosis - Flask Web Application

Eligibility self-assessment for the Spanish international-teleworker visa.
Branching questionnaire, eligibility score and Claude-written analysis.
"""

import os
import sys
import logging
from datetime import datetime
from flask import Flask, request, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import get_config
from src.database.models import (
    db, Diagnosis, generate_access_code, generate_uuid,
    OUTCOME_COMPLETED, OUTCOME_DISQUALIFIED
)
from src.ai_core.claude_client import AnalysisClient
from src.assessment.assessment_engine import ScoringEngine, build_penalty_rules
from src.assessment.consistency import check_configuration
from src.assessment.errors import ConfigurationError, InvalidInputError
from src.assessment.flow import Completed, Disqualified, FlowEngine
from src.assessment.questions import QUESTIONS, check_answers
from src.assessment.translations import SUPPORTED_LOCALES, resolve_locale

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

CTA_RECOMMENDED = 'oracle'
ANSWER_KEYS = ('index', 'id', 'optionIndex', 'value')
ACCESS_CODE_ATTEMPTS = 10


# =============================================================================
# Request helpers
# =============================================================================

def normalize_answer(raw):
    """
    Reduce a client answer to an option index.

    Accepts a bare int, a numeric string, or an object carrying the index
    under one of ANSWER_KEYS.
    """
    if isinstance(raw, bool):
        raise InvalidInputError("responseData must be an option index")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        digits = text[1:] if text.startswith('-') else text
        if digits.isdecimal():
            return int(text)
    if isinstance(raw, dict):
        for key in ANSWER_KEYS:
            if key in raw and not isinstance(raw[key], dict):
                return normalize_answer(raw[key])
    raise InvalidInputError(f"Cannot read an option index from responseData {raw!r}")


def _unique_access_code():
    for _ in range(ACCESS_CODE_ATTEMPTS):
        code = generate_access_code()
        if not Diagnosis.query.filter_by(access_code=code).first():
            return code
    raise RuntimeError("Could not generate a unique access code")


def _report_payload(diagnosis):
    report = diagnosis.report or {}
    return {
        'success': True,
        'score': diagnosis.score,
        'status': diagnosis.status,
        'statusKey': diagnosis.status_key,
        'statusColor': diagnosis.status_color,
        'profile': report.get('profile'),
        'gaps': report.get('gaps', []),
        'strengths': report.get('strengths', []),
        'aiAnalysis': diagnosis.ai_analysis,
        'accessCode': diagnosis.access_code,
        'outcome': diagnosis.outcome,
        'reasonCode': diagnosis.disqualification_reason,
        'ctaRecommended': diagnosis.cta_recommended,
        'completedAt': diagnosis.completed_at.isoformat() if diagnosis.completed_at else None
    }


# =============================================================================
# App Factory
# =============================================================================

def create_app(config_class=None):
    """Create Flask application"""
    app = Flask(__name__)

    # Load configuration
    if config_class is None:
        config_class = get_config()
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)

    # Rate limiting
    limiter = Limiter(
        key_func=get_remote_address,
        app=app,
        default_limits=[app.config['RATELIMIT_DEFAULT']]
    )
    # Route limits only hold a weak reference to the limiter
    app.limiter = limiter

    default_locale = app.config['DEFAULT_LOCALE']
    if default_locale not in SUPPORTED_LOCALES:
        raise ConfigurationError(f"DEFAULT_LOCALE {default_locale!r} is not one of {SUPPORTED_LOCALES}")

    # Engines share the static tables; refuse to start if they disagree
    flow = FlowEngine(total_steps=app.config['PROGRESS_TOTAL_STEPS'])
    scoring = ScoringEngine(
        penalty_rules=build_penalty_rules(app.config['HEALTH_INSURANCE_PENALTY'])
    )
    check_configuration(penalty_rules=scoring.penalty_rules)

    app.extensions['alpha_diagnosis'] = {
        'flow': flow,
        'scoring': scoring,
        'analysis': AnalysisClient(
            api_key=app.config.get('ANTHROPIC_API_KEY'),
            model=app.config.get('CLAUDE_MODEL')
        ),
    }

    # Create tables
    with app.app_context():
        db.create_all()
        logger.info("Database tables created")

    def _locale(data, diagnosis=None):
        requested = data.get('language')
        if not requested and diagnosis is not None:
            requested = diagnosis.language
        return resolve_locale(requested, default=default_locale)

    def _load_session(session_id, lock=False):
        query = Diagnosis.query.filter_by(session_id=session_id)
        if lock:
            # Serialises concurrent answers to the same session
            query = query.with_for_update()
        return query.first()

    # =============================================================================
    # Routes
    # =============================================================================

    @app.route('/health')
    def health():
        """Liveness probe"""
        return jsonify({
            'status': 'ok',
            'timestamp': datetime.utcnow().isoformat(),
            'environment': os.environ.get('FLASK_ENV', 'development')
        })

    @app.route('/api/questions', methods=['GET'])
    def api_list_questions():
        """Question catalog for one locale"""
        locale = resolve_locale(request.args.get('locale'), default=default_locale)
        return jsonify({
            'locale': locale,
            'questions': [
                {
                    'id': q.id,
                    'text': q.prompt(locale),
                    'options': [{'index': i, 'label': label} for i, label in enumerate(q.labels(locale))]
                }
                for q in QUESTIONS
            ]
        })

    @app.route('/api/diagnose', methods=['POST'])
    @limiter.limit("30 per minute")
    def api_diagnose():
        """Single entry point for the questionnaire client"""
        data = request.get_json(silent=True) or {}
        action = data.get('action')

        if action == 'START':
            return _start(data)
        if action == 'RESPONSE':
            return _respond(data)
        if action == 'GENERATE_REPORT':
            return _generate_report(data)

        return jsonify({'error': f'Invalid action: {action!r}'}), 400

    def _start(data):
        user_data = data.get('userData') or {}
        email = (user_data.get('email') or '').strip()
        if not email:
            return jsonify({'error': 'userData.email is required'}), 400

        locale = _locale(data)
        step = flow.first_step(locale)

        diagnosis = Diagnosis(
            session_id=generate_uuid(),
            access_code=_unique_access_code(),
            email=email,
            first_name=user_data.get('firstName'),
            last_name=user_data.get('lastName'),
            whatsapp=user_data.get('whatsapp'),
            passport_country=user_data.get('passportCountry'),
            language=locale,
            current_step_id=step.question_id,
            answers={}
        )
        db.session.add(diagnosis)
        db.session.commit()

        logger.info(f"Diagnosis started: session={diagnosis.session_id} code={diagnosis.access_code}")

        return jsonify({
            'success': True,
            'sessionId': diagnosis.session_id,
            'accessCode': diagnosis.access_code,
            **step.to_dict(flow.progress({}))
        })

    def _respond(data):
        session_id = data.get('sessionId')
        if not session_id:
            return jsonify({'error': 'sessionId is required'}), 400

        diagnosis = _load_session(session_id, lock=True)
        if diagnosis is None:
            return jsonify({'error': 'Session not found'}), 404
        if diagnosis.is_finished:
            db.session.rollback()
            return jsonify({'error': 'Diagnosis already finished'}), 400

        question_id = diagnosis.current_step_id
        answer = normalize_answer(data.get('responseData'))
        check_answers({question_id: answer})
        diagnosis.record_answer(question_id, answer)

        locale = _locale(data, diagnosis)
        answers = dict(diagnosis.answers)
        step = flow.advance(question_id, answers, locale)

        if isinstance(step, Disqualified):
            diagnosis.finish(OUTCOME_DISQUALIFIED, step.reason_code)
            logger.info(f"Diagnosis {session_id} disqualified: {step.reason_code}")
        elif isinstance(step, Completed):
            diagnosis.finish(OUTCOME_COMPLETED)
            logger.info(f"Diagnosis {session_id} completed after {len(answers)} answers")
        else:
            diagnosis.current_step_id = step.question_id
            logger.info(f"Diagnosis {session_id}: {question_id}={answer} -> {step.question_id}")

        db.session.commit()

        return jsonify({
            'success': True,
            'completed': step.is_terminal,
            **step.to_dict(flow.progress(answers))
        })

    def _generate_report(data):
        session_id = data.get('sessionId')
        if not session_id:
            return jsonify({'error': 'sessionId is required'}), 400

        diagnosis = _load_session(session_id, lock=True)
        if diagnosis is None:
            return jsonify({'error': 'Session not found'}), 404
        if not diagnosis.is_finished:
            db.session.rollback()
            return jsonify({'error': 'Diagnosis is not finished yet'}), 400
        if diagnosis.has_report:
            db.session.rollback()
            return jsonify(_report_payload(diagnosis))

        locale = _locale(data, diagnosis)
        result = scoring.score(diagnosis.answers or {}, locale)
        analysis = app.extensions['alpha_diagnosis']['analysis'].generate_analysis(result)

        diagnosis.score = result.score
        diagnosis.status = result.status
        diagnosis.status_key = result.status_key
        diagnosis.status_color = result.status_color
        diagnosis.report = result.to_dict()
        diagnosis.ai_analysis = analysis.text
        diagnosis.cta_recommended = CTA_RECOMMENDED
        diagnosis.completed_at = datetime.utcnow()
        db.session.commit()

        logger.info(
            f"Report generated: session={session_id} score={result.score} "
            f"status={result.status_key} analysis={analysis.source}"
        )

        return jsonify(_report_payload(diagnosis))

    @app.route('/api/diagnoses/<access_code>', methods=['GET'])
    def api_get_diagnosis(access_code):
        """Stored report by access code"""
        diagnosis = Diagnosis.query.filter_by(access_code=access_code.strip().upper()).first()
        if diagnosis is None or not diagnosis.has_report:
            return jsonify({'error': 'Diagnosis not found'}), 404
        return jsonify(_report_payload(diagnosis))

    # =============================================================================
    # Error Handlers
    # =============================================================================

    @app.errorhandler(InvalidInputError)
    def invalid_input(e):
        db.session.rollback()
        logger.info(f"Rejected request: {e}")
        return jsonify({'error': str(e)}), 400

    @app.errorhandler(ConfigurationError)
    def configuration_error(e):
        db.session.rollback()
        logger.error(f"Configuration error: {e}")
        return jsonify({'error': 'Internal server error'}), 500

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f"Server error: {e}")
        return jsonify({'error': 'Internal server error'}), 500

    return app


# =============================================================================
# Main
# =============================================================================

if __name__ == '__main__':
    app = create_app()
    port = int(os.environ.get('PORT', 5000))
    debug = os.environ.get('FLASK_DEBUG', 'True').lower() == 'true'
    app.run(debug=debug, port=port, host='0.0.0.0')
