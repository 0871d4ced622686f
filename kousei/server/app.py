"""
Flask HTTP API for kousei.

Exposes linting and fix application over JSON:
POST /lint, POST /fix, GET /health, GET /rules and PUT /rules.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from ..core.config import LinterConfig
from ..core.errors import ConfigError, KouseiError
from ..core.models import Finding
from ..core.runner import LintRunner
from ..rules.registry import describe_rules

logger = logging.getLogger(__name__)

SERVICE_NAME = "kousei-api"


def create_app(config: Optional[LinterConfig] = None):
    """Create and configure the Flask application."""
    app = Flask(__name__)

    CORS(app)

    logging.basicConfig(level=logging.INFO)

    runner = LintRunner(config)
    app.config['KOUSEI_RUNNER'] = runner

    def read_text(data):
        text = data.get('text') if isinstance(data, dict) else None
        if not isinstance(text, str) or not text:
            return None
        return text

    @app.route('/lint', methods=['POST'])
    def lint():
        """Lint text and return the findings."""
        data = request.get_json(silent=True)
        text = read_text(data)
        if text is None:
            return jsonify({
                'success': False,
                'error': "Invalid request: 'text' field is required and must be a string"
            }), 400

        try:
            result = runner.lint_text(text, data.get('filePath'))
        except KouseiError as e:
            logger.error(f"Lint error: {e}")
            return jsonify({'success': False, 'error': str(e)}), 500

        return jsonify({'success': True, 'result': result.to_dict()})

    @app.route('/fix', methods=['POST'])
    def fix():
        """
        Apply fixes to text.

        Without findings the text is linted and every offered fix is applied.
        With findingIds only the findings carrying those ids are used.
        """
        data = request.get_json(silent=True)
        text = read_text(data)
        if text is None:
            return jsonify({
                'success': False,
                'error': "Invalid request: 'text' field is required and must be a string"
            }), 400

        findings_data = data.get('findings')
        try:
            if not isinstance(findings_data, list) or not findings_data:
                outcome = runner.fix_text(text, data.get('filePath'))
            else:
                finding_ids = data.get('findingIds')
                if isinstance(finding_ids, list):
                    findings_data = [f for f in findings_data if f.get('id') in finding_ids]
                findings = [Finding.from_dict(f) for f in findings_data]
                outcome = runner.fixer.apply(text, findings)
        except KouseiError as e:
            logger.error(f"Fix error: {e}")
            return jsonify({'success': False, 'error': str(e)}), 500
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            return jsonify({'success': False, 'error': f"Invalid findings: {e}"}), 400

        return jsonify({
            'success': True,
            'fixedText': outcome.text,
            'appliedFixes': outcome.applied
        })

    @app.route('/health')
    def health():
        """Health check."""
        return jsonify({
            'status': 'ok',
            'service': SERVICE_NAME,
            'timestamp': datetime.now(timezone.utc).isoformat()
        })

    @app.route('/rules')
    def rules():
        """Known rules and their effective settings."""
        return jsonify({'success': True, 'rules': describe_rules(runner.config)})

    @app.route('/rules', methods=['PUT'])
    def update_rules():
        """
        Update the rule configuration at runtime.

        The body uses the configuration file format; top-level keys it omits
        keep their current values.
        """
        data = request.get_json(silent=True)
        try:
            config = runner.update_config(data)
        except ConfigError as e:
            return jsonify({'success': False, 'error': f"Invalid configuration: {e}"}), 400

        return jsonify({'success': True, 'rules': describe_rules(config)})

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({'success': False, 'error': 'Endpoint not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        logger.error(f"Internal server error: {error}")
        return jsonify({'success': False, 'error': 'Internal server error'}), 500

    return app
