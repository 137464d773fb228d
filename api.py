"""
Flask REST API for GlassCalc
Exposes calculator commands and display state as JSON endpoints
"""
from flask import Flask, jsonify, request
from flask_cors import CORS
from calculator import Calculator, UnknownCommandError
from evaluator import Err, Ok, evaluate
from logging_config import get_logger
import config
import keymap

logger = get_logger("api")

app = Flask(__name__)
CORS(app)  # Enable CORS for all routes

# Initialize components
calculator = Calculator()


def _display_payload():
    state = calculator.display_state()
    return {
        'text': state.text,
        'mode': state.mode.value,
        'expiry_ms': state.expiry_ms,
        'memory_active': state.memory_active,
        'state': calculator.state.value,
        'expression': calculator.get_expression(),
        'memory': calculator.memory,
        'last_result': calculator.last_result,
    }


def _json_body():
    """Return the request JSON object, or None when the body is not an object"""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    return body if isinstance(body, dict) else None


def _bad_request(message):
    return jsonify({'success': False, 'error': message}), 400


def _outcome_payload(outcome):
    if isinstance(outcome, Ok):
        return {'ok': True, 'value': outcome.value}
    if isinstance(outcome, Err):
        return {'ok': False, 'error': outcome.kind.value}
    return None


@app.route('/api')
def api_info():
    """API information page"""
    commands = "".join(f"<li>{name}</li>" for name in Calculator.COMMANDS)
    return f"""
    <html>
    <head><title>{config.APP_NAME} API</title></head>
    <body style="font-family: Arial; padding: 40px; background: #2D2A4A; color: white;">
        <h1>{config.APP_NAME} API Server</h1>
        <h2>Available Endpoints:</h2>
        <ul>
            <li>GET /api/display - Current display state</li>
            <li>POST /api/command/&lt;name&gt; - Run a command (JSON body: {{"token": "5"}} for append)</li>
            <li>POST /api/key - Press a key (JSON body: {{"key": "Enter"}})</li>
            <li>POST /api/evaluate - Evaluate an expression (JSON body: {{"expression": "2+2"}})</li>
        </ul>
        <h2>Commands:</h2>
        <ul>{commands}</ul>
    </body>
    </html>
    """


@app.route('/api/display')
def get_display():
    """Get the current display state"""
    try:
        return jsonify({'success': True, 'data': _display_payload()})
    except Exception as e:
        logger.exception("Failed to read display")
        return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/api/command/<name>', methods=['POST'])
def run_command(name):
    """Run a named calculator command"""
    try:
        body = _json_body()
        if body is None:
            return _bad_request("JSON body must be an object")
        outcome = calculator.dispatch(name, body.get('token'))
        return jsonify({
            'success': True,
            'data': {
                'display': _display_payload(),
                'outcome': _outcome_payload(outcome),
            }
        })
    except UnknownCommandError:
        return jsonify({'success': False, 'error': f"Unknown command: {name}"}), 404
    except Exception as e:
        logger.exception("Command %s failed", name)
        return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/api/key', methods=['POST'])
def press_key():
    """Press a keyboard key"""
    try:
        body = _json_body()
        if body is None:
            return _bad_request("JSON body must be an object")
        key = body.get('key')
        if not isinstance(key, str):
            return _bad_request("key must be a string")
        if not keymap.handle_key(calculator, key):
            return _bad_request(f"Unmapped key: {key}")
        return jsonify({'success': True, 'data': _display_payload()})
    except Exception as e:
        logger.exception("Key press failed")
        return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/api/evaluate', methods=['POST'])
def evaluate_expression():
    """Evaluate an expression without touching calculator state"""
    try:
        body = _json_body()
        if body is None:
            return _bad_request("JSON body must be an object")
        expression = body.get('expression', '')
        if not isinstance(expression, str):
            return _bad_request("expression must be a string")
        return jsonify({'success': True, 'data': _outcome_payload(evaluate(expression))})
    except Exception as e:
        logger.exception("Evaluation request failed")
        return jsonify({'success': False, 'error': str(e)}), 500
