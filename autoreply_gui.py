#!/usr/bin/env python3
"""
Auto-Reply Bot GUI - Local Web Dashboard
========================================

A small Flask dashboard with three views:
- Dashboard: style profile, test auto-reply, recent transcript
- Train: paste messages, export/import backups
- Settings: reply delay, statistics, integration note
"""

from flask import Flask, render_template, request, jsonify, Response

from autoreply_engine import AutoReplyBot
from bot_session import BackupImportError, export_filename
from config import cfg

app = Flask(__name__)
app.secret_key = cfg.secret_key

# Global bot instance
bot = None


def get_bot() -> AutoReplyBot:
    """Create the bot once and reuse it."""
    global bot
    if bot is None:
        bot = AutoReplyBot()
    return bot


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _text_field(data: dict) -> str:
    """The ``text`` field, or an empty string when it is missing or not text."""
    text = data.get('text')
    return text if isinstance(text, str) else ''


def _state_payload(current: AutoReplyBot) -> dict:
    return {
        'success': True,
        'styleData': current.style_profile.to_dict(),
        'messages': [m.to_dict() for m in current.recent_messages()],
        'stats': current.stats(),
        'isActive': current.is_active,
        'replyDelay': current.reply_delay,
    }


@app.route('/')
def index():
    return render_template('index.html')


@app.route('/api/state')
def get_state():
    return jsonify(_state_payload(get_bot()))


@app.route('/api/train', methods=['POST'])
def train():
    profile = get_bot().train(_text_field(_json_body()))
    if profile is None:
        return jsonify(success=False)
    return jsonify(success=True, styleData=profile.to_dict())


@app.route('/api/toggle', methods=['POST'])
def toggle():
    return jsonify(success=True, isActive=get_bot().toggle())


@app.route('/api/test-message', methods=['POST'])
def test_message():
    current = get_bot()
    sent = current.send_test_message(_text_field(_json_body()))
    if sent is None:
        return jsonify(success=False)
    return jsonify(success=True,
                   message=sent.to_dict(),
                   replyExpected=current.is_active,
                   replyDelay=current.reply_delay)


@app.route('/api/settings', methods=['POST'])
def update_settings():
    data = _json_body()
    try:
        delay = get_bot().set_reply_delay(data.get('replyDelay'))
    except ValueError as e:
        return jsonify(success=False, error=str(e)), 400
    return jsonify(success=True, replyDelay=delay)


@app.route('/api/export')
def export_data():
    body = get_bot().export_backup()
    return Response(
        body,
        mimetype='application/json',
        headers={'Content-Disposition': f'attachment; filename={export_filename()}'}
    )


@app.route('/api/import', methods=['POST'])
def import_data():
    upload = request.files.get('file')
    if upload is None:
        return jsonify(success=False, error='No file provided'), 400
    try:
        state = get_bot().import_backup(upload.read())
    except BackupImportError as e:
        return jsonify(success=False, error=str(e)), 400
    return jsonify(success=True, messageCount=len(state.messages))


if __name__ == '__main__':
    print("🚀 Starting Auto-Reply Bot dashboard...")
    print(f"🌐 Open http://{cfg.host}:{cfg.port} in your browser")
    app.run(host=cfg.host, port=cfg.port, debug=cfg.debug)
