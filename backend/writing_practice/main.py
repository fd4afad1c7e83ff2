from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    cfg = current_app.config
    return jsonify({
        'message': 'Timed Written Response Practice',
        'duration_sec': int(cfg.get('SESSION_DURATION_SEC', 600)),
        'word_target': int(cfg.get('WORD_TARGET', 300)),
        'hard_max_words': int(cfg.get('HARD_MAX_WORDS', 350)),
    })
