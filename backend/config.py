import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,http://127.0.0.1:3000',
        ).split(',') if o.strip()
    ]
    # Practice timing (seconds)
    SESSION_DURATION_SEC = int(os.environ.get('SESSION_DURATION_SEC', '600'))
    # Countdown recompute cadence (ms)
    TICK_INTERVAL_MS = int(os.environ.get('TICK_INTERVAL_MS', '250'))
    # Soft target is display-only; hard cap is enforced on every edit
    WORD_TARGET = int(os.environ.get('WORD_TARGET', '300'))
    HARD_MAX_WORDS = int(os.environ.get('HARD_MAX_WORDS', '350'))
    # How long a copy outcome stays visible (ms)
    COPY_OK_STATUS_MS = int(os.environ.get('COPY_OK_STATUS_MS', '1500'))
    COPY_FAIL_STATUS_MS = int(os.environ.get('COPY_FAIL_STATUS_MS', '2500'))
    # Webcam capture. 0 disables the device entirely (session still runs).
    CAPTURE_ENABLED = os.environ.get('CAPTURE_ENABLED', '1') not in ('0', 'false', 'False', '')
    CAPTURE_DEVICE_INDEX = int(os.environ.get('CAPTURE_DEVICE_INDEX', '0'))
    # Grace period before an abandoned session is torn down (seconds)
    OWNER_GRACE_SEC = float(os.environ.get('OWNER_GRACE_SEC', '2.0'))
    # Optional: debounce start requests (ms). 0 disables.
    START_DEBOUNCE_MS = int(os.environ.get('START_DEBOUNCE_MS', '0'))
    # Optional: heartbeat interval for countdown logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
