# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TRACKER_APP_NAME": "App display name (default: task-tracker).",
    "TRACKER_LOG_LEVEL": "Console logging level (default: WARNING). The log file always gets DEBUG.",
    # Storage
    "TRACKER_STORAGE": "memory | file (default: file).",
    "TRACKER_DATA_DIR": "Local data directory (default: .local/tracker).",
    "TRACKER_TASKS_FILE": "Tasks JSON file (default: <data_dir>/tasks.json).",
    "TRACKER_PROJECTS_FILE": "Projects JSON file (default: <data_dir>/projects.json).",
    # Notifications
    "TRACKER_NOTIFIERS": "Comma/space separated channels: console email slack sms matrix (default: console).",
    "TRACKER_DUE_SOON_HOURS": "Horizon for /remind when no hours are given (default: 24).",
    "TRACKER_HTTP_TIMEOUT": "Timeout in seconds for SMTP/webhook calls (default: 10).",
    # Email
    "TRACKER_SMTP_HOST": "SMTP host (default: localhost).",
    "TRACKER_SMTP_PORT": "SMTP port (default: 25).",
    "TRACKER_SMTP_USER": "Optional SMTP login.",
    "TRACKER_SMTP_PASSWORD": "Optional SMTP password.",
    "TRACKER_SMTP_STARTTLS": "Use STARTTLS (true/false).",
    "TRACKER_EMAIL_FROM": "Sender address.",
    "TRACKER_EMAIL_TO": "Comma/space separated recipients.",
    # Webhooks
    "TRACKER_SLACK_WEBHOOK_URL": "Slack incoming-webhook URL.",
    "TRACKER_SMS_GATEWAY_URL": "HTTP SMS gateway endpoint (receives {to, message}).",
    "TRACKER_SMS_TO": "Destination phone number.",
    # Matrix
    "TRACKER_MATRIX_HOMESERVER": "Matrix homeserver URL.",
    "TRACKER_MATRIX_USER_ID": "Matrix user ID (bot).",
    "TRACKER_MATRIX_PASSWORD": "Password for first login (session stored locally).",
    "TRACKER_MATRIX_ROOM_ID": "Room that receives notifications (unencrypted).",
    "TRACKER_MATRIX_STORE_PATH": "Where session.json lives (default: <data_dir>/matrix_store).",
}
