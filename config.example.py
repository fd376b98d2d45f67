# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from TASKIFY_* environment variables
(optionally via a local .env file). Keep Matrix credentials in .env, which is
gitignored.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKIFY_APP_NAME": "App display name (default: taskify).",
    "TASKIFY_LOG_LEVEL": "Console logging level (default: INFO).",
    # Shared store
    "TASKIFY_DATA_DIR": "Local data directory (default: .local/taskify).",
    "TASKIFY_STORE_PATH": "Shared store SQLite path (default: <data_dir>/shared_prefs.sqlite3).",
    "TASKIFY_STORE_NAMESPACE": "Store namespace both processes agree on (default: FlutterSharedPreferences).",
    "TASKIFY_TASKS_KEY": "Key holding the task snapshot (default: flutter.widget_tasks).",
    "TASKIFY_LANGUAGE_KEY": "Key holding the app language (default: flutter.app_language).",
    "TASKIFY_DEFAULT_LANGUAGE": "Locale used when none is stored or it is unsupported (default: bg).",
    # Widget
    "TASKIFY_WIDGET_SURFACES_DIR": "Directory of placed widget surfaces (default: <data_dir>/widgets).",
    "TASKIFY_WIDGET_CAPACITY": "Rows per widget (default: 3).",
    "TASKIFY_WIDGET_REFRESH_SECONDS": "Scheduled refresh interval (default: 1800).",
    # Notifications
    "TASKIFY_NOTIFICATION_TITLE": "Title used when a push has none (default: localized 'Reminder').",
    "TASKIFY_NOTIFICATION_BODY": "Body used when a push has none (default: localized placeholder).",
    "TASKIFY_NOTIFICATION_TAG": "Tag used when a push carries no taskId (default: task-reminder).",
    "TASKIFY_NOTIFICATION_ICON": "Icon and badge path (default: /icons/Icon-192.png).",
    "TASKIFY_APP_URL": "URL opened on notification click when no window exists (default: /).",
    # Connectors
    "TASKIFY_CONSOLE_ENABLED": "Enable console host (true/false).",
    "TASKIFY_MATRIX_ENABLED": "Receive pushes from Matrix rooms (true/false).",
    # Matrix
    "TASKIFY_MATRIX_HOMESERVER": "Matrix homeserver URL.",
    "TASKIFY_MATRIX_USER_ID": "Matrix user ID receiving pushes.",
    "TASKIFY_MATRIX_PASSWORD": "Password for first login (session stored locally).",
    "TASKIFY_MATRIX_ROOMS": "Optional allowlist of room IDs (empty => all rooms).",
    "TASKIFY_MATRIX_STORE_PATH": "Matrix store path (default: <data_dir>/matrix_store).",
}
