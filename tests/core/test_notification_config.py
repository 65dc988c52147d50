import json

from packages.core.notifications.config import (
    NotificationSettings,
    load_notification_settings,
    save_notification_settings,
    validate_notification_settings,
)


def test_missing_settings_file_gives_defaults(tmp_path):
    settings = load_notification_settings(str(tmp_path / "missing.json"))

    assert settings == NotificationSettings()
    assert settings.lead_minutes == 15


def test_settings_are_persisted(tmp_path):
    path = str(tmp_path / "nested" / "notifications.json")
    settings = NotificationSettings(email_enabled=True, email_address="owner@example.com")

    save_notification_settings(settings, path)

    assert load_notification_settings(path) == settings


def test_unknown_keys_are_ignored(tmp_path):
    path = tmp_path / "notifications.json"
    path.write_text(json.dumps({"push_enabled": True, "theme": "dark"}), encoding="utf-8")

    assert load_notification_settings(str(path)) == NotificationSettings(push_enabled=True)


def test_validation_reports_problems():
    assert validate_notification_settings(NotificationSettings()) == [
        "no notification channel is enabled"
    ]

    issues = validate_notification_settings(
        NotificationSettings(email_enabled=True, email_address="nope", sms_enabled=True)
    )
    assert "invalid email address: nope" in issues
    assert "sms notifications need a phone number and a gateway domain" in issues

    assert validate_notification_settings(NotificationSettings(push_enabled=True)) == []
