import pytest

from app.config import DEFAULT_MAX_UPLOAD_BYTES, intake_settings_from_env


@pytest.mark.unit
def test_defaults_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("AIRTABLE_PAT", "AIRTABLE_BASE_ID", "SMTP_USER", "BREVO_API_KEY", "SPACES_BUCKET", "MAX_UPLOAD_BYTES"):
        monkeypatch.delenv(name, raising=False)

    settings = intake_settings_from_env()

    assert settings.max_upload_bytes == DEFAULT_MAX_UPLOAD_BYTES
    assert settings.airtable.enabled is False
    assert settings.spaces.enabled is False
    assert settings.tables.apps_table == "Applications"
    assert settings.tables.uw_email_field == "submission email"
    assert settings.email.smtp_host == "smtp-relay.brevo.com"
    assert settings.email.smtp_port == 587


@pytest.mark.unit
def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AIRTABLE_PAT", "pat")
    monkeypatch.setenv("AIRTABLE_BASE_ID", "appX")
    monkeypatch.setenv("UW_CLASS_FIELD", "category")
    monkeypatch.setenv("SMTP_PORT", "not-a-number")
    monkeypatch.setenv("OVERRIDE_NOTIFICATION_EMAIL", "  qa@staging.example ")
    monkeypatch.setenv("AIRTABLE_APPLICANTS_TABLE_ID", "   ")

    settings = intake_settings_from_env()

    assert settings.airtable.enabled is True
    assert settings.tables.uw_class_field == "category"
    assert settings.tables.applicants_table is None
    assert settings.email.smtp_port == 587
    assert settings.email.override_notification_email == "qa@staging.example"
