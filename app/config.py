from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_MAX_UPLOAD_BYTES = 20 * 1024 * 1024


@dataclass(frozen=True)
class AirtableSettings:
    pat: str | None = None
    base_id: str | None = None
    api_url: str = "https://api.airtable.com/v0"

    @property
    def enabled(self) -> bool:
        return bool(self.pat and self.base_id)


@dataclass(frozen=True)
class TableSettings:
    """Table ids/names and field names; every field name is configurable."""

    apps_table: str = "Applications"
    applicants_table: str | None = None
    underwriters_table: str | None = None
    categories_table: str = "Categories"
    apps_email_field: str = "Submitted By Email"
    apps_class_field: str = "Class of Business"
    apps_notes_field: str = "More Information"
    apps_file_field: str = "Uploaded File"
    applicants_email_field: str = "Email"
    applicants_class_field: str = "Class of Business"
    category_name_field: str = "Name"
    uw_class_field: str = "class"
    uw_class_link_field: str = "class id"
    uw_email_field: str = "submission email"


@dataclass(frozen=True)
class EmailSettings:
    brevo_api_key: str | None = None
    brevo_api_url: str = "https://api.brevo.com/v3/smtp/email"
    smtp_host: str = "smtp-relay.brevo.com"
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_pass: str | None = None
    smtp_from: str | None = None
    smtp_from_name: str | None = None
    override_notification_email: str | None = None

    @property
    def smtp_enabled(self) -> bool:
        return bool(self.smtp_user and self.smtp_pass and self.smtp_from)


@dataclass(frozen=True)
class SpacesSettings:
    endpoint: str | None = None
    region: str = "us-east-1"
    bucket: str | None = None
    key: str | None = None
    secret: str | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.endpoint and self.bucket and self.key and self.secret)


@dataclass(frozen=True)
class IntakeSettings:
    host: str = "0.0.0.0"
    port: int = 8080
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    airtable: AirtableSettings = field(default_factory=AirtableSettings)
    tables: TableSettings = field(default_factory=TableSettings)
    email: EmailSettings = field(default_factory=EmailSettings)
    spaces: SpacesSettings = field(default_factory=SpacesSettings)


def intake_settings_from_env() -> IntakeSettings:
    return IntakeSettings(
        host=os.getenv("APP_HOST", "0.0.0.0"),
        port=_env_int("APP_PORT", 8080),
        max_upload_bytes=_env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
        airtable=AirtableSettings(
            pat=_env_str("AIRTABLE_PAT"),
            base_id=_env_str("AIRTABLE_BASE_ID"),
            api_url=os.getenv("AIRTABLE_API_URL", "https://api.airtable.com/v0"),
        ),
        tables=TableSettings(
            apps_table=os.getenv("AIRTABLE_APPS_TABLE", "Applications"),
            applicants_table=_env_str("AIRTABLE_APPLICANTS_TABLE_ID"),
            underwriters_table=_env_str("AIRTABLE_UNDERWRITERS_TABLE_ID"),
            categories_table=os.getenv("AIRTABLE_CATEGORIES_TABLE", "Categories"),
            apps_email_field=os.getenv("APPS_EMAIL_FIELD", "Submitted By Email"),
            apps_class_field=os.getenv("APPS_CLASS_FIELD", "Class of Business"),
            apps_notes_field=os.getenv("APPS_NOTES_FIELD", "More Information"),
            apps_file_field=os.getenv("APPS_FILE_FIELD", "Uploaded File"),
            applicants_email_field=os.getenv("APPLICANTS_EMAIL_FIELD", "Email"),
            applicants_class_field=os.getenv("APPLICANTS_CLASS_FIELD", "Class of Business"),
            category_name_field=os.getenv("CATEGORY_NAME_FIELD", "Name"),
            uw_class_field=os.getenv("UW_CLASS_FIELD", "class"),
            uw_class_link_field=os.getenv("UW_CLASS_LINK_FIELD", "class id"),
            uw_email_field=os.getenv("UW_EMAIL_FIELD", "submission email"),
        ),
        email=EmailSettings(
            brevo_api_key=_env_str("BREVO_API_KEY"),
            brevo_api_url=os.getenv("BREVO_API_URL", "https://api.brevo.com/v3/smtp/email"),
            smtp_host=os.getenv("SMTP_HOST", "smtp-relay.brevo.com"),
            smtp_port=_env_int("SMTP_PORT", 587),
            smtp_user=_env_str("SMTP_USER"),
            smtp_pass=_env_str("SMTP_PASS"),
            smtp_from=_env_str("SMTP_FROM"),
            smtp_from_name=_env_str("SMTP_FROM_NAME"),
            override_notification_email=_env_str("OVERRIDE_NOTIFICATION_EMAIL"),
        ),
        spaces=SpacesSettings(
            endpoint=_env_str("SPACES_ENDPOINT"),
            region=os.getenv("SPACES_REGION", "us-east-1"),
            bucket=_env_str("SPACES_BUCKET"),
            key=_env_str("SPACES_KEY"),
            secret=_env_str("SPACES_SECRET"),
        ),
    )


def _env_str(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default

    try:
        parsed = int(value)
    except ValueError:
        return default

    return parsed if parsed > 0 else default
