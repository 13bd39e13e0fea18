from __future__ import annotations

from datetime import date, datetime, timezone as dt_timezone

import pytz
from flask import current_app, has_app_context

DEFAULT_TIMEZONE = "UTC"


class TimezoneUtils:
    """Timezone helpers shared by models, services and API serializers."""

    @staticmethod
    def validate_timezone(tz_name: str | None) -> bool:
        """Return True when the timezone string exists in pytz."""
        return bool(tz_name) and tz_name in pytz.all_timezones_set

    @staticmethod
    def _get_timezone(tz_name: str):
        if not TimezoneUtils.validate_timezone(tz_name):
            raise ValueError(f"Invalid timezone: {tz_name}")
        return pytz.timezone(tz_name)

    @staticmethod
    def utc_now() -> datetime:
        """Return the current UTC timestamp (timezone aware)."""
        return datetime.now(dt_timezone.utc)

    @staticmethod
    def business_timezone() -> str:
        """Timezone the shops and the factory plan their days in."""
        candidate = DEFAULT_TIMEZONE
        if has_app_context():
            candidate = current_app.config.get("BUSINESS_TIMEZONE") or DEFAULT_TIMEZONE
        return candidate if TimezoneUtils.validate_timezone(candidate) else DEFAULT_TIMEZONE

    @staticmethod
    def business_today(tz_name: str | None = None) -> date:
        """Calendar date 'today' in the business timezone."""
        tz = TimezoneUtils._get_timezone(tz_name or TimezoneUtils.business_timezone())
        return TimezoneUtils.utc_now().astimezone(tz).date()

    @staticmethod
    def ensure_timezone_aware(
        dt: datetime | None, assume_utc: bool = True
    ) -> datetime | None:
        """Guarantee that a datetime carries timezone information."""
        if dt is None:
            return None
        if dt.tzinfo is None:
            if not assume_utc:
                raise ValueError("Naive datetime provided without explicit timezone handling.")
            return dt.replace(tzinfo=dt_timezone.utc)
        return dt

    @staticmethod
    def format_datetime_for_api(dt: datetime | None) -> str | None:
        """ISO-8601 UTC string; naive values are treated as UTC."""
        aware = TimezoneUtils.ensure_timezone_aware(dt)
        if aware is None:
            return None
        return aware.astimezone(dt_timezone.utc).isoformat()

    @staticmethod
    def format_date_for_api(value: date | datetime | None) -> str | None:
        if value is None:
            return None
        if isinstance(value, datetime):
            value = TimezoneUtils.ensure_timezone_aware(value).astimezone(dt_timezone.utc).date()
        return value.isoformat()

    @staticmethod
    def parse_api_date(raw: str | None) -> date | None:
        """Parse YYYY-MM-DD (or a full ISO timestamp) into a calendar date."""
        if raw is None:
            return None
        text = str(raw).strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
