"""Current date/time tool, used by clients to compute relative ranges."""

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from mcp.types import CallToolResult

from ..context import ToolContext
from ..exceptions import invalid_params
from ..models.arguments import CurrentDatetimeArguments
from ..utils import date as date_utils
from .base import text_result, to_json

logger = logging.getLogger("sentry-sensei.handlers.datetime")


def resolve_timezone(name: str | None) -> tuple[timezone | ZoneInfo, str]:
    if not name:
        return timezone.utc, "UTC"
    try:
        return ZoneInfo(name), name
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise invalid_params(f"Unknown timezone: {name}") from e


def format_datetime(moment: datetime, output_format: str) -> str | int:
    if output_format == "unix":
        return int(moment.timestamp())
    if output_format == "readable":
        return moment.strftime("%A, %B %d, %Y at %I:%M:%S %p %Z")
    return moment.isoformat(timespec="seconds")


def datetime_info(
    now: datetime, output_format: str = "iso", timezone_name: str | None = None
) -> dict[str, object]:
    """Describe ``now`` in the requested timezone and format."""
    tz, resolved_name = resolve_timezone(timezone_name)
    local = now.astimezone(tz)
    utc = now.astimezone(timezone.utc)
    return {
        "currentDateTime": format_datetime(local, output_format),
        "timezone": resolved_name,
        "utcDateTime": utc.isoformat(timespec="seconds").replace("+00:00", "Z"),
        "unixTimestamp": int(now.timestamp()),
        "year": local.year,
        "month": local.month,
        "day": local.day,
        "hour": local.hour,
        "minute": local.minute,
        "second": local.second,
        "weekday": local.strftime("%A"),
        "dayOfYear": local.timetuple().tm_yday,
    }


async def get_current_datetime(
    arguments: CurrentDatetimeArguments, context: ToolContext
) -> CallToolResult:
    info = datetime_info(date_utils.utcnow(), arguments.format, arguments.timezone)
    logger.info(f"Current date/time: {info['currentDateTime']} ({info['timezone']})")

    text = f"""**Current Date/Time Information:**

**Primary:** {info['currentDateTime']} ({info['timezone']})
**UTC:** {info['utcDateTime']}
**Unix Timestamp:** {info['unixTimestamp']}

**Date Components:**
- Year: {info['year']}
- Month: {info['month']}
- Day: {info['day']}
- Day of Year: {info['dayOfYear']}
- Weekday: {info['weekday']}

**Time Components:**
- Hour: {info['hour']}
- Minute: {info['minute']}
- Second: {info['second']}

**Timezone:** {info['timezone']}

**Usage Notes:**
- Use this information for calculating relative dates (e.g., "last 2 days", "this week")
- For Sentry date ranges, use YYYY-MM-DDTHH:MM:SS format
- All dates are provided in {info['timezone']} timezone unless specified otherwise

**Full Details:**
{to_json(info)}"""
    return text_result(text)
