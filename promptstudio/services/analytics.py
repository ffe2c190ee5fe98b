"""
Analytics - best-effort event logging and the admin aggregates built on it.

log_event never raises: a failed insert is logged and the request carries on.
"""
import json
import logging
import re
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from user_agents import parse as parse_ua

from promptstudio.models import Event
from promptstudio.utils.clock import utcnow
from promptstudio.utils.constants import (
    ANALYTICS_DEFAULT_DAYS,
    EVENT_FRAMEWORK_VIEW,
    EVENT_PROMPT_GENERATE,
)

logger = logging.getLogger(__name__)

BOT_PATTERN = re.compile(r"bot|crawler|spider|scraper|curl|wget|python-requests", re.IGNORECASE)

TIME_OF_DAY_PERIODS = (
    "Morning (6am-12pm)",
    "Afternoon (12pm-6pm)",
    "Evening (6pm-12am)",
    "Night (12am-6am)",
)

BROWSER_TOP_N = 10


@dataclass(frozen=True)
class DeviceInfo:
    device_type: str  # mobile | tablet | desktop | bot | unknown
    browser: Optional[str] = None
    os: Optional[str] = None


def _describe(family: str, version: str) -> Optional[str]:
    if not family or family == "Other":
        return None
    return f"{family} {version}" if version else family


def parse_user_agent(user_agent: Optional[str]) -> DeviceInfo:
    """Classify a user-agent string into device type, browser and OS."""
    if not user_agent:
        return DeviceInfo(device_type="unknown")

    ua = parse_ua(user_agent)
    browser = _describe(ua.browser.family, ua.browser.version_string)
    os_name = _describe(ua.os.family, ua.os.version_string)

    if ua.is_tablet:
        device_type = "tablet"
    elif ua.is_mobile:
        device_type = "mobile"
    elif browser or os_name:
        device_type = "desktop"
    else:
        device_type = "unknown"

    # ua-parser misses plain HTTP clients such as curl
    if ua.is_bot or BOT_PATTERN.search(user_agent):
        device_type = "bot"

    return DeviceInfo(device_type=device_type, browser=browser, os=os_name)


async def log_event(
    db: AsyncSession,
    event_type: str,
    user_id: Optional[int] = None,
    metadata: Optional[dict[str, Any]] = None,
    user_agent: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> None:
    """
    Record an analytics event. Failures are logged and swallowed.
    """
    try:
        device = parse_user_agent(user_agent)
        event = Event(
            user_id=user_id,
            event_type=event_type,
            user_agent=(user_agent or "")[:500] or None,
            device_type=device.device_type,
            browser=device.browser,
            os=device.os,
            ip_address=ip_address,
        )
        event.event_metadata = metadata
        db.add(event)
        await db.commit()
    except SQLAlchemyError:
        logger.exception("Failed to log analytics event %s", event_type)
        await db.rollback()


# ============================================
# Admin aggregates
# ============================================

@dataclass
class FrameworkUsage:
    name: str
    views: int = 0
    generates: int = 0

    @property
    def total(self) -> int:
        return self.views + self.generates


@dataclass
class AnalyticsSummary:
    days: int
    event_stats: list[tuple[str, int]] = field(default_factory=list)
    daily_events: list[tuple[str, int]] = field(default_factory=list)
    time_of_day: list[tuple[str, int]] = field(default_factory=list)
    browser_stats: list[tuple[str, int]] = field(default_factory=list)
    framework_stats: list[FrameworkUsage] = field(default_factory=list)

    @property
    def total_events(self) -> int:
        return sum(count for _, count in self.event_stats)


def time_of_day_period(hour: int) -> str:
    if 6 <= hour <= 11:
        return TIME_OF_DAY_PERIODS[0]
    if 12 <= hour <= 17:
        return TIME_OF_DAY_PERIODS[1]
    if 18 <= hour <= 23:
        return TIME_OF_DAY_PERIODS[2]
    return TIME_OF_DAY_PERIODS[3]


def aggregate_framework_usage(events: list[tuple[str, Optional[str]]]) -> list[FrameworkUsage]:
    """
    Count views and generates per framework from (event_type, metadata_json)
    rows. Rows with unreadable metadata are skipped. Sorted by total, busiest first.
    """
    usage: dict[str, FrameworkUsage] = {}
    for event_type, raw in events:
        if not raw:
            continue
        try:
            metadata = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            continue
        if not isinstance(metadata, dict):
            continue
        name = metadata.get("frameworkName") or metadata.get("frameworkType")
        if not name:
            continue
        stats = usage.setdefault(name, FrameworkUsage(name=name))
        if event_type == EVENT_FRAMEWORK_VIEW:
            stats.views += 1
        elif event_type == EVENT_PROMPT_GENERATE:
            stats.generates += 1
    return sorted(usage.values(), key=lambda u: u.total, reverse=True)


async def get_analytics(
    db: AsyncSession,
    days: int = ANALYTICS_DEFAULT_DAYS,
    now: Optional[datetime] = None,
) -> AnalyticsSummary:
    """Aggregate events from the last `days` days for the admin dashboard."""
    since = (now or utcnow()) - timedelta(days=days)
    summary = AnalyticsSummary(days=days)

    result = await db.execute(
        select(Event.event_type, func.count(Event.id))
        .where(Event.created_at >= since)
        .group_by(Event.event_type)
        .order_by(func.count(Event.id).desc())
    )
    summary.event_stats = [(event_type, count) for event_type, count in result.all()]

    result = await db.execute(
        select(Event.browser, func.count(Event.id))
        .where(Event.created_at >= since, Event.browser.is_not(None))
        .group_by(Event.browser)
        .order_by(func.count(Event.id).desc())
        .limit(BROWSER_TOP_N)
    )
    summary.browser_stats = [(browser, count) for browser, count in result.all()]

    result = await db.execute(
        select(Event.created_at, Event.event_type, Event._metadata)
        .where(Event.created_at >= since)
    )
    rows = result.all()

    daily: Counter = Counter()
    periods: dict[str, int] = defaultdict(int)
    framework_rows = []
    for created_at, event_type, raw_metadata in rows:
        daily[created_at.date().isoformat()] += 1
        periods[time_of_day_period(created_at.hour)] += 1
        if event_type in (EVENT_FRAMEWORK_VIEW, EVENT_PROMPT_GENERATE):
            framework_rows.append((event_type, raw_metadata))

    summary.daily_events = sorted(daily.items())
    summary.time_of_day = [(p, periods[p]) for p in TIME_OF_DAY_PERIODS if periods[p]]
    summary.framework_stats = aggregate_framework_usage(framework_rows)
    return summary
