"""Title template editing and rendering.

A title template is the ``segments`` list of a :class:`ChatConfig`. Each
segment may contain ``{name}`` placeholders which are replaced with parts of
the current time in the chat's timezone, using the same letters as
``strftime`` (``{Y}``, ``{m}``, ``{d}``, ``{H}``, ``{:z}`` ...). Placeholders
that are not recognised are left untouched so half-finished templates still
render.
"""
from __future__ import annotations

import re
from datetime import datetime
from typing import Dict

from ..errors import EmptySegments
from ..models.chat import ChatConfig
from ..utils.datetime import resolve_timezone, to_local

PLACEHOLDER_RE = re.compile(r"\{([^{}\s]+)\}")

WEEKDAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
WEEKDAY_FULL = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
MONTH_FULL = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def push(config: ChatConfig, segment: str) -> None:
    config.segments.append(segment)


def push_front(config: ChatConfig, segment: str) -> None:
    config.segments.insert(0, segment)


def pop(config: ChatConfig) -> str:
    if not config.segments:
        raise EmptySegments()
    return config.segments.pop()


def pop_front(config: ChatConfig) -> str:
    if not config.segments:
        raise EmptySegments()
    return config.segments.pop(0)


def split_template(text: str, delimiter: str) -> list[str]:
    if not delimiter:
        return [text]
    return text.split(delimiter)


def join_template(config: ChatConfig) -> str:
    return config.delimiter.join(config.segments)


def validate_timezone(name: str) -> str:
    return resolve_timezone(name).key


def _utc_offset(moment: datetime, *, colon: bool) -> str:
    offset = moment.utcoffset()
    if offset is None:
        return "+00:00" if colon else "+0000"
    minutes = int(offset.total_seconds()) // 60
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    if colon:
        return f"{sign}{hours:02d}:{minutes:02d}"
    return f"{sign}{hours:02d}{minutes:02d}"


def build_context(moment: datetime) -> Dict[str, str]:
    """Map placeholder names to their values for ``moment``."""
    iso_year, iso_week, iso_weekday = moment.isocalendar()
    hour12 = moment.hour % 12 or 12
    weekday = moment.weekday()

    year = f"{moment.year:04d}"
    month = f"{moment.month:02d}"
    day = f"{moment.day:02d}"
    day_padded = f"{moment.day:>2}"
    month_abbr = MONTH_ABBR[moment.month - 1]
    weekday_abbr = WEEKDAY_ABBR[weekday]
    short_year = f"{moment.year % 100:02d}"
    hms = f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    meridiem = "AM" if moment.hour < 12 else "PM"

    return {
        "Y": year,
        "C": f"{moment.year // 100:02d}",
        "y": short_year,
        "m": month,
        "b": month_abbr,
        "B": MONTH_FULL[moment.month - 1],
        "h": month_abbr,
        "d": day,
        "e": day_padded,
        "a": weekday_abbr,
        "A": WEEKDAY_FULL[weekday],
        "w": str((weekday + 1) % 7),
        "u": str(iso_weekday),
        "U": moment.strftime("%U"),
        "W": moment.strftime("%W"),
        "G": f"{iso_year:04d}",
        "g": f"{iso_year % 100:02d}",
        "V": f"{iso_week:02d}",
        "j": f"{moment.timetuple().tm_yday:03d}",
        "D": f"{month}/{day}/{short_year}",
        "x": f"{month}/{day}/{short_year}",
        "F": f"{year}-{month}-{day}",
        "v": f"{day_padded}-{month_abbr}-{year}",
        "H": f"{moment.hour:02d}",
        "k": f"{moment.hour:>2}",
        "I": f"{hour12:02d}",
        "l": f"{hour12:>2}",
        "P": meridiem.lower(),
        "p": meridiem,
        "M": f"{moment.minute:02d}",
        "S": f"{moment.second:02d}",
        "f": f"{moment.microsecond * 1000:09d}",
        "R": f"{moment.hour:02d}:{moment.minute:02d}",
        "T": hms,
        "X": hms,
        "r": f"{hour12:02d}:{moment.minute:02d}:{moment.second:02d} {meridiem}",
        "Z": moment.tzname() or "UTC",
        "z": _utc_offset(moment, colon=False),
        ":z": _utc_offset(moment, colon=True),
        "c": f"{weekday_abbr} {month_abbr} {day_padded} {hms} {year}",
        "+": moment.isoformat(),
        "s": str(int(moment.timestamp())),
        "yeshu": str(moment.year - 1988),
    }


def render_segment(segment: str, context: Dict[str, str]) -> str:
    return PLACEHOLDER_RE.sub(lambda match: context.get(match.group(1), match.group(0)), segment)


def render(config: ChatConfig, now: datetime) -> str:
    local = to_local(now, config.timezone)
    context = build_context(local)
    return config.delimiter.join(render_segment(segment, context) for segment in config.segments)
