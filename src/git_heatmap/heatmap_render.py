from __future__ import annotations

import datetime as dt

from .models import WEEKS_IN_WINDOW, WINDOW_DAYS, ColorTier

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

ANSI_RESET = "\033[0m"
ANSI_BY_TIER = {
    ColorTier.NONE: "\033[0;37;30m",
    ColorTier.LOW: "\033[1;30;47m",
    ColorTier.MEDIUM: "\033[1;30;43m",
    ColorTier.HIGH: "\033[1;30;42m",
    ColorTier.TODAY: "\033[1;37;45m",
}

GUTTER = " " * 9


def calc_offset(today: dt.date | None = None) -> int:
    """Sunday -> 1, Monday -> 2, ... Saturday -> 7."""
    if today is None:
        today = dt.date.today()
    return today.isoweekday() % 7 + 1


def build_cols(commits: dict[int, int], today: dt.date | None = None) -> dict[int, list[int]]:
    """
    Partition day buckets into week columns.

    Row index inside a column is the weekday slot: 0 = Saturday ... 6 = Sunday,
    so week 0 holds today and each older week sits one index higher. A trailing
    week that never reaches its Sunday slot is not stored.
    """
    cols: dict[int, list[int]] = {}
    offset = calc_offset(today) - 1
    col = [0] * offset
    for k in sorted(commits):
        week, day = divmod(k + offset, 7)
        if day == 0:
            col = []
        col.append(commits[k])
        if day == 6:
            cols[week] = col
    return cols


def month_header(today: dt.date | None = None) -> str:
    if today is None:
        today = dt.date.today()
    week = today - dt.timedelta(days=WINDOW_DAYS)
    month = week.month
    parts = [GUTTER]
    while week <= today:
        if week.month != month:
            parts.append(f"{MONTH_ABBR[week.month - 1]} ")
            month = week.month
        else:
            parts.append("    ")
        week += dt.timedelta(days=7)
    return "".join(parts)


def day_label(row: int) -> str:
    if row == 5:
        return " Mon "
    if row == 3:
        return " Wed "
    if row == 1:
        return " Fri "
    return "     "


def color_tier(value: int, today: bool = False) -> ColorTier:
    if today:
        return ColorTier.TODAY
    if value >= 10:
        return ColorTier.HIGH
    if value >= 5:
        return ColorTier.MEDIUM
    if value > 0:
        return ColorTier.LOW
    return ColorTier.NONE


def format_cell(value: int, *, today: bool = False, color: bool = True) -> str:
    if value == 0:
        text = "  - "
    elif value >= 100:
        text = f"{value} "
    elif value >= 10:
        text = f" {value} "
    else:
        text = f"  {value} "
    if not color:
        return text
    return ANSI_BY_TIER[color_tier(value, today)] + text + ANSI_RESET


def render_cells(cols: dict[int, list[int]], today: dt.date | None = None, *, color: bool = True) -> str:
    today_row = calc_offset(today) - 1
    lines: list[str] = []
    for row in range(7):
        cells: list[str] = []
        for week in range(WEEKS_IN_WINDOW + 1, -1, -1):
            if week == WEEKS_IN_WINDOW + 1:
                cells.append(day_label(row))
            col = cols.get(week)
            value = col[row] if col is not None and len(col) > row else 0
            cells.append(format_cell(value, today=week == 0 and row == today_row, color=color))
        lines.append("".join(cells))
    return "\n".join(lines)


def render_calendar(commits: dict[int, int], *, today: dt.date | None = None, color: bool = True) -> str:
    if today is None:
        today = dt.date.today()
    cols = build_cols(commits, today)
    return month_header(today) + "\n" + render_cells(cols, today, color=color)


def print_commits_stats(commits: dict[int, int], *, today: dt.date | None = None, color: bool = True) -> None:
    print(render_calendar(commits, today=today, color=color))
