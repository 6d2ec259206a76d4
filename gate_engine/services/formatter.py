"""Render engine state as Telegram HTML reports."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, tzinfo

import pytz

from gate_engine.models import (
    DisruptionEvent,
    DisruptionType,
    EngineStats,
    FlightStatus,
    Gate,
    GateAssignment,
)
from gate_engine.utils.text import escape

UTC = pytz.utc

_DISRUPTION_ICONS = {
    DisruptionType.DELAY: "⏱",
    DisruptionType.CANCELLATION: "❌",
    DisruptionType.DIVERSION: "↪️",
    DisruptionType.GATE_UNAVAILABLE: "🚧",
    DisruptionType.WEATHER: "🌩",
    DisruptionType.MECHANICAL: "🔧",
}


def format_stats_report(stats: EngineStats, now: datetime) -> str:
    return "\n".join([
        "📊 <b>Gate Allocation — Status</b>",
        f"🕐 {now.strftime('%A %d %b %Y, %H:%M')}",
        "",
        f"🚪 Gates: {stats.available_gates}/{stats.total_gates} available",
        f"✈️ Assignments: {stats.occupied_gates}",
        f"⚠️ Disruptions: {stats.total_disruptions}",
    ])


def format_gates_report(gates: list[Gate]) -> str:
    if not gates:
        return "🚪 <b>Gates</b>\n  No gates registered"
    lines = [f"🚪 <b>Gates</b> ({len(gates)})"]
    for terminal, group in _by_terminal(gates, key=lambda g: g.terminal).items():
        lines.append(f"\n<b>Terminal {escape(terminal)}</b>")
        for g in group:
            mark = "🟢" if g.is_available else "🔴"
            lines.append(f"  {mark} {escape(g.gate_id)} — {g.size}")
    return "\n".join(lines)


def format_assignments_report(
    assignments: list[GateAssignment],
    tz: tzinfo = UTC,
    terminal: str | None = None,
) -> str:
    title = "🛬 <b>Gate Assignments</b>"
    if terminal:
        title += f" — Terminal {escape(terminal)}"
    if not assignments:
        return f"{title}\n  No live assignments"

    lines = [f"{title} ({len(assignments)})"]
    groups = _by_terminal(assignments, key=lambda a: a.gate.terminal)
    for term, group in groups.items():
        lines.append(f"\n<b>Terminal {escape(term)}</b>")
        for a in sorted(group, key=lambda a: (a.gate.gate_id, a.assigned_from)):
            lines.append(format_assignment_line(a, tz))
    return "\n".join(lines)


def format_assignment_line(a: GateAssignment, tz: tzinfo = UTC) -> str:
    start = a.assigned_from.astimezone(tz).strftime("%H:%M")
    end = a.assigned_until.astimezone(tz).strftime("%H:%M")
    status = f" ({a.flight.status})" if a.flight.status != FlightStatus.SCHEDULED else ""
    return (
        f"  ▸ {escape(a.gate.gate_id)} ← {escape(a.flight.flight_id)} "
        f"[{escape(a.flight.aircraft_type)}] {start}–{end}{status}"
    )


def format_disruption_notice(event: DisruptionEvent, tz: tzinfo = UTC) -> str:
    icon = _DISRUPTION_ICONS.get(event.disruption_type, "⚠️")
    at = event.reported_at.astimezone(tz).strftime("%H:%M")
    if event.disruption_type == DisruptionType.GATE_UNAVAILABLE:
        subject = f"Gate {escape(event.target_gate_id)}"
    else:
        subject = escape(event.affected_flight_id or "—")
    lines = [f"{icon} <b>{event.disruption_type}</b> — {subject}", f"🕐 Reported {at}"]
    if event.disruption_type == DisruptionType.DELAY:
        lines.append(f"  +{event.delay_minutes} min")
    if event.description and event.disruption_type != DisruptionType.GATE_UNAVAILABLE:
        lines.append(f"  <i>{escape(event.description)}</i>")
    return "\n".join(lines)


def _by_terminal(items, key) -> dict[str, list]:
    groups: dict[str, list] = defaultdict(list)
    for item in items:
        groups[key(item)].append(item)
    return dict(sorted(groups.items()))
