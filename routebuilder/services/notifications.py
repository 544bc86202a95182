from typing import Any, Dict, List, Optional

CURRENCY_SYMBOL = "₸"


def format_duration(minutes: float) -> str:
    """90 → '1 hr 30 min'."""
    minutes = max(0, int(round(minutes)))
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins} min"
    if mins == 0:
        return f"{hours} hr"
    return f"{hours} hr {mins} min"


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{round(meters)} m"
    return f"{meters / 1000:.1f} km"


def format_currency(amount: float) -> str:
    return f"{round(amount):,} {CURRENCY_SYMBOL}"


def route_stats(stops: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Totals over outbound stop dicts."""
    return {
        "total_distance": sum(s.get("travel_distance_meters") or 0 for s in stops),
        "total_time": sum(
            (s.get("visit_duration_minutes") or 0) + (s.get("travel_time_minutes") or 0)
            for s in stops
        ),
        "total_cost": sum(s.get("estimated_cost") or 0 for s in stops),
        "stop_count": len(stops),
    }


def render_share_text(result: Dict[str, Any], name: Optional[str] = None) -> str:
    """
    Plain-text summary of an outbound RouteResult dict, for sharing or e-mail bodies.

    Args:
        result: RouteResult as returned to the caller (model_dump form)
        name: Title line (optional)

    Returns:
        Numbered stop list followed by time, budget and stop count
    """
    stops = result.get("stops", [])
    lines = [name or "My route", ""]
    for idx, stop in enumerate(stops, start=1):
        line = f"{idx}. {stop['name']} ({format_duration(stop['visit_duration_minutes'])})"
        if stop.get("travel_time_minutes"):
            line += (
                f", {format_distance(stop.get('travel_distance_meters') or 0)} / "
                f"{format_duration(stop['travel_time_minutes'])} away"
            )
        lines.append(line)

    if not stops:
        lines.append("No stops matched these preferences.")

    summary = result.get("summary") or {}
    stats = route_stats(stops)
    lines += [
        "",
        f"Time: {format_duration(summary.get('total_duration_minutes', stats['total_time']))}",
        f"Budget: {format_currency(summary.get('total_cost', stats['total_cost']))}",
        f"Stops: {summary.get('stop_count', stats['stop_count'])}",
    ]
    return "\n".join(lines)
