from typing import Any, Dict, List
from routebuilder.core.config import settings
from routebuilder.schemas.route import RouteRequest, RouteResult

# Float slack when comparing summed costs
COST_EPSILON = 1e-6


def validate_route(result: RouteResult, request: RouteRequest) -> Dict[str, Any]:
    """
    Check a built route against its request.

    Returns:
        {
            "valid": bool,
            "violations": [{"type": str, "severity": str, "message": str, "stop": str}],
            "stats": {...}
        }
    """
    violations: List[Dict[str, Any]] = []
    stops = result.stops

    total_time = sum(s.visit_duration_minutes + s.travel_time_minutes for s in stops)
    total_cost = sum(s.estimated_cost for s in stops)
    stats = {
        "stop_count": len(stops),
        "total_time": total_time,
        "total_cost": total_cost,
        "time_budget": request.time_budget_minutes,
        "cost_budget": request.budget.max,
        "categories": {},
    }

    # 1. Budgets
    if total_time > request.time_budget_minutes:
        violations.append(
            {
                "type": "time_over_budget",
                "severity": "error",
                "message": f"Route takes {total_time} min, budget is {request.time_budget_minutes} min",
                "stop": None,
            }
        )
    if total_cost > request.budget.max + COST_EPSILON:
        violations.append(
            {
                "type": "cost_over_budget",
                "severity": "error",
                "message": f"Route costs {total_cost:.2f}, budget max is {request.budget.max:.2f}",
                "stop": None,
            }
        )

    stop_ids = [s.attraction_id for s in stops]
    seen = set()
    for idx, stop in enumerate(stops):
        # 2. No repeated stops
        if stop.attraction_id in seen:
            violations.append(
                {
                    "type": "duplicate_stop",
                    "severity": "error",
                    "message": f"Stop {stop.name} appears more than once",
                    "stop": stop.attraction_id,
                }
            )
        seen.add(stop.attraction_id)

        # 3. Contiguous ordering
        if stop.order_index != idx:
            violations.append(
                {
                    "type": "order_index",
                    "severity": "error",
                    "message": f"Stop {stop.name} has order_index {stop.order_index}, expected {idx}",
                    "stop": stop.attraction_id,
                }
            )

        # 4. Alternatives are unselected and bounded
        if len(stop.alternatives) > settings.MAX_ALTERNATIVES:
            violations.append(
                {
                    "type": "too_many_alternatives",
                    "severity": "error",
                    "message": f"Stop {stop.name} has {len(stop.alternatives)} alternatives",
                    "stop": stop.attraction_id,
                }
            )
        for alt in stop.alternatives:
            if alt.attraction_id in stop_ids:
                violations.append(
                    {
                        "type": "alternative_selected",
                        "severity": "error",
                        "message": f"Alternative {alt.name} of {stop.name} is already a stop",
                        "stop": stop.attraction_id,
                    }
                )

        # 5. Legs without coordinates cost nothing
        if stop.coordinate is None and stop.travel_time_minutes != 0:
            violations.append(
                {
                    "type": "unlocated_travel",
                    "severity": "warning",
                    "message": f"Stop {stop.name} has no location but {stop.travel_time_minutes} min travel",
                    "stop": stop.attraction_id,
                }
            )

        if stop.category:
            stats["categories"][stop.category] = (
                stats["categories"].get(stop.category, 0) + 1
            )

    return {
        "valid": len([v for v in violations if v["severity"] == "error"]) == 0,
        "violations": violations,
        "stats": stats,
    }


def print_validation_report(validation_result: Dict[str, Any]) -> None:
    """Print human-readable validation report."""
    print("\n" + "=" * 70)
    print("ROUTE VALIDATION REPORT")
    print("=" * 70)

    stats = validation_result["stats"]
    print("\nStatistics:")
    print(f"   Stops: {stats['stop_count']}")
    print(f"   Time: {stats['total_time']} / {stats['time_budget']} min")
    print(f"   Cost: {stats['total_cost']:.2f} / {stats['cost_budget']:.2f}")

    if stats["categories"]:
        print("\nCategories:")
        for category, count in sorted(stats["categories"].items(), key=lambda x: -x[1]):
            print(f"   {category}: {count}")

    violations = validation_result["violations"]
    if not violations:
        print("\nVALID - No violations found")
    else:
        errors = [v for v in violations if v["severity"] == "error"]
        warnings = [v for v in violations if v["severity"] == "warning"]
        print(f"\nFound {len(errors)} errors, {len(warnings)} warnings")
        for v in errors + warnings:
            print(f"   [{v['severity']}] {v['message']}")

    print("=" * 70 + "\n")


def assert_route_valid(
    result: RouteResult,
    request: RouteRequest,
    allow_warnings: bool = True,
) -> None:
    """
    Assert route is valid, raise AssertionError if not.

    Args:
        allow_warnings: If False, warnings also cause assertion failure
    """
    report = validate_route(result, request)
    print_validation_report(report)

    errors = [v for v in report["violations"] if v["severity"] == "error"]
    warnings = [v for v in report["violations"] if v["severity"] == "warning"]

    if errors:
        raise AssertionError(
            f"Route has {len(errors)} errors:\n"
            + "\n".join(f"  - {v['message']}" for v in errors)
        )

    if not allow_warnings and warnings:
        raise AssertionError(
            f"Route has {len(warnings)} warnings:\n"
            + "\n".join(f"  - {v['message']}" for v in warnings)
        )
