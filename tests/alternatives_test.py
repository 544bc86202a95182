from routebuilder.services.alternatives import attach_alternatives, summarize
from routebuilder.services.packer import pack_route, rank_candidates
from factories import build_record, build_request


def test_alternatives_same_category_ranked_and_bounded():
    ranked = rank_candidates(
        [
            build_record("stop", category="museum", rating=5.0, avg_visit_duration=170),
            build_record("x", category="museum", rating=4.5, cost=(100, 300)),
            build_record("park", category="park", rating=4.4),
            build_record("z", category="museum", rating=4.4),
            build_record("w", category="museum", rating=4.0),
        ]
    )
    packed = pack_route(ranked, build_request(interests=["nature"], time_budget_minutes=180))
    assert [s.attraction_id for s in packed.stops] == ["stop"]

    stops = attach_alternatives(packed.stops, ranked)
    alts = stops[0].alternatives

    assert [a.attraction_id for a in alts] == ["x", "z"], f"Got {alts}"
    assert alts[0].estimated_cost == 200
    assert alts[0].rating == 4.5
    assert alts[1].estimated_cost == 0
    assert packed.stops[0].alternatives == [], "Input stops must not be mutated"


def test_alternative_fills_in_for_stop_that_did_not_fit():
    """Scenario C: the candidate that missed the time budget is offered instead."""
    ranked = rank_candidates(
        [
            build_record(1, category="nature", rating=4.9, avg_visit_duration=150),
            build_record(2, category="nature", rating=4.5, avg_visit_duration=150),
        ]
    )
    packed = pack_route(ranked, build_request(time_budget_minutes=180))
    stops = attach_alternatives(packed.stops, ranked)

    assert len(stops) == 1
    assert [a.attraction_id for a in stops[0].alternatives] == ["2"]


def test_selected_stops_are_never_alternatives():
    ranked = rank_candidates(
        [
            build_record("a", category="park", rating=5.0),
            build_record("b", category="park", rating=4.0),
            build_record("c", category="park", rating=3.0, avg_visit_duration=400),
        ]
    )
    packed = pack_route(ranked, build_request(time_budget_minutes=480))
    stops = attach_alternatives(packed.stops, ranked)

    assert [s.attraction_id for s in stops] == ["a", "b"]
    for stop in stops:
        assert [a.attraction_id for a in stop.alternatives] == ["c"]


def test_stop_without_category_has_no_alternatives():
    ranked = [
        build_record("a", category=None, rating=5.0),
        build_record("b", category=None, rating=4.0, avg_visit_duration=400),
    ]
    packed = pack_route(ranked, build_request(time_budget_minutes=180))
    stops = attach_alternatives(packed.stops, ranked)
    assert stops[0].alternatives == []


def test_summary_is_lightweight():
    alt = summarize(build_record("x", name="Museum", rating=4.2, cost=(1000, 3000)))
    assert alt.model_dump() == {
        "attraction_id": "x",
        "name": "Museum",
        "rating": 4.2,
        "estimated_cost": 2000.0,
    }
