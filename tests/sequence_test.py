from routebuilder.schemas.route import Coordinate, RouteStop
from routebuilder.services.sequence import optimize_sequence, recompute_legs, tour_distance
from factories import build_record

ORIGIN = Coordinate(latitude=0.0, longitude=0.0)


def make_stop(record_id, coordinate=None, idx=0, travel=0):
    return RouteStop(
        attraction=build_record(record_id, coordinate=coordinate),
        visit_duration_minutes=60,
        travel_time_minutes=travel,
        estimated_cost=100.0,
        order_index=idx,
    )


def test_nearest_neighbor_from_start():
    stops = [
        make_stop("far", (0.0, 3.0), 0),
        make_stop("near", (0.0, 1.0), 1),
        make_stop("mid", (0.0, 2.0), 2),
    ]
    ordered = optimize_sequence(stops, ORIGIN)
    assert [s.attraction_id for s in ordered] == ["near", "mid", "far"]
    assert tour_distance(ordered, ORIGIN) < tour_distance(stops, ORIGIN)


def test_without_start_begins_at_first_stop():
    stops = [
        make_stop("mid", (0.0, 2.0)),
        make_stop("far", (0.0, 5.0)),
        make_stop("near", (0.0, 1.0)),
    ]
    ordered = optimize_sequence(stops)
    assert [s.attraction_id for s in ordered] == ["mid", "near", "far"]


def test_unlocated_stops_go_last_in_original_order():
    stops = [
        make_stop("x"),
        make_stop("b", (0.0, 2.0)),
        make_stop("y"),
        make_stop("a", (0.0, 1.0)),
    ]
    ordered = optimize_sequence(stops, ORIGIN)
    assert [s.attraction_id for s in ordered] == ["a", "b", "x", "y"]


def test_sequence_preserves_stop_set_and_attributes():
    stops = [
        make_stop("a", (43.25, 76.95), 0, travel=12),
        make_stop("b", (43.05, 76.98), 1, travel=30),
        make_stop("c"),
        make_stop("d", (43.23, 76.91), 3, travel=5),
    ]
    ordered = optimize_sequence(stops, Coordinate(latitude=43.2389, longitude=76.8897))

    assert len(ordered) == len(stops)
    assert sorted(s.attraction_id for s in ordered) == ["a", "b", "c", "d"]
    by_id = {s.attraction_id: s for s in stops}
    for stop in ordered:
        assert stop.model_dump() == by_id[stop.attraction_id].model_dump()


def test_trivial_inputs():
    assert optimize_sequence([]) == []
    single = [make_stop("a", (1.0, 1.0))]
    assert optimize_sequence(single, ORIGIN) == single


def test_recompute_legs_renumbers_and_remeasures():
    stops = [
        make_stop("b", (0.0, 2.0), idx=5, travel=99),
        make_stop("x", idx=7, travel=42),
        make_stop("a", (0.0, 1.0), idx=1, travel=99),
    ]
    legs = recompute_legs(stops, ORIGIN)

    assert [s.order_index for s in legs] == [0, 1, 2]
    assert legs[0].travel_time_minutes == 334  # ~222km at 40 km/h
    assert legs[1].travel_time_minutes == 0
    assert legs[1].travel_distance_meters == 0
    assert legs[2].travel_time_minutes == 167, "Measured from 'b', the last located stop"
    assert stops[0].travel_time_minutes == 99, "Input stops must not be mutated"
