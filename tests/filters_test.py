from routebuilder.services.filters import filter_candidates, within_activity_level
from factories import build_record, build_request


def test_filter_keeps_catalog_order_and_incomplete_records():
    catalog = [
        build_record(3, rating=3.0),
        build_record(1, rating=5.0, coordinate=None),
        build_record(2, cost=None),
    ]
    out = filter_candidates(catalog, build_request())
    assert [r.id for r in out] == ["3", "1", "2"], "Filter must not reorder candidates"


def test_filter_rules():
    catalog = [
        build_record("ok"),
        build_record("kids_only", age_groups=["family"]),
        build_record("no_interest", interests=["shopping"]),
        build_record("too_pricey", cost=(6000, 9000)),
        build_record("overlapping_cost", cost=(4000, 9000)),
        build_record("free"),
    ]
    out = {r.id for r in filter_candidates(catalog, build_request(budget=(0, 5000)))}
    assert out == {"ok", "overlapping_cost", "free"}, f"Unexpected candidates: {out}"


def test_budget_overlap_is_inclusive():
    catalog = [
        build_record("touching_max", cost=(5000, 7000)),
        build_record("touching_min", cost=(0, 100)),
        build_record("below_min", cost=(0, 99)),
    ]
    out = {r.id for r in filter_candidates(catalog, build_request(budget=(100, 5000)))}
    assert out == {"touching_max", "touching_min"}


def test_activity_level_ceiling():
    assert within_activity_level(build_record(1, activity_level="easy"), "easy")
    assert not within_activity_level(build_record(1, activity_level="moderate"), "easy")
    assert within_activity_level(build_record(1, activity_level="moderate"), "moderate")
    assert not within_activity_level(build_record(1, activity_level="intense"), "moderate")
    for level in ("easy", "moderate", "intense"):
        assert within_activity_level(build_record(1, activity_level=level), "intense")


def test_intense_record_excluded_by_easy_ceiling():
    """Scenario D: only the intense record drops out."""
    catalog = [
        build_record(1),
        build_record(2, activity_level="intense"),
        build_record(3),
    ]
    easy = filter_candidates(catalog, build_request(activity_level="easy"))
    intense = filter_candidates(catalog, build_request(activity_level="intense"))

    assert len(intense) - len(easy) == 1
    assert [r.id for r in easy] == ["1", "3"]


def test_filter_is_monotone(catalog):
    """Widening any single dimension never shrinks the candidate set."""
    base = build_request(
        interests=["nature"], activity_level="easy", budget=(1000, 2000), age_group="adults"
    )
    base_ids = {r.id for r in filter_candidates(catalog, base)}

    widened = [
        base.model_copy(update={"budget": base.budget.model_copy(update={"min": 0, "max": 30000})}),
        base.model_copy(update={"activity_level": "moderate"}),
        base.model_copy(update={"activity_level": "intense"}),
        base.model_copy(update={"interests": ["nature", "culture", "food"]}),
    ]
    for req in widened:
        ids = {r.id for r in filter_candidates(catalog, req)}
        assert base_ids <= ids, f"Widening to {req} lost {base_ids - ids}"
        print(f"{len(base_ids)} → {len(ids)} candidates")
