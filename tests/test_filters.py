from core.filters import (
    DashboardFilters,
    Selection,
    apply_filters,
    filter_options,
    normalize_filters,
    toggle_value,
)


def test_empty_filters_are_identity(records):
    assert apply_filters(records, DashboardFilters()) == records
    assert apply_filters(records, normalize_filters({})) == records


def test_empty_list_means_unrestricted():
    filt = normalize_filters({"selected_groups": [], "selected_topics": None})
    assert filt.selected_groups.is_unrestricted
    assert filt.selected_topics.is_unrestricted
    assert filt.selected_groups.matches("anything")


def test_restricted_selection_is_membership():
    sel = Selection.restricted_to(["a", "b"])
    assert not sel.is_unrestricted
    assert sel.matches("a")
    assert not sel.matches("c")
    assert sel.as_list() == ["a", "b"]


def test_search_name_is_case_insensitive_substring():
    from core.records import DevelopmentRecord

    recs = (DevelopmentRecord(id=0, name="Alice Smith"), DevelopmentRecord(id=1, name="Bob"))
    assert [r.name for r in apply_filters(recs, normalize_filters({"search_name": "aLiCe"}))] == ["Alice Smith"]
    assert apply_filters(recs, normalize_filters({"search_name": "zzz"})) == ()


def test_or_within_field(records):
    filt = normalize_filters({"selected_groups": ["กลุ่มบริหาร", "กลุ่มแผน"]})
    assert len(apply_filters(records, filt)) == 4


def test_and_across_fields(records):
    filt = normalize_filters({"selected_groups": ["กลุ่มแผน"], "selected_topics": ["Excel"]})
    out = apply_filters(records, filt)
    assert [r.name for r in out] == ["วิชัย มานะ"]


def test_filter_preserves_order_and_is_pure(records):
    filt = normalize_filters({"selected_start_months": ["มกราคม"]})
    first = apply_filters(records, filt)
    second = apply_filters(records, filt)
    assert first == second
    assert [r.id for r in first] == [0, 2]


def test_filter_options_first_seen_and_non_empty(records):
    options = filter_options(records)
    assert options["selected_groups"] == ["กลุ่มบริหาร", "กลุ่มแผน"]
    assert options["selected_topics"] == ["กฎหมาย, ระเบียบ", "Excel", "ภาวะผู้นำ"]
    assert "" not in options["selected_dev_types"]
    assert len(options["selected_dev_types"]) == 3


def test_toggle_value():
    assert toggle_value([], "a") == ["a"]
    assert toggle_value(["a", "b"], "a") == ["b"]
    assert toggle_value(["b"], "a") == ["b", "a"]


def test_filters_to_dict_roundtrips_through_normalize():
    filt = normalize_filters({"search_name": "x", "selected_positions": ["P2", "P1"]})
    again = normalize_filters(filt.to_dict())
    assert again == filt
    assert filt.to_dict()["selected_positions"] == ["P1", "P2"]
