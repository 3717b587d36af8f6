"""Tests for facilities, the rubric and record wire shapes."""

from datetime import date

import pytest

from peervisit.domain.facilities import Facility
from peervisit.domain.records import (
    AssessmentRecord,
    Comment,
    ScheduleEntry,
    normalize_scores,
    parse_comments,
    parse_date,
)
from peervisit.domain.rubric import (
    CRITICAL_ITEMS,
    STANDARDS_RUBRIC,
    RubricDefinition,
    StandardCategory,
    StandardItem,
    load_rubric,
)
from peervisit.exceptions import RubricDefinitionError


def test_facility_parse_accepts_value_and_member_name():
    assert Facility.parse("รพ.ชัยภูมิ") is Facility.CHAIYAPHUM
    assert Facility.parse("chaiyaphum") is Facility.CHAIYAPHUM
    assert Facility.parse(Facility.SAP_YAI) is Facility.SAP_YAI


def test_facility_parse_rejects_unknown():
    with pytest.raises(ValueError):
        Facility.parse("Springfield General")
    with pytest.raises(ValueError):
        Facility.parse(42)


def test_builtin_rubric_shape():
    assert len(STANDARDS_RUBRIC.categories) == 9
    assert len(STANDARDS_RUBRIC.items()) == 51
    assert [i.id for i in STANDARDS_RUBRIC.critical_items()] == list(CRITICAL_ITEMS)
    assert STANDARDS_RUBRIC.max_score() == 335


def test_rubric_ceiling_derived(rubric_300):
    assert rubric_300.max_score() == 300
    assert rubric_300.max_score(critical_weight=1) == 290


def test_rubric_rejects_duplicate_item_ids():
    item = StandardItem(id="1.1", label="a")
    with pytest.raises(RubricDefinitionError):
        RubricDefinition(
            categories=(
                StandardCategory(id=1, name="A", items=(item,)),
                StandardCategory(id=2, name="B", items=(item,)),
            )
        )


def test_rubric_is_immutable():
    with pytest.raises(AttributeError):
        STANDARDS_RUBRIC.categories = ()


def test_load_rubric_asserts_expected_ceiling():
    assert load_rubric(expected_max_score=335) is STANDARDS_RUBRIC
    with pytest.raises(RubricDefinitionError):
        load_rubric(expected_max_score=300)


def test_load_rubric_from_yaml(tmp_path):
    path = tmp_path / "rubric.yaml"
    path.write_text(
        """
critical: ["1.2"]
categories:
  - id: 1
    name: Organisation
    items: ["1.1", "1.2", {id: "1.3", label: "Records", critical: true}]
  - id: 2
    name: Staff
    items: ["2.1"]
""",
        encoding="utf-8",
    )
    rubric = load_rubric(path, expected_max_score=40)
    assert rubric.item_ids() == ["1.1", "1.2", "1.3", "2.1"]
    assert [i.id for i in rubric.critical_items()] == ["1.2", "1.3"]
    assert rubric.items()[2].label == "Records"


def test_load_rubric_rejects_missing_categories(tmp_path):
    path = tmp_path / "rubric.yaml"
    path.write_text("items: []\n", encoding="utf-8")
    with pytest.raises(RubricDefinitionError):
        load_rubric(path)


def test_schedule_entry_pads_slots():
    entry = ScheduleEntry.create("2025-06-15", "KHON_SAN", ["SAP_YAI", None, "รพ.จตุรัส"])
    assert entry.date == date(2025, 6, 15)
    assert entry.host is Facility.KHON_SAN
    assert entry.slots == (Facility.SAP_YAI, None, Facility.CHATTURAT, None, None)
    assert entry.team() == [Facility.SAP_YAI, Facility.CHATTURAT]


def test_schedule_entry_rejects_six_slots():
    with pytest.raises(ValueError):
        ScheduleEntry.create("2025-06-15", "KHON_SAN", ["SAP_YAI"] * 6)


def test_schedule_entry_wire_shape():
    entry = ScheduleEntry.create("2025-06-15", Facility.KHON_SAN, [Facility.SAP_YAI, "", Facility.CHATTURAT])
    wire = entry.to_wire()
    assert wire == {
        "id": "2025-06-15",
        "date": "2025-06-15",
        "hostHospital": "รพ.คอนสาร",
        "hospitals": ["รพ.ซับใหญ่", None, "รพ.จตุรัส", None, None],
    }
    assert ScheduleEntry.from_wire(wire) == entry


def test_assessment_wire_parses_string_comment_keys():
    wire = {
        "id": "abc",
        "hospital": "รพ.คอนสาร",
        "date": "2025-06-15",
        "scores": {"1.1": 4},
        "comments": {"1": {"commendation": "Tidy", "suggestion": ""}},
        "totalScore": 4,
        "grade": "ไม่ผ่าน",
        "passed": False,
        "visitors": ["รพ.ซับใหญ่"],
    }
    record = AssessmentRecord.from_wire(wire)
    assert record.facility is Facility.KHON_SAN
    assert record.comments == {1: Comment("Tidy", "")}
    assert record.visitors == (Facility.SAP_YAI,)
    assert record.to_wire() == wire


@pytest.mark.parametrize(
    "field, value",
    [
        ("comments", {"1": "good work"}),
        ("comments", "good work"),
        ("scores", "5,5,5"),
    ],
)
def test_assessment_from_wire_rejects_non_mapping(field, value):
    wire = {"id": "abc", "hospital": "รพ.คอนสาร", "date": "2025-06-15", field: value}
    with pytest.raises(ValueError):
        AssessmentRecord.from_wire(wire)


def test_normalize_scores():
    cleaned = normalize_scores(STANDARDS_RUBRIC, {"1.1": 5, "1.2": "3", "1.3": 0, "1.4": None})
    assert cleaned == {"1.1": 5, "1.2": 3}


@pytest.mark.parametrize("scores", [{"99.9": 3}, {"1.1": 6}, {"1.1": -1}, {"1.1": 2.5}, {"1.1": "x"}])
def test_normalize_scores_rejects_bad_input(scores):
    with pytest.raises(ValueError):
        normalize_scores(STANDARDS_RUBRIC, scores)


def test_parse_comments_drops_empty_and_checks_category():
    comments = parse_comments({"1": {"commendation": "Good", "suggestion": ""}, 2: ("", "")}, STANDARDS_RUBRIC)
    assert comments == {1: Comment("Good", "")}
    with pytest.raises(ValueError):
        parse_comments({42: {"commendation": "x"}}, STANDARDS_RUBRIC)


def test_parse_date_rejects_garbage():
    assert parse_date("2025-01-02") == date(2025, 1, 2)
    with pytest.raises(ValueError):
        parse_date("not a date")
