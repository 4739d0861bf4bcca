"""Tests for completion scoring."""

import pytest

from backend.formflow.drafts.completion import is_filled, score


def test_empty_data_scores_zero() -> None:
    """Test that an empty draft scores 0 instead of dividing by zero."""
    assert score({}, set()) == 0
    assert score({}, {"name"}) == 0


def test_denominator_is_data_keys() -> None:
    """Test that the denominator counts keys in data, not form fields."""
    data = {"name": "Ram", "age": ""}

    assert score(data, {"name"}) == 50
    assert score(data, {"name", "age"}) == 50


def test_completed_ids_missing_from_data_are_ignored() -> None:
    """Test that touched fields absent from data never count."""
    assert score({"name": "Ram"}, {"name", "email", "phone"}) == 100


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, False),
        ("", False),
        (0, True),
        (False, True),
        ("   ", True),
        ([], True),
    ],
)
def test_is_filled(value: object, expected: bool) -> None:
    """Test which values count as filled."""
    assert is_filled(value) is expected


def test_half_rounds_up() -> None:
    """Test halves round up (1/8 = 12.5 -> 13)."""
    data = {f"f{i}": "x" for i in range(8)}

    assert score(data, {"f0"}) == 13
    assert score(data, {"f0", "f1", "f2"}) == 38


def test_score_bounded_and_monotonic() -> None:
    """Test score stays in [0, 100] and never drops as filled fields are added."""
    data = {"a": "1", "b": "", "c": "3", "d": None, "e": "5", "f": "6"}
    completed: set[str] = set()
    previous = score(data, completed)

    for field_id in ["b", "a", "d", "c", "e", "f"]:
        completed.add(field_id)
        current = score(data, completed)
        assert 0 <= current <= 100
        assert current >= previous
        previous = current

    assert previous == 67
