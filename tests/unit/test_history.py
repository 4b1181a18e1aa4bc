"""Tests for history id computation."""

import pytest

from result_listener.history import DigestUnavailableError, HistoryIdComputer


def test_md5_of_class_and_method_name() -> None:
    """Digests the concatenated class and method name."""
    computer = HistoryIdComputer()

    history_id = computer.history_id("com.example.Foo", "shouldWork")

    assert history_id == "c3f28a4739d014b24e2cf7063e734aa3"


def test_missing_method_name_uses_class_name_only() -> None:
    """Class-level tests are keyed by class name alone."""
    computer = HistoryIdComputer()

    assert computer.history_id("com.example.Foo", None) == (
        "3059c060402f11e0dade01a2ca70d1c1"
    )


def test_is_deterministic() -> None:
    """Identical input gives identical ids across instances."""
    first = HistoryIdComputer().history_id("a.B", "c")
    second = HistoryIdComputer().history_id("a.B", "c")

    assert first == second


def test_distinct_methods_give_distinct_ids() -> None:
    """Different method names under one class produce different ids."""
    computer = HistoryIdComputer()

    ids = {computer.history_id("com.example.Foo", f"test_{i}") for i in range(100)}

    assert len(ids) == 100


def test_configurable_algorithm() -> None:
    """Uses the configured algorithm with a fixed-length hex digest."""
    computer = HistoryIdComputer(algorithm="sha256")

    history_id = computer.history_id("com.example.Foo", "shouldWork")

    assert history_id == (
        "dcefdaada28100af3436dd106dc6a1e300a973563e5670356c4120b0ba14aef8"
    )


def test_unknown_algorithm_fails_on_construction() -> None:
    """Raises DigestUnavailableError when the algorithm is not available."""
    with pytest.raises(DigestUnavailableError, match="not-a-digest"):
        HistoryIdComputer(algorithm="not-a-digest")
