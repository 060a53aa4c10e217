import pytest

from locationsharing.common.errors import TooShortError
from locationsharing.decode.view import JsonArrayView, as_view, is_absent


@pytest.mark.parametrize("node", [None, [], {}, ""])
def test_is_absent_covers_every_empty_encoding(node):
    assert is_absent(node) is True


@pytest.mark.parametrize("node", [0, "0", [None], {"a": 1}, False])
def test_is_absent_rejects_real_values(node):
    assert is_absent(node) is False


def test_at_returns_none_out_of_range_and_on_non_arrays():
    view = JsonArrayView([1, 2])
    assert view.at(1) == 2
    assert view.at(2) is None
    assert view.at(-1) is None
    assert JsonArrayView("abc").at(0) is None


def test_child_extends_path():
    view = JsonArrayView([[None, ["x"]]], "data")
    assert view.child(0).child(1).path == "data[0][1]"
    assert view.child(0).child(1).string_at(0) == "x"


def test_string_at_stringifies_numbers_and_ignores_containers():
    view = JsonArrayView(["a", 12, "", [1], True, None])
    assert view.string_at(0) == "a"
    assert view.string_at(1) == "12"
    assert view.string_at(2) is None
    assert view.string_at(3) is None
    assert view.string_at(4) is None
    assert view.string_at(5) is None


def test_require_min_len_reports_path_and_bounds():
    view = JsonArrayView([1, 2], "data[1][1]")
    assert view.require_min_len(2) is view

    with pytest.raises(TooShortError) as excinfo:
        view.require_min_len(3)
    assert excinfo.value.expected == 3
    assert excinfo.value.actual == 2
    assert excinfo.value.path == "data[1][1]"
    assert str(excinfo.value) == "data[1][1] is too short: expected at least 3 elements, got 2"


def test_require_min_len_counts_non_array_as_empty():
    with pytest.raises(TooShortError) as excinfo:
        JsonArrayView("text", "data[9]").require_min_len(1)
    assert excinfo.value.actual == 0


def test_as_view_keeps_existing_view():
    view = JsonArrayView([], "data[0][2]")
    assert as_view(view, "entry") is view
    assert as_view([], "entry").path == "entry"
