import pytest

from core.errors import IndexOutOfRange
from sortviz.sort_model import ArrayFrame, ArrayModel


def make_model(values=(5, 3, 8, 1)):
    model = ArrayModel(values)
    calls = []
    model.changed.connect(lambda: calls.append(1))
    return model, calls


def test_set_values_clears_marks_and_highlight():
    model, calls = make_model()
    model.mark_sorted(0)
    model.set_highlight(1, 2)

    model.set_values([9, 7])

    assert model.values == (9, 7)
    assert model.sorted_mask == frozenset()
    assert model.highlight == ()
    assert len(calls) == 3


def test_swap_exchanges_values():
    model, calls = make_model()
    model.swap(0, 3)
    assert model.values == (1, 3, 8, 5)
    assert calls == [1]


@pytest.mark.parametrize("i, j", [(-1, 0), (0, 4), (10, 2)])
def test_swap_out_of_range_leaves_values(i, j):
    model, calls = make_model()
    with pytest.raises(IndexOutOfRange):
        model.swap(i, j)
    assert model.values == (5, 3, 8, 1)
    assert calls == []


def test_index_out_of_range_is_an_index_error():
    model, _ = make_model()
    with pytest.raises(IndexError):
        model.mark_sorted(4)
    with pytest.raises(IndexOutOfRange):
        model.set_value(-1, 3)
    with pytest.raises(IndexOutOfRange):
        model.set_highlight(0, 7)


def test_mark_sorted_is_idempotent():
    model, calls = make_model()
    model.mark_sorted(2)
    model.mark_sorted(2)
    assert model.sorted_mask == frozenset({2})
    assert model.is_sorted(2)
    assert not model.is_sorted(1)
    assert len(calls) == 1


def test_mark_all_sorted_keeps_values_and_clears_highlight():
    model, _ = make_model((1, 3, 5, 8))
    model.set_highlight(0, 1)
    model.mark_all_sorted()
    model.mark_all_sorted()
    assert model.values == (1, 3, 5, 8)
    assert model.sorted_mask == frozenset(range(4))
    assert model.highlight == ()


def test_single_highlight_and_clear():
    model, _ = make_model()
    model.set_highlight(2)
    assert model.highlight == (2,)
    model.clear_highlight()
    assert model.highlight == ()


def test_clear_marks_keeps_values():
    model, _ = make_model()
    model.mark_sorted(1)
    model.set_highlight(0, 1)
    model.clear_marks()
    assert model.values == (5, 3, 8, 1)
    assert model.sorted_mask == frozenset()
    assert model.highlight == ()


def test_frame_is_a_detached_copy():
    model, _ = make_model()
    model.mark_sorted(3)
    model.set_highlight(0, 1)
    frame = model.frame()

    model.swap(0, 1)

    assert frame == ArrayFrame((5, 3, 8, 1), frozenset({3}), (0, 1))
    assert len(frame) == 4
    assert model.values == (3, 5, 8, 1)
