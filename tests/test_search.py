import pytest

from workbench.algorithms.search import binary_search

SOURCE_LIST = [1, 3, 5, 7, 9]


@pytest.mark.parametrize("item", SOURCE_LIST)
def test_finds_every_present_item(item):
    index = binary_search(SOURCE_LIST, item)
    assert SOURCE_LIST[index] == item


def test_first_element_index():
    assert binary_search(SOURCE_LIST, 1) == 0


def test_last_element_index():
    assert binary_search(SOURCE_LIST, 9) == len(SOURCE_LIST) - 1


@pytest.mark.parametrize("item", [4, 0, 10, -3])
def test_absent_item_returns_none(item):
    assert binary_search(SOURCE_LIST, item) is None


def test_empty_sequence_returns_none():
    assert binary_search([], 4) is None


def test_works_with_strings():
    words = ["apple", "banana", "cherry", "date"]
    assert words[binary_search(words, "cherry")] == "cherry"


def test_large_range():
    items = list(range(0, 2000, 2))
    for value in (0, 998, 1998):
        assert items[binary_search(items, value)] == value
    assert binary_search(items, 999) is None