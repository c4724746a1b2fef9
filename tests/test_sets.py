import pytest

from compkit.sets import Set, key_set


def test_string_set():
    s = Set()
    s2 = Set()
    assert len(s) == 0
    s.insert("a", "b")
    assert len(s) == 2
    s.insert("c")
    assert not s.has("d")
    assert s.has("a")
    s.delete("a")
    assert not s.has("a")
    s.insert("a")
    assert not s.has_all("a", "b", "d")
    assert s.has_all("a", "b")
    s2.insert("a", "b", "d")
    assert not s.is_superset(s2)
    s2.delete("d")
    assert s.is_superset(s2)


def test_string_set_delete_multiples():
    s = Set()
    s.insert("a", "b", "c")
    assert len(s) == 3
    s.delete("a", "c")
    assert len(s) == 1
    assert not s.has("a")
    assert not s.has("c")
    assert s.has("b")


def test_new_string_set():
    s = Set(["a", "b", "c"])
    assert len(s) == 3
    assert s.has("a") and s.has("b") and s.has("c")


def test_string_set_list():
    s = Set(["z", "y", "x", "a"])
    assert s.list() == ["a", "x", "y", "z"]


def test_string_set_difference():
    a = Set(["1", "2", "3"])
    b = Set(["1", "2", "4", "5"])
    c = a.difference(b)
    d = b.difference(a)
    assert len(c) == 1
    assert c.has("3")
    assert len(d) == 2
    assert d.has("4") and d.has("5")


def test_string_set_has_any():
    a = Set(["1", "2", "3"])
    assert a.has_any("1", "4")
    assert not a.has_any("0", "4")


def test_string_set_equals():
    a = Set(["1", "2"])
    b = Set(["2", "1"])
    assert a.equal(b)

    b = Set(["2", "2", "1"])
    assert a.equal(b)

    a = Set()
    b = Set()
    assert a.equal(b)

    b = Set(["1", "2", "3"])
    assert not a.equal(b)

    b = Set(["1", "2", ""])
    assert not a.equal(b)

    a = Set()
    a.insert("1")
    assert not a.equal(b)

    a.insert("2")
    assert not a.equal(b)

    a.insert("")
    assert a.equal(b)

    a.delete("")
    assert not a.equal(b)


@pytest.mark.parametrize(
    "s1, s2, expected",
    [
        (["1", "2", "3", "4"], ["3", "4", "5", "6"], ["1", "2", "3", "4", "5", "6"]),
        (["1", "2", "3", "4"], [], ["1", "2", "3", "4"]),
        ([], ["1", "2", "3", "4"], ["1", "2", "3", "4"]),
        ([], [], []),
    ],
)
def test_string_union(s1, s2, expected):
    union = Set(s1).union(Set(s2))
    exp = Set(expected)
    assert len(union) == len(exp)
    assert union.equal(exp)


@pytest.mark.parametrize(
    "s1, s2, expected",
    [
        (["1", "2", "3", "4"], ["3", "4", "5", "6"], ["3", "4"]),
        (["1", "2", "3", "4"], ["1", "2", "3", "4"], ["1", "2", "3", "4"]),
        (["1", "2", "3", "4"], [], []),
        ([], ["1", "2", "3", "4"], []),
        ([], [], []),
    ],
)
def test_string_intersection(s1, s2, expected):
    intersection = Set(s1).intersection(Set(s2))
    exp = Set(expected)
    assert len(intersection) == len(exp)
    assert intersection.equal(exp)


def test_int_set_list_is_sorted():
    s = Set([5, 3, 9, 1])
    assert s.list() == [1, 3, 5, 9]
    assert sorted(s.unsorted_list()) == s.list()


def test_pop_any_removes_item():
    s = Set([1, 2, 3])
    item = s.pop_any()
    assert item in (1, 2, 3)
    assert not s.has(item)
    assert len(s) == 2


def test_pop_any_empty_raises():
    with pytest.raises(KeyError):
        Set().pop_any()


def test_key_set_from_mapping():
    s = key_set({"a": 1, "b": 2})
    assert s.list() == ["a", "b"]


def test_insert_returns_same_set_and_membership():
    s = Set()
    assert s.insert(1, 2) is s
    assert 1 in s
    assert 3 not in s
    assert Set([1, 2]) == s
    assert s == {1, 2}