from tacir.string_table import StringTable


def _fresh(*parts):
    return "".join(parts)


def test_equal_strings_share_one_copy():
    table = StringTable()
    first = _fresh("ab", "c")
    second = _fresh("a", "bc")
    assert first == second and first is not second
    assert table.add(first) is first
    assert table.add(second) is first


def test_length_counts_distinct_strings():
    table = StringTable()
    for word in ["x", "y", _fresh("x"), "z", _fresh("y")]:
        table.add(word)
    assert len(table) == 3
    assert list(table) == ["x", "y", "z"]


def test_membership():
    table = StringTable()
    table.add("name")
    assert "name" in table
    assert "other" not in table


def test_tables_are_independent():
    one, two = StringTable(), StringTable()
    a = _fresh("sh", "ared")
    b = _fresh("sha", "red")
    one.add(a)
    assert two.add(b) is b
    assert len(two) == 1