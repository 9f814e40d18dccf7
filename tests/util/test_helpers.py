__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"


import unittest

import ddt
import pytest

import quickslice.util


@ddt.ddt
class TestCaseInsensitiveSet(unittest.TestCase):
    def setUp(self):
        self.set = quickslice.util.CaseInsensitiveSet("A", "FoO", True, 23)

    @ddt.data("A", "a", "foo", True, 23)
    def test_contained(self, value):
        self.assertIn(value, self.set)

    @ddt.data("b", "fnord", False, 42)
    def test_not_contained(self, value):
        self.assertNotIn(value, self.set)


class FastDeepcopyTest(unittest.TestCase):
    def test_clean(self):
        data = {"a": 1, "b": 2, "c": 3}
        self.assertEqual(data, quickslice.util.fast_deepcopy(data))

    def test_nested_is_copied(self):
        data = {"a": {"b": [1, 2]}}
        copied = quickslice.util.fast_deepcopy(data)
        copied["a"]["b"].append(3)
        self.assertEqual([1, 2], data["a"]["b"])


@pytest.mark.parametrize(
    "a, b, expected",
    (
        ({"a": 1}, {"b": 2}, {"a": 1, "b": 2}),
        ({"a": 1}, {"a": 2}, {"a": 2}),
        ({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}}, {"a": {"b": 1, "c": 3}}),
        ({"a": {"b": 1}}, {"a": None}, {"a": None}),
    ),
)
def test_dict_merge(a, b, expected):
    assert quickslice.util.dict_merge(a, b) == expected


def test_dict_merge_leaves_input_untouched():
    a = {"a": {"b": 1}}
    quickslice.util.dict_merge(a, {"a": {"b": 2}})
    assert a == {"a": {"b": 1}}


@pytest.mark.parametrize(
    "path, expected",
    (
        ("/some/folder/.hidden.ini", True),
        ("/some/folder/visible.ini", False),
        (None, False),
    ),
)
def test_is_hidden_path(path, expected):
    assert quickslice.util.is_hidden_path(path) == expected


class _Failure(Exception):
    def __init__(self, message):
        Exception.__init__(self)
        self.message = message


@pytest.mark.parametrize(
    "exc, expected",
    (
        (_Failure("with message"), "with message"),
        (ValueError("plain"), "plain"),
        (ValueError(), "ValueError"),
    ),
)
def test_get_exception_string(exc, expected):
    assert quickslice.util.get_exception_string(exc) == expected
