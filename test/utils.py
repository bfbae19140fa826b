# python
"""
Utils module behavioral tests.

Scope
- Validate the Unset sentinel and coalesce().
- Validate rename() in both forms.
- Validate fieldname() conversions and its bounded memoization.
- Validate isclass() / typename() on classes and typing constructs.

Conventions
- Test method names follow CamelCase per project convention.
"""

import unittest
from typing import Optional
from unittest import TestCase

from argpath.utils import Unset, UnsetType, coalesce, fieldname, isclass, rename, typename


class TestUnset(TestCase):
    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testCoalesceKeepsFalseyValues(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertEqual(coalesce(value, "fallback"), value)


class TestRename(TestCase):
    def testDirectForm(self):
        decoder = rename(lambda value: value, "parse_value")
        self.assertEqual((decoder.__name__, decoder.__qualname__), ("parse_value", "parse_value"))

    def testDecoratorForm(self):
        @rename("parse_color")
        def decoder(value):
            return value

        self.assertEqual(decoder.__name__, "parse_color")

    def testArity(self):
        with self.assertRaises(TypeError):
            rename()


class TestFieldname(TestCase):
    def testConversions(self):
        self.assertEqual(fieldname("Organization-ID"), "organization_id")
        self.assertEqual(fieldname("class"), "class_")
        self.assertEqual(fieldname("zone"), "zone")

    def testCacheIsBounded(self):
        self.assertEqual(fieldname.cache_info().maxsize, 256)
        for position in range(1000):
            fieldname("segment-%d" % position)
        self.assertLessEqual(fieldname.cache_info().currsize, 256)


class TestTypeNames(TestCase):
    def testIsClass(self):
        self.assertTrue(isclass(int))
        self.assertFalse(isclass(list[int]))
        self.assertFalse(isclass(Optional[int]))

    def testTypename(self):
        self.assertEqual(typename(int), "int")
        self.assertEqual(typename(list[str]), "list[str]")


if __name__ == '__main__':
    unittest.main()
