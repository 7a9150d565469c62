# python
"""
Utilities module behavioral tests.

Scope
- Validate the Unset sentinel: falsiness, representation, singleton identity, copies, sealing.
- Validate coalesce: only Unset is replaced, other falsey values are preserved.
- Validate rename in its direct and decorator forms.
- Validate mirror: read-only access with containers copied on read.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from argspec.utils import Unset, UnsetType, coalesce, rename, mirror


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testUnsetIsFalsey(self):
        self.assertFalse(Unset)

    def testUnsetRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetIsSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testUnsetSurvivesCopies(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy([Unset])[0], Unset)

    def testUnsetTypeIsSealed(self):
        with self.assertRaises(TypeError):
            class Derived(UnsetType):  # NOQA: F-841
                pass

    def testUnsetUnionWithType(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", str | Unset)
        self.assertNotIsInstance(3, str | Unset)


class TestCoalesce(TestCase):
    """Behavioral tests for coalesce."""

    def testCoalesceReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testCoalesceDefaultsToNone(self):
        self.assertIsNone(coalesce(Unset))

    def testCoalescePreservesFalseyValues(self):
        for value in (None, 0, "", [], False):
            self.assertIs(coalesce(value, "fallback"), value)


class TestRename(TestCase):
    """Behavioral tests for rename."""

    def testRenameDirect(self):
        def helper():
            pass

        self.assertIs(rename(helper, "renamed"), helper)
        self.assertEqual(helper.__name__, "renamed")
        self.assertEqual(helper.__qualname__, "renamed")

    def testRenameDecorator(self):
        @rename("decorated")
        def helper():
            pass

        self.assertEqual(helper.__name__, "decorated")

    def testRenameRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            rename(42, "name")

    def testRenameRejectsNonStringName(self):
        with self.assertRaises(TypeError):
            rename(42)

    def testRenameArity(self):
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):
    """Behavioral tests for mirror."""

    class Holder:
        items = mirror("items")
        labels = mirror("labels")
        count = mirror("count")

        def __init__(self):
            self._items = ["a", "b"]
            self._labels = ("x", "y")
            self._count = 2

    def testMirrorReadsBackingField(self):
        self.assertEqual(self.Holder().count, 2)

    def testMirrorCopiesLists(self):
        holder = self.Holder()
        holder.items.append("c")
        self.assertEqual(holder.items, ["a", "b"])

    def testMirrorKeepsTuples(self):
        self.assertEqual(self.Holder().labels, ("x", "y"))

    def testMirrorIsReadOnly(self):
        with self.assertRaises(AttributeError):
            self.Holder().count = 3

    def testMirrorRejectsNonStringName(self):
        with self.assertRaises(TypeError):
            mirror(3)


if __name__ == "__main__":
    unittest.main()
