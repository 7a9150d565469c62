# python
"""
Arguments module behavioral tests.

Scope
- Validate descriptor construction: name, flags, default and description checks.
- Validate kind-specific setters and their effect on value and set flag.
- Validate option matching (unattached, attached, case-insensitive) and name lookup.
- Validate sealing, slot binding and read-only introspection.

Conventions
- Test method names follow CamelCase per project convention.
- Descriptors are built directly; the definition grammar is covered in grammar.py.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argspec import Argument, ArgumentFlag, ArgumentKind, Boolean, Integer, Real, String, StringList, Choice


class TestConstruction(TestCase):
    """Behavioral tests for descriptor construction."""

    def testArgumentIsAbstract(self):
        with self.assertRaises(TypeError):
            Argument("-x")

    def testNameValidation(self):
        for name in ("x", "-", "--", "-_x", "-a-b", "-é"):
            with self.assertRaises(ValueError):
                Integer(name)
        with self.assertRaises(TypeError):
            Integer(5)

    def testNameShapesAccepted(self):
        for name in ("-v", "--max_depth", "-I", "---3d"):
            self.assertEqual(Integer(name).name, name)

    def testFlagsMustBeIntegral(self):
        with self.assertRaises(TypeError):
            Integer("-n", flags=True)
        with self.assertRaises(TypeError):
            Integer("-n", flags="r")
        self.assertIs(type(Integer("-n", flags=2).flags), ArgumentFlag)

    def testDefaultsWhenAbsent(self):
        self.assertIs(Boolean("-v").value, False)
        self.assertEqual(Integer("-n").value, 0)
        self.assertEqual(Real("-r").value, 0.0)
        self.assertEqual(String("-s").value, "")
        self.assertEqual(StringList("-l").value, [])
        self.assertEqual(Choice("-c", ["a", "b"]).value, 0)

    def testDefaultTypeChecked(self):
        with self.assertRaises(TypeError):
            Integer("-n", default="3")
        with self.assertRaises(TypeError):
            Integer("-n", default=True)
        with self.assertRaises(TypeError):
            Boolean("-v", default=1)
        with self.assertRaises(TypeError):
            String("-s", default=3)

    def testRealDefaultWidened(self):
        value = Real("-r", default=2).value
        self.assertIsInstance(value, float)
        self.assertEqual(value, 2.0)

    def testDescrDefaultsToEmpty(self):
        self.assertEqual(Integer("-n").descr, "")
        with self.assertRaises(TypeError):
            Integer("-n", descr=3)

    def testBooleanCannotBeAttached(self):
        with self.assertRaises(TypeError):
            Boolean("-v", attached=True)

    def testChoicesMustBeStrings(self):
        with self.assertRaises(TypeError):
            Choice("-c", "abc")
        with self.assertRaises(TypeError):
            Choice("-c", [1, 2])

    def testKindsAndArity(self):
        self.assertIs(Boolean("-v").kind, ArgumentKind.BOOLEAN)
        self.assertEqual(Boolean("-v").arity, 0)
        for argument in (Integer("-n"), Real("-r"), String("-s"), Choice("-c", ["a"])):
            self.assertEqual(argument.arity, 1)

    def testStringListArityGrows(self):
        argument = StringList("-l")
        self.assertEqual(argument.arity, 0)
        argument.assign(["a"])
        self.assertEqual(argument.arity, 1)
        argument.assign(["b"])
        self.assertEqual(argument.arity, 2)
        self.assertEqual(StringList("-l", default="x").arity, 1)

    def testVariantsAreSealed(self):
        for variant in (Boolean, Integer, Real, String, StringList, Choice):
            with self.assertRaises(TypeError):
                type("Derived", (variant,), {})

    def testRepr(self):
        text = repr(Integer("-n", default=3))
        self.assertTrue(text.startswith("integer("))
        self.assertIn("name='-n'", text)
        self.assertTrue(repr(StringList("-l")).startswith("string-list("))


class TestAssign(TestCase):
    """Behavioral tests for kind-specific setters."""

    def testBooleanAlwaysSets(self):
        argument = Boolean("-v")
        self.assertTrue(argument.assign(()))
        self.assertIs(argument.value, True)
        self.assertTrue(argument.isset)

    def testIntegerSetter(self):
        argument = Integer("-n", default=3)
        self.assertTrue(argument.assign(["12"]))
        self.assertEqual((argument.value, argument.isset), (12, True))

    def testRejectedTextKeepsValueAndClearsSetFlag(self):
        argument = Integer("-n", default=3)
        argument.assign(["12"])
        self.assertFalse(argument.assign(["x"]))
        self.assertEqual((argument.value, argument.isset), (12, False))

    def testRealSetter(self):
        argument = Real("-r")
        self.assertTrue(argument.assign(["-4.5"]))
        self.assertEqual(argument.value, -4.5)
        self.assertFalse(argument.assign(["abc"]))
        self.assertEqual(argument.value, -4.5)

    def testStringTakesAnything(self):
        argument = String("-s")
        self.assertTrue(argument.assign(["-weird value"]))
        self.assertEqual(argument.value, "-weird value")

    def testStringListAppends(self):
        argument = StringList("-l", default="a")
        self.assertEqual(argument.value, ["a"])
        argument.assign(["b"])
        argument.assign(["c"])
        self.assertEqual(argument.value, ["a", "b", "c"])
        self.assertTrue(argument.multiple)

    def testStringListValueIsACopy(self):
        argument = StringList("-l")
        argument.value.append("leak")
        self.assertEqual(argument.value, [])

    def testChoiceSetter(self):
        argument = Choice("-c", ["a", "b", "c"])
        self.assertTrue(argument.assign(["b"]))
        self.assertEqual(argument.value, 1)
        self.assertFalse(argument.assign(["B"]))
        self.assertEqual(argument.value, 1)
        self.assertEqual(argument.choices, ("a", "b", "c"))

    def testResetKeepsValue(self):
        argument = Integer("-n")
        argument.assign(["5"])
        argument.reset()
        self.assertEqual((argument.value, argument.isset), (5, False))


class TestMatching(TestCase):
    """Behavioral tests for option matching and name lookup."""

    def testUnattachedNeedsEquality(self):
        argument = Integer("-i")
        self.assertTrue(argument.matches("-i"))
        self.assertFalse(argument.matches("-i42"))
        self.assertFalse(argument.matches("-I"))

    def testAttachedNeedsLongerToken(self):
        argument = Integer("-I", attached=True)
        self.assertTrue(argument.matches("-I42"))
        self.assertFalse(argument.matches("-I"))
        self.assertFalse(argument.matches("-i42"))

    def testNocaseMatching(self):
        argument = String("-Name", flags=ArgumentFlag.NOCASE)
        self.assertTrue(argument.matches("-NAME"))
        self.assertTrue(argument.isnamed("-name"))
        attached = String("-D", flags=ArgumentFlag.NOCASE, attached=True)
        self.assertTrue(attached.matches("-dvalue"))

    def testCaseSensitiveLookup(self):
        argument = String("-Name")
        self.assertTrue(argument.isnamed("-Name"))
        self.assertFalse(argument.isnamed("-name"))

    def testFlagProperties(self):
        argument = Integer("-n", flags=ArgumentFlag.REQUIRED | ArgumentFlag.SKIP)
        self.assertTrue(argument.required)
        self.assertTrue(argument.skip)
        self.assertFalse(argument.nocase)
        self.assertFalse(argument.multiple)


class TestBind(TestCase):
    """Behavioral tests for slot binding."""

    def testBindMatchingSlot(self):
        argument = Integer("-n", default=4)
        self.assertEqual(argument.bind(int), 4)

    def testBindMismatchedSlot(self):
        with self.assertRaises(TypeError):
            Integer("-n").bind(float)

    def testStringListBindsToListOrFirstString(self):
        argument = StringList("-l")
        self.assertIsNone(argument.bind(str))
        argument.assign(["x"])
        argument.assign(["y"])
        self.assertEqual(argument.bind(str), "x")
        self.assertEqual(argument.bind(list), ["x", "y"])


if __name__ == "__main__":
    unittest.main()
