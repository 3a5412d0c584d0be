"""
Arguments module behavioral tests (records, slots, declaration helpers).

Scope
- Validate Slot construction, kind/value access and representation.
- Validate Argument defaults, derived properties (positional, display, value)
  and read-only declarative fields.
- Validate the declaration helpers (positional/option/count/toggle/store_true/store_false).

Conventions
- Test method names follow CamelCase per project convention.
- Structural rules are not tested here: construction is permissive and the
  registry owns validation (see test_registry).
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from rich.pretty import pretty_repr

from argbind import (
    Action,
    Argument,
    Slot,
    Type,
    count,
    option,
    positional,
    store_false,
    store_true,
    toggle,
)
from argbind.utils import Unset


class TestSlot(TestCase):
    """Behavioral tests for typed storage slots."""

    def testKindAndDefaultValue(self):
        slot = Slot(Type.INT)
        self.assertIs(slot.kind, Type.INT)
        self.assertIsNone(slot.value)

    def testInitialValue(self):
        slot = Slot(Type.STRING, "out.txt")
        self.assertEqual(slot.value, "out.txt")

    def testValueIsWritable(self):
        slot = Slot(Type.FLOAT, 0.0)
        slot.value = 2.5
        self.assertEqual(slot.value, 2.5)

    def testKindIsReadOnly(self):
        slot = Slot(Type.BOOL, False)
        with self.assertRaises(AttributeError):
            slot.kind = Type.INT

    def testKindMustBeType(self):
        with self.assertRaises(TypeError):
            Slot(int, 0)

    def testRepr(self):
        self.assertEqual(repr(Slot(Type.INT, 3)), "Slot(INT, 3)")


class TestArgument(TestCase):
    """Behavioral tests for Argument records."""

    def testDefaults(self):
        argument = Argument(Type.INT, "x")
        self.assertIs(argument.action, Action.STORE)
        self.assertIs(argument.name, Unset)
        self.assertIs(argument.choices, Unset)
        self.assertFalse(argument.required)
        self.assertEqual(argument.count, 0)

    def testStorageCreatedWhenOmitted(self):
        argument = Argument(Type.FLOAT, "r")
        self.assertIsInstance(argument.storage, Slot)
        self.assertIs(argument.storage.kind, Type.FLOAT)
        self.assertIsNone(argument.value)

    def testStorageIsSharedNotCopied(self):
        slot = Slot(Type.INT, 7)
        argument = Argument(Type.INT, "x", storage=slot)
        self.assertIs(argument.storage, slot)
        slot.value = 9
        self.assertEqual(argument.value, 9)

    def testChoicesBecomeTuple(self):
        argument = Argument(Type.STRING, "m", choices=["fast", "safe"])
        self.assertEqual(argument.choices, ("fast", "safe"))

    def testPositionalProperty(self):
        self.assertTrue(Argument(Type.STRING, name="FILE").positional)
        self.assertFalse(Argument(Type.STRING, name="--file").positional)
        self.assertFalse(Argument(Type.STRING, "f").positional)

    def testDisplayPrefersName(self):
        self.assertEqual(Argument(Type.INT, "x", "--value").display, "--value")
        self.assertEqual(Argument(Type.INT, "x").display, "-x")

    def testDeclarativeFieldsAreReadOnly(self):
        argument = Argument(Type.INT, "x")
        for field in ("type", "action", "flag", "name", "storage", "help", "required", "choices"):
            with self.subTest(field=field):
                with self.assertRaises(AttributeError):
                    setattr(argument, field, None)

    def testCountIsWritable(self):
        argument = Argument(Type.INT, "x")
        argument.count += 1
        self.assertEqual(argument.count, 1)

    def testRepr(self):
        text = repr(Argument(Type.INT, "x", "--value", required=True))
        self.assertTrue(text.startswith("Argument("))
        self.assertIn("flag='x'", text)
        self.assertIn("name='--value'", text)
        self.assertIn("required=True", text)

    def testRichRepr(self):
        text = pretty_repr(Argument(Type.STRING, name="FILE"))
        self.assertIn("Argument(", text)
        self.assertIn("name='FILE'", text)


class TestHelpers(TestCase):
    """Behavioral tests for the declaration helpers."""

    def testPositionalIsRequiredStore(self):
        argument = positional(Type.STRING, "FILE", help="input file")
        self.assertIs(argument.action, Action.STORE)
        self.assertTrue(argument.required)
        self.assertIs(argument.flag, Unset)
        self.assertEqual(argument.help, "input file")

    def testPositionalWithChoices(self):
        argument = positional(Type.INT, "LEVEL", choices=(1, 2))
        self.assertEqual(argument.choices, (1, 2))

    def testOptionIsOptionalStoreByDefault(self):
        argument = option(Type.INT, "d", "--depth")
        self.assertIs(argument.action, Action.STORE)
        self.assertFalse(argument.required)

    def testOptionRequired(self):
        self.assertTrue(option(Type.INT, "s", "--sum", required=True).required)

    def testCountIsIntCount(self):
        argument = count("v", "--verbose")
        self.assertIs(argument.type, Type.INT)
        self.assertIs(argument.action, Action.COUNT)

    def testBooleanHelpers(self):
        for helper, action in (
            (toggle, Action.BOOLEAN_TOGGLE),
            (store_true, Action.STORE_TRUE),
            (store_false, Action.STORE_FALSE),
        ):
            with self.subTest(action=action):
                argument = helper("b", "--bool")
                self.assertIs(argument.type, Type.BOOL)
                self.assertIs(argument.action, action)
                self.assertIs(argument.storage.kind, Type.BOOL)


class TestEnums(TestCase):
    """Small behaviors attached to Type and Action."""

    def testBuiltins(self):
        self.assertIs(Type.INT.builtin, int)
        self.assertIs(Type.FLOAT.builtin, float)
        self.assertIs(Type.BOOL.builtin, bool)
        self.assertIs(Type.STRING.builtin, str)

    def testBooleanActions(self):
        self.assertEqual(
            {action for action in Action if action.boolean},
            {Action.STORE_TRUE, Action.STORE_FALSE, Action.BOOLEAN_TOGGLE},
        )


if __name__ == "__main__":
    unittest.main()
