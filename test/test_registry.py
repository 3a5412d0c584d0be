"""
Registry behavioral tests (validation order, atomic insertion, ordering).

Scope
- Validate every structural rule enforced by Registry.register().
- Validate that the first violated rule is the one reported.
- Validate insertion order, option/positional separation and register_many()
  partial application.

Conventions
- Test method names follow CamelCase per project convention.
- Arguments are built with the public helpers where one exists, and with
  Argument(...) directly to reach shapes the helpers never produce.
"""

from __future__ import annotations

import itertools
import unittest
from unittest import TestCase

from argbind import (
    Action,
    Argument,
    Registry,
    Slot,
    Type,
    count,
    option,
    positional,
    store_true,
    toggle,
)
from argbind.faults import (
    ConflictingOptionsError,
    FaultCode,
    InvalidActionError,
    InvalidIdentityError,
    InvalidTypeError,
    RegistrationError,
    UnsupportedActionError,
    UnsupportedChoicesError,
    UnsupportedRequireError,
)


class TestRegistryOrdering(TestCase):
    """Insertion order and sequence separation."""

    def testOptionsKeepInsertionOrder(self):
        arguments = [option(Type.INT, flag) for flag in "xyz"]

        for permutation in itertools.permutations(arguments):
            registry = Registry()
            registry.register_many(permutation)
            self.assertEqual(registry.options, permutation)

    def testPositionalsAreSeparated(self):
        file = positional(Type.STRING, "FILE")
        value = option(Type.INT, "x", "--value")
        registry = Registry()

        registry.register_many([file, value])

        self.assertEqual(registry.options, (value,))
        self.assertEqual(registry.positionals, (file,))
        self.assertEqual(list(registry), [value, file])
        self.assertEqual(len(registry), 2)
        self.assertIn(file, registry)

    def testRegistryKeepsReferences(self):
        argument = option(Type.INT, "x")
        registry = Registry()

        registry.register(argument)

        self.assertIs(registry.options[0], argument)

    def testRegisterManyStopsAtFirstFailure(self):
        first, clash, last = option(Type.INT, "x"), option(Type.FLOAT, "x"), option(Type.INT, "y")
        registry = Registry()

        with self.assertRaises(ConflictingOptionsError):
            registry.register_many([first, clash, last])

        self.assertEqual(registry.options, (first,))

    def testRejectsNonArgument(self):
        with self.assertRaises(TypeError):
            Registry().register("--value")


class TestRegistryValidation(TestCase):
    """One test per rule, plus the order in which rules are checked."""

    def assertRejected(self, exception, argument, code):
        registry = Registry()
        with self.assertRaises(exception) as context:
            registry.register(argument)
        self.assertEqual(context.exception.options["code"], code)
        self.assertEqual(len(registry), 0)
        return context.exception

    def testIdentityRequired(self):
        self.assertRejected(InvalidIdentityError, Argument(Type.INT), FaultCode.INVALID_IDENTITY)
        self.assertRejected(InvalidIdentityError, Argument(Type.INT, name=""), FaultCode.INVALID_IDENTITY)

    def testFlagMustBeOneCharacter(self):
        self.assertRejected(InvalidIdentityError, option(Type.INT, "xy"), FaultCode.INVALID_IDENTITY)

    def testInvalidType(self):
        self.assertRejected(InvalidTypeError, Argument("int", "x"), FaultCode.INVALID_TYPE)

    def testStorageKindMismatch(self):
        argument = option(Type.INT, "x", "--value", Slot(Type.FLOAT, 0.0))
        self.assertRejected(InvalidTypeError, argument, FaultCode.INVALID_TYPE)

    def testStorageMustBeSlot(self):
        argument = Argument(Type.INT, "x", storage=[0])
        self.assertRejected(InvalidTypeError, argument, FaultCode.INVALID_TYPE)

    def testInvalidAction(self):
        argument = Argument(Type.INT, "x", action="store")
        self.assertRejected(InvalidActionError, argument, FaultCode.INVALID_ACTION)

    def testBooleanActionsNeedBoolType(self):
        for action in (Action.STORE_TRUE, Action.STORE_FALSE, Action.BOOLEAN_TOGGLE):
            with self.subTest(action=action):
                argument = Argument(Type.INT, "f", "--flag", action=action)
                self.assertRejected(UnsupportedActionError, argument, FaultCode.UNSUPPORTED_ACTION)

    def testCountNeedsIntType(self):
        argument = Argument(Type.FLOAT, "v", action=Action.COUNT)
        self.assertRejected(UnsupportedActionError, argument, FaultCode.UNSUPPORTED_ACTION)

    def testStoreRefusesBoolType(self):
        argument = Argument(Type.BOOL, "b", "--bool")
        self.assertRejected(UnsupportedActionError, argument, FaultCode.UNSUPPORTED_ACTION)

    def testChoicesOnlyWithStore(self):
        argument = Argument(Type.INT, "v", action=Action.COUNT, choices=(1, 2))
        self.assertRejected(UnsupportedChoicesError, argument, FaultCode.UNSUPPORTED_CHOICES)

    def testChoicesMustNotBeEmpty(self):
        argument = option(Type.INT, "x", choices=())
        self.assertRejected(UnsupportedChoicesError, argument, FaultCode.UNSUPPORTED_CHOICES)

    def testChoicesMustMatchType(self):
        self.assertRejected(
            UnsupportedChoicesError,
            option(Type.INT, "x", choices=(1, "2")),
            FaultCode.UNSUPPORTED_CHOICES,
        )
        self.assertRejected(
            UnsupportedChoicesError,
            option(Type.INT, "x", choices=(1, True)),
            FaultCode.UNSUPPORTED_CHOICES,
        )

    def testFloatChoicesAcceptIntegers(self):
        registry = Registry()
        registry.register(option(Type.FLOAT, "r", choices=(1, 2.5)))
        self.assertEqual(len(registry), 1)

    def testPositionalMustStore(self):
        argument = Argument(Type.BOOL, name="FLAG", action=Action.STORE_TRUE)
        self.assertRejected(UnsupportedActionError, argument, FaultCode.UNSUPPORTED_ACTION)

    def testRequiredOnlyWithStore(self):
        argument = Argument(Type.BOOL, "v", "--verbose", action=Action.BOOLEAN_TOGGLE, required=True)
        self.assertRejected(UnsupportedRequireError, argument, FaultCode.UNSUPPORTED_REQUIRE)

    def testPositionalCarriesNoFlag(self):
        argument = Argument(Type.STRING, "f", "FILE")
        self.assertRejected(InvalidIdentityError, argument, FaultCode.INVALID_IDENTITY)

    def testBarePrefixName(self):
        self.assertRejected(InvalidIdentityError, option(Type.INT, "x", "--"), FaultCode.INVALID_IDENTITY)

    def testReservedHelpFlag(self):
        fault = self.assertRejected(ConflictingOptionsError, store_true("h"), FaultCode.CONFLICTING_OPTIONS)
        self.assertEqual(fault.options["flag"], "h")

    def testReservedHelpName(self):
        self.assertRejected(ConflictingOptionsError, store_true(name="--help"), FaultCode.CONFLICTING_OPTIONS)

    def testDuplicateFlag(self):
        registry = Registry()
        registry.register(option(Type.INT, "x", "--value"))

        with self.assertRaises(ConflictingOptionsError):
            registry.register(count("x", "--verbose"))

        self.assertEqual(len(registry.options), 1)

    def testDuplicateName(self):
        registry = Registry()
        registry.register(option(Type.INT, "x", "--value"))

        with self.assertRaises(ConflictingOptionsError) as context:
            registry.register(option(Type.INT, "y", "--value"))

        self.assertEqual(context.exception.options["name"], "--value")

    def testDuplicatePositionalName(self):
        registry = Registry()
        registry.register(positional(Type.STRING, "FILE"))

        with self.assertRaises(ConflictingOptionsError):
            registry.register(positional(Type.INT, "FILE"))

    def testFlagOnlyAndNameOnlyDoNotClash(self):
        registry = Registry()
        registry.register_many([toggle("v"), toggle(name="--verbose"), count("q"), count(name="--quiet")])
        self.assertEqual(len(registry.options), 4)

    def testIdentityCheckedBeforeType(self):
        self.assertRejected(InvalidIdentityError, Argument("int"), FaultCode.INVALID_IDENTITY)

    def testTypeCheckedBeforeAction(self):
        self.assertRejected(InvalidTypeError, Argument("int", "x", action="store"), FaultCode.INVALID_TYPE)

    def testActionMismatchCheckedBeforeReservedName(self):
        argument = Argument(Type.INT, "h", action=Action.STORE_TRUE)
        self.assertRejected(UnsupportedActionError, argument, FaultCode.UNSUPPORTED_ACTION)

    def testReservedCheckedBeforeDuplicates(self):
        registry = Registry()
        registry.register(option(Type.INT, "x"))
        with self.assertRaises(ConflictingOptionsError) as context:
            registry.register(option(Type.INT, "x", "--help"))
        self.assertIn("reserved", context.exception.message)

    def testAllFaultsAreRegistrationErrors(self):
        with self.assertRaises(RegistrationError):
            Registry().register(Argument(Type.INT))


if __name__ == "__main__":
    unittest.main()
