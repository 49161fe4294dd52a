"""
Utilities tests (Unset marker, coalesce, host hooks).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import ast
import copy
import pathlib
import pickle
import sys
import unittest
from unittest import TestCase, mock

import conso
from conso.utils import Unset, UnsetType, coalesce, mainattr


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsey(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testCopiesKeepIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy([Unset])[0], Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})


class TestHelpers(TestCase):

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "~> "), "~> ")
        self.assertEqual(coalesce(">> ", "~> "), ">> ")
        self.assertIsNone(coalesce(None, "~> "))
        self.assertIsNone(coalesce(Unset))

    def testMainattr(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__prompt__", "game> ", create=True):
            self.assertEqual(mainattr("__prompt__", "~> "), "game> ")
        self.assertEqual(mainattr("__conso_missing_hook__", "~> "), "~> ")

    def testMainattrName(self):
        with self.assertRaises(TypeError):
            mainattr(3)


class TestPackageStub(TestCase):
    """The package stub keeps typing names apart from exported constraints."""

    def testReleaseLevelUsesTypingLiteral(self):
        source = pathlib.Path(conso.__file__).with_suffix(".pyi").read_text(encoding="utf-8")
        tree = ast.parse(source)
        typing_names = {
            alias.asname or alias.name
            for node in ast.walk(tree)
            if isinstance(node, ast.ImportFrom) and node.module == "typing"
            for alias in node.names
        }
        annotations = [
            node.annotation
            for node in ast.walk(tree)
            if isinstance(node, ast.AnnAssign) and getattr(node.target, "id", None) == "releaselevel"
        ]
        self.assertTrue(annotations)
        for annotation in annotations:
            self.assertIsInstance(annotation, ast.Subscript)
            self.assertIn(annotation.value.id, typing_names)
            self.assertNotIn(annotation.value.id, conso.__all__)


if __name__ == "__main__":
    unittest.main()
