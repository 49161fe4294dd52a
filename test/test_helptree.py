"""
Help tree rendering tests.

Scope
- Validate the full renderer (labels, descriptions, nesting, unreachable marker).
- Validate the terse renderer used for error suggestions.

Conventions
- Test method names follow CamelCase per project convention.
- Trees are built by hand here; declaration-driven trees are covered in
  test_commands.
"""

from __future__ import annotations

import unittest
import warnings
from unittest import TestCase

from conso import HelpTree, UnreachableCommandWarning, UNREACHABLE, OTHERWISE


def inventory():
    root = HelpTree()
    greet = root.branch()
    greet.path_segment.append("greet")
    greet.descriptions.append("Give the world a wonderful greeting")
    greet.is_standalone_command = True

    inv = root.branch()
    inv.path_segment.append("inv")
    inv.descriptions.append("Manage inventory")

    listing = inv.branch()
    listing.path_segment.append("list")
    listing.descriptions.append("List all items")
    listing.is_standalone_command = True

    add = inv.branch()
    add.path_segment.extend(["add", "<string>"])
    add.is_standalone_command = True
    return root


class TestHelpTree(TestCase):
    """Behavioral tests for HelpTree renderers."""

    def testFullRendering(self):
        self.assertEqual(inventory().full().splitlines(), [
            "greet",
            " | Give the world a wonderful greeting",
            "inv",
            " | Manage inventory",
            " | list",
            " |  | List all items",
            " | add <string>",
        ])

    def testFullRenderingIndented(self):
        self.assertEqual(inventory().full(1).splitlines()[0], " | greet")

    def testTerseListsImmediateBranches(self):
        self.assertEqual(inventory().terse(), "greet | inv")

    def testTerseOfLeafIsEmpty(self):
        self.assertEqual(HelpTree(["greet"]).terse(), "")

    def testBranchesKeepInsertionOrder(self):
        root = HelpTree()
        for name in ("w", "s", "a", "d"):
            root.branch().path_segment.append(name)
        self.assertEqual(root.terse(), "w | s | a | d")

    def testUnreachableBranchFlagged(self):
        root = HelpTree()
        root.branch().path_segment.append("broken")
        with self.assertWarns(UnreachableCommandWarning):
            lines = root.full().splitlines()
        self.assertEqual(lines, ["broken", " | " + UNREACHABLE])

    def testReachableBranchesDoNotWarn(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            inventory().full()

    def testMultilineDescriptionSplit(self):
        root = HelpTree()
        branch = root.branch()
        branch.path_segment.append("x")
        branch.descriptions.append("first\nsecond")
        branch.is_standalone_command = True
        self.assertEqual(root.full().splitlines(), ["x", " | first", " | second"])

    def testLabel(self):
        self.assertEqual(HelpTree(["inv", "add"]).label, "inv add")

    def testFallbackBranchNamed(self):
        root = HelpTree()
        root.branch().path_segment.append("greet")
        root.branch()
        for branch in root.branches:
            branch.is_standalone_command = True
        self.assertEqual(root.full().splitlines(), ["greet", OTHERWISE])
        self.assertEqual(root.terse(), "greet")

    def testNotesIndented(self):
        tree = HelpTree(["inv"])
        tree.descriptions.append("Manage inventory")
        self.assertEqual(list(tree.notes(1)), [" | Manage inventory"])


if __name__ == "__main__":
    unittest.main()
