"""
Token cursor behavioral tests.

Scope
- Validate consumption (next/depth/remaining) and end-of-input signaling.
- Validate that snapshots are independent and commit() adopts them.
- Validate construction guards.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from conso import TokenCursor
from conso.utils import Unset


class TestTokenCursor(TestCase):
    """Behavioral tests for TokenCursor."""

    def testNextAdvancesDepth(self):
        cursor = TokenCursor(["inv", "add", "sword"])
        self.assertEqual(cursor.next(), "inv")
        self.assertEqual(cursor.next(), "add")
        self.assertEqual(cursor.depth, 2)
        self.assertEqual(cursor.remaining(), ("sword",))
        self.assertEqual(cursor.consumed(), ("inv", "add"))

    def testNextSignalsEndOfInput(self):
        cursor = TokenCursor(["only"])
        cursor.next()
        self.assertIs(cursor.next(), Unset)
        # depth never exceeds the token count
        self.assertEqual(cursor.depth, 1)
        self.assertTrue(cursor.remaining_empty())

    def testEmptyInputIsExhausted(self):
        cursor = TokenCursor([])
        self.assertTrue(cursor.remaining_empty())
        self.assertEqual(len(cursor), 0)

    def testSnapshotIsIndependent(self):
        cursor = TokenCursor(["a", "b"])
        probe = cursor.snapshot()
        probe.next()
        probe.next()
        self.assertEqual(cursor.depth, 0)
        self.assertEqual(probe.depth, 2)
        self.assertEqual(cursor.remaining(), ("a", "b"))

    def testCommitAdoptsSnapshotDepth(self):
        cursor = TokenCursor(["a", "b"])
        probe = cursor.snapshot()
        probe.next()
        cursor.commit(probe)
        self.assertEqual(cursor.depth, 1)
        self.assertEqual(cursor, probe)

    def testCommitRejectsForeignCursor(self):
        cursor = TokenCursor(["a"])
        with self.assertRaises(ValueError):
            cursor.commit(TokenCursor(["a"], 1))

    def testStringTokensRejected(self):
        with self.assertRaises(TypeError):
            TokenCursor("inv add")

    def testNonStringTokenRejected(self):
        with self.assertRaises(TypeError):
            TokenCursor(["inv", 3])

    def testDepthOutOfRangeRejected(self):
        with self.assertRaises(ValueError):
            TokenCursor(["a"], 2)


if __name__ == "__main__":
    unittest.main()
