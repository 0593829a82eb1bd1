import unittest

from ingest.registry import RuleRegistry


class TestRuleRegistry(unittest.TestCase):
    def test_register_run_counts_only_valid_unique_ids(self) -> None:
        reg = RuleRegistry()
        added = reg.register_run(
            0,
            {
                "name": "Demo",
                "rules": [{"id": "R1"}, {"id": "R1", "name": "dup"}, {"name": "no id"}, "junk", {"id": "R2"}],
            },
        )

        self.assertEqual(2, added)
        self.assertEqual(2, len(reg))
        self.assertIsNone(reg.get(0, "R1").name)
        self.assertEqual("Demo", reg.get(0, "R2").tool_name)

    def test_resolve_creates_placeholder_once(self) -> None:
        reg = RuleRegistry()
        reg.register_run(0, {"name": "Demo"})

        a = reg.resolve(0, "ghost")
        b = reg.resolve(0, "ghost")

        self.assertTrue(a.placeholder)
        self.assertIs(a, b)
        self.assertEqual("Demo", a.tool_name)
        self.assertIn("ghost", reg)

    def test_first_declaration_wins_in_merged_view(self) -> None:
        reg = RuleRegistry()
        reg.register_run(0, {"name": "A", "rules": [{"id": "R", "name": "from A"}]})
        reg.register_run(1, {"name": "B", "rules": [{"id": "R", "name": "from B"}]})

        self.assertEqual("from A", reg.merged()["R"].name)
        self.assertEqual("from B", reg.for_run(1)["R"].name)

    def test_declaration_replaces_earlier_placeholder(self) -> None:
        reg = RuleRegistry()
        reg.register_run(0, {"name": "A"})
        reg.resolve(0, "R")
        reg.register_run(1, {"name": "B", "rules": [{"id": "R", "name": "declared"}]})

        merged = reg.merged()["R"]
        self.assertFalse(merged.placeholder)
        self.assertEqual("declared", merged.name)
        # run 0 still sees its own placeholder
        self.assertTrue(reg.get(0, "R").placeholder)


if __name__ == "__main__":
    unittest.main()
