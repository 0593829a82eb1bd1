import unittest
from dataclasses import replace

from _fixtures import demo_report, dumps, mixed_report

from ingest.filters import available_facets, files_list, filter_findings, matches, rules_list
from ingest.parse import parse_report_text
from sarif_insight.domain import FilterState, parse_severity


class TestFilterFindings(unittest.TestCase):
    def setUp(self) -> None:
        self.findings = list(parse_report_text(dumps(mixed_report())).findings)

    def ids(self, state: FilterState) -> list:
        return [f.id for f in filter_findings(self.findings, state)]

    def test_severity_filter_on_demo_report(self) -> None:
        findings = parse_report_text(dumps(demo_report())).findings
        out = filter_findings(findings, FilterState.from_dict({"severity": ["error"]}))
        self.assertEqual([findings[0]], out)

    def test_unrestricted_returns_everything_in_order(self) -> None:
        self.assertEqual(self.findings, filter_findings(self.findings, FilterState.unrestricted()))

    def test_default_state_hides_only_suppressed(self) -> None:
        out = self.ids(FilterState())
        self.assertNotIn("0-2", out)
        self.assertEqual(len(self.findings) - 1, len(out))

    def test_default_state_passes_reports_without_suppressions(self) -> None:
        findings = parse_report_text(dumps(demo_report())).findings
        self.assertEqual(list(findings), filter_findings(findings))

    def test_result_is_an_order_preserving_subset(self) -> None:
        out = filter_findings(self.findings, FilterState.build(severities=["error", "note"], show_suppressed=True))
        positions = [self.findings.index(f) for f in out]
        self.assertEqual(sorted(positions), positions)
        self.assertTrue(all(f in self.findings for f in out))

    def test_filtering_is_idempotent(self) -> None:
        state = FilterState.build(severities=["error", "warning"], search="xss")
        once = filter_findings(self.findings, state)
        self.assertEqual(once, filter_findings(once, state))

    def test_rule_filter(self) -> None:
        self.assertEqual(["0-1", "1-0"], self.ids(FilterState.build(rule_ids="xss")))

    def test_show_suppressed(self) -> None:
        self.assertIn("0-2", self.ids(FilterState.build(rule_ids=["xss"], show_suppressed=True)))

    def test_hide_fixed(self) -> None:
        self.assertNotIn("1-0", self.ids(FilterState.build(show_fixed=False)))

    def test_exact_file_set_matches_any_location(self) -> None:
        self.assertEqual(["0-1"], self.ids(FilterState.build(files=["src/templates.py"])))

    def test_file_pattern_is_a_substring(self) -> None:
        self.assertEqual(["1-0", "1-1"], self.ids(FilterState.build(file_pattern="web/")))

    def test_search_is_case_insensitive_over_message_and_rule_id(self) -> None:
        self.assertEqual(["0-0"], self.ids(FilterState.build(search="unsanitized")))
        self.assertEqual(["1-1"], self.ids(FilterState.build(search="PROTOTYPE-POLLUTION")))

    def test_search_looks_at_markdown(self) -> None:
        f = self.findings[0]
        md = replace(f, message_markdown="See **docs** for details")
        self.assertTrue(matches(md, FilterState.build(search="docs")))
        self.assertFalse(matches(f, FilterState.build(search="docs")))

    def test_empty_terms_never_filter(self) -> None:
        state = FilterState.build(severities=[], rule_ids=[], files=[], file_pattern="", search="", show_suppressed=True)
        self.assertEqual(self.findings, filter_findings(self.findings, state))

    def test_conjunction(self) -> None:
        state = FilterState.build(severities=["error"], file_pattern="src/")
        self.assertEqual(["0-0"], self.ids(state))

    def test_files_list_and_facets(self) -> None:
        rows = files_list(self.findings)
        self.assertEqual([("src/views.py", 2), ("web/app.js", 2)], rows[:2])
        self.assertEqual(sum(c for _, c in rows), sum(len(f.uris) for f in self.findings))

        directory = parse_report_text(dumps(mixed_report())).rules
        entries = rules_list(self.findings[:2], directory)
        self.assertEqual([("sql-injection", 1), ("xss", 1)], [(e.id, e.count) for e in entries])
        self.assertEqual("SqlInjection", entries[0].name)

        facets = available_facets(self.findings)
        self.assertEqual(["error", "warning", "note"], facets["severity"])
        self.assertIn("prototype-pollution", facets["rule_ids"])


class TestFilterState(unittest.TestCase):
    def test_build_normalizes_severities_and_strings(self) -> None:
        state = FilterState.build(severities="ERROR", rule_ids="R1")
        self.assertEqual(frozenset({"error"}), state.severities)
        self.assertEqual(frozenset({"R1"}), state.rule_ids)

    def test_none_alias_maps_to_note(self) -> None:
        self.assertEqual(frozenset({"note"}), FilterState.build(severities=["None"]).severities)

    def test_unknown_severity_is_rejected(self) -> None:
        for bad in ("err", "crit", ""):
            with self.subTest(severity=bad), self.assertRaises(ValueError):
                parse_severity(bad)
        with self.assertRaises(ValueError):
            FilterState.build(severities=["error", "err"])
        with self.assertRaises(ValueError):
            FilterState.from_dict({"severity": ["crit"]})

    def test_from_dict_round_trip(self) -> None:
        state = FilterState.build(severities=["warning"], search="sql", show_fixed=False)
        self.assertEqual(state, FilterState.from_dict(state.to_dict()))

    def test_is_default(self) -> None:
        self.assertTrue(FilterState().is_default())
        self.assertFalse(FilterState.unrestricted().is_default())


if __name__ == "__main__":
    unittest.main()
