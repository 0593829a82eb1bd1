import unittest

from _fixtures import demo_report, dumps, mixed_report

from ingest.parse import parse_report_text
from ingest.state import AnalyzerState
from ingest.transport import ParseComplete, ParseFailed, ParseProgress
from sarif_insight.domain import FilterState


class TestAnalyzerState(unittest.TestCase):
    def setUp(self) -> None:
        self.result = parse_report_text(dumps(mixed_report()))

    def test_begin_and_progress(self) -> None:
        state = AnalyzerState(error="old")
        state.begin_parse()
        self.assertTrue(state.is_loading)
        self.assertEqual(0, state.progress)
        self.assertIsNone(state.error)

        state.apply_message(ParseProgress(30, "Analyzing tools..."))
        self.assertEqual(30, state.progress)
        self.assertEqual("Analyzing tools...", state.stage)

    def test_complete_replaces_result(self) -> None:
        state = AnalyzerState()
        state.begin_parse()
        state.select("0-0")
        state.apply_message(ParseComplete(self.result))

        self.assertIs(self.result, state.result)
        self.assertFalse(state.is_loading)
        self.assertEqual(100, state.progress)
        self.assertIsNone(state.selected_finding_id)

    def test_failure_keeps_previous_result(self) -> None:
        state = AnalyzerState()
        state.set_result(self.result)
        state.begin_parse()
        state.apply_message(ParseFailed("Failed to parse", "MalformedInput"))

        self.assertIs(self.result, state.result)
        self.assertEqual("Failed to parse", state.error)
        self.assertFalse(state.is_loading)
        self.assertEqual(0, state.progress)

    def test_unknown_message_type(self) -> None:
        with self.assertRaises(TypeError):
            AnalyzerState().apply_message("nope")

    def test_filtered_view_follows_filter_changes(self) -> None:
        state = AnalyzerState()
        state.set_result(self.result)
        self.assertEqual(5, len(state.filtered_findings()))

        state.set_filters(severities="error")
        self.assertEqual(["0-0", "1-0"], [f.id for f in state.filtered_findings()])
        self.assertEqual(frozenset({"error"}), state.filters.severities)

        state.set_filters(search="dom")
        self.assertEqual(["1-0"], [f.id for f in state.filtered_findings()])
        self.assertEqual([("xss", 1)], [(e.id, e.count) for e in state.visible_rules_list()])
        self.assertEqual([("web/app.js", 1)], state.files_list())

        state.reset_filters()
        self.assertEqual(FilterState(), state.filters)
        self.assertEqual(5, len(state.filtered_findings()))

    def test_use_filters_rebuilds_the_filtered_view(self) -> None:
        state = AnalyzerState()
        state.set_result(self.result)
        self.assertEqual(5, len(state.filtered_findings()))

        state.use_filters(FilterState.build(severities=["error"], show_fixed=False))
        self.assertEqual(["0-0"], [f.id for f in state.filtered_findings()])

        state.use_filters(FilterState.unrestricted())
        self.assertEqual(6, len(state.filtered_findings()))

    def test_selection(self) -> None:
        state = AnalyzerState()
        self.assertIsNone(state.selected_finding())
        state.set_result(parse_report_text(dumps(demo_report())))

        state.select("0-1")
        self.assertEqual("unknown", state.selected_finding().rule_id)
        state.select("9-9")
        self.assertIsNone(state.selected_finding())

    def test_clear(self) -> None:
        state = AnalyzerState()
        state.set_result(self.result)
        state.set_filters(search="x")
        state.clear()

        self.assertIsNone(state.result)
        self.assertEqual([], state.filtered_findings())
        self.assertEqual([], state.rules_list())
        self.assertTrue(state.filters.is_default())


if __name__ == "__main__":
    unittest.main()
