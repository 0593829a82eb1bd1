import multiprocessing
import os
import unittest
from unittest import mock

from _fixtures import demo_report, dumps, report, result, run

from ingest.progress import ProgressTracker
from ingest.transport import (
    PARSE_COMPLETE,
    PARSE_ERROR,
    PARSE_PROGRESS,
    PARSE_SARIF,
    ParseComplete,
    ParseFailed,
    ParseProgress,
    ParseRequest,
    ParseSlot,
    ParseWorker,
    handle_request,
    is_terminal,
)
from sarif_insight.errors import InvalidSchema, MalformedInput, TransportFailure


def _mp_context():
    methods = multiprocessing.get_all_start_methods()
    return multiprocessing.get_context("fork" if "fork" in methods else None)


def _die_without_reply(request_dict, out, target_version, progress_interval) -> None:
    out.put(ParseProgress(progress=10, stage="Parsing JSON..."))
    os._exit(3)


def _collect(request: ParseRequest, **kwargs):
    msgs = []
    terminal = handle_request(request, msgs.append, **kwargs)
    return msgs, terminal


class TestProgressTracker(unittest.TestCase):
    def test_clamps_and_never_goes_backwards(self) -> None:
        seen = []
        t = ProgressTracker(lambda p, s: seen.append(p))
        for p in (10, 5, 150, 90, -3):
            t.report(p, "x")
        self.assertEqual([10, 100], seen)

    def test_result_walk_interval(self) -> None:
        seen = []
        t = ProgressTracker(lambda p, s: seen.append((p, s)), interval=2)
        for done in range(5):
            t.on_result(done, 5)
        self.assertEqual(
            [
                (50, "Processing result 1 of 5..."),
                (66, "Processing result 3 of 5..."),
                (82, "Processing result 5 of 5..."),
            ],
            seen,
        )


class TestHandleRequest(unittest.TestCase):
    def test_success_stream(self) -> None:
        msgs, terminal = _collect(ParseRequest(dumps(demo_report()), "demo.sarif"))

        self.assertIsInstance(terminal, ParseComplete)
        self.assertIs(terminal, msgs[-1])
        self.assertEqual(1, sum(1 for m in msgs if is_terminal(m)))

        progress = [m.progress for m in msgs if isinstance(m, ParseProgress)]
        self.assertEqual(sorted(progress), progress)
        self.assertTrue(all(0 <= p <= 100 for p in progress))
        self.assertEqual(100, progress[-1])

        stages = [m.stage for m in msgs if isinstance(m, ParseProgress)]
        self.assertEqual("Parsing JSON...", stages[0])
        self.assertIn("Finalizing...", stages)
        self.assertEqual("Complete", stages[-1])

    def test_progress_is_monotonic_for_many_results(self) -> None:
        doc = report(run("Demo", results=[result("R1", level="note") for _ in range(250)]))
        msgs, terminal = _collect(ParseRequest(dumps(doc), "big.sarif"), progress_interval=10)

        progress = [m.progress for m in msgs if isinstance(m, ParseProgress)]
        self.assertEqual(sorted(progress), progress)
        self.assertTrue(any("Processing result" in m.stage for m in msgs if isinstance(m, ParseProgress)))
        self.assertEqual(250, terminal.result.summary.total_findings)

    def test_malformed_input_is_a_single_terminal_error(self) -> None:
        msgs, terminal = _collect(ParseRequest("{not json", "bad.sarif"))

        self.assertIsInstance(terminal, ParseFailed)
        self.assertEqual(MalformedInput.kind, terminal.kind)
        self.assertTrue(terminal.error.startswith('Failed to parse SARIF file "bad.sarif": Invalid JSON format:'))
        self.assertEqual(1, sum(1 for m in msgs if is_terminal(m)))
        self.assertIsInstance(terminal.to_exception(), MalformedInput)

    def test_deeply_nested_json_is_malformed_input(self) -> None:
        msgs, terminal = _collect(ParseRequest("[" * 200000, "deep.sarif"))

        self.assertEqual(MalformedInput.kind, terminal.kind)
        self.assertTrue(terminal.error.startswith('Failed to parse SARIF file "deep.sarif": Invalid JSON format:'))
        self.assertEqual(1, sum(1 for m in msgs if is_terminal(m)))

    def test_invalid_schema(self) -> None:
        _, terminal = _collect(ParseRequest('{"version":"2.1.0"}', "x.sarif"))

        self.assertEqual(InvalidSchema.kind, terminal.kind)
        exc = terminal.to_exception()
        self.assertIsInstance(exc, InvalidSchema)
        self.assertEqual("runs", exc.details)

    def test_unexpected_exception_becomes_worker_error(self) -> None:
        with mock.patch("ingest.transport.parse_report_text", side_effect=ValueError("boom")):
            _, terminal = _collect(ParseRequest(dumps(demo_report()), "x.sarif"))

        self.assertEqual(TransportFailure.kind, terminal.kind)
        self.assertEqual("Worker error: boom", terminal.error)
        self.assertIn("ValueError", terminal.details)

    def test_wire_shapes(self) -> None:
        req = ParseRequest("{}", "a.sarif")
        self.assertEqual({"type": PARSE_SARIF, "payload": {"fileContent": "{}", "fileName": "a.sarif"}}, req.to_dict())
        self.assertEqual(req, ParseRequest.from_dict(req.to_dict()))
        self.assertEqual(PARSE_PROGRESS, ParseProgress(10, "Parsing JSON...").to_dict()["type"])
        self.assertEqual({"type": PARSE_ERROR, "payload": {"error": "e"}}, ParseFailed("e", "MalformedInput").to_dict())

        msgs, terminal = _collect(ParseRequest(dumps(demo_report()), "demo.sarif"))
        wire = terminal.to_dict()
        self.assertEqual(PARSE_COMPLETE, wire["type"])
        self.assertEqual(["0-0", "0-1"], [f["id"] for f in wire["payload"]["findings"]])

        with self.assertRaises(ValueError):
            ParseRequest.from_dict({"type": PARSE_PROGRESS})


class TestParseWorker(unittest.TestCase):
    def test_worker_streams_to_one_terminal_message(self) -> None:
        worker = ParseWorker(poll_seconds=0.1, mp_context=_mp_context())
        worker.start(ParseRequest(dumps(demo_report()), "demo.sarif"))
        msgs = list(worker.messages())

        self.assertTrue(worker.finished)
        self.assertIsInstance(msgs[-1], ParseComplete)
        self.assertEqual(1, sum(1 for m in msgs if is_terminal(m)))
        self.assertEqual(["0-0", "0-1"], [f.id for f in msgs[-1].result.findings])

    def test_run_raises_the_parse_error(self) -> None:
        worker = ParseWorker(poll_seconds=0.1, mp_context=_mp_context())
        with self.assertRaises(MalformedInput):
            worker.run(ParseRequest("{not json", "bad.sarif"))

    def test_dead_child_yields_transport_failure(self) -> None:
        worker = ParseWorker(poll_seconds=0.1, mp_context=_mp_context())
        with mock.patch("ingest.transport._worker_main", _die_without_reply):
            worker.start(ParseRequest("{}", "x.sarif"))
        msgs = list(worker.messages())

        self.assertIsInstance(msgs[-1], ParseFailed)
        self.assertEqual(TransportFailure.kind, msgs[-1].kind)
        self.assertIn("exited with code 3", msgs[-1].error)
        self.assertEqual(1, sum(1 for m in msgs if is_terminal(m)))

    def test_worker_is_one_shot(self) -> None:
        worker = ParseWorker(poll_seconds=0.1, mp_context=_mp_context())
        worker.run(ParseRequest(dumps(demo_report()), "demo.sarif"))
        with self.assertRaises(RuntimeError):
            worker.start(ParseRequest(dumps(demo_report()), "demo.sarif"))


class TestParseSlot(unittest.TestCase):
    def test_starting_again_cancels_previous_worker(self) -> None:
        workers = []

        def factory() -> ParseWorker:
            w = ParseWorker(poll_seconds=0.1, mp_context=_mp_context())
            workers.append(w)
            return w

        slot = ParseSlot(factory)
        first = slot.start(ParseRequest(dumps(demo_report()), "a.sarif"))
        second = slot.start(ParseRequest(dumps(demo_report()), "a.sarif"))

        self.assertTrue(first.finished)
        self.assertIs(second, slot.current)
        self.assertIsInstance(list(second.messages())[-1], ParseComplete)

        slot.cancel()
        self.assertIsNone(slot.current)
        self.assertEqual(2, len(workers))


if __name__ == "__main__":
    unittest.main()
