from __future__ import annotations

import logging
import unittest

from rawsql.core.diagnostics import dump_error


class DumpErrorTests(unittest.TestCase):
    def test_raised_exception_logs_message_and_stack(self) -> None:
        try:
            raise ValueError("bad row")
        except ValueError as exc:
            error = exc

        with self.assertLogs("rawsql", level="ERROR") as logs:
            dump_error(error)

        self.assertEqual(len(logs.output), 2)
        self.assertIn("Message: bad row", logs.output[0])
        self.assertIn("Stacktrace:", logs.output[1])
        self.assertIn("test_raised_exception_logs_message_and_stack", logs.output[1])

    def test_unraised_exception_without_message_logs_nothing_extra(self) -> None:
        logger = logging.getLogger("rawsql.test.quiet")
        with self.assertLogs(logger, level="ERROR") as logs:
            dump_error(RuntimeError("only message"), logger=logger)
        self.assertEqual(logs.output, ["ERROR:rawsql.test.quiet:Message: only message"])

    def test_non_exception_logs_notice(self) -> None:
        for value in ("text", 3, None, {"message": "x"}):
            with self.subTest(value=value):
                with self.assertLogs("rawsql", level="ERROR") as logs:
                    self.assertIsNone(dump_error(value))
                self.assertIn("argument is not an exception", logs.output[0])


if __name__ == "__main__":
    unittest.main()
