from contextlib import redirect_stderr, redirect_stdout
import io
import unittest
from unittest import mock

from xlbf import BrainfuckInterpreter
from xlbf.console import ConsoleSession, main as console_main, run_repl


def _feed(*lines):
    return mock.patch("builtins.input", side_effect=[*lines, EOFError])


class ConsoleSessionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.interpreter = BrainfuckInterpreter(tape_size=8)
        self.session = ConsoleSession(self.interpreter)

    def test_collects_lines_until_empty_line(self) -> None:
        with _feed("++", "+:", ""):
            program = self.session.read_program()
        self.assertEqual(program, "++\n+:\n\n")

    def test_stops_when_buffer_is_full(self) -> None:
        session = ConsoleSession(self.interpreter, buffer_size=5)
        with _feed("+++", "++++", "never read"):
            program = session.read_program()
        self.assertEqual(program, "+++\n+")

    def test_reset_command(self) -> None:
        self.interpreter.run("+++>")
        buffer = io.StringIO()
        with _feed("+", "reset"), redirect_stdout(buffer):
            program = self.session.read_program()
        self.assertIsNone(program)
        self.assertIn("CONSOLE: Environment reset.", buffer.getvalue())
        self.assertEqual(self.interpreter.tape.cells[0], 0)
        self.assertEqual(self.interpreter.pointer, 0)

    def test_reset_is_case_sensitive(self) -> None:
        with _feed("RESET", ""):
            program = self.session.read_program()
        self.assertEqual(program, "RESET\n\n")

    def test_pending_lines_are_returned_at_eof(self) -> None:
        with _feed("+:"):
            self.assertEqual(self.session.read_program(), "+:\n")

    def test_eof_without_pending_lines(self) -> None:
        with _feed():
            with self.assertRaises(EOFError):
                self.session.read_program()

    def test_execute_reports_engine_errors(self) -> None:
        out = io.StringIO()
        err = io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            ok = self.session.execute("<+")
        self.assertFalse(ok)
        self.assertIn("Access violation", err.getvalue())
        self.assertTrue(out.getvalue().startswith("OUTPUT: "))


class ReplTests(unittest.TestCase):
    def test_tape_persists_across_programs_until_reset(self) -> None:
        interpreter = BrainfuckInterpreter(tape_size=8, output_sink=lambda text: print(text, end=""))
        session = ConsoleSession(interpreter)
        buffer = io.StringIO()
        with _feed("++:", "", "+:", "", "reset", ":", ""), redirect_stdout(buffer):
            run_repl(session)
        output = buffer.getvalue()
        self.assertIn("== XL BRAINFUCK CONSOLE ==", output)
        self.assertIn("OUTPUT: 2\n", output)
        self.assertIn("OUTPUT: 3\n", output)
        self.assertIn("OUTPUT: 0\n", output)
        self.assertLess(output.index("OUTPUT: 3"), output.index("CONSOLE: Environment reset."))

    def test_main_runs_until_eof(self) -> None:
        buffer = io.StringIO()
        with _feed("+++++:", ""), redirect_stdout(buffer):
            exit_code = console_main(["--tape-size", "4", "--cell-type", "uint8"])
        self.assertEqual(exit_code, 0)
        self.assertIn("OUTPUT: 5\n", buffer.getvalue())

    def test_main_rejects_bad_tape_size(self) -> None:
        buffer = io.StringIO()
        with redirect_stderr(buffer):
            exit_code = console_main(["--tape-size", "0"])
        self.assertEqual(exit_code, 1)
        self.assertIn("Tape size", buffer.getvalue())


if __name__ == "__main__":
    unittest.main()
