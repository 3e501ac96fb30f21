import os
import tempfile
import unittest

import openai

from chatproxy import AuthorizationError, ChatCLI
from .test_base import BaseChatProxyTest, status_error


class TestREPL(BaseChatProxyTest):
    def run_chat(self, input_text, **options):
        session = self.make_session(input_text, **options)
        cli = ChatCLI(session)
        cli.repl()
        return session

    def test_chat_transcript(self):
        """Purpose, one exchange and exit produce the exact transcript"""
        self.run_chat("You help me test\nRequest\nexit\n", fixed_response="Fixed response")

        self.assertEqual(
            self.transcript.getvalue(),
            "SYSTEM) PURPOSE: You help me test\n"
            "USER) Request\n"
            "ASSISTANT) Fixed response\n"
            "USER) *exit*\n",
        )

    def test_multiple_turns(self):
        """Every turn is appended in order"""
        self.run_chat(
            "Return fixed responses\nQuestion?\nOther question?\nexit\n",
            fixed_response="Fixed response",
        )

        self.assertEqual(
            self.transcript.getvalue().split("\n"),
            [
                "SYSTEM) PURPOSE: Return fixed responses",
                "USER) Question?",
                "ASSISTANT) Fixed response",
                "USER) Other question?",
                "ASSISTANT) Fixed response",
                "USER) *exit*",
                "",
            ],
        )

    def test_first_line_is_never_dispatched(self):
        """Even a command-looking first line only sets the purpose"""
        session = self.run_chat("exit\nRequest\nexit\n", fixed_response="Fixed response")

        self.assertEqual(session.messages[0].content, "PURPOSE: exit")
        self.assertEqual(len(session.messages), 3)

    def test_file_operations(self):
        """Files can be loaded into, and replies written out of, a chat"""
        with tempfile.TemporaryDirectory() as tmp:
            outfile = os.path.join(tmp, "outfile.txt")
            with open(os.path.join(tmp, "file1.txt"), "w") as fh:
                fh.write("This is the first file")
            with open(os.path.join(tmp, "file2.txt"), "w") as fh:
                fh.write("This is the second file")

            self.run_chat(
                f"This is the purpose\n>{tmp}\n<{outfile} write a fixed response\nexit\n",
                fixed_response="Fixed response",
            )

            with open(outfile) as fh:
                self.assertEqual(fh.read(), "Fixed response\n")

        got = self.transcript.getvalue()
        self.assertIn("SYSTEM) PURPOSE: This is the purpose", got)
        self.assertIn("This is the first file", got)
        self.assertIn("This is the second file", got)

    def test_errors_do_not_end_the_chat(self):
        """A failed turn is reported and the loop keeps reading"""
        session = self.run_chat(
            "purpose\n<nospace\nRequest\nexit\n", fixed_response="Fixed response"
        )

        self.assertIn("need a file and a prompt to write a file", self.errors.getvalue())
        self.assertNotIn("need a file", self.transcript.getvalue())
        self.assertEqual(session.messages[-1].content, "Fixed response")
        self.assertTrue(self.transcript.getvalue().endswith("USER) *exit*\n"))

    def test_blank_lines_are_ignored(self):
        session = self.run_chat("\npurpose\n\n   \nRequest\nexit\n", fixed_response="Fixed response")

        self.assertEqual(
            [m.content for m in session.messages],
            ["PURPOSE: purpose", "Request", "Fixed response"],
        )

    def test_end_of_input_ends_the_chat(self):
        """Running out of input ends the loop without an exit marker"""
        session = self.run_chat("purpose\nRequest\n", fixed_response="Fixed response")

        self.assertEqual(len(session.messages), 3)
        self.assertNotIn("*exit*", self.transcript.getvalue())

    def test_prompts(self):
        self.run_chat("purpose\nexit\n", fixed_response="Fixed response")

        out = self.output.getvalue()
        self.assertTrue(out.startswith("SYSTEM) Please describe the purpose of this assistant.\nUSER) "))
        self.assertEqual(out.count("USER) "), 2)

    def test_streamed_chat(self):
        """Streamed replies are shown as they arrive and recorded once complete"""
        self.stream_reply("Hi ", "there!")

        session = self.run_chat("purpose\nHello\nexit\n", streaming=True)

        self.assertIn("ASSISTANT) Hi there!\n", self.output.getvalue())
        self.assertEqual(session.messages[-1].content, "Hi there!")

    def test_unauthorized_stops_the_chat(self):
        """An authentication failure ends the conversation"""
        self.mock_client.chat.completions.create.side_effect = status_error(
            openai.AuthenticationError, 401, "invalid api key"
        )

        with self.assertRaises(AuthorizationError):
            self.run_chat("purpose\nRequest\nSecond request\nexit\n")
        self.assertEqual(self.mock_client.chat.completions.create.call_count, 1)


if __name__ == "__main__":
    unittest.main()
