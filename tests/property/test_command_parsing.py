"""
コマンド解析のプロパティテスト
"""

import unittest

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from wspin.cli.parser import DEFAULT_COMMAND, VALID_COMMANDS, ArgumentParser
from wspin.output.formatter import OutputFormat


class TestCommandParsingProperty(unittest.TestCase):
    """有効なコマンドは通り、無効なコマンドはエラーになる"""

    def setUp(self):
        self.parser = ArgumentParser()

    @given(command=st.sampled_from(sorted(VALID_COMMANDS)))
    @settings(max_examples=20)
    def test_valid_commands_always_valid(self, command):
        result = self.parser.parse([command])
        self.assertEqual(result.command, command)
        self.assertTrue(self.parser.validate(result).is_valid)

    @given(command=st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=15))
    @settings(max_examples=100)
    def test_unknown_commands_are_rejected(self, command):
        assume(command not in VALID_COMMANDS)
        validation = self.parser.validate(self.parser.parse([command]))
        self.assertFalse(validation.is_valid)
        self.assertIn(command, validation.errors[0])

    @given(threshold=st.integers(min_value=0, max_value=10**9))
    @settings(max_examples=100)
    def test_integer_threshold_is_accepted(self, threshold):
        result = self.parser.parse(["--threshold", str(threshold)])
        self.assertEqual(result.command, DEFAULT_COMMAND)
        self.assertEqual(int(result.options["threshold"]), threshold)
        self.assertTrue(self.parser.validate(result).is_valid)

    @given(fmt=st.sampled_from(["json", "JSON", "markdown", "Markdown"]))
    @settings(max_examples=20)
    def test_format_is_case_insensitive(self, fmt):
        result = self.parser.parse(["--format", fmt])
        self.assertEqual(result.output_format, OutputFormat(fmt.lower()))


if __name__ == "__main__":
    unittest.main()
