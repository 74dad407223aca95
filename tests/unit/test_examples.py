"""Tests for example capture."""

from pathlib import Path
from typing import Optional

import pytest

from docslice.config.models import ScanConfig
from docslice.context.examples import ExampleExtractor
from docslice.context.index import DocIndex
from docslice.context.source_parser import SourceParser
from docslice.models.example import Example


def _extract(source: str, config: Optional[ScanConfig] = None) -> list[Example]:
    unit = SourceParser().parse_source(source, Path("test_sample.py"))
    return ExampleExtractor(config).extract(unit)


class TestExampleExtractor:
    """Tests for ExampleExtractor."""

    def test_block_example(self, greeter_index: DocIndex):
        example = greeter_index.example("example_hello")

        assert example.name == "hello"
        assert example.key == "example_hello"
        assert example.doc == "Greet the world."
        assert example.is_block is True
        assert example.header_lines == 1
        assert example.indent == "    "
        assert example.code == (
            "def example_hello():\n"
            "    # Print a greeting.\n"
            '    print(hello("world"))\n'
            "\n"
            "    # Output:\n"
            "    # Hello, world!"
        )

    def test_recorded_output(self, greeter_index: DocIndex):
        example = greeter_index.example("example_hello")

        assert example.has_output is True
        assert example.unordered is False
        assert example.output == "Hello, world!\n"

    def test_unordered_output(self, greeter_index: DocIndex):
        example = greeter_index.example("example_Greeter_shout")

        assert example.name == "Greeter_shout"
        assert example.unordered is True
        assert example.output == "HELLO, BOB!\nHELLO, ANN!\n"

    def test_no_output(self, greeter_index: DocIndex):
        example = greeter_index.example("example_silent")

        assert example.has_output is False
        assert example.output == ""

    def test_one_line_example(self, greeter_index: DocIndex):
        example = greeter_index.example("example_oneline")

        assert example.is_block is False
        assert example.header_lines == 0
        assert example.code == 'print(hello("there"))'

    def test_output_only_body(self, greeter_index: DocIndex):
        example = greeter_index.example("example_only_output")

        assert example.indent == ""
        assert example.output == "nothing\n"
        assert example.code == "def example_only_output():\n    # Output:\n    # nothing"

    def test_examples_with_parameters_are_skipped(self, greeter_index: DocIndex):
        assert "example_fixture" not in greeter_index.examples

    def test_non_example_functions_ignored(self, greeter_index: DocIndex):
        assert "test_hello" not in greeter_index.examples
        assert "shout_all" not in greeter_index.examples

    def test_custom_prefix(self):
        source = "def demo_a():\n    print(1)\n\n\ndef example_b():\n    print(2)\n"

        examples = _extract(source, ScanConfig(example_prefix="demo_"))

        assert [e.key for e in examples] == ["demo_a"]
        assert examples[0].name == "a"

    def test_async_functions_ignored(self):
        examples = _extract("async def example_a():\n    print(1)\n")

        assert examples == []

    def test_multiline_header(self):
        source = "def example_wrapped(\n):\n    print(1)\n"

        example = _extract(source)[0]

        assert example.header_lines == 2
        assert example.code == "def example_wrapped(\n):\n    print(1)"

    def test_two_space_indent(self):
        example = _extract("def example_a():\n  print(1)\n  # Output:\n  # 1\n")[0]

        assert example.indent == "  "
        assert example.output == "1\n"

    def test_output_text_on_marker_line(self):
        example = _extract("def example_a():\n    print(1)\n    # Output: 1\n")[0]

        assert example.has_output is True
        assert example.output == "1\n"

    def test_comment_group_without_marker(self):
        example = _extract("def example_a():\n    print(1)\n    # Just a note.\n")[0]

        assert example.has_output is False

    def test_output_line_points_at_comment_group(self, greeter_index: DocIndex):
        example = greeter_index.example("example_hello")

        assert example.code.splitlines()[example.output_line] == "    # Output:"
        assert greeter_index.example("example_silent").output_line is None

    def test_marker_inside_string_is_not_output(self):
        source = (
            "def example_s():\n"
            '    text = """\n'
            "# Output: not a marker\n"
            '"""\n'
            "    print(len(text))\n"
            "    # Output:\n"
            "    # 24\n"
        )

        example = _extract(source)[0]

        assert example.output == "24\n"
        assert example.output_line == 5

    def test_output_must_be_final_group(self):
        source = "def example_a():\n    # Output:\n    # 1\n    print(1)\n"

        example = _extract(source)[0]

        assert example.has_output is False


class TestPlayground:
    """Tests for the standalone script captured with each example."""

    def test_imports_pruned_to_used_names(self, greeter_index: DocIndex):
        play = greeter_index.example("example_hello").play

        assert play.startswith("from greeter import hello\n")
        assert "textwrap" not in play
        assert "OrderedDict" not in play
        assert "Greeter" not in play

    def test_helpers_pulled_in_transitively(self, greeter_index: DocIndex):
        play = greeter_index.example("example_Greeter_shout").play

        assert "from greeter import Greeter" in play
        assert "def shout_all(names):" in play
        assert "def test_hello" not in play
        assert "def example_hello" not in play

    def test_body_wrapped_in_main(self, greeter_index: DocIndex):
        play = greeter_index.example("example_oneline").play

        assert 'def main():\n    print(hello("there"))' in play
        assert play.endswith('if __name__ == "__main__":\n    main()\n')

    def test_empty_body_gets_pass(self, greeter_index: DocIndex):
        play = greeter_index.example("example_only_output").play

        assert "def main():\n    # Output:\n    # nothing\n    pass" in play

    def test_relative_import_has_no_playground(self):
        source = "from .client import send\n\n\ndef example_send():\n    send()\n"

        example = _extract(source)[0]

        assert example.play is None

    def test_module_alias_import(self):
        source = "import os.path as osp\nimport json\n\n\ndef example_a():\n    print(osp.sep)\n"

        play = _extract(source)[0].play

        assert play.startswith("import os.path as osp\n")
        assert "import json" not in play

    def test_future_imports_kept(self):
        source = "from __future__ import annotations\n\n\ndef example_a():\n    print(1)\n"

        play = _extract(source)[0].play

        assert play.startswith("from __future__ import annotations\n")

    @pytest.mark.parametrize("name", ["example_hello", "example_silent", "example_Greeter_shout"])
    def test_playground_compiles(self, greeter_index: DocIndex, name):
        compile(greeter_index.example(name).play, name, "exec")

    def test_module_level_mutations_kept(self):
        source = (
            "registry = {}\n"
            'registry["plain"] = 1\n'
            "counter = 0\n"
            "counter += 1\n"
            "registry.update(extra=counter)\n"
            "unrelated = []\n"
            "unrelated.append(1)\n"
            "\n"
            "\n"
            "def example_a():\n"
            "    print(registry)\n"
        )

        play = _extract(source)[0].play

        assert play.startswith("registry = {}\n")
        assert 'registry["plain"] = 1' in play
        assert "counter = 0" in play
        assert "counter += 1" in play
        assert "registry.update(extra=counter)" in play
        assert "unrelated" not in play

    def test_attribute_assignment_kept(self):
        source = (
            "import types\n"
            "settings = types.SimpleNamespace()\n"
            "settings.mode = 'fast'\n"
            "\n"
            "\n"
            "def example_a():\n"
            "    print(settings.mode)\n"
        )

        play = _extract(source)[0].play

        assert "import types" in play
        assert "settings.mode = 'fast'" in play

    def test_star_import_kept_for_unbound_names(self):
        source = "from os.path import *\n\n\ndef example_a():\n    print(join('a', 'b'))\n"

        play = _extract(source)[0].play

        assert play.startswith("from os.path import *\n")

    def test_star_import_dropped_when_names_resolve(self):
        source = "from os.path import *\nimport json\n\n\ndef example_a():\n    print(json.dumps(1))\n"

        play = _extract(source)[0].play

        assert "import *" not in play
        assert play.startswith("import json\n")
