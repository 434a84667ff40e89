"""End-to-end tests for get_file_token_scores."""

from __future__ import annotations

from pathlib import Path

import pytest

from codemap.config.models import CodeMapConfig, IndexerConfig, ScoringConfig
from codemap.core.errors import ErrorCode, InvalidArgumentError
from codemap.index import get_file_token_scores

TS_FILE = """
interface Greeter {
    greet(name: string): string;
}

class Greeting implements Greeter {
    private prefix: string;

    constructor(prefix: string) {
        this.prefix = prefix;
    }

    greet(name: string): string {
        return `${this.prefix}, ${name}!`;
    }

    static printGreeting(greeter: Greeter, name: string): void {
        console.log(greeter.greet(name));
    }
}

function createGreeter(prefix: string): Greeter {
    return new Greeting(prefix);
}

const greeting = createGreeter('Hello');
Greeting.printGreeting(greeting, 'World');
"""

PY_FILE = """
from abc import ABC, abstractmethod

class Greeter(ABC):
    @abstractmethod
    def greet(self, name: str) -> str:
        pass

class Greeting(Greeter):
    def __init__(self, prefix: str):
        self.prefix = prefix

    def greet(self, name: str) -> str:
        return f'{self.prefix}, {name}!'

def print_greeting(greeter: Greeter, name: str):
    print(greeter.greet(name))

if __name__ == "__main__":
    greeting = Greeting("Hello")
    print_greeting(greeting, "World")
"""

UTILS_1 = """
export function utils() {
    console.log('utils from file 1');
}
"""

UTILS_2 = """
// Deeper in the tree, so a lower score
export function utils() {
    console.log('utils from file 2');
}
"""

CONSUMER = """
import { utils } from './utils';
utils();
console.log('no definitions here');
"""

UNUSED = """
export function unusedFunction() {
    console.log('never called');
}
"""


def write_files(root: Path, files: dict[str, str | bytes]) -> None:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    write_files(
        tmp_path,
        {
            "test.ts": TS_FILE,
            "test.py": PY_FILE,
            "utils1.ts": UTILS_1,
            "deep/utils2.ts": UTILS_2,
            "consumer.ts": CONSUMER,
            "unused.ts": UNUSED,
            "empty.ts": "",
        },
    )
    return tmp_path


class TestSingleFile:
    """Definitions and self-calls within one file."""

    def test_typescript(self, repo: Path) -> None:
        result = get_file_token_scores(repo, ["test.ts"])

        scores = result.token_scores["test.ts"]
        for token in ("Greeter", "Greeting", "createGreeter", "greet", "printGreeting"):
            assert token in scores

        callers = result.token_callers["test.ts"]
        assert "test.ts" in callers["Greeting"]
        assert "test.ts" in callers["createGreeter"]
        assert "test.ts" in callers["printGreeting"]
        assert "test.ts" in callers["greet"]

    def test_python(self, repo: Path) -> None:
        result = get_file_token_scores(repo, ["test.py"])

        scores = result.token_scores["test.py"]
        for token in ("Greeter", "Greeting", "print_greeting", "greet"):
            assert token in scores

        callers = result.token_callers["test.py"]
        assert "test.py" in callers["Greeting"]
        assert "test.py" in callers["print_greeting"]
        assert "test.py" in callers["greet"]

    def test_duplicate_definition_in_one_file_recorded_once(self, repo: Path) -> None:
        """``greet`` is declared on the interface and the class."""
        result = get_file_token_scores(repo, ["test.ts"])
        assert list(result.token_scores["test.ts"]).count("greet") == 1


class TestCrossFile:
    """Canonical definer selection and caller attribution."""

    def test_shallower_definition_wins(self, repo: Path) -> None:
        result = get_file_token_scores(repo, ["utils1.ts", "deep/utils2.ts", "consumer.ts"])

        assert "consumer.ts" in result.token_callers["utils1.ts"]["utils"]
        assert "deep/utils2.ts" not in result.token_callers
        assert result.token_scores["utils1.ts"]["utils"] > result.token_scores["deep/utils2.ts"]["utils"]

    def test_winner_independent_of_input_order(self, repo: Path) -> None:
        result = get_file_token_scores(repo, ["consumer.ts", "deep/utils2.ts", "utils1.ts"])

        assert result.token_callers["utils1.ts"]["utils"] == ["consumer.ts"]

    def test_deeper_definer_stays_lower_valued_at_any_depth(self, tmp_path: Path) -> None:
        shallow = "d/" * 69 + "a.py"
        deep = "d/" * 70 + "a.py"
        write_files(tmp_path, {shallow: "def f():\n    pass\n", deep: "def f():\n    pass\n"})

        result = get_file_token_scores(tmp_path, [deep, shallow])

        assert result.token_scores[shallow]["f"] > result.token_scores[deep]["f"] > 0.0
        assert deep not in result.token_callers

    def test_equal_depth_tie_goes_to_first_path(self, tmp_path: Path) -> None:
        write_files(
            tmp_path,
            {
                "b.ts": "export function shared() {}\n",
                "a.ts": "export function shared() {}\n",
                "use.ts": "shared();\n",
            },
        )

        result = get_file_token_scores(tmp_path, ["b.ts", "use.ts", "a.ts"])

        assert result.token_callers == {"a.ts": {"shared": ["use.ts"]}}

    def test_every_call_site_listed(self, tmp_path: Path) -> None:
        write_files(
            tmp_path,
            {
                "lib.py": "def helper():\n    return 1\n",
                "a.py": "helper()\nhelper()\n",
                "b.py": "x = helper()\n",
            },
        )

        result = get_file_token_scores(tmp_path, ["lib.py", "a.py", "b.py"])

        assert result.token_callers["lib.py"]["helper"] == ["a.py", "a.py", "b.py"]

    def test_cross_language_resolution(self, tmp_path: Path) -> None:
        """Resolution is by name only, regardless of language."""
        write_files(tmp_path, {"lib.py": "def render():\n    pass\n", "app.ts": "render();\n"})

        result = get_file_token_scores(tmp_path, ["lib.py", "app.ts"])

        assert result.token_callers["lib.py"]["render"] == ["app.ts"]


class TestEdgeCases:
    """Files that define or call nothing."""

    def test_no_definitions(self, repo: Path) -> None:
        result = get_file_token_scores(repo, ["consumer.ts"])

        assert result.token_scores["consumer.ts"] == {}
        assert result.token_callers == {}

    def test_no_calls(self, repo: Path) -> None:
        result = get_file_token_scores(repo, ["unused.ts"])

        assert "unusedFunction" in result.token_scores["unused.ts"]
        assert result.token_callers["unused.ts"]["unusedFunction"] == []

    def test_empty_file(self, repo: Path) -> None:
        result = get_file_token_scores(repo, ["empty.ts"])

        assert result.token_scores.get("empty.ts", {}) == {}
        assert result.token_callers == {}

    def test_empty_input(self, repo: Path) -> None:
        result = get_file_token_scores(repo, [])

        assert result.to_dict() == {"tokenScores": {}, "tokenCallers": {}}

    def test_unsupported_extension_ignored(self, repo: Path) -> None:
        write_files(repo, {"notes.md": "# utils()\n"})

        result = get_file_token_scores(repo, ["notes.md", "unused.ts"])

        assert "notes.md" not in result.token_scores
        assert "notes.md" not in result.token_callers

    def test_missing_file_ignored(self, repo: Path) -> None:
        result = get_file_token_scores(repo, ["nope.ts", "unused.ts"])

        assert result.token_scores["nope.ts"] == {}
        assert result.token_callers["unused.ts"]["unusedFunction"] == []

    def test_keys_are_input_strings(self, repo: Path) -> None:
        result = get_file_token_scores(repo, ["./unused.ts"])

        assert list(result.token_scores) == ["./unused.ts"]

    def test_path_objects_accepted(self, repo: Path) -> None:
        result = get_file_token_scores(repo, [Path("deep") / "utils2.ts"])

        assert "utils" in result.token_scores["deep/utils2.ts"]


class TestRobustness:
    """One bad file never fails the batch."""

    def test_malformed_source_keeps_recovered_definitions(self, tmp_path: Path) -> None:
        write_files(
            tmp_path,
            {
                "broken.ts": "export function ok() {}\nclass {{{{ (((\n",
                "good.py": "def fine():\n    ok()\n",
            },
        )

        result = get_file_token_scores(tmp_path, ["broken.ts", "good.py"])

        assert "ok" in result.token_scores["broken.ts"]
        assert result.token_callers["broken.ts"]["ok"] == ["good.py"]
        assert result.token_callers["good.py"]["fine"] == []

    def test_binary_garbage(self, tmp_path: Path) -> None:
        write_files(
            tmp_path,
            {"junk.py": bytes(range(256)) * 4, "ok.py": "def ok():\n    pass\n"},
        )

        result = get_file_token_scores(tmp_path, ["junk.py", "ok.py"])

        assert "junk.py" in result.token_scores
        assert "ok" in result.token_scores["ok.py"]


class TestDeterminism:
    @pytest.mark.parametrize("workers", [1, 8])
    def test_repeated_runs_identical(self, repo: Path, workers: int) -> None:
        files = ["test.ts", "test.py", "utils1.ts", "deep/utils2.ts", "consumer.ts", "unused.ts"]
        config = CodeMapConfig(indexer=IndexerConfig(max_workers=workers))

        first = get_file_token_scores(repo, files, config=config).to_dict()
        second = get_file_token_scores(repo, files, config=config).to_dict()

        assert first == second

    def test_parallel_matches_sequential(self, repo: Path) -> None:
        files = ["test.ts", "test.py", "utils1.ts", "deep/utils2.ts", "consumer.ts", "unused.ts"]

        sequential = get_file_token_scores(
            repo, files, config=CodeMapConfig(indexer=IndexerConfig(max_workers=1))
        )
        parallel = get_file_token_scores(
            repo, files, config=CodeMapConfig(indexer=IndexerConfig(max_workers=4))
        )

        assert sequential.to_dict() == parallel.to_dict()


LANGUAGE_CASES = [
    pytest.param(
        {
            "lib.py": "class Widget:\n    pass\n\ndef helper():\n    return 1\n",
            "use.py": "Widget()\nhelper()\n",
        },
        ("Widget", "helper"),
        id="python",
    ),
    pytest.param(
        {
            "lib.ts": "export class Widget {}\nexport function helper() { return 1; }\n",
            "use.ts": "new Widget();\nhelper();\n",
        },
        ("Widget", "helper"),
        id="typescript",
    ),
    pytest.param(
        {
            "lib.tsx": "export class Widget {}\nexport function helper() { return 1; }\n",
            "use.tsx": "new Widget();\nhelper();\n",
        },
        ("Widget", "helper"),
        id="tsx",
    ),
    pytest.param(
        {
            "lib.js": "class Widget {}\nfunction helper() { return 1; }\n",
            "use.jsx": "new Widget();\nhelper();\n",
        },
        ("Widget", "helper"),
        id="javascript",
    ),
    pytest.param(
        {
            "lib.java": "public class Widget { public static int helper() { return 1; } }\n",
            "use.java": "class Use { int run() { new Widget(); return Widget.helper(); } }\n",
        },
        ("Widget", "helper"),
        id="java",
    ),
    pytest.param(
        {
            "lib.cs": "class Widget { public static int Helper() { return 1; } }\n",
            "use.cs": "class Use { int Run() { var w = new Widget(); return Widget.Helper(); } }\n",
        },
        ("Widget", "Helper"),
        id="csharp",
    ),
    pytest.param(
        {
            "lib.hpp": "class Widget {};\nint helper() { return 1; }\n",
            "use.cpp": "int run() { Widget* w = new Widget(); return helper(); }\n",
        },
        ("Widget", "helper"),
        id="cpp",
    ),
    pytest.param(
        {
            "lib.rs": "pub struct Widget {}\npub fn helper() -> i32 { 1 }\n",
            "use.rs": "fn run() -> i32 { let _w = Widget {}; helper() }\n",
        },
        ("Widget", "helper"),
        id="rust",
    ),
    pytest.param(
        {
            "lib.rb": "class Widget\nend\n\ndef helper\n  1\nend\n",
            "use.rb": "def run\n  Widget.new\n  helper\nend\n",
        },
        ("Widget", "helper"),
        id="ruby",
    ),
    pytest.param(
        {
            "lib.go": "package main\n\ntype Widget struct{}\n\nfunc Helper() int { return 1 }\n",
            "use.go": "package main\n\nfunc run() int {\n\t_ = Widget{}\n\treturn Helper()\n}\n",
        },
        ("Widget", "Helper"),
        id="go",
    ),
]


class TestLanguages:
    """The same class + function + calls shape in every registered language."""

    @pytest.mark.parametrize(("files", "tokens"), LANGUAGE_CASES)
    def test_define_and_call(self, tmp_path: Path, files: dict[str, str], tokens: tuple[str, str]) -> None:
        write_files(tmp_path, dict(files))
        definer, caller = list(files)

        result = get_file_token_scores(tmp_path, [definer, caller])

        for token in tokens:
            assert token in result.token_scores[definer]
            assert result.token_callers[definer][token] == [caller]

    @pytest.mark.parametrize(("files", "tokens"), LANGUAGE_CASES)
    def test_results_unaffected_by_corrupt_neighbor(
        self, tmp_path: Path, files: dict[str, str], tokens: tuple[str, str]
    ) -> None:
        write_files(tmp_path, {**files, "corrupt.ts": b"\x00\xff{{{ function (((\n"})
        paths = list(files)

        clean = get_file_token_scores(tmp_path, paths)
        noisy = get_file_token_scores(tmp_path, [*paths, "corrupt.ts"])

        for path in paths:
            assert noisy.token_scores[path] == clean.token_scores[path]
        for token in tokens:
            assert noisy.token_callers[paths[0]][token] == clean.token_callers[paths[0]][token]



class TestConfig:
    def test_repo_config_applied(self, repo: Path) -> None:
        write_files(repo, {".codemap/config.yaml": "scoring:\n  precision: 2\n  call_boost: false\n"})

        result = get_file_token_scores(repo, ["utils1.ts"])

        score = result.token_scores["utils1.ts"]["utils"]
        assert score == round(score, 2)

    def test_explicit_config_skips_loading(self, repo: Path) -> None:
        write_files(repo, {".codemap/config.yaml": "scoring: [not, a, mapping]\n"})
        config = CodeMapConfig(scoring=ScoringConfig(call_boost=False, density_weight=0.0))

        result = get_file_token_scores(repo, ["utils1.ts"], config=config)

        assert result.token_scores["utils1.ts"]["utils"] == 0.8

    def test_call_boost_raises_called_tokens(self, repo: Path) -> None:
        alone = get_file_token_scores(repo, ["utils1.ts"])
        called = get_file_token_scores(repo, ["utils1.ts", "consumer.ts"])

        assert called.token_scores["utils1.ts"]["utils"] > alone.token_scores["utils1.ts"]["utils"]


class TestArgumentErrors:
    def test_missing_root(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            get_file_token_scores(tmp_path / "missing", ["a.ts"])
        assert exc_info.value.code is ErrorCode.ROOT_NOT_FOUND

    def test_root_is_file(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("x")
        with pytest.raises(InvalidArgumentError) as exc_info:
            get_file_token_scores(target, ["a.ts"])
        assert exc_info.value.code is ErrorCode.ROOT_NOT_DIRECTORY

    def test_single_string_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            get_file_token_scores(tmp_path, "a.ts")  # type: ignore[arg-type]
        assert exc_info.value.code is ErrorCode.BAD_FILE_LIST

    def test_non_path_entry_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidArgumentError):
            get_file_token_scores(tmp_path, ["a.ts", 3])  # type: ignore[list-item]
