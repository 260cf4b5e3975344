import pytest

from shadow_watch.utils.file_filter import (
    filter_analyzable_files,
    get_language_from_extension,
    is_code_file,
    normalize_path,
    should_analyze_file,
    should_exclude_file,
    should_skip_directory,
)


class TestShouldExcludeFile:
    @pytest.mark.parametrize(
        "path, patterns",
        [
            ("config.json", ["config.json"]),
            ("test.spec.ts", ["*.spec.ts"]),
            ("node_modules/package/index.js", ["node_modules/**"]),
            ("build/output.js", ["*.ts", "build/**", "dist/**"]),
            ("dist/bundle.js", ["*.ts", "build/**", "dist/**"]),
            (".gitignore", [".*"]),
            ("config/.env", ["**/.env"]),
            ("src/nested/deep/file.ts", ["**/deep/**"]),
            ("file.test.ts", ["*.test.ts"]),
            ("file1.ts", ["file?.ts"]),
            ("test/unit/spec.test.ts", ["**/test/**/*.test.ts"]),
            ("file.js", ["*.{js,ts}"]),
            ("file.ts", ["*.{js,ts}"]),
            ("package.json", ["package.json"]),
        ],
    )
    def test_matching_patterns_exclude(self, path, patterns):
        assert should_exclude_file(path, patterns) is True

    @pytest.mark.parametrize(
        "path, patterns",
        [
            ("src/index.ts", ["*.js", "node_modules/**"]),
            ("mytest.ts", ["test.ts"]),
            ("file.css", ["*.{js,ts}"]),
            ("src/index.ts", ["*.ts"]),
            ("src/index.ts", ["src"]),
            ("src/a/b.ts", ["src/*"]),
            ("lib/config/.env", [".env"]),
            ("src/deep/app.js", ["*.{js,ts}"]),
        ],
    )
    def test_non_matching_patterns_keep_file(self, path, patterns):
        assert should_exclude_file(path, patterns) is False

    def test_star_stays_within_one_segment(self):
        assert should_exclude_file("src/a.ts", ["src/*"]) is True
        assert should_exclude_file("src/a/b.ts", ["src/*"]) is False
        assert should_exclude_file("src/a/b.ts", ["src/**"]) is True

    def test_globstar_reaches_nested_files(self):
        assert should_exclude_file("src/index.ts", ["**/*.ts"]) is True
        assert should_exclude_file("index.ts", ["**/*.ts"]) is True

    def test_braces_with_globstar(self):
        assert should_exclude_file("lib/deep/app.js", ["{src,lib}/**/*.{js,ts}"]) is True
        assert should_exclude_file("docs/app.js", ["{src,lib}/**/*.{js,ts}"]) is False

    def test_empty_patterns(self):
        assert should_exclude_file("src/index.ts", []) is False

    def test_empty_path(self):
        assert should_exclude_file("", ["*.ts"]) is False

    def test_leading_slash_is_ignored(self):
        assert should_exclude_file("/src/index.ts", ["src/**"]) is True

    def test_leading_dot_slash_is_ignored(self):
        assert should_exclude_file("./src/index.ts", ["src/**"]) is True

    def test_backslashes_are_normalized(self):
        assert should_exclude_file("src\\utils\\helper.ts", ["src/**"]) is True

    def test_matching_is_case_sensitive(self):
        assert should_exclude_file("Test.ts", ["test.ts"]) is False

    def test_bracket_names_match_literally(self):
        assert should_exclude_file("file[1].ts", ["file[1].ts"]) is True

    def test_negation_alone_never_excludes(self):
        assert should_exclude_file("src/index.ts", ["!src/index.ts"]) is False

    def test_negation_does_not_undo_other_match(self):
        assert should_exclude_file("src/index.ts", ["src/**", "!src/index.ts"]) is True

    def test_unclosed_bracket_does_not_raise(self):
        assert should_exclude_file("src/index.ts", ["[invalid"]) is False

    def test_result_is_bool_for_any_input(self):
        for patterns in (["**"], ["", "*.ts"], ["{a,b}"]):
            assert isinstance(should_exclude_file("a/b.ts", patterns), bool)


def test_normalize_path():
    assert normalize_path("./src\\a.ts") == "src/a.ts"
    assert normalize_path("/src/a.ts") == "src/a.ts"
    assert normalize_path("src/a.ts") == "src/a.ts"


class TestAnalyzableFiles:
    def test_skip_directories(self):
        assert should_skip_directory("node_modules") is True
        assert should_skip_directory(".shadow") is True
        assert should_skip_directory("src") is False

    @pytest.mark.parametrize(
        "path",
        [
            "src/app.ts",
            "lib/module.py",
            "cmd/main.go",
        ],
    )
    def test_code_files_are_analyzed(self, path):
        assert should_analyze_file(path) is True

    @pytest.mark.parametrize(
        "path",
        [
            "node_modules/lib/index.js",
            "src/app.test.ts",
            "src/types.d.ts",
            "dist/bundle.min.js",
            "tsconfig.build.json",
            "jest.config.js",
            "README.md",
            "src\\__pycache__\\mod.py",
        ],
    )
    def test_other_files_are_skipped(self, path):
        assert should_analyze_file(path) is False

    def test_is_code_file(self):
        assert is_code_file("src/App.TSX") is True
        assert is_code_file("notes.txt") is False

    def test_language_from_extension(self):
        assert get_language_from_extension(".ts") == "typescript"
        assert get_language_from_extension(".PY") == "python"
        assert get_language_from_extension(".txt") == "unknown"

    def test_filter_analyzable_files_keeps_order(self):
        files = ["b.ts", "a.test.ts", "node_modules/x.js", "a.py"]
        assert filter_analyzable_files(files) == ["b.ts", "a.py"]
