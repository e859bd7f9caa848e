"""Tests for file system traversal functionality."""

from pathlib import Path

import pytest

from lintkit.traversal import (
    DEFAULT_IGNORE_DIRS,
    collect_targets,
    find_source_files,
    is_js_file,
    should_ignore_directory,
)


class TestFileTypeChecks:
    """Test file type checking functions."""

    def test_is_js_file_recognizes_extensions(self):
        """is_js_file() accepts .js, .jsx, .mjs and .cjs."""
        assert is_js_file(Path("main.js"))
        assert is_js_file(Path("src/App.jsx"))
        assert is_js_file(Path("esm.mjs"))
        assert is_js_file(Path("legacy.cjs"))

    def test_is_js_file_case_insensitive(self):
        """is_js_file() works with uppercase extensions."""
        assert is_js_file(Path("MAIN.JS"))

    def test_is_js_file_rejects_other_files(self):
        """is_js_file() returns False for non-JavaScript files."""
        assert not is_js_file(Path("main.ts"))
        assert not is_js_file(Path("README.md"))
        assert not is_js_file(Path("package.json"))
        assert not is_js_file(Path("Makefile"))

    def test_is_js_file_custom_extensions(self):
        assert is_js_file(Path("main.ts"), extensions={".ts"})


class TestDirectoryFiltering:
    """Test directory ignore logic."""

    def test_should_ignore_directory_recognizes_ignored_dirs(self):
        ignore_set = {"build", "node_modules"}
        assert should_ignore_directory(Path("build"), ignore_set)
        assert should_ignore_directory(Path("a/node_modules"), ignore_set)

    def test_should_ignore_directory_allows_other_dirs(self):
        assert not should_ignore_directory(Path("src"), {"build"})

    def test_should_ignore_directory_case_sensitive(self):
        assert not should_ignore_directory(Path("Build"), {"build"})

    def test_default_ignore_dirs_includes_common_patterns(self):
        assert "node_modules" in DEFAULT_IGNORE_DIRS
        assert "dist" in DEFAULT_IGNORE_DIRS
        assert ".git" in DEFAULT_IGNORE_DIRS


class TestTraversal:
    """Test file traversal functions."""

    @pytest.fixture
    def temp_project(self, tmp_path):
        """
        tmp_path/
          src/index.js, src/App.jsx, src/util.mjs, src/types.ts
          src/lib/deep.cjs
          node_modules/pkg/index.js   (ignored)
          dist/bundle.js              (ignored)
          README.md
        """
        (tmp_path / "src" / "lib").mkdir(parents=True)
        (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
        (tmp_path / "dist").mkdir()
        for rel in [
            "src/index.js",
            "src/App.jsx",
            "src/util.mjs",
            "src/types.ts",
            "src/lib/deep.cjs",
            "node_modules/pkg/index.js",
            "dist/bundle.js",
            "README.md",
        ]:
            (tmp_path / rel).write_text("// file\n")
        return tmp_path

    def test_find_source_files_skips_ignored_dirs(self, temp_project):
        files = find_source_files(temp_project)
        names = sorted(p.relative_to(temp_project.resolve()).as_posix() for p in files)
        assert names == ["src/App.jsx", "src/index.js", "src/lib/deep.cjs", "src/util.mjs"]

    def test_results_are_sorted(self, temp_project):
        files = find_source_files(temp_project)
        assert files == sorted(files)

    def test_custom_ignore_dirs(self, temp_project):
        files = find_source_files(temp_project, ignore_dirs={"lib"})
        names = {p.name for p in files}
        assert "deep.cjs" not in names
        assert "bundle.js" in names
        assert "index.js" in names

    def test_filter_fn(self, temp_project):
        files = find_source_files(temp_project, filter_fn=lambda p: p.suffix == ".jsx")
        assert [p.name for p in files] == ["App.jsx"]

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            find_source_files(tmp_path / "missing")

    def test_file_root_raises(self, temp_project):
        with pytest.raises(NotADirectoryError):
            find_source_files(temp_project / "README.md")

    def test_symlinks_skipped_by_default(self, temp_project):
        link = temp_project / "src" / "linked.js"
        try:
            link.symlink_to(temp_project / "src" / "index.js")
        except OSError:
            pytest.skip("symlinks not supported")
        names = [p.name for p in find_source_files(temp_project)]
        assert "linked.js" not in names

    def test_collect_targets_mixes_files_and_dirs(self, temp_project):
        explicit = temp_project / "src" / "types.ts"
        files = collect_targets([temp_project / "src" / "lib", explicit, temp_project / "src" / "lib"])
        assert [p.name for p in files] == ["deep.cjs", "types.ts"]
