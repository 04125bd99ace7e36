"""Unit tests for RenameExecutor."""

import pytest

from rngrename.models.rename import RenamePair
from rngrename.processors.executor import ErrorHandlingMode, ErrorResponse, RenameExecutor, UserHalt


def make_pair(source, destination) -> RenamePair:
    return RenamePair(source_path=source, destination_path=destination)


class TestRenameExecutor:
    """Tests for RenameExecutor class."""

    def test_apply_renames_file(self, tmp_path):
        """Test that apply actually renames the file."""
        source = tmp_path / "old_name.pdf"
        source.touch()

        RenameExecutor().apply(make_pair(source, tmp_path / "new_name.pdf"))

        assert not source.exists()
        assert (tmp_path / "new_name.pdf").exists()

    def test_dry_run_leaves_file(self, tmp_path):
        """Test that dry run validates without renaming."""
        source = tmp_path / "old_name.pdf"
        source.touch()

        RenameExecutor(dry_run=True).apply(make_pair(source, tmp_path / "new_name.pdf"))

        assert source.exists()
        assert not (tmp_path / "new_name.pdf").exists()

    def test_raises_on_missing_source(self, tmp_path):
        """Test that a missing source file is reported."""
        with pytest.raises(FileNotFoundError):
            RenameExecutor().apply(make_pair(tmp_path / "nonexistent.pdf", tmp_path / "new.pdf"))

    def test_raises_on_existing_target(self, tmp_path):
        """Test that an existing destination is never overwritten."""
        source = tmp_path / "source.pdf"
        target = tmp_path / "target.pdf"
        source.touch()
        target.touch()

        with pytest.raises(FileExistsError):
            RenameExecutor().apply(make_pair(source, target))

        assert source.exists()

    def test_dry_run_still_validates(self, tmp_path):
        """Test that dry run reports the same errors as a real run."""
        with pytest.raises(FileNotFoundError):
            RenameExecutor(dry_run=True).apply(make_pair(tmp_path / "missing", tmp_path / "new"))


class TestApplyAll:
    """Tests for applying many renames with error handling modes."""

    @pytest.fixture
    def pairs(self, tmp_path):
        """One good rename followed by one with a missing source, then another good one."""
        good1 = tmp_path / "a.txt"
        good2 = tmp_path / "c.txt"
        good1.touch()
        good2.touch()
        return [
            make_pair(good1, tmp_path / "x.txt"),
            make_pair(tmp_path / "b.txt", tmp_path / "y.txt"),
            make_pair(good2, tmp_path / "z.txt"),
        ]

    def test_all_succeed(self, tmp_path):
        """Test the success count when nothing fails."""
        files = [tmp_path / "1", tmp_path / "2"]
        for f in files:
            f.touch()
        pairs = [make_pair(f, tmp_path / f"new{f.name}") for f in files]

        assert RenameExecutor().apply_all(pairs) == 2
        assert (tmp_path / "new1").exists()
        assert (tmp_path / "new2").exists()

    def test_halt_mode_raises(self, pairs, tmp_path):
        """Test that halt mode stops at the first failure."""
        with pytest.raises(FileNotFoundError):
            RenameExecutor().apply_all(pairs, err_mode=ErrorHandlingMode.HALT)

        assert (tmp_path / "x.txt").exists()
        assert (tmp_path / "c.txt").exists()

    def test_ignore_mode_continues(self, pairs, tmp_path):
        """Test that ignore mode skips failures."""
        count = RenameExecutor().apply_all(pairs, err_mode=ErrorHandlingMode.IGNORE)

        assert count == 2
        assert (tmp_path / "z.txt").exists()

    def test_warn_mode_skip(self, pairs):
        """Test that a skip answer moves on to the next file."""
        answers = []

        def on_error(pair, error):
            answers.append(pair.source_path.name)
            return ErrorResponse.SKIP

        count = RenameExecutor().apply_all(pairs, err_mode=ErrorHandlingMode.WARN, on_error=on_error)

        assert count == 2
        assert answers == ["b.txt"]

    def test_warn_mode_retry(self, pairs, tmp_path):
        """Test that a retry answer attempts the same rename again."""

        def on_error(pair, error):
            pair.source_path.touch()
            return ErrorResponse.RETRY

        count = RenameExecutor().apply_all(pairs, err_mode=ErrorHandlingMode.WARN, on_error=on_error)

        assert count == 3
        assert (tmp_path / "y.txt").exists()

    def test_warn_mode_halt(self, pairs, tmp_path):
        """Test that a halt answer stops the run."""
        with pytest.raises(UserHalt):
            RenameExecutor().apply_all(pairs, err_mode=ErrorHandlingMode.WARN, on_error=lambda p, e: ErrorResponse.HALT)

        assert (tmp_path / "c.txt").exists()

    def test_warn_mode_without_prompt_ignores(self, pairs):
        """Test that warn mode without a prompt only logs."""
        assert RenameExecutor().apply_all(pairs, err_mode=ErrorHandlingMode.WARN) == 2

    def test_renamed_count_survives_halt(self, pairs):
        """Test that renames done before a failure are still counted."""
        executor = RenameExecutor()

        with pytest.raises(FileNotFoundError):
            executor.apply_all(pairs, err_mode=ErrorHandlingMode.HALT)

        assert executor.renamed_count == 1

    def test_renamed_count_accumulates(self, pairs):
        """Test that the running total spans several calls."""
        executor = RenameExecutor()

        executor.apply_all(pairs[:1])
        executor.apply_all(pairs[1:], err_mode=ErrorHandlingMode.IGNORE)

        assert executor.renamed_count == 2
