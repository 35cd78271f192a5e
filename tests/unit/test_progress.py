from __future__ import annotations

from unittest.mock import Mock, patch

from producer_export.services.progress import ProgressTracker, is_tty_enabled


def test_is_tty_enabled_returns_stdout_isatty():
    with patch("sys.stdout.isatty", return_value=True):
        assert is_tty_enabled() is True

    with patch("sys.stdout.isatty", return_value=False):
        assert is_tty_enabled() is False


class TestProgressTracker:
    """Test cases for ProgressTracker class."""

    def test_init_with_tty_enabled(self):
        with patch("producer_export.services.progress.is_tty_enabled", return_value=True), \
             patch("producer_export.services.progress.tqdm") as mock_tqdm:

            tracker = ProgressTracker(5, description="Agent")

            assert tracker.total == 5
            assert tracker.description == "Agent"
            assert tracker.current == 0
            assert tracker.enabled is True
            mock_tqdm.assert_called_once_with(
                total=5,
                desc="Agent",
                unit="record",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )

    def test_init_with_tty_disabled(self):
        with patch("producer_export.services.progress.is_tty_enabled", return_value=False), \
             patch("producer_export.services.progress.tqdm") as mock_tqdm:
            tracker = ProgressTracker(5)

            assert tracker.enabled is False
            assert tracker.pbar is None
            mock_tqdm.assert_not_called()

    def test_advance_updates_bar_and_counts_failures(self):
        mock_pbar = Mock()
        with patch("producer_export.services.progress.is_tty_enabled", return_value=True), \
             patch("producer_export.services.progress.tqdm", return_value=mock_pbar):
            tracker = ProgressTracker(3)
            tracker.advance()
            tracker.advance(success=False)

        assert tracker.current == 2
        assert tracker.failed == 1
        assert mock_pbar.update.call_count == 2
        mock_pbar.set_postfix.assert_called_with(failed=1)

    def test_advance_without_tty_only_counts(self):
        with patch("producer_export.services.progress.is_tty_enabled", return_value=False):
            tracker = ProgressTracker(2)
            tracker.advance()
            tracker.advance(success=False)
        assert (tracker.current, tracker.failed) == (2, 1)

    def test_context_manager_closes_bar(self):
        mock_pbar = Mock()
        with patch("producer_export.services.progress.is_tty_enabled", return_value=True), \
             patch("producer_export.services.progress.tqdm", return_value=mock_pbar):
            with ProgressTracker(1) as tracker:
                tracker.advance()

        mock_pbar.close.assert_called_once()
        assert tracker.pbar is None
        # 二重 close は無視
        tracker.close()
        mock_pbar.close.assert_called_once()
