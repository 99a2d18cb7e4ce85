"""
Tests for figure detection.
"""

import matplotlib
import matplotlib.pyplot as plt

from notebook_fill.figures import FigureCapture, has_content, live_figures


class TestHasContent:

    def test_new_figure_is_empty(self):
        assert not has_content(plt.figure())

    def test_figure_with_axes(self):
        figure = plt.figure()
        figure.add_subplot().plot([1, 2])
        assert has_content(figure)

    def test_figure_with_text_only(self):
        figure = plt.figure()
        figure.text(0.5, 0.5, "hello")
        assert has_content(figure)


class TestLiveFigures:

    def test_ordered_by_number(self):
        first = plt.figure()
        second = plt.figure()
        plt.figure(first.number)

        assert live_figures() == [first, second]


class TestFigureCapture:
    """Test cases for FigureCapture."""

    def test_no_figures(self):
        with FigureCapture() as capture:
            pass
        assert capture.figures == []

    def test_detects_new_figures_in_order(self):
        with FigureCapture() as capture:
            first = plt.figure()
            first.add_subplot().plot([1, 2])
            second = plt.figure()
            second.add_subplot().plot([2, 1])

        assert capture.figures == [first, second]

    def test_explicit_numbers_keep_creation_order(self):
        with FigureCapture() as capture:
            later_number = plt.figure(10)
            later_number.add_subplot().plot([1, 2])
            earlier_number = plt.figure(2)
            earlier_number.add_subplot().plot([2, 1])
            plt.figure(10)

        assert capture.figures == [later_number, earlier_number]

    def test_creation_hook_is_removed_on_exit(self):
        hooks = list(matplotlib.rcParams["figure.hooks"])

        with FigureCapture():
            assert len(matplotlib.rcParams["figure.hooks"]) == len(hooks) + 1

        assert list(matplotlib.rcParams["figure.hooks"]) == hooks

    def test_empty_new_figures_are_reported(self):
        """Only the placeholder is dropped when empty; other figures are the embedder's call."""
        with FigureCapture() as capture:
            figure = plt.figure()

        assert capture.figures == [figure]

    def test_baseline_figures_are_ignored(self):
        existing = plt.figure()
        existing.add_subplot().plot([1, 2])

        with FigureCapture() as capture:
            figure = plt.figure()
            figure.add_subplot().plot([3, 4])

        assert capture.figures == [figure]

    def test_no_placeholder_without_baseline(self):
        with FigureCapture() as capture:
            assert capture.placeholder is None

    def test_placeholder_absorbs_default_target_plotting(self):
        existing = plt.figure()

        with FigureCapture() as capture:
            plt.plot([1, 2, 3])

        assert len(capture.figures) == 1
        assert capture.figures[0] is not existing
        assert not has_content(existing)

    def test_unused_placeholder_is_discarded(self):
        existing = plt.figure()

        with FigureCapture() as capture:
            placeholder = capture.placeholder
            assert placeholder is not None

        assert capture.figures == []
        assert plt.get_fignums() == [existing.number]

    def test_interactive_mode_is_off_inside_and_restored(self):
        plt.ion()
        try:
            with FigureCapture():
                assert not plt.isinteractive()
            assert plt.isinteractive()
        finally:
            plt.ioff()
