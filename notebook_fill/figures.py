"""
Detection of the matplotlib figures a cell creates.
"""

import logging

import matplotlib
import matplotlib.pyplot as plt
from matplotlib._pylab_helpers import Gcf
from matplotlib.figure import Figure

logger = logging.getLogger(__name__)


def use_backend(name: str):
    """Select a matplotlib backend unless it is already active."""
    if matplotlib.get_backend().lower() != name.lower():
        plt.switch_backend(name)


def live_figures() -> list[Figure]:
    """All figures currently registered with pyplot, ordered by figure number."""
    managers = sorted(Gcf.get_all_fig_managers(), key=lambda manager: manager.num)
    return [manager.canvas.figure for manager in managers]


def has_content(figure: Figure) -> bool:
    """Check whether anything has been drawn into a figure."""
    return bool(
        figure.axes
        or figure.artists
        or figure.lines
        or figure.patches
        or figure.texts
        or figure.images
        or figure.legends
    )


def dispose(figure: Figure):
    """Close a figure and drop it from pyplot's registry."""
    plt.close(figure)


_CREATION_HOOK = "notebook_fill.figures:_record_creation"
_recorders: list[list[Figure]] = []


def _record_creation(figure: Figure):
    """pyplot figure hook: note each new figure in every active capture."""
    for created in _recorders:
        created.append(figure)


class FigureCapture:
    """
    Track the figures created while a block of code runs.

    Figures that were open before entering are never reported. When
    such figures exist, a placeholder figure is made current so that
    plotting calls without an explicit target do not draw into them;
    it is closed again if nothing was drawn into it.

    New figures are reported in the order pyplot created them, as seen
    through the ``figure.hooks`` rc setting. Figures that escaped the
    hook (for instance after the code reset rcParams) follow, by number.

    Usage::

        with FigureCapture() as capture:
            kernel.evaluate(code)
        for figure in capture.figures:
            ...
    """

    def __init__(self):
        self.baseline: list[Figure] = []
        self.placeholder: Figure | None = None
        self.figures: list[Figure] = []
        self._was_interactive = False
        self._created: list[Figure] = []
        self._saved_hooks: list[str] = []

    def __enter__(self) -> "FigureCapture":
        self._was_interactive = plt.isinteractive()
        plt.ioff()

        self.baseline = live_figures()
        self.figures = []
        self._created = []
        if self.baseline:
            self.placeholder = plt.figure()
            self._created.append(self.placeholder)
            logger.debug(
                "%d figure(s) already open, plotting into placeholder figure %s",
                len(self.baseline),
                self.placeholder.number,
            )

        self._saved_hooks = list(matplotlib.rcParams["figure.hooks"])
        if _CREATION_HOOK not in self._saved_hooks:
            matplotlib.rcParams["figure.hooks"] = self._saved_hooks + [_CREATION_HOOK]
        _recorders.append(self._created)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _recorders[:] = [created for created in _recorders if created is not self._created]
        matplotlib.rcParams["figure.hooks"] = self._saved_hooks

        known = {id(figure) for figure in self.baseline}
        live = [figure for figure in live_figures() if id(figure) not in known]
        live_ids = {id(figure) for figure in live}
        ordered = []
        for figure in self._created:
            if id(figure) in live_ids and figure not in ordered:
                ordered.append(figure)
        created = ordered + [figure for figure in live if figure not in ordered]

        if self.placeholder is not None and not has_content(self.placeholder):
            dispose(self.placeholder)
            created = [figure for figure in created if figure is not self.placeholder]
        self.placeholder = None

        self.figures = created
        if self._was_interactive:
            plt.ion()
        if created:
            logger.debug("Detected %d new figure(s)", len(created))
        return False
