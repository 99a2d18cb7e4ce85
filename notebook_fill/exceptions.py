"""Exception hierarchy for notebook-fill."""


class NotebookFillError(Exception):
    """Base exception for all notebook-fill errors."""

    pass


class FormatError(NotebookFillError):
    """Raised when a notebook document is structurally invalid."""

    pass


class UsageError(NotebookFillError):
    """Raised when a public call receives bad arguments."""

    pass


class CellOutputError(NotebookFillError):
    """Raised when a figure cannot be embedded.

    Never leaves the runner: it is written to the cell as a stderr stream.
    """

    pass


class ResourceError(NotebookFillError):
    """Raised when the scratch directory for rendering cannot be used."""

    pass
