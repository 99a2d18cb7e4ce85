"""
NotebookKernel: IPython shell that evaluates notebook cells.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from IPython.core.displayhook import DisplayHook
from IPython.core.interactiveshell import InteractiveShell
from IPython.utils.capture import capture_output
from traitlets import Type
from traitlets.config import Config

from notebook_fill.directives import DIRECTIVE
from notebook_fill.figures import use_backend

logger = logging.getLogger(__name__)

LAST_RESULT_NAME = "_"
DEFAULT_ERROR_TEMPLATE = "error: {message}\n"


class PlainDisplayHook(DisplayHook):
    """Echo trailing expression values as their bare text/plain repr."""

    def write_output_prompt(self):
        pass

    def write_format_data(self, format_dict, md_dict=None) -> None:
        print(format_dict["text/plain"])


class EvaluationShell(InteractiveShell):
    """
    InteractiveShell used as the cell evaluator.

    Failures are reported through the run result rather than printed,
    and ``%plot`` directives are accepted as no-op line magics.
    """

    displayhook_class = Type(PlainDisplayHook)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.register_magic_function(_plot_magic, magic_kind="line", magic_name=DIRECTIVE[1:])

    def _showtraceback(self, etype, evalue, stb):
        pass

    def show_usage_error(self, exc):
        pass


def _plot_magic(line):
    """Configure figure embedding for the current cell (read by the runner)."""


def _shell_config() -> Config:
    config = Config()
    config.HistoryManager.enabled = False
    config.HistoryManager.hist_file = ":memory:"
    return config


@dataclass
class EvaluationResult:
    """Result of evaluating one block of code."""
    success: bool
    text: str = ""
    error: Optional[str] = None
    error_name: Optional[str] = None
    last_value: Any = None
    has_value: bool = False
    execution_count: int = 0
    error_template: str = DEFAULT_ERROR_TEMPLATE

    @property
    def error_text(self) -> str:
        """The failure rendered with the error template ('' on success)."""
        if self.success:
            return ""
        return self.error_template.format(message=self.error, name=self.error_name)


class NotebookKernel:
    """
    IPython-backed evaluator for notebook code.

    Each kernel owns its own shell, so kernels never see each other's
    variables. The variables themselves are saved and restored by an
    ExecutionContext through ``snapshot()`` and ``restore()``.
    """

    def __init__(self, backend: Optional[str] = "agg", reserved: Iterable[str] = ()):
        """
        Initialize the kernel with a fresh IPython shell.

        Args:
            backend: matplotlib backend to select, or None to keep the current one
            reserved: Extra names that are never captured by ``snapshot()``
        """
        if backend:
            use_backend(backend)
        self.ip = EvaluationShell(config=_shell_config())
        self.execution_count = 0
        self.reserved = frozenset(reserved)
        self._startup_names = frozenset(self.ip.user_ns)

    def evaluate(self, code: str, error_template: str = DEFAULT_ERROR_TEMPLATE) -> EvaluationResult:
        """
        Evaluate code and capture what it prints.

        Never raises for faults in ``code`` itself: they are returned as a
        failed EvaluationResult.

        Args:
            code: Python code to evaluate
            error_template: Format for the error text, with ``{message}``
                and ``{name}`` fields

        Returns:
            EvaluationResult with the captured stdout and the trailing
            expression value
        """
        self.execution_count += 1

        with capture_output(stdout=True, stderr=False, display=False) as captured:
            result = self.ip.run_cell(code, silent=False, store_history=False)

        error = result.error_before_exec or result.error_in_exec
        has_value = error is None and result.result is not None

        evaluation = EvaluationResult(
            success=error is None,
            text=captured.stdout,
            error=str(error) if error is not None else None,
            error_name=type(error).__name__ if error is not None else None,
            last_value=result.result if has_value else None,
            has_value=has_value,
            execution_count=self.execution_count,
            error_template=error_template,
        )
        if error is not None:
            logger.debug("Evaluation %d failed: %s: %s", self.execution_count, evaluation.error_name, error)
        return evaluation

    def _is_user_name(self, name: str) -> bool:
        return not (
            name.startswith("_")
            or name in self.ip.user_ns_hidden
            or name in self.reserved
            or name in self._startup_names
        )

    def snapshot(self) -> dict[str, Any]:
        """
        Copy the user-defined variables out of the shell.

        IPython's own names, names starting with an underscore (the
        output cache and the ``_`` placeholder) and reserved names are
        left out.
        """
        return {
            key: value
            for key, value in self.ip.user_ns.items()
            if self._is_user_name(key)
        }

    def restore(self, bindings: dict[str, Any], last_result: Any = None, has_last_result: bool = False):
        """
        Replace the user-defined variables with ``bindings``.

        Args:
            bindings: Variables to install; every other user variable is removed
            last_result: Value bound to ``_``
            has_last_result: Whether ``last_result`` holds a value
        """
        for key in list(self.ip.user_ns):
            if self._is_user_name(key) and key not in bindings:
                del self.ip.user_ns[key]
        self.ip.user_ns.update(bindings)

        if has_last_result:
            self.ip.user_ns[LAST_RESULT_NAME] = last_result
        else:
            self.ip.user_ns.pop(LAST_RESULT_NAME, None)
