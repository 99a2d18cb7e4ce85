"""
ExecutionContext: variables carried from one cell run to the next.
"""

from dataclasses import dataclass, field
from typing import Any

import dill

from notebook_fill.kernel import EvaluationResult, NotebookKernel


@dataclass
class ExecutionContext:
    """
    Persistent variable bindings of a notebook run.

    The context is loaded into the kernel before a cell is evaluated and
    saved from it afterwards. Saving replaces the bindings, so a variable
    deleted by a cell is gone from the context too. The value of the
    last cell that ended in an expression is kept apart and bound to
    ``_`` on the next load.
    """

    bindings: dict[str, Any] = field(default_factory=dict)
    last_result: Any = None
    has_last_result: bool = False

    def load(self, kernel: NotebookKernel):
        """Install the bindings and the last result into the kernel."""
        kernel.restore(dict(self.bindings), self.last_result, self.has_last_result)

    def save(self, kernel: NotebookKernel, result: EvaluationResult):
        """Read the kernel's variables back after ``result`` was produced."""
        self.bindings = kernel.snapshot()
        if result.has_value:
            self.last_result = result.last_value
            self.has_last_result = True

    def clear(self):
        """Forget all bindings and the last result."""
        self.bindings = {}
        self.last_result = None
        self.has_last_result = False

    def dumps(self) -> tuple[bytes, list[str]]:
        """
        Serialize the context with dill.

        Values dill cannot pickle are skipped.

        Returns:
            Tuple of (serialized bytes, names of the skipped variables)
        """
        picklable = {}
        unpicklable = []

        for key, value in self.bindings.items():
            try:
                dill.dumps(value)
                picklable[key] = value
            except Exception:
                unpicklable.append(key)

        state = {
            "bindings": picklable,
            "last_result": None,
            "has_last_result": False,
        }
        if self.has_last_result:
            try:
                dill.dumps(self.last_result)
                state["last_result"] = self.last_result
                state["has_last_result"] = True
            except Exception:
                unpicklable.append("_")

        return dill.dumps(state), unpicklable

    @classmethod
    def loads(cls, data: bytes) -> "ExecutionContext":
        """Create a context from bytes produced by ``dumps()``."""
        state = dill.loads(data)
        return cls(
            bindings=state["bindings"],
            last_result=state["last_result"],
            has_last_result=state["has_last_result"],
        )
