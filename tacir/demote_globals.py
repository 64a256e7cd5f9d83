"""Turn globals used only by the main function into its local variables."""

from __future__ import annotations

from .context import TACContext
from .function import Function
from .values import IRError, Value

__all__ = ["DemoteGlobals"]

_MAIN_NAME = "encmain"


class DemoteGlobals:
    """Demote globals which are only ever used in the main function."""

    def __init__(self, context: TACContext) -> None:
        self._context = context

    def _main_function(self) -> Function:
        for function in self._context.functions:
            if function.name == _MAIN_NAME:
                return function
        raise IRError(f"no function named {_MAIN_NAME}")

    @staticmethod
    def _is_used_outside(variable: Value, fn: Function) -> bool:
        return any(inst.parent.parent is not fn for inst in variable.uses)

    def run(self) -> None:
        main = self._main_function()

        kept: list[Value] = []
        for global_value in self._context.globals:
            if self._is_used_outside(global_value, main):
                kept.append(global_value)
                continue
            local = self._context.create_local(global_value.type, global_value.name)
            main.locals.append(local)
            main.replace_references(global_value, local)

        self._context.globals = kept