"""Consistency checks over every function of a context."""

from __future__ import annotations

import logging

from .block import BasicBlock
from .context import TACContext
from .instructions import LoadInst, StoreInst, UnreachableInst

__all__ = ["TACValidator"]

logger = logging.getLogger(__name__)


class TACValidator:
    """Check the structural invariants of the IR held by a context."""

    def __init__(self, context: TACContext) -> None:
        self._context = context

    def is_valid(self) -> bool:
        """Run every check, logging each that fails; some are only warnings."""
        if not self.blocks_terminated():
            logger.warning("Not all basic blocks are terminated")
            return False

        if not self.locals_good():
            logger.warning("Not all locals are manipulated with store/load only")
            return False

        if not self.temps_defined():
            logger.warning("Not all temporaries have a definition")
            return False

        if not self.temps_used():
            logger.warning("Not all temporaries are used")

        if not self.block_links_good():
            logger.warning("Not all links between blocks are bidirectional")
            return False

        if not self.all_blocks_reachable():
            logger.warning("Not all basic blocks are reachable")

        return True

    def blocks_terminated(self) -> bool:
        """Every block ends with a terminator instruction."""
        return all(
            block.is_terminated()
            for function in self._context.functions
            for block in function.blocks
        )

    def locals_good(self) -> bool:
        """Local variables are touched only by loads and stores."""
        for function in self._context.functions:
            for value in function.locals:
                if value.definition is not None:
                    return False
                if not all(isinstance(inst, (LoadInst, StoreInst)) for inst in value.uses):
                    return False
        return True

    def temps_defined(self) -> bool:
        """Every temporary has a defining instruction."""
        return all(
            value.definition is not None
            for function in self._context.functions
            for value in function.temps
        )

    def temps_used(self) -> bool:
        """Every temporary is used somewhere."""
        return all(
            value.uses
            for function in self._context.functions
            for value in function.temps
        )

    def block_links_good(self) -> bool:
        """Successor and predecessor links always come in matching pairs."""
        for function in self._context.functions:
            for block in function.blocks:
                for successor in block.successors:
                    if not any(p is block for p in successor.predecessors):
                        return False
                for predecessor in block.predecessors:
                    if not any(s is block for s in predecessor.successors):
                        return False
        return True

    @staticmethod
    def _reachable_from(entry: BasicBlock) -> set[BasicBlock]:
        reached: set[BasicBlock] = set()
        pending = [entry]
        while pending:
            block = pending.pop()
            if block in reached:
                continue
            reached.add(block)
            pending.extend(block.successors)
        return reached

    def all_blocks_reachable(self) -> bool:
        """Each block is reachable from the entry or ends in `unreachable`."""
        for function in self._context.functions:
            if not function.blocks:
                continue
            reachable = self._reachable_from(function.blocks[0])
            for block in function.blocks:
                if block not in reachable and not isinstance(block.last, UnreachableInst):
                    return False
        return True