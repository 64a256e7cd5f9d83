"""Put a function into static single assignment form.

Local variables and parameters that are accessed through loads and stores
are replaced by temporaries, with phi nodes placed on the dominance
frontiers of the blocks that assign them.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from .block import BasicBlock
from .function import Function
from .instructions import LoadInst, PhiInst, StoreInst
from .value_type import ValueType
from .values import Argument, GlobalValue, IRError, Value

__all__ = ["PhiDescription", "ToSSA"]

Dominators = dict[BasicBlock, set[BasicBlock]]
ImmDominators = dict[BasicBlock, "BasicBlock | None"]
DomFrontier = dict[BasicBlock, list[BasicBlock]]


@dataclass(eq=False)
class PhiDescription:
    """A phi node still to be built for the variable `original`."""

    original: Value
    dest: Value | None = None
    sources: list[tuple[BasicBlock, Value | None]] = field(default_factory=list)


PhiList = dict[BasicBlock, list[PhiDescription]]


class ToSSA:
    """Convert the locals and parameters of one function to SSA temporaries."""

    def __init__(self, function: Function) -> None:
        self._function = function
        self._phi_stack: dict[Value, list[Value]] = {}
        self._visited: set[BasicBlock] = set()
        self._counter: dict[Value, int] = {}

    def _entry(self) -> BasicBlock:
        if not self._function.blocks:
            raise IRError(f"function {self._function.name} has no blocks")
        return self._function.blocks[0]

    def run(self) -> None:
        dom = self.find_dominators()
        idom = self.immediate_dominators(dom)
        df = self.dominance_frontiers(idom)
        phis = self.calculate_phi_nodes(df)

        self._rename(self._entry(), phis)
        self._insert_phis(phis)
        self._kill_dead_phis()

    def find_dominators(self) -> Dominators:
        """Return, for every block, the set of blocks that dominate it."""
        entry = self._entry()
        blocks = self._function.blocks
        rest = blocks[1:]

        dom: Dominators = {entry: {entry}}
        for block in rest:
            dom[block] = set(blocks)

        changed = True
        while changed:
            changed = False
            for block in rest:
                predecessors = block.predecessors
                # Strict dominators are those shared by every predecessor.
                if predecessors:
                    new_dom = set.intersection(*(dom[pred] for pred in predecessors))
                else:
                    new_dom = set()
                new_dom.add(block)

                if new_dom != dom[block]:
                    dom[block] = new_dom
                    changed = True

        return dom

    def immediate_dominators(self, dom: Dominators) -> ImmDominators:
        """Return the immediate dominator of every block, or None if it has none."""
        idom: ImmDominators = {}

        for block, dominators in dom.items():
            working = dominators - {block}

            # Drop every dominator that dominates another strict dominator.
            for d1 in dominators:
                if d1 is block:
                    continue
                dominators1 = dom[d1]
                for d2 in dominators:
                    if d1 is not d2 and d2 in dominators1:
                        working.discard(d2)

            if len(working) == 1:
                idom[block] = next(iter(working))
            elif not working:
                # The entry block, or a block that cannot be reached.
                idom[block] = None
            else:
                raise IRError(f"{block} has more than one immediate dominator")

        return idom

    def dominance_frontiers(self, idom: ImmDominators) -> DomFrontier:
        """Return the dominance frontier of every block that has one."""
        df: DomFrontier = {}

        for block, dominator in idom.items():
            predecessors = block.predecessors
            if len(predecessors) < 2:
                continue

            for predecessor in predecessors:
                runner: BasicBlock | None = predecessor
                while runner is not dominator:
                    if runner is None or runner not in idom:
                        raise IRError(f"{predecessor} has no dominator chain to {block}")
                    df.setdefault(runner, []).append(block)
                    runner = idom[runner]

        return df

    def calculate_phi_nodes(self, df: DomFrontier) -> PhiList:
        """Decide which blocks need a phi node for which variable."""
        result: PhiList = {}

        for local in self._function.locals:
            self._place_phis(local, self._assigning_blocks(local), df, result)

        entry = self._entry()
        for param in self._function.params:
            # Arguments carry an implicit assignment in the entry block.
            seeds = list(self._assigning_blocks(param))
            if entry not in seeds:
                seeds.append(entry)
            self._place_phis(param, seeds, df, result)

        return result

    @staticmethod
    def _assigning_blocks(variable: Value) -> Iterator[BasicBlock]:
        for inst in variable.uses:
            if isinstance(inst, StoreInst):
                yield inst.parent

    @staticmethod
    def _place_phis(
        variable: Value,
        seeds: Iterable[BasicBlock],
        df: DomFrontier,
        result: PhiList,
    ) -> None:
        work_list: deque[BasicBlock] = deque()
        ever_on_work_list: set[BasicBlock] = set()
        already_inserted: set[BasicBlock] = set()

        for block in seeds:
            ever_on_work_list.add(block)
            work_list.append(block)

        while work_list:
            block = work_list.popleft()
            for frontier in df.get(block, ()):
                if frontier in already_inserted:
                    continue

                result.setdefault(frontier, []).append(PhiDescription(variable))
                already_inserted.add(frontier)

                if frontier not in ever_on_work_list:
                    ever_on_work_list.add(frontier)
                    work_list.append(frontier)

    def _generate_name(self, variable: Value) -> Value:
        number = self._counter.get(variable, 0)
        self._counter[variable] = number + 1

        new_name = self._function.create_temp(variable.type, f"{variable.name}.{number}")
        self._phi_stack.setdefault(variable, []).append(new_name)
        return new_name

    def _top(self, variable: Value) -> Value | None:
        stack = self._phi_stack.get(variable)
        return stack[-1] if stack else None

    def _rename(self, entry: BasicBlock, phis: PhiList) -> None:
        """Walk the blocks depth first, renaming variables along the way."""
        frames: list[tuple[Iterator[BasicBlock], list[Value]]] = []

        def enter(block: BasicBlock) -> None:
            if block in self._visited:
                return
            self._visited.add(block)
            to_pop = self._rename_block(block, phis)
            frames.append((iter(block.successors), to_pop))

        enter(entry)
        while frames:
            successors, to_pop = frames[-1]
            following = next(successors, None)
            if following is not None:
                enter(following)
                continue

            frames.pop()
            for variable in to_pop:
                stack = self._phi_stack.get(variable)
                if not stack:
                    raise IRError(f"no name to discard for {variable}")
                stack.pop()

    def _rename_block(self, block: BasicBlock, phis: PhiList) -> list[Value]:
        # Names pushed here, so they can be popped once the subtree is done.
        to_pop: list[Value] = []

        for desc in phis.get(block, ()):
            desc.dest = self._generate_name(desc.original)
            to_pop.append(desc.original)

        for inst in block:
            if isinstance(inst, LoadInst):
                current = self._top(inst.src)
                if current is None:
                    if isinstance(inst.src, Argument):
                        # Blocks dominated by this one reuse the loaded value.
                        self._phi_stack.setdefault(inst.src, []).append(inst.dest)
                        to_pop.append(inst.src)
                    continue

                old_name = inst.dest
                inst.remove_from_parent()
                self._function.replace_references(old_name, current)

            elif isinstance(inst, StoreInst):
                if isinstance(inst.dest, GlobalValue):
                    continue

                self._phi_stack.setdefault(inst.dest, []).append(inst.src)
                to_pop.append(inst.dest)
                inst.remove_from_parent()

        for successor in block.successors:
            for desc in phis.get(successor, ()):
                # A missing definition (None) is resolved when phis are built.
                desc.sources.append((block, self._top(desc.original)))

        return to_pop

    def _insert_phis(self, phis: PhiList) -> None:
        context = self._function.context

        for block, descriptions in phis.items():
            for desc in descriptions:
                if desc.dest is None:
                    raise IRError(f"phi node for {desc.original} in {block} was never named")

                phi = PhiInst(desc.dest)
                for pred, value in desc.sources:
                    if value is None:
                        if isinstance(desc.original, Argument):
                            # The argument's implicit definition: load it
                            # explicitly in the predecessor.
                            value = self._generate_name(desc.original)
                            LoadInst(value, desc.original).insert_before(pred.last)
                        else:
                            # Undefined along this path; use null so that no
                            # garbage reaches the collector.
                            value = context.create_constant_int(ValueType.U64, 0)

                    phi.add_source(pred, value)

                block.prepend(phi)

    def _kill_dead_phis(self) -> None:
        for block in self._function.blocks:
            inst = block.first
            while isinstance(inst, PhiInst):
                phi = inst
                inst = phi.next

                if not phi.dest.uses:
                    dead = phi.dest
                    phi.remove_from_parent()
                    self._function.kill_temp(dead)