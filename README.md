# tacir

`tacir` is a small three-address-code (TAC) intermediate representation for
compiler back ends. You build functions from basic blocks and instructions,
convert them to SSA form, run a few simple clean-up passes, and check that the
result is well formed.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install .[test]
```

## Concepts

- `TACContext` (`tacir.context`) creates and owns every value. It keeps the
  program's `functions`, `globals`, `static_strings` and `externs`. It also
  holds the shared constants `true`, `false`, `one` and `zero`, all of type
  `U64`. Every value it has created is available through `values`.
- `Function` (`tacir.function`) holds its `blocks`, `locals`, `params` and
  `temps`.
  - `create_temp(type, name=None)` makes a temporary. Without a name, the
    temporary is numbered.
  - `create_block()` adds a numbered block.
  - `replace_references(old, new)` redirects every use of a value to another
    value.
  - `kill_temp(temp)` forgets a temporary that is no longer used or defined.
- `BasicBlock` (`tacir.block`) is a linked list of instructions. You can
  iterate over it, and removing the current instruction while you do so is
  safe. `append` and `prepend` add instructions at either end.
  - When you append a terminator (jump, branch, return or unreachable), the
    block records its `successors`, and each successor records the block among
    its `predecessors`.
  - Appending to a block that already ends in a branch raises `IRError`.
  - `branch_targets(inst)` returns the blocks a terminator can jump to. It
    returns `None` for an instruction that is not a terminator.
- The instructions are in `tacir.instructions`: `CopyInst`, `LoadInst`,
  `StoreInst`, `IndexedLoadInst`, `IndexedStoreInst`, `BinaryOperationInst`
  (with `BinaryOperation`), `CallInst`, `PhiInst`, `MemsetFn`, `JumpInst`,
  `JumpIfInst`, `ConditionalJumpInst`, `ReturnInst` and `UnreachableInst`.
  - Every instruction keeps the `uses` and `definition` links of its operands
    up to date.
  - Every instruction supports `insert_before`, `insert_after`,
    `replace_with` and `remove_from_parent`.
  - A `TACVisitor` subclass overrides hooks such as `visit_copy` or
    `visit_phi`, and `inst.accept(visitor)` dispatches to the matching hook.
- The value kinds are in `tacir.values`: `Value`, `Constant`, `ConstantInt`,
  `GlobalValue` (tagged with a `GlobalTag`), `LocalValue` and `Argument`.
  Every value has a `ValueType` from `tacir.value_type`. That module also
  provides `value_type_string`, `is_integer`, `is_signed` and `get_size`.
- Operations that would break an invariant of the IR raise
  `tacir.values.IRError`.

## Passes

| Pass | Module | Effect |
| --- | --- | --- |
| `ToSSA(function).run()` | `tacir.to_ssa` | Rewrites loads and stores of locals and arguments into SSA temporaries, inserting phi nodes on dominance frontiers and removing the phi nodes that turn out to be dead |
| `ConstantFolding(function).run()` | `tacir.constant_folding` | Evaluates integer binary operations whose operands are both constants, narrowed to the width of the type |
| `KillDeadValues(function).run()` | `tacir.kill_dead_values` | Removes copies, loads, indexed loads, binary operations and phi nodes whose results are never used, repeating until nothing changes |
| `DemoteGlobals(context).run()` | `tacir.demote_globals` | Turns globals that only `encmain` uses into locals of `encmain` |

`ToSSA` also exposes its analyses: `find_dominators()`,
`immediate_dominators(dom)`, `dominance_frontiers(idom)` and
`calculate_phi_nodes(df)`.

`ConstantFolding` raises `IRError` in three cases:

- division or modulo by zero;
- a shift by 32 or more;
- operands whose types do not match.

## Validation

`TACValidator(context).is_valid()` (`tacir.validator`) returns `False` if any
of these checks fails:

- `blocks_terminated()`: every block is terminated;
- `locals_good()`: locals are accessed only through loads and stores;
- `temps_defined()`: every temporary is defined;
- `block_links_good()`: the links between blocks go both ways.

It also runs two further checks that only produce warnings and do not make it
return `False`:

- `temps_used()`;
- `all_blocks_reachable()`: every block is reachable from the entry block or
  ends in `unreachable`.

Each failed check is logged as a warning on the `tacir.validator` logger.

## Example

```python
from tacir.context import TACContext
from tacir.instructions import BinaryOperation, BinaryOperationInst, ReturnInst
from tacir.constant_folding import ConstantFolding
from tacir.value_type import ValueType

context = TACContext()
function = context.create_function("encmain")
block = function.create_block()

result = function.create_temp(ValueType.U64)
block.append(BinaryOperationInst(
    result,
    context.create_constant_int(ValueType.U64, 2),
    BinaryOperation.ADD,
    context.create_constant_int(ValueType.U64, 3),
))
block.append(ReturnInst(result))

ConstantFolding(function).run()
for inst in block:
    print(inst)          # return U64 5
```

`StringTable` in `tacir.string_table` interns strings: `add` always returns
the same stored object for equal text.

## What the package does not do

- There is no pass that takes a function back out of SSA form, that is, one
  that replaces phi nodes with copies in the predecessor blocks.
- There is no front end that produces IR from a syntax tree.
- There is no register allocator or machine-code emitter.
- There is no command-line tool.

You build the IR yourself through `TACContext` and `Function`.

## Running the tests

```
pytest
```