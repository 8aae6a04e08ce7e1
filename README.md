# workbench

A collection of small, self-contained data structures and algorithms written
in plain Python with no third-party dependencies.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## What is inside

### `workbench.kv` — parts of an in-memory key–value store

- `workbench.kv.avl` — an intrusive AVL tree. `AVLNode` keeps its subtree
  height and size; `fix(node)` rebalances from a node up to the root and
  returns the new root, `delete(node)` detaches a node and returns the new
  root, and `offset(node, n)` walks `n` ranks forward or backward in
  logarithmic time, returning `None` when the rank lies outside the tree.
  `height` and `count` treat `None` as an empty subtree.
- `workbench.kv.dlist` — `DList`, a circular intrusive doubly linked list
  with `empty()`, `detach()`, `insert_before(rookie)` and iteration over the
  other links.
- `workbench.kv.thread_pool` — `ThreadPool(num_threads)` starts daemon
  worker threads; `queue(f, *args)` schedules `f(*args)` on one of them.
  A job that raises is logged and the worker carries on.
- `workbench.kv.protocol` — the little-endian binary wire format.
  `parse_req(data)` splits a request body (a count followed by
  length-prefixed strings) into a list of `bytes`, raising `ProtocolError`
  on truncated input, too many arguments (`MAX_ARGS`) or trailing bytes.
  `out_nil`, `out_str`, `out_int`, `out_dbl`, `out_err`, `out_arr`,
  `out_begin_arr` and `out_end_arr` append tagged values (`Tag`,
  `ErrorCode`) to a `bytearray`.

```python
from workbench.kv.protocol import out_begin_arr, out_end_arr, out_int, out_str

buf = bytearray()
ctx = out_begin_arr(buf)
out_str(buf, "hello")
out_int(buf, 42)
out_end_arr(buf, ctx, 2)
```

### `workbench.marksweep` — a tiny garbage-collected VM

`VM` holds a stack of `HeapObject`s (integers and pairs). `push_int`,
`push_pair` (which pops tail and head), `push` and `pop` work on the stack;
`gc()` keeps every object reachable from the stack, cycles included, sweeps
the rest, prints a summary line and returns how many objects it freed.
A collection also runs on its own when the heap reaches its current limit.
`format_object` renders pairs as `(head, tail)`.

```python
from workbench.marksweep import VM

vm = VM()
vm.push_int(1)
vm.push_int(2)
pair = vm.push_pair()
vm.format_object(pair)   # '(1, 2)'
vm.gc()                  # 0: everything is still reachable
```

### `workbench.algorithms` — textbook algorithms

```python
from workbench.algorithms.search import binary_search
from workbench.algorithms.sorting import quicksort, selection_sort
from workbench.algorithms.recursion import fact

binary_search([1, 3, 5, 7, 9], 3)   # 1
binary_search([1, 3, 5, 7, 9], 4)   # None
quicksort([3, 1, 2])                # [1, 2, 3]
fact(5)                             # 120
```

`selection_sort` sorts a list in place. `workbench.algorithms.recursion`
also has `countdown`, `greet`, `loop_sum`, `recursive_sum`,
`recursive_count` and `recursive_max` (which raises `ValueError` on an empty
sequence). `workbench.algorithms.hash_tables` has `format_prices` for a
price book such as `GROCERIES`, and a `VoterRegistry` whose `check(name)`
answers "Let them vote!" the first time and "Kick them out!" after that.

### `workbench.simpledb` — a single-table database on a paged B-tree

Rows of `(id, username, email)` (`Row`, with a username of at most 32 and an
e-mail of at most 255 bytes) are stored in 4096-byte pages in a file, at most
400 pages. `Table` opens the file, iterates over its rows in key order and
can be used as a context manager that writes every page back on exit;
`Cursor` positions itself on a key and walks the leaves. `Pager` caches the
pages and performs the leaf and internal node splits.

```python
from workbench.simpledb.repl import execute_statement, prepare_statement
from workbench.simpledb.table import Table

with Table("people.db") as table:
    execute_statement(prepare_statement("insert 1 alice alice@example.com"), table)
    rows = execute_statement(prepare_statement("select"), table)
```

`prepare_statement` raises `PrepareError` for bad input and
`execute_statement` raises `DuplicateKeyError` for an id already present.

The interactive shell is started with:

```
workbench-db [FILE]
```

It works on `FILE`, or on `Default.db` in the current directory, and
understands:

```
db > insert 1 alice alice@example.com
Executed.
db > select
(1, alice, alice@example.com)
Executed.
db > .btree
db > .constants
db > .exit
```

`.btree` prints the tree as an indented outline, `.constants` the storage
layout sizes. `.exit`, or the end of input, writes all pages back to the
file before leaving.

## What it does not do

- `workbench.kv` has the tree, list, thread pool and wire format, but no
  hash map, sorted set, timer heap or network server: nothing listens on a
  socket or executes commands carried by `parse_req`.
- `workbench.simpledb` only inserts and selects whole rows; there is no
  update, delete or query by condition.