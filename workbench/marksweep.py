"""A tiny stack virtual machine with a mark-and-sweep garbage collector."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

STACK_MAX = 256
INIT_OBJ_NUM_MAX = 8


class ObjectType(Enum):
    """Kinds of heap objects."""

    INT = auto()
    PAIR = auto()


@dataclass(eq=False)
class HeapObject:
    """An object on the VM heap: an integer or a pair of references."""

    type: ObjectType
    value: int = 0
    head: Optional[HeapObject] = None
    tail: Optional[HeapObject] = None
    marked: bool = False


class VM:
    """A value stack whose objects are reclaimed once unreachable."""

    def __init__(self) -> None:
        self.stack: list[HeapObject] = []
        self.objects: list[HeapObject] = []
        self.max_objects = INIT_OBJ_NUM_MAX

    @property
    def num_objects(self) -> int:
        return len(self.objects)

    def push(self, value: HeapObject) -> None:
        """Push an object onto the stack."""
        if len(self.stack) >= STACK_MAX:
            raise OverflowError("Stack overflow!")
        self.stack.append(value)

    def pop(self) -> HeapObject:
        """Pop the top object off the stack."""
        if not self.stack:
            raise IndexError("Stack underflow!")
        return self.stack.pop()

    @staticmethod
    def _mark(root: HeapObject) -> None:
        pending = [root]
        while pending:
            obj = pending.pop()
            if obj is None or obj.marked:
                continue
            obj.marked = True
            if obj.type is ObjectType.PAIR:
                pending.append(obj.head)
                pending.append(obj.tail)

    def _mark_all(self) -> None:
        for obj in self.stack:
            self._mark(obj)

    def _sweep(self) -> None:
        survivors = [obj for obj in self.objects if obj.marked]
        for obj in survivors:
            obj.marked = False
        self.objects = survivors

    def gc(self) -> int:
        """Collect unreachable objects and return how many were freed."""
        before = self.num_objects
        self._mark_all()
        self._sweep()
        self.max_objects = INIT_OBJ_NUM_MAX if self.num_objects == 0 else self.num_objects * 2
        collected = before - self.num_objects
        print(f"Collected {collected} objects, {self.num_objects} remaining.")
        return collected

    def new_object(self, object_type: ObjectType) -> HeapObject:
        """Allocate a heap object, collecting first if the heap is full."""
        if self.num_objects == self.max_objects:
            self.gc()
        obj = HeapObject(object_type)
        self.objects.append(obj)
        return obj

    def push_int(self, value: int) -> HeapObject:
        """Allocate an integer object and push it."""
        obj = self.new_object(ObjectType.INT)
        obj.value = value
        self.push(obj)
        return obj

    def push_pair(self) -> HeapObject:
        """Pop tail and head, allocate a pair of them and push it."""
        obj = self.new_object(ObjectType.PAIR)
        obj.tail = self.pop()
        obj.head = self.pop()
        self.push(obj)
        return obj

    def format_object(self, obj: HeapObject) -> str:
        """Render an object as text; pairs as ``(head, tail)``."""
        if obj.type is ObjectType.INT:
            return str(obj.value)
        return f"({self.format_object(obj.head)}, {self.format_object(obj.tail)})"