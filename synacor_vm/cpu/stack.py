"""
Synacor VM - Evaluation/Call Stack

One LIFO of words shared by PUSH/POP and CALL/RET. There is no separate
return stack: a program that pushes inside a subroutine must pop before
RET or it will return to whatever value it left on top.
"""

from typing import List

from ..errors import StackUnderflow


class Stack:
    """Growable word stack; popping when empty traps."""

    def __init__(self):
        self._items: List[int] = []

    def push(self, value: int):
        self._items.append(value)

    def pop(self) -> int:
        if not self._items:
            raise StackUnderflow("Pop from empty stack")
        return self._items.pop()

    def peek(self) -> int:
        if not self._items:
            raise StackUnderflow("Peek at empty stack")
        return self._items[-1]

    def __len__(self):
        return len(self._items)

    def __bool__(self):
        return bool(self._items)

    def snapshot(self) -> tuple:
        """Bottom-to-top copy of the stack contents."""
        return tuple(self._items)

    def clear(self):
        self._items.clear()
