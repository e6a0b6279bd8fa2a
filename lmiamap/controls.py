"""Discrete-choice selection inputs."""
from __future__ import annotations

from typing import Callable, List, Optional, Sequence

ChangeListener = Callable[[str], None]


class ChoiceControl:
    def __init__(self, name: str, options: Sequence[str], value: Optional[str] = None) -> None:
        self.name = name
        self.options: List[str] = list(options)
        self.value = value if value is not None else (self.options[0] if self.options else None)
        self._listeners: List[ChangeListener] = []

    def set_options(self, options: Sequence[str]) -> None:
        self.options = list(options)
        if self.value not in self.options:
            self.value = self.options[0] if self.options else None

    def on_change(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def choose(self, value: str) -> None:
        if value not in self.options:
            raise ValueError(f"{value!r} is not an option of {self.name}")
        self.value = value
        for listener in list(self._listeners):
            listener(value)
