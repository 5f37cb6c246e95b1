"""Transformer Pipeline

An immutable, ordered chain of value transformers. A pipeline is itself a
callable, so it can be handed straight to Schema.transform():

    normalize = TransformerPipeline().add(str.strip).add(str.lower)
    email = string().email().transform(normalize)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

Transformer = Callable[[Any], Any]


@dataclass(frozen=True, slots=True)
class TransformerPipeline:
    transformers: tuple[Transformer, ...] = ()

    def add(self, transformer: Transformer) -> TransformerPipeline:
        """New pipeline with transformer appended."""
        return TransformerPipeline((*self.transformers, transformer))

    def execute(self, value: Any) -> Any:
        for transformer in self.transformers: value = transformer(value)
        return value

    def __call__(self, value: Any) -> Any: return self.execute(value)

    @property
    def is_empty(self) -> bool: return not self.transformers

    def __len__(self) -> int: return len(self.transformers)
