from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Iterator, Sequence

from pydantic import BaseModel, Field, model_validator

from finsarthi.wizard.questions import Question, WizardValidationError

DEFAULT_TREE_PATH = Path(__file__).with_name("advice_prompts.json")


class AdviceNode(BaseModel):
    """A category (has children) or a prompt (has a system prompt and questions)."""

    key: str
    title: dict[str, str]
    children: list[AdviceNode] = Field(default_factory=list)
    system_prompt: dict[str, str] | None = None
    questions: list[Question] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_shape(self) -> "AdviceNode":
        if self.children and self.system_prompt is not None:
            raise ValueError(f"Node {self.key!r} cannot be both a category and a prompt")
        if self.system_prompt is not None and not self.questions:
            raise ValueError(f"Prompt {self.key!r} has no questions")
        if not self.children and self.system_prompt is None:
            raise ValueError(f"Category {self.key!r} is empty")
        return self

    @property
    def is_prompt(self) -> bool:
        return self.system_prompt is not None

    def localized_title(self, language: str) -> str:
        return self.title.get(language) or self.title.get("en") or self.key

    def localized_system_prompt(self, language: str) -> str:
        prompts = self.system_prompt or {}
        return prompts.get(language) or prompts.get("en", "")

    def question(self, key: str) -> Question | None:
        return next((question for question in self.questions if question.key == key), None)


class AdviceTree:
    def __init__(self, roots: Sequence[AdviceNode]):
        self.roots = list(roots)
        self._prompts: dict[str, AdviceNode] = {}
        for node in self._walk(self.roots):
            if node.is_prompt:
                if node.key in self._prompts:
                    raise ValueError(f"Duplicate prompt key {node.key!r}")
                self._prompts[node.key] = node

    @classmethod
    def from_file(cls, path: Path | str) -> AdviceTree:
        with open(path, encoding="utf-8") as handle:
            data = json.load(handle)
        return cls([AdviceNode.model_validate(item) for item in data])

    @staticmethod
    def _walk(nodes: Sequence[AdviceNode]) -> Iterator[AdviceNode]:
        for node in nodes:
            yield node
            yield from AdviceTree._walk(node.children)

    def prompts(self) -> list[AdviceNode]:
        return list(self._prompts.values())

    def find_prompt(self, key: str) -> AdviceNode | None:
        return self._prompts.get(key)

    def children(self, path: Sequence[str] = ()) -> list[AdviceNode]:
        """Options offered after selecting ``path`` from the top level."""
        nodes = self.roots
        for depth, key in enumerate(path):
            node = next((candidate for candidate in nodes if candidate.key == key), None)
            if node is None:
                raise WizardValidationError({"path": f"Unknown topic {key!r} at step {depth + 1}."})
            if node.is_prompt:
                if depth != len(path) - 1:
                    raise WizardValidationError({"path": f"Topic {key!r} has no sub-topics."})
                return []
            nodes = node.children
        return list(nodes)


@lru_cache
def get_advice_tree() -> AdviceTree:
    return AdviceTree.from_file(DEFAULT_TREE_PATH)
