"""
Content providers for prompt selection.

The engine never hardcodes prompt text. It asks a ContentSource for a
random prompt in a (mode, type) bucket, passing the ids already shown this
session. Once a bucket is exhausted it recycles: prompts may repeat.

Banks ship as YAML package data:

    original:
      truth:
        - {id: t1, intensity: 1, text: "What is your biggest fear?"}
      dare:
        - {id: d1, intensity: 1, text: "Do your best dance move."}
"""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from collections.abc import Iterable
from importlib import resources
from pathlib import Path

import yaml

from ..state.schema import DEFAULT_MODE, Prompt, PromptType

logger = logging.getLogger(__name__)

PACKAGE_BANK = "truth_or_dare.yaml"


class ContentSource(ABC):
    """Anything that can hand the engine a prompt."""

    @abstractmethod
    def get_random(
        self,
        mode: str,
        prompt_type: PromptType,
        exclude_ids: Iterable[str] = (),
    ) -> Prompt:
        """Return a prompt from the bucket, avoiding `exclude_ids` if possible."""
        ...


class ContentProvider(ContentSource):
    """
    In-memory prompt banks keyed by mode, then type.

    Unknown modes resolve to `default_mode` rather than failing, so a
    misconfigured mode never blocks play.
    """

    def __init__(
        self,
        prompts: Iterable[Prompt],
        default_mode: str = DEFAULT_MODE.value,
        rng: random.Random | None = None,
    ):
        self.default_mode = default_mode
        self._rng = rng or random.Random()
        self._banks: dict[str, dict[PromptType, list[Prompt]]] = {}
        for prompt in prompts:
            self._banks.setdefault(prompt.mode, {}).setdefault(prompt.type, []).append(prompt)

        if not self._banks.get(default_mode):
            raise ValueError(f"Content has no prompts for default mode {default_mode!r}")

    @property
    def modes(self) -> list[str]:
        return list(self._banks)

    def resolve_mode(self, mode: str) -> str:
        """The mode key actually served for `mode`."""
        if mode in self._banks:
            return mode
        logger.debug("No content for mode %r, using %r", mode, self.default_mode)
        return self.default_mode

    def bucket(self, mode: str, prompt_type: PromptType) -> list[Prompt]:
        """All prompts for (mode, type), after mode fallback."""
        resolved = self.resolve_mode(mode)
        prompts = self._banks[resolved].get(prompt_type)
        if not prompts:
            # Mode exists but lacks this type; fall through to the default bank
            prompts = self._banks[self.default_mode].get(prompt_type, [])
        return list(prompts)

    def get_random(
        self,
        mode: str,
        prompt_type: PromptType,
        exclude_ids: Iterable[str] = (),
    ) -> Prompt:
        """
        Uniform pick from the bucket minus `exclude_ids`.

        When everything has been shown, picks uniformly from the whole
        bucket instead. That is the recycling path, not an error.
        """
        bucket = self.bucket(mode, prompt_type)
        if not bucket:
            raise LookupError(f"No {prompt_type.value} prompts available")

        excluded = set(exclude_ids)
        available = [p for p in bucket if p.id not in excluded]
        if not available:
            logger.debug(
                "Bucket %s/%s exhausted (%d prompts), recycling",
                mode, prompt_type.value, len(bucket),
            )
            available = bucket

        return self._rng.choice(available)

    # ─── Loading ─────────────────────────────────────────────────

    @classmethod
    def from_yaml(cls, path: Path | str, **kwargs) -> "ContentProvider":
        """Load banks from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls(parse_banks(data), **kwargs)

    @classmethod
    def from_package(cls, **kwargs) -> "ContentProvider":
        """Load the Truth-or-Dare banks shipped with the package."""
        source = resources.files("party_engine").joinpath("content", PACKAGE_BANK)
        data = yaml.safe_load(source.read_text(encoding="utf-8"))
        return cls(parse_banks(data), **kwargs)


def parse_banks(data: dict) -> list[Prompt]:
    """
    Turn the `{mode: {type: [entry, ...]}}` mapping into Prompt models.

    Raises:
        ValueError: duplicate id inside one bucket, or bad structure
    """
    if not isinstance(data, dict):
        raise ValueError("Content file must map mode names to buckets")

    prompts: list[Prompt] = []
    for mode, by_type in data.items():
        for type_key, entries in (by_type or {}).items():
            prompt_type = PromptType(type_key)
            seen: set[str] = set()
            for entry in entries or []:
                prompt = Prompt(mode=str(mode), type=prompt_type, **entry)
                if prompt.id in seen:
                    raise ValueError(
                        f"Duplicate prompt id {prompt.id!r} in {mode}/{type_key}"
                    )
                seen.add(prompt.id)
                prompts.append(prompt)

    logger.debug("Parsed %d prompts across %d modes", len(prompts), len(data))
    return prompts
