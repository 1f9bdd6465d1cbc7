"""Runs the enumerated patch steps for a dotfiles tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .config import BlockConfig, DotpatchConfig, load_config
from .errors import PatchError, TargetNotFoundError
from .logging import get_logger
from .models import PatchResult
from .patching.blocks import apply_managed_block, ensure_managed_block, validate_block
from .patching.editor import Transform, edit_file
from .recipes import Recipe, discover_recipes


@dataclass
class PatchStep:
    """One file patch in an apply run."""

    name: str
    path: Path
    transform: Transform
    optional: bool = False


@dataclass
class ApplyOutcome:
    """Result of an apply run."""

    results: List[PatchResult] = field(default_factory=list)
    skipped: List[PatchStep] = field(default_factory=list)
    dry_run: bool = False

    @property
    def changed(self) -> List[PatchResult]:
        return [result for result in self.results if result.status.changed]


class PlanAborted(RuntimeError):
    """Raised when a step fails; earlier steps have already been applied."""

    def __init__(self, step: PatchStep, cause: PatchError, completed: Sequence[PatchResult]) -> None:
        super().__init__(f"Step '{step.name}' failed for {step.path}: {cause}")
        self.step = step
        self.cause = cause
        self.completed = list(completed)


class Orchestrator:
    """Coordinates patch runs for the CLI."""

    def __init__(self, recipes: Optional[Iterable[Recipe]] = None) -> None:
        self._recipe_overrides = list(recipes) if recipes is not None else None
        self.logger = get_logger("orchestrator")

    def run_apply(self, path: str | Path = ".", *, dry_run: bool = False) -> ApplyOutcome:
        """Apply every configured step in order, stopping at the first failure."""
        config = load_config(Path(path))
        self.logger.info("Applying patches under %s", config.dotfiles_home)
        steps = self.build_steps(config)
        self.logger.debug("Planned %d step(s): %s", len(steps), ", ".join(step.name for step in steps))
        return self.execute(steps, dry_run=dry_run)

    def run_ensure(
        self,
        file_path: str | Path,
        marker: str,
        lines: Sequence[str],
        *,
        dry_run: bool = False,
    ) -> PatchResult:
        """Patch a single file with one managed block."""
        block = list(lines)
        if not block or block[0] != marker:
            block = [marker, *block]
        return ensure_managed_block(Path(file_path), marker, block, dry_run=dry_run)

    def build_steps(self, config: DotpatchConfig) -> List[PatchStep]:
        recipes = self._select_recipes(config)
        steps = [
            PatchStep(
                name=recipe.name,
                path=recipe.target_path(config),
                transform=recipe.transform(config),
                optional=recipe.optional,
            )
            for recipe in recipes
        ]
        steps.extend(self._block_step(config, block) for block in config.blocks)
        return steps

    def execute(self, steps: Sequence[PatchStep], *, dry_run: bool = False) -> ApplyOutcome:
        outcome = ApplyOutcome(dry_run=dry_run)
        for step in steps:
            try:
                result = edit_file(step.path, step.transform, dry_run=dry_run, label=step.name)
            except TargetNotFoundError as exc:
                if step.optional:
                    self.logger.warning("Skipping %s: %s", step.name, exc)
                    outcome.skipped.append(step)
                    continue
                self._log_failure(step, exc)
                raise PlanAborted(step, exc, outcome.results) from exc
            except PatchError as exc:
                self._log_failure(step, exc)
                raise PlanAborted(step, exc, outcome.results) from exc
            outcome.results.append(result)
        self.logger.info(
            "%d step(s) run, %d changed, %d skipped",
            len(outcome.results),
            len(outcome.changed),
            len(outcome.skipped),
        )
        return outcome

    def _select_recipes(self, config: DotpatchConfig) -> List[Recipe]:
        if self._recipe_overrides is not None:
            return list(self._recipe_overrides)
        return discover_recipes(config.recipes)

    @staticmethod
    def _block_step(config: DotpatchConfig, block: BlockConfig) -> PatchStep:
        target = Path(block.target).expanduser()
        if not target.is_absolute():
            target = config.dotfiles_home / target
        lines = validate_block(block.marker, block.block_lines())
        return PatchStep(
            name=block.marker,
            path=target,
            transform=lambda text: apply_managed_block(text, block.marker, lines),
        )

    def _log_failure(self, step: PatchStep, exc: PatchError) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("Step %s failed: %s", step.name, exc)
        else:
            self.logger.error("Step %s failed: %s", step.name, exc)


__all__ = ["ApplyOutcome", "Orchestrator", "PatchStep", "PlanAborted"]
