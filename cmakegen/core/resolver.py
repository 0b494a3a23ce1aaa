# SPDX-License-Identifier: MIT
"""Build step resolution for source files.

A file's custom build step comes from exactly one place:

1. explicit per-file settings in the configuration, if there are any;
2. otherwise the first project rule whose pattern matches the file;
3. otherwise nothing.

Both the source-list emission and the custom-command emission use
resolve_build_step(), so they always agree on which step applies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from cmakegen.core.rules import apply_rule, rule_for_file

if TYPE_CHECKING:
    from cmakegen.core.project import Configuration, FileConfig
    from cmakegen.core.rules import Rule
    from cmakegen.core.tree import FileNode


class StepOrigin(Enum):
    EXPLICIT = "explicit"
    RULE = "rule"
    CONFIGURATION = "configuration"


@dataclass(frozen=True)
class BuildStep:
    """A resolved custom build step.

    Attributes:
        origin: Where the step came from.
        message: Message echoed before the commands, if any.
        commands: Commands in execution order (untranslated).
        inputs: Extra input dependencies (absolute paths).
        outputs: Generated files (absolute paths).
        rule: The rule that produced the step, for RULE steps.
    """

    origin: StepOrigin
    message: str | None
    commands: tuple[str, ...]
    inputs: tuple[str, ...]
    outputs: tuple[str, ...]
    rule: Rule | None = None

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to run: no commands or no outputs."""
        return not self.commands or not self.outputs

    @classmethod
    def from_file_config(cls, file_config: FileConfig, cfg: Configuration) -> BuildStep:
        prj = cfg.bound_project
        return cls(
            origin=StepOrigin.EXPLICIT,
            message=file_config.buildmessage,
            commands=tuple(file_config.buildcommands),
            inputs=tuple(prj.abspath(p) for p in file_config.buildinputs),
            outputs=tuple(prj.abspath(p) for p in file_config.buildoutputs),
        )

    @classmethod
    def from_configuration(cls, cfg: Configuration) -> BuildStep:
        """The whole-configuration custom step."""
        prj = cfg.bound_project
        return cls(
            origin=StepOrigin.CONFIGURATION,
            message=cfg.buildmessage,
            commands=tuple(cfg.buildcommands),
            inputs=tuple(prj.abspath(p) for p in cfg.buildinputs),
            outputs=tuple(prj.abspath(p) for p in cfg.buildoutputs),
        )


def resolve_build_step(
    node: FileNode, cfg: Configuration, rules: list[Rule]
) -> BuildStep | None:
    """Resolve the build step for a file in one configuration.

    Explicit file settings win and the rule is never applied for that
    file; a matching rule is expanded only when there are none.

    Returns:
        The step, or None when neither source applies.
    """
    file_config = cfg.file_config(node.abspath)
    if file_config is not None and file_config.has_settings():
        return BuildStep.from_file_config(file_config, cfg)

    rule = rule_for_file(node.name, rules)
    if rule is None:
        return None

    context = apply_rule(rule, node, cfg, file_config)
    return BuildStep(
        origin=StepOrigin.RULE,
        message=context.buildmessage,
        commands=context.buildcommands,
        inputs=context.buildinputs,
        outputs=context.buildoutputs,
        rule=rule,
    )
