# SPDX-License-Identifier: MIT
"""Custom build rules.

A Rule describes how to process files that match a pattern and that have
no explicit per-file build step, e.g. running protoc on every *.proto:

    Rule(
        "protobuf",
        patterns=["*.proto"],
        buildmessage="Compiling ${file.name}",
        buildcommands=["protoc $Flags --cpp_out=${cfg.objdir} ${file.relpath}"],
        buildoutputs=["${cfg.objdir}/${file.basename}.pb.cc"],
        properties=[RuleProperty("Flags", kind="list", default=[])],
    )

Applying a rule to a file expands its templates against the file's
environment plus the rule's property values; the result is a
RuleContext with the same shape as explicit per-file settings.
"""

from __future__ import annotations

import fnmatch
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from cmakegen.core.errors import ModelError
from cmakegen.core.subst import Namespace, subst, subst_list
from cmakegen.util.paths import PathContext

if TYPE_CHECKING:
    from cmakegen.core.project import Configuration, FileConfig
    from cmakegen.core.tree import FileNode

PropertyKind = Literal["string", "list", "boolean", "enum", "path"]

_PATHS = PathContext("/")


@dataclass
class RuleProperty:
    """One entry of a rule's property schema.

    Attributes:
        name: Property name, referenced as $name in rule templates.
        kind: How values are formatted.
        default: Value used when neither configuration nor file sets one.
        separator: Joins list values (default: a space).
        switch: Text substituted for a true boolean (empty when false).
        values: For enums, maps the configured key to the substituted text.
    """

    name: str
    kind: PropertyKind = "string"
    default: Any = None
    separator: str = " "
    switch: str | None = None
    values: dict[str, str] = field(default_factory=dict)

    def format(self, value: Any) -> str:
        """Render a configured value as template text."""
        if value is None:
            return ""
        if self.kind == "list":
            items = value if isinstance(value, (list, tuple)) else [value]
            return self.separator.join(str(item) for item in items)
        if self.kind == "boolean":
            if not value:
                return ""
            return self.switch if self.switch is not None else "true"
        if self.kind == "enum":
            key = str(value)
            if key not in self.values:
                raise ModelError(
                    f"rule property '{self.name}': invalid value '{key}'"
                )
            return self.values[key]
        return str(value)


@dataclass
class Rule:
    """A named pattern-based build step."""

    name: str
    patterns: list[str] = field(default_factory=list)
    buildmessage: str | None = None
    buildcommands: list[str] = field(default_factory=list)
    buildinputs: list[str] = field(default_factory=list)
    buildoutputs: list[str] = field(default_factory=list)
    properties: list[RuleProperty] = field(default_factory=list)

    def matches(self, filename: str) -> bool:
        return any(fnmatch.fnmatchcase(filename, pattern) for pattern in self.patterns)


@dataclass(frozen=True)
class RuleContext:
    """A rule expanded for one file; shaped like a FileConfig's build step."""

    rule: Rule
    buildmessage: str | None
    buildcommands: tuple[str, ...]
    buildinputs: tuple[str, ...]
    buildoutputs: tuple[str, ...]


class RuleRegistry:
    """Rules available to a workspace, looked up by name or filename."""

    def __init__(self) -> None:
        self._rules: dict[str, Rule] = {}

    def register(self, rule: Rule) -> Rule:
        if rule.name in self._rules:
            raise ModelError(f"duplicate rule '{rule.name}'")
        self._rules[rule.name] = rule
        return rule

    def get(self, name: str) -> Rule | None:
        return self._rules.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._rules

    def __iter__(self):
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)


def rule_for_file(filename: str, rules: list[Rule]) -> Rule | None:
    """First rule, in project order, whose patterns match filename."""
    for rule in rules:
        if rule.matches(filename):
            return rule
    return None


def file_environment(node: FileNode, cfg: Configuration) -> Namespace:
    """Variables visible to rule templates for one file in one configuration."""
    prj = cfg.bound_project
    wks = prj.workspace
    return Namespace(
        {
            "file": {
                "name": node.name,
                "basename": node.basename,
                "extension": node.extension,
                "abspath": node.abspath,
                "relpath": _PATHS.relative(prj.location, node.abspath),
                "directory": node.directory,
                "reldirectory": _PATHS.relative(prj.location, node.directory),
            },
            "cfg": {
                "name": cfg.name,
                "buildcfg": cfg.buildcfg,
                "platform": cfg.platform or "",
                "system": cfg.system,
                "objdir": cfg.object_directory,
                "targetdir": cfg.target_directory,
            },
            "prj": {
                "name": prj.name,
                "location": prj.location,
                "basedir": prj.basedir,
            },
            "wks": {
                "name": wks.name if wks is not None else "",
                "location": wks.location if wks is not None else prj.location,
            },
        }
    )


def prepare_environment(
    rule: Rule, environ: Namespace, rule_vars: Mapping[str, Mapping[str, Any]]
) -> None:
    """Set the rule's property values from a scope's rule variables.

    Values a scope does not set keep what an earlier scope put in the
    environment, falling back to the property default.
    """
    scope_values = rule_vars.get(rule.name, {})
    for prop in rule.properties:
        if prop.name in scope_values:
            environ[prop.name] = prop.format(scope_values[prop.name])
        elif prop.name not in environ:
            environ[prop.name] = prop.format(prop.default)


def apply_rule(
    rule: Rule,
    node: FileNode,
    cfg: Configuration,
    file_config: FileConfig | None = None,
) -> RuleContext:
    """Expand a rule for one file.

    The environment starts from the file's own variables; the rule's
    properties are then taken from the configuration and overridden by
    the file configuration.
    """
    environ = file_environment(node, cfg)
    if rule.properties:
        prepare_environment(rule, environ, cfg.rule_vars)
        if file_config is not None:
            prepare_environment(rule, environ, file_config.rule_vars)

    prj = cfg.bound_project
    message = subst(rule.buildmessage, environ) if rule.buildmessage else None
    return RuleContext(
        rule=rule,
        buildmessage=message or None,
        buildcommands=tuple(subst_list(rule.buildcommands, environ)),
        buildinputs=tuple(
            prj.abspath(p) for p in subst_list(rule.buildinputs, environ)
        ),
        buildoutputs=tuple(
            prj.abspath(p) for p in subst_list(rule.buildoutputs, environ)
        ),
    )
