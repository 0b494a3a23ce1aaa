# SPDX-License-Identifier: MIT
"""Variable substitution for rule templates.

Rule commands, inputs and outputs are written as templates that refer to
the file being processed, its configuration and the rule's own
properties:

    protoc $Flags --cpp_out=${cfg.objdir} ${file.relpath}

Supported syntax:
- Simple variables: $VAR or ${VAR}
- Namespaced variables: $file.basename or ${file.basename}
- Escaped dollars: $$ becomes literal $

List values are joined with a single space when substituted. Values
that themselves contain variable references are expanded recursively.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from cmakegen.core.errors import (
    CircularReferenceError,
    MissingVariableError,
)


class Namespace:
    """Hierarchical namespace for variable lookup with dotted notation."""

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        parent: Namespace | None = None,
    ) -> None:
        self._data: dict[str, Any] = dict(data) if data else {}
        self._parent = parent

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self._resolve(key)
        except KeyError:
            if self._parent:
                return self._parent.get(key, default)
            return default

    def _resolve(self, key: str) -> Any:
        if "." in key:
            head, rest = key.split(".", 1)
            sub = self._data.get(head)
            if isinstance(sub, Namespace):
                return sub._resolve(rest)
            if isinstance(sub, Mapping):
                return Namespace(sub)._resolve(rest)
            raise KeyError(key)
        if key in self._data:
            return self._data[key]
        raise KeyError(key)

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def __setitem__(self, key: str, value: Any) -> None:
        if "." in key:
            head, rest = key.split(".", 1)
            if head not in self._data:
                self._data[head] = Namespace()
            sub = self._data[head]
            if isinstance(sub, Namespace):
                sub[rest] = value
            elif isinstance(sub, dict):
                sub[rest] = value
            else:
                raise TypeError(f"Cannot set {key}: {head} is not a namespace")
        else:
            self._data[key] = value

    def __getitem__(self, key: str) -> Any:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def update(self, other: Mapping[str, Any]) -> None:
        for key, value in other.items():
            self[key] = value

    def copy(self) -> Namespace:
        """Return a shallow copy; nested namespaces are copied one level deep."""
        data = {
            key: value.copy() if isinstance(value, Namespace) else value
            for key, value in self._data.items()
        }
        return Namespace(data, parent=self._parent)


_MISSING = object()

# Sentinel character for a literal $ during expansion (replaced at the end)
_DOLLAR_SENTINEL = "\x00"

# Match: $$, ${var}, $var
_TOKEN_PATTERN = re.compile(
    r"(\$\$)"
    r"|"
    r"\$\{([a-zA-Z_][a-zA-Z0-9_.]*)\}"
    r"|"
    r"\$([a-zA-Z_][a-zA-Z0-9_]*(?:\.[a-zA-Z_][a-zA-Z0-9_]*)*)"
)


def subst(template: str, namespace: Namespace | Mapping[str, Any]) -> str:
    """Expand variables in a template string.

    Args:
        template: Text containing $var / ${var} references.
        namespace: Variables to substitute.

    Returns:
        The expanded string.

    Raises:
        MissingVariableError: A referenced variable is not defined.
        CircularReferenceError: Variables refer to each other in a cycle.
    """
    ns = namespace if isinstance(namespace, Namespace) else Namespace(namespace)
    return _expand(template, ns, ()).replace(_DOLLAR_SENTINEL, "$")


def subst_list(
    templates: list[str] | tuple[str, ...],
    namespace: Namespace | Mapping[str, Any],
) -> list[str]:
    """Expand each template in a list, dropping entries that expand to nothing."""
    ns = namespace if isinstance(namespace, Namespace) else Namespace(namespace)
    result = []
    for template in templates:
        expanded = subst(template, ns)
        if expanded:
            result.append(expanded)
    return result


def _expand(text: str, namespace: Namespace, expanding: tuple[str, ...]) -> str:
    def replace_match(match: re.Match[str]) -> str:
        if match.group(1):
            return _DOLLAR_SENTINEL
        var_name = match.group(2) or match.group(3)
        if var_name in expanding:
            raise CircularReferenceError(list(expanding) + [var_name])
        value = namespace.get(var_name, _MISSING)
        if value is _MISSING:
            raise MissingVariableError(var_name)
        value_str = _to_str(value)
        if "$" in value_str:
            return _expand(value_str, namespace, expanding + (var_name,))
        return value_str

    return _TOKEN_PATTERN.sub(replace_match, text)


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(_to_str(v) for v in value if v is not None and v != "")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
