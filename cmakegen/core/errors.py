# SPDX-License-Identifier: MIT
"""Custom exceptions for cmakegen.

All cmakegen exceptions inherit from CmakegenError. Errors raised while
emitting a project are fatal for that project: nothing is written for it.
"""

from __future__ import annotations


class CmakegenError(Exception):
    """Base class for all cmakegen exceptions.

    Attributes:
        message: The error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ModelError(CmakegenError):
    """The workspace/project model is invalid.

    Raised for duplicate configuration names, configurations bound to
    more than one project, and malformed model descriptions.
    """


class GenerateError(CmakegenError):
    """Error during the generate phase."""


class UnknownToolsetError(GenerateError):
    """No toolset descriptor is registered for an identifier.

    Attributes:
        toolset: The identifier that could not be resolved.
    """

    def __init__(self, toolset: str) -> None:
        self.toolset = toolset
        super().__init__(f"invalid toolset '{toolset}'")


class UnrecognizedDialectError(GenerateError):
    """A C++ dialect token has no CMake standard level.

    Attributes:
        dialect: The offending token.
        project: Name of the project declaring it.
        configuration: Name of the configuration declaring it.
    """

    def __init__(self, dialect: str, project: str, configuration: str) -> None:
        self.dialect = dialect
        self.project = project
        self.configuration = configuration
        super().__init__(
            f"unrecognized C++ dialect '{dialect}' "
            f"in project '{project}' ({configuration})"
        )


class SubstitutionError(CmakegenError):
    """Error during variable substitution."""


class MissingVariableError(SubstitutionError):
    """Referenced variable does not exist.

    Attributes:
        variable: The name of the missing variable.
    """

    def __init__(self, variable: str) -> None:
        self.variable = variable
        super().__init__(f"undefined variable: ${variable}")


class CircularReferenceError(SubstitutionError):
    """Circular variable reference detected.

    Attributes:
        chain: The chain of variables forming the cycle.
    """

    def __init__(self, chain: list[str]) -> None:
        self.chain = chain
        cycle_str = " -> ".join(chain)
        super().__init__(f"circular variable reference: {cycle_str}")
