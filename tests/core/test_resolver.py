# SPDX-License-Identifier: MIT
"""Tests for cmakegen.core.resolver."""

import pytest

from cmakegen.core.project import Configuration, FileConfig, Project, Workspace
from cmakegen.core.resolver import BuildStep, StepOrigin, resolve_build_step
from cmakegen.core.rules import Rule

GEN_RULE = Rule(
    "gen",
    patterns=["*.in"],
    buildmessage="Generating ${file.basename}.c",
    buildcommands=["gen ${file.relpath}"],
    buildoutputs=["gen/${file.basename}.c"],
)


@pytest.fixture
def setup():
    wks = Workspace("demo", "/w")
    wks.rules.register(GEN_RULE)
    prj = wks.add_project(
        Project("core", "/w", files=["table.in", "main.c"], rules=["gen"])
    )
    cfg = prj.add_configuration(Configuration("Debug"))
    nodes = {node.name: node for node in prj.source_tree().leaves()}
    return prj, cfg, nodes


class TestResolveBuildStep:
    def test_rule_applies(self, setup):
        prj, cfg, nodes = setup
        step = resolve_build_step(nodes["table.in"], cfg, prj.rule_objects())
        assert step is not None
        assert step.origin is StepOrigin.RULE
        assert step.rule is GEN_RULE
        assert step.message == "Generating table.c"
        assert step.commands == ("gen table.in",)
        assert step.outputs == ("/w/gen/table.c",)
        assert not step.is_empty

    def test_no_rule_no_settings(self, setup):
        prj, cfg, nodes = setup
        assert resolve_build_step(nodes["main.c"], cfg, prj.rule_objects()) is None

    def test_explicit_settings_win(self, setup):
        prj, cfg, nodes = setup
        cfg.add_file_config(
            FileConfig(
                "table.in",
                buildcommands=["mygen table.in"],
                buildoutputs=["out/table.c"],
                buildinputs=["mygen.py"],
            )
        )
        step = resolve_build_step(nodes["table.in"], cfg, prj.rule_objects())
        assert step is not None
        assert step.origin is StepOrigin.EXPLICIT
        assert step.rule is None
        assert step.commands == ("mygen table.in",)
        assert step.outputs == ("/w/out/table.c",)
        assert step.inputs == ("/w/mygen.py",)

    def test_explicit_options_suppress_rule(self, setup):
        prj, cfg, nodes = setup
        cfg.add_file_config(FileConfig("table.in", buildoptions=["-w"]))
        step = resolve_build_step(nodes["table.in"], cfg, prj.rule_objects())
        assert step is not None
        assert step.origin is StepOrigin.EXPLICIT
        assert step.is_empty

    def test_rule_vars_only_still_uses_rule(self, setup):
        prj, cfg, nodes = setup
        cfg.add_file_config(FileConfig("table.in", rule_vars={"gen": {}}))
        step = resolve_build_step(nodes["table.in"], cfg, prj.rule_objects())
        assert step is not None
        assert step.origin is StepOrigin.RULE

    def test_rule_not_in_project_ignored(self, setup):
        _, cfg, nodes = setup
        assert resolve_build_step(nodes["table.in"], cfg, []) is None


class TestBuildStep:
    def test_from_configuration(self, setup):
        _, cfg, _ = setup
        cfg.buildmessage = "Stamping"
        cfg.buildcommands = ["stamp"]
        cfg.buildinputs = ["VERSION"]
        cfg.buildoutputs = ["gen/version.h"]
        step = BuildStep.from_configuration(cfg)
        assert step.origin is StepOrigin.CONFIGURATION
        assert step.message == "Stamping"
        assert step.inputs == ("/w/VERSION",)
        assert step.outputs == ("/w/gen/version.h",)

    @pytest.mark.parametrize(
        "commands,outputs,empty",
        [
            ((), (), True),
            (("gen",), (), True),
            ((), ("out.c",), True),
            (("gen",), ("out.c",), False),
        ],
    )
    def test_is_empty(self, commands, outputs, empty):
        step = BuildStep(StepOrigin.EXPLICIT, None, commands, (), outputs)
        assert step.is_empty is empty
