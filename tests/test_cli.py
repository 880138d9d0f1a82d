"""
CLI pipeline stage tests

Stages are exercised directly with a ProgramState; the compile stage runs
with a fake build.
"""

from argparse import Namespace

import pytest

from tagpress import __main__ as compile_cli
from tagpress import serve as serve_cli
from tagpress.models import ProgramState, pipeline


class TestCompileStages:
    """tagpress compile pipeline"""

    def test_env_check(self, site, tmp_path):
        state = ProgramState(inputdir=site, outputdir=tmp_path / "dist", outputFile="mysite")

        checked = compile_cli.env_check(state)

        assert checked.envOK is True
        assert checked.artifactPath == tmp_path / "dist" / "mysite"
        assert (tmp_path / "dist").is_dir()

    def test_env_check_missing_root(self, tmp_path):
        state = ProgramState(inputdir=tmp_path / "nowhere", outputdir=tmp_path / "dist")
        with pytest.raises(SystemExit):
            compile_cli.env_check(state)

    def test_pipeline_with_fake_compiler(self, site, routes_file, tmp_path, monkeypatch):
        class FakeCompiler:
            def __init__(self, root_dir, config_file, output_path):
                self.output_path = output_path

            def compile(self):
                return {
                    "status": True,
                    "output_file": str(self.output_path),
                    "template_count": 3,
                    "route_count": 1,
                }

        monkeypatch.setattr(compile_cli, "Compiler", FakeCompiler)
        options = Namespace(config=str(routes_file), outputFile="mysite", verbosity=0)
        state = ProgramState.state_createFromNamespace(options, inputdir=site, outputdir=tmp_path)

        final = pipeline(
            state, compile_cli.env_check, compile_cli.artifact_compile, compile_cli.results_report
        )

        assert final.compileResult["output_file"] == str(tmp_path / "mysite")

    def test_results_report_without_result(self):
        with pytest.raises(SystemExit):
            compile_cli.results_report(ProgramState())


class TestServeStages:
    """tagpress-serve pipeline up to, not including, the server start"""

    def test_routes_setup_builds_app(self, site, routes_file):
        options = serve_cli.parser.parse_args(["--root", str(site), "--config", str(routes_file)])
        state = ProgramState.state_createFromNamespace(options)

        ready = pipeline(state, serve_cli.env_check, serve_cli.routes_setup)

        assert ready.envOK is True
        assert ready.app is not None
        assert ready.port == 8080

    def test_missing_root(self, tmp_path):
        options = serve_cli.parser.parse_args(["--root", str(tmp_path / "nowhere")])
        with pytest.raises(SystemExit):
            serve_cli.env_check(ProgramState.state_createFromNamespace(options))
