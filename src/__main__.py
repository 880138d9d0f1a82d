#!/usr/bin/env python3
"""
tagpress - compile a document tree into a standalone server

Reads every .html document under an input directory, together with the XML
route configuration, and produces one executable that serves exactly those
documents and routes, with no file dependencies at runtime.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Documents may embed three directives:
    <%@include file="partials/header.html" %>   include another document
    <% title = "Home" %>                        assign a variable
    <%= title %>                                output an expression

Usage:
    tagpress inputdir/ outputdir/ [--config routes.xml] [--outputFile NAME]

    The executable is written to outputdir/NAME and accepts --port.

Examples:
    # Basic compilation
    tagpress root_http/ dist/

    # Custom route configuration and executable name
    tagpress root_http/ dist/ --config site/routes.xml --outputFile mysite

    # Verbose output
    tagpress root_http/ dist/ -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import Compiler, __version__, LOG, state_connectToLogger
from .lib.errors import CompilationStepError
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
  _
 | |_ __ _  __ _ _ __  _ __ ___  ___ ___
 | __/ _` |/ _` | '_ \| '__/ _ \/ __/ __|
 | || (_| | (_| | |_) | | |  __/\__ \__ \
  \__\__,_|\__, | .__/|_|  \___||___/___/
           |___/|_|

  Directive documents, frozen into one binary
"""

# Define CLI arguments
parser = ArgumentParser(
    description="tagpress - compile a document tree and its routes into a standalone server",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "-c",
    "--config",
    default=appsettings.config_file,
    type=str,
    help="XML route configuration file",
)

parser.add_argument(
    "-o",
    "--outputFile",
    default=appsettings.output_name,
    type=str,
    help="Name of the compiled executable (written inside outputdir)",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - rootDir: Document root (the plugin input directory)
            - configPath: Route configuration path
            - artifactPath: Where the executable will be written
            - envOK: True if environment is valid

    Exits:
        1 if the document root does not exist
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if state.inputdir is None or not state.inputdir.is_dir():
        print(f"Error: Document root not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.rootDir = state.inputdir
    state.configPath = Path(state.config)
    LOG(f"Document root: {state.rootDir}", level=2)
    LOG(f"Config file: {state.configPath}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    state.artifactPath = state.outputdir / state.outputFile
    LOG(f"Output binary: {state.artifactPath}", level=2)

    state.envOK = True
    return state


def artifact_compile(inputstate: ProgramState) -> ProgramState:
    """
    Snapshot the documents and routes and build the executable.

    Args:
        inputstate: Program state with resolved paths

    Returns:
        ProgramState with added field:
            - compileResult: Dict containing:
                - status: bool (compilation success)
                - output_file: str (path to the executable)
                - template_count: int (documents embedded)
                - route_count: int (routes embedded)

    Exits:
        1 if any compilation step fails
    """

    state = inputstate.copy()

    try:
        compiler = Compiler(
            root_dir=state.rootDir,
            config_file=state.configPath,
            output_path=state.artifactPath,
        )
        state.compileResult = compiler.compile()
    except CompilationStepError as e:
        print(f"Compilation error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display compilation results and usage instructions to user.

    Args:
        inputstate: Program state with compileResult populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if compileResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.compileResult:
        print("Error: Compilation failed", file=sys.stderr)
        sys.exit(1)

    if state.verbosity >= 1:
        LOG("\n✓ Compilation successful!", level=1)
        LOG(f"  Output: {state.compileResult['output_file']}", level=1)
        LOG(f"  Templates: {state.compileResult['template_count']}", level=1)
        LOG(f"  Routes: {state.compileResult['route_count']}", level=1)
        LOG("\nTo run:", level=1)
        LOG(f"  {state.compileResult['output_file']} --port 8080", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="tagpress - directive document compiler",
    category="Utility",
    min_memory_limit="500Mi",
    min_cpu_limit="1000m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - compile a document root into a standalone server.

    Orchestrates the compile pipeline:
        1. env_check: Validate paths and environment
        2. artifact_compile: Scan, generate, build, install
        3. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
            - config: str - Route configuration file
            - outputFile: str - Executable name
            - verbosity: int - Logging verbosity level (1-3)
        inputdir: Document root
        outputdir: Directory receiving the executable

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, artifact_compile, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
