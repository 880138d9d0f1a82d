"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages. Both CLI
commands (compile and serve) run as pipelines over this state.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the CLI pipelines (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Compile pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, config, outputFile
        - env_check: rootDir, configPath, artifactPath, envOK
        - artifact_compile: compileResult
        - results_report: (no additions, terminal stage)

    Serve pipeline stages and their state additions:
        - Initial: inputdir, verbosity, config, host, port, watch
        - env_check: rootDir, configPath, envOK
        - routes_setup: app
        - server_start: (no additions, blocks until shutdown)

    Attributes:
        inputdir: Root directory holding the documents
        outputdir: Directory receiving the compiled executable
        verbosity: Logging verbosity level (1-3)
        config: Route configuration file (relative paths resolve against cwd)
        outputFile: Name of the compiled executable
        host: Interface the server binds to
        port: Port the server listens on
        watch: Poll the root directory and log changes
        envOK: Environment validation passed
        rootDir: Resolved root directory
        configPath: Resolved route configuration path
        artifactPath: Final path of the compiled executable
        app: ASGI application built by the serve pipeline
        compileResult: Compilation results (output_file, template_count, ...)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    config: str = field(default="routes.xml")
    outputFile: str = field(default="")
    host: str = field(default="0.0.0.0")
    port: int = field(default=8080)
    watch: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    rootDir: Path = field(default=Path("/"))
    configPath: Path = field(default=Path("/"))
    artifactPath: Path = field(default=Path("/"))
    app: Optional[Any] = field(default=None)
    compileResult: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"],
        options: Namespace,
        inputdir: Optional[Path] = None,
        outputdir: Optional[Path] = None,
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Merges CLI options with explicitly provided directories to create
        the initial program state for a pipeline.

        Args:
            options: Parsed CLI arguments
            inputdir: Directory containing source documents
            outputdir: Directory for compilation output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Keep only options ProgramState knows about
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = dict(filtered_options)
        if inputdir is not None:
            merged_args["inputdir"] = inputdir
        if outputdir is not None:
            merged_args["outputdir"] = outputdir

        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            artifact_compile,
            results_report
        )

    This is equivalent to:
        results_report(artifact_compile(env_check(initial_state)))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
