"""
Compiler freezing a document tree into a standalone server executable

Pipeline, each step a hard failure point reported as CompilationStepError:

1. scan: read every document under the root into a snapshot table
2. routes: load the route configuration (degrades to an empty table)
3. generate: render a Python program embedding both tables as literals,
   plus the PyInstaller manifest that builds it
4. workspace: write program and manifest into a temporary directory that
   is removed on every exit path
5. build: run the external toolchain against the workspace
6. install: move the built executable to the requested output path

The generated program imports tagpress itself and serves exclusively from
its embedded table. Rendering the program and manifest are pure functions,
so they can be checked without ever running the build.
"""

import shutil
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..config import AppSettings, appsettings
from ..models.routes import RouteTable
from .errors import CompilationStepError, TagpressError
from .log import LOG
from .registry import FileSystemRegistry
from .routes import routes_loadOrEmpty


PROGRAM_FILENAME = "main.py"

# uvicorn picks its protocol and loop implementations at runtime
HIDDEN_IMPORTS = [
    "uvicorn.logging",
    "uvicorn.loops.auto",
    "uvicorn.protocols.http.auto",
    "uvicorn.protocols.websockets.auto",
    "uvicorn.lifespan.on",
]

STEP_ERRORS = (OSError, UnicodeError, subprocess.SubprocessError, TagpressError)

# Settings frozen into the program; the environment of the running binary
# cannot change them
EMBEDDED_SETTINGS = ("template_extension", "index_document", "include_max_depth")


def program_render(
    templates: Mapping[str, str],
    routes: RouteTable,
    settings: AppSettings = appsettings,
) -> str:
    """
    Render the source of a compiled server program

    Args:
        templates: Identifier -> content snapshot
        routes: Route table to embed
        settings: Source of the EMBEDDED_SETTINGS values

    Returns:
        Python source defining TEMPLATES, ROUTES and SETTINGS literals and
        serving them through embedded_main()
    """
    lines: List[str] = [
        '"""Compiled tagpress server. Generated code, do not edit."""',
        "",
        "from tagpress.lib.server import embedded_main",
        "",
        "TEMPLATES = {",
    ]
    for identifier in sorted(templates):
        lines.append(f"    {identifier!r}: {templates[identifier]!r},")
    lines.append("}")
    lines.append("")
    lines.append("ROUTES = [")
    for route in routes.as_literal():
        lines.append(f"    {route!r},")
    lines.append("]")
    lines.append("")
    lines.append("SETTINGS = {")
    for key in EMBEDDED_SETTINGS:
        lines.append(f"    {key!r}: {getattr(settings, key)!r},")
    lines.append("}")
    lines.append("")
    lines.append("")
    lines.append('if __name__ == "__main__":')
    lines.append("    embedded_main(TEMPLATES, ROUTES, SETTINGS)")
    lines.append("")
    return "\n".join(lines)


def manifest_render(name: str, program: str = PROGRAM_FILENAME) -> str:
    """
    Render a PyInstaller onefile spec for the generated program

    Args:
        name: Executable name
        program: Entry script, relative to the spec file

    Returns:
        Spec file source
    """
    return f"""# PyInstaller build manifest generated by tagpress

a = Analysis(
    [{program!r}],
    pathex=[SPECPATH],
    hiddenimports={HIDDEN_IMPORTS!r},
)
pyz = PYZ(a.pure)
exe = EXE(
    pyz,
    a.scripts,
    a.binaries,
    a.datas,
    [],
    name={name!r},
    console=True,
)
"""


class PyInstallerBuilder:
    """
    External build boundary: runs PyInstaller on a materialized workspace

    Output goes straight to the operator's console (stdout/stderr are
    inherited). Without a timeout the call blocks until PyInstaller exits.
    """

    def __init__(self, timeout: Optional[float] = None, python: str = sys.executable) -> None:
        self.timeout = timeout
        self.python = python

    def command_make(self, manifest: Path, distdir: Path, workdir: Path) -> List[str]:
        return [
            self.python, "-m", "PyInstaller",
            "--noconfirm",
            "--clean",
            "--distpath", str(distdir),
            "--workpath", str(workdir),
            str(manifest),
        ]

    def artifact_name(self, name: str) -> str:
        return name + ".exe" if sys.platform == "win32" else name

    def build(self, workspace: Path, manifest: Path, distdir: Path) -> None:
        """
        Run the build

        Raises:
            subprocess.CalledProcessError: PyInstaller exited non-zero
            subprocess.TimeoutExpired: The configured timeout elapsed
        """
        command = self.command_make(manifest, distdir, workspace / "build")
        LOG(f"Running: {' '.join(command)}", level=2)
        subprocess.run(command, cwd=workspace, check=True, timeout=self.timeout)


class Compiler:
    """
    Compiles a document root and route configuration into one executable

    Responsibilities:
    - Snapshot every document under the root
    - Load the route table
    - Generate the embedding program and its build manifest
    - Drive the external build in a scoped temporary workspace
    - Install the artifact only when the build succeeded
    """

    def __init__(
        self,
        root_dir: Path,
        config_file: Path,
        output_path: Path,
        builder: Optional[Any] = None,
        settings: AppSettings = appsettings,
    ) -> None:
        """
        Initialize compiler

        Args:
            root_dir: Directory holding the documents
            config_file: XML route configuration
            output_path: Where the executable is written
            builder: Build boundary with build(workspace, manifest, distdir)
                     and artifact_name(name); defaults to PyInstallerBuilder
            settings: Application settings (extension, build timeout)
        """
        self.root_dir = Path(root_dir)
        self.config_file = Path(config_file)
        self.output_path = Path(output_path).absolute()
        self.settings = settings
        self.builder = builder or PyInstallerBuilder(timeout=settings.build_timeout)
        self.name = self.output_path.name

    def step_run(self, step: str, action: Callable[..., Any], *args: Any) -> Any:
        """Run one pipeline step, wrapping its failure with the step name"""
        try:
            return action(*args)
        except CompilationStepError:
            raise
        except STEP_ERRORS as e:
            raise CompilationStepError(step, e)

    def compile(self) -> Dict[str, Any]:
        """
        Run the whole pipeline

        Returns:
            dict with compilation results and statistics

        Raises:
            CompilationStepError: Any step failed; no artifact is left at
                                  the output path and the workspace is gone
        """
        LOG(f"Compiling templates from: {self.root_dir}", level=1)

        templates = self.step_run("scan", self.templates_scan)
        routes = routes_loadOrEmpty(self.config_file)

        program = self.step_run("generate", program_render, templates, routes, self.settings)
        manifest = self.step_run("generate", manifest_render, self.name)

        workspace_dir = self.step_run("workspace", self.workspace_create)
        with workspace_dir as tmp:
            workspace = Path(tmp)
            LOG(f"Using temporary directory: {workspace}", level=2)

            manifest_path = self.step_run(
                "workspace", self.workspace_materialize, workspace, program, manifest
            )
            artifact = self.step_run("build", self.artifact_build, workspace, manifest_path)
            self.step_run("install", self.artifact_install, artifact)

        LOG(f"Compiled {len(templates)} templates into {self.output_path}", level=1)

        return {
            'status': True,
            'output_file': str(self.output_path),
            'template_count': len(templates),
            'route_count': len(routes),
        }

    def templates_scan(self) -> Dict[str, str]:
        """Snapshot every document under the root"""
        registry = FileSystemRegistry(self.root_dir, self.settings.template_extension)
        templates = registry.snapshot()
        LOG(f"Scanned {len(templates)} templates", level=2)
        return templates

    def workspace_create(self) -> tempfile.TemporaryDirectory:
        """Scoped build directory, removed when its context exits"""
        return tempfile.TemporaryDirectory(prefix="tagpress-compile-")

    def workspace_materialize(self, workspace: Path, program: str, manifest: str) -> Path:
        """
        Write the generated program and manifest into the workspace

        Returns:
            Path of the written manifest
        """
        (workspace / PROGRAM_FILENAME).write_text(program, encoding="utf-8")
        manifest_path = workspace / f"{self.name}.spec"
        manifest_path.write_text(manifest, encoding="utf-8")
        LOG(f"Wrote {PROGRAM_FILENAME} and {manifest_path.name}", level=3)
        return manifest_path

    def artifact_build(self, workspace: Path, manifest_path: Path) -> Path:
        """
        Invoke the builder and locate its artifact inside the workspace

        Raises:
            FileNotFoundError: The build reported success but produced nothing
        """
        distdir = workspace / "dist"
        LOG(f"Building binary: {self.name}", level=1)
        self.builder.build(workspace, manifest_path, distdir)

        artifact = distdir / self.builder.artifact_name(self.name)
        if not artifact.is_file():
            raise FileNotFoundError(f"build produced no artifact at {artifact}")
        return artifact

    def artifact_install(self, artifact: Path) -> None:
        """Move the built executable to the output path"""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(artifact), str(self.output_path))
