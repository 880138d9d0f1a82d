#!/usr/bin/env python3
"""
tagpress-serve - development server for directive documents

Serves documents straight from a root directory, re-reading each file on
every request, so edits show up immediately. Configured routes come from the
XML route file; every other path falls back to file-based routing
("/about" -> about.html, "/" -> index.html).

Usage:
    tagpress-serve [--root ./root_http] [--config routes.xml] [--port 8080] [--watch]
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, ArgumentDefaultsHelpFormatter
from typing import Optional, Sequence

from .config import appsettings
from .lib import FileSystemRegistry, __version__, LOG, state_connectToLogger
from .lib.routes import routes_loadOrEmpty
from .lib.server import app_create, server_run
from .lib.watcher import PollingWatcher
from .models import ProgramState, pipeline


parser = ArgumentParser(
    description="tagpress-serve - serve directive documents from a directory",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument("-r", "--root", dest="inputdir", type=Path, default=Path(appsettings.root_dir), help="Root directory for web files")
parser.add_argument("-c", "--config", default=appsettings.config_file, type=str, help="XML configuration file for routing")
parser.add_argument("-p", "--port", default=appsettings.port, type=int, help="Port to run the server on")
parser.add_argument("--host", default=appsettings.host, type=str, help="Interface to bind")
parser.add_argument("-w", "--watch", action="store_true", help="Watch the root directory and log changes")
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
    Resolve the document root and configuration path.

    Exits:
        1 if the document root does not exist
    """
    state = inputstate.copy()

    if state.inputdir is None or not state.inputdir.is_dir():
        print(f"Error: Document root not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.rootDir = state.inputdir
    state.configPath = Path(state.config)
    state.envOK = True
    return state


def routes_setup(inputstate: ProgramState) -> ProgramState:
    """Load routes (an unreadable config means file-based routing only) and build the app"""
    state = inputstate.copy()

    routes = routes_loadOrEmpty(state.configPath)
    registry = FileSystemRegistry(state.rootDir, appsettings.template_extension)
    state.app = app_create(registry, routes)
    return state


def server_start(inputstate: ProgramState) -> ProgramState:
    """Start the optional watcher and serve until interrupted"""
    state = inputstate.copy()

    LOG(f"Server starting on port {state.port}", level=1)
    LOG(f"Root directory: {state.rootDir}", level=1)
    LOG(f"Config file: {state.configPath}", level=1)
    LOG(f"File watching: {state.watch}", level=1)

    watcher = None
    if state.watch:
        watcher = PollingWatcher(state.rootDir, appsettings.watch_interval)
        watcher.start()

    try:
        server_run(state.app, state.host, state.port)
    finally:
        if watcher is not None:
            watcher.stop()
    return state


def main(argv: Optional[Sequence[str]] = None) -> None:
    options = parser.parse_args(argv)
    state = ProgramState.state_createFromNamespace(options)

    state_connectToLogger(state)

    pipeline(state, env_check, routes_setup, server_start)


if __name__ == "__main__":
    main()
