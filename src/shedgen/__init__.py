"""shedgen -- Build-time version keys and shell completions for ``shed``.

This package runs before the ``shed`` binary is compiled. It derives the
``DEMON_VERSION`` build constant from the declared package version and the
current version-control revision, and, for ``release`` builds, renders
bash, zsh and PowerShell completion scripts from the ``shed`` command-line
description into the build output directory.

Typical invocation from a build step::

    PKG_VERSION=1.2.3 PROFILE=release OUT_DIR=target/out shedgen run

Modules:
    app: Typer application and console-script entry point.
    commands: The run, version, completions and describe commands.
    cli: The shed command tree, description loader and click builder.
    models: Pydantic models for CLI descriptions, versions and artifacts.
    config: Build environment resolution (flags, env vars, defaults).
    version: Version resolver (git / Mercurial revision markers).
    completion: Completion script renderers and emitter.
    directives: Build-system directive adapter.
    fileio: Atomic file replacement for generated files.
    orchestrator: The top-level build driver.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
