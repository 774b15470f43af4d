"""Shell completion generation for bash, zsh and PowerShell.

Typical usage::

    from shedgen.cli import build_cli
    from shedgen.completion import emit
    from shedgen.models import ShellDialect

    path = emit(ShellDialect.ZSH, build_cli(), "shed", out_dir)

Sub-modules:

* :mod:`~shedgen.completion.base` -- description validation and shared
  token helpers.
* :mod:`~shedgen.completion.bash`, :mod:`~shedgen.completion.zsh`,
  :mod:`~shedgen.completion.powershell` -- one renderer per dialect.
* :mod:`~shedgen.completion.emitter` -- render + atomic write.
"""

from shedgen.completion.base import validate_description
from shedgen.completion.emitter import RENDERERS, emit, emit_artifact, parse_dialect, render

__all__ = [
    "RENDERERS",
    "emit",
    "emit_artifact",
    "parse_dialect",
    "render",
    "validate_description",
]
