"""Built-in shedgen commands.

* :mod:`~shedgen.commands.run` -- ``shedgen run``, the build orchestrator.
* :mod:`~shedgen.commands.version` -- ``shedgen version``.
* :mod:`~shedgen.commands.completions` -- ``shedgen completions show|write``.
* :mod:`~shedgen.commands.describe` -- ``shedgen describe``.
"""
