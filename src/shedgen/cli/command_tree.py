"""Build a click command tree from a :class:`~shedgen.models.CliDescription`.

This is the runtime consumer of the description: the same tree that drives
completion generation becomes a real argument parser, so completions and
parsing can never disagree about which flags exist.

**Mapping rules**

* A node with subcommands becomes a :class:`click.Group`; a leaf becomes a
  :class:`click.Command`. Aliases are registered as extra names.
* Value-less flags become boolean flags, or counters when ``multiple``.
* Flags that take a value use :class:`click.Choice` when choices are
  declared, :class:`click.Path` for ``file``/``dir`` hints and ``str``
  otherwise.
* ``-h/--help`` is available everywhere; ``-V/--version`` on the root when
  the description carries a version.

Group-level flags are collected into ``ctx.obj`` so the leaf callback sees
the options of every level it was reached through.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Optional

import click

from shedgen.models import ArgSpec, CliDescription, CommandSpec, FlagSpec, ValueHint

CommandCallback = Callable[[tuple[str, ...], dict[str, Any]], Any]

_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def build_command(
    cli: CliDescription,
    callback: Optional[CommandCallback] = None,
) -> click.Command:
    """Materialise *cli* as a click command.

    Args:
        cli: The description to convert.
        callback: Called when a leaf command runs, with the command path
            (program name first) and the merged parameters of every level.
            When ``None``, leaves print a dry-run summary instead.

    Returns:
        The root :class:`click.Group` (or :class:`click.Command` when the
        description has no subcommands).
    """
    root = _build_node(cli, (), _make_dispatch(callback))
    if cli.version:
        click.version_option(cli.version, "-V", "--version", prog_name=cli.name)(root)
    return root


def _build_node(
    node: CommandSpec,
    parent: tuple[str, ...],
    dispatch: CommandCallback,
) -> click.Command:
    path = parent + (node.name,)
    params: list[click.Parameter] = [_flag_to_option(f) for f in node.flags]
    params.extend(_arg_to_argument(a) for a in node.args)

    if not node.subcommands:
        def _leaf(**kwargs: Any) -> Any:
            ctx = click.get_current_context()
            merged = dict(ctx.obj or {})
            merged.update(kwargs)
            return dispatch(path, merged)

        return click.Command(
            name=node.name,
            help=node.help or None,
            params=params,
            callback=_leaf,
            context_settings=_CONTEXT_SETTINGS,
        )

    def _collect(**kwargs: Any) -> None:
        ctx = click.get_current_context()
        ctx.ensure_object(dict)
        ctx.obj.update(kwargs)

    group = click.Group(
        name=node.name,
        help=node.help or None,
        params=params,
        callback=_collect,
        no_args_is_help=True,
        context_settings=_CONTEXT_SETTINGS,
    )
    for sub in node.subcommands:
        command = _build_node(sub, path, dispatch)
        group.add_command(command)
        for alias in sub.aliases:
            group.add_command(command, alias)
    return group


def _param_name(name: str) -> str:
    return name.replace("-", "_").replace(".", "_")


def _value_type(choices: tuple[str, ...], hint: ValueHint) -> click.ParamType | type:
    if choices:
        return click.Choice(list(choices))
    if hint is ValueHint.FILE:
        return click.Path(dir_okay=False)
    if hint is ValueHint.DIR:
        return click.Path(file_okay=False)
    return str


def _flag_to_option(flag: FlagSpec) -> click.Option:
    decls = [*flag.forms, _param_name(flag.name)]
    if not flag.takes_value:
        if flag.multiple:
            return click.Option(decls, count=True, help=flag.help or None)
        return click.Option(decls, is_flag=True, default=False, help=flag.help or None)
    return click.Option(
        decls,
        type=_value_type(flag.choices, flag.value_hint),
        metavar=flag.metavar,
        multiple=flag.multiple,
        help=flag.help or None,
    )


def _arg_to_argument(arg: ArgSpec) -> click.Argument:
    return click.Argument(
        [_param_name(arg.name)],
        required=arg.required,
        type=_value_type(arg.choices, arg.value_hint),
    )


def _make_dispatch(callback: Optional[CommandCallback]) -> CommandCallback:
    """Return *callback*, or a dispatcher that echoes what would have run."""
    if callback is not None:
        return callback

    def _dry_run(path: tuple[str, ...], params: dict[str, Any]) -> None:
        summary = " ".join(path)
        given = {k: v for k, v in params.items() if v not in (None, False, 0, ())}
        if given:
            summary += f"\n  params: {json.dumps(given, default=str, sort_keys=True)}"
        click.echo(summary)

    return _dry_run
