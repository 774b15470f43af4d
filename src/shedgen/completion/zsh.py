"""Zsh completion renderer.

Produces a ``#compdef`` autoload file. Each command becomes an
``_arguments`` call listing its flags and positionals; commands with
children hand over to a ``_<prog>__<path>_commands`` helper built on
``_describe``, and a ``case $line[1]`` block dispatches to the chosen
child's own ``_arguments`` spec.
"""

from __future__ import annotations

from shedgen.completion.base import command_flags, command_ident, shell_ident, summary
from shedgen.models import ArgSpec, CliDescription, CommandSpec, FlagSpec, ValueHint


def _escape_help(text: str) -> str:
    """Escape *text* for use inside ``'...[text]...'`` in an ``_arguments`` spec."""
    return (
        summary(text)
        .replace("\\", "\\\\")
        .replace("'", "'\\''")
        .replace("[", "\\[")
        .replace("]", "\\]")
        .replace(":", "\\:")
    )


def _escape_describe(text: str) -> str:
    """Escape *text* for the description half of a ``'name:description'`` entry."""
    return summary(text).replace("\\", "\\\\").replace("'", "'\\''")


def _action(choices: tuple[str, ...], hint: ValueHint) -> str:
    if choices:
        return "(" + " ".join(choices) + ")"
    if hint is ValueHint.FILE:
        return "_files"
    if hint is ValueHint.DIR:
        return "_files -/"
    if hint is ValueHint.HOSTNAME:
        return "_hosts"
    return "_default"


def _flag_specs(flag: FlagSpec) -> list[str]:
    help_text = _escape_help(flag.help)
    repeat = "*" if flag.multiple else ""
    specs: list[str] = []
    if flag.short_form:
        suffix = "+" if flag.takes_value else ""
        specs.append(f"{repeat}{flag.short_form}{suffix}[{help_text}]")
    suffix = "=" if flag.takes_value else ""
    specs.append(f"{repeat}{flag.long_form}{suffix}[{help_text}]")
    if flag.takes_value:
        value = f":{flag.metavar}:{_action(flag.choices, flag.value_hint)}"
        specs = [s + value for s in specs]
    return ["'" + s + "' \\" for s in specs]


def _arg_spec(arg: ArgSpec) -> str:
    colons = ":" if arg.required else "::"
    message = arg.name
    if arg.help:
        message += " -- " + _escape_help(arg.help)
    return f"'{colons}{message}:{_action(arg.choices, arg.value_hint)}' \\"


def _commands_func(prog: str, path: tuple[str, ...]) -> str:
    return "_" + command_ident((prog,) + path[1:]) + "_commands"


def _state(path: tuple[str, ...]) -> str:
    return "__".join(path)


def _arguments_block(
    cli: CliDescription,
    prog: str,
    path: tuple[str, ...],
    node: CommandSpec,
    indent: str,
) -> list[str]:
    specs: list[str] = []
    for flag in command_flags(cli, node):
        specs.extend(_flag_specs(flag))
    if node.subcommands:
        specs.append(f"\":: :{_commands_func(prog, path)}\" \\")
        specs.append(f'"*::: :->{_state(path)}" \\')
    else:
        specs.extend(_arg_spec(arg) for arg in node.args)
    lines = [f'{indent}_arguments "${{_arguments_options[@]}}" \\']
    lines.extend(indent + spec for spec in specs)
    lines.append(f"{indent}&& ret=0")

    if node.subcommands:
        context = "-".join(path)
        lines.extend([
            f"{indent}case $state in",
            f"{indent}({_state(path)})",
            f'{indent}    words=($line[1] "${{words[@]}}")',
            f"{indent}    (( CURRENT += 1 ))",
            f'{indent}    curcontext="${{curcontext%:*:*}}:{context}-command-$line[1]:"',
            f"{indent}    case $line[1] in",
        ])
        for sub in node.subcommands:
            pattern = "|".join((sub.name, *sub.aliases))
            lines.append(f"{indent}        ({pattern})")
            lines.extend(
                _arguments_block(cli, prog, path + (sub.name,), sub, indent + "        ")
            )
            lines.append(f"{indent}        ;;")
        lines.extend([
            f"{indent}    esac",
            f"{indent}    ;;",
            f"{indent}esac",
        ])
    return lines


def _commands_helpers(prog: str, cli: CliDescription) -> list[str]:
    lines: list[str] = []
    for path, node in cli.walk():
        if not node.subcommands:
            continue
        path = (prog,) + path[1:]
        func = _commands_func(prog, path)
        lines.extend([
            f"(( $+functions[{func}] )) ||",
            f"{func}() {{",
            "    local commands; commands=(",
        ])
        for sub in node.subcommands:
            description = _escape_describe(sub.help)
            for word in (sub.name, *sub.aliases):
                lines.append(f"'{word}:{description}' \\")
        lines.extend([
            "    )",
            f"    _describe -t commands '{' '.join(path)} commands' commands \"$@\"",
            "}",
            "",
        ])
    return lines


def render_zsh(cli: CliDescription, program_name: str) -> str:
    """Render the zsh completion script for *cli* invoked as *program_name*."""
    func = f"_{shell_ident(program_name)}"
    lines = [
        f"#compdef {program_name}",
        "",
        "# zsh completion for " + program_name,
        "# Generated by shedgen. Do not edit.",
        "",
        "autoload -U is-at-least",
        "",
        f"{func}() {{",
        "    typeset -A opt_args",
        "    typeset -a _arguments_options",
        "    local ret=1",
        "",
        "    if is-at-least 5.2; then",
        "        _arguments_options=(-s -S -C)",
        "    else",
        "        _arguments_options=(-s -C)",
        "    fi",
        "",
        '    local context curcontext="$curcontext" state line',
    ]
    lines.extend(_arguments_block(cli, program_name, (program_name,), cli, "    "))
    lines.extend([
        "}",
        "",
    ])
    lines.extend(_commands_helpers(program_name, cli))
    lines.extend([
        f'if [ "$funcstack[1]" = "{func}" ]; then',
        f'    {func} "$@"',
        "else",
        f"    compdef {func} {program_name}",
        "fi",
    ])
    return "\n".join(lines) + "\n"
