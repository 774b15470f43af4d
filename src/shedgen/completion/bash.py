"""Bash completion renderer.

The generated script defines a ``_<prog>`` function that replays the words
before the cursor to find which command the user is in, then offers that
command's flags and subcommands through ``compgen -W``. When the previous
word is a flag that takes a value, the value is completed instead (choice
list, files, directories or host names).
"""

from __future__ import annotations

from shedgen.completion.base import (
    command_flags,
    flag_words,
    shell_ident,
    subcommand_words,
)
from shedgen.models import ArgSpec, CliDescription, CommandSpec, FlagSpec, ValueHint

_PRELUDE = [
    "    local i cur prev opts cmd",
    "    COMPREPLY=()",
    '    cur="${COMP_WORDS[COMP_CWORD]}"',
    '    prev="${COMP_WORDS[COMP_CWORD-1]}"',
    '    cmd=""',
    '    opts=""',
    "",
    '    for i in "${COMP_WORDS[@]:0:COMP_CWORD}"',
    "    do",
    '        case "${cmd},${i}" in',
]


def _cmd_id(path: tuple[str, ...]) -> str:
    return "__".join(path)


def _value_reply(choices: tuple[str, ...], hint: ValueHint) -> str:
    if choices:
        return 'COMPREPLY=( $(compgen -W "' + " ".join(choices) + '" -- "${cur}") )'
    if hint is ValueHint.DIR:
        return 'COMPREPLY=( $(compgen -d -- "${cur}") )'
    if hint is ValueHint.HOSTNAME:
        return 'COMPREPLY=( $(compgen -A hostname -- "${cur}") )'
    return 'COMPREPLY=( $(compgen -f -- "${cur}") )'


def _positional_reply(node: CommandSpec) -> str:
    if node.subcommands or not node.args:
        return 'COMPREPLY=( $(compgen -W "${opts}" -- "${cur}") )'
    first: ArgSpec = node.args[0]
    return _value_reply(first.choices, first.value_hint)


def _flag_case(flag: FlagSpec) -> list[str]:
    pattern = "|".join(reversed(flag.forms))
    return [
        f"                {pattern})",
        "                    " + _value_reply(flag.choices, flag.value_hint),
        "                    return 0",
        "                    ;;",
    ]


def _command_case(cli: CliDescription, path: tuple[str, ...], node: CommandSpec) -> list[str]:
    flags = command_flags(cli, node)
    opts = " ".join(flag_words(flags) + subcommand_words(node))
    lines = [
        f"        {_cmd_id(path)})",
        f'            opts="{opts}"',
        "            if [[ ${cur} == -* || ${COMP_CWORD} -eq " + str(len(path)) + " ]] ; then",
        '                COMPREPLY=( $(compgen -W "${opts}" -- "${cur}") )',
        "                return 0",
        "            fi",
        '            case "${prev}" in',
    ]
    for flag in flags:
        if flag.takes_value:
            lines.extend(_flag_case(flag))
    lines.extend([
        "                *)",
        "                    COMPREPLY=()",
        "                    ;;",
        "            esac",
        "            " + _positional_reply(node),
        "            return 0",
        "            ;;",
    ])
    return lines


def render_bash(cli: CliDescription, program_name: str) -> str:
    """Render the bash completion script for *cli* invoked as *program_name*."""
    func = f"_{shell_ident(program_name)}"
    paths = [((program_name,) + path[1:], node) for path, node in cli.walk()]

    lines = [
        f"# bash completion for {program_name}",
        "# Generated by shedgen. Do not edit.",
        "",
        f"{func}() {{",
        *_PRELUDE,
        '            ",$1")',
        f'                cmd="{_cmd_id((program_name,))}"',
        "                ;;",
    ]
    for path, node in paths:
        for sub in node.subcommands:
            target = _cmd_id(path + (sub.name,))
            for word in (sub.name, *sub.aliases):
                lines.extend([
                    f"            {_cmd_id(path)},{word})",
                    f'                cmd="{target}"',
                    "                ;;",
                ])
    lines.extend([
        "            *)",
        "                ;;",
        "        esac",
        "    done",
        "",
        '    case "${cmd}" in',
    ])
    for path, node in paths:
        lines.extend(_command_case(cli, path, node))
    lines.extend([
        "    esac",
        "}",
        "",
        'if [[ "${BASH_VERSINFO[0]}" -eq 4 && "${BASH_VERSINFO[1]}" -ge 4 || "${BASH_VERSINFO[0]}" -gt 4 ]]; then',
        f"    complete -F {func} -o nosort -o bashdefault -o default {program_name}",
        "else",
        f"    complete -F {func} -o bashdefault -o default {program_name}",
        "fi",
    ])
    return "\n".join(lines) + "\n"
