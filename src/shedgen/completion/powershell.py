"""PowerShell completion renderer.

Registers a native argument completer. The script block joins the bare
words typed so far with ``;`` (``shed;store``) and switches on that key to
yield :code:`[CompletionResult]` objects for the command's flags and
subcommands. Aliases get their own switch arms so ``shed;st`` completes
like ``shed;status``.

When the word before the cursor is a flag that takes a value, a first
switch on ``<command>|<flag>`` answers instead: declared choices are
offered as values, and any other value flag returns nothing so PowerShell
falls back to its own path completion.
"""

from __future__ import annotations

from typing import Iterator

from shedgen.completion.base import command_flags, summary
from shedgen.models import CliDescription, CommandSpec

_HEADER = """\
using namespace System.Management.Automation
using namespace System.Management.Automation.Language
"""

_COMMAND_KEY = """\
    param($wordToComplete, $commandAst, $cursorPosition)

    $commandElements = $commandAst.CommandElements
    $command = @(
        '{program}'
        for ($i = 1; $i -lt $commandElements.Count; $i++) {{
            $element = $commandElements[$i]
            if ($element -isnot [StringConstantExpressionAst] -or
                $element.StringConstantType -ne [StringConstantType]::BareWord -or
                $element.Value.StartsWith('-') -or
                $element.Value -eq $wordToComplete) {{
                break
            }}
            $element.Value
        }}) -join ';'

    $last = $commandElements.Count - 1
    if ($wordToComplete -ne '') {{
        $last--
    }}
    $previous = ''
    if ($last -ge 1) {{
        $previous = $commandElements[$last].Extent.Text
    }}
"""

_VALUES_FOOTER = """\
    }
    if ($null -ne $values) {
        $values.Where{ $_ -like "$wordToComplete*" } | ForEach-Object {
            [CompletionResult]::new($_, $_, [CompletionResultType]::ParameterValue, $_)
        }
        return
    }
"""

_FOOTER = """\
    $completions.Where{ $_.CompletionText -like "$wordToComplete*" } |
        Sort-Object -Property ListItemText
}
"""


def _quote(text: str) -> str:
    """Single-quote *text* for PowerShell."""
    return "'" + text.replace("'", "''") + "'"


def _result(text: str, kind: str, tooltip: str) -> str:
    tip = summary(tooltip) or text
    return (
        "            [CompletionResult]::new("
        f"{_quote(text)}, {_quote(text)}, [CompletionResultType]::{kind}, {_quote(tip)})"
    )


def _spellings(
    node: CommandSpec, prefixes: list[tuple[str, ...]]
) -> Iterator[tuple[list[tuple[str, ...]], CommandSpec]]:
    """Yield every way of typing each command, together with the command."""
    yield prefixes, node
    for sub in node.subcommands:
        words = (sub.name, *sub.aliases)
        yield from _spellings(sub, [p + (w,) for p in prefixes for w in words])


def _arm_body(cli: CliDescription, node: CommandSpec) -> list[str]:
    lines: list[str] = []
    for flag in command_flags(cli, node):
        for form in flag.forms:
            lines.append(_result(form, "ParameterName", flag.help))
    for sub in node.subcommands:
        for word in (sub.name, *sub.aliases):
            lines.append(_result(word, "ParameterValue", sub.help))
    lines.append("            break")
    return lines


def _value_arms(cli: CliDescription, spelling: tuple[str, ...], node: CommandSpec) -> list[str]:
    lines: list[str] = []
    command = ";".join(spelling)
    for flag in command_flags(cli, node):
        if not flag.takes_value:
            continue
        values = "@(" + ", ".join(_quote(c) for c in flag.choices) + ")"
        for form in flag.forms:
            lines.append(f"        {_quote(command + '|' + form)} {{ $values = {values} }}")
    return lines


def render_powershell(cli: CliDescription, program_name: str) -> str:
    """Render the PowerShell completion script for *cli* invoked as *program_name*."""
    spellings = list(_spellings(cli, [(program_name,)]))
    lines = [
        "# PowerShell completion for " + program_name,
        "# Generated by shedgen. Do not edit.",
        "",
        _HEADER,
        f"Register-ArgumentCompleter -Native -CommandName {_quote(program_name)} -ScriptBlock {{",
        _COMMAND_KEY.format(program=program_name.replace("'", "''")),
        "    $values = $null",
        '    switch -CaseSensitive ("$command|$previous") {',
    ]
    for paths, node in spellings:
        for spelling in paths:
            lines.extend(_value_arms(cli, spelling, node))
    lines.append(_VALUES_FOOTER)
    lines.append("    $completions = @(switch ($command) {")
    for paths, node in spellings:
        body = _arm_body(cli, node)
        for spelling in paths:
            lines.append(f"        {_quote(';'.join(spelling))} {{")
            lines.extend(body)
            lines.append("        }")
    lines.extend([
        "    })",
        "",
        _FOOTER,
    ])
    return "\n".join(lines)
