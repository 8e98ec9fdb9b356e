"""
CompletionsCommand — Shell completion scripts

    shnote completions bash > ~/.local/share/bash-completion/completions/shnote
    shnote completions zsh  > "${fpath[1]}/_shnote"
    shnote completions fish > ~/.config/fish/completions/shnote.fish

Scripts are generated from the registered argparse subcommands, so a new
command module shows up in completions without touching this file.
"""

import argparse
from dataclasses import dataclass, field
from typing import Dict, List

from ..commands.base import BaseCommand

SHELLS = ('bash', 'zsh', 'fish', 'powershell', 'elvish')

# (option, help, takes value)
GLOBAL_OPTIONS = [
    ('--what', 'What the command does (before the subcommand)', True),
    ('--why', 'Why it is being run (before the subcommand)', True),
    ('--lang', 'Message language', True),
    ('--help', 'Show help', False),
    ('--version', 'Show version', False),
]
LANGS = ('en', 'zh')


@dataclass
class CommandSpec:
    name: str
    help: str = ""
    options: List[str] = field(default_factory=list)
    choices: List[str] = field(default_factory=list)


def describe_commands(parsers: Dict[str, argparse.ArgumentParser],
                      help_text: Dict[str, str]) -> List[CommandSpec]:
    """Flatten each subparser into its option strings and first-level choices."""
    specs = []
    for name, parser in parsers.items():
        spec = CommandSpec(name, help_text.get(name, ""))
        for action in parser._actions:
            if isinstance(action, argparse._SubParsersAction):
                spec.choices.extend(action.choices)
            elif action.option_strings:
                spec.options.extend(action.option_strings)
            elif action.choices:
                spec.choices.extend(str(c) for c in action.choices)
        specs.append(spec)
    return specs


def _words(spec: CommandSpec) -> str:
    return " ".join(spec.choices + spec.options)


def render_bash(specs: List[CommandSpec]) -> str:
    commands = " ".join(s.name for s in specs)
    globals_ = " ".join(opt for opt, _, _ in GLOBAL_OPTIONS)
    cases = "\n".join(f"        {s.name}) words=\"{_words(s)}\" ;;" for s in specs)
    return f"""_shnote() {{
    local cur prev i cmd="" words=""
    cur="${{COMP_WORDS[COMP_CWORD]}}"
    prev="${{COMP_WORDS[COMP_CWORD-1]}}"

    if [[ "$prev" == "--lang" ]]; then
        COMPREPLY=( $(compgen -W "{' '.join(LANGS)}" -- "$cur") )
        return
    fi
    if [[ "$prev" == "--what" || "$prev" == "--why" ]]; then
        return
    fi

    for ((i = 1; i < COMP_CWORD; i++)); do
        case "${{COMP_WORDS[i]}}" in
            --what|--why|--lang) ((i++)) ;;
            -*) ;;
            *) cmd="${{COMP_WORDS[i]}}"; break ;;
        esac
    done

    case "$cmd" in
        "") words="{globals_} {commands}" ;;
{cases}
    esac
    COMPREPLY=( $(compgen -W "$words" -- "$cur") )
}}
complete -o default -F _shnote shnote
"""


def render_zsh(specs: List[CommandSpec]) -> str:
    described = "\n".join(f"    '{s.name}:{s.help.replace(chr(39), '')}'" for s in specs)
    cases = "\n".join(f"        {s.name}) compadd -- {_words(s)} ;;" for s in specs if _words(s))
    return f"""#compdef shnote

_shnote() {{
  local -a commands
  commands=(
{described}
  )
  local state

  _arguments -C \\
    '--what[What the command does]:text:' \\
    '--why[Why it is being run]:text:' \\
    '--lang[Message language]:lang:({' '.join(LANGS)})' \\
    '(-h --help)'{{-h,--help}}'[Show help]' \\
    '(-V --version)'{{-V,--version}}'[Show version]' \\
    '1:command:->command' \\
    '*::arg:->args'

  case $state in
    command)
      _describe 'command' commands
      ;;
    args)
      case $words[1] in
{cases}
        *) _files ;;
      esac
      ;;
  esac
}}

_shnote "$@"
"""


def _fish_option(opt: str) -> str:
    return f"-l {opt[2:]}" if opt.startswith("--") else f"-s {opt[1:]}"


def render_fish(specs: List[CommandSpec]) -> str:
    lines = []
    for opt, help_text, takes_value in GLOBAL_OPTIONS:
        extra = f" -x -a '{' '.join(LANGS)}'" if opt == '--lang' else (" -r" if takes_value else "")
        lines.append(f"complete -c shnote -n '__fish_use_subcommand' {_fish_option(opt)}{extra} -d '{help_text}'")
    for s in specs:
        lines.append(f"complete -c shnote -f -n '__fish_use_subcommand' -a {s.name} -d '{s.help.replace(chr(39), '')}'")
        if s.choices:
            lines.append(f"complete -c shnote -f -n '__fish_seen_subcommand_from {s.name}' -a '{' '.join(s.choices)}'")
        for opt in s.options:
            lines.append(f"complete -c shnote -n '__fish_seen_subcommand_from {s.name}' {_fish_option(opt)}")
    return "\n".join(lines) + "\n"


def _ps_list(words: List[str]) -> str:
    return "@(" + ", ".join(f"'{w}'" for w in words) + ")"


def render_powershell(specs: List[CommandSpec]) -> str:
    table = "\n".join(f"        '{s.name}' = {_ps_list(s.choices + s.options)}" for s in specs)
    globals_ = _ps_list([opt for opt, _, _ in GLOBAL_OPTIONS])
    return f"""Register-ArgumentCompleter -Native -CommandName shnote -ScriptBlock {{
    param($wordToComplete, $commandAst, $cursorPosition)

    $commands = @{{
{table}
    }}
    $globals = {globals_}

    $elements = @($commandAst.CommandElements | Select-Object -Skip 1 | ForEach-Object {{ $_.ToString() }})
    $cmd = $null
    $skip = $false
    foreach ($e in $elements) {{
        if ($skip) {{ $skip = $false; continue }}
        if ($e -in @('--what', '--why', '--lang')) {{ $skip = $true; continue }}
        if ($e.StartsWith('-') -or $e -eq $wordToComplete) {{ continue }}
        $cmd = $e
        break
    }}

    if (-not $cmd) {{
        $candidates = $globals + @($commands.Keys)
    }} elseif ($commands.ContainsKey($cmd)) {{
        $candidates = $commands[$cmd]
    }} else {{
        $candidates = @()
    }}
    $candidates | Where-Object {{ $_ -like "$wordToComplete*" }} | ForEach-Object {{
        [System.Management.Automation.CompletionResult]::new($_, $_, 'ParameterValue', $_)
    }}
}}
"""


def render_elvish(specs: List[CommandSpec]) -> str:
    table = " ".join(f"&{s.name}=[{' '.join(s.choices + s.options)}]" for s in specs)
    globals_ = " ".join(opt for opt, _, _ in GLOBAL_OPTIONS)
    return f"""use str

set edit:completion:arg-completer[shnote] = {{|@words|
    var commands = [{table}]
    var cmd = ''
    var skip = $false
    for i [(range 1 (- (count $words) 1))] {{
        var w = $words[$i]
        if $skip {{
            set skip = $false
        }} elif (has-value [--what --why --lang] $w) {{
            set skip = $true
        }} elif (not (str:has-prefix $w -)) {{
            set cmd = $w
            break
        }}
    }}
    if (eq $cmd '') {{
        all [{globals_}]
        keys $commands
    }} elif (has-key $commands $cmd) {{
        all $commands[$cmd]
    }}
}}
"""


RENDERERS = {
    'bash': render_bash,
    'zsh': render_zsh,
    'fish': render_fish,
    'powershell': render_powershell,
    'elvish': render_elvish,
}


class CompletionsCommand(BaseCommand):
    """Command for printing completion scripts."""

    def completions(self, shell: str) -> int:
        from . import get_subcommand_help, get_subcommand_parsers

        specs = describe_commands(get_subcommand_parsers(), get_subcommand_help())
        self._cli.stdout.write(RENDERERS[shell](specs))
        self._cli.stdout.flush()
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'completions'


def register_parser(subparsers):
    """Register completions command parser."""
    p = subparsers.add_parser('completions', help='Print a shell completion script')
    p.add_argument('shell', choices=SHELLS, help='Target shell')
    return p


def handle(cli, args):
    """Handle completions command dispatch."""
    return cli._completions_cmd.completions(args.shell)
