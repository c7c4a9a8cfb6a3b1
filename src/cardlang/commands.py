## cardlang — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from dataclasses import dataclass

import lark

from .errors import CardCommandError


GRAMMAR = r"""?line: build | show | begin | move | leave | help
build: "build" ARG
show: "show" ARG+
begin: "start"
move: "move" ARG
leave: "exit" | "quit"
help: "help"

ARG: /\S+/

%import common.WS_INLINE
%ignore WS_INLINE
"""

HELP = """Commands:
  build <file>    load a card game from a source file
  start           set up the game and run its `setup` definition
  move <n>        run `player_move` for player n
  show <key>      deck, name, players, game, current_player, player <n> [hand], or a stack name
  exit            leave the shell"""

_PARSER = None


@dataclass(frozen=True)
class Command:
    action: str                   # build, show, start, move, exit, help
    argument: str | int | None = None


def _get_parser() -> lark.Lark:
    global _PARSER
    if _PARSER is None:
        _PARSER = lark.Lark(GRAMMAR, start='line', parser="lalr", lexer="contextual")
    return _PARSER


def parse_command(text: str) -> Command:
    try:
        tree = _get_parser().parse(text.strip())
    except lark.exceptions.UnexpectedInput as exc:
        raise CardCommandError(f"Unrecognised command `{text.strip()}`.", command=text,
                               column=getattr(exc, 'column', None)) from None

    args = [str(tok) for tok in tree.children if isinstance(tok, lark.Token)]
    match tree.data:
        case 'build': return Command('build', args[0])
        case 'show': return Command('show', ' '.join(args))
        case 'begin': return Command('start')
        case 'move':
            if not args[0].isdigit():
                raise CardCommandError(f"Player number expected after `move`, got `{args[0]}`.", command=text)
            return Command('move', int(args[0]))
        case 'leave': return Command('exit')
        case 'help': return Command('help')
    raise NotImplementedError(f"Unhandled command `{tree.data}`.")
