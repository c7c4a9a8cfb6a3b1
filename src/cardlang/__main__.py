## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# cardlang — An interpreter for a small language describing card games.
#

import os
import sys
import time
from pathlib import Path
from dataclasses import dataclass

import click

from .errors import CardError, CardLexError, CardParseError, CardIncompleteParse, CardCommandError
from .parser import format_parse_error_context
from .formatting import write_without_ansi
from .commands import Command, parse_command, HELP
from .game import Game, load_game


@dataclass(frozen=True)
class ShellConfig:
    verbose: int
    plain: bool
    ignore: bool
    stats: bool
    seed: int | None


class CardShell:
    def __init__(self, config: ShellConfig):
        self.verbose = config.verbose or (2 if os.environ.get('CARDLANG_DEBUG') else 0)
        self.ignore = config.ignore
        self.seed = config.seed
        self.plain = config.plain

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.game: Game | None = None
        self.total_stats = {'steps': 0, 'start': time.time()} if config.stats else None
        self.failure = False
        self.executed_commands = 0

    def _maybe_fatal_error(self, message: str, detail: str, exc_type: str = None, context: str = '', is_repl: bool = False) -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        self.failure = True
        if not is_repl and not self.ignore: sys.exit(1)

    def _handle_exception(self, exc: Exception, filename: str, source: str, is_repl: bool = False) -> None:
        if isinstance(exc, (CardLexError, CardParseError)):
            token = str(exc.token) if isinstance(exc, CardParseError) and exc.token is not None else None
            context = format_parse_error_context(filename, exc.line, source, token)
            context += f"\n\033[90m{str(exc)}\033[0m\n"
            banner = "INCOMPLETE SOURCE." if isinstance(exc, CardIncompleteParse) else "SYNTAX ERROR."
            self._maybe_fatal_error(banner, f"Parsing `\033[97m{filename}\033[0m` caused a problem!", type(exc).__name__, context, is_repl)
        elif isinstance(exc, CardCommandError):
            self._maybe_fatal_error("COMMAND ERROR.", str(exc), type(exc).__name__, '', is_repl)
        elif isinstance(exc, OSError):
            self._maybe_fatal_error("LOAD ERROR.", f"Unable to read `\033[97m{filename}\033[0m`.", type(exc).__name__, '', is_repl)
        else:
            raise exc

    # Commands ────────────────────────────────────────────────────────────────────────────────
    def build(self, filename: str, is_repl: bool = False) -> bool:
        source = ''
        try:
            source = Path(filename).read_text(encoding='utf-8')
            game = load_game(source, seed=self.seed, verbosity=self.verbose, stats=self.total_stats)
        except (CardError, OSError) as exc:
            self._handle_exception(exc, filename, source, is_repl=is_repl)
            return False
        self.game = game
        print("Game loaded")
        return True

    def execute(self, command: Command, is_repl: bool = False) -> bool:
        """Run one parsed command; returns False when the shell should stop."""
        self.executed_commands += 1
        match command:
            case Command(action='exit'):
                return False
            case Command(action='help'):
                print(HELP)
            case Command(action='build', argument=filename):
                self.build(filename, is_repl=is_repl)
            case _ if self.game is None:
                print("no game loaded")
            case Command(action='start'):
                self.game.start()
            case Command(action='move', argument=player):
                self.game.player_move(player)
            case Command(action='show', argument=key):
                print(self.game.show(key))
        return True

    def execute_line(self, line: str, is_repl: bool = False) -> bool:
        try:
            command = parse_command(line)
        except CardCommandError as exc:
            self._handle_exception(exc, '<INPUT>', line, is_repl=is_repl)
            return True
        return self.execute(command, is_repl=is_repl)

    def repl(self) -> None:
        if sys.platform != "win32": import readline

        print('cardlang - Card game interpreter; type `help` for commands, Ctrl+C to exit.')
        while True:
            try:
                line = input("\033[36m> \033[0m")
                if len(line.strip()) == 0: continue
                if not self.execute_line(line, is_repl=True): break
            except (KeyboardInterrupt, EOFError):
                print(""); break

    def finalize(self) -> int:
        if self.total_stats and self.executed_commands > 0:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m")
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m")
        return 1 if self.failure else 0


@click.group(invoke_without_command=True)
@click.option('--verbose', '-v', default=0, count=True, help='Trace callbacks (-v) and every statement (-vv).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.option('--ignore', '-i', is_flag=True, help='Ignore errors and continue executing commands.')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of steps).')
@click.option('--seed', type=int, default=None, envvar='CARDLANG_SEED', help='Seed for the shuffle random generator.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, plain: bool, ignore: bool, stats: bool, seed: int | None) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = ShellConfig(verbose=verbose, plain=plain, ignore=ignore, stats=stats, seed=seed)

    if ctx.invoked_subcommand is not None:
        return

    shell = CardShell(ctx.obj['config'])
    shell.repl()
    ctx.exit(shell.finalize())


@cli.command('run')
@click.argument('script', type=click.Path(dir_okay=False))
@click.option('--command', '-c', 'commands', multiple=True, help='Shell command to run after loading, e.g. "show deck".')
@click.option('--repl', '-r', is_flag=True, help='Continue in the interactive shell afterwards.')
@click.pass_context
def run_script(ctx: click.Context, script: str, commands: tuple[str, ...], repl: bool) -> None:
    shell = CardShell(ctx.obj['config'])
    if shell.build(script):
        for line in commands:
            if not shell.execute_line(line): break
    if repl: shell.repl()
    ctx.exit(shell.finalize())


@cli.command('repl')
@click.pass_context
def run_repl(ctx: click.Context) -> None:
    shell = CardShell(ctx.obj['config'])
    shell.repl()
    ctx.exit(shell.finalize())


def main(argv: list[str] | None = None) -> None:
    cli.main(args=list(sys.argv[1:] if argv is None else argv), prog_name='cardlang')


if __name__ == "__main__":
    main()
