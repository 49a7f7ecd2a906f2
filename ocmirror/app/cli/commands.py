"""
Command execution with pre-run and post-run hooks.

A Command parses its flags, runs its pre-run hook, runs its body and always
runs its post-run hook afterwards, whether the body returned, raised, or was
interrupted.
"""

import argparse
from collections.abc import Callable, Sequence
from typing import Any, Protocol

from ...log import LoggerFactory
from ..args import DefaultsHelpFormatter
from ..errors import CommandError

Hook = Callable[[list[str]], None]


class FlagBinder(Protocol):
    def bind_flags(
        self, parser: argparse.ArgumentParser, defaults: dict[str, Any] | None = None
    ) -> None: ...

    def complete(self, args: argparse.Namespace) -> None: ...


class Command:
    """
    A runnable command.

    Args:
        name: Program name shown in usage
        run: Body; receives positional args, returns an exit code or None
        pre_run: Hook called before ``run`` with the positional args
        post_run: Hook called after ``run`` on every exit path
        flags: Option objects that add flags to the parser and read them back
        description: Help text
        defaults: Flag defaults handed to each binder
    """

    def __init__(
        self,
        name: str,
        run: Callable[[list[str]], int | None],
        pre_run: Hook | None = None,
        post_run: Hook | None = None,
        flags: Sequence[FlagBinder] = (),
        description: str | None = None,
        defaults: dict[str, Any] | None = None,
    ) -> None:
        self.name = name
        self.run = run
        self.pre_run = pre_run
        self.post_run = post_run
        self.flags = list(flags)
        self.description = description
        self.defaults = defaults or {}

    def create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog=self.name,
            description=self.description,
            formatter_class=DefaultsHelpFormatter,
        )
        for binder in self.flags:
            binder.bind_flags(parser, self.defaults)
        parser.add_argument("args", nargs="*", help=argparse.SUPPRESS)
        return parser

    def parse(self, argv: Sequence[str] | None = None) -> list[str]:
        """Parse ``argv`` and copy values onto the flag binders."""
        ns = self.create_parser().parse_args(argv)
        for binder in self.flags:
            binder.complete(ns)
        return list(ns.args)

    def execute(self, argv: Sequence[str] | None = None) -> int:
        """
        Parse flags and run the command.

        Returns:
            The body's exit code (0 if it returned None), 1 if it raised,
            130 if it was interrupted
        """
        args = self.parse(argv)
        if self.pre_run is not None:
            self.pre_run(args)
        try:
            return self._run(args)
        finally:
            if self.post_run is not None:
                self.post_run(args)

    def _run(self, args: list[str]) -> int:
        lg = LoggerFactory.primary()
        try:
            code = self.run(args)
        except KeyboardInterrupt:
            lg.error("interrupted")
            return 130
        except CommandError as e:
            lg.error(str(e))
            return 1
        except Exception as e:
            lg.error("command failed", extra={"command": self.name, "exception": e})
            return 1
        return 0 if code is None else code
