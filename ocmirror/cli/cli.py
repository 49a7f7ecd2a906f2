#!/usr/bin/env python3
"""
oc-mirror command line entry point.

Usage:
    oc-mirror --config imageset.yaml docker://registry.example.com -v 2
    oc-mirror --help

Flag defaults can be supplied through a YAML file named by
``OC_MIRROR_DEFAULTS_FILE`` and through ``OC_MIRROR_<KEY>`` variables.
"""

import os
import sys
from collections.abc import Callable, Sequence

from ocmirror.app.cli import Command
from ocmirror.app.core.context import Context, background
from ocmirror.app.errors import ConfigurationError
from ocmirror.app.options import MirrorOptions, RootOptions
from ocmirror.config import load_defaults
from ocmirror.log import LoggerFactory, fatal

Operation = Callable[[Context, MirrorOptions, list[str]], int | None]

DEFAULTS_FILE_ENV = "OC_MIRROR_DEFAULTS_FILE"


def describe(ctx: Context, options: MirrorOptions, args: list[str]) -> int:
    """Report the resolved invocation without mirroring anything."""
    out = options.root.streams.out
    out.write(
        f"workspace={options.root.dir} destinations={','.join(args) or '-'} "
        f"max_per_registry={options.max_per_registry} dry_run={options.dry_run}\n"
    )
    LoggerFactory.secondary().debug(
        "resolved options", extra={"config": options.config_path or "-"}
    )
    return 0


def new_mirror_command(
    operation: Operation = describe,
    options: MirrorOptions | None = None,
    defaults: dict | None = None,
) -> Command:
    """
    Build the mirror command.

    ``operation`` runs inside a context cancelled by SIGINT/SIGTERM. The exit
    code is 130 when a signal cancelled it.
    """
    opts = options or MirrorOptions(root=RootOptions())

    def run(args: list[str]) -> int | None:
        ctx, cancel = opts.cancel_context(background())
        try:
            code = operation(ctx, opts, args)
            interrupted = ctx.is_done()
        finally:
            cancel()
        if interrupted:
            LoggerFactory.primary().error("operation cancelled")
            return 130
        return code

    return Command(
        "oc-mirror",
        run,
        pre_run=opts.root.logfile_pre_run,
        post_run=opts.root.logfile_post_run,
        flags=[opts.root, opts],
        description="Mirror release and operator content to a registry",
        defaults=defaults,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the oc-mirror CLI."""
    try:
        defaults = load_defaults(os.environ.get(DEFAULTS_FILE_ENV))
    except (ConfigurationError, OSError) as e:
        fatal(e)
    return new_mirror_command(defaults=defaults).execute(argv)


if __name__ == "__main__":
    sys.exit(main())
