"""
Option aggregates bound to command line flags.

RootOptions carries what every command shares (streams, workspace dir,
verbosity) and the logging pre-run/post-run hooks. MirrorOptions adds the
mirror flags and the entry point for signal-cancellable contexts.
"""

import argparse
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..config import DEFAULTS
from .core.cancel import cancel_context
from .core.context import CancelFunc, Context
from .core.lifecycle import LoggingLifecycle
from .streams import IOStreams


@dataclass
class RootOptions:
    """
    Options shared by every command.

    Attributes:
        streams: Command I/O; rebound to tee into the log file by pre-run
        dir: Workspace directory (hidden flag)
        log_level: Verbosity, 0-9
    """

    streams: IOStreams = field(default_factory=IOStreams)
    dir: str = str(DEFAULTS["dir"])
    log_level: int = 0
    _logfile_cleanup: Callable[[], None] | None = field(default=None, repr=False)

    def bind_flags(
        self, parser: argparse.ArgumentParser, defaults: dict[str, Any] | None = None
    ) -> None:
        """Add ``--dir`` (hidden) and ``-v/--verbose`` to ``parser``."""
        defaults = defaults or {}
        parser.add_argument(
            "-d",
            "--dir",
            default=defaults.get("dir", self.dir),
            help=argparse.SUPPRESS,
        )
        parser.add_argument(
            "-v",
            "--verbose",
            dest="log_level",
            type=int,
            default=defaults.get("verbose", self.log_level),
            help="Number for the log level verbosity (valid 1-9, default is 0)",
        )

    def complete(self, args: argparse.Namespace) -> None:
        """Copy parsed flag values onto the options."""
        self.dir = args.dir
        self.log_level = args.log_level

    def logfile_pre_run(self, args: Any = None) -> None:
        """Set up logging; positional ``args`` are ignored. Failures are fatal."""
        lifecycle = LoggingLifecycle()
        lifecycle.setup(self)
        self._logfile_cleanup = lifecycle.teardown

    def logfile_post_run(self, args: Any = None) -> None:
        """Tear down logging; safe to call twice or without pre-run."""
        cleanup, self._logfile_cleanup = self._logfile_cleanup, None
        if cleanup is not None:
            cleanup()


# (attribute, flag, help)
_BOOL_FLAGS: tuple[tuple[str, str, str], ...] = (
    (
        "skip_image_pin",
        "--skip-image-pin",
        "Do not replace image tags with digest pins in operator catalogs",
    ),
    ("manifests_only", "--manifests-only", "Generate manifests and do not mirror"),
    ("dry_run", "--dry-run", "Print actions without mirroring images"),
    (
        "source_skip_tls",
        "--source-skip-tls",
        "Disable TLS validation for source registry",
    ),
    (
        "dest_skip_tls",
        "--dest-skip-tls",
        "Disable TLS validation for destination registry",
    ),
    ("source_plain_http", "--source-use-http", "Use plain HTTP for source registry"),
    ("dest_plain_http", "--dest-use-http", "Use plain HTTP for destination registry"),
    (
        "skip_verification",
        "--skip-verification",
        "Skip verifying the integrity of the retrieved content. "
        "This is not recommended, but may be necessary when importing images "
        "from older image registries. Only bypass verification if the registry "
        "is known to be trustworthy.",
    ),
    ("skip_cleanup", "--skip-cleanup", "Skip removal of artifact directories"),
    (
        "ignore_history",
        "--ignore-history",
        "Ignore past mirrors when downloading images and packing layers",
    ),
    (
        "skip_metadata_check",
        "--skip-metadata-check",
        "Skip metadata when publishing an imageset. "
        "This is only recommended when the imageset was created --ignore-history",
    ),
    (
        "continue_on_error",
        "--continue-on-error",
        "If an error occurs, keep going and attempt to complete operations "
        "if possible",
    ),
    (
        "skip_missing",
        "--skip-missing",
        "If an input image is not found, skip them. 404/NotFound errors "
        "encountered while pulling images explicitly specified in the config "
        "will not be skipped",
    ),
    (
        "use_oci_feature",
        "--use-oci-feature",
        "Use the new oci feature for oc mirror (oci formatted copy)",
    ),
    (
        "oci_insecure_signature_policy",
        "--oci-insecure-signature-policy",
        "If set, OCI catalog push will not try to push signatures",
    ),
)


@dataclass
class MirrorOptions:
    """Options for the mirror command; shares a RootOptions with its parent."""

    root: RootOptions = field(default_factory=RootOptions)
    config_path: str = ""
    from_: str = ""
    oci_registries_config: str = ""
    max_per_registry: int = int(DEFAULTS["max_per_registry"])
    skip_image_pin: bool = False
    manifests_only: bool = False
    dry_run: bool = False
    source_skip_tls: bool = False
    dest_skip_tls: bool = False
    source_plain_http: bool = False
    dest_plain_http: bool = False
    skip_verification: bool = False
    skip_cleanup: bool = False
    ignore_history: bool = False
    skip_metadata_check: bool = False
    continue_on_error: bool = False
    skip_missing: bool = False
    use_oci_feature: bool = False
    oci_insecure_signature_policy: bool = False

    def bind_flags(
        self, parser: argparse.ArgumentParser, defaults: dict[str, Any] | None = None
    ) -> None:
        """Add the mirror flags to ``parser``."""
        defaults = defaults or {}
        parser.add_argument(
            "-c",
            "--config",
            dest="config_path",
            default=self.config_path,
            help="Path to imageset configuration file",
        )
        parser.add_argument(
            "--from",
            dest="from_",
            default=self.from_,
            help="Path to an input file (e.g. archived imageset)",
        )
        parser.add_argument(
            "--max-per-registry",
            type=int,
            default=defaults.get("max_per_registry", self.max_per_registry),
            help="Number of concurrent requests allowed per registry",
        )
        parser.add_argument(
            "--oci-registries-config",
            default=self.oci_registries_config,
            help="Registries config file location "
            "(used only with --use-oci-feature flag)",
        )
        for attr, flag, help_text in _BOOL_FLAGS:
            parser.add_argument(
                flag, dest=attr, action="store_true", default=False, help=help_text
            )

    def complete(self, args: argparse.Namespace) -> None:
        """Copy parsed flag values onto the options."""
        self.config_path = args.config_path
        self.from_ = args.from_
        self.max_per_registry = args.max_per_registry
        self.oci_registries_config = args.oci_registries_config
        for attr, _, _ in _BOOL_FLAGS:
            setattr(self, attr, getattr(args, attr))

    def cancel_context(self, parent: Context) -> tuple[Context, CancelFunc]:
        """
        Return a child of ``parent`` that SIGINT/SIGTERM also cancels.

        The signal listener is registered on first use, once per process.
        """
        return cancel_context(parent)
