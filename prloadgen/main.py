"""prloadgen entry point.

Creates and merges pull requests in a loop to load-test PR workflows.
Usage: prloadgen [-n|--number NUM] [-w|--wait SECONDS] [-c|--config PATH] [--seed INT] [-h|--help]
"""

import argparse
import sys
from pathlib import Path
from typing import NoReturn

import yaml
from pydantic import ValidationError

from prloadgen.adapters import GitCLI, HostError, create_host
from prloadgen.config import DEFAULT_CONFIG_PATH, DEFAULT_NUMBER, DEFAULT_WAIT, load_config
from prloadgen.logging import PRLoadLogging
from prloadgen.services.generator_loop import PRGeneratorLoop, RunAborted
from prloadgen.services.git import GitRunnerError
from prloadgen.services.preflight import PreconditionError
from prloadgen.services.random_source import RandomSource

HELP_FLAGS = ("-h", "--help")


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits 1 (not 2) with usage on stderr."""

    def error(self, message: str) -> NoReturn:
        print(f"Error: {message}", file=sys.stderr)
        self.print_help(sys.stderr)
        sys.exit(1)


def _optional_int(value: str) -> int | None:
    """Integer flag value; an empty string means "use the default"."""
    if not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="prloadgen",
        description="Create multiple PRs with mixed changes (docs/code/config) and merge each back",
        allow_abbrev=False,
        add_help=False,
    )
    # Plain flag so parse_args decides between help and an unknown option
    parser.add_argument(*HELP_FLAGS, action="store_true", help="Show this help message and exit")
    # nargs="?" with const=None: a missing value, an empty one, or one that
    # looks like a flag falls back to the configured default
    parser.add_argument(
        "-n",
        "--number",
        type=_optional_int,
        nargs="?",
        const=None,
        default=None,
        metavar="NUM",
        help=f"Number of PRs to create (default: {DEFAULT_NUMBER})",
    )
    parser.add_argument(
        "-w",
        "--wait",
        type=_optional_int,
        nargs="?",
        const=None,
        default=None,
        metavar="SECONDS",
        help=f"Seconds to wait between PRs (default: {DEFAULT_WAIT})",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Path to YAML config file (optional)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed random picks for a reproducible run",
    )
    return parser


def _first_index(argv: list[str], tokens: tuple[str, ...]) -> int:
    return next((i for i, arg in enumerate(argv) if arg in tokens), len(argv))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI.

    Options are honored in command line order: an unknown option before
    -h/--help prints usage to stderr and exits 1, a help flag before any
    unknown option prints usage to stdout and exits 0.
    """
    argv = list(argv) if argv is not None else sys.argv[1:]
    parser = build_parser()
    parsed, unknown = parser.parse_known_args(argv)
    if unknown and (not parsed.help or _first_index(argv, (unknown[0],)) < _first_index(argv, HELP_FLAGS)):
        print(f"Unknown option: {unknown[0]}", file=sys.stderr)
        parser.print_help(sys.stderr)
        sys.exit(1)
    if parsed.help:
        parser.print_help()
        sys.exit(0)
    return parsed


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse args, load config, run the PR loop."""
    try:
        args = parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    try:
        config = load_config(
            args.config,
            run_overrides={"number": args.number, "wait_seconds": args.wait, "seed": args.seed},
        )
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1
    except (yaml.YAMLError, OSError) as e:
        print(f"Error: cannot read configuration {args.config}: {e}", file=sys.stderr)
        return 1

    logs = PRLoadLogging(config.logging)
    logs.setup()
    log = logs.get_logger("prloadgen.cli")

    repo_dir = Path.cwd()
    try:
        host = create_host(config, repo_dir)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: cannot read GitHub token: {e}", file=sys.stderr)
        return 1

    loop = PRGeneratorLoop(
        vcs=GitCLI(repo_dir, remote=config.run.remote),
        host=host,
        run=config.run,
        artifacts=config.artifacts,
        rng=RandomSource(seed=config.run.seed),
    )
    try:
        loop.run()
    except PreconditionError as e:
        print(str(e), file=sys.stderr)
        return 1
    except RunAborted as e:
        log.error(
            "Run aborted after %d of %d PR(s): %s",
            len(e.summary.completed),
            e.summary.requested,
            e.summary.error,
        )
        return 1
    except (GitRunnerError, HostError) as e:
        log.error("Fatal error: %s", e)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
