"""Command-line parsing for ``why``: query targets, flags and subcommands."""

from __future__ import annotations

import argparse
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence, Union

from whyarch.target import TARGET_USAGE, QueryTarget, TargetError, parse_target

__all__ = [
    "CliError",
    "CompletionShell",
    "QueryRequest",
    "McpMode",
    "ShellMode",
    "LspMode",
    "HotspotsMode",
    "HealthMode",
    "PrTemplateMode",
    "CoverageGapMode",
    "GhostMode",
    "OnboardMode",
    "InstallHooksMode",
    "UninstallHooksMode",
    "CompletionsMode",
    "ManpageMode",
    "TimeBombsMode",
    "Mode",
    "build_parser",
    "parse_mode",
]

PROG = "why"

ABOUT = "Ask your codebase why a line, range, symbol, or repo hotspot exists"

EXAMPLES = """Examples:
  why src/auth.rs:42
  why src/auth.rs --lines 40:45 --no-llm
  why src/auth.rs:verify_token --json
  why src/auth.rs:verify_token --annotate
  why src/auth.rs:AuthService::login --team
  why src/auth.rs:verify_token --blame-chain
  why src/auth.rs:verify_token --evolution
  why hotspots --limit 10
  why health
  why health --ci 80
  why pr-template
  why coverage-gap --coverage lcov.info
  why ghost --limit 10
  why onboard --limit 10
  why time-bombs --age-days 180"""

_VALUE_OPTIONS = frozenset({"--lines", "--since"})


class CliError(ValueError):
    """Raised when the command line cannot be turned into a mode."""


class CompletionShell(Enum):
    """Shells that completion scripts can be generated for."""

    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"


@dataclass(frozen=True)
class QueryRequest:
    """A query about one target together with the flags that shape its output."""

    target: QueryTarget
    json: bool = False
    no_llm: bool = False
    no_cache: bool = False
    split: bool = False
    coupled: bool = False
    since_days: int | None = None
    team: bool = False
    blame_chain: bool = False
    evolution: bool = False
    annotate: bool = False


@dataclass(frozen=True)
class McpMode:
    """Run the MCP stdio server."""


@dataclass(frozen=True)
class ShellMode:
    """Start the interactive archaeology shell."""


@dataclass(frozen=True)
class LspMode:
    """Run the LSP hover server over stdio."""


@dataclass(frozen=True)
class HotspotsMode:
    limit: int = 20
    json: bool = False


@dataclass(frozen=True)
class HealthMode:
    json: bool = False
    ci: int | None = None


@dataclass(frozen=True)
class PrTemplateMode:
    json: bool = False


@dataclass(frozen=True)
class CoverageGapMode:
    coverage: str
    limit: int = 20
    max_coverage: float = 20.0
    json: bool = False


@dataclass(frozen=True)
class GhostMode:
    limit: int = 20
    json: bool = False


@dataclass(frozen=True)
class OnboardMode:
    limit: int = 10
    json: bool = False


@dataclass(frozen=True)
class InstallHooksMode:
    warn_only: bool = False


@dataclass(frozen=True)
class UninstallHooksMode:
    """Remove managed git hooks."""


@dataclass(frozen=True)
class CompletionsMode:
    shell: CompletionShell


@dataclass(frozen=True)
class ManpageMode:
    """Generate a man page."""


@dataclass(frozen=True)
class TimeBombsMode:
    age_days: int = 180
    json: bool = False


Mode = Union[
    QueryRequest,
    McpMode,
    ShellMode,
    LspMode,
    HotspotsMode,
    HealthMode,
    PrTemplateMode,
    CoverageGapMode,
    GhostMode,
    OnboardMode,
    InstallHooksMode,
    UninstallHooksMode,
    CompletionsMode,
    ManpageMode,
    TimeBombsMode,
]


class _Parser(argparse.ArgumentParser):
    """Argument parser that raises instead of exiting on bad input."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise CliError(message)


def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid digit found in {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"{text} must not be negative")
    return value


def _signed_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid digit found in {text!r}") from None


def _percent_threshold(text: str) -> int:
    value = _non_negative_int(text)
    if value > 100:
        raise argparse.ArgumentTypeError(f"{value} is not in 0..=100")
    return value


def _float(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid float literal {text!r}") from None


def _require_positive_limit(limit: int) -> None:
    if limit == 0:
        raise CliError("--limit must be greater than zero")


def _add_json(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json", action="store_true", help="Emit machine-readable output.")


def _add_limit(parser: argparse.ArgumentParser, default: int) -> None:
    parser.add_argument(
        "--limit",
        type=_non_negative_int,
        default=default,
        help="Maximum number of findings to return.",
    )


def _configure_nothing(parser: argparse.ArgumentParser) -> None:
    return None


def _configure_limit_json(default: int) -> Callable[[argparse.ArgumentParser], None]:
    def configure(parser: argparse.ArgumentParser) -> None:
        _add_limit(parser, default)
        _add_json(parser)

    return configure


def _configure_health(parser: argparse.ArgumentParser) -> None:
    _add_json(parser)
    parser.add_argument(
        "--ci",
        metavar="THRESHOLD",
        type=_percent_threshold,
        default=None,
        help="Exit with code 3 when the debt score exceeds this threshold.",
    )


def _configure_coverage_gap(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--coverage",
        metavar="PATH",
        required=True,
        help="Path to an LCOV file or llvm-cov JSON report.",
    )
    _add_limit(parser, 20)
    parser.add_argument(
        "--max-coverage",
        metavar="PERCENT",
        type=_float,
        default=20.0,
        help="Only include findings at or below this coverage percentage.",
    )
    _add_json(parser)


def _configure_install_hooks(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--warn-only",
        action="store_true",
        help="Warn instead of blocking when high-risk changes are detected.",
    )


def _configure_completions(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "shell",
        choices=[shell.value for shell in CompletionShell],
        help="Target shell to generate completions for.",
    )


def _configure_time_bombs(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--age-days",
        type=_signed_int,
        default=180,
        help="Age threshold in days for aged markers (default: 180).",
    )
    _add_json(parser)


def _build_limited(mode_type: type) -> Callable[[argparse.Namespace], Mode]:
    def build(ns: argparse.Namespace) -> Mode:
        _require_positive_limit(ns.limit)
        return mode_type(limit=ns.limit, json=ns.json)

    return build


def _build_coverage_gap(ns: argparse.Namespace) -> Mode:
    if not ns.coverage.strip():
        raise CliError("--coverage must not be empty")
    _require_positive_limit(ns.limit)
    if math.isnan(ns.max_coverage) or not 0.0 <= ns.max_coverage <= 100.0:
        raise CliError("--max-coverage must be between 0 and 100")
    return CoverageGapMode(
        coverage=ns.coverage,
        limit=ns.limit,
        max_coverage=ns.max_coverage,
        json=ns.json,
    )


@dataclass(frozen=True)
class _Subcommand:
    help: str
    accepts_json: bool
    configure: Callable[[argparse.ArgumentParser], None]
    build: Callable[[argparse.Namespace], Mode]


_SUBCOMMANDS: dict[str, _Subcommand] = {
    "mcp": _Subcommand("Run the MCP stdio server.", False, _configure_nothing, lambda ns: McpMode()),
    "shell": _Subcommand(
        "Start an interactive archaeology shell with completion support.",
        False,
        _configure_nothing,
        lambda ns: ShellMode(),
    ),
    "lsp": _Subcommand("Run the LSP hover server over stdio.", False, _configure_nothing, lambda ns: LspMode()),
    "hotspots": _Subcommand(
        "Rank repository hotspots using churn x heuristic risk scoring.",
        True,
        _configure_limit_json(20),
        _build_limited(HotspotsMode),
    ),
    "health": _Subcommand(
        "Aggregate repo-wide scanner signals into a health dashboard.",
        True,
        _configure_health,
        lambda ns: HealthMode(json=ns.json, ci=ns.ci),
    ),
    "pr-template": _Subcommand(
        "Generate a reviewer-friendly PR template from the staged diff.",
        True,
        _add_json,
        lambda ns: PrTemplateMode(json=ns.json),
    ),
    "coverage-gap": _Subcommand(
        "Cross-reference HIGH-risk functions against LCOV or llvm-cov JSON coverage.",
        True,
        _configure_coverage_gap,
        _build_coverage_gap,
    ),
    "ghost": _Subcommand(
        "Find high-risk functions that appear uncalled under static analysis.",
        True,
        _configure_limit_json(20),
        _build_limited(GhostMode),
    ),
    "onboard": _Subcommand(
        "Rank the symbols a new engineer should understand first.",
        True,
        _configure_limit_json(10),
        _build_limited(OnboardMode),
    ),
    "install-hooks": _Subcommand(
        "Install managed git hooks that warn on high-risk changes.",
        False,
        _configure_install_hooks,
        lambda ns: InstallHooksMode(warn_only=ns.warn_only),
    ),
    "uninstall-hooks": _Subcommand(
        "Remove managed git hooks and restore backups when present.",
        False,
        _configure_nothing,
        lambda ns: UninstallHooksMode(),
    ),
    "completions": _Subcommand(
        "Generate shell completion scripts for the why CLI.",
        False,
        _configure_completions,
        lambda ns: CompletionsMode(shell=CompletionShell(ns.shell)),
    ),
    "manpage": _Subcommand("Generate a man page for the why CLI.", False, _configure_nothing, lambda ns: ManpageMode()),
    "time-bombs": _Subcommand(
        "Find stale TODOs, HACK/TEMP markers, and expired remove-after dates.",
        True,
        _configure_time_bombs,
        lambda ns: TimeBombsMode(age_days=ns.age_days, json=ns.json),
    ),
}


def _subcommand_parser(name: str) -> argparse.ArgumentParser:
    spec = _SUBCOMMANDS[name]
    parser = _Parser(prog=f"{PROG} {name}", description=spec.help, allow_abbrev=False)
    spec.configure(parser)
    return parser


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level parser for target queries and their flags."""
    commands = "\n".join(f"  {name:<16} {spec.help}" for name, spec in _SUBCOMMANDS.items())
    parser = _Parser(
        prog=PROG,
        description=ABOUT,
        epilog=f"Commands:\n{commands}\n\n{EXAMPLES}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument(
        "target",
        nargs="?",
        default=None,
        help="Positional target: <file>:<line>, <file>:<symbol>, or <file> with --lines.",
    )
    parser.add_argument("--lines", metavar="START:END", default=None, help="Explicit 1-based line range in START:END form.")
    parser.add_argument("--json", action="store_true", help="Emit machine-readable output.")
    parser.add_argument("--no-llm", action="store_true", help="Skip LLM synthesis.")
    parser.add_argument("--no-cache", action="store_true", help="Bypass cached results and refresh the query output.")
    parser.add_argument("--split", action="store_true", help="Show archaeology-guided split suggestions for a symbol target.")
    parser.add_argument("--coupled", action="store_true", help="Show file-level co-change coupling for the queried target.")
    parser.add_argument(
        "--since",
        metavar="DAYS",
        type=_non_negative_int,
        default=None,
        help="Limit history to commits from the last N days.",
    )
    parser.add_argument("--team", action="store_true", help="Show ownership and bus-factor information for the queried target.")
    parser.add_argument(
        "--blame-chain",
        action="store_true",
        help="Walk past mechanical commits to show the likely true origin commit.",
    )
    parser.add_argument("--evolution", action="store_true", help="Show rename-aware target evolution history as a timeline.")
    parser.add_argument("--annotate", action="store_true", help="Write a short evidence-backed doc annotation above the target.")
    return parser


def _find_subcommand(argv: Sequence[str]) -> int | None:
    """Index of the subcommand token, if the first positional token names one."""
    skip_value = False
    for index, token in enumerate(argv):
        if skip_value:
            skip_value = False
            continue
        if token == "--":
            return None
        if token in _VALUE_OPTIONS:
            skip_value = True
            continue
        if token.startswith("-") and token != "-":
            continue
        return index if token in _SUBCOMMANDS else None
    return None


def _parse_strict(parser: argparse.ArgumentParser, args: Sequence[str]) -> argparse.Namespace:
    namespace, extras = parser.parse_known_args(list(args))
    if extras:
        raise CliError(f"unexpected argument '{extras[0]}' found")
    return namespace


def _has_query_flags(ns: argparse.Namespace, include_json: bool) -> bool:
    return (
        ns.target is not None
        or ns.lines is not None
        or (include_json and ns.json)
        or ns.no_llm
        or ns.no_cache
        or ns.split
        or ns.coupled
        or ns.since is not None
        or ns.team
        or ns.blame_chain
        or ns.evolution
        or ns.annotate
    )


def parse_mode(argv: Sequence[str] | None = None) -> Mode:
    """Turn command-line arguments (without the program name) into a mode."""
    import sys

    args = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    index = _find_subcommand(args)

    if index is not None:
        name = args[index]
        spec = _SUBCOMMANDS[name]
        top = _parse_strict(parser, args[:index])
        sub = _parse_strict(_subcommand_parser(name), args[index + 1 :])
        if _has_query_flags(top, include_json=not spec.accepts_json):
            raise CliError(f"the {name} subcommand does not accept query flags or a target")
        return spec.build(sub)

    ns = _parse_strict(parser, args)
    if ns.target is None:
        raise CliError(TARGET_USAGE)
    try:
        target = parse_target(ns.target, ns.lines)
    except TargetError as error:
        raise CliError(str(error)) from error

    return QueryRequest(
        target=target,
        json=ns.json,
        no_llm=ns.no_llm,
        no_cache=ns.no_cache,
        split=ns.split,
        coupled=ns.coupled,
        since_days=ns.since,
        team=ns.team,
        blame_chain=ns.blame_chain,
        evolution=ns.evolution,
        annotate=ns.annotate,
    )