from pathlib import Path

import pytest

from whyarch.cli import (
    CliError,
    CompletionShell,
    CompletionsMode,
    CoverageGapMode,
    GhostMode,
    HealthMode,
    HotspotsMode,
    InstallHooksMode,
    LspMode,
    ManpageMode,
    McpMode,
    OnboardMode,
    PrTemplateMode,
    QueryRequest,
    ShellMode,
    TimeBombsMode,
    UninstallHooksMode,
    build_parser,
    parse_mode,
)
from whyarch.target import QueryKind, QueryTarget


def test_parses_line_request():
    assert parse_mode(["src/lib.rs:42"]) == QueryRequest(
        target=QueryTarget(Path("src/lib.rs"), 42, 42, None, QueryKind.LINE),
        json=False,
        no_llm=False,
        no_cache=False,
        split=False,
        coupled=False,
        since_days=None,
        team=False,
        blame_chain=False,
        evolution=False,
        annotate=False,
    )


def test_parses_range_request():
    assert parse_mode(["src/lib.rs", "--lines", "40:45", "--json", "--no-llm"]) == QueryRequest(
        target=QueryTarget(Path("src/lib.rs"), 40, 45, None, QueryKind.RANGE),
        json=True,
        no_llm=True,
    )


def test_parses_split_request():
    request = parse_mode(["src/lib.rs:authenticate", "--split"])
    assert isinstance(request, QueryRequest)
    assert request.target.path == Path("src/lib.rs")
    assert request.target.symbol == "authenticate"
    assert request.target.query_kind is QueryKind.SYMBOL
    assert not request.json
    assert not request.no_llm
    assert not request.no_cache
    assert request.split
    assert not request.coupled


def test_parses_coupled_request():
    request = parse_mode(["src/lib.rs:authenticate", "--coupled"])
    assert isinstance(request, QueryRequest)
    assert request.target.symbol == "authenticate"
    assert request.target.query_kind is QueryKind.SYMBOL
    assert request.coupled
    assert not request.split
    assert request.since_days is None
    assert not request.team
    assert not request.blame_chain
    assert not request.evolution


def test_parses_since_and_team_request():
    request = parse_mode(["src/lib.rs:authenticate", "--since", "30", "--team"])
    assert isinstance(request, QueryRequest)
    assert request.target.path == Path("src/lib.rs")
    assert not request.no_cache
    assert request.since_days == 30
    assert request.team
    assert not request.blame_chain
    assert not request.evolution


def test_parses_blame_chain_request():
    request = parse_mode(["src/lib.rs:authenticate", "--blame-chain"])
    assert isinstance(request, QueryRequest)
    assert request.target.symbol == "authenticate"
    assert request.blame_chain
    assert not request.team
    assert not request.coupled
    assert not request.split
    assert not request.evolution


def test_parses_evolution_request():
    request = parse_mode(["src/lib.rs:authenticate", "--since", "30", "--evolution"])
    assert isinstance(request, QueryRequest)
    assert request.since_days == 30
    assert request.evolution
    assert not request.team
    assert not request.coupled
    assert not request.split
    assert not request.blame_chain
    assert not request.annotate


def test_parses_annotate_request():
    request = parse_mode(["src/lib.rs:authenticate", "--annotate"])
    assert isinstance(request, QueryRequest)
    assert request.target.query_kind is QueryKind.SYMBOL
    assert request.annotate
    assert not request.split
    assert not request.coupled
    assert not request.team
    assert not request.blame_chain
    assert not request.evolution


def test_parses_no_cache_request():
    request = parse_mode(["src/lib.rs:42", "--no-cache"])
    assert isinstance(request, QueryRequest)
    assert request.no_cache
    assert not request.no_llm


@pytest.mark.parametrize(
    "argv, expected",
    [
        (["mcp"], McpMode()),
        (["shell"], ShellMode()),
        (["lsp"], LspMode()),
        (["hotspots", "--limit", "7", "--json"], HotspotsMode(limit=7, json=True)),
        (["health", "--json"], HealthMode(json=True, ci=None)),
        (["health", "--ci", "80", "--json"], HealthMode(json=True, ci=80)),
        (["pr-template", "--json"], PrTemplateMode(json=True)),
        (
            ["coverage-gap", "--coverage", "lcov.info", "--limit", "7", "--max-coverage", "15", "--json"],
            CoverageGapMode(coverage="lcov.info", limit=7, max_coverage=15.0, json=True),
        ),
        (["ghost", "--limit", "7", "--json"], GhostMode(limit=7, json=True)),
        (["onboard", "--limit", "7", "--json"], OnboardMode(limit=7, json=True)),
        (["time-bombs", "--age-days", "365", "--json"], TimeBombsMode(age_days=365, json=True)),
        (["time-bombs"], TimeBombsMode(age_days=180, json=False)),
        (["install-hooks", "--warn-only"], InstallHooksMode(warn_only=True)),
        (["uninstall-hooks"], UninstallHooksMode()),
        (["completions", "zsh"], CompletionsMode(shell=CompletionShell.ZSH)),
        (["manpage"], ManpageMode()),
    ],
)
def test_parses_subcommands(argv, expected):
    assert parse_mode(argv) == expected


def test_subcommand_defaults():
    assert parse_mode(["hotspots"]) == HotspotsMode(limit=20, json=False)
    assert parse_mode(["onboard"]) == OnboardMode(limit=10, json=False)
    assert parse_mode(["coverage-gap", "--coverage", "lcov.info"]) == CoverageGapMode(
        coverage="lcov.info", limit=20, max_coverage=20.0, json=False
    )


def test_rejects_positional_target_for_hotspots():
    with pytest.raises(CliError, match="unexpected argument 'src/lib.rs:42' found"):
        parse_mode(["hotspots", "--limit", "5", "src/lib.rs:42"])


@pytest.mark.parametrize("command", ["hotspots", "onboard", "ghost"])
def test_rejects_zero_limit(command):
    with pytest.raises(CliError, match="--limit must be greater than zero"):
        parse_mode([command, "--limit", "0"])


def test_rejects_invalid_max_coverage_for_coverage_gap():
    with pytest.raises(CliError, match="--max-coverage must be between 0 and 100"):
        parse_mode(["coverage-gap", "--coverage", "lcov.info", "--max-coverage", "101"])


def test_rejects_negative_max_coverage_for_coverage_gap():
    with pytest.raises(CliError, match="--max-coverage must be between 0 and 100"):
        parse_mode(["coverage-gap", "--coverage", "lcov.info", "--max-coverage=-1"])


def test_rejects_empty_coverage_path():
    with pytest.raises(CliError, match="--coverage must not be empty"):
        parse_mode(["coverage-gap", "--coverage", "   "])


@pytest.mark.parametrize(
    "argv, flag",
    [
        (["hotspots", "--no-cache"], "--no-cache"),
        (["mcp", "--json"], "--json"),
        (["shell", "--json"], "--json"),
        (["lsp", "--json"], "--json"),
        (["health", "--no-cache"], "--no-cache"),
        (["coverage-gap", "--coverage", "lcov.info", "--no-cache"], "--no-cache"),
        (["ghost", "--no-cache"], "--no-cache"),
        (["pr-template", "--no-cache"], "--no-cache"),
        (["onboard", "--no-cache"], "--no-cache"),
        (["time-bombs", "--no-cache"], "--no-cache"),
        (["install-hooks", "--json"], "--json"),
        (["uninstall-hooks", "--no-cache"], "--no-cache"),
        (["completions", "bash", "--json"], "--json"),
        (["manpage", "--json"], "--json"),
    ],
)
def test_rejects_query_flags_after_subcommand(argv, flag):
    with pytest.raises(CliError) as excinfo:
        parse_mode(argv)
    assert f"unexpected argument '{flag}' found" in str(excinfo.value)


def test_rejects_out_of_range_health_ci_threshold():
    with pytest.raises(CliError) as excinfo:
        parse_mode(["health", "--ci", "101"])
    assert "101" in str(excinfo.value)


def test_rejects_query_flags_before_subcommand():
    with pytest.raises(CliError, match="the mcp subcommand does not accept query flags or a target"):
        parse_mode(["--json", "mcp"])
    with pytest.raises(CliError, match="the hotspots subcommand does not accept query flags or a target"):
        parse_mode(["--since", "5", "hotspots"])


def test_top_level_json_is_tolerated_for_json_subcommands():
    assert parse_mode(["--json", "hotspots"]) == HotspotsMode(limit=20, json=False)


def test_missing_target_is_rejected():
    with pytest.raises(CliError, match="target must use"):
        parse_mode([])


def test_invalid_target_is_reported_as_cli_error():
    with pytest.raises(CliError):
        parse_mode(["src/lib.rs"])


def test_unknown_completion_shell_is_rejected():
    with pytest.raises(CliError, match="invalid choice"):
        parse_mode(["completions", "powershell"])


def test_build_parser_parses_query_flags():
    namespace = build_parser().parse_args(["src/lib.rs:42", "--json", "--since", "7"])
    assert namespace.target == "src/lib.rs:42"
    assert namespace.json is True
    assert namespace.since == 7


def test_build_parser_help_lists_subcommands_and_examples():
    help_text = build_parser().format_help()
    assert "time-bombs" in help_text
    assert "why src/auth.rs --lines 40:45 --no-llm" in help_text