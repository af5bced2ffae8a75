# whyarch

Building blocks for asking a git repository *why* a piece of code exists:
parsing query targets and command lines, rendering explanation reports,
health dashboards and pull-request templates, and installing git hooks that
warn about high-risk changes.

The package uses only the Python standard library and supports Python 3.10
and later.

## Query targets

`whyarch.target.parse_target(target, lines=None)` turns a target string into
a `QueryTarget` (`path`, `start_line`, `end_line`, `symbol`, `query_kind`):

- `src/auth.rs:42` — a single line (`QueryKind.LINE`)
- `src/auth.rs` with lines `"40:45"` — a 1-based range (`QueryKind.RANGE`)
- `src/auth.rs:verify_token` — a symbol (`QueryKind.SYMBOL`)
- `src/auth.rs:AuthService::login` — a qualified symbol (`QueryKind.QUALIFIED_SYMBOL`)

```python
from whyarch.target import QueryKind, parse_target

target = parse_target("src/auth.rs", "40:45")
assert target.query_kind is QueryKind.RANGE
assert (target.start_line, target.end_line) == (40, 45)
```

Malformed targets, zero or reversed ranges, and `lines` combined with a
`file:line` or `file:symbol` target raise `TargetError`.

## Command-line parsing

`whyarch.cli.parse_mode(argv)` turns an argument list (without the program
name) into a mode object: a `QueryRequest` for plain queries, or one of
`McpMode`, `ShellMode`, `LspMode`, `HotspotsMode`, `HealthMode`,
`PrTemplateMode`, `CoverageGapMode`, `GhostMode`, `OnboardMode`,
`InstallHooksMode`, `UninstallHooksMode`, `CompletionsMode`, `ManpageMode`
or `TimeBombsMode`.

```python
from whyarch.cli import HotspotsMode, parse_mode

mode = parse_mode(["hotspots", "--limit", "7", "--json"])
assert mode == HotspotsMode(limit=7, json=True)
```

Unknown arguments, a zero `--limit`, an empty `--coverage`, a
`--max-coverage` outside 0–100, a `--ci` threshold above 100, or query flags
passed to a subcommand raise `CliError`. `build_parser()` returns the
top-level `argparse` parser, whose help lists the subcommands and examples.

## Reports

`whyarch.report` holds `WhyReport` with its `RiskLevel`, `ConfidenceLevel`
and `ReportMode`.

- `format_why_report(target, report, cached)` renders the terminal view,
  leaving out empty Evidence, Inference, Unknowns and Notes sections and
  marking cached results with `[cached]`.
- `WhyReport.to_json()` gives pretty-printed JSON.
- `format_target_label(target)` gives labels such as `src/a.rs:42`,
  `src/a.rs:10-20` or `src/a.rs:verify_token`.
- `infer_language(path)` maps `.rs`, `.js`, `.ts` and `.py` to a language
  name, otherwise `"unknown"`.
- `parse_synth_risk(value)` maps `"HIGH"` and `"MEDIUM"` to risk levels and
  anything else to `RiskLevel.LOW`.

## Health

`whyarch.health` provides `HealthReport`, `HealthSnapshot` and `HealthDelta`.
`compute_health_delta(current_score, previous)` reports the direction
(`↑`, `↓`, `→`) and size of the change, `render_health(report, ci)` renders
the dashboard with signals sorted by name, and
`health_ci_failure(report, threshold)` returns a failure message when the
debt score exceeds the threshold, otherwise `None`.

## Pull-request templates

`whyarch.pr_template.render_pr_template_markdown(report)` turns a
`PrTemplateReport` (title, summary, risk notes, test plan and `StagedFile`
entries) into a Markdown description with Summary, Risk notes, Test plan and
Staged files sections.

## Git hooks

```python
from whyarch.hooks.installer import install, uninstall

install("/path/to/repo", warn_only=True)
uninstall("/path/to/repo")
```

`install` writes managed `pre-commit` and `pre-push` bash hooks, backing up
any existing hook it did not write to `<hook>.why-backup`. Without
`warn_only` the hooks ask for confirmation when a HIGH-risk change is found;
with it they only print a warning. `uninstall` restores backups, or removes
the managed hooks when there is nothing to restore. A directory without a
`.git` folder raises `HookError`. `render_hook(...)` returns the script text
for one hook.

## What this package does not do

- It installs no `why` command and has no entry point that runs a mode:
  `parse_mode` only parses.
- It does not read git history, score risk, scan for hotspots, coverage
  gaps, ghosts or time bombs, call an LLM, or cache results. The reports it
  renders must be built by the caller.
- It does not serve MCP or LSP, run an interactive shell, or generate shell
  completions or man pages; those modes are recognised by the parser only.
- It does not generate shell functions for injecting archaeology context
  into prompts.