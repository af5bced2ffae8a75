"""Installation and removal of managed git hooks that warn on high-risk changes."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

__all__ = ["HookError", "install", "uninstall", "render_hook"]

PRE_COMMIT = "pre-commit"
PRE_PUSH = "pre-push"
MANAGED_MARKER = "# why-managed-hook"
BACKUP_SUFFIX = ".why-backup"


class HookError(OSError):
    """Raised when hooks cannot be installed, restored or removed."""


def install(repo_root: str | os.PathLike[str], warn_only: bool) -> None:
    """Write the managed pre-commit and pre-push hooks, backing up unmanaged ones."""
    hooks_dir = _hooks_dir(Path(repo_root))
    try:
        hooks_dir.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise HookError(f"failed to create hooks dir {hooks_dir}: {error}") from error

    _install_hook(hooks_dir, PRE_COMMIT, _render_pre_commit_hook(warn_only))
    _install_hook(hooks_dir, PRE_PUSH, _render_pre_push_hook(warn_only))


def uninstall(repo_root: str | os.PathLike[str]) -> None:
    """Remove managed hooks, restoring any backed-up originals."""
    hooks_dir = _hooks_dir(Path(repo_root))
    _uninstall_hook(hooks_dir, PRE_COMMIT)
    _uninstall_hook(hooks_dir, PRE_PUSH)


def _hooks_dir(repo_root: Path) -> Path:
    git_dir = repo_root / ".git"
    if not git_dir.is_dir():
        raise HookError(f"{repo_root} does not look like a git repository root")
    return git_dir / "hooks"


def _backup_path(hooks_dir: Path, hook_name: str) -> Path:
    return hooks_dir / f"{hook_name}{BACKUP_SUFFIX}"


def _is_managed_hook(contents: str) -> bool:
    return MANAGED_MARKER in contents


def _read_text(path: Path, what: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise HookError(f"failed to read {what} {path}: {error}") from error


def _install_hook(hooks_dir: Path, hook_name: str, script: str) -> None:
    hook_path = hooks_dir / hook_name
    backup_path = _backup_path(hooks_dir, hook_name)

    if hook_path.exists():
        existing = _read_text(hook_path, "existing hook")
        if not _is_managed_hook(existing) and not backup_path.exists():
            try:
                shutil.copy(hook_path, backup_path)
            except OSError as error:
                raise HookError(
                    f"failed to back up hook {hook_path} to {backup_path}: {error}"
                ) from error

    try:
        hook_path.write_text(script, encoding="utf-8")
    except OSError as error:
        raise HookError(f"failed to write hook {hook_path}: {error}") from error

    if os.name == "posix":
        try:
            hook_path.chmod(0o755)
        except OSError as error:
            raise HookError(f"failed to chmod hook {hook_path}: {error}") from error


def _uninstall_hook(hooks_dir: Path, hook_name: str) -> None:
    hook_path = hooks_dir / hook_name
    backup_path = _backup_path(hooks_dir, hook_name)

    if backup_path.exists():
        try:
            os.replace(backup_path, hook_path)
        except OSError as error:
            raise HookError(
                f"failed to restore backup {backup_path} to {hook_path}: {error}"
            ) from error
        return

    if hook_path.exists() and _is_managed_hook(_read_text(hook_path, "hook")):
        try:
            hook_path.unlink()
        except OSError as error:
            raise HookError(f"failed to remove hook {hook_path}: {error}") from error


def _render_pre_commit_hook(warn_only: bool) -> str:
    return render_hook(
        PRE_COMMIT,
        warn_only,
        "git diff --cached --name-only --diff-filter=ACMR",
        "pre-commit",
    )


def _render_pre_push_hook(warn_only: bool) -> str:
    return render_hook(
        PRE_PUSH,
        warn_only,
        "git diff --name-only HEAD~1..HEAD",
        "pre-push",
    )


def render_hook(hook_name: str, warn_only: bool, file_command: str, label: str) -> str:
    """Render the bash script for one managed hook."""
    if warn_only:
        mode_logic = (
            f'echo "why: HIGH risk changes detected during {label}; '
            'continuing because --warn-only is enabled"\n'
            "exit 0"
        )
    else:
        mode_logic = (
            f'printf "why: HIGH risk changes detected during {label}. Continue? [y/N] "\n'
            "read answer\n"
            'case "$answer" in\n'
            "  y|Y|yes|YES) exit 0 ;;\n"
            "  *) exit 1 ;;\n"
            "esac"
        )

    return f"""#!/usr/bin/env bash
set -euo pipefail
{MANAGED_MARKER}
# installed by why for {hook_name}

if ! command -v why >/dev/null 2>&1; then
  exit 0
fi

files=$({file_command} || true)
if [ -z "${{files}}" ]; then
  exit 0
fi

high_risk=0
while IFS= read -r file; do
  [ -n "$file" ] || continue
  [ -f "$file" ] || continue

  line_count=$(awk 'END {{print NR}}' "$file")
  if [ -z "${{line_count}}" ] || [ "${{line_count}}" = "0" ]; then
    continue
  fi

  risk_output=$(why "$file" --lines "1:${{line_count}}" --no-llm --json 2>/dev/null || true)
  if printf '%s' "$risk_output" | grep -q '"risk_level"[[:space:]]*:[[:space:]]*"HIGH"'; then
    high_risk=1
    break
  fi
done <<< "$files"

if [ "$high_risk" -eq 1 ]; then
  {mode_logic}
fi

exit 0
"""