"""
Command-line interface for the git engine.

Every subcommand maps its arguments onto one options dataclass, runs it through
:class:`GitEngine` and prints the typed result as JSON.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from .classifier import classify_validation_failure
from .config import EngineConfig
from .engine import GitEngine
from .exceptions import GitException
from .logging_config import setup_logging
from .models import GitIdentity, OperationContext
from .options import (
    AddOptions,
    BlameOptions,
    BranchMode,
    BranchOptions,
    CheckoutOptions,
    CherryPickOptions,
    CleanOptions,
    CommitOptions,
    DiffOptions,
    LogOptions,
    MergeOptions,
    RebaseMode,
    RebaseOptions,
    ReflogOptions,
    RemoteMode,
    RemoteOptions,
    ResetMode,
    ResetOptions,
    StashMode,
    StashOptions,
    StatusOptions,
    TagMode,
    TagOptions,
    WorktreeMode,
    WorktreeOptions,
)


def _sign(args) -> Optional[bool]:
    if getattr(args, "sign", False):
        return True
    if getattr(args, "no_sign", False):
        return False
    return None


def status_options(args) -> StatusOptions:
    return StatusOptions(
        include_untracked=not args.no_untracked, ignore_submodules=args.ignore_submodules
    )


def commit_options(args) -> CommitOptions:
    return CommitOptions(
        message=args.message or "",
        amend=args.amend,
        allow_empty=args.allow_empty,
        no_verify=args.no_verify,
        all_tracked=args.all,
        sign=_sign(args),
        force_unsigned_on_failure=args.force_unsigned_on_failure,
        paths=args.paths,
    )


def log_options(args) -> LogOptions:
    return LogOptions(
        max_count=args.max_count,
        skip=args.skip,
        since=args.since,
        until=args.until,
        author=args.author,
        grep=args.grep,
        revision=args.revision,
        all_refs=args.all,
        first_parent=args.first_parent,
        paths=args.paths,
    )


def blame_options(args) -> BlameOptions:
    return BlameOptions(
        file=args.file,
        revision=args.revision,
        start_line=args.start_line,
        end_line=args.end_line,
        ignore_whitespace=args.ignore_whitespace,
    )


def branch_options(args) -> BranchOptions:
    return BranchOptions(
        mode=BranchMode(args.mode),
        name=args.name,
        new_name=args.new_name,
        start_point=args.start_point,
        force=args.force,
        remote=args.remote,
        all_branches=args.all,
    )


def merge_options(args) -> MergeOptions:
    return MergeOptions(
        branch=args.branch,
        no_fast_forward=args.no_ff,
        fast_forward_only=args.ff_only,
        squash=args.squash,
        strategy=args.strategy,
        message=args.message,
        abort=args.abort,
        sign=_sign(args),
        force_unsigned_on_failure=args.force_unsigned_on_failure,
    )


def rebase_options(args) -> RebaseOptions:
    return RebaseOptions(
        mode=RebaseMode(args.mode),
        upstream=args.upstream,
        branch=args.branch,
        onto=args.onto,
        autostash=args.autostash,
    )


def cherry_pick_options(args) -> CherryPickOptions:
    return CherryPickOptions(
        commits=args.commits,
        no_commit=args.no_commit,
        mainline=args.mainline,
        record_origin=args.record_origin,
        abort=args.abort,
        continue_operation=args.continue_operation,
        sign=_sign(args),
        force_unsigned_on_failure=args.force_unsigned_on_failure,
    )


def tag_options(args) -> TagOptions:
    return TagOptions(
        mode=TagMode(args.mode),
        name=args.name,
        commit=args.commit,
        message=args.message,
        annotated=args.annotate,
        force=args.force,
        pattern=args.pattern,
        sign=_sign(args),
        force_unsigned_on_failure=args.force_unsigned_on_failure,
    )


def remote_options(args) -> RemoteOptions:
    return RemoteOptions(
        mode=RemoteMode(args.mode),
        name=args.name,
        url=args.url,
        new_name=args.new_name,
        push=args.push,
    )


def worktree_options(args) -> WorktreeOptions:
    return WorktreeOptions(
        mode=WorktreeMode(args.mode),
        path=args.path,
        new_path=args.new_path,
        commitish=args.commitish,
        branch=args.branch,
        detach=args.detach,
        force=args.force,
        reason=args.reason,
    )


def add_options(args) -> AddOptions:
    return AddOptions(paths=args.paths, all_changes=args.all, update=args.update, force=args.force)


def checkout_options(args) -> CheckoutOptions:
    return CheckoutOptions(
        target=args.target, create_branch=args.create, force=args.force, paths=args.paths
    )


def reset_options(args) -> ResetOptions:
    return ResetOptions(mode=ResetMode(args.mode), commit=args.commit, paths=args.paths)


def stash_options(args) -> StashOptions:
    return StashOptions(
        mode=StashMode(args.mode),
        message=args.message,
        include_untracked=args.include_untracked,
        keep_index=args.keep_index,
        stash_ref=args.stash_ref,
    )


def reflog_options(args) -> ReflogOptions:
    return ReflogOptions(ref=args.ref, max_count=args.max_count)


def clean_options(args) -> CleanOptions:
    return CleanOptions(
        force=args.force,
        dry_run=not args.force,
        directories=args.directories,
        ignored=args.ignored,
        paths=args.paths,
    )


def diff_options(args) -> DiffOptions:
    return DiffOptions(
        staged=args.staged, commit1=args.commit1, commit2=args.commit2, paths=args.paths
    )


def setup_parser() -> argparse.ArgumentParser:
    """
    Set up the argument parser for the command line interface.

    Returns:
        argparse.ArgumentParser: Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="git_engine",
        description="Run git operations and print typed JSON results",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show repository status:
  python -m git_engine status --repo /path/to/repo

  # Last five commits:
  python -m git_engine log --repo /path/to/repo --max-count 5

  # Commit, falling back to an unsigned commit if signing fails:
  python -m git_engine commit --repo /path/to/repo -m "Fix" --sign --force-unsigned-on-failure
        """,
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    parser.add_argument("--log-file", help="Optional rotating log file")

    subparsers = parser.add_subparsers(dest="command", help="Git operation to run")

    def add_common(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--repo", "-C", required=True, help="Directory of the repository"
        )
        subparser.add_argument("--timeout", type=float, help="Time budget in seconds")
        subparser.add_argument("--author-name", help="Identity name for this call")
        subparser.add_argument("--author-email", help="Identity email for this call")

    def add_signing(subparser: argparse.ArgumentParser) -> None:
        group = subparser.add_mutually_exclusive_group()
        group.add_argument("--sign", action="store_true", help="Sign the result")
        group.add_argument("--no-sign", action="store_true", help="Never sign")
        subparser.add_argument(
            "--force-unsigned-on-failure",
            action="store_true",
            help="Retry once without signing if signing fails",
        )

    def add_command(
        name: str, help_text: str, build: Callable[[Any], Any]
    ) -> argparse.ArgumentParser:
        subparser = subparsers.add_parser(name, help=help_text)
        add_common(subparser)
        subparser.set_defaults(build_options=build)
        return subparser

    p = add_command("status", "Show working tree status", status_options)
    p.add_argument("--no-untracked", action="store_true", help="Hide untracked files")
    p.add_argument("--ignore-submodules", action="store_true")

    p = add_command("commit", "Record changes", commit_options)
    p.add_argument("--message", "-m", help="Commit message")
    p.add_argument("--amend", action="store_true")
    p.add_argument("--allow-empty", action="store_true")
    p.add_argument("--no-verify", action="store_true", help="Skip commit hooks")
    p.add_argument("--all", "-a", action="store_true", help="Commit all tracked changes")
    p.add_argument("paths", nargs="*")
    add_signing(p)

    p = add_command("log", "Show commit history", log_options)
    p.add_argument("--max-count", "-n", type=int)
    p.add_argument("--skip", type=int)
    p.add_argument("--since")
    p.add_argument("--until")
    p.add_argument("--author")
    p.add_argument("--grep")
    p.add_argument("--revision")
    p.add_argument("--all", action="store_true")
    p.add_argument("--first-parent", action="store_true")
    p.add_argument("paths", nargs="*")

    p = add_command("blame", "Show line authorship", blame_options)
    p.add_argument("file")
    p.add_argument("--revision")
    p.add_argument("--start-line", type=int)
    p.add_argument("--end-line", type=int)
    p.add_argument("--ignore-whitespace", "-w", action="store_true")

    p = add_command("branch", "List or manage branches", branch_options)
    p.add_argument("mode", nargs="?", default="list", choices=[m.value for m in BranchMode])
    p.add_argument("name", nargs="?")
    p.add_argument("new_name", nargs="?")
    p.add_argument("--start-point")
    p.add_argument("--force", "-f", action="store_true")
    p.add_argument("--remote", "-r", action="store_true")
    p.add_argument("--all", action="store_true")

    p = add_command("merge", "Merge a branch", merge_options)
    p.add_argument("branch", nargs="?")
    p.add_argument("--no-ff", action="store_true")
    p.add_argument("--ff-only", action="store_true")
    p.add_argument("--squash", action="store_true")
    p.add_argument("--strategy")
    p.add_argument("--message", "-m")
    p.add_argument("--abort", action="store_true")
    add_signing(p)

    p = add_command("rebase", "Rebase the current branch", rebase_options)
    p.add_argument("upstream", nargs="?")
    p.add_argument("branch", nargs="?")
    p.add_argument("--mode", default="start", choices=[m.value for m in RebaseMode])
    p.add_argument("--onto")
    p.add_argument("--autostash", action="store_true")

    p = add_command("cherry-pick", "Apply existing commits", cherry_pick_options)
    p.add_argument("commits", nargs="*")
    p.add_argument("--no-commit", action="store_true")
    p.add_argument("--mainline", type=int)
    p.add_argument("--record-origin", "-x", action="store_true")
    p.add_argument("--abort", action="store_true")
    p.add_argument("--continue", dest="continue_operation", action="store_true")
    add_signing(p)

    p = add_command("tag", "List or manage tags", tag_options)
    p.add_argument("mode", nargs="?", default="list", choices=[m.value for m in TagMode])
    p.add_argument("name", nargs="?")
    p.add_argument("commit", nargs="?")
    p.add_argument("--message", "-m")
    p.add_argument("--annotate", "-a", action="store_true")
    p.add_argument("--force", "-f", action="store_true")
    p.add_argument("--pattern")
    add_signing(p)

    p = add_command("remote", "List or manage remotes", remote_options)
    p.add_argument("mode", nargs="?", default="list", choices=[m.value for m in RemoteMode])
    p.add_argument("name", nargs="?")
    p.add_argument("url", nargs="?")
    p.add_argument("--new-name")
    p.add_argument("--push", action="store_true")

    p = add_command("worktree", "List or manage worktrees", worktree_options)
    p.add_argument("mode", nargs="?", default="list", choices=[m.value for m in WorktreeMode])
    p.add_argument("path", nargs="?")
    p.add_argument("--new-path")
    p.add_argument("--commitish")
    p.add_argument("--branch", "-b")
    p.add_argument("--detach", action="store_true")
    p.add_argument("--force", "-f", action="store_true")
    p.add_argument("--reason")

    p = add_command("add", "Stage changes", add_options)
    p.add_argument("paths", nargs="*")
    p.add_argument("--all", "-A", action="store_true")
    p.add_argument("--update", "-u", action="store_true")
    p.add_argument("--force", "-f", action="store_true")

    p = add_command("checkout", "Switch branches or restore files", checkout_options)
    p.add_argument("target", nargs="?")
    p.add_argument("paths", nargs="*")
    p.add_argument("--create", "-b", action="store_true", help="Create the target branch")
    p.add_argument("--force", "-f", action="store_true")

    p = add_command("reset", "Reset HEAD or index entries", reset_options)
    p.add_argument("commit", nargs="?")
    p.add_argument("paths", nargs="*")
    p.add_argument("--mode", default="mixed", choices=[m.value for m in ResetMode])

    p = add_command("stash", "List or manage stashes", stash_options)
    p.add_argument("mode", nargs="?", default="list", choices=[m.value for m in StashMode])
    p.add_argument("stash_ref", nargs="?")
    p.add_argument("--message", "-m")
    p.add_argument("--include-untracked", "-u", action="store_true")
    p.add_argument("--keep-index", action="store_true")

    p = add_command("reflog", "Show reference log", reflog_options)
    p.add_argument("ref", nargs="?", default="HEAD")
    p.add_argument("--max-count", "-n", type=int)

    p = add_command("clean", "Remove untracked files (dry run unless --force)", clean_options)
    p.add_argument("paths", nargs="*")
    p.add_argument("--force", "-f", action="store_true")
    p.add_argument("--directories", "-d", action="store_true")
    p.add_argument("--ignored", "-x", action="store_true")

    p = add_command("diff", "Summarize changes per file", diff_options)
    p.add_argument("commit1", nargs="?")
    p.add_argument("commit2", nargs="?")
    p.add_argument("--staged", "--cached", action="store_true")
    p.add_argument("--paths", nargs="*", default=[])

    return parser


def _context(args) -> OperationContext:
    identity = None
    if args.author_name and args.author_email:
        identity = GitIdentity(args.author_name, args.author_email)
    return OperationContext(
        working_directory=Path(args.repo).resolve(),
        identity=identity,
        timeout_seconds=args.timeout,
    )


def _print_json(payload: Dict[str, Any], stream=None) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False), file=stream or sys.stdout)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function for command-line execution.

    Returns:
        int: Process exit status; 0 on success and 1 on any error.
    """
    parser = setup_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    if not args.command:
        parser.print_help()
        return 1

    logger.debug(f"Command-line arguments: {args}")
    context = _context(args)

    try:
        options = args.build_options(args)
    except ValueError as e:
        error = classify_validation_failure(
            str(e),
            args.command,
            working_directory=context.working_directory,
            request_id=context.request_id,
        ).to_exception()
        _print_json(error.to_dict(), sys.stderr)
        return 1

    try:
        engine = GitEngine(EngineConfig.from_env())
        result = asyncio.run(engine.run(options, context))
    except GitException as e:
        logger.error(f"git {args.command} failed: {e}")
        _print_json(e.to_dict(), sys.stderr)
        return 1
    except ValueError as e:
        logger.error(f"Invalid engine configuration: {e}")
        print(f"Invalid engine configuration: {e}", file=sys.stderr)
        return 1

    _print_json(result.to_dict())
    return 0
