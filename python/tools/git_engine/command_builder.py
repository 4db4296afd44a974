"""
Command construction.

Maps typed operation options to a git argument vector. Building is pure: it
never touches the filesystem or spawns a process.

Every user-controlled ref or name is placed after a literal ``--end-of-options``
and every user-controlled path after a literal ``--``, so a value that looks
like a flag is always read as data.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .models import CommandSpec
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
    ResetOptions,
    ShowCommitOptions,
    StashMode,
    StashOptions,
    StatusOptions,
    TagMode,
    TagOptions,
    WorktreeMode,
    WorktreeOptions,
)

END_OF_OPTIONS = "--end-of-options"
PATH_SEPARATOR = "--"

# Machine-readable formats. Fields are separated by 0x1F, records by 0x1E.
BRANCH_FORMAT = (
    "%(refname)%1f%(objectname)%1f%(upstream:short)%1f%(upstream:track)%1f%(HEAD)"
)
TAG_FORMAT = (
    "%(refname:short)%1f%(objectname)%1f%(*objectname)%1f%(objecttype)"
    "%1f%(creatordate:unix)%1f%(contents:subject)"
)
LOG_FORMAT = "%H%x1f%h%x1f%an%x1f%ae%x1f%at%x1f%P%x1f%D%x1f%s%x1f%b%x1e"
REFLOG_FORMAT = "%H%x1f%gd%x1f%gs%x1f%ct%x1e"
SHOW_FORMAT = "%H%x1f%an%x1f%ae%x1f%at%x1f%s%x1e"
STASH_FORMAT = "%gd%x1f%H%x1f%ct%x1f%gs"


def _refs(*values: Optional[str]) -> List[str]:
    """Tokens for user-controlled refs, preceded by the end-of-options marker."""
    present = [value for value in values if value]
    return [END_OF_OPTIONS, *present] if present else []


def _paths(paths: Sequence[str]) -> List[str]:
    return [PATH_SEPARATOR, *paths] if paths else []


def _sign_flags(sign: Optional[bool], on: str = "-S", off: str = "--no-gpg-sign") -> List[str]:
    if sign is None:
        return []
    return [on] if sign else [off]


def _status(options: StatusOptions) -> CommandSpec:
    args = ["--porcelain=v1", "-b"]
    if not options.include_untracked:
        args.append("--untracked-files=no")
    if options.ignore_submodules:
        args.append("--ignore-submodules")
    return CommandSpec("status", tuple(args))


def _commit(options: CommitOptions) -> CommandSpec:
    args: List[str] = []
    if options.message:
        args += ["-m", options.message]
    elif options.amend:
        args.append("--no-edit")
    if options.amend:
        args.append("--amend")
    if options.allow_empty:
        args.append("--allow-empty")
    if options.no_verify:
        args.append("--no-verify")
    if options.all_tracked:
        args.append("--all")
    if options.author:
        args.append(f"--author={options.author}")
    args += _sign_flags(options.sign)
    args += _paths(options.paths)
    return CommandSpec("commit", tuple(args))


def _show_commit(options: ShowCommitOptions) -> CommandSpec:
    args = ["--name-only", f"--format={SHOW_FORMAT}", *_refs(options.revision)]
    return CommandSpec("show", tuple(args))


def _log(options: LogOptions) -> CommandSpec:
    args = [f"--format={LOG_FORMAT}"]
    if options.max_count is not None:
        args.append(f"--max-count={options.max_count}")
    if options.skip:
        args.append(f"--skip={options.skip}")
    if options.since:
        args.append(f"--since={options.since}")
    if options.until:
        args.append(f"--until={options.until}")
    if options.author:
        args.append(f"--author={options.author}")
    if options.grep:
        args.append(f"--grep={options.grep}")
    if options.all_refs:
        args.append("--all")
    if options.first_parent:
        args.append("--first-parent")
    args += _refs(options.revision)
    args += _paths(options.paths)
    return CommandSpec("log", tuple(args))


def _blame(options: BlameOptions) -> CommandSpec:
    args = ["--porcelain"]
    if options.ignore_whitespace:
        args.append("-w")
    if options.start_line is not None or options.end_line is not None:
        start = options.start_line if options.start_line is not None else 1
        end = options.end_line if options.end_line is not None else ""
        args.append(f"-L{start},{end}")
    args += _refs(options.revision)
    args += _paths([options.file])
    return CommandSpec("blame", tuple(args))


def _branch(options: BranchOptions) -> CommandSpec:
    match options.mode:
        case BranchMode.LIST:
            namespaces = []
            if not options.remote or options.all_branches:
                namespaces.append("refs/heads")
            if options.remote or options.all_branches:
                namespaces.append("refs/remotes")
            return CommandSpec(
                "for-each-ref", (f"--format={BRANCH_FORMAT}", *namespaces)
            )
        case BranchMode.CREATE:
            args = ["--force"] if options.force else []
            args += _refs(options.name, options.start_point)
            return CommandSpec("branch", tuple(args))
        case BranchMode.DELETE:
            args = ["-D" if options.force else "-d"]
            if options.remote:
                args.append("--remotes")
            args += _refs(options.name)
            return CommandSpec("branch", tuple(args))
        case BranchMode.RENAME:
            args = ["-M" if options.force else "-m", *_refs(options.name, options.new_name)]
            return CommandSpec("branch", tuple(args))
    raise ValueError(f"Unsupported branch mode: {options.mode}")


def _merge(options: MergeOptions) -> CommandSpec:
    if options.abort:
        return CommandSpec("merge", ("--abort",))
    args: List[str] = []
    if options.no_fast_forward:
        args.append("--no-ff")
    if options.fast_forward_only:
        args.append("--ff-only")
    if options.squash:
        args.append("--squash")
    if options.strategy:
        args.append(f"--strategy={options.strategy}")
    if options.message:
        args += ["-m", options.message]
    else:
        args.append("--no-edit")
    args += _sign_flags(options.sign)
    args += _refs(options.branch)
    return CommandSpec("merge", tuple(args))


def _rebase(options: RebaseOptions) -> CommandSpec:
    if options.mode is not RebaseMode.START:
        return CommandSpec("rebase", (f"--{options.mode.value}",))
    args: List[str] = []
    if options.autostash:
        args.append("--autostash")
    if options.onto:
        args.append(f"--onto={options.onto}")
    args += _refs(options.upstream, options.branch)
    return CommandSpec("rebase", tuple(args))


def _cherry_pick(options: CherryPickOptions) -> CommandSpec:
    if options.abort:
        return CommandSpec("cherry-pick", ("--abort",))
    if options.continue_operation:
        return CommandSpec("cherry-pick", ("--continue",))
    args: List[str] = []
    if options.no_commit:
        args.append("--no-commit")
    if options.mainline is not None:
        args.append(f"--mainline={options.mainline}")
    if options.record_origin:
        args.append("-x")
    args += _sign_flags(options.sign)
    args += _refs(*options.commits)
    return CommandSpec("cherry-pick", tuple(args))


def _tag(options: TagOptions) -> CommandSpec:
    match options.mode:
        case TagMode.LIST:
            args = ["--list", f"--format={TAG_FORMAT}", *_refs(options.pattern)]
            return CommandSpec("tag", tuple(args))
        case TagMode.DELETE:
            return CommandSpec("tag", ("--delete", *_refs(options.name)))
        case TagMode.CREATE:
            args = _sign_flags(options.sign, on="--sign", off="--no-sign")
            # Signed tags are always annotated and need a message without an editor.
            if options.annotated or options.message or options.sign:
                args.append("--annotate")
                args += ["-m", options.message or options.name]
            if options.force:
                args.append("--force")
            args += _refs(options.name, options.commit)
            return CommandSpec("tag", tuple(args))
    raise ValueError(f"Unsupported tag mode: {options.mode}")


def _remote(options: RemoteOptions) -> CommandSpec:
    match options.mode:
        case RemoteMode.LIST:
            return CommandSpec("remote", ("-v",))
        case RemoteMode.ADD:
            args = ("add", *_refs(options.name, options.url))
        case RemoteMode.REMOVE:
            args = ("remove", *_refs(options.name))
        case RemoteMode.RENAME:
            args = ("rename", *_refs(options.name, options.new_name))
        case RemoteMode.GET_URL:
            push = ("--push",) if options.push else ()
            args = ("get-url", "--all", *push, *_refs(options.name))
        case RemoteMode.SET_URL:
            push = ("--push",) if options.push else ()
            args = ("set-url", *push, *_refs(options.name, options.url))
        case RemoteMode.PRUNE:
            args = ("prune", *_refs(options.name))
        case _:
            raise ValueError(f"Unsupported remote mode: {options.mode}")
    return CommandSpec("remote", args)


def _worktree(options: WorktreeOptions) -> CommandSpec:
    match options.mode:
        case WorktreeMode.LIST:
            args = ["list", "--porcelain"]
        case WorktreeMode.ADD:
            args = ["add"]
            if options.force:
                args.append("--force")
            if options.detach:
                args.append("--detach")
            if options.branch:
                args += ["-b", options.branch]
            args += _refs(options.path, options.commitish)
        case WorktreeMode.REMOVE:
            args = ["remove", *(["--force"] if options.force else []), *_refs(options.path)]
        case WorktreeMode.MOVE:
            args = ["move", *_refs(options.path, options.new_path)]
        case WorktreeMode.PRUNE:
            args = ["prune", "--verbose"]
        case WorktreeMode.LOCK:
            args = ["lock"]
            if options.reason:
                args.append(f"--reason={options.reason}")
            args += _refs(options.path)
        case WorktreeMode.UNLOCK:
            args = ["unlock", *_refs(options.path)]
        case _:
            raise ValueError(f"Unsupported worktree mode: {options.mode}")
    return CommandSpec("worktree", tuple(args))


def _add(options: AddOptions) -> CommandSpec:
    args = ["--verbose"]
    if options.all_changes:
        args.append("--all")
    elif options.update:
        args.append("--update")
    if options.force:
        args.append("--force")
    args += _paths(options.paths)
    return CommandSpec("add", tuple(args))


def _checkout(options: CheckoutOptions) -> CommandSpec:
    args: List[str] = []
    if options.force:
        args.append("--force")
    if options.create_branch:
        args += ["-b", options.target]
    else:
        args += _refs(options.target)
    args += _paths(options.paths)
    return CommandSpec("checkout", tuple(args))


def _reset(options: ResetOptions) -> CommandSpec:
    # Pathspec resets only move index entries; mode flags are rejected by git.
    args = [] if options.paths else [f"--{options.mode.value}"]
    args += _refs(options.commit)
    args += _paths(options.paths)
    return CommandSpec("reset", tuple(args))


def _stash(options: StashOptions) -> CommandSpec:
    match options.mode:
        case StashMode.LIST:
            args = ["list", f"--format={STASH_FORMAT}"]
        case StashMode.PUSH:
            args = ["push"]
            if options.include_untracked:
                args.append("--include-untracked")
            if options.keep_index:
                args.append("--keep-index")
            if options.message:
                args += ["-m", options.message]
        case StashMode.POP | StashMode.APPLY | StashMode.DROP:
            args = [options.mode.value, *_refs(options.stash_ref)]
        case StashMode.CLEAR:
            args = ["clear"]
        case _:
            raise ValueError(f"Unsupported stash mode: {options.mode}")
    return CommandSpec("stash", tuple(args))


def _reflog(options: ReflogOptions) -> CommandSpec:
    args = ["show", f"--format={REFLOG_FORMAT}"]
    if options.max_count is not None:
        args.append(f"--max-count={options.max_count}")
    args += _refs(options.ref)
    return CommandSpec("reflog", tuple(args))


def _clean(options: CleanOptions) -> CommandSpec:
    args = ["-n" if options.dry_run else "-f"]
    if options.directories:
        args.append("-d")
    if options.ignored:
        args.append("-x")
    args += _paths(options.paths)
    return CommandSpec("clean", tuple(args))


def _diff(options: DiffOptions) -> CommandSpec:
    args = ["--numstat"]
    if options.staged:
        args.append("--cached")
    args += _refs(options.commit1, options.commit2)
    args += _paths(options.paths)
    return CommandSpec("diff", tuple(args))


def build_command(options: object) -> CommandSpec:
    """
    Build the git command for the given operation options.

    Args:
        options: Any of the option dataclasses from :mod:`git_engine.options`.

    Returns:
        CommandSpec: The subcommand and its argument tokens.

    Raises:
        TypeError: If the options type is not a known operation.
    """
    match options:
        case StatusOptions():
            return _status(options)
        case CommitOptions():
            return _commit(options)
        case ShowCommitOptions():
            return _show_commit(options)
        case LogOptions():
            return _log(options)
        case BlameOptions():
            return _blame(options)
        case BranchOptions():
            return _branch(options)
        case MergeOptions():
            return _merge(options)
        case RebaseOptions():
            return _rebase(options)
        case CherryPickOptions():
            return _cherry_pick(options)
        case TagOptions():
            return _tag(options)
        case RemoteOptions():
            return _remote(options)
        case WorktreeOptions():
            return _worktree(options)
        case AddOptions():
            return _add(options)
        case CheckoutOptions():
            return _checkout(options)
        case ResetOptions():
            return _reset(options)
        case StashOptions():
            return _stash(options)
        case ReflogOptions():
            return _reflog(options)
        case CleanOptions():
            return _clean(options)
        case DiffOptions():
            return _diff(options)
        case _:
            raise TypeError(f"Unsupported options type: {type(options).__name__}")


__all__ = [
    "END_OF_OPTIONS",
    "PATH_SEPARATOR",
    "BRANCH_FORMAT",
    "TAG_FORMAT",
    "LOG_FORMAT",
    "REFLOG_FORMAT",
    "SHOW_FORMAT",
    "STASH_FORMAT",
    "build_command",
]
