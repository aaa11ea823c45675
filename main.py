import sys
import logging
import time
from pathlib import Path

import argparse
from sprig import commands
from sprig.errors import SprigError
from sprig.models import LogEntry
from sprig.repo_utils import open_repository

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

def format_log_entry(entry: LogEntry) -> str:
    lines = ["===", f"commit {entry.commitHash}"]
    if len(entry.parentCommits) > 1:
        lines.append(f"Merge: {entry.parentCommits[0][:7]} {entry.parentCommits[1][:7]}")
    lines.append("Date: " + time.strftime("%a %b %d %H:%M:%S %Y %z", time.localtime(entry.timestamp)))
    lines.append(entry.commitMessage)
    return "\n".join(lines) + "\n"

def _cwd_path(path: str) -> Path:
    return (Path.cwd() / path).resolve()

def run_init(args):
    repo = commands.init(Path.cwd())
    print(f"Initialized empty sprig repository in {repo.root}")

def run_add(args):
    for repo_path in commands.add(open_repository(), [_cwd_path(p) for p in args.files]):
        print(f"Added {repo_path} to staging.")

def run_commit(args):
    commit_hash = commands.commit(open_repository(), args.message)
    print(f"Committed changes as commit {commit_hash}")

def run_rm(args):
    commands.remove(open_repository(), _cwd_path(args.file))

def run_checkout(args):
    repo = open_repository()
    if args.file:
        commands.checkout(repo, args.name or "", _cwd_path(args.file))
    elif args.name:
        commands.checkout(repo, args.name)
    else:
        raise SprigError("Incorrect operands.")

def run_branch(args):
    repo = open_repository()
    if args.delete:
        commands.remove_branch(repo, args.delete)
    elif args.create:
        commands.create_branch(repo, args.create)
    else:
        for branch_name in sorted(repo.state.branches):
            prefix = "*" if branch_name == repo.state.activeBranch else " "
            print(f"{prefix} {branch_name}")

def run_reset(args):
    commands.reset(open_repository(), args.commit)

def run_merge(args):
    result = commands.merge(open_repository(), args.name)
    if result.outcome == "up-to-date":
        print("Given branch is an ancestor of the current branch.")
    elif result.outcome == "fast-forward":
        print("Current branch fast-forwarded.")
    elif result.has_conflicts:
        print("Encountered a merge conflict.")

def run_log(args):
    for entry in commands.log(open_repository()):
        print(format_log_entry(entry))

def run_global_log(args):
    for entry in commands.global_log(open_repository()):
        print(format_log_entry(entry))

def run_find(args):
    for commit_hash in commands.find(open_repository(), args.message):
        print(commit_hash)

def run_status(args):
    report = commands.status(open_repository())
    print("=== Branches ===")
    print("*" + report.activeBranch)
    for branch_name in report.branches:
        if branch_name != report.activeBranch:
            print(branch_name)
    print("\n=== Staged Files ===")
    for filepath in report.staged:
        print(filepath)
    print("\n=== Removed Files ===")
    for filepath in report.removed:
        print(filepath)
    print("\n=== Modifications Not Staged For Commit ===")
    for filepath, change in report.modified.items():
        print(f"{filepath} ({change})")
    print("\n=== Untracked Files ===")
    for filepath in report.untracked:
        print(filepath)
    print()

def map_command(command: str):
    commandsMap = {
        "init": run_init,
        "add": run_add,
        "commit": run_commit,
        "rm": run_rm,
        "checkout": run_checkout,
        "branch": run_branch,
        "reset": run_reset,
        "merge": run_merge,
        "log": run_log,
        "global-log": run_global_log,
        "find": run_find,
        "status": run_status,
    }
    if command not in commandsMap:
        raise SprigError(f"Unknown command: {command}")
    return commandsMap[command]

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sprig CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # init command
    subparsers.add_parser("init", help="Initialize a new sprig repository")

    # add command
    add_parser = subparsers.add_parser("add", help="Stage files for the next commit")
    add_parser.add_argument("files", nargs="+", help="Files to stage")

    # commit command
    commit_parser = subparsers.add_parser("commit", help="Commit staged changes")
    commit_parser.add_argument("-m", "--message", required=True, help="Commit message")

    # rm command
    rm_parser = subparsers.add_parser("rm", help="Unstage a file, or stage its removal if tracked")
    rm_parser.add_argument("file", help="File to remove")

    # checkout command
    checkout_parser = subparsers.add_parser("checkout", help="Switch branches or restore a file")
    checkout_parser.add_argument("name", nargs="?", help="Branch name, or commit id when --file is given")
    checkout_parser.add_argument("-f", "--file", help="Restore this file from the head (or the given commit)")

    # branch command
    branch_parser = subparsers.add_parser("branch", help="Manage branches")
    branch_parser.add_argument("-c", "--create", required=False, metavar="BRANCH_NAME", help="Create a new branch")
    branch_parser.add_argument("-d", "--delete", required=False, metavar="BRANCH_NAME", help="Delete the specified branch")

    # reset command
    reset_parser = subparsers.add_parser("reset", help="Move the current branch to a commit")
    reset_parser.add_argument("commit", help="Commit id (may be abbreviated)")

    # merge command
    merge_parser = subparsers.add_parser("merge", help="Merge a branch into the current branch")
    merge_parser.add_argument("name", help="Branch name to merge from")

    # log commands
    subparsers.add_parser("log", help="Show the current branch's history")
    subparsers.add_parser("global-log", help="Show every commit ever made")

    # find command
    find_parser = subparsers.add_parser("find", help="List commits with the given message")
    find_parser.add_argument("message", help="Exact commit message")

    # status command
    subparsers.add_parser("status", help="Show the status of the repository")
    return parser

def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT)
    try:
        map_command(args.command)(args)
    except SprigError as e:
        print(e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
