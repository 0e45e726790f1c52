"""CLI entry point for prr."""

import typer
from rich.console import Console
from rich.markup import escape

from .core.config_loader import load_config, resolve_credentials
from .core.context import PullRequestContext
from .core.exceptions import PrrError, UserAbortError
from .core.logger import configure_logging
from .core.pipeline import MergePipeline
from .core.repo import determine_git_repo
from .github import GitHubClient, GitHubError

app = typer.Typer(
    name="prr",
    help="""Squash-merge a GitHub pull request.

prr collects the ticket lines from the PR title, description and commits,
adds "Reviewed by:" and "Approved by:" lines for the reviewers and the
integration approver, opens the result in $EDITOR and, once you accept it,
merges the PR with the GitHub "squash and merge" API.

Quick start:
  prr 123
  prr -C ~/src/my-repo 123
  prr -v --all-lines 123
""",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


@app.command()
def merge(
    pr_number: int = typer.Argument(..., min=1, help="Number of the pull request to merge"),
    gitrepo: str | None = typer.Option(
        None,
        "--gitrepo",
        "-C",
        help="Path to the local git repository to act upon (default: $GITREPO, then cwd)",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Verbose output. Use twice for debug output.",
    ),
    all_lines: bool = typer.Option(
        False,
        "--all-lines",
        "-a",
        help="Include every commit message line, not only ticket lines",
    ),
) -> None:
    """Squash-merge PR_NUMBER of the repository in the current directory.

    Examples:
        prr 42
        prr -C ~/src/sdc-imgapi 42
        prr -vv 42
    """
    configure_logging(verbose)

    try:
        repo = determine_git_repo(gitrepo)
        config = load_config()
        credentials = resolve_credentials(config)

        ctx = PullRequestContext(repo=repo, pr_number=pr_number)
        with GitHubClient(credentials, api_url=config.api_url) as client:
            MergePipeline(client, config, all_lines=all_lines, output=console).run(ctx)

    except UserAbortError as e:
        console.print(f"[yellow]{escape(e.message)}[/yellow]")
        raise typer.Exit(1) from None
    except (PrrError, GitHubError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from None


def main() -> None:
    """Entry point for the console script."""
    app()


if __name__ == "__main__":
    main()
