"""Main CLI entry point for comment-triage."""

import argparse
import logging
import sys
from pathlib import Path

from ..config import LOG_FORMAT, LOG_LEVEL, default_model_path, log_file
from ..triage_config import TriageConfig
from .init_config import init_config


def setup_logging(level: str = LOG_LEVEL) -> logging.Logger:
    """Setup file logging for debugging."""
    path = log_file()
    path.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(path, mode="a"),
        ],
    )
    return logging.getLogger("comment_triage")


def read_comments(source: Path | None) -> list[str]:
    """One comment per line; blank lines are skipped."""
    if source is None:
        lines = sys.stdin.read().splitlines()
    else:
        lines = source.read_text(encoding="utf-8").splitlines()
    return [line for line in lines if line.strip()]


def run_command(args: argparse.Namespace) -> int:
    from rich.console import Console

    from ..report import print_report, summarize, write_report
    from ..spam import ModelUnavailableError
    from ..triage import build_triager

    console = Console()
    config = TriageConfig.load(args.config)
    comments = read_comments(args.file)
    if not comments:
        console.print("[yellow]No comments to triage[/]")
        return 0

    try:
        triager = build_triager(config)
    except ModelUnavailableError as e:
        console.print(f"[red]Error: {e}[/]")
        return 1

    batch = triager.triage_sync(comments)
    report = summarize(batch)
    print_report(report, console, show_comments=args.show_comments)

    if args.json:
        write_report(report, args.json)
        console.print(f"[dim]Report written to {args.json}[/]")

    return 0


def train_command(args: argparse.Namespace) -> int:
    from ..spam import DEFAULT_CORPUS, EmbeddingModel, ModelUnavailableError

    config = TriageConfig.load(args.config)
    output = args.output or config.embedding_model_path or default_model_path(config.embedding_vector_size)

    try:
        model = EmbeddingModel.build(
            DEFAULT_CORPUS.sentences,
            vector_size=config.embedding_vector_size,
            window_size=config.embedding_window_size,
            min_word_frequency=config.min_word_frequency,
        )
    except ModelUnavailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    model.save(output)
    print(f"Trained {len(model)} word vectors ({model.vector_size} dims), saved to {output}")
    return 0


def explain_command(args: argparse.Namespace) -> int:
    from ..spam import ModelUnavailableError
    from ..spam.detector import has_url
    from ..triage import build_triager

    config = TriageConfig.load(args.config)
    try:
        triager = build_triager(config)
    except ModelUnavailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    spam_classifier = triager.spam_classifier
    result = triager.classify_comment(args.text)

    print(f"URL: {'yes' if has_url(args.text) else 'no'}")
    try:
        scores = spam_classifier.similarity_scores(args.text)
    except Exception as e:
        print(f"Error scoring comment: {type(e).__name__}: {e}", file=sys.stderr)
        print("Similarity: unavailable (keyword fallback used)")
        print(f"Category: {result.category.value}")
        return 1

    print(f"Max spam similarity: {scores.max_spam:.3f}")
    print(f"Max non-spam similarity: {scores.max_non_spam:.3f}")
    print(f"Threshold: {spam_classifier.threshold}")
    print(f"Category: {result.category.value}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point for comment-triage."""
    parser = argparse.ArgumentParser(
        prog="comment-triage",
        description="Sort comments into positive, negative, neutral and spam",
        epilog="Run 'comment-triage <command> --help' for more information on a command.",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # init command - generate config
    init_parser = subparsers.add_parser(
        "init",
        help="Generate a triage.yaml with default settings",
    )
    init_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=Path("triage.yaml"),
        help="Output file path (default: triage.yaml)",
    )
    init_parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Keep the embedding model in memory instead of caching it on disk",
    )
    init_parser.add_argument("--force", "-f", action="store_true", help="Overwrite an existing file")

    # run command - triage a batch
    run_parser = subparsers.add_parser(
        "run",
        help="Triage comments (one per line) from a file or stdin",
    )
    run_parser.add_argument("file", type=Path, nargs="?", default=None, help="Comments file (default: stdin)")
    run_parser.add_argument("--config", "-c", type=Path, default=None, help="Config file (default: triage.yaml)")
    run_parser.add_argument("--json", "-j", type=Path, default=None, help="Also write a JSON report here")
    run_parser.add_argument(
        "--show-comments",
        "-s",
        action="store_true",
        help="List comments under each category",
    )

    # train command - rebuild the cached embedding model
    train_parser = subparsers.add_parser(
        "train",
        help="Train the embedding model and save it",
        description="Train word vectors on the reference corpus and save them for later runs.",
    )
    train_parser.add_argument("--config", "-c", type=Path, default=None, help="Config file (default: triage.yaml)")
    train_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Model path (default: embedding.model_path, else the cache directory)",
    )

    # explain command - scores for a single comment
    explain_parser = subparsers.add_parser(
        "explain",
        help="Show spam similarity scores and category for one comment",
    )
    explain_parser.add_argument("text", type=str, help="Comment text")
    explain_parser.add_argument("--config", "-c", type=Path, default=None, help="Config file (default: triage.yaml)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    setup_logging()

    if args.command == "init":
        return 0 if init_config(args.output, cache_model=not args.no_cache, force=args.force) else 1
    elif args.command == "run":
        return run_command(args)
    elif args.command == "train":
        return train_command(args)
    elif args.command == "explain":
        return explain_command(args)

    print(f"Unknown command: {args.command}")
    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
