import argparse
import sys
from pathlib import Path

import pydantic
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from config import EngineSettings, get_settings
from errors import EngineError
from logging_config import configure_logging
from questions import QuestionFactory, build_question_registry
from session_stats import make_scorer
from storage import get_session_repo
from strategies import build_strategy_registry


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(description="Course learning engine")
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (default: from COURSE_ENGINE_LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("types", help="List registered question types")
    strategies_parser = subparsers.add_parser("strategies", help="List registered strategies")
    strategies_parser.add_argument(
        "name", nargs="?", default=None, help="Show the full description of one strategy"
    )

    sessions_parser = subparsers.add_parser("sessions", help="List stored sessions")
    sessions_parser.add_argument("--course", type=str, default=None, help="Filter by course ID")
    sessions_parser.add_argument(
        "--active", action="store_true", help="Only show sessions that have not finished"
    )
    sessions_parser.add_argument("--db", type=str, default=None, help="Database file")

    sim_parser = subparsers.add_parser("simulate", help="Run a simulated learner")
    sim_parser.add_argument(
        "--strategy",
        "-s",
        type=str,
        default="sequential",
        help="Strategy name (default: sequential)",
    )
    sim_parser.add_argument(
        "--questions",
        "-q",
        type=int,
        default=12,
        help="Number of generated questions (default: 12)",
    )
    sim_parser.add_argument(
        "--steps",
        "-n",
        type=int,
        default=30,
        help="Maximum questions to answer (default: 30)",
    )
    sim_parser.add_argument(
        "--accuracy",
        "-a",
        type=float,
        default=0.7,
        help="Probability of a correct answer 0.0-1.0 (default: 0.7)",
    )
    sim_parser.add_argument(
        "--hint-rate",
        type=float,
        default=0.1,
        help="Probability of using a hint 0.0-1.0 (default: 0.1)",
    )
    sim_parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Write JSON results to this file",
    )
    sim_parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="Save the simulated session to this database",
    )
    sim_parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print each answered question",
    )
    sim_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )

    return parser


def show_types(settings: EngineSettings, console: Console) -> None:
    registry = build_question_registry(enabled=settings.question_types)
    table = Table(title="Question types")
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Description")
    for tag, provider in registry.items():
        table.add_row(tag, f"{provider.icon} {provider.display_name}".strip(), provider.description)
    console.print(table)


def show_strategies(args, settings: EngineSettings, console: Console) -> None:
    registry = build_strategy_registry(settings.engine.strategy, enabled=settings.strategies)
    if args.name:
        console.print(registry.describe(args.name))
        return

    table = Table(title="Strategies")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Strategy")
    table.add_column("Description")
    table.add_column("Version", justify="right")
    for metadata in registry.list_metadata():
        table.add_row(
            metadata.name,
            f"[{metadata.color}]{metadata.icon} {metadata.display_name}[/]",
            metadata.description,
            metadata.version,
        )
    console.print(table)


def show_sessions(args, settings: EngineSettings, console: Console) -> None:
    db_path = Path(args.db) if args.db else settings.db_path
    repo = get_session_repo(db_path)
    summaries = repo.list_summaries(course_id=args.course, active_only=args.active)
    if not summaries:
        console.print("No sessions found.")
        return

    table = Table(title=f"Sessions ({len(summaries)})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Course", no_wrap=True)
    table.add_column("Strategy")
    table.add_column("Started")
    table.add_column("Status")
    table.add_column("Completion", justify="right")
    table.add_column("Accuracy", justify="right")
    table.add_column("Score", justify="right")
    for summary in summaries:
        table.add_row(
            summary.id,
            summary.course_id,
            summary.strategy,
            summary.start_time.strftime("%Y-%m-%d %H:%M"),
            "[green]active[/]" if summary.is_active else "finished",
            f"{summary.completion_pct:.1f}%",
            f"{summary.accuracy_pct:.1f}%",
            str(summary.total_score),
        )
    console.print(table)


def run_simulation(args, settings: EngineSettings, console: Console) -> None:
    """Run the simulation subcommand."""
    from simulate import generate_course, run_simulation_and_report
    from simulator_models import SimulatedLearnerConfig

    config = SimulatedLearnerConfig(accuracy=args.accuracy, hint_rate=args.hint_rate)
    factory = QuestionFactory(build_question_registry(enabled=settings.question_types))
    strategies = build_strategy_registry(settings.engine.strategy, enabled=settings.strategies)
    course = generate_course(factory, args.questions)

    repository = None
    if args.db:
        repository = get_session_repo(Path(args.db), courses=[course], strategies=strategies)

    console.print("=" * 40, style="bold blue")
    console.print("    Learner Simulator", style="bold blue")
    console.print("=" * 40, style="bold blue")
    console.print()
    console.print(
        f"Strategy '{args.strategy}' over {course.question_count()} questions, "
        f"up to {args.steps} steps..."
    )
    if args.seed is not None:
        console.print(f"Random seed: {args.seed}")
    console.print()

    run_simulation_and_report(
        course=course,
        strategies=strategies,
        config=config,
        strategy_name=args.strategy,
        steps=args.steps,
        output_path=Path(args.output) if args.output else None,
        repository=repository,
        verbose=args.verbose,
        seed=args.seed,
        scorer=make_scorer(settings.engine.scoring),
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point with CLI routing."""
    parser = create_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)
    console = Console()

    try:
        if args.command == "types":
            show_types(settings, console)
        elif args.command == "strategies":
            show_strategies(args, settings, console)
        elif args.command == "sessions":
            show_sessions(args, settings, console)
        elif args.command == "simulate":
            run_simulation(args, settings, console)
        else:
            parser.print_help()
            return 1
    except EngineError as exc:
        logger.debug(f"{type(exc).__name__}: {exc}")
        console.print(f"[red]Error:[/] {escape(str(exc))}")
        return 2
    except pydantic.ValidationError as exc:
        console.print(f"[red]Invalid value:[/] {escape(str(exc))}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
