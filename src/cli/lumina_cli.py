"""
Lumina CLI - learning style profiles from the terminal.

Operator tool for the adaptive learning-style engine:
1. Evidence - record behavioral observations into the local cache
2. Profiles - resolve, recompute and inspect learner profiles
3. Tutoring - print the personalization directive for the tutor prompt

Usage:
    lumina record visual 1.5 -u alice -s biology
    lumina question "Can you draw the Krebs cycle?" -u alice
    lumina profile -u alice
    lumina directive -u alice -s biology
    lumina recompute -u alice
    lumina class-report
"""

import asyncio
import sys
from typing import Annotated, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config import Settings, get_settings
from src.db.database import init_db
from src.learning_style.bridge import ProfileBridge, ProfileResolution, ProfileSource
from src.learning_style.cache import BehaviorCache
from src.learning_style.composer import compose_directive, prompt_state
from src.learning_style.exceptions import MalformedObservationError
from src.learning_style.models import MODALITY_ORDER, STYLE_LABELS, LearningStyleProfile
from src.learning_style.reports import class_style_aggregate, teaching_recommendation
from src.learning_style.repository import ProfileRepository, RestProfileRepository, get_repository
from src.learning_style.signals import parse_data_point, question_asked

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="lumina",
    help="Lumina - adaptive learning style profiles",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

NOT_ENOUGH_DATA = (
    "Not enough activity yet. Lumina needs at least 20 interactions "
    "before a learning profile becomes available."
)

UserOption = Annotated[
    str, typer.Option("--user", "-u", envvar="LUMINA_USER", help="Learner identity")
]
SubjectOption = Annotated[
    Optional[str], typer.Option("--subject", "-s", help="Subject identifier")
]


def configure_logging(settings: Settings, verbose: bool = False) -> None:
    """Route loguru to stderr (and optionally a rotating file)."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="10 MB", retention=5)


def _cache(settings: Settings, user: str) -> BehaviorCache:
    return BehaviorCache.for_user(
        user, settings.behavior_cache_dir, limit=settings.behavior_cache_limit
    )


async def _with_repository(settings: Settings, action):
    """Run ``action(repository)`` and release HTTP clients afterwards."""
    repository: ProfileRepository = get_repository(settings)
    try:
        return await action(repository)
    finally:
        if isinstance(repository, RestProfileRepository):
            await repository.close()


def _scores_table(profile: LearningStyleProfile, title: str) -> Table:
    table = Table(title=title)
    table.add_column("Modality")
    table.add_column("Score", justify="right")
    for subject in sorted(profile.subject_profiles):
        table.add_column(subject, justify="right")

    for modality in MODALITY_ORDER:
        row = [STYLE_LABELS[modality.value], f"{profile.scores.get(modality)}%"]
        row.extend(
            f"{profile.subject_profiles[subject].get(modality)}%"
            for subject in sorted(profile.subject_profiles)
        )
        table.add_row(*row)
    return table


def _render_resolution(user_id: str, resolution: ProfileResolution) -> None:
    if resolution.profile is None:
        console.print(Panel(NOT_ENOUGH_DATA, title="Learning profile", border_style="yellow"))
        return

    profile = resolution.profile
    secondary = STYLE_LABELS[profile.secondary_style.value] if profile.secondary_style else "-"
    source_note = {
        ProfileSource.LOCAL: "fresh from local activity",
        ProfileSource.REMOTE: "stored profile (local activity below threshold)",
    }[resolution.source]

    header = (
        f"[bold cyan]{user_id}[/]\n"
        f"Dominant: [bold]{STYLE_LABELS[profile.dominant_style.value]}[/]\n"
        f"Secondary: {secondary}\n"
        f"Confidence: {profile.confidence}% ({profile.total_interactions} interactions, "
        f"{prompt_state(profile).value})\n"
        f"Source: {source_note}"
    )
    if resolution.source is ProfileSource.LOCAL and not resolution.persisted:
        header += "\n[yellow]Durable store unavailable; profile not saved[/]"
    console.print(Panel(header, title="Learning profile", border_style="cyan"))
    console.print(_scores_table(profile, "Modality breakdown"))


# =============================================================================
# Evidence Commands
# =============================================================================


@app.command()
def record(
    modality: Annotated[str, typer.Argument(help="visual, logical, verbal, kinesthetic or conceptual")],
    weight: Annotated[float, typer.Argument(help="Evidence strength; negative for disengagement")],
    user: UserOption,
    subject: SubjectOption = None,
) -> None:
    """
    Record one behavioral observation in the local cache.

    Examples:
        lumina record visual 2 -u alice
        lumina record -u alice -s physics -- logical -1.5
    """
    settings = get_settings()
    try:
        point = parse_data_point({"modality": modality, "weight": weight, "subject": subject})
    except MalformedObservationError as e:
        console.print(Panel(f"[bold red]Rejected observation[/]\n{e}", border_style="red"))
        raise typer.Exit(1)

    cache = _cache(settings, user)
    cache.add(point)
    logger.debug(f"Recorded {point.modality.value} ({point.weight:+}) for {user}")
    console.print(
        f"[green]Recorded[/] {point.modality.value} weight {point.weight:+g}"
        f"{f' in {point.subject}' if point.subject else ''} "
        f"[dim]({len(cache.points())} cached, {cache.total_interactions} total)[/]"
    )


@app.command()
def question(
    text: Annotated[str, typer.Argument(help="Question the learner asked")],
    user: UserOption,
    subject: SubjectOption = None,
) -> None:
    """Classify a learner question and record it as evidence."""
    settings = get_settings()
    point = question_asked(text, subject)
    _cache(settings, user).add(point)
    logger.debug(f"Classified question from {user} as {point.modality.value}")
    console.print(
        f"[green]Recorded[/] question as {point.modality.value} "
        f"({point.details['question_type']})"
    )


# =============================================================================
# Profile Commands
# =============================================================================


@app.command()
def profile(user: UserOption) -> None:
    """Show the learner's current learning style profile."""
    settings = get_settings()
    points = _cache(settings, user).points()

    resolution = asyncio.run(
        _with_repository(settings, lambda repo: ProfileBridge(repo).resolve(user, points))
    )
    _render_resolution(user, resolution)


@app.command()
def recompute(user: UserOption) -> None:
    """Recompute the profile from local activity and save it."""
    settings = get_settings()
    points = _cache(settings, user).points()

    resolution = asyncio.run(
        _with_repository(settings, lambda repo: ProfileBridge(repo).recompute(user, points))
    )
    _render_resolution(user, resolution)


@app.command()
def directive(user: UserOption, subject: SubjectOption = None) -> None:
    """Print the personalization directive for the tutor prompt."""
    settings = get_settings()
    points = _cache(settings, user).points()

    resolution = asyncio.run(
        _with_repository(settings, lambda repo: ProfileBridge(repo).resolve(user, points))
    )
    typer.echo(compose_directive(resolution.profile, subject=subject))


@app.command("class-report")
def class_report() -> None:
    """Summarize stored profiles for a teacher."""
    settings = get_settings()
    profiles = asyncio.run(_with_repository(settings, lambda repo: repo.list_all()))

    if not profiles:
        console.print("[yellow]No stored learning profiles yet.[/]")
        return

    table = Table(title="Students")
    table.add_column("Student")
    table.add_column("Dominant")
    table.add_column("Confidence", justify="right")
    table.add_column("Recommendation")
    for user_id, stored in sorted(profiles.items()):
        table.add_row(
            user_id,
            STYLE_LABELS[stored.dominant_style.value],
            f"{stored.confidence}%",
            teaching_recommendation(stored),
        )
    console.print(table)

    aggregate = class_style_aggregate(profiles.values())
    if aggregate is None:
        console.print("[dim]No student has enough activity for a class-wide breakdown.[/]")
        return
    breakdown = ", ".join(
        f"{STYLE_LABELS[m.value]} {aggregate.scores.get(m)}%" for m in MODALITY_ORDER
    )
    console.print(
        Panel(breakdown, title=f"Class average ({aggregate.profiled_students} profiled)")
    )


@app.command("init-db")
def init_db_command() -> None:
    """Create the learning_style_profiles table."""
    init_db()
    console.print("[green]Database initialized[/]")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """
    Lumina - adaptive learning style profiles.

    \b
    Quick Start:
      lumina record visual 2 -u alice    # Record evidence
      lumina profile -u alice            # Show profile
      lumina directive -u alice          # Tutor directive
    """
    configure_logging(get_settings(), verbose=verbose)


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
