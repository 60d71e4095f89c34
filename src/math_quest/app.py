"""Interactive CLI application."""
import time
from datetime import datetime

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from math_quest.badges import catalog_by_id
from math_quest.config import Settings, configure_logging, get_settings
from math_quest.dashboard import (
    get_accuracy_color, get_accuracy_label, get_operator_scores, get_study_stats,
    get_weak_operators, sorted_mistakes,
)
from math_quest.db import init_db, load_state, reset_state, save_state
from math_quest.rewards import InsufficientPointsError, can_afford, load_rewards, redeem
from math_quest.session import (
    StageSession, build_boss_challenge, build_review_batch, build_stage_batch,
)
from math_quest.srs import MASTERY_THRESHOLD
from math_quest.stages import MAX_STAGE, REVIEW_STAGE, config_for, is_boss_stage, is_unlocked

console = Console()

EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """Raised when the player leaves a stage early."""


def session_prompt(prompt: str, **kwargs) -> str:
    value = Prompt.ask(prompt, **kwargs)
    if value.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return value


def session_int_prompt(prompt: str, **kwargs) -> int:
    while True:
        value = session_prompt(prompt, **kwargs)
        try:
            return int(value.strip())
        except ValueError:
            console.print("[red]Please type a whole number (or 'q' to leave).[/red]")


def show_welcome():
    console.print(Panel(
        "[bold]Math Quest[/bold]\n[dim]100 stages of arithmetic adventure[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("play", "Play a stage"),
        ("boss", "Boss challenge"),
        ("review", "Mistake bootcamp"),
        ("mistakes", "Show the mistake book"),
        ("dashboard", "Level, stars and stats"),
        ("rewards", "Spend points on rewards"),
        ("reset", "Start over"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def stars_text(stars: int) -> str:
    return "[yellow]" + "★" * stars + "[/yellow]" + "[dim]" + "☆" * (3 - stars) + "[/dim]"


def run_stage(db_path: str, session: StageSession, settings: Settings):
    """Ask every question in the session, saving after each answer."""
    state = load_state(db_path, settings.player)
    badge_names = catalog_by_id()
    total = len(session.questions)
    while not session.finished:
        question = session.current
        title = f"Question {session.index + 1}/{total}"
        if question.is_boss:
            title = "BOSS"
        elif question.is_review:
            title += " (review)"
        console.print(Panel(question.prompt, title=title,
                            border_style="red" if question.is_boss else "cyan"))
        started = time.monotonic()
        answer = session_int_prompt("Your answer")
        elapsed_ms = int((time.monotonic() - started) * 1000)

        before = state
        result = session.submit(state, answer, elapsed_ms, datetime.now())
        state = result.state
        save_state(db_path, state, settings.player)

        if result.correct:
            streak = f" Streak {state.current_streak}!" if state.current_streak >= 3 else ""
            console.print(f"[green]Correct![/green]{streak}")
        else:
            console.print(f"[red]Not quite.[/red] Answer: [green]{question.answer}[/green]")
        if state.level > before.level:
            console.print(f"[bold magenta]Level up! You are now level {state.level}.[/bold magenta]")
        for badge_id in state.badges[len(before.badges):]:
            badge = badge_names.get(badge_id)
            console.print(f"[bold yellow]New badge:[/bold yellow] {badge.name if badge else badge_id}")
        console.print()

    result = session.finish(state, datetime.now())
    save_state(db_path, result.state, settings.player)
    show_stage_summary(session, result)
    return result


def show_stage_summary(session: StageSession, result) -> None:
    lines = [f"{result.correct_count} / {result.total} correct"]
    if session.is_review:
        lines.append("[dim]Bootcamp round: keep going until the mistake book is empty![/dim]")
    else:
        lines.insert(0, stars_text(result.stars))
        if result.unlock_next:
            lines.append(f"[green]Stage {result.state.current_stage} unlocked![/green]")
    console.print(Panel("\n".join(lines), title="Stage complete", border_style="green"))


def cmd_play(db_path: str, settings: Settings):
    state = load_state(db_path, settings.player)
    stage = IntPrompt.ask("Stage", default=min(state.current_stage, MAX_STAGE))
    if not is_unlocked(stage, state.current_stage):
        console.print(f"[yellow]Stage {stage} is locked. Clear stage {state.current_stage} first![/yellow]")
        return
    config = config_for(stage)
    boss = " [red](BOSS STAGE)[/red]" if is_boss_stage(stage) else ""
    console.print(f"\n[bold]Stage {stage}[/bold]{boss} - [cyan]{config.description}[/cyan]\n")
    questions = build_stage_batch(
        state, stage, datetime.now(),
        size=settings.questions_per_stage,
        review_slots=settings.review_slots,
        review_probability=settings.review_probability,
    )
    run_stage(db_path, StageSession(stage, questions), settings)


def cmd_boss(db_path: str, settings: Settings):
    state = load_state(db_path, settings.player)
    stage = min(state.current_stage, MAX_STAGE)
    console.print(f"\n[bold red]Boss challenge[/bold red] at stage {stage}\n")
    run_stage(db_path, StageSession(stage, build_boss_challenge()), settings)


def cmd_review(db_path: str, settings: Settings):
    state = load_state(db_path, settings.player)
    questions = build_review_batch(state, datetime.now(), size=settings.review_batch_size)
    if not questions:
        console.print("[green]Your mistake book is empty. Nothing to practice![/green]")
        return
    console.print(f"\n[bold magenta]Mistake bootcamp[/bold magenta] - {len(questions)} questions\n")
    run_stage(db_path, StageSession(REVIEW_STAGE, questions), settings)


def cmd_mistakes(db_path: str, settings: Settings):
    state = load_state(db_path, settings.player)
    now = datetime.now()
    mistakes = sorted_mistakes(state, now)
    if not mistakes:
        console.print("[green]No mistakes recorded![/green]")
        return
    table = Table(title="Mistake Book")
    table.add_column("Problem")
    table.add_column("Your answer", justify="right")
    table.add_column("Answer", justify="right")
    table.add_column("Proficiency")
    table.add_column("Next review")
    for m in mistakes:
        due = "[red]now[/red]" if m.is_due(now) else m.next_review_time.strftime("%b %d %H:%M")
        table.add_row(
            m.question.prompt,
            str(m.user_answer),
            str(m.question.answer),
            "●" * m.proficiency + "○" * (MASTERY_THRESHOLD - m.proficiency),
            due,
        )
    console.print(table)


def cmd_dashboard(db_path: str, settings: Settings):
    state = load_state(db_path, settings.player)
    stats = get_study_stats(state, datetime.now())
    color = get_accuracy_color(stats["accuracy"])

    console.print(Panel(
        f"[bold]Level {stats['level']}[/bold]  |  Stage {stats['current_stage']} of {stats['max_stage']}"
        f"  |  {stats['points']} points",
        title="Math Quest Dashboard", border_style="blue",
    ))

    bar_filled = int(stats["xp_progress"] / 5)
    bar = f"[magenta]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/magenta]"
    console.print(f"\n  XP: [bold]{stats['xp']}[/bold] / {stats['next_level_xp']} {bar}")
    console.print(f"  Accuracy: [{color}]{stats['accuracy']}% {get_accuracy_label(stats['accuracy'])}[/{color}]\n")

    table = Table(title="Operators")
    table.add_column("Operator", style="cyan")
    table.add_column("Attempts", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Avg time", justify="right")
    for s in get_operator_scores(state):
        sc_color = get_accuracy_color(s["score"])
        table.add_row(
            s["operator"].value,
            str(s["attempts"]),
            f"[{sc_color}]{s['score']}%[/{sc_color}]",
            f"{s['avg_seconds']}s",
        )
    console.print(table)

    console.print(f"\n  Stars: [bold]{stats['total_stars']}[/bold]  |  "
                  f"Badges: [bold]{stats['badges']}[/bold]  |  "
                  f"Best streak: [bold]{stats['max_streak']}[/bold]  |  "
                  f"Bosses: [bold]{stats['bosses_defeated']}[/bold]  |  "
                  f"Today: [bold]{stats['today']}[/bold]")
    if stats["mistakes_due"]:
        console.print(f"\n  [yellow]{stats['mistakes_due']} mistakes are due for review. Try 'review'![/yellow]")

    weak = get_weak_operators(state)
    if weak:
        console.print(f"\n  [yellow]Recommendation: practice {weak[0]['operator'].value} problems[/yellow]")


def cmd_rewards(db_path: str, settings: Settings):
    state = load_state(db_path, settings.player)
    rewards = load_rewards()
    table = Table(title=f"Rewards ({state.points} points)")
    table.add_column("#", justify="right")
    table.add_column("Reward")
    table.add_column("Cost", justify="right")
    for i, r in enumerate(rewards, 1):
        cost_color = "green" if can_afford(state, r) else "dim"
        table.add_row(str(i), f"{r.icon} {r.name}", f"[{cost_color}]{r.cost}[/{cost_color}]")
    console.print(table)
    choice = Prompt.ask("Redeem which reward? (Enter to skip)", default="")
    if not choice.strip():
        return
    if not choice.strip().isdigit() or not 1 <= int(choice) <= len(rewards):
        console.print(f"[red]Pick a number from 1 to {len(rewards)}.[/red]")
        return
    reward = rewards[int(choice) - 1]
    if not Confirm.ask(f"Spend {reward.cost} points on {reward.name}?"):
        return
    try:
        state = redeem(state, reward, datetime.now())
    except InsufficientPointsError:
        console.print("[yellow]Not enough points yet. Keep solving![/yellow]")
        return
    save_state(db_path, state, settings.player)
    console.print(f"[green]Redeemed {reward.name}! Go tell a grown-up.[/green]")


def cmd_reset(db_path: str, settings: Settings):
    if Confirm.ask("Reset all progress? This cannot be undone", default=False):
        reset_state(db_path, settings.player)
        console.print("[dim]Progress reset.[/dim]")


def main():
    settings = get_settings()
    configure_logging(settings)
    db_path = settings.db_path
    init_db(db_path)

    show_welcome()

    commands = {
        "play": cmd_play,
        "boss": cmd_boss,
        "review": cmd_review,
        "mistakes": cmd_mistakes,
        "dashboard": cmd_dashboard,
        "rewards": cmd_rewards,
        "reset": cmd_reset,
    }
    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="play").strip().lower()
        if choice in ("quit", "exit", "q"):
            console.print("[dim]See you next adventure![/dim]")
            break
        command = commands.get(choice)
        if command is None:
            console.print("[red]Unknown command. Try again.[/red]")
            continue
        try:
            command(db_path, settings)
        except SessionExitRequested:
            console.print("[dim]Back to the menu. Your progress is saved.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
