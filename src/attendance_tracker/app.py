"""Interactive CLI application."""
import logging
import os
from datetime import date, timedelta

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt, FloatPrompt
from rich.table import Table

from attendance_tracker.attendance import backfill_absences, mark_attendance, update_attendance
from attendance_tracker.classrooms import (
    add_class, create_classroom, create_user, get_class_schedule, get_user, get_user_classrooms,
    join_classroom, set_semester,
)
from attendance_tracker.dashboard import (
    get_attendance_color, get_attendance_label, get_attendance_summaries, get_dashboard_data,
    get_todays_classes,
)
from attendance_tracker.db import init_db, DEFAULT_DB_PATH
from attendance_tracker.errors import TrackerError
from attendance_tracker.holidays import add_holiday, list_holidays, load_holidays
from attendance_tracker.seed import seed_all
from attendance_tracker.settings import get_setting, set_setting
from attendance_tracker.workdays import WEEKDAY_NAMES

console = Console()

CURRENT_USER_KEY = "current_user"


def configure_logging() -> None:
    level = os.environ.get("ATTENDANCE_TRACKER_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def show_welcome(name: str):
    console.print(Panel(
        f"[bold]Attendance Tracker[/bold]\n[dim]Welcome back, {name}[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("today", "Mark today's classes"),
        ("correct", "Correct a past mark"),
        ("dashboard", "Semester progress + streak"),
        ("stats", "Per-class attendance"),
        ("semester", "Set semester dates and target"),
        ("classes", "Manage classrooms and classes"),
        ("holidays", "View or add holidays"),
        ("backfill", "Mark unmarked classes absent"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def ensure_user(db_path: str) -> dict:
    user_id = get_setting(db_path, CURRENT_USER_KEY)
    user = get_user(db_path, user_id) if user_id else None
    if user:
        return user
    console.print("[dim]Let's set up your profile.[/dim]")
    name = Prompt.ask("Your name")
    user_id = name.strip().lower().replace(" ", "_") or "student"
    user = get_user(db_path, user_id) or create_user(db_path, user_id, name)
    set_setting(db_path, CURRENT_USER_KEY, user_id)
    return user


def cmd_today(db_path: str, user_id: str, today: date | None = None):
    today = today or date.today()
    classes = get_todays_classes(db_path, user_id, today)
    if not classes:
        console.print("[yellow]No classes scheduled today.[/yellow]")
        return
    for c in classes:
        state = f" [dim](marked {c['attendance_status']})[/dim]" if c["is_checked_in"] else ""
        console.print(f"\n[bold]{c['subject']}[/bold] {c['time']} {c['room']}{state}")
        choice = Prompt.ask("Attendance", choices=["present", "absent", "skip"], default="skip")
        if choice == "skip":
            continue
        reason = None
        if choice == "absent":
            reason = Prompt.ask("Reason (optional)", default="") or None
        mark_attendance(db_path, user_id, c["classroom_id"], c["class_id"], choice, reason, today)
        console.print(f"[green]Marked {choice}.[/green]")


def cmd_correct(db_path: str, user_id: str):
    class_id = Prompt.ask("Class id")
    day = Prompt.ask("Date (YYYY-MM-DD, DD/MM/YYYY or DDMMYYYY)", default=date.today().isoformat())
    status = Prompt.ask("New status", choices=["present", "absent"])
    reason = Prompt.ask("Reason (optional)", default="") if status == "absent" else ""
    update_attendance(db_path, user_id, class_id, day, status, reason or None)
    console.print("[green]Attendance updated.[/green]")


def cmd_dashboard(db_path: str, user_id: str, today: date | None = None):
    data = get_dashboard_data(db_path, user_id, today)
    streak = data["attendance_streak"]
    console.print(Panel(
        f"[bold]{data['user_name']}[/bold]  |  Streak: [bold]{streak.current_streak}[/bold] days"
        f" (best {streak.longest_streak}, {streak.total_days_marked} days marked)",
        title="Attendance Dashboard", border_style="blue",
    ))

    info = data["semester_info"]
    if data["setup_required"]:
        console.print("\n  [yellow]Semester not set up. Use 'semester' to add your dates.[/yellow]")
    else:
        target = info["target_attendance_percentage"]
        current = info["current_performance_percentage"]
        color = get_attendance_color(current, target)
        filled = int(info["progress_percentage"] / 5)
        bar = f"[blue]{'█' * filled}{'░' * (20 - filled)}[/blue]"
        console.print(f"\n  Semester: {info['start_date']} → {info['end_date']}  {bar} "
                      f"{info['progress_percentage']}%")
        console.print(f"  Working days: {info['elapsed_working_days']}/{info['total_working_days']}"
                      f"  ({info['remaining_working_days']} remaining)")
        console.print(f"  Attendance: [{color}]{current}% {get_attendance_label(current, target)}[/{color}]"
                      f"  (target {target}%)")
        console.print(f"  Must attend: [bold]{info['required_attendance_days']}[/bold] more days"
                      f"  |  Can skip: [bold]{info['can_skip_days']}[/bold]"
                      f"  |  Projected: [bold]{info['projected_final_percentage']}%[/bold]")

    if data["todays_classes"]:
        console.print(f"\n  Today's classes: {data['overall_attendance_percentage']}% attended so far")


def cmd_stats(db_path: str, user_id: str):
    summaries = get_attendance_summaries(db_path, user_id)
    if not summaries:
        console.print("[yellow]No attendance marked yet.[/yellow]")
        return
    table = Table(title="Attendance by Class")
    table.add_column("Subject", style="cyan")
    table.add_column("Attended", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Must attend", justify="right")
    table.add_column("Can skip", justify="right")
    table.add_column("Last")
    for s in summaries:
        color = get_attendance_color(s["attendance_percentage"], s["required_attendance_percentage"])
        table.add_row(
            s["subject"] or s["class_id"],
            f"{s['attended_classes']}/{s['total_classes']}",
            f"[{color}]{s['attendance_percentage']}[/{color}]",
            str(s["classes_to_attend"]),
            str(s["classes_can_skip"]),
            f"{s['last_marked_date'] or ''} {s['last_marked_status'] or ''}",
        )
    console.print(table)


def cmd_semester(db_path: str, user_id: str):
    start = Prompt.ask("Semester start date")
    end = Prompt.ask("Semester end date")
    target = FloatPrompt.ask("Attendance target %", default=75.0)
    set_semester(db_path, user_id, start, end, target)
    console.print("[green]Semester saved.[/green]")


def cmd_classes(db_path: str, user_id: str):
    action = Prompt.ask("Action", choices=["list", "create", "join", "add"], default="list")
    if action == "create":
        name = Prompt.ask("Classroom name")
        target = FloatPrompt.ask("Attendance target %", default=75.0)
        classroom_id = create_classroom(db_path, name, user_id, target)
        console.print(f"[green]Created classroom {classroom_id}.[/green]")
    elif action == "join":
        join_classroom(db_path, Prompt.ask("Classroom id"), user_id)
        console.print("[green]Joined.[/green]")
    elif action == "add":
        classrooms = get_user_classrooms(db_path, user_id)
        if not classrooms:
            console.print("[yellow]Create or join a classroom first.[/yellow]")
            return
        classroom_id = Prompt.ask("Classroom id", choices=[c["id"] for c in classrooms])
        cls = add_class(
            db_path, classroom_id,
            name=Prompt.ask("Subject"),
            day=Prompt.ask("Day", choices=WEEKDAY_NAMES),
            instructor=Prompt.ask("Instructor", default=""),
            start_time=Prompt.ask("Start time", default="09:00"),
            end_time=Prompt.ask("End time", default="10:00"),
            location=Prompt.ask("Room", default=""),
        )
        console.print(f"[green]Added {cls.name} ({cls.id}).[/green]")
    else:
        for classroom in get_user_classrooms(db_path, user_id):
            table = Table(title=f"{classroom['name']} ({classroom['id']})")
            table.add_column("Id")
            table.add_column("Subject", style="cyan")
            table.add_column("Day")
            table.add_column("Time")
            table.add_column("Instructor")
            for cls in get_class_schedule(db_path, classroom["id"]):
                table.add_row(cls.id, cls.name, cls.day, f"{cls.start_time}-{cls.end_time}", cls.instructor)
            console.print(table)


def cmd_holidays(db_path: str):
    action = Prompt.ask("Action", choices=["list", "add"], default="list")
    if action == "add":
        month = int(Prompt.ask("Month (1-12)"))
        day = int(Prompt.ask("Day"))
        year = Prompt.ask("Year (blank = every year)", default="")
        name = Prompt.ask("Name", default="")
        added = add_holiday(db_path, month, day, name, int(year) if year else None)
        console.print("[green]Holiday added.[/green]" if added else "[yellow]Already listed.[/yellow]")
        return
    table = Table(title="Holidays")
    table.add_column("Date")
    table.add_column("Name")
    for h in list_holidays(db_path):
        when = f"{h['year']}-{h['month']:02d}-{h['day']:02d}" if h["year"] else f"every {h['month']:02d}-{h['day']:02d}"
        table.add_row(when, h["name"])
    console.print(table)


def cmd_backfill(db_path: str, user_id: str):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    day = Prompt.ask("Date to backfill", default=yesterday)
    marked = backfill_absences(db_path, user_id, day, holidays=load_holidays(db_path))
    console.print(f"[green]Marked {len(marked)} class(es) absent.[/green]")


def main():
    configure_logging()
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    seed_all(db_path)
    user = ensure_user(db_path)
    user_id = user["id"]

    show_welcome(user["nickname"] or user["name"])

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="today").strip().lower()
        try:
            if choice == "today":
                cmd_today(db_path, user_id)
            elif choice == "correct":
                cmd_correct(db_path, user_id)
            elif choice == "dashboard":
                cmd_dashboard(db_path, user_id)
            elif choice == "stats":
                cmd_stats(db_path, user_id)
            elif choice == "semester":
                cmd_semester(db_path, user_id)
            elif choice == "classes":
                cmd_classes(db_path, user_id)
            elif choice == "holidays":
                cmd_holidays(db_path)
            elif choice == "backfill":
                cmd_backfill(db_path, user_id)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]See you in class![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except (TrackerError, ValueError) as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
