import typer
from rich.console import Console
from rich.table import Table
from rich.markup import escape
from typing import Optional
from datetime import datetime
import json
from pydantic import ValidationError

from acca_prep.database import SessionLocal, init_db
from acca_prep.crud import add_questions, record_study_session, get_study_sessions
from acca_prep.errors import SchedulerError
from acca_prep.logging import configure_logging
from acca_prep.question_bank_parser import QuestionBankParser
from acca_prep.scheduler import ReviewScheduler
from acca_prep.schemas import QuestionCreate, ReviewOutcome, ReviewRecordResponse, StudySessionCreate

app = typer.Typer(help="ACCA Prep CLI - spaced repetition review for exam questions")
console = Console()

@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output")):
    """Configure logging before any command runs"""
    configure_logging(level="DEBUG" if verbose else None)

def fail(message: str):
    console.print(f"[red]✗[/red] {escape(message)}")
    raise typer.Exit(code=1)

def parse_timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        fail(f"Invalid timestamp {value!r}, expected ISO format (e.g., 2026-03-01T09:00:00+00:00)")

@app.command()
def init():
    """Initialize database tables"""
    init_db()
    console.print("[green]✓[/green] Database initialized successfully!")

@app.command()
def reset_db():
    """Delete all data and reinitialize database (WARNING: irreversible!)"""
    confirm = typer.confirm("⚠️  This will DELETE ALL DATA. Are you sure?")
    if not confirm:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    from acca_prep.database import engine, Base
    import acca_prep.models  # noqa: F401
    console.print("[yellow]Dropping all tables...[/yellow]")
    Base.metadata.drop_all(bind=engine)
    console.print("[yellow]Recreating tables...[/yellow]")
    Base.metadata.create_all(bind=engine)
    console.print("[green]✓[/green] Database reset complete! All data deleted.")

@app.command()
def import_questions(file_path: str = typer.Argument(..., help="Question bank (.csv, .xlsx or .json)")):
    """Import or update question bank entries"""
    try:
        raw_items = QuestionBankParser.auto_parse(file_path)
    except (ValueError, OSError) as e:
        fail(f"Could not read {file_path}: {e}")
    console.print(f"[green]✓[/green] Extracted {len(raw_items)} questions")

    db = SessionLocal()
    try:
        written = add_questions(db, [QuestionCreate(**item) for item in raw_items])
        console.print(f"[green]✓[/green] Saved {written} questions")
    except SchedulerError as e:
        fail(str(e))
    finally:
        db.close()

@app.command()
def review(
    user_id: str,
    item_id: str,
    correct: bool = typer.Option(..., "--correct/--incorrect", help="Whether the answer was right"),
    as_json: bool = typer.Option(False, "--json", help="Print the updated record as JSON")
):
    """Record one answered question"""
    db = SessionLocal()
    try:
        record = ReviewScheduler(db).record_review(user_id, item_id, correct)
        if as_json:
            typer.echo(ReviewRecordResponse.model_validate(record).model_dump_json(indent=2))
            return
        console.print(f"[green]✓[/green] Review recorded for {item_id}")
        console.print(f"  Next review: {record.next_review_at:%Y-%m-%d %H:%M} UTC ({record.interval_days} days)")
        console.print(f"  Ease factor: {record.ease_factor:.2f}, repetitions: {record.repetitions}")
    except SchedulerError as e:
        fail(str(e))
    finally:
        db.close()

@app.command()
def review_batch(
    user_id: str,
    file_path: str = typer.Argument(..., help='JSON list of {"item_id": ..., "is_correct": ...}')
):
    """Record a batch of answers in order"""
    try:
        with open(file_path) as f:
            entries = json.load(f)
        if not isinstance(entries, list):
            raise ValueError("expected a JSON list of outcomes")
        outcomes = [ReviewOutcome.model_validate(entry) for entry in entries]
    except (OSError, ValueError, ValidationError) as e:
        fail(f"Could not read {file_path}: {e}")

    db = SessionLocal()
    try:
        records = ReviewScheduler(db).record_batch_reviews(user_id, outcomes)
        console.print(f"[green]✓[/green] Recorded {len(records)} reviews")
    except SchedulerError as e:
        fail(f"{e} (reviews before the failing one were saved)")
    finally:
        db.close()

@app.command()
def due(
    user_id: str,
    as_of: Optional[str] = typer.Option(None, help="ISO timestamp to evaluate at. Default: now")
):
    """List questions due for review, most overdue first"""
    as_of_ts = parse_timestamp(as_of) if as_of else None
    db = SessionLocal()
    try:
        item_ids = ReviewScheduler(db).get_due_items(user_id, as_of_ts)
        if not item_ids:
            console.print("[yellow]Nothing due for review.[/yellow]")
            return

        console.print(f"\n[bold]{len(item_ids)} questions due for {user_id}:[/bold]")
        for item_id in item_ids:
            console.print(f"  - {item_id}")
    except SchedulerError as e:
        fail(str(e))
    finally:
        db.close()

@app.command()
def stats(user_id: str):
    """Show review summary counters"""
    db = SessionLocal()
    try:
        summary = ReviewScheduler(db).get_review_stats(user_id)
        if summary is None:
            console.print(f"[yellow]No reviews recorded for {user_id} yet.[/yellow]")
            return

        console.print("\n[bold]Review Stats[/bold]")
        console.print(f"  Due now: {summary.due_count}")
        console.print(f"  Questions reviewed: {summary.total_reviewed}")
        console.print(f"  Average accuracy: {summary.avg_accuracy * 100:.1f}%")
    except SchedulerError as e:
        fail(str(e))
    finally:
        db.close()

@app.command()
def mastery(user_id: str, paper: str):
    """Show per-unit mastery for a paper (weakest first)"""
    db = SessionLocal()
    try:
        units = ReviewScheduler(db).get_topic_mastery(user_id, paper)
        if not units:
            console.print(f"[yellow]No reviewed questions for paper {paper}.[/yellow]")
            return

        table = Table(title=f"{paper} mastery")
        table.add_column("Unit", style="cyan")
        table.add_column("Questions", justify="right")
        table.add_column("Accuracy", justify="right")
        table.add_column("Avg ease", justify="right")
        table.add_column("Due", justify="right")
        table.add_column("Mastery", justify="right")
        table.add_column("Status")

        colors = {"struggling": "red", "learning": "yellow", "mastered": "green"}
        for unit in units:
            table.add_row(
                unit.unit_code,
                str(unit.count),
                f"{unit.accuracy:.1f}%",
                f"{unit.avg_ease_factor:.2f}",
                str(unit.due_count),
                f"{unit.mastery:.0f}",
                f"[{colors[unit.status]}]{unit.status}[/{colors[unit.status]}]"
            )
        console.print(table)
    except SchedulerError as e:
        fail(str(e))
    finally:
        db.close()

@app.command()
def streak(user_id: str):
    """Show today's progress and the current streak"""
    db = SessionLocal()
    try:
        data = ReviewScheduler(db).get_streak_data(user_id)
        console.print(f"\n[bold]Streak:[/bold] {data.current_streak} days")
        console.print(f"  Reviewed today: {data.reviewed_today}/{data.daily_target}")
    except SchedulerError as e:
        fail(str(e))
    finally:
        db.close()

@app.command()
def log_session(
    user_id: str,
    session_type: str = typer.Option("quiz", "--type", help="quiz, flashcards or review"),
    correct: int = typer.Option(..., prompt="Questions answered correctly"),
    incorrect: int = typer.Option(..., prompt="Questions answered incorrectly"),
    notes: Optional[str] = typer.Option(None, help="Free-form notes")
):
    """Log a study session's totals"""
    try:
        data = StudySessionCreate(
            user_id=user_id,
            session_type=session_type,
            questions_correct=correct,
            questions_incorrect=incorrect,
            notes=notes
        )
    except ValidationError as e:
        fail(f"Invalid session: {e}")

    db = SessionLocal()
    try:
        session = record_study_session(db, **data.model_dump())
        console.print(f"[green]✓[/green] Session logged! ID: {session.id}")
    except SchedulerError as e:
        fail(str(e))
    finally:
        db.close()

@app.command()
def sessions(user_id: str, limit: int = typer.Option(20, help="Number of sessions to show")):
    """Show recent study sessions"""
    db = SessionLocal()
    try:
        rows = get_study_sessions(db, user_id, limit)
        if not rows:
            console.print(f"[yellow]No sessions logged for {user_id}.[/yellow]")
            return

        table = Table(title="Study Sessions")
        table.add_column("Date", style="cyan")
        table.add_column("Type")
        table.add_column("Answered", justify="right")
        table.add_column("Correct", justify="right", style="green")
        table.add_column("Incorrect", justify="right", style="red")

        for row in rows:
            table.add_row(
                row.started_at.strftime("%Y-%m-%d %H:%M"),
                row.session_type,
                str(row.questions_answered),
                str(row.questions_correct),
                str(row.questions_incorrect)
            )
        console.print(table)
    except SchedulerError as e:
        fail(str(e))
    finally:
        db.close()

if __name__ == "__main__":
    app()
