"""CLI commands for the YKS tracker.

Commands:
- add: Log a new practice exam (interactive or from a JSON file)
- list: Exam history, newest first
- show: Per-subject breakdown of one exam
- delete: Permanently delete an exam
- dashboard: Exam count, recent average and recent trend
- trend: Net series of one subject selection
- calendar: Days of a month with at least one exam
- subjects: Subjects of an exam category
"""

import calendar as calendar_module
import json
import os
from datetime import date, datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from yks_tracker.config.app_config import AppConfig, ConfigError, load_app_config
from yks_tracker.config.subjects import ExamCategory, get_subjects
from yks_tracker.core.analysis import (
    dashboard_summary,
    exam_days,
    filter_by_category,
    history,
    subject_breakdown,
    subject_series,
)
from yks_tracker.core.exam_form import (
    ExamFormError,
    build_exam_record,
    parse_draft,
    preview_rows,
)
from yks_tracker.core.exam_repository import ExamStore, StoreResult
from yks_tracker.core.scoring import blank_count, net_score, total_net
from yks_tracker.core.taxonomy import display_name, iter_leaves, selectable_subjects
from yks_tracker.storage.backends import create_storage
from yks_tracker.utils.formatting import format_date, format_net, truncate

app = typer.Typer(
    name="yks",
    help="Personal tracker for YKS practice exam results.",
    no_args_is_help=True,
)

console = Console()


def _load_config() -> AppConfig:
    """Load the app config, or exit on a bad config file."""
    try:
        return load_app_config()
    except ConfigError as e:
        console.print(f"[red]✗ Geçersiz yapılandırma: {e}[/red]")
        raise typer.Exit(code=1)


def _open_store() -> ExamStore:
    """Open the exam store configured for this run."""
    config = _load_config()
    data_dir = os.environ.get("YKS_DATA_DIR")
    storage = create_storage(config.storage, Path(data_dir) if data_dir else None)
    store = ExamStore(storage)

    for warning in store.load_warnings:
        console.print(f"[yellow]⚠ Kayıt atlandı: {warning}[/yellow]")

    return store


def _parse_category(value: str) -> ExamCategory:
    try:
        return ExamCategory(value.upper())
    except ValueError:
        valid = ", ".join(c.value for c in ExamCategory)
        console.print(f"[red]✗ Bilinmeyen deneme türü: {value} (geçerli: {valid})[/red]")
        raise typer.Exit(code=1)


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[red]✗ Geçersiz tarih: {value} (beklenen: YYYY-MM-DD)[/red]")
        raise typer.Exit(code=1)


def _report_store_result(result: StoreResult) -> None:
    """Print a store mutation outcome; exit 1 if it was rejected."""
    if not result.success:
        console.print(f"[red]✗ {result.message}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ {result.message}[/green]")
    for warning in result.warnings:
        console.print(f"  [yellow]• {warning}[/yellow]")


def _net_style(value: float) -> str:
    return "green" if value >= 0 else "red"


# =============================================================================
# EXAM ENTRY
# =============================================================================


def _ask_count(label: str) -> str:
    return typer.prompt(label, default="", show_default=False).strip()


def _ask_results(category: ExamCategory) -> dict[str, dict[str, str]]:
    """Prompt correct/wrong for every leaf subject, echoing the live net."""
    results: dict[str, dict[str, str]] = {}
    current_group = None

    for path, node in iter_leaves(get_subjects(category)):
        group = path.rsplit(".", 1)[0] if "." in path else None
        if group and group != current_group:
            console.print(f"\n[bold]{display_name(group, get_subjects(category))}[/bold]")
        current_group = group

        correct = _ask_count(f"{node.name} doğru")
        wrong = _ask_count(f"{node.name} yanlış")
        if not correct and not wrong:
            continue

        net = net_score(correct, wrong)
        blank = blank_count(node.question_count or 0, correct, wrong)
        console.print(f"  [{_net_style(net)}]{format_net(net)} Net[/{_net_style(net)}] [dim]| {blank} Boş[/dim]")
        if blank < 0:
            console.print(
                f"  [yellow]⚠ Doğru + yanlış soru sayısını ({node.question_count}) aşıyor[/yellow]"
            )
        results[path] = {"correct": correct, "wrong": wrong}

    return results


def _load_results_file(path: Path) -> dict:
    if not path.exists():
        console.print(f"[red]✗ Dosya bulunamadı: {path}[/red]")
        raise typer.Exit(code=1)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        console.print(f"[red]✗ Dosya okunamadı: {e}[/red]")
        raise typer.Exit(code=1)

    if not isinstance(data, dict):
        console.print("[red]✗ Dosya bir JSON nesnesi içermeli[/red]")
        raise typer.Exit(code=1)
    return data.get("results", data)


@app.command()
def add(
    name: str = typer.Argument(..., help="Exam name (e.g. 'Özdebir 1')"),
    category: str = typer.Option("TYT", "--category", "-c", help="Exam category: TYT, AYT"),
    from_file: str | None = typer.Option(
        None, "--from-file", "-f", help="JSON file with {path: {correct, wrong}} results"
    ),
) -> None:
    """Log a new practice exam.

    Without --from-file, asks correct and wrong counts for every subject.
    Empty answers count as 0.
    """
    exam_category = _parse_category(category)
    store = _open_store()

    if from_file:
        results = _load_results_file(Path(from_file).expanduser().resolve())
    else:
        console.print(f"[blue]{exam_category.value} sonuçlarını girin (boş = 0)[/blue]")
        results = _ask_results(exam_category)

    try:
        draft = parse_draft({"name": name, "category": exam_category, "results": results})
        record = build_exam_record(draft, existing_ids=store.ids())
    except ExamFormError as e:
        console.print(f"[red]✗ Form hatası: {e}[/red]")
        raise typer.Exit(code=1)

    _report_store_result(store.append(record))
    console.print(f"  [dim]id:[/dim]  {record.id}")
    console.print(f"  [dim]net:[/dim] {format_net(total_net(record))}")


# =============================================================================
# HISTORY
# =============================================================================


@app.command(name="list")
def list_exams(
    category: str | None = typer.Option(None, "--category", "-c", help="Only TYT or AYT"),
    day: str | None = typer.Option(None, "--day", "-d", help="Only exams of a day (YYYY-MM-DD)"),
) -> None:
    """List saved exams, newest first."""
    store = _open_store()
    records = list(store.records)
    if category:
        records = filter_by_category(records, _parse_category(category))

    selected_day = _parse_day(day) if day else None
    exams = history(records, selected_day)

    if selected_day:
        console.print(f"\n[bold]{format_date(selected_day)} için sonuçlar:[/bold]")

    if not exams:
        console.print("[yellow]Henüz deneme eklenmemiş[/yellow]")
        console.print("  Kullanım: yks add <isim> --category TYT")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan")
    table.add_column("Tarih")
    table.add_column("Deneme", width=30)
    table.add_column("Tür", justify="center")
    table.add_column("Net", justify="right")

    for exam in exams:
        net = total_net(exam)
        table.add_row(
            str(exam.id),
            format_date(exam.date),
            truncate(exam.name, 30),
            exam.category.value,
            f"[{_net_style(net)}]{format_net(net)}[/{_net_style(net)}]",
        )

    console.print(table)


@app.command()
def show(
    exam_id: int = typer.Argument(..., help="Exam ID (see 'yks list')"),
) -> None:
    """Show the per-subject breakdown of an exam."""
    store = _open_store()
    exam = store.get(exam_id)
    if exam is None:
        console.print(f"[red]✗ Deneme bulunamadı: {exam_id}[/red]")
        raise typer.Exit(code=1)

    header = (
        f"[bold]{format_net(total_net(exam))}[/bold] Toplam Net\n"
        f"{format_date(exam.date)} | {exam.category.value}"
    )
    console.print(Panel(header, title=f"[bold]{exam.name}[/bold]", expand=False))

    rows = subject_breakdown(exam, get_subjects(exam.category))
    if not rows:
        console.print("[yellow]Bu denemede ders sonucu yok[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Ders", style="cyan")
    table.add_column("D", justify="right")
    table.add_column("Y", justify="right")
    table.add_column("Net", justify="right")

    for row in rows:
        table.add_row(
            row.name,
            "-" if row.correct is None else str(row.correct),
            "-" if row.wrong is None else str(row.wrong),
            f"[{_net_style(row.net)}]{format_net(row.net)}[/{_net_style(row.net)}]",
        )

    console.print(table)


@app.command()
def delete(
    exam_id: int = typer.Argument(..., help="Exam ID to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
) -> None:
    """Permanently delete an exam. There is no undo."""
    store = _open_store()
    exam = store.get(exam_id)
    if exam is None:
        console.print(f"[red]✗ Deneme bulunamadı: {exam_id}[/red]")
        raise typer.Exit(code=1)

    if not yes:
        confirm = typer.confirm(f"'{exam.name}' silinsin mi?")
        if not confirm:
            console.print("[yellow]İptal edildi[/yellow]")
            raise typer.Exit(code=0)

    _report_store_result(store.delete(exam_id))


# =============================================================================
# ANALYSIS
# =============================================================================


@app.command()
def dashboard() -> None:
    """Show exam count, average of the last exams and their trend."""
    config = _load_config()
    store = _open_store()
    summary = dashboard_summary(
        store.records,
        n=config.dashboard.recent_count,
        label_length=config.dashboard.label_length,
    )

    console.print(
        Panel(
            f"Toplam deneme: [bold]{summary.exam_count}[/bold]\n"
            f"Son {config.dashboard.recent_count} ortalama: "
            f"[bold]{format_net(summary.average_net)}[/bold] Net",
            title="[bold]Özet[/bold]",
            expand=False,
        )
    )

    if len(summary.recent) < 2:
        console.print("[dim]Grafik için en az 2 deneme gerekli[/dim]")
        return

    table = Table(show_header=True, header_style="bold", title="Son denemeler")
    table.add_column("Deneme", style="cyan")
    table.add_column("Net", justify="right")
    for point in summary.recent:
        table.add_row(point.label, format_net(point.value))
    console.print(table)


@app.command()
def trend(
    category: str = typer.Option("TYT", "--category", "-c", help="Exam category: TYT, AYT"),
    subject: str = typer.Option("total", "--subject", "-s", help="Subject id or 'total'"),
) -> None:
    """Show the net series of one subject over all exams of a category."""
    exam_category = _parse_category(category)
    subjects = get_subjects(exam_category)
    selectable = {s.id: s.name for s in selectable_subjects(subjects)}
    leaves = {path: node.name for path, node in iter_leaves(subjects)}

    if subject not in selectable and subject not in leaves:
        console.print(f"[red]✗ Bilinmeyen ders: {subject}[/red]")
        console.print(f"  Seçenekler: {', '.join(selectable)}")
        raise typer.Exit(code=1)

    store = _open_store()
    points = subject_series(store.records, exam_category, subject)

    if not points:
        console.print(f"[yellow]{exam_category.value} denemesi bulunamadı[/yellow]")
        return

    title = selectable.get(subject) or leaves[subject]
    console.print(f"\n[bold]{exam_category.value} - {title}[/bold]")
    table = Table(show_header=True, header_style="bold")
    table.add_column("Deneme", style="cyan")
    table.add_column("Net", justify="right")
    for point in points:
        table.add_row(point.label, format_net(point.value))
    console.print(table)


@app.command()
def calendar(
    month: str | None = typer.Option(None, "--month", "-m", help="Month as YYYY-MM (default: current)"),
) -> None:
    """Show a month with the days that have exams marked."""
    if month:
        try:
            first = datetime.strptime(month, "%Y-%m").date()
        except ValueError:
            console.print(f"[red]✗ Geçersiz ay: {month} (beklenen: YYYY-MM)[/red]")
            raise typer.Exit(code=1)
    else:
        first = date.today().replace(day=1)

    store = _open_store()
    marked = exam_days(store.records, first.year, first.month)

    table = Table(title=format_date(first).split(" ", 1)[1], show_header=True)
    for day_name in ("Pzt", "Sal", "Çar", "Per", "Cum", "Cmt", "Paz"):
        table.add_column(day_name, justify="center")

    for week in calendar_module.monthcalendar(first.year, first.month):
        table.add_row(
            *[
                "" if d == 0 else (f"[bold green]{d}*[/bold green]" if d in marked else str(d))
                for d in week
            ]
        )

    console.print(table)
    console.print(f"[dim]Deneme olan gün sayısı: {len(marked)}[/dim]")


@app.command()
def subjects(
    category: str = typer.Option("TYT", "--category", "-c", help="Exam category: TYT, AYT"),
) -> None:
    """List the subjects of an exam category and their question counts."""
    exam_category = _parse_category(category)
    nodes = get_subjects(exam_category)

    console.print(f"\n[bold]{exam_category.value} dersleri:[/bold]\n")
    for selectable in selectable_subjects(nodes):
        console.print(f"  [bold]{selectable.id}[/bold]  {selectable.name}")

    draft = parse_draft({"name": exam_category.value, "category": exam_category})
    console.print("\n[bold]Soru sayıları:[/bold]")
    for row in preview_rows(draft, nodes):
        console.print(f"  {row.path:<20} {row.name:<20} {row.question_count}")
