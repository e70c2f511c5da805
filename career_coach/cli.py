"""CLI interface for the Career Coach system."""
import json
import sys
import uuid
from pathlib import Path
from typing import Any, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .models.assistant import UserProfile
from .services.coaching_service import CoachingService
from .services.configuration_manager import ConfigurationManager
from .services.llm_manager import ProviderRegistry
from .services.provider_factory import create_ai_provider
from .services.storage_manager import create_storage
from .utils.logging import setup_logging, get_logger, set_correlation_id


console = Console()
logger = get_logger("cli")


def _bullets(items) -> str:
    return "\n".join(f"- {item}" for item in items) if items else "N/A"


def _fail(message: str, error: Exception) -> None:
    console.print(f"[red]{message}: {error}[/red]")
    logger.error(f"{message}: {error}")
    sys.exit(1)


def _emit_json(ctx: click.Context, payload: Any) -> bool:
    """Print raw JSON when --json was given; returns whether it did."""
    if not ctx.obj.get("json"):
        return False
    click.echo(json.dumps(payload, indent=2, default=str))
    return True


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(file_okay=False), default="config", help="Configuration directory")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--provider", "-p", default=None, help="Preferred AI provider (openai, anthropic, gemini, huggingface)")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON instead of formatted panels")
@click.pass_context
def cli(ctx: click.Context, config: str, verbose: bool, provider: Optional[str], as_json: bool):
    """Career Coach - resume analysis, company research and mock interviews."""
    ctx.ensure_object(dict)
    ctx.obj["json"] = as_json

    # Setup logging
    log_level = "DEBUG" if verbose else "ERROR"
    setup_logging(log_level)
    set_correlation_id(uuid.uuid4().hex[:12])

    try:
        config_manager = ConfigurationManager(config)
        config_manager.initialize()
        ctx.obj["config_manager"] = config_manager

        # File logging from config.yaml; the console stays quiet unless --verbose
        logging_config = config_manager.get_logging_config()
        if logging_config["enable_file"]:
            if verbose:
                logging_config["level"] = log_level
            logging_config["enable_console"] = verbose
            setup_logging(**logging_config)

        ai_provider = create_ai_provider(
            api_keys=config_manager.get_api_keys(),
            preferred_provider=provider or config_manager.get_preferred_provider(),
            config={
                "provider_order": config_manager.get_provider_order(),
                "providers": config_manager.get_all_provider_settings(),
            },
        )
        ctx.obj["provider"] = ai_provider
        ctx.obj["service"] = CoachingService(ai_provider, create_storage(**config_manager.get_storage_config()))
        logger.info(f"CLI initialized with provider {ai_provider!r}")

    except Exception as e:
        _fail("Failed to initialize system", e)


@cli.command("analyze-resume")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--user-id", "-u", type=int, default=1, show_default=True, help="Owner of the resume")
@click.pass_context
def analyze_resume(ctx: click.Context, file: str, user_id: int):
    """Extract skills, experience and achievements from a plain-text resume."""
    content = Path(file).read_text(encoding="utf-8", errors="replace")
    try:
        record = ctx.obj["service"].upload_resume(user_id, Path(file).name, content)
    except Exception as e:
        _fail("Failed to analyze resume", e)

    analysis = record.analysis
    if _emit_json(ctx, analysis.to_payload()):
        return
    content = "\n".join([
        f"[bold]Skills:[/bold] {', '.join(analysis.skills) or 'None found'}",
        f"[bold]Experience:[/bold] {analysis.experience}",
        "",
        "[bold]Achievements:[/bold]",
        _bullets(analysis.achievements),
    ])
    console.print(Panel(content, title=f"Resume Analysis | {Path(file).name}", border_style="blue"))


@cli.command()
@click.argument("company")
@click.argument("position")
@click.pass_context
def research(ctx: click.Context, company: str, position: str):
    """Research a company for a position."""
    try:
        insight = ctx.obj["service"].research_company(company, position)
    except Exception as e:
        _fail("Company research failed", e)

    if _emit_json(ctx, insight.to_payload()):
        return
    content = "\n".join([
        f"[bold]Culture:[/bold] {insight.culture}",
        f"[bold]Mission:[/bold] {insight.mission}",
        f"[bold]Recent news:[/bold] {insight.recent_news}",
        "",
        "[bold]Required skills:[/bold]",
        _bullets(insight.required_skills),
    ])
    console.print(Panel(content, title=f"{company} | {position}", border_style="cyan"))


@cli.command()
@click.argument("company")
@click.argument("position")
@click.option("--skill", "-s", "skills", multiple=True, help="Candidate skill (repeatable)")
@click.option("--experience", "-e", default="", help="Experience summary")
@click.pass_context
def questions(ctx: click.Context, company: str, position: str, skills, experience: str):
    """Generate mock interview questions."""
    try:
        generated = ctx.obj["provider"].generate_interview_questions(company, position, list(skills), experience)
    except Exception as e:
        _fail("Question generation failed", e)

    if _emit_json(ctx, [q.to_payload() for q in generated]):
        return
    table = Table(title=f"Interview Questions | {company} {position}")
    table.add_column("ID", style="bold")
    table.add_column("Question")
    table.add_column("Type")
    table.add_column("Difficulty")
    for question in generated:
        table.add_row(question.id, question.text, question.type.value, question.difficulty.value)
    console.print(table)


@cli.command()
@click.argument("question")
@click.option("--answer", "-a", default=None, help="Answer text")
@click.option("--answer-file", "-f", type=click.Path(exists=True, dir_okay=False), default=None, help="File containing the answer")
@click.pass_context
def evaluate(ctx: click.Context, question: str, answer: Optional[str], answer_file: Optional[str]):
    """Score an answer to an interview question."""
    if (answer is None) == (answer_file is None):
        raise click.UsageError("Provide exactly one of --answer or --answer-file")
    if answer_file:
        answer = Path(answer_file).read_text(encoding="utf-8", errors="replace")

    try:
        feedback = ctx.obj["provider"].evaluate_response(question, answer)
    except Exception as e:
        _fail("Evaluation failed", e)

    if _emit_json(ctx, feedback.to_payload()):
        return
    content = "\n".join([
        "[bold]Strengths:[/bold]",
        _bullets(feedback.strengths),
        "",
        "[bold]Improvements:[/bold]",
        _bullets(feedback.improvements),
        "",
        feedback.suggestion,
    ])
    console.print(Panel(content, title=f"Evaluation Result | Score: {feedback.score}/10", border_style="cyan"))


@cli.command()
@click.option("--context", "context_text", required=True, help="Interview context, e.g. company and role")
@click.option("--conversation", required=True, help="Recent conversation transcript")
@click.option("--skill", "-s", "skills", multiple=True, help="Candidate skill (repeatable)")
@click.option("--achievement", "-a", "achievements", multiple=True, help="Candidate achievement (repeatable)")
@click.pass_context
def suggest(ctx: click.Context, context_text: str, conversation: str, skills, achievements):
    """Suggest talking points for a live interview."""
    profile = UserProfile(skills=list(skills), achievements=list(achievements))
    try:
        suggestion = ctx.obj["service"].suggest(context_text, conversation, profile)
    except Exception as e:
        _fail("Suggestion generation failed", e)

    if _emit_json(ctx, suggestion.to_payload()):
        return
    content = "\n".join([
        "[bold]Key points:[/bold]",
        _bullets(suggestion.key_points),
        "",
        "[bold]Follow-up questions:[/bold]",
        _bullets(suggestion.follow_up_suggestions),
        "",
        "[bold]Communication tips:[/bold]",
        _bullets(suggestion.communication_tips),
        "",
        "[bold]Relevant achievements:[/bold]",
        _bullets(suggestion.relevant_achievements),
    ])
    console.print(Panel(content, title="Suggestions", border_style="green"))


@cli.command()
@click.argument("company")
@click.argument("position")
@click.option("--user-id", "-u", type=int, default=1, show_default=True, help="Candidate identifier")
@click.option("--resume", "-r", type=click.Path(exists=True, dir_okay=False), default=None, help="Plain-text resume to tailor questions")
@click.pass_context
def interview(ctx: click.Context, company: str, position: str, user_id: int, resume: Optional[str]):
    """Run an interactive mock interview."""
    service: CoachingService = ctx.obj["service"]
    try:
        if resume:
            service.upload_resume(user_id, Path(resume).name, Path(resume).read_text(encoding="utf-8", errors="replace"))
        session = service.start_interview(user_id, company, position)
    except Exception as e:
        _fail("Failed to start interview", e)

    console.print(Panel(
        f"Company: {company}\nPosition: {position}\nQuestions: {len(session.questions)}",
        title="Interview Session Setup",
        border_style="blue",
    ))

    for number, question in enumerate(session.questions, start=1):
        console.print(Panel(question.text, title=f"Question {number} | {question.type.value} | {question.difficulty.value}", border_style="yellow"))
        answer = click.prompt("Your answer (or 'skip')", default="skip", show_default=False)
        if answer.strip().lower() == "skip":
            console.print("[bold yellow]Candidate chose to skip this question.[/bold yellow]")
            continue
        response = service.submit_response(session.id, question.id, answer)
        console.print(Panel(
            f"{_bullets(response.feedback.strengths)}\n\n{response.feedback.suggestion}",
            title=f"Evaluation Result | Score: {response.feedback.score}/10",
            border_style="cyan",
        ))

    session = service.get_session(session.id)
    console.print(Panel(
        f"Questions answered: {len(session.responses)}/{len(session.questions)}\n"
        f"Average score: {session.average_score():.1f}/10",
        title="Final Report",
        border_style="blue",
    ))


@cli.command()
@click.option("--user-id", "-u", type=int, default=1, show_default=True, help="Candidate identifier")
@click.pass_context
def history(ctx: click.Context, user_id: int):
    """List a user's uploaded resumes and past interview sessions."""
    service: CoachingService = ctx.obj["service"]
    try:
        resumes = service.list_resumes(user_id)
        sessions = service.list_sessions(user_id)
    except Exception as e:
        _fail("Failed to load history", e)

    payload = {
        "userId": user_id,
        "resumes": [
            {
                "id": r.id,
                "filename": r.filename,
                "createdAt": r.created_at.isoformat(),
                "analysis": r.analysis.to_payload(),
            }
            for r in resumes
        ],
        "sessions": [
            {
                "id": s.id,
                "companyName": s.company_name,
                "position": s.position,
                "createdAt": s.created_at.isoformat(),
                "answered": len(s.responses),
                "questions": len(s.questions),
                "averageScore": s.average_score(),
                "completed": s.completed,
            }
            for s in sessions
        ],
    }
    if _emit_json(ctx, payload):
        return

    if not resumes and not sessions:
        console.print(f"[yellow]No history for user {user_id}.[/yellow]")
        return

    resume_table = Table(title=f"Resumes | user {user_id}")
    resume_table.add_column("Uploaded")
    resume_table.add_column("File", style="bold")
    resume_table.add_column("Skills")
    for resume in payload["resumes"]:
        resume_table.add_row(resume["createdAt"][:16], resume["filename"], ", ".join(resume["analysis"]["skills"]) or "-")
    console.print(resume_table)

    session_table = Table(title=f"Interview sessions | user {user_id}")
    session_table.add_column("Started")
    session_table.add_column("Company", style="bold")
    session_table.add_column("Position")
    session_table.add_column("Answered")
    session_table.add_column("Average")
    for session in payload["sessions"]:
        session_table.add_row(
            session["createdAt"][:16],
            session["companyName"],
            session["position"],
            f"{session['answered']}/{session['questions']}",
            f"{session['averageScore']:.1f}",
        )
    console.print(session_table)


@cli.command()
@click.pass_context
def providers(ctx: click.Context):
    """Show configured AI providers and their attempt order."""
    ai_provider = ctx.obj["provider"]
    if isinstance(ai_provider, ProviderRegistry):
        stats = ai_provider.get_provider_stats()
        payload = {"mode": "registry", "order": ai_provider.get_provider_order(), "stats": stats}
    else:
        payload = {"mode": "single", "provider": ai_provider.get_provider_info()}

    if _emit_json(ctx, payload):
        return
    if payload["mode"] == "single":
        info = payload["provider"]
        console.print(Panel(f"Model: {info['model']}\nBase URL: {info['base_url']}", title=f"Single provider | {info['name']}", border_style="blue"))
        return

    table = Table(title="Provider attempt order")
    table.add_column("#")
    table.add_column("Provider", style="bold")
    table.add_column("Requests")
    table.add_column("Failures")
    for position, name in enumerate(payload["order"], start=1):
        table.add_row(str(position), name, str(stats[name]["total_requests"]), str(stats[name]["failures"]))
    console.print(table)


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        sys.exit(0)


if __name__ == "__main__":
    main()
