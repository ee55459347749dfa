"""
Command-line interface for the Resume Interviewer platform.

This module provides the terminal candidate client, the interviewer commands
and a command to run the API server.
"""
import asyncio
import logging
import click
from typing import Optional

from resume_interviewer.core.errors import InterviewError
from resume_interviewer.core.interview_runner import InterviewController
from resume_interviewer.core.interview_state import (
    InterviewState,
    InterviewStatus,
    MessageRole,
    current_question,
    is_unfinished,
    needs_evaluation,
)
from resume_interviewer.core.state_persistence import StateFileStore
from resume_interviewer.models.session import CandidateInfo
from resume_interviewer.services.api_client import InterviewApiClient
from resume_interviewer.utils.config import SERVER_HOST, SERVER_PORT, SYSTEM_NAME, get_client_config
from resume_interviewer.utils.transcript import format_transcript_for_display, save_transcript_to_file

logger = logging.getLogger(__name__)

TIME_WARNINGS = (10,)


def _banner(title: str) -> None:
    click.echo("\n" + "=" * 50)
    click.echo(f"  {title}")
    click.echo("=" * 50)


def _print_changes(old: InterviewState, new: InterviewState) -> None:
    """Echo what changed between two states to the candidate."""
    for message in new.messages[len(old.messages):]:
        if message.role == MessageRole.AI:
            question = current_question(new)
            detail = f" ({question.difficulty.value}, {question.time_seconds}s)" if question else ""
            click.echo(f"\nQuestion {new.total_asked}/{len(new.questions)}{detail}:")
            click.echo(f"AI: {message.text}")
        elif message.role == MessageRole.SYSTEM:
            click.echo(f"\n* {message.text}")

    if new.status == InterviewStatus.IN_PROGRESS and new.time_remaining != old.time_remaining:
        if new.time_remaining in TIME_WARNINGS:
            click.echo(f"\n[{new.time_remaining} seconds left]")
        elif new.time_remaining == 0:
            click.echo("\n[Time is up]")

    if new.status != old.status:
        if new.status == InterviewStatus.PAUSED:
            click.echo("\nInterview paused. Type 'resume' to continue.")
        elif new.status == InterviewStatus.IN_PROGRESS and old.status == InterviewStatus.PAUSED:
            click.echo(f"\nResumed. {new.time_remaining} seconds left on this question.")
        elif new.status == InterviewStatus.EVALUATING:
            click.echo("\nScoring your interview...")


async def _collect_missing_details(controller: InterviewController) -> None:
    """Ask for whatever the resume did not reveal."""
    candidate = controller.state.candidate
    if candidate.is_complete:
        return
    click.echo("\nWe could not find all of your details in the resume.")
    update = CandidateInfo(
        name=candidate.name or click.prompt("Full name"),
        email=candidate.email or click.prompt("Email"),
        phone=candidate.phone or click.prompt("Phone", default="", show_default=False) or None,
    )
    await controller.update_candidate(update)


async def _answer_questions(controller: InterviewController) -> None:
    """Read answers from stdin while the timer ticks in the background."""
    loop = asyncio.get_running_loop()
    timer_task = asyncio.create_task(controller.run_timer())
    pending_input = None
    try:
        while controller.state.status in (InterviewStatus.IN_PROGRESS, InterviewStatus.PAUSED):
            index = controller.state.current
            pending_input = loop.run_in_executor(None, input, "\nYou: ")
            done, _ = await asyncio.wait({pending_input, timer_task}, return_when=asyncio.FIRST_COMPLETED)
            if pending_input not in done:
                break
            line = pending_input.result().strip()
            pending_input = None
            command = line.lower()

            if command in ("quit", "exit"):
                click.echo("\nProgress saved. Run the interview command again to pick up where you left off.")
                return
            if command == "pause":
                controller.pause()
                continue
            if command == "resume":
                controller.resume()
                continue
            if controller.state.status == InterviewStatus.PAUSED:
                click.echo("Interview is paused. Type 'resume' to continue.")
                continue

            try:
                accepted = await controller.submit_answer(line, question_index=index)
            except InterviewError as e:
                click.echo(f"Could not save your answer: {e}. Please submit it again.")
                continue
            if not accepted:
                click.echo("Time ran out on that question, so the answer was not recorded.")

        if timer_task.done() and timer_task.exception() is not None:
            raise timer_task.exception()
        if pending_input is not None:
            click.echo("\nThat was the last question. Press Enter to finish.")
            await pending_input
    finally:
        if not timer_task.done():
            timer_task.cancel()
            try:
                await timer_task
            except asyncio.CancelledError:
                pass


async def _evaluate(controller: InterviewController) -> None:
    while True:
        state = await controller.evaluate()
        if state.evaluation_error is None:
            _banner("INTERVIEW RESULT")
            click.echo(f"* Final score: {state.final_score:g}/100")
            click.echo(f"* Summary: {state.summary}")
            click.echo("=" * 50 + "\n")
            return
        click.echo(f"\nScoring failed: {state.evaluation_error}")
        if not click.confirm("Try again?", default=True):
            click.echo("Your answers are saved. Run the interview command again to retry scoring.")
            return


async def _run_interview(resume_path: Optional[str], question_count: Optional[int], base_url: str, state_file: str) -> None:
    async with InterviewApiClient(base_url, timeout=get_client_config()["timeout"]) as api:
        controller = InterviewController(api, StateFileStore(state_file))
        controller.subscribe(_print_changes)

        restored = controller.restore()
        state = controller.state
        if restored and is_unfinished(state):
            _banner("WELCOME BACK")
            click.echo(f"* Candidate: {state.candidate.name or 'Unknown'}")
            click.echo(f"* Progress: question {state.total_asked} of {len(state.questions)}")
            if click.confirm("Resume your unfinished interview?", default=True):
                if state.status == InterviewStatus.PAUSED:
                    controller.resume()
                question = current_question(controller.state)
                if question is not None:
                    click.echo(f"\nAI: {question.text}")
            else:
                controller.reset()
        elif restored and (needs_evaluation(state) or state.evaluation_error):
            click.echo("\nYour last interview has not been scored yet.")
            await _evaluate(controller)
            return
        elif restored:
            controller.reset()

        if controller.state.status == InterviewStatus.IDLE:
            if not resume_path:
                resume_path = click.prompt("Path to your resume (PDF, DOCX or TXT)", type=click.Path(exists=True, dir_okay=False))
            click.echo("\nUploading your resume and preparing questions...")
            await controller.upload_resume(resume_path, question_count)
            await _collect_missing_details(controller)

            _banner("NEW INTERVIEW")
            click.echo(f"* Candidate: {controller.state.candidate.name}")
            click.echo(f"* Questions: {len(controller.state.questions)}")
            click.echo("=" * 50)
            click.echo("\nCommands:")
            click.echo("- Type your answer and press Enter to submit it")
            click.echo("- Type 'pause' or 'resume' to stop or restart the clock")
            click.echo("- Type 'quit' to leave and continue later")
            click.echo("=" * 50)
            click.confirm("\nReady to start?", default=True, abort=True)
            controller.begin()

        await _answer_questions(controller)

        if controller.state.status == InterviewStatus.COMPLETED:
            await _evaluate(controller)


@click.group()
@click.option("--api-url", default=None, help="Base URL of the interview API")
@click.pass_context
def cli(ctx, api_url: Optional[str]):
    """Resume Interviewer - resume-driven technical interviews"""
    client_config = get_client_config()
    ctx.obj = {
        "base_url": api_url or client_config["base_url"],
        "state_file": client_config["state_file"],
    }


@cli.command()
@click.argument("resume", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--questions", "question_count", type=click.IntRange(1, 20), default=None, help="Number of questions to ask")
@click.pass_context
def interview(ctx, resume: Optional[str], question_count: Optional[int]) -> None:
    """
    Take a timed interview built from your resume.
    """
    try:
        asyncio.run(_run_interview(resume, question_count, ctx.obj["base_url"], ctx.obj["state_file"]))
    except InterviewError as e:
        logger.error(f"Interview session error: {e}")
        raise click.ClickException(str(e))


@cli.command()
@click.pass_context
def candidates(ctx) -> None:
    """List candidates, best scores first."""

    async def fetch():
        async with InterviewApiClient(ctx.obj["base_url"]) as api:
            return await api.list_candidates()

    try:
        rows = asyncio.run(fetch())
    except InterviewError as e:
        raise click.ClickException(str(e))

    if not rows:
        click.echo("\nNo candidates found.")
        return

    click.echo(f"\n{SYSTEM_NAME} candidates:")
    click.echo("=" * 90)
    click.echo(f"{'Score':>6}  {'Status':<12} {'Name':<24} {'Email':<30} ID")
    click.echo("-" * 90)
    for row in rows:
        score = f"{row.final_score:g}" if row.final_score is not None else "-"
        click.echo(f"{score:>6}  {row.status.value:<12} {row.name[:24]:<24} {row.email[:30]:<30} {row.id}")


@cli.command()
@click.argument("session_id")
@click.option("--export", "export_dir", default=None, help="Also save the transcript into this directory")
@click.pass_context
def show(ctx, session_id: str, export_dir: Optional[str]) -> None:
    """Show one candidate's full interview."""

    async def fetch():
        async with InterviewApiClient(ctx.obj["base_url"]) as api:
            return await api.get_candidate(session_id)

    try:
        session = asyncio.run(fetch())
    except InterviewError as e:
        raise click.ClickException(str(e))

    click.echo("\n" + format_transcript_for_display(session))
    if export_dir:
        path = save_transcript_to_file(session, directory=export_dir)
        click.echo(f"Transcript saved to {path}")


@cli.command()
@click.argument("session_id")
@click.confirmation_option(prompt="Delete this candidate's session?")
@click.pass_context
def delete(ctx, session_id: str) -> None:
    """Delete a candidate's session."""

    async def remove():
        async with InterviewApiClient(ctx.obj["base_url"]) as api:
            await api.delete_candidate(session_id)

    try:
        asyncio.run(remove())
    except InterviewError as e:
        raise click.ClickException(str(e))
    click.echo(f"Deleted session {session_id}")


@cli.command()
@click.option("--host", default=SERVER_HOST, help="Host to bind the server to")
@click.option("--port", default=SERVER_PORT, type=int, help="Port to bind the server to")
@click.option("--reload", is_flag=True, help="Restart on code changes")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the API server."""
    from resume_interviewer.server import start_server

    start_server(host=host, port=port, reload=reload)


if __name__ == "__main__":
    cli()
