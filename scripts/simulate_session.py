#!/usr/bin/env python3
"""Simulate a wellness wizard session end-to-end with a canned classifier.

Drives a session from Consent through the assessment and analysis, printing
an audit log of every stage transition, question asked, and the mock answer
chosen.  The classifier and guardian notifier are in-memory doubles unless
``--live`` is given, in which case the Gemini classifier is used (requires
``API_KEY`` or ``GEMINI_API_KEY``).

Usage::

    # Default run (random answers, canned low-risk result)
    python scripts/simulate_session.py

    # Force the high-risk branch (self_harm answered 3, crisis result)
    python scripts/simulate_session.py --high-risk --guardian 555-0199

    # Deterministic answers
    python scripts/simulate_session.py --no-random

    # Print the rendered classifier prompt
    python scripts/simulate_session.py -v

    # Call Gemini instead of the canned classifier
    python scripts/simulate_session.py --live
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Ensure project root is on sys.path so we can import both the SDK and
# the test doubles.
# ---------------------------------------------------------------------------
_SCRIPT_DIR = Path(__file__).resolve().parent
_REPO_ROOT = _SCRIPT_DIR.parent
sys.path.insert(0, str(_REPO_ROOT / "tests"))
sys.path.insert(0, str(_REPO_ROOT / "src"))

from helpers.doubles import (  # noqa: E402
    HIGH_RISK_ALERT,
    LOW_RISK,
    CannedClassifier,
    RecordingNotifier,
)

from mindcheck.analysis import GeminiClassifier  # noqa: E402
from mindcheck.catalog import QuestionCatalog  # noqa: E402
from mindcheck.errors import ValidationError  # noqa: E402
from mindcheck.models.question import QuestionDefinition  # noqa: E402
from mindcheck.models.session import WizardStage  # noqa: E402
from mindcheck.prompt import PromptManager  # noqa: E402
from mindcheck.questionnaire import AdaptiveQuestionnaire  # noqa: E402
from mindcheck.wizard import WellnessWizard  # noqa: E402

USER_ID = "sim_user"
SESSION_ID = "sim_session"

_DEFAULT_NOTES = "I haven't been sleeping well and work feels overwhelming."

_DOUBLE_LINE = "=" * 70
_SINGLE_LINE = "-" * 70

_quiet = False


def _print(*args, **kwargs) -> None:
    """Print wrapper that respects the --quiet flag."""
    if not _quiet:
        print(*args, **kwargs)


def log_stage(title: str) -> None:
    _print(f"\n{_DOUBLE_LINE}")
    _print(f" STAGE: {title}")
    _print(_DOUBLE_LINE)


def log_question_and_answer(q: QuestionDefinition, answer, number: int, total: int) -> None:
    """Print a single question, its options, and the mock answer."""
    _print(f"\n [Q{number}/{total}] {q.text} ({q.id})")
    if q.subtext:
        _print(f"     {q.subtext}")
    _print(f"     Options: {', '.join(f'{o.label}={o.value}' for o in q.options)}")
    _print(f" [A] {answer}")


def choose_answer(q: QuestionDefinition, *, use_random: bool, high_risk: bool):
    """Pick a mock answer for *q*."""
    if q.id == "self_harm":
        return 3 if high_risk else 0
    if use_random:
        return random.choice(q.values)
    # Deterministic: lowest-severity option
    return q.values[0] if isinstance(q.values[0], int) else "No"


async def run_simulation(
    *,
    use_random: bool,
    high_risk: bool,
    guardian: str,
    notes: str,
    live: bool,
    verbose: bool,
    quiet: bool,
) -> int:
    """Drive one session and print the audit log.  Returns the exit code."""
    global _quiet
    _quiet = quiet
    if quiet:
        logging.getLogger("mindcheck").setLevel(logging.CRITICAL)

    catalog = QuestionCatalog()
    catalog.load()

    if live:
        classifier = GeminiClassifier(base_ids=catalog.base_ids)
    else:
        classifier = CannedClassifier(HIGH_RISK_ALERT if high_risk else LOW_RISK)
    notifier = RecordingNotifier()
    wizard = WellnessWizard(AdaptiveQuestionnaire(catalog), classifier, notifier)

    ctx = wizard.new_session(user_id=USER_ID, session_id=SESSION_ID)

    log_stage("Consent")
    wizard.confirm_consent(ctx)
    _print(" consent confirmed")

    log_stage("Register")
    try:
        wizard.register(ctx, name="Sim User", phone="555-0100", guardian_phone=guardian)
    except ValidationError as exc:
        print(f"Error: {exc}")
        return 1
    _print(f" registered (guardian on file: {bool(guardian)})")

    log_stage("Assessment")
    wizard.start_assessment(ctx)
    while ctx.stage == WizardStage.ASSESSMENT:
        step = wizard.current_step(ctx)
        q = step.question
        answer = choose_answer(q, use_random=use_random, high_risk=high_risk)
        log_question_and_answer(q, answer, step.question_number, step.total_questions)
        outcome = wizard.submit_answer(ctx, qid=q.id, value=answer)
        if outcome.escalated:
            _print(f"\n{_SINGLE_LINE}")
            _print(" Escalated: high-risk questions appended")
            _print(_SINGLE_LINE)

    log_stage("Description")
    _print(f" notes: {notes}")
    if verbose:
        _print("\n --- classifier prompt ---")
        _print(PromptManager().render_assessment(ctx.answers, notes))

    await wizard.submit_description(ctx, notes)

    step = wizard.current_step(ctx)
    log_stage(step.stage_name)
    if step.error:
        _print(f" error: {step.error}")
        return 1

    result = step.result
    _print(f" prediction:   {result.prediction} (confidence {result.confidence})")
    _print(f" risk alert:   {result.risk_alert}")
    _print(f" mood:         {result.overall_mood_level}")
    _print(f" anxiety:      {result.anxiety_concern}")
    _print(f" sentiment:    {result.nlp_insights.sentiment}")
    _print(f" themes:       {', '.join(result.nlp_insights.key_themes)}")
    _print(f" message:      {result.supportive_message}")
    for tip in result.coping_suggestions:
        _print(f"   - {tip}")
    if ctx.stage == WizardStage.CRISIS_INTERVENTION:
        _print(f" crisis:       {result.crisis_support or '-'}")
        _print(f" guardian notified: {step.guardian_notified}")
        if step.notification is not None:
            _print(f" notification: {step.notification.channel} "
                   f"delivered={step.notification.delivered}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Simulate a wellness wizard session with a canned classifier.",
    )
    parser.add_argument(
        "--random",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Randomise mock answers (default: on). Use --no-random for lowest-severity answers.",
    )
    parser.add_argument(
        "--high-risk",
        action="store_true",
        help="Answer self_harm with 3 and return a crisis result.",
    )
    parser.add_argument(
        "--guardian",
        default="",
        help="Guardian phone to register (enables the guardian alert).",
    )
    parser.add_argument(
        "-n", "--notes",
        default=_DEFAULT_NOTES,
        help="Free-text notes submitted on the Description stage.",
    )
    parser.add_argument(
        "--live",
        action="store_true",
        help="Use the Gemini classifier instead of the canned one.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print the rendered classifier prompt",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress all print output (exit code still reflects success/failure)",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    code = asyncio.run(run_simulation(
        use_random=args.random,
        high_risk=args.high_risk,
        guardian=args.guardian,
        notes=args.notes,
        live=args.live,
        verbose=args.verbose,
        quiet=args.quiet,
    ))
    sys.exit(code)


if __name__ == "__main__":
    main()
