"""
CLI Interface for the TellCMG idea assistant

Structure an idea, refine it through an interview, browse local history,
and submit a finished idea by email from the terminal.
"""

import argparse
import sys
from typing import List, Optional

from .agents.interview_dialogue import InterviewDialogue
from .agents.structuring_agent import StructuringAgent
from .config import Settings, configure_logging
from .errors import GenerationCancelled, TellCMGError, ValidationError
from .inflight import InFlightRegistry
from .llm.factory import LLMPurpose, create_llm_provider
from .mail.smtp_transport import SmtpMailTransport
from .mail.submission import Submission, SubmissionService
from .references import fetch_url_reference, load_attachment
from .schemas.catalog import CATEGORY_CATALOG, GROUP_TITLES, MODIFIER_CATALOG
from .schemas.idea import DetailLevel, IdeaDraft, OutputFormat
from .storage.history import HistoryRepository
from .storage.settings import SavedSettings, SettingsRepository
from .storage.store import JsonFileStore

DONE_COMMAND = "/done"


def print_header():
    """Print CLI header."""
    print("""
╔═══════════════════════════════════════════════════════════════╗
║                                                               ║
║     TELLCMG - Voice Your Ideas                                ║
║                                                               ║
║     Turn a rough idea into a structured submission            ║
║                                                               ║
╚═══════════════════════════════════════════════════════════════╝
    """)


def _repositories(settings: Settings):
    store = JsonFileStore(settings.home_dir)
    return HistoryRepository(store), SettingsRepository(store)


def _category_tag(categories: List[str]) -> str:
    return ",".join(categories)


def _run_cancellable(registry: InFlightRegistry, key: str, fn, *args):
    """Run one model step; Ctrl+C abandons it instead of waiting it out."""
    with registry.track(key) as call:
        try:
            return call.run(fn, *args)
        except KeyboardInterrupt:
            call.cancel()
            raise GenerationCancelled(key)


def cmd_generate(args, settings: Settings) -> int:
    # Nothing is saved or fetched for an empty idea
    if not (args.text or "").strip():
        raise ValidationError("No idea text provided")

    history, saved_repo = _repositories(settings)
    saved = saved_repo.load()

    # Flags override the last-used settings, which are then remembered
    chosen = SavedSettings(
        categories=args.category or saved.categories,
        detail_level=DetailLevel.from_string(args.detail) if args.detail else saved.detail_level,
        output_format=OutputFormat.from_string(args.format) if args.format else saved.output_format,
        modifiers=args.modifier or saved.modifiers,
    )
    saved_repo.save(chosen)

    draft = IdeaDraft(
        raw_text=args.text,
        categories=list(chosen.categories),
        detail_level=chosen.detail_level,
        output_format=chosen.output_format,
        modifiers=list(chosen.modifiers),
        context=args.context,
        attachments=[load_attachment(path) for path in args.attach or []],
        url_references=[fetch_url_reference(url) for url in args.url or []],
    )
    draft.validate()

    llm = create_llm_provider(settings.llm, LLMPurpose.STRUCTURING)
    if llm is None:
        print("No LLM key configured; using templated output.\n")
    agent = StructuringAgent(llm=llm)

    print("Structuring your idea... (Ctrl+C to cancel)\n")
    result = _run_cancellable(InFlightRegistry(), "cli", agent.structure, draft)

    entry = history.record(draft.text, result.document, draft.category_tag)
    print(result.document)
    print(f"\nSaved to history as {entry.id}")
    return 0


def run_interactive_interview(dialogue: InterviewDialogue) -> Optional[str]:
    """Run the interview in the terminal. Returns the final document."""
    registry = InFlightRegistry()
    reply = _run_cancellable(registry, "cli-interview", dialogue.start)
    print(f"\nAssistant: {reply.message}")
    print(f"\n(Type {DONE_COMMAND} to finish early)")

    while not dialogue.is_done:
        response = input("\nYou: ").strip()
        if not response:
            continue

        if response.lower() == DONE_COMMAND:
            reply = _run_cancellable(registry, "cli-interview", dialogue.complete)
        else:
            reply = _run_cancellable(registry, "cli-interview", dialogue.answer, response)

        if not reply.is_complete:
            print(f"\nAssistant: {reply.message}")
        elif reply.used_fallback:
            print("\n(No model reply; your answers were merged into a template.)")

    return dialogue.final_document


def cmd_interview(args, settings: Settings) -> int:
    history, _ = _repositories(settings)

    base_draft = None
    if args.enhance:
        entry = history.get(args.enhance)
        if entry is None:
            print(f"Error: No history entry '{args.enhance}'")
            return 1
        base_draft = entry.final_document

    categories = args.category or []
    dialogue = InterviewDialogue(
        llm=create_llm_provider(settings.llm, LLMPurpose.INTERVIEW),
        original_idea=args.text,
        category=_category_tag(categories),
        base_draft_text=base_draft,
    )

    document = run_interactive_interview(dialogue)

    print(f"""
╔═══════════════════════════════════════════════════════════════╗
║                    INTERVIEW COMPLETE!                        ║
╚═══════════════════════════════════════════════════════════════╝
""")
    print(document)
    entry = history.record(args.text or "", document, _category_tag(categories))
    print(f"\nSaved to history as {entry.id}")
    return 0


def cmd_history(args, settings: Settings) -> int:
    history, _ = _repositories(settings)

    if args.history_command == "show":
        entry = history.get(args.id)
        if entry is None:
            print(f"Error: No history entry '{args.id}'")
            return 1
        print(f"Idea: {entry.raw_text}")
        print(f"Categories: {entry.category_tag or 'none'}\n")
        print(entry.final_document)
        return 0

    if args.history_command == "delete":
        if not history.delete(args.id):
            print(f"Error: No history entry '{args.id}'")
            return 1
        print(f"Deleted {args.id}")
        return 0

    if args.history_command == "clear":
        history.clear()
        print("History cleared.")
        return 0

    entries = history.load()
    if not entries:
        print("No ideas in history yet.")
        return 0
    for entry in entries:
        preview = (entry.raw_text or entry.final_document).replace("\n", " ")[:60]
        print(f"  {entry.id}  [{entry.category_tag or 'general'}]  {preview}")
    return 0


def cmd_submit(args, settings: Settings) -> int:
    history, _ = _repositories(settings)
    entry = history.get(args.id)
    if entry is None:
        print(f"Error: No history entry '{args.id}'")
        return 1

    service = SubmissionService(SmtpMailTransport(settings.mail), recipient=settings.mail.recipient)
    categories = [c for c in entry.category_tag.split(",") if c]
    service.submit(Submission(document=entry.final_document, categories=categories, submitter=args.sender))
    print(f"Idea submitted successfully to {settings.mail.recipient}!")
    return 0


def cmd_catalog(args, settings: Settings) -> int:
    print("Categories:\n")
    for group, categories in CATEGORY_CATALOG.by_group().items():
        print(f"  {GROUP_TITLES[group]}")
        for category in categories:
            print(f"    {category.id:<22} {category.label}")
        print()

    print("Requirements (-m):\n")
    for modifier in MODIFIER_CATALOG:
        print(f"    {modifier.id:<22} {modifier.description}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tellcmg",
        description="TellCMG idea assistant",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Structure an idea with two categories
  tellcmg generate "Auto-remind borrowers about missing docs" -c doc-mgmt -c borrower-comm

  # Refine the idea through a short interview
  tellcmg interview "Auto-remind borrowers about missing docs" -c doc-mgmt

  # Enhance a saved submission, then send it in
  tellcmg interview --enhance 1718000000000-ab12cd
  tellcmg submit 1718000000000-ab12cd --from jdoe@cmgfi.com
        """
    )
    sub = parser.add_subparsers(dest="command")

    gen = sub.add_parser("generate", help="Structure an idea in one shot")
    gen.add_argument("text", help="The idea, as spoken or typed")
    gen.add_argument("--category", "-c", action="append", help="Category id (repeatable)")
    gen.add_argument("--detail", choices=[d.value for d in DetailLevel], help="Detail level")
    gen.add_argument("--format", help="Output format (structured, conversational, bullet-points)")
    gen.add_argument("--modifier", "-m", action="append", help="Requirement id (repeatable)")
    gen.add_argument("--context", help="Extra context for reviewers")
    gen.add_argument("--attach", action="append", help="Text file to attach (repeatable)")
    gen.add_argument("--url", action="append", help="URL to reference (repeatable)")

    interview = sub.add_parser("interview", help="Refine an idea through a short interview")
    interview.add_argument("text", nargs="?", help="The idea to start from")
    interview.add_argument("--category", "-c", action="append", help="Category id (repeatable)")
    interview.add_argument("--enhance", help="History id of a submission to enhance")

    hist = sub.add_parser("history", help="Browse saved submissions")
    hist_sub = hist.add_subparsers(dest="history_command")
    hist_sub.add_parser("list", help="List saved submissions")
    for name, help_text in (("show", "Show one submission"), ("delete", "Delete one submission")):
        p = hist_sub.add_parser(name, help=help_text)
        p.add_argument("id", help="History id")
    hist_sub.add_parser("clear", help="Delete all saved submissions")

    submit = sub.add_parser("submit", help="Email a saved submission to the IT Product team")
    submit.add_argument("id", help="History id")
    submit.add_argument("--from", dest="sender", help="Your email address")

    sub.add_parser("catalog", help="List categories and requirements")
    return parser


COMMANDS = {
    "generate": cmd_generate,
    "interview": cmd_interview,
    "history": cmd_history,
    "submit": cmd_submit,
    "catalog": cmd_catalog,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        print_header()
        parser.print_help()
        return 1

    settings = Settings.load()
    configure_logging(settings.log_level)

    try:
        return COMMANDS[args.command](args, settings)
    except (GenerationCancelled, KeyboardInterrupt):
        print("\nCancelled.")
        return 130
    except ValidationError as e:
        print(f"Error: {e}")
        return 2
    except TellCMGError as e:
        print(f"Error: {e.public_message} ({e})")
        return 1


if __name__ == "__main__":
    sys.exit(main())
