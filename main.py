#!/usr/bin/env python3
"""
Content Assistant - Community article workflow from the command line.

Command-line entry point for the idea → draft → publish workflow:
  - Optionally fetch trending posts from the target subreddit
  - Generate a batch of article ideas (title + flair)
  - Approve or reject an idea; approval generates the full draft
  - Export the cleaned draft as a CSV row, copy it, or publish it
  - Clean an existing article file without touching the workflow

Usage:
    python main.py                           # Generate ideas (default action)
    python main.py --with-trends             # Generate ideas from current trends
    python main.py --generate --approve 1    # Generate, then draft the first idea
    python main.py --approve 1 --export      # Draft a stored idea and copy it as CSV
    python main.py --clean draft.md          # Print the cleaned article text

Examples:
    # Development run (in-memory store, verbose)
    python main.py --generate --approve 1 --export -v

    # Production run (Airtable store, publish through the relay)
    python main.py --approve 2 --publish-reddit
"""

import argparse
import sys
from typing import List, Optional

from content_assistant import __version__
from content_assistant.cleaning import clean_article_content
from content_assistant.config import (
    AssistantConfig,
    print_config_summary,
    validate_config,
)
from content_assistant.models import Idea
from content_assistant.services import MemoryClipboard
from content_assistant.workflow import OperationResult, WorkflowController, create_controller


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="content-assistant",
        description="Generate, review, clean and publish community articles.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                             Generate a batch of ideas
  %(prog)s --with-trends --ideas 3     Three ideas informed by current trends
  %(prog)s --approve 1 --export        Draft the first pending idea, copy CSV row
  %(prog)s --reject 2                  Reject the second pending idea
  %(prog)s --approve 1 --publish       Draft and save to the app history
  %(prog)s --clean - --title "Intro"   Clean article text read from stdin
        """,
    )
    
    # Idea options
    parser.add_argument(
        "--generate", "-g",
        action="store_true",
        help="Generate a new batch of ideas (default when no action is given)",
    )
    
    parser.add_argument(
        "--with-trends", "-t",
        action="store_true",
        help="Fetch trending posts first and use them to inform idea generation",
    )
    
    parser.add_argument(
        "--approve", "-a",
        metavar="IDEA",
        help="Approve a pending idea (1-based pending index or idea id)",
    )
    
    parser.add_argument(
        "--reject", "-r",
        metavar="IDEA",
        action="append",
        help="Reject a pending idea (may be repeated)",
    )
    
    # Draft options
    parser.add_argument(
        "--export", "-e",
        action="store_true",
        help="Copy the draft as a CSV row: title,flair,cleaned content",
    )
    
    parser.add_argument(
        "--copy", "-c",
        action="store_true",
        help="Copy the cleaned draft content",
    )
    
    parser.add_argument(
        "--publish", "-p",
        action="store_true",
        help="Save the draft to the published-article history",
    )
    
    parser.add_argument(
        "--publish-reddit",
        action="store_true",
        help="Send the draft to the Reddit relay, then save it to history",
    )
    
    # Cleaning
    parser.add_argument(
        "--clean",
        metavar="FILE",
        help="Print the cleaned content of FILE ('-' reads stdin) and exit",
    )
    
    parser.add_argument(
        "--title",
        default=None,
        help="Article title to de-duplicate when used with --clean",
    )
    
    # Overrides
    parser.add_argument(
        "--subreddit", "-s",
        default=None,
        help="Target subreddit (default: TARGET_SUBREDDIT)",
    )
    
    parser.add_argument(
        "--ideas", "-n",
        type=int,
        default=None,
        metavar="N",
        help="Ideas per generation request (default: IDEAS_PER_REQUEST)",
    )
    
    parser.add_argument(
        "--user-id",
        default=None,
        help="Session user id owning the idea collection",
    )
    
    # Output options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed progress and debug info",
    )
    
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only show errors and final results",
    )
    
    # Info options
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration and exit",
    )
    
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    
    return parser


def show_config() -> None:
    """Display current configuration."""
    print("=" * 60)
    print("Content Assistant Configuration")
    print("=" * 60)
    print_config_summary()
    
    errors = validate_config()
    if errors:
        print("\nConfiguration warnings:")
        for error in errors:
            print(f"  ⚠️  {error}")
    else:
        print("\n✓ Configuration valid")
    print("=" * 60)


def run_clean(path: str, title: Optional[str] = None) -> int:
    """Print the cleaned content of a file (or stdin)."""
    try:
        if path == "-":
            raw = sys.stdin.read()
        else:
            with open(path, "r", encoding="utf-8") as f:
                raw = f.read()
    except OSError as e:
        print(f"❌ Could not read {path}: {e}")
        return 1
    
    print(clean_article_content(raw, title=title))
    return 0


def resolve_idea(pending: List[Idea], ref: str) -> str:
    """
    Turn a 1-based index into the pending list into an idea id.
    
    Ids (and indexes out of range) pass through unchanged. Callers resolve
    every reference against the same list, as printed to the user, before
    any idea changes status.
    """
    if ref.isdigit():
        index = int(ref) - 1
        if 0 <= index < len(pending):
            return pending[index].id
    return ref


def print_ideas(controller: WorkflowController) -> None:
    pending = controller.pending_ideas
    if not pending:
        print("No pending ideas.")
        return
    print(f"Pending ideas ({len(pending)}):")
    for i, idea in enumerate(pending, 1):
        print(f"  {i}. {idea.title}  [{idea.flair}]  id={idea.id}")


def report(result: OperationResult, quiet: bool = False) -> bool:
    """Print an operation outcome; return its success flag."""
    if result.success:
        if not quiet:
            print(f"✓ {result.message}")
    else:
        print(f"❌ {result.error}")
    return result.success


def main(argv: list = None) -> int:
    """
    Main entry point.
    
    Args:
        argv: Command-line arguments (default: sys.argv[1:]).
        
    Returns:
        Exit code (0 = success, 1 = error, 130 = interrupted).
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    
    # Handle --show-config
    if args.show_config:
        show_config()
        return 0
    
    # Handle --clean (no workflow involved)
    if args.clean:
        return run_clean(args.clean, args.title)
    
    if args.ideas is not None and args.ideas < 1:
        parser.error("--ideas must be at least 1")
    
    has_action = any([
        args.generate, args.approve, args.reject,
        args.export, args.copy, args.publish, args.publish_reddit,
    ])
    if not has_action:
        args.generate = True
    
    # Print header (unless quiet)
    if not args.quiet:
        print("=" * 60)
        print("Content Assistant")
        print("=" * 60)
        
        if args.verbose:
            print("\nConfiguration:")
            print_config_summary()
            print()
    
    config = AssistantConfig.from_args(args)
    
    try:
        controller = create_controller(config)
        ok = True
        
        if args.with_trends and args.generate:
            ok = report(controller.fetch_trends(), args.quiet)
        
        if ok and args.generate:
            ok = report(controller.generate_ideas(), args.quiet)
        
        # Numbering is fixed before the first rejection shrinks the pending list
        pending = controller.pending_ideas
        reject_ids = [resolve_idea(pending, ref) for ref in args.reject or []]
        approve_id = resolve_idea(pending, args.approve) if args.approve else None
        
        if ok and reject_ids:
            for idea_id in reject_ids:
                ok = report(controller.reject_idea(idea_id), args.quiet) and ok
        
        if ok and approve_id:
            ok = report(controller.approve_idea(approve_id), args.quiet)
            if ok and not args.quiet:
                print()
                print(controller.current_draft.content)
                print()
        
        if ok and args.export:
            ok = report(controller.export_draft(), args.quiet)
        
        if ok and args.copy:
            ok = report(controller.copy_clean_content(), args.quiet)
        
        if ok and isinstance(controller.clipboard, MemoryClipboard) and controller.clipboard.contents:
            # No system clipboard available: print what would have been copied
            print(controller.clipboard.contents)
        
        if ok and args.publish_reddit:
            ok = report(controller.publish_to_external_target(), args.quiet)
        elif ok and args.publish:
            ok = report(controller.publish_draft(), args.quiet)
        
        if not args.quiet:
            print()
            print_ideas(controller)
        
        controller.close()
        return 0 if ok else 1
        
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130
    except Exception as e:
        print(f"\n❌ Workflow error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
