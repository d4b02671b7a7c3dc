"""
Command line front-end for the impersonator.

Examples:
    python cli.py presets
    python cli.py use "Third Person"
    python cli.py set context_size 4
    python cli.py impersonate chat.json --idea "ask about the map"
    python cli.py impersonate chat.json --dry-run
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from app_context import AppContext
from config import LOG_LEVEL
from core.notifications import ConsoleNotifier
from errors import ImpersonatorError
from presets.settings import EDITABLE_FIELDS
from storage.interfaces import ChatContext
from storage.settings_file import read_json_file

logger = logging.getLogger(__name__)

BOOLEAN_FIELDS = ("include_char_card", "include_persona")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Impersonator: generate the user's next chat message")
    parser.add_argument("--settings", help="Settings file (defaults to IMPERSONATOR_SETTINGS_FILE)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("presets", help="List presets")

    show = sub.add_parser("show", help="Show a preset")
    show.add_argument("name", nargs="?", help="Preset name (defaults to the active one)")

    use = sub.add_parser("use", help="Switch the active preset")
    use.add_argument("name")

    set_field = sub.add_parser("set", help="Change a field of the active preset and save it")
    set_field.add_argument("field", choices=EDITABLE_FIELDS)
    set_field.add_argument("value")

    create = sub.add_parser("create", help="Create a preset from the active one")
    create.add_argument("name")

    delete = sub.add_parser("delete", help="Delete the active preset")
    delete.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    export = sub.add_parser("export", help="Export the active preset")
    export.add_argument("--dir", help="Output directory")

    import_ = sub.add_parser("import", help="Import a preset file")
    import_.add_argument("path")
    import_.add_argument("--rename", help="Name to use if the preset name is taken")

    export_settings = sub.add_parser("export-settings", help="Export all settings")
    export_settings.add_argument("--dir", help="Output directory")

    import_settings = sub.add_parser("import-settings", help="Replace all settings from an export")
    import_settings.add_argument("path")

    sub.add_parser("enable", help="Enable impersonation")
    sub.add_parser("disable", help="Disable impersonation")

    impersonate = sub.add_parser("impersonate", help="Generate the user's next message for a chat file")
    impersonate.add_argument("chat", help="Chat JSON file")
    impersonate.add_argument("--idea", help="Idea the message should develop")
    impersonate.add_argument("--quiet", "-q", action="store_true", help="Suppress notifications")
    impersonate.add_argument("--dry-run", action="store_true", help="Print the prompts instead of generating")

    return parser


def _interactive_rename(existing: str, suggestion: str) -> Optional[str]:
    if not sys.stdin.isatty():
        return None
    answer = input(f'Preset "{existing}" already exists. Enter a new name [{suggestion}]: ').strip()
    return answer or suggestion


def _load_chat(path: str) -> ChatContext:
    return ChatContext.from_dict(read_json_file(path))


def _print_preset(context: AppContext, name: str) -> None:
    bundle = context.settings.store.get(name)
    for key, value in bundle.to_dict().items():
        print(f"{key}: {value}")


def run(args: argparse.Namespace, context: AppContext) -> int:
    impersonator = context.impersonator
    settings = context.settings

    if args.command == "presets":
        for name in settings.store.names():
            marker = "*" if name == settings.active_name else " "
            suffix = " (built-in)" if settings.store.is_builtin(name) else ""
            print(f"{marker} {name}{suffix}")
        print(f"enabled: {settings.enabled}")
        return 0

    if args.command == "show":
        try:
            _print_preset(context, args.name or settings.active_name)
        except ImpersonatorError as e:
            print(e.message, file=sys.stderr)
            return 1
        return 0

    if args.command == "use":
        return 0 if impersonator.select_preset(args.name) else 1

    if args.command == "set":
        value = args.value
        if args.field in BOOLEAN_FIELDS:
            value = value.strip().lower() in ("true", "1", "yes", "on")
        if not impersonator.update_field(args.field, value):
            return 1
        impersonator.save_current_to_preset()
        return 0

    if args.command == "create":
        return 0 if impersonator.create_preset(args.name) else 1

    if args.command == "delete":
        confirm = None if args.yes else (lambda name: input(f'Delete preset "{name}"? [y/N] ').strip().lower() == "y")
        return 0 if impersonator.delete_active_preset(confirm=confirm) else 1

    if args.command == "export":
        path = impersonator.export_active_preset(args.dir)
        if path:
            print(path)
        return 0 if path else 1

    if args.command == "import":
        rename = (lambda existing, suggestion: args.rename) if args.rename else _interactive_rename
        return 0 if impersonator.import_preset(args.path, rename=rename) else 1

    if args.command == "export-settings":
        path = impersonator.export_settings(args.dir)
        if path:
            print(path)
        return 0 if path else 1

    if args.command == "import-settings":
        return 0 if impersonator.import_settings(args.path) else 1

    if args.command in ("enable", "disable"):
        impersonator.set_enabled(args.command == "enable")
        return 0

    if args.command == "impersonate":
        try:
            context.set_chat_context(_load_chat(args.chat))
        except (OSError, ValueError, AttributeError, TypeError) as e:
            print(f"Could not read chat file: {e}", file=sys.stderr)
            return 1

        if args.dry_run:
            try:
                request = impersonator.build_request(args.idea)
            except ImpersonatorError as e:
                print(e.message, file=sys.stderr)
                return 1
            print("=== System prompt ===")
            print(request.system_prompt)
            print("\n=== User prompt ===")
            print(request.user_prompt)
            print(f"\n=== Response length: {request.response_length or 'unbounded'} ===")
            return 0

        result = asyncio.run(impersonator.impersonate_command(quiet=args.quiet, idea=args.idea))
        if result:
            print(result)
        return 0 if result else 1

    return 2


def main(argv: List[str] = None) -> int:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    args = build_parser().parse_args(argv)
    context = AppContext().initialize(settings_path=args.settings, notifier=ConsoleNotifier())
    return run(args, context)


if __name__ == "__main__":
    sys.exit(main())
