import argparse
import logging
import sys

from src.app_shell.config import ConfigurationError, Settings, validate_ops_rules
from src.app_shell.context import ServiceContext, pending_migrations, run_migrations
from src.components.actions import DraftAction
from src.domain.entities import ActorContext
from src.rules.loader import load_rules
from src.rules.models import Rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")


def get_rules(settings: Settings) -> Rules:
    try:
        rules = load_rules(settings.rules_path)
        validate_ops_rules(rules, settings.data_dir)
    except (FileNotFoundError, ValueError, ConfigurationError) as e:
        logger.error("%s", e)
        sys.exit(1)
    return rules


def operator_actor(rules: Rules) -> ActorContext:
    """The shell operator holds exactly the capabilities draft actions require."""
    return ActorContext(
        actor_id="cli",
        display_name="Command line",
        capabilities=list(rules.drafts.permissions.required_capabilities),
    )


def handle_migrate(settings: Settings, args: argparse.Namespace) -> None:
    if args.dry_run:
        for filename in pending_migrations(settings.db_path):
            print(f"Pending: {filename}")
        return
    applied = run_migrations(settings.db_path)
    print(f"Applied {len(applied)} migrations.")


def handle_action(ctx: ServiceContext, args: argparse.Namespace) -> None:
    result = ctx.controller.dispatch(args.command, args.item_id, operator_actor(ctx.rules))
    if not result.performed:
        logger.error("%s of item %s not performed: %s", args.command, args.item_id, result.reason)
        sys.exit(1)
    print(f"{args.command}: ok -> {result.redirect_target}")


def handle_status(ctx: ServiceContext, args: argparse.Namespace) -> None:
    link = ctx.link(args.item_id)
    summary = link.summary()
    print(f"State:     {summary.state.value}")
    print(f"Published: {summary.published_id or '-'}")
    print(f"Draft:     {summary.draft_id or '-'}")
    if summary.is_orphaned:
        print("Warning: the draft record is missing.")
    elif not summary.is_consistent:
        print("Warning: the draft pointers do not match.")
    for name, url in ctx.controller.available_actions(link).items():
        print(f"  {name}: {url}")


def handle_url(ctx: ServiceContext, args: argparse.Namespace) -> None:
    url = ctx.controller.build_action_url(args.action, args.item_id)
    if url is None:
        logger.error("No URL for action %r on item %r", args.action, args.item_id)
        sys.exit(1)
    print(url)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Shadow Drafts CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    migrate_parser = subparsers.add_parser("migrate", help="Apply pending database migrations")
    migrate_parser.add_argument(
        "--dry-run", action="store_true", help="List pending migrations without applying them"
    )

    # create / publish / delete
    for action in DraftAction:
        action_parser = subparsers.add_parser(action.value, help=f"{action.value.title()} a draft")
        action_parser.add_argument("item_id", help="Published item or draft id")

    # status
    status_parser = subparsers.add_parser("status", help="Show the draft pairing of an item")
    status_parser.add_argument("item_id", help="Published item or draft id")

    # url
    url_parser = subparsers.add_parser("url", help="Print the trigger URL of an action")
    url_parser.add_argument("action", help="create, publish or delete")
    url_parser.add_argument("item_id", help="Item id")

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    settings = Settings()
    rules = get_rules(settings)

    if args.command == "migrate":
        handle_migrate(settings, args)
        return

    ctx = ServiceContext.create(settings.db_path, rules)

    if args.command in {a.value for a in DraftAction}:
        handle_action(ctx, args)
    elif args.command == "status":
        handle_status(ctx, args)
    elif args.command == "url":
        handle_url(ctx, args)


if __name__ == "__main__":
    main()
