"""Command line entry point.

Usage::

    crudforge add Order --all
    crudforge add Product --create --read --entity-type FullyAudited --dry-run
    crudforge config --init
    crudforge config --sample crudforge.sample.json
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from crudforge import __version__
from crudforge.composer import TemplateRenderer
from crudforge.config import CONFIG_FILENAME, Config, PathsConfig
from crudforge.errors import CrudForgeError, IOFailure
from crudforge.models import EntityTier, ResolvedOptions
from crudforge.pipeline import generate
from crudforge.planner import MODEL, model_path
from crudforge.reporter import (
    console,
    print_error,
    print_manifest,
    print_next_steps,
    print_plan,
    print_preview,
    print_success,
    print_templates,
    print_warning,
)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crudforge",
        description="crudforge -- generate CRUD building blocks for an entity",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  crudforge add Order --all\n"
            "  crudforge add Product --create --read --entity-type FullyAudited\n"
            "  crudforge add Invoice --all --skip-tests --dry-run\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Generate artifacts for an entity")
    add.add_argument("entity", help="Entity name, singular or plural (e.g. Order)")

    ops = add.add_argument_group("operations")
    ops.add_argument("--all", action="store_true", help="Generate all CRUD operations")
    ops.add_argument("--create", action="store_true", help="Generate the create operation")
    ops.add_argument("--read", action="store_true", help="Generate the read operations")
    ops.add_argument("--update", action="store_true", help="Generate the update operation")
    ops.add_argument("--delete", action="store_true", help="Generate the delete operation")

    add.add_argument(
        "--entity-type",
        default=None,
        metavar="TYPE",
        help=f"Entity tier: {', '.join(t.value for t in EntityTier)} (default: from config)",
    )
    add.add_argument("--skip-tests", action="store_true", help="Skip test generation")
    add.add_argument("--skip-permissions", action="store_true", help="Skip permission constants")
    add.add_argument(
        "--events",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Generate domain events (default: from config)",
    )
    add.add_argument(
        "--mapping",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Generate the mapping profile (default: from config)",
    )
    add.add_argument("--template", default=None, help="Template set to use")
    add.add_argument("--output", "-o", default=None, help="Output root (default: from config)")
    add.add_argument("--config", default=None, help=f"Path to {CONFIG_FILENAME}")
    add.add_argument("--dry-run", action="store_true", help="Preview without writing files")
    add.add_argument(
        "--regenerate-model",
        action="store_true",
        help="Overwrite the domain model even if it already exists",
    )
    add.add_argument("--verbose", "-v", action="store_true", help="Show the generation plan")

    cfg = sub.add_parser("config", help="Create or inspect crudforge configuration")
    group = cfg.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--init",
        nargs="?",
        const=CONFIG_FILENAME,
        metavar="PATH",
        help=f"Write a default configuration (default: ./{CONFIG_FILENAME})",
    )
    group.add_argument(
        "--sample",
        nargs="?",
        const="",
        metavar="PATH",
        help="Print a sample configuration, or write it to PATH",
    )
    group.add_argument("--show", action="store_true", help="Print the effective configuration")
    group.add_argument(
        "--templates", action="store_true", help="List the files of the configured template set"
    )
    cfg.add_argument("--force", action="store_true", help="Overwrite an existing file with --init")
    cfg.add_argument("--config", default=None, help=f"Path to {CONFIG_FILENAME}")

    return parser


def options_from_args(args: argparse.Namespace) -> ResolvedOptions:
    return ResolvedOptions(
        entity_name=args.entity,
        all=args.all,
        create=args.create,
        read=args.read,
        update=args.update,
        delete=args.delete,
        entity_type=args.entity_type,
        skip_tests=args.skip_tests,
        skip_permissions=args.skip_permissions,
        generate_events=args.events,
        generate_mapping_profiles=args.mapping,
        template=args.template,
        output_root=Path(args.output) if args.output else None,
        dry_run=args.dry_run,
        regenerate_model=args.regenerate_model,
    )


def load_config(path: str | None) -> Config:
    """Explicit file, else discovery from the working directory, then env overrides."""
    if path:
        source = Path(path).resolve()
        config = Config.load(source)
        if not config.paths.root_path.is_absolute():
            config.paths.root_path = source.parent / config.paths.root_path
    else:
        config = Config.discover()
    return Config.from_env(config)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def run_add(args: argparse.Namespace, config: Config) -> int:
    options = options_from_args(args)
    try:
        result = generate(options, config)
    except IOFailure as exc:
        print_manifest(exc.manifest, title="Partial Output")
        print_error(str(exc))
        return 1
    except CrudForgeError as exc:
        print_error(str(exc))
        return 1
    except OSError as exc:
        print_error(f"Could not read the output tree: {exc}")
        return 1

    if args.verbose:
        print_plan(result.plan)

    if MODEL not in {d.logical_name for d in result.descriptors}:
        print_warning(
            f"Keeping existing {model_path(result.plan)}; "
            "pass --regenerate-model to overwrite it"
        )

    if result.preview is not None:
        print_preview(result.entity.singular_name, result.preview)
        return 0

    print_manifest(result.manifest)
    print_success(
        f"{result.entity.singular_name} CRUD operations generated successfully "
        f"({len(result.manifest.written)} files)"
    )
    print_next_steps(result.plan)
    return 0


def run_config(args: argparse.Namespace, config: Config) -> int:
    if args.init is not None:
        return _init_config(Path(args.init), force=args.force)
    if args.sample:
        return _write_config(Config.sample(), Path(args.sample), "Sample configuration")
    if args.templates:
        return _list_templates(config)
    shown = Config.sample() if args.sample is not None else config
    console.print_json(shown.model_dump_json(indent=2))
    return 0


def _init_config(path: Path, *, force: bool) -> int:
    if path.exists() and not force:
        print_error(f"{path} already exists; pass --force to overwrite it")
        return 1
    # Relative root, resolved against the file's directory when loaded.
    return _write_config(Config(paths=PathsConfig(root_path=Path("."))), path, "Configuration")


def _write_config(config: Config, path: Path, label: str) -> int:
    try:
        saved = config.save(path)
    except OSError as exc:
        print_error(f"Could not write {path}: {exc}")
        return 1
    print_success(f"{label} written to {saved}")
    return 0


def _list_templates(config: Config) -> int:
    template_id = config.templates.default_template
    renderer = TemplateRenderer(custom_dir=config.custom_templates_dir)
    try:
        renderer.require_template_set(template_id)
    except CrudForgeError as exc:
        print_error(str(exc))
        return 1
    print_templates(template_id, renderer.list_templates(template_id))
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``crudforge`` and ``python -m crudforge``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValidationError) as exc:
        print_error(f"Could not load configuration: {exc}")
        return 1

    if args.command == "config":
        return run_config(args, config)
    return run_add(args, config)


if __name__ == "__main__":
    sys.exit(main())
