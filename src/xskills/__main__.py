"""CLI entry-point: ``python -m xskills import`` / ``skills`` / ``skill`` / ``export`` …"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

from xskills import config
from xskills.models import ApiUsage
from xskills.pipeline import Workspace, import_bookmarks, load_skills
from xskills.report import (
    LEVEL_ORDER,
    calculate_analytics,
    filter_skills,
    find_skill,
    format_agent_compiler,
    format_analytics,
    format_skill_detail,
    format_skills,
    parse_level,
    render_html,
    sort_skills,
)
from xskills.x_client import XClientError

logger = logging.getLogger(__name__)

_LEVEL_CHOICES = [level.value for level in LEVEL_ORDER]


def _setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _emit(text: str, output: Path | None) -> None:
    if output is None:
        print(text)
        return
    output.write_text(text, encoding="utf-8")
    logger.info("Exported to %s", output)


# ── commands ──────────────────────────────────────────────────────────────


def _cmd_import(ws: Workspace, args: argparse.Namespace) -> None:
    usage = ApiUsage()
    posts = import_bookmarks(ws, count=args.count, force=args.force, usage=usage)
    print(f"{len(posts)} bookmarks available (API requests: {usage.requests}, "
          f"est. cost ${usage.estimated_cost:.3f})")


def _cmd_skills(ws: Workspace, args: argparse.Namespace) -> None:
    skills = load_skills(ws, rebuild=args.rebuild)
    level = parse_level(args.level) if args.level else None
    skills = sort_skills(filter_skills(skills, level=level), by=args.sort)[: args.limit]

    if args.json:
        print(json.dumps([s.model_dump(mode="json", by_alias=True) for s in skills], indent=2))
    else:
        print(format_skills(skills))


def _cmd_skill(ws: Workspace, args: argparse.Namespace) -> None:
    skill = find_skill(load_skills(ws), args.name)
    if skill is None:
        logger.error("Skill not found: %s", args.name)
        sys.exit(1)

    if args.json:
        print(skill.model_dump_json(by_alias=True, indent=2))
    else:
        limit = len(skill.evidence) if args.evidence else 10
        print(format_skill_detail(skill, evidence_limit=limit))


def _cmd_analytics(ws: Workspace, args: argparse.Namespace) -> None:
    skills = load_skills(ws)
    posts = ws.store.load_posts() or []
    analytics = calculate_analytics(skills, len(posts), datetime.now(UTC))
    if args.json:
        print(analytics.model_dump_json(by_alias=True, indent=2))
    else:
        print(format_analytics(analytics))


def _cmd_export(ws: Workspace, args: argparse.Namespace) -> None:
    skills = load_skills(ws)
    posts = ws.store.load_posts() or []
    min_level = parse_level(args.min_level) if args.min_level else None
    skills = filter_skills(skills, min_level=min_level, min_confidence=args.min_confidence)

    if args.format == "agent-compiler":
        doc = format_agent_compiler(skills, len(posts), datetime.now(UTC))
        text = json.dumps(doc, indent=2)
    elif args.format == "json":
        text = json.dumps([s.model_dump(mode="json", by_alias=True) for s in skills], indent=2)
    elif args.format == "html":
        text = render_html(format_skills(skills))
    else:
        text = format_skills(skills)
    _emit(text, args.output)


def _cmd_ignore(ws: Workspace, args: argparse.Namespace) -> None:
    if args.remove:
        ws.manager.remove_ignored_keyword(args.keyword)
    else:
        ws.manager.add_ignored_keyword(args.keyword)
    # Keyword extraction changed; force recomputation next time
    ws.store.clear_skills()
    print("Ignored keywords: " + ", ".join(ws.manager.settings.ignored_keywords))


def _cmd_rename(ws: Workspace, args: argparse.Namespace) -> None:
    ws.manager.set_custom_name(args.skill_id, args.name)
    print(f"{args.skill_id} → {args.name}")


def _cmd_tag(ws: Workspace, args: argparse.Namespace) -> None:
    ws.manager.add_custom_tags(args.skill_id, args.tags)
    print(f"{args.skill_id}: " + ", ".join(ws.manager.settings.custom_tags[args.skill_id]))


_COMMANDS = {
    "import": _cmd_import,
    "skills": _cmd_skills,
    "skill": _cmd_skill,
    "analytics": _cmd_analytics,
    "export": _cmd_export,
    "ignore": _cmd_ignore,
    "rename": _cmd_rename,
    "tag": _cmd_tag,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xskills",
        description="Infer a skill profile from your X bookmarks.",
    )
    parser.add_argument("--data-dir", type=Path, default=None, help="Override XSKILLS_DATA_DIR.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    sub = parser.add_subparsers(dest="command")

    # ── import ────────────────────────────────────────────────────────
    p = sub.add_parser("import", help="Fetch bookmarks from the X API.")
    p.add_argument(
        "--count",
        type=int,
        default=config.DEFAULT_COUNT,
        help=f"How many bookmarks to fetch (default: {config.DEFAULT_COUNT}, "
        f"max: {config.MAX_BOOKMARKS}).",
    )
    p.add_argument("--force", action="store_true", help="Ignore cache, re-fetch.")

    # ── skills ────────────────────────────────────────────────────────
    p = sub.add_parser("skills", help="List inferred skills.")
    p.add_argument("--level", choices=_LEVEL_CHOICES, type=str.capitalize, default=None)
    p.add_argument("--sort", choices=["score", "count", "recent"], default="score")
    p.add_argument("--limit", type=int, default=20)
    p.add_argument("--json", action="store_true", help="JSON output.")
    p.add_argument("--rebuild", action="store_true", help="Recompute from cached bookmarks.")

    # ── skill ─────────────────────────────────────────────────────────
    p = sub.add_parser("skill", help="Show one skill in detail.")
    p.add_argument("name", help="Skill name, id or slug.")
    p.add_argument("--json", action="store_true")
    p.add_argument("--evidence", action="store_true", help="Show all evidence.")

    # ── analytics ─────────────────────────────────────────────────────
    p = sub.add_parser("analytics", help="Summary statistics over all skills.")
    p.add_argument("--json", action="store_true")

    # ── export ────────────────────────────────────────────────────────
    p = sub.add_parser("export", help="Export skills.")
    p.add_argument(
        "--format",
        choices=["agent-compiler", "json", "markdown", "html"],
        default="json",
    )
    p.add_argument("--output", type=Path, default=None, help="Output file (default: stdout).")
    p.add_argument("--min-level", choices=_LEVEL_CHOICES, type=str.capitalize, default=None)
    p.add_argument("--min-confidence", type=float, default=0.0)

    # ── customisations ────────────────────────────────────────────────
    p = sub.add_parser("ignore", help="Exclude a keyword from topic extraction.")
    p.add_argument("keyword")
    p.add_argument("--remove", action="store_true", help="Stop ignoring the keyword.")

    p = sub.add_parser("rename", help="Give a skill a custom display name.")
    p.add_argument("skill_id")
    p.add_argument("name")

    p = sub.add_parser("tag", help="Attach custom capability tags to a skill.")
    p.add_argument("skill_id")
    p.add_argument("tags", nargs="+")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = _COMMANDS.get(args.command or "")
    if handler is None:
        parser.print_help()
        sys.exit(1)

    _setup_logging(args.verbose)
    workspace = Workspace(args.data_dir)
    try:
        handler(workspace, args)
    except (XClientError, ValueError) as exc:
        logger.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
