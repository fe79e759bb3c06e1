#!/usr/bin/env python3
"""
Add a curated resource directly to the SQL store.

Usage:
  python scripts/add_resource.py --title "Urge Surfing" --type audio --category cravings \
      --content "..." [--description "..."] [--duration "8 min"]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make the recovery_api package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from recovery_api.db.create_tables import create_all  # noqa: E402
from recovery_api.domain.entities import NewResource, ResourceType  # noqa: E402
from recovery_api.repositories.sql_repository import SQLStorage  # noqa: E402

RESOURCE_TYPES = [t.value for t in ResourceType]


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Add a resource to the SQL store")
    ap.add_argument("--title", required=True)
    ap.add_argument("--type", required=True, choices=RESOURCE_TYPES, help="article, video or audio")
    ap.add_argument("--category", required=True, help="e.g. triggers, mindfulness")
    ap.add_argument("--content", required=True)
    ap.add_argument("--description")
    ap.add_argument("--duration", help="e.g. '5 min read', '12 min'")
    return ap


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    title = (args.title or "").strip()
    category = (args.category or "").strip()
    if not title or not category:
        raise SystemExit("Title and category must not be empty")

    create_all()
    repo = SQLStorage()
    resource = repo.create_resource(
        NewResource(
            title=title,
            type=ResourceType(args.type),
            content=args.content,
            category=category,
            description=(args.description or "").strip() or None,
            duration=(args.duration or "").strip() or None,
        )
    )
    print("OK: resource added")
    print(f"  ID: {resource.id}")
    print(f"  Title: {resource.title}")
    print(f"  Category: {resource.category}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
