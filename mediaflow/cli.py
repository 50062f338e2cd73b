"""CLI for browsing, exporting and importing saved workflows."""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .config import Settings, configure_logging, load_settings
from .storage.kv import JsonFileStorage
from .workflow.catalog import WorkflowCatalog, WorkflowError
from .workflow.codec import workflow_from_record, workflow_from_yaml, workflow_to_record, workflow_to_yaml


def _catalog(settings: Settings) -> WorkflowCatalog:
    catalog = WorkflowCatalog(JsonFileStorage(settings.storage_dir))
    if catalog.load_error:
        print(f"warning: {catalog.load_error}", file=sys.stderr)
    return catalog


def cmd_list(catalog: WorkflowCatalog, args: argparse.Namespace) -> int:
    for workflow in catalog.list():
        print(f"{workflow.id:<24} {workflow.category.value:<7} {len(workflow.nodes):>3} nodes  {workflow.name}")
    return 0


def cmd_show(catalog: WorkflowCatalog, args: argparse.Namespace) -> int:
    print(workflow_to_yaml(catalog.get(args.workflow_id)), end="")
    return 0


def cmd_export(catalog: WorkflowCatalog, args: argparse.Namespace) -> int:
    workflow = catalog.get(args.workflow_id)
    out = Path(args.output)
    if out.suffix in (".yaml", ".yml"):
        text = workflow_to_yaml(workflow)
    else:
        text = json.dumps(workflow_to_record(workflow), indent=2)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
    print(f"Wrote workflow {workflow.id} to: {out}")
    return 0


def cmd_import(catalog: WorkflowCatalog, args: argparse.Namespace) -> int:
    path = Path(args.path)
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        source = workflow_from_yaml(text)
    else:
        source = workflow_from_record(json.loads(text))
    saved = catalog.add(args.name or source.name, source.nodes, source.edges, source.description)
    if catalog.save_error:
        print(f"error: {catalog.save_error}", file=sys.stderr)
        return 1
    print(f"Imported {saved.name} as {saved.id}")
    return 0


def cmd_delete(catalog: WorkflowCatalog, args: argparse.Namespace) -> int:
    if not catalog.remove(args.workflow_id):
        print(f"No custom workflow with id {args.workflow_id}")
        return 1
    print(f"Deleted {args.workflow_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mediaflow", description="Manage media pipeline workflows.")
    parser.add_argument("--storage-dir", help="Directory holding customWorkflows.json.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("list", help="List preset and custom workflows.")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("show", help="Print a workflow as YAML.")
    p.add_argument("workflow_id")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("export", help="Write a workflow to a .json or .yaml file.")
    p.add_argument("workflow_id")
    p.add_argument("output")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("import", help="Save a workflow file as a new custom workflow.")
    p.add_argument("path")
    p.add_argument("--name", help="Override the workflow name.")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("delete", help="Delete a custom workflow.")
    p.add_argument("workflow_id")
    p.set_defaults(func=cmd_delete)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
        if args.storage_dir:
            settings.storage_dir = Path(args.storage_dir)
        configure_logging(settings)
        return args.func(_catalog(settings), args)
    except (WorkflowError, ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
