#!/usr/bin/env python3
"""
CLI entrypoint for sdf-tree.

Usage:
  sdf-tree <file.sdf | model://name> [flags]

Flags:
  --no-flatten
  --model-path DIR   (repeatable)
  --sdf-version V
  --config FILE
  --find NAME
  --output FILE
  --verbose
"""
from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional, TextIO

from app.config import DEFAULT_CONFIG, LoaderConfig, load_config
from core.errors import SdfError
from elements import Model, Root
from utils.logging_config import configure_logging

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_NOT_FOUND = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sdf-tree",
        description="Load a SDF document, resolving includes, and display its model tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Summary of a world file
    sdf-tree worlds/empty.world

    # A model from the search path, as nested models
    sdf-tree model://my_robot --no-flatten --model-path ~/models

    # Which file defined a given link
    sdf-tree robot.sdf --find robot::arm::link
        """)

    parser.add_argument('source', help='SDF file path or model:// URI')

    parser.add_argument('--no-flatten', dest='flatten', action='store_false', default=None,
                        help='Keep nested models instead of flattening them')
    parser.add_argument('--model-path', action='append', metavar='DIR',
                        help='Model search directory (repeatable, replaces the default search path)')
    parser.add_argument('--sdf-version', metavar='V',
                        help='Maximum SDF version of the model files, e.g. 1.5')
    parser.add_argument('--config', metavar='FILE',
                        help='YAML loader configuration')
    parser.add_argument('--find', metavar='NAME',
                        help='Qualified name (a::b::c) of an element to locate')
    parser.add_argument('--output', '-o', metavar='FILE',
                        help='Write the resolved document to FILE')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose logging')
    return parser


def resolve_config(args: argparse.Namespace) -> LoaderConfig:
    cfg = load_config(args.config) if args.config else dataclasses.replace(DEFAULT_CONFIG)
    if args.model_path:
        cfg.model_path = list(args.model_path)
    if args.sdf_version:
        cfg.sdf_version = args.sdf_version
    if args.flatten is not None:
        cfg.flatten = args.flatten
    if args.verbose:
        cfg.log_level = "DEBUG"
    return cfg


def print_model(model: Model, indent: int, out: TextIO) -> None:
    pad = "  " * indent
    print(f"{pad}model {model.name}", file=out)
    for link in model.each_direct_link():
        print(f"{pad}  link {link.name}", file=out)
    for joint in model.each_direct_joint():
        print(f"{pad}  joint {joint.name} ({joint.type}: "
              f"{joint.parent_link.name} -> {joint.child_link.name})", file=out)
    for submodel in model.each_model():
        print_model(submodel, indent + 1, out)


def print_summary(root: Root, out: TextIO) -> None:
    for world in root.each_world():
        print(f"world {world.name}", file=out)
        for model in world.each_model():
            print_model(model, 1, out)
    for model in root.each_model():
        print_model(model, 0, out)


def find_element(root: Root, name: str, out: TextIO) -> bool:
    element = root.find_by_name(name)
    if element is None:
        return False
    print(f"{type(element).__name__} {name}: {root.find_file_of(element)}", file=out)
    return True


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = resolve_config(args)
        configure_logging(cfg.log_level)
        loader = cfg.build_loader()
        root = Root.load(args.source, cfg.version_ceiling, flatten=cfg.flatten, loader=loader)
    except (SdfError, OSError, ValueError) as e:
        print(f"sdf-tree: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.output:
        root.xml.getroottree().write(args.output, pretty_print=True, xml_declaration=True, encoding="utf-8")
        logger.info("wrote %s", args.output)

    if args.find:
        try:
            found = find_element(root, args.find, sys.stdout)
        except SdfError as e:
            print(f"sdf-tree: {e}", file=sys.stderr)
            return EXIT_ERROR
        if not found:
            print(f"sdf-tree: no element named {args.find}", file=sys.stderr)
            return EXIT_NOT_FOUND
    elif not args.output:
        try:
            print_summary(root, sys.stdout)
        except SdfError as e:
            print(f"sdf-tree: {e}", file=sys.stderr)
            return EXIT_ERROR
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
