#!/usr/bin/env python3
"""
modelgraph CLI - Main entry point.

Usage:
    modelgraph validate <schema.yaml>                   # Report all diagnostics
    modelgraph inputs <schema.yaml> <Type>              # Update input shape as JSON
    modelgraph inputs <schema.yaml> <Type> --create     # Create input shape
    modelgraph inputs <schema.yaml> <Type> --update-all # Update-all input shape
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from .. import __version__
from ..core.errors import ModelgraphError
from ..config import load_schema
from ..model import Model, compile_model
from ..schema_generation import CreateInputTypeGenerator, UpdateInputTypeGenerator

logger = logging.getLogger(__name__)


def cmd_validate(args: argparse.Namespace) -> int:
    """Build and validate a schema document."""
    try:
        model = Model(load_schema(args.schema))
        result = model.validate()
    except ModelgraphError as e:
        print(f"Error: {e}")
        return 1

    for message in result.messages:
        print(message)

    print(f"\n{len(result.errors)} error(s), {len(result.warnings)} warning(s), {len(result.infos)} info(s)")
    return 1 if result.has_errors else 0


def cmd_inputs(args: argparse.Namespace) -> int:
    """Print the create/update input shape of a type."""
    try:
        model = compile_model(load_schema(args.schema))
    except ModelgraphError as e:
        print(f"Error: {e}")
        return 1

    type_ = model.get_type(args.type_name)
    if type_ is None:
        print(f"Error: type '{args.type_name}' not found")
        return 1

    create_generator = CreateInputTypeGenerator(model)
    update_generator = UpdateInputTypeGenerator(model, create_generator)

    try:
        if args.create:
            input_type = create_generator.generate(type_)
        elif args.update_all:
            if not type_.is_root_entity_type:
                print(f"Error: update-all inputs exist only for root entity types, '{type_.name}' is {type_.kind.value}")
                return 1
            input_type = update_generator.generate_update_all_root_entities_input_type(type_)
        else:
            input_type = update_generator.generate(type_)
    except ModelgraphError as e:
        print(f"Error: {e}")
        return 1

    print(json.dumps(input_type.describe().model_dump(mode="json"), indent=2))
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="modelgraph",
        description="modelgraph - schema model compiler for graph-document stores"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # validate
    validate_parser = subparsers.add_parser("validate", help="Validate a schema document")
    validate_parser.add_argument("schema", help="Path to the schema YAML file")

    # inputs
    inputs_parser = subparsers.add_parser("inputs", help="Show the input shape of a type")
    inputs_parser.add_argument("schema", help="Path to the schema YAML file")
    inputs_parser.add_argument("type_name", help="Type name")
    mode = inputs_parser.add_mutually_exclusive_group()
    mode.add_argument("--create", action="store_true", help="Create input shape")
    mode.add_argument("--update", action="store_true", help="Update input shape (default)")
    mode.add_argument("--update-all", action="store_true", help="Update-all input shape")

    return parser


def app(args: Optional[List[str]] = None) -> int:
    """Main CLI application."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not parsed.command:
        parser.print_help()
        return 0

    commands = {
        "validate": cmd_validate,
        "inputs": cmd_inputs,
    }

    handler = commands.get(parsed.command)
    if handler:
        return handler(parsed)

    parser.print_help()
    return 1


def main() -> None:
    """Entry point for CLI."""
    sys.exit(app())


if __name__ == "__main__":
    main()
