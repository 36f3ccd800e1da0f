#!/usr/bin/env python3
"""
Breeze metadata generator - command line entry point.

Imports Python modules that define entity classes, builds the Breeze metadata
document for them and writes it as JSON.
"""

import argparse
import json
import os
import sys
from typing import List, Optional
from dotenv import load_dotenv

from breeze_metadata_lib import (
    DiscoveryError,
    EnumDetection,
    MetadataBuildError,
    MetadataBuilder,
    OverrideNamingPolicy,
    PolicyConfigError,
    discover_entity_types
)

# Load environment variables from .env file
load_dotenv()


def split_list(value: Optional[str]) -> List[str]:
    """Split a comma-separated option into trimmed, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


def print_trace_info(document, policy):
    """Print a human-readable summary of the built metadata."""
    print("=" * 80)
    print("Breeze Metadata Trace Information")
    print("=" * 80)

    if policy.policy_file:
        print(f"\nPolicy File: {policy.policy_file} ({len(policy.overrides)} overrides)")
    else:
        print("\nPolicy File: None (default naming policy)")

    print(f"\nStructural Types ({len(document.structural_types)}):")
    for structural_type in document.structural_types:
        base = f" extends {structural_type.base_type_name}" if structural_type.base_type_name else ""
        print(f"  • {structural_type.type_key}{base} -> /{structural_type.default_resource_name}")
        for prop in structural_type.data_properties:
            flags = []
            if prop.is_part_of_key:
                flags.append("key")
            if prop.is_nullable is False:
                flags.append("required")
            if prop.concurrency_mode:
                flags.append("version")
            suffix = f" [{', '.join(flags)}]" if flags else ""
            print(f"      {prop.name_on_server}: {prop.data_type}{suffix}")
        for nav in structural_type.navigation_properties:
            arity = "1" if nav.is_scalar else "*"
            print(f"      {nav.name_on_server} -> {nav.entity_type_name} ({arity}) {nav.association_name}")

    if document.enum_types:
        print(f"\nEnum Types ({len(document.enum_types)}):")
        for enum_type in document.enum_types:
            print(f"  • {enum_type.short_name}: {', '.join(enum_type.values)}")

    if document.foreign_key_map:
        print(f"\nForeign Keys ({len(document.foreign_key_map)}):")
        for relation, key in document.foreign_key_map.items():
            print(f"  • {relation} -> {key}")

    print("\n" + "=" * 80)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Build Breeze metadata from Python entity classes",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter  # Show defaults in help
    )
    parser.add_argument("modules_pos", nargs='*', help="Modules defining the entity classes (alternative to --module or env var)")
    parser.add_argument("--module", dest="modules_via_flag", action="append", help="Module defining entity classes; may be repeated (overrides positional arguments and BREEZE_MODULES env var)")
    parser.add_argument("--types", help="Comma-separated list of entity class names to include. Supports wildcards: 'Order*,*Item'")
    parser.add_argument("--policy-file", help="JSON file with naming policy overrides (overrides BREEZE_POLICY_FILE env var; default: ./breeze_policy.json if present)")
    parser.add_argument("--enum-detection", choices=[d.value for d in EnumDetection], default=None, help="Which property shapes count as enum-typed (overrides BREEZE_ENUM_DETECTION env var; default: both)")
    parser.add_argument("-o", "--output", help="Write JSON to this file instead of stdout")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation")
    parser.add_argument("--foreign-keys", action="store_true", help="Output the foreign key map used for relationship fixup instead of the metadata")
    parser.add_argument("--trace", action="store_true", help="Print a summary of the built metadata instead of JSON")
    parser.add_argument("-v", "--verbose", "--debug", dest="verbose", action="store_true", help="Enable verbose output to stderr")

    args = parser.parse_args(argv)

    # --- Configuration Handling ---
    # Priority: --module flag > Positional arguments > Environment Variable > .env file
    modules = args.modules_via_flag or args.modules_pos
    if modules and args.verbose:
        print("[VERBOSE] Using entity modules from command line.", file=sys.stderr)
    if not modules:
        modules = split_list(os.getenv("BREEZE_MODULES"))
        if modules and args.verbose: print("[VERBOSE] Using BREEZE_MODULES from environment.", file=sys.stderr)

    if not modules:
        # Error, print regardless of verbosity
        print("ERROR: No entity modules provided.", file=sys.stderr)
        print("Provide them as positional arguments, via --module, or the BREEZE_MODULES environment variable.", file=sys.stderr)
        parser.print_help(file=sys.stderr)
        return 1

    policy_file = args.policy_file or os.getenv("BREEZE_POLICY_FILE")
    type_patterns = split_list(args.types) or None

    enum_detection_value = args.enum_detection or os.getenv("BREEZE_ENUM_DETECTION") or EnumDetection.BOTH.value
    try:
        enum_detection = EnumDetection(enum_detection_value)
    except ValueError:
        choices = ', '.join(d.value for d in EnumDetection)
        print(f"ERROR: Invalid enum detection mode '{enum_detection_value}'; expected one of {choices}", file=sys.stderr)
        return 1

    # Entity modules are usually importable relative to the working directory.
    # The entry is removed again before returning.
    cwd = os.getcwd()
    added_cwd = cwd not in sys.path
    if added_cwd:
        sys.path.insert(0, cwd)

    try:
        policy = OverrideNamingPolicy(verbose=args.verbose)
        policy.load_from_file(policy_file)

        types = discover_entity_types(modules, type_patterns)
        if args.verbose:
            print(f"[VERBOSE] Discovered {len(types)} entity types: {', '.join(t.__name__ for t in types)}", file=sys.stderr)

        builder = MetadataBuilder(policy=policy, enum_detection=enum_detection, verbose=args.verbose)
        document = builder.build(types)

        if args.trace:
            print_trace_info(document, policy)
            return 0

        if args.foreign_keys:
            output = json.dumps(document.foreign_key_map, indent=args.indent)
        else:
            output = document.to_json(indent=args.indent)
    except (DiscoveryError, PolicyConfigError, MetadataBuildError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        if added_cwd and cwd in sys.path:
            sys.path.remove(cwd)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(output)
            f.write("\n")
        if args.verbose: print(f"[VERBOSE] Metadata written to {args.output}", file=sys.stderr)
    else:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
