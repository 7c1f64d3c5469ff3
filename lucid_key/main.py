# Path: lucid_key/main.py
"""
lucid_key - Identification Key Reader

Command line entry point. Loads a key archive and prints one of:
- the key overview (default)
- the remaining and discarded entities for chosen features (--choose)
- an entity profile (--profile)
- entity and feature names matching a term (--search)

Usage:
    lucid-key oaks.lk4
    lucid-key oaks.lk4 --choose leaf_lobed --choose leaf_length=6.5
    lucid-key oaks.lk4 --profile e12
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from .config_loader import ConfigLoader
from .constants import FeatureKind, STATUS_FAIL, STATUS_WARN
from .core.logger import get_output_logger, setup_ipo_logging
from .loaders import load_archive_file
from .models.error import KeyLoadError
from .models.key_data import FeatureId, KeyData
from .output import ReportGenerator
from .process.matcher import compute_matches, update_constraints
from .process.matcher.constraints import ChosenConstraints


CHOICE_SEPARATOR = '='


def parse_choice(text: str) -> tuple[str, Optional[str]]:
    """
    Split a --choose argument into feature id and value.

    'leaf_lobed' selects a state; 'leaf_length=6.5' enters a number.

    Raises:
        ValueError: If the feature id is empty
    """
    feature_id, separator, value = text.partition(CHOICE_SEPARATOR)
    feature_id = feature_id.strip()
    if not feature_id:
        raise ValueError(f"Invalid choice '{text}': missing feature id")
    return feature_id, (value.strip() if separator else None)


def build_chosen(key: KeyData, choices: list[str]) -> ChosenConstraints:
    """
    Turn --choose arguments into a chosen set.

    Unknown features and unparseable numbers are reported and skipped.

    Raises:
        ValueError: If a numeric feature is chosen without a value
    """
    chosen: ChosenConstraints = {}
    for text in choices:
        feature_id, value = parse_choice(text)
        feature = key.features.get(FeatureId(feature_id))
        if feature is None:
            print(f"{STATUS_WARN} Unknown feature '{feature_id}' ignored", file=sys.stderr)
            continue

        if feature.kind == FeatureKind.NUMERIC:
            if value is None:
                raise ValueError(f"Numeric feature '{feature_id}' needs a value ({feature_id}=N)")
            updated = update_constraints(chosen, feature.id, value, is_numeric=True)
            if feature.id not in updated:
                print(f"{STATUS_WARN} '{value}' is not a number for '{feature_id}'", file=sys.stderr)
            chosen = updated
        else:
            chosen = update_constraints(chosen, feature.id, True)
    return chosen


def run(args: argparse.Namespace, config: ConfigLoader) -> int:
    """Load the key and print the requested report."""
    logger = get_output_logger('main')
    generator = ReportGenerator(config, use_unicode=args.unicode)

    with load_archive_file(args.archive, config) as key:
        if key.errors and not args.quiet:
            print(f"{STATUS_WARN} {len(key.errors)} problems while loading", file=sys.stderr)

        if args.profile:
            report = generator.profile_report(key, args.profile)
        elif args.search is not None:
            report = generator.search_report(key, args.search)
        elif args.choose:
            chosen = build_chosen(key, args.choose)
            result = compute_matches(key, chosen)
            report = generator.match_report(key, result, chosen, include_tree=args.tree)
        else:
            report = generator.key_report(key, include_tree=args.tree)

        if args.output:
            formats = [args.format] if args.format else None
            for fmt_name, path in generator.write(report, Path(args.output), formats).items():
                if not args.quiet:
                    print(f"Wrote {fmt_name}: {path}")
        else:
            print(generator.render(report, args.format))

    logger.info(f"Finished {report.report_type} report for {args.archive}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for lucid_key.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        prog='lucid-key',
        description='lucid_key - Identification Key Reader',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lucid-key oaks.lk4                          Key overview
  lucid-key oaks.lk4 --tree                   Overview with entity and feature trees
  lucid-key oaks.lk4 -c leaf_lobed            Entities remaining for a chosen state
  lucid-key oaks.lk4 -c leaf_length=6.5       Entities remaining for a measurement
  lucid-key oaks.lk4 --profile e12            Characteristics of one entity
  lucid-key oaks.lk4 --search quercus -f json Search names, JSON output
        """
    )

    parser.add_argument('archive', help='Path to the key archive')

    parser.add_argument(
        '--choose', '-c',
        action='append',
        default=[],
        metavar='ID[=VALUE]',
        help='Choose a state, or enter a value for a numeric feature (repeatable)'
    )

    parser.add_argument(
        '--profile', '-p',
        metavar='ENTITY_ID',
        help='Show the characteristics of one entity'
    )

    parser.add_argument(
        '--search', '-s',
        metavar='TERM',
        help='Search entity and feature names'
    )

    parser.add_argument(
        '--tree', '-t',
        action='store_true',
        help='Include entity trees in the report'
    )

    parser.add_argument(
        '--unicode',
        action='store_true',
        help='Draw trees with Unicode box characters'
    )

    parser.add_argument(
        '--format', '-f',
        choices=['text', 'json'],
        help='Output format (default: LUCID_KEY_OUTPUT_FORMAT or text)'
    )

    parser.add_argument(
        '--output', '-o',
        metavar='DIR',
        help='Write the report to a directory instead of stdout'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress informational output'
    )

    args = parser.parse_args(argv)

    try:
        config = ConfigLoader()
        setup_ipo_logging(
            log_dir=config.get('log_dir'),
            log_level=config.get('log_level', 'INFO'),
            console_output=config.get('log_console', True) and not args.quiet,
        )
        return run(args, config)

    except KeyLoadError as e:
        print(f"\n{STATUS_FAIL} {e.error}", file=sys.stderr)
        return 1

    except ValueError as e:
        print(f"\n{STATUS_FAIL} Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\n[Interrupted]", file=sys.stderr)
        return 130

    except Exception as e:
        print(f"\n{STATUS_FAIL} Unexpected error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
