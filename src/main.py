"""Command line entry point: extract iso-contours from a scalar field file."""

import argparse
import json
import logging
import sys
from pathlib import Path

from contours.builder import run_extraction
from domain.models import ContourSettings
from domain.profiles import load_profile
from field_io import load_field, result_to_dict, write_result_json
from shared.constants import (
    BOUNDARY_MODE_LABELS,
    LOG_FORMAT,
    BoundaryMode,
    HoleNesting,
    OutputKind,
)
from shared.diagnostics import log_memory_usage

logger = logging.getLogger(__name__)


def setup_logging(*, verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure root logging: stderr stream plus an optional UTF-8 file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_file), encoding='utf-8'))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Extract iso-contours (marching squares) from a 2D scalar field',
    )
    parser.add_argument('field', type=Path, help='Field file (.npy, .csv or .txt)')
    parser.add_argument(
        '-t',
        '--threshold',
        type=float,
        action='append',
        dest='thresholds',
        help='Iso-level; repeat for several levels',
    )
    parser.add_argument('--profile', help='Profile name or path to a TOML profile')
    parser.add_argument('--cell-size', type=float, help='World units per grid cell')
    parser.add_argument(
        '--scale',
        type=float,
        help='Output width in world units (overrides --cell-size)',
    )
    parser.add_argument(
        '--boundary',
        choices=[m.value for m in BoundaryMode],
        help='; '.join(f'{m.value}: {label}' for m, label in BOUNDARY_MODE_LABELS.items()),
    )
    parser.add_argument(
        '--nesting',
        choices=[m.value for m in HoleNesting],
        help='Hole nesting rule for polygon output',
    )
    parser.add_argument(
        '--output',
        choices=[k.value for k in OutputKind],
        dest='output_kind',
        help='Emit raw segments or closed polygons',
    )
    parser.add_argument('--workers', type=int, help='Threads for independent levels')
    parser.add_argument('-o', '--out', type=Path, help='JSON output path (default: stdout)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    parser.add_argument('--log-file', type=Path, help='Also write the log to this file')
    return parser


def resolve_settings(args: argparse.Namespace) -> ContourSettings:
    """Profile (or defaults) with command line overrides applied on top."""
    base = load_profile(args.profile) if args.profile else ContourSettings()
    overrides = {
        'thresholds': args.thresholds,
        'cell_size': args.cell_size,
        'output_scale': args.scale,
        'boundary_mode': args.boundary,
        'hole_nesting': args.nesting,
        'output_kind': args.output_kind,
        'parallel_workers': args.workers,
    }
    data = base.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    return ContourSettings.model_validate(data)


def main(argv: list[str] | None = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        settings = resolve_settings(args)
        field = load_field(args.field)
        log_memory_usage('after loading field')
        result = run_extraction(field, settings)
        log_memory_usage('after extraction')
        if args.out is not None:
            write_result_json(result, args.out)
        else:
            sys.stdout.write(json.dumps(result_to_dict(result)))
            sys.stdout.write('\n')
    except Exception as e:
        logger.error(f'Extraction failed: {e}', exc_info=True)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
