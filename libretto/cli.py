"""
Command-line interface for the libretto library.

Usage:
    libretto parse --elements it.json --translation en.json \\
        --title "Le nozze di Figaro" --composer Mozart --language it -o base.json
    libretto validate timing.json --base base.json
    libretto timing init --base base.json -o timing.json
    libretto timing resolve --base base.json --timing timing.json -o timing.json
    libretto timing estimate --base base.json --timing timing.json --resolve -o timing.json
    libretto timing merge --base base.json --timing timing.json -o interchange.json
"""

import argparse
import sys

from libretto._logging import configure_logging, log_error
from libretto.config import get_settings
from libretto.core.estimate import estimate
from libretto.core.merge import merge, scaffold_overlay
from libretto.core.resolve import resolve_anchors
from libretto.core.validate import (
    raise_for_issues,
    validate_base,
    validate_overlay,
    validate_overlay_standalone,
)
from libretto.data import (
    load_acquired,
    load_base_libretto,
    load_document,
    load_elements,
    load_timing_overlay,
    save_document,
)
from libretto.exceptions import LibrettoError, ValidationFailedError
from libretto.models import BaseLibretto, OperaMetadata
from libretto.parse.align import build_base_libretto, parse_bilingual


def cmd_parse(args: argparse.Namespace) -> int:
    translation_language = args.translation_language
    if args.bilingual:
        acquired = load_acquired(args.bilingual)
        elements, translation = parse_bilingual(acquired)
        translation_language = translation_language or acquired.lang2
    else:
        elements = load_elements(args.elements)
        translation = load_elements(args.translation) if args.translation else None

    opera = OperaMetadata(
        title=args.title,
        composer=args.composer,
        librettist=args.librettist,
        language=args.language,
        translation_language=translation_language if translation is not None else None,
        year=args.year,
    )
    base = build_base_libretto(opera, elements, translation)
    save_document(base, args.output)

    segments = len(base.segment_ids())
    print(f"Wrote {args.output}: {len(base.numbers)} numbers, {segments} segments, "
          f"{len(base.cast)} cast members")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    if args.base:
        issues = validate_overlay(load_timing_overlay(args.file), load_base_libretto(args.base))
        kind = "Timing overlay"
    else:
        document = load_document(args.file)
        if isinstance(document, BaseLibretto):
            issues = validate_base(document)
            kind = "Base libretto"
        else:
            issues = validate_overlay_standalone(document)
            kind = "Timing overlay (standalone)"

    if issues:
        for issue in issues:
            print(f"  - {issue}")
        print(f"{kind} has {len(issues)} issue(s)")
        return 1
    print(f"{kind} is valid")
    return 0


def cmd_timing_init(args: argparse.Namespace) -> int:
    base = load_base_libretto(args.base)
    overlay = scaffold_overlay(base, str(args.base))
    save_document(overlay, args.output)
    print(f"Wrote {args.output}: {len(overlay.track_timings)} tracks")
    return 0


def cmd_timing_resolve(args: argparse.Namespace) -> int:
    base = load_base_libretto(args.base)
    result = resolve_anchors(base, load_timing_overlay(args.timing))
    save_document(result.overlay, args.output)

    for resolution in result.resolutions:
        method = resolution.match_method.value if resolution.match_method else "-"
        print(f"  {resolution.track_title}: {resolution.resolved_segment_id or '(unresolved)'} "
              f"[{method}]")
    print(f"Resolved {result.resolved_count}/{len(result.resolutions)} tracks, "
          f"{len(result.warnings)} warning(s)")
    return 0


def cmd_timing_estimate(args: argparse.Namespace) -> int:
    base = load_base_libretto(args.base)
    overlay = load_timing_overlay(args.timing)
    if args.resolve:
        overlay = resolve_anchors(base, overlay).overlay

    result = estimate(base, overlay)
    save_document(result.overlay, args.output)

    for stats in result.stats:
        print(f"  {stats.track_title}: {stats.segments_estimated} segments over "
              f"{stats.duration:.1f}s (weight {stats.total_word_weight:.1f})")
    print(f"Estimated {result.segments_estimated} segments in {len(result.stats)} tracks "
          f"({result.mode} mode), {len(result.warnings)} warning(s)")
    return 0


def cmd_timing_merge(args: argparse.Namespace) -> int:
    base = load_base_libretto(args.base)
    overlay = load_timing_overlay(args.timing)
    raise_for_issues(validate_overlay(overlay, base), document=str(args.timing))

    result = merge(base, overlay)
    save_document(result.libretto, args.output)
    print(f"Wrote {args.output}: {result.stats.tracks} tracks, "
          f"{result.stats.merged_segments} segments")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="libretto",
        description="Structure opera librettos and align them to recording timings",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: LIBRETTO_LOG_LEVEL or INFO)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    p = commands.add_parser("parse", help="Classify element streams into a base libretto")
    source = p.add_mutually_exclusive_group(required=True)
    source.add_argument("--elements", help="Element stream JSON (original language)")
    source.add_argument("--bilingual", help="Pre-aligned bilingual libretto JSON")
    p.add_argument("--translation", help="Element stream JSON (translation language)")
    p.add_argument("--title", required=True, help="Opera title")
    p.add_argument("--composer", required=True, help="Composer name")
    p.add_argument("--language", required=True, help="Original language code, e.g. it")
    p.add_argument("--librettist", default=None, help="Librettist name")
    p.add_argument("--translation-language", default=None, help="Translation language code")
    p.add_argument("--year", type=int, default=None, help="Premiere year")
    p.add_argument("-o", "--output", required=True, help="Output base libretto JSON")
    p.set_defaults(handler=cmd_parse)

    p = commands.add_parser("validate", help="Validate a base libretto or timing overlay")
    p.add_argument("file", help="Document to validate")
    p.add_argument("--base", default=None, help="Base libretto to cross-check an overlay against")
    p.set_defaults(handler=cmd_validate)

    timing = commands.add_parser("timing", help="Timing overlay commands")
    timing_commands = timing.add_subparsers(dest="timing_command", required=True)

    p = timing_commands.add_parser("init", help="Scaffold an overlay from a base libretto")
    p.add_argument("--base", required=True, help="Base libretto JSON")
    p.add_argument("-o", "--output", required=True, help="Output overlay JSON")
    p.set_defaults(handler=cmd_timing_init)

    p = timing_commands.add_parser("resolve", help="Resolve track start segments from titles")
    p.add_argument("--base", required=True, help="Base libretto JSON")
    p.add_argument("--timing", required=True, help="Timing overlay JSON")
    p.add_argument("-o", "--output", required=True, help="Output overlay JSON")
    p.set_defaults(handler=cmd_timing_resolve)

    p = timing_commands.add_parser("estimate", help="Estimate segment start times")
    p.add_argument("--base", required=True, help="Base libretto JSON")
    p.add_argument("--timing", required=True, help="Timing overlay JSON")
    p.add_argument("--resolve", action="store_true", help="Resolve anchors before estimating")
    p.add_argument("-o", "--output", required=True, help="Output overlay JSON")
    p.set_defaults(handler=cmd_timing_estimate)

    p = timing_commands.add_parser("merge", help="Merge into an interchange document")
    p.add_argument("--base", required=True, help="Base libretto JSON")
    p.add_argument("--timing", required=True, help="Validated timing overlay JSON")
    p.add_argument("-o", "--output", required=True, help="Output interchange JSON")
    p.set_defaults(handler=cmd_timing_merge)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "parse" and args.bilingual and args.translation:
        parser.error("--translation cannot be combined with --bilingual")

    try:
        configure_logging(args.log_level or get_settings().log_level)
        return args.handler(args)
    except ValidationFailedError as e:
        for issue in e.issues:
            print(f"  - {issue}")
        log_error(str(e))
        return 1
    except LibrettoError as e:
        log_error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
