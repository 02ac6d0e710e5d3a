# Application entry point
"""
Command line workflow:

1. analyze every image and write an HTML report of the suggested limits,
2. ask for a Min / Max value (or take --min / --max) and stretch all images,
3. finish (write a log) or revert (restore the originals) and ask again.
"""
import argparse
import os
import sys

from image_adjuster import __version__
from image_adjuster.config import settings
from image_adjuster.processing.limits import ContrastLimits, MAX_LEVEL, MIN_LEVEL
from image_adjuster.processing.luminance import LuminanceMode
from image_adjuster.services.adjustment_service import AdjustmentSession
from image_adjuster.services.analysis_service import AnalysisService, average_limits
from image_adjuster.services.report import format_cutoff, write_analysis_report
from image_adjuster.utils.errors import AppError, format_user_error
from image_adjuster.utils.logger import LOG_LEVEL_MAP, get_logger, set_log_level

logger = get_logger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="image-adjuster",
        description="Suggest and apply contrast-stretching limits for a batch of images.",
    )
    parser.add_argument("images", nargs="+", metavar="IMAGE", help="image files to analyze")
    parser.add_argument(
        "--cutoff", dest="cutoffs", action="append", type=float, metavar="PCT",
        help="percentage of darkest and lightest pixels to clip; repeat for several "
             "report columns, negative disables clipping (default: %s)"
             % ", ".join(f"{c:g}" for c in settings.ANALYSIS_DEFAULTS["cutoff_percentages"]),
    )
    parser.add_argument(
        "--luminance", choices=[mode.value for mode in LuminanceMode],
        default=None, help="round luminance per pixel (byte) or only when bucketing (real)",
    )
    parser.add_argument("--workers", type=int, default=None,
                        help="row blocks processed concurrently per image")
    parser.add_argument("--min", dest="min_value", type=int, default=None,
                        help="apply this Min Value without prompting (requires --max)")
    parser.add_argument("--max", dest="max_value", type=int, default=None,
                        help="apply this Max Value without prompting (requires --min)")
    parser.add_argument("--analyze-only", action="store_true",
                        help="write the report and stop")
    parser.add_argument("--log-level", choices=list(LOG_LEVEL_MAP), default=None,
                        help="override LOGGING_LEVEL from settings")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def validate_limits(min_value, max_value):
    """True if the pair can be stretched: both in 0..255 and min < max."""
    return (MIN_LEVEL <= min_value <= MAX_LEVEL
            and MIN_LEVEL <= max_value <= MAX_LEVEL
            and min_value < max_value)


def prompt_level(label, lowest=MIN_LEVEL, highest=MAX_LEVEL, input_func=input):
    """Asks until the answer is an integer in lowest..highest."""
    while True:
        answer = input_func(f"{label}: ").strip()
        try:
            value = int(answer)
        except ValueError:
            continue
        if lowest <= value <= highest:
            return value


def prompt_limits(input_func=input):
    # Max must be strictly above Min, otherwise the stretch does nothing
    min_value = prompt_level("Min Value", highest=MAX_LEVEL - 1, input_func=input_func)
    max_value = prompt_level("Max Value", lowest=min_value + 1, input_func=input_func)
    return ContrastLimits(min_value, max_value)


def prompt_finish_or_revert(input_func=input):
    """Returns 'F' or 'R'."""
    while True:
        answer = input_func("Press 'F' to finish or 'R' to revert: ").strip().upper()
        if answer[:1] in ("F", "R"):
            return answer[:1]


def _print_progress(verb):
    def callback(current, total):
        end = "\n" if current == total else ""
        print(f"\r{verb} image {current} of {total}...", end=end, flush=True)
    return callback


def print_summary(records, cutoffs):
    for cutoff in cutoffs:
        average = average_limits(records, cutoff)
        print(f"Average at {format_cutoff(cutoff)}: Min {average.min_value}, Max {average.max_value}")


def run_adjustment_loop(session, base_dir, preset=None, input_func=input):
    """Applies limits until the user finishes. Returns the adjustment log path."""
    while True:
        limits = preset if preset is not None else prompt_limits(input_func)
        try:
            adjusted_files = session.apply(limits, progress_callback=_print_progress("Adjusting"))
        except AppError:
            # undo the images handled before the failure
            for reverted in session.revert():
                print(f"Original image restored: {reverted.original_path}")
            raise
        for adjusted in adjusted_files:
            print(f"Adjusted image saved to: {adjusted.adjusted_path}")
            print(f"Original image moved to: {adjusted.moved_path}")

        choice = "F" if preset is not None else prompt_finish_or_revert(input_func)
        if choice == "F":
            log_path = session.finish(base_dir)
            print(f"Adjustment info saved to: {log_path}")
            return log_path

        for reverted in session.revert():
            print(f"Original image restored: {reverted.original_path}")


def run(argv=None, input_func=input):
    """Runs the workflow and returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        set_log_level(args.log_level)

    preset = None
    if (args.min_value is None) != (args.max_value is None):
        parser.error("--min and --max must be given together")
    if args.min_value is not None:
        if not validate_limits(args.min_value, args.max_value):
            parser.error("--min and --max must be within 0..255 with min < max")
        preset = ContrastLimits(args.min_value, args.max_value)

    image_paths = [os.path.abspath(path) for path in args.images]
    base_dir = os.path.dirname(image_paths[0])
    output_dir = os.path.join(base_dir, settings.ADJUSTMENT_DEFAULTS["output_dir_name"])

    try:
        service = AnalysisService(cutoffs=args.cutoffs, luminance_mode=args.luminance, workers=args.workers)
        records = service.analyze(image_paths, progress_callback=_print_progress("Analyzing"))
        report_path = write_analysis_report(
            records, service.cutoffs, output_dir,
            prefix=settings.ADJUSTMENT_DEFAULTS["report_prefix"],
        )
        print(f"Analysis report saved to: {report_path}")
        print_summary(records, service.cutoffs)

        if args.analyze_only:
            return 0

        session = AdjustmentSession([record.file_path for record in records], workers=service.workers)
        run_adjustment_loop(session, base_dir, preset=preset, input_func=input_func)
        return 0
    except AppError as e:
        logger.debug("Workflow failed", exc_info=True)
        print(f"Error: {format_user_error(e)}", file=sys.stderr)
        if e.original_error is not None:
            print(f"  caused by: {format_user_error(e.original_error)}", file=sys.stderr)
        return 1
    except (EOFError, KeyboardInterrupt):
        print("\nAborted.", file=sys.stderr)
        return 1


def main():
    """Main function to run the application."""
    sys.exit(run())


if __name__ == "__main__":
    main()
