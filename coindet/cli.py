"""Command line front end for coin detection and evaluation."""

import argparse
import logging
import sys
from dataclasses import replace

from coindet import __version__
from coindet.config import CLI_EVALUATION, DEFAULT_CONFIG, build_configs, load_config, merge_config
from coindet.core import CoinProcessor
from coindet.utils.io_handler import JSONWriter, format_detection_report, save_labels
from coindet.utils.logger import setup_logger

logger = logging.getLogger('coindet')

EXIT_USAGE = 2
EXIT_BAD_IMAGE = 3
EXIT_BAD_OUTPUT = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='coindet',
        description='Detect coins with the Hough circle transform and score them against labels.')
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('--config', help='YAML file overriding detector/evaluation defaults')
    parser.add_argument('--match-tol', type=float, help='max center distance in pixels')
    parser.add_argument('--radius-tol', type=float, help='max relative radius error')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    parser.add_argument('--log-file', help='also write logs to this file')

    sub = parser.add_subparsers(dest='command', required=True)

    detect = sub.add_parser('detect', help='detect coins in one image')
    detect.add_argument('image')
    detect.add_argument('gt_file', nargs='?', help='ground truth label file (cx cy r per line)')
    detect.add_argument('--output-dir', help='write *_detected files here instead of beside the image')
    detect.add_argument('--no-save', action='store_true', help='do not write visualization/report')

    batch = sub.add_parser('batch', help='detect and score every image in a folder')
    batch.add_argument('folder')
    batch.add_argument('--output-dir')
    batch.add_argument('--no-save', action='store_true')
    batch.add_argument('--summary', help='write a JSON summary to this path')

    export = sub.add_parser('export', help='print detections as label lines')
    export.add_argument('--image', required=True)
    export.add_argument('--out', help='also write the label file here')

    edit = sub.add_parser('edit', help='open the interactive label editor')
    edit.add_argument('image')
    edit.add_argument('--labels', help='label file (default: <stem>_labels.txt)')

    return parser


def make_processor(args) -> CoinProcessor:
    cli_defaults = merge_config(DEFAULT_CONFIG, {'evaluation': CLI_EVALUATION})
    config = load_config(args.config, base=cli_defaults)
    detector_config, evaluator_config = build_configs(config)

    if args.match_tol is not None:
        evaluator_config = replace(evaluator_config, match_tolerance_px=args.match_tol)
    if args.radius_tol is not None:
        evaluator_config = replace(evaluator_config, radius_tolerance=args.radius_tol)
    return CoinProcessor(detector_config, evaluator_config)


def cmd_detect(args, processor: CoinProcessor) -> int:
    try:
        result = processor.process_file(args.image, args.gt_file)
    except ValueError as e:
        logger.error(str(e))
        return EXIT_BAD_IMAGE

    print(f"\nImage: {args.image}")
    print(format_detection_report(result.detections), end='')
    print(f"Detection time (ms): {result.elapsed_ms:.2f}")

    if result.outcome is not None:
        o = result.outcome
        print(f"TP={o.tp} FP={o.fp} FN={o.fn}")
        print(f"Precision={o.precision:g} Recall={o.recall:g} F1={o.f1:g}")

    if not args.no_save:
        try:
            vis_path, report_path = processor.save_outputs(result, output_dir=args.output_dir)
        except OSError as e:
            logger.error(str(e))
            return EXIT_BAD_OUTPUT
        print(f"Saved detections to {report_path}")
        print(f"Saved visualization to {vis_path}")
    return 0


def cmd_batch(args, processor: CoinProcessor) -> int:
    try:
        batch = processor.process_batch(args.folder, output_dir=args.output_dir,
                                        save=not args.no_save)
    except NotADirectoryError as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(str(e))
        return EXIT_BAD_OUTPUT

    for result in batch.images:
        line = f"{result.image_id}: {len(result.detections)} circles"
        if result.outcome is not None:
            o = result.outcome
            line += f" TP={o.tp} FP={o.fp} FN={o.fn}"
        print(line)

    if batch.evaluated > 0:
        total = batch.total
        print(f"\nBatch evaluation ({batch.evaluated} images):")
        print(f"Precision={total.precision:g} Recall={total.recall:g} F1={total.f1:g}")

    if args.summary:
        JSONWriter.save_results(batch.to_dict(), args.summary)
        print(f"Summary saved to {args.summary}")
    return 0


def cmd_export(args, processor: CoinProcessor) -> int:
    try:
        result = processor.process_image(args.image)
    except ValueError as e:
        logger.error(str(e))
        return EXIT_BAD_IMAGE

    for c in result.detections:
        print(f"{c.x:g} {c.y:g} {c.radius:g}")

    if args.out:
        try:
            save_labels(args.out, result.detections)
        except OSError as e:
            logger.error(f"Can't open out file: {args.out} ({e})")
            return EXIT_BAD_OUTPUT
    return 0


def cmd_edit(args, processor: CoinProcessor) -> int:
    from coindet.editor import LabelEditor

    try:
        editor = LabelEditor(args.image, args.labels, processor.detector)
    except ValueError as e:
        logger.error(str(e))
        return EXIT_BAD_IMAGE
    editor.run()
    return 0


COMMANDS = {
    'detect': cmd_detect,
    'batch': cmd_batch,
    'export': cmd_export,
    'edit': cmd_edit,
}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logger('coindet', getattr(logging, args.log_level), args.log_file)

    try:
        processor = make_processor(args)
    except (OSError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_USAGE

    return COMMANDS[args.command](args, processor)


if __name__ == '__main__':
    sys.exit(main())
