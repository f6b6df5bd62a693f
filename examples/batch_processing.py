"""Batch processing example for a folder of coin images."""

from coindet.config import build_configs, load_config
from coindet.core import CoinProcessor
from coindet.utils.io_handler import JSONWriter
from coindet.utils.logger import setup_logger


def main():
    """Process every image in a folder and pool the scores."""
    logger = setup_logger('coindet')

    detector_config, evaluator_config = build_configs(load_config("configs/default.yaml"))
    processor = CoinProcessor(detector_config, evaluator_config)

    batch = processor.process_batch("test_data/coins", output_dir="output/batch")

    total = batch.total
    logger.info(f"Evaluated {batch.evaluated} of {len(batch.images)} images")
    logger.info(f"Precision={total.precision:.3f} Recall={total.recall:.3f} F1={total.f1:.3f}")

    JSONWriter.save_results(batch.to_dict(), "output/batch_results.json")
    logger.info("Batch processing complete!")


if __name__ == "__main__":
    main()
