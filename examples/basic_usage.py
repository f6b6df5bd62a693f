"""Basic usage example for coindet."""

from coindet.detection.circle_detector import CircleDetector
from coindet.evaluation.matcher import Evaluator
from coindet.utils.io_handler import load_grayscale, load_labels, save_image
from coindet.utils.visualization import draw_evaluation


def main():
    """Detect coins in one image and score them against its labels."""
    image_path = "test_data/coins/sample.jpg"
    labels_path = "test_data/coins/sample.txt"

    gray = load_grayscale(image_path)
    if gray is None:
        print(f"Error: Could not load image from {image_path}")
        return

    print("Detecting coins...")
    detector = CircleDetector()
    detections = detector.detect(gray)
    print(f"Detected {len(detections)} coins")

    ground_truths = load_labels(labels_path)
    outcome = Evaluator(match_tolerance_px=25.0, radius_tolerance=0.5).evaluate(
        detections, ground_truths)
    print(f"TP={outcome.tp} FP={outcome.fp} FN={outcome.fn} F1={outcome.f1:.3f}")

    output_path = "output/basic_detection.png"
    save_image(draw_evaluation(gray, detections, ground_truths, outcome), output_path)
    print(f"Results saved to {output_path}")


if __name__ == "__main__":
    main()
