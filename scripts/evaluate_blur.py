"""Estimate the blur probability of an image from the command line."""

import argparse
import logging
import sys
from pathlib import Path

from blurdetector.core.constants import SAMPLING_MODES
from blurdetector.detection import BlurDetectionError, BlurEvaluator
from blurdetector.ml import ClassifierConfig, EvaluatorConfig, TorchPatchClassifier
from blurdetector.utils import ImageUtils


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Patch-based blur detection")
    parser.add_argument("image", type=Path, help="Image to evaluate")
    parser.add_argument("--checkpoint", type=Path, default=None)
    parser.add_argument("--config", type=Path, default=None, help="Evaluator JSON")
    parser.add_argument("--patches", type=int, default=None)
    parser.add_argument("--sampling", choices=list(SAMPLING_MODES), default=None)
    parser.add_argument("--mask-factor", type=float, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--device", default=None)
    parser.add_argument("--save-patches", type=Path, default=None)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Run Main file."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger = logging.getLogger(__name__)
    args = parse_args(argv)

    config = EvaluatorConfig()
    if args.config is not None:
        config = EvaluatorConfig.from_file(args.config)
    if args.seed is not None:
        config = config.model_copy(update={"seed": args.seed})

    classifier = TorchPatchClassifier(
        ClassifierConfig(checkpoint_path=args.checkpoint, device=args.device)
    )
    if args.checkpoint is None:
        logger.warning("No checkpoint given, predictions come from untrained weights")

    try:
        with BlurEvaluator(classifier, config) as evaluator:
            evaluation = evaluator.evaluate_path(
                args.image,
                patch_count=args.patches,
                sampling=args.sampling,
                mask_factor=args.mask_factor,
            )
    except (BlurDetectionError, OSError, RuntimeError, ValueError) as e:
        logger.exception("Blur evaluation failed: %s", e)
        sys.exit(1)

    logger.info("Blur probability: %.3f", evaluation.probability)
    logger.info("Label counts: %s", evaluation.label_counts)

    if args.save_patches is not None:
        for i, result in enumerate(evaluation.results):
            name = f"patch_{i:03d}_{result.label}_{result.confidence:.2f}.png"
            ImageUtils.save_image(result.image, args.save_patches / name)
        logger.info(
            "Saved %d patches to %s", evaluation.patch_count, args.save_patches
        )


if __name__ == "__main__":
    main()
