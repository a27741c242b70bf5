"""System-wide constants for patch-based blur detection."""

# Classifier input size (width, height) of a single patch
PATCH_SIZE = (224, 224)

# Evaluation defaults
DEFAULT_PATCH_COUNT = 50
DEFAULT_MASK_FACTOR = 0.7

# Label space of the binary blur classifier
BLUR_LABELS = {
    "blurred": "Patch content is out of focus or motion blurred",
    "focused": "Patch content is sharp and in focus",
}
POSITIVE_LABEL = "blurred"

# Patch sampling strategies
SAMPLING_MODES = {
    "random": "Independent patches drawn uniformly inside the mask",
    "uniform": "Near-regular grid of patches covering the mask",
}

# Resampling methods allowed when resizing patches (bilinear or better)
INTERPOLATION_METHODS = ["INTER_LINEAR", "INTER_CUBIC", "INTER_AREA", "INTER_LANCZOS4"]
