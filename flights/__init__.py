"""Aircraft trace caching and flight leg segmentation."""
