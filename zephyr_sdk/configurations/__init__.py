from .zephyr_scale import ZephyrScaleConfiguration

__all__ = ["ZephyrScaleConfiguration"]
