from csspruner.transforms.base import Transform
from csspruner.transforms.font_display import FontDisplaySwapTransform, apply_font_display_swap
from csspruner.transforms.minify import MinifyTransform, minify

# Applied to the assembled stylesheet, after filtering.
BUILTIN_TRANSFORMS = [
    FontDisplaySwapTransform(),
]


def apply_transforms(css, custom_transforms=None):
    """Apply all built-in transforms (and any custom ones) to *css*."""
    transforms = list(BUILTIN_TRANSFORMS)
    if custom_transforms:
        transforms.extend(custom_transforms)
    for t in transforms:
        css = t.apply(css)
    return css


__all__ = [
    "Transform",
    "BUILTIN_TRANSFORMS",
    "apply_transforms",
    "minify",
    "MinifyTransform",
    "apply_font_display_swap",
    "FontDisplaySwapTransform",
]
