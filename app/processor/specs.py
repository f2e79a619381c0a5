from app.processor.models import Dimensions, ImageSpecs


def aspect_ratio(width: int, height: int) -> float:
    if not height:
        return 0.0
    return round(width / height, 2)


def raster_size_category(width: int, height: int) -> str:
    area = width * height
    if area < 250_000:
        return "small"
    if area < 1_000_000:
        return "medium"
    return "large"


def psd_size_category(width: int, height: int) -> str:
    area = width * height
    if area <= 300_000:
        return "small"
    if area <= 1_000_000:
        return "medium"
    return "large"


def raster_specs(width: int, height: int, image_format: str) -> ImageSpecs:
    return ImageSpecs(
        dimensions=Dimensions(width=width, height=height),
        format=image_format,
        aspect_ratio=aspect_ratio(width, height),
        size_category=raster_size_category(width, height),
    )


def psd_specs(width: int, height: int) -> ImageSpecs:
    return ImageSpecs(
        dimensions=Dimensions(width=width, height=height),
        format="psd",
        aspect_ratio=aspect_ratio(width, height),
        size_category=psd_size_category(width, height),
    )
