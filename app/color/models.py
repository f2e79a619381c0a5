from dataclasses import dataclass, field

RGB = tuple[float, float, float]


@dataclass(frozen=True)
class Palette:
    """Ranked palette of one raster image."""

    primary: list[str] = field(default_factory=list)
    secondary: list[str] = field(default_factory=list)
    background: list[str] = field(default_factory=list)
