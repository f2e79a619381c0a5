import math

from app.processor.models import CompositionMetrics
from app.vision.models import BoundingBox, LabelDetection, TextDetection

GRID_SIZE = 10
EMPTY_BALANCE_SCORE = 0.5


def area_coverage(boxes: list[BoundingBox | None]) -> float:
    """Sum of box areas, capped at 1.0. Overlaps are not deduplicated."""
    total = sum(box.area for box in boxes if box is not None)
    return min(total, 1.0)


def _occupancy_grid(boxes: list[BoundingBox]) -> list[list[int]]:
    grid = [[0] * GRID_SIZE for _ in range(GRID_SIZE)]
    for box in boxes:
        start_x = math.floor(box.left * GRID_SIZE)
        start_y = math.floor(box.top * GRID_SIZE)
        end_x = min(math.floor((box.left + box.width) * GRID_SIZE), GRID_SIZE - 1)
        end_y = min(math.floor((box.top + box.height) * GRID_SIZE), GRID_SIZE - 1)
        for y in range(start_y, end_y + 1):
            for x in range(start_x, end_x + 1):
                if 0 <= y < GRID_SIZE and 0 <= x < GRID_SIZE:
                    grid[y][x] += 1
    return grid


def balance_score(
    text_detections: list[TextDetection],
    labels: list[LabelDetection],
) -> float:
    """Average of horizontal and vertical weight balance on a 10x10 occupancy grid."""
    if not text_detections and not labels:
        return EMPTY_BALANCE_SCORE

    boxes = [t.bounding_box for t in text_detections]
    boxes.extend(i.bounding_box for label in labels for i in label.instances)
    grid = _occupancy_grid(boxes)

    half = GRID_SIZE / 2
    left = right = top = bottom = 0
    for y, row in enumerate(grid):
        for x, weight in enumerate(row):
            if x < half:
                left += weight
            else:
                right += weight
            if y < half:
                top += weight
            else:
                bottom += weight

    horizontal = 1 - abs(left - right) / max(left + right, 1)
    vertical = 1 - abs(top - bottom) / max(top + bottom, 1)
    return (horizontal + vertical) / 2


def composition_metrics(
    text_detections: list[TextDetection],
    labels: list[LabelDetection],
) -> CompositionMetrics:
    """Coverage, white space and balance for one image.

    white_space may go negative when coverages overlap; it is not clamped.
    """
    text_coverage = area_coverage([t.bounding_box for t in text_detections])
    visual_coverage = area_coverage([label.primary_box for label in labels])
    return CompositionMetrics(
        text_coverage=text_coverage,
        visual_coverage=visual_coverage,
        white_space=1 - (text_coverage + visual_coverage),
        balance_score=balance_score(text_detections, labels),
    )
