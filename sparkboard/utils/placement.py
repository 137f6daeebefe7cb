"""Initial on-canvas placement for newly created sparks."""
import random
from typing import NamedTuple

from sparkboard.models.content import ContentKind

# The board canvas is this many viewports wide and tall
CANVAS_SCALE = 5
SPAWN_JITTER = 60


class Footprint(NamedTuple):
    offset_x: float
    offset_y: float
    width: float
    height: float


FOOTPRINTS: dict[ContentKind, Footprint] = {
    ContentKind.IMAGE: Footprint(0, 0, 160, 160),
    ContentKind.NOTE: Footprint(80, 80, 160, 160),
    ContentKind.VOICE_AUDIO: Footprint(80, 40, 160, 80),
    ContentKind.MUSIC_AUDIO: Footprint(100, 100, 200, 200),
    ContentKind.FILE: Footprint(100, 100, 240, 120),
}
MUSIC_TEXT_SIZE = (240, 120)


def spawn_position(
    viewport_width: float,
    viewport_height: float,
    offset_x: float,
    offset_y: float | None = None,
    rng: random.Random | None = None
) -> tuple[float, float]:
    """
    Pick a position near the center of the canvas with a little jitter.

    Successive sparks of the same kind therefore do not land exactly on top of
    each other. The result is not deterministic unless a seeded ``rng`` is passed.

    :param viewport_width: Base viewport width
    :param viewport_height: Base viewport height
    :param offset_x: Half-width of the spark's on-screen footprint
    :param offset_y: Half-height of the footprint (defaults to offset_x)
    :param rng: Random source (defaults to the module-level generator)
    :return: (x, y), each within +/-60 of the offset canvas center
    """
    rng = rng or random
    if offset_y is None:
        offset_y = offset_x
    center_x = (viewport_width * CANVAS_SCALE) / 2 - offset_x
    center_y = (viewport_height * CANVAS_SCALE) / 2 - offset_y
    return (
        center_x + rng.uniform(-SPAWN_JITTER, SPAWN_JITTER),
        center_y + rng.uniform(-SPAWN_JITTER, SPAWN_JITTER),
    )


def spawn_for_kind(
    kind: ContentKind,
    viewport_width: float,
    viewport_height: float,
    rng: random.Random | None = None
) -> tuple[float, float]:
    footprint = FOOTPRINTS[kind]
    return spawn_position(viewport_width, viewport_height, footprint.offset_x, footprint.offset_y, rng=rng)
