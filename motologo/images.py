from pathlib import Path

import numpy as np
from PIL import Image

from .runlength import PixelGrid


def grid_from_image(image: Image.Image) -> PixelGrid:
    if image.mode != 'RGB':
        image = image.convert('RGB')
    w, h = image.size
    return PixelGrid(w, h, np.asarray(image, dtype=np.uint8).reshape(h * w, 3))


def image_from_grid(grid: PixelGrid) -> Image.Image:
    return Image.fromarray(grid.pixels.reshape(grid.height, grid.width, 3), 'RGB')


def load_image_file(path) -> PixelGrid:
    with Image.open(path) as image:
        return grid_from_image(image)


def save_image_file(path, grid: PixelGrid):
    image_from_grid(grid).save(Path(path))
