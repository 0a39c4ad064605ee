# Generate the tiles of tiled_collision.png from a mask image.
#
# Every opaque pixel of the mask (cropped to one 64x32 isometric tile) is filled
# with a distinct named colour per collision tile; all other pixels are left
# transparent. The resulting mask_NNNN.png files are combined into
# tiled_collision.png with montage.
#
# Usage:
#    python gentiled_collision.py [-o OUT_FOLDER] [--count COUNT] <mask_file>
#
# Example:
#    python gentiled_collision.py -o collision tile_mask.png
#    Writes collision/mask_0000.png to collision/mask_0039.png

from argparse import ArgumentParser
from pathlib import Path
from PIL import Image, ImageColor
import sys

import numpy

TILE_WIDTH = 64
TILE_HEIGHT = 32

# Number of collision tiles.
NCOLLISIONS = 40

def named_colors(count: int) -> list[tuple[int, int, int, int]]:
	"""Return count distinct named colours in name order; aliases of an
	already taken colour (e.g. cyan for aqua) are skipped."""
	colors: list[tuple[int, int, int, int]] = []
	if count <= 0:
		return colors
	for name in sorted(ImageColor.colormap):
		color = ImageColor.getrgb(name)[:3] + (255,)
		if color in colors:
			continue
		colors.append(color)
		if len(colors) == count:
			return colors
	raise ValueError(f'only {len(colors)} distinct named colours available; got count {count}')

def mask_alpha(mask: Image.Image) -> numpy.ndarray:
	"""Return the alpha channel of the mask, cropped or padded to one tile."""
	mask = mask.convert('RGBA').crop((0, 0, TILE_WIDTH, TILE_HEIGHT))
	return numpy.asarray(mask)[:, :, 3]

def gen(alpha: numpy.ndarray, color: tuple[int, int, int, int]) -> Image.Image:
	dst = numpy.zeros((TILE_HEIGHT, TILE_WIDTH, 4), dtype=numpy.uint8)
	dst[alpha != 0] = color
	return Image.fromarray(dst)

def gentiled_collision(mask_file: Path, out_folder: Path, count: int = NCOLLISIONS):
	with Image.open(mask_file) as mask:
		alpha = mask_alpha(mask)
	out_folder.mkdir(parents=True, exist_ok=True)
	for i, color in enumerate(named_colors(count)):
		out_file = Path(out_folder, f'mask_{i:04}.png')
		print(f'Creating {out_file}')
		gen(alpha, color).save(out_file)

def main(argv: list[str] | None = None):
	parser = ArgumentParser(
		prog='gentiled_collision',
		description='Generate tiled_collision.png tiles from a given mask image.'
	)
	parser.add_argument('mask_file', type=Path)
	parser.add_argument('-o', dest='out_folder', type=Path, default=Path('.'), help='output folder')
	parser.add_argument('--count', type=int, default=NCOLLISIONS, help='number of collision tiles')
	args = parser.parse_args(argv)

	try:
		gentiled_collision(args.mask_file, args.out_folder, args.count)
	except (OSError, ValueError) as e:
		print(f'\033[91m{e}\033[0m', file=sys.stderr)
		sys.exit(1)

if __name__ == '__main__':
	main()
