# Draw arches onto the dungeon pieces they belong to.
#
# Arches are stored as separate CEL frames (<dtype>s.cel) and drawn by the game
# on top of the floor shadow dungeon pieces. The tilesets have no such overlay,
# so the arch frames are composited into the dumped dungeon piece images, once
# per palette.
#
# Expects the PNG dumps of cel_dump and min_dump in <dump_dir>:
#  *  _dpieces_/<dtype>/<pal>/dpiece_NNNN.png - dungeon pieces (overwritten)
#  *  levels/<dtype>data/<dtype>s/<pal>/<dtype>s_NNNN.png - arch frames
#
# Usage:
#    python fixarches.py [--mpqdir MPQ_DIR] [--dump_dir DUMP_DIR] [--dtype DTYPE ...]
#
# Example:
#    python fixarches.py --mpqdir diabdat --dump_dir _dump_
#    Draws the arches of all dungeon types.

from argparse import ArgumentParser
from pathlib import Path
from PIL import Image
import sys

from dungeon import ARCH_NONE, DUNGEON_TYPES, arch_id, get_dungeon_type, read_sol

def draw_arch(dpiece_file: Path, arch_file: Path):
	with Image.open(dpiece_file) as dpiece_img:
		dst = dpiece_img.convert('RGBA')
	with Image.open(arch_file) as arch_img:
		arch = arch_img.convert('RGBA').crop((0, 0, dst.width, dst.height))
	dst.alpha_composite(arch)
	dst.save(dpiece_file)

def fix_arches(dtype: str, mpq_dir: Path, dump_dir: Path):
	dungeon = get_dungeon_type(dtype)
	sol = read_sol(mpq_dir, dtype)

	# Number of dungeon pieces in the tileset.
	ndpieces = len(sol)
	for dpiece_id in range(1, ndpieces + 1):
		arch = arch_id(dpiece_id, dtype)
		if arch == ARCH_NONE:
			continue
		for palette in dungeon.palettes:
			pal = palette.pal_file
			dpiece_file = Path(dump_dir, '_dpieces_', dtype, pal, f'dpiece_{dpiece_id:04}.png')
			arch_file = Path(dump_dir, 'levels', f'{dtype}data', f'{dtype}s', pal, f'{dtype}s_{arch:04}.png')
			print(f'fixarches: Drawing arch ID {arch} onto dungeon piece ID {dpiece_id} with palette {pal!r}.')
			draw_arch(dpiece_file, arch_file)

def main(argv: list[str] | None = None):
	parser = ArgumentParser(
		prog='fixarches',
		description='Draw arches onto the dungeon pieces of the tilesets.'
	)
	parser.add_argument('--mpqdir', type=Path, default=Path('diabdat'), help='path to extracted "diabdat.mpq"')
	parser.add_argument('--dump_dir', type=Path, default=Path('_dump_'), help='path to the PNG dumps of cel_dump and min_dump')
	parser.add_argument('--dtype', nargs='+', default=list(DUNGEON_TYPES), help='dungeon types (town, l1, l2, l3 or l4)')
	args = parser.parse_args(argv)

	try:
		for dtype in args.dtype:
			fix_arches(dtype, args.mpqdir, args.dump_dir)
	except (OSError, ValueError) as e:
		print(f'\033[91m{e}\033[0m', file=sys.stderr)
		sys.exit(1)

if __name__ == '__main__':
	main()
