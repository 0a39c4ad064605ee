# Generate a tileset definition based on dungeon type.
#
# The tileset image is expected to be a montage of all dungeon pieces of the
# dungeon type, tiles_per_row dungeon pieces per row (see opensourceami.py).
#
# Usage:
#    python gentilesetdef.py [--dtype DTYPE] [--mpqdir MPQ_DIR] [--tileset NAME]
#
# Example:
#    python gentilesetdef.py --dtype l1 > tilesetdefs/tileset_cathedral_theme_1.txt
#    Prints one tile definition per dungeon piece of the cathedral.
#
#    python gentilesetdef.py --dtype town --first_id 101 --columns 79
#    Prints the tile definitions of town for the older 79 column tileset image.

from argparse import ArgumentParser
from pathlib import Path
from typing import TextIO
import sys

from dungeon import FIRST_ID, TILE_WIDTH, get_dungeon_type, read_sol

def gentilesetdef(out: TextIO, dtype: str, mpq_dir: Path, tileset: str | None = None,
		first_id: int = FIRST_ID, columns: int | None = None):
	dungeon = get_dungeon_type(dtype)
	if tileset is None:
		tileset = dungeon.tileset
	if columns is None:
		columns = dungeon.tiles_per_row
	if columns <= 0:
		raise ValueError(f'invalid number of columns {columns}')
	sol = read_sol(mpq_dir, dtype)

	# Number of dungeon pieces contained within <dtype>.MIN
	ndpieces = len(sol)
	h = dungeon.tile_height
	print(f'img=images/tilesets/{tileset}.png\n', file=out)
	for i in range(ndpieces):
		x = i % columns
		y = i // columns
		print(f'tile={first_id + i},{x * TILE_WIDTH},{y * h},{TILE_WIDTH},{h},{TILE_WIDTH // 2},{h - 16}', file=out)

def main(argv: list[str] | None = None):
	parser = ArgumentParser(
		prog='gentilesetdef',
		description='Generate tileset definitions based on dungeon type.'
	)
	parser.add_argument('--dtype', default='l1', help='dungeon type (town, l1, l2, l3 or l4)')
	parser.add_argument('--mpqdir', type=Path, default=Path('diabdat'), help='path to extracted "diabdat.mpq"')
	parser.add_argument('--tileset', help='tileset name; defaults to the first theme of the dungeon type')
	parser.add_argument('--first_id', type=int, default=FIRST_ID, help='tile ID of the first dungeon piece')
	parser.add_argument('--columns', type=int, help='dungeon pieces per row of the tileset image')
	args = parser.parse_args(argv)

	if not args.mpqdir.exists():
		print(f'\033[91munable to locate {str(args.mpqdir)!r} directory\033[0m', file=sys.stderr)
		sys.exit(1)

	try:
		gentilesetdef(sys.stdout, args.dtype, args.mpqdir, args.tileset, args.first_id, args.columns)
	except (OSError, ValueError) as e:
		print(f'\033[91m{e}\033[0m', file=sys.stderr)
		sys.exit(1)

if __name__ == '__main__':
	main()
