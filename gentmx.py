# Generate a TMX map from a sequence of dungeon pieces (i.e. miniature tiles).
#
# The input file is a dump of the dungeon piece grid of a level, dPiece[x][y],
# stored as little-endian 32-bit dungeon piece IDs (0 for no dungeon piece).
# The map gets a background layer referencing the dungeon tileset and a hidden
# collision layer derived from the SOL file of the dungeon type.
#
# Usage:
#    python gentmx.py [--dtype DTYPE] [--mpqdir MPQ_DIR] [-o OUTPUT] <bin_file>
#
# Example:
#    python gentmx.py --dtype l1 -o cathedral_1.tmx dpieces_l1.bin
#    Generates cathedral_1.tmx from the dungeon pieces in dpieces_l1.bin, using
#    diabdat/levels/l1data/l1.sol for collision.

from argparse import ArgumentParser
from pathlib import Path
from typing import TextIO
import math
import sys

import numpy

from dungeon import FIRST_ID, TILE_WIDTH, DungeonType, get_dungeon_type, read_sol, solid

def read_dpieces(bin_file: Path, dungeon: DungeonType) -> numpy.ndarray:
	"""Read the dungeon piece grid and return it indexed [y][x]."""
	with open(bin_file, 'rb') as bin_f:
		data = bin_f.read()
	want = 4 * dungeon.map_width * dungeon.map_height
	if len(data) != want:
		raise ValueError(
			f'mismatch between number of dungeon pieces and dungeon size '
			f'{dungeon.map_width}x{dungeon.map_height}; expected {want}, got {len(data)}')
	grid = numpy.frombuffer(data, dtype='<i4').reshape(dungeon.map_width, dungeon.map_height)
	return grid.T

def csv_rows(rows) -> str:
	return ',\n'.join(','.join(str(v) for v in row) for row in rows)

def gentmx(out: TextIO, bin_file: Path, dtype: str, mpq_dir: Path, tileset: str | None = None):
	dungeon = get_dungeon_type(dtype)
	if tileset is None:
		tileset = dungeon.tileset
	dpieces = read_dpieces(bin_file, dungeon)
	sol = read_sol(mpq_dir, dtype)

	# Number of dungeon pieces contained within <dtype>.MIN
	ndpieces = len(sol)
	tileset_width = TILE_WIDTH * dungeon.tiles_per_row
	tileset_height = dungeon.tile_height * math.ceil(ndpieces / dungeon.tiles_per_row)

	background = [[0 if v == 0 else FIRST_ID - 1 + int(v) for v in row] for row in dpieces]
	collision = [[solid(sol, int(v), dtype) for v in row] for row in dpieces]

	w = dungeon.map_width
	h = dungeon.map_height
	out.write(
f'''<?xml version="1.0" encoding="UTF-8"?>
<map version="1.0" orientation="isometric" width="{w}" height="{h}" tilewidth="64" tileheight="32">
 <properties>
  <property name="music" value="music/{dungeon.title}.ogg"/>
  <property name="tileset" value="tilesetdefs/{tileset}.txt"/>
  <property name="title" value="{dungeon.title.title()}"/>
 </properties>
 <tileset firstgid="1" name="collision" tilewidth="64" tileheight="32">
  <image source="../tiled_collision.png" width="512" height="160"/>
 </tileset>
 <tileset firstgid="{FIRST_ID}" name="{dungeon.title}" tilewidth="{TILE_WIDTH}" tileheight="{dungeon.tile_height}">
  <image source="../../mods/ember/images/tilesets/{tileset}.png" width="{tileset_width}" height="{tileset_height}"/>
 </tileset>
 <layer name="background" width="{w}" height="{h}">
  <data encoding="csv">
{csv_rows(background)}
  </data>
 </layer>
 <layer name="collision" width="{w}" height="{h}" visible="0">
  <data encoding="csv">
{csv_rows(collision)}
  </data>
 </layer>
</map>
''')

def main(argv: list[str] | None = None):
	parser = ArgumentParser(
		prog='gentmx',
		description='Generate TMX maps from a sequence of dungeon pieces (i.e. miniature tiles).'
	)
	parser.add_argument('bin_file', type=Path)
	parser.add_argument('--dtype', default='l1', help='dungeon type (town, l1, l2, l3 or l4)')
	parser.add_argument('--mpqdir', type=Path, default=Path('diabdat'), help='path to extracted "diabdat.mpq"')
	parser.add_argument('--tileset', help='tileset name; defaults to the first theme of the dungeon type')
	parser.add_argument('-o', dest='output', type=Path, help='output path')
	args = parser.parse_args(argv)

	if not args.mpqdir.exists():
		print(f'\033[91munable to locate {str(args.mpqdir)!r} directory\033[0m', file=sys.stderr)
		sys.exit(1)

	try:
		if args.output is not None:
			with open(args.output, 'w', encoding='utf-8') as out_f:
				gentmx(out_f, args.bin_file, args.dtype, args.mpqdir, args.tileset)
		else:
			gentmx(sys.stdout, args.bin_file, args.dtype, args.mpqdir, args.tileset)
	except (OSError, ValueError) as e:
		print(f'\033[91m{e}\033[0m', file=sys.stderr)
		sys.exit(1)

if __name__ == '__main__':
	main()
