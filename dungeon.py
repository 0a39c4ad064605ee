# Dungeon type metrics and dungeon piece lookup tables shared by the tileset,
# TMX and arch tools.
#
# A dungeon piece (miniature tile) is one 64 pixel wide tile of the MIN file of
# a dungeon type. The SOL file holds one solidity byte per dungeon piece, so its
# length is the number of dungeon pieces of the tileset.

from dataclasses import dataclass
from pathlib import Path

# Tile width in pixels of each tile within a tileset.
TILE_WIDTH = 64

# Tile ID of the first dungeon piece in tileset definitions and TMX maps; the
# IDs below it belong to the collision tileset.
FIRST_ID = 41

@dataclass
class Palette:
	pal_file: str
	tileset: str

@dataclass
class DungeonType:
	name: str
	title: str
	tileset: str
	tiles_per_row: int
	tile_height: int
	map_width: int
	map_height: int
	palettes: list[Palette]

	def data_dir(self, mpq_dir: Path) -> Path:
		return Path(mpq_dir, 'levels', f'{self.name}data')

DUNGEON_TYPES : dict[str, DungeonType] = {
	'town': DungeonType('town', 'tristram', 'tileset_tristram', 64, 256, 96, 96, [
		Palette('ltpalg.pal', 'tileset_tristram_gray'),
		Palette('town.pal', 'tileset_tristram'),
	]),
	'l1': DungeonType('l1', 'cathedral', 'tileset_cathedral_theme_1', 32, 160, 112, 112, [
		Palette('l1_1.pal', 'tileset_cathedral_theme_1'),
		Palette('l1_2.pal', 'tileset_cathedral_theme_2'),
		Palette('l1_3.pal', 'tileset_cathedral_theme_3'),
		Palette('l1_4.pal', 'tileset_cathedral_theme_4'),
		Palette('l1_5.pal', 'tileset_cathedral_theme_5'),
		Palette('l1palg.pal', 'tileset_cathedral_gray'),
	]),
	'l2': DungeonType('l2', 'catacombs', 'tileset_catacombs_theme_1', 32, 160, 112, 112, [
		Palette('l2_1.pal', 'tileset_catacombs_theme_1'),
		Palette('l2_2.pal', 'tileset_catacombs_theme_2'),
		Palette('l2_3.pal', 'tileset_catacombs_theme_3'),
		Palette('l2_4.pal', 'tileset_catacombs_theme_4'),
		Palette('l2_5.pal', 'tileset_catacombs_theme_5'),
		Palette('l2palg.pal', 'tileset_catacombs_gray'),
	]),
	'l3': DungeonType('l3', 'caves', 'tileset_caves_theme_1', 32, 160, 112, 112, [
		Palette('l3_1.pal', 'tileset_caves_theme_1'),
		Palette('l3_2.pal', 'tileset_caves_theme_2'),
		Palette('l3_3.pal', 'tileset_caves_theme_3'),
		Palette('l3_4.pal', 'tileset_caves_theme_4'),
		Palette('l3_i.pal', 'tileset_caves_theme_ice'),
		Palette('l3palg.pal', 'tileset_caves_gray'),
		Palette('l3pfoul.pal', 'tileset_caves_theme_foul_water'),
		Palette('l3pwater.pal', 'tileset_caves_theme_water'),
	]),
	'l4': DungeonType('l4', 'hell', 'tileset_hell_theme_1', 32, 256, 112, 112, [
		Palette('l4_1.pal', 'tileset_hell_theme_1'),
		Palette('l4_2.pal', 'tileset_hell_theme_2'),
		Palette('l4_3.pal', 'tileset_hell_theme_3'),
		Palette('l4_4.pal', 'tileset_hell_theme_4'),
	]),
}

def get_dungeon_type(dtype: str) -> DungeonType:
	if dtype not in DUNGEON_TYPES:
		raise ValueError(f'support for dungeon type {dtype!r} not yet implemented')
	return DUNGEON_TYPES[dtype]

def read_sol(mpq_dir: Path, dtype: str) -> bytes:
	"""Read the solidity table of the given dungeon type from an extracted
	diabdat.mpq directory; one byte per dungeon piece."""
	sol_path = Path(get_dungeon_type(dtype).data_dir(mpq_dir), f'{dtype}.sol')
	with open(sol_path, 'rb') as sol_f:
		return sol_f.read()

# Arch IDs
ARCH_NONE = 0
ARCH_SW = 1
ARCH_SE = 2
ARCH_SE_BROKEN = 3
ARCH_SW_BROKEN_2 = 4
ARCH_SW_2 = 5
ARCH_SW_BROKEN = 6
ARCH_SW_DOOR = 7
ARCH_SE_DOOR = 8

# Floor shadow dungeon pieces of the cathedral, by the arch drawn on top of them.
# ref: 46E9E2
L1_ARCHES : dict[int, int] = {
	12: ARCH_SW,
	71: ARCH_SW,
	211: ARCH_SW,
	321: ARCH_SW,
	341: ARCH_SW,
	418: ARCH_SW,
	11: ARCH_SE,
	249: ARCH_SE,
	325: ARCH_SE,
	331: ARCH_SE,
	344: ARCH_SE,
	421: ARCH_SE,
	255: ARCH_SW_BROKEN_2,
	259: ARCH_SW_2,
}

def arch_id(dpiece_id: int, dtype: str) -> int:
	get_dungeon_type(dtype)
	if dtype == 'l1':
		return L1_ARCHES.get(dpiece_id, ARCH_NONE)
	# TODO: locate the arch dungeon pieces of the catacombs and of town.
	return ARCH_NONE

# Collision values of the collision tileset
BLOCKS_NONE = 0
BLOCKS_ALL = 1
BLOCKS_MOVEMENT = 2
BLOCKS_ALL_HIDDEN = 3       # not visible on mini map
BLOCKS_MOVEMENT_HIDDEN = 4  # not visible on mini map

# Solidity flags
SOL_BLOCK_WALK = 0x01
SOL_LIGHTING = 0x02
SOL_BLOCK_MISSILE = 0x04
SOL_TRANSPARENCY = 0x08
SOL_SW_WALL = 0x10
SOL_SE_WALL = 0x20
SOL_FIT_SHRINE = 0x80

L1_DOORS = {44, 46, 51, 56, 214, 393, 395, 408}

def is_l1_door(dpiece_id: int) -> bool:
	return dpiece_id in L1_DOORS

def solid(sol: bytes, dpiece_id: int, dtype: str) -> int:
	"""Return the collision value of the given dungeon piece.

	Empty cells block everything. Cathedral doors are left walkable until
	they are replaced by door objects with their own collision.
	"""
	if dpiece_id == 0:
		return BLOCKS_ALL
	if dtype == 'l1' and is_l1_door(dpiece_id):
		return BLOCKS_NONE
	if dpiece_id < 0 or dpiece_id > len(sol):
		raise ValueError(f'invalid dungeon piece ID {dpiece_id}; expected 1..{len(sol)}')
	flags = sol[dpiece_id - 1]
	if flags & SOL_BLOCK_WALK:
		return BLOCKS_ALL
	if flags & SOL_BLOCK_MISSILE:
		return BLOCKS_MOVEMENT
	return BLOCKS_NONE
