"""Tests for the dungeon type tables."""

import pytest

from dungeon import (
	ARCH_NONE, ARCH_SE, ARCH_SW, ARCH_SW_2, ARCH_SW_BROKEN_2,
	BLOCKS_ALL, BLOCKS_MOVEMENT, BLOCKS_NONE,
	DUNGEON_TYPES, arch_id, get_dungeon_type, read_sol, solid,
)


class TestDungeonType:
	def test_metrics(self):
		town = get_dungeon_type('town')
		assert (town.title, town.tiles_per_row, town.tile_height) == ('tristram', 64, 256)
		assert (town.map_width, town.map_height) == (96, 96)
		hell = get_dungeon_type('l4')
		assert (hell.title, hell.tiles_per_row, hell.tile_height) == ('hell', 32, 256)
		assert (hell.map_width, hell.map_height) == (112, 112)

	def test_default_tileset_has_palette(self):
		for dungeon in DUNGEON_TYPES.values():
			assert dungeon.tileset in [p.tileset for p in dungeon.palettes]

	def test_unknown(self):
		with pytest.raises(ValueError, match="support for dungeon type 'l5' not yet implemented"):
			get_dungeon_type('l5')

	def test_read_sol(self, mpq_dir):
		sol = read_sol(mpq_dir, 'l2')
		assert len(sol) == 100
		assert sol[:3] == bytes([0x01, 0x04, 0x05])

	def test_read_sol_missing(self, tmp_path):
		with pytest.raises(FileNotFoundError):
			read_sol(tmp_path, 'l1')


class TestArchID:
	@pytest.mark.parametrize('dpiece_id, want', [
		(12, ARCH_SW),
		(418, ARCH_SW),
		(11, ARCH_SE),
		(421, ARCH_SE),
		(255, ARCH_SW_BROKEN_2),
		(259, ARCH_SW_2),
		(1, ARCH_NONE),
		(0, ARCH_NONE),
	])
	def test_cathedral(self, dpiece_id, want):
		assert arch_id(dpiece_id, 'l1') == want

	@pytest.mark.parametrize('dtype', ['town', 'l2', 'l3', 'l4'])
	def test_no_arches(self, dtype):
		assert arch_id(12, dtype) == ARCH_NONE

	def test_unknown_dtype(self):
		with pytest.raises(ValueError):
			arch_id(12, 'l9')


class TestSolid:
	sol = bytes([0x01, 0x04, 0x05, 0x02, 0x00]) + bytes(500)

	def test_empty_cell_blocks_all(self):
		assert solid(self.sol, 0, 'l1') == BLOCKS_ALL

	def test_flags(self):
		assert solid(self.sol, 1, 'l2') == BLOCKS_ALL
		assert solid(self.sol, 2, 'l2') == BLOCKS_MOVEMENT
		assert solid(self.sol, 3, 'l2') == BLOCKS_ALL
		assert solid(self.sol, 4, 'l2') == BLOCKS_NONE
		assert solid(self.sol, 5, 'l2') == BLOCKS_NONE

	def test_cathedral_doors_walkable(self):
		sol = bytearray(self.sol)
		sol[43] = 0x01
		assert solid(bytes(sol), 44, 'l1') == BLOCKS_NONE
		assert solid(bytes(sol), 44, 'l3') == BLOCKS_ALL

	def test_out_of_range(self):
		with pytest.raises(ValueError, match='invalid dungeon piece ID 506'):
			solid(self.sol, 506, 'l1')
		with pytest.raises(ValueError):
			solid(self.sol, -1, 'l1')
