"""Tests for drawing arches onto dungeon pieces."""

from pathlib import Path

import pytest
from PIL import Image

from dungeon import get_dungeon_type
import fixarches

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)

# Arch dungeon pieces within the 100 dungeon pieces of the test SOL file, by arch ID.
ARCH_DPIECES = {11: 2, 12: 1, 71: 1}


@pytest.fixture
def dump_dir(tmp_path):
	dump = Path(tmp_path, '_dump_')
	for palette in get_dungeon_type('l1').palettes:
		dpiece_dir = Path(dump, '_dpieces_', 'l1', palette.pal_file)
		dpiece_dir.mkdir(parents=True)
		for dpiece_id in ARCH_DPIECES:
			Image.new('RGBA', (64, 160), RED).save(Path(dpiece_dir, f'dpiece_{dpiece_id:04}.png'))
		arch_dir = Path(dump, 'levels', 'l1data', 'l1s', palette.pal_file)
		arch_dir.mkdir(parents=True)
		for arch in set(ARCH_DPIECES.values()):
			arch_img = Image.new('RGBA', (64, 100), (0, 0, 0, 0))
			arch_img.putpixel((arch, 0), BLUE)
			arch_img.save(Path(arch_dir, f'l1s_{arch:04}.png'))
	return dump


class TestFixArches:
	def test_draw_arch(self, tmp_path):
		dpiece_file = Path(tmp_path, 'dpiece.png')
		arch_file = Path(tmp_path, 'arch.png')
		Image.new('RGB', (64, 160), RED[:3]).save(dpiece_file)
		arch_img = Image.new('RGBA', (96, 200), (0, 0, 255, 128))
		arch_img.save(arch_file)
		fixarches.draw_arch(dpiece_file, arch_file)
		with Image.open(dpiece_file) as img:
			assert img.size == (64, 160)
			r, g, b, a = img.getpixel((5, 5))
			assert a == 255
			assert 120 <= r <= 135
			assert 120 <= b <= 135

	def test_cathedral(self, mpq_dir, dump_dir, capsys):
		fixarches.fix_arches('l1', mpq_dir, dump_dir)
		for palette in get_dungeon_type('l1').palettes:
			for dpiece_id, arch in ARCH_DPIECES.items():
				path = Path(dump_dir, '_dpieces_', 'l1', palette.pal_file, f'dpiece_{dpiece_id:04}.png')
				with Image.open(path) as img:
					assert img.getpixel((arch, 0)) == BLUE
					assert img.getpixel((10, 10)) == RED
					assert img.getpixel((10, 150)) == RED
		out = capsys.readouterr().out
		assert "Drawing arch ID 2 onto dungeon piece ID 11 with palette 'l1_1.pal'." in out

	def test_no_arches(self, mpq_dir, tmp_path, capsys):
		fixarches.fix_arches('l3', mpq_dir, Path(tmp_path, 'empty'))
		assert capsys.readouterr().out == ''

	def test_main(self, mpq_dir, dump_dir):
		fixarches.main(['--mpqdir', str(mpq_dir), '--dump_dir', str(dump_dir), '--dtype', 'l1', 'l4'])
		path = Path(dump_dir, '_dpieces_', 'l1', 'l1palg.pal', 'dpiece_0012.png')
		with Image.open(path) as img:
			assert img.getpixel((1, 0)) == BLUE

	def test_main_missing_dump(self, mpq_dir, tmp_path, capsys):
		with pytest.raises(SystemExit) as e:
			fixarches.main(['--mpqdir', str(mpq_dir), '--dump_dir', str(Path(tmp_path, 'nope')), '--dtype', 'l1'])
		assert e.value.code == 1
		assert 'dpiece_0011.png' in capsys.readouterr().err
