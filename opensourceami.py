# Open Source-ami generates the bash script which converts the original Diablo 1
# game assets into the file formats used by Ember.
#
# The generated script expects the contents of diabdat.mpq in diabdat, and the
# cel_dump, min_dump, montage and ffmpeg tools as well as the fixarches and
# gentilesetdef commands of this project on PATH.
#
# Usage:
#    python opensourceami.py [-o OUTPUT]
#
# Example:
#    python opensourceami.py -o _assets_/dump.sh
#    Writes the conversion script to _assets_/dump.sh and makes it executable.

from argparse import ArgumentParser
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO
import sys

from dungeon import DUNGEON_TYPES

EMBER_DIR = '../mods/ember'

@dataclass
class MonsterSheet:
	name: str
	cl2_dir: str
	prefix: str
	actions: str
	geometry: str = '+0+0'
	# Actions with graphics for one direction only.
	single_direction: str = ''

	def frame_paths(self, direction: int) -> list[str]:
		base = f'_dump_/monsters/{self.cl2_dir}/{self.prefix}'
		if not self.single_direction:
			return [f'{base}{{{",".join(self.actions)}}}/*_{direction}/*.png']
		paths = []
		for action in self.actions:
			if action in self.single_direction:
				paths.append(f'{base}{action}/*.png')
			else:
				paths.append(f'{base}{action}/*_{direction}/*.png')
		return paths

	def montage(self) -> str:
		paths = []
		for i in range(8):
			paths.extend(self.frame_paths((2 + i) % 8))
		gravity = '' if self.geometry == '+0+0' else '-gravity south '
		return (f'montage {" ".join(paths)} {gravity}-geometry {self.geometry} -tile x8 '
			f'-background none {EMBER_DIR}/images/monster/{self.name}.png')

MONSTER_SHEETS = [
	MonsterSheet('spitting_terror', 'acid', 'acid', 'adhnsw'),
	MonsterSheet('winged_fiend', 'bat', 'bat', 'adhnw'),
	MonsterSheet('devil_kin_brute', 'bigfall', 'fallg', 'adhnw'),
	MonsterSheet('black_knight', 'black', 'black', 'adhnw', '160x160+0+0'),
	MonsterSheet('dark_mage', 'darkmage', 'dmage', 'adhns'),
	MonsterSheet('bone_demon', 'demskel', 'demskl', 'adhnsw'),
	MonsterSheet('diablo', 'diablo', 'diablo', 'adhnsw'),
	MonsterSheet('fallen_one_spear_wielder', 'falspear', 'phall', 'adhnsw'),
	MonsterSheet('fallen_one_sword_wielder', 'falsword', 'fall', 'adhnsw'),
	MonsterSheet('overlord', 'fat', 'fat', 'adhnsw'),
	MonsterSheet('butcher', 'fatc', 'fatc', 'adhnw'),
	MonsterSheet('fireman', 'fireman', 'firem', 'adhnsw', '128x171+0+0'),
	MonsterSheet('gargoyle', 'gargoyle', 'gargo', 'adhnsw'),
	MonsterSheet('goat_archer', 'goatbow', 'goatb', 'adhnw'),
	MonsterSheet('goat_lord', 'goatlord', 'goatl', 'adhnw', '160x160+0+0'),
	MonsterSheet('goat_mace_wielder', 'goatmace', 'goat', 'adhnsw'),
	MonsterSheet('golem', 'golem', 'golem', 'adsw', single_direction='ds'),
	MonsterSheet('mage', 'mage', 'mage', 'adhns'),
	MonsterSheet('magma_demon', 'magma', 'magma', 'adhnsw'),
	MonsterSheet('balrog', 'mega', 'mega', 'adhnsw'),
	MonsterSheet('horned_demon', 'rhino', 'rhino', 'adhnsw'),
	MonsterSheet('scavenger', 'scav', 'scav', 'adhnsw'),
	MonsterSheet('skeleton_axe_wielder', 'skelaxe', 'sklax', 'adhnsw'),
	MonsterSheet('skeleton_archer', 'skelbow', 'sklbw', 'adhnsw'),
	MonsterSheet('skeleton_sword_wielder', 'skelsd', 'sklsr', 'adhnsw'),
	MonsterSheet('skeleton_king', 'sking', 'sking', 'adhnsw'),
	MonsterSheet('viper', 'snake', 'snake', 'adhnsw'),
	MonsterSheet('hidden', 'sneak', 'sneak', 'adhnsw'),
	MonsterSheet('succubus', 'succ', 'scbs', 'adhnw'),
	MonsterSheet('litch_demon', 'thin', 'thin', 'adhnsw'),
	MonsterSheet('invisible_lord', 'tsneak', 'tsneak', 'adhnw'),
	MonsterSheet('unraveler', 'unrav', 'unrav', 'adhnsw', '96x128+0+0'),
	MonsterSheet('zombie', 'zombie', 'zombie', 'adhnsw'),
]

# Music tracks, from diabdat/music/<wav>.wav to <ogg>.ogg
MUSIC = [
	('dintro', 'intro'),
	('dlvla', 'cathedral'),
	('dlvlb', 'catacombs'),
	('dlvlc', 'caves'),
	('dlvld', 'hell'),
	('dtowne', 'tristram'),
]

# Dungeon types in the order their tilesets are generated.
TILESET_ORDER = ['l1', 'l2', 'l3', 'l4', 'town']

HEADER = '''#!/bin/bash

# Locate extracted diabdat.mpq
if [ ! -f "diabdat/levels/towndata/town.cel" ]; then
	echo "Unable to locate \\"diabdat\\" directory containing the contents of diabdat.mpq"
	echo ""
	echo "   Please extract diabdat.mpq to \\"_assets_/diabdat/\\" using"
	echo "   Ladislav Zezula's MPQ Editor [1]."
	echo ""
	echo "   [1]: http://www.zezula.net/en/mpq/download.html"
	exit 1
fi

# Convert CEL, CL2 and MIN files to PNG images.
echo "Converting CEL, CL2 and MIN files to PNG images."
if [ ! -d "_dump_" ]; then
	mkdir -p _dump_
	time cel_dump -a
	time min_dump -a
fi

# Draw arches onto tileset dungeon pieces.
echo "Draw arches onto tileset dungeon pieces."
fixarches
'''

def tileset_section() -> list[str]:
	tileset_dir = f'{EMBER_DIR}/images/tilesets'
	lines = [
		'# Generate tilesets.',
		'echo "Generate tilesets."',
		f'if [ ! -d "{tileset_dir}" ]; then',
		f'\tmkdir -p {tileset_dir}',
	]
	for dtype in TILESET_ORDER:
		dungeon = DUNGEON_TYPES[dtype]
		title = dungeon.title.title()
		lines.append(f'\t# {title}.')
		lines.append(f'\techo "Generate {title} tilesets."')
		for palette in dungeon.palettes:
			lines.append(
				f'\tmontage _dump_/_dpieces_/{dtype}/{palette.pal_file}/dpiece_*.png -background none '
				f'-tile {dungeon.tiles_per_row}x -geometry 64x{dungeon.tile_height} {tileset_dir}/{palette.tileset}.png')
	lines.append('fi')
	return lines

def tilesetdef_section() -> list[str]:
	tilesetdef_dir = f'{EMBER_DIR}/tilesetdefs'
	lines = [
		'# Generate tileset definitions.',
		f'mkdir -p {tilesetdef_dir}',
	]
	for dtype, dungeon in DUNGEON_TYPES.items():
		lines.append(f'gentilesetdef --dtype {dtype} > {tilesetdef_dir}/{dungeon.tileset}.txt')
	return lines

def monster_section() -> list[str]:
	monster_dir = f'{EMBER_DIR}/images/monster'
	lines = [
		'# Generate monster graphics.',
		'echo "Generate monster graphics."',
		f'if [ ! -d "{monster_dir}" ]; then',
		f'\tmkdir -p {monster_dir}',
	]
	for sheet in MONSTER_SHEETS:
		title = sheet.name.replace('_', ' ').title()
		lines.append(f'\t# {title}')
		lines.append(f'\techo "Generating {title} graphics."')
		lines.append(f'\t{sheet.montage()}')
	lines.append('fi')
	return lines

def cursor_section() -> list[str]:
	cursor_dir = f'{EMBER_DIR}/images/cursor'
	return [
		'# Copy cursor graphics.',
		f'if [ ! -d "{cursor_dir}" ]; then',
		f'\tmkdir -p {cursor_dir}',
		f'\tcp _dump_/data/inv/objcurs/objcurs_0001.png {cursor_dir}/cursor_hand.png',
		'fi',
	]

def music_section() -> list[str]:
	music_dir = f'{EMBER_DIR}/music'
	lines = [
		'# Convert music from wav to ogg.',
		'echo "Converting music from wav to ogg."',
		f'if [ ! -d "{music_dir}" ]; then',
		f'\tmkdir -p {music_dir}',
	]
	for wav, ogg in MUSIC:
		lines.append(f'\tffmpeg -loglevel error -y -i diabdat/music/{wav}.wav {music_dir}/{ogg}.ogg')
	lines.append('fi')
	return lines

def opensourceami(out: TextIO):
	out.write(HEADER)
	sections = [tileset_section(), tilesetdef_section(), monster_section(), cursor_section(), music_section()]
	for section in sections:
		out.write('\n')
		out.write('\n'.join(section) + '\n')

def main(argv: list[str] | None = None):
	parser = ArgumentParser(
		prog='opensourceami',
		description='Generate a script for converting the original Diablo 1 game assets into the file formats used by Ember.'
	)
	parser.add_argument('-o', dest='output', type=Path, help='output path')
	args = parser.parse_args(argv)

	try:
		if args.output is not None:
			with open(args.output, 'w', encoding='utf-8') as out_f:
				opensourceami(out_f)
			args.output.chmod(0o755)
		else:
			opensourceami(sys.stdout)
	except OSError as e:
		print(f'\033[91munable to create {str(args.output)!r}; {e}\033[0m', file=sys.stderr)
		sys.exit(1)

if __name__ == '__main__':
	main()
