# Extract monster assets from the Diablo 1 game.
#
# Prints a bash script to stdout which converts the monster graphics (with
# ImageMagick montage) and sounds (with ffmpeg) into the layout of the Tristram
# mod. Monster definitions are written directly into the mod folder.
#
# Note: this tool requires an original copy of diablo.exe. The graphics are
# expected in _dump_ (see cel_dump) and the sounds in diabdat.
#
# Usage:
#    python extract_monsters.py [--def] [--graphics] [--sounds] [-q] <exe_file>
#
# Example:
#    python extract_monsters.py --graphics --sounds diablo.exe > monsters.sh
#    Generates monsters.sh which creates the sprite sheets and sound effects of
#    all monsters.
#
#    python extract_monsters.py --def --mods_dir ../mods/tristram diablo.exe
#    Writes enemy, enemy base and animation definitions of all monsters.

from argparse import ArgumentParser
from pathlib import Path
from typing import TextIO
import posixpath
import shlex
import sys

from diablo_exe import Executable, MonsterAction, MonsterData, NUM_MONSTERS

# Monsters whose graphics are missing from diabdat.mpq.
MISSING_GRAPHICS = {'Wyrm', 'Cave Slug', 'Devil Wyrm', 'Devourer'}

# CL2 directories without graphics in diabdat.mpq; darkmage has no walk
# animation, golem has no stand or hit animation.
SKIPPED_CL2_DIRS = {
	'monsters/darkmage/dmagew',
	'monsters/bigfall/fallgs',
	'monsters/golem/golemn',
	'monsters/golem/golemh',
}

# CL2 directories holding only one direction.
SINGLE_DIRECTION_CL2_DIRS = {
	'monsters/golem/golemd',
	'monsters/golem/golems',
}

# Suffixes of monster names used by more than one monster type, by CL2 directory.
NAME_COLLISIONS = [
	('monsters/skelaxe/', '_axe'),
	('monsters/skelbow/', '_bow'),
	('monsters/falspear/', '_spear'),
	('monsters/falsword/', '_sword'),
	('monsters/goatmace/', '_mace'),
	('monsters/goatbow/', '_bow'),
]

# Diablo 1 runs at 20 FPS.
FRAME_DURATION_MS = 50

# Frame height of monster graphics in the sprite sheet.
FRAME_HEIGHT = 96

verbose = True

def dbg(msg: str):
	if verbose:
		print(f'extract_monsters: {msg}', file=sys.stderr)

def game_path(path: str) -> str:
	return path.lower().replace('\\', '/')

def format_game_path(format: str, *args) -> str:
	try:
		return game_path(format) % args
	except TypeError as e:
		raise ValueError(f'invalid path format {format!r}; {e}')

def snake_case(name: str) -> str:
	return name.lower().replace(' ', '_')

def monster_name(monster: MonsterData) -> str:
	"""Return the unique file name of the given monster."""
	name = snake_case(monster.name)
	cl2_path = game_path(monster.cl2_path)
	for prefix, suffix in NAME_COLLISIONS:
		if cl2_path.startswith(prefix):
			return name + suffix
	return name

def graphics_actions(monster: MonsterData) -> list[MonsterAction]:
	actions = [MonsterAction.STAND, MonsterAction.WALK, MonsterAction.ATTACK, MonsterAction.HIT, MonsterAction.DIE]
	if monster.has_special_graphic:
		actions.append(MonsterAction.SPECIAL)
	return actions

def sound_actions(monster: MonsterData) -> list[MonsterAction]:
	actions = [MonsterAction.ATTACK, MonsterAction.HIT, MonsterAction.DIE]
	if monster.has_special_sound:
		actions.append(MonsterAction.SPECIAL)
	return actions

def graphics_script(monster: MonsterData, mods_dir: str) -> str | None:
	"""Return the montage command which lays out the frames of the given
	monster as one sprite sheet; one row per direction, starting south-west."""
	if monster.name in MISSING_GRAPHICS:
		return None

	trn_dir = ''
	if monster.has_trn:
		rel_trn_path = game_path(monster.trn_path)
		dbg(f'using colour transition: {rel_trn_path!r}.')
		trn_dir = f'{posixpath.basename(rel_trn_path)}/'

	lines = [f'echo {shlex.quote(f"Extracting graphics for {monster.name}")}', 'montage \\']
	for i in range(8):
		direction = (2 + i) % 8
		for action in graphics_actions(monster):
			rel_cl2_path = format_game_path(monster.cl2_path, action.letter)
			rel_cl2_dir = posixpath.splitext(rel_cl2_path)[0]
			if rel_cl2_dir in SKIPPED_CL2_DIRS:
				continue
			if rel_cl2_dir in SINGLE_DIRECTION_CL2_DIRS:
				lines.append(f'\t_dump_/{rel_cl2_dir}/{trn_dir}*.png \\')
				continue
			name = posixpath.basename(rel_cl2_dir)
			lines.append(f'\t_dump_/{rel_cl2_dir}/{trn_dir}{name}_{direction}/*.png \\')
	lines.append(f'\t-gravity south -geometry {monster.frame_width}x+0+0 \\')
	lines.append('\t-tile x8 \\')
	lines.append('\t-background none \\')
	lines.append(f'\t{mods_dir}/images/monster/{monster_name(monster)}.png')
	return '\n'.join(lines) + '\n'

def sounds_script(monster: MonsterData, mods_dir: str) -> str:
	lines = [f'echo {shlex.quote(f"Extracting sounds for {monster.name}")}']
	name = monster_name(monster)
	for action in sound_actions(monster):
		for i in range(1, 3):
			# The WAV path is a printf format of the action letter and variant.
			rel_wav_path = format_game_path(monster.wav_path, action.letter, i)
			lines.append(f'ffmpeg -loglevel error -y -i diabdat/{rel_wav_path} {mods_dir}/sounds/monster/{name}_{action.label}_{i}.ogg')
	return '\n'.join(lines) + '\n'

def monster_base_def(monster: MonsterData) -> str:
	name = monster_name(monster)
	out = []
	out.append(f'sfx_attack=swing,sounds/monster/{name}_attack_1.ogg')
	if monster.has_special_sound:
		out.append(f'sfx_attack=shoot,sounds/monster/{name}_special_1.ogg')
		out.append(f'sfx_attack=cast,sounds/monster/{name}_special_1.ogg')
	out.append('sfx_block=soundfx/powers/block.ogg')
	out.append(f'sfx_hit=sounds/monster/{name}_hit_1.ogg')
	out.append(f'sfx_die=sounds/monster/{name}_die_1.ogg')
	out.append('')
	out.append(f'animations=animations/monster/{name}.txt')
	out.append('')
	out.append('melee_range=1.2')
	out.append('threat_range=600.0')
	return '\n'.join(out) + '\n'

def monster_def(monster: MonsterData) -> str:
	name = monster_name(monster)
	hp = monster.min_hp + (monster.max_hp - monster.min_hp) // 2
	out = []
	out.append(f'INCLUDE enemies/base/{name}.txt')
	out.append('')
	out.append(f'name={monster.name}')
	out.append(f'level={monster.level}')
	out.append(f'categories={name},dungeon')
	out.append('rarity=common')
	out.append(f'xp={monster.exp}')
	out.append('')
	out.append('# combat stats')
	out.append(f'stat=hp,{hp}')
	# TODO: derive speed from the walk animation rate.
	out.append('speed=2')
	out.append('turn_delay=400ms')
	out.append('chance_pursue=10')
	out.append('')
	out.append('power=melee,1,2')
	out.append('power=ranged,32,2')
	out.append('')
	out.append('stat=accuracy,69')
	out.append('stat=avoidance,19')
	out.append('')
	out.append(f'stat=dmg_melee_min,{monster.min_damage}')
	out.append(f'stat=dmg_melee_max,{monster.max_damage}')
	if monster.has_special_graphic and monster.min_damage_special != 0:
		out.append(f'stat=dmg_ranged_min,{monster.min_damage_special}')
		out.append(f'stat=dmg_ranged_max,{monster.max_damage_special}')
	out.append('cooldown=1s')
	out.append('')
	out.append('# loot')
	out.append('loot=loot/leveled_low.txt')
	return '\n'.join(out) + '\n'

# Animation sections in sprite sheet order.
ANIMATIONS = [
	(MonsterAction.STAND, 'stance', 'back_forth'),
	(MonsterAction.WALK, 'run', 'looped'),
	(MonsterAction.ATTACK, 'swing', 'play_once'),
	(MonsterAction.HIT, 'hit', 'play_once'),
	(MonsterAction.DIE, 'die', 'play_once'),
	(MonsterAction.SPECIAL, 'shoot', 'play_once'),
]

def monster_anim_def(monster: MonsterData) -> str:
	name = monster_name(monster)
	out = []
	out.append(f'image=images/monster/{name}.png')
	out.append(f'render_size={monster.frame_width},{FRAME_HEIGHT}')
	out.append(f'render_offset={monster.frame_width // 2},{FRAME_HEIGHT - 16}')
	position = 0
	for action, section, anim_type in ANIMATIONS:
		if action == MonsterAction.SPECIAL and not monster.has_special_graphic:
			continue
		nframes = monster.nframes[action]
		out.append('')
		out.append(f'[{section}]')
		out.append(f'position={position}')
		out.append(f'frames={nframes}')
		out.append(f'duration={FRAME_DURATION_MS * nframes}ms')
		out.append(f'type={anim_type}')
		position += nframes
	return '\n'.join(out) + '\n'

def write_monster_defs(monster: MonsterData, mods_dir: Path):
	name = monster_name(monster)
	files = [
		(Path(mods_dir, 'enemies', 'base', f'{name}.txt'), monster_base_def(monster)),
		(Path(mods_dir, 'enemies', f'{name}.txt'), monster_def(monster)),
		(Path(mods_dir, 'animations', 'monster', f'{name}.txt'), monster_anim_def(monster)),
	]
	for path, text in files:
		path.parent.mkdir(parents=True, exist_ok=True)
		with open(path, 'w', encoding='utf-8') as f:
			f.write(text)

def extract(exe_file: Path, out: TextIO, graphics: bool = False, sounds: bool = False, defs: bool = False,
		mods_dir: str = '../mods/tristram', table_offset: int | None = None, count: int = NUM_MONSTERS):
	exe = Executable.load(exe_file)
	monsters = exe.read_monsters(table_offset, count)
	print('#!/bin/bash', file=out)
	for monster in monsters:
		dbg(f'extracting assets of {monster.name!r}.')
		if graphics:
			script = graphics_script(monster, mods_dir)
			if script is not None:
				out.write(script)
		if sounds:
			print(sounds_script(monster, mods_dir), file=out)
		if defs:
			write_monster_defs(monster, Path(mods_dir))

def main(argv: list[str] | None = None):
	global verbose

	parser = ArgumentParser(
		prog='extract_monsters',
		description='Extract monsters assets from the Diablo 1 game.'
	)
	parser.add_argument('exe_file', type=Path, help='path to diablo.exe')
	parser.add_argument('--def', dest='defs', action='store_true', help='extract monster definitions')
	parser.add_argument('--graphics', action='store_true', help='extract monster graphics')
	parser.add_argument('--sounds', action='store_true', help='extract monster sounds')
	parser.add_argument('-q', dest='quiet', action='store_true', help='suppress non-error messages')
	parser.add_argument('--mods_dir', default='../mods/tristram', help='output mod folder')
	parser.add_argument('--table_offset', type=lambda x: int(x, 0),
		help='file offset of the monster data table; located by signature if omitted')
	parser.add_argument('--count', type=int, default=NUM_MONSTERS, help='number of monster records')
	args = parser.parse_args(argv)

	verbose = not args.quiet
	try:
		extract(args.exe_file, sys.stdout, args.graphics, args.sounds, args.defs,
			args.mods_dir, args.table_offset, args.count)
	except (OSError, ValueError) as e:
		print(f'\033[91m{e}\033[0m', file=sys.stderr)
		sys.exit(1)

if __name__ == '__main__':
	main()
