from pathlib import Path
import struct

import pytest

from diablo_exe import MonsterData

IMAGE_BASE = 0x400000
SECTION_VA = 0x1000
SECTION_RAW = 0x200

def monster(name, cl2_path, wav_path, **kwargs):
	m = {
		'width': 128,
		'cl2_path': cl2_path,
		'has_special': False,
		'wav_path': wav_path,
		'snd_special': False,
		'has_trans': False,
		'trn_path': None,
		'frames': [11, 24, 12, 8, 16, 0],
		'rates': [4, 1, 1, 1, 1, 1],
		'name': name,
		'level': 1,
		'min_hp': 4,
		'max_hp': 7,
		'min_damage': 2,
		'max_damage': 5,
		'min_damage2': 0,
		'max_damage2': 0,
		'exp': 54,
	}
	m.update(kwargs)
	return m

MONSTERS = [
	monster('Zombie', 'Monsters\\Zombie\\Zombie%c.CL2', 'Monsters\\Zombie\\Zombie%c%i.WAV'),
	monster('Skeleton', 'Monsters\\SkelAxe\\SklAx%c.CL2', 'Monsters\\SkelAxe\\SklAx%c%i.WAV',
		has_special=True, has_trans=True, trn_path='Monsters\\SkelAxe\\Bone.TRN',
		frames=[12, 8, 13, 6, 17, 16]),
	monster('Golem', 'Monsters\\Golem\\Golem%c.CL2', 'Monsters\\Golem\\Golm%c%i.WAV',
		width=96, has_special=True, snd_special=True, frames=[1, 16, 12, 1, 20, 12],
		min_damage2=8, max_damage2=12),
	monster('Wyrm', 'Monsters\\Worm\\Worm%c.CL2', 'Monsters\\Worm\\Worm%c%i.WAV', width=160),
]

def build_exe(monsters) -> bytes:
	"""Build a minimal PE32 executable holding the given monsters as a monster
	data table, in a single section after all referenced strings."""
	strings = bytearray()
	string_vas = {}

	def add_string(s):
		if s is None:
			return 0
		if s not in string_vas:
			string_vas[s] = IMAGE_BASE + SECTION_VA + len(strings)
			strings.extend(s.encode('latin-1') + b'\0')
		return string_vas[s]

	records = bytearray()
	for m in monsters:
		records.extend(struct.pack(MonsterData._struct,
			m['width'], 0, add_string(m['cl2_path']), int(m['has_special']),
			add_string(m['wav_path']), int(m['snd_special']), int(m['has_trans']), add_string(m['trn_path']),
			*m['frames'], *m['rates'],
			add_string(m['name']), 1, 3, m['level'],
			m['min_hp'], m['max_hp'], 1, 0,
			0, 10, 8, m['min_damage'], m['max_damage'],
			0, 0, m['min_damage2'], m['max_damage2'],
			5, 0, 0, 0, 0, 3, m['exp']))

	while len(strings) % 16 != 0:
		strings.append(0)
	section = bytes(strings) + bytes(records)

	exe = bytearray(b'MZ' + bytes(58) + struct.pack('<I', 0x40))
	exe.extend(b'PE\0\0' + struct.pack('<HHIIIHH', 0x14C, 1, 0, 0, 0, 0xE0, 0x10F))
	optional_header = struct.pack('<H26xI', 0x10B, IMAGE_BASE)
	exe.extend(optional_header + bytes(0xE0 - len(optional_header)))
	exe.extend(struct.pack('<8sIIIIIIHHI', b'.data', len(section), SECTION_VA, len(section), SECTION_RAW, 0, 0, 0, 0, 0))
	exe.extend(bytes(SECTION_RAW - len(exe)))
	exe.extend(section)
	return bytes(exe)

def table_offset(monsters) -> int:
	"""File offset of the monster data table built by build_exe."""
	exe = build_exe(monsters)
	return len(exe) - len(monsters) * struct.calcsize(MonsterData._struct)

@pytest.fixture
def exe_file(tmp_path) -> Path:
	path = Path(tmp_path, 'diablo.exe')
	path.write_bytes(build_exe(MONSTERS))
	return path

@pytest.fixture
def mpq_dir(tmp_path) -> Path:
	"""Extracted diabdat.mpq with a SOL file per dungeon type.

	Every dungeon type has 100 dungeon pieces; piece 1 blocks walking, piece 2
	blocks missiles, piece 3 blocks both and all others are walkable.
	"""
	mpq = Path(tmp_path, 'diabdat')
	sol = bytes([0x01, 0x04, 0x05]) + bytes(97)
	for dtype in ['town', 'l1', 'l2', 'l3', 'l4']:
		data_dir = Path(mpq, 'levels', f'{dtype}data')
		data_dir.mkdir(parents=True)
		Path(data_dir, f'{dtype}.sol').write_bytes(sol)
	return mpq
