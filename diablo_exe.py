# Read the monster data table from the Diablo 1 executable (diablo.exe v1.09).
#
# The table is an array of 128 byte records in the .data section. String fields
# are 32-bit virtual addresses which are mapped back into the file through the
# PE section table.
#
# Note: no Diablo 1 game assets are provided by this project; an original copy
# of diablo.exe is required.

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import ClassVar, Type, TypeVar
import io
import struct

T = TypeVar('T')

# Number of monster types in the v1.09 monster data table.
NUM_MONSTERS = 111

# CL2 path of the first monster record (Zombie); used to locate the table.
FIRST_CL2_PATH = b'Monsters\\Zombie\\Zombie%c.CL2\0'

@dataclass
class DosHeader:
	_struct: ClassVar[str] = '<2s58xI'
	magic: bytes
	pe_offset: int

@dataclass
class CoffHeader:
	_struct: ClassVar[str] = '<4sHHIIIHH'
	signature: bytes
	machine: int
	section_count: int
	timestamp: int
	symbol_table_addr: int
	symbol_count: int
	optional_header_size: int
	characteristics: int

@dataclass
class OptionalHeader:
	_struct: ClassVar[str] = '<H26xI'
	magic: int
	image_base: int

@dataclass
class SectionHeader:
	_struct: ClassVar[str] = '<8sIIIIIIHHI'
	name: bytes
	virtual_size: int
	virtual_addr: int
	raw_size: int
	raw_addr: int
	reloc_addr: int
	linenum_addr: int
	reloc_count: int
	linenum_count: int
	characteristics: int

def read_from_stream(type : Type[T], stream : io.BufferedReader) -> T:
	size = struct.calcsize(type._struct)
	buf = stream.read(size)
	if len(buf) != size:
		raise ValueError(f'unexpected end of file reading {type.__name__}')
	data = struct.unpack_from(type._struct, buf)
	return type(*data)

class MonsterAction(IntEnum):
	STAND = 0
	WALK = 1
	ATTACK = 2
	HIT = 3
	DIE = 4
	SPECIAL = 5

	@property
	def letter(self) -> str:
		"""Letter substituted into the CL2 and WAV paths of the action."""
		return 'nwahds'[self]

	@property
	def label(self) -> str:
		return self.name.lower()

@dataclass
class MonsterData:
	_struct: ClassVar[str] = '<iiIiIiiI6i6iIbbbxiibxxxiBBBBBBBBBBbxHHHbxHxx'
	frame_width: int
	image: int
	cl2_path: str
	has_special_graphic: bool
	wav_path: str
	has_special_sound: bool
	has_trn: bool
	trn_path: str
	nframes: list[int]
	rates: list[int]
	name: str
	min_dlvl: int
	max_dlvl: int
	level: int
	min_hp: int
	max_hp: int
	ai: int
	flags: int
	intelligence: int
	hit: int
	attack_frame: int
	min_damage: int
	max_damage: int
	hit_special: int
	attack_frame_special: int
	min_damage_special: int
	max_damage_special: int
	armor_class: int
	monster_class: int
	magic_res: int
	magic_res_hell: int
	treasure: int
	sel_flag: int
	exp: int

class Executable:
	def __init__(self, data: bytes):
		self.data = data
		stream = io.BytesIO(data)
		dos = read_from_stream(DosHeader, stream)
		if dos.magic != b'MZ':
			raise ValueError('invalid executable; missing MZ signature')
		stream.seek(dos.pe_offset)
		coff = read_from_stream(CoffHeader, stream)
		if coff.signature != b'PE\0\0':
			raise ValueError('invalid executable; missing PE signature')
		opt_start = stream.tell()
		opt = read_from_stream(OptionalHeader, stream)
		if opt.magic != 0x10B:
			raise ValueError(f'unsupported optional header magic 0x{opt.magic:X}; expected PE32')
		self.image_base = opt.image_base
		stream.seek(opt_start + coff.optional_header_size)
		self.sections : list[SectionHeader] = []
		for i in range(coff.section_count):
			self.sections.append(read_from_stream(SectionHeader, stream))

	@classmethod
	def load(cls, exe_path: Path) -> 'Executable':
		with open(exe_path, 'rb') as exe_f:
			return cls(exe_f.read())

	def va_to_offset(self, va: int) -> int:
		rva = va - self.image_base
		for section in self.sections:
			if section.virtual_addr <= rva < section.virtual_addr + section.raw_size:
				return rva - section.virtual_addr + section.raw_addr
		raise ValueError(f'virtual address 0x{va:08X} not backed by any section')

	def offset_to_va(self, offset: int) -> int:
		for section in self.sections:
			if section.raw_addr <= offset < section.raw_addr + section.raw_size:
				return self.image_base + section.virtual_addr + offset - section.raw_addr
		raise ValueError(f'file offset 0x{offset:X} not within any section')

	def read_cstring(self, va: int) -> str:
		if va == 0:
			return ''
		start = self.va_to_offset(va)
		end = self.data.find(b'\0', start)
		if end == -1:
			raise ValueError(f'unterminated string at 0x{va:08X}')
		return self.data[start:end].decode('latin-1')

	def find_monster_table(self) -> int:
		"""Locate the monster data table by the CL2 path pointer of its first
		record, and return its file offset."""
		str_offset = self.data.lower().find(FIRST_CL2_PATH.lower())
		if str_offset == -1:
			raise ValueError('unable to locate monster data table; Zombie CL2 path not found')
		ptr = struct.pack('<I', self.offset_to_va(str_offset))
		# The CL2 path pointer is the third field of a record.
		ptr_offset = self.data.find(ptr)
		while ptr_offset != -1:
			if ptr_offset >= 8 and (ptr_offset - 8) % 4 == 0:
				return ptr_offset - 8
			ptr_offset = self.data.find(ptr, ptr_offset + 1)
		raise ValueError('unable to locate monster data table; no reference to Zombie CL2 path')

	def read_monster(self, offset: int) -> MonsterData:
		size = struct.calcsize(MonsterData._struct)
		if offset < 0 or offset + size > len(self.data):
			raise ValueError(f'monster record at 0x{offset:X} out of bounds')
		v = struct.unpack_from(MonsterData._struct, self.data, offset)
		return MonsterData(
			frame_width=v[0],
			image=v[1],
			cl2_path=self.read_cstring(v[2]),
			has_special_graphic=v[3] != 0,
			wav_path=self.read_cstring(v[4]),
			has_special_sound=v[5] != 0,
			has_trn=v[6] != 0,
			trn_path=self.read_cstring(v[7]),
			nframes=list(v[8:14]),
			rates=list(v[14:20]),
			name=self.read_cstring(v[20]),
			min_dlvl=v[21],
			max_dlvl=v[22],
			level=v[23],
			min_hp=v[24],
			max_hp=v[25],
			ai=v[26],
			flags=v[27],
			intelligence=v[28],
			hit=v[29],
			attack_frame=v[30],
			min_damage=v[31],
			max_damage=v[32],
			hit_special=v[33],
			attack_frame_special=v[34],
			min_damage_special=v[35],
			max_damage_special=v[36],
			armor_class=v[37],
			monster_class=v[38],
			magic_res=v[39],
			magic_res_hell=v[40],
			treasure=v[41],
			sel_flag=v[42],
			exp=v[43])

	def read_monsters(self, table_offset: int | None = None, count: int = NUM_MONSTERS) -> list[MonsterData]:
		if table_offset is None:
			table_offset = self.find_monster_table()
		size = struct.calcsize(MonsterData._struct)
		monsters : list[MonsterData] = []
		for i in range(count):
			monsters.append(self.read_monster(table_offset + i * size))
		return monsters
