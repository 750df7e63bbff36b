"""
Mozilla's lz4 container, used for search.json.mozlz4 and friends.

Layout: the 8 byte magic ``mozLz40\\0``, the uncompressed size as a
little-endian uint32, then a raw lz4 block.
"""
import struct
from types import ModuleType

from .output import debug

MAGIC = b'mozLz40\0'


def _lz4_block() -> ModuleType | None:
	try:
		import lz4.block
	except ModuleNotFoundError:
		return None

	return lz4.block


def encode(payload: bytes) -> bytes | None:
	"""
	Returns the container bytes, or None when lz4 is not available.
	"""
	if (block := _lz4_block()) is None:
		debug('lz4 is not installed, cannot build a mozlz4 container')
		return None

	# store_size prepends the little-endian uncompressed size
	return MAGIC + block.compress(payload, store_size=True)


def decode(data: bytes) -> bytes:
	if not data.startswith(MAGIC):
		raise ValueError('Not a mozlz4 container')

	if (block := _lz4_block()) is None:
		raise ModuleNotFoundError('lz4 is required to read mozlz4 containers')

	(size,) = struct.unpack('<I', data[len(MAGIC) : len(MAGIC) + 4])
	return block.decompress(data[len(MAGIC) + 4 :], uncompressed_size=size)
