from collections.abc import Iterable, Iterator
from typing import override

from pydantic import BaseModel


class PackageList:
	"""
	Ordered set of package names. Duplicates are dropped on insertion
	and the insertion order is kept for the package manager call.
	"""

	def __init__(self, packages: Iterable[str] = ()) -> None:
		self._packages: dict[str, None] = {}
		self.extend(packages)

	def append(self, package: str) -> None:
		self._packages.setdefault(package, None)

	def extend(self, packages: Iterable[str]) -> None:
		for package in packages:
			self.append(package)

	def substitute(self, substitutions: dict[str, str]) -> 'PackageList':
		return PackageList(substitutions.get(package, package) for package in self)

	def __contains__(self, package: object) -> bool:
		return package in self._packages

	def __iter__(self) -> Iterator[str]:
		return iter(self._packages)

	def __len__(self) -> int:
		return len(self._packages)

	def __bool__(self) -> bool:
		return bool(self._packages)

	@override
	def __eq__(self, other: object) -> bool:
		if isinstance(other, PackageList):
			return list(self) == list(other)
		if isinstance(other, list):
			return list(self) == other
		return NotImplemented

	@override
	def __repr__(self) -> str:
		return f'PackageList({list(self)})'


class CustomRepository(BaseModel):
	"""
	A third-party pacman repository bootstrapped from a signing key and
	keyring/mirrorlist packages served from fixed URLs.
	"""

	name: str
	include: str
	key_id: str
	keyserver: str
	bootstrap_packages: list[str]

	@property
	def marker(self) -> str:
		return f'[{self.name}]'

	def registration_block(self) -> str:
		return f'\n{self.marker}\nInclude = {self.include}\n'


CHAOTIC_AUR = CustomRepository(
	name='chaotic-aur',
	include='/etc/pacman.d/chaotic-mirrorlist',
	key_id='3056513887B78AEB',
	keyserver='keyserver.ubuntu.com',
	bootstrap_packages=[
		'https://cdn-mirror.chaotic.cx/chaotic-aur/chaotic-keyring.pkg.tar.zst',
		'https://cdn-mirror.chaotic.cx/chaotic-aur/chaotic-mirrorlist.pkg.tar.zst',
	],
)
