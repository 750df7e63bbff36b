from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ConfigEntry:
	"""
	One configuration subtree to deploy. The source is resolved against
	the fetched tree, the destination always lives under the config root.
	"""

	name: str
	source: Path | None
	destination: Path

	@property
	def found(self) -> bool:
		return self.source is not None and self.source.exists()
