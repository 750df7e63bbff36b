from .deployment import ConfigEntry
from .dotfiles import DotfileSource
from .packages import CustomRepository, PackageList
from .result import OperationResult, OperationStatus

__all__ = [
	'ConfigEntry',
	'CustomRepository',
	'DotfileSource',
	'OperationResult',
	'OperationStatus',
	'PackageList',
]
