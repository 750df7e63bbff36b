from dataclasses import dataclass
from enum import Enum


class OperationStatus(Enum):
	SUCCEEDED = 'succeeded'
	SKIPPED_MISSING = 'skipped (missing)'
	FAILED_NON_FATAL = 'failed (non-fatal)'


@dataclass
class OperationResult:
	"""
	Outcome of a best-effort step. The step never raises for these outcomes,
	the caller decides how loudly to report them.
	"""

	target: str
	status: OperationStatus
	message: str = ''

	@property
	def ok(self) -> bool:
		return self.status == OperationStatus.SUCCEEDED

	@classmethod
	def succeeded(cls, target: str, message: str = '') -> 'OperationResult':
		return cls(target, OperationStatus.SUCCEEDED, message)

	@classmethod
	def missing(cls, target: str, message: str = '') -> 'OperationResult':
		return cls(target, OperationStatus.SKIPPED_MISSING, message)

	@classmethod
	def failed(cls, target: str, message: str = '') -> 'OperationResult':
		return cls(target, OperationStatus.FAILED_NON_FATAL, message)

	def table_data(self) -> dict[str, str]:
		return {
			'target': self.target,
			'status': self.status.value,
			'message': self.message,
		}
