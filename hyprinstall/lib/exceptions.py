class RequirementError(Exception):
	pass


class PrivilegeError(Exception):
	pass


class SysCallError(Exception):
	def __init__(self, message: str, exit_code: int | None = None, worker_log: bytes = b'') -> None:
		super().__init__(message)
		self.message = message
		self.exit_code = exit_code
		self.worker_log = worker_log


class RepositoryError(Exception):
	pass


class FetchError(Exception):
	pass


class DeploymentError(Exception):
	pass


class ServiceException(Exception):
	pass


class PackageError(Exception):
	pass


class DownloadTimeout(Exception):
	"""
	Raised when an extension download does not finish within its time-box.
	"""
