class ProgressionError(Exception):
	"""Base for rejected progression requests."""


class InvalidTaskIndex(ProgressionError):
	def __init__(self, task_index: int, task_count: int) -> None:
		super().__init__(f"taskIndex {task_index} is out of range (course has {task_count} tasks)")
		self.task_index = task_index
		self.task_count = task_count


class PendingRollConflict(ProgressionError):
	def __init__(self, pending_task_index: int) -> None:
		super().__init__(f"A die roll is already pending for task {pending_task_index}; roll it first")
		self.pending_task_index = pending_task_index


class NoPendingRoll(ProgressionError):
	def __init__(self) -> None:
		super().__init__("No pending die roll")
