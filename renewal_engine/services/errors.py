class DeadlineEngineError(Exception):
    pass


class ConfigValidationError(DeadlineEngineError, ValueError):
    pass


class MissingSessionDataError(DeadlineEngineError):
    def __init__(self, student_id: str) -> None:
        super().__init__(f"Student {student_id} has no session end year")
        self.student_id = student_id


class InvalidDurationError(DeadlineEngineError, ValueError):
    pass


class IllegalTransitionError(DeadlineEngineError, ValueError):
    pass


class DateOutOfRangeError(DeadlineEngineError, ValueError):
    pass
