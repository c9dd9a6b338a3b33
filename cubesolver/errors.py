from enum import IntEnum


class VerifyResult(IntEnum):
    """Status codes of a cube check, 0 means solvable"""
    OK = 0
    WRONG_FACELET_COUNT = -1
    MISSING_EDGE = -2
    EDGE_FLIP_ERROR = -3
    MISSING_CORNER = -4
    CORNER_TWIST_ERROR = -5
    PARITY_ERROR = -6

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[int(self)]


# -7 and -8 are search outcomes, kept here so a host can show one table of messages
ERROR_MESSAGES = {
    0: "Cube is solvable",
    -1: "There is not exactly one facelet of each colour!",
    -2: "Not all 12 edges exist exactly once!",
    -3: "Flip error: One edge has to be flipped!",
    -4: "Not all 8 corners exist exactly once!",
    -5: "Twist error: One corner has to be twisted!",
    -6: "Parity error: Two corners or two edges have to be exchanged!",
    -7: "No solution exists for the given maximum move number!",
    -8: "Timeout, no solution found within given maximum time!",
}


def error_message(code: int) -> str:
    return ERROR_MESSAGES.get(int(code), f"Unknown error code returned: {code}")


class CubeError(Exception):
    code = None

    def __init__(self, message="Invalid cube"):
        self.message = message
        super().__init__(self.message)


class FormatError(CubeError):
    """Facelet string or move text that cannot be parsed"""
    code = VerifyResult.WRONG_FACELET_COUNT


class ValidationError(CubeError):
    """Well formed input describing a cube that cannot exist physically"""

    def __init__(self, result: VerifyResult, message: str = None):
        self.result = VerifyResult(result)
        self.code = self.result
        super().__init__(message or self.result.message)


class SolverFailure(CubeError):
    """No solution within the move ceiling; for a verified cube this means broken tables"""
    code = -7

    def __init__(self, message=None, max_length: int = None):
        self.max_length = max_length
        super().__init__(message or error_message(self.code))


class SolverTimeout(SolverFailure):
    code = -8


class SearchCancelled(SolverFailure):
    def __init__(self, message="Search cancelled", max_length: int = None):
        super().__init__(message, max_length)
