from dataclasses import dataclass
from typing import Union

from .errors import LunexError


@dataclass
class RetryState:
    max_retries: int
    attempt_index: int = 0
    last_error: Union[LunexError, None] = None

    @property
    def attempts(self) -> int:
        return self.attempt_index + 1

    def can_retry(self) -> bool:
        return self.attempt_index < self.max_retries
