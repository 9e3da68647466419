"""
User rules file: operator-authored rules stored beside the downloaded filters
"""

from pathlib import Path
from typing import Iterable, List

from ..core.config import USER_FILTER_ID
from ..core.fileutil import safe_write_file, read_file_if_exists
from ..core.logging import get_logger


logger = get_logger(__name__)


class UserFilter:
    """The user rules as a filter with the reserved id 0"""

    def __init__(self, filter_dir: Path, rules: Iterable[str]):
        self.id = USER_FILTER_ID
        self.filter_dir = Path(filter_dir)
        self.rules: List[str] = list(rules)

    @property
    def path(self) -> Path:
        return self.filter_dir / f"{self.id}.txt"

    def render(self) -> bytes:
        return "\n".join(self.rules).encode("utf-8")

    def save(self) -> None:
        """Write the rules to disk; OSError propagates"""
        logger.debug(f"Saving user filter to {self.path}")
        safe_write_file(self.path, self.render())

    def load(self) -> List[str]:
        """Read the rules back from disk, empty if the file is missing"""
        data = read_file_if_exists(self.path)
        if data is None:
            return []
        return data.decode("utf-8").splitlines()
