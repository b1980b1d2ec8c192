import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from .errors import OutputWriteError
from .models import BuildOutput


class BatchWriter:
    """Writes a build's outputs; any failed write fails the build."""

    def __init__(self, max_workers: Optional[int] = None):
        self.max_workers = max_workers
        self.logger = logging.getLogger('Quire.Writer')

    def write_one(self, output: BuildOutput):
        try:
            os.makedirs(os.path.dirname(output.path), exist_ok=True)
            with open(output.path, 'w', encoding='utf-8') as f:
                f.write(output.content)
        except (IOError, OSError) as e:
            raise OutputWriteError(output.path, e) from e
        self.logger.debug(f"Wrote {output.path}")

    def write_all(self, outputs: Iterable[BuildOutput]) -> int:
        """Write every output and return how many files were written."""
        outputs = list(outputs)
        if not outputs:
            self.logger.info("No files need updating")
            return 0

        self.logger.info(f"Writing {len(outputs)} files...")
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(self.write_one, output) for output in outputs]
        # All writes have finished once the executor closes; surface the first failure
        failures = [f.exception() for f in futures if f.exception() is not None]
        if failures:
            for failure in failures:
                self.logger.error(str(failure))
            raise failures[0]
        return len(outputs)
