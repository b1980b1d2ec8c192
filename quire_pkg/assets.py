import logging
import os
import shutil

from .errors import OutputWriteError


class AssetManager:
    def __init__(self, public_dir, output_dir):
        self.public_dir = public_dir
        self.output_dir = output_dir
        self.logger = logging.getLogger('Quire.Assets')

    def copy_public_assets(self):
        """Copy the public directory verbatim into the output root."""
        if not self.public_dir or not os.path.isdir(self.public_dir):
            self.logger.info("No public directory found, skipping asset copying")
            return 0

        copied = 0
        for root, dirs, files in os.walk(self.public_dir):
            rel_root = os.path.relpath(root, self.public_dir)
            dest_root = os.path.normpath(os.path.join(self.output_dir, rel_root))
            os.makedirs(dest_root, exist_ok=True)
            for name in files:
                dest = os.path.join(dest_root, name)
                try:
                    shutil.copy2(os.path.join(root, name), dest)
                except (IOError, OSError) as e:
                    raise OutputWriteError(dest, e) from e
                copied += 1
        self.logger.info(f"Copied {copied} public assets from {self.public_dir}")
        return copied
