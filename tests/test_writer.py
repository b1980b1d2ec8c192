"""Tests for the batch writer and public asset copying."""

import logging
import os
from pathlib import Path

import pytest

from quire_pkg.assets import AssetManager
from quire_pkg.errors import BuildError, OutputWriteError
from quire_pkg.models import BuildOutput
from quire_pkg.writer import BatchWriter


class TestBatchWriter:
    """Test cases for BatchWriter."""

    def test_empty_batch(self, caplog):
        with caplog.at_level(logging.INFO, logger='Quire.Writer'):
            assert BatchWriter().write_all([]) == 0
        assert 'No files need updating' in caplog.text

    def test_writes_all_outputs(self, temp_dir):
        outputs = [
            BuildOutput(os.path.join(temp_dir, 'index.html'), '<html>é</html>'),
            BuildOutput(os.path.join(temp_dir, 'posts', 'a', 'index.html'), 'a'),
            BuildOutput(os.path.join(temp_dir, 'feed.xml'), '<rss/>'),
        ]
        assert BatchWriter(max_workers=2).write_all(outputs) == 3
        assert Path(temp_dir, 'index.html').read_text(encoding='utf-8') == '<html>é</html>'
        assert Path(temp_dir, 'posts', 'a', 'index.html').read_text() == 'a'

    def test_overwrites_existing_files(self, temp_dir):
        path = os.path.join(temp_dir, 'index.html')
        Path(path).write_text('old')
        BatchWriter().write_all([BuildOutput(path, 'new')])
        assert Path(path).read_text() == 'new'

    def test_failure_raises_after_other_writes(self, temp_dir):
        blocker = Path(temp_dir, 'blocked')
        blocker.write_text('a file where a directory should be')
        good = os.path.join(temp_dir, 'good.html')
        outputs = [
            BuildOutput(os.path.join(str(blocker), 'index.html'), 'x'),
            BuildOutput(good, 'ok'),
        ]
        with pytest.raises(OutputWriteError) as excinfo:
            BatchWriter().write_all(outputs)
        assert excinfo.value.path == os.path.join(str(blocker), 'index.html')
        assert 'Failed to write' in str(excinfo.value)
        assert isinstance(excinfo.value, BuildError)
        assert Path(good).read_text() == 'ok'


class TestAssetManager:
    """Test cases for AssetManager."""

    def test_copies_public_tree(self, temp_dir):
        public = Path(temp_dir, 'public')
        (public / 'img').mkdir(parents=True)
        (public / 'robots.txt').write_text('User-agent: *')
        (public / 'img' / 'logo.svg').write_text('<svg/>')
        output = os.path.join(temp_dir, 'dist')
        assert AssetManager(str(public), output).copy_public_assets() == 2
        assert Path(output, 'robots.txt').read_text() == 'User-agent: *'
        assert Path(output, 'img', 'logo.svg').exists()

    def test_missing_public_directory(self, temp_dir):
        manager = AssetManager(os.path.join(temp_dir, 'public'), os.path.join(temp_dir, 'dist'))
        assert manager.copy_public_assets() == 0
