import enum
import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from watchdog.observers import Observer

from . import __version__
from .assets import AssetManager
from .errors import BuildError
from .feeds import FeedGenerator
from .models import BuildOutput
from .pages import PageGenerator
from .posts import PostProcessor
from .settings import QuireSettings
from .sitemap import SitemapGenerator
from .styles import StyleCompiler
from .templates import TemplateEngine
from .watcher import DebouncedRebuilder
from .writer import BatchWriter


class BuildState(enum.Enum):
    IDLE = 'idle'
    BUILDING = 'building'
    WATCHING_IDLE = 'watching-idle'
    WATCHING_PENDING = 'watching-pending'
    WATCHING_BUILDING = 'watching-building'


BUSY_STATES = (BuildState.BUILDING, BuildState.WATCHING_BUILDING)


class InfoFilter(logging.Filter):
    """Filter to allow warnings and only selected INFO messages in the console."""
    def filter(self, record):
        if record.levelno >= logging.WARNING:
            return True
        allowed_messages = [
            "Starting build",
            "Build completed in",
            "Total posts generated:",
            "Total files written:",
            "Compiling stylesheets",
            "CSS minified:",
            "Style compilation skipped",
            "Writing",
            "No files need updating",
            "File watcher started",
            "Rebuilding after changes",
            "File created",
            "File modified",
            "File deleted",
            "File moved",
        ]
        return any(msg in record.getMessage() for msg in allowed_messages)


class Quire:
    """
    Build orchestrator.

    At most one build runs at a time: a build() call that arrives while
    another is in flight returns False straight away.
    """

    def __init__(self, posts_dir='src/posts', templates_dir='src/templates', styles_dir='src/styles',
                 public_dir='public', output_dir='dist', site_title='Quire',
                 site_description='A minimalistic personal blog', site_url='https://example.com',
                 base_path='', language='en-us', posts_per_page=5, mode='development',
                 debounce_ms=300, log_dir='logs', style_compiler=None):
        self.posts_dir = posts_dir
        self.templates_dir = templates_dir
        self.styles_dir = styles_dir
        self.public_dir = public_dir
        self.output_dir = os.path.abspath(output_dir)
        self.site_title = site_title
        self.site_description = site_description
        self.site_url = (site_url or '').rstrip('/')
        self.base_path = base_path
        self.language = language
        self.posts_per_page = max(1, posts_per_page)
        self.mode = mode
        self.debounce_ms = debounce_ms
        self.log_dir = log_dir

        self._state = BuildState.IDLE
        self._state_lock = threading.Lock()
        self._pending = False
        self._stop_watching = threading.Event()
        self.watch_started = threading.Event()
        self.builds_completed = 0
        self.files_written = 0
        self.posts_generated = 0

        self.setup_logging()

        self.asset_manager = AssetManager(public_dir, self.output_dir)
        self.style_compiler = StyleCompiler(styles_dir, templates_dir, self.output_dir, compiler=style_compiler)
        self.post_processor = PostProcessor(posts_dir)
        self.page_generator = PageGenerator(
            TemplateEngine(templates_dir), self.output_dir, site_title, site_description,
            self.site_url, base_path=base_path, posts_per_page=self.posts_per_page,
        )
        self.feed_generator = FeedGenerator(site_title, site_description, self.site_url,
                                            language=language, version=__version__)
        self.sitemap_generator = SitemapGenerator(self.site_url, posts_per_page=self.posts_per_page)
        self.writer = BatchWriter()

    @classmethod
    def from_settings(cls, settings, **kwargs):
        """Create a Quire from a settings dictionary (see QuireSettings)."""
        settings = QuireSettings().normalize(settings)
        return cls(
            posts_dir=settings['posts'],
            templates_dir=settings['templates'],
            styles_dir=settings['styles'],
            public_dir=settings['public'],
            output_dir=os.path.expanduser(settings['output']),
            site_title=settings['site_title'],
            site_description=settings['site_description'],
            site_url=settings['site_url'],
            base_path=settings['base_path'],
            language=settings['language'],
            posts_per_page=settings['posts_per_page'],
            mode=settings['mode'],
            debounce_ms=settings['debounce_ms'],
            log_dir=settings['log_dir'],
            **kwargs
        )

    def setup_logging(self):
        """Set up logging configuration."""
        self.logger = logging.getLogger('Quire')
        self.logger.setLevel(logging.DEBUG)

        if not self.logger.handlers:
            # Console handler with filter
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.INFO)
            console_handler.addFilter(InfoFilter())
            console_formatter = logging.Formatter('%(message)s')
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

            # File handler for all logs
            if self.log_dir:
                os.makedirs(self.log_dir, exist_ok=True)
                log_filename = datetime.now().strftime('quire_%Y-%m-%d_%H-%M-%S.log')
                file_handler = logging.FileHandler(os.path.join(self.log_dir, log_filename))
                file_handler.setLevel(logging.DEBUG)
                file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
                file_handler.setFormatter(file_formatter)
                self.logger.addHandler(file_handler)

    @property
    def state(self):
        return self._state

    @property
    def is_watching(self):
        return self._state not in (BuildState.IDLE, BuildState.BUILDING)

    def _begin_build(self):
        """Atomically move into a building state; False if one is already running."""
        with self._state_lock:
            if self._state in BUSY_STATES:
                return False
            self._state = BuildState.WATCHING_BUILDING if self.is_watching else BuildState.BUILDING
            self._pending = False
            return True

    def _end_build(self):
        with self._state_lock:
            if not self.is_watching:
                self._state = BuildState.IDLE
            elif self._pending:
                self._state = BuildState.WATCHING_PENDING
            else:
                self._state = BuildState.WATCHING_IDLE

    def mark_pending(self):
        """Record that a rebuild has been requested but not started yet."""
        with self._state_lock:
            if self._state == BuildState.WATCHING_IDLE:
                self._state = BuildState.WATCHING_PENDING
            elif self._state == BuildState.WATCHING_BUILDING:
                self._pending = True

    def build(self):
        """
        Run one full build.

        Returns True when a build ran and False when it was skipped because
        another build was in flight. BuildError propagates to the caller.
        """
        if not self._begin_build():
            self.logger.info("Build already in progress, skipping request")
            return False

        start = time.perf_counter()
        self.logger.info("Starting build...")
        try:
            with ThreadPoolExecutor(max_workers=3) as executor:
                assets = executor.submit(self.asset_manager.copy_public_assets)
                styles = executor.submit(self.style_compiler.compile_if_needed, self.mode)
                posts_future = executor.submit(self.post_processor.load_posts)
                assets.result()
                style_outputs = styles.result()
                posts = posts_future.result()

            with ThreadPoolExecutor(max_workers=3) as executor:
                pages = executor.submit(self.page_generator.generate_all_pages, posts)
                feeds = executor.submit(self.prepare_feed_operations, posts)
                sitemap = executor.submit(self.prepare_sitemap_operations, posts)
                outputs = style_outputs + pages.result() + feeds.result() + sitemap.result()

            written = self.writer.write_all(outputs)
        finally:
            self._end_build()

        elapsed = time.perf_counter() - start
        self.builds_completed += 1
        self.posts_generated = len(posts)
        self.files_written = written
        self.logger.info(f"Build completed in {elapsed:.3f} seconds.")
        self.logger.info(f"Total posts generated: {len(posts)}")
        self.logger.info(f"Total files written: {written}")
        return True

    def prepare_feed_operations(self, posts):
        self.logger.info("Generating feeds...")
        return [
            BuildOutput(os.path.join(self.output_dir, 'feed.xml'), self.feed_generator.generate_rss(posts)),
            BuildOutput(os.path.join(self.output_dir, 'atom.xml'), self.feed_generator.generate_atom(posts)),
        ]

    def prepare_sitemap_operations(self, posts):
        self.logger.info("Generating sitemap...")
        return [
            BuildOutput(os.path.join(self.output_dir, 'sitemap.xml'), self.sitemap_generator.generate_content(posts)),
        ]

    def watched_dirs(self):
        return [d for d in (self.posts_dir, self.templates_dir, self.styles_dir) if d and os.path.isdir(d)]

    def create_watch_handler(self):
        return DebouncedRebuilder(self, self.debounce_ms / 1000.0, roots=self.watched_dirs())

    def watch(self, poll_interval=1.0):
        """
        Build once, then rebuild whenever posts, templates or styles change.

        Runs until interrupted (Ctrl+C) or until stop() is called.
        """
        self._stop_watching.clear()
        with self._state_lock:
            self._state = BuildState.WATCHING_IDLE

        try:
            self.build()
        except BuildError as e:
            self.logger.error(f"Build failed: {e}")
        except Exception:
            self.logger.exception("Unexpected error during build")

        handler = self.create_watch_handler()
        observer = Observer()
        for directory in self.watched_dirs():
            observer.schedule(handler, directory, recursive=True)
        observer.start()
        self.logger.info("File watcher started. Press Ctrl+C to stop.")
        self.watch_started.set()

        try:
            while not self._stop_watching.wait(poll_interval):
                pass
        except KeyboardInterrupt:
            self.logger.info("Stopping watch mode...")
        finally:
            handler.shutdown()
            observer.stop()
            observer.join()
            self.watch_started.clear()
            with self._state_lock:
                self._state = BuildState.IDLE

    def stop(self):
        """Ask a running watch() to shut down."""
        self._stop_watching.set()
