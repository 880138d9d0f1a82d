"""
Polling watcher tests
"""

import os

from tagpress.lib.watcher import PollingWatcher


class TestPoll:
    """Synchronous polls against a real directory"""

    def test_no_changes(self, site):
        watcher = PollingWatcher(site)
        assert watcher.poll() == ([], [])

    def test_created_file(self, site):
        watcher = PollingWatcher(site)
        (site / "new.html").write_text("new", encoding="utf-8")

        created, modified = watcher.poll()

        assert created == [str(site / "new.html")]
        assert modified == []

    def test_new_directory_is_watched(self, site):
        watcher = PollingWatcher(site)
        (site / "blog").mkdir()
        watcher.poll()
        (site / "blog" / "post.html").write_text("post", encoding="utf-8")

        created, _ = watcher.poll()

        assert created == [str(site / "blog" / "post.html")]

    def test_modified_file(self, site):
        watcher = PollingWatcher(site)
        target = site / "hello.html"
        stat = target.stat()
        os.utime(target, (stat.st_atime, stat.st_mtime + 10))

        created, modified = watcher.poll()

        assert created == []
        assert modified == [str(target)]

    def test_start_stop(self, site):
        watcher = PollingWatcher(site, interval=0.01)
        watcher.start()
        watcher.stop()
        assert watcher._thread is None
