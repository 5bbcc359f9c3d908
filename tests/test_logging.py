import logging
import re
from io import StringIO
from unittest import TestCase

import couchuri.logging as mod
from couchuri import DatabaseURIHelper, URIBase
from couchuri.exceptions import InvalidUriError

BASE = "http://127.0.0.1:5984"


class TestLogging(TestCase):

    @classmethod
    def setUpClass(cls):
        super(TestLogging, cls).setUpClass()
        cls.log = CaptureLogOutput(mod.uri_logger.name)

    @classmethod
    def tearDownClass(cls):
        super(TestLogging, cls).tearDownClass()
        cls.log.close()

    def setUp(self):
        self.log.clear()

    def assertRegex(self, text, regex):
        assert re.search(regex, text), "%r not matched by %r" % (text, regex)

    def helper(self):
        return DatabaseURIHelper(BASE, "couchuri_test")

    def test_no_logging_when_not_installed(self):
        self.assertFalse(self.log)
        self.helper().document_uri("doc")
        self.assertFalse(self.log)

    def test_install_uri_logger(self):
        helper = self.helper()
        self.addCleanup(mod.install_uri_logger())
        helper.document_uri("doc")
        self.assertRegex(str(self.log), r"^built couchuri_test/doc in \d")

    def test_uninstall(self):
        uninstall = mod.install_uri_logger()
        uninstall()
        self.helper().document_uri("doc")
        self.assertFalse(self.log)

    def test_extra_format(self):
        fmt = "%(query_count)s %(database)s %(message)s"
        helper = self.helper()
        with CaptureLogOutput(mod.uri_logger.name, fmt=fmt) as log:
            self.addCleanup(mod.install_uri_logger())
            helper.document_uri("doc", rev="1-a")
            self.assertRegex(str(log),
                r"^1 couchuri_test built couchuri_test/doc in")

    def test_failed_build_logged(self):
        self.addCleanup(mod.install_uri_logger())
        builder = URIBase(BASE).path("db").raw_query("a b")
        self.assertRaises(InvalidUriError, builder.build)
        self.assertRegex(str(self.log), r"^built db//? in")

    def test_error_logger(self):
        fmt = "%(error)s %(message)s"
        with CaptureLogOutput(mod.error_logger.name, fmt=fmt) as log:
            builder = URIBase(BASE).raw_query("a b")
            self.assertRaises(InvalidUriError, builder.build)
            self.assertRegex(str(log), r"^invalid query 'a b' build error")

    def test_set_logging(self):
        output = StringIO()
        handler = logging.StreamHandler(output)
        original_level = mod.logger.level
        self.addCleanup(mod.logger.setLevel, original_level)
        self.addCleanup(mod.logger.removeHandler, handler)

        mod.set_logging("debug", handler)
        mod.logger.debug("hello")
        self.assertRegex(output.getvalue(), r"\[DEBUG\] hello")
        self.assertEqual(mod.logger.level, logging.DEBUG)


class CaptureLogOutput(object):
    """Capture logging output

    Logging output for the given logger is collected immediately upon
    instantiation until closed.
    """

    def __init__(self, logger_name, level=logging.DEBUG, fmt="%(message)s"):
        self.logger = logging.getLogger(logger_name)
        self.new_level = level
        self.original_level = self.logger.level
        self.original_handlers = list(self.logger.handlers)
        for handler in self.original_handlers:
            self.logger.removeHandler(handler)
        self.output = StringIO()
        stream = logging.StreamHandler(self.output)
        stream.setFormatter(logging.Formatter(fmt))
        self.logger.addHandler(stream)
        self.logger.setLevel(level)

    def clear(self):
        self.output.seek(0)
        self.output.truncate()

    def __str__(self):
        return self.output.getvalue()

    def __repr__(self):
        return repr(str(self))

    def __len__(self):
        return self.output.tell()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self):
        self.logger.setLevel(self.original_level)
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
        for handler in self.original_handlers:
            self.logger.addHandler(handler)
