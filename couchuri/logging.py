import logging
from timeit import default_timer

LOG_LEVELS = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG
}


logger = logging.getLogger('couchuri')
uri_logger = logging.getLogger('couchuri.uri')
error_logger = logging.getLogger('couchuri.error')


def set_logging(level, handler=None):
    """
    Set level of logging, and choose where to display/save logs
    (file or standard output).
    """
    if not handler:
        handler = logging.StreamHandler()

    loglevel = LOG_LEVELS.get(level, logging.INFO)
    logger.setLevel(loglevel)
    format = r"%(asctime)s [%(process)d] [%(levelname)s] %(message)s"
    datefmt = r"%Y-%m-%d %H:%M:%S"

    handler.setFormatter(logging.Formatter(format, datefmt))
    logger.addHandler(handler)


def install_uri_logger():
    """Install uri logger

    Every built URI is logged to `couchuri.uri` logger. Extra
    metrics added to the log record:

    - database
    - path
    - query_count
    - duration

    Returns a function that uninstalls the uri logger when called.
    """
    from couchuri.builder import UriAccumulator, split_database_path

    def build(self):
        start = default_timer()
        uri = None
        try:
            uri = real_build(self)
        finally:
            database, path = split_database_path(self.base_uri, self.path)
            info = {
                "uri": uri if uri is not None else '<failed>',
                "database": database,
                "path": path,
                "query_count": len(self.params),
                "duration": default_timer() - start,
            }
            uri_logger.debug(
                'built %(database)s/%(path)s in %(duration)s',
                info,
                extra=info,
            )
        return uri

    def uninstall():
        # this is mainly for tests, so they can do proper cleanup
        UriAccumulator.build = real_build

    real_build = UriAccumulator.build
    UriAccumulator.build = build

    return uninstall
