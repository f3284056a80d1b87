import inspect
import logging
import sys
import time

import sentry_sdk

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%d-%b %H:%M:%S"


class Logger:
    def __init__(
        self,
        name: str = "mcping",
        debug: bool = False,
        sentry_dsn: str = None,
        ssdk: sentry_sdk = None,
    ):
        """Initializes the logger class

        Args:
            name (str, optional): The name of the underlying logger. Defaults to "mcping".
            debug (bool, optional): Show debugging on the console. Defaults to False.
            sentry_dsn (str, optional): Initialize sentry with this dsn. Defaults to None.
            ssdk (sentry_sdk, optional): An already initialized sentry_sdk. Defaults to None.
        """
        self.DEBUG = debug
        self.logging = logging.getLogger(name)

        if sentry_dsn is not None and ssdk is None:
            sentry_sdk.init(
                dsn=sentry_dsn,
                traces_sample_rate=1.0,
            )
            self.sentry_sdk = sentry_sdk
        elif ssdk is not None:
            self.sentry_sdk = ssdk
        else:
            self.sentry_sdk = None

        self.v_stack = ()

    @staticmethod
    def setup(level: int = logging.INFO, debug: bool = False, log_file: str = None):
        """Configure the root logger, meant for entry points only.

        Args:
            level (int, optional): The logging level. Defaults to logging.INFO.
            debug (bool, optional): Force the DEBUG level. Defaults to False.
            log_file (str, optional): Also append to this file. Defaults to None.
        """
        handlers = [logging.StreamHandler(sys.stderr)]
        if log_file:
            handlers.append(
                logging.FileHandler(log_file, mode="a", encoding="utf-8", delay=True)
            )

        logging.basicConfig(
            level=level if not debug else logging.DEBUG,
            format=LOG_FORMAT,
            datefmt=DATE_FORMAT,
            handlers=handlers,
        )

    def stack_trace(self, stack):
        """Returns a stack trace"""
        out = (
            stack[1].filename.replace("\\", "/").split("/")[-1].split(".")[0]
            + "."
            + f"{stack[1].function}"
        )
        if any((v in out for v in self.v_stack)):
            # get the full stack trace
            out = "->".join(
                [
                    stack[-i].filename.replace("\\", "/").split("/")[-1].split(".")[0]
                    + "."
                    + f"{stack[-i].function}"
                    for i in range(1, len(stack))
                ]
            )

        return out

    def info(self, message):
        message = f"[{self.stack_trace(inspect.stack())}] {message}"
        self.logging.info(message)

    def debug(self, *args):
        msg = " ".join([str(arg) for arg in args])
        msg = f"[{self.stack_trace(inspect.stack())}] {msg}"
        self.logging.debug(msg)
        if self.DEBUG and not self.logging.isEnabledFor(logging.DEBUG):
            print(msg, file=sys.stderr)

    def warning(self, message):
        message = f"[{self.stack_trace(inspect.stack())}] {message}"
        self.logging.warning(message)

    def error(self, *message, **kwargs):
        message = " ".join([str(arg) for arg in message])
        message = f"[{self.stack_trace(inspect.stack())}] {message}"
        self.logging.error(message, **kwargs)

    def exception(self, message, *_, exception: Exception = None):
        message = f"[{self.stack_trace(inspect.stack())}] {message}"
        if exception is None:
            self.logging.exception(message)
        else:
            self.logging.error(
                f"{message} {exception.__class__.__name__}: {exception}",
                exc_info=exception if self.DEBUG else None,
            )
            if self.sentry_sdk is not None:
                self.sentry_sdk.capture_exception(exception)

    async def async_timer(self, func: callable, *args, **kwargs):
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"Function {func.__name__} is not a coroutine")

        start = time.perf_counter()
        try:
            if self.sentry_sdk is not None:
                with self.sentry_sdk.start_transaction(
                    name=f"{func.__name__}", op=f"{func.__name__}"
                ):
                    return await func(*args, **kwargs)
            return await func(*args, **kwargs)
        finally:
            end = time.perf_counter()
            tDelta = self.auto_range_time(end - start)
            self.debug(f"(ASYNC) Function {func.__name__} took {tDelta}")

    @staticmethod
    def auto_range_time(seconds: float) -> str:
        """
        Returns a time string for a given number of seconds

        Args:
            seconds (float): The number of seconds

        Returns:
            str: The time string
        """

        units = {
            "hr": str(int(seconds // 3600)),
            "min": str(int(seconds // 60)),
            "s": str(int(seconds)),
            "ms": str(int(seconds * 1000)),
            "us": str(int(seconds * 1000000)),
            "ns": str(int(seconds * 1000000000)),
        }

        best = ("ns", "0")
        units = sorted(units.items(), key=lambda x: len(x[1]))
        for unit in units:
            if unit[1] != "0":
                best = unit
                break

        return f"{best[1]} {best[0]}"
