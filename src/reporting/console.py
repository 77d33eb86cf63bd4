import sys
from typing import Any, Optional, TextIO

from colorama import Fore, Style


class ConsoleReporter:
    """
    Human-readable output for a run.

    One progress marker per checked group (green "." / red "F") unless debug
    logging is on, then every error block and every warning.
    """

    def __init__(self, debug: bool = False, out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> None:
        self.debug = debug
        self.out = out or sys.stdout
        self.err = err or sys.stderr

    # Used as ZoneTester(on_group=...)
    def __call__(self, outcome: Any) -> None:
        if self.debug:
            return
        if outcome.passed:
            self.out.write(f"{Fore.GREEN}{Style.BRIGHT}.{Style.RESET_ALL}")
        else:
            self.out.write(f"{Fore.RED}{Style.BRIGHT}F{Style.RESET_ALL}")
        self.out.flush()

    def finish(self, report: Any) -> None:
        if not self.debug:
            self.out.write("\n")

        for msg in report.error_messages:
            self.err.write(f"{Fore.RED}{Style.BRIGHT}{msg}{Style.RESET_ALL}\n")

        for msg in report.warning_messages:
            self.err.write(f"{Fore.YELLOW}{Style.BRIGHT}WARNING {msg}{Style.RESET_ALL}\n")

        colour = Fore.GREEN if report.failed_groups == 0 else Fore.RED
        self.out.write(
            f"{colour}{report.total_groups} records, {report.failed_groups} failures{Style.RESET_ALL}\n"
        )
        self.out.flush()
