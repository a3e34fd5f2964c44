from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any

LOGGER = logging.getLogger("facetplot")


@dataclass
class Diagnostics:
    """Verbosity-gated debug output and collected warnings for one plot.

    verbosity 0 is silent apart from warnings, 1 to 3 enable v(), vv() and
    vvv() respectively.
    """

    verbosity: int = 0
    logger: logging.Logger = LOGGER
    warnings: list[str] = field(default_factory=list)

    def v(self, msg: str, *args: Any) -> None:
        if self.verbosity >= 1:
            self.logger.debug(msg, *args)

    def vv(self, msg: str, *args: Any) -> None:
        if self.verbosity >= 2:
            self.logger.debug(msg, *args)

    def vvv(self, msg: str, *args: Any) -> None:
        if self.verbosity >= 3:
            self.logger.debug(msg, *args)

    def warn(self, msg: str, *args: Any) -> None:
        self.warnings.append(msg % args if args else msg)
        self.logger.warning(msg, *args)
