"""Parser configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MAX_DEPTH = 100


@dataclass(frozen=True)
class ParserConfig:
    """Limits applied while parsing.

    Attributes:
        max_depth: Maximum nesting of ( [ { groups before the parse is
            rejected with a ParseError.
    """

    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")

    @classmethod
    def from_env(cls) -> ParserConfig:
        """Create config from environment variables.

        Resolution order:
        1. PIPEQL_MAX_DEPTH env var
        2. Default: 100
        """
        raw = os.environ.get("PIPEQL_MAX_DEPTH")
        if not raw:
            return cls()

        try:
            max_depth = int(raw)
        except ValueError:
            raise ValueError(f"PIPEQL_MAX_DEPTH must be an integer, got {raw!r}") from None

        return cls(max_depth=max_depth)
