"""Base classes for parser options.

This module defines the foundation classes for the options objects used
throughout the ltxtree parse pipeline.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from ltxtree.constants import DEFAULT_ENCODING


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Copy-on-write helpers for frozen option dataclasses.

    Options are shared by every pass of a conversion and never mutated; a
    caller that needs different settings derives a new object.
    """

    def create_updated(self, **kwargs: Any) -> Self:
        """Return a copy with the given fields replaced.

        ``__post_init__`` runs again, so the new values are validated.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            Validated copy

        Examples
        --------
            >>> LatexOptions().create_updated(localization="ru").localization
            'ru'

        """
        return replace(self, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Return the field values as a plain dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for all parser options.

    Parameters
    ----------
    encoding : str or None, default "utf-8"
        Encoding used to decode source files. ``None`` enables chardet
        detection with a UTF-8 fallback.

    Notes
    -----
    Subclasses should define format-specific parsing options as frozen dataclass fields.

    """

    encoding: str | None = field(
        default=DEFAULT_ENCODING,
        metadata={
            "help": "Encoding of source files (None detects it with chardet)",
            "importance": "core",
        },
    )

    def __post_init__(self) -> None:
        """Validate the encoding name.

        Raises
        ------
        ValueError
            If the encoding is an empty string.

        """
        if self.encoding is not None and not self.encoding.strip():
            raise ValueError("encoding must be a non-empty codec name or None")
