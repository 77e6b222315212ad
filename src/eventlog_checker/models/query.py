"""
Query models for an event log check.

A LogQuery is built once from the command line and never mutated. It holds
the compiled source/message patterns and the parsed event ID ranges so the
filter pipeline does not touch module-level state.
"""

import re
from pathlib import Path
from typing import Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..exceptions import ConfigurationError


UINT32_MAX = 0xFFFFFFFF

_SINGLE_ID = re.compile(r'^([0-9]+)$')
_ID_RANGE = re.compile(r'^([0-9]+)-([0-9]+)$')


class IDRange(BaseModel):
    """Inclusive event ID range, optionally negated."""

    model_config = ConfigDict(frozen=True)

    lo: int = Field(..., ge=0, le=UINT32_MAX, description="Lower bound")
    hi: int = Field(..., ge=0, le=UINT32_MAX, description="Upper bound")
    negated: bool = Field(False, description="Exclude instead of accept")

    @model_validator(mode='after')
    def validate_order(self):
        """Bounds must be ordered."""
        if self.lo > self.hi:
            raise ValueError('IDRange lower bound must not exceed upper bound')
        return self

    def contains(self, event_code: int) -> bool:
        return self.lo <= event_code <= self.hi

    @classmethod
    def parse(cls, token: str) -> "IDRange":
        """
        Parse one token of an event ID specification.

        Accepts ``N``, ``N-M`` (either order) and a leading ``!`` on both.

        Raises:
            ConfigurationError: if the token is malformed or out of range
        """
        text = token.strip()
        negated = text.startswith('!')
        if negated:
            text = text[1:]

        single = _SINGLE_ID.match(text)
        pair = _ID_RANGE.match(text)
        if single:
            lo = hi = int(single.group(1))
        elif pair:
            lo, hi = int(pair.group(1)), int(pair.group(2))
            if lo > hi:
                lo, hi = hi, lo
        else:
            raise ConfigurationError(f"invalid id list: {token!r}")

        if hi > UINT32_MAX:
            raise ConfigurationError(f"invalid id list: {token!r} is out of range")
        return cls(lo=lo, hi=hi, negated=negated)


def parse_id_ranges(value: str) -> Tuple[IDRange, ...]:
    """Parse a comma-separated event ID specification, preserving order."""
    return tuple(IDRange.parse(token) for token in value.split(','))


def split_list(value: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated option; an empty value yields an empty tuple."""
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(',') if item.strip())


class LogQuery(BaseModel):
    """Immutable per-run configuration of an event log check."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    log_names: Tuple[str, ...] = Field(("Application",), description="Event logs to scan")
    event_types: Tuple[str, ...] = Field((), description="Accepted event type names")
    id_ranges: Optional[Tuple[IDRange, ...]] = Field(None, description="Event ID ranges")
    source_pattern: Optional[re.Pattern] = Field(None, description="Source include pattern")
    source_exclude: Optional[re.Pattern] = Field(None, description="Source exclude pattern")
    message_pattern: Optional[re.Pattern] = Field(None, description="Message include pattern")
    message_exclude: Optional[re.Pattern] = Field(None, description="Message exclude pattern")
    warning_over: int = Field(0, description="Warn when matched warnings exceed this")
    critical_over: int = Field(0, description="Go critical when matched criticals exceed this")
    return_content: bool = Field(False, description="Return matched lines")
    state_dir: Path = Field(..., description="Directory holding state files")
    no_state: bool = Field(False, description="Do not read or write state files")
    fail_first: bool = Field(False, description="Count matches on the first run")
    verbose: bool = Field(False, description="Log every record")
    orig_args: Tuple[str, ...] = Field((), description="Original argument list")

    @field_validator('log_names')
    @classmethod
    def validate_log_names(cls, v):
        """Fall back to the Application log when nothing is given."""
        if not v:
            return ("Application",)
        return v

    @property
    def needs_message(self) -> bool:
        """Whether records must have their message resolved."""
        return bool(self.message_pattern or self.message_exclude or self.return_content)

    @classmethod
    def from_options(
        cls,
        state_dir: Path,
        log: Optional[str] = None,
        type: Optional[str] = None,
        source_pattern: Optional[str] = None,
        source_exclude: Optional[str] = None,
        message_pattern: Optional[str] = None,
        message_exclude: Optional[str] = None,
        event_id: Optional[str] = None,
        warning_over: int = 0,
        critical_over: int = 0,
        return_content: bool = False,
        no_state: bool = False,
        fail_first: bool = False,
        verbose: bool = False,
        orig_args: Sequence[str] = (),
    ) -> "LogQuery":
        """
        Build a query from raw option strings.

        Raises:
            ConfigurationError: on a malformed event ID list or regex
        """
        patterns = {}
        for name, value in (
            ('source_pattern', source_pattern),
            ('source_exclude', source_exclude),
            ('message_pattern', message_pattern),
            ('message_exclude', message_exclude),
        ):
            if value:
                try:
                    patterns[name] = re.compile(value)
                except re.error as e:
                    raise ConfigurationError(f"invalid {name.replace('_', '-')}: {e}") from e

        try:
            return cls(
                log_names=split_list(log),
                event_types=split_list(type),
                id_ranges=parse_id_ranges(event_id) if event_id else None,
                warning_over=warning_over,
                critical_over=critical_over,
                return_content=return_content,
                state_dir=Path(state_dir),
                no_state=no_state,
                fail_first=fail_first,
                verbose=verbose,
                orig_args=tuple(orig_args),
                **patterns,
            )
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e
